"""
@file: stock_api/api/v1/api.py
@description: Основной API роутер
@dependencies: fastapi
"""

from fastapi import APIRouter

from stock_api.api.v1 import stocks

api_router = APIRouter()

api_router.include_router(
    stocks.router,
    prefix="/stocks",
    tags=["stocks"],
)
