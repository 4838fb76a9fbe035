"""
@file: stock_api/api/dependencies.py
@description: Зависимости для FastAPI
@dependencies: fastapi, sqlmodel
"""

from typing import AsyncGenerator
from fastapi import Depends
from sqlmodel.ext.asyncio.session import AsyncSession

from stock_api.core.database import get_async_session
from stock_api.repositories.stock_repository import SQLModelStockRepository
from stock_api.services.stock_service import StockService


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Получение асинхронной сессии базы данных для использования в эндпоинтах.

    Yields:
        AsyncSession: Асинхронная сессия базы данных
    """
    async for session in get_async_session():
        yield session


def get_stock_service(session: AsyncSession = Depends(get_db_session)) -> StockService:
    """Сервис акций поверх хранилища в базе данных текущего запроса"""
    return StockService(SQLModelStockRepository(session))


# Типы зависимостей для использования в эндпоинтах
StockServiceDep = Depends(get_stock_service)
