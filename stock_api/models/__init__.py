"""
@file: stock_api/models/__init__.py
@description: Модели данных для SQLModel ORM
@dependencies: sqlmodel, pydantic
"""

from .stock import Stock, StockRead, StockDeleted

__all__ = [
    "Stock",
    "StockRead",
    "StockDeleted",
]
