"""
@file: stock_api/models/stock.py
@description: Модель акции (stock) и схема ответа API
@dependencies: sqlmodel, pydantic
"""

from typing import Optional

from sqlmodel import SQLModel, Field

# Диапазон столбца INTEGER в PostgreSQL
INTEGER_MIN = -2 ** 31
INTEGER_MAX = 2 ** 31 - 1


class Stock(SQLModel, table=True):
    """Модель акции в базе данных"""

    __tablename__ = "stocks"

    id: Optional[int] = Field(
        default=None,
        primary_key=True,
        description="Идентификатор записи, назначается базой данных"
    )

    name: str = Field(
        description="Название акции"
    )

    value: float = Field(
        description="Стоимость, не меньше -100"
    )

    volume: int = Field(
        description="Объем, в диапазоне столбца INTEGER"
    )


class StockRead(SQLModel):
    """Схема для чтения акции"""

    id: int
    name: str
    value: float
    volume: int


class StockDeleted(SQLModel):
    """Ответ на успешное удаление"""

    message: str
