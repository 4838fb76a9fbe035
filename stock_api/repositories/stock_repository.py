"""
@file: stock_api/repositories/stock_repository.py
@description: Интерфейс хранилища акций и его реализации (SQLModel и в памяти)
@dependencies: sqlmodel, sqlalchemy
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from sqlalchemy import delete
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from stock_api.core.logging import get_logger
from stock_api.exceptions import DatabaseError
from stock_api.models.stock import INTEGER_MAX, INTEGER_MIN, Stock

logger = get_logger(__name__)


class StockRepository(ABC):
    """Абстрактное хранилище акций"""

    @abstractmethod
    async def list(self) -> List[Stock]:
        """Все записи в порядке возрастания id"""

    @abstractmethod
    async def insert(self, fields: Dict[str, Any]) -> Stock:
        """Создать запись; id назначается хранилищем"""

    @abstractmethod
    async def find_by_id(self, stock_id: int) -> Optional[Stock]:
        """Запись по id или None"""

    @abstractmethod
    async def save(self, stock: Stock) -> Stock:
        stock_id = stock.id
        """Сохранить измененную запись"""

    @abstractmethod
    async def delete_by_id(self, stock_id: int) -> bool:
        """Удалить запись; False, если удалять было нечего"""

    async def exists(self, stock_id: int) -> bool:
        return await self.find_by_id(stock_id) is not None


class SQLModelStockRepository(StockRepository):
    """Хранилище акций в реляционной базе данных через SQLModel"""

    def __init__(self, db_session: AsyncSession):
        self.db_session = db_session

    async def list(self) -> List[Stock]:
        result = await self.db_session.exec(select(Stock).order_by(Stock.id))
        return list(result.all())

    async def insert(self, fields: Dict[str, Any]) -> Stock:
        return await self.save(Stock(**fields))

    async def find_by_id(self, stock_id: int) -> Optional[Stock]:
        if not INTEGER_MIN <= stock_id <= INTEGER_MAX:
            return None
        return await self.db_session.get(Stock, stock_id)

    async def save(self, stock: Stock) -> Stock:
        try:
            self.db_session.add(stock)
            await self.db_session.commit()
            await self.db_session.refresh(stock)
            return stock
        except SQLAlchemyError as e:
            await self.db_session.rollback()
            logger.error(f"Failed to save stock {stock.id}: {str(e)}")
            raise DatabaseError(f"Failed to save stock: {str(e)}") from e

    async def delete_by_id(self, stock_id: int) -> bool:
        if not INTEGER_MIN <= stock_id <= INTEGER_MAX:
            return False
        try:
            result = await self.db_session.execute(delete(Stock).where(Stock.id == stock_id))
            await self.db_session.commit()
            return result.rowcount > 0
        except SQLAlchemyError as e:
            await self.db_session.rollback()
            logger.error(f"Failed to delete stock {stock_id}: {str(e)}")
            raise DatabaseError(f"Failed to delete stock: {str(e)}") from e


class InMemoryStockRepository(StockRepository):
    """Хранилище акций в памяти процесса (для тестов и локальных прогонов)"""

    def __init__(self):
        self._rows: Dict[int, Stock] = {}
        self._next_id = 1

    async def list(self) -> List[Stock]:
        return [self._rows[key] for key in sorted(self._rows)]

    async def insert(self, fields: Dict[str, Any]) -> Stock:
        stock = Stock(id=self._next_id, **fields)
        self._rows[stock.id] = stock
        self._next_id += 1
        return stock

    async def find_by_id(self, stock_id: int) -> Optional[Stock]:
        return self._rows.get(stock_id)

    async def save(self, stock: Stock) -> Stock:
        if stock.id is None:
            return await self.insert(stock.model_dump(exclude={"id"}))
        self._rows[stock.id] = stock
        return stock

    async def delete_by_id(self, stock_id: int) -> bool:
        return self._rows.pop(stock_id, None) is not None
