"""
@file: test_stock_repository.py
@description: Интеграционные тесты хранилища акций SQLModelStockRepository (реальная БД)
@dependencies: pytest, SQLModel, aiosqlite
"""

from unittest.mock import AsyncMock

import pytest
from sqlalchemy.exc import OperationalError
from sqlmodel.ext.asyncio.session import AsyncSession

from stock_api.exceptions import DatabaseError
from stock_api.repositories.stock_repository import SQLModelStockRepository
from stock_api.services.stock_service import StockService


async def test_stock_crud_integration(async_session: AsyncSession):
    repository = SQLModelStockRepository(async_session)

    # Создание
    first = await repository.insert({"name": "ACME", "value": 10.5, "volume": 100})
    second = await repository.insert({"name": "GLOBEX", "value": -100.0, "volume": 3})
    assert first.id is not None
    assert second.id != first.id

    # Список в порядке id
    stocks = await repository.list()
    assert [s.id for s in stocks] == [first.id, second.id]

    # Поиск и сохранение
    found = await repository.find_by_id(first.id)
    found.volume = 150
    await repository.save(found)
    assert (await repository.find_by_id(first.id)).volume == 150
    assert await repository.exists(first.id) is True

    # Удаление
    assert await repository.delete_by_id(first.id) is True
    assert await repository.delete_by_id(first.id) is False
    assert await repository.find_by_id(first.id) is None
    assert [s.id for s in await repository.list()] == [second.id]


async def test_out_of_range_id_is_absent(async_session: AsyncSession):
    repository = SQLModelStockRepository(async_session)

    assert await repository.find_by_id(10 ** 20) is None
    assert await repository.delete_by_id(10 ** 20) is False


async def test_service_partial_update_persists(async_session: AsyncSession):
    service = StockService(SQLModelStockRepository(async_session))
    stock = await service.create_stock({"name": "ACME", "value": 1, "volume": 1})

    await service.update_stock(str(stock.id), {"value": "-99.5"})

    stored = await SQLModelStockRepository(async_session).find_by_id(stock.id)
    assert stored.name == "ACME"
    assert stored.value == -99.5
    assert stored.volume == 1


async def test_save_wraps_commit_failure_in_database_error(async_session: AsyncSession, monkeypatch):
    repository = SQLModelStockRepository(async_session)
    stock = await repository.insert({"name": "ACME", "value": 10.0, "volume": 1})
    stock_id = stock.id

    monkeypatch.setattr(
        async_session,
        "commit",
        AsyncMock(side_effect=OperationalError("UPDATE stocks", {}, Exception("disk I/O error"))),
    )
    stock.volume = 2

    with pytest.raises(DatabaseError):
        await repository.save(stock)

    monkeypatch.undo()
    assert (await repository.find_by_id(stock_id)).volume == 1
