"""
@file: test_stock_service.py
@description: Unit-тесты для StockService (stock_api/services/stock_service.py) на хранилище в памяти
@dependencies: pytest, pytest-asyncio, unittest.mock
"""

import pytest
from unittest.mock import AsyncMock

from stock_api.exceptions import NotFoundError, ValidationError
from stock_api.repositories.stock_repository import InMemoryStockRepository
from stock_api.services.stock_service import StockService, only_stock_fields


@pytest.fixture
def repository():
    return InMemoryStockRepository()


@pytest.fixture
def service(repository):
    return StockService(repository)


@pytest.fixture
async def existing_stock(service):
    return await service.create_stock({"name": "ACME", "value": 10, "volume": 5})


def test_only_stock_fields_drops_unknown_keys():
    assert only_stock_fields({"id": 1, "name": " A ", "value": 2, "other": 3}) == {"name": "A", "value": 2}
    assert only_stock_fields(None) == {}


async def test_create_assigns_id_and_coerces_types(service):
    stock = await service.create_stock({"name": "ACME", "value": "10", "volume": "5"})

    assert stock.id == 1
    assert stock.value == 10.0
    assert isinstance(stock.value, float)
    assert stock.volume == 5


async def test_create_assigns_fresh_ids(service):
    first = await service.create_stock({"name": "A", "value": 1, "volume": 1})
    second = await service.create_stock({"name": "B", "value": 1, "volume": 1})

    assert first.id != second.id
    assert [s.id for s in await service.list_stocks()] == [first.id, second.id]


async def test_create_rejects_missing_fields(service, repository):
    with pytest.raises(ValidationError) as exc_info:
        await service.create_stock({"name": "ACME"})

    assert set(exc_info.value.errors) == {"value", "volume"}
    assert await repository.list() == []


async def test_create_rejects_value_below_min(service):
    with pytest.raises(ValidationError) as exc_info:
        await service.create_stock({"name": "ACME", "value": -100.01, "volume": 1})

    assert exc_info.value.errors == {"value": "O valor mínimo de valor não pode ser menor que -100."}


async def test_create_rejects_volume_outside_integer_column(service, repository):
    with pytest.raises(ValidationError) as exc_info:
        await service.create_stock({"name": "ACME", "value": 1, "volume": 10 ** 20})

    assert exc_info.value.errors == {"volume": "O valor máximo de volume não pode ser maior que 2147483647."}
    assert await repository.list() == []


async def test_update_overwrites_only_supplied_fields(service, existing_stock):
    stock = await service.update_stock(str(existing_stock.id), {"volume": 42})

    assert stock.name == "ACME"
    assert stock.value == 10
    assert stock.volume == 42


async def test_update_rejects_unknown_id(service, existing_stock):
    with pytest.raises(ValidationError) as exc_info:
        await service.update_stock("99999", {"name": "X"})

    assert exc_info.value.errors == {"id": "Este conteúdo não existe."}


async def test_update_rejects_non_integer_id(service):
    with pytest.raises(ValidationError) as exc_info:
        await service.update_stock("invalid", {})

    assert exc_info.value.errors == {"id": "O valor passado para id não é um inteiro."}


async def test_update_raises_not_found_when_record_vanishes(service, repository, existing_stock):
    repository.find_by_id = AsyncMock(return_value=None)
    repository.exists = AsyncMock(return_value=True)

    with pytest.raises(NotFoundError) as exc_info:
        await service.update_stock(existing_stock.id, {"name": "X"})

    assert str(exc_info.value) == "Este conteúdo não existe."
    assert exc_info.value.field == "id"


async def test_destroy_removes_record(service, existing_stock):
    await service.destroy_stock(str(existing_stock.id))

    assert await service.list_stocks() == []


async def test_destroy_twice_raises_not_found(service, existing_stock):
    await service.destroy_stock(existing_stock.id)

    with pytest.raises(NotFoundError) as exc_info:
        await service.destroy_stock(existing_stock.id)

    assert exc_info.value.field == "id"
    assert str(exc_info.value) == "Este conteúdo não existe."


async def test_destroy_non_integer_id_leaves_store_unchanged(service, existing_stock):
    with pytest.raises(NotFoundError):
        await service.destroy_stock("abc")

    assert len(await service.list_stocks()) == 1
