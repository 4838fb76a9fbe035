"""
@file: conftest.py
@description: Фикстуры для тестов API (клиент FastAPI с чистой таблицей stocks)
@dependencies: pytest, fastapi, httpx, sqlmodel
"""

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session, SQLModel

from stock_api.main import app
from stock_api.core.database import sync_engine
from stock_api.models.stock import Stock


@pytest.fixture()
def client():
    """
    Клиент с запущенным lifespan приложения.
    Таблицы пересоздаются для каждого теста.
    """
    SQLModel.metadata.drop_all(sync_engine)
    SQLModel.metadata.create_all(sync_engine)
    with TestClient(app) as test_client:
        yield test_client
    SQLModel.metadata.drop_all(sync_engine)


@pytest.fixture()
def make_stocks(client):
    """Фабрика записей напрямую в базе, в обход API"""
    def factory(count: int = 1, **overrides):
        created = []
        with Session(sync_engine, expire_on_commit=False) as session:
            for index in range(count):
                fields = {
                    "name": f"Stock {index + 1}",
                    "value": 10.5 + index,
                    "volume": 100 + index,
                }
                fields.update(overrides)
                stock = Stock(**fields)
                session.add(stock)
                session.commit()
                session.refresh(stock)
                created.append(stock)
        return created
    return factory
