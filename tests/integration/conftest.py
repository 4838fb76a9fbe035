"""
@file: conftest.py
@description: Фикстуры для интеграционных тестов (асинхронная сессия временной SQLite БД)
@dependencies: pytest, SQLModel, aiosqlite
"""

import pytest
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from stock_api.core.database import build_async_engine
import stock_api.models  # noqa: F401


@pytest.fixture()
async def async_session(tmp_path):
    """
    Асинхронная сессия на отдельной базе для каждого теста.
    """
    engine = build_async_engine(f"sqlite:///{tmp_path}/stocks.db")
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    session_factory = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session

    await engine.dispose()
