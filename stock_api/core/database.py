"""
@file: stock_api/core/database.py
@description: Настройка подключения к базе данных через SQLModel
@dependencies: sqlmodel, sqlalchemy, asyncpg, psycopg2
"""

import asyncio
from typing import AsyncGenerator
from sqlmodel import SQLModel, create_engine
from sqlmodel.ext.asyncio.session import AsyncSession
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy import text

from stock_api.exceptions import BaseAppException
from .settings import settings
from .logging import get_logger

logger = get_logger(__name__)

# Асинхронные драйверы для синхронных схем URL
ASYNC_DRIVERS = {
    "postgresql://": "postgresql+asyncpg://",
    "sqlite://": "sqlite+aiosqlite://",
}


def to_async_url(url: str) -> str:
    """Заменяет синхронный драйвер в URL на асинхронный"""
    for sync_prefix, async_prefix in ASYNC_DRIVERS.items():
        if url.startswith(sync_prefix):
            return async_prefix + url[len(sync_prefix):]
    return url


def build_async_engine(url: str) -> AsyncEngine:
    """Создает асинхронный движок для указанного URL базы данных"""
    return create_async_engine(
        to_async_url(url),
        echo=settings.api.debug,
        pool_pre_ping=True,
        pool_recycle=300,
    )


# Синхронный движок для создания таблиц и скриптов
sync_engine = create_engine(
    settings.database.url,
    echo=settings.api.debug,
    pool_pre_ping=True,
    pool_recycle=300,
)

# Асинхронный движок для FastAPI
async_engine = build_async_engine(settings.database.url)

# Фабрика сессий
async_session_factory = sessionmaker(
    async_engine, class_=AsyncSession, expire_on_commit=False
)


def create_tables() -> None:
    """
    Создание всех таблиц в базе данных.
    Существующие таблицы не изменяются.
    """
    # Регистрируем модели в метаданных
    import stock_api.models  # noqa: F401

    logger.info("Creating database tables...")
    SQLModel.metadata.create_all(sync_engine)
    logger.info("Database tables created successfully")


async def get_async_session() -> AsyncGenerator[AsyncSession, None]:
    """Получить асинхронную сессию базы данных для FastAPI"""
    async with async_session_factory() as session:
        try:
            yield session
        except BaseAppException:
            await session.rollback()
            raise
        except Exception as e:
            logger.error(f"Database session error: {e}")
            await session.rollback()
            raise
        finally:
            await session.close()


async def check_database_connection() -> bool:
    """Проверка подключения к базе данных"""
    try:
        async with async_session_factory() as session:
            await session.execute(text("SELECT 1"))
            await session.commit()
            logger.info("Database connection successful")
            return True
    except Exception as e:
        logger.error(f"Database connection failed: {e}")
        return False


class DatabaseManager:
    """Менеджер базы данных для управления подключениями"""

    def __init__(self, max_retries: int = 10, retry_delay: float = 2):
        self.sync_engine = sync_engine
        self.async_engine = async_engine
        self.max_retries = max_retries
        self.retry_delay = retry_delay
        self.logger = get_logger(self.__class__.__name__)

    async def startup(self) -> None:
        """Инициализация при запуске приложения"""
        self.logger.info("Initializing database connection...")

        retry_delay = self.retry_delay

        for attempt in range(self.max_retries):
            self.logger.info(f"Database connection attempt {attempt + 1}/{self.max_retries}")
            is_connected = await check_database_connection()

            if is_connected:
                if settings.database.create_tables:
                    create_tables()
                self.logger.info("Database manager initialized successfully")
                return

            if attempt < self.max_retries - 1:
                self.logger.warning(f"Database connection failed, retrying in {retry_delay} seconds...")
                await asyncio.sleep(retry_delay)
                retry_delay = min(retry_delay * 1.5, 10)  # Exponential backoff

        self.logger.error("Failed to connect to database after all retries")
        raise ConnectionError("Failed to connect to database after all retries")

    async def shutdown(self) -> None:
        """Закрытие соединений при остановке приложения"""
        self.logger.info("Closing database connections...")
        await self.async_engine.dispose()
        self.logger.info("Database connections closed")


# Глобальный экземпляр менеджера базы данных
db_manager = DatabaseManager()
