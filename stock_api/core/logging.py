"""
@file: stock_api/core/logging.py
@description: Настройка системы логирования с удобочитаемым форматом и ротацией
@dependencies: logging, json
"""

import json
import logging
import logging.handlers
import sys
from datetime import datetime
from pathlib import Path
from typing import Any, Dict

from .settings import settings


def disable_sqlalchemy_logging():
    """Принудительно отключает все SQLAlchemy логи"""
    sqlalchemy_loggers = [
        "sqlalchemy",
        "sqlalchemy.engine",
        "sqlalchemy.engine.Engine",
        "sqlalchemy.pool",
        "sqlalchemy.dialects",
        "sqlalchemy.orm",
    ]

    for logger_name in sqlalchemy_loggers:
        logger = logging.getLogger(logger_name)
        logger.setLevel(logging.CRITICAL + 1)
        logger.propagate = False
        logger.handlers.clear()


class SQLAlchemyFilter(logging.Filter):
    """Фильтр для блокирования всех SQLAlchemy логов"""

    def filter(self, record):
        return not record.name.startswith('sqlalchemy')


class HumanReadableFormatter(logging.Formatter):
    """Форматировщик для удобочитаемых логов"""

    def format(self, record: logging.LogRecord) -> str:
        """Форматирует запись в удобочитаемом формате"""
        timestamp = datetime.fromtimestamp(record.created).strftime('%Y-%m-%d %H:%M:%S')
        level_name = record.levelname.ljust(8)
        message = record.getMessage()

        extra_info = []

        if getattr(record, "request_id", None):
            extra_info.append(f"req={record.request_id}")

        if getattr(record, "stock_id", None) is not None:
            extra_info.append(f"stock={record.stock_id}")

        if hasattr(record, "extra_data"):
            extra_info.append(f"data={record.extra_data}")

        if record.name != "root" and record.name != "__main__":
            extra_info.append(f"module={record.name}")

        result = f"{timestamp} {level_name} {message}"

        if extra_info:
            result += f" | {' | '.join(extra_info)}"

        if record.exc_info:
            result += f"\n{self.formatException(record.exc_info)}"

        return result


class JSONFormatter(logging.Formatter):
    """Форматировщик для JSON логов"""

    def format(self, record: logging.LogRecord) -> str:
        """Форматирует запись в JSON"""
        log_entry: Dict[str, Any] = {
            "timestamp": datetime.utcnow().isoformat() + "Z",
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        if hasattr(record, "extra_data"):
            log_entry["extra"] = record.extra_data

        if getattr(record, "request_id", None):
            log_entry["request_id"] = record.request_id
        if getattr(record, "stock_id", None) is not None:
            log_entry["stock_id"] = record.stock_id

        return json.dumps(log_entry, ensure_ascii=False, default=str)


def setup_logging() -> None:
    """Настройка системы логирования"""

    disable_sqlalchemy_logging()

    # Создаем директорию для логов
    log_path = Path(settings.logging.file_path)
    log_path.parent.mkdir(parents=True, exist_ok=True)

    logger = logging.getLogger()
    logger.setLevel(getattr(logging, settings.logging.level.upper(), logging.INFO))
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    sqlalchemy_filter = SQLAlchemyFilter()

    if settings.logging.format.lower() == "json":
        formatter = JSONFormatter()
    else:
        formatter = HumanReadableFormatter()

    # Handler для файла с ротацией
    file_handler = logging.handlers.RotatingFileHandler(
        filename=settings.logging.file_path,
        maxBytes=settings.logging.max_bytes,
        backupCount=settings.logging.backup_count,
        encoding="utf-8"
    )
    file_handler.setFormatter(formatter)
    file_handler.addFilter(sqlalchemy_filter)
    logger.addHandler(file_handler)

    # Handler для консоли (только в режиме разработки)
    if settings.api.debug:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(formatter)
        console_handler.addFilter(sqlalchemy_filter)
        logger.addHandler(console_handler)

    # FastAPI и Uvicorn
    logging.getLogger("uvicorn").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("fastapi").setLevel(logging.WARNING)

    # HTTP клиенты
    logging.getLogger("httpx").setLevel(logging.WARNING)

    # Драйверы БД
    logging.getLogger("asyncpg").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)
    logging.getLogger("asyncio").setLevel(logging.WARNING)

    logger.info("Logging system initialized", extra={
        "extra_data": {
            "log_level": settings.logging.level,
            "log_file": settings.logging.file_path,
            "format": settings.logging.format
        }
    })


def get_logger(name: str) -> logging.Logger:
    """Получить логгер с настроенным именем"""
    return logging.getLogger(name)
