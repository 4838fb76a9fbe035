#!/usr/bin/env python3
"""
@file: scripts/init_db.py
@description: Создание таблицы stocks в базе данных из DATABASE_URL
@dependencies: sqlmodel, dotenv
"""

import sys
from pathlib import Path

from dotenv import load_dotenv

# Загрузка переменных окружения из .env до чтения настроек
load_dotenv()

PROJECT_ROOT = Path(__file__).parent.parent
sys.path.append(str(PROJECT_ROOT))

from stock_api.core.logging import setup_logging, get_logger  # noqa: E402
from stock_api.core.database import create_tables, sync_engine  # noqa: E402

setup_logging()
logger = get_logger(__name__)


if __name__ == "__main__":
    logger.info(f"Creating tables in database: {sync_engine.url.render_as_string(hide_password=True)}")
    create_tables()
    print("Таблицы успешно созданы (или уже существуют)")
