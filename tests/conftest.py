"""
@file: conftest.py
@description: Общая настройка окружения тестов (временная SQLite база, логи во временной папке)
@dependencies: pytest
"""

import os
import tempfile

# Переменные окружения задаются до импорта настроек приложения
TEST_DIR = tempfile.mkdtemp(prefix="stock_api_tests_")
os.environ["DATABASE_URL"] = f"sqlite:///{TEST_DIR}/stocks.db"
os.environ["LOG_FILE_PATH"] = os.path.join(TEST_DIR, "logs", "app.log")
os.environ["LOG_LEVEL"] = "DEBUG"
os.environ["DEBUG"] = "false"
