"""
@file: stock_api/main.py
@description: Главное FastAPI приложение
@dependencies: fastapi, uvicorn
"""

import time
from contextlib import asynccontextmanager
from datetime import datetime
from uuid import uuid4

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from stock_api.core.settings import settings
from stock_api.core.logging import setup_logging, get_logger
from stock_api.core.database import db_manager
from stock_api.exceptions import register_exception_handlers
from stock_api.api.v1.api import api_router


logger = get_logger(__name__)

SERVICE_NAME = "Stock API"
SERVICE_VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Управление жизненным циклом приложения"""
    setup_logging()
    logger.info("Starting Stock API service...")

    config_info = settings.log_configuration()
    logger.info("Environment variables status:", extra={
        "extra_data": config_info["environment_variables"]
    })
    logger.info("Application configuration loaded:", extra={
        "extra_data": {
            "database": config_info["database"],
            "api": config_info["api"],
            "logging": config_info["logging"]
        }
    })

    await db_manager.startup()

    logger.info("Service started successfully")

    yield

    logger.info("Shutting down service...")
    await db_manager.shutdown()
    logger.info("Service stopped")


app = FastAPI(
    title=SERVICE_NAME,
    description="""
    ## REST-ресурс акций (stocks)

    * **GET /stocks** - список всех акций
    * **POST /stocks** - создание акции
    * **PATCH /stocks/{id}** - частичное обновление
    * **DELETE /stocks/{id}** - удаление

    Ошибки валидации возвращаются с кодом 400 в виде `{"errors": {"поле": "сообщение"}}`.
    """,
    version=SERVICE_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url=f"{settings.api.prefix}/openapi.json",
    lifespan=lifespan,
    openapi_tags=[
        {
            "name": "general",
            "description": "Общие операции: health check, конфигурация",
        },
        {
            "name": "stocks",
            "description": "Операции с акциями: список, создание, обновление, удаление",
        },
    ]
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Логирование HTTP запросов с идентификатором запроса"""
    request_id = request.headers.get("X-Request-ID") or uuid4().hex
    started = time.perf_counter()
    logger.info(
        f"Request started: {request.method} {request.url.path}",
        extra={"request_id": request_id}
    )
    try:
        response = await call_next(request)
    except Exception as e:
        logger.error(
            f"Request failed: {request.method} {request.url.path}",
            extra={"request_id": request_id, "extra_data": {"error": str(e)}},
            exc_info=True
        )
        raise
    elapsed_ms = round((time.perf_counter() - started) * 1000, 2)
    logger.info(
        f"Request completed: {request.method} {request.url.path} -> {response.status_code}",
        extra={"request_id": request_id, "extra_data": {"elapsed_ms": elapsed_ms}}
    )
    response.headers["X-Request-ID"] = request_id
    return response


@app.get("/", tags=["general"], summary="Главная страница API")
async def root():
    """Базовая информация о сервисе."""
    return {
        "service": SERVICE_NAME,
        "version": SERVICE_VERSION,
        "status": "running",
        "docs_url": "/docs",
        "redoc_url": "/redoc",
        "openapi_url": f"{settings.api.prefix}/openapi.json"
    }


@app.get("/health", tags=["general"], summary="Проверка состояния сервиса")
async def health_check():
    """
    Health check endpoint для мониторинга.

    Проверяет доступность базы данных.
    """
    from stock_api.core.database import check_database_connection
    db_status = await check_database_connection()

    return {
        "status": "healthy" if db_status else "unhealthy",
        "database": "connected" if db_status else "disconnected",
        "service": SERVICE_NAME,
        "version": SERVICE_VERSION,
        "timestamp": datetime.now().isoformat()
    }


@app.get("/config", tags=["general"], summary="Конфигурация приложения")
async def get_configuration():
    """
    Просмотр текущей конфигурации приложения.

    **Внимание:** Чувствительные данные маскируются.
    """
    return {
        "service": SERVICE_NAME,
        "version": SERVICE_VERSION,
        "configuration": settings.log_configuration(),
        "timestamp": datetime.now().isoformat()
    }


app.include_router(api_router, prefix=settings.api.prefix)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "stock_api.main:app",
        host=settings.api.host,
        port=settings.api.port,
        reload=settings.api.debug,
        log_level=settings.logging.level.lower()
    )
