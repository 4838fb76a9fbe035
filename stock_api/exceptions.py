"""
@file: stock_api/exceptions.py
@description: Кастомные исключения для приложения и их обработчики для FastAPI
@dependencies: fastapi
"""

from typing import Dict

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse


class BaseAppException(Exception):
    """Базовое исключение приложения"""
    pass


class NotFoundError(BaseAppException):
    """Ошибка - ресурс не найден; message отдается клиенту как ошибка поля field"""

    def __init__(self, message: str = "Resource not found", field: str = "id"):
        self.field = field
        super().__init__(message)


class ValidationError(BaseAppException):
    """
    Ошибка валидации данных.

    Хранит сообщения об ошибках по полям: {"field": "message"}.
    """

    def __init__(self, errors: Dict[str, str]):
        self.errors = dict(errors)
        super().__init__(f"Validation failed for fields: {', '.join(self.errors)}")


class DatabaseError(BaseAppException):
    """Ошибка базы данных"""
    pass


# Обработчики исключений для FastAPI

async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    """Ошибки валидации возвращаются как 400 с картой ошибок по полям"""
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"errors": exc.errors},
    )


async def not_found_error_handler(request: Request, exc: NotFoundError) -> JSONResponse:
    """Отсутствующая запись возвращается в той же форме, что и ошибка валидации"""
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"errors": {exc.field: str(exc)}},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Подключить обработчики исключений приложения"""
    app.add_exception_handler(ValidationError, validation_error_handler)
    app.add_exception_handler(NotFoundError, not_found_error_handler)
