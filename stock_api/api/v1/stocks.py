"""
@file: stock_api/api/v1/stocks.py
@description: API эндпоинты для работы с акциями
@dependencies: fastapi, pydantic
"""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, status

from stock_api.api.dependencies import StockServiceDep
from stock_api.core.settings import settings
from stock_api.models.stock import StockDeleted, StockRead
from stock_api.services.stock_service import StockService

router = APIRouter()

ERROR_RESPONSES = {
    status.HTTP_400_BAD_REQUEST: {
        "description": "Ошибки валидации по полям",
        "content": {
            "application/json": {
                "example": {"errors": {"value": "O valor passado para valor não é um número."}}
            }
        },
    },
}


@router.get("", response_model=List[StockRead], summary="Получить все акции")
async def list_stocks(service: StockService = StockServiceDep) -> List[StockRead]:
    """Все акции в порядке возрастания id, без пагинации."""
    stocks = await service.list_stocks()
    return [StockRead.model_validate(stock, from_attributes=True) for stock in stocks]


@router.post(
    "",
    response_model=StockRead,
    status_code=status.HTTP_201_CREATED,
    responses=ERROR_RESPONSES,
    summary="Создать акцию"
)
async def create_stock(
    payload: Optional[Dict[str, Any]] = Body(None, description="Поля name, value, volume"),
    service: StockService = StockServiceDep
) -> StockRead:
    """
    Создать акцию.

    - **name**: обязательное непустое название
    - **value**: обязательное число, не меньше -100
    - **volume**: обязательное целое число
    """
    stock = await service.create_stock(payload)
    return StockRead.model_validate(stock, from_attributes=True)


@router.patch(
    "/{stock_id}",
    response_model=StockRead,
    responses=ERROR_RESPONSES,
    summary="Частично обновить акцию"
)
async def update_stock(
    stock_id: str,
    payload: Optional[Dict[str, Any]] = Body(None, description="Любое подмножество name, value, volume"),
    service: StockService = StockServiceDep
) -> StockRead:
    """
    Обновить только переданные поля акции.

    Несуществующий или нецелый **stock_id** возвращается как ошибка поля `id`
    с кодом 400.
    """
    stock = await service.update_stock(stock_id, payload)
    return StockRead.model_validate(stock, from_attributes=True)


@router.delete(
    "/{stock_id}",
    response_model=StockDeleted,
    responses=ERROR_RESPONSES,
    summary="Удалить акцию"
)
async def destroy_stock(stock_id: str, service: StockService = StockServiceDep) -> StockDeleted:
    """Удалить акцию без возможности восстановления."""
    await service.destroy_stock(stock_id)
    return StockDeleted(message=settings.validation.deleted_message)
