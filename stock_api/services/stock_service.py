"""
@file: stock_api/services/stock_service.py
@description: Сервис операций над акциями: список, создание, частичное обновление, удаление
@dependencies: stock_api.core.validation, stock_api.repositories
"""

from typing import Any, Dict, List, Mapping, Optional

from stock_api.core.logging import get_logger
from stock_api.core.validation import MessageCatalog, Rule, RuleKind, RuleSet, Validator, to_integer
from stock_api.exceptions import NotFoundError, ValidationError
from stock_api.models.stock import INTEGER_MAX, INTEGER_MIN, Stock
from stock_api.repositories.stock_repository import StockRepository

logger = get_logger(__name__)

STOCK_FIELDS = ("name", "value", "volume")

MIN_STOCK_VALUE = -100

CREATE_RULES: RuleSet = {
    "name": [Rule.required()],
    "value": [Rule.required(), Rule.numeric(), Rule.min(MIN_STOCK_VALUE)],
    "volume": [Rule.required(), Rule.integer(), Rule.min(INTEGER_MIN), Rule.max(INTEGER_MAX)],
}

UPDATE_FIELD_RULES: RuleSet = {
    "name": [Rule.filled()],
    "value": [Rule.filled(), Rule.numeric(), Rule.min(MIN_STOCK_VALUE)],
    "volume": [Rule.filled(), Rule.integer(), Rule.min(INTEGER_MIN), Rule.max(INTEGER_MAX)],
}


def only_stock_fields(payload: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    """Оставить в теле запроса только поля акции, строки обрезать"""
    fields: Dict[str, Any] = {}
    for key in STOCK_FIELDS:
        if payload and key in payload:
            value = payload[key]
            fields[key] = value.strip() if isinstance(value, str) else value
    return fields


class StockService:
    """Сервис для работы с акциями"""

    def __init__(self, repository: StockRepository, catalog: Optional[MessageCatalog] = None):
        self.repository = repository
        self.catalog = catalog or MessageCatalog.from_settings()

    @staticmethod
    def _prepare(validated: Dict[str, Any]) -> Dict[str, Any]:
        if "name" in validated:
            validated["name"] = str(validated["name"])
        return validated

    def _not_found_message(self) -> str:
        return self.catalog.render(RuleKind.EXISTS, "id")

    async def list_stocks(self) -> List[Stock]:
        """Получить все акции в порядке хранилища"""
        return await self.repository.list()

    async def create_stock(self, payload: Optional[Mapping[str, Any]]) -> Stock:
        """
        Создать акцию.

        Args:
            payload: Тело запроса; учитываются только name, value, volume

        Returns:
            Stock: Созданная запись с назначенным id

        Raises:
            ValidationError: Если поля не прошли проверку
        """
        fields = only_stock_fields(payload)
        try:
            validated = await Validator(CREATE_RULES, self.catalog).validate(fields)
        except ValidationError as e:
            logger.info(f"Stock creation rejected: {e.errors}")
            raise

        stock = await self.repository.insert(self._prepare(validated))
        logger.info(f"Stock {stock.id} created", extra={"stock_id": stock.id})
        return stock

    async def update_stock(self, stock_id: Any, payload: Optional[Mapping[str, Any]]) -> Stock:
        """
        Частично обновить акцию.

        Перезаписываются только переданные поля. Несуществующий или
        нецелый id возвращается как ошибка валидации поля id вместе
        с ошибками остальных полей.

        Args:
            stock_id: Идентификатор из пути запроса
            payload: Тело запроса с любым подмножеством name, value, volume

        Returns:
            Stock: Обновленная запись
        """
        rules: RuleSet = {
            "id": [Rule.required(), Rule.integer(), Rule.exists(self.repository.exists)],
            **UPDATE_FIELD_RULES,
        }
        data = {"id": stock_id, **only_stock_fields(payload)}
        try:
            validated = await Validator(rules, self.catalog).validate(data)
        except ValidationError as e:
            logger.info(f"Stock {stock_id} update rejected: {e.errors}")
            raise

        identifier = validated.pop("id")
        stock = await self.repository.find_by_id(identifier)
        if stock is None:
            # Запись удалена между проверкой и загрузкой
            raise NotFoundError(self._not_found_message())

        for key, value in self._prepare(validated).items():
            setattr(stock, key, value)
        stock = await self.repository.save(stock)

        logger.info(f"Stock {stock.id} updated: {sorted(validated)}", extra={"stock_id": stock.id})
        return stock

    async def destroy_stock(self, stock_id: Any) -> None:
        """
        Удалить акцию.

        Raises:
            NotFoundError: Если удалять было нечего
        """
        identifier = to_integer(stock_id)
        if identifier is None or not await self.repository.delete_by_id(identifier):
            logger.info(f"Stock {stock_id} deletion rejected: nothing to delete")
            raise NotFoundError(self._not_found_message())

        logger.info(f"Stock {identifier} deleted", extra={"stock_id": identifier})
