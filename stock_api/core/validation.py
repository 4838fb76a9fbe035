"""
@file: stock_api/core/validation.py
@description: Декларативные правила валидации полей и их интерпретатор
@dependencies: stock_api.core.settings

Набор правил задается словарем {поле: [Rule, ...]}. Для каждого поля
правила проверяются по порядку до первой ошибки; ошибки всех полей
собираются вместе.
"""

import math
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Optional

from stock_api.core.settings import settings
from stock_api.exceptions import ValidationError

NUMERIC_PATTERN = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?$")
INTEGER_PATTERN = re.compile(r"^[+-]?\d+$")

ExistsLookup = Callable[[int], Awaitable[bool]]


class RuleKind(str, Enum):
    """Тип правила; значение совпадает с ключом в таблице сообщений"""
    REQUIRED = "required"
    FILLED = "filled"
    NUMERIC = "numeric"
    INTEGER = "integer"
    MIN = "min"
    MAX = "max"
    EXISTS = "exists"


# Правила, которые проверяются и для пустых значений
IMPLICIT_RULES = {RuleKind.REQUIRED, RuleKind.FILLED}


@dataclass(frozen=True)
class Rule:
    """Правило валидации: тип и необязательный параметр"""
    kind: RuleKind
    param: Any = None

    @classmethod
    def required(cls) -> "Rule":
        return cls(RuleKind.REQUIRED)

    @classmethod
    def filled(cls) -> "Rule":
        return cls(RuleKind.FILLED)

    @classmethod
    def numeric(cls) -> "Rule":
        return cls(RuleKind.NUMERIC)

    @classmethod
    def integer(cls) -> "Rule":
        return cls(RuleKind.INTEGER)

    @classmethod
    def min(cls, limit: float) -> "Rule":
        return cls(RuleKind.MIN, limit)

    @classmethod
    def max(cls, limit: float) -> "Rule":
        return cls(RuleKind.MAX, limit)

    @classmethod
    def exists(cls, lookup: ExistsLookup) -> "Rule":
        return cls(RuleKind.EXISTS, lookup)


RuleSet = Dict[str, List[Rule]]


def is_empty(value: Any) -> bool:
    """Пустое значение: None, пустая строка (после trim), пустой список или словарь"""
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    if isinstance(value, (list, tuple, dict)):
        return len(value) == 0
    return False


def to_number(value: Any) -> Optional[float]:
    """Число из значения запроса или None, если значение не числовое"""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError:
            return None
    elif isinstance(value, str) and NUMERIC_PATTERN.match(value.strip()):
        number = float(value.strip())
    else:
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def to_integer(value: Any) -> Optional[int]:
    """Целое число из значения запроса или None"""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if math.isfinite(value) and value.is_integer():
            return int(value)
        return None
    if isinstance(value, str) and INTEGER_PATTERN.match(value.strip()):
        return int(value.strip())
    return None


def to_comparable(value: Any) -> Optional[float]:
    """Значение для сравнения с границей; целые сравниваются точно, без перевода во float"""
    integer = to_integer(value)
    if integer is not None:
        return integer
    return to_number(value)


def format_param(param: Any) -> str:
    """Граница правила для подстановки в сообщение; целые числа без дробной части"""
    if isinstance(param, float) and param.is_integer():
        return str(int(param))
    return str(param)


class MessageCatalog:
    """Таблица шаблонов сообщений по типу правила и отображаемых имен полей"""

    def __init__(self, messages: Mapping[str, str], attributes: Optional[Mapping[str, str]] = None):
        self.messages = dict(messages)
        self.attributes = dict(attributes or {})

    @classmethod
    def from_settings(cls) -> "MessageCatalog":
        return cls(settings.validation.messages, settings.validation.attributes)

    def label(self, field: str) -> str:
        return self.attributes.get(field, field)

    def render(self, kind: RuleKind, field: str, param: Any = None) -> str:
        template = self.messages.get(kind.value, f"The :attribute field failed the {kind.value} rule.")
        message = template.replace(":attribute", self.label(field))
        if kind == RuleKind.MIN:
            message = message.replace(":min", format_param(param))
        elif kind == RuleKind.MAX:
            message = message.replace(":max", format_param(param))
        return message


class Validator:
    """Интерпретатор набора правил"""

    def __init__(self, rules: RuleSet, catalog: Optional[MessageCatalog] = None):
        self.rules = rules
        self.catalog = catalog or MessageCatalog.from_settings()

    async def _passes(self, rule: Rule, present: bool, value: Any) -> bool:
        if rule.kind == RuleKind.REQUIRED:
            return present and not is_empty(value)
        if rule.kind == RuleKind.FILLED:
            return not present or not is_empty(value)
        if rule.kind == RuleKind.NUMERIC:
            return to_number(value) is not None
        if rule.kind == RuleKind.INTEGER:
            return to_integer(value) is not None
        if rule.kind in (RuleKind.MIN, RuleKind.MAX):
            number = to_comparable(value)
            # Нечисловые значения отклоняют правила numeric и integer
            if number is None:
                return True
            return number >= rule.param if rule.kind == RuleKind.MIN else number <= rule.param
        if rule.kind == RuleKind.EXISTS:
            identifier = to_integer(value)
            return identifier is not None and await rule.param(identifier)
        raise ValueError(f"Unknown rule kind: {rule.kind}")

    async def errors(self, data: Mapping[str, Any]) -> Dict[str, str]:
        """
        Проверить данные и вернуть ошибки по полям.

        Args:
            data: Данные запроса (только присутствующие поля)

        Returns:
            Dict[str, str]: Первое сообщение об ошибке для каждого невалидного поля
        """
        errors: Dict[str, str] = {}
        for field, rules in self.rules.items():
            present = field in data
            value = data.get(field)
            for rule in rules:
                if rule.kind not in IMPLICIT_RULES and is_empty(value):
                    continue
                if not await self._passes(rule, present, value):
                    errors[field] = self.catalog.render(rule.kind, field, rule.param)
                    break
        return errors

    async def validate(self, data: Mapping[str, Any]) -> Dict[str, Any]:
        """
        Проверить данные и вернуть значения, приведенные к типам правил.

        Raises:
            ValidationError: Если хотя бы одно поле не прошло проверку
        """
        errors = await self.errors(data)
        if errors:
            raise ValidationError(errors)

        validated: Dict[str, Any] = {}
        for field, rules in self.rules.items():
            if field not in data:
                continue
            kinds = {rule.kind for rule in rules}
            value = data[field]
            if RuleKind.INTEGER in kinds:
                value = to_integer(value)
            elif RuleKind.NUMERIC in kinds:
                value = to_number(value)
            elif isinstance(value, str):
                value = value.strip()
            validated[field] = value
        return validated
