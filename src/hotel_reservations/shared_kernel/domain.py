"""
Основные доменные типы и утилиты общего ядра.
"""

import math
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Iterable, Type, TypeVar, Union
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic import ValidationError as PydanticValidationError

# Общие типы идентификаторов
EntityId = int

DEFAULT_CURRENCY = "VND"
SECONDS_PER_DAY = 24 * 60 * 60

M = TypeVar("M", bound=BaseModel)


# Общие исключения
class DomainException(Exception):
    """Базовое исключение для доменных ошибок."""

    pass


class ValidationError(DomainException):
    """Некорректные входные данные: диапазон дат, поле, количество, сумма."""

    pass


class NotFoundError(ValidationError):
    """Ссылка на несуществующую сущность."""

    def __init__(self, entity_kind: str, entity_id: Any):
        super().__init__(f"{entity_kind} с ID {entity_id} не найден(а)")
        self.entity_kind = entity_kind
        self.entity_id = entity_id


class InvalidStatusTransitionError(ValidationError):
    """Недопустимая смена статуса (выход из терминального состояния)."""

    pass


class ConflictError(DomainException):
    """Номер уже занят на пересекающийся период."""

    pass


class ReferentialIntegrityError(DomainException):
    """Удаление сущности, на которую еще есть ссылки."""

    def __init__(self, message: str, reference_kind: str):
        super().__init__(message)
        self.reference_kind = reference_kind


class PermissionDeniedError(DomainException):
    """Действие недоступно для данного пользователя."""

    pass


def build_model(model_cls: Type[M], **data: Any) -> M:
    """Создает pydantic-модель, превращая ошибки валидации в ValidationError."""
    try:
        return model_cls(**data)
    except PydanticValidationError as exc:
        details = "; ".join(
            f"{'.'.join(str(part) for part in error['loc']) or model_cls.__name__}: "
            f"{error['msg']}"
            for error in exc.errors()
        )
        raise ValidationError(details) from exc


class Money(BaseModel):
    """Денежная сумма в единой валюте отеля."""

    model_config = ConfigDict(frozen=True)

    amount: Decimal = Field(..., ge=0, description="Сумма денег")
    currency: str = Field(
        default=DEFAULT_CURRENCY, max_length=3, description="Код валюты (ISO 4217)"
    )

    @classmethod
    def zero(cls) -> "Money":
        return cls(amount=Decimal("0"))

    @classmethod
    def total(cls, amounts: Iterable["Money"]) -> "Money":
        """Сумма последовательности денежных величин."""
        result = cls.zero()
        for money in amounts:
            result = result + money
        return result

    def __add__(self, other: "Money") -> "Money":
        if not isinstance(other, Money):
            raise TypeError("Можно складывать только объекты Money")
        if self.currency != other.currency:
            raise ValueError("Нельзя складывать разные валюты")
        return Money(amount=self.amount + other.amount, currency=self.currency)

    def __mul__(self, multiplier: int) -> "Money":
        if not isinstance(multiplier, (int, Decimal)) or isinstance(multiplier, bool):
            raise TypeError("Множитель должен быть целым числом или Decimal")
        if multiplier < 0:
            raise ValueError("Множитель не может быть отрицательным")
        return Money(amount=self.amount * multiplier, currency=self.currency)


MoneyLike = Union[Money, Decimal, int, float, str]


def to_money(value: MoneyLike) -> Money:
    """Приводит сумму к Money, сообщая об ошибках через ValidationError."""
    if isinstance(value, Money):
        return value
    if isinstance(value, float):
        value = str(value)
    return build_model(Money, amount=value)


DateLike = Union[date, datetime]


def calculate_nights(check_in: DateLike, check_out: DateLike) -> int:
    """
    Количество ночей между заездом и выездом.

    Принимает даты или метки времени (одного вида). Неполные сутки
    округляются вверх, поэтому корректный диапазон дает минимум одну ночь.
    """
    if isinstance(check_in, datetime) != isinstance(check_out, datetime):
        raise ValidationError("Даты заезда и выезда должны быть одного типа")
    if check_out <= check_in:
        raise ValidationError("Дата выезда должна быть позже даты заезда")
    seconds = (check_out - check_in).total_seconds()
    return math.ceil(seconds / SECONDS_PER_DAY)


def ranges_overlap(
    start1: DateLike, end1: DateLike, start2: DateLike, end2: DateLike
) -> bool:
    """Пересекаются ли полуоткрытые интервалы [start1, end1) и [start2, end2)."""
    return start1 < end2 and start2 < end1


class DateRange(BaseModel):
    """Период проживания: заезд включительно, выезд не включительно."""

    model_config = ConfigDict(frozen=True)

    check_in: date
    check_out: date

    @model_validator(mode="after")
    def check_out_after_check_in(self) -> "DateRange":
        if self.check_out <= self.check_in:
            raise ValueError("Дата выезда должна быть позже даты заезда")
        return self

    @classmethod
    def of(cls, check_in: Any, check_out: Any) -> "DateRange":
        """Создает период, сообщая об ошибках через ValidationError."""
        if check_in is None or check_out is None:
            raise ValidationError("Необходимо указать даты заезда и выезда")
        return build_model(cls, check_in=check_in, check_out=check_out)

    @property
    def nights(self) -> int:
        """Количество ночей в бронировании."""
        return calculate_nights(self.check_in, self.check_out)

    def overlaps(self, other: "DateRange") -> bool:
        return ranges_overlap(
            self.check_in, self.check_out, other.check_in, other.check_out
        )


class DomainEvent(BaseModel):
    """Базовый класс для всех доменных событий."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    event_id: UUID = Field(default_factory=uuid4)
    occurred_on: datetime = Field(default_factory=datetime.utcnow)
    event_type: str = ""

    @model_validator(mode="after")
    def default_event_type(self) -> "DomainEvent":
        if not self.event_type:
            self.event_type = type(self).__name__
        return self


# Общие перечисления
class RoomStatus(str, Enum):
    """Статусы номеров."""

    AVAILABLE = "available"
    OCCUPIED = "occupied"
    MAINTENANCE = "maintenance"
    CLEANING = "cleaning"


class BookingStatus(str, Enum):
    """Статусы бронирования."""

    PENDING = "pending"
    CONFIRMED = "confirmed"
    CHECKED_IN = "checked_in"
    CHECKED_OUT = "checked_out"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self in (BookingStatus.CHECKED_OUT, BookingStatus.CANCELLED)


class PaymentStatus(str, Enum):
    """Статусы платежей."""

    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"
    REFUNDED = "refunded"


class PaymentMethod(str, Enum):
    """Способы оплаты."""

    CASH = "cash"
    CREDIT_CARD = "credit_card"
    BANK_TRANSFER = "bank_transfer"
    E_WALLET = "e_wallet"


class RoleName(str, Enum):
    """Роли пользователей системы."""

    ADMIN = "admin"
    MANAGER = "manager"
    STAFF = "staff"
    CUSTOMER = "customer"

    @property
    def is_manager_level(self) -> bool:
        return self in (RoleName.ADMIN, RoleName.MANAGER)


# Общие утилиты
def now() -> datetime:
    """Возвращает текущую дату и время."""
    return datetime.utcnow()


def today() -> date:
    """Возвращает текущую дату."""
    return date.today()
