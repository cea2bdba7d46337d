"""
Общее ядро (Shared Kernel) системы бронирования отеля.

Содержит общие типы данных и утилиты, используемые в различных ограниченных контекстах.
"""

from .domain import (
    DEFAULT_CURRENCY,
    BookingStatus,
    ConflictError,
    DateRange,
    DomainEvent,
    # Исключения
    DomainException,
    # Базовые типы
    EntityId,
    InvalidStatusTransitionError,
    # Основные классы
    Money,
    NotFoundError,
    PaymentMethod,
    PaymentStatus,
    PermissionDeniedError,
    ReferentialIntegrityError,
    RoleName,
    # Перечисления
    RoomStatus,
    ValidationError,
    # Утилиты
    build_model,
    calculate_nights,
    now,
    ranges_overlap,
    to_money,
    today,
)

__all__ = [
    # Базовые типы
    "EntityId",
    "DEFAULT_CURRENCY",
    # Основные классы
    "Money",
    "DateRange",
    "DomainEvent",
    # Перечисления
    "RoomStatus",
    "BookingStatus",
    "PaymentStatus",
    "PaymentMethod",
    "RoleName",
    # Исключения
    "DomainException",
    "ValidationError",
    "NotFoundError",
    "InvalidStatusTransitionError",
    "ConflictError",
    "ReferentialIntegrityError",
    "PermissionDeniedError",
    # Утилиты
    "build_model",
    "calculate_nights",
    "ranges_overlap",
    "to_money",
    "now",
    "today",
]
