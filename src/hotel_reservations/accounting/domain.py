"""
Доменная модель контекста учета.

Платежи по бронированиям. Сумма платежа не сверяется с итогом
бронирования: платеж может быть частичным, полным или превышать итог.
"""

from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, Field, PrivateAttr, field_validator

from ..shared_kernel import (
    DomainEvent,
    EntityId,
    Money,
    PaymentMethod,
    PaymentStatus,
    ValidationError,
    now,
    today,
)


class PaymentRecorded(DomainEvent):
    """Событие регистрации или изменения платежа."""

    payment_id: EntityId
    booking_id: EntityId
    amount: Money
    status: PaymentStatus


class Payment(BaseModel):
    """Платеж по бронированию."""

    id: Optional[EntityId] = None
    booking_id: EntityId
    amount: Money
    method: PaymentMethod
    payment_date: date = Field(default_factory=today)
    status: PaymentStatus = PaymentStatus.PENDING
    created_at: datetime = Field(default_factory=now)
    updated_at: datetime = Field(default_factory=now)
    _domain_events: List[DomainEvent] = PrivateAttr(default_factory=list)

    @field_validator("amount")
    @classmethod
    def amount_must_be_positive(cls, v: Money) -> Money:
        if v.amount <= 0:
            raise ValueError("Сумма платежа должна быть положительной")
        return v

    def pull_events(self) -> List[DomainEvent]:
        events = list(self._domain_events)
        self._domain_events = []
        return events

    def record(self) -> None:
        """Фиксирует событие о текущем состоянии платежа."""
        self._domain_events.append(
            PaymentRecorded(
                payment_id=self.id,
                booking_id=self.booking_id,
                amount=self.amount,
                status=self.status,
            )
        )

    def revise(
        self,
        booking_id: EntityId,
        amount: Money,
        method: PaymentMethod,
        payment_date: date,
        status: PaymentStatus,
    ) -> None:
        """Изменяет данные платежа (исправление администратором)."""
        if amount.amount <= 0:
            raise ValidationError("Сумма платежа должна быть положительной")
        self.booking_id = booking_id
        self.amount = amount
        self.method = method
        self.payment_date = payment_date
        self.status = status
        self.updated_at = now()
        self.record()
