"""
Интерфейсы (порты) для контекста учета.
"""

from __future__ import annotations

from typing import List, Protocol

from ..shared_kernel import EntityId, PaymentStatus
from ..shared_kernel.interfaces import IRepository
from .domain import Payment


class IPaymentRepository(IRepository[Payment], Protocol):
    """Интерфейс репозитория платежей."""

    def find_by_booking(self, booking_id: EntityId) -> List[Payment]: ...
    def find_by_status(self, status: PaymentStatus) -> List[Payment]: ...


class IBookingConfirmation(Protocol):
    """Порт контекста бронирования, подтверждающий оплаченное бронирование."""

    def confirm_paid_booking(self, booking_id: EntityId) -> None: ...
