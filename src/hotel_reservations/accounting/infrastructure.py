"""
Инфраструктурный слой контекста учета.
"""

from typing import List

from ..shared_kernel import EntityId, PaymentStatus
from ..shared_kernel.infrastructure import InMemoryRepository
from . import interfaces as ports
from .domain import Payment


class InMemoryPaymentRepository(InMemoryRepository[Payment], ports.IPaymentRepository):
    """Реализация репозитория платежей в памяти."""

    model_class = Payment
    entity_kind = "Платеж"

    def find_by_booking(self, booking_id: EntityId) -> List[Payment]:
        return [payment for payment in self.list() if payment.booking_id == booking_id]

    def find_by_status(self, status: PaymentStatus) -> List[Payment]:
        return [payment for payment in self.list() if payment.status == status]
