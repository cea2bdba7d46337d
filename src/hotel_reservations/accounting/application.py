"""
Прикладной слой контекста учета.

Регистрация и исправление платежей по бронированиям.
"""

from datetime import date
from typing import List, Optional, Union

from pydantic import BaseModel

from ..interfaces import IHotelUnitOfWork
from ..shared_kernel import (
    EntityId,
    Money,
    PaymentMethod,
    PaymentStatus,
    ValidationError,
    build_model,
    to_money,
    today,
)
from ..shared_kernel.domain import MoneyLike
from ..shared_kernel.infrastructure import ConsoleLogger
from ..shared_kernel.interfaces import IEventBus, ILogger
from .domain import Payment

# ===================================================================
# DTO (Data Transfer Objects)
# ===================================================================


class PaymentDTO(BaseModel):
    """DTO для платежа."""

    id: EntityId
    booking_id: EntityId
    amount: Money
    method: PaymentMethod
    payment_date: date
    status: PaymentStatus

    @classmethod
    def from_domain(cls, payment: Payment) -> "PaymentDTO":
        """Создает DTO из доменной модели."""
        return cls(
            id=payment.id,
            booking_id=payment.booking_id,
            amount=payment.amount,
            method=payment.method,
            payment_date=payment.payment_date,
            status=payment.status,
        )


def _coerce_method(method: Union[PaymentMethod, str]) -> PaymentMethod:
    try:
        return PaymentMethod(method)
    except ValueError:
        raise ValidationError(f"Неизвестный способ оплаты: {method}") from None


def _coerce_status(status: Union[PaymentStatus, str]) -> PaymentStatus:
    try:
        return PaymentStatus(status)
    except ValueError:
        raise ValidationError(f"Неизвестный статус платежа: {status}") from None


# ===================================================================
# Прикладные сервисы (Application Services)
# ===================================================================


class PaymentApplicationService:
    """
    Прикладной сервис для работы с платежами.

    Каждое сохранение платежа публикует событие PaymentRecorded в той же
    транзакции. Подписчик из контекста бронирования подтверждает
    бронирование, если платеж оплачен; ошибка подписчика откатывает и
    сам платеж.
    """

    def __init__(
        self,
        uow: IHotelUnitOfWork,
        event_bus: IEventBus,
        logger: Optional[ILogger] = None,
    ):
        self._uow = uow
        self._event_bus = event_bus
        self._logger = logger or ConsoleLogger()

    def record_payment(
        self,
        booking_id: EntityId,
        amount: MoneyLike,
        method: Union[PaymentMethod, str],
        payment_date: Optional[date] = None,
        status: Union[PaymentStatus, str] = PaymentStatus.PENDING,
    ) -> PaymentDTO:
        """Регистрирует платеж по бронированию."""
        payment = build_model(
            Payment,
            booking_id=booking_id,
            amount=to_money(amount),
            method=_coerce_method(method),
            payment_date=payment_date or today(),
            status=_coerce_status(status),
        )

        with self._uow:
            self._uow.bookings.get_by_id(booking_id)
            self._uow.payments.add(payment)
            payment.record()
            self._publish(payment)

        self._logger.info(
            "Payment recorded",
            payment_id=payment.id,
            booking_id=booking_id,
            amount=str(payment.amount.amount),
            status=payment.status.value,
        )
        return PaymentDTO.from_domain(payment)

    def update_payment(
        self,
        payment_id: EntityId,
        booking_id: Optional[EntityId] = None,
        amount: Optional[MoneyLike] = None,
        method: Optional[Union[PaymentMethod, str]] = None,
        payment_date: Optional[date] = None,
        status: Optional[Union[PaymentStatus, str]] = None,
    ) -> PaymentDTO:
        """Исправляет платеж; не указанные поля сохраняют прежние значения."""
        with self._uow:
            payment = self._uow.payments.get_by_id(payment_id)
            target_booking_id = booking_id if booking_id is not None else payment.booking_id
            self._uow.bookings.get_by_id(target_booking_id)

            payment.revise(
                booking_id=target_booking_id,
                amount=to_money(amount) if amount is not None else payment.amount,
                method=_coerce_method(method) if method is not None else payment.method,
                payment_date=payment_date or payment.payment_date,
                status=_coerce_status(status) if status is not None else payment.status,
            )
            self._uow.payments.update(payment)
            self._publish(payment)

        self._logger.info(
            "Payment updated",
            payment_id=payment_id,
            booking_id=payment.booking_id,
            status=payment.status.value,
        )
        return PaymentDTO.from_domain(payment)

    def get_payment(self, payment_id: EntityId) -> PaymentDTO:
        with self._uow.read():
            return PaymentDTO.from_domain(self._uow.payments.get_by_id(payment_id))

    def list_payments(
        self,
        booking_id: Optional[EntityId] = None,
        status: Optional[Union[PaymentStatus, str]] = None,
    ) -> List[PaymentDTO]:
        wanted_status = _coerce_status(status) if status is not None else None
        with self._uow.read():
            if booking_id is not None:
                payments = [
                    payment
                    for payment in self._uow.payments.find_by_booking(booking_id)
                    if wanted_status is None or payment.status == wanted_status
                ]
            elif wanted_status is not None:
                payments = self._uow.payments.find_by_status(wanted_status)
            else:
                payments = self._uow.payments.list()
            return [PaymentDTO.from_domain(payment) for payment in payments]

    def _publish(self, payment: Payment) -> None:
        for event in payment.pull_events():
            self._event_bus.publish(event)
