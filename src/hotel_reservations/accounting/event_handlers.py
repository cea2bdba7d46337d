from ..shared_kernel import PaymentStatus
from .domain import PaymentRecorded
from .interfaces import IBookingConfirmation


def on_payment_recorded(
    event: PaymentRecorded, confirmation: "IBookingConfirmation"
) -> None:
    """Обработчик события регистрации платежа: оплата подтверждает бронирование."""
    if event.status == PaymentStatus.PAID:
        confirmation.confirm_paid_booking(event.booking_id)
