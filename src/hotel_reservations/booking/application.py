"""
Прикладной слой контекста бронирования.

Содержит сервисы приложения, которые координируют
взаимодействие между внешними интерфейсами и доменной моделью.
"""

from datetime import date
from typing import Iterable, List, Optional, Sequence, Union

from pydantic import BaseModel, Field, model_validator

from ..interfaces import IHotelUnitOfWork
from ..shared_kernel import (
    BookingStatus,
    DateRange,
    EntityId,
    Money,
    PermissionDeniedError,
    ValidationError,
    build_model,
    now,
)
from ..shared_kernel.domain import DateLike
from ..shared_kernel.infrastructure import ConsoleLogger
from ..shared_kernel.interfaces import IEventBus, ILogger
from .domain import (
    AvailabilityEngine,
    AvailableRoom,
    Booking,
    BookingService,
    PriceQuote,
    PricingCalculator,
    ServiceAttached,
    ServiceDetached,
    ServiceLineItem,
    ServiceSelection,
)

SelectionLike = Union[ServiceSelection, dict]

# DTO (Data Transfer Objects) для входящих данных


class CreateBookingRequest(BaseModel):
    """Запрос на создание бронирования."""

    user_id: EntityId
    room_id: EntityId
    check_in: date
    check_out: date
    guests: int = Field(..., gt=0)
    services: List[ServiceSelection] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_out_after_check_in(self) -> "CreateBookingRequest":
        if self.check_out <= self.check_in:
            raise ValueError("Дата выезда должна быть позже даты заезда")
        return self


class AvailabilitySearchRequest(BaseModel):
    """Параметры поиска свободных номеров."""

    guests: int = Field(..., gt=0)
    room_type_id: Optional[EntityId] = None


# DTO для исходящих данных


class BookingDTO(BaseModel):
    """DTO для представления бронирования."""

    id: EntityId
    user_id: EntityId
    room_id: EntityId
    check_in: date
    check_out: date
    nights: int
    guests: int
    status: BookingStatus
    total_amount: Money
    created_at: str
    updated_at: str

    @classmethod
    def from_domain(cls, booking: Booking) -> "BookingDTO":
        """Создает DTO из доменной модели."""
        return cls(
            id=booking.id,
            user_id=booking.user_id,
            room_id=booking.room_id,
            check_in=booking.period.check_in,
            check_out=booking.period.check_out,
            nights=booking.nights,
            guests=booking.guests,
            status=booking.status,
            total_amount=booking.total_amount,
            created_at=booking.created_at.isoformat(),
            updated_at=booking.updated_at.isoformat(),
        )


def _coerce_status(status: Union[BookingStatus, str]) -> BookingStatus:
    try:
        return BookingStatus(status)
    except ValueError:
        raise ValidationError(f"Неизвестный статус бронирования: {status}") from None


def refresh_booking_total(uow: IHotelUnitOfWork, booking: Booking) -> Money:
    """
    Пересчитывает итог бронирования с нуля и сохраняет его.

    Итог никогда не увеличивается и не уменьшается на отдельную позицию:
    он всегда выводится из дат, тарифа и текущих позиций услуг.
    """
    room = uow.rooms.find_by_id(booking.room_id)
    room_type = uow.room_types.find_by_id(room.type_id) if room is not None else None
    if room_type is None:
        # Номер удален после отмены бронирования, тариф восстановить нельзя
        return booking.total_amount
    booking.total_amount = PricingCalculator.booking_total(
        booking, room_type, uow.line_items.find_by_booking(booking.id)
    )
    return booking.total_amount


# Сервисы приложения


class AvailabilityApplicationService:
    """Сервис поиска свободных номеров."""

    def __init__(self, uow: IHotelUnitOfWork):
        """Инициализирует сервис."""
        self._uow = uow

    def search_availability(
        self,
        check_in: date,
        check_out: date,
        guests: int,
        room_type_id: Optional[EntityId] = None,
    ) -> List[AvailableRoom]:
        """Возвращает свободные номера с ценой проживания."""
        request = build_model(
            AvailabilitySearchRequest, guests=guests, room_type_id=room_type_id
        )
        period = DateRange.of(check_in, check_out)
        with self._uow.read():
            engine = AvailabilityEngine(
                self._uow.rooms, self._uow.room_types, self._uow.bookings
            )
            results = engine.search(
                period, request.guests, room_type_id=request.room_type_id
            )
            return [result.model_copy(deep=True) for result in results]


class ServiceAttachmentService:
    """Сервис приложения для позиций дополнительных услуг."""

    def __init__(
        self,
        uow: IHotelUnitOfWork,
        event_bus: IEventBus,
        logger: Optional[ILogger] = None,
    ):
        """Инициализирует сервис."""
        self._uow = uow
        self._event_bus = event_bus
        self._logger = logger or ConsoleLogger()

    def attach(
        self, booking_id: EntityId, service_id: EntityId, quantity: int = 1
    ) -> ServiceLineItem:
        """Добавляет услугу к бронированию и пересчитывает итог."""
        if not isinstance(quantity, int) or quantity < 1:
            raise ValidationError("Количество услуги должно быть не меньше 1")

        with self._uow:
            booking = self._uow.bookings.get_by_id(booking_id)
            service = self._uow.services.get_by_id(service_id)

            line_item = ServiceLineItem.capture(booking.id, service, quantity)
            self._uow.line_items.add(line_item)

            refresh_booking_total(self._uow, booking)
            booking.updated_at = now()
            self._uow.bookings.update(booking)

            self._event_bus.publish(
                ServiceAttached(
                    booking_id=booking.id,
                    line_item_id=line_item.id,
                    service_id=service.id,
                    quantity=quantity,
                    line_total=line_item.line_total,
                )
            )

        self._logger.info(
            "Service attached",
            booking_id=booking_id,
            service_id=service_id,
            quantity=quantity,
            total=str(booking.total_amount.amount),
        )
        return line_item.model_copy(deep=True)

    def detach(self, line_item_id: EntityId) -> None:
        """Удаляет позицию услуги и пересчитывает итог бронирования."""
        with self._uow:
            line_item = self._uow.line_items.get_by_id(line_item_id)
            booking = self._uow.bookings.get_by_id(line_item.booking_id)

            self._uow.line_items.delete(line_item_id)

            refresh_booking_total(self._uow, booking)
            booking.updated_at = now()
            self._uow.bookings.update(booking)

            self._event_bus.publish(
                ServiceDetached(booking_id=booking.id, line_item_id=line_item_id)
            )

        self._logger.info(
            "Service detached", booking_id=booking.id, line_item_id=line_item_id
        )

    def list_line_items(self, booking_id: EntityId) -> List[ServiceLineItem]:
        """Позиции услуг бронирования."""
        with self._uow.read():
            self._uow.bookings.get_by_id(booking_id)
            return [
                item.model_copy(deep=True)
                for item in self._uow.line_items.find_by_booking(booking_id)
            ]


class BookingApplicationService:
    """Сервис приложения для работы с бронированиями."""

    def __init__(
        self,
        uow: IHotelUnitOfWork,
        event_bus: IEventBus,
        logger: Optional[ILogger] = None,
    ):
        """Инициализирует сервис."""
        self._uow = uow
        self._event_bus = event_bus
        self._logger = logger or ConsoleLogger()
        self._attachments = ServiceAttachmentService(uow, event_bus, self._logger)

    def _booking_service(self) -> BookingService:
        availability = AvailabilityEngine(
            self._uow.rooms, self._uow.room_types, self._uow.bookings
        )
        return BookingService(self._uow.bookings, availability)

    def _publish(self, booking: Booking) -> None:
        for event in booking.pull_events():
            self._event_bus.publish(event)

    def quote_booking(
        self,
        room_id: EntityId,
        check_in: DateLike,
        check_out: DateLike,
        services: Iterable[SelectionLike] = (),
    ) -> PriceQuote:
        """Рассчитывает стоимость проживания с выбранными услугами."""
        selections = [build_model(ServiceSelection, **_selection_data(s)) for s in services]
        with self._uow.read():
            room = self._uow.rooms.get_by_id(room_id)
            room_type = self._uow.room_types.get_by_id(room.type_id)
            priced = [
                (self._uow.services.get_by_id(s.service_id), s.quantity) for s in selections
            ]
            return PricingCalculator.quote(room_type, check_in, check_out, priced)

    def create_booking(
        self,
        user_id: EntityId,
        room_id: EntityId,
        check_in: date,
        check_out: date,
        guests: int,
        services: Iterable[SelectionLike] = (),
    ) -> BookingDTO:
        """
        Создает бронирование вместе с выбранными услугами.

        Операция выполняется целиком в одной транзакции: если хотя бы одна
        услуга некорректна, бронирование не создается.
        """
        request = build_model(
            CreateBookingRequest,
            user_id=user_id,
            room_id=room_id,
            check_in=check_in,
            check_out=check_out,
            guests=guests,
            services=[_selection_data(s) for s in services],
        )
        period = DateRange.of(request.check_in, request.check_out)

        with self._uow:
            user = self._uow.users.get_by_id(request.user_id)
            room = self._uow.rooms.get_by_id(request.room_id)
            room_type = self._uow.room_types.get_by_id(room.type_id)
            for selection in request.services:
                self._uow.services.get_by_id(selection.service_id)

            booking = self._booking_service().create_booking(
                user_id=user.id,
                room=room,
                room_type=room_type,
                period=period,
                guests=request.guests,
            )
            self._publish(booking)

            for selection in request.services:
                self._attachments.attach(booking.id, selection.service_id, selection.quantity)

            refresh_booking_total(self._uow, booking)
            self._uow.bookings.update(booking)

        self._logger.info(
            "Booking created",
            booking_id=booking.id,
            user_id=booking.user_id,
            room_id=booking.room_id,
            check_in=period.check_in,
            check_out=period.check_out,
            total=str(booking.total_amount.amount),
        )
        return BookingDTO.from_domain(booking)

    def cancel_booking(self, booking_id: EntityId, actor_id: EntityId) -> BookingDTO:
        """Отменяет бронирование по запросу владельца или менеджера."""
        with self._uow:
            booking = self._uow.bookings.get_by_id(booking_id)
            actor = self._uow.users.get_by_id(actor_id)
            role = self._uow.roles.find_by_id(actor.role_id)
            is_manager = role is not None and role.name.is_manager_level
            if booking.user_id != actor.id and not is_manager:
                raise PermissionDeniedError(
                    f"Пользователь {actor_id} не может отменить бронирование {booking_id}"
                )

            booking.cancel(cancelled_by=actor.id)
            self._uow.bookings.update(booking)
            self._publish(booking)

        self._logger.info("Booking cancelled", booking_id=booking_id, actor_id=actor_id)
        return self.get_booking(booking_id)

    def set_booking_status(
        self, booking_id: EntityId, new_status: Union[BookingStatus, str]
    ) -> BookingDTO:
        """Ручная смена статуса (кроме выхода из конечного статуса)."""
        status = _coerce_status(new_status)
        with self._uow:
            booking = self._uow.bookings.get_by_id(booking_id)
            old_status = booking.status
            if status == BookingStatus.CANCELLED and old_status != status:
                booking.cancel()
            else:
                booking.change_status(status)
            self._uow.bookings.update(booking)
            self._publish(booking)

        self._logger.info(
            "Booking status changed",
            booking_id=booking_id,
            old_status=old_status.value,
            new_status=status.value,
        )
        return self.get_booking(booking_id)

    def reschedule_booking(
        self, booking_id: EntityId, check_in: date, check_out: date
    ) -> BookingDTO:
        """Переносит даты проживания с проверкой занятости номера."""
        period = DateRange.of(check_in, check_out)
        with self._uow:
            booking = self._uow.bookings.get_by_id(booking_id)
            self._booking_service().reschedule_booking(booking, period)
            refresh_booking_total(self._uow, booking)
            self._uow.bookings.update(booking)
            self._publish(booking)

        self._logger.info(
            "Booking rescheduled",
            booking_id=booking_id,
            check_in=period.check_in,
            check_out=period.check_out,
        )
        return self.get_booking(booking_id)

    def confirm_paid_booking(self, booking_id: EntityId) -> None:
        """
        Подтверждает бронирование после оплаты.

        Повторяет поведение исходной системы: статус становится CONFIRMED
        даже для бронирований, где гость уже заселился или выехал.
        """
        with self._uow:
            booking = self._uow.bookings.get_by_id(booking_id)
            old_status = booking.status
            changed = booking.confirm_by_payment()

            if old_status == BookingStatus.CANCELLED:
                self._logger.warning(
                    "Paid payment recorded for a cancelled booking, status kept",
                    booking_id=booking_id,
                )
            elif old_status in (BookingStatus.CHECKED_IN, BookingStatus.CHECKED_OUT):
                self._logger.warning(
                    "Payment moved booking back to confirmed",
                    booking_id=booking_id,
                    old_status=old_status.value,
                )

            if changed:
                self._uow.bookings.update(booking)
                self._publish(booking)

    def get_booking(self, booking_id: EntityId) -> BookingDTO:
        """Возвращает бронирование с итогом, пересчитанным при чтении."""
        with self._uow.read():
            booking = self._uow.bookings.get_by_id(booking_id)
            refresh_booking_total(self._uow, booking)
            return BookingDTO.from_domain(booking)

    def list_bookings(
        self,
        user_id: Optional[EntityId] = None,
        status: Optional[Union[BookingStatus, str]] = None,
    ) -> List[BookingDTO]:
        """Возвращает список бронирований с фильтрацией."""
        wanted_status = _coerce_status(status) if status is not None else None
        with self._uow.read():
            if user_id is not None:
                bookings: Sequence[Booking] = [
                    booking
                    for booking in self._uow.bookings.find_by_user(user_id)
                    if wanted_status is None or booking.status == wanted_status
                ]
            elif wanted_status is not None:
                bookings = self._uow.bookings.find_by_status(wanted_status)
            else:
                bookings = self._uow.bookings.list()
            result = []
            for booking in bookings:
                refresh_booking_total(self._uow, booking)
                result.append(BookingDTO.from_domain(booking))
            return result


def _selection_data(selection: SelectionLike) -> dict:
    if isinstance(selection, ServiceSelection):
        return selection.model_dump()
    if isinstance(selection, dict):
        return selection
    raise ValidationError(f"Некорректный выбор услуги: {selection!r}")
