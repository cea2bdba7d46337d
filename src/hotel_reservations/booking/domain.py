"""
Доменная модель контекста бронирования.

Содержит бронирование и его жизненный цикл, позиции дополнительных услуг,
а также доменные сервисы поиска свободных номеров и расчета стоимости.
"""

from datetime import datetime
from typing import TYPE_CHECKING, Iterable, List, Optional, Sequence, Tuple

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr

from ..catalog.domain import Room, RoomType, ServiceCatalogItem
from ..shared_kernel import (
    BookingStatus,
    ConflictError,
    DateRange,
    DomainEvent,
    EntityId,
    InvalidStatusTransitionError,
    Money,
    ValidationError,
    calculate_nights,
    now,
)
from ..shared_kernel.domain import DateLike

if TYPE_CHECKING:
    from ..catalog.interfaces import IRoomRepository, IRoomTypeRepository
    from .interfaces import IBookingRepository


class BookingCreated(DomainEvent):
    """Событие создания бронирования."""

    booking_id: EntityId
    room_id: EntityId
    user_id: EntityId
    period: DateRange


class BookingStatusChanged(DomainEvent):
    """Событие смены статуса бронирования."""

    booking_id: EntityId
    old_status: BookingStatus
    new_status: BookingStatus


class BookingCancelled(DomainEvent):
    """Событие отмены бронирования."""

    booking_id: EntityId
    cancelled_by: Optional[EntityId] = None


class BookingRescheduled(DomainEvent):
    """Событие переноса дат проживания."""

    booking_id: EntityId
    old_period: DateRange
    new_period: DateRange


class ServiceAttached(DomainEvent):
    """Событие добавления услуги к бронированию."""

    booking_id: EntityId
    line_item_id: EntityId
    service_id: EntityId
    quantity: int
    line_total: Money


class ServiceDetached(DomainEvent):
    """Событие удаления услуги из бронирования."""

    booking_id: EntityId
    line_item_id: EntityId


class Booking(BaseModel):
    """Бронирование номера в отеле."""

    id: Optional[EntityId] = None
    user_id: EntityId
    room_id: EntityId
    period: DateRange
    guests: int = Field(..., gt=0)
    status: BookingStatus = BookingStatus.PENDING
    # Производная величина: ночи x тариф + сумма позиций услуг
    total_amount: Money = Field(default_factory=Money.zero)
    created_at: datetime = Field(default_factory=now)
    updated_at: datetime = Field(default_factory=now)
    _domain_events: List[DomainEvent] = PrivateAttr(default_factory=list)

    @property
    def domain_events(self) -> List[DomainEvent]:
        """Возвращает список доменных событий."""
        return self._domain_events

    def clear_events(self) -> None:
        """Очищает список доменных событий."""
        self._domain_events = []

    def pull_events(self) -> List[DomainEvent]:
        events = list(self._domain_events)
        self.clear_events()
        return events

    @property
    def nights(self) -> int:
        return self.period.nights

    def is_active(self) -> bool:
        """Бронирование учитывается при проверке пересечений и ссылок."""
        return self.status != BookingStatus.CANCELLED

    def change_status(self, new_status: BookingStatus) -> None:
        """
        Ручная смена статуса.

        Допускается любой переход, кроме выхода из терминального состояния
        (CHECKED_OUT, CANCELLED).
        """
        if new_status == self.status:
            return
        if self.status.is_terminal:
            raise InvalidStatusTransitionError(
                f"Невозможно изменить статус бронирования {self.id}: "
                f"статус {self.status.value} является конечным"
            )
        self._set_status(new_status)

    def cancel(self, cancelled_by: Optional[EntityId] = None) -> None:
        """Отменяет бронирование."""
        if self.status.is_terminal:
            raise InvalidStatusTransitionError(
                f"Невозможно отменить бронирование в статусе {self.status.value}"
            )
        self._set_status(BookingStatus.CANCELLED)
        self._domain_events.append(
            BookingCancelled(booking_id=self.id, cancelled_by=cancelled_by)
        )

    def confirm_by_payment(self) -> bool:
        """
        Подтверждает бронирование после успешной оплаты.

        Статус становится CONFIRMED независимо от текущего, в том числе
        из CHECKED_IN и CHECKED_OUT. Отмененное бронирование не
        восстанавливается. Возвращает True, если статус изменился.
        """
        if self.status in (BookingStatus.CONFIRMED, BookingStatus.CANCELLED):
            return False
        self._set_status(BookingStatus.CONFIRMED)
        return True

    def reschedule(self, period: DateRange) -> None:
        """Переносит даты проживания."""
        if self.status.is_terminal:
            raise InvalidStatusTransitionError(
                f"Невозможно изменить даты бронирования в статусе {self.status.value}"
            )
        old_period = self.period
        self.period = period
        self.updated_at = now()
        self._domain_events.append(
            BookingRescheduled(booking_id=self.id, old_period=old_period, new_period=period)
        )

    def _set_status(self, new_status: BookingStatus) -> None:
        old_status = self.status
        self.status = new_status
        self.updated_at = now()
        self._domain_events.append(
            BookingStatusChanged(
                booking_id=self.id, old_status=old_status, new_status=new_status
            )
        )

    @classmethod
    def create(
        cls,
        user_id: EntityId,
        room: Room,
        room_type: RoomType,
        period: DateRange,
        guests: int,
    ) -> "Booking":
        """Создает новое бронирование в статусе PENDING."""
        if not room.is_bookable:
            raise ValidationError(
                f"Номер {room.label} недоступен для бронирования (статус {room.status.value})"
            )
        if guests < 1:
            raise ValidationError("Количество гостей должно быть не меньше 1")
        if guests > room_type.capacity:
            raise ValidationError(
                f"Превышена вместимость номера (макс. {room_type.capacity} человек)"
            )
        return cls(user_id=user_id, room_id=room.id, period=period, guests=guests)

    def record_created(self) -> None:
        """Фиксирует событие создания после присвоения идентификатора."""
        self._domain_events.append(
            BookingCreated(
                booking_id=self.id,
                room_id=self.room_id,
                user_id=self.user_id,
                period=self.period,
            )
        )


class ServiceLineItem(BaseModel):
    """Позиция дополнительной услуги в бронировании."""

    id: Optional[EntityId] = None
    booking_id: EntityId
    service_id: EntityId
    quantity: int = Field(..., ge=1)
    # Цена фиксируется в момент добавления и не пересчитывается по каталогу
    line_total: Money

    @classmethod
    def capture(
        cls, booking_id: EntityId, service: ServiceCatalogItem, quantity: int
    ) -> "ServiceLineItem":
        if quantity < 1:
            raise ValidationError("Количество услуги должно быть не меньше 1")
        return cls(
            booking_id=booking_id,
            service_id=service.id,
            quantity=quantity,
            line_total=service.unit_price * quantity,
        )


class ServiceSelection(BaseModel):
    """Выбранная при бронировании услуга."""

    model_config = ConfigDict(frozen=True)

    service_id: EntityId
    quantity: int = Field(1, ge=1)


class PriceQuote(BaseModel):
    """Расчет стоимости проживания."""

    nights: int
    room_cost: Money
    services_cost: Money
    total: Money


class AvailableRoom(BaseModel):
    """Свободный номер, найденный по запросу."""

    room: Room
    room_type: RoomType
    nights: int
    total: Money


class PricingCalculator:
    """Расчет стоимости: ночи x базовый тариф + позиции услуг."""

    @staticmethod
    def room_cost(room_type: RoomType, nights: int) -> Money:
        return room_type.base_rate * nights

    @classmethod
    def quote(
        cls,
        room_type: RoomType,
        check_in: DateLike,
        check_out: DateLike,
        selections: Iterable[Tuple[ServiceCatalogItem, int]] = (),
    ) -> PriceQuote:
        """Рассчитывает стоимость предложения до создания бронирования."""
        nights = calculate_nights(check_in, check_out)
        room_cost = cls.room_cost(room_type, nights)
        services_cost = Money.zero()
        for service, quantity in selections:
            if quantity < 1:
                raise ValidationError("Количество услуги должно быть не меньше 1")
            services_cost = services_cost + service.unit_price * quantity
        return PriceQuote(
            nights=nights,
            room_cost=room_cost,
            services_cost=services_cost,
            total=room_cost + services_cost,
        )

    @classmethod
    def booking_total(
        cls,
        booking: Booking,
        room_type: RoomType,
        line_items: Sequence[ServiceLineItem],
    ) -> Money:
        """Заново выводит итог бронирования из хранимых фактов."""
        items_total = Money.total(
            item.line_total for item in line_items if item.booking_id == booking.id
        )
        return cls.room_cost(room_type, booking.nights) + items_total


class AvailabilityEngine:
    """Доменный сервис поиска свободных номеров."""

    def __init__(
        self,
        room_repository: "IRoomRepository",
        room_type_repository: "IRoomTypeRepository",
        booking_repository: "IBookingRepository",
    ):
        self.room_repository = room_repository
        self.room_type_repository = room_type_repository
        self.booking_repository = booking_repository

    def is_room_available(
        self,
        room_id: EntityId,
        period: DateRange,
        exclude_booking_id: Optional[EntityId] = None,
    ) -> bool:
        """Проверяет, что у номера нет действующих бронирований на эти даты."""
        overlapping = self.booking_repository.find_overlapping_bookings(
            room_id=room_id,
            check_in=period.check_in,
            check_out=period.check_out,
            exclude_booking_id=exclude_booking_id,
        )
        return not overlapping

    def search(
        self,
        period: DateRange,
        min_guests: int,
        room_type_id: Optional[EntityId] = None,
        exclude_booking_id: Optional[EntityId] = None,
    ) -> List[AvailableRoom]:
        """Возвращает свободные номера по возрастанию ID."""
        if not isinstance(min_guests, int) or isinstance(min_guests, bool):
            raise ValidationError("Количество гостей должно быть целым числом")
        if min_guests < 1:
            raise ValidationError("Количество гостей должно быть не меньше 1")
        if room_type_id is not None:
            # Неизвестный тип номера - ошибка запроса, а не пустой результат
            self.room_type_repository.get_by_id(room_type_id)

        nights = period.nights
        result = []
        for room in sorted(self.room_repository.list(), key=lambda r: r.id):
            if not room.is_bookable:
                continue
            if room_type_id is not None and room.type_id != room_type_id:
                continue
            room_type = self.room_type_repository.find_by_id(room.type_id)
            if room_type is None or room_type.capacity < min_guests:
                continue
            if not self.is_room_available(room.id, period, exclude_booking_id):
                continue
            result.append(
                AvailableRoom(
                    room=room,
                    room_type=room_type,
                    nights=nights,
                    total=PricingCalculator.room_cost(room_type, nights),
                )
            )
        return result


class BookingService:
    """Доменный сервис для работы с бронированиями."""

    def __init__(
        self,
        booking_repository: "IBookingRepository",
        availability: AvailabilityEngine,
    ):
        self.booking_repository = booking_repository
        self.availability = availability

    def create_booking(
        self,
        user_id: EntityId,
        room: Room,
        room_type: RoomType,
        period: DateRange,
        guests: int,
    ) -> Booking:
        """Создает бронирование, если номер свободен на выбранные даты."""
        booking = Booking.create(
            user_id=user_id, room=room, room_type=room_type, period=period, guests=guests
        )

        if not self.availability.is_room_available(room.id, period):
            raise ConflictError(
                f"Номер {room.label} уже забронирован на период "
                f"{period.check_in.isoformat()} - {period.check_out.isoformat()}"
            )

        self.booking_repository.add(booking)
        booking.record_created()
        return booking

    def reschedule_booking(self, booking: Booking, period: DateRange) -> Booking:
        """Переносит бронирование, не считая конфликтом его самого."""
        if not self.availability.is_room_available(
            booking.room_id, period, exclude_booking_id=booking.id
        ):
            raise ConflictError(
                f"Номер недоступен на период "
                f"{period.check_in.isoformat()} - {period.check_out.isoformat()}"
            )
        booking.reschedule(period)
        self.booking_repository.update(booking)
        return booking
