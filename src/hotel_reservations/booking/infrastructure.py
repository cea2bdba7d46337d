"""
Инфраструктурный слой контекста бронирования.

Реализации репозиториев бронирований и позиций услуг в памяти.
"""

from datetime import date
from typing import List, Optional

from ..shared_kernel import BookingStatus, EntityId, ranges_overlap
from ..shared_kernel.infrastructure import InMemoryRepository
from . import interfaces as ports
from .domain import Booking, ServiceLineItem


class InMemoryBookingRepository(InMemoryRepository[Booking], ports.IBookingRepository):
    """Реализация репозитория бронирований в памяти."""

    model_class = Booking
    entity_kind = "Бронирование"

    def find_by_user(self, user_id: EntityId) -> List[Booking]:
        return [booking for booking in self.list() if booking.user_id == user_id]

    def find_by_room(self, room_id: EntityId) -> List[Booking]:
        return [booking for booking in self.list() if booking.room_id == room_id]

    def find_by_status(self, status: BookingStatus) -> List[Booking]:
        return [booking for booking in self.list() if booking.status == status]

    def find_overlapping_bookings(
        self,
        room_id: EntityId,
        check_in: date,
        check_out: date,
        exclude_booking_id: Optional[EntityId] = None,
    ) -> List[Booking]:
        result = []

        for booking in self.find_by_room(room_id):
            # Пропускаем исключенное бронирование
            if exclude_booking_id is not None and booking.id == exclude_booking_id:
                continue

            # Отмененные бронирования номер не занимают
            if not booking.is_active():
                continue

            if ranges_overlap(
                booking.period.check_in, booking.period.check_out, check_in, check_out
            ):
                result.append(booking)

        return result


class InMemoryLineItemRepository(
    InMemoryRepository[ServiceLineItem], ports.ILineItemRepository
):
    """Реализация репозитория позиций услуг в памяти."""

    model_class = ServiceLineItem
    entity_kind = "Позиция услуги"

    def find_by_booking(self, booking_id: EntityId) -> List[ServiceLineItem]:
        return [item for item in self.list() if item.booking_id == booking_id]

    def find_by_service(self, service_id: EntityId) -> List[ServiceLineItem]:
        return [item for item in self.list() if item.service_id == service_id]
