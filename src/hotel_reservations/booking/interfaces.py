"""
Интерфейсы (порты) для контекста бронирования.
"""

from __future__ import annotations

from datetime import date
from typing import List, Optional, Protocol

from ..shared_kernel import BookingStatus, EntityId
from ..shared_kernel.interfaces import IRepository
from .domain import Booking, ServiceLineItem


class IBookingRepository(IRepository[Booking], Protocol):
    """Интерфейс репозитория для бронирований."""

    def find_by_user(self, user_id: EntityId) -> List[Booking]: ...
    def find_by_room(self, room_id: EntityId) -> List[Booking]: ...
    def find_by_status(self, status: BookingStatus) -> List[Booking]: ...
    def find_overlapping_bookings(
        self,
        room_id: EntityId,
        check_in: date,
        check_out: date,
        exclude_booking_id: Optional[EntityId] = None,
    ) -> List[Booking]: ...


class ILineItemRepository(IRepository[ServiceLineItem], Protocol):
    """Интерфейс репозитория позиций услуг."""

    def find_by_booking(self, booking_id: EntityId) -> List[ServiceLineItem]: ...
    def find_by_service(self, service_id: EntityId) -> List[ServiceLineItem]: ...
