"""
Интерфейс единицы работы, общей для всех контекстов.

Каталог, бронирования, позиции услуг и платежи хранятся в одном реестре,
поэтому многошаговые операции выполняются в одной транзакции.
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Protocol

from .accounting.interfaces import IPaymentRepository
from .booking.interfaces import IBookingRepository, ILineItemRepository
from .catalog.interfaces import (
    IRoleRepository,
    IRoomRepository,
    IRoomTypeRepository,
    IServiceRepository,
    IUserRepository,
)


class ISnapshotStore(Protocol):
    """Хранилище снимка состояния (чтение и запись целиком)."""

    def load(self) -> Optional[Dict[str, Any]]: ...
    def save(self, document: Dict[str, Any]) -> None: ...


class IHotelUnitOfWork(Protocol):
    """Интерфейс Unit of Work для всего реестра отеля."""

    @property
    def room_types(self) -> IRoomTypeRepository: ...
    @property
    def rooms(self) -> IRoomRepository: ...
    @property
    def services(self) -> IServiceRepository: ...
    @property
    def roles(self) -> IRoleRepository: ...
    @property
    def users(self) -> IUserRepository: ...
    @property
    def bookings(self) -> IBookingRepository: ...
    @property
    def line_items(self) -> ILineItemRepository: ...
    @property
    def payments(self) -> IPaymentRepository: ...

    def commit(self) -> None: ...
    def rollback(self) -> None: ...
    def read(self) -> Any: ...
    def __enter__(self) -> IHotelUnitOfWork: ...
    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> bool: ...
