"""
Единица работы для всего реестра отеля.

Одна блокировка защищает все репозитории. Вход во внешнюю транзакцию
запоминает состояние каждого репозитория; при исключении оно
восстанавливается целиком, поэтому неудачная операция не оставляет
частичных изменений.
"""

import threading
from contextlib import contextmanager
from typing import Any, Dict, Iterator, Optional

from pydantic import ValidationError as PydanticValidationError

from . import interfaces as ports
from .accounting.infrastructure import InMemoryPaymentRepository
from .booking.infrastructure import InMemoryBookingRepository, InMemoryLineItemRepository
from .catalog.infrastructure import (
    InMemoryRoleRepository,
    InMemoryRoomRepository,
    InMemoryRoomTypeRepository,
    InMemoryServiceRepository,
    InMemoryUserRepository,
)
from .shared_kernel.infrastructure import ConsoleLogger, InMemoryRepository
from .shared_kernel.interfaces import ILogger
from .snapshot import SnapshotError

SNAPSHOT_FORMAT_VERSION = 1


class HotelUnitOfWork(ports.IHotelUnitOfWork):
    """Единица работы над реестром отеля."""

    def __init__(
        self,
        snapshot_store: Optional[ports.ISnapshotStore] = None,
        logger: Optional[ILogger] = None,
    ):
        self._repositories: Dict[str, InMemoryRepository] = {
            "roles": InMemoryRoleRepository(),
            "users": InMemoryUserRepository(),
            "room_types": InMemoryRoomTypeRepository(),
            "rooms": InMemoryRoomRepository(),
            "services": InMemoryServiceRepository(),
            "bookings": InMemoryBookingRepository(),
            "line_items": InMemoryLineItemRepository(),
            "payments": InMemoryPaymentRepository(),
        }
        self._snapshot_store = snapshot_store
        self._logger = logger or ConsoleLogger()
        self._lock = threading.RLock()
        self._depth = 0
        self._saved_state: Optional[Dict[str, Dict[str, Any]]] = None

    @property
    def roles(self) -> InMemoryRoleRepository:
        return self._repositories["roles"]

    @property
    def users(self) -> InMemoryUserRepository:
        return self._repositories["users"]

    @property
    def room_types(self) -> InMemoryRoomTypeRepository:
        return self._repositories["room_types"]

    @property
    def rooms(self) -> InMemoryRoomRepository:
        return self._repositories["rooms"]

    @property
    def services(self) -> InMemoryServiceRepository:
        return self._repositories["services"]

    @property
    def bookings(self) -> InMemoryBookingRepository:
        return self._repositories["bookings"]

    @property
    def line_items(self) -> InMemoryLineItemRepository:
        return self._repositories["line_items"]

    @property
    def payments(self) -> InMemoryPaymentRepository:
        return self._repositories["payments"]

    @property
    def in_transaction(self) -> bool:
        return self._depth > 0

    def commit(self) -> None:
        """Фиксирует все изменения и записывает снимок состояния."""
        if self._snapshot_store is not None:
            self._snapshot_store.save(self.to_document())
        self._saved_state = None
        self._logger.debug("HotelUnitOfWork committed")

    def rollback(self) -> None:
        """Откатывает все изменения текущей транзакции."""
        if self._saved_state is not None:
            for name, state in self._saved_state.items():
                self._repositories[name].restore(state)
        self._saved_state = None
        self._logger.warning("HotelUnitOfWork rolled back")

    @contextmanager
    def read(self) -> Iterator["HotelUnitOfWork"]:
        """Блокировка реестра для чтения без фиксации изменений."""
        with self._lock:
            yield self

    def __enter__(self) -> "HotelUnitOfWork":
        self._lock.acquire()
        if not self.in_transaction:
            self._saved_state = {
                name: repository.snapshot()
                for name, repository in self._repositories.items()
            }
        self._depth += 1
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        try:
            self._depth -= 1
            if not self.in_transaction:
                if exc_type is None:
                    try:
                        self.commit()
                    except Exception:
                        self.rollback()
                        raise
                else:
                    self.rollback()
        finally:
            self._lock.release()
        return False  # Пробрасываем исключение дальше, если оно было

    # Документ снимка

    def to_document(self) -> Dict[str, Any]:
        """Все коллекции реестра в виде одного JSON-совместимого документа."""
        document: Dict[str, Any] = {"format_version": SNAPSHOT_FORMAT_VERSION}
        for name, repository in self._repositories.items():
            document[name] = repository.dump()
        return document

    def load_document(self, document: Dict[str, Any]) -> None:
        """Заменяет содержимое реестра данными из снимка."""
        try:
            with self:
                for name, repository in self._repositories.items():
                    repository.load(document.get(name, {}))
        except (PydanticValidationError, TypeError, ValueError, AttributeError) as exc:
            raise SnapshotError(f"Некорректный документ снимка: {exc}") from exc
