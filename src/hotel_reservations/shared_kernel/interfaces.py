"""
Интерфейсы (порты), общие для всех контекстов.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, List, Optional, Protocol, Type, TypeVar

from .domain import DomainEvent, EntityId

T_Event = TypeVar("T_Event", bound=DomainEvent)
T_Entity = TypeVar("T_Entity")


class ILogger(Protocol):
    """Интерфейс для логгера."""

    def info(self, message: str, **kwargs: Any) -> None: ...
    def error(self, message: str, **kwargs: Any) -> None: ...
    def warning(self, message: str, **kwargs: Any) -> None: ...
    def debug(self, message: str, **kwargs: Any) -> None: ...


class IEventBus(Protocol):
    """Интерфейс для шины событий."""

    def publish(self, event: DomainEvent) -> None: ...
    def subscribe(
        self, event_type: Type[T_Event], handler: Callable[[T_Event], None]
    ) -> None: ...


class IRepository(Protocol[T_Entity]):
    """Общий интерфейс репозитория сущностей с целочисленными ID."""

    def add(self, entity: T_Entity) -> T_Entity: ...
    def get_by_id(self, entity_id: EntityId) -> T_Entity: ...
    def find_by_id(self, entity_id: EntityId) -> Optional[T_Entity]: ...
    def update(self, entity: T_Entity) -> None: ...
    def delete(self, entity_id: EntityId) -> None: ...
    def list(self) -> List[T_Entity]: ...
    def snapshot(self) -> Dict[str, Any]: ...
    def restore(self, state: Dict[str, Any]) -> None: ...
