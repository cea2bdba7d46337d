"""
Инфраструктура общего ядра.

Базовый репозиторий в памяти, логгер и шина событий, которые используют
все контексты.
"""

import copy
import json
import logging
from typing import Any, Callable, Dict, Generic, List, Optional, Type, TypeVar

from pydantic import BaseModel

from .domain import DomainEvent, EntityId, NotFoundError
from . import interfaces as ports

T = TypeVar("T", bound=BaseModel)

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def configure_logging(level: str = "INFO", logger_name: str = "hotel_reservations") -> None:
    """Настраивает вывод журнала приложения в консоль."""
    logger = logging.getLogger(logger_name)
    logger.setLevel(level.upper())
    if logger.handlers:
        return
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    logger.addHandler(handler)


class ConsoleLogger(ports.ILogger):
    """Логгер поверх стандартного logging, дописывающий контекст в JSON."""

    def __init__(self, name: str = "hotel_reservations"):
        self._logger = logging.getLogger(name)

    def _log(self, level: int, message: str, **kwargs: Any) -> None:
        if kwargs:
            context = json.dumps(kwargs, default=str, ensure_ascii=False, sort_keys=True)
            message = f"{message} | {context}"
        self._logger.log(level, message)

    def info(self, message: str, **kwargs: Any) -> None:
        self._log(logging.INFO, message, **kwargs)

    def error(self, message: str, **kwargs: Any) -> None:
        self._log(logging.ERROR, message, **kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        self._log(logging.WARNING, message, **kwargs)

    def debug(self, message: str, **kwargs: Any) -> None:
        self._log(logging.DEBUG, message, **kwargs)


class InMemoryEventBus(ports.IEventBus):
    """Синхронная шина событий в памяти."""

    def __init__(self, logger: Optional[ports.ILogger] = None):
        self._subscribers: Dict[Type[DomainEvent], List[Callable[[Any], None]]] = {}
        self._logger = logger or ConsoleLogger()

    def publish(self, event: DomainEvent) -> None:
        """Публикует событие всем подписчикам его типа."""
        event_type = type(event)
        handlers = self._subscribers.get(event_type, [])
        if not handlers:
            self._logger.debug(f"No subscribers for event type {event_type.__name__}")
            return

        self._logger.info(
            f"Publishing event: {event_type.__name__}", event=event.model_dump(mode="json")
        )

        for handler in handlers:
            try:
                handler(event)
            except Exception as e:
                self._logger.error(
                    f"Error in event handler for {event_type.__name__}",
                    error=str(e),
                    event=event.model_dump(mode="json"),
                )
                raise

    def subscribe(self, event_type: Type[DomainEvent], handler: Callable[[Any], None]) -> None:
        """Подписывает обработчик на события указанного типа."""
        self._subscribers.setdefault(event_type, []).append(handler)
        self._logger.debug(f"Subscribed handler to {event_type.__name__} events")


class InMemoryRepository(Generic[T]):
    """
    Базовый репозиторий в памяти.

    Каждый репозиторий хранит собственный счетчик идентификаторов:
    следующий ID равен максимальному выданному плюс один и не
    переиспользуется после удаления.
    """

    model_class: Type[T]
    entity_kind: str = "Сущность"

    def __init__(self) -> None:
        self._items: Dict[EntityId, T] = {}
        self._next_id: EntityId = 1

    @property
    def next_id(self) -> EntityId:
        return self._next_id

    def _allocate_id(self) -> EntityId:
        entity_id = self._next_id
        self._next_id += 1
        return entity_id

    def add(self, entity: T) -> T:
        if entity.id is None:
            entity.id = self._allocate_id()
        elif entity.id in self._items:
            raise ValueError(f"{self.entity_kind} с ID {entity.id} уже существует")
        else:
            self._next_id = max(self._next_id, entity.id + 1)
        self._items[entity.id] = entity
        return entity

    def get_by_id(self, entity_id: EntityId) -> T:
        if entity_id not in self._items:
            raise NotFoundError(self.entity_kind, entity_id)
        return self._items[entity_id]

    def find_by_id(self, entity_id: EntityId) -> Optional[T]:
        return self._items.get(entity_id)

    def update(self, entity: T) -> None:
        if entity.id not in self._items:
            raise NotFoundError(self.entity_kind, entity.id)
        self._items[entity.id] = entity

    def delete(self, entity_id: EntityId) -> None:
        if entity_id not in self._items:
            raise NotFoundError(self.entity_kind, entity_id)
        del self._items[entity_id]

    def list(self) -> List[T]:
        return [self._items[key] for key in sorted(self._items)]

    # Откат транзакций

    def snapshot(self) -> Dict[str, Any]:
        return {"next_id": self._next_id, "items": copy.deepcopy(self._items)}

    def restore(self, state: Dict[str, Any]) -> None:
        self._items = state["items"]
        self._next_id = state["next_id"]

    # Сериализация в документ снимка

    def dump(self) -> Dict[str, Any]:
        return {
            "next_id": self._next_id,
            "items": [item.model_dump(mode="json") for item in self.list()],
        }

    def load(self, document: Dict[str, Any]) -> None:
        items = [self.model_class.model_validate(raw) for raw in document.get("items", [])]
        self._items = {item.id: item for item in items}
        highest = max(self._items, default=0)
        self._next_id = max(int(document.get("next_id", 1)), highest + 1)
