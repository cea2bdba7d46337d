"""
Инфраструктурный слой контекста каталога.

Реализации репозиториев справочных данных в памяти.
"""

from typing import List, Optional

from ..shared_kernel import EntityId, RoleName
from ..shared_kernel.infrastructure import InMemoryRepository
from . import interfaces as ports
from .domain import Role, Room, RoomType, ServiceCatalogItem, User


class InMemoryRoomTypeRepository(InMemoryRepository[RoomType], ports.IRoomTypeRepository):
    """Реализация репозитория типов номеров в памяти."""

    model_class = RoomType
    entity_kind = "Тип номера"


class InMemoryRoomRepository(InMemoryRepository[Room], ports.IRoomRepository):
    """Реализация репозитория номеров в памяти."""

    model_class = Room
    entity_kind = "Номер"

    def find_by_type(self, type_id: EntityId) -> List[Room]:
        return [room for room in self.list() if room.type_id == type_id]

    def find_by_label(self, label: str) -> Optional[Room]:
        return next((room for room in self.list() if room.label == label), None)


class InMemoryServiceRepository(
    InMemoryRepository[ServiceCatalogItem], ports.IServiceRepository
):
    """Реализация репозитория дополнительных услуг в памяти."""

    model_class = ServiceCatalogItem
    entity_kind = "Услуга"


class InMemoryRoleRepository(InMemoryRepository[Role], ports.IRoleRepository):
    """Справочник ролей в памяти."""

    model_class = Role
    entity_kind = "Роль"

    def find_by_name(self, name: RoleName) -> Optional[Role]:
        return next((role for role in self.list() if role.name == name), None)


class InMemoryUserRepository(InMemoryRepository[User], ports.IUserRepository):
    """Реализация репозитория пользователей в памяти."""

    model_class = User
    entity_kind = "Пользователь"

    def find_by_email(self, email: str) -> Optional[User]:
        email = email.strip().lower()
        return next((user for user in self.list() if user.email.lower() == email), None)
