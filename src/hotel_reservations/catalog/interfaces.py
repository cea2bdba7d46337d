"""
Интерфейсы (порты) для контекста каталога.
"""

from __future__ import annotations

from typing import List, Optional, Protocol

from ..shared_kernel import EntityId, RoleName
from ..shared_kernel.interfaces import IRepository
from .domain import Role, Room, RoomType, ServiceCatalogItem, User


class IRoomTypeRepository(IRepository[RoomType], Protocol):
    """Интерфейс репозитория типов номеров."""


class IRoomRepository(IRepository[Room], Protocol):
    """Интерфейс репозитория номеров."""

    def find_by_type(self, type_id: EntityId) -> List[Room]: ...
    def find_by_label(self, label: str) -> Optional[Room]: ...


class IServiceRepository(IRepository[ServiceCatalogItem], Protocol):
    """Интерфейс репозитория дополнительных услуг."""


class IRoleRepository(IRepository[Role], Protocol):
    """Интерфейс справочника ролей."""

    def find_by_name(self, name: RoleName) -> Optional[Role]: ...


class IUserRepository(IRepository[User], Protocol):
    """Интерфейс репозитория пользователей."""

    def find_by_email(self, email: str) -> Optional[User]: ...
