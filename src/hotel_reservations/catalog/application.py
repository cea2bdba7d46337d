"""
Прикладной слой контекста каталога.

Управление справочными данными отеля. Удаление запрещено, пока на
сущность ссылаются действующие бронирования или позиции услуг.
"""

from typing import Any, Dict, List, Optional

from ..interfaces import IHotelUnitOfWork
from ..shared_kernel import (
    EntityId,
    ReferentialIntegrityError,
    RoleName,
    RoomStatus,
    ValidationError,
    build_model,
    to_money,
)
from ..shared_kernel.domain import MoneyLike
from ..shared_kernel.infrastructure import ConsoleLogger
from ..shared_kernel.interfaces import ILogger
from .domain import Role, Room, RoomType, ServiceCatalogItem, User


def _merge(entity: Any, changes: Dict[str, Any]) -> Dict[str, Any]:
    """Данные сущности с примененными изменениями (None означает «не менять»)."""
    data = entity.model_dump()
    data.update({key: value for key, value in changes.items() if value is not None})
    return data


class CatalogApplicationService:
    """Сервис приложения для работы со справочными данными."""

    def __init__(self, uow: IHotelUnitOfWork, logger: Optional[ILogger] = None):
        """Инициализирует сервис."""
        self._uow = uow
        self._logger = logger or ConsoleLogger()

    # Типы номеров

    def add_room_type(
        self,
        name: str,
        capacity: int,
        base_rate: MoneyLike,
        description: str = "",
    ) -> RoomType:
        """Добавляет тип номера."""
        room_type = build_model(
            RoomType,
            name=name,
            description=description,
            capacity=capacity,
            base_rate=to_money(base_rate),
        )
        with self._uow:
            self._uow.room_types.add(room_type)
        self._logger.info("Room type added", room_type_id=room_type.id, name=room_type.name)
        return room_type.model_copy(deep=True)

    def update_room_type(
        self,
        type_id: EntityId,
        name: Optional[str] = None,
        description: Optional[str] = None,
        capacity: Optional[int] = None,
        base_rate: Optional[MoneyLike] = None,
    ) -> RoomType:
        """Изменяет тип номера."""
        with self._uow:
            current = self._uow.room_types.get_by_id(type_id)
            updated = build_model(
                RoomType,
                **_merge(
                    current,
                    {
                        "name": name,
                        "description": description,
                        "capacity": capacity,
                        "base_rate": to_money(base_rate) if base_rate is not None else None,
                    },
                ),
            )
            self._uow.room_types.update(updated)
        return updated.model_copy(deep=True)

    def rooms_referencing_type(self, type_id: EntityId) -> List[Room]:
        """Номера, относящиеся к данному типу."""
        with self._uow.read():
            self._uow.room_types.get_by_id(type_id)
            return [room.model_copy(deep=True) for room in self._uow.rooms.find_by_type(type_id)]

    def delete_room_type(self, type_id: EntityId) -> None:
        """Удаляет тип номера, если к нему не привязан ни один номер."""
        with self._uow:
            self._uow.room_types.get_by_id(type_id)
            rooms = self._uow.rooms.find_by_type(type_id)
            if rooms:
                raise ReferentialIntegrityError(
                    f"Невозможно удалить тип номера {type_id}: "
                    f"к нему привязаны номера {', '.join(room.label for room in rooms)}",
                    reference_kind="room",
                )
            self._uow.room_types.delete(type_id)
        self._logger.info("Room type deleted", room_type_id=type_id)

    def get_room_type(self, type_id: EntityId) -> RoomType:
        with self._uow.read():
            return self._uow.room_types.get_by_id(type_id).model_copy(deep=True)

    def list_room_types(self) -> List[RoomType]:
        with self._uow.read():
            return [item.model_copy(deep=True) for item in self._uow.room_types.list()]

    # Номера

    def add_room(
        self,
        type_id: EntityId,
        label: str,
        status: RoomStatus = RoomStatus.AVAILABLE,
        features: str = "",
    ) -> Room:
        """Добавляет номер."""
        room = build_model(Room, type_id=type_id, label=label, status=status, features=features)
        with self._uow:
            self._uow.room_types.get_by_id(type_id)
            self._ensure_unique_label(room.label)
            self._uow.rooms.add(room)
        self._logger.info("Room added", room_id=room.id, label=room.label)
        return room.model_copy(deep=True)

    def update_room(
        self,
        room_id: EntityId,
        type_id: Optional[EntityId] = None,
        label: Optional[str] = None,
        status: Optional[RoomStatus] = None,
        features: Optional[str] = None,
    ) -> Room:
        """Изменяет номер."""
        with self._uow:
            current = self._uow.rooms.get_by_id(room_id)
            updated = build_model(
                Room,
                **_merge(
                    current,
                    {"type_id": type_id, "label": label, "status": status, "features": features},
                ),
            )
            self._uow.room_types.get_by_id(updated.type_id)
            if updated.label != current.label:
                self._ensure_unique_label(updated.label)
            self._uow.rooms.update(updated)
        return updated.model_copy(deep=True)

    def set_room_status(self, room_id: EntityId, status: RoomStatus) -> Room:
        """Меняет статус номера (уборка, ремонт и т.д.)."""
        return self.update_room(room_id, status=status)

    def delete_room(self, room_id: EntityId) -> None:
        """Удаляет номер, если на него нет действующих бронирований."""
        with self._uow:
            self._uow.rooms.get_by_id(room_id)
            active = [b for b in self._uow.bookings.find_by_room(room_id) if b.is_active()]
            if active:
                raise ReferentialIntegrityError(
                    f"Невозможно удалить номер {room_id}: есть действующие бронирования "
                    f"({', '.join(str(b.id) for b in active)})",
                    reference_kind="booking",
                )
            self._uow.rooms.delete(room_id)
        self._logger.info("Room deleted", room_id=room_id)

    def get_room(self, room_id: EntityId) -> Room:
        with self._uow.read():
            return self._uow.rooms.get_by_id(room_id).model_copy(deep=True)

    def list_rooms(self, status: Optional[RoomStatus] = None) -> List[Room]:
        with self._uow.read():
            return [
                room.model_copy(deep=True)
                for room in self._uow.rooms.list()
                if status is None or room.status == status
            ]

    def _ensure_unique_label(self, label: str) -> None:
        if self._uow.rooms.find_by_label(label) is not None:
            raise ValidationError(f"Номер {label} уже существует")

    # Дополнительные услуги

    def add_service(
        self, name: str, unit_price: MoneyLike, description: str = ""
    ) -> ServiceCatalogItem:
        """Добавляет услугу в каталог."""
        service = build_model(
            ServiceCatalogItem,
            name=name,
            description=description,
            unit_price=to_money(unit_price),
        )
        with self._uow:
            self._uow.services.add(service)
        self._logger.info("Service added", service_id=service.id, name=service.name)
        return service.model_copy(deep=True)

    def update_service(
        self,
        service_id: EntityId,
        name: Optional[str] = None,
        description: Optional[str] = None,
        unit_price: Optional[MoneyLike] = None,
    ) -> ServiceCatalogItem:
        """
        Изменяет услугу.

        Уже добавленные в бронирования позиции сохраняют прежнюю цену.
        """
        with self._uow:
            current = self._uow.services.get_by_id(service_id)
            updated = build_model(
                ServiceCatalogItem,
                **_merge(
                    current,
                    {
                        "name": name,
                        "description": description,
                        "unit_price": to_money(unit_price) if unit_price is not None else None,
                    },
                ),
            )
            self._uow.services.update(updated)
        return updated.model_copy(deep=True)

    def delete_service(self, service_id: EntityId) -> None:
        """Удаляет услугу, если она не используется ни в одном бронировании."""
        with self._uow:
            self._uow.services.get_by_id(service_id)
            if self._uow.line_items.find_by_service(service_id):
                raise ReferentialIntegrityError(
                    f"Невозможно удалить услугу {service_id}: "
                    f"она используется в бронированиях",
                    reference_kind="service line item",
                )
            self._uow.services.delete(service_id)
        self._logger.info("Service deleted", service_id=service_id)

    def get_service(self, service_id: EntityId) -> ServiceCatalogItem:
        with self._uow.read():
            return self._uow.services.get_by_id(service_id).model_copy(deep=True)

    def list_services(self) -> List[ServiceCatalogItem]:
        with self._uow.read():
            return [item.model_copy(deep=True) for item in self._uow.services.list()]

    # Роли и пользователи

    def add_role(self, name: RoleName, description: str = "") -> Role:
        role = build_model(Role, name=name, description=description)
        with self._uow:
            if self._uow.roles.find_by_name(role.name) is not None:
                raise ValidationError(f"Роль {role.name.value} уже существует")
            self._uow.roles.add(role)
        return role.model_copy(deep=True)

    def list_roles(self) -> List[Role]:
        with self._uow.read():
            return [role.model_copy(deep=True) for role in self._uow.roles.list()]

    def register_user(
        self,
        full_name: str,
        email: str,
        phone: str = "",
        address: str = "",
        role: RoleName = RoleName.CUSTOMER,
    ) -> User:
        """Регистрирует пользователя с уникальным email."""
        with self._uow:
            role_entity = self._get_role(role)
            user = build_model(
                User,
                full_name=full_name,
                email=email,
                phone=phone,
                address=address,
                role_id=role_entity.id,
            )
            if self._uow.users.find_by_email(user.email) is not None:
                raise ValidationError(f"Пользователь с email {user.email} уже зарегистрирован")
            self._uow.users.add(user)
        self._logger.info("User registered", user_id=user.id, role=role_entity.name.value)
        return user.model_copy(deep=True)

    def update_user(
        self,
        user_id: EntityId,
        full_name: Optional[str] = None,
        email: Optional[str] = None,
        phone: Optional[str] = None,
        address: Optional[str] = None,
        role: Optional[RoleName] = None,
    ) -> User:
        """Изменяет данные пользователя."""
        with self._uow:
            current = self._uow.users.get_by_id(user_id)
            role_id = self._get_role(role).id if role is not None else None
            updated = build_model(
                User,
                **_merge(
                    current,
                    {
                        "full_name": full_name,
                        "email": email,
                        "phone": phone,
                        "address": address,
                        "role_id": role_id,
                    },
                ),
            )
            owner = self._uow.users.find_by_email(updated.email)
            if owner is not None and owner.id != user_id:
                raise ValidationError(f"Пользователь с email {updated.email} уже зарегистрирован")
            self._uow.users.update(updated)
        return updated.model_copy(deep=True)

    def delete_user(self, user_id: EntityId) -> None:
        """Удаляет пользователя, если у него нет действующих бронирований."""
        with self._uow:
            self._uow.users.get_by_id(user_id)
            active = [b for b in self._uow.bookings.find_by_user(user_id) if b.is_active()]
            if active:
                raise ReferentialIntegrityError(
                    f"Невозможно удалить пользователя {user_id}: есть действующие бронирования",
                    reference_kind="booking",
                )
            self._uow.users.delete(user_id)
        self._logger.info("User deleted", user_id=user_id)

    def get_user(self, user_id: EntityId) -> User:
        with self._uow.read():
            return self._uow.users.get_by_id(user_id).model_copy(deep=True)

    def list_users(self) -> List[User]:
        with self._uow.read():
            return [user.model_copy(deep=True) for user in self._uow.users.list()]

    def _get_role(self, name: RoleName) -> Role:
        try:
            name = RoleName(name)
        except ValueError:
            raise ValidationError(f"Неизвестная роль: {name}") from None
        role = self._uow.roles.find_by_name(name)
        if role is None:
            raise ValidationError(f"Роль {name.value} не найдена в справочнике")
        return role
