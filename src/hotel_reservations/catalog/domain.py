"""
Доменная модель каталога.

Справочные данные отеля: типы номеров, номера, дополнительные услуги,
а также справочники ролей и пользователей.
"""

from typing import Optional

from pydantic import BaseModel, Field, field_validator

from ..shared_kernel import EntityId, Money, RoleName, RoomStatus


def _required_text(value: str) -> str:
    value = (value or "").strip()
    if not value:
        raise ValueError("Поле не может быть пустым")
    return value


class RoomType(BaseModel):
    """Тип номера: вместимость и базовая цена за ночь."""

    id: Optional[EntityId] = None
    name: str
    description: str = ""
    capacity: int = Field(..., gt=0)  # Максимальное число гостей
    base_rate: Money

    @field_validator("name")
    @classmethod
    def check_name(cls, v: str) -> str:
        return _required_text(v)


class Room(BaseModel):
    """Номер в отеле."""

    id: Optional[EntityId] = None
    type_id: EntityId
    label: str  # Номер комнаты (например, "101", "202A")
    status: RoomStatus = RoomStatus.AVAILABLE
    features: str = ""  # Удобства через запятую

    @field_validator("label")
    @classmethod
    def check_label(cls, v: str) -> str:
        return _required_text(v)

    @property
    def is_bookable(self) -> bool:
        """Номер можно предлагать к бронированию."""
        return self.status == RoomStatus.AVAILABLE


class ServiceCatalogItem(BaseModel):
    """Дополнительная услуга (завтрак, трансфер, спа и т.д.)."""

    id: Optional[EntityId] = None
    name: str
    description: str = ""
    unit_price: Money

    @field_validator("name")
    @classmethod
    def check_name(cls, v: str) -> str:
        return _required_text(v)


class Role(BaseModel):
    """Роль пользователя."""

    id: Optional[EntityId] = None
    name: RoleName
    description: str = ""


class User(BaseModel):
    """Пользователь системы (гость или сотрудник)."""

    id: Optional[EntityId] = None
    full_name: str
    email: str
    phone: str = ""
    address: str = ""
    role_id: EntityId

    @field_validator("full_name")
    @classmethod
    def check_full_name(cls, v: str) -> str:
        return _required_text(v)

    @field_validator("email")
    @classmethod
    def check_email(cls, v: str) -> str:
        v = _required_text(v)
        if "@" not in v:
            raise ValueError("Некорректный email")
        return v
