"""
Общие фикстуры для тестов системы бронирования.

Каталог тестового отеля:
- типы номеров: 1 Standard (2 гостя, 500 000), 2 Deluxe (4 гостя, 800 000);
- номера: 1 "101" и 2 "102" (Standard), 3 "201" и 4 "202" (Deluxe, на ремонте);
- услуги: 1 завтрак (100 000), 2 спа (500 000);
- пользователи: 1 и 2 гости, 3 менеджер, 4 сотрудник.
"""

from datetime import date

import pytest

from hotel_reservations.bootstrap import HotelApplication, bootstrap_app
from hotel_reservations.config import Settings
from hotel_reservations.shared_kernel import RoleName, RoomStatus

CHECK_IN = date(2025, 10, 5)
CHECK_OUT = date(2025, 10, 7)


@pytest.fixture
def settings() -> Settings:
    """Настройки без снимка на диске и без демонстрационных данных."""
    return Settings(snapshot_path=None, seed_sample_data=False, log_level="DEBUG")


@pytest.fixture
def empty_app(settings: Settings) -> HotelApplication:
    """Приложение с пустым реестром."""
    return bootstrap_app(settings=settings)


@pytest.fixture
def app(empty_app: HotelApplication) -> HotelApplication:
    """Приложение с заполненным тестовым каталогом."""
    catalog = empty_app.catalog
    for role in (RoleName.ADMIN, RoleName.MANAGER, RoleName.STAFF, RoleName.CUSTOMER):
        catalog.add_role(role)

    catalog.add_room_type("Standard", capacity=2, base_rate=500000)
    catalog.add_room_type("Deluxe", capacity=4, base_rate=800000)

    catalog.add_room(type_id=1, label="101")
    catalog.add_room(type_id=1, label="102")
    catalog.add_room(type_id=2, label="201")
    catalog.add_room(type_id=2, label="202", status=RoomStatus.MAINTENANCE)

    catalog.add_service("Завтрак", unit_price=100000)
    catalog.add_service("Спа", unit_price=500000)

    catalog.register_user("Иван Иванов", "ivan@example.com")
    catalog.register_user("Петр Петров", "petr@example.com")
    catalog.register_user("Мария Менеджер", "manager@example.com", role=RoleName.MANAGER)
    catalog.register_user("Сергей Сотрудник", "staff@example.com", role=RoleName.STAFF)
    return empty_app


@pytest.fixture
def booking(app: HotelApplication):
    """Бронирование номера 101 с 5 по 7 октября 2025 года гостем 1."""
    return app.bookings.create_booking(
        user_id=1, room_id=1, check_in=CHECK_IN, check_out=CHECK_OUT, guests=2
    )


@pytest.fixture
def recorded_events(app: HotelApplication):
    """Подписывается на события и возвращает список полученных событий."""
    from hotel_reservations.accounting.domain import PaymentRecorded
    from hotel_reservations.booking.domain import (
        BookingCancelled,
        BookingCreated,
        BookingRescheduled,
        BookingStatusChanged,
        ServiceAttached,
        ServiceDetached,
    )

    events = []
    for event_type in (
        BookingCreated,
        BookingStatusChanged,
        BookingCancelled,
        BookingRescheduled,
        ServiceAttached,
        ServiceDetached,
        PaymentRecorded,
    ):
        app.event_bus.subscribe(event_type, events.append)
    return events
