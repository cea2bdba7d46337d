"""
Демонстрационные данные отеля.

Используются при первом запуске, когда снимок состояния отсутствует
или поврежден.
"""

from datetime import date, datetime

from .accounting.domain import Payment
from .booking.application import refresh_booking_total
from .booking.domain import Booking, ServiceLineItem
from .catalog.domain import Role, Room, RoomType, ServiceCatalogItem, User
from .interfaces import IHotelUnitOfWork
from .shared_kernel import (
    BookingStatus,
    DateRange,
    Money,
    PaymentMethod,
    PaymentStatus,
    RoleName,
    RoomStatus,
)

ROLES = [
    (1, RoleName.ADMIN, "Quản trị hệ thống"),
    (2, RoleName.MANAGER, "Quản lý khách sạn"),
    (3, RoleName.STAFF, "Nhân viên lễ tân"),
    (4, RoleName.CUSTOMER, "Khách hàng"),
]

USERS = [
    (1, "Nguyễn Văn Admin", "admin@hotel.com", "0901234567", 1),
    (2, "Trần Thị Manager", "manager@hotel.com", "0912345678", 2),
    (3, "Lê Văn Staff", "staff@hotel.com", "0923456789", 3),
    (4, "Nguyễn Văn Khách", "customer@email.com", "0934567890", 4),
]

ROOM_TYPES = [
    (1, "Phòng Standard", "Phòng tiêu chuẩn", 2, 500000),
    (2, "Phòng Deluxe", "Phòng cao cấp", 4, 800000),
    (3, "Phòng Suite", "Phòng hạng sang", 3, 1200000),
]

ROOMS = [
    (1, 1, "101", RoomStatus.AVAILABLE, "TV, WiFi, Điều hòa"),
    (2, 1, "102", RoomStatus.AVAILABLE, "TV, WiFi, Điều hòa"),
    (3, 2, "201", RoomStatus.AVAILABLE, "TV, WiFi, Điều hòa, Minibar"),
    (4, 2, "202", RoomStatus.MAINTENANCE, "TV, WiFi, Điều hòa, Minibar"),
    (5, 3, "301", RoomStatus.AVAILABLE, "TV, WiFi, Điều hòa, Minibar, View"),
]

SERVICES = [
    (1, "Bữa sáng", "Buffet sáng", 100000),
    (2, "Đón sân bay", "Dịch vụ đón tiễn sân bay", 200000),
    (3, "Spa", "Dịch vụ spa và massage", 500000),
    (4, "Giặt ủi", "Dịch vụ giặt ủi", 80000),
]


def seed_sample_data(uow: IHotelUnitOfWork) -> None:
    """Заполняет пустой реестр демонстрационными данными."""
    with uow:
        for role_id, name, description in ROLES:
            uow.roles.add(Role(id=role_id, name=name, description=description))

        for user_id, full_name, email, phone, role_id in USERS:
            uow.users.add(
                User(
                    id=user_id,
                    full_name=full_name,
                    email=email,
                    phone=phone,
                    address="Hà Nội",
                    role_id=role_id,
                )
            )

        for type_id, name, description, capacity, rate in ROOM_TYPES:
            uow.room_types.add(
                RoomType(
                    id=type_id,
                    name=name,
                    description=description,
                    capacity=capacity,
                    base_rate=Money(amount=rate),
                )
            )

        for room_id, type_id, label, status, features in ROOMS:
            uow.rooms.add(
                Room(id=room_id, type_id=type_id, label=label, status=status, features=features)
            )

        for service_id, name, description, price in SERVICES:
            uow.services.add(
                ServiceCatalogItem(
                    id=service_id,
                    name=name,
                    description=description,
                    unit_price=Money(amount=price),
                )
            )

        booking = Booking(
            id=1,
            user_id=4,
            room_id=1,
            period=DateRange(check_in=date(2025, 10, 5), check_out=date(2025, 10, 7)),
            guests=2,
            status=BookingStatus.CONFIRMED,
            created_at=datetime(2025, 10, 1, 9, 0),
            updated_at=datetime(2025, 10, 2, 9, 0),
        )
        uow.bookings.add(booking)
        uow.line_items.add(
            ServiceLineItem(
                id=1,
                booking_id=1,
                service_id=1,
                quantity=2,
                line_total=Money(amount=200000),
            )
        )
        # 2 ночи x 500 000 + завтрак 2 x 100 000
        refresh_booking_total(uow, booking)

        uow.payments.add(
            Payment(
                id=1,
                booking_id=1,
                amount=Money(amount=1000000),
                method=PaymentMethod.CREDIT_CARD,
                payment_date=date(2025, 10, 2),
                status=PaymentStatus.PAID,
            )
        )
