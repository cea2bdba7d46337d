"""
Тесты контекста каталога: справочники и защита ссылочной целостности.
"""

from decimal import Decimal

import pytest

from hotel_reservations.shared_kernel import (
    NotFoundError,
    ReferentialIntegrityError,
    RoleName,
    RoomStatus,
    ValidationError,
)


class TestRoomTypes:
    """Тесты типов номеров."""

    def test_add_room_type(self, empty_app):
        room_type = empty_app.catalog.add_room_type(
            "Suite", capacity=3, base_rate="1200000", description="Люкс"
        )

        assert room_type.id == 1
        assert room_type.base_rate.amount == Decimal("1200000")
        assert empty_app.catalog.list_room_types() == [room_type]

    @pytest.mark.parametrize(
        "name, capacity, base_rate",
        [("", 2, 100), ("Standard", 0, 100), ("Standard", 2, -5)],
    )
    def test_invalid_room_type(self, empty_app, name, capacity, base_rate):
        with pytest.raises(ValidationError):
            empty_app.catalog.add_room_type(name, capacity=capacity, base_rate=base_rate)
        assert empty_app.catalog.list_room_types() == []

    def test_update_room_type_keeps_unchanged_fields(self, app):
        updated = app.catalog.update_room_type(1, base_rate=550000)

        assert updated.name == "Standard"
        assert updated.capacity == 2
        assert updated.base_rate.amount == Decimal("550000")

    def test_delete_room_type_with_rooms_is_blocked(self, app):
        with pytest.raises(ReferentialIntegrityError) as exc_info:
            app.catalog.delete_room_type(1)

        assert exc_info.value.reference_kind == "room"
        assert [room.label for room in app.catalog.rooms_referencing_type(1)] == ["101", "102"]
        assert app.catalog.get_room_type(1).name == "Standard"

    def test_delete_unused_room_type(self, app):
        unused = app.catalog.add_room_type("Economy", capacity=1, base_rate=300000)

        app.catalog.delete_room_type(unused.id)

        with pytest.raises(NotFoundError):
            app.catalog.get_room_type(unused.id)


class TestRooms:
    """Тесты номеров."""

    def test_add_room_with_unknown_type(self, app):
        with pytest.raises(NotFoundError):
            app.catalog.add_room(type_id=99, label="999")

    def test_room_labels_are_unique(self, app):
        with pytest.raises(ValidationError):
            app.catalog.add_room(type_id=1, label="101")

    def test_list_rooms_by_status(self, app):
        rooms = app.catalog.list_rooms(status=RoomStatus.MAINTENANCE)

        assert [room.label for room in rooms] == ["202"]

    def test_set_room_status(self, app):
        room = app.catalog.set_room_status(4, RoomStatus.AVAILABLE)

        assert room.status == RoomStatus.AVAILABLE
        assert app.catalog.get_room(4).status == RoomStatus.AVAILABLE

    def test_returned_room_is_a_copy(self, app):
        room = app.catalog.get_room(1)
        room.label = "изменено"

        assert app.catalog.get_room(1).label == "101"

    def test_delete_room_with_active_booking_is_blocked(self, app, booking):
        with pytest.raises(ReferentialIntegrityError) as exc_info:
            app.catalog.delete_room(1)

        assert exc_info.value.reference_kind == "booking"
        assert app.catalog.get_room(1).label == "101"

    def test_delete_room_after_cancellation(self, app, booking):
        app.bookings.cancel_booking(booking.id, actor_id=1)

        app.catalog.delete_room(1)

        with pytest.raises(NotFoundError):
            app.catalog.get_room(1)

    def test_cancelled_booking_keeps_stored_total_after_room_deleted(self, app, booking):
        app.bookings.cancel_booking(booking.id, actor_id=1)
        app.catalog.delete_room(1)

        assert app.bookings.get_booking(booking.id).total_amount.amount == Decimal("1000000")


class TestServices:
    """Тесты каталога услуг."""

    def test_delete_service_in_use_is_blocked(self, app, booking):
        app.attachments.attach(booking.id, service_id=1, quantity=1)

        with pytest.raises(ReferentialIntegrityError) as exc_info:
            app.catalog.delete_service(1)

        assert exc_info.value.reference_kind == "service line item"

    def test_delete_unused_service(self, app):
        app.catalog.delete_service(2)

        assert [service.id for service in app.catalog.list_services()] == [1]

    def test_price_change_does_not_affect_captured_line_items(self, app, booking):
        line_item = app.attachments.attach(booking.id, service_id=1, quantity=2)

        app.catalog.update_service(1, unit_price=150000)

        assert app.attachments.list_line_items(booking.id) == [line_item]
        assert app.bookings.get_booking(booking.id).total_amount.amount == Decimal("1200000")


class TestUsers:
    """Тесты регистрации и удаления пользователей."""

    def test_register_user_defaults_to_customer(self, app):
        user = app.catalog.register_user("Анна", "anna@example.com", phone="0901234567")

        customer_role = next(
            role for role in app.catalog.list_roles() if role.name == RoleName.CUSTOMER
        )
        assert user.id == 5
        assert user.role_id == customer_role.id

    def test_duplicate_email_is_rejected(self, app):
        with pytest.raises(ValidationError):
            app.catalog.register_user("Двойник", "IVAN@example.com")

        assert len(app.catalog.list_users()) == 4

    def test_invalid_email(self, app):
        with pytest.raises(ValidationError):
            app.catalog.register_user("Без почты", "not-an-email")

    def test_unknown_role(self, empty_app):
        with pytest.raises(ValidationError):
            empty_app.catalog.register_user("Анна", "anna@example.com")

    def test_update_user_email_must_stay_unique(self, app):
        with pytest.raises(ValidationError):
            app.catalog.update_user(2, email="ivan@example.com")

        assert app.catalog.update_user(2, phone="0999").phone == "0999"

    def test_delete_user_with_active_booking_is_blocked(self, app, booking):
        with pytest.raises(ReferentialIntegrityError):
            app.catalog.delete_user(1)

    def test_delete_user_without_bookings(self, app):
        app.catalog.delete_user(2)

        assert [user.id for user in app.catalog.list_users()] == [1, 3, 4]
