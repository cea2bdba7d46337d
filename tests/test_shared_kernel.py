"""
Тесты общего ядра: деньги, периоды проживания, репозитории и шина событий.
"""

from datetime import date, datetime
from decimal import Decimal

import pytest

from hotel_reservations.booking.domain import BookingCreated
from hotel_reservations.catalog.domain import RoomType
from hotel_reservations.catalog.infrastructure import InMemoryRoomTypeRepository
from hotel_reservations.shared_kernel import (
    BookingStatus,
    DateRange,
    Money,
    NotFoundError,
    RoleName,
    ValidationError,
    calculate_nights,
    ranges_overlap,
    to_money,
)
from hotel_reservations.shared_kernel.infrastructure import InMemoryEventBus


class TestCalculateNights:
    """Тесты расчета количества ночей."""

    def test_whole_days(self):
        assert calculate_nights(date(2025, 10, 5), date(2025, 10, 6)) == 1
        assert calculate_nights(date(2025, 10, 5), date(2025, 10, 7)) == 2

    def test_partial_day_rounds_up(self):
        check_in = datetime(2025, 10, 5, 10, 0)
        check_out = datetime(2025, 10, 6, 8, 0)

        assert calculate_nights(check_in, check_out) == 1

    def test_more_than_whole_days_rounds_up(self):
        check_in = datetime(2025, 10, 5, 12, 0)
        check_out = datetime(2025, 10, 7, 13, 0)

        assert calculate_nights(check_in, check_out) == 3

    @pytest.mark.parametrize(
        "check_in, check_out",
        [
            (date(2025, 10, 5), date(2025, 10, 5)),
            (date(2025, 10, 7), date(2025, 10, 5)),
        ],
    )
    def test_invalid_range(self, check_in, check_out):
        with pytest.raises(ValidationError):
            calculate_nights(check_in, check_out)

    def test_mixed_date_and_datetime(self):
        with pytest.raises(ValidationError):
            calculate_nights(date(2025, 10, 5), datetime(2025, 10, 7, 12, 0))


class TestRangesOverlap:
    """Тесты пересечения полуоткрытых интервалов."""

    def test_back_to_back_ranges_do_not_overlap(self):
        assert not ranges_overlap(
            date(2025, 10, 5), date(2025, 10, 7), date(2025, 10, 7), date(2025, 10, 9)
        )

    def test_partial_overlap(self):
        assert ranges_overlap(
            date(2025, 10, 5), date(2025, 10, 7), date(2025, 10, 6), date(2025, 10, 8)
        )

    def test_containment(self):
        assert ranges_overlap(
            date(2025, 10, 1), date(2025, 10, 10), date(2025, 10, 4), date(2025, 10, 5)
        )


class TestDateRange:
    """Тесты объекта-значения DateRange."""

    def test_nights_and_overlap(self):
        first = DateRange.of(date(2025, 10, 5), date(2025, 10, 7))
        second = DateRange.of(date(2025, 10, 6), date(2025, 10, 8))

        assert first.nights == 2
        assert first.overlaps(second)

    def test_check_out_before_check_in(self):
        with pytest.raises(ValidationError):
            DateRange.of(date(2025, 10, 7), date(2025, 10, 5))

    def test_missing_dates(self):
        with pytest.raises(ValidationError):
            DateRange.of(None, date(2025, 10, 5))

    def test_parses_iso_strings(self):
        period = DateRange.of("2025-10-05", "2025-10-06")

        assert period.check_in == date(2025, 10, 5)
        assert period.nights == 1


class TestMoney:
    """Тесты объекта-значения Money."""

    def test_arithmetic(self):
        rate = Money(amount=Decimal("500000"))

        assert (rate * 2).amount == Decimal("1000000")
        assert (rate + Money(amount=Decimal("100000"))).amount == Decimal("600000")
        assert Money.total([rate, rate, rate]).amount == Decimal("1500000")

    def test_different_currencies_cannot_be_added(self):
        with pytest.raises(ValueError):
            Money(amount=Decimal("1")) + Money(amount=Decimal("1"), currency="USD")

    def test_to_money_accepts_floats_exactly(self):
        assert to_money(0.1).amount == Decimal("0.1")

    def test_negative_amount_is_rejected(self):
        with pytest.raises(ValidationError):
            to_money(-1)


class TestEnums:
    def test_terminal_booking_statuses(self):
        assert BookingStatus.CHECKED_OUT.is_terminal
        assert BookingStatus.CANCELLED.is_terminal
        assert not BookingStatus.CHECKED_IN.is_terminal

    def test_manager_level_roles(self):
        assert RoleName.ADMIN.is_manager_level
        assert RoleName.MANAGER.is_manager_level
        assert not RoleName.STAFF.is_manager_level


class TestInMemoryRepository:
    """Тесты выдачи идентификаторов и отката состояния."""

    @staticmethod
    def _room_type(name: str) -> RoomType:
        return RoomType(name=name, capacity=2, base_rate=Money(amount=Decimal("1")))

    def test_ids_are_not_reused_after_delete(self):
        repo = InMemoryRoomTypeRepository()
        repo.add(self._room_type("A"))
        second = repo.add(self._room_type("B"))

        repo.delete(second.id)
        third = repo.add(self._room_type("C"))

        assert third.id == 3

    def test_get_missing_entity(self):
        repo = InMemoryRoomTypeRepository()

        with pytest.raises(NotFoundError):
            repo.get_by_id(42)
        assert repo.find_by_id(42) is None

    def test_snapshot_and_restore(self):
        repo = InMemoryRoomTypeRepository()
        repo.add(self._room_type("A"))
        state = repo.snapshot()

        repo.add(self._room_type("B"))
        repo.restore(state)

        assert [item.name for item in repo.list()] == ["A"]
        assert repo.next_id == 2

    def test_load_keeps_counter_above_stored_ids(self):
        repo = InMemoryRoomTypeRepository()
        repo.load(
            {
                "next_id": 2,
                "items": [
                    {"id": 7, "name": "A", "capacity": 2, "base_rate": {"amount": "1"}}
                ],
            }
        )

        assert repo.next_id == 8

    def test_dump_and_load(self):
        repo = InMemoryRoomTypeRepository()
        repo.add(self._room_type("A"))
        repo.add(self._room_type("B"))
        repo.delete(2)

        restored = InMemoryRoomTypeRepository()
        restored.load(repo.dump())

        assert [item.name for item in restored.list()] == ["A"]
        assert restored.next_id == 3


class TestInMemoryEventBus:
    """Тесты шины событий."""

    def _event(self) -> BookingCreated:
        return BookingCreated(
            booking_id=1,
            room_id=1,
            user_id=1,
            period=DateRange.of(date(2025, 10, 5), date(2025, 10, 7)),
        )

    def test_publish_to_subscribers(self):
        bus = InMemoryEventBus()
        received = []
        bus.subscribe(BookingCreated, received.append)

        event = self._event()
        bus.publish(event)

        assert received == [event]
        assert event.event_type == "BookingCreated"

    def test_handler_errors_are_propagated(self):
        bus = InMemoryEventBus()

        def failing_handler(event):
            raise RuntimeError("handler failed")

        bus.subscribe(BookingCreated, failing_handler)

        with pytest.raises(RuntimeError, match="handler failed"):
            bus.publish(self._event())
