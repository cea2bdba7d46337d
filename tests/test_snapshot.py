"""
Тесты снимка состояния, единицы работы и демонстрационных данных.
"""

import json
from datetime import date
from decimal import Decimal

import pytest

from hotel_reservations.bootstrap import bootstrap_app
from hotel_reservations.catalog.domain import Role
from hotel_reservations.config import Settings
from hotel_reservations.shared_kernel import BookingStatus, ConflictError, PaymentStatus, RoleName
from hotel_reservations.snapshot import JsonSnapshotStore, SnapshotError
from hotel_reservations.unit_of_work import HotelUnitOfWork


@pytest.fixture
def snapshot_path(tmp_path):
    return tmp_path / "hotel.json"


@pytest.fixture
def persistent_settings(snapshot_path) -> Settings:
    return Settings(snapshot_path=snapshot_path, seed_sample_data=True)


class TestJsonSnapshotStore:
    """Тесты файлового хранилища снимка."""

    def test_missing_file(self, snapshot_path):
        assert JsonSnapshotStore(snapshot_path).load() is None

    def test_empty_file(self, snapshot_path):
        snapshot_path.write_text("  \n", encoding="utf-8")

        assert JsonSnapshotStore(snapshot_path).load() is None

    @pytest.mark.parametrize("content", ["{not json", "[1, 2, 3]"])
    def test_unreadable_file(self, snapshot_path, content):
        snapshot_path.write_text(content, encoding="utf-8")

        with pytest.raises(SnapshotError):
            JsonSnapshotStore(snapshot_path).load()

    def test_save_and_load(self, tmp_path):
        store = JsonSnapshotStore(tmp_path / "nested" / "state.json")

        store.save({"format_version": 1, "rooms": {"next_id": 1, "items": []}})

        assert store.load() == {"format_version": 1, "rooms": {"next_id": 1, "items": []}}
        assert [p.name for p in store.file_path.parent.iterdir()] == ["state.json"]


class TestSampleData:
    """Тесты демонстрационных данных."""

    def test_sample_data_is_seeded(self):
        app = bootstrap_app(settings=Settings(snapshot_path=None, seed_sample_data=True))

        assert len(app.catalog.list_roles()) == 4
        assert len(app.catalog.list_users()) == 4
        assert [room.label for room in app.catalog.list_rooms()] == ["101", "102", "201", "202", "301"]
        assert len(app.catalog.list_services()) == 4

        booking = app.bookings.get_booking(1)
        assert booking.status == BookingStatus.CONFIRMED
        # 2 ночи x 500 000 + завтрак 2 x 100 000
        assert booking.total_amount.amount == Decimal("1200000")
        assert app.payments.get_payment(1).status == PaymentStatus.PAID

    def test_sample_booking_blocks_its_room(self):
        app = bootstrap_app(settings=Settings(snapshot_path=None, seed_sample_data=True))

        with pytest.raises(ConflictError):
            app.bookings.create_booking(
                user_id=4, room_id=1, check_in=date(2025, 10, 6), check_out=date(2025, 10, 8), guests=1
            )


class TestPersistence:
    """Тесты сохранения и загрузки реестра."""

    def test_first_start_writes_sample_data(self, persistent_settings, snapshot_path):
        bootstrap_app(settings=persistent_settings)

        document = json.loads(snapshot_path.read_text(encoding="utf-8"))
        assert document["format_version"] == 1
        assert document["bookings"]["next_id"] == 2
        assert len(document["rooms"]["items"]) == 5

    def test_state_survives_restart(self, persistent_settings):
        app = bootstrap_app(settings=persistent_settings)
        created = app.bookings.create_booking(
            user_id=4, room_id=3, check_in=date(2025, 11, 1), check_out=date(2025, 11, 3), guests=3
        )
        app.attachments.attach(created.id, service_id=3)

        restarted = bootstrap_app(settings=persistent_settings)

        booking = restarted.bookings.get_booking(created.id)
        assert booking.check_in == date(2025, 11, 1)
        # 2 ночи x 800 000 + спа 500 000
        assert booking.total_amount.amount == Decimal("2100000")
        assert len(restarted.attachments.list_line_items(created.id)) == 1

    def test_ids_continue_after_restart(self, persistent_settings):
        app = bootstrap_app(settings=persistent_settings)
        app.catalog.delete_service(4)

        restarted = bootstrap_app(settings=persistent_settings)
        service = restarted.catalog.add_service("Прачечная", unit_price=90000)

        assert service.id == 5

    def test_failed_operation_is_not_persisted(self, persistent_settings, snapshot_path):
        app = bootstrap_app(settings=persistent_settings)
        before = snapshot_path.read_text(encoding="utf-8")

        with pytest.raises(ConflictError):
            app.bookings.create_booking(
                user_id=4, room_id=1, check_in=date(2025, 10, 5), check_out=date(2025, 10, 6), guests=1
            )

        assert snapshot_path.read_text(encoding="utf-8") == before

    def test_corrupt_snapshot_falls_back_to_sample_data(self, persistent_settings, snapshot_path):
        snapshot_path.write_text("{broken", encoding="utf-8")

        app = bootstrap_app(settings=persistent_settings)

        assert len(app.catalog.list_rooms()) == 5
        assert json.loads(snapshot_path.read_text(encoding="utf-8"))["format_version"] == 1

    def test_invalid_document_falls_back_to_sample_data(self, persistent_settings, snapshot_path):
        snapshot_path.write_text(
            json.dumps({"rooms": {"next_id": 2, "items": [{"id": 1, "label": "101"}]}}),
            encoding="utf-8",
        )

        app = bootstrap_app(settings=persistent_settings)

        assert [room.label for room in app.catalog.list_rooms()] == ["101", "102", "201", "202", "301"]


class TestHotelUnitOfWork:
    """Тесты транзакций единицы работы."""

    def test_exception_rolls_back_every_repository(self):
        uow = HotelUnitOfWork()

        with pytest.raises(RuntimeError):
            with uow:
                uow.roles.add(_role())
                raise RuntimeError("boom")

        assert uow.roles.list() == []
        assert uow.roles.next_id == 1

    def test_nested_transaction_joins_outer(self):
        uow = HotelUnitOfWork()

        with pytest.raises(RuntimeError):
            with uow:
                with uow:
                    uow.roles.add(_role())
                assert uow.in_transaction
                raise RuntimeError("boom")

        assert uow.roles.list() == []
        assert not uow.in_transaction

    def test_commit_writes_snapshot(self, snapshot_path):
        uow = HotelUnitOfWork(snapshot_store=JsonSnapshotStore(snapshot_path))

        with uow:
            uow.roles.add(_role())

        document = json.loads(snapshot_path.read_text(encoding="utf-8"))
        assert document["roles"]["items"][0]["name"] == "customer"


def _role() -> Role:
    return Role(name=RoleName.CUSTOMER)
