"""
Точка сборки приложения.

Создает единицу работы, шину событий и прикладные сервисы, подписывает
обработчики событий и загружает начальное состояние реестра.
"""

from dataclasses import dataclass
from functools import partial
from typing import Optional

from .accounting.application import PaymentApplicationService
from .accounting.domain import PaymentRecorded
from .accounting.event_handlers import on_payment_recorded
from .booking.application import (
    AvailabilityApplicationService,
    BookingApplicationService,
    ServiceAttachmentService,
)
from .catalog.application import CatalogApplicationService
from .config import Settings, get_settings
from .interfaces import ISnapshotStore
from .sample_data import seed_sample_data
from .shared_kernel.infrastructure import ConsoleLogger, InMemoryEventBus, configure_logging
from .shared_kernel.interfaces import ILogger
from .snapshot import JsonSnapshotStore, SnapshotError
from .unit_of_work import HotelUnitOfWork


@dataclass
class HotelApplication:
    """Настроенные компоненты приложения."""

    uow: HotelUnitOfWork
    event_bus: InMemoryEventBus
    catalog: CatalogApplicationService
    availability: AvailabilityApplicationService
    bookings: BookingApplicationService
    attachments: ServiceAttachmentService
    payments: PaymentApplicationService


def bootstrap_app(
    settings: Optional[Settings] = None,
    snapshot_store: Optional[ISnapshotStore] = None,
    logger: Optional[ILogger] = None,
) -> HotelApplication:
    """Создает и настраивает все компоненты приложения."""
    settings = settings or get_settings()
    configure_logging(settings.log_level, settings.logger_name)
    logger = logger or ConsoleLogger(settings.logger_name)

    # 1. Хранилище снимка и единица работы
    if snapshot_store is None and settings.snapshot_path is not None:
        snapshot_store = JsonSnapshotStore(settings.snapshot_path)
    uow = HotelUnitOfWork(snapshot_store=snapshot_store, logger=logger)

    # 2. Сервисы, получающие зависимости
    event_bus = InMemoryEventBus(logger)
    bookings = BookingApplicationService(uow, event_bus, logger)
    app = HotelApplication(
        uow=uow,
        event_bus=event_bus,
        catalog=CatalogApplicationService(uow, logger),
        availability=AvailabilityApplicationService(uow),
        bookings=bookings,
        attachments=ServiceAttachmentService(uow, event_bus, logger),
        payments=PaymentApplicationService(uow, event_bus, logger),
    )

    # 3. Подписываем обработчики на события
    handler = partial(on_payment_recorded, confirmation=bookings)
    event_bus.subscribe(PaymentRecorded, handler)

    # 4. Начальное состояние
    _load_initial_state(uow, snapshot_store, settings, logger)
    return app


def _load_initial_state(
    uow: HotelUnitOfWork,
    snapshot_store: Optional[ISnapshotStore],
    settings: Settings,
    logger: ILogger,
) -> None:
    if snapshot_store is not None:
        try:
            document = snapshot_store.load()
            if document is not None:
                uow.load_document(document)
                logger.info("Snapshot loaded", bookings=len(uow.bookings.list()))
                return
        except SnapshotError as exc:
            logger.error("Snapshot is unreadable, starting from sample data", error=str(exc))

    if settings.seed_sample_data:
        seed_sample_data(uow)
        logger.info("Sample data seeded")
