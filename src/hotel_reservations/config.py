"""Настройки приложения из переменных окружения (префикс HOTEL_)."""

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Конфигурация системы бронирования."""

    model_config = SettingsConfigDict(
        env_prefix="HOTEL_", env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    snapshot_path: Optional[Path] = Field(
        default=None,
        description="JSON-файл снимка состояния. Без него данные живут только в памяти.",
    )
    seed_sample_data: bool = Field(
        default=True, description="Заполнять пустой реестр демонстрационными данными"
    )
    log_level: str = Field(default="INFO", description="Уровень журнала")
    logger_name: str = Field(default="hotel_reservations", description="Имя логгера")


@lru_cache
def get_settings() -> Settings:
    """Возвращает закешированный экземпляр настроек."""

    return Settings()


def reset_settings_cache() -> None:
    """Сбрасывает закешированные настройки (для тестов)."""

    get_settings.cache_clear()
