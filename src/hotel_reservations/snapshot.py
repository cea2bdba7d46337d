"""
Хранилище снимка состояния в JSON-файле.

Документ читается целиком при запуске и полностью перезаписывается
после каждой зафиксированной транзакции.
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, Optional, Union


class SnapshotError(Exception):
    """Снимок состояния не удалось прочитать."""

    pass


class JsonSnapshotStore:
    """Снимок реестра отеля в одном JSON-файле."""

    def __init__(self, file_path: Union[str, Path]):
        """
        Инициализирует хранилище.

        Args:
            file_path: Путь к JSON-файлу со снимком
        """
        self._file_path = Path(file_path)

    @property
    def file_path(self) -> Path:
        return self._file_path

    def load(self) -> Optional[Dict[str, Any]]:
        """Загружает документ; None, если файла нет или он пуст."""
        if not self._file_path.exists():
            return None

        with open(self._file_path, "r", encoding="utf-8") as f:
            raw_data = f.read()

        if not raw_data.strip():
            return None

        try:
            document = json.loads(raw_data)
        except json.JSONDecodeError as exc:
            raise SnapshotError(f"Файл {self._file_path} не является JSON: {exc}") from exc

        if not isinstance(document, dict):
            raise SnapshotError(f"Файл {self._file_path} не содержит объект снимка")
        return document

    def save(self, document: Dict[str, Any]) -> None:
        """Сохраняет документ, заменяя файл целиком."""
        # Создаем директорию, если она не существует
        self._file_path.parent.mkdir(parents=True, exist_ok=True)

        fd, tmp_path = tempfile.mkstemp(
            dir=self._file_path.parent, prefix=self._file_path.name, suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(document, f, indent=2, ensure_ascii=False, default=str)
            os.replace(tmp_path, self._file_path)
        except BaseException:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise
