import enum
import logging
from typing import Optional

from docstore.core.config import Settings

logger = logging.getLogger(__name__)


class StorageType(str, enum.Enum):
    FILESYSTEM = "filesystem"
    EMBEDDED_BLOB = "database"
    OBJECT_STORAGE = "s3"

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional["StorageType"]:
        """Значение из настроек (или его алиас) в тип хранилища; None если значение неизвестно"""
        if not value:
            return None
        return _ALIASES.get(value.strip().lower())


_ALIASES = {
    "filesystem": StorageType.FILESYSTEM,
    "fs": StorageType.FILESYSTEM,
    "local": StorageType.FILESYSTEM,
    "database": StorageType.EMBEDDED_BLOB,
    "db": StorageType.EMBEDDED_BLOB,
    "mongodb": StorageType.EMBEDDED_BLOB,
    "blob": StorageType.EMBEDDED_BLOB,
    "embedded": StorageType.EMBEDDED_BLOB,
    "s3": StorageType.OBJECT_STORAGE,
    "object": StorageType.OBJECT_STORAGE,
    "objectstorage": StorageType.OBJECT_STORAGE,
}


class StorageStrategyResolver:
    """Определяет активное хранилище. Настройки читаются один раз, при создании."""

    def __init__(self, settings: Settings):
        resolved = StorageType.parse(settings.storage_type)
        if resolved is None:
            if settings.storage_type:
                logger.warning(
                    f"Unknown STORAGE_TYPE {settings.storage_type!r}, falling back to filesystem"
                )
            resolved = StorageType.FILESYSTEM
        self._active = resolved

    @property
    def active_backend(self) -> StorageType:
        return self._active

    def is_filesystem_storage(self) -> bool:
        return self._active is StorageType.FILESYSTEM

    def is_embedded_storage(self) -> bool:
        return self._active is StorageType.EMBEDDED_BLOB

    def is_object_storage(self) -> bool:
        return self._active is StorageType.OBJECT_STORAGE
