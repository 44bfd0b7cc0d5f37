"""Хранилища содержимого документов.

Каждое хранилище умеет сохранить содержимое нового документа, прочитать его
и удалить. DocumentService выбирает хранилище для каждой операции, правила
чтения описаны в DocumentService.get_document_content.

Если файл удалить не удалось, это только логируется. Ошибка удаления из S3
пробрасывается, запись с ключом должна остаться.
"""
import abc
import logging
from typing import Optional

from docstore.core.exceptions import (
    DeletionFailedError,
    InvalidInputError,
    ObjectStoreError,
    SourceUnavailableError,
)
from docstore.domains.documents.entities import Document
from docstore.domains.storage.resolver import StorageType
from docstore.infrastructure import filesystem
from docstore.infrastructure.object_store import ObjectStoreClient

logger = logging.getLogger(__name__)


async def read_source(path: str) -> bytes:
    """Чтение исходного файла целиком"""
    try:
        return await filesystem.read_bytes(path)
    except FileNotFoundError as e:
        raise SourceUnavailableError(f"Source file not found: {path}") from e
    except OSError as e:
        raise SourceUnavailableError(f"Source file could not be read: {path}: {e}") from e


class ContentBackend(abc.ABC):
    kind: StorageType

    @abc.abstractmethod
    def holds(self, document: Document) -> bool:
        """Принадлежит ли локатор записи этому хранилищу"""

    @abc.abstractmethod
    async def store(self, name: str, path: Optional[str], buffer: Optional[bytes]) -> Document:
        """Сохранение содержимого, возвращает несохраненную запись со ссылкой на него"""

    @abc.abstractmethod
    async def read(self, document: Document) -> str:
        """Содержимое в виде текста. Ошибки ОС и S3 пробрасываются как есть."""

    @abc.abstractmethod
    async def remove(self, document: Document) -> None:
        """Удаление содержимого перед удалением самой записи"""


class FilesystemBackend(ContentBackend):
    """Файл остается на диске, в записи хранится путь"""

    kind = StorageType.FILESYSTEM

    def holds(self, document: Document) -> bool:
        return document.path is not None

    async def store(self, name: str, path: Optional[str], buffer: Optional[bytes]) -> Document:
        if not path:
            raise InvalidInputError("Path must be provided for filesystem storage")
        return Document.create_document(name, self.kind, path=path)

    async def read(self, document: Document) -> str:
        return await filesystem.read_text(document.path)

    async def remove(self, document: Document) -> None:
        # файла может уже не быть
        try:
            await filesystem.remove(document.path)
        except OSError as e:
            logger.warning(f"Could not delete file from filesystem: {document.path}: {e}")
            return
        logger.info(f"File deleted from filesystem: {document.path}")


class EmbeddedBlobBackend(ContentBackend):
    """Содержимое хранится в самой записи"""

    kind = StorageType.EMBEDDED_BLOB

    def holds(self, document: Document) -> bool:
        return document.inline_content is not None

    async def store(self, name: str, path: Optional[str], buffer: Optional[bytes]) -> Document:
        if buffer is None:
            if not path:
                raise InvalidInputError("Either path or buffer must be provided for database storage")
            buffer = await read_source(path)
        return Document.create_document(name, self.kind, inline_content=bytes(buffer))

    async def read(self, document: Document) -> str:
        return bytes(document.inline_content).decode("utf-8")

    async def remove(self, document: Document) -> None:
        logger.info(f"Document {document.id} content is stored in the database, removed with the record")


class ObjectStorageBackend(ContentBackend):
    """Содержимое хранится в S3 под сгенерированным ключом"""

    kind = StorageType.OBJECT_STORAGE

    def __init__(self, client: ObjectStoreClient):
        self.client = client

    def holds(self, document: Document) -> bool:
        return document.object_key is not None

    async def store(self, name: str, path: Optional[str], buffer: Optional[bytes]) -> Document:
        if buffer is None:
            if not path:
                raise InvalidInputError("Either path or buffer must be provided for S3 storage")
            buffer = await read_source(path)
        key = self.client.generate_key(name)
        await self.client.put(key, bytes(buffer))
        return Document.create_document(name, self.kind, object_key=key)

    async def read(self, document: Document) -> str:
        data = await self.client.get(document.object_key)
        return data.decode("utf-8")

    async def remove(self, document: Document) -> None:
        try:
            await self.client.delete(document.object_key)
        except ObjectStoreError as e:
            raise DeletionFailedError(f"Failed to delete document: {e}") from e

    async def discard(self, key: str) -> None:
        """Удаление объекта, запись для которого не была сохранена"""
        try:
            await self.client.delete(key)
        except ObjectStoreError as e:
            logger.error(f"Orphaned S3 object {key} could not be removed: {e}")
