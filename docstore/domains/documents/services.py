from typing import Dict, List, Optional, Tuple
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from docstore.core.config import Settings
from docstore.core.exceptions import (
    BackendUnavailableError,
    ContentReadError,
    DeletionFailedError,
    DocumentNotFoundError,
    NoValidLocationError,
    ObjectStoreError,
    PersistenceError,
)
from docstore.db.repositories.document_repository import DocumentRepository
from docstore.domains.documents.entities import Document
from docstore.domains.storage.backends import (
    ContentBackend,
    EmbeddedBlobBackend,
    FilesystemBackend,
    ObjectStorageBackend,
)
from docstore.domains.storage.resolver import StorageStrategyResolver, StorageType
from docstore.infrastructure.object_store import ObjectStoreClient

logger = logging.getLogger(__name__)


class DocumentService:
    """Сервис для работы с документами в настроенном хранилище.

    По умолчанию содержимое ищется через *активное* хранилище: после смены
    STORAGE_TYPE записи из другого хранилища не читаются, кроме записей с
    путем, которые всегда доступны через файловую систему. При включенном
    ``dispatch_by_record_backend`` используется хранилище из записи.
    """

    def __init__(
        self,
        session: AsyncSession,
        settings: Settings,
        object_store: Optional[ObjectStoreClient] = None,
        resolver: Optional[StorageStrategyResolver] = None
    ):
        self.session = session
        self.settings = settings
        self.resolver = resolver or StorageStrategyResolver(settings)
        self.document_repository = DocumentRepository(session)

        self.filesystem = FilesystemBackend()
        self.backends: Dict[StorageType, ContentBackend] = {
            StorageType.FILESYSTEM: self.filesystem,
            StorageType.EMBEDDED_BLOB: EmbeddedBlobBackend(),
        }
        if object_store is not None:
            self.backends[StorageType.OBJECT_STORAGE] = ObjectStorageBackend(object_store)

    def _backend(self, kind: StorageType) -> ContentBackend:
        backend = self.backends.get(kind)
        if backend is None:
            raise BackendUnavailableError(f"Storage backend {kind.value!r} is not configured")
        return backend

    def _backend_for(self, document: Document) -> ContentBackend:
        """Хранилище, в котором лежит содержимое записи"""
        if self.settings.dispatch_by_record_backend and document.storage_backend is not None:
            return self._backend(document.storage_backend)
        return self._backend(self.resolver.active_backend)

    async def create_document(
        self,
        name: str,
        path: Optional[str] = None,
        buffer: Optional[bytes] = None
    ) -> Document:
        """Создание нового документа в активном хранилище"""
        backend = self._backend(self.resolver.active_backend)
        logger.info(f"File storage: {backend.kind.value}")

        document = await backend.store(name, path, buffer)

        try:
            created = await self.document_repository.create(document)
        except PersistenceError:
            if isinstance(backend, ObjectStorageBackend):
                await backend.discard(document.object_key)
            raise

        logger.info(f"Document created: id={created.id} name={created.name} backend={backend.kind.value}")
        return created

    async def get_document(self, document_id: str) -> Document:
        """Получение документа по id; некорректный id считается ненайденным"""
        document = await self.document_repository.get_by_id(document_id)
        if document is None:
            logger.info(f"Document not found for ID: {document_id}")
            raise DocumentNotFoundError(document_id)
        return document

    async def list_documents(self) -> List[Document]:
        """Получение списка документов, новые первыми"""
        return await self.document_repository.list_all()

    async def get_document_content(self, document_id: str) -> Tuple[Document, str]:
        """Получение документа и его содержимого в UTF-8"""
        document = await self.get_document(document_id)
        backend = self._backend_for(document)

        if backend.holds(document):
            source = backend
        elif document.path is not None:
            source = self.filesystem
        else:
            raise NoValidLocationError(
                "Document has no valid storage location (object key, inline content, or path)"
            )

        try:
            content = await source.read(document)
        except (OSError, UnicodeDecodeError, ObjectStoreError) as e:
            raise ContentReadError(f"Failed to read document content: {e}") from e

        logger.info(f"Document content read: {document.id} via {source.kind.value}")
        return document, content

    async def delete_document(self, document_id: str) -> None:
        """Удаление документа и его содержимого.

        Ошибка S3 прерывает удаление до изменения записи; ошибка удаления
        файла только логируется, запись все равно удаляется.
        """
        document = await self.get_document(document_id)
        backend = self._backend_for(document)

        if backend.holds(document):
            await backend.remove(document)
        elif backend.kind is not StorageType.EMBEDDED_BLOB and document.path is not None:
            await self.filesystem.remove(document)

        try:
            await self.document_repository.delete(document.uuid)
        except PersistenceError as e:
            raise DeletionFailedError(f"Failed to delete document: {e}") from e

        logger.info(f"Document deleted from database: {document.id}")
