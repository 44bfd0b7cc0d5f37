from typing import List, Optional, TYPE_CHECKING, Union
import logging
import uuid

from sqlalchemy import delete, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from docstore.core.exceptions import PersistenceError
from docstore.db.models.document import Document as DocumentModel
from docstore.domains.storage.resolver import StorageType

if TYPE_CHECKING:
    from docstore.domains.documents.entities import Document

logger = logging.getLogger(__name__)


def parse_document_id(document_id: Union[str, uuid.UUID]) -> Optional[uuid.UUID]:
    """UUID из внешнего id, None для некорректного id"""
    if isinstance(document_id, uuid.UUID):
        return document_id
    try:
        return uuid.UUID(str(document_id))
    except (ValueError, AttributeError, TypeError):
        return None


class DocumentRepository:
    """Репозиторий для работы с документами"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, document: "Document") -> "Document":
        """Создание нового документа"""
        db_document = DocumentModel(
            name=document.name,
            path=document.path,
            inline_content=document.inline_content,
            object_key=document.object_key,
            storage_backend=document.storage_backend.value if document.storage_backend else None
        )

        self.session.add(db_document)
        try:
            await self.session.commit()
            await self.session.refresh(db_document)
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise PersistenceError(f"Failed to save document: {e}") from e
        return self._to_domain(db_document)

    async def get_by_id(self, document_id: Union[str, uuid.UUID]) -> Optional["Document"]:
        """Получение документа по id; None для неизвестного или некорректного id"""
        document_uuid = parse_document_id(document_id)
        if document_uuid is None:
            logger.debug(f"Malformed document id: {document_id!r}")
            return None

        result = await self.session.execute(
            select(DocumentModel).where(DocumentModel.uuid == document_uuid)
        )
        db_document = result.scalar_one_or_none()
        return self._to_domain(db_document) if db_document else None

    async def list_all(self) -> List["Document"]:
        """Получение всех документов, новые первыми"""
        result = await self.session.execute(
            select(DocumentModel)
            .order_by(DocumentModel.created_at.desc(), DocumentModel.id.desc())
        )
        return [self._to_domain(doc) for doc in result.scalars().all()]

    async def count(self) -> int:
        result = await self.session.execute(select(func.count(DocumentModel.id)))
        return result.scalar()

    async def delete(self, document_id: Union[str, uuid.UUID]) -> None:
        """Удаление документа; PersistenceError если удалено не ровно одна строка"""
        document_uuid = parse_document_id(document_id)
        if document_uuid is None:
            raise PersistenceError(f"Cannot delete document with malformed id {document_id!r}")

        try:
            result = await self.session.execute(
                delete(DocumentModel).where(DocumentModel.uuid == document_uuid)
            )
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise PersistenceError(f"Failed to delete document {document_uuid}: {e}") from e

        if result.rowcount != 1:
            raise PersistenceError(f"Document {document_uuid} was not deleted")

    def _to_domain(self, db_document: DocumentModel) -> "Document":
        """Преобразование модели БД в доменную сущность"""
        from docstore.domains.documents.entities import Document

        return Document(
            uuid=db_document.uuid,
            name=db_document.name,
            path=db_document.path,
            inline_content=db_document.inline_content,
            object_key=db_document.object_key,
            storage_backend=StorageType.parse(db_document.storage_backend),
            created_at=db_document.created_at,
            updated_at=db_document.updated_at
        )
