from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from docstore.domains.documents.entities import Document


class CamelModel(BaseModel):
    """Ответы сериализуются с ключами в camelCase"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class DocumentResponse(CamelModel):
    """Документ в списке"""
    id: str
    name: str
    path: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_document(cls, document: Document, **extra) -> "DocumentResponse":
        return cls(
            id=document.id,
            name=document.name,
            path=document.path,
            created_at=document.created_at,
            updated_at=document.updated_at,
            **extra
        )


class DocumentDetailResponse(DocumentResponse):
    """Метаданные документа вместе с хранилищем"""
    storage_backend: Optional[str] = None

    @classmethod
    def from_document(cls, document: Document, **extra) -> "DocumentDetailResponse":
        backend = document.storage_backend.value if document.storage_backend else None
        return super().from_document(document, storage_backend=backend, **extra)


class UploadDocumentResponse(DocumentResponse):
    message: str = "File uploaded successfully"


class DocumentContentResponse(CamelModel):
    id: str
    name: str
    path: Optional[str] = None
    content: str

    @classmethod
    def from_document(cls, document: Document, content: str) -> "DocumentContentResponse":
        return cls(id=document.id, name=document.name, path=document.path, content=content)


class DeleteDocumentResponse(CamelModel):
    success: bool = True
    message: str = Field(default="Document deleted successfully")


class HealthResponse(CamelModel):
    status: str = "ok"
    storage_type: Optional[str] = None
