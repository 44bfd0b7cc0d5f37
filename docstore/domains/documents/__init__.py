from docstore.domains.documents.entities import Document
from docstore.domains.documents.schemas import (
    DocumentResponse, DocumentDetailResponse, UploadDocumentResponse,
    DocumentContentResponse, DeleteDocumentResponse, HealthResponse
)

__all__ = [
    "Document",
    "DocumentResponse", "DocumentDetailResponse", "UploadDocumentResponse",
    "DocumentContentResponse", "DeleteDocumentResponse", "HealthResponse"
]
