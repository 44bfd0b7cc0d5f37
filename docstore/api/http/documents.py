from typing import List
import logging

from fastapi import APIRouter, Depends, File, HTTPException, Request, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from docstore.core.db import get_db
from docstore.core.exceptions import (
    BackendUnavailableError,
    ContentReadError,
    DeletionFailedError,
    DocumentNotFoundError,
    DocumentStoreError,
    InvalidInputError,
    NoValidLocationError,
    ObjectNotFoundError,
    PersistenceError,
    SourceUnavailableError,
    TransportError,
)
from docstore.domains.documents.schemas import (
    DeleteDocumentResponse,
    DocumentContentResponse,
    DocumentDetailResponse,
    DocumentResponse,
    HealthResponse,
    UploadDocumentResponse,
)
from docstore.domains.documents.services import DocumentService
from docstore.infrastructure import filesystem

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/document", tags=["documents"])

# Сначала более конкретные классы
ERROR_STATUS_CODES = [
    (InvalidInputError, status.HTTP_400_BAD_REQUEST),
    (DocumentNotFoundError, status.HTTP_404_NOT_FOUND),
    (ObjectNotFoundError, status.HTTP_404_NOT_FOUND),
    (SourceUnavailableError, 422),
    (NoValidLocationError, status.HTTP_409_CONFLICT),
    (BackendUnavailableError, status.HTTP_503_SERVICE_UNAVAILABLE),
    (TransportError, status.HTTP_502_BAD_GATEWAY),
    (ContentReadError, status.HTTP_500_INTERNAL_SERVER_ERROR),
    (DeletionFailedError, status.HTTP_500_INTERNAL_SERVER_ERROR),
    (PersistenceError, status.HTTP_500_INTERNAL_SERVER_ERROR),
]


def to_http_error(error: DocumentStoreError) -> HTTPException:
    """Преобразование ошибки хранилища в HTTP ошибку с тем же сообщением"""
    for error_class, status_code in ERROR_STATUS_CODES:
        if isinstance(error, error_class):
            break
    else:
        status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    if status_code >= 500:
        logger.error(f"{type(error).__name__}: {error}")
    return HTTPException(status_code=status_code, detail=str(error))


async def discard_staged_upload(path: str) -> None:
    try:
        await filesystem.remove(path)
    except OSError as e:
        logger.warning(f"Staged upload {path} could not be removed: {e}")


def get_document_service(request: Request, db: AsyncSession = Depends(get_db)) -> DocumentService:
    state = request.app.state
    return DocumentService(
        db,
        state.settings,
        object_store=state.object_store,
        resolver=state.resolver
    )


@router.post("/upload", response_model=UploadDocumentResponse)
async def upload_document(
    request: Request,
    file: UploadFile = File(...),
    document_service: DocumentService = Depends(get_document_service)
):
    """Загрузка файла в настроенное хранилище"""
    content = await file.read()
    name = file.filename or "unnamed"
    resolver = request.app.state.resolver

    logger.info(
        f"File uploaded: name={name} size={len(content)} storage={resolver.active_backend.value}"
    )

    try:
        if resolver.is_filesystem_storage():
            # Для файлового хранилища файл остается там, куда был записан
            path = await filesystem.save_upload(request.app.state.settings.upload_dir, name, content)
            try:
                document = await document_service.create_document(name, path=path)
            except DocumentStoreError:
                await discard_staged_upload(path)
                raise
        else:
            document = await document_service.create_document(name, buffer=content)
    except DocumentStoreError as e:
        raise to_http_error(e)

    return UploadDocumentResponse.from_document(document)


@router.get("/list", response_model=List[DocumentResponse])
async def list_documents(
    document_service: DocumentService = Depends(get_document_service)
):
    """Получение списка документов, новые первыми"""
    documents = await document_service.list_documents()
    return [DocumentResponse.from_document(document) for document in documents]


@router.get("/health", response_model=HealthResponse)
async def health():
    return HealthResponse()


@router.get("/content/{document_id}", response_model=DocumentContentResponse)
async def get_document_content(
    document_id: str,
    document_service: DocumentService = Depends(get_document_service)
):
    """Получение документа с содержимым в виде текста"""
    try:
        document, content = await document_service.get_document_content(document_id)
    except DocumentStoreError as e:
        raise to_http_error(e)

    return DocumentContentResponse.from_document(document, content)


@router.get("/{document_id}", response_model=DocumentDetailResponse)
async def get_document(
    document_id: str,
    document_service: DocumentService = Depends(get_document_service)
):
    """Получение метаданных документа"""
    try:
        document = await document_service.get_document(document_id)
    except DocumentStoreError as e:
        raise to_http_error(e)

    return DocumentDetailResponse.from_document(document)


@router.delete("/{document_id}", response_model=DeleteDocumentResponse)
async def delete_document(
    document_id: str,
    document_service: DocumentService = Depends(get_document_service)
):
    """Удаление документа и его содержимого"""
    try:
        await document_service.delete_document(document_id)
    except DocumentStoreError as e:
        raise to_http_error(e)

    return DeleteDocumentResponse()
