from fastapi import APIRouter, Request

from docstore.domains.documents.schemas import HealthResponse

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health(request: Request):
    """Статус сервиса и активное хранилище"""
    resolver = request.app.state.resolver
    return HealthResponse(storage_type=resolver.active_backend.value)
