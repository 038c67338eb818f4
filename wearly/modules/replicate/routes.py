from fastapi import APIRouter, Depends, Request
from wearly.core.dependencies import get_current_user
from wearly.core.rate_limit import limiter
from wearly.config import settings
from wearly.modules.replicate.schemas import ReplicateRequest, ReplicateResponse
from wearly.modules.replicate.service import ReplicateService
from wearly.modules.tryon.routes import get_tryon_service
from wearly.modules.tryon.service import TryOnService
from typing import Dict

router = APIRouter(prefix="/replicate", tags=["replicate"])


def get_replicate_service(tryon: TryOnService = Depends(get_tryon_service)) -> ReplicateService:
    return ReplicateService(tryon)


@router.post("/perform", response_model=ReplicateResponse)
@limiter.limit(settings.tryon_rate_limit)
async def perform_replicate(
    request: Request,
    body: ReplicateRequest,
    current_user: Dict = Depends(get_current_user),
    service: ReplicateService = Depends(get_replicate_service)
):
    """Isolate top, bottom and shoes from the reference photo and apply them in turn. One credit per applied part."""
    return await service.perform(current_user["id"], body)
