import asyncio
from fastapi import APIRouter, Depends, Request
from wearly.core.dependencies import get_current_user
from wearly.core.gemini import GeminiImageClient, get_image_generator
from wearly.core.rate_limit import limiter
from wearly.config import settings
from wearly.modules.credits.routes import get_credit_service
from wearly.modules.credits.service import CreditService
from wearly.modules.tryon.schemas import TryOnRequest, TryOnResponse
from wearly.modules.tryon.service import TryOnService
from typing import Dict

router = APIRouter(prefix="/tryon", tags=["tryon"])


def get_tryon_service(
    credits: CreditService = Depends(get_credit_service),
    generator: GeminiImageClient = Depends(get_image_generator)
) -> TryOnService:
    return TryOnService(credits, generator)


@router.post("/apply", response_model=TryOnResponse)
@limiter.limit(settings.tryon_rate_limit)
async def apply_tryon(
    request: Request,
    body: TryOnRequest,
    current_user: Dict = Depends(get_current_user),
    service: TryOnService = Depends(get_tryon_service)
):
    """Apply a product to the user's photo. Consumes one credit."""
    return await asyncio.to_thread(
        service.apply,
        current_user["id"],
        body.user_image_url,
        body.product_image_url,
        body.product_type,
        body.fit_instructions,
    )


@router.post("/perform", response_model=TryOnResponse)
@limiter.limit(settings.tryon_rate_limit)
async def perform_tryon(
    request: Request,
    body: TryOnRequest,
    current_user: Dict = Depends(get_current_user),
    service: TryOnService = Depends(get_tryon_service)
):
    """Isolate the product image, then apply it. Consumes one credit."""
    return await asyncio.to_thread(
        service.perform,
        current_user["id"],
        body.user_image_url,
        body.product_image_url,
        body.product_type,
        body.fit_instructions,
    )
