import asyncio
from fastapi import APIRouter, Depends
from wearly.core.gemini import GeminiImageClient, get_image_generator
from wearly.modules.product.schemas import ProductIsolateRequest, ProductIsolateResponse
from wearly.modules.product.service import IsolationService

router = APIRouter(prefix="/product", tags=["product"])


def get_isolation_service(generator: GeminiImageClient = Depends(get_image_generator)) -> IsolationService:
    return IsolationService(generator)


@router.post("/isolate", response_model=ProductIsolateResponse, response_model_exclude_none=True)
async def isolate_product(
    body: ProductIsolateRequest,
    service: IsolationService = Depends(get_isolation_service)
):
    """Isolate a product on a white background"""
    return await asyncio.to_thread(service.isolate, body.image_url, body.product_type)
