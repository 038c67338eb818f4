import asyncio
from fastapi import APIRouter, Depends, HTTPException, status
from wearly.database.supabase_client import get_service_supabase
from wearly.modules.generated.schemas import GeneratedImageList, UploadRequest, UploadResponse
from wearly.modules.generated.service import GeneratedImageService
from wearly.core.dependencies import get_current_user
from supabase import Client
from typing import Dict

router = APIRouter(prefix="/generated", tags=["generated"])


def get_generated_service(supabase: Client = Depends(get_service_supabase)) -> GeneratedImageService:
    return GeneratedImageService(supabase)


@router.get("/list", response_model=GeneratedImageList)
async def list_generated(
    current_user: Dict = Depends(get_current_user),
    service: GeneratedImageService = Depends(get_generated_service)
):
    """Last 50 try-on results for the signed-in user, newest first"""
    images = await asyncio.to_thread(service.list_images, current_user["id"])
    return GeneratedImageList(images=images)


@router.post("/upload", response_model=UploadResponse)
async def upload_generated(
    body: UploadRequest,
    current_user: Dict = Depends(get_current_user),
    service: GeneratedImageService = Depends(get_generated_service)
):
    """Save a try-on result to storage"""
    if body.user_id and body.user_id != current_user["id"]:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Cannot upload for another user")
    return await asyncio.to_thread(
        service.upload, current_user["id"], body.data_url, body.source_url, body.product_type
    )
