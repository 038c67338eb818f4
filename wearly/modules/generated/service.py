import logging
import time
from supabase import Client
from fastapi import HTTPException
from typing import List, Optional
from wearly.config import settings
from wearly.core.images import ImageSourceError, parse_data_url
from wearly.modules.generated.schemas import GeneratedImage, UploadResponse

logger = logging.getLogger(__name__)

LIST_LIMIT = 50


class GeneratedImageService:
    def __init__(self, supabase: Client, bucket: Optional[str] = None):
        self.supabase = supabase
        self.bucket = bucket or settings.generated_bucket

    def list_images(self, user_id: str, limit: int = LIST_LIMIT) -> List[GeneratedImage]:
        """Most recent generated images for a user"""
        try:
            result = self.supabase.table("generated_images")\
                .select("*")\
                .eq("user_id", user_id)\
                .order("created_at", desc=True)\
                .limit(limit)\
                .execute()
        except Exception as e:
            logger.error(f"Database error listing images for {user_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to fetch images")
        return [GeneratedImage(**row) for row in result.data or []]

    def upload(
        self,
        user_id: str,
        data_url: str,
        source_url: Optional[str] = None,
        product_type: Optional[str] = None,
    ) -> UploadResponse:
        """Store a generated PNG in the bucket and record its metadata"""
        try:
            _, image_bytes = parse_data_url(data_url)
        except ImageSourceError as e:
            raise HTTPException(status_code=400, detail=str(e))

        storage_path = f"{user_id}/{int(time.time() * 1000)}.png"
        storage = self.supabase.storage.from_(self.bucket)
        try:
            storage.upload(
                storage_path,
                image_bytes,
                {"content-type": "image/png", "upsert": "false"},
            )
        except Exception as e:
            logger.error(f"Upload error for {storage_path}: {e}")
            raise HTTPException(status_code=500, detail="Failed to upload image")

        public_url = storage.get_public_url(storage_path)

        try:
            result = self.supabase.table("generated_images").insert({
                "user_id": user_id,
                "storage_path": storage_path,
                "public_url": public_url,
                "source_url": source_url,
                "product_type": product_type,
            }).execute()
            if not result.data:
                raise ValueError("insert returned no row")
        except Exception as e:
            logger.error(f"Metadata error for {storage_path}: {e}")
            try:
                storage.remove([storage_path])
            except Exception as cleanup_error:
                logger.warning(f"Failed to remove orphaned upload {storage_path}: {cleanup_error}")
            raise HTTPException(status_code=500, detail="Failed to save metadata")

        return UploadResponse(
            id=str(result.data[0]["id"]),
            public_url=public_url,
            storage_path=storage_path,
        )
