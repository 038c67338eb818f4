from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from typing import Optional, List
from datetime import datetime


class GeneratedImage(BaseModel):
    id: str
    user_id: str
    storage_path: str
    public_url: str
    source_url: Optional[str] = None
    product_type: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class GeneratedImageList(BaseModel):
    images: List[GeneratedImage]


class UploadRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    data_url: str
    user_id: Optional[str] = None
    source_url: Optional[str] = None
    product_type: Optional[str] = None


class UploadResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    success: bool = True
    id: str
    public_url: str
    storage_path: str
