from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from typing import Optional
from wearly.modules.product.schemas import ProductType


class TryOnRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    user_image_url: str  # data URL from the extension or a remote URL
    product_image_url: str  # isolated product (data URL) or remote URL
    product_type: ProductType
    fit_instructions: Optional[str] = None


class TryOnResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    ok: bool = True
    try_on_image: str
    method: str = "gemini_tryon"
    product_type: ProductType
    timestamp: str
