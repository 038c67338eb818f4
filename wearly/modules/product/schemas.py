from enum import Enum
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from typing import Optional


class ProductType(str, Enum):
    TSHIRT = "tshirt"
    SHOES = "shoes"
    ACCESSORIES = "accessories"
    PANTS = "pants"
    DRESS = "dress"
    JACKET = "jacket"


class ProductIsolateRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    image_url: str
    product_type: ProductType


class ProductIsolateResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    ok: bool = True
    isolated_image: str
    method: str
    product_type: Optional[ProductType] = None
    timestamp: Optional[str] = None
    note: Optional[str] = None
