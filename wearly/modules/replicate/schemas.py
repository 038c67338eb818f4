from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from typing import Optional


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class IncludeFlags(CamelModel):
    top: bool = True
    bottom: bool = True
    shoes_accessories: bool = True


class ReplicateRequest(CamelModel):
    user_image_url: str
    reference_image_url: str
    include: IncludeFlags = IncludeFlags()
    fit_instructions: Optional[str] = None


class IsolatedParts(CamelModel):
    top: Optional[str] = None
    bottom: Optional[str] = None
    shoes_accessories: Optional[str] = None


class ReplicateResponse(CamelModel):
    ok: bool = True
    final_image: str
    isolated: IsolatedParts
