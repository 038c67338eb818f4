from pydantic import BaseModel
from typing import Optional


class SessionSetRequest(BaseModel):
    access_token: Optional[str] = None
    refresh_token: Optional[str] = None
