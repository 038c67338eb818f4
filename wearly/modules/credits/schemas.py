from pydantic import BaseModel


class CreditsResponse(BaseModel):
    credits: int
