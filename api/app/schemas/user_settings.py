"""
User settings schemas.
"""
from pydantic import BaseModel, Field


class LocaleResponse(BaseModel):
    user_id: int
    locale: str


class UpdateLocaleRequest(BaseModel):
    locale: str = Field(..., min_length=1, max_length=20, description="BCP 47 language tag, e.g. 'en' or 'ru-RU'")
