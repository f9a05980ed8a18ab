"""
News schemas.
"""
from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime


class NewsResponse(BaseModel):
    id: int
    title: str
    content: str
    author: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class NewsListResponse(BaseModel):
    news: List[NewsResponse]


class NewsRequest(BaseModel):
    """Create or update a news item."""
    title: str = Field(..., max_length=255)
    content: str


class NewsDeleteResponse(BaseModel):
    id: int
    deleted: bool
