"""
News model.
"""
from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import datetime

from app.core.clock import utcnow


class News(SQLModel, table=True):
    """News table - application announcements."""
    __tablename__ = "news"
    
    id: Optional[int] = Field(default=None, primary_key=True)
    title: str = Field(max_length=255)
    content: str
    author: str = Field(max_length=255)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)
