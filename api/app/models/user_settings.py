"""
User settings model.
"""
from sqlmodel import SQLModel, Field
from typing import Optional


class UserSettings(SQLModel, table=True):
    """User settings table - one row of preferences per user."""
    __tablename__ = "user_settings"
    
    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="users.id", unique=True)
    preferred_locale_code: str = Field(default="en", max_length=20)
