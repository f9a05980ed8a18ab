"""
Password reset token model.
"""
from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import datetime


class PasswordResetToken(SQLModel, table=True):
    """Password reset tokens table - single-use account recovery tokens."""
    __tablename__ = "password_reset_tokens"
    
    id: Optional[int] = Field(default=None, primary_key=True)
    token: str = Field(unique=True, index=True, max_length=255)
    user_id: int = Field(foreign_key="users.id", index=True)
    expires_at: datetime
    used: bool = Field(default=False)
    
    def is_expired(self, now: datetime) -> bool:
        return now > self.expires_at
