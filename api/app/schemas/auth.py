from pydantic import BaseModel, EmailStr, Field
from typing import Optional


class LoginRequest(BaseModel):
    """Login request schema."""
    email: str = Field(..., description="Email address")
    password: str = Field(..., min_length=1, description="Password")


class RegisterRequest(BaseModel):
    """Registration request schema."""
    email: EmailStr = Field(..., description="Email address")
    name: str = Field(..., min_length=1, max_length=120, description="Display name")
    password: str = Field(..., min_length=6, description="Password (minimum 6 characters)")


class UserResponse(BaseModel):
    """User response schema (without password)."""
    id: int
    email: str
    name: str
    is_admin: bool = False
    created_at: str

    class Config:
        from_attributes = True


class AuthResponse(BaseModel):
    """Authentication response schema."""
    user: UserResponse
    message: str


class PasswordResetRequest(BaseModel):
    """Request a password reset token for an email."""
    email: str = Field(..., description="Email address of the account")


class PasswordResetRequestResponse(BaseModel):
    """
    Response to a reset request.

    The token is returned so the caller can deliver it (e.g. by email); it is
    None for unknown emails, and the message is the same either way.
    """
    message: str
    token: Optional[str] = None


class PasswordResetConfirm(BaseModel):
    """Redeem a reset token."""
    token: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=6, description="New password (minimum 6 characters)")


class TokenValidationResponse(BaseModel):
    valid: bool
