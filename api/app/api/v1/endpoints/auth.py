from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel import Session
from app.core.clock import Clock
from app.core.database import get_session
from app.schemas.auth import (
    LoginRequest,
    RegisterRequest,
    AuthResponse,
    PasswordResetRequest,
    PasswordResetRequestResponse,
    PasswordResetConfirm,
    TokenValidationResponse,
)
from app.services.deck_service import DeckService
from app.services.practice_registry import PracticeSessionRegistry
from app.services.user_service import register_user, authenticate_user, delete_user_data
from app.services.password_reset_service import (
    create_password_reset_token,
    is_token_valid,
    reset_password,
)
from app.api.v1.endpoints.utils import get_clock, get_practice_registry, user_to_response

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login", response_model=AuthResponse)
async def login(
    login_data: LoginRequest,
    session: Session = Depends(get_session)
):
    """Login with email and password."""
    user = authenticate_user(session, login_data.email, login_data.password)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password"
        )

    return AuthResponse(user=user_to_response(user), message="Login successful")


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(
    register_data: RegisterRequest,
    session: Session = Depends(get_session)
):
    """Register a new user."""
    user = register_user(
        session,
        email=register_data.email,
        name=register_data.name,
        password=register_data.password
    )
    return AuthResponse(user=user_to_response(user), message="Registration successful")


@router.post("/password-reset/request", response_model=PasswordResetRequestResponse)
async def request_password_reset(
    request: PasswordResetRequest,
    session: Session = Depends(get_session),
    clock: Clock = Depends(get_clock)
):
    """
    Issue a password reset token.

    The response message is identical for known and unknown emails.
    """
    token = create_password_reset_token(session, request.email, clock=clock)
    return PasswordResetRequestResponse(
        message="If the email is registered, a password reset link has been issued",
        token=token
    )


@router.get("/password-reset/validate", response_model=TokenValidationResponse)
async def validate_password_reset_token(
    token: str,
    session: Session = Depends(get_session),
    clock: Clock = Depends(get_clock)
):
    """Check whether a reset token can still be used."""
    return TokenValidationResponse(valid=is_token_valid(session, token, clock=clock))


@router.post("/password-reset/confirm")
async def confirm_password_reset(
    request: PasswordResetConfirm,
    session: Session = Depends(get_session),
    clock: Clock = Depends(get_clock)
):
    """Set a new password using a reset token."""
    if not reset_password(session, request.token, request.new_password, clock=clock):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid or expired password reset token"
        )
    return {"success": True, "message": "Password has been reset"}


@router.delete("/delete-user-data")
async def delete_user_data_endpoint(
    user_id: int,
    session: Session = Depends(get_session),
    registry: PracticeSessionRegistry = Depends(get_practice_registry)
):
    """
    Delete all decks, flashcards, statistics, settings and reset tokens of a user.

    Running practice sessions of the deleted decks are dropped as well.

    Args:
        user_id: The user ID whose data should be deleted
        session: Database session
        registry: Running practice sessions

    Returns:
        Dict with success status and deletion counts
    """
    deck_ids = [deck.id for deck in DeckService(session).get_decks_by_user_id(user_id)]
    try:
        result = delete_user_data(session, user_id)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e)
        ) from e
    for deck_id in deck_ids:
        registry.remove_deck(deck_id)
    return {
        "success": True,
        "message": "User data deleted successfully",
        "decks_deleted": result["decks_deleted"],
        "settings_deleted": result["settings_deleted"],
        "tokens_deleted": result["tokens_deleted"]
    }
