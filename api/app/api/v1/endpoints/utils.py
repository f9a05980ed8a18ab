"""
Shared dependencies and helpers for endpoint operations.
"""
from fastapi import Depends
from sqlmodel import Session

from app.core.clock import Clock, system_clock
from app.core.config import PracticeSettings, settings
from app.core.database import get_session
from app.core.exceptions import AuthorizationError, NotFoundError
from app.models.models import Deck, Flashcard, User
from app.schemas.auth import UserResponse
from app.schemas.flashcard import FlashcardResponse
from app.services.deck_service import DeckService
from app.services.flashcard_service import FlashcardService
from app.services.practice_registry import PracticeSessionRegistry, practice_sessions
from app.services.practice_service import PracticeSessionService
from app.services.stats_service import StatsService


def get_clock() -> Clock:
    """Dependency for the wall clock (overridden in tests)."""
    return system_clock


def get_practice_settings() -> PracticeSettings:
    """Dependency for the practice defaults."""
    return PracticeSettings.from_settings(settings)


def get_practice_registry() -> PracticeSessionRegistry:
    """Dependency for the running practice sessions."""
    return practice_sessions


def get_deck_service(session: Session = Depends(get_session)) -> DeckService:
    return DeckService(session)


def get_flashcard_service(session: Session = Depends(get_session)) -> FlashcardService:
    return FlashcardService(session)


def get_stats_service(
    session: Session = Depends(get_session),
    clock: Clock = Depends(get_clock)
) -> StatsService:
    return StatsService(session, clock)


def get_practice_service(
    deck_service: DeckService = Depends(get_deck_service),
    flashcard_service: FlashcardService = Depends(get_flashcard_service),
    stats_service: StatsService = Depends(get_stats_service),
    practice_settings: PracticeSettings = Depends(get_practice_settings),
    clock: Clock = Depends(get_clock)
) -> PracticeSessionService:
    return PracticeSessionService(deck_service, flashcard_service, stats_service, practice_settings, clock)


def get_user_or_404(session: Session, user_id: int) -> User:
    user = session.get(User, user_id)
    if not user:
        raise NotFoundError(f"User with id {user_id} not found")
    return user


def require_admin(session: Session, user_id: int) -> User:
    """Return the user if it is an administrator, raise otherwise."""
    user = get_user_or_404(session, user_id)
    if not user.is_admin:
        raise AuthorizationError("Administrator role required")
    return user


def get_deck_or_404(deck_service: DeckService, deck_id: int) -> Deck:
    deck = deck_service.get_deck_by_id(deck_id)
    if not deck:
        raise NotFoundError(f"Deck with id {deck_id} not found")
    return deck


def user_to_response(user: User) -> UserResponse:
    return UserResponse(
        id=user.id,
        email=user.email,
        name=user.name,
        is_admin=user.is_admin,
        created_at=user.created_at.isoformat()
    )


def flashcard_to_response(flashcard: Flashcard, known: bool = False) -> FlashcardResponse:
    return FlashcardResponse(
        id=flashcard.id,
        deck_id=flashcard.deck_id,
        front_text=flashcard.front_text,
        back_text=flashcard.back_text,
        example=flashcard.example,
        image_url=flashcard.image_url,
        known=known,
        created_at=flashcard.created_at,
        updated_at=flashcard.updated_at
    )
