"""
User service for business logic related to user accounts.
"""
import logging
from sqlmodel import Session, select
from typing import Dict, Any, Optional

from app.core.exceptions import ConflictError, InvalidArgumentError
from app.models.models import User, Deck, UserSettings, PasswordResetToken
from app.services.deck_service import DeckService
from app.utils.text_utils import require_text

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6


def normalize_email(email: Optional[str]) -> str:
    return require_text(email, "email", 255).lower()


def find_user_by_email(session: Session, email: str) -> Optional[User]:
    return session.exec(select(User).where(User.email == normalize_email(email))).first()


def register_user(
    session: Session,
    email: str,
    name: str,
    password: str,
    is_admin: bool = False
) -> User:
    """
    Create a new user account.

    Raises:
        InvalidArgumentError: If a field is blank or the password is too short
        ConflictError: If the email is already registered
    """
    email_normalized = normalize_email(email)
    display_name = require_text(name, "name", 120)
    if password is None or len(password.strip()) < MIN_PASSWORD_LENGTH:
        raise InvalidArgumentError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")

    if find_user_by_email(session, email_normalized):
        raise ConflictError("Email already exists")

    user = User(
        email=email_normalized,
        name=display_name,
        password_hash=User.hash_password(password.strip()),
        is_admin=is_admin,
    )
    session.add(user)
    session.commit()
    session.refresh(user)
    logger.info(f"Registered user {user.id}")
    return user


def authenticate_user(session: Session, email: str, password: str) -> Optional[User]:
    """Return the user if the credentials match, None otherwise."""
    if not email or not password:
        return None
    user = find_user_by_email(session, email)
    if not user or not user.verify_password(password.strip()):
        logger.warning("Failed login attempt")
        return None
    return user


def delete_user_data(
    session: Session,
    user_id: int
) -> Dict[str, Any]:
    """
    Delete all decks (with their cards and stats), settings and reset tokens of a user.

    Args:
        session: Database session
        user_id: The user ID whose data should be deleted

    Returns:
        Dict with counts of deleted items:
        {
            'decks_deleted': int,
            'settings_deleted': int,
            'tokens_deleted': int
        }

    Raises:
        ValueError: If user not found
    """
    user = session.get(User, user_id)
    if not user:
        raise ValueError(f"User with id {user_id} not found")

    decks = session.exec(select(Deck).where(Deck.user_id == user_id)).all()
    deck_service = DeckService(session)
    for deck in decks:
        deck_service.delete_deck(deck.id)

    user_settings = session.exec(select(UserSettings).where(UserSettings.user_id == user_id)).all()
    for row in user_settings:
        session.delete(row)

    tokens = session.exec(select(PasswordResetToken).where(PasswordResetToken.user_id == user_id)).all()
    for token in tokens:
        session.delete(token)

    session.commit()

    logger.info(
        f"Deleted user data for user {user_id}: "
        f"{len(decks)} decks, "
        f"{len(user_settings)} settings, "
        f"{len(tokens)} reset tokens"
    )

    return {
        'decks_deleted': len(decks),
        'settings_deleted': len(user_settings),
        'tokens_deleted': len(tokens)
    }
