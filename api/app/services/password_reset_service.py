"""
Password reset service - issuing and redeeming single-use reset tokens.
"""
import logging
import uuid
from datetime import timedelta
from typing import Optional

from sqlmodel import Session, select

from app.core.clock import Clock, system_clock
from app.core.config import settings
from app.core.exceptions import InvalidArgumentError
from app.models.models import User, PasswordResetToken
from app.services.user_service import find_user_by_email

logger = logging.getLogger(__name__)
audit_logger = logging.getLogger("app.audit")


def _require(value: Optional[str], message: str) -> str:
    if value is None or not value.strip():
        raise InvalidArgumentError(message)
    return value.strip()


def create_password_reset_token(
    session: Session,
    email: str,
    clock: Clock = system_clock,
    expiration_hours: Optional[int] = None
) -> Optional[str]:
    """
    Issue a reset token for the account with this email.

    Any unused token of the user is invalidated first. Unknown emails return
    None without an error so callers cannot probe which accounts exist.
    """
    email = _require(email, "Email cannot be empty")
    user = find_user_by_email(session, email)
    if not user:
        audit_logger.warning("Password reset attempt for non-existent email")
        return None

    open_tokens = session.exec(
        select(PasswordResetToken).where(
            PasswordResetToken.user_id == user.id,
            PasswordResetToken.used == False  # noqa: E712
        )
    ).all()
    for open_token in open_tokens:
        open_token.used = True
        session.add(open_token)

    hours = expiration_hours if expiration_hours is not None else settings.password_reset_token_hours
    token = uuid.uuid4().hex
    expires_at = clock.now() + timedelta(hours=hours)
    session.add(PasswordResetToken(token=token, user_id=user.id, expires_at=expires_at))
    session.commit()

    audit_logger.info(f"Password reset token created: user_id={user.id}, expires_at={expires_at.isoformat()}")
    return token


def _find_token(session: Session, token: str) -> Optional[PasswordResetToken]:
    return session.exec(select(PasswordResetToken).where(PasswordResetToken.token == token)).first()


def is_token_valid(session: Session, token: str, clock: Clock = system_clock) -> bool:
    token = _require(token, "Token cannot be empty")
    reset_token = _find_token(session, token)
    if not reset_token:
        logger.debug("Token validation failed - token not found")
        return False
    return not reset_token.used and not reset_token.is_expired(clock.now())


def reset_password(
    session: Session,
    token: str,
    new_password: str,
    clock: Clock = system_clock
) -> bool:
    """
    Set a new password using a reset token.

    Returns:
        True if the password was changed, False for unknown, used or expired tokens
    """
    token = _require(token, "Token cannot be empty")
    new_password = _require(new_password, "New password cannot be empty")

    reset_token = _find_token(session, token)
    if not reset_token:
        audit_logger.warning("Password reset attempt with invalid token")
        return False

    if reset_token.used or reset_token.is_expired(clock.now()):
        state = "used" if reset_token.used else "expired"
        audit_logger.warning(f"Password reset attempt with {state} token for user_id={reset_token.user_id}")
        return False

    user = session.get(User, reset_token.user_id)
    if not user:
        logger.error(f"Password reset token references non-existent user: user_id={reset_token.user_id}")
        return False

    user.password_hash = User.hash_password(new_password)
    reset_token.used = True
    session.add(user)
    session.add(reset_token)
    session.commit()

    audit_logger.info(f"Password reset successful for user_id={user.id}")
    return True
