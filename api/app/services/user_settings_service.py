"""
Per-user settings.
"""
import logging
from sqlmodel import Session, select

from app.core.exceptions import InvalidArgumentError
from app.models.models import UserSettings

logger = logging.getLogger(__name__)

DEFAULT_LOCALE = "en"


def get_preferred_locale(session: Session, user_id: int) -> str:
    """Preferred locale code of the user, or the default when none was saved."""
    if user_id is None or user_id <= 0:
        raise InvalidArgumentError("User ID must be positive")
    row = session.exec(select(UserSettings).where(UserSettings.user_id == user_id)).first()
    return row.preferred_locale_code if row else DEFAULT_LOCALE


def set_preferred_locale(session: Session, user_id: int, locale_code: str) -> str:
    if user_id is None or user_id <= 0:
        raise InvalidArgumentError("User ID must be positive")
    if locale_code is None or not locale_code.strip():
        raise InvalidArgumentError("Locale cannot be empty")
    # Store as a BCP 47 tag: en_US -> en-US
    locale_code = locale_code.strip().replace("_", "-")
    if len(locale_code) > 20:
        raise InvalidArgumentError("Locale code is too long")

    row = session.exec(select(UserSettings).where(UserSettings.user_id == user_id)).first()
    if row is None:
        row = UserSettings(user_id=user_id, preferred_locale_code=locale_code)
    else:
        row.preferred_locale_code = locale_code
    session.add(row)
    session.commit()
    logger.info(f"Preferred locale of user {user_id} set to {locale_code}")
    return locale_code
