"""
Models module - re-exports all table models.

Allows imports like:
    from app.models.models import Deck, Flashcard
"""
from app.models.enums import PracticeDirection
from app.models.user import User
from app.models.deck import Deck
from app.models.flashcard import Flashcard
from app.models.stats import DeckDailyStats, KnownCard
from app.models.news import News
from app.models.password_reset_token import PasswordResetToken
from app.models.user_settings import UserSettings

__all__ = [
    'PracticeDirection',
    'User',
    'Deck',
    'Flashcard',
    'DeckDailyStats',
    'KnownCard',
    'News',
    'PasswordResetToken',
    'UserSettings',
]
