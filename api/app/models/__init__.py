"""
Models package - imports all models so they register with SQLModel metadata.
"""
# Import enums first
from app.models.enums import PracticeDirection

# Import all models
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
