"""
Deck service - persistence and validation for decks.
"""
# pyright: reportAttributeAccessIssue=false
# pyright: reportArgumentType=false
import logging
from typing import List, Optional

from sqlmodel import Session, select
from sqlalchemy import delete

from app.core.clock import utcnow
from app.core.exceptions import InvalidArgumentError
from app.models.models import Deck, Flashcard, KnownCard, DeckDailyStats
from app.utils.text_utils import require_text, limit_optional_text

logger = logging.getLogger(__name__)

TITLE_MAX_LENGTH = 120
DESCRIPTION_MAX_LENGTH = 500


def build_deck(user_id: Optional[int], title: Optional[str], description: Optional[str] = None) -> Deck:
    """
    Create a new, unsaved deck with trimmed and validated fields.

    Raises:
        InvalidArgumentError: If user_id is missing or the title is blank/too long
    """
    if user_id is None or user_id <= 0:
        raise InvalidArgumentError("user_id is required")
    return Deck(
        user_id=user_id,
        title=require_text(title, "title", TITLE_MAX_LENGTH),
        description=limit_optional_text(description, "description", DESCRIPTION_MAX_LENGTH),
    )


class DeckService:
    """Deck store backed by a database session."""

    def __init__(self, session: Session):
        if session is None:
            raise InvalidArgumentError("Session cannot be None")
        self.session = session

    def get_decks_by_user_id(self, user_id: int) -> List[Deck]:
        if user_id is None:
            raise InvalidArgumentError("User ID cannot be None")
        statement = (
            select(Deck)
            .where(Deck.user_id == user_id)
            .order_by(Deck.created_at.desc(), Deck.id.desc())
        )
        return list(self.session.exec(statement).all())

    def get_deck_by_id(self, deck_id: int) -> Optional[Deck]:
        if deck_id is None:
            raise InvalidArgumentError("Deck ID cannot be None")
        return self.session.get(Deck, deck_id)

    def save_deck(self, deck: Deck) -> Deck:
        """Validate and persist a new or modified deck."""
        if deck is None:
            raise InvalidArgumentError("Deck cannot be None")
        if deck.user_id is None or deck.user_id <= 0:
            raise InvalidArgumentError("user_id is required")
        deck.title = require_text(deck.title, "title", TITLE_MAX_LENGTH)
        deck.description = limit_optional_text(deck.description, "description", DESCRIPTION_MAX_LENGTH)
        deck.updated_at = utcnow()

        self.session.add(deck)
        self.session.commit()
        self.session.refresh(deck)
        logger.info(f"Saved deck {deck.id} for user {deck.user_id}")
        return deck

    def delete_deck(self, deck_id: int) -> None:
        """
        Delete a deck together with everything that references it.

        Deletes in foreign key order: known card flags, daily stats,
        flashcards, then the deck itself. Unknown ids are a no-op.
        """
        if deck_id is None:
            raise InvalidArgumentError("Deck ID cannot be None")
        deck = self.session.get(Deck, deck_id)
        if not deck:
            logger.warning(f"Attempted to delete non-existent deck: id={deck_id}")
            return

        self.session.exec(delete(KnownCard).where(KnownCard.deck_id == deck_id))
        self.session.exec(delete(DeckDailyStats).where(DeckDailyStats.deck_id == deck_id))
        self.session.exec(delete(Flashcard).where(Flashcard.deck_id == deck_id))
        self.session.delete(deck)
        self.session.commit()
        logger.info(f"Deleted deck {deck_id} of user {deck.user_id}")
