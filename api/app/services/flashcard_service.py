"""
Flashcard service - persistence, validation and filtering of flashcards.
"""
# pyright: reportAttributeAccessIssue=false
# pyright: reportArgumentType=false
import logging
from typing import List, Optional, Set

from sqlmodel import Session, select
from sqlalchemy import delete

from app.core.clock import utcnow
from app.core.exceptions import InvalidArgumentError
from app.models.models import Flashcard, KnownCard
from app.utils.text_utils import require_text, limit_optional_text, contains_ignore_case

logger = logging.getLogger(__name__)

FACE_MAX_LENGTH = 300
EXAMPLE_MAX_LENGTH = 500
IMAGE_URL_MAX_LENGTH = 2048


class FlashcardService:
    """Card store backed by a database session."""

    def __init__(self, session: Session):
        if session is None:
            raise InvalidArgumentError("Session cannot be None")
        self.session = session

    def get_flashcards_by_deck_id(self, deck_id: int) -> List[Flashcard]:
        """All cards of a deck in insertion order."""
        if deck_id is None:
            raise InvalidArgumentError("Deck ID cannot be None")
        statement = select(Flashcard).where(Flashcard.deck_id == deck_id).order_by(Flashcard.id)
        return list(self.session.exec(statement).all())

    def get_flashcard_by_id(self, flashcard_id: int) -> Optional[Flashcard]:
        if flashcard_id is None:
            raise InvalidArgumentError("Flashcard ID cannot be None")
        return self.session.get(Flashcard, flashcard_id)

    def save_flashcard(self, flashcard: Flashcard) -> Flashcard:
        """Validate and persist a new or modified flashcard."""
        if flashcard is None:
            raise InvalidArgumentError("Flashcard cannot be None")
        if flashcard.deck_id is None or flashcard.deck_id <= 0:
            raise InvalidArgumentError("deck_id is required")

        flashcard.front_text = require_text(flashcard.front_text, "front_text", FACE_MAX_LENGTH)
        flashcard.back_text = require_text(flashcard.back_text, "back_text", FACE_MAX_LENGTH)
        flashcard.example = limit_optional_text(flashcard.example, "example", EXAMPLE_MAX_LENGTH)
        flashcard.image_url = limit_optional_text(flashcard.image_url, "image_url", IMAGE_URL_MAX_LENGTH)
        flashcard.updated_at = utcnow()

        self.session.add(flashcard)
        self.session.commit()
        self.session.refresh(flashcard)
        logger.debug(f"Saved flashcard {flashcard.id} in deck {flashcard.deck_id}")
        return flashcard

    def delete_flashcard(self, flashcard_id: int) -> None:
        """Delete a flashcard and its known flag. Unknown ids are a no-op."""
        if flashcard_id is None:
            raise InvalidArgumentError("Flashcard ID cannot be None")
        flashcard = self.session.get(Flashcard, flashcard_id)
        if not flashcard:
            logger.warning(f"Attempted to delete non-existent flashcard: id={flashcard_id}")
            return

        self.session.exec(delete(KnownCard).where(KnownCard.card_id == flashcard_id))
        self.session.delete(flashcard)
        self.session.commit()
        logger.info(f"Deleted flashcard {flashcard_id} from deck {flashcard.deck_id}")

    def list_filtered_flashcards(
        self,
        deck_id: int,
        query: Optional[str],
        known_ids: Set[int],
        hide_known: bool = False
    ) -> List[Flashcard]:
        """
        Filter a deck's cards by a free-text query and known state.

        The query matches case-insensitively against front text, back text
        and example. Known cards are dropped when hide_known is set.
        """
        q = query.lower().strip() if query else ""
        result = []
        for card in self.get_flashcards_by_deck_id(deck_id):
            if q and not (
                contains_ignore_case(card.front_text, q)
                or contains_ignore_case(card.back_text, q)
                or contains_ignore_case(card.example, q)
            ):
                continue
            if hide_known and card.id in known_ids:
                continue
            result.append(card)
        return result
