"""
Practice session service.

Bridges the deck and card stores, the statistics store and the practice
settings: picks the cards for a new run and records the summary of a finished one.
"""
import logging
import random
from datetime import timedelta
from typing import Iterable, List, Optional, Sequence

from app.core.clock import Clock, system_clock
from app.core.config import PracticeSettings
from app.core.exceptions import InvalidArgumentError
from app.models.enums import PracticeDirection
from app.models.models import Deck, Flashcard
from app.services.deck_service import DeckService
from app.services.flashcard_service import FlashcardService
from app.services.practice_session import CompletionMetrics, PracticeCard, PracticeSession, PracticeSessionManager
from app.services.stats_service import SessionSummary, StatsService

logger = logging.getLogger(__name__)


def _require_positive_deck_id(deck_id: int) -> None:
    if deck_id is None or deck_id <= 0:
        raise InvalidArgumentError(f"Deck ID must be positive, got: {deck_id}")


class PracticeSessionService:
    """Builds practice sessions and records their results."""

    def __init__(
        self,
        deck_service: DeckService,
        flashcard_service: FlashcardService,
        stats_service: StatsService,
        practice_settings: PracticeSettings,
        clock: Optional[Clock] = None,
        rng: Optional[random.Random] = None
    ):
        if deck_service is None:
            raise InvalidArgumentError("DeckService cannot be None")
        if flashcard_service is None:
            raise InvalidArgumentError("FlashcardService cannot be None")
        if stats_service is None:
            raise InvalidArgumentError("StatsService cannot be None")
        if practice_settings is None:
            raise InvalidArgumentError("PracticeSettings cannot be None")

        self.deck_service = deck_service
        self.flashcard_service = flashcard_service
        self.stats_service = stats_service
        self.practice_settings = practice_settings
        self.clock = clock or system_clock
        self.rng = rng or random.Random()

    # ==================== Deck and card selection ====================

    def load_deck(self, deck_id: int) -> Optional[Deck]:
        """Return the deck, or None if it does not exist."""
        _require_positive_deck_id(deck_id)
        return self.deck_service.get_deck_by_id(deck_id)

    def get_not_known_cards(self, deck_id: int) -> List[Flashcard]:
        """Cards of the deck that are not marked known, in deck order."""
        _require_positive_deck_id(deck_id)
        cards = self.flashcard_service.get_flashcards_by_deck_id(deck_id)
        known = self.stats_service.get_known_card_ids(deck_id)
        return [card for card in cards if card.id not in known]

    def resolve_default_count(self, deck_id: int) -> int:
        """Configured default count, but never more than the deck has left to learn."""
        _require_positive_deck_id(deck_id)
        return self.resolve_default_count_for(self.get_not_known_cards(deck_id))

    def resolve_default_count_for(self, not_known_cards: Sequence) -> int:
        if not_known_cards is None:
            raise InvalidArgumentError("not_known_cards cannot be None")
        return min(len(not_known_cards), self.practice_settings.get_default_count())

    def is_random(self) -> bool:
        return self.practice_settings.is_default_random_order()

    def default_direction(self) -> PracticeDirection:
        return self.practice_settings.get_default_direction() or PracticeDirection.FRONT_TO_BACK

    def prepare_session(self, deck_id: int, count: int, randomize: bool) -> List[PracticeCard]:
        """
        Pick the cards of a new run.

        Not-known cards are optionally shuffled and then cut to count. Asking
        for more cards than are available returns all of them; a fully known
        deck yields an empty list.
        """
        cards = [PracticeCard.from_flashcard(card) for card in self.get_not_known_cards(deck_id)]
        return self._order_and_limit(cards, count, randomize)

    def _order_and_limit(self, cards: List[PracticeCard], count: int, randomize: bool) -> List[PracticeCard]:
        if count is None or count < 0:
            raise InvalidArgumentError(f"Count cannot be negative, got: {count}")
        if randomize:
            self.rng.shuffle(cards)
        return cards[:count]

    # ==================== Session construction ====================

    def start_session(
        self,
        deck_id: int,
        count: int,
        randomize: bool,
        direction: Optional[PracticeDirection] = None
    ) -> Optional[PracticeSession]:
        """
        Start a run over the deck's not-known cards.

        Returns:
            The new session, or None when no cards are left to practice
        """
        cards = self.prepare_session(deck_id, count, randomize)
        if not cards:
            logger.info(f"No cards left to practice in deck {deck_id}")
            return None
        return PracticeSession.create(deck_id, cards, self.clock.now(), direction or self.default_direction())

    def start_session_with_cards(
        self,
        deck_id: int,
        preloaded_cards: Sequence[PracticeCard],
        count: int,
        randomize: bool,
        direction: Optional[PracticeDirection] = None
    ) -> Optional[PracticeSession]:
        """Start a run from cards the caller already loaded (e.g. after showing the settings dialog)."""
        _require_positive_deck_id(deck_id)
        if preloaded_cards is None:
            raise InvalidArgumentError("Preloaded cards cannot be None")
        cards = self._order_and_limit(list(preloaded_cards), count, randomize)
        if not cards:
            return None
        return PracticeSession.create(deck_id, cards, self.clock.now(), direction or self.default_direction())

    def get_failed_cards(self, deck_id: int, failed_card_ids: Optional[Iterable[int]]) -> List[PracticeCard]:
        """Not-known cards of the deck that were marked hard, in deck order."""
        failed = set(failed_card_ids or ())
        if not failed:
            return []
        return [
            PracticeCard.from_flashcard(card)
            for card in self.get_not_known_cards(deck_id)
            if card.id in failed
        ]

    def start_repeat_session(
        self,
        deck_id: int,
        failed_cards: Sequence[PracticeCard],
        direction: Optional[PracticeDirection] = None
    ) -> Optional[PracticeSession]:
        """Start a shuffled run over the cards that were hard last time."""
        cards = list(failed_cards or ())
        if not cards:
            return None
        self.rng.shuffle(cards)
        return PracticeSession.create(
            deck_id, cards, self.clock.now(), direction or self.default_direction(), is_repeat=True
        )

    def calculate_completion_metrics(self, session: PracticeSession) -> CompletionMetrics:
        return PracticeSessionManager(self.clock).completion_metrics(session)

    # ==================== Recording ====================

    def record_session(
        self,
        deck_id: int,
        total_viewed: int,
        correct: int,
        hard: int,
        session_duration: timedelta,
        total_answer_delay_ms: int,
        known_card_ids_delta: Optional[Iterable[int]]
    ) -> None:
        """Forward a finished run's summary to the statistics store."""
        if session_duration is None:
            raise InvalidArgumentError("Session duration cannot be None")
        summary = SessionSummary(
            deck_id=deck_id,
            viewed=total_viewed,
            correct=correct,
            hard=hard,
            session_duration_ms=int(session_duration / timedelta(milliseconds=1)),
            total_answer_delay_ms=total_answer_delay_ms,
            known_card_ids_delta=tuple(known_card_ids_delta or ()),
        )
        self.stats_service.record_session(summary)
