"""
Statistics service - daily session counters and known card tracking per deck.

Session summaries are folded into one DeckDailyStats row per (deck, date) with a
single INSERT ... ON CONFLICT DO UPDATE statement whose increments are computed
by the database, so concurrent sessions of the same deck never lose counts, the
first session of a day included. Known card ids are added the same way with
ON CONFLICT DO NOTHING.
"""
# pyright: reportAttributeAccessIssue=false
# pyright: reportArgumentType=false
import logging
from dataclasses import dataclass, field, replace
from datetime import date
from typing import Collection, Dict, Iterable, List, Optional, Set, Tuple

from sqlmodel import Session, select
from sqlalchemy import delete
from sqlalchemy.dialects import postgresql, sqlite

from app.core.clock import Clock, system_clock
from app.core.exceptions import InvalidArgumentError, NotFoundError
from app.models.models import Deck, DeckDailyStats, Flashcard, KnownCard

logger = logging.getLogger(__name__)
audit_logger = logging.getLogger("app.audit")

# Dialects with INSERT ... ON CONFLICT support
UPSERT_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


@dataclass(frozen=True)
class SessionSummary:
    """Aggregated counters of one finished practice session."""
    deck_id: int
    viewed: int
    correct: int
    hard: int
    session_duration_ms: int
    total_answer_delay_ms: int
    repeat: int = 0
    known_card_ids_delta: Tuple[int, ...] = field(default_factory=tuple)

    def __post_init__(self):
        if self.deck_id is None or self.deck_id <= 0:
            raise InvalidArgumentError(f"Deck ID must be positive, got: {self.deck_id}")
        for name in ("viewed", "correct", "repeat", "hard", "session_duration_ms", "total_answer_delay_ms"):
            value = getattr(self, name)
            if value is None or value < 0:
                raise InvalidArgumentError(f"{name} cannot be negative, got: {value}")
        object.__setattr__(self, "known_card_ids_delta", tuple(self.known_card_ids_delta or ()))


@dataclass(frozen=True)
class DailyStats:
    """One day of practice on a deck."""
    date: date
    sessions: int
    viewed: int
    correct: int
    repeat: int
    hard: int
    total_duration_ms: int
    total_answer_delay_ms: int

    @property
    def avg_delay_ms_per_card(self) -> float:
        if self.viewed == 0:
            return 0.0
        return self.total_answer_delay_ms / self.viewed


@dataclass(frozen=True)
class DeckAggregate:
    """Today / all-time rollup of a deck's daily stats, used for display only."""
    sessions_all: int = 0
    viewed_all: int = 0
    correct_all: int = 0
    repeat_all: int = 0
    hard_all: int = 0
    sessions_today: int = 0
    viewed_today: int = 0
    correct_today: int = 0
    repeat_today: int = 0
    hard_today: int = 0


class StatsService:
    """Statistics store backed by a database session."""

    def __init__(self, session: Session, clock: Optional[Clock] = None):
        if session is None:
            raise InvalidArgumentError("Session cannot be None")
        self.session = session
        self.clock = clock or system_clock

    # ==================== Session recording ====================

    def record_session(self, summary: SessionSummary) -> None:
        """Persist a session summary under today's date. Sessions with no viewed cards are skipped."""
        logger.debug(
            "Recording session: deck_id=%s, viewed=%s, correct=%s, hard=%s",
            summary.deck_id, summary.viewed, summary.correct, summary.hard
        )
        if summary.viewed <= 0:
            logger.warning("Skipped recording session with no viewed cards for deck %s", summary.deck_id)
            return

        self.append_session(
            deck_id=summary.deck_id,
            day=self.clock.today(),
            viewed=summary.viewed,
            correct=summary.correct,
            repeat=summary.repeat,
            hard=summary.hard,
            duration_ms=summary.session_duration_ms,
            answer_delay_ms=summary.total_answer_delay_ms,
            known_card_ids_delta=summary.known_card_ids_delta,
        )

        audit_logger.info(
            "Session recorded: deck_id=%s, viewed=%s, correct=%s, hard=%s, duration_ms=%s, known_delta=%s",
            summary.deck_id, summary.viewed, summary.correct, summary.hard,
            summary.session_duration_ms, len(summary.known_card_ids_delta)
        )

    def append_session(
        self,
        deck_id: int,
        day: date,
        viewed: int,
        correct: int,
        repeat: int,
        hard: int,
        duration_ms: int,
        answer_delay_ms: int,
        known_card_ids_delta: Optional[Iterable[int]] = None
    ) -> None:
        """
        Add one session's counters to the (deck, day) row and union the known card ids.

        Does nothing when viewed is not positive. Known ids that are no longer
        flashcards of the deck (deleted while the session ran) are skipped.
        """
        if viewed <= 0:
            return

        insert = self._upsert_insert()
        stats_insert = insert(DeckDailyStats).values(
            deck_id=deck_id,
            date=day,
            sessions=1,
            viewed=viewed,
            correct=correct,
            repeat_count=repeat,
            hard=hard,
            total_duration_ms=duration_ms,
            total_delay_ms=answer_delay_ms,
        )
        excluded = stats_insert.excluded
        self.session.exec(
            stats_insert.on_conflict_do_update(
                index_elements=["deck_id", "date"],
                set_={
                    "sessions": DeckDailyStats.sessions + excluded.sessions,
                    "viewed": DeckDailyStats.viewed + excluded.viewed,
                    "correct": DeckDailyStats.correct + excluded.correct,
                    "repeat_count": DeckDailyStats.repeat_count + excluded.repeat_count,
                    "hard": DeckDailyStats.hard + excluded.hard,
                    "total_duration_ms": DeckDailyStats.total_duration_ms + excluded.total_duration_ms,
                    "total_delay_ms": DeckDailyStats.total_delay_ms + excluded.total_delay_ms,
                },
            )
        )

        card_ids = self._existing_card_ids(deck_id, known_card_ids_delta or ())
        if card_ids:
            self.session.exec(
                insert(KnownCard)
                .values([{"deck_id": deck_id, "card_id": card_id} for card_id in card_ids])
                .on_conflict_do_nothing(index_elements=["deck_id", "card_id"])
            )

        self.session.commit()

    def _upsert_insert(self):
        dialect = self.session.get_bind().dialect.name
        try:
            return UPSERT_INSERTS[dialect]
        except KeyError:
            raise RuntimeError(f"Unsupported database dialect for statistics: {dialect}") from None

    def _existing_card_ids(self, deck_id: int, card_ids: Iterable[int]) -> List[int]:
        """Keep the ids that are still flashcards of the deck, in first-seen order."""
        wanted = list(dict.fromkeys(card_ids))
        if not wanted:
            return []
        statement = select(Flashcard.id).where(Flashcard.deck_id == deck_id, Flashcard.id.in_(wanted))
        existing = set(self.session.exec(statement).all())
        skipped = [card_id for card_id in wanted if card_id not in existing]
        if skipped:
            logger.warning("Skipping known cards no longer in deck %s: %s", deck_id, skipped)
        return [card_id for card_id in wanted if card_id in existing]

    # ==================== Known cards ====================

    def get_known_card_ids(self, deck_id: int) -> Set[int]:
        statement = select(KnownCard.card_id).where(KnownCard.deck_id == deck_id)
        return set(self.session.exec(statement).all())

    def is_card_known(self, deck_id: int, card_id: int) -> bool:
        statement = select(KnownCard.id).where(
            KnownCard.deck_id == deck_id,
            KnownCard.card_id == card_id
        )
        return self.session.exec(statement).first() is not None

    def set_card_known(self, deck_id: int, card_id: int, known: bool) -> None:
        logger.debug("Setting card %s as %s for deck %s", card_id, "KNOWN" if known else "UNKNOWN", deck_id)
        currently_known = self.is_card_known(deck_id, card_id)
        if known and not currently_known:
            self.session.add(KnownCard(deck_id=deck_id, card_id=card_id))
        elif not known and currently_known:
            self.session.exec(
                delete(KnownCard).where(KnownCard.deck_id == deck_id, KnownCard.card_id == card_id)
            )
        self.session.commit()
        logger.info("Card marked as %s in deck %s: card_id=%s", "known" if known else "unknown", deck_id, card_id)

    def toggle_card_known(self, deck_id: int, card_id: int) -> bool:
        """Flip the known flag of a card. Returns the new state."""
        new_status = not self.is_card_known(deck_id, card_id)
        self.set_card_known(deck_id, card_id, new_status)
        return new_status

    def reset_deck_progress(self, deck_id: int) -> int:
        """
        Forget every known card of a deck. Daily history is kept.

        Returns:
            Number of known flags cleared

        Raises:
            NotFoundError: If the deck does not exist
        """
        deck = self.session.get(Deck, deck_id)
        if not deck:
            raise NotFoundError(f"Deck not found: {deck_id}")

        cleared = len(self.get_known_card_ids(deck_id))
        self.session.exec(delete(KnownCard).where(KnownCard.deck_id == deck_id))
        self.session.commit()

        audit_logger.warning(
            "Deck progress reset: deck_id=%s, title='%s', user_id=%s, cleared_cards=%s",
            deck_id, deck.title, deck.user_id, cleared
        )
        return cleared

    def get_deck_progress_percent(self, deck_id: int, deck_size: int) -> int:
        """Share of known cards in the deck, rounded, within [0, 100]."""
        if deck_size <= 0:
            return 0
        known = len(self.get_known_card_ids(deck_id))
        percent = int(100.0 * known / deck_size + 0.5)
        return max(0, min(100, percent))

    # ==================== Read models ====================

    def get_daily_stats(self, deck_id: int) -> List[DailyStats]:
        statement = (
            select(DeckDailyStats)
            .where(DeckDailyStats.deck_id == deck_id)
            .order_by(DeckDailyStats.date)
        )
        return [
            DailyStats(
                date=row.date,
                sessions=row.sessions,
                viewed=row.viewed,
                correct=row.correct,
                repeat=row.repeat_count,
                hard=row.hard,
                total_duration_ms=row.total_duration_ms,
                total_answer_delay_ms=row.total_delay_ms,
            )
            for row in self.session.exec(statement).all()
        ]

    def get_aggregates_for_decks(
        self,
        deck_ids: Collection[int],
        today: Optional[date] = None
    ) -> Dict[int, DeckAggregate]:
        """Sum daily rows per deck into all-time and today totals. Decks without history are absent."""
        if not deck_ids:
            return {}
        today = today or self.clock.today()

        statement = select(DeckDailyStats).where(DeckDailyStats.deck_id.in_(set(deck_ids)))
        result: Dict[int, DeckAggregate] = {}
        for row in self.session.exec(statement).all():
            agg = result.get(row.deck_id, DeckAggregate())
            is_today = row.date == today
            result[row.deck_id] = replace(
                agg,
                sessions_all=agg.sessions_all + row.sessions,
                viewed_all=agg.viewed_all + row.viewed,
                correct_all=agg.correct_all + row.correct,
                repeat_all=agg.repeat_all + row.repeat_count,
                hard_all=agg.hard_all + row.hard,
                sessions_today=agg.sessions_today + (row.sessions if is_today else 0),
                viewed_today=agg.viewed_today + (row.viewed if is_today else 0),
                correct_today=agg.correct_today + (row.correct if is_today else 0),
                repeat_today=agg.repeat_today + (row.repeat_count if is_today else 0),
                hard_today=agg.hard_today + (row.hard if is_today else 0),
            )
        return result
