"""
Practice session state machine.

A practice run is an immutable PracticeSession value made of SessionData (what is
practiced) and SessionState (where the user is). Every user action goes through
PracticeSessionManager and yields a new PracticeSession; the caller replaces its
copy with the returned one. Actions on a complete session return the very same
object, so `new is old` means nothing happened.

Per card the session alternates between "question shown" (showing_answer False)
and "answer shown" (showing_answer True). Once index reaches the number of cards
the session is complete.
"""
import logging
import math
from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta
from typing import TYPE_CHECKING, Optional, Sequence, Tuple

from app.core.clock import Clock, system_clock
from app.core.exceptions import InvalidArgumentError
from app.models.enums import PracticeDirection

if TYPE_CHECKING:
    from app.models.flashcard import Flashcard
    from app.services.practice_service import PracticeSessionService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PracticeCard:
    """Snapshot of a flashcard taken when the session starts."""
    id: int
    deck_id: int
    front_text: str
    back_text: str
    example: Optional[str] = None
    image_url: Optional[str] = None

    @classmethod
    def from_flashcard(cls, flashcard: "Flashcard") -> "PracticeCard":
        return cls(
            id=flashcard.id,
            deck_id=flashcard.deck_id,
            front_text=flashcard.front_text,
            back_text=flashcard.back_text,
            example=flashcard.example,
            image_url=flashcard.image_url,
        )


def _require_non_negative(value: int, name: str) -> None:
    if value is None or value < 0:
        raise InvalidArgumentError(f"{name} cannot be negative")


@dataclass(frozen=True)
class SessionState:
    """Position and running counters of a practice run."""
    index: int = 0
    showing_answer: bool = False
    correct_count: int = 0
    hard_count: int = 0
    total_viewed: int = 0
    card_show_time: Optional[datetime] = None
    total_answer_delay_ms: int = 0

    def __post_init__(self):
        _require_non_negative(self.index, "Index")
        _require_non_negative(self.correct_count, "Correct count")
        _require_non_negative(self.hard_count, "Hard count")
        _require_non_negative(self.total_viewed, "Total viewed")
        _require_non_negative(self.total_answer_delay_ms, "Answer delay")

    @classmethod
    def initial(cls) -> "SessionState":
        return cls()

    def with_index(self, new_index: int) -> "SessionState":
        """Move to another card. The new card always starts hidden with no timer."""
        _require_non_negative(new_index, "Index")
        return replace(self, index=new_index, showing_answer=False, card_show_time=None)

    def with_showing_answer(self, showing: bool) -> "SessionState":
        return replace(self, showing_answer=showing)

    def with_card_show_time(self, show_time: Optional[datetime]) -> "SessionState":
        return replace(self, card_show_time=show_time)

    def with_answer_delay(self, delay_ms: int) -> "SessionState":
        """Add delay_ms to the running answer delay."""
        _require_non_negative(delay_ms, "Answer delay")
        return replace(self, total_answer_delay_ms=self.total_answer_delay_ms + delay_ms)

    def with_correct_count(self, correct: int) -> "SessionState":
        _require_non_negative(correct, "Correct count")
        return replace(self, correct_count=correct)

    def with_hard_count(self, hard: int) -> "SessionState":
        _require_non_negative(hard, "Hard count")
        return replace(self, hard_count=hard)

    def with_total_viewed(self, viewed: int) -> "SessionState":
        _require_non_negative(viewed, "Total viewed")
        return replace(self, total_viewed=viewed)


@dataclass(frozen=True)
class SessionData:
    """The cards of a practice run and the outcomes collected so far."""
    deck_id: int
    cards: Tuple[PracticeCard, ...]
    session_start: datetime
    known_card_ids_delta: Tuple[int, ...] = field(default_factory=tuple)
    failed_card_ids: Tuple[int, ...] = field(default_factory=tuple)
    direction: PracticeDirection = PracticeDirection.FRONT_TO_BACK
    is_repeat: bool = False

    @classmethod
    def create(
        cls,
        deck_id: int,
        cards: Optional[Sequence[PracticeCard]],
        session_start: Optional[datetime],
        direction: Optional[PracticeDirection] = None,
        is_repeat: bool = False
    ) -> "SessionData":
        if deck_id is None or deck_id <= 0:
            raise InvalidArgumentError("Deck ID must be positive")
        if cards is None:
            raise InvalidArgumentError("Cards list cannot be None")
        if len(cards) == 0:
            raise InvalidArgumentError("Cards list cannot be empty")
        if session_start is None:
            raise InvalidArgumentError("Session start time cannot be None")
        return cls(
            deck_id=deck_id,
            cards=tuple(cards),
            session_start=session_start,
            direction=direction or PracticeDirection.FRONT_TO_BACK,
            is_repeat=is_repeat,
        )

    def add_known_card(self, card_id: int) -> "SessionData":
        return replace(self, known_card_ids_delta=self.known_card_ids_delta + (card_id,))

    def add_failed_card(self, card_id: int) -> "SessionData":
        return replace(self, failed_card_ids=self.failed_card_ids + (card_id,))


@dataclass(frozen=True)
class PracticeSession:
    """One user's in-progress practice run."""
    data: SessionData
    state: SessionState

    @classmethod
    def create(
        cls,
        deck_id: int,
        cards: Optional[Sequence[PracticeCard]],
        session_start: datetime,
        direction: Optional[PracticeDirection] = None,
        is_repeat: bool = False
    ) -> "PracticeSession":
        data = SessionData.create(deck_id, cards, session_start, direction, is_repeat)
        return cls(data=data, state=SessionState.initial())

    def with_state(self, new_state: SessionState) -> "PracticeSession":
        if new_state is None:
            raise InvalidArgumentError("Session state cannot be None")
        return replace(self, state=new_state)

    def with_data(self, new_data: SessionData) -> "PracticeSession":
        if new_data is None:
            raise InvalidArgumentError("Session data cannot be None")
        return replace(self, data=new_data)

    # Shortcuts used by callers that render the session

    @property
    def deck_id(self) -> int:
        return self.data.deck_id

    @property
    def cards(self) -> Tuple[PracticeCard, ...]:
        return self.data.cards

    @property
    def index(self) -> int:
        return self.state.index

    @property
    def showing_answer(self) -> bool:
        return self.state.showing_answer

    @property
    def correct_count(self) -> int:
        return self.state.correct_count

    @property
    def hard_count(self) -> int:
        return self.state.hard_count

    @property
    def total_viewed(self) -> int:
        return self.state.total_viewed

    @property
    def session_start(self) -> datetime:
        return self.data.session_start

    @property
    def card_show_time(self) -> Optional[datetime]:
        return self.state.card_show_time

    @property
    def total_answer_delay_ms(self) -> int:
        return self.state.total_answer_delay_ms

    @property
    def known_card_ids_delta(self) -> Tuple[int, ...]:
        return self.data.known_card_ids_delta

    @property
    def failed_card_ids(self) -> Tuple[int, ...]:
        return self.data.failed_card_ids


@dataclass(frozen=True)
class Progress:
    """Display counters; current is 1-based."""
    current: int
    total: int
    total_viewed: int
    correct: int
    hard: int
    percent: int


@dataclass(frozen=True)
class CompletionMetrics:
    """Figures shown when a run is over."""
    total_cards: int
    session_minutes: int
    avg_seconds: int


def _elapsed_ms(start: datetime, end: datetime) -> int:
    return int((end - start) / timedelta(milliseconds=1))


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


class PracticeSessionManager:
    """Transition functions of the practice state machine."""

    def __init__(self, clock: Optional[Clock] = None):
        self.clock = clock or system_clock

    def is_complete(self, session: PracticeSession) -> bool:
        return session.index >= len(session.cards)

    def current_card(self, session: PracticeSession) -> Optional[PracticeCard]:
        if self.is_complete(session):
            return None
        return session.cards[session.index]

    def start_question(self, session: PracticeSession) -> PracticeSession:
        """Show the question face of the current card and start its answer timer."""
        if self.is_complete(session):
            return session
        new_state = session.state.with_showing_answer(False).with_card_show_time(self.clock.now())
        return session.with_state(new_state)

    def reveal(self, session: PracticeSession) -> PracticeSession:
        """
        Show the answer face and add the time spent on the question to the answer delay.

        The timer is consumed on use, so revealing again adds nothing. Without a
        running timer the answer is shown and no delay is added.
        """
        if self.is_complete(session):
            return session
        state = session.state
        if state.card_show_time is not None:
            delay = max(0, _elapsed_ms(state.card_show_time, self.clock.now()))
            state = state.with_answer_delay(delay).with_card_show_time(None)
        return session.with_state(state.with_showing_answer(True))

    def mark_know(self, session: PracticeSession) -> PracticeSession:
        if self.is_complete(session):
            return session
        card = self.current_card(session)
        new_data = session.data.add_known_card(card.id)
        new_state = (
            session.state
            .with_index(session.index + 1)
            .with_correct_count(session.correct_count + 1)
            .with_total_viewed(session.total_viewed + 1)
        )
        return session.with_data(new_data).with_state(new_state)

    def mark_hard(self, session: PracticeSession) -> PracticeSession:
        if self.is_complete(session):
            return session
        card = self.current_card(session)
        new_data = session.data.add_failed_card(card.id)
        new_state = (
            session.state
            .with_index(session.index + 1)
            .with_hard_count(session.hard_count + 1)
            .with_total_viewed(session.total_viewed + 1)
        )
        return session.with_data(new_data).with_state(new_state)

    def progress(self, session: PracticeSession) -> Progress:
        total = len(session.cards)
        current = max(1, min(session.index + 1, total))
        percent = _round_half_up(current * 100.0 / total) if total > 0 else 0
        return Progress(
            current=current,
            total=total,
            total_viewed=session.total_viewed,
            correct=session.correct_count,
            hard=session.hard_count,
            percent=percent,
        )

    def completion_metrics(self, session: PracticeSession) -> CompletionMetrics:
        """Total cards, whole minutes (at least 1) and average seconds per viewed card (at least 1)."""
        elapsed_seconds = max(0, _elapsed_ms(session.session_start, self.clock.now()) // 1000)
        session_minutes = max(1, elapsed_seconds // 60)
        denominator = max(1, session.total_viewed)
        avg_seconds = max(1, _round_half_up(session.total_answer_delay_ms / denominator / 1000.0))
        return CompletionMetrics(
            total_cards=len(session.cards),
            session_minutes=session_minutes,
            avg_seconds=avg_seconds,
        )

    def record_and_persist(self, session: PracticeSession, session_service: "PracticeSessionService") -> None:
        """Hand the finished run's counters to the session service for recording."""
        duration = max(timedelta(0), self.clock.now() - session.session_start)
        session_service.record_session(
            session.deck_id,
            session.total_viewed,
            session.correct_count,
            session.hard_count,
            duration,
            session.total_answer_delay_ms,
            list(session.known_card_ids_delta),
        )
