"""Tests for the practice session state machine."""

from datetime import datetime, timedelta
from unittest.mock import MagicMock

import pytest

from app.core.exceptions import InvalidArgumentError
from app.models.enums import PracticeDirection
from app.services.practice_session import (
    PracticeCard,
    PracticeSession,
    PracticeSessionManager,
    SessionData,
    SessionState,
)

START = datetime(2024, 3, 15, 9, 0, 0)

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _cards(count=3, deck_id=1):
    return [
        PracticeCard(id=100 + i, deck_id=deck_id, front_text=f"front {i}", back_text=f"back {i}")
        for i in range(count)
    ]


@pytest.fixture
def manager(clock):
    return PracticeSessionManager(clock)


@pytest.fixture
def session(clock):
    return PracticeSession.create(1, _cards(3), clock.now())


# ---------------------------------------------------------------------------
# TestConstruction
# ---------------------------------------------------------------------------


class TestConstruction:
    """Tests for the construction invariants."""

    @pytest.mark.parametrize("deck_id", [0, -1, None])
    def test_rejects_non_positive_deck_id(self, deck_id):
        """Should raise for a missing or non-positive deck id."""
        with pytest.raises(InvalidArgumentError):
            PracticeSession.create(deck_id, _cards(), START)

    def test_rejects_missing_cards(self):
        with pytest.raises(InvalidArgumentError):
            PracticeSession.create(1, None, START)

    def test_rejects_empty_cards(self):
        with pytest.raises(InvalidArgumentError):
            PracticeSession.create(1, [], START)

    def test_rejects_missing_start(self):
        with pytest.raises(InvalidArgumentError):
            SessionData.create(1, _cards(), None)

    @pytest.mark.parametrize(
        "field",
        ["index", "correct_count", "hard_count", "total_viewed", "total_answer_delay_ms"],
    )
    def test_rejects_negative_counters(self, field):
        """Should raise when any counter is negative."""
        with pytest.raises(InvalidArgumentError):
            SessionState(**{field: -1})

    def test_new_session_starts_at_first_card(self, session):
        assert session.index == 0
        assert session.showing_answer is False
        assert session.card_show_time is None
        assert session.total_answer_delay_ms == 0
        assert session.known_card_ids_delta == ()
        assert session.failed_card_ids == ()
        assert session.data.direction == PracticeDirection.FRONT_TO_BACK
        assert session.data.is_repeat is False

    def test_cards_are_copied(self):
        """Should not be affected by later changes to the caller's list."""
        cards = _cards(2)
        session = PracticeSession.create(1, cards, START)
        cards.append(_cards(3)[2])
        assert len(session.cards) == 2


# ---------------------------------------------------------------------------
# TestSessionState
# ---------------------------------------------------------------------------


class TestSessionState:
    """Tests for the SessionState copy methods."""

    def test_with_index_resets_answer_and_timer(self):
        """Should hide the answer and clear the timer whatever came before."""
        state = SessionState(showing_answer=True, card_show_time=START)
        moved = state.with_index(2)
        assert moved.index == 2
        assert moved.showing_answer is False
        assert moved.card_show_time is None

    def test_with_answer_delay_is_additive(self):
        state = SessionState().with_answer_delay(300).with_answer_delay(450)
        assert state.total_answer_delay_ms == 750

    def test_copies_leave_original_untouched(self):
        state = SessionState()
        state.with_correct_count(4)
        assert state.correct_count == 0

    def test_with_answer_delay_rejects_negative(self):
        with pytest.raises(InvalidArgumentError):
            SessionState().with_answer_delay(-5)


# ---------------------------------------------------------------------------
# TestCompletion
# ---------------------------------------------------------------------------


class TestCompletion:
    """Tests for is_complete and current_card."""

    def test_current_card_follows_index(self, manager, session):
        assert manager.current_card(session).id == 100
        session = manager.mark_know(session)
        assert manager.current_card(session).id == 101

    def test_complete_after_last_card(self, manager, session):
        for _ in range(3):
            assert not manager.is_complete(session)
            session = manager.mark_hard(session)
        assert manager.is_complete(session)
        assert manager.current_card(session) is None

    def test_actions_on_complete_session_return_same_object(self, manager, session):
        """Should treat every action on a complete session as a no-op."""
        for _ in range(3):
            session = manager.mark_know(session)

        assert manager.mark_know(session) is session
        assert manager.mark_hard(session) is session
        assert manager.start_question(session) is session
        assert manager.reveal(session) is session


# ---------------------------------------------------------------------------
# TestTransitions
# ---------------------------------------------------------------------------


class TestTransitions:
    """Tests for question, reveal, know and hard."""

    def test_mark_know_then_progress(self, manager, session):
        session = manager.mark_know(session)

        assert session.index == 1
        assert session.correct_count == 1
        assert session.total_viewed == 1
        assert session.known_card_ids_delta == (100,)

        progress = manager.progress(session)
        assert (progress.current, progress.total, progress.percent) == (2, 3, 67)

    def test_mark_hard_records_failed_card(self, manager, session):
        session = manager.mark_hard(session)

        assert session.index == 1
        assert session.hard_count == 1
        assert session.total_viewed == 1
        assert session.failed_card_ids == (100,)
        assert session.known_card_ids_delta == ()

    def test_start_question_starts_timer(self, manager, session, clock):
        started = manager.start_question(session)
        assert started.card_show_time == clock.now()
        assert started.showing_answer is False

    def test_reveal_adds_elapsed_time(self, manager, session, clock):
        session = manager.start_question(session)
        clock.advance(milliseconds=2500)

        revealed = manager.reveal(session)

        assert revealed.showing_answer is True
        assert revealed.total_answer_delay_ms == 2500

    def test_reveal_without_question_adds_nothing(self, manager, session):
        """Should show the answer without error when no timer is running."""
        revealed = manager.reveal(session)
        assert revealed.showing_answer is True
        assert revealed.total_answer_delay_ms == 0

    def test_second_reveal_adds_nothing(self, manager, session, clock):
        session = manager.start_question(session)
        clock.advance(seconds=1)
        session = manager.reveal(session)
        clock.advance(seconds=5)

        again = manager.reveal(session)

        assert again.total_answer_delay_ms == 1000
        assert again.card_show_time is None

    def test_reveal_ignores_clock_going_backwards(self, manager, session, clock):
        session = manager.start_question(session)
        clock.advance(seconds=-3)
        assert manager.reveal(session).total_answer_delay_ms == 0

    def test_delay_accumulates_across_cards(self, manager, session, clock):
        for seconds in (1, 2, 3):
            session = manager.start_question(session)
            clock.advance(seconds=seconds)
            session = manager.mark_know(manager.reveal(session))

        assert session.total_answer_delay_ms == 6000
        assert manager.is_complete(session)

    def test_moving_on_hides_answer(self, manager, session, clock):
        session = manager.reveal(manager.start_question(session))
        session = manager.mark_know(session)
        assert session.showing_answer is False
        assert session.card_show_time is None


# ---------------------------------------------------------------------------
# TestProgress
# ---------------------------------------------------------------------------


class TestProgress:
    """Tests for progress and completion metrics."""

    def test_single_card_is_full_at_start(self, manager):
        session = PracticeSession.create(1, _cards(1), START)
        assert manager.progress(session).percent == 100

    def test_current_is_clamped_when_complete(self, manager):
        session = manager.mark_know(PracticeSession.create(1, _cards(2), START))
        session = manager.mark_know(session)
        progress = manager.progress(session)
        assert progress.current == 2
        assert progress.percent == 100

    def test_percent_rounds_half_up(self, manager):
        # 1 of 8 is 12.5%
        session = PracticeSession.create(1, _cards(8), START)
        assert manager.progress(session).percent == 13

    def test_completion_metrics_have_floor_of_one(self, manager, session):
        metrics = manager.completion_metrics(session)
        assert metrics.total_cards == 3
        assert metrics.session_minutes == 1
        assert metrics.avg_seconds == 1

    def test_completion_metrics(self, manager, session, clock):
        for _ in range(3):
            session = manager.start_question(session)
            clock.advance(seconds=4)
            session = manager.mark_hard(manager.reveal(session))
        clock.advance(minutes=2)

        metrics = manager.completion_metrics(session)

        assert metrics.session_minutes == 2
        assert metrics.avg_seconds == 4


# ---------------------------------------------------------------------------
# TestRecordAndPersist
# ---------------------------------------------------------------------------


class TestRecordAndPersist:
    """Tests for handing a finished session to the session service."""

    def test_forwards_counters_and_duration(self, manager, session, clock):
        session = manager.start_question(session)
        clock.advance(seconds=1)
        session = manager.mark_know(manager.reveal(session))
        clock.advance(seconds=29)
        service = MagicMock()

        manager.record_and_persist(session, service)

        service.record_session.assert_called_once_with(
            1, 1, 1, 0, timedelta(seconds=30), 1000, [100]
        )
