"""Tests for stats_service against a real database."""

from datetime import date

import pytest
from sqlmodel import Session

from app.core.exceptions import InvalidArgumentError, NotFoundError
from app.services.flashcard_service import FlashcardService
from app.services.stats_service import DeckAggregate, SessionSummary, StatsService

TODAY = date(2024, 3, 15)
YESTERDAY = date(2024, 3, 14)


@pytest.fixture
def stats(db_session, clock):
    return StatsService(db_session, clock)


@pytest.fixture
def deck(make_user, make_deck):
    return make_deck(make_user())


@pytest.fixture
def card_ids(db_session, deck):
    return [card.id for card in FlashcardService(db_session).get_flashcards_by_deck_id(deck.id)]


@pytest.fixture
def enforce_foreign_keys(db_session):
    """Make SQLite reject dangling references like PostgreSQL does."""
    db_session.connection().exec_driver_sql("PRAGMA foreign_keys=ON")


def _append(stats, deck_id, day, viewed=3, correct=2, hard=1, known=()):
    stats.append_session(
        deck_id=deck_id,
        day=day,
        viewed=viewed,
        correct=correct,
        repeat=0,
        hard=hard,
        duration_ms=60000,
        answer_delay_ms=3000,
        known_card_ids_delta=known,
    )


# ---------------------------------------------------------------------------
# TestSessionSummary
# ---------------------------------------------------------------------------


class TestSessionSummary:
    """Tests for SessionSummary validation."""

    def test_rejects_non_positive_deck(self):
        with pytest.raises(InvalidArgumentError):
            SessionSummary(deck_id=0, viewed=1, correct=1, hard=0, session_duration_ms=0, total_answer_delay_ms=0)

    @pytest.mark.parametrize("field", ["viewed", "correct", "hard", "session_duration_ms", "total_answer_delay_ms"])
    def test_rejects_negative_counter(self, field):
        values = dict(deck_id=1, viewed=1, correct=1, hard=0, session_duration_ms=0, total_answer_delay_ms=0)
        values[field] = -1
        with pytest.raises(InvalidArgumentError):
            SessionSummary(**values)


# ---------------------------------------------------------------------------
# TestAppendSession
# ---------------------------------------------------------------------------


class TestAppendSession:
    """Tests for the per-day upsert."""

    def test_first_session_inserts_row(self, stats, deck):
        _append(stats, deck.id, TODAY)

        [day] = stats.get_daily_stats(deck.id)
        assert day.date == TODAY
        assert (day.sessions, day.viewed, day.correct, day.hard) == (1, 3, 2, 1)
        assert day.total_duration_ms == 60000
        assert day.avg_delay_ms_per_card == 1000.0

    def test_same_day_increments(self, stats, deck):
        _append(stats, deck.id, TODAY)
        _append(stats, deck.id, TODAY, viewed=2, correct=0, hard=2)

        [day] = stats.get_daily_stats(deck.id)
        assert (day.sessions, day.viewed, day.correct, day.hard) == (2, 5, 2, 3)
        assert day.total_answer_delay_ms == 6000

    def test_days_are_sorted(self, stats, deck):
        _append(stats, deck.id, TODAY)
        _append(stats, deck.id, YESTERDAY)
        assert [day.date for day in stats.get_daily_stats(deck.id)] == [YESTERDAY, TODAY]

    def test_known_ids_are_unioned(self, stats, deck, card_ids):
        _append(stats, deck.id, TODAY, known=[card_ids[0], card_ids[0]])
        _append(stats, deck.id, TODAY, known=[card_ids[0], card_ids[1]])
        assert stats.get_known_card_ids(deck.id) == {card_ids[0], card_ids[1]}

    def test_known_ids_of_deleted_card_are_skipped(self, enforce_foreign_keys, stats, db_session, deck, card_ids):
        FlashcardService(db_session).delete_flashcard(card_ids[0])

        _append(stats, deck.id, TODAY, known=[card_ids[0], card_ids[1]])

        [day] = stats.get_daily_stats(deck.id)
        assert day.sessions == 1
        assert stats.get_known_card_ids(deck.id) == {card_ids[1]}

    def test_known_ids_of_other_deck_are_skipped(self, stats, deck, make_user, make_deck, db_session):
        other = make_deck(make_user(email="other@example.com"), title="Other")
        foreign_id = FlashcardService(db_session).get_flashcards_by_deck_id(other.id)[0].id

        _append(stats, deck.id, TODAY, known=[foreign_id])

        assert stats.get_known_card_ids(deck.id) == set()
        assert stats.get_known_card_ids(other.id) == set()

    def test_first_sessions_from_two_db_sessions_accumulate(self, stats, engine, clock, deck, card_ids):
        """Should fold both into one row when neither saw a row for the day."""
        with Session(engine) as first, Session(engine) as second:
            first_stats = StatsService(first, clock)
            second_stats = StatsService(second, clock)
            assert first_stats.get_daily_stats(deck.id) == second_stats.get_daily_stats(deck.id) == []

            _append(first_stats, deck.id, TODAY, known=[card_ids[0]])
            _append(second_stats, deck.id, TODAY, viewed=2, correct=1, hard=1, known=[card_ids[0], card_ids[1]])

        [day] = stats.get_daily_stats(deck.id)
        assert (day.sessions, day.viewed, day.correct, day.hard) == (2, 5, 3, 2)
        assert day.total_duration_ms == 120000
        assert stats.get_known_card_ids(deck.id) == {card_ids[0], card_ids[1]}

    def test_already_known_ids_are_left_alone(self, stats, deck, card_ids):
        stats.set_card_known(deck.id, card_ids[0], True)

        _append(stats, deck.id, TODAY, known=[card_ids[0], card_ids[2], card_ids[0]])

        assert stats.get_known_card_ids(deck.id) == {card_ids[0], card_ids[2]}

    def test_nothing_viewed_writes_nothing(self, stats, deck):
        _append(stats, deck.id, TODAY, viewed=0, correct=0, hard=0)
        assert stats.get_daily_stats(deck.id) == []

    def test_record_session_uses_clock_date(self, stats, deck, card_ids):
        stats.record_session(SessionSummary(
            deck_id=deck.id,
            viewed=1,
            correct=1,
            hard=0,
            session_duration_ms=5000,
            total_answer_delay_ms=1200,
            known_card_ids_delta=(card_ids[2],),
        ))

        [day] = stats.get_daily_stats(deck.id)
        assert day.date == TODAY
        assert stats.is_card_known(deck.id, card_ids[2])


# ---------------------------------------------------------------------------
# TestKnownCards
# ---------------------------------------------------------------------------


class TestKnownCards:
    """Tests for known flags and deck progress."""

    def test_set_and_clear(self, stats, deck, card_ids):
        stats.set_card_known(deck.id, card_ids[0], True)
        stats.set_card_known(deck.id, card_ids[0], True)
        assert stats.get_known_card_ids(deck.id) == {card_ids[0]}

        stats.set_card_known(deck.id, card_ids[0], False)
        assert stats.get_known_card_ids(deck.id) == set()

    def test_toggle_returns_new_state(self, stats, deck, card_ids):
        assert stats.toggle_card_known(deck.id, card_ids[1]) is True
        assert stats.toggle_card_known(deck.id, card_ids[1]) is False

    def test_progress_percent(self, stats, deck, card_ids):
        stats.set_card_known(deck.id, card_ids[0], True)
        assert stats.get_deck_progress_percent(deck.id, 3) == 33
        stats.set_card_known(deck.id, card_ids[1], True)
        assert stats.get_deck_progress_percent(deck.id, 3) == 67

    def test_progress_of_empty_deck(self, stats, deck):
        assert stats.get_deck_progress_percent(deck.id, 0) == 0

    def test_reset_keeps_history(self, stats, deck, card_ids):
        _append(stats, deck.id, TODAY, known=card_ids[:2])

        assert stats.reset_deck_progress(deck.id) == 2

        assert stats.get_known_card_ids(deck.id) == set()
        assert len(stats.get_daily_stats(deck.id)) == 1

    def test_reset_unknown_deck(self, stats):
        with pytest.raises(NotFoundError):
            stats.reset_deck_progress(999)


# ---------------------------------------------------------------------------
# TestAggregates
# ---------------------------------------------------------------------------


class TestAggregates:
    """Tests for today / all-time rollups."""

    def test_empty_input(self, stats):
        assert stats.get_aggregates_for_decks([]) == {}

    def test_rollup(self, stats, deck, make_user, make_deck):
        idle_deck = make_deck(make_user(email="other@example.com"), title="Idle")
        _append(stats, deck.id, YESTERDAY, viewed=4, correct=4, hard=0)
        _append(stats, deck.id, TODAY, viewed=3, correct=2, hard=1)

        result = stats.get_aggregates_for_decks([deck.id, idle_deck.id], TODAY)

        assert idle_deck.id not in result
        assert result[deck.id] == DeckAggregate(
            sessions_all=2,
            viewed_all=7,
            correct_all=6,
            repeat_all=0,
            hard_all=1,
            sessions_today=1,
            viewed_today=3,
            correct_today=2,
            repeat_today=0,
            hard_today=1,
        )

    def test_today_defaults_to_clock(self, stats, deck):
        _append(stats, deck.id, TODAY)
        assert stats.get_aggregates_for_decks([deck.id])[deck.id].sessions_today == 1
