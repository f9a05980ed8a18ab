"""
Statistics endpoints.
"""
from fastapi import APIRouter, Depends
from sqlmodel import Session
import logging

from app.core.database import get_session
from app.schemas.stats import (
    DailyStatsResponse,
    DeckDailyStatsResponse,
    DeckAggregateResponse,
    DeckAggregatesResponse,
)
from app.services.deck_service import DeckService
from app.services.stats_service import DeckAggregate, StatsService
from app.api.v1.endpoints.utils import get_deck_service, get_stats_service, get_deck_or_404, get_user_or_404

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/stats", tags=["stats"])


@router.get("/decks/{deck_id}/daily", response_model=DeckDailyStatsResponse)
async def get_deck_daily_stats(
    deck_id: int,
    deck_service: DeckService = Depends(get_deck_service),
    stats_service: StatsService = Depends(get_stats_service)
):
    """Daily practice history of a deck, oldest day first."""
    get_deck_or_404(deck_service, deck_id)
    days = [
        DailyStatsResponse(
            date=day.date,
            sessions=day.sessions,
            viewed=day.viewed,
            correct=day.correct,
            repeat=day.repeat,
            hard=day.hard,
            total_duration_ms=day.total_duration_ms,
            total_answer_delay_ms=day.total_answer_delay_ms,
            avg_delay_ms_per_card=day.avg_delay_ms_per_card
        )
        for day in stats_service.get_daily_stats(deck_id)
    ]
    return DeckDailyStatsResponse(deck_id=deck_id, days=days)


@router.get("/decks", response_model=DeckAggregatesResponse)
async def get_deck_aggregates(
    user_id: int,
    deck_service: DeckService = Depends(get_deck_service),
    stats_service: StatsService = Depends(get_stats_service),
    session: Session = Depends(get_session)
):
    """
    Today and all-time totals for each deck of a user.

    Decks without any recorded practice are reported with zero totals.
    """
    get_user_or_404(session, user_id)
    deck_ids = [deck.id for deck in deck_service.get_decks_by_user_id(user_id)]
    aggregates = stats_service.get_aggregates_for_decks(deck_ids)

    result = []
    for deck_id in deck_ids:
        agg = aggregates.get(deck_id, DeckAggregate())
        result.append(DeckAggregateResponse(
            deck_id=deck_id,
            sessions_all=agg.sessions_all,
            viewed_all=agg.viewed_all,
            correct_all=agg.correct_all,
            repeat_all=agg.repeat_all,
            hard_all=agg.hard_all,
            sessions_today=agg.sessions_today,
            viewed_today=agg.viewed_today,
            correct_today=agg.correct_today,
            repeat_today=agg.repeat_today,
            hard_today=agg.hard_today
        ))
    return DeckAggregatesResponse(aggregates=result)
