"""
Statistics schemas.
"""
from pydantic import BaseModel
from typing import List
import datetime as dt


class DailyStatsResponse(BaseModel):
    """Practice on one deck during one day."""
    date: dt.date
    sessions: int
    viewed: int
    correct: int
    repeat: int
    hard: int
    total_duration_ms: int
    total_answer_delay_ms: int
    avg_delay_ms_per_card: float


class DeckDailyStatsResponse(BaseModel):
    deck_id: int
    days: List[DailyStatsResponse]


class DeckAggregateResponse(BaseModel):
    """Today / all-time rollup for one deck."""
    deck_id: int
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


class DeckAggregatesResponse(BaseModel):
    aggregates: List[DeckAggregateResponse]
