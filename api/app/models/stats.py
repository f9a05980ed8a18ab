"""
Statistics models - per-day session counters and known card flags.
"""
from sqlmodel import SQLModel, Field
from sqlalchemy import UniqueConstraint
from typing import Optional
import datetime as dt


class DeckDailyStats(SQLModel, table=True):
    """Deck daily stats table - one row of aggregated session counters per deck and day."""
    __tablename__ = "deck_daily_stats"
    
    deck_id: int = Field(foreign_key="decks.id", primary_key=True)
    date: dt.date = Field(primary_key=True)
    sessions: int = Field(default=0)
    viewed: int = Field(default=0)
    correct: int = Field(default=0)
    repeat_count: int = Field(default=0)
    hard: int = Field(default=0)
    total_duration_ms: int = Field(default=0)
    total_delay_ms: int = Field(default=0)


class KnownCard(SQLModel, table=True):
    """Known cards table - cards the user has marked as learned."""
    __tablename__ = "known_cards"
    __table_args__ = (
        UniqueConstraint("deck_id", "card_id", name="uk_known_cards_deck_card"),
    )
    
    id: Optional[int] = Field(default=None, primary_key=True)
    deck_id: int = Field(foreign_key="decks.id", index=True)
    card_id: int = Field(foreign_key="flashcards.id")
