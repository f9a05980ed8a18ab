"""
Deck schemas.
"""
from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime


class DeckResponse(BaseModel):
    """Deck response schema."""
    id: int
    user_id: int
    title: str
    description: Optional[str] = None
    card_count: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class DecksResponse(BaseModel):
    """Response schema for decks list."""
    decks: List[DeckResponse]


class CreateDeckRequest(BaseModel):
    """Request schema for creating a deck."""
    user_id: int = Field(..., gt=0)
    title: str = Field(..., max_length=120)
    description: Optional[str] = Field(None, max_length=500)


class UpdateDeckRequest(BaseModel):
    """Request schema for updating a deck."""
    title: Optional[str] = Field(None, max_length=120)
    description: Optional[str] = Field(None, max_length=500)


class DeckProgressResponse(BaseModel):
    """Share of known cards in a deck."""
    deck_id: int
    deck_size: int
    known_count: int
    percent: int


class ResetProgressResponse(BaseModel):
    deck_id: int
    cleared_count: int
