"""
Flashcard model.
"""
from sqlmodel import SQLModel, Field, Relationship
from typing import Optional, TYPE_CHECKING
from datetime import datetime

from app.core.clock import utcnow

if TYPE_CHECKING:
    from app.models.deck import Deck


class Flashcard(SQLModel, table=True):
    """Flashcards table - individual front/back cards within a deck."""
    __tablename__ = "flashcards"
    
    id: Optional[int] = Field(default=None, primary_key=True)
    deck_id: int = Field(foreign_key="decks.id", index=True)
    front_text: str = Field(max_length=300)
    back_text: str = Field(max_length=300)
    example: Optional[str] = Field(default=None, max_length=500)
    image_url: Optional[str] = Field(default=None, max_length=2048)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)
    
    # Relationships
    deck: "Deck" = Relationship(back_populates="flashcards")
