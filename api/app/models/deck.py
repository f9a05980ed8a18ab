"""
Deck model.
"""
from sqlmodel import SQLModel, Field, Relationship
from typing import Optional, List, TYPE_CHECKING
from datetime import datetime

from app.core.clock import utcnow

if TYPE_CHECKING:
    from app.models.user import User
    from app.models.flashcard import Flashcard


class Deck(SQLModel, table=True):
    """Decks table - a user's collection of flashcards."""
    __tablename__ = "decks"
    
    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="users.id", index=True)
    title: str = Field(max_length=120)
    description: Optional[str] = Field(default=None, max_length=500)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)
    
    # Relationships
    user: "User" = Relationship(back_populates="decks")
    flashcards: List["Flashcard"] = Relationship(back_populates="deck")
