"""
Flashcard schemas.
"""
from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime


class FlashcardResponse(BaseModel):
    """Flashcard response schema."""
    id: int
    deck_id: int
    front_text: str
    back_text: str
    example: Optional[str] = None
    image_url: Optional[str] = None
    known: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class FlashcardsResponse(BaseModel):
    """Response schema for a deck's flashcards."""
    flashcards: List[FlashcardResponse]


class CreateFlashcardRequest(BaseModel):
    """Request schema for creating a flashcard in a deck."""
    front_text: str = Field(..., max_length=300, description="Text on the front face")
    back_text: str = Field(..., max_length=300, description="Text on the back face")
    example: Optional[str] = Field(None, max_length=500, description="Optional usage example")
    image_url: Optional[str] = Field(None, max_length=2048, description="Optional image reference")


class UpdateFlashcardRequest(BaseModel):
    """Request schema for updating a flashcard. Omitted fields keep their value."""
    front_text: Optional[str] = Field(None, max_length=300)
    back_text: Optional[str] = Field(None, max_length=300)
    example: Optional[str] = Field(None, max_length=500)
    image_url: Optional[str] = Field(None, max_length=2048)


class SetKnownRequest(BaseModel):
    known: bool


class KnownStateResponse(BaseModel):
    deck_id: int
    card_id: int
    known: bool
