"""
Practice session schemas.
"""
from pydantic import BaseModel, Field
from typing import List, Optional

from app.models.enums import PracticeDirection


class PracticeSettingsResponse(BaseModel):
    """Process-wide practice defaults."""
    default_count: int
    random_order: bool
    direction: PracticeDirection


class StartPracticeRequest(BaseModel):
    """
    Start a practice run. Omitted options fall back to the practice defaults;
    count is additionally capped at the number of cards left to learn.
    """
    deck_id: int = Field(..., gt=0)
    count: Optional[int] = Field(None, ge=1, description="Maximum number of cards in the run")
    random_order: Optional[bool] = Field(None, description="Shuffle the cards")
    direction: Optional[PracticeDirection] = Field(None, description="Which face is shown first")


class PracticeCardResponse(BaseModel):
    """The card being practiced, showing only the faces visible right now."""
    id: int
    question: str
    answer: Optional[str] = None
    example: Optional[str] = None
    image_url: Optional[str] = None


class ProgressResponse(BaseModel):
    current: int
    total: int
    total_viewed: int
    correct: int
    hard: int
    percent: int


class PracticeSessionResponse(BaseModel):
    """Snapshot of a running practice session."""
    token: str
    deck_id: int
    direction: PracticeDirection
    is_repeat: bool
    complete: bool
    showing_answer: bool
    card: Optional[PracticeCardResponse] = None
    progress: ProgressResponse
    total_answer_delay_ms: int
    known_card_ids: List[int]
    failed_card_ids: List[int]


class CompletionMetricsResponse(BaseModel):
    total_cards: int
    session_minutes: int
    avg_seconds: int


class FinishPracticeResponse(BaseModel):
    """Result of finishing a run: the summary was recorded and the session dropped."""
    deck_id: int
    recorded: bool
    progress: ProgressResponse
    metrics: CompletionMetricsResponse
    failed_card_ids: List[int]
