"""
Single flashcard endpoints. Cards are created through /decks/{deck_id}/flashcards.
"""
from fastapi import APIRouter, Depends, status
import logging

from app.core.exceptions import NotFoundError
from app.models.models import Flashcard
from app.schemas.flashcard import FlashcardResponse, UpdateFlashcardRequest
from app.services.flashcard_service import FlashcardService
from app.services.stats_service import StatsService
from app.api.v1.endpoints.utils import get_flashcard_service, get_stats_service, flashcard_to_response

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/flashcards", tags=["flashcards"])


def get_flashcard_or_404(flashcard_service: FlashcardService, flashcard_id: int) -> Flashcard:
    flashcard = flashcard_service.get_flashcard_by_id(flashcard_id)
    if not flashcard:
        raise NotFoundError(f"Flashcard with id {flashcard_id} not found")
    return flashcard


@router.get("/{flashcard_id}", response_model=FlashcardResponse)
async def get_flashcard(
    flashcard_id: int,
    flashcard_service: FlashcardService = Depends(get_flashcard_service),
    stats_service: StatsService = Depends(get_stats_service)
):
    """Get a flashcard by ID."""
    flashcard = get_flashcard_or_404(flashcard_service, flashcard_id)
    known = stats_service.is_card_known(flashcard.deck_id, flashcard.id)
    return flashcard_to_response(flashcard, known)


@router.put("/{flashcard_id}", response_model=FlashcardResponse)
async def update_flashcard(
    flashcard_id: int,
    request: UpdateFlashcardRequest,
    flashcard_service: FlashcardService = Depends(get_flashcard_service),
    stats_service: StatsService = Depends(get_stats_service)
):
    """
    Update a flashcard.

    Omitted fields keep their value. An empty string clears example and image_url.
    """
    flashcard = get_flashcard_or_404(flashcard_service, flashcard_id)

    if request.front_text is not None:
        flashcard.front_text = request.front_text
    if request.back_text is not None:
        flashcard.back_text = request.back_text
    if request.example is not None:
        flashcard.example = request.example
    if request.image_url is not None:
        flashcard.image_url = request.image_url

    flashcard = flashcard_service.save_flashcard(flashcard)
    known = stats_service.is_card_known(flashcard.deck_id, flashcard.id)
    return flashcard_to_response(flashcard, known)


@router.delete("/{flashcard_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_flashcard(
    flashcard_id: int,
    flashcard_service: FlashcardService = Depends(get_flashcard_service)
):
    """Delete a flashcard."""
    get_flashcard_or_404(flashcard_service, flashcard_id)
    flashcard_service.delete_flashcard(flashcard_id)
