"""
Deck endpoints - deck CRUD, deck cards and known-card progress.
"""
from fastapi import APIRouter, Depends, status
from sqlmodel import Session
from typing import Optional
import logging

from app.core.database import get_session
from app.core.exceptions import NotFoundError
from app.models.models import Deck, Flashcard
from app.schemas.deck import (
    DeckResponse,
    DecksResponse,
    CreateDeckRequest,
    UpdateDeckRequest,
    DeckProgressResponse,
    ResetProgressResponse,
)
from app.schemas.flashcard import (
    FlashcardResponse,
    FlashcardsResponse,
    CreateFlashcardRequest,
    SetKnownRequest,
    KnownStateResponse,
)
from app.services.deck_service import DeckService, build_deck
from app.services.flashcard_service import FlashcardService
from app.services.practice_registry import PracticeSessionRegistry
from app.services.stats_service import StatsService
from app.api.v1.endpoints.utils import (
    get_practice_registry,
    get_deck_service,
    get_flashcard_service,
    get_stats_service,
    get_deck_or_404,
    get_user_or_404,
    flashcard_to_response,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/decks", tags=["decks"])


def deck_to_response(deck: Deck, card_count: int) -> DeckResponse:
    return DeckResponse(
        id=deck.id,
        user_id=deck.user_id,
        title=deck.title,
        description=deck.description,
        card_count=card_count,
        created_at=deck.created_at,
        updated_at=deck.updated_at
    )


def get_deck_card_or_404(flashcard_service: FlashcardService, deck_id: int, card_id: int) -> Flashcard:
    card = flashcard_service.get_flashcard_by_id(card_id)
    if not card or card.deck_id != deck_id:
        raise NotFoundError(f"Flashcard {card_id} not found in deck {deck_id}")
    return card


@router.get("", response_model=DecksResponse)
async def get_decks(
    user_id: int,
    deck_service: DeckService = Depends(get_deck_service),
    flashcard_service: FlashcardService = Depends(get_flashcard_service),
    session: Session = Depends(get_session)
):
    """Get all decks of a user, most recently created first."""
    get_user_or_404(session, user_id)
    decks = deck_service.get_decks_by_user_id(user_id)
    return DecksResponse(decks=[
        deck_to_response(deck, len(flashcard_service.get_flashcards_by_deck_id(deck.id)))
        for deck in decks
    ])


@router.post("", response_model=DeckResponse, status_code=status.HTTP_201_CREATED)
async def create_deck(
    request: CreateDeckRequest,
    deck_service: DeckService = Depends(get_deck_service),
    session: Session = Depends(get_session)
):
    """Create a new deck."""
    get_user_or_404(session, request.user_id)
    deck = deck_service.save_deck(build_deck(request.user_id, request.title, request.description))
    return deck_to_response(deck, 0)


@router.get("/{deck_id}", response_model=DeckResponse)
async def get_deck(
    deck_id: int,
    deck_service: DeckService = Depends(get_deck_service),
    flashcard_service: FlashcardService = Depends(get_flashcard_service)
):
    """Get a deck by ID."""
    deck = get_deck_or_404(deck_service, deck_id)
    return deck_to_response(deck, len(flashcard_service.get_flashcards_by_deck_id(deck_id)))


@router.put("/{deck_id}", response_model=DeckResponse)
async def update_deck(
    deck_id: int,
    request: UpdateDeckRequest,
    deck_service: DeckService = Depends(get_deck_service),
    flashcard_service: FlashcardService = Depends(get_flashcard_service)
):
    """Update title and/or description of a deck."""
    deck = get_deck_or_404(deck_service, deck_id)

    # Update fields if provided
    if request.title is not None:
        deck.title = request.title
    if request.description is not None:
        deck.description = request.description

    deck = deck_service.save_deck(deck)
    return deck_to_response(deck, len(flashcard_service.get_flashcards_by_deck_id(deck_id)))


@router.delete("/{deck_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_deck(
    deck_id: int,
    deck_service: DeckService = Depends(get_deck_service),
    registry: PracticeSessionRegistry = Depends(get_practice_registry)
):
    """Delete a deck with its flashcards, statistics and running practice sessions."""
    get_deck_or_404(deck_service, deck_id)
    deck_service.delete_deck(deck_id)
    registry.remove_deck(deck_id)


@router.get("/{deck_id}/flashcards", response_model=FlashcardsResponse)
async def get_deck_flashcards(
    deck_id: int,
    query: Optional[str] = None,
    hide_known: bool = False,
    deck_service: DeckService = Depends(get_deck_service),
    flashcard_service: FlashcardService = Depends(get_flashcard_service),
    stats_service: StatsService = Depends(get_stats_service)
):
    """
    Get the flashcards of a deck.

    Args:
        deck_id: The deck ID
        query: Optional case-insensitive text matched against front, back and example
        hide_known: Leave out cards marked as known
    """
    get_deck_or_404(deck_service, deck_id)
    known_ids = stats_service.get_known_card_ids(deck_id)
    cards = flashcard_service.list_filtered_flashcards(deck_id, query, known_ids, hide_known)
    return FlashcardsResponse(flashcards=[
        flashcard_to_response(card, card.id in known_ids) for card in cards
    ])


@router.post("/{deck_id}/flashcards", response_model=FlashcardResponse, status_code=status.HTTP_201_CREATED)
async def create_flashcard(
    deck_id: int,
    request: CreateFlashcardRequest,
    deck_service: DeckService = Depends(get_deck_service),
    flashcard_service: FlashcardService = Depends(get_flashcard_service)
):
    """Add a flashcard to a deck."""
    get_deck_or_404(deck_service, deck_id)
    flashcard = flashcard_service.save_flashcard(Flashcard(
        deck_id=deck_id,
        front_text=request.front_text,
        back_text=request.back_text,
        example=request.example,
        image_url=request.image_url
    ))
    return flashcard_to_response(flashcard)


@router.get("/{deck_id}/progress", response_model=DeckProgressResponse)
async def get_deck_progress(
    deck_id: int,
    deck_service: DeckService = Depends(get_deck_service),
    flashcard_service: FlashcardService = Depends(get_flashcard_service),
    stats_service: StatsService = Depends(get_stats_service)
):
    """Share of the deck's cards that are marked known."""
    get_deck_or_404(deck_service, deck_id)
    deck_size = len(flashcard_service.get_flashcards_by_deck_id(deck_id))
    return DeckProgressResponse(
        deck_id=deck_id,
        deck_size=deck_size,
        known_count=len(stats_service.get_known_card_ids(deck_id)),
        percent=stats_service.get_deck_progress_percent(deck_id, deck_size)
    )


@router.post("/{deck_id}/reset-progress", response_model=ResetProgressResponse)
async def reset_deck_progress(
    deck_id: int,
    stats_service: StatsService = Depends(get_stats_service)
):
    """Mark every card of the deck as not known again."""
    cleared = stats_service.reset_deck_progress(deck_id)
    return ResetProgressResponse(deck_id=deck_id, cleared_count=cleared)


@router.put("/{deck_id}/flashcards/{card_id}/known", response_model=KnownStateResponse)
async def set_card_known(
    deck_id: int,
    card_id: int,
    request: SetKnownRequest,
    flashcard_service: FlashcardService = Depends(get_flashcard_service),
    stats_service: StatsService = Depends(get_stats_service)
):
    """Mark a card as known or not known."""
    get_deck_card_or_404(flashcard_service, deck_id, card_id)
    stats_service.set_card_known(deck_id, card_id, request.known)
    return KnownStateResponse(deck_id=deck_id, card_id=card_id, known=request.known)


@router.post("/{deck_id}/flashcards/{card_id}/toggle-known", response_model=KnownStateResponse)
async def toggle_card_known(
    deck_id: int,
    card_id: int,
    flashcard_service: FlashcardService = Depends(get_flashcard_service),
    stats_service: StatsService = Depends(get_stats_service)
):
    """Flip the known flag of a card."""
    get_deck_card_or_404(flashcard_service, deck_id, card_id)
    known = stats_service.toggle_card_known(deck_id, card_id)
    return KnownStateResponse(deck_id=deck_id, card_id=card_id, known=known)
