"""
Practice endpoints - run a practice session over a deck's not-known cards.

A session lives in the process-local registry under the token returned when it
is started. Each action replaces the stored session with its successor.
"""
from fastapi import APIRouter, Depends, status
from typing import Optional
import logging

from app.core.clock import Clock
from app.core.config import PracticeSettings
from app.core.exceptions import ConflictError, NotFoundError
from app.models.enums import PracticeDirection
from app.schemas.practice import (
    PracticeSettingsResponse,
    StartPracticeRequest,
    PracticeCardResponse,
    ProgressResponse,
    PracticeSessionResponse,
    CompletionMetricsResponse,
    FinishPracticeResponse,
)
from app.services.deck_service import DeckService
from app.services.practice_registry import PracticeSessionRegistry
from app.services.practice_service import PracticeSessionService
from app.services.practice_session import PracticeCard, PracticeSession, PracticeSessionManager
from app.api.v1.endpoints.utils import (
    get_clock,
    get_practice_settings,
    get_practice_registry,
    get_deck_service,
    get_practice_service,
    get_deck_or_404,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/practice", tags=["practice"])


def get_session_manager(clock: Clock = Depends(get_clock)) -> PracticeSessionManager:
    return PracticeSessionManager(clock)


def get_practice_session_or_404(registry: PracticeSessionRegistry, token: str) -> PracticeSession:
    practice_session = registry.get(token)
    if practice_session is None:
        raise NotFoundError(f"Practice session {token} not found")
    return practice_session


def card_to_response(
    card: PracticeCard,
    direction: PracticeDirection,
    showing_answer: bool
) -> PracticeCardResponse:
    if direction == PracticeDirection.BACK_TO_FRONT:
        question, answer = card.back_text, card.front_text
    else:
        question, answer = card.front_text, card.back_text
    return PracticeCardResponse(
        id=card.id,
        question=question,
        answer=answer if showing_answer else None,
        example=card.example if showing_answer else None,
        image_url=card.image_url
    )


def progress_to_response(manager: PracticeSessionManager, practice_session: PracticeSession) -> ProgressResponse:
    progress = manager.progress(practice_session)
    return ProgressResponse(
        current=progress.current,
        total=progress.total,
        total_viewed=progress.total_viewed,
        correct=progress.correct,
        hard=progress.hard,
        percent=progress.percent
    )


def session_to_response(
    token: str,
    manager: PracticeSessionManager,
    practice_session: PracticeSession
) -> PracticeSessionResponse:
    card = manager.current_card(practice_session)
    return PracticeSessionResponse(
        token=token,
        deck_id=practice_session.deck_id,
        direction=practice_session.data.direction,
        is_repeat=practice_session.data.is_repeat,
        complete=manager.is_complete(practice_session),
        showing_answer=practice_session.showing_answer,
        card=card_to_response(card, practice_session.data.direction, practice_session.showing_answer) if card else None,
        progress=progress_to_response(manager, practice_session),
        total_answer_delay_ms=practice_session.total_answer_delay_ms,
        known_card_ids=list(practice_session.known_card_ids_delta),
        failed_card_ids=list(practice_session.failed_card_ids)
    )


def register_new_session(
    registry: PracticeSessionRegistry,
    manager: PracticeSessionManager,
    practice_session: PracticeSession
) -> PracticeSessionResponse:
    # The first question is shown right away, so its timer starts now
    practice_session = manager.start_question(practice_session)
    token = registry.add(practice_session)
    return session_to_response(token, manager, practice_session)


@router.get("/settings", response_model=PracticeSettingsResponse)
async def get_settings(
    deck_id: Optional[int] = None,
    practice_settings: PracticeSettings = Depends(get_practice_settings),
    deck_service: DeckService = Depends(get_deck_service),
    practice_service: PracticeSessionService = Depends(get_practice_service)
):
    """
    Practice defaults.

    With a deck_id, default_count is capped at the number of cards the deck
    still has to learn.
    """
    default_count = practice_settings.get_default_count()
    if deck_id is not None:
        get_deck_or_404(deck_service, deck_id)
        default_count = practice_service.resolve_default_count(deck_id)
    return PracticeSettingsResponse(
        default_count=default_count,
        random_order=practice_service.is_random(),
        direction=practice_service.default_direction()
    )


@router.post("/sessions", response_model=PracticeSessionResponse, status_code=status.HTTP_201_CREATED)
async def start_practice(
    request: StartPracticeRequest,
    deck_service: DeckService = Depends(get_deck_service),
    practice_service: PracticeSessionService = Depends(get_practice_service),
    registry: PracticeSessionRegistry = Depends(get_practice_registry),
    manager: PracticeSessionManager = Depends(get_session_manager)
):
    """Start a practice session over the deck's not-known cards."""
    get_deck_or_404(deck_service, request.deck_id)

    count = request.count if request.count is not None else practice_service.resolve_default_count(request.deck_id)
    randomize = request.random_order if request.random_order is not None else practice_service.is_random()

    practice_session = practice_service.start_session(request.deck_id, count, randomize, request.direction)
    if practice_session is None:
        raise ConflictError(f"All cards of deck {request.deck_id} are already known")

    logger.info(f"Practice started on deck {request.deck_id} with {len(practice_session.cards)} cards")
    return register_new_session(registry, manager, practice_session)


@router.get("/sessions/{token}", response_model=PracticeSessionResponse)
async def get_practice(
    token: str,
    registry: PracticeSessionRegistry = Depends(get_practice_registry),
    manager: PracticeSessionManager = Depends(get_session_manager)
):
    """Current state of a practice session."""
    practice_session = get_practice_session_or_404(registry, token)
    return session_to_response(token, manager, practice_session)


@router.post("/sessions/{token}/question", response_model=PracticeSessionResponse)
async def show_question(
    token: str,
    registry: PracticeSessionRegistry = Depends(get_practice_registry),
    manager: PracticeSessionManager = Depends(get_session_manager)
):
    """Show the question of the current card again and restart its timer."""
    practice_session = manager.start_question(get_practice_session_or_404(registry, token))
    registry.replace(token, practice_session)
    return session_to_response(token, manager, practice_session)


@router.post("/sessions/{token}/reveal", response_model=PracticeSessionResponse)
async def reveal_answer(
    token: str,
    registry: PracticeSessionRegistry = Depends(get_practice_registry),
    manager: PracticeSessionManager = Depends(get_session_manager)
):
    """Show the answer of the current card."""
    practice_session = manager.reveal(get_practice_session_or_404(registry, token))
    registry.replace(token, practice_session)
    return session_to_response(token, manager, practice_session)


@router.post("/sessions/{token}/know", response_model=PracticeSessionResponse)
async def mark_know(
    token: str,
    registry: PracticeSessionRegistry = Depends(get_practice_registry),
    manager: PracticeSessionManager = Depends(get_session_manager)
):
    """Mark the current card as known and move on to the next one."""
    practice_session = manager.start_question(manager.mark_know(get_practice_session_or_404(registry, token)))
    registry.replace(token, practice_session)
    return session_to_response(token, manager, practice_session)


@router.post("/sessions/{token}/hard", response_model=PracticeSessionResponse)
async def mark_hard(
    token: str,
    registry: PracticeSessionRegistry = Depends(get_practice_registry),
    manager: PracticeSessionManager = Depends(get_session_manager)
):
    """Mark the current card as hard and move on to the next one."""
    practice_session = manager.start_question(manager.mark_hard(get_practice_session_or_404(registry, token)))
    registry.replace(token, practice_session)
    return session_to_response(token, manager, practice_session)


@router.post("/sessions/{token}/finish", response_model=FinishPracticeResponse)
async def finish_practice(
    token: str,
    registry: PracticeSessionRegistry = Depends(get_practice_registry),
    manager: PracticeSessionManager = Depends(get_session_manager),
    practice_service: PracticeSessionService = Depends(get_practice_service)
):
    """
    Record the session's statistics and close it.

    A session may be finished early; only the cards answered so far are
    recorded, and a session with no answered cards records nothing.
    """
    practice_session = get_practice_session_or_404(registry, token)
    manager.record_and_persist(practice_session, practice_service)
    metrics = manager.completion_metrics(practice_session)
    registry.remove(token)

    return FinishPracticeResponse(
        deck_id=practice_session.deck_id,
        recorded=practice_session.total_viewed > 0,
        progress=progress_to_response(manager, practice_session),
        metrics=CompletionMetricsResponse(
            total_cards=metrics.total_cards,
            session_minutes=metrics.session_minutes,
            avg_seconds=metrics.avg_seconds
        ),
        failed_card_ids=list(practice_session.failed_card_ids)
    )


@router.post("/sessions/{token}/repeat", response_model=PracticeSessionResponse, status_code=status.HTTP_201_CREATED)
async def repeat_practice(
    token: str,
    direction: Optional[PracticeDirection] = None,
    registry: PracticeSessionRegistry = Depends(get_practice_registry),
    manager: PracticeSessionManager = Depends(get_session_manager),
    practice_service: PracticeSessionService = Depends(get_practice_service)
):
    """
    Record a completed session and start a new one over the cards marked hard.

    Cards that were marked known in the meantime are left out. The new session
    gets a new token; the old one is closed.
    """
    practice_session = get_practice_session_or_404(registry, token)
    if not manager.is_complete(practice_session):
        raise ConflictError("Practice session is not complete yet")

    failed_cards = practice_service.get_failed_cards(practice_session.deck_id, practice_session.failed_card_ids)
    if not failed_cards:
        raise ConflictError("No hard cards to repeat")

    manager.record_and_persist(practice_session, practice_service)
    registry.remove(token)

    repeat_session = practice_service.start_repeat_session(
        practice_session.deck_id,
        failed_cards,
        direction or practice_session.data.direction
    )
    return register_new_session(registry, manager, repeat_session)


@router.delete("/sessions/{token}", status_code=status.HTTP_204_NO_CONTENT)
async def abandon_practice(
    token: str,
    registry: PracticeSessionRegistry = Depends(get_practice_registry)
):
    """Close a session without recording anything."""
    get_practice_session_or_404(registry, token)
    registry.remove(token)
