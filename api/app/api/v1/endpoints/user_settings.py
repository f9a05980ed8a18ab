"""
User settings endpoints.
"""
from fastapi import APIRouter, Depends
from sqlmodel import Session

from app.core.database import get_session
from app.schemas.user_settings import LocaleResponse, UpdateLocaleRequest
from app.services.user_settings_service import get_preferred_locale, set_preferred_locale
from app.api.v1.endpoints.utils import get_user_or_404

router = APIRouter(prefix="/settings", tags=["settings"])


@router.get("/users/{user_id}/locale", response_model=LocaleResponse)
async def get_locale(user_id: int, session: Session = Depends(get_session)):
    """Preferred interface locale of a user ("en" when never set)."""
    get_user_or_404(session, user_id)
    return LocaleResponse(user_id=user_id, locale=get_preferred_locale(session, user_id))


@router.put("/users/{user_id}/locale", response_model=LocaleResponse)
async def update_locale(
    user_id: int,
    request: UpdateLocaleRequest,
    session: Session = Depends(get_session)
):
    get_user_or_404(session, user_id)
    locale = set_preferred_locale(session, user_id, request.locale)
    return LocaleResponse(user_id=user_id, locale=locale)
