"""
News endpoints. Anyone may read; only administrators may write.
"""
from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from app.core.database import get_session
from app.core.exceptions import NotFoundError
from app.schemas.news import NewsResponse, NewsListResponse, NewsRequest, NewsDeleteResponse
from app.services.news_service import get_all_news, create_news, update_news, delete_news
from app.api.v1.endpoints.utils import require_admin

router = APIRouter(prefix="/news", tags=["news"])


@router.get("", response_model=NewsListResponse)
async def list_news(session: Session = Depends(get_session)):
    """All news items, newest first."""
    return NewsListResponse(news=[NewsResponse.model_validate(item) for item in get_all_news(session)])


@router.post("", response_model=NewsResponse, status_code=status.HTTP_201_CREATED)
async def create_news_item(
    user_id: int,
    request: NewsRequest,
    session: Session = Depends(get_session)
):
    """Publish a news item. The author is the administrator's name."""
    admin = require_admin(session, user_id)
    news = create_news(session, request.title, request.content, admin.name)
    return NewsResponse.model_validate(news)


@router.put("/{news_id}", response_model=NewsResponse)
async def update_news_item(
    news_id: int,
    user_id: int,
    request: NewsRequest,
    session: Session = Depends(get_session)
):
    """Replace title and content of a news item."""
    require_admin(session, user_id)
    news = update_news(session, news_id, request.title, request.content)
    return NewsResponse.model_validate(news)


@router.delete("/{news_id}", response_model=NewsDeleteResponse)
async def delete_news_item(
    news_id: int,
    user_id: int,
    session: Session = Depends(get_session)
):
    """Delete a news item."""
    require_admin(session, user_id)
    if not delete_news(session, news_id):
        raise NotFoundError(f"News not found with id: {news_id}")
    return NewsDeleteResponse(id=news_id, deleted=True)
