"""
News service for business logic related to announcements.
"""
import logging
from typing import List, Optional

from sqlmodel import Session, select

from app.core.clock import utcnow
from app.core.exceptions import NotFoundError
from app.models.models import News
from app.utils.text_utils import require_text

logger = logging.getLogger(__name__)
audit_logger = logging.getLogger("app.audit")


def get_all_news(session: Session) -> List[News]:
    """All news items, newest first."""
    statement = select(News).order_by(News.created_at.desc(), News.id.desc())
    return list(session.exec(statement).all())


def create_news(session: Session, title: str, content: str, author: str) -> News:
    news = News(
        title=require_text(title, "Title", 255),
        content=require_text(content, "Content"),
        author=require_text(author, "Author", 255),
    )
    session.add(news)
    session.commit()
    session.refresh(news)

    audit_logger.info(f"News created: id={news.id}, title='{news.title}', author={news.author}")
    return news


def update_news(session: Session, news_id: int, title: str, content: str, author: Optional[str] = None) -> News:
    """
    Replace title and content of a news item.

    Raises:
        NotFoundError: If the news item does not exist
    """
    news = session.get(News, news_id)
    if not news:
        logger.warning(f"Attempted to update non-existent news: id={news_id}")
        raise NotFoundError(f"News not found with id: {news_id}")

    old_title = news.title
    news.title = require_text(title, "Title", 255)
    news.content = require_text(content, "Content")
    if author is not None:
        news.author = require_text(author, "Author", 255)
    news.updated_at = utcnow()
    session.add(news)
    session.commit()
    session.refresh(news)

    audit_logger.info(f"News updated: id={news_id}, title '{old_title}' -> '{news.title}'")
    return news


def delete_news(session: Session, news_id: int) -> bool:
    """Delete a news item. Returns False if it did not exist."""
    news = session.get(News, news_id)
    if not news:
        logger.warning(f"Attempted to delete non-existent news: id={news_id}")
        return False

    session.delete(news)
    session.commit()
    audit_logger.warning(f"News deleted: id={news_id}, title='{news.title}', author={news.author}")
    return True
