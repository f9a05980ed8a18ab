"""
API v1 router aggregation.
"""
from fastapi import APIRouter
from app.api.v1.endpoints import (
    auth, decks, flashcards, practice, stats, news, user_settings
)

api_router = APIRouter()

# Include all endpoint routers
# Note: Each router already defines its own prefix, so we don't add another one here
api_router.include_router(auth.router)
api_router.include_router(decks.router)
api_router.include_router(flashcards.router)
api_router.include_router(practice.router)
api_router.include_router(stats.router)
api_router.include_router(news.router)
api_router.include_router(user_settings.router)
