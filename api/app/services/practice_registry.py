"""
Process-local registry of running practice sessions.

HTTP requests are stateless, so the practice endpoints keep each user's current
PracticeSession here under an opaque token. Each action stores the new value in
place of the old one; finishing or abandoning a run removes it. Runs that are
left open stay until the process restarts, except those of a deleted deck,
which are dropped together with the deck.
"""
import logging
import uuid
from typing import Dict, Optional

from app.services.practice_session import PracticeSession

logger = logging.getLogger(__name__)


class PracticeSessionRegistry:
    """Token -> PracticeSession map."""

    def __init__(self):
        self._sessions: Dict[str, PracticeSession] = {}

    def add(self, session: PracticeSession) -> str:
        token = uuid.uuid4().hex
        self._sessions[token] = session
        logger.debug(f"Registered practice session {token} for deck {session.deck_id}")
        return token

    def get(self, token: str) -> Optional[PracticeSession]:
        return self._sessions.get(token)

    def replace(self, token: str, session: PracticeSession) -> None:
        self._sessions[token] = session

    def remove(self, token: str) -> Optional[PracticeSession]:
        return self._sessions.pop(token, None)

    def remove_deck(self, deck_id: int) -> int:
        """Drop every session of a deck. Returns how many were dropped."""
        tokens = [token for token, session in self._sessions.items() if session.deck_id == deck_id]
        for token in tokens:
            del self._sessions[token]
        if tokens:
            logger.info(f"Dropped {len(tokens)} practice sessions of deleted deck {deck_id}")
        return len(tokens)

    def __len__(self) -> int:
        return len(self._sessions)


practice_sessions = PracticeSessionRegistry()
