"""Pytest configuration and shared fixtures."""

import os

# The app reads DATABASE_URL at import time
os.environ.setdefault("DATABASE_URL", "sqlite://")

from datetime import datetime, timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from app.api.v1.endpoints.utils import get_clock, get_practice_registry
from app.core.clock import Clock
from app.core.database import get_session
from app.main import app
from app.models.models import Deck, Flashcard, User
from app.services.practice_registry import PracticeSessionRegistry


class FakeClock(Clock):
    """Clock that only moves when told to."""

    def __init__(self, start=datetime(2024, 3, 15, 9, 0, 0)):
        self.current = start

    def now(self):
        return self.current

    def advance(self, **kwargs):
        self.current = self.current + timedelta(**kwargs)


@pytest.fixture
def clock():
    """Provide a controllable clock."""
    return FakeClock()


@pytest.fixture
def engine():
    """Provide a fresh in-memory database with all tables created."""
    test_engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(test_engine)
    yield test_engine
    SQLModel.metadata.drop_all(test_engine)


@pytest.fixture
def db_session(engine):
    """Provide a database session bound to the test database."""
    with Session(engine) as session:
        yield session


@pytest.fixture
def registry():
    """Provide an empty practice session registry."""
    return PracticeSessionRegistry()


@pytest.fixture
def client(engine, clock, registry):
    """Provide a TestClient wired to the test database, clock and registry."""

    def _get_session():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_session] = _get_session
    app.dependency_overrides[get_clock] = lambda: clock
    app.dependency_overrides[get_practice_registry] = lambda: registry
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db_session):
    """Factory fixture for persisted users."""

    def _make(email="user@example.com", name="User", password="secret123", is_admin=False):
        user = User(
            email=email,
            name=name,
            password_hash=User.hash_password(password),
            is_admin=is_admin,
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _make


@pytest.fixture
def make_deck(db_session):
    """Factory fixture for a persisted deck with cards.

    Cards are given as (front, back) pairs and are stored in the given order.
    """

    def _make(user, title="Deck", cards=(("one", "uno"), ("two", "dos"), ("three", "tres"))):
        deck = Deck(user_id=user.id, title=title)
        db_session.add(deck)
        db_session.commit()
        db_session.refresh(deck)
        for front, back in cards:
            db_session.add(Flashcard(deck_id=deck.id, front_text=front, back_text=back))
        db_session.commit()
        return deck

    return _make
