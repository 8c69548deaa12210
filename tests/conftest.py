"""Shared pytest fixtures for the Collabia matching engine tests."""
import os

# collabia.database builds its engine at import time.
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")

import itertools
import uuid
from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

import collabia.models  # noqa: F401  (registers every table on Base.metadata)
from collabia.clock import utc_start_of_day
from collabia.database import Base
from collabia.models.user import User
from collabia.services.conversation_store import ConversationStore
from collabia.services.discovery_service import DiscoveryService
from collabia.services.interest_service import InterestService
from collabia.services.match_service import MatchService
from collabia.services.profile_store import ProfileStore
from collabia.services.ranking_service import RankingService
from collabia.services.swipe_service import SwipeService

NOW = datetime(2025, 3, 10, 12, 0, tzinfo=timezone.utc)


class FrozenClock:
    """Clock that only moves when a test tells it to."""

    def __init__(self, now: datetime = NOW) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


# ── Database ──────────────────────────────────────────────────────────────────

@pytest.fixture
async def engine(tmp_path):
    """File-backed SQLite so that separate sessions see each other's commits."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'collabia.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def clock():
    return FrozenClock()


@pytest.fixture
def make_user(db_session, clock):
    """Factory that inserts a user and returns it.

    Accounts are created one second apart so the candidate pool has a
    deterministic order.  ``last_active_at`` defaults to well outside every
    recency tier.
    """
    counter = itertools.count()

    async def _make(**overrides) -> User:
        n = next(counter)
        fields = {
            "id": uuid.uuid4(),
            "email": f"student{n}-{uuid.uuid4().hex[:6]}@collabia.ma",
            "name": f"Student {n}",
            "interests": [],
            "skills": [],
            "last_active_at": clock.now - timedelta(days=30),
            "created_at": NOW - timedelta(days=365) + timedelta(seconds=n),
        }
        fields.update(overrides)
        user = User(**fields)
        db_session.add(user)
        await db_session.flush()
        return user

    return _make


# ── Services ──────────────────────────────────────────────────────────────────

@pytest.fixture
def profile_store():
    return ProfileStore()


@pytest.fixture
def match_service(profile_store, clock):
    return MatchService(
        conversation_store=ConversationStore(clock=clock),
        profile_store=profile_store,
        clock=clock,
    )


@pytest.fixture
def interest_service(match_service, profile_store, clock):
    return InterestService(
        match_service=match_service,
        profile_store=profile_store,
        clock=clock,
    )


@pytest.fixture
def swipe_service(interest_service, profile_store, clock):
    return SwipeService(
        interest_service=interest_service,
        profile_store=profile_store,
        clock=clock,
        start_of_day=utc_start_of_day,
    )


@pytest.fixture
def ranking_service(profile_store, clock):
    return RankingService(profile_store=profile_store, clock=clock)


@pytest.fixture
def discovery_service(profile_store):
    return DiscoveryService(profile_store=profile_store)
