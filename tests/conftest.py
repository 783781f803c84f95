"""
Shared fixtures: SQLite-backed guest store and repository
"""

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from app.core.config import Settings
from app.core.db import Base
from app.models import MasterGuest
from app.services.guest_repository import GuestRepository
from app.services.stores import SqlGuestStore

# Test database setup
SQLALCHEMY_DATABASE_URL = "sqlite:///./test_rsvp.db"
engine = create_engine(SQLALCHEMY_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

MASTER_LIST = [
    ("Juan Pérez", 2),
    ("Ana López", 1),
    ("Familia Rodríguez Gómez", 4),
]

@pytest.fixture
def anyio_backend():
    return "asyncio"

@pytest.fixture
def session_factory():
    """Create test database tables"""
    Base.metadata.create_all(bind=engine)
    try:
        yield TestingSessionLocal
    finally:
        Base.metadata.drop_all(bind=engine)

@pytest.fixture
def test_settings():
    return Settings(
        SUPABASE_URL=None,
        SUPABASE_ANON_KEY=None,
        DEFAULT_COMPANIONS=2,
        MAX_COMPANIONS=2,
        COMPANIONS_FROM_TRIGGER=False,
        DISPLAY_TIMEZONE="UTC",
    )

@pytest.fixture
def store(session_factory):
    return SqlGuestStore(session_factory)

@pytest.fixture
def repository(store, test_settings):
    return GuestRepository(store, test_settings)

@pytest.fixture
def master_list(session_factory):
    """Seed the master guest list"""
    db = session_factory()
    try:
        for name, pases in MASTER_LIST:
            db.add(MasterGuest(name=name, pases=pases))
        db.commit()
    finally:
        db.close()
    return MASTER_LIST
