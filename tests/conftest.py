"""
Shared fixtures.

Tests run against in-memory SQLite; the environment must be set before
anything from shelter_visits is imported, since settings are cached.
"""
import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["DEFAULT_TIMEZONE"] = "Europe/Lisbon"
os.environ["PARTIAL_DAY_BLOCKS_WHOLE_DAY"] = "true"

from datetime import datetime, timedelta, timezone

import pytest
import pytz
from jose import jwt

from shelter_visits.config.database import SessionLocal, engine
from shelter_visits.config.settings import settings
from shelter_visits.models import Base

ORG_ID = "org-happy-paws"
OTHER_ORG_ID = "org-second-chance"

# Tuesday 2030-01-01 08:00 UTC (Lisbon is UTC+0 in winter)
NOW = datetime(2030, 1, 1, 8, 0, tzinfo=pytz.UTC)


def fixed_clock(moment: datetime = NOW):
    return lambda: moment


def create_access_token(data: dict, expires_delta: timedelta = None) -> str:
    """Owner token as the identity service would issue it"""
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(minutes=settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES))

    to_encode = dict(data, exp=expire, iat=now, type="access")
    return jwt.encode(to_encode, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def clock():
    return fixed_clock()


@pytest.fixture
def lisbon():
    return pytz.timezone("Europe/Lisbon")
