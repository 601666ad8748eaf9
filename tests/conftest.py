from __future__ import annotations

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import otpcrm.database.db  # noqa: F401  registers the SQLite foreign key pragma
from otpcrm.core.config import get_config
from otpcrm.models import Base, Lead, User


@pytest.fixture(autouse=True)
def _fresh_config():
    get_config.cache_clear()
    yield
    get_config.cache_clear()


@pytest.fixture
def session():
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        engine.dispose()


@pytest.fixture
def file_session_factory(tmp_path):
    """Sessions on a file-backed SQLite database, one connection per session."""
    engine = create_engine(
        f"sqlite:///{tmp_path / 'otpcrm_test.db'}",
        connect_args={"check_same_thread": False, "timeout": 30},
    )
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)
    engine.dispose()


@pytest.fixture
def user(session):
    row = User(username="caller1", email="caller1@example.com", full_name="Casey Caller")
    session.add(row)
    session.commit()
    return row


@pytest.fixture
def make_lead(session):
    """Insert lead rows directly, bypassing allocation."""

    def _make(lead_code: str, **fields) -> Lead:
        fields.setdefault("property_address", f"{lead_code} Test Street")
        lead = Lead(lead_id=lead_code, **fields)
        session.add(lead)
        session.commit()
        return lead

    return _make
