import os

# must be set before notebox is imported
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("SUMMARY_DELAY_SECONDS", "0")
os.environ.setdefault("AUTH_DEMO", "true")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from notebox.main import app
from notebox.shared.db import Base, get_db, get_session_factory
from notebox.notes.api import reset_stores


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def session_factory():
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(bind=engine, autoflush=False, autocommit=False, expire_on_commit=False)
    engine.dispose()


@pytest.fixture
def client(session_factory):
    def _db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_session_factory] = lambda: session_factory
    app.dependency_overrides[get_db] = _db
    reset_stores()
    yield TestClient(app)
    app.dependency_overrides.clear()
    reset_stores()


@pytest.fixture
def demo_headers():
    return {"Authorization": "Bearer demo"}
