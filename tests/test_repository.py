import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from notebox.notes.repository import NoteRepository

pytestmark = pytest.mark.anyio


async def test_owner_scoping_and_missing_rows(session_factory):
    repo = NoteRepository(session_factory)
    created = (await repo.insert_one({"title": "t", "content": "c", "user_id": "u1"})).data

    assert (await repo.update_by_id(created.id, {"title": "x"}, "u2")).data == 0
    assert (await repo.delete_by_id(created.id, "u2")).data == 0
    assert (await repo.update_by_id("missing", {"title": "x"}, "u1")).error is None

    rows = (await repo.select_by_owner("u1")).data
    assert [(r.id, r.title) for r in rows] == [(created.id, "t")]


async def test_database_errors_come_back_as_error_indicator():
    # no tables created
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
    repo = NoteRepository(sessionmaker(bind=engine))

    res = await repo.select_by_owner("u1")
    assert res.data is None and "notes" in res.error

    res = await repo.insert_one({"title": "t", "content": "c", "user_id": "u1"})
    assert res.data is None and res.error
