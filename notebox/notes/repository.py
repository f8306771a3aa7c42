# notebox/notes/repository.py
import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Generic, Optional, Protocol, TypeVar, runtime_checkable

from sqlalchemy import select, desc, update, delete
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from notebox.notes.models import NoteRow
from notebox.notes.schemas import Note

logger = logging.getLogger("notebox.notes.repository")

T = TypeVar("T")


@dataclass(frozen=True)
class RepoResult(Generic[T]):
    """Either a payload or an error indicator; repository calls never raise."""
    data: Optional[T] = None
    error: Optional[str] = None


@runtime_checkable
class NotePersistence(Protocol):
    async def insert_one(self, fields: dict[str, Any]) -> RepoResult[Note]:
        ...

    async def select_by_owner(self, owner_id: str) -> RepoResult[list[Note]]:
        ...

    async def update_by_id(self, note_id: str, fields: dict[str, Any], owner_id: str) -> RepoResult[int]:
        ...

    async def delete_by_id(self, note_id: str, owner_id: str) -> RepoResult[int]:
        ...


class NoteRepository:
    """`notes` table over a SQLAlchemy session factory.

    Session work is blocking, so each call runs in a worker thread.
    """

    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    async def _run(self, op: str, fn) -> RepoResult:
        try:
            return RepoResult(data=await asyncio.to_thread(self._in_session, fn))
        except SQLAlchemyError as e:
            logger.error("repo_%s_failed", op, extra={"error": str(e)})
            return RepoResult(error=str(e))

    def _in_session(self, fn):
        with self.session_factory() as db:
            try:
                return fn(db)
            except SQLAlchemyError:
                db.rollback()
                raise

    async def insert_one(self, fields: dict[str, Any]) -> RepoResult[Note]:
        def _insert(db: Session) -> Note:
            row = NoteRow(**fields)
            db.add(row)
            db.commit()
            db.refresh(row)
            return Note.model_validate(row)
        return await self._run("insert", _insert)

    async def select_by_owner(self, owner_id: str) -> RepoResult[list[Note]]:
        def _select(db: Session) -> list[Note]:
            stmt = select(NoteRow).where(NoteRow.user_id == owner_id).order_by(desc(NoteRow.updated_at))
            return [Note.model_validate(r) for r in db.scalars(stmt).all()]
        return await self._run("select", _select)

    async def update_by_id(self, note_id: str, fields: dict[str, Any], owner_id: str) -> RepoResult[int]:
        # zero matched rows is not an error
        def _update(db: Session) -> int:
            stmt = update(NoteRow).where(NoteRow.id == note_id, NoteRow.user_id == owner_id).values(**fields)
            n = db.execute(stmt).rowcount
            db.commit()
            return n
        return await self._run("update", _update)

    async def delete_by_id(self, note_id: str, owner_id: str) -> RepoResult[int]:
        def _delete(db: Session) -> int:
            n = db.execute(delete(NoteRow).where(NoteRow.id == note_id, NoteRow.user_id == owner_id)).rowcount
            db.commit()
            return n
        return await self._run("delete", _delete)
