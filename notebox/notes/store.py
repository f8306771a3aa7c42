"""State container for the current user's notes.

`NoteStore` owns the note list, the selected note, the view preference and a
busy flag. State is an immutable `NoteState` snapshot that is replaced whole on
every change; listeners registered with `subscribe` receive each new snapshot.

Operations never raise for expected failures. Each returns an `Outcome` whose
`error` names what went wrong (no user, persistence failure, unknown id,
summarizer failure) while the state is left as it was.

The busy flag is only an indicator. Calls are not serialized: an edit and a
summarize in flight on the same note race, and whichever write lands last
wins. A summarize that finishes after its note was deleted still issues its
update; the repository matches no row, so nothing is written back.
"""
import logging
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Generic, Optional, TypeVar

from notebox.notes.repository import NotePersistence
from notebox.notes.schemas import Note, NoteUpdate, ViewType
from notebox.shared.auth import AuthCollaborator
from notebox.summarizer.service import DelayedSummarizer, Summarizer

logger = logging.getLogger("notebox.notes.store")

T = TypeVar("T")

NOT_FOUND_MESSAGE = "Note not found"
SUMMARY_FAILED_MESSAGE = "Failed to generate summary"


class StoreError(str, Enum):
    UNAUTHENTICATED = "unauthenticated"
    PERSISTENCE_FAILURE = "persistence_failure"
    NOT_FOUND = "not_found"
    SUMMARIZE_FAILURE = "summarize_failure"


@dataclass(frozen=True)
class Outcome(Generic[T]):
    value: Optional[T] = None
    error: Optional[StoreError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class NoteState:
    notes: tuple[Note, ...] = ()
    selected_note: Optional[Note] = None
    view_type: ViewType = ViewType.GRID
    is_loading: bool = False


Listener = Callable[[NoteState], None]


class NoteStore:
    def __init__(self, auth: AuthCollaborator, repository: NotePersistence, summarizer: Summarizer | None = None):
        self.auth = auth
        self.repository = repository
        self.summarizer = summarizer or DelayedSummarizer()
        self._state = NoteState()
        self._listeners: list[Listener] = []

    @property
    def state(self) -> NoteState:
        return self._state

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)
        return unsubscribe

    def _set(self, **changes: Any) -> None:
        self._state = replace(self._state, **changes)
        for listener in list(self._listeners):
            listener(self._state)

    def find(self, note_id: str) -> Note | None:
        return next((n for n in self._state.notes if n.id == note_id), None)

    # --- synchronous UI state ---

    def set_selected_note(self, note: Note | None) -> None:
        self._set(selected_note=note)

    def set_view_type(self, view_type: ViewType | str) -> None:
        self._set(view_type=ViewType(view_type))

    # --- persistence-backed operations ---

    async def fetch_notes(self) -> Outcome[list[Note]]:
        self._set(is_loading=True)
        try:
            user_id = await self.auth.current_user_id()
            if not user_id:
                logger.warning("fetch_notes_unauthenticated")
                self._set(notes=(), is_loading=False)
                return Outcome(error=StoreError.UNAUTHENTICATED)

            res = await self.repository.select_by_owner(user_id)
            if res.error:
                logger.error("fetch_notes_failed", extra={"user_id": user_id, "error": res.error})
                self._set(is_loading=False)
                return Outcome(error=StoreError.PERSISTENCE_FAILURE)

            notes = list(res.data or [])
            self._set(notes=tuple(notes), is_loading=False)
            return Outcome(value=notes)
        except Exception:
            logger.exception("fetch_notes_error")
            self._set(is_loading=False)
            return Outcome(error=StoreError.PERSISTENCE_FAILURE)

    async def add_note(self, title: str, content: str) -> Outcome[Note]:
        self._set(is_loading=True)
        try:
            user_id = await self.auth.current_user_id()
            if not user_id:
                logger.warning("add_note_unauthenticated")
                self._set(is_loading=False)
                return Outcome(error=StoreError.UNAUTHENTICATED)

            res = await self.repository.insert_one({"title": title, "content": content, "user_id": user_id})
            if res.error or res.data is None:
                logger.error("add_note_failed", extra={"user_id": user_id, "error": res.error})
                self._set(is_loading=False)
                return Outcome(error=StoreError.PERSISTENCE_FAILURE)

            created = res.data
            # read the list after the await; other calls may have changed it meanwhile
            self._set(notes=(created, *self._state.notes), is_loading=False)
            logger.info("note_added", extra={"note_id": created.id, "user_id": user_id})
            return Outcome(value=created)
        except Exception:
            logger.exception("add_note_error")
            self._set(is_loading=False)
            return Outcome(error=StoreError.PERSISTENCE_FAILURE)

    async def update_note(self, note_id: str, updates: NoteUpdate) -> Outcome[int]:
        """Patch a note. `value` is the number of stored rows the write matched."""
        self._set(is_loading=True)
        try:
            user_id = await self.auth.current_user_id()
            if not user_id:
                logger.warning("update_note_unauthenticated", extra={"note_id": note_id})
                self._set(is_loading=False)
                return Outcome(error=StoreError.UNAUTHENTICATED)

            changes = {**updates.changes(), "updated_at": datetime.now(timezone.utc)}
            res = await self.repository.update_by_id(note_id, changes, user_id)
            if res.error:
                logger.error("update_note_failed", extra={"note_id": note_id, "error": res.error})
                self._set(is_loading=False)
                return Outcome(error=StoreError.PERSISTENCE_FAILURE)

            selected = self._state.selected_note
            self._set(
                notes=tuple(n.model_copy(update=changes) if n.id == note_id else n for n in self._state.notes),
                selected_note=selected.model_copy(update=changes) if selected and selected.id == note_id else selected,
                is_loading=False,
            )
            return Outcome(value=res.data or 0)
        except Exception:
            logger.exception("update_note_error", extra={"note_id": note_id})
            self._set(is_loading=False)
            return Outcome(error=StoreError.PERSISTENCE_FAILURE)

    async def delete_note(self, note_id: str) -> Outcome[str]:
        self._set(is_loading=True)
        try:
            user_id = await self.auth.current_user_id()
            if not user_id:
                logger.warning("delete_note_unauthenticated", extra={"note_id": note_id})
                self._set(is_loading=False)
                return Outcome(error=StoreError.UNAUTHENTICATED)

            res = await self.repository.delete_by_id(note_id, user_id)
            if res.error:
                logger.error("delete_note_failed", extra={"note_id": note_id, "error": res.error})
                self._set(is_loading=False)
                return Outcome(error=StoreError.PERSISTENCE_FAILURE)

            selected = self._state.selected_note
            self._set(
                notes=tuple(n for n in self._state.notes if n.id != note_id),
                selected_note=None if selected and selected.id == note_id else selected,
                is_loading=False,
            )
            return Outcome(value=note_id)
        except Exception:
            logger.exception("delete_note_error", extra={"note_id": note_id})
            self._set(is_loading=False)
            return Outcome(error=StoreError.PERSISTENCE_FAILURE)

    async def summarize_note(self, note_id: str) -> Outcome[str]:
        """Summarize a note from the in-memory list and persist the summary.

        On failure `value` carries a user-facing message instead of a summary.
        """
        self._set(is_loading=True)
        note = self.find(note_id)
        if note is None:
            self._set(is_loading=False)
            return Outcome(value=NOT_FOUND_MESSAGE, error=StoreError.NOT_FOUND)

        try:
            summary = await self.summarizer(note.content)
            saved = await self.update_note(note_id, NoteUpdate(summary=summary))
        except Exception:
            logger.exception("summarize_note_error", extra={"note_id": note_id})
            self._set(is_loading=False)
            return Outcome(value=SUMMARY_FAILED_MESSAGE, error=StoreError.SUMMARIZE_FAILURE)

        self._set(is_loading=False)
        if not saved.ok:
            return Outcome(value=SUMMARY_FAILED_MESSAGE, error=saved.error)
        logger.info("note_summarized", extra={"note_id": note_id})
        return Outcome(value=summary)
