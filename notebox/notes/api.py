# notebox/notes/api.py
from collections import OrderedDict

from fastapi import APIRouter, Depends
from sqlalchemy.orm import sessionmaker

from notebox.shared.auth import BearerAuth, Principal, get_principal
from notebox.shared.config import settings
from notebox.shared.db import get_session_factory
from notebox.shared.http import ok, err
from notebox.notes.repository import NoteRepository
from notebox.notes.schemas import NoteCreateIn, NoteUpdate, NoteList, SelectionIn, SummaryOut, ViewIn
from notebox.notes.store import NoteStore, Outcome, StoreError

router = APIRouter(prefix="/notes", tags=["Notes"])

# owner id -> store, in LRU order. Selection and view preference last until
# the owner falls out of the NOTE_STORE_CACHE_SIZE most recently active owners.
_STORES: OrderedDict[str, NoteStore] = OrderedDict()

_STATUS = {
    StoreError.UNAUTHENTICATED: 401,
    StoreError.NOT_FOUND: 404,
    StoreError.SUMMARIZE_FAILURE: 502,
    StoreError.PERSISTENCE_FAILURE: 503,
}


def get_store(principal: Principal = Depends(get_principal), session_factory: sessionmaker = Depends(get_session_factory)) -> NoteStore:
    store = _STORES.get(principal.owner_id)
    if store is None or store.repository.session_factory is not session_factory:
        store = NoteStore(BearerAuth(principal.token), NoteRepository(session_factory))
        _STORES[principal.owner_id] = store
    else:
        # a later request may carry a fresh token for the same owner
        store.auth = BearerAuth(principal.token)
    _STORES.move_to_end(principal.owner_id)
    while len(_STORES) > settings.NOTE_STORE_CACHE_SIZE:
        _STORES.popitem(last=False)
    return store


def reset_stores() -> None:
    _STORES.clear()


def _fail(out: Outcome, message: str | None = None):
    return err(message or out.error.value.replace("_", " "), code=out.error.value, status=_STATUS[out.error])


def _listing(store: NoteStore) -> dict:
    s = store.state
    return NoteList(
        items=list(s.notes),
        view_type=s.view_type,
        selected_note_id=s.selected_note.id if s.selected_note else None,
        is_loading=s.is_loading,
    ).model_dump(mode="json")


@router.get("")
async def list_notes(store: NoteStore = Depends(get_store)):
    out = await store.fetch_notes()
    if not out.ok:
        return _fail(out)
    return ok(_listing(store))


@router.get("/state")
def get_state(store: NoteStore = Depends(get_store)):
    # local snapshot only, no persistence round trip
    return ok(_listing(store))


@router.post("", status_code=201)
async def create_note(payload: NoteCreateIn, store: NoteStore = Depends(get_store)):
    out = await store.add_note(payload.title, payload.content)
    if not out.ok:
        return _fail(out)
    return ok(out.value.model_dump(mode="json"))


@router.patch("/{note_id}")
async def patch_note(note_id: str, payload: NoteUpdate, store: NoteStore = Depends(get_store)):
    out = await store.update_note(note_id, payload)
    if not out.ok:
        return _fail(out)
    if out.value == 0:
        return err("Note not found", code=StoreError.NOT_FOUND.value, status=404)
    note = store.find(note_id)
    return ok(note.model_dump(mode="json") if note else {"id": note_id, **payload.changes()})


@router.delete("/{note_id}")
async def remove_note(note_id: str, store: NoteStore = Depends(get_store)):
    out = await store.delete_note(note_id)
    if not out.ok:
        return _fail(out)
    return ok({"deleted": note_id})


@router.post("/{note_id}/summarize")
async def summarize(note_id: str, store: NoteStore = Depends(get_store)):
    if store.find(note_id) is None:
        fetched = await store.fetch_notes()
        if not fetched.ok:
            return _fail(fetched)
    out = await store.summarize_note(note_id)
    if not out.ok:
        return _fail(out, message=out.value)
    return ok(SummaryOut(note_id=note_id, summary=out.value).model_dump())


@router.put("/selection")
def select_note(payload: SelectionIn, store: NoteStore = Depends(get_store)):
    if payload.note_id is None:
        store.set_selected_note(None)
        return ok(_listing(store))
    note = store.find(payload.note_id)
    if note is None:
        return err("Note not found", code=StoreError.NOT_FOUND.value, status=404)
    store.set_selected_note(note)
    return ok(_listing(store))


@router.put("/view")
def set_view(payload: ViewIn, store: NoteStore = Depends(get_store)):
    store.set_view_type(payload.view_type)
    return ok(_listing(store))
