from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator


class ViewType(str, Enum):
    GRID = "grid"
    LIST = "list"


class Note(BaseModel):
    model_config = ConfigDict(from_attributes=True, frozen=True)
    id: str
    title: str
    content: str
    summary: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    user_id: str

    @field_validator("created_at", "updated_at")
    @classmethod
    def _as_utc(cls, v: datetime) -> datetime:
        # SQLite hands back naive datetimes
        return v if v.tzinfo else v.replace(tzinfo=timezone.utc)


def _not_blank(v: str) -> str:
    if not v.strip():
        raise ValueError("must not be blank")
    return v


class NoteUpdate(BaseModel):
    """Fields that may be patched independently. Unset fields stay untouched.

    `title` and `content` may be omitted but never cleared; `summary` may be
    set to null.
    """
    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    content: Optional[str] = Field(default=None, min_length=1)
    summary: Optional[str] = None

    @field_validator("title", "content")
    @classmethod
    def _present_and_not_blank(cls, v: Optional[str]) -> str:
        # only runs for values the caller actually sent
        if v is None:
            raise ValueError("may be omitted but not null")
        return _not_blank(v)

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True)


# --- HTTP payloads ---
class NoteCreateIn(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    content: str = Field(min_length=1)

    @field_validator("title", "content")
    @classmethod
    def _blank_check(cls, v: str) -> str:
        return _not_blank(v)


class SelectionIn(BaseModel):
    note_id: Optional[str] = None


class ViewIn(BaseModel):
    view_type: ViewType


class NoteList(BaseModel):
    items: List[Note]
    view_type: ViewType
    selected_note_id: Optional[str] = None
    is_loading: bool = False


class SummaryOut(BaseModel):
    note_id: str
    summary: str
