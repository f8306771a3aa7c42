# notebox/auth/service.py
import logging
import uuid

import bcrypt
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from notebox.auth.models import User
from notebox.notes.models import NoteRow

logger = logging.getLogger("notebox.auth")


class EmailTaken(ValueError):
    pass


def _normalize(email: str) -> str:
    return email.strip().lower()


def register_owner(db: Session, email: str, password: str) -> User:
    email = _normalize(email)
    if db.scalars(select(User).where(User.email == email)).first():
        raise EmailTaken("email_already_registered")
    user = User(id=uuid.uuid4().hex, email=email,
                password_hash=bcrypt.hashpw(password.encode(), bcrypt.gensalt()).decode())
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("owner_registered", extra={"user_id": user.id})
    return user


def owner_for_login(db: Session, email: str, password: str) -> str | None:
    """Owner id for valid credentials, else None."""
    user = db.scalars(select(User).where(User.email == _normalize(email))).first()
    if user is None:
        return None
    try:
        valid = bcrypt.checkpw(password.encode(), user.password_hash.encode())
    except ValueError:
        valid = False
    return user.id if valid else None


def describe_owner(db: Session, owner_id: str) -> dict:
    # the demo owner has notes but no users row
    user = db.get(User, owner_id)
    count = db.scalar(select(func.count()).select_from(NoteRow).where(NoteRow.user_id == owner_id))
    return {"owner_id": owner_id, "email": user.email if user else None, "note_count": count or 0}
