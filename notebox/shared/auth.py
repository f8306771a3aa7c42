# notebox/shared/auth.py
"""Who owns the notes of a request.

A bearer token resolves to a `Principal`; its `owner_id` is the value stored
in `notes.user_id`. Registered users get a JWT whose subject is `users.id`;
with AUTH_DEMO on, the demo token maps to DEMO_USER, which has no users row.
"""
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Literal, Optional, Protocol, runtime_checkable

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import jwt, JWTError  # python-jose[cryptography]

from notebox.shared.config import settings

logger = logging.getLogger("notebox.auth")

bearer = HTTPBearer(auto_error=False, scheme_name="bearerAuth")


@dataclass(frozen=True)
class Principal:
    owner_id: str
    token: str
    mode: Literal["demo", "jwt"]


@runtime_checkable
class AuthCollaborator(Protocol):
    async def current_user_id(self) -> str | None:
        ...


def create_access_token(owner_id: str, minutes: Optional[int] = None) -> str:
    now = datetime.now(timezone.utc)
    claims = {
        "sub": owner_id,
        "iat": int(now.timestamp()),
        "exp": int((now + timedelta(minutes=minutes or settings.JWT_EXPIRE_MIN)).timestamp()),
    }
    if settings.JWT_ISS:
        claims["iss"] = settings.JWT_ISS
    if settings.JWT_AUD:
        claims["aud"] = settings.JWT_AUD
    return jwt.encode(claims, settings.JWT_KEY, algorithm=settings.JWT_ALG)


def resolve_token(token: str) -> Principal:
    """Raises JWTError for anything that does not name an owner."""
    if settings.AUTH_DEMO and token == settings.DEMO_TOKEN:
        return Principal(owner_id=settings.DEMO_USER, token=token, mode="demo")

    claims = jwt.decode(
        token,
        settings.JWT_KEY,
        algorithms=[settings.JWT_ALG],
        audience=settings.JWT_AUD,
        issuer=settings.JWT_ISS,
        options={"verify_aud": bool(settings.JWT_AUD), "verify_iss": bool(settings.JWT_ISS)},
    )
    if not claims.get("sub"):
        raise JWTError("missing sub")
    return Principal(owner_id=claims["sub"], token=token, mode="jwt")


def get_principal(creds: HTTPAuthorizationCredentials = Depends(bearer)) -> Principal:
    if not creds:
        raise HTTPException(401, "missing bearer token")
    try:
        return resolve_token(creds.credentials)
    except JWTError as e:
        raise HTTPException(401, f"invalid token: {e}")


class BearerAuth:
    """Auth collaborator for the note store: the token's owner, or None once
    the token stops resolving (expired, revoked demo mode)."""

    def __init__(self, token: str | None):
        self.token = token

    async def current_user_id(self) -> str | None:
        if not self.token:
            return None
        try:
            return resolve_token(self.token).owner_id
        except JWTError as e:
            logger.info("auth_token_rejected", extra={"reason": str(e)})
            return None
