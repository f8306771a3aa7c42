# notebox/auth/api.py
from fastapi import APIRouter, Depends
from fastapi.security import OAuth2PasswordRequestForm
from pydantic import BaseModel, EmailStr, Field
from sqlalchemy.orm import Session

from notebox.shared.db import get_db
from notebox.shared.auth import Principal, create_access_token, get_principal
from notebox.shared.config import settings
from notebox.shared.http import ok, err
from notebox.auth.service import EmailTaken, register_owner, owner_for_login, describe_owner

router = APIRouter(prefix="/auth", tags=["Auth"])

class RegisterIn(BaseModel):
    email: EmailStr
    password: str = Field(min_length=6)

@router.post("/register", status_code=201)
def api_register(inb: RegisterIn, db: Session = Depends(get_db)):
    try:
        user = register_owner(db, inb.email, inb.password)
    except EmailTaken as e:
        return err(str(e), code="email_taken", status=400)
    return ok({"owner_id": user.id, "email": user.email})

@router.post("/token")
def api_token(form: OAuth2PasswordRequestForm = Depends(), db: Session = Depends(get_db)):
    if settings.AUTH_DEMO and form.username == settings.DEMO_USER:
        # paste the demo token in Swagger's Authorize
        return {"access_token": settings.DEMO_TOKEN, "token_type": "bearer", "demo": True}
    owner_id = owner_for_login(db, form.username, form.password)
    if owner_id is None:
        return err("invalid credentials", code="invalid_credentials", status=401)
    return {"access_token": create_access_token(owner_id), "token_type": "bearer", "demo": False}

@router.get("/me")
def api_me(principal: Principal = Depends(get_principal), db: Session = Depends(get_db)):
    return ok({**describe_owner(db, principal.owner_id), "mode": principal.mode})
