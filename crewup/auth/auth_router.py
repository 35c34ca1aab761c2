# crewup/auth/auth_router.py

from typing import Optional
import re

from fastapi import APIRouter, Depends, HTTPException
from fastapi.security import OAuth2PasswordBearer
from pydantic import BaseModel, EmailStr, field_validator
from sqlalchemy.orm import Session as DbSession

from crewup.database import get_db
from crewup.auth.session_provider import AuthError, Session, SessionProvider
from crewup.project.access import Actor

# ================= SECURITY =================
router = APIRouter(tags=["auth"])
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login", auto_error=False)

session_provider = SessionProvider()


def get_session_provider() -> SessionProvider:
    return session_provider


# ================= DEPENDENCIES =================
def get_current_session(
    token: Optional[str] = Depends(oauth2_scheme),
    provider: SessionProvider = Depends(get_session_provider),
    db: DbSession = Depends(get_db),
) -> Optional[Session]:
    return provider.get_current_session(db, token)


def get_current_actor(session: Optional[Session] = Depends(get_current_session)) -> Optional[Actor]:
    """Signed-in user, or None for anonymous visitors."""
    if session is None:
        return None
    return Actor(id=session.user_id, email=session.email)


def require_actor(actor: Optional[Actor] = Depends(get_current_actor)) -> Actor:
    if actor is None:
        raise HTTPException(401, "Invalid or expired token")
    return actor


# ================= SCHEMAS =================
def _check_password_strength(value: str) -> str:
    if len(value) < 8:
        raise ValueError("Password must be at least 8 chars")
    if not re.search(r"[A-Z]", value):
        raise ValueError("Must contain uppercase")
    if not re.search(r"\d", value):
        raise ValueError("Must contain number")
    if not re.search(r"[^A-Za-z0-9]", value):
        raise ValueError("Must contain symbol")
    return value


class RegisterRequest(BaseModel):
    email: EmailStr
    password: str
    confirm_password: str

    @field_validator("password")
    def validate_password(cls, value):
        return _check_password_strength(value)

    @field_validator("confirm_password")
    def passwords_match(cls, v, info):
        if v != info.data.get("password"):
            raise ValueError("Passwords do not match.")
        return v


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


def _token_response(session: Session) -> dict:
    return {
        "access_token": session.access_token,
        "token_type": "bearer",
        "user_id": session.user_id,
        "expires_at": session.expires_at.isoformat(),
    }


# ================= ROUTES =================
@router.post("/register", status_code=201)
def register_user(
    request: RegisterRequest,
    db: DbSession = Depends(get_db),
    provider: SessionProvider = Depends(get_session_provider),
):
    try:
        session = provider.sign_up(db, request.email, request.password)
    except AuthError as exc:
        raise HTTPException(exc.status_code, exc.message)

    return {"message": "Account created! You can now log in.", "email": session.email, **_token_response(session)}


@router.post("/login")
def login(
    request: LoginRequest,
    db: DbSession = Depends(get_db),
    provider: SessionProvider = Depends(get_session_provider),
):
    try:
        session = provider.sign_in_with_password(db, request.email, request.password)
    except AuthError as exc:
        raise HTTPException(exc.status_code, exc.message)

    return _token_response(session)


@router.post("/logout")
def logout(
    token: Optional[str] = Depends(oauth2_scheme),
    provider: SessionProvider = Depends(get_session_provider),
):
    provider.sign_out(token)
    return {"message": "Signed out"}


@router.get("/me")
def get_me(session: Optional[Session] = Depends(get_current_session)):
    if session is None:
        raise HTTPException(401, "Invalid or expired token")
    return {"id": session.user_id, "email": session.email}
