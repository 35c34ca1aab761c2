# crewup/auth/session_provider.py

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional
from uuid import uuid4
import logging
import os

from dotenv import load_dotenv
from jose import jwt, JWTError
from passlib.context import CryptContext
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session as DbSession

from crewup.models.user import User
from crewup.project.store_guard import store_errors

# ================= ENV =================
load_dotenv(dotenv_path=os.path.join(os.path.dirname(__file__), "..", ".env"))

SECRET_KEY = os.getenv("SECRET_KEY")
ALGORITHM = os.getenv("ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "60"))

if not SECRET_KEY:
    raise RuntimeError("SECRET_KEY missing in .env!")

SIGNED_UP = "SIGNED_UP"
SIGNED_IN = "SIGNED_IN"
SIGNED_OUT = "SIGNED_OUT"

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")
logger = logging.getLogger("crewup.auth")


class AuthError(Exception):
    def __init__(self, message: str, status_code: int = 400):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


@dataclass(frozen=True)
class Session:
    access_token: str
    user_id: int
    email: str
    expires_at: datetime


SessionListener = Callable[[str, Optional[Session]], None]


# ================= HELPERS =================
def verify_password(plain: str, hashed: str) -> bool:
    return pwd_context.verify(plain, hashed)


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def create_access_token(user: User, minutes: int = ACCESS_TOKEN_EXPIRE_MINUTES) -> tuple[str, datetime]:
    exp = datetime.now(timezone.utc) + timedelta(minutes=minutes)
    claims = {"sub": str(user.id), "email": user.email, "jti": uuid4().hex, "exp": exp}
    return jwt.encode(claims, SECRET_KEY, algorithm=ALGORITHM), exp


class SessionProvider:
    """
    Owns sign-up / sign-in / sign-out and tells subscribers when the session changes.

    Tokens are stateless JWTs; sign-out revokes the token id until the token
    would have expired anyway.
    """

    def __init__(self):
        self._listeners: list[SessionListener] = []
        # jti -> exp (unix seconds)
        self._revoked: dict[str, float] = {}

    # -------------------------
    # Notifications
    # -------------------------

    def on_session_change(self, callback: SessionListener) -> Callable[[], None]:
        self._listeners.append(callback)

        def unsubscribe() -> None:
            if callback in self._listeners:
                self._listeners.remove(callback)

        return unsubscribe

    def _notify(self, event: str, session: Optional[Session]) -> None:
        for listener in list(self._listeners):
            try:
                listener(event, session)
            except Exception:
                # the state change already happened; a subscriber cannot undo it
                logger.exception("session_listener_failed", extra={"event": event})

    def _prune_revoked(self) -> None:
        now = datetime.now(timezone.utc).timestamp()
        for jti in [j for j, exp in self._revoked.items() if exp <= now]:
            del self._revoked[jti]

    # -------------------------
    # Sessions
    # -------------------------

    def _issue(self, user: User) -> Session:
        token, exp = create_access_token(user)
        return Session(access_token=token, user_id=user.id, email=user.email, expires_at=exp)

    def get_current_session(self, db: DbSession, token: Optional[str]) -> Optional[Session]:
        if not token:
            return None
        try:
            data = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
            user_id = int(data["sub"])
        except (JWTError, KeyError, ValueError):
            return None

        self._prune_revoked()
        if data.get("jti") in self._revoked:
            return None

        user = db.get(User, user_id)
        if not user or not user.is_active:
            return None

        return Session(
            access_token=token,
            user_id=user.id,
            email=user.email,
            expires_at=datetime.fromtimestamp(data["exp"], tz=timezone.utc),
        )

    def sign_up(self, db: DbSession, email: str, password: str) -> Session:
        email = email.strip().lower()
        if not password:
            raise AuthError("Password is required")

        exists = db.query(User).filter(User.email == email).first()
        if exists:
            raise AuthError("Email already registered")

        with store_errors(db, "sign_up"):
            user = User(email=email, password_hash=hash_password(password))
            db.add(user)
            try:
                db.commit()
            except IntegrityError:
                # registered by a parallel request since the check above
                db.rollback()
                raise AuthError("Email already registered")
            db.refresh(user)

        logger.info("user_signed_up", extra={"user_id": user.id})
        session = self._issue(user)
        self._notify(SIGNED_UP, session)
        return session

    def sign_in_with_password(self, db: DbSession, email: str, password: str) -> Session:
        email = email.strip().lower()
        user = db.query(User).filter(User.email == email).first()

        if not user or not verify_password(password, user.password_hash):
            logger.info("sign_in_failed", extra={"reason": "invalid_credentials"})
            raise AuthError("Invalid credentials", status_code=401)
        if not user.is_active:
            raise AuthError("Account disabled", status_code=403)

        session = self._issue(user)
        self._notify(SIGNED_IN, session)
        return session

    def sign_out(self, token: Optional[str]) -> None:
        if not token:
            return
        try:
            data = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM], options={"verify_exp": False})
        except JWTError:
            return

        self._prune_revoked()
        jti = data.get("jti")
        exp = data.get("exp")
        # an expired token is already unusable, nothing to remember
        if jti and exp and exp > datetime.now(timezone.utc).timestamp():
            self._revoked[jti] = exp
        logger.info("user_signed_out", extra={"user_id": data.get("sub")})
        self._notify(SIGNED_OUT, None)
