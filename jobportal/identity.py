# 🔹 FILE: jobportal/identity.py
# ==============================================================
# Job Portal – Identity / session provider
# - Email + password identities with signup metadata
# - Bearer-token sessions (JWT), revocable on sign-out
# - Session-change events: INITIAL_SESSION, SIGNED_IN, SIGNED_OUT,
#   TOKEN_REFRESHED
# One AuthClient per caller: it holds at most one current session.
# ==============================================================

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Optional
from uuid import UUID

from sqlmodel import Session

from . import results
from .gateway import Gateway
from .models import RevokedToken, User
from .results import Result, fail, ok
from .security import (
    TokenError,
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)
from .utils.normalize import utcnow

logger = logging.getLogger(__name__)


class AuthEvent(str, Enum):
    INITIAL_SESSION = "INITIAL_SESSION"
    SIGNED_IN = "SIGNED_IN"
    SIGNED_OUT = "SIGNED_OUT"
    TOKEN_REFRESHED = "TOKEN_REFRESHED"


@dataclass
class AuthSession:
    access_token: str
    user: User
    token_type: str = "bearer"


AuthListener = Callable[[AuthEvent, Optional[AuthSession]], None]


class Subscription:
    def __init__(self, client: "AuthClient", callback: AuthListener):
        self._client = client
        self.callback = callback
        self.active = True

    def unsubscribe(self) -> None:
        if self.active:
            self.active = False
            self._client._remove_listener(self)


class AuthClient:
    def __init__(self, session: Session, access_token: Optional[str] = None):
        self.gateway = Gateway(session)
        self._token = access_token
        self._session: Optional[AuthSession] = None
        self._resolved = access_token is None
        self._subscriptions: List[Subscription] = []

    # ---------- events ----------
    def on_auth_state_change(self, callback: AuthListener) -> Subscription:
        """Subscribe to session changes; the current session is delivered at once."""
        sub = Subscription(self, callback)
        self._subscriptions.append(sub)
        current = self.get_session()
        callback(AuthEvent.INITIAL_SESSION, current.data if current.ok else None)
        return sub

    def _remove_listener(self, sub: Subscription) -> None:
        if sub in self._subscriptions:
            self._subscriptions.remove(sub)

    def _emit(self, event: AuthEvent) -> None:
        logger.debug("[AUTH] %s (%s listeners)", event.value, len(self._subscriptions))
        for sub in list(self._subscriptions):
            if sub.active:
                sub.callback(event, self._session)

    # ---------- session ----------
    def _start_session(self, user: User) -> AuthSession:
        token = create_access_token({"sub": str(user.id), "email": user.email})
        self._token = token
        self._session = AuthSession(access_token=token, user=user)
        self._resolved = True
        return self._session

    def _resolve_token(self) -> Result:
        try:
            payload = decode_access_token(self._token)
        except TokenError as exc:
            logger.info("[AUTH] Ignoring bearer token: %s", exc)
            return ok(None)

        revoked = self.gateway.get(RevokedToken, payload["jti"])
        if revoked.ok:
            return ok(None)
        if revoked.error.code != results.NOT_FOUND:
            return revoked

        try:
            user_id = UUID(payload["sub"])
        except ValueError:
            return ok(None)
        found = self.gateway.get(User, user_id)
        if found.error:
            if found.error.code == results.NOT_FOUND:
                return ok(None)
            return found
        return ok(AuthSession(access_token=self._token, user=found.data))

    def get_session(self) -> Result:
        """Current session or None; an untrusted token counts as no session."""
        if not self._resolved:
            res = self._resolve_token()
            if res.error:
                return res
            self._session = res.data
            self._resolved = True
        return ok(self._session)

    # ---------- operations ----------
    def sign_up(self, email: str, password: str, data: Optional[Dict[str, Any]] = None) -> Result:
        email = email.strip().lower()
        existing = self.gateway.select(User, User.email == email)
        if existing.error:
            return existing
        if existing.data:
            return fail(results.USER_EXISTS, "User already registered")

        created = self.gateway.insert(
            User(email=email, hashed_password=hash_password(password), user_metadata=dict(data or {}))
        )
        if created.error:
            if created.error.code == results.UNIQUE_VIOLATION:
                return fail(results.USER_EXISTS, "User already registered")
            return created

        user = created.data
        logger.info("[AUTH] Identity created for %s", user.email)
        # no email confirmation step: the new identity is signed in straight away
        session = self._start_session(user)
        self._emit(AuthEvent.SIGNED_IN)
        return ok(session)

    def sign_in_with_password(self, email: str, password: str) -> Result:
        email = email.strip().lower()
        found = self.gateway.select(User, User.email == email)
        if found.error:
            return found
        user = found.data[0] if found.data else None
        if user is None or not verify_password(password, user.hashed_password):
            return fail(results.INVALID_CREDENTIALS, "Invalid login credentials")

        touched = self.gateway.update(User, user.id, last_sign_in_at=utcnow())
        if touched.error:
            return touched
        session = self._start_session(touched.data)
        self._emit(AuthEvent.SIGNED_IN)
        return ok(session)

    def sign_out(self) -> Result:
        current = self.get_session()
        if current.error:
            return current
        session = current.data
        if session is not None:
            payload = decode_access_token(session.access_token)
            revoked = self.gateway.insert(RevokedToken(jti=payload["jti"], user_id=session.user.id))
            if revoked.error and revoked.error.code != results.UNIQUE_VIOLATION:
                return revoked
        self._token = None
        self._session = None
        self._resolved = True
        self._emit(AuthEvent.SIGNED_OUT)
        return ok(None)

    def refresh_session(self) -> Result:
        current = self.get_session()
        if current.error:
            return current
        if current.data is None:
            return fail(results.INVALID_CREDENTIALS, "Auth session missing")
        old = decode_access_token(current.data.access_token)
        revoked = self.gateway.insert(RevokedToken(jti=old["jti"], user_id=current.data.user.id))
        if revoked.error and revoked.error.code != results.UNIQUE_VIOLATION:
            return revoked
        session = self._start_session(current.data.user)
        self._emit(AuthEvent.TOKEN_REFRESHED)
        return ok(session)
