# 🔹 FILE: jobportal/reconciler.py
"""Session/profile reconciliation.

``SessionReconciler`` owns the answer to "who is signed in and with which
role". It publishes an :class:`AuthState` to any number of observers, listens
to the identity provider's session-change events, and creates a missing
profile from signup metadata when it can. When it cannot, it fails closed:
``profile`` stays ``None`` and ``error`` tells the user to contact support.
No step is retried.
"""

import logging
from contextlib import contextmanager
from dataclasses import dataclass, replace
from typing import Callable, List, Optional

from . import results
from .gateway import Gateway
from .identity import AuthClient, AuthEvent, AuthSession, Subscription
from .models import Profile, User
from .results import Result, ok, unexpected
from .services.profiles import create_user_profile, get_user_profile, profile_from_metadata

logger = logging.getLogger(__name__)

PROFILE_NOT_FOUND = "Profile not found"
PROFILE_CONTACT_SUPPORT = "Profile not found. Please contact support."
INIT_FAILED = "Failed to initialize authentication"
AUTH_ERROR = "Authentication error occurred"


@dataclass(frozen=True)
class AuthState:
    user: Optional[User] = None
    profile: Optional[Profile] = None
    loading: bool = True
    error: Optional[str] = None


SIGNED_OUT_STATE = AuthState(user=None, profile=None, loading=False, error=None)

StateObserver = Callable[[AuthState], None]


class SessionReconciler:
    def __init__(self, auth: AuthClient, gateway: Optional[Gateway] = None):
        self.auth = auth
        self.gateway = gateway or auth.gateway
        self._state = AuthState()
        self._observers: List[StateObserver] = []
        self._subscription: Optional[Subscription] = None
        self._mounted = False

    # ---------- observable state ----------
    @property
    def state(self) -> AuthState:
        return self._state

    def subscribe(self, observer: StateObserver) -> Callable[[], None]:
        self._observers.append(observer)
        observer(self._state)

        def unsubscribe() -> None:
            if observer in self._observers:
                self._observers.remove(observer)

        return unsubscribe

    def _set_state(self, state: AuthState) -> None:
        # results that land after close() are dropped
        if not self._mounted:
            return
        self._state = state
        for observer in list(self._observers):
            observer(state)

    def _patch(self, **changes) -> None:
        self._set_state(replace(self._state, **changes))

    @contextmanager
    def _loading(self):
        self._patch(loading=True, error=None)
        try:
            yield
        finally:
            self._patch(loading=False)

    # ---------- lifecycle ----------
    def start(self) -> AuthState:
        """Load the initial session, then follow session changes until close()."""
        self._mounted = True
        self.initialize()
        if self._mounted and self._subscription is None:
            self._subscription = self.auth.on_auth_state_change(self._on_auth_change)
        return self._state

    def close(self) -> None:
        self._mounted = False
        if self._subscription is not None:
            self._subscription.unsubscribe()
            self._subscription = None
        self._observers.clear()

    def __enter__(self) -> "SessionReconciler":
        self.start()
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def initialize(self) -> None:
        try:
            current = self.auth.get_session()
            if current.error:
                logger.error("[AUTH] Error getting session: %s", current.error)
                self._patch(error=current.error.message, loading=False)
                return

            session: Optional[AuthSession] = current.data
            if session is None:
                self._set_state(SIGNED_OUT_STATE)
                return

            found = get_user_profile(self.gateway, session.user.id)
            if found.error:
                logger.warning("[AUTH] Error fetching profile for %s: %s", session.user.id, found.error)
                message = PROFILE_NOT_FOUND if found.error.code == results.NOT_FOUND else found.error.message
                self._set_state(AuthState(user=session.user, profile=None, loading=False, error=message))
                return

            self._set_state(AuthState(user=session.user, profile=found.data, loading=False, error=None))
        except Exception:
            logger.exception("[AUTH] Unexpected error while initializing session")
            self._patch(error=INIT_FAILED, loading=False)

    def _on_auth_change(self, event: AuthEvent, session: Optional[AuthSession]) -> None:
        logger.info("[AUTH] Auth state changed: %s %s", event.value, session.user.id if session else None)
        if not self._mounted:
            return

        try:
            if session is None:
                self._set_state(SIGNED_OUT_STATE)
                return

            profile = self.reconcile_profile(session.user)
            if profile is not None:
                self._set_state(AuthState(user=session.user, profile=profile, loading=False, error=None))
            else:
                self._set_state(
                    AuthState(user=session.user, profile=None, loading=False, error=PROFILE_CONTACT_SUPPORT)
                )
        except Exception:
            logger.exception("[AUTH] Error in auth state change handler")
            self._patch(error=AUTH_ERROR, loading=False)

    def reconcile_profile(self, user: User) -> Optional[Profile]:
        """Existing profile, else one created from signup metadata, else None."""
        found = get_user_profile(self.gateway, user.id)
        if found.ok:
            return found.data

        logger.info("[AUTH] Profile not found for %s, creating from signup metadata", user.id)
        created = profile_from_metadata(self.gateway, user)
        if created.ok:
            return created.data
        logger.warning("[AUTH] Could not reconcile profile for %s: %s", user.id, created.error)
        return None

    # ---------- operations ----------
    def sign_up(self, email: str, password: str, full_name: str, role) -> Result:
        role_value = getattr(role, "value", role)
        try:
            with self._loading():
                signed_up = self.auth.sign_up(
                    email, password, data={"full_name": full_name, "role": role_value}
                )
                if signed_up.error:
                    self._patch(error=signed_up.error.message)
                    return signed_up

                # the SIGNED_IN listener is the backstop if this step fails
                created = create_user_profile(self.gateway, signed_up.data.user, full_name, role_value)
                if created.error:
                    logger.error("[AUTH] Error creating profile during sign-up: %s", created.error)
                return ok(signed_up.data)
        except Exception:
            logger.exception("[AUTH] Unexpected error in sign_up")
            res = unexpected()
            self._patch(error=res.error.message)
            return res

    def sign_in(self, email: str, password: str) -> Result:
        try:
            with self._loading():
                signed_in = self.auth.sign_in_with_password(email, password)
                if signed_in.error:
                    self._patch(error=signed_in.error.message)
                    return signed_in
                # profile is fetched by the SIGNED_IN listener, not here
                return ok(signed_in.data)
        except Exception:
            logger.exception("[AUTH] Unexpected error in sign_in")
            res = unexpected()
            self._patch(error=res.error.message)
            return res

    def sign_out(self) -> Result:
        try:
            with self._loading():
                signed_out = self.auth.sign_out()
                if signed_out.error:
                    self._patch(error=signed_out.error.message)
                return signed_out
        except Exception:
            logger.exception("[AUTH] Unexpected error in sign_out")
            res = unexpected()
            self._patch(error=res.error.message)
            return res

    def refresh(self) -> Result:
        try:
            with self._loading():
                refreshed = self.auth.refresh_session()
                if refreshed.error:
                    self._patch(error=refreshed.error.message)
                return refreshed
        except Exception:
            logger.exception("[AUTH] Unexpected error in refresh")
            res = unexpected()
            self._patch(error=res.error.message)
            return res

    def clear_error(self) -> None:
        if self._state.error is not None:
            self._patch(error=None)
