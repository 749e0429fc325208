# 🔹 FILE: jobportal/routers/auth.py
# ----------------------------
# 🧩 Imports
from typing import Optional

from fastapi import APIRouter, Depends

from .. import schemas
from ..dependencies import get_reconciler, raise_for_error
from ..identity import AuthSession
from ..reconciler import SessionReconciler

router = APIRouter()


def _session_out(reconciler: SessionReconciler, session: Optional[AuthSession] = None) -> schemas.SessionOut:
    state = reconciler.state
    if session is None and state.user is not None:
        current = reconciler.auth.get_session()
        session = current.data if current.ok else None
    return schemas.SessionOut(
        access_token=session.access_token if session else None,
        user=schemas.UserOut.model_validate(state.user) if state.user else None,
        profile=schemas.ProfileOut.model_validate(state.profile) if state.profile else None,
        loading=state.loading,
        error=state.error,
    )


# 📝 Register
@router.post("/register", response_model=schemas.SessionOut)
def register(payload: schemas.RegisterIn, reconciler: SessionReconciler = Depends(get_reconciler)):
    res = reconciler.sign_up(payload.email, payload.password, payload.full_name, payload.role)
    raise_for_error(res.error)
    return _session_out(reconciler, res.data)


# 🔐 Login → JWT
@router.post("/login", response_model=schemas.SessionOut)
def login(payload: schemas.LoginIn, reconciler: SessionReconciler = Depends(get_reconciler)):
    res = reconciler.sign_in(payload.email, payload.password)
    raise_for_error(res.error)
    return _session_out(reconciler, res.data)


# 🚪 Logout
@router.post("/logout", response_model=schemas.SessionOut)
def logout(reconciler: SessionReconciler = Depends(get_reconciler)):
    res = reconciler.sign_out()
    raise_for_error(res.error)
    return _session_out(reconciler)


# 🔁 Refresh token
@router.post("/refresh", response_model=schemas.SessionOut)
def refresh(reconciler: SessionReconciler = Depends(get_reconciler)):
    res = reconciler.refresh()
    raise_for_error(res.error)
    return _session_out(reconciler, res.data)


# 👤 Current session (user + profile + error)
@router.get("/session", response_model=schemas.SessionOut)
def current_session(reconciler: SessionReconciler = Depends(get_reconciler)):
    return _session_out(reconciler)
