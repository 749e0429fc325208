# 🔹 FILE: jobportal/dependencies.py
from typing import Generator, Optional

from fastapi import Depends, HTTPException, status
from sqlmodel import Session

from . import results
from .db import get_session
from .gateway import Gateway
from .identity import AuthClient
from .models import Profile, UserRole
from .reconciler import SessionReconciler
from .results import ServiceError
from .security import oauth2_scheme

_STATUS_BY_CODE = {
    results.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    results.UNIQUE_VIOLATION: status.HTTP_409_CONFLICT,
    results.ALREADY_APPLIED: status.HTTP_409_CONFLICT,
    results.USER_EXISTS: status.HTTP_409_CONFLICT,
    results.INVALID_TRANSITION: status.HTTP_409_CONFLICT,
    results.FOREIGN_KEY_VIOLATION: 422,
    results.CHECK_VIOLATION: 422,
    results.VALIDATION: 422,
    results.FORBIDDEN: status.HTTP_403_FORBIDDEN,
    results.PROFILE_MISSING: status.HTTP_403_FORBIDDEN,
    results.INVALID_CREDENTIALS: status.HTTP_401_UNAUTHORIZED,
    results.UNAVAILABLE: status.HTTP_503_SERVICE_UNAVAILABLE,
}


def raise_for_error(error: Optional[ServiceError]) -> None:
    """Turn a result error into an HTTP error with a readable detail."""
    if error is None:
        return
    code = _STATUS_BY_CODE.get(error.code, status.HTTP_500_INTERNAL_SERVER_ERROR)
    detail = error.message
    if code == status.HTTP_500_INTERNAL_SERVER_ERROR and error.code != results.INCONSISTENT:
        detail = results.GENERIC_MESSAGE
    raise HTTPException(status_code=code, detail=detail)


def unwrap(res: results.Result):
    raise_for_error(res.error)
    return res.data


def get_gateway(session: Session = Depends(get_session)) -> Gateway:
    return Gateway(session)


def get_auth_client(
    token: Optional[str] = Depends(oauth2_scheme),
    session: Session = Depends(get_session),
) -> AuthClient:
    return AuthClient(session, access_token=token)


def get_reconciler(auth: AuthClient = Depends(get_auth_client)) -> Generator[SessionReconciler, None, None]:
    """One reconciler per request; torn down when the request finishes."""
    reconciler = SessionReconciler(auth)
    reconciler.start()
    try:
        yield reconciler
    finally:
        reconciler.close()


def get_current_profile(reconciler: SessionReconciler = Depends(get_reconciler)) -> Profile:
    state = reconciler.state
    if state.user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    if state.profile is None:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=state.error or "Profile not found")
    return state.profile


def require_admin(profile: Profile = Depends(get_current_profile)) -> Profile:
    if profile.role != UserRole.ADMIN.value:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin access required")
    return profile


def require_student(profile: Profile = Depends(get_current_profile)) -> Profile:
    if profile.role != UserRole.STUDENT.value:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Student access required")
    return profile
