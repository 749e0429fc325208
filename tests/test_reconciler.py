"""Tests for the identity client and session/profile reconciliation."""

import pytest
from sqlmodel import select

from jobportal import reconciler as reconciler_module
from jobportal import results
from jobportal.db import SessionLocal
from jobportal.gateway import Gateway
from jobportal.identity import AuthClient, AuthEvent
from jobportal.models import Profile
from jobportal.reconciler import (
    PROFILE_CONTACT_SUPPORT,
    PROFILE_NOT_FOUND,
    SIGNED_OUT_STATE,
    SessionReconciler,
)
from jobportal.results import GENERIC_MESSAGE, fail
from jobportal.services.profiles import create_user_profile

from conftest import PASSWORD, make_identity, token_for


def _profiles(session):
    return session.exec(select(Profile)).all()


# ---------- identity client ----------

def test_initial_session_is_delivered_on_subscribe(session):
    events = []
    AuthClient(session).on_auth_state_change(lambda event, s: events.append((event, s)))
    assert events == [(AuthEvent.INITIAL_SESSION, None)]


def test_sign_up_then_duplicate(session):
    auth = AuthClient(session)
    first = auth.sign_up("Ana@Example.com", "secret1", data={"full_name": "Ana", "role": "student"})
    assert first.ok
    assert first.data.user.email == "ana@example.com"

    again = AuthClient(session).sign_up("ana@example.com", "secret1")
    assert again.error.code == results.USER_EXISTS
    assert again.error.message == "User already registered"


def test_sign_in_with_bad_password(session):
    make_identity(session, "ana@example.com")
    res = AuthClient(session).sign_in_with_password("ana@example.com", "nope")
    assert res.error.code == results.INVALID_CREDENTIALS
    assert res.error.message == "Invalid login credentials"


def test_token_resolves_until_sign_out(session):
    user, _ = make_identity(session, "ana@example.com")
    token = token_for(user)

    auth = AuthClient(session, token)
    assert auth.get_session().data.user.id == user.id
    assert auth.sign_out().ok
    assert auth.get_session().data is None

    assert AuthClient(session, token).get_session().data is None


def test_garbage_token_is_no_session(session):
    assert AuthClient(session, "not-a-jwt").get_session().data is None


def test_refresh_revokes_old_token(session):
    user, _ = make_identity(session, "ana@example.com")
    old = token_for(user)
    events = []
    auth = AuthClient(session, old)
    auth.on_auth_state_change(lambda event, s: events.append(event))

    refreshed = auth.refresh_session()

    assert refreshed.ok
    assert refreshed.data.access_token != old
    assert events == [AuthEvent.INITIAL_SESSION, AuthEvent.TOKEN_REFRESHED]
    assert AuthClient(session, old).get_session().data is None
    assert AuthClient(session, refreshed.data.access_token).get_session().data.user.id == user.id


def test_refresh_without_session(session):
    res = AuthClient(session).refresh_session()
    assert res.error.message == "Auth session missing"


# ---------- profile creation ----------

def test_create_user_profile_is_idempotent(gateway, session):
    user, _ = make_identity(session, "ana@example.com", with_profile=False)

    first = create_user_profile(gateway, user, "Ana", "student")
    second = create_user_profile(gateway, user, "Someone Else", "admin")

    assert first.ok and second.ok
    assert second.data.full_name == "Ana"
    assert second.data.role == "student"
    assert len(_profiles(session)) == 1


def test_concurrent_profile_creation_returns_stored_row(gateway, session, monkeypatch):
    user, _ = make_identity(session, "ana@example.com", with_profile=False)
    assert create_user_profile(gateway, user, "Ana", "student").ok

    with SessionLocal() as other_session:
        racer = Gateway(other_session)
        # skip the existence check, as a request that read before the first commit would
        monkeypatch.setattr(racer, "upsert", lambda row, ignore_duplicates=False: racer.insert(row))
        res = create_user_profile(racer, user, "Late Ana", "admin")

    assert res.ok
    assert res.data.full_name == "Ana"
    assert len(_profiles(session)) == 1


def test_unknown_role_is_rejected(gateway, session):
    user, _ = make_identity(session, "ana@example.com", with_profile=False)
    res = create_user_profile(gateway, user, "Ana", "superuser")
    assert res.error.code == results.VALIDATION


# ---------- reconciler ----------

def test_start_without_session_is_signed_out(session):
    with SessionReconciler(AuthClient(session)) as rec:
        assert rec.state == SIGNED_OUT_STATE


def test_sign_up_creates_profile_once(session):
    rec = SessionReconciler(AuthClient(session))
    rec.start()

    res = rec.sign_up("ana@example.com", "secret1", "Ana Student", "student")

    assert res.ok
    state = rec.state
    assert state.user.email == "ana@example.com"
    assert state.profile.full_name == "Ana Student"
    assert state.profile.role == "student"
    assert state.error is None
    assert state.loading is False
    assert len(_profiles(session)) == 1
    rec.close()


def test_sign_up_duplicate_sets_error(session):
    make_identity(session, "ana@example.com")
    with SessionReconciler(AuthClient(session)) as rec:
        res = rec.sign_up("ana@example.com", "secret1", "Ana", "student")
        assert res.error.code == results.USER_EXISTS
        assert rec.state.error == "User already registered"
        assert rec.state.loading is False


def test_missing_profile_is_created_from_metadata(session):
    user, _ = make_identity(session, "ana@example.com", full_name="Ana", role="admin", with_profile=False)
    seen = []
    rec = SessionReconciler(AuthClient(session, token_for(user)))
    rec.subscribe(seen.append)

    rec.start()

    # initialize() reports the gap, the INITIAL_SESSION listener then fills it
    assert any(s.error == PROFILE_NOT_FOUND for s in seen)
    assert rec.state.profile.role == "admin"
    assert rec.state.error is None
    assert len(_profiles(session)) == 1
    rec.close()


def test_missing_metadata_fails_closed(session):
    user, _ = make_identity(session, "ana@example.com", with_profile=False, metadata={})
    with SessionReconciler(AuthClient(session, token_for(user))) as rec:
        assert rec.state.user.id == user.id
        assert rec.state.profile is None
        assert rec.state.error == PROFILE_CONTACT_SUPPORT
        assert rec.state.loading is False
    assert _profiles(session) == []


def test_sign_in_failure_then_clear_error(session):
    make_identity(session, "ana@example.com")
    with SessionReconciler(AuthClient(session)) as rec:
        res = rec.sign_in("ana@example.com", "wrong")
        assert res.error.code == results.INVALID_CREDENTIALS
        assert rec.state.error == "Invalid login credentials"
        assert rec.state.loading is False

        rec.clear_error()
        assert rec.state.error is None
        assert rec.state.user is None
        rec.clear_error()
        assert rec.state.error is None


def test_sign_in_then_sign_out(session):
    user, profile = make_identity(session, "ana@example.com")
    with SessionReconciler(AuthClient(session)) as rec:
        assert rec.sign_in("ana@example.com", PASSWORD).ok
        assert rec.state.profile.id == profile.id

        assert rec.sign_out().ok
        assert rec.state == SIGNED_OUT_STATE


def test_updates_after_close_are_dropped(session):
    make_identity(session, "ana@example.com")
    auth = AuthClient(session)
    rec = SessionReconciler(auth)
    rec.start()
    rec.close()

    res = rec.sign_in("ana@example.com", PASSWORD)

    assert res.ok
    assert rec.state == SIGNED_OUT_STATE


def test_observers_see_each_published_state(session):
    make_identity(session, "ana@example.com")
    seen = []
    with SessionReconciler(AuthClient(session)) as rec:
        unsubscribe = rec.subscribe(seen.append)
        rec.sign_in("ana@example.com", PASSWORD)
        count = len(seen)
        unsubscribe()
        rec.clear_error()
        rec.sign_out()
    assert seen[0] == SIGNED_OUT_STATE
    assert seen[-1].profile is not None
    assert len(seen) == count


@pytest.mark.parametrize("role", ["student", "admin"])
def test_sign_up_roles(session, role):
    with SessionReconciler(AuthClient(session)) as rec:
        rec.sign_up(f"{role}@example.com", "secret1", "Someone", role)
        assert rec.state.profile.role == role


def test_sign_up_survives_failed_profile_step(session, monkeypatch):
    monkeypatch.setattr(
        reconciler_module, "create_user_profile", lambda *a, **kw: fail(results.UNAVAILABLE, "down")
    )
    with SessionReconciler(AuthClient(session)) as rec:
        res = rec.sign_up("ana@example.com", "secret1", "Ana Student", "student")

        assert res.ok
        # the SIGNED_IN listener created it from signup metadata
        assert rec.state.profile.full_name == "Ana Student"
        assert rec.state.error is None
        assert rec.state.loading is False
    assert len(_profiles(session)) == 1


def test_initialize_reports_profile_fetch_failure(session, monkeypatch):
    user, _ = make_identity(session, "ana@example.com", with_profile=False, metadata={})
    message = "Service temporarily unavailable. Please try again."
    monkeypatch.setattr(
        reconciler_module, "get_user_profile", lambda *a, **kw: fail(results.UNAVAILABLE, message)
    )
    seen = []
    rec = SessionReconciler(AuthClient(session, token_for(user)))
    rec.subscribe(seen.append)

    rec.start()

    reported = [s for s in seen if s.error == message]
    assert reported
    assert reported[0].user.id == user.id
    assert reported[0].profile is None
    assert reported[0].loading is False
    rec.close()


def test_unexpected_sign_in_error_is_returned(session, monkeypatch):
    auth = AuthClient(session)

    def boom(email, password):
        raise RuntimeError("driver exploded")

    monkeypatch.setattr(auth, "sign_in_with_password", boom)
    with SessionReconciler(auth) as rec:
        res = rec.sign_in("ana@example.com", PASSWORD)

        assert res.error.code == results.UNEXPECTED
        assert rec.state.error == GENERIC_MESSAGE
        assert rec.state.loading is False
