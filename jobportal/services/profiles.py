# 🔹 FILE: jobportal/services/profiles.py
# ==============================================================
# Profile lookup + lazy creation from signup metadata
# - create_user_profile() is idempotent: a second attempt for the same
#   identity returns the row the first attempt created
# ==============================================================

import logging
from typing import Optional

from .. import results
from ..gateway import Gateway
from ..models import Profile, User, UserRole
from ..results import Result, fail

logger = logging.getLogger(__name__)


def _norm_role(role) -> Optional[str]:
    value = getattr(role, "value", role)
    if value in (UserRole.STUDENT.value, UserRole.ADMIN.value):
        return value
    return None


def get_user_profile(gateway: Gateway, user_id) -> Result:
    return gateway.get(Profile, user_id)


def create_user_profile(gateway: Gateway, user: User, full_name: str, role) -> Result:
    role_value = _norm_role(role)
    if role_value is None:
        return fail(results.VALIDATION, f"Unknown role: {role}")

    created = gateway.upsert(
        Profile(id=user.id, email=user.email, role=role_value, full_name=full_name),
        ignore_duplicates=True,
    )
    if created.error and created.error.code == results.UNIQUE_VIOLATION:
        # another attempt won the race: the stored row is the answer
        logger.info("[AUTH] Profile for %s already exists, re-reading", user.id)
        return get_user_profile(gateway, user.id)
    return created


def profile_from_metadata(gateway: Gateway, user: User) -> Result:
    """Create the profile from signup metadata, if it carries a name and a role."""
    meta = user.user_metadata or {}
    full_name = (meta.get("full_name") or "").strip()
    role = meta.get("role")
    if not full_name or not role:
        return fail(results.PROFILE_MISSING, "Signup metadata has no name or role")
    return create_user_profile(gateway, user, full_name, role)
