# 🔹 FILE: jobportal/results.py
"""Result pairs returned by the gateway and the services.

Helpers never raise for expected failures: they return ``Result(data, error)``
and the routers turn ``error`` into an HTTP response.
"""

from dataclasses import dataclass
from typing import Any, NamedTuple, Optional

# Error codes
NOT_FOUND = "not_found"
UNIQUE_VIOLATION = "unique_violation"
ALREADY_APPLIED = "already_applied"
FOREIGN_KEY_VIOLATION = "foreign_key_violation"
CHECK_VIOLATION = "check_violation"
UNAVAILABLE = "unavailable"
DATABASE_ERROR = "database_error"
VALIDATION = "validation"
FORBIDDEN = "forbidden"
INVALID_TRANSITION = "invalid_transition"
INVALID_CREDENTIALS = "invalid_credentials"
USER_EXISTS = "user_exists"
PROFILE_MISSING = "profile_missing"
INCONSISTENT = "inconsistent"
UNEXPECTED = "unexpected"

GENERIC_MESSAGE = "Something went wrong. Please try again."


@dataclass(frozen=True)
class ServiceError:
    code: str
    message: str

    def __str__(self) -> str:
        return self.message


class Result(NamedTuple):
    data: Any = None
    error: Optional[ServiceError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def ok(data: Any = None) -> Result:
    return Result(data=data)


def fail(code: str, message: str) -> Result:
    return Result(error=ServiceError(code, message))


def unexpected(message: str = GENERIC_MESSAGE) -> Result:
    return fail(UNEXPECTED, message)
