from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Optional, Sequence

from jose import JWTError, jwt

from .errors import ErrorCode
from .exceptions import raise_app_error
from .config import settings


@dataclass(slots=True)
class TokenClaims:
    subject: str
    roles: set[str]
    payload: dict[str, Any]


def create_access_token(subject: str, expires_delta_minutes: Optional[int] = None, extra: Optional[dict[str, Any]] = None) -> str:
    expire_minutes = expires_delta_minutes or settings.access_token_expire_minutes
    to_encode: dict[str, Any] = {"sub": subject, "exp": datetime.now(timezone.utc) + timedelta(minutes=expire_minutes)}
    if extra:
        to_encode.update(extra)
    return jwt.encode(to_encode, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def _normalize_roles(payload: dict[str, Any]) -> set[str]:
    roles: set[str] = set()
    raw_roles = payload.get("roles")
    if isinstance(raw_roles, str):
        roles.add(raw_roles)
    elif isinstance(raw_roles, Sequence):
        roles.update(str(role) for role in raw_roles)

    single_role = payload.get("role")
    if single_role not in (None, ""):
        roles.add(str(single_role))

    normalized = {value.strip().lower() for value in roles if value.strip()}
    return normalized or {"user"}


def validate_jwt_token(
    token: str,
    *,
    required_roles: set[str] | None = None,
    error_on_invalid: ErrorCode = ErrorCode.COMMON_UNAUTHENTICATED,
    error_on_forbidden: ErrorCode = ErrorCode.COMMON_PERMISSION_DENIED,
) -> TokenClaims:
    """Validate signature, expiry and role membership of a bearer token.

    Tokens are issued by the surrounding auth service; this service only
    verifies them.
    """

    if not token:
        raise_app_error(error_on_invalid)

    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret_key,
            algorithms=[settings.jwt_algorithm],
            options={"verify_aud": False},
        )
    except JWTError:
        raise_app_error(error_on_invalid)

    subject = payload.get("sub")
    if subject in (None, ""):
        raise_app_error(error_on_invalid)

    roles = _normalize_roles(payload)
    if required_roles and roles.isdisjoint(required_roles):
        raise_app_error(error_on_forbidden)

    return TokenClaims(subject=str(subject), roles=roles, payload=dict(payload))
