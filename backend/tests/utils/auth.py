from __future__ import annotations

from app.core.security import create_access_token


def auth_header(admin_id: int, role: str = "admin") -> dict[str, str]:
    token = create_access_token(
        str(admin_id),
        extra={"role": role, "user_id": f"admin{admin_id:03d}"},
        expires_delta_minutes=15,
    )
    return {"Authorization": f"Bearer {token}"}


__all__ = ["auth_header"]
