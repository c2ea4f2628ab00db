"""Test helpers — session tokens signed like the auth provider's."""

import uuid
from datetime import datetime, timedelta, timezone

from jose import jwt

from rentmap.config import get_settings


def make_token(
    user_id: uuid.UUID | str,
    *,
    audience: str = "authenticated",
    expires_in: timedelta = timedelta(hours=1),
    secret: str | None = None,
) -> str:
    settings = get_settings()
    now = datetime.now(timezone.utc)
    claims = {
        "sub": str(user_id),
        "aud": audience,
        "iat": int(now.timestamp()),
        "exp": int((now + expires_in).timestamp()),
        "role": "authenticated",
    }
    return jwt.encode(claims, secret or settings.supabase_jwt_secret, algorithm="HS256")


def auth_header(user_id: uuid.UUID | str) -> dict[str, str]:
    return {"Authorization": f"Bearer {make_token(user_id)}"}
