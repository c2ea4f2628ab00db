"""Session Token Verification — validates Supabase-issued access tokens.

Invariants:
    - HS256 only; the audience claim must match (Supabase uses "authenticated")
    - The user id is the `sub` claim and must parse as a UUID
    - Any failure raises AuthenticationError (401), never a library exception
"""

import uuid

from jose import JWTError, jwt

from rentmap.core.errors import AuthenticationError

ALGORITHM = "HS256"


def decode_user_id(token: str, secret: str, audience: str) -> uuid.UUID:
    try:
        claims = jwt.decode(token, secret, algorithms=[ALGORITHM], audience=audience)
    except JWTError:
        raise AuthenticationError("Invalid or expired session token")

    subject = claims.get("sub")
    try:
        return uuid.UUID(str(subject))
    except ValueError:
        raise AuthenticationError("Session token has no valid subject")
