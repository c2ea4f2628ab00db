"""Session Token Verification — audience, expiry, signature and subject checks."""

import uuid
from datetime import timedelta

import pytest

from rentmap.config import get_settings
from rentmap.core.errors import AuthenticationError
from rentmap.infrastructure.auth_tokens import decode_user_id
from tests.helpers import make_token


def _decode(token: str) -> uuid.UUID:
    settings = get_settings()
    return decode_user_id(token, settings.supabase_jwt_secret, settings.supabase_jwt_audience)


def test_valid_token_yields_user_id():
    user_id = uuid.uuid4()
    assert _decode(make_token(user_id)) == user_id


@pytest.mark.parametrize("token", [
    make_token(uuid.uuid4(), audience="anon"),
    make_token(uuid.uuid4(), expires_in=timedelta(minutes=-5)),
    make_token(uuid.uuid4(), secret="some-other-secret"),
    make_token("not-a-uuid"),
    "not.a.jwt",
])
def test_rejected_tokens(token):
    with pytest.raises(AuthenticationError):
        _decode(token)
