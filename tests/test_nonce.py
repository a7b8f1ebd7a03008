import pytest
import jwt
import time

from read_tools_server.auth.nonce import (
    NONCE_ACTION,
    NONCE_AUDIENCE,
    NONCE_ISSUER,
    NonceConfigurationError,
    create_nonce,
    verify_nonce,
)
from read_tools_server.config import settings
from read_tools_server.core.errors import SecurityCheckFailed


def create_raw_token(
    issuer=NONCE_ISSUER,
    audience=NONCE_AUDIENCE,
    action=NONCE_ACTION,
    expired=False,
    secret=None,
):
    if secret is None:
        secret = settings.nonce_secret.get_secret_value()

    now = int(time.time())
    iat = now - 3600 if expired else now
    exp = iat - 10 if expired else now + 30

    payload = {
        "iss": issuer,
        "aud": audience,
        "iat": iat,
        "exp": exp,
        "action": action,
        "jti": "test-token",
    }
    return jwt.encode(payload, secret, algorithm="HS256")


def test_issued_nonce_verifies():
    token = create_nonce()
    context = verify_nonce(token)

    assert context.action == NONCE_ACTION
    assert context.expires_at > context.issued_at
    assert context.token_id


def test_nonce_lifetime_follows_settings():
    token = create_nonce()
    payload = jwt.decode(
        token,
        settings.nonce_secret.get_secret_value(),
        algorithms=["HS256"],
        audience=NONCE_AUDIENCE,
    )

    assert payload["iss"] == NONCE_ISSUER
    assert payload["exp"] - payload["iat"] == settings.nonce_ttl_seconds


def test_each_nonce_is_unique():
    assert verify_nonce(create_nonce()).token_id != verify_nonce(create_nonce()).token_id


@pytest.mark.parametrize("token", [None, "", "   "])
def test_missing_nonce_rejected(token):
    with pytest.raises(SecurityCheckFailed) as excinfo:
        verify_nonce(token)
    assert excinfo.value.status_code == 403


def test_garbage_nonce_rejected():
    with pytest.raises(SecurityCheckFailed):
        verify_nonce("not-a-token")


def test_expired_nonce_rejected():
    with pytest.raises(SecurityCheckFailed):
        verify_nonce(create_raw_token(expired=True))


def test_wrong_signature_rejected():
    token = create_raw_token(secret="wrong-secret-key-that-is-long-enough")
    with pytest.raises(SecurityCheckFailed):
        verify_nonce(token)


def test_wrong_audience_rejected():
    with pytest.raises(SecurityCheckFailed):
        verify_nonce(create_raw_token(audience="somewhere-else"))


def test_wrong_issuer_rejected():
    with pytest.raises(SecurityCheckFailed):
        verify_nonce(create_raw_token(issuer="SomeoneElse"))


def test_token_for_other_action_rejected():
    token = create_nonce(action="other_action")
    with pytest.raises(SecurityCheckFailed):
        verify_nonce(token)


def test_non_positive_lifetime_is_configuration_error():
    with pytest.raises(NonceConfigurationError):
        create_nonce(ttl_seconds=0)
