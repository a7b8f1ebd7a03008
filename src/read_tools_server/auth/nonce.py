"""
One-Time Security Token

This module issues and verifies the short-lived token that page renders hand
to the playback client and that every content fetch must echo back.

Security Model
--------------
- Tokens are signed JWTs bound to a single action name.
- They are short-lived and include issuer, audience, action and token id.
- Verification never raises across the request boundary: every failure
  becomes `SecurityCheckFailed`.
"""

from __future__ import annotations

import time
import uuid
from typing import Any, Dict, Optional

import jwt

from ..config import settings
from ..core.errors import SecurityCheckFailed
from .models import NonceContext


NONCE_ACTION = "read_aloud_nonce"
NONCE_ISSUER = "read-tools-server"
NONCE_AUDIENCE = "read-aloud"


# ---------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------

class NonceConfigurationError(RuntimeError):
    """Raised when tokens cannot be issued or checked due to configuration."""


# ---------------------------------------------------------------------
# Internal Helpers
# ---------------------------------------------------------------------

def _get_current_timestamp() -> int:
    """Return current UNIX timestamp in UTC as integer seconds."""
    return int(time.time())


def _secret() -> str:
    secret = settings.nonce_secret.get_secret_value()
    if not secret:
        raise NonceConfigurationError("nonce_secret is not configured.")
    return secret


# ---------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------

def create_nonce(action: str = NONCE_ACTION, ttl_seconds: Optional[int] = None) -> str:
    """
    Issue a signed token for `action`.

    Parameters
    ----------
    action : str
        Action name the token authorizes.
    ttl_seconds : Optional[int]
        Lifetime override. Defaults to `settings.nonce_ttl_seconds`.

    Returns
    -------
    str
        Encoded token for the page to send back with its fetch.

    Raises
    ------
    NonceConfigurationError
        If the secret or lifetime is misconfigured.
    """
    ttl = ttl_seconds if ttl_seconds is not None else settings.nonce_ttl_seconds
    if ttl <= 0:
        raise NonceConfigurationError(f"Nonce lifetime must be positive; got {ttl}")

    now = _get_current_timestamp()
    payload: Dict[str, Any] = {
        "iss": NONCE_ISSUER,
        "aud": NONCE_AUDIENCE,
        "iat": now,
        "exp": now + ttl,
        "action": action,
        "jti": uuid.uuid4().hex,
    }

    try:
        return jwt.encode(payload, _secret(), algorithm=settings.jwt_algo)
    except NonceConfigurationError:
        raise
    except Exception as exc:
        raise NonceConfigurationError(
            f"Failed to issue nonce: {type(exc).__name__}: {exc}"
        ) from exc


def verify_nonce(token: Optional[str], action: str = NONCE_ACTION) -> NonceContext:
    """
    Verify a token echoed back by the client.

    Parameters
    ----------
    token : Optional[str]
        Raw token from the request. Missing or blank fails the check.
    action : str
        Action the token must have been issued for.

    Returns
    -------
    NonceContext

    Raises
    ------
    SecurityCheckFailed
        For missing, expired, forged or mis-scoped tokens.
    """
    if not token or not token.strip():
        raise SecurityCheckFailed()

    try:
        payload = jwt.decode(
            token.strip(),
            _secret(),
            algorithms=[settings.jwt_algo],
            audience=NONCE_AUDIENCE,
            issuer=NONCE_ISSUER,
            options={"require": ["iss", "aud", "iat", "exp", "action", "jti"]},
        )
    except jwt.InvalidTokenError:
        raise SecurityCheckFailed()

    if payload.get("action") != action:
        raise SecurityCheckFailed()

    return NonceContext(
        action=payload["action"],
        token_id=payload["jti"],
        issued_at=payload["iat"],
        expires_at=payload["exp"],
    )
