"""
Authentication and security utilities.
"""

import hashlib
import hmac
import secrets
from datetime import datetime, timezone
from typing import Optional

from pm_autopilot.core.config import settings
from pm_autopilot.core.constants import ID_PREFIXES
from pm_autopilot.core.exceptions import AuthenticationError

PASSWORD_SCHEME = "pbkdf2_sha256"


def generate_id(kind: str) -> str:
    """
    Generate a prefixed identifier for a stored record.

    Args:
        kind: Record kind (key of ``ID_PREFIXES``)

    Returns:
        A random 12-byte hex string prefixed with the kind's prefix
    """
    return f"{ID_PREFIXES[kind]}_{secrets.token_hex(12)}"


def generate_request_id() -> str:
    """Generate a unique request ID for tracing."""
    return f"req_{secrets.token_hex(8)}"


def hash_password(password: str, iterations: Optional[int] = None) -> str:
    """
    Hash a password for storage.

    Returns:
        ``pbkdf2_sha256$<iterations>$<salt>$<hash>``
    """
    rounds = iterations or settings.security.password_iterations
    salt = secrets.token_hex(16)
    digest = hashlib.pbkdf2_hmac("sha256", password.encode(), salt.encode(), rounds)
    return f"{PASSWORD_SCHEME}${rounds}${salt}${digest.hex()}"


def verify_password(password: str, stored_hash: str) -> bool:
    """Verify a password against its stored hash."""
    try:
        scheme, rounds, salt, expected = stored_hash.split("$")
    except ValueError:
        return False
    if scheme != PASSWORD_SCHEME:
        return False

    digest = hashlib.pbkdf2_hmac("sha256", password.encode(), salt.encode(), int(rounds))
    return hmac.compare_digest(digest.hex(), expected)


def _sign(message: str) -> str:
    return hmac.new(
        settings.security.secret_key.encode(),
        message.encode(),
        hashlib.sha256,
    ).hexdigest()


def create_access_token(user_id: str, ttl_seconds: Optional[int] = None) -> tuple[str, datetime]:
    """
    Create a signed, expiring bearer token for a user.

    Args:
        user_id: The authenticated user's ID
        ttl_seconds: Token lifetime (defaults to settings)

    Returns:
        Tuple of (token, expiry)
    """
    ttl = ttl_seconds if ttl_seconds is not None else settings.security.token_ttl_seconds
    expires = int(datetime.now(timezone.utc).timestamp()) + ttl
    payload = f"{user_id}.{expires}"
    token = f"{payload}.{_sign(payload)}"
    return token, datetime.fromtimestamp(expires, tz=timezone.utc)


def decode_access_token(token: str) -> tuple[str, datetime]:
    """
    Verify a bearer token.

    Returns:
        Tuple of (user_id, expiry)

    Raises:
        AuthenticationError: If the token is malformed, tampered with or expired
    """
    parts = token.split(".")
    if len(parts) != 3:
        raise AuthenticationError("Malformed access token")

    user_id, expires_raw, signature = parts
    if not expires_raw.isdigit():
        raise AuthenticationError("Malformed access token")

    if not hmac.compare_digest(signature, _sign(f"{user_id}.{expires_raw}")):
        raise AuthenticationError("Invalid access token")

    expires = int(expires_raw)
    if expires < int(datetime.now(timezone.utc).timestamp()):
        raise AuthenticationError("Access token expired")

    return user_id, datetime.fromtimestamp(expires, tz=timezone.utc)
