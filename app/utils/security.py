"""
Security utilities for Clínica SIC authentication.

Password hashing uses ``bcrypt`` directly; session tokens are HS256 JWTs
signed with ``python-jose``. Secrets and lifetimes come from the settings
object so nothing sensitive is hard-coded here.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Any

import bcrypt
from jose import JWTError, jwt

from app.config import get_settings

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Password helpers
# ---------------------------------------------------------------------------


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain: str, hashed: str | None) -> bool:
    if not hashed:
        return False
    try:
        return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        # Stored value is not a bcrypt hash (legacy row or manual edit).
        logger.warning("verify_password: stored hash has an invalid format")
        return False


# ---------------------------------------------------------------------------
# JWT helpers
# ---------------------------------------------------------------------------


def create_access_token(data: dict[str, Any]) -> str:
    """Create a signed JWT access token.

    The payload is a copy of *data* plus ``exp`` and ``iat`` claims. The
    expiry window is ``JWT_EXPIRATION_MINUTES`` from settings.

    Args:
        data: Claims to embed. ``sub`` should hold the user's id as a string.

    Returns:
        A compact JWT string.
    """
    settings = get_settings()
    now = datetime.now(timezone.utc)
    payload = data.copy()
    payload["exp"] = now + timedelta(minutes=settings.JWT_EXPIRATION_MINUTES)
    payload["iat"] = now
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def token_claims(usuario: Any) -> dict[str, Any]:
    """Build the standard claim set for a ``Usuario``."""
    return {
        "sub": str(usuario.id),
        "login": usuario.login,
        "rol": usuario.rol,
        "id_hospital": usuario.id_hospital,
    }


def verify_token(token: str) -> dict[str, Any]:
    """Decode and verify a JWT access token.

    Raises:
        ValueError: If the token is invalid, expired, or cannot be decoded.
                    Callers map this to an HTTP 401 response.
    """
    settings = get_settings()
    try:
        return jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[settings.JWT_ALGORITHM],
        )
    except JWTError as exc:
        logger.debug("JWT verification failed: %s", exc)
        raise ValueError("Token inválido o expirado") from exc
