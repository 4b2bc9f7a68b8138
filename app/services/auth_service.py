"""
Authentication business logic for Clínica SIC.

Provides:
- ``authenticate_user`` — credential check against the ``usuario`` table.
- ``get_current_user`` — FastAPI dependency resolving the Bearer JWT.
- ``require_role`` — dependency factory enforcing role-based access.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.database import get_db
from app.models.usuario import Usuario
from app.utils.security import verify_password, verify_token

logger = logging.getLogger(__name__)

# Login takes a JSON body, so a plain HTTP bearer scheme is enough.
bearer_scheme = HTTPBearer(auto_error=False)


# ---------------------------------------------------------------------------
# Core authentication function
# ---------------------------------------------------------------------------


def authenticate_user(db: Session, login: str, password: str) -> Usuario | None:
    """Verify login/password credentials against the database.

    Returns ``None`` instead of raising so the router controls the HTTP
    error. Unknown login, deactivated account and wrong password all take
    the same path.

    Args:
        db: Active SQLAlchemy session.
        login: Login name submitted by the client.
        password: Plain-text password submitted by the client.

    Returns:
        The ``Usuario`` on success, ``None`` otherwise.
    """
    user: Usuario | None = (
        db.query(Usuario)
        .filter(Usuario.login == login, Usuario.activo.is_(True))
        .first()
    )

    if user is None:
        logger.debug("authenticate_user: unknown or inactive login '%s'", login)
        return None

    if not verify_password(password, user.password_hash):
        logger.debug("authenticate_user: wrong password for login '%s'", login)
        return None

    # Best effort; a failed timestamp update must not block the login.
    try:
        user.ultimo_acceso = datetime.now(timezone.utc).replace(tzinfo=None)
        db.commit()
    except SQLAlchemyError:  # pragma: no cover
        db.rollback()
        logger.warning("Could not update ultimo_acceso for login '%s'", login)

    return user


# ---------------------------------------------------------------------------
# FastAPI dependency: current authenticated user
# ---------------------------------------------------------------------------


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
    db: Annotated[Session, Depends(get_db)],
) -> Usuario:
    """Resolve the caller's ``Usuario`` from the ``Authorization: Bearer`` header.

    Raises:
        HTTPException 401: Missing, invalid or expired token, or the user
                           no longer exists / was deactivated.
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="No se pudo validar las credenciales",
        headers={"WWW-Authenticate": "Bearer"},
    )

    if credentials is None:
        raise credentials_exception

    try:
        payload = verify_token(credentials.credentials)
    except ValueError:
        raise credentials_exception

    try:
        user_id = int(payload.get("sub"))
    except (TypeError, ValueError):
        raise credentials_exception

    user: Usuario | None = (
        db.query(Usuario)
        .filter(Usuario.id == user_id, Usuario.activo.is_(True))
        .first()
    )
    if user is None:
        raise credentials_exception

    return user


# ---------------------------------------------------------------------------
# Role enforcement dependency factory
# ---------------------------------------------------------------------------


def require_role(*roles: str):
    """Return a dependency that only lets users with one of *roles* through.

    .. code-block:: python

        @router.post("/")
        def create(current_user: Usuario = Depends(require_role("Admin"))):
            ...

    Raises:
        HTTPException 403: If the user's role is not in *roles*.
    """
    allowed = frozenset(roles)

    def _check_role(
        current_user: Annotated[Usuario, Depends(get_current_user)],
    ) -> Usuario:
        if current_user.rol not in allowed:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=(
                    f"Acceso denegado. Se requiere uno de los roles: "
                    f"{sorted(allowed)}"
                ),
            )
        return current_user

    return _check_role
