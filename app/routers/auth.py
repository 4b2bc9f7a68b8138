"""
Authentication router for the Clínica SIC API.

Mounts under ``/api/auth`` (prefix set in ``main.py``).

Endpoints:
    POST /login — Authenticate with login + password, receive JWT and profile.
    GET  /me    — Return the currently authenticated user's profile.

Logout is handled by the client discarding its token.
"""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.models.usuario import Usuario
from app.schemas.auth import LoginRequest, LoginResponse, UserResponse
from app.services.auth_service import authenticate_user, get_current_user
from app.utils.security import create_access_token, token_claims

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Auth"])


# ---------------------------------------------------------------------------
# POST /login
# ---------------------------------------------------------------------------


@router.post(
    "/login",
    response_model=LoginResponse,
    summary="Iniciar sesión",
    description=(
        "Autentica al usuario con su login y contraseña y retorna su perfil "
        "público junto con un JWT válido por ``JWT_EXPIRATION_MINUTES``."
    ),
    responses={
        200: {"description": "Autenticación exitosa."},
        401: {"description": "Credenciales inválidas o cuenta inactiva."},
        422: {"description": "Cuerpo de la solicitud inválido."},
    },
)
def login(
    body: LoginRequest,
    db: Annotated[Session, Depends(get_db)],
) -> LoginResponse:
    """Authenticate a user and issue a JWT access token.

    Raises:
        HTTPException 401: If credentials are invalid or the account is inactive.
    """
    user = authenticate_user(db, body.login, body.password)

    if user is None:
        logger.warning("Failed login attempt for login='%s'", body.login)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Credenciales inválidas.",
            headers={"WWW-Authenticate": "Bearer"},
        )

    token = create_access_token(data=token_claims(user))

    logger.info("Successful login for login='%s' rol='%s'", user.login, user.rol)
    return LoginResponse(
        user=UserResponse.model_validate(user),
        access_token=token,
    )


# ---------------------------------------------------------------------------
# GET /me
# ---------------------------------------------------------------------------


@router.get(
    "/me",
    response_model=UserResponse,
    summary="Perfil del usuario autenticado",
    responses={
        200: {"description": "Perfil del usuario autenticado."},
        401: {"description": "Token ausente, inválido o expirado."},
    },
)
def get_me(
    current_user: Annotated[Usuario, Depends(get_current_user)],
) -> UserResponse:
    return UserResponse.model_validate(current_user)
