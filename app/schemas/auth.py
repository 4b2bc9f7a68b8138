"""
Pydantic v2 schemas for the authentication endpoints.

Covers the login request payload, the login response (token plus public
user projection) and the projection itself returned by ``GET /api/auth/me``.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class LoginRequest(BaseModel):
    """Payload accepted by ``POST /api/auth/login``."""

    login: str = Field(..., min_length=1, max_length=100, description="Login de usuario")
    password: str = Field(..., min_length=1, max_length=128, description="Contraseña")

    model_config = ConfigDict(
        json_schema_extra={"example": {"login": "dra.vega", "password": "password"}}
    )


class UserResponse(BaseModel):
    """Public representation of a user. The password hash is never included."""

    id: int
    login: str
    email: str | None = None
    nombre: str
    apellido: str
    telefono: str | None = None
    rol: str
    id_hospital: int
    activo: bool

    model_config = ConfigDict(from_attributes=True)


class LoginResponse(BaseModel):
    """Response body returned after a successful authentication.

    Attributes:
        success: Always ``True``; failures are reported as HTTP 401.
        user: Public user projection kept by the client as its session.
        access_token: Signed JWT for the ``Authorization: Bearer`` header.
        token_type: Always ``"bearer"``.
    """

    success: bool = True
    user: UserResponse
    access_token: str
    token_type: str = "bearer"
