"""
Pydantic v2 schemas for user administration endpoints.

Write schemas (``UsuarioCreate``, ``UsuarioUpdate``) are separate from the
read schema so the password never travels back to the client.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, EmailStr, Field

RolLiteral = Literal["Admin", "Medico", "Enfermeria", "Administrativo"]


class UsuarioCreate(BaseModel):
    """Payload for ``POST /api/usuarios`` (Admin only).

    ``cedula`` and ``especialidad`` create the medical profile and are only
    used when ``rol`` is ``"Medico"``.
    """

    login: str = Field(
        ...,
        min_length=3,
        max_length=100,
        pattern=r"^[a-zA-Z0-9_.\-]+$",
        description="Login único (alfanumérico, punto, guion y _)",
    )
    email: EmailStr | None = None
    password: str = Field(
        ...,
        min_length=6,
        max_length=128,
        description="Contraseña en texto plano; se almacena hasheada con bcrypt",
    )
    nombre: str = Field(..., min_length=1, max_length=150)
    apellido: str = Field(..., min_length=1, max_length=150)
    telefono: str | None = Field(default=None, max_length=50)
    rol: RolLiteral
    id_hospital: int = Field(default=1, ge=1)
    cedula: str | None = Field(default=None, max_length=50)
    especialidad: str | None = Field(default=None, max_length=150)


class UsuarioUpdate(BaseModel):
    """Partial update for ``PUT /api/usuarios/{id}``.

    Omitting ``password`` keeps the stored hash. ``activo=False`` suspends
    the account; users are never deleted.
    """

    email: EmailStr | None = None
    password: str | None = Field(default=None, min_length=6, max_length=128)
    nombre: str | None = Field(default=None, min_length=1, max_length=150)
    apellido: str | None = Field(default=None, min_length=1, max_length=150)
    telefono: str | None = Field(default=None, max_length=50)
    rol: RolLiteral | None = None
    id_hospital: int | None = Field(default=None, ge=1)
    activo: bool | None = None
    cedula: str | None = Field(default=None, max_length=50)
    especialidad: str | None = Field(default=None, max_length=150)


class UsuarioResponse(BaseModel):
    """User row as shown in the administration table."""

    id: int
    login: str
    email: str | None = None
    nombre: str
    apellido: str
    telefono: str | None = None
    rol: str
    id_hospital: int
    activo: bool
    nombre_display: str
    cedula: str | None = None
    especialidad: str | None = None


class UsuariosListResponse(BaseModel):
    success: bool = True
    usuarios: list[UsuarioResponse]
