"""
Usuarios router (administration).

Mounts under ``/api/usuarios`` (prefix set in ``main.py``). Every endpoint
requires the Admin role.

Endpoints
---------
GET  /      — All users, active or not.
POST /      — Create a user (password required).
PUT  /{id}  — Partial update; ``activo=false`` suspends the account.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.models.usuario import Usuario
from app.schemas.usuario import (
    UsuarioCreate,
    UsuarioResponse,
    UsuariosListResponse,
    UsuarioUpdate,
)
from app.services import usuario_service
from app.services.auth_service import require_role
from app.utils.constants import ROL_ADMIN

router = APIRouter(tags=["Usuarios"])

_AdminUser = Annotated[Usuario, Depends(require_role(ROL_ADMIN))]


@router.get(
    "",
    response_model=UsuariosListResponse,
    summary="Listar usuarios",
    responses={403: {"description": "Requiere rol Admin."}},
)
def listar(
    db: Annotated[Session, Depends(get_db)],
    _admin: _AdminUser,
) -> UsuariosListResponse:
    return UsuariosListResponse(usuarios=usuario_service.listar_usuarios(db))


@router.post(
    "",
    response_model=UsuarioResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Crear usuario",
    responses={
        403: {"description": "Requiere rol Admin."},
        409: {"description": "Login ya registrado."},
        422: {"description": "Datos inválidos (p. ej. contraseña ausente)."},
    },
)
def crear(
    data: UsuarioCreate,
    db: Annotated[Session, Depends(get_db)],
    admin: _AdminUser,
) -> UsuarioResponse:
    return usuario_service.crear_usuario(db, data, admin=admin.login)


@router.put(
    "/{usuario_id}",
    response_model=UsuarioResponse,
    summary="Actualizar usuario",
    description="Si se omite ``password`` se conserva la contraseña actual.",
    responses={
        403: {"description": "Requiere rol Admin."},
        404: {"description": "Usuario no encontrado."},
    },
)
def actualizar(
    usuario_id: int,
    data: UsuarioUpdate,
    db: Annotated[Session, Depends(get_db)],
    admin: _AdminUser,
) -> UsuarioResponse:
    return usuario_service.actualizar_usuario(db, usuario_id, data, admin=admin.login)
