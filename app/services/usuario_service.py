"""
User administration service layer (Admin only).

Users are never deleted; ``activo=False`` blocks login and removes the user
from the staff dropdowns. A ``Medico`` user carries a ``Medico`` profile
with license number and specialty, created or updated together with the
account.
"""

from __future__ import annotations

import logging

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from app.config import get_settings
from app.models.medico import Medico
from app.models.usuario import Usuario
from app.schemas.usuario import UsuarioCreate, UsuarioResponse, UsuarioUpdate
from app.utils.constants import ROL_ADMIN, ROL_MEDICO
from app.utils.formatting import formatear_nombre_medico
from app.utils.security import hash_password

logger = logging.getLogger(__name__)

_CAMPOS_PERFIL = ("cedula", "especialidad")


def build_usuario_response(row: Usuario) -> UsuarioResponse:
    perfil = row.perfil_medico
    return UsuarioResponse(
        id=row.id,
        login=row.login,
        email=row.email,
        nombre=row.nombre,
        apellido=row.apellido,
        telefono=row.telefono,
        rol=row.rol,
        id_hospital=row.id_hospital,
        activo=bool(row.activo),
        nombre_display=formatear_nombre_medico(row),
        cedula=perfil.cedula if perfil is not None else None,
        especialidad=perfil.especialidad if perfil is not None else None,
    )


def _get_or_404(db: Session, usuario_id: int) -> Usuario:
    row = db.get(Usuario, usuario_id)
    if row is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Usuario con id {usuario_id} no encontrado.",
        )
    return row


def _sincronizar_perfil(row: Usuario, cedula: str | None, especialidad: str | None) -> None:
    if row.rol != ROL_MEDICO:
        return
    if row.perfil_medico is None:
        row.perfil_medico = Medico()
    if cedula is not None:
        row.perfil_medico.cedula = cedula
    if especialidad is not None:
        row.perfil_medico.especialidad = especialidad


def listar_usuarios(db: Session) -> list[UsuarioResponse]:
    rows = db.query(Usuario).order_by(Usuario.apellido, Usuario.nombre, Usuario.id).all()
    return [build_usuario_response(r) for r in rows]


def crear_usuario(db: Session, data: UsuarioCreate, admin: str = "sistema") -> UsuarioResponse:
    """Create an account; the password is stored as a bcrypt hash.

    Raises:
        HTTPException 409: ``login`` already taken.
    """
    if db.query(Usuario).filter(Usuario.login == data.login).first() is not None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"El login '{data.login}' ya está registrado.",
        )

    row = Usuario(
        login=data.login,
        email=data.email,
        password_hash=hash_password(data.password),
        nombre=data.nombre,
        apellido=data.apellido,
        telefono=data.telefono,
        rol=data.rol,
        id_hospital=data.id_hospital,
        activo=True,
    )
    _sincronizar_perfil(row, data.cedula, data.especialidad)
    db.add(row)
    db.commit()
    db.refresh(row)

    logger.info("Usuario %d ('%s', %s) creado por '%s'", row.id, row.login, row.rol, admin)
    return build_usuario_response(row)


def actualizar_usuario(
    db: Session,
    usuario_id: int,
    data: UsuarioUpdate,
    admin: str = "sistema",
) -> UsuarioResponse:
    """Apply the supplied fields; a new password is re-hashed.

    Raises:
        HTTPException 404: Unknown user.
    """
    row = _get_or_404(db, usuario_id)
    cambios = data.model_dump(exclude_unset=True)

    password = cambios.pop("password", None)
    if password:
        row.password_hash = hash_password(password)

    perfil = {k: cambios.pop(k) for k in _CAMPOS_PERFIL if k in cambios}
    for campo, valor in cambios.items():
        if valor is None and campo not in ("email", "telefono"):
            continue
        setattr(row, campo, valor)

    _sincronizar_perfil(row, perfil.get("cedula"), perfil.get("especialidad"))
    db.commit()
    db.refresh(row)

    logger.info(
        "Usuario %d actualizado por '%s' (%s%s)",
        usuario_id, admin, sorted(cambios), ", password" if password else "",
    )
    return build_usuario_response(row)


def asegurar_admin(db: Session, login: str, password: str) -> Usuario:
    """Create the bootstrap admin account when it does not exist yet."""
    admin = db.query(Usuario).filter(Usuario.login == login).first()
    if admin is not None:
        return admin

    admin = Usuario(
        login=login,
        email=None,
        password_hash=hash_password(password),
        nombre="Administrador",
        apellido="Sistema",
        rol=ROL_ADMIN,
        id_hospital=get_settings().ID_HOSPITAL,
        activo=True,
    )
    db.add(admin)
    db.commit()
    db.refresh(admin)
    logger.info("Usuario administrador '%s' creado", login)
    return admin
