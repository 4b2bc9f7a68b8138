"""
Client navigation: role menus and view resolution.

``resolver`` turns a typed view (see ``app.schemas.navegacion``) into a
history entry after checking that the caller's role may open it and that
the referenced records exist.
"""

from __future__ import annotations

import logging
from urllib.parse import urlencode

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from app.models.usuario import Usuario
from app.schemas.navegacion import (
    EntradaHistorial,
    MenuItem,
    MenuResponse,
    Vista,
    VistaAgregarFoto,
    VistaDocumento,
    VistaPacientes,
    VistaProcedimiento,
    VistaProgramacion,
    VistaUsuarios,
)
from app.services import documento_service, procedimiento_service
from app.utils.constants import (
    ROL_ADMIN,
    ROL_ADMINISTRATIVO,
    ROL_ENFERMERIA,
    ROL_MEDICO,
    ROLES,
    ROLES_CLINICOS,
    ROLES_PACIENTES,
)
from app.utils.formatting import parse_fecha

logger = logging.getLogger(__name__)

_MENUS: dict[str, list[MenuItem]] = {
    ROL_ADMIN: [
        MenuItem(vista="programacion", etiqueta="Programación"),
        MenuItem(vista="pacientes", etiqueta="Pacientes"),
        MenuItem(vista="usuarios", etiqueta="Usuarios"),
    ],
    ROL_MEDICO: [
        MenuItem(vista="programacion", etiqueta="Programación"),
        MenuItem(vista="pacientes", etiqueta="Mis Pacientes"),
    ],
    ROL_ENFERMERIA: [
        MenuItem(vista="programacion", etiqueta="Programación"),
    ],
    ROL_ADMINISTRATIVO: [
        MenuItem(vista="programacion", etiqueta="Programación"),
        MenuItem(vista="pacientes", etiqueta="Pacientes"),
    ],
}

# Roles allowed to open each view
_PERMISOS: dict[str, tuple[str, ...]] = {
    "programacion": tuple(ROLES),
    "pacientes": ROLES_PACIENTES,
    "usuarios": (ROL_ADMIN,),
    "procedimiento": tuple(ROLES),
    "documento": tuple(ROLES),
    "agregar_foto": ROLES_CLINICOS,
}


def menu(usuario: Usuario) -> MenuResponse:
    return MenuResponse(rol=usuario.rol, items=_MENUS.get(usuario.rol, []))


def _validar_permiso(vista: str, usuario: Usuario) -> None:
    if usuario.rol not in _PERMISOS[vista]:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"El rol '{usuario.rol}' no tiene acceso a la vista '{vista}'.",
        )


def resolver(db: Session, destino: Vista, usuario: Usuario) -> EntradaHistorial:
    """Validate *destino* for *usuario* and describe how to load it.

    Raises:
        HTTPException 403: The role may not open the view.
        HTTPException 404: A referenced procedure, patient or document type
                           does not exist.
        HTTPException 422: Malformed date on the schedule view.
    """
    _validar_permiso(destino.vista, usuario)

    if isinstance(destino, VistaProgramacion):
        if destino.fecha is not None and parse_fecha(destino.fecha) is None:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail=f"Fecha inválida: '{destino.fecha}'. Use YYYY-MM-DD.",
            )
        recurso = "/api/procedimientos"
        if destino.fecha:
            recurso += f"?fecha={destino.fecha}"
        entrada = EntradaHistorial(
            vista=destino.vista,
            titulo="Programación Quirúrgica",
            parametros=destino.model_dump(exclude={"vista"}),
            recurso=recurso,
        )

    elif isinstance(destino, VistaPacientes):
        titulo = "Mis Pacientes" if usuario.rol == ROL_MEDICO else "Pacientes"
        consulta: dict[str, str | int] = {"page": destino.page}
        if destino.buscar:
            consulta["buscar"] = destino.buscar
        entrada = EntradaHistorial(
            vista=destino.vista,
            titulo=titulo,
            parametros=destino.model_dump(exclude={"vista"}),
            recurso=f"/api/pacientes?{urlencode(consulta)}",
        )

    elif isinstance(destino, VistaUsuarios):
        entrada = EntradaHistorial(
            vista=destino.vista,
            titulo="Usuarios",
            parametros={},
            recurso="/api/usuarios",
        )

    elif isinstance(destino, VistaProcedimiento):
        proc = procedimiento_service.obtener_procedimiento(db, destino.procedimiento_id)
        entrada = EntradaHistorial(
            vista=destino.vista,
            titulo=f"Procedimiento: {proc.paciente_nombre}",
            parametros={"procedimiento_id": proc.id},
            recurso=f"/api/procedimientos/{proc.id}",
        )

    elif isinstance(destino, VistaDocumento):
        definicion = documento_service.obtener_tipo(destino.tipo)
        proc = procedimiento_service.obtener_procedimiento(db, destino.procedimiento_id)
        entrada = EntradaHistorial(
            vista=destino.vista,
            titulo=f"{definicion.titulo}: {proc.paciente_nombre}",
            parametros={"procedimiento_id": proc.id, "tipo": destino.tipo},
            recurso=f"/api/procedimientos/{proc.id}/documentos/{destino.tipo}",
        )

    elif isinstance(destino, VistaAgregarFoto):
        proc = procedimiento_service.obtener_procedimiento(db, destino.procedimiento_id)
        entrada = EntradaHistorial(
            vista=destino.vista,
            titulo=f"Agregar Foto: {proc.paciente_nombre}",
            parametros={"procedimiento_id": proc.id},
            recurso=f"/api/procedimientos/{proc.id}/fotos",
        )

    else:  # pragma: no cover
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="Vista desconocida.",
        )

    logger.debug("resolver: usuario=%s vista=%s", usuario.login, entrada.vista)
    return entrada
