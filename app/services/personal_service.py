"""
Staff directory and role-eligibility rules.

Three pools feed the procedure form dropdowns and are re-checked when a
procedure is saved:

- ayudantes: every active ``Medico`` user;
- anestesiólogos: ``Medico`` users whose specialty mentions anesthesiology;
- cirujanos: ``Medico`` users that are neither general practitioners nor
  anesthesiologists.

Specialty matching ignores case and accents, so "Anestesióloga" and
"ANESTESIOLOGIA" land in the same pool.
"""

from __future__ import annotations

import logging
from typing import Callable

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from app.models.usuario import Usuario
from app.schemas.personal import PersonalResponse
from app.utils.constants import ROL_MEDICO
from app.utils.formatting import (
    es_anestesiologo,
    es_medicina_general,
    formatear_nombre_medico,
)

logger = logging.getLogger(__name__)

POOL_CIRUJANOS = "cirujanos"
POOL_ANESTESIOLOGOS = "anestesiologos"
POOL_AYUDANTES = "ayudantes"


# ---------------------------------------------------------------------------
# Eligibility predicates
# ---------------------------------------------------------------------------


def _especialidad(usuario: Usuario) -> str | None:
    perfil = usuario.perfil_medico
    return perfil.especialidad if perfil is not None else None


def _es_medico_activo(usuario: Usuario) -> bool:
    return usuario.rol == ROL_MEDICO and bool(usuario.activo)


def puede_ser_ayudante(usuario: Usuario) -> bool:
    return _es_medico_activo(usuario)


def puede_ser_anestesiologo(usuario: Usuario) -> bool:
    return _es_medico_activo(usuario) and es_anestesiologo(_especialidad(usuario))


def puede_ser_cirujano(usuario: Usuario) -> bool:
    especialidad = _especialidad(usuario)
    return (
        _es_medico_activo(usuario)
        and not es_anestesiologo(especialidad)
        and not es_medicina_general(especialidad)
    )


_POOLS: dict[str, Callable[[Usuario], bool]] = {
    POOL_CIRUJANOS: puede_ser_cirujano,
    POOL_ANESTESIOLOGOS: puede_ser_anestesiologo,
    POOL_AYUDANTES: puede_ser_ayudante,
}

_ETIQUETAS_ROL: dict[str, str] = {
    POOL_CIRUJANOS: "cirujano",
    POOL_ANESTESIOLOGOS: "anestesiólogo",
    POOL_AYUDANTES: "ayudante",
}


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def build_personal_response(usuario: Usuario) -> PersonalResponse:
    perfil = usuario.perfil_medico
    return PersonalResponse(
        id=usuario.id,
        nombre=usuario.nombre,
        apellido=usuario.apellido,
        nombre_display=formatear_nombre_medico(usuario),
        cedula=perfil.cedula if perfil is not None else None,
        especialidad=perfil.especialidad if perfil is not None else None,
    )


def listar_medicos(db: Session, pool: str | None = None) -> list[PersonalResponse]:
    """Return active doctors, optionally restricted to one eligibility pool.

    Args:
        db: Active SQLAlchemy session.
        pool: ``"cirujanos"``, ``"anestesiologos"``, ``"ayudantes"`` or
              ``None`` for every active doctor.

    Returns:
        Doctors ordered by family name then given name.
    """
    medicos = (
        db.query(Usuario)
        .filter(Usuario.rol == ROL_MEDICO, Usuario.activo.is_(True))
        .order_by(Usuario.apellido, Usuario.nombre, Usuario.id)
        .all()
    )
    if pool is not None:
        predicado = _POOLS[pool]
        medicos = [m for m in medicos if predicado(m)]

    logger.debug("listar_medicos: pool=%s -> %d", pool, len(medicos))
    return [build_personal_response(m) for m in medicos]


def validar_asignacion(db: Session, usuario_id: int | None, pool: str) -> Usuario | None:
    """Check that *usuario_id* exists and belongs to *pool*.

    ``None`` is accepted and returned unchanged; the caller decides whether
    the slot is mandatory.

    Raises:
        HTTPException 422: Unknown user, or user outside the pool.
    """
    if usuario_id is None:
        return None

    etiqueta = _ETIQUETAS_ROL[pool]
    usuario = db.get(Usuario, usuario_id)
    if usuario is None:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"El {etiqueta} con id {usuario_id} no existe.",
        )
    if not _POOLS[pool](usuario):
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=(
                f"{formatear_nombre_medico(usuario)} no puede asignarse como "
                f"{etiqueta}."
            ),
        )
    return usuario
