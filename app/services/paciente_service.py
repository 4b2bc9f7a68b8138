"""
Patient registry service layer.

Doctors only see the patients of procedures they take part in ("Mis
Pacientes"); every other allowed role sees the whole registry. Age is
computed on read and never stored.
"""

from __future__ import annotations

import logging

from fastapi import HTTPException, status
from sqlalchemy import or_
from sqlalchemy.orm import Session

from app.models.paciente import Paciente
from app.models.procedimiento import Procedimiento
from app.models.usuario import Usuario
from app.schemas.common import PaginationParams
from app.schemas.paciente import (
    PacienteCreate,
    PacienteResponse,
    PacienteUpdate,
    TablaPacientesResponse,
)
from app.utils.constants import ROL_MEDICO
from app.utils.formatting import calcular_edad

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _filtro_participacion(usuario_id: int):
    return or_(
        Procedimiento.medico_id == usuario_id,
        Procedimiento.anestesiologo_id == usuario_id,
        Procedimiento.ayudante_id == usuario_id,
    )


def _ultimo_procedimiento_id(db: Session, paciente_id: int) -> int | None:
    row = (
        db.query(Procedimiento.id)
        .filter(Procedimiento.paciente_id == paciente_id)
        .order_by(Procedimiento.fecha_qx.desc(), Procedimiento.id.desc())
        .first()
    )
    return row[0] if row is not None else None


def _build_response(db: Session, row: Paciente) -> PacienteResponse:
    return PacienteResponse(
        id=row.id,
        nombre=row.nombre,
        apellido=row.apellido,
        fecha_nacimiento=row.fecha_nacimiento,
        sexo=row.sexo,
        rfc=row.rfc or "",
        telefono=row.telefono or "",
        id_hospital=row.id_hospital,
        edad=calcular_edad(row.fecha_nacimiento),
        ultimo_procedimiento_id=_ultimo_procedimiento_id(db, row.id),
    )


def _es_paciente_de(db: Session, paciente_id: int, usuario_id: int) -> bool:
    return (
        db.query(Procedimiento.id)
        .filter(
            Procedimiento.paciente_id == paciente_id,
            _filtro_participacion(usuario_id),
        )
        .first()
        is not None
    )


def _escapar_like(texto: str) -> str:
    """Make ``%`` and ``_`` match literally in a LIKE pattern."""
    return texto.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _get_or_404(db: Session, paciente_id: int) -> Paciente:
    row = db.get(Paciente, paciente_id)
    if row is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Paciente con id {paciente_id} no encontrado.",
        )
    return row


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def listar_pacientes(
    db: Session,
    usuario: Usuario,
    pagination: PaginationParams,
    buscar: str | None = None,
) -> TablaPacientesResponse:
    """Return one page of the patient table.

    Args:
        db: Active SQLAlchemy session.
        usuario: Caller; ``Medico`` callers are limited to their own patients.
        pagination: Page number and size.
        buscar: Case-insensitive match on given name, family name or RFC.
    """
    query = db.query(Paciente)

    if usuario.rol == ROL_MEDICO:
        propios = (
            db.query(Procedimiento.paciente_id)
            .filter(_filtro_participacion(usuario.id))
        )
        query = query.filter(Paciente.id.in_(propios))

    if buscar:
        patron = f"%{_escapar_like(buscar.strip())}%"
        query = query.filter(
            or_(
                Paciente.nombre.ilike(patron, escape="\\"),
                Paciente.apellido.ilike(patron, escape="\\"),
                Paciente.rfc.ilike(patron, escape="\\"),
            )
        )

    total = query.count()
    offset = (pagination.page - 1) * pagination.page_size
    rows = (
        query.order_by(Paciente.apellido, Paciente.nombre, Paciente.id)
        .offset(offset)
        .limit(pagination.page_size)
        .all()
    )

    logger.debug(
        "listar_pacientes: usuario=%s buscar=%r page=%d -> %d/%d",
        usuario.login, buscar, pagination.page, len(rows), total,
    )
    return TablaPacientesResponse(
        pacientes=[_build_response(db, r) for r in rows],
        total=total,
        page=pagination.page,
        page_size=pagination.page_size,
    )


def obtener_paciente(db: Session, paciente_id: int, usuario: Usuario) -> PacienteResponse:
    """Return one patient.

    Raises:
        HTTPException 404: Unknown patient, or a doctor asking for a patient
                           outside their own list.
    """
    row = _get_or_404(db, paciente_id)
    if usuario.rol == ROL_MEDICO and not _es_paciente_de(db, paciente_id, usuario.id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Paciente con id {paciente_id} no encontrado.",
        )
    return _build_response(db, row)


def crear_paciente(db: Session, data: PacienteCreate, usuario: str = "sistema") -> PacienteResponse:
    row = Paciente(**data.model_dump())
    db.add(row)
    db.commit()
    db.refresh(row)
    logger.info("Paciente %d creado por '%s'", row.id, usuario)
    return _build_response(db, row)


def actualizar_paciente(
    db: Session,
    paciente_id: int,
    data: PacienteUpdate,
    usuario: Usuario,
) -> PacienteResponse:
    """Apply the supplied fields only.

    Raises:
        HTTPException 404: Unknown patient (or not visible to the doctor).
    """
    obtener_paciente(db, paciente_id, usuario)
    row = _get_or_404(db, paciente_id)

    cambios = data.model_dump(exclude_unset=True)
    # null clears the optional identifiers; the required fields ignore it
    for campo in ("rfc", "telefono"):
        if campo in cambios and cambios[campo] is None:
            cambios[campo] = ""
    cambios = {k: v for k, v in cambios.items() if v is not None}
    for campo, valor in cambios.items():
        setattr(row, campo, valor)
    db.commit()
    db.refresh(row)

    logger.info(
        "Paciente %d actualizado por '%s' (%s)",
        paciente_id, usuario.login, sorted(cambios),
    )
    return _build_response(db, row)
