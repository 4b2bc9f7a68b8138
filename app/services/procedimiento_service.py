"""
Procedure (surgery) service layer.

All database access for the ``/api/procedimientos`` endpoints lives here.
Functions receive a SQLAlchemy ``Session`` and return schema instances ready
for serialisation by FastAPI; failures are raised as ``HTTPException``.

Design notes
------------
- ``upsert_procedimiento`` handles create and full replacement. A full
  replacement must carry the ``version`` the client read; a stale stamp is
  rejected with 409 instead of silently overwriting a concurrent edit.
- Every write of a procedure row (upsert, status patch, document save)
  bumps ``version``.
- Staff slots are re-validated against their eligibility pools on every
  upsert, not only when the dropdowns are built.
- Deleting is idempotent and removes the photo files after the rows are
  gone.
"""

from __future__ import annotations

import datetime
import logging
from typing import Any

from fastapi import HTTPException, status
from sqlalchemy import or_
from sqlalchemy.orm import Session

from app.models.paciente import Paciente
from app.models.procedimiento import Procedimiento
from app.schemas.documentos import SECCIONES
from app.schemas.procedimiento import (
    ProcedimientoResponse,
    ProcedimientoResumen,
    ProcedimientoUpsert,
)
from app.services.foto_service import build_foto_response, eliminar_archivos
from app.services.personal_service import (
    POOL_ANESTESIOLOGOS,
    POOL_AYUDANTES,
    POOL_CIRUJANOS,
    validar_asignacion,
)
from app.utils.formatting import calcular_edad, formatear_nombre_medico, nombre_completo

logger = logging.getLogger(__name__)

_CAMPOS_ESCALARES: tuple[str, ...] = (
    "paciente_id",
    "medico_id",
    "anestesiologo_id",
    "ayudante_id",
    "fecha_qx",
    "diagnostico",
    "qx_planeada",
    "status",
    "id_hospital",
)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _nombre_paciente(paciente: Paciente | None) -> str:
    if paciente is None:
        return "N/A"
    return nombre_completo(paciente.nombre, paciente.apellido)


def _build_response(row: Procedimiento) -> ProcedimientoResponse:
    """Construct a ``ProcedimientoResponse`` from a ``Procedimiento`` ORM object.

    Resolves the display labels by traversing the lazy-loaded ``paciente``
    and staff relationships.
    """
    secciones: dict[str, Any] = {
        clave: getattr(row, clave) for clave in SECCIONES
    }
    return ProcedimientoResponse(
        id=row.id,
        version=row.version,
        paciente_id=row.paciente_id,
        medico_id=row.medico_id,
        anestesiologo_id=row.anestesiologo_id,
        ayudante_id=row.ayudante_id,
        fecha_qx=row.fecha_qx,
        diagnostico=row.diagnostico,
        qx_planeada=row.qx_planeada,
        status=row.status,
        id_hospital=row.id_hospital,
        paciente_nombre=_nombre_paciente(row.paciente),
        paciente_edad=(
            calcular_edad(row.paciente.fecha_nacimiento)
            if row.paciente is not None
            else None
        ),
        cirujano_nombre=formatear_nombre_medico(row.cirujano),
        anestesiologo_nombre=formatear_nombre_medico(row.anestesiologo),
        ayudante_nombre=formatear_nombre_medico(row.ayudante),
        fotos=[build_foto_response(f) for f in row.fotos],
        created_at=row.created_at,
        updated_at=row.updated_at,
        **secciones,
    )


def _build_resumen(row: Procedimiento) -> ProcedimientoResumen:
    return ProcedimientoResumen(
        id=row.id,
        fecha_qx=row.fecha_qx,
        paciente_id=row.paciente_id,
        paciente_nombre=_nombre_paciente(row.paciente),
        diagnostico=row.diagnostico,
        qx_planeada=row.qx_planeada,
        cirujano=formatear_nombre_medico(row.cirujano),
        anestesiologo=formatear_nombre_medico(row.anestesiologo),
        ayudante=formatear_nombre_medico(row.ayudante),
        status=row.status,
    )


def get_procedimiento_or_404(db: Session, procedimiento_id: int) -> Procedimiento:
    row = db.get(Procedimiento, procedimiento_id)
    if row is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Procedimiento con id {procedimiento_id} no encontrado.",
        )
    return row


def _validar_referencias(db: Session, data: ProcedimientoUpsert) -> None:
    """Check the patient and every staff slot before touching the row.

    Raises:
        HTTPException 422: Unknown patient, or a staff member outside the
                           pool of the slot they were assigned to.
    """
    if db.get(Paciente, data.paciente_id) is None:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"El paciente con id {data.paciente_id} no existe.",
        )
    validar_asignacion(db, data.medico_id, POOL_CIRUJANOS)
    validar_asignacion(db, data.anestesiologo_id, POOL_ANESTESIOLOGOS)
    validar_asignacion(db, data.ayudante_id, POOL_AYUDANTES)


def _aplicar(row: Procedimiento, data: ProcedimientoUpsert) -> None:
    for campo in _CAMPOS_ESCALARES:
        setattr(row, campo, getattr(data, campo))
    for clave in SECCIONES:
        seccion = getattr(data, clave)
        setattr(row, clave, seccion.model_dump() if seccion is not None else None)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def listar_procedimientos(
    db: Session,
    fecha: datetime.date | None = None,
    paciente_id: int | None = None,
    personal_id: int | None = None,
) -> list[ProcedimientoResumen]:
    """Return schedule rows ordered by date then id.

    Args:
        db: Active SQLAlchemy session.
        fecha: Only procedures scheduled on this day.
        paciente_id: Only procedures of this patient.
        personal_id: Only procedures where this user is surgeon,
                     anesthesiologist or assistant.
    """
    query = db.query(Procedimiento)
    if fecha is not None:
        query = query.filter(Procedimiento.fecha_qx == fecha)
    if paciente_id is not None:
        query = query.filter(Procedimiento.paciente_id == paciente_id)
    if personal_id is not None:
        query = query.filter(
            or_(
                Procedimiento.medico_id == personal_id,
                Procedimiento.anestesiologo_id == personal_id,
                Procedimiento.ayudante_id == personal_id,
            )
        )
    rows = query.order_by(Procedimiento.fecha_qx, Procedimiento.id).all()

    logger.debug(
        "listar_procedimientos: fecha=%s paciente=%s personal=%s -> %d",
        fecha, paciente_id, personal_id, len(rows),
    )
    return [_build_resumen(r) for r in rows]


def obtener_procedimiento(db: Session, procedimiento_id: int) -> ProcedimientoResponse:
    """Return the full record.

    Raises:
        HTTPException 404: Procedure not found.
    """
    return _build_response(get_procedimiento_or_404(db, procedimiento_id))


def upsert_procedimiento(
    db: Session,
    data: ProcedimientoUpsert,
    usuario: str = "sistema",
) -> ProcedimientoResponse:
    """Insert a new procedure or fully replace an existing one.

    Args:
        db: Active SQLAlchemy session.
        data: Complete record. ``id`` absent → insert; present → replace.
        usuario: Login of the caller, for the audit log.

    Returns:
        The stored record as read back from the database.

    Raises:
        HTTPException 404: ``id`` given but unknown.
        HTTPException 409: ``version`` does not match the stored stamp.
        HTTPException 422: Invalid patient or staff references.
    """
    if data.id is None:
        row = Procedimiento(version=1)
        _validar_referencias(db, data)
        _aplicar(row, data)
        db.add(row)
        accion = "creado"
    else:
        row = get_procedimiento_or_404(db, data.id)
        if data.version != row.version:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=(
                    f"El procedimiento {row.id} fue modificado por otro usuario "
                    f"(versión actual {row.version}, recibida {data.version}). "
                    "Recargue antes de guardar."
                ),
            )
        _validar_referencias(db, data)
        _aplicar(row, data)
        row.version = row.version + 1
        accion = "actualizado"

    db.commit()
    db.refresh(row)
    logger.info(
        "Procedimiento %d %s por '%s' (version %d)",
        row.id, accion, usuario, row.version,
    )
    return _build_response(row)


def actualizar_status(
    db: Session,
    procedimiento_id: int,
    nuevo_status: str,
    usuario: str = "sistema",
) -> ProcedimientoResponse:
    """Patch only the ``status`` field; documents and staff are untouched."""
    row = get_procedimiento_or_404(db, procedimiento_id)
    anterior = row.status
    row.status = nuevo_status
    row.version = row.version + 1
    db.commit()
    db.refresh(row)
    logger.info(
        "Procedimiento %d: status %s -> %s por '%s'",
        procedimiento_id, anterior, nuevo_status, usuario,
    )
    return _build_response(row)


def eliminar_procedimiento(
    db: Session,
    procedimiento_id: int,
    usuario: str = "sistema",
) -> bool:
    """Delete a procedure with its photos. Unknown ids are a no-op.

    Returns:
        ``True`` if a row was deleted.
    """
    row = db.get(Procedimiento, procedimiento_id)
    if row is None:
        logger.debug("eliminar_procedimiento: %d no existe", procedimiento_id)
        return False

    rutas = [f.ruta for f in row.fotos]
    db.delete(row)
    db.commit()
    eliminar_archivos(rutas)

    logger.info(
        "Procedimiento %d eliminado por '%s' (%d fotos)",
        procedimiento_id, usuario, len(rutas),
    )
    return True
