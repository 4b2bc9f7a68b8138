"""
Pydantic v2 schemas for the procedure (surgery) aggregate.

``ProcedimientoUpsert`` is used for both create (no ``id``) and full
replacement (``id`` + ``version``). Section fields are optional; when
present they are normalised to their complete shape.
"""

from __future__ import annotations

import datetime
from typing import Literal

from pydantic import BaseModel, Field, model_validator

from app.schemas.documentos import (
    Consentimiento,
    IndicacionesPostop,
    NotaAlta,
    NotaPostanestesica,
    NotaPostoperatoria,
    NotaPreanestesica,
    ResumenIngreso,
)
from app.schemas.foto import FotoResponse

StatusLiteral = Literal["Programado", "Post-op", "Alta"]


class ProcedimientoBase(BaseModel):
    """Fields shared by the write and read shapes of a procedure.

    Attributes:
        paciente_id: Patient operated on.
        medico_id: Surgeon (user id).
        anestesiologo_id: Anesthesiologist (user id), optional.
        ayudante_id: Assistant (user id), optional.
        fecha_qx: Scheduled date.
        diagnostico: Primary diagnosis.
        qx_planeada: Planned surgery.
        status: Procedure state.
    """

    paciente_id: int = Field(..., ge=1)
    medico_id: int = Field(..., ge=1)
    anestesiologo_id: int | None = Field(default=None, ge=1)
    ayudante_id: int | None = Field(default=None, ge=1)
    fecha_qx: datetime.date
    diagnostico: str = Field(..., min_length=1, max_length=500)
    qx_planeada: str = Field(..., min_length=1, max_length=500)
    status: StatusLiteral = "Programado"
    id_hospital: int = Field(default=1, ge=1)

    resumen_ingreso: ResumenIngreso | None = None
    nota_preanestesica: NotaPreanestesica | None = None
    consentimiento: Consentimiento | None = None
    nota_postanestesica: NotaPostanestesica | None = None
    nota_postoperatoria: NotaPostoperatoria | None = None
    indicaciones_postop: IndicacionesPostop | None = None
    nota_alta: NotaAlta | None = None


class ProcedimientoUpsert(ProcedimientoBase):
    """Payload for ``POST /api/procedimientos``.

    Without ``id`` a new procedure is created. With ``id`` the stored record
    is replaced entirely and ``version`` must match the stored stamp.
    """

    id: int | None = Field(default=None, ge=1)
    version: int | None = Field(default=None, ge=1)

    @model_validator(mode="after")
    def _personal_distinto(self) -> "ProcedimientoUpsert":
        asignados = [
            uid
            for uid in (self.medico_id, self.anestesiologo_id, self.ayudante_id)
            if uid is not None
        ]
        if len(asignados) != len(set(asignados)):
            raise ValueError(
                "Cirujano, anestesiólogo y ayudante deben ser personas distintas."
            )
        if self.id is not None and self.version is None:
            raise ValueError("Se requiere 'version' para actualizar un procedimiento.")
        return self


class ProcedimientoResponse(ProcedimientoBase):
    """Full procedure record with resolved display labels and photos."""

    id: int
    version: int
    paciente_nombre: str
    paciente_edad: int | None = None
    cirujano_nombre: str
    anestesiologo_nombre: str
    ayudante_nombre: str
    fotos: list[FotoResponse] = Field(default_factory=list)
    created_at: datetime.datetime | None = None
    updated_at: datetime.datetime | None = None


class ProcedimientoResumen(BaseModel):
    """Row of the daily schedule table."""

    id: int
    fecha_qx: datetime.date
    paciente_id: int
    paciente_nombre: str
    diagnostico: str
    qx_planeada: str
    cirujano: str
    anestesiologo: str
    ayudante: str
    status: str


class ProcedimientosListResponse(BaseModel):
    success: bool = True
    procedimientos: list[ProcedimientoResumen]


class ProcedimientoDetalleResponse(BaseModel):
    success: bool = True
    procedimiento: ProcedimientoResponse


class StatusUpdate(BaseModel):
    """Payload for ``PATCH /api/procedimientos/{id}/status``."""

    status: StatusLiteral
