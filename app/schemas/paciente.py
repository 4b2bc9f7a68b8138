"""
Pydantic v2 schemas for the patient registry.

Age is never accepted from the client; ``PacienteResponse.edad`` is
derived from ``fecha_nacimiento`` when the response is built.
"""

from __future__ import annotations

import datetime
from typing import Literal

from pydantic import BaseModel, Field


class PacienteBase(BaseModel):
    nombre: str = Field(..., min_length=1, max_length=150)
    apellido: str = Field(..., min_length=1, max_length=150)
    fecha_nacimiento: datetime.date
    sexo: Literal["F", "M"]
    rfc: str = Field(default="", max_length=20)
    telefono: str = Field(default="", max_length=50)
    id_hospital: int = Field(default=1, ge=1)


class PacienteCreate(PacienteBase):
    """Payload for ``POST /api/pacientes``."""


class PacienteUpdate(BaseModel):
    """Partial update for ``PUT /api/pacientes/{id}``; only supplied fields change.

    ``null`` clears ``rfc`` and ``telefono`` (stored as ``""``) and is ignored
    for the other fields.
    """

    nombre: str | None = Field(default=None, min_length=1, max_length=150)
    apellido: str | None = Field(default=None, min_length=1, max_length=150)
    fecha_nacimiento: datetime.date | None = None
    sexo: Literal["F", "M"] | None = None
    rfc: str | None = Field(default=None, max_length=20)
    telefono: str | None = Field(default=None, max_length=50)


class PacienteResponse(PacienteBase):
    id: int
    edad: int | None = None
    ultimo_procedimiento_id: int | None = Field(
        default=None,
        description="Procedimiento más reciente del paciente, para navegar al detalle.",
    )


class TablaPacientesResponse(BaseModel):
    """One page of the patient table."""

    success: bool = True
    pacientes: list[PacienteResponse]
    total: int
    page: int
    page_size: int
