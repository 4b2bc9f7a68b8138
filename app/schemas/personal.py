"""Schemas for the staff directory dropdowns (surgeon / anesthesiologist / assistant)."""

from __future__ import annotations

from pydantic import BaseModel


class PersonalResponse(BaseModel):
    """A doctor option; ``id`` is the *user* id referenced by procedures."""

    id: int
    nombre: str
    apellido: str
    nombre_display: str
    cedula: str | None = None
    especialidad: str | None = None


class PersonalListResponse(BaseModel):
    success: bool = True
    medicos: list[PersonalResponse]
