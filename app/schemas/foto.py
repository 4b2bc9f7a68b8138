"""Schemas for the procedure photo gallery."""

from __future__ import annotations

import datetime

from pydantic import BaseModel, ConfigDict


class FotoResponse(BaseModel):
    id: int
    procedimiento_id: int
    descripcion: str
    content_type: str | None = None
    nombre_original: str | None = None
    url: str
    created_at: datetime.datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class FotosListResponse(BaseModel):
    success: bool = True
    fotos: list[FotoResponse]
