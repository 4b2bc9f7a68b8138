"""
Fotos router.

Mounts under ``/api/fotos`` (prefix set in ``main.py``).

Endpoints
---------
GET /{foto_id}/archivo — Stream the stored image of a photo.

Uploading and listing live under ``/api/procedimientos/{id}/fotos``.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends
from fastapi.responses import FileResponse
from sqlalchemy.orm import Session

from app.database import get_db
from app.models.usuario import Usuario
from app.services import foto_service
from app.services.auth_service import get_current_user

router = APIRouter(tags=["Fotos"])


@router.get(
    "/{foto_id}/archivo",
    response_class=FileResponse,
    summary="Descargar imagen",
    responses={
        200: {"description": "Imagen almacenada.", "content": {"image/*": {}}},
        401: {"description": "Token JWT ausente o inválido."},
        404: {"description": "Foto o archivo no encontrado."},
    },
)
def descargar_archivo(
    foto_id: int,
    db: Annotated[Session, Depends(get_db)],
    _current_user: Annotated[Usuario, Depends(get_current_user)],
) -> FileResponse:
    ruta, foto = foto_service.obtener_archivo(db, foto_id)
    return FileResponse(
        ruta,
        media_type=foto.content_type or "application/octet-stream",
        filename=foto.nombre_original or ruta.name,
    )
