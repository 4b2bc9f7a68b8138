"""
Photo gallery of a procedure.

Photos are append-only: there is no per-photo edit or delete, they go away
only together with their procedure. An attachment is created atomically:
the image is written to disk first and removed again if the database row
cannot be committed, so neither orphan files nor dangling rows survive.
"""

from __future__ import annotations

import logging
from pathlib import Path

from fastapi import HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.config import get_settings
from app.models.foto_procedimiento import FotoProcedimiento
from app.models.procedimiento import Procedimiento
from app.schemas.foto import FotoResponse
from app.services.file_storage import (
    delete_upload,
    get_upload_relative_path,
    resolve_upload,
    save_upload,
)
from app.utils.constants import FOTO_MAX_BYTES

logger = logging.getLogger(__name__)


def _fotos_dir() -> Path:
    return Path(get_settings().FOTOS_DIR)


def build_foto_response(foto: FotoProcedimiento) -> FotoResponse:
    prefix = get_settings().API_PREFIX
    return FotoResponse(
        id=foto.id,
        procedimiento_id=foto.procedimiento_id,
        descripcion=foto.descripcion or "",
        content_type=foto.content_type,
        nombre_original=foto.nombre_original,
        url=f"{prefix}/fotos/{foto.id}/archivo",
        created_at=foto.created_at,
    )


def _get_procedimiento(db: Session, procedimiento_id: int) -> Procedimiento:
    row = db.get(Procedimiento, procedimiento_id)
    if row is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Procedimiento con id {procedimiento_id} no encontrado.",
        )
    return row


def agregar_foto(
    db: Session,
    procedimiento_id: int,
    contenido: bytes,
    filename: str | None,
    content_type: str | None,
    descripcion: str | None = None,
) -> FotoResponse:
    """Attach one image to a procedure.

    Args:
        db: Active SQLAlchemy session.
        procedimiento_id: Owning procedure.
        contenido: Raw image bytes.
        filename: Client filename, kept for display only.
        content_type: MIME type declared by the client; must be ``image/*``.
        descripcion: Optional caption; ``None`` is stored as ``""``.

    Raises:
        HTTPException 404: Procedure not found.
        HTTPException 422: Empty file, non-image content type or oversize.
        HTTPException 500: The row could not be stored (file is rolled back).
    """
    _get_procedimiento(db, procedimiento_id)

    if not contenido:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="La imagen está vacía.",
        )
    if not (content_type or "").startswith("image/"):
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Tipo de archivo no permitido: {content_type or 'desconocido'}. Se espera una imagen.",
        )
    if len(contenido) > FOTO_MAX_BYTES:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"La imagen excede el tamaño máximo de {FOTO_MAX_BYTES // (1024 * 1024)} MB.",
        )

    fotos_dir = _fotos_dir()
    nombre = filename or "foto"
    ruta = save_upload(contenido, nombre, fotos_dir, procedimiento_id)
    relativa = get_upload_relative_path(ruta, fotos_dir)

    foto = FotoProcedimiento(
        procedimiento_id=procedimiento_id,
        ruta=relativa,
        nombre_original=nombre,
        content_type=content_type,
        descripcion=descripcion or "",
    )
    try:
        db.add(foto)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        delete_upload(relativa, fotos_dir)
        logger.exception(
            "agregar_foto: no se pudo registrar la foto del procedimiento %d",
            procedimiento_id,
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="No se pudo guardar la foto.",
        )

    db.refresh(foto)
    logger.info(
        "Foto %d agregada al procedimiento %d (%d bytes)",
        foto.id, procedimiento_id, len(contenido),
    )
    return build_foto_response(foto)


def listar_fotos(db: Session, procedimiento_id: int) -> list[FotoResponse]:
    """Return the gallery of a procedure in upload order."""
    _get_procedimiento(db, procedimiento_id)
    fotos = (
        db.query(FotoProcedimiento)
        .filter(FotoProcedimiento.procedimiento_id == procedimiento_id)
        .order_by(FotoProcedimiento.id)
        .all()
    )
    return [build_foto_response(f) for f in fotos]


def obtener_archivo(db: Session, foto_id: int) -> tuple[Path, FotoProcedimiento]:
    """Resolve the stored file of a photo.

    Raises:
        HTTPException 404: Unknown photo, or its file is missing on disk.
    """
    foto = db.get(FotoProcedimiento, foto_id)
    if foto is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Foto con id {foto_id} no encontrada.",
        )
    try:
        ruta = resolve_upload(foto.ruta, _fotos_dir())
    except ValueError:
        ruta = None
    if ruta is None or not ruta.is_file():
        logger.warning("obtener_archivo: archivo ausente para foto %d (%s)", foto_id, foto.ruta)
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Archivo de la foto {foto_id} no disponible.",
        )
    return ruta, foto


def eliminar_archivos(rutas: list[str]) -> None:
    """Delete the files of photos whose rows were already removed."""
    fotos_dir = _fotos_dir()
    for relativa in rutas:
        try:
            delete_upload(relativa, fotos_dir)
        except (OSError, ValueError):
            logger.warning("eliminar_archivos: no se pudo borrar %s", relativa)
