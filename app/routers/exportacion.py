"""
Exportación router.

Mounts under ``/api/exportar`` (prefix set in ``main.py``).

All endpoints require a valid JWT token. Both endpoints stream their
response using FastAPI's ``StreamingResponse``.

Endpoints
---------
GET /programacion/excel — Daily schedule as .xlsx (query param: fecha)
GET /programacion/pdf   — Daily schedule as .pdf  (query param: fecha)

The ``Content-Disposition`` header on each response uses the
``attachment; filename=...`` pattern so that browsers prompt a download
rather than displaying the file inline.
"""

from __future__ import annotations

import io
import logging
from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session

from app.database import get_db
from app.models.usuario import Usuario
from app.services import exportacion_service
from app.services.auth_service import get_current_user

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Exportación"])

_FechaQuery = Annotated[
    date | None,
    Query(description="Día a exportar (YYYY-MM-DD); hoy si se omite."),
]


def _make_filename(fecha: date, ext: str) -> str:
    """``"programacion_2025-08-22.xlsx"``."""
    return f"programacion_{fecha.isoformat()}.{ext}"


def _stream(file_bytes: bytes, filename: str, media_type: str) -> StreamingResponse:
    headers = {
        "Content-Disposition": f'attachment; filename="{filename}"',
        "Content-Length": str(len(file_bytes)),
    }
    return StreamingResponse(io.BytesIO(file_bytes), media_type=media_type, headers=headers)


# ---------------------------------------------------------------------------
# GET /programacion/excel
# ---------------------------------------------------------------------------


@router.get(
    "/programacion/excel",
    summary="Exportar programación a Excel (.xlsx)",
    response_class=StreamingResponse,
    responses={
        200: {
            "description": "Archivo Excel generado exitosamente.",
            "content": {
                "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet": {}
            },
        },
        401: {"description": "Token JWT ausente o inválido."},
        500: {"description": "Error generando el archivo."},
    },
)
def export_excel(
    db: Annotated[Session, Depends(get_db)],
    current_user: Annotated[Usuario, Depends(get_current_user)],
    fecha: _FechaQuery = None,
) -> StreamingResponse:
    """Generate and stream the schedule of one day as ``.xlsx``.

    Raises:
        HTTPException 500: If Excel generation fails unexpectedly.
    """
    dia = fecha or date.today()
    logger.info("GET /exportar/programacion/excel fecha=%s user=%s", dia, current_user.login)

    try:
        file_bytes = exportacion_service.export_excel(db, dia)
    except Exception as exc:
        logger.exception("export_excel failed: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Error generando el archivo Excel: {exc}",
        ) from exc

    return _stream(
        file_bytes,
        _make_filename(dia, "xlsx"),
        "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    )


# ---------------------------------------------------------------------------
# GET /programacion/pdf
# ---------------------------------------------------------------------------


@router.get(
    "/programacion/pdf",
    summary="Exportar programación a PDF (.pdf)",
    response_class=StreamingResponse,
    responses={
        200: {
            "description": "Archivo PDF generado exitosamente.",
            "content": {"application/pdf": {}},
        },
        401: {"description": "Token JWT ausente o inválido."},
        500: {"description": "Error generando el archivo."},
    },
)
def export_pdf(
    db: Annotated[Session, Depends(get_db)],
    current_user: Annotated[Usuario, Depends(get_current_user)],
    fecha: _FechaQuery = None,
) -> StreamingResponse:
    """Generate and stream the schedule of one day as ``.pdf``.

    Raises:
        HTTPException 500: If PDF generation fails unexpectedly.
    """
    dia = fecha or date.today()
    logger.info("GET /exportar/programacion/pdf fecha=%s user=%s", dia, current_user.login)

    try:
        file_bytes = exportacion_service.export_pdf(db, dia)
    except Exception as exc:
        logger.exception("export_pdf failed: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Error generando el archivo PDF: {exc}",
        ) from exc

    return _stream(file_bytes, _make_filename(dia, "pdf"), "application/pdf")
