"""
Export service layer.

Builds the daily surgical schedule as ``.xlsx`` and ``.pdf``. Rows come from
``procedimiento_service.listar_procedimientos`` so the export always matches
what the schedule screen shows for the same day.
"""

from __future__ import annotations

import datetime
import logging
from typing import Any

from sqlalchemy.orm import Session

from app.config import get_settings
from app.exporters.excel_exporter import ExcelExporter
from app.exporters.pdf_exporter import PdfExporter
from app.services import procedimiento_service
from app.utils.formatting import fecha_castellano

logger = logging.getLogger(__name__)

_TITULO = "Programación Quirúrgica"

_HEADERS: list[str] = [
    "Folio",
    "Paciente",
    "Cirugía Planeada",
    "Diagnóstico",
    "Cirujano",
    "Anestesiólogo",
    "Ayudante",
    "Estado",
]

# Column widths in cm for the landscape PDF table
_PDF_COL_WIDTHS: list[float] = [1.2, 3.8, 4.0, 4.0, 3.4, 3.4, 3.4, 2.0]


def _get_export_data(db: Session, fecha: datetime.date) -> list[list[Any]]:
    resumenes = procedimiento_service.listar_procedimientos(db, fecha=fecha)
    return [
        [
            r.id,
            r.paciente_nombre,
            r.qx_planeada,
            r.diagnostico,
            r.cirujano,
            r.anestesiologo,
            r.ayudante,
            r.status,
        ]
        for r in resumenes
    ]


def export_excel(db: Session, fecha: datetime.date) -> bytes:
    """Return the ``.xlsx`` schedule for *fecha*."""
    settings = get_settings()
    rows = _get_export_data(db, fecha)
    exporter = ExcelExporter(
        title=_TITULO,
        clinica=settings.CLINICA_NOMBRE,
        filters={"Fecha": fecha_castellano(fecha), "Procedimientos": str(len(rows))},
        sheet_name="Programación",
        num_cols=len(_HEADERS),
    )
    exporter.add_header()
    exporter.add_data_table(_HEADERS, rows, empty_message="No hay procedimientos programados.")
    file_bytes = exporter.finalize()
    logger.debug("export_excel: fecha=%s rows=%d bytes=%d", fecha, len(rows), len(file_bytes))
    return file_bytes


def export_pdf(db: Session, fecha: datetime.date) -> bytes:
    """Return the ``.pdf`` schedule for *fecha* (A4 landscape)."""
    settings = get_settings()
    rows = _get_export_data(db, fecha)
    exporter = PdfExporter(
        title=_TITULO,
        clinica=settings.CLINICA_NOMBRE,
        direccion=settings.CLINICA_DIRECCION,
        fecha_documento=fecha_castellano(fecha),
        landscape_mode=True,
    )
    exporter.add_header()
    if rows:
        exporter.add_table(_HEADERS, rows, col_widths=_PDF_COL_WIDTHS)
    else:
        exporter.add_paragraph("No hay procedimientos programados para esta fecha.")
    file_bytes = exporter.build()
    logger.debug("export_pdf: fecha=%s rows=%d bytes=%d", fecha, len(rows), len(file_bytes))
    return file_bytes
