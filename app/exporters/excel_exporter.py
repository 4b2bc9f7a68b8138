"""
Excel export helper wrapping xlsxwriter.

Provides ``ExcelExporter`` — a stateful builder that constructs a styled
clinic workbook in memory and returns its bytes for streaming.

Usage example::

    exporter = ExcelExporter(
        title="Programación Quirúrgica",
        clinica="Clínica SIC",
        filters={"Fecha": "viernes, 22 de agosto de 2025"},
    )
    exporter.add_header()
    exporter.add_data_table(headers, rows)
    file_bytes = exporter.finalize()

Design notes
------------
- Uses ``xlsxwriter`` in in-memory mode (``BytesIO``).
- Column widths are auto-sized based on the maximum content length in each
  column (capped at 60 characters to avoid excessively wide columns).
- Alternating row shading uses light-grey every other data row.
- The header spans the table width and uses the primary clinic colour.
"""

from __future__ import annotations

import io
from typing import Any, Sequence

import xlsxwriter
from xlsxwriter.workbook import Workbook
from xlsxwriter.worksheet import Worksheet

_COLOR_PRIMARY = "#0f766e"
_COLOR_WHITE = "#FFFFFF"
_COLOR_LIGHT_GREY = "#F3F4F6"
_COLOR_SUBHEADER_BG = "#134E4A"

_MAX_COL_WIDTH = 60
_MIN_COL_WIDTH = 8


class ExcelExporter:
    """Stateful Excel workbook builder for clinic reports.

    Args:
        title: Report title, e.g. ``"Programación Quirúrgica"``.
        clinica: Clinic name shown in the header band.
        filters: Labels describing the report scope, e.g. ``{"Fecha": "..."}``.
        sheet_name: Name of the worksheet tab (default: ``"Datos"``).
        num_cols: Width of the header band, normally the table width.
    """

    def __init__(
        self,
        title: str,
        clinica: str,
        filters: dict[str, str] | None = None,
        sheet_name: str = "Datos",
        num_cols: int = 6,
    ) -> None:
        self._title = title
        self._clinica = clinica
        self._filters = filters or {}

        self._buffer = io.BytesIO()
        self._workbook: Workbook = xlsxwriter.Workbook(self._buffer, {"in_memory": True})
        self._worksheet: Worksheet = self._workbook.add_worksheet(sheet_name)

        self._current_row: int = 0
        self._num_cols: int = max(num_cols, 2)

        self._formats: dict[str, Any] = self._build_formats()

    # -----------------------------------------------------------------------
    # Format factory
    # -----------------------------------------------------------------------

    def _build_formats(self) -> dict[str, Any]:
        wb = self._workbook
        formats: dict[str, Any] = {}

        formats["header_main"] = wb.add_format({
            "bold": True,
            "font_size": 16,
            "font_color": _COLOR_WHITE,
            "bg_color": _COLOR_PRIMARY,
            "align": "center",
            "valign": "vcenter",
        })

        formats["header_sub"] = wb.add_format({
            "font_size": 10,
            "font_color": _COLOR_WHITE,
            "bg_color": _COLOR_SUBHEADER_BG,
            "align": "center",
            "valign": "vcenter",
        })

        formats["filter_key"] = wb.add_format({
            "bold": True,
            "font_size": 9,
            "font_color": "#374151",
            "bg_color": "#E5E7EB",
            "align": "right",
            "valign": "vcenter",
        })

        formats["filter_value"] = wb.add_format({
            "font_size": 9,
            "font_color": "#111827",
            "bg_color": "#F9FAFB",
            "align": "left",
            "valign": "vcenter",
        })

        formats["col_header"] = wb.add_format({
            "bold": True,
            "font_size": 10,
            "font_color": _COLOR_WHITE,
            "bg_color": _COLOR_SUBHEADER_BG,
            "align": "center",
            "valign": "vcenter",
            "border": 1,
            "border_color": "#CBD5E1",
            "text_wrap": True,
        })

        formats["data_plain"] = wb.add_format({
            "font_size": 9,
            "font_color": "#111827",
            "bg_color": _COLOR_WHITE,
            "align": "left",
            "valign": "vcenter",
            "border": 1,
            "border_color": "#E5E7EB",
        })

        formats["data_alt"] = wb.add_format({
            "font_size": 9,
            "font_color": "#111827",
            "bg_color": _COLOR_LIGHT_GREY,
            "align": "left",
            "valign": "vcenter",
            "border": 1,
            "border_color": "#E5E7EB",
        })

        formats["empty"] = wb.add_format({
            "italic": True,
            "font_size": 9,
            "font_color": "#6B7280",
        })

        return formats

    # -----------------------------------------------------------------------
    # Public builder methods
    # -----------------------------------------------------------------------

    def add_header(self) -> "ExcelExporter":
        """Write the clinic header block: name, title and one row per filter.

        Returns:
            ``self`` for method chaining.
        """
        ws = self._worksheet
        last_col = self._num_cols - 1

        ws.set_row(self._current_row, 32)
        ws.merge_range(
            self._current_row, 0, self._current_row, last_col,
            self._clinica, self._formats["header_main"],
        )
        self._current_row += 1

        ws.set_row(self._current_row, 18)
        ws.merge_range(
            self._current_row, 0, self._current_row, last_col,
            self._title, self._formats["header_sub"],
        )
        self._current_row += 1

        for key, value in self._filters.items():
            ws.set_row(self._current_row, 16)
            ws.write(self._current_row, 0, key, self._formats["filter_key"])
            ws.merge_range(
                self._current_row, 1, self._current_row, last_col,
                value, self._formats["filter_value"],
            )
            self._current_row += 1

        # Blank separator row
        self._current_row += 1
        return self

    def add_data_table(
        self,
        headers: Sequence[str],
        rows: Sequence[Sequence[Any]],
        empty_message: str = "Sin registros.",
    ) -> "ExcelExporter":
        """Write a styled data table with alternating row shading.

        Args:
            headers: Column header strings.
            rows: Data rows matching the length of ``headers``.
            empty_message: Written under the headers when ``rows`` is empty.

        Returns:
            ``self`` for method chaining.
        """
        ws = self._worksheet
        col_widths: list[int] = [len(str(h)) for h in headers]

        ws.set_row(self._current_row, 20)
        for ci, hdr in enumerate(headers):
            ws.write(self._current_row, ci, hdr, self._formats["col_header"])
        self._current_row += 1

        if not rows:
            ws.write(self._current_row, 0, empty_message, self._formats["empty"])
            self._current_row += 1

        for ri, data_row in enumerate(rows):
            fmt = self._formats["data_alt"] if ri % 2 == 1 else self._formats["data_plain"]
            ws.set_row(self._current_row, 15)
            for ci, cell_val in enumerate(data_row):
                cell_str = str(cell_val) if cell_val is not None else ""
                ws.write_string(self._current_row, ci, cell_str, fmt)
                col_widths[ci] = min(_MAX_COL_WIDTH, max(col_widths[ci], len(cell_str)))
            self._current_row += 1

        for ci, width in enumerate(col_widths):
            ws.set_column(ci, ci, max(width + 2, _MIN_COL_WIDTH))

        return self

    def finalize(self) -> bytes:
        """Close the workbook and return its bytes content.

        After calling ``finalize`` the exporter instance should not be reused.
        """
        self._workbook.close()
        self._buffer.seek(0)
        return self._buffer.read()
