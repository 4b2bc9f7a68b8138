"""
PDF export helper wrapping reportlab.

Provides ``PdfExporter`` — a stateful builder that constructs a styled
clinic document in memory and returns its bytes for streaming via
FastAPI's ``Response``.

Usage example::

    exporter = PdfExporter(
        title="Nota Postoperatoria",
        clinica="Clínica SIC",
        direccion="Cancún, Q.Roo",
        fecha_documento="22 de agosto de 2025",
    )
    exporter.add_header()
    exporter.add_fields([("Paciente", "Elena Ramírez"), ("Edad", "45 años")])
    exporter.add_section("Hallazgos")
    exporter.add_paragraph("Sin hallazgos relevantes.")
    exporter.add_signatures([("Cirujano", "Dr. Carlos Soto")])
    file_bytes = exporter.build()

Design notes
------------
- Uses ``reportlab``'s ``SimpleDocTemplate`` with ``Platypus`` story elements.
- Documents are built in reportlab's *invariant* mode and the footer carries
  no wall-clock timestamp, so the same content always yields byte-identical
  output. Any date printed comes from the caller.
- All user text is XML-escaped before it reaches ``Paragraph`` markup.
- Colour palette matches the frontend design tokens.
- Table rows alternate white / light-grey for readability.
"""

from __future__ import annotations

import io
from typing import Any, Sequence
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER, TA_JUSTIFY, TA_LEFT
from reportlab.lib.pagesizes import A4, landscape
from reportlab.lib.styles import ParagraphStyle
from reportlab.lib.units import cm, mm
from reportlab.platypus import (
    HRFlowable,
    KeepTogether,
    Paragraph,
    SimpleDocTemplate,
    Spacer,
    Table,
    TableStyle,
)

# Design token colours as hex strings
_HEX_PRIMARY = "#0f766e"
_HEX_DARK = "#134E4A"
_HEX_LIGHT_GREY = "#F3F4F6"
_HEX_MID_GREY = "#E5E7EB"
_HEX_TEXT = "#111827"
_HEX_MUTED = "#6B7280"
_HEX_WHITE = "#FFFFFF"

# Longer field values are printed as paragraphs, which can split across pages
_MAX_CELL_CHARS = 400
_MAX_CELL_LINES = 8


def _hex_to_rl_color(hex_color: str) -> Any:
    return colors.HexColor(hex_color)


def _texto(value: Any) -> str:
    """Escape *value* for Paragraph markup; newlines become line breaks."""
    if value is None:
        return ""
    return escape(str(value)).replace("\n", "<br/>")


class PdfExporter:
    """Stateful PDF document builder for clinic documents and reports.

    Args:
        title: Document title, e.g. ``"Nota de Alta"``.
        clinica: Clinic name printed in the header band.
        direccion: Clinic address printed under the name.
        fecha_documento: Date line printed in the header (already formatted).
        landscape_mode: If ``True``, uses A4 landscape; otherwise portrait.
    """

    def __init__(
        self,
        title: str,
        clinica: str,
        direccion: str = "",
        fecha_documento: str = "",
        landscape_mode: bool = False,
    ) -> None:
        self._title = title
        self._clinica = clinica
        self._direccion = direccion
        self._fecha_documento = fecha_documento

        self._buffer = io.BytesIO()
        page_size = landscape(A4) if landscape_mode else A4

        self._doc = SimpleDocTemplate(
            self._buffer,
            pagesize=page_size,
            rightMargin=1.8 * cm,
            leftMargin=1.8 * cm,
            topMargin=1.5 * cm,
            bottomMargin=2 * cm,
            title=f"{clinica} — {title}",
            author=clinica,
            invariant=1,
        )

        self._story: list[Any] = []
        self._custom_styles = self._build_styles()

    # -----------------------------------------------------------------------
    # Style factory
    # -----------------------------------------------------------------------

    def _build_styles(self) -> dict[str, ParagraphStyle]:
        """Register custom paragraph styles for use throughout the document.

        Returns:
            Dict mapping style name to ``ParagraphStyle`` instance.
        """
        styles: dict[str, ParagraphStyle] = {}

        styles["clinica"] = ParagraphStyle(
            "sic_clinica",
            fontName="Helvetica-Bold",
            fontSize=15,
            textColor=_hex_to_rl_color(_HEX_WHITE),
            alignment=TA_CENTER,
        )

        styles["direccion"] = ParagraphStyle(
            "sic_direccion",
            fontName="Helvetica",
            fontSize=8,
            textColor=_hex_to_rl_color(_HEX_WHITE),
            alignment=TA_CENTER,
        )

        styles["title"] = ParagraphStyle(
            "sic_title",
            fontName="Helvetica-Bold",
            fontSize=13,
            textColor=_hex_to_rl_color(_HEX_DARK),
            alignment=TA_CENTER,
            spaceBefore=4,
            spaceAfter=2,
        )

        styles["fecha"] = ParagraphStyle(
            "sic_fecha",
            fontName="Helvetica",
            fontSize=8,
            textColor=_hex_to_rl_color(_HEX_MUTED),
            alignment=TA_CENTER,
        )

        styles["section_heading"] = ParagraphStyle(
            "section_heading",
            fontName="Helvetica-Bold",
            fontSize=10,
            textColor=_hex_to_rl_color(_HEX_DARK),
            spaceBefore=8,
            spaceAfter=3,
        )

        styles["field_key"] = ParagraphStyle(
            "field_key",
            fontName="Helvetica-Bold",
            fontSize=8,
            textColor=_hex_to_rl_color(_HEX_DARK),
            alignment=TA_LEFT,
        )

        styles["field_value"] = ParagraphStyle(
            "field_value",
            fontName="Helvetica",
            fontSize=8,
            textColor=_hex_to_rl_color(_HEX_TEXT),
            alignment=TA_LEFT,
        )

        styles["body"] = ParagraphStyle(
            "body",
            fontName="Helvetica",
            fontSize=9,
            leading=12,
            textColor=_hex_to_rl_color(_HEX_TEXT),
            alignment=TA_JUSTIFY,
            spaceAfter=4,
        )

        styles["firma"] = ParagraphStyle(
            "firma",
            fontName="Helvetica",
            fontSize=8,
            textColor=_hex_to_rl_color(_HEX_TEXT),
            alignment=TA_CENTER,
        )

        styles["table_header"] = ParagraphStyle(
            "table_header",
            fontName="Helvetica-Bold",
            fontSize=8,
            textColor=_hex_to_rl_color(_HEX_WHITE),
            alignment=TA_CENTER,
        )

        styles["table_cell"] = ParagraphStyle(
            "table_cell",
            fontName="Helvetica",
            fontSize=8,
            textColor=_hex_to_rl_color(_HEX_TEXT),
            alignment=TA_LEFT,
        )

        return styles

    # -----------------------------------------------------------------------
    # Page template (footer)
    # -----------------------------------------------------------------------

    def _on_page(self, canvas: Any, doc: Any) -> None:
        """Render the page footer with clinic, document title and page number.

        Attached as the ``onPage`` callback in ``SimpleDocTemplate.build``.
        """
        canvas.saveState()
        footer_text = f"{self._clinica}  |  {self._title}  |  Página {doc.page}"
        canvas.setFont("Helvetica", 7)
        canvas.setFillColor(_hex_to_rl_color(_HEX_MUTED))
        page_width = self._doc.pagesize[0]
        canvas.drawCentredString(page_width / 2, 1.2 * cm, footer_text)
        canvas.restoreState()

    # -----------------------------------------------------------------------
    # Public builder methods
    # -----------------------------------------------------------------------

    def add_header(self) -> "PdfExporter":
        """Add the clinic header band, the document title and the date line.

        Returns:
            ``self`` for method chaining.
        """
        story = self._story
        page_width = self._doc.width

        header_data = [[Paragraph(_texto(self._clinica), self._custom_styles["clinica"])]]
        if self._direccion:
            header_data.append(
                [Paragraph(_texto(self._direccion), self._custom_styles["direccion"])]
            )
        header_table = Table(header_data, colWidths=[page_width])
        header_table.setStyle(
            TableStyle([
                ("BACKGROUND", (0, 0), (-1, -1), _hex_to_rl_color(_HEX_PRIMARY)),
                ("TOPPADDING", (0, 0), (-1, -1), 5),
                ("BOTTOMPADDING", (0, 0), (-1, -1), 5),
                ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
            ])
        )
        story.append(header_table)
        story.append(Spacer(1, 3 * mm))
        story.append(Paragraph(_texto(self._title.upper()), self._custom_styles["title"]))
        if self._fecha_documento:
            story.append(
                Paragraph(_texto(self._fecha_documento), self._custom_styles["fecha"])
            )
        story.append(Spacer(1, 4 * mm))
        return self

    def add_section(self, title: str) -> "PdfExporter":
        """Add a section heading followed by a rule."""
        self._story.append(Paragraph(_texto(title), self._custom_styles["section_heading"]))
        self._story.append(
            HRFlowable(width="100%", thickness=0.75, color=_hex_to_rl_color(_HEX_PRIMARY))
        )
        self._story.append(Spacer(1, 2 * mm))
        return self

    def add_fields(
        self,
        fields: Sequence[tuple[str, Any]],
        columns: int = 2,
    ) -> "PdfExporter":
        """Add a label/value grid.

        A table cell cannot split across pages, so a value longer than
        ``_MAX_CELL_CHARS`` (or spanning more than ``_MAX_CELL_LINES`` lines)
        leaves the grid and is printed as a labelled body paragraph in its
        place; the fields around it keep their order.

        Args:
            fields: Ordered ``(label, value)`` pairs; empty values print blank.
            columns: Number of label/value pairs per row.

        Returns:
            ``self`` for method chaining.
        """
        pending: list[tuple[str, Any]] = []
        for label, value in fields:
            text = "" if value is None else str(value)
            if len(text) > _MAX_CELL_CHARS or text.count("\n") >= _MAX_CELL_LINES:
                self._add_grid(pending, columns)
                pending = []
                self.add_paragraph(text, bold_prefix=f"{label}:" if label else None)
            else:
                pending.append((label, value))
        self._add_grid(pending, columns)
        return self

    def _add_grid(self, fields: Sequence[tuple[str, Any]], columns: int) -> None:
        if not fields:
            return

        page_width = self._doc.width
        pair_width = page_width / columns
        key_width = pair_width * 0.38
        col_widths = [key_width, pair_width - key_width] * columns

        rows: list[list[Any]] = []
        for start in range(0, len(fields), columns):
            row: list[Any] = []
            chunk = list(fields[start:start + columns])
            chunk += [("", "")] * (columns - len(chunk))
            for label, value in chunk:
                row.append(
                    Paragraph(f"{_texto(label)}:" if label else "", self._custom_styles["field_key"])
                )
                row.append(Paragraph(_texto(value), self._custom_styles["field_value"]))
            rows.append(row)

        grid = Table(rows, colWidths=col_widths)
        grid.setStyle(
            TableStyle([
                ("BACKGROUND", (0, 0), (-1, -1), _hex_to_rl_color(_HEX_LIGHT_GREY)),
                ("GRID", (0, 0), (-1, -1), 0.25, _hex_to_rl_color(_HEX_MID_GREY)),
                ("TOPPADDING", (0, 0), (-1, -1), 2),
                ("BOTTOMPADDING", (0, 0), (-1, -1), 2),
                ("LEFTPADDING", (0, 0), (-1, -1), 4),
                ("RIGHTPADDING", (0, 0), (-1, -1), 4),
                ("VALIGN", (0, 0), (-1, -1), "TOP"),
            ])
        )
        self._story.append(grid)
        self._story.append(Spacer(1, 3 * mm))

    def add_paragraph(self, text: str, bold_prefix: str | None = None) -> "PdfExporter":
        """Add a justified body paragraph, optionally led by a bold label."""
        markup = _texto(text)
        if bold_prefix:
            markup = f"<b>{_texto(bold_prefix)}</b> {markup}"
        self._story.append(Paragraph(markup, self._custom_styles["body"]))
        return self

    def add_signatures(self, firmas: Sequence[tuple[str, str]]) -> "PdfExporter":
        """Add signature lines side by side.

        Args:
            firmas: ``(role caption, printed name)`` pairs.

        Returns:
            ``self`` for method chaining.
        """
        if not firmas:
            return self

        col_width = self._doc.width / len(firmas)
        cells = [
            [
                Paragraph(
                    f"_____________________________<br/>{_texto(nombre)}<br/>"
                    f"<b>{_texto(rol)}</b>",
                    self._custom_styles["firma"],
                )
                for rol, nombre in firmas
            ]
        ]
        table = Table(cells, colWidths=[col_width] * len(firmas))
        table.setStyle(
            TableStyle([
                ("TOPPADDING", (0, 0), (-1, -1), 28),
                ("VALIGN", (0, 0), (-1, -1), "BOTTOM"),
            ])
        )
        self._story.append(KeepTogether([Spacer(1, 8 * mm), table]))
        return self

    def add_table(
        self,
        headers: Sequence[str],
        rows: Sequence[Sequence[Any]],
        col_widths: Sequence[float] | None = None,
        section_title: str | None = None,
    ) -> "PdfExporter":
        """Add a styled data table to the document.

        Args:
            headers: Column header strings.
            rows: Data rows — inner sequences must match the header length.
            col_widths: Optional explicit column widths in cm.  If ``None``,
                        columns are distributed evenly across the page width.
            section_title: Optional heading displayed above the table.

        Returns:
            ``self`` for method chaining.
        """
        story = self._story
        page_width = self._doc.width
        n_cols = len(headers)

        if section_title:
            self.add_section(section_title)

        if col_widths is not None:
            computed_widths = [w * cm for w in col_widths]
        else:
            computed_widths = [page_width / n_cols] * n_cols

        header_row = [
            Paragraph(_texto(h), self._custom_styles["table_header"])
            for h in headers
        ]
        table_data: list[list[Any]] = [header_row]
        for data_row in rows:
            table_data.append(
                [Paragraph(_texto(cell), self._custom_styles["table_cell"]) for cell in data_row]
            )

        rl_table = Table(table_data, colWidths=computed_widths, repeatRows=1)

        # Build alternating row shading commands
        style_cmds: list[tuple[Any, ...]] = [
            ("BACKGROUND", (0, 0), (-1, 0), _hex_to_rl_color(_HEX_DARK)),
            ("GRID", (0, 0), (-1, -1), 0.25, _hex_to_rl_color(_HEX_MID_GREY)),
            ("TOPPADDING", (0, 0), (-1, -1), 3),
            ("BOTTOMPADDING", (0, 0), (-1, -1), 3),
            ("LEFTPADDING", (0, 0), (-1, -1), 4),
            ("RIGHTPADDING", (0, 0), (-1, -1), 4),
            ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
        ]
        for ri in range(1, len(table_data)):
            fondo = _HEX_LIGHT_GREY if ri % 2 == 0 else _HEX_WHITE
            style_cmds.append(("BACKGROUND", (0, ri), (-1, ri), _hex_to_rl_color(fondo)))

        rl_table.setStyle(TableStyle(style_cmds))
        story.append(rl_table)
        story.append(Spacer(1, 4 * mm))
        return self

    def build(self) -> bytes:
        """Build the PDF document and return its bytes.

        After calling ``build`` the exporter instance should not be reused.
        """
        self._doc.build(
            self._story,
            onFirstPage=self._on_page,
            onLaterPages=self._on_page,
        )
        self._buffer.seek(0)
        return self._buffer.read()
