"""
Clinical document service.

Every printable document of a procedure is backed by one section of the
``Procedimiento`` row. This module owns the registry that maps a document
type to its section and template, the section read/save operations used by
the forms, and the PDF rendering itself.

Design notes
------------
- Saving a document replaces only its own section column; scalar fields
  and sibling sections are never written, so two people editing different
  documents of the same procedure cannot overwrite each other.
- Sections that were never saved are served with their default shape plus
  the prefills the forms expect (post-op note from the diagnosis, discharge
  note from the post-op diagnosis and the document date).
- Rendering reads a snapshot of the procedure and never writes. The same
  data and document date produce byte-identical PDFs.
- Both consent documents share the ``consentimiento`` section; the
  anesthesia consent is read-only and prints a fixed risk statement.
"""

from __future__ import annotations

import datetime
import logging
import unicodedata
from dataclasses import dataclass
from typing import Any, Callable

from fastapi import HTTPException, status
from pydantic import ValidationError
from sqlalchemy.orm import Session

from app.config import get_settings
from app.exporters.pdf_exporter import PdfExporter
from app.models.paciente import Paciente
from app.models.procedimiento import Procedimiento
from app.models.usuario import Usuario
from app.schemas.documentos import (
    SECCIONES,
    NotaAlta,
    NotaPostoperatoria,
    SeccionResponse,
    TipoDocumentoResponse,
)
from app.services.procedimiento_service import get_procedimiento_or_404
from app.utils.constants import MOTIVOS_EGRESO
from app.utils.formatting import (
    calcular_edad,
    fecha_castellano,
    fecha_larga,
    formatear_nombre_medico,
    nombre_completo,
)

logger = logging.getLogger(__name__)

_FUNDAMENTOS = (
    "Fundamentos: Reglamento de la Ley General de Salud en materia de "
    "prestación de servicios de atención médica; artículo 80, 81, 82 y 83; "
    "Norma Oficial Mexicana, NOM-004-SSA3-2012, del expediente clínico, "
    "numerales 4.2, 10.1, 10.1.2, 10.1.3, 10.1.2.3 y NOM 006-SSA3-2011."
)

_DECLARANTE = "Yo como paciente ( ), Familiar ( ), Tutor ( ) o Representante Legal ( )"
_NOMBRE_DECLARANTE = "_" * 60
_FIRMA_PACIENTE = "Paciente, Familiar o Representante Legal"

_RIESGOS_ANESTESIA = (
    "Se me han explicado los posibles riesgos, incluyendo pero no limitado a: "
    "lesiones en la vía aérea, efectos adversos a medicamentos, cefalea, "
    "lesiones nerviosas, paro cardiorrespiratorio y muerte."
)

_NO_ESPECIFICADOS = "No especificados."


# ---------------------------------------------------------------------------
# Snapshot
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Expediente:
    """Read-only view of everything a template may print."""

    procedimiento: Procedimiento
    paciente: Paciente
    cirujano: Usuario | None
    anestesiologo: Usuario | None
    ayudante: Usuario | None


def cargar_expediente(db: Session, procedimiento_id: int) -> Expediente:
    """Load the procedure with its patient and staff.

    Raises:
        HTTPException 404: Procedure not found.
    """
    row = get_procedimiento_or_404(db, procedimiento_id)
    return Expediente(
        procedimiento=row,
        paciente=row.paciente,
        cirujano=row.cirujano,
        anestesiologo=row.anestesiologo,
        ayudante=row.ayudante,
    )


# ---------------------------------------------------------------------------
# Section defaults and prefills
# ---------------------------------------------------------------------------


def _datos_seccion(
    row: Procedimiento,
    seccion: str,
    fecha: datetime.date,
) -> tuple[dict[str, Any], bool]:
    """Return ``(complete section dict, was_saved)`` for *seccion*."""
    modelo = SECCIONES[seccion]
    almacenado = getattr(row, seccion)
    if almacenado is not None:
        return modelo.model_validate(almacenado).model_dump(), True

    if seccion == "nota_postoperatoria":
        datos = NotaPostoperatoria(
            diagnostico_postqx=row.diagnostico or "",
            cirugia_realizada=row.qx_planeada or "",
            incidentes="Ninguno",
        )
    elif seccion == "nota_alta":
        postop = row.nota_postoperatoria or {}
        datos = NotaAlta(
            fecha_egreso=fecha.isoformat(),
            dx_egreso=postop.get("diagnostico_postqx") or row.diagnostico or "",
            motivo_egreso="mejoria",
        )
    else:
        datos = modelo()
    return datos.model_dump(), False


# ---------------------------------------------------------------------------
# Shared template pieces
# ---------------------------------------------------------------------------


def _edad_texto(paciente: Paciente, fecha: datetime.date) -> str:
    edad = calcular_edad(paciente.fecha_nacimiento, fecha)
    return f"{edad} años" if edad is not None else ""


def _bloque_paciente(pdf: PdfExporter, exp: Expediente, fecha: datetime.date) -> None:
    row = exp.procedimiento
    paciente = exp.paciente
    pdf.add_fields([
        ("Paciente", nombre_completo(paciente.nombre, paciente.apellido)),
        ("Edad", _edad_texto(paciente, fecha)),
        ("Sexo", paciente.sexo or ""),
        ("Fecha de nacimiento", fecha_larga(paciente.fecha_nacimiento)),
        ("Folio", str(row.id)),
        ("Fecha de cirugía", fecha_larga(row.fecha_qx)),
        ("Diagnóstico", row.diagnostico),
        ("Cirugía planeada", row.qx_planeada),
    ])


def _bloque_equipo(pdf: PdfExporter, exp: Expediente) -> None:
    pdf.add_fields(
        [
            ("Cirujano", formatear_nombre_medico(exp.cirujano)),
            ("Anestesiólogo", formatear_nombre_medico(exp.anestesiologo)),
            ("Ayudante", formatear_nombre_medico(exp.ayudante)),
        ],
        columns=3,
    )


def _signos(sv: dict[str, Any]) -> list[tuple[str, Any]]:
    return [
        ("TA (mmHg)", sv["ta"]),
        ("FC (lpm)", sv["fc"]),
        ("FR (rpm)", sv["fr"]),
        ("Temp (°C)", sv["temp"]),
        ("SatO2 (%)", sv["sat_o2"]),
    ]


def _texto_libre(pdf: PdfExporter, titulo: str, texto: str) -> None:
    pdf.add_section(titulo)
    pdf.add_paragraph(texto or "")


# ---------------------------------------------------------------------------
# Templates
# ---------------------------------------------------------------------------


def _nota_ingreso(pdf: PdfExporter, exp: Expediente, datos: dict[str, Any], fecha: datetime.date) -> None:
    _bloque_paciente(pdf, exp, fecha)
    pdf.add_section("Signos Vitales")
    pdf.add_fields(_signos(datos["signos_vitales"]), columns=3)
    _texto_libre(pdf, "Resumen del Interrogatorio", datos["interrogatorio"])
    _texto_libre(pdf, "Exploración Física", datos["exploracion_fisica"])
    _texto_libre(pdf, "Plan de Tratamiento", datos["plan_tratamiento"])
    pdf.add_signatures([("Médico Tratante", formatear_nombre_medico(exp.cirujano))])


def _consentimiento_quirurgico(pdf: PdfExporter, exp: Expediente, datos: dict[str, Any], fecha: datetime.date) -> None:
    row = exp.procedimiento
    _encabezado_consentimiento(pdf, exp, fecha)
    pdf.add_paragraph(
        "Manifiesto mi libre voluntad para autorizar los procedimientos diagnósticos, "
        "terapéuticos y quirúrgicos que se me indiquen después de haber recibido y "
        "entendido la información suficiente, clara, oportuna y veraz sobre mi "
        "enfermedad y estado actual; además de los beneficios, riesgos y posibles "
        "complicaciones y secuelas inherentes."
    )
    pdf.add_paragraph(
        "Se me han comunicado las alternativas existentes y disponibles, el derecho a "
        "cambio de mi decisión en cualquier momento antes del procedimiento o "
        "intervención. Me comprometo a proporcionar información completa y veraz, así "
        "como seguir las indicaciones médicas con el propósito de que mi atención sea "
        "adecuada. Otorgo mi autorización al personal de salud para la atención de "
        "contingencias y urgencias derivadas del acto médico-quirúrgico señalado, "
        "atendiendo al principio de libertad prescriptiva."
    )
    pdf.add_paragraph(
        "Se me han explicado a detalle todos los beneficios y posibles riesgos "
        "relacionados con su realización que a continuación se mencionan:"
    )
    pdf.add_paragraph(datos["riesgos"] or _NO_ESPECIFICADOS, bold_prefix="Riesgos:")
    pdf.add_paragraph(datos["beneficios"] or _NO_ESPECIFICADOS, bold_prefix="Beneficios:")
    pdf.add_paragraph(
        "para que se me administre el tipo de anestesia que por mi particular estado de "
        "salud y tipo de cirugía a la que seré sometido, se me practiquen de ser "
        "necesarios, los procedimientos de monitoreo invasivos intraoperatorios "
        "pertinentes (colocación de sondas, catéter venoso central, canalización de "
        "línea arterial).",
        bold_prefix="Otorgo mi consentimiento",
    )
    pdf.add_paragraph(row.diagnostico, bold_prefix="Diagnóstico:")
    pdf.add_paragraph(row.qx_planeada, bold_prefix="Procedimiento Proyectado:")
    pdf.add_signatures([
        (_FIRMA_PACIENTE, ""),
        ("Cirujano", formatear_nombre_medico(exp.cirujano)),
    ])


def _consentimiento_anestesico(pdf: PdfExporter, exp: Expediente, datos: dict[str, Any], fecha: datetime.date) -> None:
    row = exp.procedimiento
    _encabezado_consentimiento(pdf, exp, fecha)
    pdf.add_paragraph(
        "Expreso mi libre voluntad para autorizar se me realice el procedimiento "
        "anestésico y/o analgésico requerido."
    )
    pdf.add_paragraph(
        "Se me ha explicado de forma clara y con lenguaje sencillo todo lo que a "
        "continuación se detalla en lenguaje técnico. He comprendido satisfactoriamente "
        "la naturaleza y propósito de la técnica de anestesia a la que me debo someter a "
        "efectos de ser intervenido quirúrgicamente, así como la probabilidad de cambio "
        "de técnica durante el mismo procedimiento quirúrgico si fuese necesario. Se me "
        "ha dado la oportunidad de discutir, preguntar y aclarar todas mis dudas sobre "
        "riesgos, beneficios y alternativas relacionadas con la anestesia y su técnica "
        "requerida, y aclaro que todas ellas han sido abordadas de manera satisfactoria."
    )
    pdf.add_paragraph(_RIESGOS_ANESTESIA, bold_prefix="Riesgos:")
    pdf.add_paragraph(row.diagnostico, bold_prefix="Diagnóstico:")
    pdf.add_paragraph(row.qx_planeada, bold_prefix="Procedimiento Proyectado:")
    pdf.add_signatures([(_FIRMA_PACIENTE, ""), ("Testigo", "")])
    pdf.add_signatures([
        ("Anestesiólogo", formatear_nombre_medico(exp.anestesiologo)),
        ("Testigo", ""),
    ])


def _encabezado_consentimiento(pdf: PdfExporter, exp: Expediente, fecha: datetime.date) -> None:
    paciente = exp.paciente
    pdf.add_fields(
        [
            ("Paciente", nombre_completo(paciente.nombre, paciente.apellido)),
            ("Edad", _edad_texto(paciente, fecha)),
            ("Fecha", fecha_castellano(fecha)),
        ],
        columns=3,
    )
    pdf.add_paragraph(_FUNDAMENTOS)
    pdf.add_paragraph("", bold_prefix=_DECLARANTE)
    pdf.add_paragraph(_NOMBRE_DECLARANTE, bold_prefix="Nombre:")


def _nota_preanestesica(pdf: PdfExporter, exp: Expediente, datos: dict[str, Any], fecha: datetime.date) -> None:
    _bloque_paciente(pdf, exp, fecha)
    ant = datos["antecedentes"]
    pdf.add_section("Antecedentes")
    pdf.add_fields([
        ("Tabaquismo", ant["tabaquismo"]),
        ("Alcoholismo", ant["alcoholismo"]),
        ("Toxicomanías", ant["toxicomanias"]),
        ("Ejercicio", ant["ejercicio"]),
        ("Asma", ant["asma"]),
        ("Alergias", ant["alergias"]),
        ("Cardiovascular", ant["cardiovascular"]),
        ("Pulmonar", ant["pulmonar"]),
        ("Endocrinológico", ant["endocrinologico"]),
        ("Anestésicos", ant["antecedentes_anestesicos"]),
        ("Quirúrgicos", ant["antecedentes_quirurgicos"]),
    ])
    exp_fis = datos["exploracion"]
    pdf.add_section("Exploración Física")
    pdf.add_fields(
        [
            ("Peso (kg)", exp_fis["peso"]),
            ("Talla (cm)", exp_fis["talla"]),
            ("TA (mmHg)", exp_fis["ta"]),
            ("FC (lpm)", exp_fis["fc"]),
            ("FR (rpm)", exp_fis["fr"]),
            ("Temp (°C)", exp_fis["temp"]),
            ("SatO2 (%)", exp_fis["sat_o2"]),
        ],
        columns=4,
    )
    pdf.add_fields([
        ("Tegumentos", exp_fis["tegumentos"]),
        ("Cabeza", exp_fis["cabeza"]),
        ("Tráquea", exp_fis["traquea"]),
        ("Cardiopulmonar", exp_fis["cardiopulmonar"]),
        ("Cardio", exp_fis["cardio"]),
        ("Extremidades", exp_fis["extremidades"]),
    ])
    via = datos["via_aerea"]
    pdf.add_section("Vía Aérea")
    pdf.add_fields(
        [
            ("Mallampati", via["mallampati"]),
            ("Patil-Aldrete", via["aldrete"]),
            ("Bellhouse-Dorr", via["bellhouse_dorr"]),
            ("Dist. interincisiva", via["interincisiva"]),
            ("Otras", via["otras"]),
        ],
        columns=3,
    )
    lab = datos["laboratorio"]
    pdf.add_section("Laboratorio")
    pdf.add_fields(
        [
            ("Hb", lab["hb"]),
            ("Hct", lab["hct"]),
            ("Leucos", lab["leucos"]),
            ("Plaquetas", lab["plaquetas"]),
            ("Glucosa", lab["glucosa"]),
            ("Creatinina", lab["creatinina"]),
            ("BUN", lab["bun"]),
            ("Urea", lab["urea"]),
            ("TP", lab["tp"]),
            ("TTP", lab["ttp"]),
            ("INR", lab["inr"]),
        ],
        columns=4,
    )
    _texto_libre(pdf, "EKG", datos["ekg"])
    plan = datos["plan_anestesico"]
    pdf.add_section("Plan Anestésico")
    pdf.add_paragraph(plan["valoraciones"], bold_prefix="Valoraciones:")
    pdf.add_paragraph(plan["plan"], bold_prefix="Plan:")
    pdf.add_paragraph(plan["indicaciones"], bold_prefix="Indicaciones:")
    pdf.add_signatures([("Anestesiólogo", formatear_nombre_medico(exp.anestesiologo))])


def _nota_postanestesica(pdf: PdfExporter, exp: Expediente, datos: dict[str, Any], fecha: datetime.date) -> None:
    _bloque_paciente(pdf, exp, fecha)
    _texto_libre(pdf, "Técnica anestésica y fármacos empleados", datos["tecnica_anestesica"])
    _texto_libre(pdf, "Sangre y/o líquidos administrados", datos["liquidos"])
    pdf.add_section("Tiempos")
    pdf.add_fields(
        [
            ("Inicio Anestesia", datos["inicio_anestesia"]),
            ("Término Anestesia", datos["termino_anestesia"]),
            ("Inicio Cirugía", datos["inicio_cirugia"]),
            ("Término Cirugía", datos["termino_cirugia"]),
        ],
        columns=4,
    )
    pdf.add_section("Signos Vitales al Ingreso a UCPA")
    pdf.add_fields(_signos(datos["signos_vitales_ingreso_ucpa"]), columns=3)
    pdf.add_section("Signos Vitales al Alta de UCPA")
    pdf.add_fields(_signos(datos["signos_vitales_alta_ucpa"]), columns=3)
    pdf.add_section("Signos Vitales al Alta de Anestesiología")
    pdf.add_fields(_signos(datos["signos_vitales_alta_anestesio"]), columns=3)
    _texto_libre(pdf, "Indicaciones al Alta de Anestesiología", datos["indicaciones_alta_anestesio"])
    pdf.add_signatures([("Anestesiólogo", formatear_nombre_medico(exp.anestesiologo))])


def _nota_postoperatoria(pdf: PdfExporter, exp: Expediente, datos: dict[str, Any], fecha: datetime.date) -> None:
    row = exp.procedimiento
    _bloque_paciente(pdf, exp, fecha)
    pdf.add_section("Diagnóstico y Operación")
    pdf.add_fields([
        ("Diagnóstico Preoperatorio", row.diagnostico),
        ("Cirugía Planeada", row.qx_planeada),
        ("Diagnóstico Postoperatorio", datos["diagnostico_postqx"]),
        ("Operación Realizada", datos["cirugia_realizada"]),
    ])
    _texto_libre(pdf, "Descripción de la Técnica Quirúrgica", datos["tecnica"])
    _texto_libre(pdf, "Hallazgos", datos["hallazgos"])
    pdf.add_fields([
        ("Sangrado Estimado (ml)", datos["sangrado"]),
        ("Incidentes o Accidentes", datos["incidentes"]),
        ("Complicaciones", datos["complicaciones"]),
        ("Cuenta de Material", datos["cuenta_material"]),
        ("Pronóstico", datos["pronostico"]),
    ])
    _texto_libre(pdf, "Recomendaciones", datos["recomendaciones_postop"])
    pdf.add_section("Equipo Quirúrgico")
    _bloque_equipo(pdf, exp)
    pdf.add_signatures([("Cirujano", formatear_nombre_medico(exp.cirujano))])


def _indicaciones_postoperatorias(pdf: PdfExporter, exp: Expediente, datos: dict[str, Any], fecha: datetime.date) -> None:
    _bloque_paciente(pdf, exp, fecha)
    _texto_libre(pdf, "Soluciones / Dieta", datos["soluciones_dieta"])
    _texto_libre(pdf, "Medicamentos", datos["medicamentos"])
    _texto_libre(pdf, "Exámenes de Laboratorio / Gabinete", datos["examenes"])
    _texto_libre(pdf, "Actividades de Enfermería", datos["actividades_enfermeria"])
    pdf.add_signatures([("Cirujano", formatear_nombre_medico(exp.cirujano))])


def _nota_alta(pdf: PdfExporter, exp: Expediente, datos: dict[str, Any], fecha: datetime.date) -> None:
    row = exp.procedimiento
    _bloque_paciente(pdf, exp, fecha)
    egreso = datetime.date.fromisoformat(datos["fecha_egreso"]) if datos["fecha_egreso"] else None
    pdf.add_section("Egreso")
    pdf.add_fields([
        ("Fecha de Ingreso", fecha_larga(row.fecha_qx)),
        ("Fecha de Egreso", fecha_larga(egreso)),
        ("Diagnóstico de Ingreso", row.diagnostico),
        ("Diagnóstico de Egreso", datos["dx_egreso"]),
        ("Motivo de Alta", MOTIVOS_EGRESO.get(datos["motivo_egreso"], datos["motivo_egreso"])),
    ])
    _texto_libre(pdf, "Resumen Clínico", datos["resumen_egreso"])
    _texto_libre(pdf, "Indicaciones", datos["indicaciones_egreso"])
    pdf.add_signatures([("Médico Tratante", formatear_nombre_medico(exp.cirujano))])


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

Plantilla = Callable[[PdfExporter, Expediente, dict[str, Any], datetime.date], None]


@dataclass(frozen=True)
class TipoDocumento:
    titulo: str
    seccion: str
    plantilla: Plantilla
    editable: bool = True


TIPOS_DOCUMENTO: dict[str, TipoDocumento] = {
    "nota_ingreso": TipoDocumento("Nota de Ingreso", "resumen_ingreso", _nota_ingreso),
    "consentimiento_quirurgico": TipoDocumento(
        "Consentimiento Informado Quirúrgico", "consentimiento", _consentimiento_quirurgico
    ),
    "consentimiento_anestesico": TipoDocumento(
        "Consentimiento Informado para Anestesia",
        "consentimiento",
        _consentimiento_anestesico,
        editable=False,
    ),
    "nota_preanestesica": TipoDocumento(
        "Nota Preanestésica", "nota_preanestesica", _nota_preanestesica
    ),
    "nota_postanestesica": TipoDocumento(
        "Nota Postanestésica", "nota_postanestesica", _nota_postanestesica
    ),
    "nota_postoperatoria": TipoDocumento(
        "Nota Postoperatoria", "nota_postoperatoria", _nota_postoperatoria
    ),
    "indicaciones_postoperatorias": TipoDocumento(
        "Indicaciones Postoperatorias", "indicaciones_postop", _indicaciones_postoperatorias
    ),
    "nota_alta": TipoDocumento("Nota de Alta", "nota_alta", _nota_alta),
}


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def obtener_tipo(tipo: str) -> TipoDocumento:
    """Raises HTTPException 404 for an unknown document type."""
    try:
        return TIPOS_DOCUMENTO[tipo]
    except KeyError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=(
                f"Tipo de documento '{tipo}' no existe. "
                f"Valores válidos: {sorted(TIPOS_DOCUMENTO)}."
            ),
        )


def listar_tipos() -> list[TipoDocumentoResponse]:
    return [
        TipoDocumentoResponse(
            tipo=clave, titulo=t.titulo, seccion=t.seccion, editable=t.editable
        )
        for clave, t in TIPOS_DOCUMENTO.items()
    ]


def obtener_seccion(
    db: Session,
    procedimiento_id: int,
    tipo: str,
    fecha: datetime.date | None = None,
) -> SeccionResponse:
    """Return the section behind *tipo*, stored or defaulted, to prefill a form."""
    definicion = obtener_tipo(tipo)
    row = get_procedimiento_or_404(db, procedimiento_id)
    datos, guardado = _datos_seccion(row, definicion.seccion, fecha or datetime.date.today())
    logger.debug(
        "obtener_seccion: procedimiento=%d tipo=%s guardado=%s",
        procedimiento_id, tipo, guardado,
    )
    return SeccionResponse(
        procedimiento_id=row.id,
        tipo=tipo,
        seccion=definicion.seccion,
        guardado=guardado,
        datos=datos,
    )


def guardar_seccion(
    db: Session,
    procedimiento_id: int,
    tipo: str,
    payload: dict[str, Any],
    usuario: str = "sistema",
) -> SeccionResponse:
    """Replace the one section behind *tipo*; nothing else on the row changes.

    Raises:
        HTTPException 404: Unknown procedure or document type.
        HTTPException 422: Read-only document type, or invalid payload.
    """
    definicion = obtener_tipo(tipo)
    if not definicion.editable:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=(
                f"El documento '{tipo}' es de solo lectura; "
                "edite la sección 'consentimiento' desde el consentimiento quirúrgico."
            ),
        )
    row = get_procedimiento_or_404(db, procedimiento_id)

    modelo = SECCIONES[definicion.seccion]
    try:
        seccion = modelo.model_validate(payload)
    except ValidationError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=[
                {"loc": list(err["loc"]), "msg": err["msg"]}
                for err in exc.errors()
            ],
        ) from exc

    datos = seccion.model_dump()
    setattr(row, definicion.seccion, datos)
    row.version = row.version + 1
    db.commit()
    db.refresh(row)

    logger.info(
        "Seccion '%s' del procedimiento %d guardada por '%s' (version %d)",
        definicion.seccion, procedimiento_id, usuario, row.version,
    )
    return SeccionResponse(
        procedimiento_id=row.id,
        tipo=tipo,
        seccion=definicion.seccion,
        guardado=True,
        datos=datos,
    )


def nombre_archivo(exp: Expediente, tipo: str) -> str:
    """``Consentimiento_Quirurgico_Elena_Ramirez.pdf``-style ASCII filename."""
    base = "_".join(
        parte.capitalize() for parte in tipo.split("_")
    )
    paciente = f"{exp.paciente.nombre}_{exp.paciente.apellido}".replace(" ", "_")
    ascii_paciente = (
        unicodedata.normalize("NFKD", paciente).encode("ascii", "ignore").decode("ascii")
    )
    return f"{base}_{ascii_paciente}.pdf"


def render(exp: Expediente, tipo: str, fecha: datetime.date) -> bytes:
    """Build the PDF for *tipo* from the snapshot *exp* as of *fecha*.

    Never writes to the database.
    """
    definicion = obtener_tipo(tipo)
    settings = get_settings()
    datos, _ = _datos_seccion(exp.procedimiento, definicion.seccion, fecha)

    pdf = PdfExporter(
        title=definicion.titulo,
        clinica=settings.CLINICA_NOMBRE,
        direccion=settings.CLINICA_DIRECCION,
        fecha_documento=fecha_castellano(fecha),
    )
    pdf.add_header()
    definicion.plantilla(pdf, exp, datos, fecha)
    file_bytes = pdf.build()

    logger.debug(
        "render: procedimiento=%d tipo=%s -> %d bytes",
        exp.procedimiento.id, tipo, len(file_bytes),
    )
    return file_bytes
