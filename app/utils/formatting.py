"""
Display helpers shared by the API responses and the printed documents.

Dates are formatted in Spanish without relying on the process locale, the
same way the API builds its month labels in plain Python.
"""

from __future__ import annotations

import datetime
import unicodedata
from typing import Any

from app.utils.constants import (
    ESPECIALIDAD_ANESTESIOLOGIA,
    ESPECIALIDAD_MEDICINA_GENERAL,
    NOMBRES_FEMENINOS_EXCEPCION,
    ROL_MEDICO,
)

_MESES: list[str] = [
    "",
    "enero", "febrero", "marzo", "abril", "mayo", "junio",
    "julio", "agosto", "septiembre", "octubre", "noviembre", "diciembre",
]

_DIAS_SEMANA: list[str] = [
    "lunes", "martes", "miércoles", "jueves", "viernes", "sábado", "domingo",
]


def calcular_edad(
    fecha_nacimiento: datetime.date | None,
    hoy: datetime.date | None = None,
) -> int | None:
    """Return the age in completed years on *hoy* (default: today).

    The age only increases on the exact anniversary: someone born on
    1990-02-10 is 33 on 2024-02-09 and 34 on 2024-02-10.
    """
    if fecha_nacimiento is None:
        return None
    hoy = hoy or datetime.date.today()
    edad = hoy.year - fecha_nacimiento.year
    if (hoy.month, hoy.day) < (fecha_nacimiento.month, fecha_nacimiento.day):
        edad -= 1
    return edad


def nombre_completo(nombre: str | None, apellido: str | None) -> str:
    return f"{nombre or ''} {apellido or ''}".strip()


def es_nombre_femenino(nombre: str | None) -> bool:
    """Gender guess used for the "Dr."/"Dra." title.

    Known to misclassify (e.g. "Luca", "Beatriz"); kept as-is until users
    carry an explicit title field.
    """
    nombre_lower = (nombre or "").strip().lower()
    return nombre_lower.endswith("a") or nombre_lower in NOMBRES_FEMENINOS_EXCEPCION


def formatear_nombre_medico(usuario: Any | None) -> str:
    """Return the display name for a staff member.

    Non-``Medico`` users are rendered as ``"nombre apellido"``; ``Medico``
    users get a ``"Dr."`` or ``"Dra."`` prefix chosen by
    :func:`es_nombre_femenino`. A missing user renders as ``"N/A"``.
    """
    if usuario is None:
        return "N/A"
    completo = nombre_completo(usuario.nombre, usuario.apellido)
    if usuario.rol != ROL_MEDICO:
        return completo
    prefijo = "Dra." if es_nombre_femenino(usuario.nombre) else "Dr."
    return f"{prefijo} {completo}"


def normalizar_texto(texto: str | None) -> str:
    """Lower-case *texto* and strip accents (``"Anestesióloga"`` → ``"anestesiologa"``)."""
    descompuesto = unicodedata.normalize("NFKD", texto or "")
    sin_acentos = "".join(c for c in descompuesto if not unicodedata.combining(c))
    return " ".join(sin_acentos.lower().split())


def es_anestesiologo(especialidad: str | None) -> bool:
    return ESPECIALIDAD_ANESTESIOLOGIA in normalizar_texto(especialidad)


def es_medicina_general(especialidad: str | None) -> bool:
    normalizada = normalizar_texto(especialidad)
    return any(clave in normalizada for clave in ESPECIALIDAD_MEDICINA_GENERAL)


def fecha_larga(fecha: datetime.date | None) -> str:
    """``2025-08-22`` → ``"22 de agosto de 2025"``."""
    if fecha is None:
        return ""
    return f"{fecha.day} de {_MESES[fecha.month]} de {fecha.year}"


def fecha_castellano(fecha: datetime.date) -> str:
    """``2025-08-22`` → ``"viernes, 22 de agosto de 2025"``."""
    return f"{_DIAS_SEMANA[fecha.weekday()]}, {fecha_larga(fecha)}"


def parse_fecha(valor: str | None) -> datetime.date | None:
    """Parse an ISO ``YYYY-MM-DD`` string; empty or invalid input yields ``None``."""
    if not valor:
        return None
    try:
        return datetime.date.fromisoformat(valor)
    except ValueError:
        return None
