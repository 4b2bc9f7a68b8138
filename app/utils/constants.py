"""
Application-wide constants for the Clínica SIC system.

Defines domain enumerations and lookup lists used across routers,
services, schemas and the document templates.
"""

from typing import Final

# ---------------------------------------------------------------------------
# User roles
# ---------------------------------------------------------------------------

ROL_ADMIN: Final[str] = "Admin"
ROL_MEDICO: Final[str] = "Medico"
ROL_ENFERMERIA: Final[str] = "Enfermeria"
ROL_ADMINISTRATIVO: Final[str] = "Administrativo"

ROLES: Final[list[str]] = [
    ROL_ADMIN,
    ROL_MEDICO,
    ROL_ENFERMERIA,
    ROL_ADMINISTRATIVO,
]

# Role groups used by ``require_role`` guards
ROLES_AGENDA: Final[tuple[str, ...]] = (ROL_ADMIN, ROL_ADMINISTRATIVO)
ROLES_STATUS: Final[tuple[str, ...]] = (ROL_ADMIN, ROL_ADMINISTRATIVO, ROL_MEDICO)
ROLES_CLINICOS: Final[tuple[str, ...]] = (ROL_ADMIN, ROL_MEDICO, ROL_ENFERMERIA)
ROLES_PACIENTES: Final[tuple[str, ...]] = (ROL_ADMIN, ROL_ADMINISTRATIVO, ROL_MEDICO)

# ---------------------------------------------------------------------------
# Procedure states (forward progression, not enforced)
# ---------------------------------------------------------------------------

STATUS_PROGRAMADO: Final[str] = "Programado"
STATUS_POSTOP: Final[str] = "Post-op"
STATUS_ALTA: Final[str] = "Alta"

# ---------------------------------------------------------------------------
# Discharge reasons (Nota de Alta)
# ---------------------------------------------------------------------------

MOTIVOS_EGRESO: Final[dict[str, str]] = {
    "mejoria": "Mejoría Clínica",
    "alta_voluntaria": "Alta Voluntaria",
    "traslado": "Traslado a otro centro",
    "motivos_administrativos": "Motivos Administrativos",
    "alta_contra_consejo_medico": "Alta contra consejo médico",
    "defuncion": "Defunción",
}

# ---------------------------------------------------------------------------
# Title heuristic for Medico display names
# ---------------------------------------------------------------------------

# Given names treated as female even though they do not end in "a".
NOMBRES_FEMENINOS_EXCEPCION: Final[frozenset[str]] = frozenset(
    {"isabel", "carmen", "ana"}
)

# ---------------------------------------------------------------------------
# Specialty keywords (compared without accents, lower-case)
# ---------------------------------------------------------------------------

ESPECIALIDAD_ANESTESIOLOGIA: Final[str] = "anestesi"
ESPECIALIDAD_MEDICINA_GENERAL: Final[tuple[str, ...]] = (
    "medico general",
    "medicina general",
)

# ---------------------------------------------------------------------------
# Photo uploads
# ---------------------------------------------------------------------------

FOTO_MAX_BYTES: Final[int] = 15 * 1024 * 1024

# ---------------------------------------------------------------------------
# Pagination
# ---------------------------------------------------------------------------

PACIENTES_POR_PAGINA: Final[int] = 10
