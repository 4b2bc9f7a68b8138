"""SQLAlchemy models package for Clínica SIC.

Importing all models here ensures that SQLAlchemy's mapper registry is
populated before ``Base.metadata.create_all()`` or Alembic migrations run.
The import order follows the foreign-key dependency graph.

Usage from other modules:
    from app.models import Procedimiento, Paciente
"""

# Identity and staff
from app.models.usuario import Usuario  # noqa: F401
from app.models.medico import Medico  # noqa: F401

# Patient registry
from app.models.paciente import Paciente  # noqa: F401

# Procedure aggregate
from app.models.procedimiento import Procedimiento  # noqa: F401
from app.models.foto_procedimiento import FotoProcedimiento  # noqa: F401

__all__ = [
    "Usuario",
    "Medico",
    "Paciente",
    "Procedimiento",
    "FotoProcedimiento",
]
