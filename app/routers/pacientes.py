"""
Pacientes router.

Mounts under ``/api/pacientes`` (prefix set in ``main.py``).

Available to Admin, Administrativo and Medico; a Medico only sees the
patients of procedures where they are surgeon, anesthesiologist or
assistant.

Endpoints
---------
GET  /      — Paginated patient table with search.
POST /      — Register a patient.
GET  /{id}  — One patient.
PUT  /{id}  — Partial update.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.models.usuario import Usuario
from app.schemas.common import PaginationParams
from app.schemas.paciente import (
    PacienteCreate,
    PacienteResponse,
    PacienteUpdate,
    TablaPacientesResponse,
)
from app.services import paciente_service
from app.services.auth_service import require_role
from app.utils.constants import PACIENTES_POR_PAGINA, ROLES_PACIENTES

router = APIRouter(tags=["Pacientes"])

_PacientesUser = Annotated[Usuario, Depends(require_role(*ROLES_PACIENTES))]


def _pagination_params(
    page: Annotated[int, Query(description="Página (base 1).", ge=1)] = 1,
    page_size: Annotated[
        int, Query(description="Registros por página (máx. 200).", ge=1, le=200)
    ] = PACIENTES_POR_PAGINA,
) -> PaginationParams:
    return PaginationParams(page=page, page_size=page_size)


@router.get(
    "",
    response_model=TablaPacientesResponse,
    summary="Tabla de pacientes",
    description=(
        "Busca por nombre, apellido o RFC. Para el rol Medico sólo se incluyen "
        "sus propios pacientes."
    ),
    responses={403: {"description": "Rol insuficiente."}},
)
def listar(
    pagination: Annotated[PaginationParams, Depends(_pagination_params)],
    db: Annotated[Session, Depends(get_db)],
    current_user: _PacientesUser,
    buscar: Annotated[str | None, Query(max_length=100)] = None,
) -> TablaPacientesResponse:
    return paciente_service.listar_pacientes(db, current_user, pagination, buscar)


@router.post(
    "",
    response_model=PacienteResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Registrar paciente",
    responses={
        403: {"description": "Rol insuficiente."},
        422: {"description": "Datos inválidos."},
    },
)
def crear(
    data: PacienteCreate,
    db: Annotated[Session, Depends(get_db)],
    current_user: _PacientesUser,
) -> PacienteResponse:
    return paciente_service.crear_paciente(db, data, usuario=current_user.login)


@router.get(
    "/{paciente_id}",
    response_model=PacienteResponse,
    summary="Detalle de paciente",
    responses={404: {"description": "Paciente no encontrado."}},
)
def obtener(
    paciente_id: int,
    db: Annotated[Session, Depends(get_db)],
    current_user: _PacientesUser,
) -> PacienteResponse:
    return paciente_service.obtener_paciente(db, paciente_id, current_user)


@router.put(
    "/{paciente_id}",
    response_model=PacienteResponse,
    summary="Actualizar paciente",
    responses={
        404: {"description": "Paciente no encontrado."},
        422: {"description": "Datos inválidos."},
    },
)
def actualizar(
    paciente_id: int,
    data: PacienteUpdate,
    db: Annotated[Session, Depends(get_db)],
    current_user: _PacientesUser,
) -> PacienteResponse:
    return paciente_service.actualizar_paciente(db, paciente_id, data, current_user)
