"""
Navegación router.

Mounts under ``/api/navegacion`` (prefix set in ``main.py``).

Endpoints
---------
GET  /menu      — Menu entries for the caller's role.
POST /resolver  — Validate a typed view and return its history entry.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.database import get_db
from app.models.usuario import Usuario
from app.schemas.navegacion import EntradaHistorial, MenuResponse, ResolverRequest
from app.services import navegacion_service
from app.services.auth_service import get_current_user

router = APIRouter(tags=["Navegación"])


@router.get("/menu", response_model=MenuResponse, summary="Menú por rol")
def get_menu(
    current_user: Annotated[Usuario, Depends(get_current_user)],
) -> MenuResponse:
    return navegacion_service.menu(current_user)


@router.post(
    "/resolver",
    response_model=EntradaHistorial,
    summary="Resolver una vista",
    description=(
        "Recibe una vista etiquetada por ``vista`` con sus parámetros, verifica "
        "que el rol pueda abrirla y que los registros referidos existan."
    ),
    responses={
        403: {"description": "El rol no tiene acceso a la vista."},
        404: {"description": "Procedimiento o tipo de documento no encontrado."},
        422: {"description": "Vista o parámetros inválidos."},
    },
)
def resolver(
    body: ResolverRequest,
    db: Annotated[Session, Depends(get_db)],
    current_user: Annotated[Usuario, Depends(get_current_user)],
) -> EntradaHistorial:
    return navegacion_service.resolver(db, body.destino, current_user)
