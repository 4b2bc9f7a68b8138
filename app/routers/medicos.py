"""
Medicos router: staff dropdowns for the procedure form.

Mounts under ``/api/medicos`` (prefix set in ``main.py``).

Endpoints
---------
GET /                — Every active doctor.
GET /cirujanos       — Surgeon pool.
GET /anestesiologos  — Anesthesiologist pool.
GET /ayudantes       — Assistant pool.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.database import get_db
from app.models.usuario import Usuario
from app.schemas.personal import PersonalListResponse
from app.services import personal_service
from app.services.auth_service import get_current_user

router = APIRouter(tags=["Personal"])


@router.get("", response_model=PersonalListResponse, summary="Médicos activos")
def listar_medicos(
    db: Annotated[Session, Depends(get_db)],
    _current_user: Annotated[Usuario, Depends(get_current_user)],
) -> PersonalListResponse:
    return PersonalListResponse(medicos=personal_service.listar_medicos(db))


@router.get(
    "/cirujanos",
    response_model=PersonalListResponse,
    summary="Médicos elegibles como cirujano",
    description="Excluye medicina general y anestesiología.",
)
def listar_cirujanos(
    db: Annotated[Session, Depends(get_db)],
    _current_user: Annotated[Usuario, Depends(get_current_user)],
) -> PersonalListResponse:
    return PersonalListResponse(
        medicos=personal_service.listar_medicos(db, personal_service.POOL_CIRUJANOS)
    )


@router.get(
    "/anestesiologos",
    response_model=PersonalListResponse,
    summary="Médicos elegibles como anestesiólogo",
)
def listar_anestesiologos(
    db: Annotated[Session, Depends(get_db)],
    _current_user: Annotated[Usuario, Depends(get_current_user)],
) -> PersonalListResponse:
    return PersonalListResponse(
        medicos=personal_service.listar_medicos(db, personal_service.POOL_ANESTESIOLOGOS)
    )


@router.get(
    "/ayudantes",
    response_model=PersonalListResponse,
    summary="Médicos elegibles como ayudante",
)
def listar_ayudantes(
    db: Annotated[Session, Depends(get_db)],
    _current_user: Annotated[Usuario, Depends(get_current_user)],
) -> PersonalListResponse:
    return PersonalListResponse(
        medicos=personal_service.listar_medicos(db, personal_service.POOL_AYUDANTES)
    )
