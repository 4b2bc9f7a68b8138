"""
Procedimientos router.

Mounts under ``/api/procedimientos`` (prefix set in ``main.py``).

All endpoints require a valid JWT token (``get_current_user`` dependency).
Schedule writes are limited to Admin/Administrativo, status changes also to
Medico, and document saves and photo uploads to the clinical roles.

Endpoints
---------
GET    /                                — Schedule rows (filters: fecha, paciente_id, personal_id).
POST   /                                — Create or fully replace a procedure (Admin | Administrativo).
GET    /{id}                            — Full record with documents and photos.
PATCH  /{id}/status                     — Change only the status.
DELETE /{id}                            — Delete with photos; idempotent.
GET    /{id}/documentos                 — Document types available for the procedure.
GET    /{id}/documentos/{tipo}          — Section data behind a document (prefilled).
PUT    /{id}/documentos/{tipo}          — Save that one section.
GET    /{id}/documentos/{tipo}/pdf      — Render the document.
POST   /{id}/documentos/{tipo}/pdf      — Save the section, then render.
GET    /{id}/fotos                      — Photo gallery in upload order.
POST   /{id}/fotos                      — Upload a photo (multipart: foto, descripcion).
"""

from __future__ import annotations

import datetime
import io
import logging
from typing import Annotated, Any

from fastapi import (
    APIRouter,
    Body,
    Depends,
    File,
    Form,
    HTTPException,
    Query,
    UploadFile,
    status,
)
from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session

from app.database import get_db
from app.models.usuario import Usuario
from app.schemas.common import MessageResponse
from app.schemas.documentos import SeccionResponse, TipoDocumentoResponse
from app.schemas.foto import FotoResponse, FotosListResponse
from app.schemas.procedimiento import (
    ProcedimientoDetalleResponse,
    ProcedimientosListResponse,
    ProcedimientoUpsert,
    StatusUpdate,
)
from app.services import documento_service, foto_service, procedimiento_service
from app.services.auth_service import get_current_user, require_role
from app.utils.constants import ROLES_AGENDA, ROLES_CLINICOS, ROLES_STATUS

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Procedimientos"])

_FechaDocumento = Annotated[
    datetime.date | None,
    Query(description="Fecha impresa en el documento (YYYY-MM-DD); hoy si se omite."),
]


# ---------------------------------------------------------------------------
# Schedule
# ---------------------------------------------------------------------------


@router.get(
    "",
    response_model=ProcedimientosListResponse,
    summary="Programación quirúrgica",
    description=(
        "Lista los procedimientos ordenados por fecha. Filtros opcionales: "
        "fecha exacta, paciente y miembro del personal (cirujano, anestesiólogo "
        "o ayudante)."
    ),
    responses={401: {"description": "Token JWT ausente o inválido."}},
)
def listar(
    db: Annotated[Session, Depends(get_db)],
    _current_user: Annotated[Usuario, Depends(get_current_user)],
    fecha: Annotated[datetime.date | None, Query(description="YYYY-MM-DD")] = None,
    paciente_id: Annotated[int | None, Query(ge=1)] = None,
    personal_id: Annotated[int | None, Query(ge=1)] = None,
) -> ProcedimientosListResponse:
    return ProcedimientosListResponse(
        procedimientos=procedimiento_service.listar_procedimientos(
            db, fecha=fecha, paciente_id=paciente_id, personal_id=personal_id
        )
    )


@router.post(
    "",
    response_model=ProcedimientoDetalleResponse,
    summary="Crear o reemplazar un procedimiento",
    description=(
        "Sin ``id`` crea un procedimiento nuevo. Con ``id`` reemplaza el registro "
        "completo (incluidas las secciones) y exige la ``version`` leída; si otro "
        "usuario guardó antes se responde 409. Requiere rol Admin o Administrativo."
    ),
    responses={
        401: {"description": "Token JWT ausente o inválido."},
        403: {"description": "Rol insuficiente."},
        404: {"description": "Procedimiento a actualizar no encontrado."},
        409: {"description": "Versión desactualizada."},
        422: {"description": "Paciente o personal inválido."},
    },
)
def upsert(
    data: ProcedimientoUpsert,
    db: Annotated[Session, Depends(get_db)],
    current_user: Annotated[Usuario, Depends(require_role(*ROLES_AGENDA))],
) -> ProcedimientoDetalleResponse:
    procedimiento = procedimiento_service.upsert_procedimiento(
        db, data, usuario=current_user.login
    )
    return ProcedimientoDetalleResponse(procedimiento=procedimiento)


@router.get(
    "/{procedimiento_id}",
    response_model=ProcedimientoDetalleResponse,
    summary="Detalle de un procedimiento",
    responses={
        401: {"description": "Token JWT ausente o inválido."},
        404: {"description": "Procedimiento no encontrado."},
    },
)
def obtener(
    procedimiento_id: int,
    db: Annotated[Session, Depends(get_db)],
    _current_user: Annotated[Usuario, Depends(get_current_user)],
) -> ProcedimientoDetalleResponse:
    return ProcedimientoDetalleResponse(
        procedimiento=procedimiento_service.obtener_procedimiento(db, procedimiento_id)
    )


@router.patch(
    "/{procedimiento_id}/status",
    response_model=ProcedimientoDetalleResponse,
    summary="Cambiar el estado del procedimiento",
    description=(
        "Actualiza únicamente ``status``; documentos y personal no se tocan. "
        "Requiere rol Admin, Administrativo o Medico."
    ),
    responses={
        403: {"description": "Rol insuficiente."},
        404: {"description": "Procedimiento no encontrado."},
    },
)
def cambiar_status(
    procedimiento_id: int,
    data: StatusUpdate,
    db: Annotated[Session, Depends(get_db)],
    current_user: Annotated[Usuario, Depends(require_role(*ROLES_STATUS))],
) -> ProcedimientoDetalleResponse:
    procedimiento = procedimiento_service.actualizar_status(
        db, procedimiento_id, data.status, usuario=current_user.login
    )
    return ProcedimientoDetalleResponse(procedimiento=procedimiento)


@router.delete(
    "/{procedimiento_id}",
    response_model=MessageResponse,
    summary="Eliminar un procedimiento",
    description=(
        "Elimina el procedimiento y sus fotos. Eliminar un id inexistente no es "
        "un error. Requiere rol Admin o Administrativo."
    ),
    responses={403: {"description": "Rol insuficiente."}},
)
def eliminar(
    procedimiento_id: int,
    db: Annotated[Session, Depends(get_db)],
    current_user: Annotated[Usuario, Depends(require_role(*ROLES_AGENDA))],
) -> MessageResponse:
    eliminado = procedimiento_service.eliminar_procedimiento(
        db, procedimiento_id, usuario=current_user.login
    )
    mensaje = (
        f"Procedimiento {procedimiento_id} eliminado."
        if eliminado
        else f"Procedimiento {procedimiento_id} no existía."
    )
    return MessageResponse(message=mensaje)


# ---------------------------------------------------------------------------
# Documents
# ---------------------------------------------------------------------------


def _pdf_response(file_bytes: bytes, filename: str) -> StreamingResponse:
    headers = {
        "Content-Disposition": f'attachment; filename="{filename}"',
        "Content-Length": str(len(file_bytes)),
    }
    return StreamingResponse(
        io.BytesIO(file_bytes),
        media_type="application/pdf",
        headers=headers,
    )


def _render(
    db: Session,
    procedimiento_id: int,
    tipo: str,
    fecha: datetime.date | None,
) -> StreamingResponse:
    documento_service.obtener_tipo(tipo)
    expediente = documento_service.cargar_expediente(db, procedimiento_id)

    try:
        file_bytes = documento_service.render(
            expediente, tipo, fecha or datetime.date.today()
        )
    except Exception as exc:
        logger.exception("render failed: procedimiento=%d tipo=%s", procedimiento_id, tipo)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Error generando el documento PDF: {exc}",
        ) from exc

    return _pdf_response(file_bytes, documento_service.nombre_archivo(expediente, tipo))


@router.get(
    "/{procedimiento_id}/documentos",
    response_model=list[TipoDocumentoResponse],
    summary="Tipos de documento",
)
def listar_documentos(
    procedimiento_id: int,
    db: Annotated[Session, Depends(get_db)],
    _current_user: Annotated[Usuario, Depends(get_current_user)],
) -> list[TipoDocumentoResponse]:
    procedimiento_service.get_procedimiento_or_404(db, procedimiento_id)
    return documento_service.listar_tipos()


@router.get(
    "/{procedimiento_id}/documentos/{tipo}",
    response_model=SeccionResponse,
    summary="Datos de un documento",
    description=(
        "Retorna la sección que respalda el documento. Si nunca se guardó se "
        "devuelve la forma por defecto con los valores precargados "
        "(``guardado=false``)."
    ),
    responses={404: {"description": "Procedimiento o tipo de documento no encontrado."}},
)
def obtener_documento(
    procedimiento_id: int,
    tipo: str,
    db: Annotated[Session, Depends(get_db)],
    _current_user: Annotated[Usuario, Depends(get_current_user)],
    fecha: _FechaDocumento = None,
) -> SeccionResponse:
    return documento_service.obtener_seccion(db, procedimiento_id, tipo, fecha)


@router.put(
    "/{procedimiento_id}/documentos/{tipo}",
    response_model=SeccionResponse,
    summary="Guardar un documento",
    description=(
        "Reemplaza únicamente la sección del documento; las demás secciones y "
        "los datos del procedimiento no cambian. Requiere rol Admin, Medico o "
        "Enfermeria."
    ),
    responses={
        403: {"description": "Rol insuficiente."},
        404: {"description": "Procedimiento o tipo de documento no encontrado."},
        422: {"description": "Datos inválidos o documento de solo lectura."},
    },
)
def guardar_documento(
    procedimiento_id: int,
    tipo: str,
    payload: Annotated[dict[str, Any], Body()],
    db: Annotated[Session, Depends(get_db)],
    current_user: Annotated[Usuario, Depends(require_role(*ROLES_CLINICOS))],
) -> SeccionResponse:
    return documento_service.guardar_seccion(
        db, procedimiento_id, tipo, payload, usuario=current_user.login
    )


@router.get(
    "/{procedimiento_id}/documentos/{tipo}/pdf",
    response_class=StreamingResponse,
    summary="Generar PDF de un documento",
    responses={
        200: {"description": "PDF generado.", "content": {"application/pdf": {}}},
        404: {"description": "Procedimiento o tipo de documento no encontrado."},
        500: {"description": "Error generando el archivo."},
    },
)
def generar_pdf(
    procedimiento_id: int,
    tipo: str,
    db: Annotated[Session, Depends(get_db)],
    _current_user: Annotated[Usuario, Depends(get_current_user)],
    fecha: _FechaDocumento = None,
) -> StreamingResponse:
    return _render(db, procedimiento_id, tipo, fecha)


@router.post(
    "/{procedimiento_id}/documentos/{tipo}/pdf",
    response_class=StreamingResponse,
    summary="Guardar y generar PDF",
    description=(
        "Guarda la sección y, sólo si el guardado fue exitoso, genera el PDF. "
        "Requiere rol Admin, Medico o Enfermeria."
    ),
    responses={
        200: {"description": "PDF generado.", "content": {"application/pdf": {}}},
        403: {"description": "Rol insuficiente."},
        404: {"description": "Procedimiento o tipo de documento no encontrado."},
        422: {"description": "Datos inválidos o documento de solo lectura."},
        500: {"description": "Error generando el archivo."},
    },
)
def guardar_y_generar(
    procedimiento_id: int,
    tipo: str,
    payload: Annotated[dict[str, Any], Body()],
    db: Annotated[Session, Depends(get_db)],
    current_user: Annotated[Usuario, Depends(require_role(*ROLES_CLINICOS))],
    fecha: _FechaDocumento = None,
) -> StreamingResponse:
    documento_service.guardar_seccion(
        db, procedimiento_id, tipo, payload, usuario=current_user.login
    )
    return _render(db, procedimiento_id, tipo, fecha)


# ---------------------------------------------------------------------------
# Photos
# ---------------------------------------------------------------------------


@router.get(
    "/{procedimiento_id}/fotos",
    response_model=FotosListResponse,
    summary="Galería de fotos",
    responses={404: {"description": "Procedimiento no encontrado."}},
)
def listar_fotos(
    procedimiento_id: int,
    db: Annotated[Session, Depends(get_db)],
    _current_user: Annotated[Usuario, Depends(get_current_user)],
) -> FotosListResponse:
    return FotosListResponse(fotos=foto_service.listar_fotos(db, procedimiento_id))


@router.post(
    "/{procedimiento_id}/fotos",
    response_model=FotoResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Agregar foto",
    description=(
        "Adjunta una imagen (``image/*``) al procedimiento. La descripción es "
        "opcional. Las fotos no se editan ni se eliminan individualmente. "
        "Requiere rol Admin, Medico o Enfermeria."
    ),
    responses={
        403: {"description": "Rol insuficiente."},
        404: {"description": "Procedimiento no encontrado."},
        422: {"description": "Archivo vacío o no es una imagen."},
    },
)
async def agregar_foto(
    procedimiento_id: int,
    foto: Annotated[UploadFile, File(description="Imagen (jpg, png, ...)")],
    db: Annotated[Session, Depends(get_db)],
    current_user: Annotated[Usuario, Depends(require_role(*ROLES_CLINICOS))],
    descripcion: Annotated[str | None, Form(max_length=1000)] = None,
) -> FotoResponse:
    contenido = await foto.read()
    logger.info(
        "agregar_foto: user='%s' procedimiento=%d file='%s'",
        current_user.login, procedimiento_id, foto.filename,
    )
    return foto_service.agregar_foto(
        db,
        procedimiento_id,
        contenido,
        filename=foto.filename,
        content_type=foto.content_type,
        descripcion=descripcion,
    )
