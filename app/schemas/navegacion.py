"""
Schemas for client navigation.

A view is a tagged union discriminated by ``vista``; each variant carries
exactly the parameters it needs, so a route can never be built with a
missing or stray parameter.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, Field


class VistaProgramacion(BaseModel):
    vista: Literal["programacion"] = "programacion"
    fecha: str | None = Field(default=None, description="YYYY-MM-DD; hoy si se omite")


class VistaPacientes(BaseModel):
    vista: Literal["pacientes"] = "pacientes"
    buscar: str | None = None
    page: int = Field(default=1, ge=1)


class VistaUsuarios(BaseModel):
    vista: Literal["usuarios"] = "usuarios"


class VistaProcedimiento(BaseModel):
    vista: Literal["procedimiento"] = "procedimiento"
    procedimiento_id: int = Field(..., ge=1)


class VistaDocumento(BaseModel):
    vista: Literal["documento"] = "documento"
    procedimiento_id: int = Field(..., ge=1)
    tipo: str


class VistaAgregarFoto(BaseModel):
    vista: Literal["agregar_foto"] = "agregar_foto"
    procedimiento_id: int = Field(..., ge=1)


Vista = Annotated[
    Union[
        VistaProgramacion,
        VistaPacientes,
        VistaUsuarios,
        VistaProcedimiento,
        VistaDocumento,
        VistaAgregarFoto,
    ],
    Field(discriminator="vista"),
]


class ResolverRequest(BaseModel):
    destino: Vista


class MenuItem(BaseModel):
    vista: str
    etiqueta: str


class MenuResponse(BaseModel):
    success: bool = True
    rol: str
    items: list[MenuItem]


class EntradaHistorial(BaseModel):
    """Resolved navigation target, ready to push onto the client history."""

    success: bool = True
    vista: str
    titulo: str
    parametros: dict[str, Any]
    recurso: str = Field(..., description="Ruta de la API que carga los datos de la vista")
