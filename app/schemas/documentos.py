"""
Pydantic v2 schemas for the clinical document sections of a procedure.

Every section model fills in all of its declared fields: missing keys and
explicit ``null`` values fall back to ``""`` (nested groups fall back to a
fully defaulted object), so the PDF templates never see a partial shape.
Unknown keys are ignored.
"""

from __future__ import annotations

import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class SeccionBase(BaseModel):
    """Base for every section and sub-group."""

    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    @model_validator(mode="before")
    @classmethod
    def _descartar_nulos(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None}
        return data


# ---------------------------------------------------------------------------
# Shared groups
# ---------------------------------------------------------------------------


class SignosVitales(SeccionBase):
    ta: str = ""
    fc: str = ""
    fr: str = ""
    temp: str = ""
    sat_o2: str = ""


# ---------------------------------------------------------------------------
# Nota de ingreso
# ---------------------------------------------------------------------------


class ResumenIngreso(SeccionBase):
    signos_vitales: SignosVitales = Field(default_factory=SignosVitales)
    interrogatorio: str = ""
    exploracion_fisica: str = ""
    plan_tratamiento: str = ""


# ---------------------------------------------------------------------------
# Nota preanestésica
# ---------------------------------------------------------------------------


class Antecedentes(SeccionBase):
    tabaquismo: str = ""
    alcoholismo: str = ""
    toxicomanias: str = ""
    ejercicio: str = ""
    asma: str = ""
    alergias: str = ""
    cardiovascular: str = ""
    pulmonar: str = ""
    endocrinologico: str = ""
    antecedentes_anestesicos: str = ""
    antecedentes_quirurgicos: str = ""


class ExploracionPreanestesica(SeccionBase):
    peso: str = ""
    talla: str = ""
    ta: str = ""
    fc: str = ""
    fr: str = ""
    temp: str = ""
    sat_o2: str = ""
    tegumentos: str = ""
    cabeza: str = ""
    traquea: str = ""
    cardiopulmonar: str = ""
    cardio: str = ""
    extremidades: str = ""


class ViaAerea(SeccionBase):
    mallampati: str = ""
    aldrete: str = ""
    bellhouse_dorr: str = ""
    interincisiva: str = ""
    otras: str = ""


class Laboratorio(SeccionBase):
    hb: str = ""
    hct: str = ""
    leucos: str = ""
    plaquetas: str = ""
    glucosa: str = ""
    creatinina: str = ""
    bun: str = ""
    urea: str = ""
    tp: str = ""
    ttp: str = ""
    inr: str = ""


class PlanAnestesico(SeccionBase):
    valoraciones: str = ""
    plan: str = ""
    indicaciones: str = ""


class NotaPreanestesica(SeccionBase):
    antecedentes: Antecedentes = Field(default_factory=Antecedentes)
    exploracion: ExploracionPreanestesica = Field(default_factory=ExploracionPreanestesica)
    via_aerea: ViaAerea = Field(default_factory=ViaAerea)
    laboratorio: Laboratorio = Field(default_factory=Laboratorio)
    ekg: str = ""
    plan_anestesico: PlanAnestesico = Field(default_factory=PlanAnestesico)


# ---------------------------------------------------------------------------
# Consentimientos (quirúrgico y anestésico comparten el texto)
# ---------------------------------------------------------------------------


class Consentimiento(SeccionBase):
    riesgos: str = ""
    beneficios: str = ""


# ---------------------------------------------------------------------------
# Nota postanestésica
# ---------------------------------------------------------------------------


class NotaPostanestesica(SeccionBase):
    tecnica_anestesica: str = ""
    liquidos: str = ""
    inicio_anestesia: str = ""
    termino_anestesia: str = ""
    inicio_cirugia: str = ""
    termino_cirugia: str = ""
    signos_vitales_ingreso_ucpa: SignosVitales = Field(default_factory=SignosVitales)
    signos_vitales_alta_ucpa: SignosVitales = Field(default_factory=SignosVitales)
    signos_vitales_alta_anestesio: SignosVitales = Field(default_factory=SignosVitales)
    indicaciones_alta_anestesio: str = ""


# ---------------------------------------------------------------------------
# Nota postoperatoria e indicaciones
# ---------------------------------------------------------------------------


class NotaPostoperatoria(SeccionBase):
    diagnostico_postqx: str = ""
    cirugia_realizada: str = ""
    tecnica: str = ""
    hallazgos: str = ""
    sangrado: str = ""
    incidentes: str = ""
    complicaciones: str = ""
    cuenta_material: str = ""
    pronostico: str = ""
    recomendaciones_postop: str = ""


class IndicacionesPostop(SeccionBase):
    soluciones_dieta: str = ""
    medicamentos: str = ""
    examenes: str = ""
    actividades_enfermeria: str = ""


# ---------------------------------------------------------------------------
# Nota de alta
# ---------------------------------------------------------------------------

MotivoEgreso = Literal[
    "mejoria",
    "alta_voluntaria",
    "traslado",
    "motivos_administrativos",
    "alta_contra_consejo_medico",
    "defuncion",
]


class NotaAlta(SeccionBase):
    fecha_egreso: str = ""
    dx_egreso: str = ""
    motivo_egreso: MotivoEgreso = "mejoria"
    resumen_egreso: str = ""
    indicaciones_egreso: str = ""

    @field_validator("fecha_egreso")
    @classmethod
    def _fecha_iso(cls, value: str) -> str:
        if value:
            datetime.date.fromisoformat(value)
        return value


# Column name on ``Procedimiento`` → section model
SECCIONES: dict[str, type[SeccionBase]] = {
    "resumen_ingreso": ResumenIngreso,
    "nota_preanestesica": NotaPreanestesica,
    "consentimiento": Consentimiento,
    "nota_postanestesica": NotaPostanestesica,
    "nota_postoperatoria": NotaPostoperatoria,
    "indicaciones_postop": IndicacionesPostop,
    "nota_alta": NotaAlta,
}


class SeccionResponse(BaseModel):
    """Body of ``GET/PUT /api/procedimientos/{id}/documentos/{tipo}``.

    ``guardado`` is ``False`` while the section still has its default
    (never saved) content.
    """

    success: bool = True
    procedimiento_id: int
    tipo: str
    seccion: str
    guardado: bool
    datos: dict[str, Any]


class TipoDocumentoResponse(BaseModel):
    tipo: str
    titulo: str
    seccion: str
    editable: bool
