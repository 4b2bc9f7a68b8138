"""Procedimiento model — one scheduled or performed surgery."""

from sqlalchemy import JSON, Column, Date, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.database import Base


class Procedimiento(Base):
    """Central aggregate: a surgery with its staff and clinical documents.

    Each clinical document lives in its own JSON column and stays ``NULL``
    until it is saved for the first time. The ``version`` counter is bumped
    on every write and compared on full-record updates.

    Attributes:
        id: Primary key.
        id_hospital: Clinic/site identifier.
        paciente_id: FK to Paciente.
        medico_id: Surgeon (FK to Usuario).
        anestesiologo_id: Anesthesiologist (FK to Usuario).
        ayudante_id: Assistant (FK to Usuario).
        fecha_qx: Scheduled date.
        diagnostico: Primary (pre-operative) diagnosis.
        qx_planeada: Planned surgery.
        status: "Programado", "Post-op" or "Alta".
        version: Optimistic concurrency stamp.
        resumen_ingreso .. nota_alta: Document sections (JSON).
    """

    __tablename__ = "procedimiento"

    id = Column(Integer, primary_key=True, autoincrement=True)
    id_hospital = Column(Integer, nullable=False, default=1)
    paciente_id = Column(Integer, ForeignKey("paciente.id"), nullable=False)
    medico_id = Column(Integer, ForeignKey("usuario.id"), nullable=False)
    anestesiologo_id = Column(Integer, ForeignKey("usuario.id"), nullable=True)
    ayudante_id = Column(Integer, ForeignKey("usuario.id"), nullable=True)
    fecha_qx = Column(Date, nullable=False, index=True)
    diagnostico = Column(String(500), nullable=False, default="")
    qx_planeada = Column(String(500), nullable=False, default="")
    status = Column(String(20), nullable=False, default="Programado")
    version = Column(Integer, nullable=False, default=1)

    # Document sections
    resumen_ingreso = Column(JSON, nullable=True)
    nota_preanestesica = Column(JSON, nullable=True)
    consentimiento = Column(JSON, nullable=True)
    nota_postanestesica = Column(JSON, nullable=True)
    nota_postoperatoria = Column(JSON, nullable=True)
    indicaciones_postop = Column(JSON, nullable=True)
    nota_alta = Column(JSON, nullable=True)

    created_at = Column(DateTime, default=func.now(), nullable=False)
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now(), nullable=False)

    # Relationships
    paciente = relationship("Paciente", back_populates="procedimientos", lazy="select")
    cirujano = relationship("Usuario", foreign_keys=[medico_id], lazy="select")
    anestesiologo = relationship("Usuario", foreign_keys=[anestesiologo_id], lazy="select")
    ayudante = relationship("Usuario", foreign_keys=[ayudante_id], lazy="select")
    fotos = relationship(
        "FotoProcedimiento",
        back_populates="procedimiento",
        order_by="FotoProcedimiento.id",
        lazy="select",
        cascade="all, delete-orphan",
    )
