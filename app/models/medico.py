"""Medico model — medical profile attached 1:1 to a ``Usuario``."""

from sqlalchemy import Column, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from app.database import Base


class Medico(Base):
    """Professional data for users who practise medicine.

    ``especialidad`` is free text. Values mentioning anesthesiology put the
    doctor in the anesthesiologist pool; general medicine and anesthesiology
    are both excluded from the surgeon pool.

    Attributes:
        id: Primary key.
        usuario_id: Unique FK to ``usuario``.
        cedula: Professional license number.
        especialidad: Specialty label, e.g. "Cirujano General".
    """

    __tablename__ = "medico"

    id = Column(Integer, primary_key=True, autoincrement=True)
    usuario_id = Column(Integer, ForeignKey("usuario.id"), unique=True, nullable=False)
    cedula = Column(String(50), nullable=True)
    especialidad = Column(String(150), nullable=True)

    usuario = relationship("Usuario", back_populates="perfil_medico", lazy="select")
