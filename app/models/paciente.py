"""Paciente model — patient demographic registry."""

from sqlalchemy import Column, Date, DateTime, Integer, String
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.database import Base


class Paciente(Base):
    """Patient demographic record, independent of any procedure.

    Age is always derived from ``fecha_nacimiento`` at read time.

    Attributes:
        id: Primary key.
        id_hospital: Clinic/site identifier.
        nombre: Given name(s).
        apellido: Family name(s).
        fecha_nacimiento: Birth date.
        sexo: "F" or "M".
        rfc: National tax/ID string.
        telefono: Contact phone.
    """

    __tablename__ = "paciente"

    id = Column(Integer, primary_key=True, autoincrement=True)
    id_hospital = Column(Integer, nullable=False, default=1)
    nombre = Column(String(150), nullable=False)
    apellido = Column(String(150), nullable=False)
    fecha_nacimiento = Column(Date, nullable=True)
    sexo = Column(String(1), nullable=True)
    rfc = Column(String(20), nullable=True)
    telefono = Column(String(50), nullable=True)
    created_at = Column(DateTime, default=func.now(), nullable=False)
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now(), nullable=False)

    procedimientos = relationship(
        "Procedimiento", back_populates="paciente", lazy="select"
    )
