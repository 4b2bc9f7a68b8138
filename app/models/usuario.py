"""Usuario model — clinic staff account with role-based navigation."""

from sqlalchemy import Boolean, Column, DateTime, Integer, String
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.database import Base


class Usuario(Base):
    """System user. Doctors additionally carry a ``Medico`` profile.

    Roles:
        - Admin: Full access, including user administration.
        - Medico: Clinical documents; sees only own patients.
        - Enfermeria: Schedule and clinical documents.
        - Administrativo: Schedule management and patient registry.

    Attributes:
        id: Primary key.
        login: Unique login name.
        email: Contact email.
        password_hash: Bcrypt hash (never plain text).
        nombre: Given name(s).
        apellido: Family name(s).
        telefono: Contact phone.
        rol: One of ``constants.ROLES``.
        id_hospital: Clinic/site identifier.
        activo: Deactivated accounts cannot log in; rows are never deleted.
        ultimo_acceso: Timestamp of the last successful login.
    """

    __tablename__ = "usuario"

    id = Column(Integer, primary_key=True, autoincrement=True)
    login = Column(String(100), unique=True, nullable=False)
    email = Column(String(200), nullable=True)
    password_hash = Column(String(200), nullable=False)
    nombre = Column(String(150), nullable=False)
    apellido = Column(String(150), nullable=False, default="")
    telefono = Column(String(50), nullable=True)
    rol = Column(String(30), nullable=False)
    # "Admin", "Medico", "Enfermeria", "Administrativo"
    id_hospital = Column(Integer, nullable=False, default=1)
    activo = Column(Boolean, default=True, nullable=False)
    ultimo_acceso = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=func.now(), nullable=False)
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now(), nullable=False)

    # Relationships
    perfil_medico = relationship(
        "Medico",
        back_populates="usuario",
        uselist=False,
        lazy="select",
        cascade="all, delete-orphan",
    )
