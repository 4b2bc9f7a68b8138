"""FotoProcedimiento model — append-only photo gallery of a procedure."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.database import Base


class FotoProcedimiento(Base):
    """One clinical photo. Never edited; removed only with its procedure.

    Attributes:
        id: Primary key; also defines the gallery order.
        procedimiento_id: FK to Procedimiento.
        ruta: File path relative to ``FOTOS_DIR``.
        nombre_original: Filename sent by the client.
        content_type: MIME type of the stored image.
        descripcion: Optional caption, ``""`` when not given.
    """

    __tablename__ = "foto_procedimiento"

    id = Column(Integer, primary_key=True, autoincrement=True)
    procedimiento_id = Column(
        Integer, ForeignKey("procedimiento.id"), nullable=False, index=True
    )
    ruta = Column(String(500), nullable=False)
    nombre_original = Column(String(300), nullable=True)
    content_type = Column(String(100), nullable=True)
    descripcion = Column(String(1000), nullable=False, default="")
    created_at = Column(DateTime, default=func.now(), nullable=False)

    procedimiento = relationship("Procedimiento", back_populates="fotos", lazy="select")
