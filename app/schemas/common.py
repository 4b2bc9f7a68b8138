"""
Shared Pydantic v2 schemas reused across multiple modules.

Provides the pagination and message envelopes so that each domain module
can compose them without duplicating field definitions.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class PaginationParams(BaseModel):
    """Pagination parameters for list endpoints.

    Attributes:
        page: 1-based page number.
        page_size: Number of rows per page (capped at 200).
    """

    page: int = Field(default=1, ge=1, description="Número de página (base 1).")
    page_size: int = Field(
        default=10,
        ge=1,
        le=200,
        description="Registros por página (máximo 200).",
    )


class MessageResponse(BaseModel):
    """Generic envelope for write operations that return no resource.

    Attributes:
        success: ``True`` when the operation completed.
        message: Short human-readable result summary.
    """

    success: bool = Field(default=True)
    message: str = Field(..., description="Resumen del resultado de la operación.")
