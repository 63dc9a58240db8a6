"""API schemas for the catalog API.

Pydantic models for request/response validation and serialization.
Wire names follow the public contract (``categoria``, ``nome``,
``descricao``, ``valor``, ``imagem``).
"""

from datetime import datetime

from pydantic import BaseModel, Field


# ============================================================================
# Common Schemas
# ============================================================================


class ErrorDetail(BaseModel):
    """Detailed error information."""

    field: str | None = Field(default=None, description="Field that caused the error")
    message: str = Field(..., description="Error message")


class ErrorResponse(BaseModel):
    """Standard error response.

    All API errors follow this format for consistency.
    """

    error_code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error message")
    details: list[ErrorDetail] = Field(
        default_factory=list, description="Additional error details"
    )
    request_id: str | None = Field(
        default=None, description="Request ID for correlation"
    )


class MessageResponse(BaseModel):
    """Plain confirmation message."""

    message: str = Field(..., description="Confirmation message")


# ============================================================================
# Product Schemas
# ============================================================================


class ProductPayload(BaseModel):
    """JSON body for creating or updating a product.

    Every field is optional at this level; which ones are required is
    decided by the operation (create needs ``categoria``, ``nome`` and
    ``valor``, update needs none).
    """

    categoria: str | None = Field(default=None, description="Category label")
    nome: str | None = Field(default=None, description="Product name")
    descricao: str | None = Field(default=None, description="Product description")
    valor: str | int | float | None = Field(
        default=None, description="Price, as a number or numeric text (e.g. '12.50')"
    )
    imagem: str | None = Field(
        default=None, description="Image URL (ignored when uploads are enabled)"
    )

    model_config = {"extra": "ignore"}


class ProductResponse(BaseModel):
    """A stored product."""

    id: str = Field(..., description="Unique product identifier")
    categoria: str = Field(..., description="Category label")
    nome: str = Field(..., description="Product name")
    descricao: str | None = Field(default=None, description="Product description")
    valor: float = Field(..., description="Price")
    imagem: str | None = Field(default=None, description="Image reference")
    created_at: datetime = Field(..., description="When the product was created")
    updated_at: datetime = Field(..., description="When the product was last updated")
