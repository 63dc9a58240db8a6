"""Product API endpoints.

Provides create/list/update/delete over ``/produtos`` and the distinct
category listing at ``/categorias``. Create and update accept either a
JSON body or form data; how the ``imagem`` part is interpreted is up to
the configured image source.
"""

import json
from dataclasses import dataclass
from typing import Annotated

from fastapi import APIRouter, Depends, Request, status
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.datastructures import UploadFile

from catalog_api.api.schemas import (
    ErrorResponse,
    MessageResponse,
    ProductPayload,
    ProductResponse,
)
from catalog_api.catalog.fields import ImageUpload, ProductChanges, ProductInput
from catalog_api.catalog.images import ImageSource
from catalog_api.catalog.models import Product
from catalog_api.catalog.repository import BaseProductRepository, ProductRepository
from catalog_api.catalog.service import CatalogService
from catalog_api.domain.exceptions import ProductValidationError
from catalog_api.infrastructure.database import get_session

router = APIRouter(tags=["Products"])

FORM_CONTENT_TYPES = ("multipart/form-data", "application/x-www-form-urlencoded")
TEXT_FIELDS = ("categoria", "nome", "descricao", "valor")


# ============================================================================
# Dependencies
# ============================================================================


def get_repository(
    session: Annotated[AsyncSession, Depends(get_session)],
) -> BaseProductRepository:
    """Get product repository bound to the request session."""
    return ProductRepository(session)


def get_image_source(request: Request) -> ImageSource:
    """Get the image source selected at startup."""
    return request.app.state.image_source


def get_catalog_service(
    repository: Annotated[BaseProductRepository, Depends(get_repository)],
    image_source: Annotated[ImageSource, Depends(get_image_source)],
) -> CatalogService:
    """Get catalog service."""
    return CatalogService(repository, image_source)


# ============================================================================
# Request Decoding
# ============================================================================


@dataclass
class ProductForm:
    """Decoded create/update request."""

    payload: ProductPayload
    upload: ImageUpload | None = None


async def read_product_form(request: Request) -> ProductForm:
    """Decode a JSON or form body into a product payload.

    Args:
        request: Incoming request.

    Returns:
        Text fields plus the uploaded file, if one was sent.

    Raises:
        ProductValidationError: If the body is not valid JSON or has
            fields of the wrong type.
    """
    content_type = request.headers.get("content-type", "")

    if content_type.startswith(FORM_CONTENT_TYPES):
        form = await request.form()
        # Browsers send unfilled inputs as "", which means "not supplied" here
        data: dict[str, object] = {
            k: form[k] for k in TEXT_FIELDS if k in form and form[k] != ""
        }
        upload = None
        image = form.get("imagem")
        if isinstance(image, UploadFile):
            upload = ImageUpload(
                filename=image.filename or "",
                stream=image.file,
                content_type=image.content_type,
            )
        elif image is not None:
            data["imagem"] = image
        return ProductForm(payload=_validate_payload(data), upload=upload)

    body = await request.body()
    if not body.strip():
        return ProductForm(payload=ProductPayload())

    try:
        decoded = json.loads(body)
    except ValueError:
        raise ProductValidationError("body", "malformed JSON") from None

    if not isinstance(decoded, dict):
        raise ProductValidationError("body", "expected a JSON object")

    return ProductForm(payload=_validate_payload(decoded))


def _validate_payload(data: dict[str, object]) -> ProductPayload:
    try:
        return ProductPayload.model_validate(data)
    except ValidationError as e:
        error = e.errors()[0]
        field = str(error["loc"][0]) if error["loc"] else "body"
        raise ProductValidationError(field, error["msg"]) from None


# ============================================================================
# Converters
# ============================================================================


def product_to_response(product: Product) -> ProductResponse:
    """Convert Product model to response schema."""
    return ProductResponse(
        id=product.id,
        categoria=product.category,
        nome=product.name,
        descricao=product.description,
        valor=product.value,
        imagem=product.image,
        created_at=product.created_at,
        updated_at=product.updated_at,
    )


# ============================================================================
# Endpoints
# ============================================================================


@router.post(
    "/produtos",
    response_model=ProductResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        422: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
    summary="Create product",
    description="Create a product from a JSON body or form data.",
)
async def create_product(
    form: Annotated[ProductForm, Depends(read_product_form)],
    service: Annotated[CatalogService, Depends(get_catalog_service)],
) -> ProductResponse:
    """Create a product.

    Args:
        form: Decoded request body.
        service: Catalog service.

    Returns:
        The created product.
    """
    payload = form.payload
    product = await service.create_product(
        ProductInput(
            category=payload.categoria,
            name=payload.nome,
            description=payload.descricao,
            value=payload.valor,
            image_reference=payload.imagem,
            upload=form.upload,
        )
    )
    return product_to_response(product)


@router.get(
    "/produtos",
    response_model=list[ProductResponse],
    responses={500: {"model": ErrorResponse}},
    summary="List products",
)
async def list_products(
    service: Annotated[CatalogService, Depends(get_catalog_service)],
) -> list[ProductResponse]:
    """List all products."""
    products = await service.list_products()
    return [product_to_response(p) for p in products]


@router.get(
    "/categorias",
    response_model=list[str],
    responses={500: {"model": ErrorResponse}},
    summary="List distinct categories",
)
async def list_categories(
    service: Annotated[CatalogService, Depends(get_catalog_service)],
) -> list[str]:
    """List each category once."""
    return await service.list_categories()


@router.put(
    "/produtos/{product_id}",
    response_model=ProductResponse,
    responses={
        404: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
    summary="Update product",
    description="Partially update a product. Fields that are absent or empty keep their stored value.",
)
async def update_product(
    product_id: str,
    form: Annotated[ProductForm, Depends(read_product_form)],
    service: Annotated[CatalogService, Depends(get_catalog_service)],
) -> ProductResponse:
    """Update a product.

    Args:
        product_id: Product identifier.
        form: Decoded request body.
        service: Catalog service.

    Returns:
        The product with its full, updated state.
    """
    payload = form.payload
    product = await service.update_product(
        product_id,
        ProductChanges(
            category=payload.categoria,
            name=payload.nome,
            description=payload.descricao,
            value=payload.valor,
            image_reference=payload.imagem,
            upload=form.upload,
        ),
    )
    return product_to_response(product)


@router.delete(
    "/produtos/{product_id}",
    response_model=MessageResponse,
    responses={
        404: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
    summary="Delete product",
)
async def delete_product(
    product_id: str,
    service: Annotated[CatalogService, Depends(get_catalog_service)],
) -> MessageResponse:
    """Delete a product permanently."""
    await service.delete_product(product_id)
    return MessageResponse(message="Produto deletado com sucesso")
