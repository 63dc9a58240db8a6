"""Catalog service for product operations.

High-level service that combines repository operations with the
validation and merge rules of the catalog.
"""

from collections.abc import Iterator
from contextlib import contextmanager

import structlog
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm.exc import StaleDataError

from catalog_api.catalog.fields import (
    ProductChanges,
    ProductFields,
    ProductInput,
    build_product_fields,
    merge_product_fields,
)
from catalog_api.catalog.images import ImageSource
from catalog_api.catalog.models import Product
from catalog_api.catalog.repository import BaseProductRepository
from catalog_api.domain.exceptions import ProductNotFoundError, StorageError

logger = structlog.get_logger()


@contextmanager
def storage_errors(operation: str, product_id: str | None = None) -> Iterator[None]:
    """Translate database failures into domain errors.

    Args:
        operation: Operation name, used in logs and the error.
        product_id: Target product, if the operation has one.

    Raises:
        ProductNotFoundError: If the row vanished under a concurrent delete.
        StorageError: For any other SQLAlchemy failure.
    """
    try:
        yield
    except StaleDataError as e:
        logger.warning("Product disappeared mid-operation", operation=operation, product_id=product_id)
        raise ProductNotFoundError(product_id or "") from e
    except SQLAlchemyError as e:
        logger.exception("Storage failure", operation=operation, product_id=product_id)
        raise StorageError(operation) from e


class CatalogService:
    """Service for catalog operations.

    Example usage:
        async with async_session_factory() as session:
            service = CatalogService(
                ProductRepository(session),
                ReferenceImageSource(),
            )
            product = await service.create_product(
                ProductInput(category="Bebidas", name="Suco", value="12.50"),
            )
    """

    def __init__(
        self,
        repository: BaseProductRepository,
        image_source: ImageSource,
    ) -> None:
        """Initialize service.

        Args:
            repository: Product persistence.
            image_source: Strategy that resolves product images.
        """
        self.repository = repository
        self.image_source = image_source

    async def create_product(self, data: ProductInput) -> Product:
        """Create a product.

        Fields are validated before the image is stored, so a rejected
        request never leaves an orphan upload behind.

        Args:
            data: Create input.

        Returns:
            The new product with its assigned ID.

        Raises:
            ProductValidationError: If the input is invalid.
            StorageError: If the database or blob store fails.
        """
        fields = build_product_fields(data, image=None)
        image = await self.image_source.acquire(data.image_reference, data.upload)
        if image is not None:
            fields = ProductFields(**{**fields.as_dict(), "image": image})

        with storage_errors("create"):
            product = await self.repository.add(fields)
            await self.repository.commit()

        logger.info("Product created", product_id=product.id, category=product.category)
        return product

    async def list_products(self) -> list[Product]:
        """List all products.

        Returns:
            Every product, in storage order.
        """
        with storage_errors("list"):
            return await self.repository.list_all()

    async def list_categories(self) -> list[str]:
        """List distinct categories.

        Returns:
            Category labels, each exactly once.
        """
        with storage_errors("list_categories"):
            return await self.repository.list_categories()

    async def update_product(self, product_id: str, changes: ProductChanges) -> Product:
        """Apply a partial update to a product.

        Args:
            product_id: Target product ID.
            changes: Fields to change; unsupplied fields are kept.

        Returns:
            The product with its full, updated state.

        Raises:
            ProductNotFoundError: If the product does not exist.
            ProductValidationError: If a supplied value is invalid.
            StorageError: If the database or blob store fails.
        """
        product = await self._get_existing(product_id, "update")

        # Validate before touching the blob store
        current = ProductFields.from_product(product)
        merged = merge_product_fields(current, changes)

        image = await self.image_source.acquire(changes.image_reference, changes.upload)
        if image is not None:
            merged = merge_product_fields(current, changes, image=image)

        with storage_errors("update", product_id):
            product = await self.repository.update(product, merged)
            await self.repository.commit()

        logger.info(
            "Product updated",
            product_id=product_id,
            changed=[k for k, v in merged.as_dict().items() if current.as_dict()[k] != v],
        )
        return product

    async def delete_product(self, product_id: str) -> None:
        """Delete a product permanently.

        Args:
            product_id: Target product ID.

        Raises:
            ProductNotFoundError: If the product does not exist.
            StorageError: If the database fails.
        """
        product = await self._get_existing(product_id, "delete")

        with storage_errors("delete", product_id):
            await self.repository.delete(product)
            await self.repository.commit()

        logger.info("Product deleted", product_id=product_id)

    async def _get_existing(self, product_id: str, operation: str) -> Product:
        with storage_errors(operation, product_id):
            product = await self.repository.get_by_id(product_id)

        if product is None:
            logger.info("Product not found", operation=operation, product_id=product_id)
            raise ProductNotFoundError(product_id)
        return product
