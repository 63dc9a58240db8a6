"""Product repositories.

``ProductRepository`` talks to the database through an async SQLAlchemy
session. ``InMemoryProductRepository`` keeps products in a dict and is
used wherever a database is not wanted (tests, local experiments).
"""

from abc import ABC, abstractmethod
from datetime import datetime, timezone
from uuid import uuid4

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from catalog_api.catalog.fields import ProductFields
from catalog_api.catalog.models import Product


class BaseProductRepository(ABC):
    """Persistence interface for products."""

    @abstractmethod
    async def add(self, fields: ProductFields) -> Product:
        """Insert a product and return it with its assigned ID."""

    @abstractmethod
    async def get_by_id(self, product_id: str) -> Product | None:
        """Get product by ID, or None if it does not exist."""

    @abstractmethod
    async def list_all(self) -> list[Product]:
        """List every product in insertion order."""

    @abstractmethod
    async def list_categories(self) -> list[str]:
        """List each distinct category once, in first-seen order."""

    @abstractmethod
    async def update(self, product: Product, fields: ProductFields) -> Product:
        """Store ``fields`` as the new state of ``product``."""

    @abstractmethod
    async def delete(self, product: Product) -> None:
        """Remove a product permanently."""

    @abstractmethod
    async def commit(self) -> None:
        """Make pending writes durable."""


class ProductRepository(BaseProductRepository):
    """Repository for Product database operations.

    Example usage:
        async with async_session_factory() as session:
            repo = ProductRepository(session)
            product = await repo.get_by_id(product_id)
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: Async SQLAlchemy session.
        """
        self.session = session

    async def add(self, fields: ProductFields) -> Product:
        """Save a new product to database.

        Args:
            fields: Product fields.

        Returns:
            Saved product with generated ID and timestamps.
        """
        product = Product(**fields.as_dict())
        self.session.add(product)
        await self.session.flush()
        await self.session.refresh(product)
        return product

    async def get_by_id(self, product_id: str) -> Product | None:
        """Get product by ID.

        Args:
            product_id: Product ID, compared by string equality.

        Returns:
            Product if found, None otherwise.
        """
        query = select(Product).where(Product.id == product_id)
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def list_all(self) -> list[Product]:
        """List all products, oldest first.

        Returns:
            All products.
        """
        query = select(Product).order_by(Product.created_at, Product.id)
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def list_categories(self) -> list[str]:
        """Get list of unique categories.

        Categories are ordered by the creation time of the first product
        that used them.

        Returns:
            List of category labels.
        """
        query = (
            select(Product.category)
            .group_by(Product.category)
            .order_by(func.min(Product.created_at), Product.category)
        )
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def update(self, product: Product, fields: ProductFields) -> Product:
        """Apply fields to a loaded product.

        Args:
            product: Product loaded through this repository's session.
            fields: New field values.

        Returns:
            Updated product.
        """
        for name, value in fields.as_dict().items():
            setattr(product, name, value)
        await self.session.flush()
        await self.session.refresh(product)
        return product

    async def delete(self, product: Product) -> None:
        """Delete a product.

        Args:
            product: Product loaded through this repository's session.
        """
        await self.session.delete(product)
        await self.session.flush()

    async def commit(self) -> None:
        """Commit the session transaction."""
        await self.session.commit()


class InMemoryProductRepository(BaseProductRepository):
    """In-memory repository for products."""

    def __init__(self) -> None:
        self._products: dict[str, Product] = {}

    async def add(self, fields: ProductFields) -> Product:
        """Save a new product."""
        now = datetime.now(timezone.utc)
        product = Product(
            id=str(uuid4()),
            created_at=now,
            updated_at=now,
            **fields.as_dict(),
        )
        self._products[product.id] = product
        return product

    async def get_by_id(self, product_id: str) -> Product | None:
        """Get product by ID."""
        return self._products.get(product_id)

    async def list_all(self) -> list[Product]:
        """List products in insertion order."""
        return list(self._products.values())

    async def list_categories(self) -> list[str]:
        """List distinct categories in first-seen order."""
        return list(dict.fromkeys(p.category for p in self._products.values()))

    async def update(self, product: Product, fields: ProductFields) -> Product:
        """Apply fields to a stored product."""
        for name, value in fields.as_dict().items():
            setattr(product, name, value)
        product.updated_at = datetime.now(timezone.utc)
        self._products[product.id] = product
        return product

    async def delete(self, product: Product) -> None:
        """Delete a product."""
        self._products.pop(product.id, None)

    async def commit(self) -> None:
        """Writes are applied immediately; nothing to commit."""
