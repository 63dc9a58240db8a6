"""Product Catalog.

Product model, persistence, image acquisition and the catalog service.
"""

from catalog_api.catalog.fields import (
    ImageUpload,
    ProductChanges,
    ProductFields,
    ProductInput,
    merge_product_fields,
    parse_value,
)
from catalog_api.catalog.images import (
    ImageSource,
    ReferenceImageSource,
    UploadImageSource,
    create_image_source,
)
from catalog_api.catalog.models import Product
from catalog_api.catalog.repository import (
    BaseProductRepository,
    InMemoryProductRepository,
    ProductRepository,
)
from catalog_api.catalog.service import CatalogService

__all__ = [
    # Models
    "Product",
    # Fields
    "ImageUpload",
    "ProductChanges",
    "ProductFields",
    "ProductInput",
    "merge_product_fields",
    "parse_value",
    # Images
    "ImageSource",
    "ReferenceImageSource",
    "UploadImageSource",
    "create_image_source",
    # Repository
    "BaseProductRepository",
    "InMemoryProductRepository",
    "ProductRepository",
    # Service
    "CatalogService",
]
