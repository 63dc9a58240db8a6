"""Product field handling: value parsing and merge-on-update.

Everything here is pure; no IO and no session access. Update payloads
use ``None`` for "not supplied", so an absent field and a supplied one
are never confused.
"""

import math
from dataclasses import asdict, dataclass
from typing import TYPE_CHECKING, Any, BinaryIO

from catalog_api.domain.exceptions import ProductValidationError

if TYPE_CHECKING:
    from catalog_api.catalog.models import Product


RawValue = str | int | float


@dataclass(frozen=True)
class ImageUpload:
    """An uploaded image file.

    Attributes:
        filename: Original client filename.
        stream: Binary stream with the file contents.
        content_type: Declared MIME type, if any.
    """

    filename: str
    stream: BinaryIO
    content_type: str | None = None


@dataclass(frozen=True)
class ProductFields:
    """The persisted, user-editable fields of a product."""

    category: str
    name: str
    description: str | None
    value: float
    image: str | None

    @classmethod
    def from_product(cls, product: "Product") -> "ProductFields":
        """Snapshot the editable fields of a stored product."""
        return cls(
            category=product.category,
            name=product.name,
            description=product.description,
            value=product.value,
            image=product.image,
        )

    def as_dict(self) -> dict[str, Any]:
        """Convert to a plain dict keyed by attribute name."""
        return asdict(self)


@dataclass(frozen=True)
class ProductInput:
    """Input for creating a product.

    Attributes:
        category: Category label.
        name: Product name.
        description: Optional description.
        value: Raw price, number or numeric text.
        image_reference: Pre-existing image reference, if supplied.
        upload: Uploaded image file, if supplied.
    """

    category: str | None = None
    name: str | None = None
    description: str | None = None
    value: RawValue | None = None
    image_reference: str | None = None
    upload: ImageUpload | None = None


@dataclass(frozen=True)
class ProductChanges:
    """Partial update for a product.

    Every attribute is optional; ``None`` means "not supplied" and keeps
    the stored value.
    """

    category: str | None = None
    name: str | None = None
    description: str | None = None
    value: RawValue | None = None
    image_reference: str | None = None
    upload: ImageUpload | None = None


def has_text(value: str | None) -> bool:
    """Check that a text field carries a non-blank value."""
    return value is not None and value.strip() != ""


def parse_value(raw: RawValue | None, field: str = "valor") -> float:
    """Parse a raw price into a finite float.

    Args:
        raw: Number or numeric text (e.g. ``"12.50"``).
        field: Wire name used in error details.

    Returns:
        The parsed value.

    Raises:
        ProductValidationError: If the value is missing, not numeric,
            or not finite.
    """
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        raise ProductValidationError(field, "a numeric value is required", raw)

    # bool is an int subclass but never a price
    if isinstance(raw, bool):
        raise ProductValidationError(field, "must be a number", raw)

    if isinstance(raw, (int, float)):
        try:
            parsed = float(raw)
        except OverflowError:
            raise ProductValidationError(field, "must be a finite number", raw) from None
    elif isinstance(raw, str):
        try:
            parsed = float(raw.strip())
        except ValueError:
            raise ProductValidationError(field, "must be a number", raw) from None
    else:
        raise ProductValidationError(field, "must be a number", raw)

    if not math.isfinite(parsed):
        raise ProductValidationError(field, "must be a finite number", raw)

    return parsed


def build_product_fields(data: ProductInput, image: str | None) -> ProductFields:
    """Validate create input and produce the fields to store.

    Args:
        data: Create input.
        image: Resolved image reference (or None).

    Returns:
        Fields for the new product.

    Raises:
        ProductValidationError: If a required field is missing or invalid.
    """
    if data.category is None or not data.category.strip():
        raise ProductValidationError("categoria", "must not be empty", data.category)
    if data.name is None or not data.name.strip():
        raise ProductValidationError("nome", "must not be empty", data.name)

    return ProductFields(
        category=data.category,
        name=data.name,
        description=data.description,
        value=parse_value(data.value),
        image=image,
    )


def _pick_text(new: str | None, old: str) -> str:
    return new if new is not None and new.strip() else old


def merge_product_fields(
    current: ProductFields,
    changes: ProductChanges,
    image: str | None = None,
) -> ProductFields:
    """Merge a partial update into the stored fields.

    A supplied, non-blank value replaces the stored one; anything absent
    or blank keeps it. ``description`` is the exception: an explicitly
    supplied empty string clears it. ``value`` is parsed only when
    supplied.

    Args:
        current: Stored fields.
        changes: Partial update.
        image: Newly resolved image reference, or None to keep the old one.

    Returns:
        The merged fields.

    Raises:
        ProductValidationError: If a supplied value is not numeric.
    """
    value = current.value
    if changes.value is not None and not (
        isinstance(changes.value, str) and not changes.value.strip()
    ):
        value = parse_value(changes.value)

    return ProductFields(
        category=_pick_text(changes.category, current.category),
        name=_pick_text(changes.name, current.name),
        description=(
            changes.description if changes.description is not None else current.description
        ),
        value=value,
        image=image if has_text(image) else current.image,
    )
