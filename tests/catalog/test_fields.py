"""Tests for value parsing and merge-on-update."""

import math

import pytest

from catalog_api.catalog.fields import (
    ProductChanges,
    ProductFields,
    ProductInput,
    build_product_fields,
    merge_product_fields,
    parse_value,
)
from catalog_api.domain.exceptions import ProductValidationError


@pytest.fixture
def stored() -> ProductFields:
    """Fields of an existing product."""
    return ProductFields(
        category="Bebidas",
        name="Suco de Laranja",
        description="500ml",
        value=12.5,
        image="https://img.example.com/suco.png",
    )


class TestParseValue:
    """Tests for parse_value."""

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("12.50", 12.5),
            (" 7 ", 7.0),
            ("0", 0.0),
            (3, 3.0),
            (9.99, 9.99),
            ("-1.5", -1.5),
        ],
    )
    def test_parses_numbers_and_numeric_text(self, raw, expected):
        """Numbers and numeric strings become floats."""
        parsed = parse_value(raw)
        assert isinstance(parsed, float)
        assert parsed == expected

    @pytest.mark.parametrize("raw", ["abc", "12,50", "1.2.3", "R$ 10"])
    def test_rejects_non_numeric_text(self, raw):
        """Text that is not a number is rejected."""
        with pytest.raises(ProductValidationError) as exc_info:
            parse_value(raw)
        assert exc_info.value.field == "valor"

    @pytest.mark.parametrize("raw", [None, "", "   "])
    def test_rejects_missing_value(self, raw):
        """A missing value is rejected."""
        with pytest.raises(ProductValidationError):
            parse_value(raw)

    @pytest.mark.parametrize("raw", ["nan", "inf", float("inf"), math.nan])
    def test_rejects_non_finite(self, raw):
        """NaN and infinity are never stored."""
        with pytest.raises(ProductValidationError):
            parse_value(raw)

    def test_rejects_bool(self):
        """Booleans are not prices."""
        with pytest.raises(ProductValidationError):
            parse_value(True)

    def test_rejects_integer_too_large_for_float(self):
        """An integer beyond float range is a validation error."""
        with pytest.raises(ProductValidationError) as exc_info:
            parse_value(10**400)
        assert exc_info.value.field == "valor"


class TestBuildProductFields:
    """Tests for create validation."""

    def test_builds_fields(self):
        """Valid input is parsed into stored fields."""
        fields = build_product_fields(
            ProductInput(category="Bebidas", name="Suco", description=None, value="12.50"),
            image="https://img.example.com/a.png",
        )
        assert fields == ProductFields(
            category="Bebidas",
            name="Suco",
            description=None,
            value=12.5,
            image="https://img.example.com/a.png",
        )

    @pytest.mark.parametrize(
        ("data", "field"),
        [
            (ProductInput(category="", name="Suco", value="1"), "categoria"),
            (ProductInput(category=None, name="Suco", value="1"), "categoria"),
            (ProductInput(category="Bebidas", name="  ", value="1"), "nome"),
            (ProductInput(category="Bebidas", name="Suco", value=None), "valor"),
            (ProductInput(category="Bebidas", name="Suco", value="dez"), "valor"),
        ],
    )
    def test_rejects_invalid_input(self, data, field):
        """Missing required fields or bad values raise with the field name."""
        with pytest.raises(ProductValidationError) as exc_info:
            build_product_fields(data, image=None)
        assert exc_info.value.field == field


class TestMergeProductFields:
    """Tests for merge-on-update."""

    def test_only_name_changes(self, stored):
        """Supplying only a name leaves every other field alone."""
        merged = merge_product_fields(stored, ProductChanges(name="X"))

        assert merged.name == "X"
        assert merged.category == stored.category
        assert merged.description == stored.description
        assert merged.value == stored.value
        assert merged.image == stored.image

    def test_no_changes_is_identity(self, stored):
        """An empty update keeps everything."""
        assert merge_product_fields(stored, ProductChanges()) == stored

    @pytest.mark.parametrize("value", [None, "", "  "])
    def test_absent_or_empty_value_keeps_stored_value(self, stored, value):
        """Absent or empty value does not touch the stored number."""
        merged = merge_product_fields(stored, ProductChanges(value=value))
        assert merged.value == 12.5

    def test_value_is_parsed_when_supplied(self, stored):
        """A supplied value is parsed to float."""
        merged = merge_product_fields(stored, ProductChanges(value="20"))
        assert merged.value == 20.0

    def test_zero_value_is_applied(self, stored):
        """Zero is a real value, not "no change"."""
        merged = merge_product_fields(stored, ProductChanges(value=0))
        assert merged.value == 0.0

    def test_invalid_value_raises(self, stored):
        """A supplied non-numeric value is rejected."""
        with pytest.raises(ProductValidationError):
            merge_product_fields(stored, ProductChanges(value="abc"))

    @pytest.mark.parametrize("blank", ["", "   "])
    def test_blank_text_keeps_stored_text(self, stored, blank):
        """Blank category or name is treated as not supplied."""
        merged = merge_product_fields(stored, ProductChanges(category=blank, name=blank))
        assert merged.category == stored.category
        assert merged.name == stored.name

    def test_empty_description_clears_it(self, stored):
        """An explicitly supplied empty description is stored."""
        merged = merge_product_fields(stored, ProductChanges(description=""))
        assert merged.description == ""

    def test_absent_description_keeps_it(self, stored):
        """An absent description is kept."""
        merged = merge_product_fields(stored, ProductChanges(category="Sucos"))
        assert merged.description == "500ml"
        assert merged.category == "Sucos"

    def test_image_replaced_only_when_resolved(self, stored):
        """The image changes only when a new reference is passed in."""
        kept = merge_product_fields(stored, ProductChanges(name="Y"))
        replaced = merge_product_fields(stored, ProductChanges(), image="/uploads/new.png")

        assert kept.image == stored.image
        assert replaced.image == "/uploads/new.png"

    def test_image_reference_in_changes_is_not_applied_directly(self, stored):
        """Raw image input goes through the image source, never straight in."""
        merged = merge_product_fields(
            stored, ProductChanges(image_reference="https://other.example.com/x.png")
        )
        assert merged.image == stored.image
