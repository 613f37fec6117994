"""Unit tests for ``BaseModel`` behaviour (exercised through Product)."""

from decimal import Decimal

import pytest

from modules.products.models import Product

pytestmark = pytest.mark.unit


class TestBaseModel:
    def test_uuid7_primary_key_assigned(self):
        product = Product.objects.create(name="Cable", price=Decimal("5.00"))
        assert product.id is not None
        assert product.id.version == 7

    def test_update_fields_refreshes_updated_at(self):
        product = Product.objects.create(name="Lamp", price=Decimal("20.00"))
        before = product.updated_at

        product.name = "Desk Lamp"
        product.save(update_fields=["name"])
        product.refresh_from_db()

        assert product.name == "Desk Lamp"
        assert product.updated_at > before
