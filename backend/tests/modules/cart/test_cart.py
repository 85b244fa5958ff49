"""Tests for the cart reducer and fee calculation."""

from decimal import Decimal

import pytest

from modules.cart.cart import Cart, calculate_platform_fee
from modules.cart.models import CartItem


def item(product_id: str = "p1", price: str = "10.00", quantity: int = 1, **fields) -> CartItem:
    return CartItem(product_id=product_id, name=f"Product {product_id}", price=Decimal(price), quantity=quantity, **fields)


class TestPlatformFee:
    @pytest.mark.parametrize(
        "subtotal,expected",
        [
            ("0.00", "0.00"),
            ("100.00", "2.00"),
            ("10.25", "0.21"),  # 0.205 rounds half-up
            ("0.24", "0.00"),
            ("0.25", "0.01"),
        ],
    )
    def test_default_rate(self, subtotal, expected):
        assert calculate_platform_fee(Decimal(subtotal)) == Decimal(expected)

    def test_custom_rate(self):
        assert calculate_platform_fee(Decimal("50.00"), Decimal("0.05")) == Decimal("2.50")


class TestCartOperations:
    def test_empty(self):
        cart = Cart()

        assert len(cart) == 0
        assert cart.item_count == 0
        assert cart.subtotal == Decimal("0.00")
        assert cart.platform_fee == Decimal("0.00")

    def test_add_new_product_starts_at_one(self):
        cart = Cart()
        cart.add(item("p1", quantity=5))

        assert len(cart) == 1
        assert cart.items[0].quantity == 1

    def test_add_existing_product_increments_by_one(self):
        cart = Cart()
        cart.add(item("p1", quantity=2))
        cart.add(item("p1", quantity=3))

        assert len(cart) == 1
        assert cart.items[0].quantity == 2
        assert cart.item_count == 2

    def test_merge_sums_quantities(self):
        cart = Cart()
        cart.merge(item("p1", quantity=2))
        cart.merge(item("p1", quantity=3))

        assert len(cart) == 1
        assert cart.items[0].quantity == 5

    def test_snapshot_merges_repeated_lines(self):
        cart = Cart([item("p1", quantity=2), item("p2"), item("p1", quantity=4)])

        assert len(cart) == 2
        assert cart.item_count == 7

    def test_add_does_not_alias_caller_item(self):
        original = item("p1", quantity=1)
        cart = Cart([original])
        cart.add(item("p1", quantity=1))

        assert original.quantity == 1
        assert cart.items[0].quantity == 2

    def test_remove(self):
        cart = Cart([item("p1"), item("p2")])
        cart.remove("p1")

        assert "p1" not in cart
        assert "p2" in cart

    def test_remove_unknown_is_noop(self):
        cart = Cart([item("p1")])
        cart.remove("nope")

        assert len(cart) == 1

    def test_set_quantity(self):
        cart = Cart([item("p1", quantity=1)])
        cart.set_quantity("p1", 4)

        assert cart.items[0].quantity == 4

    @pytest.mark.parametrize("quantity", [0, -1])
    def test_set_quantity_zero_or_less_removes(self, quantity):
        cart = Cart([item("p1")])
        cart.set_quantity("p1", quantity)

        assert "p1" not in cart

    def test_set_quantity_unknown_is_ignored(self):
        cart = Cart([item("p1")])
        cart.set_quantity("p2", 3)

        assert "p2" not in cart
        assert len(cart) == 1

    def test_clear(self):
        cart = Cart([item("p1"), item("p2")])
        cart.clear()

        assert len(cart) == 0


class TestCartTotals:
    def test_subtotal_and_fee(self):
        cart = Cart([item("p1", "19.99", 2), item("p2", "5.50", 1)])

        assert cart.subtotal == Decimal("45.48")
        assert cart.platform_fee == Decimal("0.91")
        assert cart.total == cart.subtotal

    def test_no_float_drift(self):
        cart = Cart([item(f"p{i}", "0.10") for i in range(3)])

        assert cart.subtotal == Decimal("0.30")

    def test_summary(self):
        cart = Cart([item("p1", "10.00", 1), item("p1", "10.00", 1), item("p2", "2.50", 4)])

        summary = cart.summary()

        assert [i.product_id for i in summary.items] == ["p1", "p2"]
        assert summary.item_count == 6
        assert summary.subtotal == Decimal("30.00")
        assert summary.platform_fee == Decimal("0.60")
        assert summary.total == Decimal("30.00")

    def test_summary_serializes_money_as_strings(self):
        summary = Cart([item("p1", "3.5", 1)], fee_rate=Decimal("0.1")).summary()

        data = summary.model_dump(by_alias=True)
        assert data["subtotal"] == "3.50"
        assert data["platformFee"] == "0.35"
        assert data["items"][0]["price"] == "3.50"


class TestCartItem:
    def test_rejects_fractional_cents(self):
        with pytest.raises(ValueError):
            CartItem(product_id="p1", price=Decimal("1.005"))

    def test_rejects_negative_price(self):
        with pytest.raises(ValueError):
            CartItem(product_id="p1", price=Decimal("-1.00"))

    def test_rejects_zero_quantity(self):
        with pytest.raises(ValueError):
            CartItem(product_id="p1", price=Decimal("1.00"), quantity=0)
