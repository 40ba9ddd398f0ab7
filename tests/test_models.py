import pytest
from pydantic import ValidationError

from storefront_e2e.models import CartLine, CartSnapshot, ScenarioResult


def make_snapshot(subtotal, count_open):
    return CartSnapshot(
        lines=[
            CartLine(name="Blue T-Shirt", quantity=3, unit_price=9.00),
            CartLine(name="Black T-shirt with white stripes", quantity=1, unit_price=10.90),
        ],
        subtotal=subtotal,
        count_open=count_open,
    )


def test_consistent_snapshot():
    snapshot = make_snapshot(37.90, 4)
    assert snapshot.total_items == 4
    assert snapshot.expected_subtotal_cents == 3790
    assert snapshot.is_consistent()
    assert not snapshot.is_empty()


@pytest.mark.parametrize("subtotal, count_open", [(37.89, 4), (37.90, 3)])
def test_inconsistent_snapshot(subtotal, count_open):
    assert not make_snapshot(subtotal, count_open).is_consistent()


def test_empty_snapshot():
    snapshot = CartSnapshot()
    assert snapshot.is_empty()
    assert snapshot.is_consistent()
    assert not CartSnapshot(subtotal=9.0).is_empty()


def test_zero_quantity_line_is_invalid():
    with pytest.raises(ValidationError):
        CartLine(name="Blue T-Shirt", quantity=0, unit_price=9.0)


def test_scenario_result_defaults():
    result = ScenarioResult(name="empty_cart_state", passed=True, elapsed_s=1.5)
    assert result.error is None
