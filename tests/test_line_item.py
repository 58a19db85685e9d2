import pytest
from pydantic import ValidationError

from paintbill.models.common import to_amount
from paintbill.models.line_item import DEFAULT_UNIT, UNITS, LineItem


def test_create_sets_quantity_one_and_amount_equal_to_rate():
    item = LineItem.create("Wall Paint", "Sq.ft", 15)
    assert item.id
    assert item.quantity == 1
    assert item.rate == 15
    assert item.amount == 15


def test_create_assigns_unique_ids():
    ids = {LineItem.create("x").id for _ in range(50)}
    assert len(ids) == 50


def test_amount_follows_quantity_and_rate_changes():
    item = LineItem.create("Putty", "Sq.ft", 12)
    item.set_quantity(100)
    assert item.amount == 1200
    item.set_rate(13.5)
    assert item.amount == 100 * 13.5
    item.set_quantity(0)
    assert item.amount == 0


def test_direct_assignment_keeps_amount_consistent():
    item = LineItem.create("Cleaning", "Sq.ft", 4)
    item.quantity = 250
    assert item.amount == 1000
    item.amount = 5
    assert item.amount == 1000


def test_description_and_unit_are_plain_replacements():
    item = LineItem.create("Old", "Sq.ft", 10)
    item.set_quantity(3)
    item.set_description("New").set_unit("Nos")
    assert item.description == "New"
    assert item.unit == "Nos"
    assert item.amount == 30


def test_free_text_unit_is_accepted():
    item = LineItem.create("Scaffolding", "Day", 500)
    assert item.unit == "Day"
    assert DEFAULT_UNIT in UNITS


@pytest.mark.parametrize(
    "raw", ["abc", "", None, "-5", -3, float("nan"), float("inf"), "abc5", "12abc", "2-3", "NaN", "Infinity"]
)
def test_invalid_numeric_input_becomes_zero(raw):
    item = LineItem.create("x", "Nos", 10)
    item.set_rate(raw)
    assert item.rate == 0
    assert item.amount == 0


def test_to_amount_parses_grouped_rupee_strings():
    assert to_amount("₹1,50,000") == 150000
    assert to_amount(" 12.5 ") == 12.5
    assert to_amount("1.2.3") == 0
    assert to_amount(True) == 0


def test_id_is_immutable():
    item = LineItem.create("x")
    with pytest.raises(ValidationError):
        item.id = "other"


def test_stale_persisted_amount_is_rederived():
    item = LineItem.model_validate(
        {"id": "a1", "description": "x", "unit": "Nos", "quantity": 3, "rate": 7, "amount": 999}
    )
    assert item.amount == 21


@pytest.mark.parametrize(
    "raw, expected",
    [("1e3", 1000), ("1.5e2", 150), ("₹ 2,500.50", 2500.5), ("0.75", 0.75)],
)
def test_numeric_text_keeps_its_value(raw, expected):
    assert to_amount(raw) == expected
