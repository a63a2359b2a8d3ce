import math

import pytest

from knapsack_stepper.model.items import (
    Item,
    KnapsackModel,
    sanitize_integer,
    sanitize_items,
    sanitize_name,
    sanitize_number,
)


@pytest.mark.parametrize("raw, expected", [
    (5, 5.0),
    ("3.5", 3.5),
    ("abc", 0.0),
    ("", 0.0),
    (None, 0.0),
    (-4, 0.0),
    (float("nan"), 0.0),
    (math.inf, 0.0),
])
def test_sanitize_number(raw, expected):
    assert sanitize_number(raw) == expected


def test_sanitize_integer_truncates():
    assert sanitize_integer("7.9") == 7
    assert sanitize_integer("-2") == 0
    assert isinstance(sanitize_integer(3.0), int)


def test_sanitize_name_placeholder():
    assert sanitize_name("  ", 2) == "Item 3"
    assert sanitize_name(None, 0) == "Item 1"
    assert sanitize_name(" B ", 1) == "B"


def test_sanitize_items_keeps_order_and_coerces():
    raw = [{"name": "", "value": "x", "weight": "4"}, {"name": "Z", "value": 2.5}]
    items = sanitize_items(raw)
    assert items == [Item("Item 1", 0.0, 4.0), Item("Z", 2.5, 0.0)]
    assert sanitize_items(raw, integral=True)[1] == Item("Z", 2, 0)


def test_ratio_is_zero_for_weightless_items():
    assert Item("free", 5, 0).ratio == 0
    assert Item("A", 6, 2).ratio == 3


def test_mutations_notify_listeners():
    model = KnapsackModel(capacity=10)
    calls = []
    model.subscribe(lambda: calls.append(len(model)))

    idx = model.add_item()
    model.update_item(idx, "name", "A")
    model.set_capacity("12")
    model.delete_item(idx)

    assert calls == [1, 1, 1, 0]
    assert model.capacity() == 12.0


def test_add_item_uses_new_row_defaults():
    model = KnapsackModel()
    model.add_item()
    assert model.raw_items[0] == {"name": "", "value": 1, "weight": 1}
    assert model.items() == [Item("Item 1", 1.0, 1.0)]


def test_contract_violations_raise():
    model = KnapsackModel([{"name": "A", "value": 1, "weight": 1}])
    with pytest.raises(ValueError):
        model.update_item(0, "colour", "red")
    with pytest.raises(IndexError):
        model.update_item(3, "value", 1)
    with pytest.raises(IndexError):
        model.delete_item(-1)


def test_raw_input_is_not_mutated_through_accessors():
    model = KnapsackModel([{"name": "A", "value": 1, "weight": 1}])
    model.raw_items[0]["value"] = 99
    assert model.items()[0].value == 1


def test_capacity_clamped_and_truncated():
    model = KnapsackModel(capacity="-3")
    assert model.capacity() == 0
    model.set_capacity("7.5")
    assert model.capacity() == 7.5
    assert model.capacity(integral=True) == 7
