# knapsack_stepper/model/items.py
# -*- coding: utf-8 -*-


'''
Item and capacity model.

Raw, editable input (name/value/weight triples and a capacity) is kept as
entered. Every algorithm reads a sanitized copy produced by the pure
functions below, which never fail: anything non-numeric, negative, NaN or
infinite becomes 0 and blank names become positional placeholders.
'''

from __future__ import annotations
import math
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Tuple, Union

logger = logging.getLogger(__name__)

Number = Union[int, float]

ITEM_FIELDS = ('name', 'value', 'weight')


# --- Sanitization (pure) ---

def sanitize_number(raw: Any) -> float:
    """Coerce raw input to a finite, non-negative float (0.0 when invalid)."""
    try:
        number = float(raw)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(number) or number < 0:
        return 0.0
    return number


def sanitize_integer(raw: Any) -> int:
    """Like sanitize_number, truncated to an int (integer inputs of the 0/1 engine)."""
    return int(sanitize_number(raw))


def sanitize_name(raw: Any, index: int) -> str:
    name = "" if raw is None else str(raw).strip()
    return name or f"Item {index + 1}"


@dataclass(frozen=True)
class Item:
    """
    A sanitized knapsack item.

    Attributes:
        name (str): Display name, never blank.
        value (int | float): Non-negative value.
        weight (int | float): Non-negative weight.
    """
    name: str
    value: Number
    weight: Number

    @property
    def ratio(self) -> float:
        """Value per unit of weight; 0 for weightless items."""
        return self.value / self.weight if self.weight > 0 else 0.0


def sanitize_items(raw_items: Iterable[Dict[str, Any]], integral: bool = False) -> List[Item]:
    """
    Converts raw item dicts into sanitized Items, preserving order.

    Args:
        raw_items: Dicts with (possibly missing or invalid) 'name', 'value', 'weight'.
        integral (bool): Truncate value and weight to integers (0/1 DP input).

    Returns:
        List[Item]: One Item per raw entry.
    """
    coerce = sanitize_integer if integral else sanitize_number
    return [
        Item(
            name=sanitize_name(raw.get('name'), idx),
            value=coerce(raw.get('value')),
            weight=coerce(raw.get('weight')),
        )
        for idx, raw in enumerate(raw_items)
    ]


# --- Editable model ---

class KnapsackModel:
    """
    Editable item list plus capacity.

    Every mutation notifies the subscribed listeners so that dependent engines
    can re-initialize; the model itself never touches engine state.
    """

    def __init__(self, items: Optional[Iterable[Dict[str, Any]]] = None, capacity: Any = 0,
                 new_item_defaults: Optional[Dict[str, Any]] = None):
        self._raw_items: List[Dict[str, Any]] = [self._copy_entry(raw) for raw in (items or [])]
        self._raw_capacity = capacity
        self._new_item_defaults = dict(new_item_defaults or {'name': "", 'value': 1, 'weight': 1})
        self._listeners: List[Callable[[], None]] = []

    @classmethod
    def from_tuples(cls, items: Sequence[Tuple[Any, Any, Any]], capacity: Any) -> "KnapsackModel":
        """Build a model from (name, value, weight) tuples, e.g. a loaded instance file."""
        return cls([{'name': n, 'value': v, 'weight': w} for n, v, w in items], capacity)

    @staticmethod
    def _copy_entry(raw: Dict[str, Any]) -> Dict[str, Any]:
        return {f: raw.get(f) for f in ITEM_FIELDS}

    # --- Listeners ---

    def subscribe(self, listener: Callable[[], None]) -> None:
        self._listeners.append(listener)

    def _notify(self) -> None:
        for listener in self._listeners:
            listener()

    # --- Mutations ---

    def add_item(self, name: Any = None, value: Any = None, weight: Any = None) -> int:
        """Appends an item (defaults: the configured new-item row). Returns its index."""
        entry = dict(self._new_item_defaults)
        for key, given in (('name', name), ('value', value), ('weight', weight)):
            if given is not None:
                entry[key] = given
        self._raw_items.append(self._copy_entry(entry))
        logger.debug(f"Added item #{len(self._raw_items) - 1}: {entry}")
        self._notify()
        return len(self._raw_items) - 1

    def update_item(self, index: int, field: str, value: Any) -> None:
        if field not in ITEM_FIELDS:
            raise ValueError(f"Unknown item field '{field}'. Expected one of {ITEM_FIELDS}.")
        self._check_index(index)
        self._raw_items[index][field] = value
        logger.debug(f"Updated item #{index}: {field}={value!r}")
        self._notify()

    def delete_item(self, index: int) -> None:
        self._check_index(index)
        removed = self._raw_items.pop(index)
        logger.debug(f"Deleted item #{index}: {removed}")
        self._notify()

    def set_capacity(self, value: Any) -> None:
        self._raw_capacity = value
        logger.debug(f"Capacity set to {value!r}")
        self._notify()

    def _check_index(self, index: int) -> None:
        if not 0 <= index < len(self._raw_items):
            raise IndexError(f"Item index {index} out of range for {len(self._raw_items)} items.")

    # --- Read access ---

    @property
    def raw_items(self) -> Tuple[Dict[str, Any], ...]:
        return tuple(dict(raw) for raw in self._raw_items)

    @property
    def raw_capacity(self) -> Any:
        return self._raw_capacity

    def items(self, integral: bool = False) -> List[Item]:
        return sanitize_items(self._raw_items, integral=integral)

    def capacity(self, integral: bool = False) -> Number:
        return sanitize_integer(self._raw_capacity) if integral else sanitize_number(self._raw_capacity)

    def __len__(self) -> int:
        return len(self._raw_items)
