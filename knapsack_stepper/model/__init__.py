from .items import (
    Item,
    KnapsackModel,
    sanitize_items,
    sanitize_integer,
    sanitize_name,
    sanitize_number,
)

__all__ = [
    "Item",
    "KnapsackModel",
    "sanitize_items",
    "sanitize_integer",
    "sanitize_name",
    "sanitize_number",
]
