"""
Working list of tube line items.

A TubeList owns its items. Every weight is computed by backend.weights and
rounded to 2 decimals before it is stored; an item whose weight can't be
computed is never added.
"""

import logging
import uuid
from typing import List, Optional

from .errors import LineItemNotFound
from .schemas import TubeLineItem, TubeLineItemOut
from .weights import compute_weight, describe, is_standard_catalog_match

logger = logging.getLogger(__name__)


def new_item_id() -> str:
    return uuid.uuid4().hex


def line_item_view(item: TubeLineItem, price_per_kg: float) -> TubeLineItemOut:
    """Attach label, catalog flag and totals for display/export."""
    total_weight = item.weight_per_tube * item.quantity
    return TubeLineItemOut(
        **item.model_dump(),
        label=describe(item.spec),
        uses_standard_weight=is_standard_catalog_match(item.spec),
        total_weight=round(total_weight, 2),
        price=round(total_weight * price_per_kg, 2),
    )


class TubeList:
    """Ordered collection of TubeLineItem."""

    def __init__(self, items: Optional[List[TubeLineItem]] = None):
        self.items: List[TubeLineItem] = list(items or [])

    def __len__(self):
        return len(self.items)

    def __iter__(self):
        return iter(self.items)

    def get(self, item_id: str) -> TubeLineItem:
        for item in self.items:
            if item.id == item_id:
                return item
        raise LineItemNotFound(item_id)

    def add(self, spec, quantity: float, density: float) -> TubeLineItem:
        """Compute and append. CalculationError propagates; nothing is stored."""
        weight = compute_weight(spec, density)
        item = TubeLineItem(
            id=new_item_id(),
            spec=spec,
            quantity=quantity,
            weight_per_tube=round(weight, 2),
        )
        self.items.append(item)
        logger.info("Added %s tube %s x%s (%.2f kg)", spec.shape, describe(spec), quantity, item.weight_per_tube)
        return item

    def update(self, item_id: str, spec, quantity: float, density: float) -> TubeLineItem:
        """Recompute in place. On CalculationError the item is left unchanged."""
        item = self.get(item_id)
        weight = compute_weight(spec, density)
        item.spec = spec
        item.quantity = quantity
        item.weight_per_tube = round(weight, 2)
        return item

    def remove(self, item_id: str) -> TubeLineItem:
        item = self.get(item_id)
        self.items.remove(item)
        return item

    def duplicate(self, item_id: str) -> TubeLineItem:
        source = self.get(item_id)
        copy = source.model_copy(deep=True, update={"id": new_item_id()})
        self.items.append(copy)
        return copy

    def clear(self) -> int:
        count = len(self.items)
        self.items = []
        return count

    def recalculate(self, density: float) -> None:
        """
        Recompute every item for a new density (material change).
        All-or-nothing: if any item fails, no item is changed.
        """
        weights = [round(compute_weight(item.spec, density), 2) for item in self.items]
        for item, weight in zip(self.items, weights):
            item.weight_per_tube = weight

    def total_weight(self) -> float:
        return sum(item.weight_per_tube * item.quantity for item in self.items)

    def total_price(self, price_per_kg: float) -> float:
        return self.total_weight() * price_per_kg

    def search(self, term: str) -> List[TubeLineItem]:
        """Case-insensitive match on shape or size label."""
        needle = (term or "").lower()
        return [
            item for item in self.items
            if needle in item.spec.shape.lower() or needle in describe(item.spec).lower()
        ]

    def to_json(self) -> list:
        return [item.model_dump(mode="json") for item in self.items]

    @classmethod
    def from_json(cls, data) -> "TubeList":
        return cls([TubeLineItem.model_validate(raw) for raw in data or []])
