"""
MS pipe list: the MS calculator's own working list.

Items are picked from the chart by inch label and wall; weights come from
backend.ms_pipe and are stored rounded to 3 decimals.
"""

import logging
from typing import List, Optional

from .errors import LineItemNotFound
from .ms_pipe import pipe_length_meters, weight_for_size
from .schemas import MSPipeCreate, MSPipeItem, MSPipeItemOut
from .tube_list import new_item_id

logger = logging.getLogger(__name__)


def pipe_label(item) -> str:
    return f"{item.size} ({item.shape})"


def pipe_item_view(item: MSPipeItem, price_per_kg: float) -> MSPipeItemOut:
    total_weight = item.weight_per_pipe * item.quantity
    return MSPipeItemOut(
        **item.model_dump(),
        label=pipe_label(item),
        price_per_pipe=round(item.weight_per_pipe * price_per_kg, 2),
        total_weight=round(total_weight, 3),
        price=round(total_weight * price_per_kg, 2),
    )


def _weigh(pipe: MSPipeCreate, density: float) -> float:
    return round(weight_for_size(pipe.shape, pipe.size, pipe.thickness, pipe.custom_length_inches, density), 3)


class PipeList:
    """Ordered collection of MSPipeItem."""

    def __init__(self, items: Optional[List[MSPipeItem]] = None):
        self.items: List[MSPipeItem] = list(items or [])

    def __len__(self):
        return len(self.items)

    def __iter__(self):
        return iter(self.items)

    def get(self, item_id: str) -> MSPipeItem:
        for item in self.items:
            if item.id == item_id:
                return item
        raise LineItemNotFound(item_id)

    def add(self, pipe: MSPipeCreate, density: float) -> MSPipeItem:
        """KeyError for an unknown size, CalculationError for a bad wall; nothing is stored."""
        weight = _weigh(pipe, density)
        item = MSPipeItem(
            **pipe.model_dump(),
            id=new_item_id(),
            length_meters=pipe_length_meters(pipe.custom_length_inches),
            weight_per_pipe=weight,
        )
        self.items.append(item)
        logger.info("Added MS pipe %s x%d (%.3f kg)", pipe_label(item), item.quantity, weight)
        return item

    def update(self, item_id: str, pipe: MSPipeCreate, density: float) -> MSPipeItem:
        item = self.get(item_id)
        weight = _weigh(pipe, density)
        updated = MSPipeItem(
            **pipe.model_dump(),
            id=item.id,
            length_meters=pipe_length_meters(pipe.custom_length_inches),
            weight_per_pipe=weight,
        )
        self.items[self.items.index(item)] = updated
        return updated

    def remove(self, item_id: str) -> MSPipeItem:
        item = self.get(item_id)
        self.items.remove(item)
        return item

    def duplicate(self, item_id: str) -> MSPipeItem:
        copy = self.get(item_id).model_copy(deep=True, update={"id": new_item_id()})
        self.items.append(copy)
        return copy

    def clear(self) -> int:
        count = len(self.items)
        self.items = []
        return count

    def recalculate(self, density: float) -> None:
        """All-or-nothing, like TubeList.recalculate."""
        weights = [_weigh(item, density) for item in self.items]
        for item, weight in zip(self.items, weights):
            item.weight_per_pipe = weight

    def total_weight(self) -> float:
        return sum(item.weight_per_pipe * item.quantity for item in self.items)

    def total_price(self, price_per_kg: float) -> float:
        return self.total_weight() * price_per_kg

    def search(self, term: str) -> List[MSPipeItem]:
        needle = (term or "").lower()
        return [item for item in self.items if needle in pipe_label(item).lower()]

    def to_json(self) -> list:
        return [item.model_dump(mode="json") for item in self.items]

    @classmethod
    def from_json(cls, data) -> "PipeList":
        return cls([MSPipeItem.model_validate(raw) for raw in data or []])
