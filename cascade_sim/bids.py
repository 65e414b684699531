from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List

from .cascade_tools import InvalidParameterError


@dataclass(frozen=True)
class Bid:
    """An offer of enriched material: total quantity and its U-235 content (kg)."""

    commodity: str
    quantity: float
    u235_mass: float

    def __post_init__(self):
        if self.quantity <= 0:
            raise InvalidParameterError(f"{self.commodity}: bid quantity must be > 0")
        if not (0.0 <= self.u235_mass <= self.quantity):
            raise InvalidParameterError(f"{self.commodity}: U-235 mass must be in [0, quantity]")

    @property
    def assay(self) -> float:
        return self.u235_mass / self.quantity


def bid_precedes(a: Bid, b: Bid) -> bool:
    """Strict ordering of bids by enrichment level."""
    return a.assay < b.assay


def sort_bids(bids: Iterable[Bid]) -> List[Bid]:
    # stable: equal assays keep their arrival order
    return sorted(bids, key=lambda bid: bid.assay)
