"""Per-player resource ledger.

A :class:`ResourceList` holds five non-negative counters, one per producing
resource.  Every operation takes a batch of resource kinds, one entry per
unit, and is all-or-nothing: a rejected call leaves the counters untouched.
"""

from __future__ import annotations

import collections
from collections.abc import Iterable

import pydantic

from ..errors import ResourceViolation
from .board import PRODUCING_RESOURCES, Resource

# Build and purchase costs, one entry per unit.
ROAD_COST: tuple[Resource, ...] = (Resource.BLOCK, Resource.TIMBER)
VILLAGE_COST: tuple[Resource, ...] = (
    Resource.BLOCK,
    Resource.TIMBER,
    Resource.FIBER,
    Resource.CEREAL,
)
BUG_COST: tuple[Resource, ...] = (Resource.ROCK, Resource.FIBER, Resource.CEREAL)

# Units of the offered kind given up for one unit of the wanted kind.
TRADE_RATIO = 3


def _tally(kinds: Iterable[Resource], verb: str) -> collections.Counter[Resource]:
    """Count a batch, rejecting any non-producing kind."""
    tally: collections.Counter[Resource] = collections.Counter()
    for kind in kinds:
        if kind not in PRODUCING_RESOURCES:
            raise ResourceViolation(f"Can't {verb} {kind} resources.")
        tally[kind] += 1
    return tally


class ResourceList(pydantic.BaseModel):
    """A player's bank of fungible resource units."""

    block: int = pydantic.Field(default=0, ge=0)
    rock: int = pydantic.Field(default=0, ge=0)
    timber: int = pydantic.Field(default=0, ge=0)
    fiber: int = pydantic.Field(default=0, ge=0)
    cereal: int = pydantic.Field(default=0, ge=0)

    def get(self, kind: Resource) -> int:
        """Return the balance for one kind (always 0 for the desert)."""
        if kind not in PRODUCING_RESOURCES:
            return 0
        return getattr(self, kind.value)

    def count(self) -> int:
        """Return the total number of units held."""
        return sum(self.get(kind) for kind in PRODUCING_RESOURCES)

    def deposit(self, kinds: Iterable[Resource]) -> None:
        """Add one unit per entry in *kinds*."""
        for kind, amount in _tally(kinds, 'deposit').items():
            setattr(self, kind.value, self.get(kind) + amount)

    def check(self, kinds: Iterable[Resource]) -> bool:
        """Return True if deducting *kinds* would succeed right now."""
        try:
            tally = _tally(kinds, 'deduct')
        except ResourceViolation:
            return False
        return all(self.get(kind) >= amount for kind, amount in tally.items())

    def deduct(self, kinds: Iterable[Resource]) -> None:
        """Remove one unit per entry in *kinds*; never goes below zero."""
        tally = _tally(kinds, 'deduct')
        if any(self.get(kind) < amount for kind, amount in tally.items()):
            raise ResourceViolation("Can't deduct; not enough resources.")
        for kind, amount in tally.items():
            setattr(self, kind.value, self.get(kind) - amount)

    def trade(self, have: Resource, want: Resource) -> None:
        """Exchange :data:`TRADE_RATIO` units of *have* for one unit of *want*."""
        if want not in PRODUCING_RESOURCES:
            raise ResourceViolation(f"Can't deposit {want} resources.")
        payment = [have] * TRADE_RATIO
        if not self.check(payment):
            raise ResourceViolation(
                f'Need {TRADE_RATIO} {have} to trade, have {self.get(have)}.'
            )
        self.deduct(payment)
        self.deposit([want])
