"""Player and seating-order models."""

from __future__ import annotations

import pydantic

# Display colours handed out in join order, cycled when exhausted.
PLAYER_COLORS: list[str] = [
    '#DC143C',
    '#4169E1',
    '#2E8B57',
    '#FF8C00',
    '#8A2BE2',
    '#8B4513',
]


class Player(pydantic.BaseModel):
    """A seated player. ``key`` is stable and unique within a session."""

    key: str
    name: str


class Roster(pydantic.BaseModel):
    """Players in seating order plus a pointer to whoever is active.

    Invariant: ``cardinality == len(players)``.
    """

    players: list[Player] = pydantic.Field(default_factory=list)
    active_key: str | None = None
    cardinality: int = 0

    def add(self, key: str, name: str) -> None:
        """Seat a new player; the first one seated becomes active."""
        self.players.append(Player(key=key, name=name))
        if len(self.players) == 1:
            self.active_key = key
        self.cardinality += 1

    def index_of(self, key: str) -> int | None:
        """Return the seat index for *key*, or None if not seated."""
        return next((i for i, p in enumerate(self.players) if p.key == key), None)

    def get(self, key: str) -> Player | None:
        """Return the player with *key*, or None."""
        idx = self.index_of(key)
        return None if idx is None else self.players[idx]

    def keys(self) -> list[str]:
        """Return every player key in seating order."""
        return [p.key for p in self.players]
