"""Hexagon Island board data models.

The board is an index-based graph: hexagons, nodes and roads live in flat
lists and refer to each other by integer index or by shared coordinates,
never by object reference.  Geometry is only kept to the precision needed to
recognise that two hexagons share a vertex.
"""

from __future__ import annotations

import enum

import pydantic

# Decimal places kept on every vertex coordinate.  Two vertices computed from
# neighbouring hexagons must round to the same value to be merged.
COORDINATE_PRECISION = 3

# Dice number carried by the single non-producing hexagon.
NO_NUMBER = -1


class Resource(enum.StrEnum):
    """Resource kinds a hexagon can carry."""

    BLOCK = 'block'
    ROCK = 'rock'
    TIMBER = 'timber'
    FIBER = 'fiber'
    CEREAL = 'cereal'
    DESERT = 'desert'  # produces nothing; never enters a ledger


# The five kinds that are produced, traded and spent.
PRODUCING_RESOURCES: tuple[Resource, ...] = (
    Resource.BLOCK,
    Resource.ROCK,
    Resource.TIMBER,
    Resource.FIBER,
    Resource.CEREAL,
)


class BuildingType(enum.StrEnum):
    """What stands on a node."""

    EMPTY = 'empty'
    VILLAGE = 'village'


class Coordinate(pydantic.BaseModel):
    """A 2D point rounded to :data:`COORDINATE_PRECISION` decimal places."""

    model_config = pydantic.ConfigDict(frozen=True)

    x: float
    y: float

    @classmethod
    def rounded(cls, x: float, y: float) -> Coordinate:
        """Build a coordinate with both components rounded."""
        # Adding 0.0 folds -0.0 into 0.0 so the two print identically.
        return cls(
            x=round(x, COORDINATE_PRECISION) + 0.0,
            y=round(y, COORDINATE_PRECISION) + 0.0,
        )

    def key(self) -> tuple[float, float]:
        """Return a hashable identity for deduplication."""
        return (self.x, self.y)


class Centroid(pydantic.BaseModel):
    """The centre of one hexagon plus its dice number."""

    loc: Coordinate
    number: int = NO_NUMBER


class Hexagon(pydantic.BaseModel):
    """One board tile: its six vertices, dice number and resource."""

    vertices: list[Coordinate] = pydantic.Field(default_factory=list)
    number: int = NO_NUMBER
    resource: Resource = Resource.DESERT


class Node(pydantic.BaseModel):
    """A unique board vertex where a building may stand."""

    loc: Coordinate
    player_key: str | None = None
    building_type: BuildingType = BuildingType.EMPTY


class Road(pydantic.BaseModel):
    """An undirected edge between two node indices."""

    inds: tuple[int, int]
    player_key: str | None = None

    def touches(self, node_index: int) -> bool:
        """Return True if *node_index* is one of this road's endpoints."""
        return node_index in self.inds

    def other_end(self, node_index: int) -> int:
        """Return the endpoint opposite *node_index*."""
        a, b = self.inds
        return b if a == node_index else a


class Board(pydantic.BaseModel):
    """The complete island: geometry, ownership, bug counts and the scorpion."""

    centroids: list[Centroid] = pydantic.Field(default_factory=list)
    hexagons: list[Hexagon] = pydantic.Field(default_factory=list)
    nodes: list[Node] = pydantic.Field(default_factory=list)
    roads: list[Road] = pydantic.Field(default_factory=list)
    # player_key -> number of bugs bought
    bugs: dict[str, int] = pydantic.Field(default_factory=dict)
    # index into hexagons; None until the scorpion is first moved
    scorpion_index: int | None = None
