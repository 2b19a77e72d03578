"""Hexagon Island board generation algorithm.

Builds a hexagon-shaped island of hexagonal tiles for any odd width,
assigns resources and dice numbers, and derives the deduplicated node/road
graph that the rules engine works on.

Layout
------
Rows are numbered ``r = -n .. n`` with ``n = (width - 1) / 2``.  Row ``r``
holds ``width - |r|`` hexagons.  With centroid spacing ``s`` the centroid of
hexagon ``h`` in row ``r`` sits at::

    x = s * (|r| / 2 + h)
    y = s * (r * sqrt(3/4) + n)

Centroids are produced row by row, left to right; resource and number
assignment rely on that order being stable.

Vertices and deduplication
--------------------------
Each hexagon gets six vertices at radius ``s / sqrt(3)`` and angles
``k * 60°``, rounded to :data:`~.models.board.COORDINATE_PRECISION` places,
plus six private boundary roads joining consecutive vertices.  Vertices
shared by neighbouring hexagons are then folded into one node (first
occurrence wins, road endpoints are remapped) and roads that now join the
same unordered pair of nodes are collapsed into one.

A width-5 board has **19 hexagons**, **54 nodes** and **72 roads**.
"""

from __future__ import annotations

import math
import random
from typing import TypeVar

from .models.board import (
    NO_NUMBER,
    Board,
    Centroid,
    Coordinate,
    Hexagon,
    Node,
    Resource,
    Road,
)

_T = TypeVar('_T')

# Distance between neighbouring centroids.
CENTROID_SPACING = 100

# Relative frequency of each producing resource (out of 18 on a width-5 board).
_RESOURCE_WEIGHTS: dict[Resource, int] = {
    Resource.BLOCK: 3,
    Resource.ROCK: 3,
    Resource.TIMBER: 4,
    Resource.FIBER: 4,
    Resource.CEREAL: 4,
}

# Relative frequency of each dice number (out of 18 on a width-5 board).
_NUMBER_WEIGHTS: dict[int, int] = {
    2: 1,
    3: 2,
    4: 2,
    5: 2,
    6: 2,
    8: 2,
    9: 2,
    10: 2,
    11: 2,
    12: 1,
}


def generate_board(
    width: int = 5, spacing: float = CENTROID_SPACING, seed: int | None = None
) -> Board:
    """Generate a randomised island *width* hexagons across.

    Args:
        width: Hexagons in the middle row; must be odd and at least 1.
        spacing: Distance between neighbouring centroids.
        seed: Optional integer seed for reproducible boards.

    Raises:
        ValueError: If *width* is even or smaller than 1.
    """
    if width < 1 or width % 2 == 0:
        raise ValueError(f'Board width must be odd and at least 1, got {width}')

    rng = random.Random(seed)
    centroids = _compute_hex_grid_centroids(width, spacing)
    hexagons = _assign_resources_and_numbers(rng, centroids)
    nodes, roads = _compute_nodes_and_roads(centroids, hexagons, spacing)

    return Board(centroids=centroids, hexagons=hexagons, nodes=nodes, roads=roads)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _compute_hex_grid_centroids(width: int, spacing: float) -> list[Centroid]:
    off_center_rows = (width - 1) // 2
    centroids: list[Centroid] = []
    for row in range(-off_center_rows, off_center_rows + 1):
        vertical_offset = row * math.sqrt(3.0 / 4.0)
        horizontal_offset = abs(row) / 2.0
        for hex_in_row in range(width - abs(row)):
            centroids.append(
                Centroid(
                    loc=Coordinate(
                        x=spacing * (horizontal_offset + hex_in_row),
                        y=spacing * (vertical_offset + off_center_rows),
                    )
                )
            )
    return centroids


def _apportion(weights: dict[_T, int], slots: int) -> list[_T]:
    """Split *slots* between the keys of *weights* by largest remainder.

    The result always has exactly *slots* entries, grouped by key in the
    declaration order of *weights*.
    """
    total = sum(weights.values())
    quotas = {key: weight * slots / total for key, weight in weights.items()}
    counts = {key: math.floor(quota) for key, quota in quotas.items()}
    shortfall = slots - sum(counts.values())
    # sorted() is stable, so equal remainders keep declaration order.
    by_remainder = sorted(weights, key=lambda k: quotas[k] - counts[k], reverse=True)
    for key in by_remainder[:shortfall]:
        counts[key] += 1

    pool: list[_T] = []
    for key in weights:
        pool.extend([key] * counts[key])
    return pool


def _assign_resources_and_numbers(
    rng: random.Random, centroids: list[Centroid]
) -> list[Hexagon]:
    """Shuffle resource and number pools and pair the desert with no number."""
    producing_slots = len(centroids) - 1

    resources = _apportion(_RESOURCE_WEIGHTS, producing_slots) + [Resource.DESERT]
    numbers = _apportion(_NUMBER_WEIGHTS, producing_slots) + [NO_NUMBER]
    rng.shuffle(resources)
    rng.shuffle(numbers)

    # The desert and the blank number must land on the same hexagon.
    desert_index = resources.index(Resource.DESERT)
    blank_index = numbers.index(NO_NUMBER)
    numbers[desert_index], numbers[blank_index] = (
        numbers[blank_index],
        numbers[desert_index],
    )

    hexagons: list[Hexagon] = []
    for centroid, resource, number in zip(centroids, resources, numbers, strict=True):
        centroid.number = number
        hexagons.append(Hexagon(number=number, resource=resource))
    return hexagons


def _compute_nodes_and_roads(
    centroids: list[Centroid], hexagons: list[Hexagon], spacing: float
) -> tuple[list[Node], list[Road]]:
    radius = spacing / math.sqrt(3.0)

    # ------------------------------------------------------------------
    # Six private vertices and boundary roads per hexagon.
    # ------------------------------------------------------------------
    raw_nodes: list[Coordinate] = []
    raw_roads: list[tuple[int, int]] = []
    for idx, centroid in enumerate(centroids):
        base = 6 * idx
        for step in range(6):
            angle = step * math.pi / 3.0
            loc = Coordinate.rounded(
                centroid.loc.x + radius * math.sin(angle),
                centroid.loc.y + radius * math.cos(angle),
            )
            raw_nodes.append(loc)
            hexagons[idx].vertices.append(loc)
            raw_roads.append((base + (step - 1) % 6, base + step))

    # ------------------------------------------------------------------
    # Fold vertices into unique nodes, remembering where each one went.
    # ------------------------------------------------------------------
    unique_index: dict[tuple[float, float], int] = {}
    remap: list[int] = []
    nodes: list[Node] = []
    for loc in raw_nodes:
        key = loc.key()
        if key not in unique_index:
            unique_index[key] = len(nodes)
            nodes.append(Node(loc=loc))
        remap.append(unique_index[key])

    # ------------------------------------------------------------------
    # Rewrite road endpoints and drop roads shared by two hexagons.
    # ------------------------------------------------------------------
    seen: set[frozenset[int]] = set()
    roads: list[Road] = []
    for a, b in raw_roads:
        inds = (remap[a], remap[b])
        pair = frozenset(inds)
        if pair in seen:
            continue
        seen.add(pair)
        roads.append(Road(inds=inds))

    return nodes, roads
