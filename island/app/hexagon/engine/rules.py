"""Hexagon Island rules engine.

Adjacency queries over the board graph, placement legality for villages and
roads, production of resources from a dice roll, and the win check.
"""

from __future__ import annotations

import random
from collections.abc import Callable

from ..errors import TargetViolation
from ..models import board, game_state
from ..models.board import BuildingType, Resource

# ---------------------------------------------------------------------------
# Adjacency queries
# ---------------------------------------------------------------------------


def neighboring_nodes(brd: board.Board, hexagon_index: int) -> list[int]:
    """Return indices of the nodes on the corners of *hexagon_index*."""
    corners = {v.key() for v in brd.hexagons[hexagon_index].vertices}
    return [i for i, node in enumerate(brd.nodes) if node.loc.key() in corners]


def neighboring_hexagons(brd: board.Board, node_index: int) -> list[int]:
    """Return indices of the hexagons that have *node_index* as a corner."""
    loc = brd.nodes[node_index].loc
    return [i for i, hexagon in enumerate(brd.hexagons) if loc in hexagon.vertices]


def roads_at(brd: board.Board, node_index: int) -> list[int]:
    """Return indices of the roads that end at *node_index*."""
    return [i for i, road in enumerate(brd.roads) if road.touches(node_index)]


def holdings(brd: board.Board, player_key: str) -> tuple[int, int]:
    """Return ``(villages, roads)`` owned by *player_key*."""
    villages = sum(1 for n in brd.nodes if n.player_key == player_key)
    roads = sum(1 for r in brd.roads if r.player_key == player_key)
    return villages, roads


# ---------------------------------------------------------------------------
# Placement
# ---------------------------------------------------------------------------


def check_node(brd: board.Board, node_index: int, player_key: str, setup: bool) -> None:
    """Raise :class:`TargetViolation` unless a village may go on *node_index*.

    The two-space rule always applies.  Outside setup the node must also be
    the end of a road *player_key* owns.
    """
    if not 0 <= node_index < len(brd.nodes):
        raise TargetViolation('Cannot make building; invalid node index.')
    if brd.nodes[node_index].player_key is not None:
        raise TargetViolation(
            'Cannot make building; there is already something there.'
        )

    touching = roads_at(brd, node_index)
    for road_index in touching:
        neighbor = brd.roads[road_index].other_end(node_index)
        if brd.nodes[neighbor].player_key is not None:
            raise TargetViolation(
                'Cannot make building; you must respect the two-space rule.'
            )

    if not setup and not any(
        brd.roads[i].player_key == player_key for i in touching
    ):
        raise TargetViolation(
            'Cannot make building; after initial setup you must build next '
            'to roads that you own.'
        )


def build_node(brd: board.Board, node_index: int, player_key: str, setup: bool) -> None:
    """Place a village for *player_key* on *node_index*."""
    check_node(brd, node_index, player_key, setup)
    node = brd.nodes[node_index]
    node.player_key = player_key
    node.building_type = BuildingType.VILLAGE


def check_road(brd: board.Board, road_index: int, player_key: str, setup: bool) -> None:
    """Raise :class:`TargetViolation` unless a road may go on *road_index*.

    Outside setup the road must touch a building or another road that
    *player_key* owns.
    """
    if not 0 <= road_index < len(brd.roads):
        raise TargetViolation('Cannot build road; invalid road index.')
    road = brd.roads[road_index]
    if road.player_key is not None:
        raise TargetViolation('Cannot build road; there is already something there.')
    if setup:
        return

    for end in road.inds:
        if brd.nodes[end].player_key == player_key:
            return
        for other in roads_at(brd, end):
            if other != road_index and brd.roads[other].player_key == player_key:
                return
    raise TargetViolation(
        'Roads have to be built next to other roads or buildings you own.'
    )


def build_road(brd: board.Board, road_index: int, player_key: str, setup: bool) -> None:
    """Place a road for *player_key* on *road_index*."""
    check_road(brd, road_index, player_key, setup)
    brd.roads[road_index].player_key = player_key


# ---------------------------------------------------------------------------
# Production
# ---------------------------------------------------------------------------


def roll_dice() -> tuple[int, int]:
    """Roll two independent six-sided dice."""
    return random.randint(1, 6), random.randint(1, 6)


def resolve_roll(brd: board.Board, number: int) -> list[tuple[str, Resource]]:
    """Return one ``(player_key, resource)`` spoil per owned corner of every
    hexagon showing *number*."""
    return _collect(brd, lambda hexagon: hexagon.number == number)


def resolve_setup(brd: board.Board) -> list[tuple[str, Resource]]:
    """Return the starting spoils: every hexagon produces once."""
    return _collect(brd, lambda hexagon: True)


def _collect(
    brd: board.Board, triggered: Callable[[board.Hexagon], bool]
) -> list[tuple[str, Resource]]:
    spoils: list[tuple[str, Resource]] = []
    for hex_idx, hexagon in enumerate(brd.hexagons):
        if not triggered(hexagon):
            continue
        if hex_idx == brd.scorpion_index:
            continue
        if hexagon.resource not in board.PRODUCING_RESOURCES:
            continue
        for node_idx in neighboring_nodes(brd, hex_idx):
            owner = brd.nodes[node_idx].player_key
            if owner is not None:
                spoils.append((owner, hexagon.resource))
    return spoils


# ---------------------------------------------------------------------------
# Victory
# ---------------------------------------------------------------------------


def score(state: game_state.GameState, player_key: str) -> int:
    """Return the score of *player_key*: one point per village."""
    villages, _ = holdings(state.board, player_key)
    return villages


def find_the_winner(state: game_state.GameState) -> str | None:
    """Record and return the winner, if any player has reached the target.

    Players are checked in seating order and every qualifying player
    overwrites the previous one, so the last qualifier in a pass wins.
    """
    for key in state.roster.keys():
        if score(state, key) >= state.config.score_to_win:
            state.winner = key
    return state.winner
