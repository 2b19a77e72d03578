"""Hexagon Island turn manager.

Phase transitions, seating rotation, round counting, the setup snake draft
and the tables of actions allowed after each committed action.
"""

from __future__ import annotations

import logging

from ..errors import RosterError
from ..models.actions import ActionType
from ..models.board import Resource
from ..models.game_state import GameState, Phase
from . import rules

logger = logging.getLogger(__name__)

_NEXT_PHASE: dict[Phase, Phase] = {
    Phase.BOOT: Phase.SETUP,
    Phase.SETUP: Phase.PLAY,
    Phase.PLAY: Phase.END,
    Phase.END: Phase.END,
}

_AFTER_PURCHASE: frozenset[ActionType] = frozenset(
    {
        ActionType.TRADE,
        ActionType.BUILD_STUFF,
        ActionType.BUY_BUG,
        ActionType.END_TURN,
    }
)

# Setup: one placement per turn, then hand off.
_SETUP_ALLOWED: dict[ActionType, frozenset[ActionType]] = {
    ActionType.NONE: frozenset({ActionType.PLACE_VILLAGE_AND_ROAD}),
    ActionType.PLACE_VILLAGE_AND_ROAD: frozenset({ActionType.END_TURN}),
    ActionType.END_TURN: frozenset({ActionType.PLACE_VILLAGE_AND_ROAD}),
}

# Play: keyed by the last committed action.  ROLL_DICE is resolved separately
# because it depends on the roll.
_PLAY_ALLOWED: dict[ActionType, frozenset[ActionType]] = {
    ActionType.PLACE_VILLAGE_AND_ROAD: frozenset({ActionType.ROLL_DICE}),
    ActionType.MOVE_SCORPION: _AFTER_PURCHASE,
    ActionType.BUILD_STUFF: _AFTER_PURCHASE,
    ActionType.TRADE: _AFTER_PURCHASE,
    ActionType.BUY_BUG: frozenset({ActionType.MOVE_SCORPION}),
    ActionType.END_TURN: frozenset({ActionType.ROLL_DICE}),
    ActionType.NONE: frozenset({ActionType.NONE}),
}

SCORPION_ROLL = 7


# ---------------------------------------------------------------------------
# Phase and round
# ---------------------------------------------------------------------------


def next_phase(state: GameState) -> GameState:
    """Advance to the following phase; ``END`` stays ``END``."""
    new_phase = _NEXT_PHASE[state.phase]
    if new_phase != state.phase:
        logger.info('Phase %s -> %s', state.phase, new_phase)
    state.phase = new_phase
    return state


def next_round(state: GameState) -> GameState:
    state.round += 1
    return state


# ---------------------------------------------------------------------------
# Seating rotation
# ---------------------------------------------------------------------------


def set_active_player(state: GameState, key: str) -> GameState:
    """Make *key* the active player.

    Raises:
        RosterError: If *key* is not seated.
    """
    if state.roster.index_of(key) is None:
        raise RosterError('Player key not found!')
    state.roster.active_key = key
    return state


def rotate(state: GameState, delta: int) -> GameState:
    """Move the active pointer *delta* seats (``+1`` next, ``-1`` previous).

    Landing on seat 0 while moving forward starts a new round.

    Raises:
        RosterError: If there is no active player or it is not seated.
    """
    roster = state.roster
    if roster.active_key is None:
        raise RosterError('There is no active player!')
    current = roster.index_of(roster.active_key)
    if current is None or roster.cardinality == 0:
        raise RosterError('Cannot find index of active player!')

    new_index = (current + delta) % roster.cardinality
    roster.active_key = roster.players[new_index].key
    if delta > 0 and new_index == 0:
        next_round(state)
    return state


def next_player(state: GameState) -> GameState:
    return rotate(state, 1)


def previous_player(state: GameState) -> GameState:
    return rotate(state, -1)


def advance_setup(state: GameState) -> list[tuple[str, Resource]]:
    """Hand the setup turn on according to the snake draft.

    Forward while some player still lacks a first placement, hold on the last
    seat once everyone has one, backward through the second lap, and into
    ``PLAY`` once everyone has two.

    Returns:
        The starting spoils when setup completes, otherwise an empty list.
    """
    counts = [rules.holdings(state.board, key) for key in state.roster.keys()]

    if all(c == (1, 1) for c in counts):
        # The last seat places again straight away.
        return []
    if all(c == (2, 2) for c in counts):
        next_phase(state)
        next_round(state)
        return rules.resolve_setup(state.board)
    if all(villages >= 1 and roads >= 1 for villages, roads in counts):
        previous_player(state)
    else:
        next_player(state)
    return []


# ---------------------------------------------------------------------------
# Allowed actions
# ---------------------------------------------------------------------------


def allowed_actions(state: GameState) -> frozenset[ActionType]:
    """Return the actions the active player may take next."""
    if state.phase == Phase.SETUP:
        return _SETUP_ALLOWED.get(state.last_action, frozenset())
    if state.phase != Phase.PLAY:
        return frozenset()
    if state.last_action == ActionType.ROLL_DICE:
        if state.roll_sum == SCORPION_ROLL:
            return frozenset({ActionType.MOVE_SCORPION})
        return _AFTER_PURCHASE
    return _PLAY_ALLOWED[state.last_action]
