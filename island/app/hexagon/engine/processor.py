"""Hexagon Island action processor.

Applies a single :class:`~..models.actions.Command` to a GameState in place
and returns an :class:`~..models.actions.ActionResult`.  Every rule check
runs before the step it guards, so a rejected command leaves the state as it
was.  The one exception is ``BUILD_STUFF``: each road or village is its own
atomic step, and targets that succeeded before a failing one stay built.
"""

from __future__ import annotations

import collections
import logging

from ..errors import (
    GameError,
    PhaseViolation,
    ResourceViolation,
    StructuralViolation,
    TargetViolation,
    TurnViolation,
)
from ..models import actions, game_state, resources
from ..models.actions import ActionType, TargetKind
from ..models.board import Resource
from . import bonuses, rules, turn_manager

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def apply_action(
    state: game_state.GameState, command: actions.Command
) -> actions.ActionResult:
    """Apply *command* to *state* and return an :class:`ActionResult`.

    Rejections never raise; they come back with ``success=False`` and the
    :class:`~..errors.ErrorKind` of the violated rule.
    """
    try:
        _check_legality(state, command)
        _dispatch(state, command)
    except GameError as exc:
        logger.info(
            'Rejected %s from %s: %s', command.action, command.player, exc
        )
        return actions.ActionResult(
            success=False, error_message=str(exc), error_kind=exc.kind
        )

    if command.action != ActionType.NONE:
        state.last_action = command.action
    return actions.ActionResult(success=True)


# ---------------------------------------------------------------------------
# Legality and dispatch
# ---------------------------------------------------------------------------


def _check_legality(state: game_state.GameState, command: actions.Command) -> None:
    if command.player != state.roster.active_key:
        raise TurnViolation("It's not your turn!")
    if state.phase not in (game_state.Phase.SETUP, game_state.Phase.PLAY):
        raise PhaseViolation('Can only take action during the Setup or Play phases!')
    allowed = turn_manager.allowed_actions(state)
    if command.action not in allowed:
        expected = ', '.join(sorted(allowed)) or 'nothing'
        raise PhaseViolation(
            f'{command.action} is not allowed now; expected one of: {expected}.'
        )


def _dispatch(state: game_state.GameState, command: actions.Command) -> None:
    """Mutate *state* according to *command*'s action."""
    action = command.action
    if action == ActionType.PLACE_VILLAGE_AND_ROAD:
        _apply_place_village_and_road(state, command)
    elif action == ActionType.ROLL_DICE:
        _apply_roll_dice(state)
    elif action == ActionType.MOVE_SCORPION:
        _apply_move_scorpion(state, command)
    elif action == ActionType.BUILD_STUFF:
        _apply_build_stuff(state, command)
    elif action == ActionType.TRADE:
        _apply_trade(state, command)
    elif action == ActionType.BUY_BUG:
        _apply_buy_bug(state, command)
    elif action == ActionType.END_TURN:
        _apply_end_turn(state)
    elif action == ActionType.NONE:
        pass
    else:
        raise StructuralViolation(f'Unknown action {action!r}.')


# ---------------------------------------------------------------------------
# Action handlers
# ---------------------------------------------------------------------------


def _apply_place_village_and_road(
    state: game_state.GameState, command: actions.Command
) -> None:
    node_targets = command.targets_of(TargetKind.NODE)
    road_targets = command.targets_of(TargetKind.ROAD)
    if len(node_targets) != 1 or len(road_targets) != 1 or len(command.targets) != 2:
        raise StructuralViolation(
            'Placement needs exactly one node target and one road target.'
        )

    brd = state.board
    node_index, road_index = node_targets[0], road_targets[0]
    rules.check_node(brd, node_index, command.player, setup=True)
    rules.check_road(brd, road_index, command.player, setup=True)
    if not brd.roads[road_index].touches(node_index):
        raise TargetViolation('The road must touch the new village.')

    rules.build_node(brd, node_index, command.player, setup=True)
    rules.build_road(brd, road_index, command.player, setup=True)
    _update_longest_road(state)


def _apply_roll_dice(state: game_state.GameState) -> None:
    state.roll_result = rules.roll_dice()
    logger.debug('Rolled %s', state.roll_result)
    if state.roll_sum == turn_manager.SCORPION_ROLL:
        # No production; the scorpion moves next.
        return
    _deposit_spoils(state, rules.resolve_roll(state.board, state.roll_sum))


def _apply_move_scorpion(
    state: game_state.GameState, command: actions.Command
) -> None:
    hexagon_targets = command.targets_of(TargetKind.HEXAGON)
    if len(hexagon_targets) != 1 or len(command.targets) != 1:
        raise StructuralViolation('Moving the scorpion needs one hexagon target.')
    hex_index = hexagon_targets[0]
    if not 0 <= hex_index < len(state.board.hexagons):
        raise TargetViolation('Cannot move the scorpion; invalid hexagon index.')
    state.board.scorpion_index = hex_index


def _apply_build_stuff(state: game_state.GameState, command: actions.Command) -> None:
    road_targets = command.targets_of(TargetKind.ROAD)
    node_targets = command.targets_of(TargetKind.NODE)
    if not command.targets:
        raise StructuralViolation('Nothing to build.')
    if command.targets_of(TargetKind.HEXAGON):
        raise StructuralViolation('Hexagons cannot be built on.')

    brd = state.board
    ledger = state.player_resources[command.player]
    try:
        for road_index in road_targets:
            _check_funds(ledger, resources.ROAD_COST)
            rules.build_road(brd, road_index, command.player, setup=False)
            ledger.deduct(resources.ROAD_COST)
        for node_index in node_targets:
            _check_funds(ledger, resources.VILLAGE_COST)
            rules.build_node(brd, node_index, command.player, setup=False)
            ledger.deduct(resources.VILLAGE_COST)
    finally:
        _update_longest_road(state)
        rules.find_the_winner(state)


def _apply_trade(state: game_state.GameState, command: actions.Command) -> None:
    if command.trade is None:
        raise StructuralViolation('A trade needs a have/want pair.')
    if command.trade.have == command.trade.want:
        raise StructuralViolation('Cannot trade a resource for itself.')
    state.player_resources[command.player].trade(
        command.trade.have, command.trade.want
    )


def _apply_buy_bug(state: game_state.GameState, command: actions.Command) -> None:
    ledger = state.player_resources[command.player]
    _check_funds(ledger, resources.BUG_COST)
    ledger.deduct(resources.BUG_COST)

    bugs = state.board.bugs
    bugs[command.player] = bugs.get(command.player, 0) + 1
    counts = {key: bugs.get(key, 0) for key in state.roster.keys()}
    state.most_bugs = bonuses.find_most_bugs(counts, state.most_bugs)
    rules.find_the_winner(state)


def _apply_end_turn(state: game_state.GameState) -> None:
    if state.phase == game_state.Phase.SETUP:
        _deposit_spoils(state, turn_manager.advance_setup(state))
    elif state.winner is not None:
        logger.info('Game over; winner %s', state.winner)
        turn_manager.next_phase(state)
    else:
        turn_manager.next_player(state)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _check_funds(ledger: resources.ResourceList, cost: tuple[Resource, ...]) -> None:
    if not ledger.check(cost):
        raise ResourceViolation('Not enough resources to build.')


def _deposit_spoils(
    state: game_state.GameState, spoils: list[tuple[str, Resource]]
) -> None:
    """Credit each ``(player_key, resource)`` spoil to its owner's ledger."""
    by_player: dict[str, list[Resource]] = collections.defaultdict(list)
    for key, resource in spoils:
        by_player[key].append(resource)
    for key, earned in by_player.items():
        state.player_resources[key].deposit(earned)


def _update_longest_road(state: game_state.GameState) -> None:
    state.longest_road = bonuses.find_longest_road(
        state.board, state.roster.keys(), state.longest_road
    )
