"""Hexagon Island game session.

A :class:`GameSession` owns the single mutable :class:`GameState` of one
match and guards it with a lock: every mutation and every status snapshot
runs to completion while holding it, so commands are applied one at a time
in arrival order.
"""

from __future__ import annotations

import logging
import threading

from . import board_generator
from .engine import processor, turn_manager
from .errors import PhaseViolation, StructuralViolation
from .models import actions, game_state, player, resources, status

logger = logging.getLogger(__name__)


class GameSession:
    """One match: roster, configuration, board and turn state behind a lock."""

    def __init__(
        self, config: game_state.Config | None = None, seed: int | None = None
    ) -> None:
        self._lock = threading.Lock()
        self._seed = seed
        self.state = game_state.GameState(
            config=config if config is not None else game_state.Config.from_settings()
        )

    # ------------------------------------------------------------------
    # Boot
    # ------------------------------------------------------------------

    def configure(self, config: game_state.Config) -> None:
        """Replace the match configuration.

        Raises:
            PhaseViolation: Outside ``Phase.BOOT``.
            StructuralViolation: If *config* seats no more players than are
                already seated.
        """
        with self._lock:
            if self.state.phase != game_state.Phase.BOOT:
                raise PhaseViolation('Cannot configure game outside of boot phase!')
            seated = self.state.roster.cardinality
            if seated and config.num_players <= seated:
                raise StructuralViolation(
                    f'{seated} players are already seated; '
                    f'num_players must be greater than that.'
                )
            self.state.config = config
            logger.info('Configured %s', config)

    def add_player(self, key: str, name: str) -> None:
        """Seat a player and start setup once the table is full.

        Raises:
            StructuralViolation: If *key* is already seated or the roster is
                full.
            PhaseViolation: Outside ``Phase.BOOT``.
        """
        with self._lock:
            state = self.state
            if state.roster.index_of(key) is not None:
                raise StructuralViolation('That player is already seated!')
            if state.roster.cardinality >= state.config.num_players:
                raise StructuralViolation('The game is full!')
            if state.phase != game_state.Phase.BOOT:
                raise PhaseViolation('Players can only join during the boot phase!')

            seat = state.roster.cardinality
            state.roster.add(key, name)
            state.player_colors[key] = player.PLAYER_COLORS[
                seat % len(player.PLAYER_COLORS)
            ]
            state.player_resources[key] = resources.ResourceList()
            logger.info(
                'Seated %r (%d of %d)', name, seat + 1, state.config.num_players
            )

            if state.roster.cardinality == state.config.num_players:
                self._start_setup()

    def _start_setup(self) -> None:
        state = self.state
        turn_manager.next_phase(state)
        state.board = board_generator.generate_board(
            state.config.game_board_width, seed=self._seed
        )
        state.board.bugs = {key: 0 for key in state.roster.keys()}
        logger.info(
            'Board generated: %d hexagons, %d nodes, %d roads',
            len(state.board.hexagons),
            len(state.board.nodes),
            len(state.board.roads),
        )

    # ------------------------------------------------------------------
    # Play
    # ------------------------------------------------------------------

    def process_action(self, command: actions.Command) -> actions.ActionResult:
        """Apply *command* atomically and return the outcome."""
        with self._lock:
            return processor.apply_action(self.state, command)

    def status_for(self, player_key: str) -> status.Status:
        """Return a snapshot of the match as *player_key* may see it."""
        with self._lock:
            state = self.state
            is_active = player_key == state.roster.active_key
            allowed = turn_manager.allowed_actions(state) if is_active else frozenset()
            ledger = state.player_resources.get(player_key)
            return status.Status(
                phase=state.phase,
                round=state.round,
                players=[p.model_copy() for p in state.roster.players],
                active_player=state.roster.active_key,
                roll_result=state.roll_result,
                allowed_actions=sorted(allowed),
                winner=state.winner,
                player_colors=dict(state.player_colors),
                resources=None if ledger is None else ledger.model_copy(),
                bugs=dict(state.board.bugs),
                most_bugs=state.most_bugs,
                longest_road=state.longest_road,
                score_to_win=state.config.score_to_win,
                board=state.board.model_copy(deep=True),
                hand_sizes={
                    key: held.count() for key, held in state.player_resources.items()
                },
            )

    def summary(self) -> status.Summary:
        """Return the public table overview."""
        with self._lock:
            state = self.state
            winner = state.roster.get(state.winner) if state.winner is not None else None
            return status.Summary(
                phase=state.phase,
                round=state.round,
                players=[p.name for p in state.roster.players],
                seats_taken=state.roster.cardinality,
                seats_total=state.config.num_players,
                winner=None if winner is None else winner.name,
            )

    def reset(self) -> None:
        """Start over with an empty table; the configuration is kept."""
        with self._lock:
            self.state = game_state.GameState(config=self.state.config)
            logger.info('Session reset')

