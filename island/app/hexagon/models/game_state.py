"""Hexagon Island game state model.

Captures everything a match needs: phase, round, roster, configuration, the
last dice roll, every player's ledger, bonus-title holders and the board.
"""

from __future__ import annotations

import enum

import pydantic

import common.settings

from .actions import ActionType
from .board import Board
from .player import Roster
from .resources import ResourceList


class Phase(enum.StrEnum):
    """High-level phases of a match. ``END`` is absorbing."""

    BOOT = 'boot'  # waiting for players; configuration allowed
    SETUP = 'setup'  # snake-draft placement of starting villages
    PLAY = 'play'  # dice, building, trading
    END = 'end'  # a winner has been declared


class Config(pydantic.BaseModel):
    """Match configuration, editable only during ``Phase.BOOT``."""

    num_players: int = pydantic.Field(default=2, ge=1)
    score_to_win: int = pydantic.Field(default=10, ge=1)
    game_board_width: int = pydantic.Field(default=5, ge=1)

    @pydantic.field_validator('game_board_width')
    @classmethod
    def _width_is_odd(cls, value: int) -> int:
        if value % 2 == 0:
            raise ValueError('board width must be odd')
        return value

    @classmethod
    def from_settings(cls) -> Config:
        """Build the default configuration from environment settings."""
        return cls(
            num_players=common.settings.NUM_PLAYERS,
            score_to_win=common.settings.SCORE_TO_WIN,
            game_board_width=common.settings.BOARD_WIDTH,
        )


class GameState(pydantic.BaseModel):
    """Complete snapshot of one match."""

    phase: Phase = Phase.BOOT
    round: int = 0
    roster: Roster = pydantic.Field(default_factory=Roster)
    last_action: ActionType = ActionType.NONE
    config: Config = pydantic.Field(default_factory=Config)
    roll_result: tuple[int, int] = (0, 0)
    player_colors: dict[str, str] = pydantic.Field(default_factory=dict)
    player_resources: dict[str, ResourceList] = pydantic.Field(default_factory=dict)
    # player_key of the majority-bug holder, or None.
    most_bugs: str | None = None
    # player_key of the longest-road holder, or None.
    longest_road: str | None = None
    board: Board = pydantic.Field(default_factory=Board)
    winner: str | None = None

    @property
    def roll_sum(self) -> int:
        """Sum of the last dice roll (0 before the first roll)."""
        return self.roll_result[0] + self.roll_result[1]
