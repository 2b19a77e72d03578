"""Player-scoped, read-only view of a match."""

from __future__ import annotations

import pydantic

from .actions import ActionType
from .board import Board
from .game_state import Phase
from .player import Player
from .resources import ResourceList


class Status(pydantic.BaseModel):
    """What one player is allowed to see after any change.

    Only the requesting player's own ledger is included; everything else is
    public.
    """

    phase: Phase
    round: int
    players: list[Player]
    active_player: str | None
    roll_result: tuple[int, int]
    # Empty unless the requester is the active player.
    allowed_actions: list[ActionType]
    winner: str | None
    player_colors: dict[str, str]
    # None when the requester is not seated.
    resources: ResourceList | None
    bugs: dict[str, int]
    most_bugs: str | None
    longest_road: str | None
    score_to_win: int
    board: Board
    # player_key -> total resources held; public, unlike ``resources``.
    hand_sizes: dict[str, int]


class Summary(pydantic.BaseModel):
    """Public overview of the table: who is seated and where play stands."""

    phase: Phase
    round: int
    players: list[str]
    seats_taken: int
    seats_total: int
    # Display name of the winner, if any.
    winner: str | None
