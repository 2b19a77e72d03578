"""Command schema for every player action.

A :class:`Command` names one action, the player issuing it, up to five board
targets and an optional trade pair.  The :class:`ActionResult` carries the
outcome back to the caller.
"""

from __future__ import annotations

import enum

import pydantic

from ..errors import ErrorKind
from .board import Resource

MAX_TARGETS = 5


class ActionType(enum.StrEnum):
    """Every action a player can submit."""

    PLACE_VILLAGE_AND_ROAD = 'place_village_and_road'
    ROLL_DICE = 'roll_dice'
    MOVE_SCORPION = 'move_scorpion'
    BUILD_STUFF = 'build_stuff'
    TRADE = 'trade'
    BUY_BUG = 'buy_bug'
    END_TURN = 'end_turn'
    NONE = 'none'


class TargetKind(enum.StrEnum):
    """Which board list a target index points into."""

    ROAD = 'road'
    NODE = 'node'
    HEXAGON = 'hexagon'


class Target(pydantic.BaseModel):
    """One (kind, index) pair on a command."""

    model_config = pydantic.ConfigDict(frozen=True)

    kind: TargetKind
    index: int


class TradePair(pydantic.BaseModel):
    """Resource offered (three units) and resource wanted (one unit)."""

    have: Resource
    want: Resource


class Command(pydantic.BaseModel):
    """A single player command as handed over by the transport."""

    action: ActionType
    player: str
    targets: list[Target] = pydantic.Field(default_factory=list, max_length=MAX_TARGETS)
    trade: TradePair | None = None

    def targets_of(self, kind: TargetKind) -> list[int]:
        """Return the indices of every target of *kind*, in order."""
        return [t.index for t in self.targets if t.kind == kind]


class ActionResult(pydantic.BaseModel):
    """Outcome of processing one command."""

    success: bool
    error_message: str | None = None
    error_kind: ErrorKind | None = None
