"""WebSocket message schemas for Hexagon Island.

Defines every message that can flow between a client and the WebSocket
server, in both directions.
"""

from __future__ import annotations

import enum
from typing import Annotated, Literal

import pydantic

from ..errors import ErrorKind
from .actions import MAX_TARGETS, ActionType, Target, TradePair
from .status import Status


class ClientMessageType(enum.StrEnum):
    """Discriminator values for client-to-server WebSocket messages."""

    SUBMIT_COMMAND = 'submit_command'
    REQUEST_STATUS = 'request_status'


class ServerMessageType(enum.StrEnum):
    """Discriminator values for server-to-client WebSocket messages."""

    SEATED = 'seated'
    PLAYER_JOINED = 'player_joined'
    STATUS_UPDATE = 'status_update'
    ERROR_MESSAGE = 'error_message'
    TABLE_RESET = 'table_reset'


# ---------------------------------------------------------------------------
# Client → Server messages
# ---------------------------------------------------------------------------


class SubmitCommand(pydantic.BaseModel):
    """Sent by a client to submit a command.

    The issuing player is the one bound to the connection, so the payload
    carries no player key.
    """

    message_type: Literal[ClientMessageType.SUBMIT_COMMAND] = (
        ClientMessageType.SUBMIT_COMMAND
    )
    action: ActionType
    targets: list[Target] = pydantic.Field(default_factory=list, max_length=MAX_TARGETS)
    trade: TradePair | None = None


class RequestStatus(pydantic.BaseModel):
    """Sent by a client to ask for a fresh status snapshot."""

    message_type: Literal[ClientMessageType.REQUEST_STATUS] = (
        ClientMessageType.REQUEST_STATUS
    )


# Discriminated union of all client message types.
ClientMessage = Annotated[
    SubmitCommand | RequestStatus,
    pydantic.Field(discriminator='message_type'),
]


# ---------------------------------------------------------------------------
# Server → Client messages
# ---------------------------------------------------------------------------


class Seated(pydantic.BaseModel):
    """Sent privately to a player once they hold a seat."""

    message_type: ServerMessageType = ServerMessageType.SEATED
    player_key: str
    player_name: str
    seat: int


class PlayerJoined(pydantic.BaseModel):
    """Broadcast when a player takes (or retakes) a seat."""

    message_type: ServerMessageType = ServerMessageType.PLAYER_JOINED
    player_name: str
    seat: int
    total_players: int


class StatusUpdate(pydantic.BaseModel):
    """Each player's own view, sent after every accepted change."""

    message_type: ServerMessageType = ServerMessageType.STATUS_UPDATE
    status: Status


class ErrorMessage(pydantic.BaseModel):
    """Sent to an individual client whose message was rejected."""

    message_type: ServerMessageType = ServerMessageType.ERROR_MESSAGE
    error: str
    error_kind: ErrorKind | None = None


class TableReset(pydantic.BaseModel):
    """Broadcast when the session is reset; every seat is released."""

    message_type: ServerMessageType = ServerMessageType.TABLE_RESET
