"""Hexagon Island table.

Binds WebSocket connections to the seats of the one shared
:class:`~..session.GameSession`.  Each seat is identified by a
server-generated key that the player never has to type.

Reconnection
------------
When a player's WebSocket closes their seat is kept.  Connecting again with
the same name re-binds the seat to the new connection, provided the old one
is gone.
"""

from __future__ import annotations

import logging
import secrets
import string

import fastapi

import common.settings

from ..errors import StructuralViolation
from ..models import ws_messages
from ..session import GameSession

logger = logging.getLogger(__name__)

KEY_LENGTH = 16
_KEY_ALPHABET = string.ascii_letters + string.digits


def generate_key() -> str:
    """Return a fresh random alphanumeric player key."""
    return ''.join(secrets.choice(_KEY_ALPHABET) for _ in range(KEY_LENGTH))


# ---------------------------------------------------------------------------
# Data classes
# ---------------------------------------------------------------------------


class Seat:
    """One player's connection to the table."""

    def __init__(
        self, key: str, name: str, index: int, websocket: fastapi.WebSocket
    ) -> None:
        self.key = key
        self.name = name
        self.index = index
        self.websocket: fastapi.WebSocket | None = websocket

    @property
    def is_connected(self) -> bool:
        """True if this player currently has an active WebSocket."""
        return self.websocket is not None


# ---------------------------------------------------------------------------
# Table
# ---------------------------------------------------------------------------


class Table:
    """The session plus every seat's live connection."""

    def __init__(self, session: GameSession) -> None:
        self.session = session
        self.seats: dict[str, Seat] = {}

    def get_seat_by_name(self, name: str) -> Seat | None:
        """Return the seat whose player is called *name*, or None."""
        return next((s for s in self.seats.values() if s.name == name), None)

    @property
    def connected_count(self) -> int:
        return sum(1 for s in self.seats.values() if s.is_connected)

    # ------------------------------------------------------------------
    # Join / disconnect
    # ------------------------------------------------------------------

    def join(self, name: str, websocket: fastapi.WebSocket) -> Seat:
        """Seat *name* at the table, or re-bind their seat on reconnect.

        Raises:
            StructuralViolation: If *name* is already connected, or the
                session refuses a new player.
            PhaseViolation: If the session is past ``Phase.BOOT``.
        """
        existing = self.get_seat_by_name(name)
        if existing is not None:
            if existing.is_connected:
                raise StructuralViolation(f'{name!r} is already connected.')
            existing.websocket = websocket
            logger.info('Player %r reconnected', name)
            return existing

        key = generate_key()
        self.session.add_player(key, name)
        seat = Seat(key=key, name=name, index=len(self.seats), websocket=websocket)
        self.seats[key] = seat
        return seat

    def disconnect(self, key: str, websocket: fastapi.WebSocket) -> None:
        """Release *websocket* from seat *key*; the seat itself is kept."""
        seat = self.seats.get(key)
        # A newer connection may already have re-bound the seat.
        if seat is not None and seat.websocket is websocket:
            seat.websocket = None

    def reset(self) -> None:
        """Reset the session and release every seat."""
        self.session.reset()
        self.seats.clear()

    # ------------------------------------------------------------------
    # Messaging helpers
    # ------------------------------------------------------------------

    async def send_to(self, seat: Seat, message: str) -> None:
        """Send *message* to *seat*; a broken socket is logged, not raised."""
        if seat.websocket is None:
            return
        try:
            await seat.websocket.send_text(message)
        except Exception:  # noqa: BLE001 broken socket; player will reconnect
            logger.warning('Could not send to %r', seat.name, exc_info=True)

    async def broadcast(self, message: str) -> None:
        """Send *message* to every connected seat."""
        for seat in list(self.seats.values()):
            await self.send_to(seat, message)

    async def broadcast_status(self) -> None:
        """Send each connected player their own status snapshot."""
        for seat in list(self.seats.values()):
            if not seat.is_connected:
                continue
            update = ws_messages.StatusUpdate(status=self.session.status_for(seat.key))
            await self.send_to(seat, update.model_dump_json())


def create_table() -> Table:
    """Build a table whose session uses the environment settings."""
    return Table(GameSession(seed=common.settings.BOARD_SEED))


# Module-level singleton consumed by the HTTP and WebSocket routers.
table: Table = create_table()
