"""WebSocket handler for Hexagon Island.

Registers the ``/island/ws/{player_name}`` WebSocket endpoint.  Each
connecting client either takes a new seat or re-binds the seat that already
carries their name.

Message flow
------------
* Client connects → server sends :class:`~..models.ws_messages.Seated` to
  the client, broadcasts :class:`~..models.ws_messages.PlayerJoined`, then
  sends every player their own status.
* Client sends :class:`~..models.ws_messages.SubmitCommand` → the session
  applies it; on success every connected player gets a
  :class:`~..models.ws_messages.StatusUpdate`.
* Rejected command or malformed message → server sends
  :class:`~..models.ws_messages.ErrorMessage` to the sender only.
* Client disconnects → the seat is kept; the player may reconnect.
"""

from __future__ import annotations

import json
import logging

import fastapi
import pydantic

from ..errors import GameError
from ..models import actions, ws_messages
from . import table

logger = logging.getLogger(__name__)

router = fastapi.APIRouter()

# Pydantic v2 TypeAdapter for the discriminated-union ClientMessage type.
_client_message_adapter: pydantic.TypeAdapter[ws_messages.ClientMessage] = (
    pydantic.TypeAdapter(ws_messages.ClientMessage)
)


@router.websocket('/island/ws/{player_name}')
async def island_ws(websocket: fastapi.WebSocket, player_name: str) -> None:
    """WebSocket endpoint for one player of the shared session."""
    # Always accept before sending any message (WebSocket protocol requires it).
    await websocket.accept()
    logger.info('Player %r connected', player_name)

    tbl = table.table
    try:
        seat = tbl.join(player_name, websocket)
    except GameError as exc:
        logger.warning('Player %r refused: %s', player_name, exc)
        await websocket.send_text(
            ws_messages.ErrorMessage(error=str(exc), error_kind=exc.kind).model_dump_json()
        )
        await websocket.close(code=1008)
        return

    logger.info(
        'Player %r holds seat %d (%d seated)', player_name, seat.index, len(tbl.seats)
    )
    await tbl.send_to(
        seat,
        ws_messages.Seated(
            player_key=seat.key, player_name=seat.name, seat=seat.index
        ).model_dump_json(),
    )
    joined_msg = ws_messages.PlayerJoined(
        player_name=seat.name, seat=seat.index, total_players=len(tbl.seats)
    )
    await tbl.broadcast(joined_msg.model_dump_json())
    await tbl.broadcast_status()

    try:
        while True:
            raw = await websocket.receive_text()
            if tbl.seats.get(seat.key) is not seat:
                await websocket.send_text(
                    ws_messages.ErrorMessage(
                        error='The table was reset; reconnect to take a new seat.'
                    ).model_dump_json()
                )
                await websocket.close(code=1008)
                return

            try:
                client_msg: ws_messages.ClientMessage = (
                    _client_message_adapter.validate_python(json.loads(raw))
                )
            except (json.JSONDecodeError, pydantic.ValidationError) as exc:
                logger.warning('Player %r sent invalid message: %s', player_name, exc)
                await tbl.send_to(
                    seat,
                    ws_messages.ErrorMessage(
                        error=f'Invalid message: {exc}'
                    ).model_dump_json(),
                )
                continue

            if isinstance(client_msg, ws_messages.SubmitCommand):
                await _handle_submit_command(tbl, seat, client_msg)
            elif isinstance(client_msg, ws_messages.RequestStatus):
                update = ws_messages.StatusUpdate(status=tbl.session.status_for(seat.key))
                await tbl.send_to(seat, update.model_dump_json())

    except fastapi.WebSocketDisconnect:
        logger.info('Player %r disconnected', player_name)
        tbl.disconnect(seat.key, websocket)


async def _handle_submit_command(
    tbl: table.Table, seat: table.Seat, msg: ws_messages.SubmitCommand
) -> None:
    """Apply *msg* on behalf of *seat*, then broadcast or report the error."""
    command = actions.Command(
        action=msg.action, player=seat.key, targets=msg.targets, trade=msg.trade
    )
    logger.info('Player %r submitted %s', seat.name, command.action)

    result = tbl.session.process_action(command)
    if not result.success:
        await tbl.send_to(
            seat,
            ws_messages.ErrorMessage(
                error=result.error_message or 'Invalid command',
                error_kind=result.error_kind,
            ).model_dump_json(),
        )
        return

    await tbl.broadcast_status()
