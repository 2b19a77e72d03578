"""HTTP routes for the Hexagon Island table.

Registers:

* ``GET  /island``                    : table summary
* ``GET  /island/status/{player_key}`` : one player's status snapshot
* ``POST /island/configure``          : replace the configuration (boot only)
* ``POST /island/reset``              : reset the session, keeping its config

The WebSocket endpoint (``/island/ws/{player_name}``) is defined in
:mod:`island.app.hexagon.server.ws_handler` and included here so that a
single ``app.include_router(hexagon_island.router)`` call in ``main.py``
registers everything.
"""

from __future__ import annotations

import fastapi

from ..hexagon.errors import PhaseViolation, StructuralViolation
from ..hexagon.models import game_state, status, ws_messages
from ..hexagon.server import table, ws_handler

router = fastapi.APIRouter()

# Include the WebSocket router so all /island routes live under one router.
router.include_router(ws_handler.router)


# ---------------------------------------------------------------------------
# Response models
# ---------------------------------------------------------------------------


class TableSummary(status.Summary):
    """Returned by GET /island."""

    connected: int


def _summary() -> TableSummary:
    tbl = table.table
    return TableSummary(
        **tbl.session.summary().model_dump(), connected=tbl.connected_count
    )


# ---------------------------------------------------------------------------
# HTTP endpoints
# ---------------------------------------------------------------------------


@router.get('/island', response_model=TableSummary)
async def table_summary() -> TableSummary:
    """Return who is seated and where the match stands."""
    return _summary()


@router.get('/island/status/{player_key}', response_model=status.Status)
async def player_status(player_key: str) -> status.Status:
    """Return the status snapshot for *player_key*."""
    tbl = table.table
    if player_key not in tbl.seats:
        raise fastapi.HTTPException(status_code=404, detail='Unknown player key')
    return tbl.session.status_for(player_key)


@router.post('/island/configure', response_model=TableSummary)
async def configure(config: game_state.Config) -> TableSummary:
    """Replace the configuration; only possible before the board is dealt."""
    try:
        table.table.session.configure(config)
    except PhaseViolation as exc:
        raise fastapi.HTTPException(status_code=409, detail=str(exc)) from exc
    except StructuralViolation as exc:
        raise fastapi.HTTPException(status_code=400, detail=str(exc)) from exc
    return _summary()


@router.post('/island/reset', response_model=TableSummary)
async def reset() -> TableSummary:
    """Reset the session and release every seat."""
    tbl = table.table
    await tbl.broadcast(ws_messages.TableReset().model_dump_json())
    tbl.reset()
    return _summary()
