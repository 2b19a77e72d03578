"""FastAPI application for the Hexagon Island server."""

import common.app

from .routers import hexagon_island

app = common.app.create_app(title='Hexagon Island')

app.include_router(hexagon_island.router)
