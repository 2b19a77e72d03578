"""Shared application settings read from environment variables."""

import os


def _optional_int(name: str) -> int | None:
    value = os.environ.get(name)
    return None if value in (None, '') else int(value)


LOG_LEVEL: str = os.environ.get('LOG_LEVEL', 'INFO').upper()

# Defaults for a new Hexagon Island session.
NUM_PLAYERS: int = int(os.environ.get('ISLAND_NUM_PLAYERS', '2'))
SCORE_TO_WIN: int = int(os.environ.get('ISLAND_SCORE_TO_WIN', '10'))
BOARD_WIDTH: int = int(os.environ.get('ISLAND_BOARD_WIDTH', '5'))
# Unset means a fresh random board every game.
BOARD_SEED: int | None = _optional_int('ISLAND_BOARD_SEED')
