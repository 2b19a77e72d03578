"""Typed rejections raised by the Hexagon Island engine.

Every rejection derives from :class:`GameError` (itself a ``ValueError``) and
carries an :class:`ErrorKind` so that callers can report *why* a command was
refused without parsing the message.  None of these errors is fatal to the
session: a rejected command leaves the state unchanged.
"""

from __future__ import annotations

import enum


class ErrorKind(enum.StrEnum):
    """Category of a rejected operation."""

    TURN = 'turn'  # command from a player who is not active
    PHASE = 'phase'  # action not permitted right now
    TARGET = 'target'  # bad index, occupied, spacing or adjacency
    RESOURCE = 'resource'  # insufficient balance or non-producing kind
    STRUCTURE = 'structure'  # malformed command or roster request
    ROSTER = 'roster'  # active player cannot be resolved


class GameError(ValueError):
    """Base class for every engine rejection."""

    kind: ErrorKind = ErrorKind.STRUCTURE


class TurnViolation(GameError):
    kind = ErrorKind.TURN


class PhaseViolation(GameError):
    kind = ErrorKind.PHASE


class TargetViolation(GameError):
    kind = ErrorKind.TARGET


class ResourceViolation(GameError):
    kind = ErrorKind.RESOURCE


class StructuralViolation(GameError):
    kind = ErrorKind.STRUCTURE


class RosterError(GameError):
    kind = ErrorKind.ROSTER
