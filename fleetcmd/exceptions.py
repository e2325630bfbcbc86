"""Exception types for fleet runs.

Run-level errors (template, inventory) abort a run before any device is
contacted. Per-device errors carry an :class:`ErrorKind` and are turned into
result values by the execution pipeline.
"""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    connect = "connect"
    auth = "auth"
    execute = "execute"
    parse = "parse"


class FleetError(Exception):
    """Base class for all fleetcmd errors."""


class TemplateError(FleetError):
    """Template missing, malformed, or incompatible with the inventory."""


class InventoryError(FleetError):
    """Inventory missing, unreadable, or structurally inconsistent."""


class CredentialError(FleetError, ValueError):
    """A credential was requested without an identity or a secret."""


class DeviceError(FleetError):
    """Failure contained to a single device."""

    kind: ErrorKind = ErrorKind.execute

    def __init__(self, message: str, *, kind: ErrorKind | None = None) -> None:
        super().__init__(message)
        if kind is not None:
            self.kind = kind


class TransportError(DeviceError):
    """Session could not be opened, or a command could not be executed."""

    kind = ErrorKind.connect


class FactsParseError(DeviceError):
    """A status document was malformed or had an unexpected shape."""

    kind = ErrorKind.parse
