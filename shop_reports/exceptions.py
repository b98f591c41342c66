"""Exceptions and failure values raised or returned by the reports registries."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


class ReportsError(Exception):
    """Base class for all shop-reports errors."""


class ValidationError(ReportsError, ValueError):
    """Raised when registration attributes are missing or malformed.

    A rejected registration never leaves partial state in the registry.
    """


class DuplicateItemError(ValidationError):
    """Raised when adding an item whose ID is already registered."""


class NotFoundError(ReportsError, KeyError):
    """Raised when looking up an ID that is not registered."""

    def __str__(self) -> str:
        # KeyError.__str__ returns repr() of the message.
        return str(self.args[0]) if self.args else ""


@dataclass
class Failure:
    """A typed, inspectable failure returned instead of raised.

    ``code`` is machine-readable (e.g. ``invalid_report``), ``message`` is
    human-readable and ``data`` carries the offending identifier.
    """

    code: str
    message: str
    data: Any = None

    def __bool__(self) -> bool:
        return False

