"""
Error types raised and accumulated by shallowcopy-gen.

Errors that can be tied to a declaration carry its Position and render as
``file:line:col: message``, the same shape Go tooling uses.
"""
from __future__ import annotations

from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from core.model import Position


class ShallowCopyError(Exception):
    """Base class for every error the generator reports."""


class PositionedError(ShallowCopyError):
    def __init__(self, message: str, position: Optional["Position"] = None) -> None:
        super().__init__(message)
        self.message = message
        self.position = position

    def __str__(self) -> str:
        if self.position is None:
            return self.message
        return f"{self.position}: {self.message}"


class UnresolvedTypeError(PositionedError):
    def __init__(self, type_name: str, position: Optional["Position"] = None) -> None:
        super().__init__(f"unknown type {type_name}", position)
        self.type_name = type_name


class NotStructError(PositionedError):
    def __init__(self, type_name: str, position: Optional["Position"] = None) -> None:
        super().__init__(f"{type_name} is not a struct type", position)
        self.type_name = type_name


class MarkerValueError(PositionedError):
    """A marker comment carried a value its definition cannot accept."""


class MarkerRegistrationError(ShallowCopyError):
    """The same marker was registered twice for one target."""


class EmissionError(ShallowCopyError):
    """Generated source failed to parse; this is a generator bug.

    ``raw_source`` keeps the unformatted text for postmortem inspection.
    """

    def __init__(self, message: str, raw_source: str) -> None:
        super().__init__(message)
        self.message = message
        self.raw_source = raw_source

    def __str__(self) -> str:
        return f"{self.message}\n--- unformatted source ---\n{self.raw_source}"


class OutputError(ShallowCopyError):
    """The output sink failed to persist a generated file."""


class ShortWriteError(OutputError):
    def __init__(self, target: str, written: int, expected: int) -> None:
        super().__init__(f"short write to {target}: wrote {written} of {expected} bytes")
        self.target = target
        self.written = written
        self.expected = expected


class TypeDumpError(ShallowCopyError):
    """The JSON type dump is malformed."""


class ConfigError(ShallowCopyError):
    """The generator configuration is invalid."""


__all__ = [
    "ShallowCopyError", "PositionedError",
    "UnresolvedTypeError", "NotStructError", "MarkerValueError",
    "MarkerRegistrationError", "EmissionError",
    "OutputError", "ShortWriteError",
    "TypeDumpError", "ConfigError",
]
