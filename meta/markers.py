"""
Marker definitions and the registry that recognises them in comments.

A marker is a ``+name`` or ``+name=value`` comment attached to a declaration.
Registries are plain objects: build one, register what you need and pass it
to whoever reads declarations.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from core.errors import MarkerRegistrationError, MarkerValueError
from core.model import TypeDeclaration
from go_types import MarkerName

logger = logging.getLogger(__name__)

_MARKER_RE = re.compile(r"^\+(?P<name>[A-Za-z][\w.:-]*)(?:=(?P<value>.*))?$")


class TargetType(Enum):
    PACKAGE = "package"
    TYPE = "type"
    FIELD = "field"


@dataclass(frozen=True)
class MarkerDefinition:
    """A boolean marker for one kind of target."""
    name: MarkerName
    target: TargetType = TargetType.TYPE
    default: bool = False

    def parse_value(self, raw: Optional[str]) -> bool:
        # a bare marker switches the flag on
        if raw is None or raw.strip() == "":
            return True
        value = raw.strip().lower()
        if value == "true":
            return True
        if value == "false":
            return False
        raise ValueError(f"marker {self.name} expects true or false, got {raw.strip()!r}")

    def coerce(self, value: Any) -> bool:
        if isinstance(value, bool):
            return value
        if value is None or isinstance(value, str):
            return self.parse_value(value)
        raise ValueError(f"marker {self.name} expects a boolean, got {value!r}")


@dataclass(frozen=True)
class MarkerHelp:
    category: str
    summary: str


class MarkerRegistry:
    def __init__(self) -> None:
        self._definitions: Dict[Tuple[TargetType, str], MarkerDefinition] = {}
        self._help: Dict[Tuple[TargetType, str], MarkerHelp] = {}

    def register(self, definition: MarkerDefinition) -> None:
        key = (definition.target, definition.name)
        if key in self._definitions:
            raise MarkerRegistrationError(
                f"marker {definition.name} already registered for {definition.target.value} targets"
            )
        self._definitions[key] = definition
        logger.debug("registered marker %s (%s)", definition.name, definition.target.value)

    def register_all(self, *definitions: MarkerDefinition) -> None:
        for definition in definitions:
            self.register(definition)

    def lookup(self, name: str, target: TargetType) -> Optional[MarkerDefinition]:
        return self._definitions.get((target, name))

    def add_help(self, definition: MarkerDefinition, help: MarkerHelp) -> None:
        self._help[(definition.target, definition.name)] = help

    def help_for(self, definition: MarkerDefinition) -> Optional[MarkerHelp]:
        return self._help.get((definition.target, definition.name))

    def definitions(self) -> List[MarkerDefinition]:
        return sorted(self._definitions.values(), key=lambda d: (d.target.value, d.name))

    def parse_comment(self, comment: str, target: TargetType) -> Optional[Tuple[MarkerDefinition, Optional[str]]]:
        """Recognise a registered marker in one comment line.

        Returns the definition and its raw value, or None for ordinary
        comments and markers nobody registered.
        """
        text = comment.strip()
        if text.startswith("//"):
            text = text[2:].strip()
        m = _MARKER_RE.match(text)
        if not m:
            return None
        definition = self.lookup(m.group("name"), target)
        if definition is None:
            return None
        return definition, m.group("value")

    def markers_for(self, declaration: TypeDeclaration) -> Dict[str, bool]:
        """Collect the values of registered type markers on ``declaration``.

        Comments are read in order, so a later marker overrides an earlier
        one; pre-parsed values are applied last.
        """
        values: Dict[str, bool] = {}
        try:
            for comment in declaration.marker_comments:
                found = self.parse_comment(comment, TargetType.TYPE)
                if found is None:
                    continue
                definition, raw = found
                values[definition.name] = definition.parse_value(raw)
            for name, value in declaration.markers.items():
                definition = self.lookup(name, TargetType.TYPE)
                if definition is None:
                    continue
                values[name] = definition.coerce(value)
        except ValueError as e:
            raise MarkerValueError(f"{declaration.name}: {e}", declaration.position) from e
        return values


__all__ = [
    "TargetType", "MarkerDefinition", "MarkerHelp", "MarkerRegistry",
]
