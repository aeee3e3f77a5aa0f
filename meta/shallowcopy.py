"""
The one marker shallowcopy-gen understands.
"""
from __future__ import annotations

from typing import Mapping

from .markers import MarkerDefinition, MarkerHelp, MarkerRegistry, TargetType

ENABLE_MARKER_NAME = "shallowcopy:generate"

ENABLE_TYPE_MARKER = MarkerDefinition(ENABLE_MARKER_NAME, TargetType.TYPE, default=False)

ENABLE_TYPE_HELP = MarkerHelp(
    category="object",
    summary="enables or disables shallowcopy implementation generation for this type",
)


def make_enable_marker(name: str = ENABLE_MARKER_NAME) -> MarkerDefinition:
    if name == ENABLE_MARKER_NAME:
        return ENABLE_TYPE_MARKER
    return MarkerDefinition(name, TargetType.TYPE, default=False)


def register_markers(into: MarkerRegistry, definition: MarkerDefinition = ENABLE_TYPE_MARKER) -> None:
    into.register_all(definition)
    into.add_help(definition, ENABLE_TYPE_HELP)


def enabled_on_type(values: Mapping[str, bool], definition: MarkerDefinition = ENABLE_TYPE_MARKER) -> bool:
    return bool(values.get(definition.name, definition.default))


__all__ = [
    "ENABLE_MARKER_NAME", "ENABLE_TYPE_MARKER", "ENABLE_TYPE_HELP",
    "make_enable_marker", "register_markers", "enabled_on_type",
]
