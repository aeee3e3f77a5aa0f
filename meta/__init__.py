from .markers import TargetType, MarkerDefinition, MarkerHelp, MarkerRegistry
from .shallowcopy import (
    ENABLE_MARKER_NAME,
    ENABLE_TYPE_MARKER,
    ENABLE_TYPE_HELP,
    make_enable_marker,
    register_markers,
    enabled_on_type,
)

__all__ = [
    "TargetType",
    "MarkerDefinition",
    "MarkerHelp",
    "MarkerRegistry",
    "ENABLE_MARKER_NAME",
    "ENABLE_TYPE_MARKER",
    "ENABLE_TYPE_HELP",
    "make_enable_marker",
    "register_markers",
    "enabled_on_type",
]
