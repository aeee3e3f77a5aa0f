#!/usr/bin/env python3
"""
Raw JSON shapes of the Go type dump consumed by adapters.go_json.
"""

from typing import Any, Dict, List, Union

# ---------- Type aliases for dump parsing ----------
RawDump = Dict[str, Any]
RawPackageData = Dict[str, Any]
RawDeclarationData = Dict[str, Any]
RawTypeExpr = Union[Dict[str, Any], str]
RawFieldData = Dict[str, Any]
RawMethodData = Dict[str, Any]
RawPositionData = Union[Dict[str, Any], str]
RawMarkerData = Union[Dict[str, Any], List[str]]
