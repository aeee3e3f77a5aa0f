#!/usr/bin/env python3
"""
Base type aliases for shallowcopy-gen.
"""

from typing import NewType

# ---------- Identifier aliases ----------
TypeName = NewType('TypeName', str)
FieldName = NewType('FieldName', str)
MethodName = NewType('MethodName', str)
PackageName = NewType('PackageName', str)
PackagePath = NewType('PackagePath', str)
MarkerName = NewType('MarkerName', str)
