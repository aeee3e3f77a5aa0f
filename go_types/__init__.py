#!/usr/bin/env python3
"""
Types module for shallowcopy-gen.
Resolved Go type information plus the raw shapes of the type dump.
"""

from .base import (
    TypeName, FieldName, MethodName,
    PackageName, PackagePath, MarkerName
)

from .model import (
    TypeKind, COMPOSITE_KINDS, BASIC_TYPE_NAMES, is_exported,
    Method, TypeInfo, InvalidType, INVALID,
    Basic, Pointer, Field, Struct, Composite, Named,
    terminal_underlying
)

from .dump import (
    RawDump, RawPackageData, RawDeclarationData, RawTypeExpr,
    RawFieldData, RawMethodData, RawPositionData, RawMarkerData
)

__all__ = [
    # Identifiers
    'TypeName', 'FieldName', 'MethodName',
    'PackageName', 'PackagePath', 'MarkerName',

    # Type information
    'TypeKind', 'COMPOSITE_KINDS', 'BASIC_TYPE_NAMES', 'is_exported',
    'Method', 'TypeInfo', 'InvalidType', 'INVALID',
    'Basic', 'Pointer', 'Field', 'Struct', 'Composite', 'Named',
    'terminal_underlying',

    # Dump shapes
    'RawDump', 'RawPackageData', 'RawDeclarationData', 'RawTypeExpr',
    'RawFieldData', 'RawMethodData', 'RawPositionData', 'RawMarkerData'
]
