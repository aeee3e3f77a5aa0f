#!/usr/bin/env python3
"""
In-memory model of the packages handed to the generator.

A Package is one compilation unit: its declarations are classified together
and at most one generated file is produced for it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from core.errors import ShallowCopyError
from go_types import (
    FieldName, PackageName, PackagePath, TypeInfo, TypeName,
    INVALID, is_exported
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Position:
    file: str = ""
    line: int = 0
    column: int = 0

    def __str__(self) -> str:
        if not self.file:
            return "-"
        if not self.line:
            return self.file
        if not self.column:
            return f"{self.file}:{self.line}"
        return f"{self.file}:{self.line}:{self.column}"


@dataclass
class TypeDeclaration:
    """A named type as it appears in source."""
    name: TypeName
    type_info: TypeInfo = INVALID
    position: Optional[Position] = None

    # Pre-parsed marker values and raw marker comments (``// +name=value``)
    markers: Dict[str, Any] = field(default_factory=dict)
    marker_comments: List[str] = field(default_factory=list)

    @property
    def exported(self) -> bool:
        return is_exported(self.name)


@dataclass(frozen=True)
class CopySpec:
    """One ShallowCopy method to emit: the type and its fields, in order."""
    type_name: TypeName
    fields: List[FieldName]


@dataclass
class Package:
    name: PackageName
    path: PackagePath = PackagePath("")
    directory: str = ""
    declarations: List[TypeDeclaration] = field(default_factory=list)
    errors: List[ShallowCopyError] = field(default_factory=list)

    def add_error(self, error: ShallowCopyError) -> None:
        logger.warning("%s: %s", self.display_name, error)
        self.errors.append(error)

    @property
    def display_name(self) -> str:
        return self.path or self.name

    def declaration(self, name: str) -> Optional[TypeDeclaration]:
        for decl in self.declarations:
            if decl.name == name:
                return decl
        return None


__all__ = ["Position", "TypeDeclaration", "CopySpec", "Package"]
