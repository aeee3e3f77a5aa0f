"""
Field extraction for eligible struct types.
"""
from __future__ import annotations

from typing import List, Optional

from go_types import FieldName, Struct, TypeInfo, TypeKind, terminal_underlying

BLANK_IDENTIFIER = "_"


def extract_fields(struct: Struct) -> List[FieldName]:
    """Return the names of ``struct``'s fields in declaration order.

    Unexported fields are included: the generated method lives in the same
    package as the type.  Blank fields are left out since Go can neither
    select nor key them.
    """
    return [f.name for f in struct.fields if f.name != BLANK_IDENTIFIER]


def struct_of(type_info: TypeInfo) -> Optional[Struct]:
    """Return the struct a declared type resolves to, or None."""
    base = terminal_underlying(type_info)
    if base.kind is TypeKind.STRUCT:
        return base  # type: ignore[return-value]
    return None


__all__ = ["BLANK_IDENTIFIER", "extract_fields", "struct_of"]
