#!/usr/bin/env python3
"""
Resolved Go type information.

Every variant carries an explicit TypeKind tag so callers can dispatch on
``kind`` instead of inspecting classes.  ``underlying()`` follows go/types:
a Named type returns the type it wraps, every other variant returns itself,
so repeated unwrapping always reaches a fixed point.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

from .base import FieldName, MethodName, PackagePath, TypeName


class TypeKind(Enum):
    BASIC = "basic"
    NAMED = "named"
    POINTER = "pointer"
    STRUCT = "struct"
    SLICE = "slice"
    ARRAY = "array"
    MAP = "map"
    CHAN = "chan"
    FUNC = "func"
    INTERFACE = "interface"
    INVALID = "invalid"


COMPOSITE_KINDS: frozenset = frozenset({
    TypeKind.SLICE, TypeKind.ARRAY, TypeKind.MAP,
    TypeKind.CHAN, TypeKind.FUNC, TypeKind.INTERFACE,
})

BASIC_TYPE_NAMES: frozenset = frozenset({
    "bool", "string",
    "int", "int8", "int16", "int32", "int64",
    "uint", "uint8", "uint16", "uint32", "uint64", "uintptr",
    "byte", "rune",
    "float32", "float64", "complex64", "complex128",
    "unsafe.Pointer",
})


def is_exported(name: str) -> bool:
    """Report whether ``name`` starts with an upper-case letter."""
    return bool(name) and name[0].isupper()


@dataclass(frozen=True)
class Method:
    """A method in a type's method set.

    ``depth`` is the length of the lookup path: 1 for methods declared on the
    type itself, more for methods promoted through embedded fields.
    """
    name: MethodName
    params: int = 0
    results: int = 0
    depth: int = 1
    pointer_receiver: bool = False


class TypeInfo:
    kind: TypeKind = TypeKind.INVALID

    def underlying(self) -> "TypeInfo":
        return self

    def lookup_method(self, name: str) -> Optional[Method]:
        return None

    def type_string(self) -> str:
        raise NotImplementedError

    def __str__(self) -> str:
        return self.type_string()


class InvalidType(TypeInfo):
    """Sentinel for types the resolver could not determine."""
    kind = TypeKind.INVALID

    def type_string(self) -> str:
        return "invalid type"

    def __repr__(self) -> str:
        return "INVALID"


INVALID = InvalidType()


@dataclass(frozen=True)
class Basic(TypeInfo):
    name: str
    kind = TypeKind.BASIC

    def type_string(self) -> str:
        return self.name


@dataclass(frozen=True)
class Pointer(TypeInfo):
    elem: TypeInfo
    kind = TypeKind.POINTER

    def lookup_method(self, name: str) -> Optional[Method]:
        # the method set of *T includes the methods of T
        if self.elem.kind is TypeKind.NAMED:
            return self.elem.lookup_method(name)
        return None

    def type_string(self) -> str:
        return "*" + self.elem.type_string()


@dataclass(frozen=True)
class Field:
    name: FieldName
    type: TypeInfo
    embedded: bool = False


@dataclass(frozen=True)
class Struct(TypeInfo):
    fields: Tuple[Field, ...] = ()
    kind = TypeKind.STRUCT

    def field_named(self, name: str) -> Optional[Field]:
        for f in self.fields:
            if f.name == name:
                return f
        return None

    def field_names(self) -> List[FieldName]:
        return [f.name for f in self.fields]

    def type_string(self) -> str:
        if not self.fields:
            return "struct{}"
        parts = []
        for f in self.fields:
            parts.append(f.type.type_string() if f.embedded else f"{f.name} {f.type.type_string()}")
        return "struct{" + "; ".join(parts) + "}"


@dataclass(frozen=True)
class Composite(TypeInfo):
    """Slices, arrays, maps, channels, funcs and interfaces.

    None of these is basic or a struct, which is all the classifier needs to
    know about them; ``text`` keeps the source spelling for diagnostics.
    """
    composite_kind: TypeKind
    text: str

    def __post_init__(self) -> None:
        if self.composite_kind not in COMPOSITE_KINDS:
            raise ValueError(f"{self.composite_kind} is not a composite kind")

    @property
    def kind(self) -> TypeKind:  # type: ignore[override]
        return self.composite_kind

    def type_string(self) -> str:
        return self.text


@dataclass(eq=False)
class Named(TypeInfo):
    """A defined type.

    ``base`` is filled in by the resolver once every declaration of the
    package is known, so recursive and mutually referencing types can be
    represented.  It may be another Named type.
    """
    name: TypeName
    package: PackagePath = PackagePath("")
    base: TypeInfo = INVALID
    methods: List[Method] = field(default_factory=list)
    kind = TypeKind.NAMED

    def underlying(self) -> TypeInfo:
        return self.base

    def lookup_method(self, name: str) -> Optional[Method]:
        # a field with the same name shadows any promoted method
        base = terminal_underlying(self)
        if base.kind is TypeKind.STRUCT and base.field_named(name) is not None:  # type: ignore[attr-defined]
            return None
        for m in self.methods:
            if m.name == name:
                return m
        return None

    @property
    def qualified_name(self) -> str:
        if self.package:
            return f"{self.package}.{self.name}"
        return self.name

    def type_string(self) -> str:
        return self.qualified_name

    def __repr__(self) -> str:
        return f"Named({self.qualified_name!r})"


def terminal_underlying(type_info: TypeInfo, limit: int = 64) -> TypeInfo:
    """Unwrap ``type_info`` until it stops changing.

    Returns INVALID when the chain does not converge within ``limit`` hops.
    """
    last = type_info
    current = type_info.underlying()
    hops = 0
    while current is not last:
        hops += 1
        if hops > limit:
            return INVALID
        last, current = current, current.underlying()
    return last


__all__ = [
    "TypeKind", "COMPOSITE_KINDS", "BASIC_TYPE_NAMES", "is_exported",
    "Method", "TypeInfo", "InvalidType", "INVALID",
    "Basic", "Pointer", "Field", "Struct", "Composite", "Named",
    "terminal_underlying",
]
