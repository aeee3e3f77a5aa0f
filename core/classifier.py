#!/usr/bin/env python3
"""
Decides which declared types get a generated ShallowCopy method.

A type qualifies when it is exported *and* either:
- has a manual ShallowCopy on itself or somewhere along its alias chain,
- aliases to a non-basic type eventually,
- is a struct.
"""

from __future__ import annotations

import logging

from core.errors import UnresolvedTypeError
from core.model import TypeDeclaration
from go_types import TypeInfo, TypeKind, is_exported

logger = logging.getLogger(__name__)

SHALLOW_COPY_METHOD = "ShallowCopy"


def has_shallow_copy_method(type_info: TypeInfo, method_name: str = SHALLOW_COPY_METHOD) -> bool:
    """Check if ``type_info`` has a manual copy method.

    Only methods declared directly on the type count (pointer receivers
    included); methods promoted from embedded fields are ignored.  The method
    must take no parameters and return exactly one value.
    """
    method = type_info.lookup_method(method_name)
    if method is None:
        return False
    if method.depth != 1:
        # ignore embedded methods
        return False
    if method.params != 0:
        return False
    return method.results == 1


def _require_resolved(declaration: TypeDeclaration, type_info: TypeInfo) -> None:
    if type_info.kind is TypeKind.INVALID:
        raise UnresolvedTypeError(declaration.name, declaration.position)


def should_be_copied(declaration: TypeDeclaration, method_name: str = SHALLOW_COPY_METHOD) -> bool:
    """Report whether ``declaration`` needs a ShallowCopy implementation.

    Raises UnresolvedTypeError when the declared type, or any link of its
    underlying chain, could not be resolved.
    """
    if not is_exported(declaration.name):
        return False

    type_info = declaration.type_info
    _require_resolved(declaration, type_info)

    # if it has a manual shallowcopy, we're fine
    if has_shallow_copy_method(type_info, method_name):
        return True

    # pointers copy by assignment, only the pointee's structure matters
    working = type_info
    base = type_info.underlying()
    if base.kind is TypeKind.POINTER:
        working = base.elem  # type: ignore[attr-defined]
        _require_resolved(declaration, working)
        # a pointer to an unexported type is no more eligible than the type
        if working.kind is TypeKind.NAMED and not is_exported(working.name):  # type: ignore[attr-defined]
            return False
        if has_shallow_copy_method(working, method_name):
            return True

    last = working
    current = working.underlying()
    seen = {id(working)}
    while current is not last:
        _require_resolved(declaration, current)
        if id(current) in seen:
            # a chain that loops back on itself never reaches a real type
            raise UnresolvedTypeError(declaration.name, declaration.position)
        seen.add(id(current))
        if has_shallow_copy_method(current, method_name):
            return True
        # named links are just more hops; decide on what they wrap.
        # aliases to anything besides basics need copy methods
        if current.kind not in (TypeKind.NAMED, TypeKind.BASIC):
            return True
        last, current = current, current.underlying()

    # structs are the only thing that's not a basic that's copiable by default
    return last.kind is TypeKind.STRUCT


__all__ = ["SHALLOW_COPY_METHOD", "has_shallow_copy_method", "should_be_copied"]
