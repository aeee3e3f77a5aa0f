"""
Loader for Go type dumps.

A type dump is the JSON description of one or more Go packages, as produced
by a go/types based exporter::

    {
      "packages": [
        {
          "name": "api",
          "path": "example.com/app/api",
          "dir": "pkg/api",
          "types": [
            {
              "name": "User",
              "pos": "types.go:12:6",
              "doc": ["// +shallowcopy:generate"],
              "type": {"kind": "struct", "fields": [
                {"name": "ID", "type": "int"},
                {"name": "Tags", "type": "[]string"},
                {"type": "*meta.Object", "embedded": true}
              ]},
              "methods": [{"name": "ShallowCopy", "params": 0, "results": 1}]
            }
          ]
        }
      ],
      "external": [
        {"package": "meta", "name": "Object", "type": {"kind": "struct", "fields": []}}
      ]
    }

Type expressions are either objects with a ``kind`` (basic, named, pointer,
struct, slice, array, map, chan, func, interface) or Go spellings such as
``"int"``, ``"*User"``, ``"[]string"``, ``"map[string]int"`` or
``"meta.Object"``.  Names are resolved against the package's declarations,
then the ``external`` table; anything else resolves to INVALID.
"""
from __future__ import annotations

import logging
import re
from typing import Any, Dict, List, Optional, Tuple

import orjson

from core.errors import TypeDumpError
from core.model import Package, Position, TypeDeclaration
from go_types import (
    BASIC_TYPE_NAMES, INVALID, Basic, Composite, Field, FieldName, Method, MethodName,
    Named, PackageName, PackagePath, Pointer, Struct, TypeInfo, TypeKind, TypeName,
    RawDeclarationData, RawDump, RawFieldData, RawMarkerData, RawMethodData, RawPackageData,
    RawPositionData, RawTypeExpr,
)

logger = logging.getLogger(__name__)

_IDENT_RE = re.compile(r"^[^\W\d]\w*$", re.UNICODE)
_QUALIFIED_RE = re.compile(r"^(?P<pkg>[^\W\d][\w]*)\.(?P<name>[^\W\d]\w*)$", re.UNICODE)
_ARRAY_RE = re.compile(r"^\[(?P<len>[^\]]+)\](?P<elem>.+)$")

_COMPOSITE_KINDS = {
    "slice": TypeKind.SLICE,
    "array": TypeKind.ARRAY,
    "map": TypeKind.MAP,
    "chan": TypeKind.CHAN,
    "func": TypeKind.FUNC,
    "interface": TypeKind.INTERFACE,
}


def _error_type() -> Named:
    # the predeclared error interface
    return Named(
        TypeName("error"),
        base=Composite(TypeKind.INTERFACE, "interface{Error() string}"),
        methods=[Method(MethodName("Error"), params=0, results=1)],
    )


ERROR_TYPE = _error_type()


def load_json(path: str) -> Any:
    try:
        with open(path, "rb") as f:
            return orjson.loads(f.read())
    except orjson.JSONDecodeError as e:
        raise TypeDumpError(f"{path}: invalid JSON: {e}") from e


def parse_position(raw: Optional[RawPositionData], default_file: str = "") -> Optional[Position]:
    if raw is None:
        return Position(default_file) if default_file else None
    if isinstance(raw, str):
        parts = raw.rsplit(":", 2)
        nums: List[int] = []
        while len(parts) > 1 and parts[-1].isdigit():
            nums.insert(0, int(parts.pop()))
        line = nums[0] if nums else 0
        column = nums[1] if len(nums) > 1 else 0
        return Position(":".join(parts), line, column)
    if isinstance(raw, dict):
        try:
            return Position(
                str(raw.get("file") or default_file),
                int(raw.get("line") or 0),
                int(raw.get("column") or raw.get("col") or 0),
            )
        except (TypeError, ValueError) as e:
            raise TypeDumpError(f"invalid position {raw!r}") from e
    raise TypeDumpError(f"invalid position {raw!r}")


def parse_method(raw: RawMethodData) -> Method:
    if not isinstance(raw, dict) or not raw.get("name"):
        raise TypeDumpError(f"method entries need a name: {raw!r}")

    def count(key: str, default: int) -> int:
        value = raw.get(key, default)
        # bool is an int subclass
        if isinstance(value, int) and not isinstance(value, bool) and value >= 0:
            return value
        raise TypeDumpError(f"method {raw['name']}: {key} must be a non-negative count, got {value!r}")

    def arity(key: str) -> int:
        if isinstance(raw.get(key), list):
            return len(raw[key])
        return count(key, 0)

    return Method(
        name=MethodName(str(raw["name"])),
        params=arity("params"),
        results=arity("results"),
        depth=count("depth", 1),
        pointer_receiver=bool(raw.get("pointer", raw.get("pointer_receiver", False))),
    )


def embedded_field_name(type_text: str) -> FieldName:
    """Name of an embedded field: its type name without package or pointer."""
    name = type_text.strip().lstrip("*")
    name = name.split("[", 1)[0]
    return FieldName(name.rsplit(".", 1)[-1])


def _split_top_level(s: str, open_ch: str, close_ch: str) -> Tuple[str, str]:
    """Split ``open ... close rest`` at the matching close bracket."""
    depth = 0
    for i, ch in enumerate(s):
        if ch == open_ch:
            depth += 1
        elif ch == close_ch:
            depth -= 1
            if depth == 0:
                return s[1:i], s[i + 1:]
    raise TypeDumpError(f"unbalanced {open_ch}{close_ch} in type expression {s!r}")


class TypeResolver:
    """Resolves dump type expressions within one package's scope."""

    def __init__(self, package_path: str, scope: Dict[str, Named],
                 external: Optional[Dict[str, Named]] = None) -> None:
        self.package_path = package_path
        self.scope = scope
        self.external = external if external is not None else {}

    def lookup(self, name: str, package: Optional[str] = None) -> TypeInfo:
        if package is None or package == self.package_path:
            if name in self.scope:
                return self.scope[name]
            if name in BASIC_TYPE_NAMES:
                return Basic(name)
            if name == "error":
                return ERROR_TYPE
            logger.debug("unresolved name %s in %s", name, self.package_path)
            return INVALID
        qualified = f"{package}.{name}"
        if qualified in BASIC_TYPE_NAMES:
            return Basic(qualified)
        found = self.external.get(qualified)
        if found is None:
            logger.debug("unresolved external type %s", qualified)
            return INVALID
        return found

    def resolve(self, expr: Optional[RawTypeExpr]) -> TypeInfo:
        if expr is None:
            return INVALID
        if isinstance(expr, str):
            return self.resolve_string(expr)
        if isinstance(expr, dict):
            return self.resolve_object(expr)
        raise TypeDumpError(f"invalid type expression {expr!r}")

    def resolve_string(self, text: str) -> TypeInfo:
        s = text.strip()
        if not s:
            raise TypeDumpError("empty type expression")
        if s.startswith("*"):
            return Pointer(self.resolve_string(s[1:]))
        if s.startswith("("):
            inner, rest = _split_top_level(s, "(", ")")
            if rest.strip():
                raise TypeDumpError(f"cannot parse type expression {text!r}")
            return self.resolve_string(inner)
        if s.startswith("[]"):
            return Composite(TypeKind.SLICE, s)
        if s.startswith("["):
            if not _ARRAY_RE.match(s):
                raise TypeDumpError(f"cannot parse type expression {text!r}")
            return Composite(TypeKind.ARRAY, s)
        if s.startswith("map["):
            return Composite(TypeKind.MAP, s)
        if s.startswith(("chan ", "chan<-", "<-chan")):
            return Composite(TypeKind.CHAN, s)
        if s.startswith("func(") or s == "func()":
            return Composite(TypeKind.FUNC, s)
        if s.startswith("interface{") or s == "any":
            return Composite(TypeKind.INTERFACE, "interface{}" if s == "any" else s)
        if s.startswith("struct{"):
            body, rest = _split_top_level(s[len("struct"):], "{", "}")
            if body.strip() or rest.strip():
                raise TypeDumpError(f"struct types with fields need the object form: {text!r}")
            return Struct(())
        # generic instantiations resolve to their origin type
        base = s.split("[", 1)[0]
        if _IDENT_RE.match(base):
            return self.lookup(base)
        m = _QUALIFIED_RE.match(base)
        if m:
            return self.lookup(m.group("name"), m.group("pkg"))
        raise TypeDumpError(f"cannot parse type expression {text!r}")

    def resolve_object(self, expr: Dict[str, Any]) -> TypeInfo:
        kind = expr.get("kind")
        if kind == "basic":
            name = expr.get("name")
            if name not in BASIC_TYPE_NAMES:
                raise TypeDumpError(f"unknown basic type {name!r}")
            return Basic(name)
        if kind == "named":
            if not expr.get("name"):
                raise TypeDumpError(f"named type without a name: {expr!r}")
            return self.lookup(str(expr["name"]), expr.get("package"))
        if kind == "pointer":
            return Pointer(self.resolve(expr.get("elem")))
        if kind == "struct":
            return Struct(tuple(self.resolve_field(f) for f in expr.get("fields") or []))
        if kind in _COMPOSITE_KINDS:
            return Composite(_COMPOSITE_KINDS[kind], expr.get("text") or self._spell(kind, expr))
        if kind == "invalid":
            return INVALID
        raise TypeDumpError(f"unknown type kind {kind!r}")

    def resolve_field(self, raw: RawFieldData) -> Field:
        if isinstance(raw, str):
            # bare embedded type
            raw = {"type": raw, "embedded": True}
        if not isinstance(raw, dict):
            raise TypeDumpError(f"invalid field {raw!r}")
        type_expr = raw.get("type")
        embedded = bool(raw.get("embedded", False))
        name = raw.get("name")
        type_info = self.resolve(type_expr)
        if not name:
            if not embedded:
                raise TypeDumpError(f"field without a name: {raw!r}")
            spelled = type_expr if isinstance(type_expr, str) else type_info.type_string()
            if type_info.kind is TypeKind.INVALID and not isinstance(type_expr, str):
                raise TypeDumpError(f"cannot name embedded field {raw!r}")
            name = embedded_field_name(spelled)
        return Field(FieldName(str(name)), type_info, embedded)

    def _spell(self, kind: str, expr: Dict[str, Any]) -> str:
        def text(key: str) -> str:
            sub = expr.get(key)
            if isinstance(sub, str):
                return sub
            if sub is None:
                return "?"
            return self.resolve(sub).type_string()

        if kind == "slice":
            return "[]" + text("elem")
        if kind == "array":
            return f"[{expr.get('len', '?')}]" + text("elem")
        if kind == "map":
            return f"map[{text('key')}]{text('value')}"
        if kind == "chan":
            return "chan " + text("elem")
        if kind == "func":
            return "func()"
        return "interface{}"


def _marker_comments(raw: RawDeclarationData) -> Tuple[List[str], Dict[str, Any]]:
    comments: List[str] = []
    doc = raw.get("doc")
    if isinstance(doc, str):
        comments.extend(doc.splitlines())
    elif isinstance(doc, list):
        comments.extend(str(c) for c in doc)
    elif doc is not None:
        raise TypeDumpError(f"{raw.get('name')}: doc must be a string or a list")
    markers: Optional[RawMarkerData] = raw.get("markers")
    values: Dict[str, Any] = {}
    if isinstance(markers, list):
        comments.extend(str(m) for m in markers)
    elif isinstance(markers, dict):
        values.update(markers)
    elif markers is not None:
        raise TypeDumpError(f"{raw.get('name')}: markers must be a list or a mapping")
    return comments, values


def _external_types(entries: Any) -> Dict[str, Named]:
    if not entries:
        return {}
    if not isinstance(entries, list):
        raise TypeDumpError("external must be a list")
    by_package: Dict[str, Dict[str, Named]] = {}
    table: Dict[str, Named] = {}
    pending: List[Tuple[Named, Any]] = []
    for raw in entries:
        if not isinstance(raw, dict) or not raw.get("name") or not raw.get("package"):
            raise TypeDumpError(f"external entries need a name and a package: {raw!r}")
        pkg = str(raw["package"])
        named = Named(TypeName(str(raw["name"])), PackagePath(pkg),
                      methods=[parse_method(m) for m in raw.get("methods") or []])
        by_package.setdefault(pkg, {})[named.name] = named
        # reachable both as "k8s.io/api/core/v1.Pod" and as "v1.Pod"
        table[f"{pkg}.{named.name}"] = named
        table[f"{pkg.rsplit('/', 1)[-1]}.{named.name}"] = named
        pending.append((named, raw.get("type")))
    for named, type_expr in pending:
        resolver = TypeResolver(named.package, by_package[named.package], table)
        named.base = resolver.resolve(type_expr)
    return table


def break_alias_cycles(types: List[Named]) -> None:
    """Invalidate named types whose underlying chain loops back on itself."""
    for start in types:
        path: List[Named] = []
        current: TypeInfo = start
        while current.kind is TypeKind.NAMED:
            if any(p is current for p in path):
                cycle = path[next(i for i, p in enumerate(path) if p is current):]
                for named in cycle:
                    named.base = INVALID
                logger.warning("invalid recursive type %s", " -> ".join(n.name for n in cycle))
                break
            path.append(current)  # type: ignore[arg-type]
            current = current.underlying()


def parse_package(raw: RawPackageData, external: Optional[Dict[str, Named]] = None) -> Package:
    if not isinstance(raw, dict) or not raw.get("name"):
        raise TypeDumpError(f"packages need a name: {raw!r}"[:200])
    name = str(raw["name"])
    path = str(raw.get("path") or name)
    package = Package(
        name=PackageName(name),
        path=PackagePath(path),
        directory=str(raw.get("dir") or raw.get("directory") or ""),
    )

    entries = raw.get("types") or []
    if not isinstance(entries, list):
        raise TypeDumpError(f"package {name}: types must be a list")

    scope: Dict[str, Named] = {}
    pending: List[Tuple[TypeDeclaration, Any]] = []
    for entry in entries:
        if not isinstance(entry, dict) or not entry.get("name"):
            raise TypeDumpError(f"package {name}: type entries need a name: {entry!r}"[:200])
        type_name = TypeName(str(entry["name"]))
        comments, values = _marker_comments(entry)
        decl = TypeDeclaration(
            name=type_name,
            position=parse_position(entry.get("pos"), str(entry.get("file") or "")),
            markers=values,
            marker_comments=comments,
        )
        if entry.get("type") is not None:
            named = Named(type_name, PackagePath(path),
                          methods=[parse_method(m) for m in entry.get("methods") or []])
            scope[type_name] = named
            decl.type_info = named
        package.declarations.append(decl)
        pending.append((decl, entry.get("type")))

    resolver = TypeResolver(path, scope, external)
    for decl, type_expr in pending:
        if decl.type_info.kind is TypeKind.NAMED:
            decl.type_info.base = resolver.resolve(type_expr)  # type: ignore[attr-defined]
    break_alias_cycles(list(scope.values()))

    logger.debug("loaded package %s with %d type(s)", path, len(package.declarations))
    return package


def load_packages(data: RawDump) -> List[Package]:
    """Build packages from a parsed type dump.

    Accepts ``{"packages": [...]}``, a bare list of packages, or a single
    package object.
    """
    external: Dict[str, Named] = {}
    if isinstance(data, list):
        raw_packages = data
    elif isinstance(data, dict) and "packages" in data:
        raw_packages = data["packages"]
        external = _external_types(data.get("external"))
    elif isinstance(data, dict):
        raw_packages = [data]
        external = _external_types(data.get("external"))
    else:
        raise TypeDumpError("type dump must be an object or a list of packages")
    if not isinstance(raw_packages, list):
        raise TypeDumpError("packages must be a list")
    return [parse_package(p, external) for p in raw_packages]


def load_dump(path: str) -> List[Package]:
    return load_packages(load_json(path))


__all__ = [
    "ERROR_TYPE", "load_json", "parse_position", "parse_method", "embedded_field_name",
    "TypeResolver", "break_alias_cycles", "parse_package", "load_packages", "load_dump",
]
