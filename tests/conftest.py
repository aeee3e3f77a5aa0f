import os
import sys

import pytest

# Ensure project root is first on sys.path so the local packages are used
PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from core.model import Position, TypeDeclaration  # noqa: E402
from go_types import Named, TypeInfo, TypeName  # noqa: E402


def make_decl(name: str, type_info: TypeInfo, line: int = 1) -> TypeDeclaration:
    return TypeDeclaration(TypeName(name), type_info, Position("types.go", line, 6))


def make_named(name: str, base: TypeInfo, methods=()) -> Named:
    return Named(TypeName(name), base=base, methods=list(methods))


@pytest.fixture
def api_dump():
    """Type dump of a small package with one struct to generate for."""
    return {
        "packages": [
            {
                "name": "api",
                "path": "example.com/app/api",
                "dir": "api",
                "types": [
                    {
                        "name": "User",
                        "pos": "user.go:10:6",
                        "doc": ["// User is a user.", "// +shallowcopy:generate"],
                        "type": {"kind": "struct", "fields": [
                            {"name": "ID", "type": "int"},
                            {"name": "Name", "type": "string"},
                            {"name": "labels", "type": "map[string]string"},
                        ]},
                    },
                    {
                        "name": "ID",
                        "pos": "user.go:20:6",
                        "markers": {"shallowcopy:generate": True},
                        "type": "int",
                    },
                    {
                        "name": "internal",
                        "pos": "user.go:30:6",
                        "markers": ["+shallowcopy:generate"],
                        "type": {"kind": "struct", "fields": [{"name": "x", "type": "int"}]},
                    },
                ],
            }
        ]
    }
