"""
Adapter for JSON Go type dumps.

Turns the dump written by a go/types exporter into core.model Packages.
"""

from .parser import TypeResolver, load_json, load_packages, load_dump, parse_package

__all__ = ["TypeResolver", "load_json", "load_packages", "load_dump", "parse_package"]
