#!/usr/bin/env python3
"""
ShallowCopy method emitter.

Builds the Go source for every CopySpec of one package and runs it through
the canonical formatter.  Emission is pure: the order of specs and of their
fields fully determines the output bytes.
"""

import logging
from typing import List, Optional, Sequence

from core.errors import ConfigError, EmissionError
from core.model import CopySpec
from gen.shallowcopy.gofmt import GoSyntaxError, format_source

logger = logging.getLogger(__name__)

GENERATED_MARKER = "// Code generated by shallowcopy-gen. DO NOT EDIT."
DEFAULT_METHOD_NAME = "ShallowCopy"
DEFAULT_RECEIVER_NAME = "o"


def _comment_lines(text: str) -> List[str]:
    """Prefix every line of ``text`` that is not already a Go comment."""
    raw_lines = text.splitlines()
    has_comments = any(l.lstrip().startswith(("//", "/*")) for l in raw_lines)
    out: List[str] = []
    in_block = False
    for line in raw_lines:
        stripped = line.strip()
        if in_block:
            out.append(line)
            in_block = "*/" not in line
        elif stripped.startswith("//"):
            out.append(line)
        elif stripped.startswith("/*"):
            out.append(line)
            in_block = "*/" not in stripped[2:]
        elif not stripped:
            # blank lines split comment groups; plain text stays one group
            out.append("" if has_comments else "//")
        else:
            out.append(("// " + line).rstrip())
    if in_block:
        raise ConfigError("header comment is not terminated: missing */")
    return out


def generated_header(header_text: Optional[str] = None, year: Optional[str] = None) -> str:
    """Render the comment block that opens every generated file.

    ``header_text`` is a boilerplate file's contents; its ``YEAR`` token is
    replaced with ``year`` and a missing comment prefix is added per line.
    Raises ConfigError for an unterminated block comment.
    """
    lines: List[str] = []
    if header_text and header_text.strip():
        text = header_text.strip("\n")
        if year:
            text = text.replace("YEAR", year)
        lines.extend(_comment_lines(text))
        lines.append("")
    lines.append(GENERATED_MARKER)
    return "\n".join(lines)


class GoFileBuilder:
    """Accumulates ShallowCopy methods for one package.

    Methods chain::

        GoFileBuilder("api").header(h).copy_method(spec).copy_method(other).render()
    """

    def __init__(self, package_name: str, method_name: str = DEFAULT_METHOD_NAME,
                 receiver_name: str = DEFAULT_RECEIVER_NAME) -> None:
        self.package_name = package_name
        self.method_name = method_name
        self.receiver_name = receiver_name
        self._header: Optional[str] = None
        self._methods: List[str] = []

    def header(self, text: Optional[str]) -> "GoFileBuilder":
        self._header = text
        return self

    def copy_method(self, spec: CopySpec) -> "GoFileBuilder":
        recv = self.receiver_name
        lines = [
            f"func ({recv} {spec.type_name}) {self.method_name}() {spec.type_name} {{",
            f"return {spec.type_name}{{",
        ]
        lines.extend(f"{name}: {recv}.{name}," for name in spec.fields)
        lines.append("}")
        lines.append("}")
        self._methods.append("\n".join(lines))
        return self

    def render(self) -> str:
        """Return the raw, unformatted source."""
        parts: List[str] = []
        if self._header:
            parts.append(self._header)
        parts.append(f"package {self.package_name}")
        parts.extend(self._methods)
        return "\n\n".join(parts) + "\n"


def emit_file(package_name: str, specs: Sequence[CopySpec], header: Optional[str] = None,
              method_name: str = DEFAULT_METHOD_NAME,
              receiver_name: str = DEFAULT_RECEIVER_NAME) -> bytes:
    """Render and format one generated file.

    Raises EmissionError, carrying the unformatted text, when the generated
    source does not parse.
    """
    builder = GoFileBuilder(package_name, method_name, receiver_name).header(header)
    for spec in specs:
        builder.copy_method(spec)
    raw = builder.render()
    try:
        formatted = format_source(raw)
    except GoSyntaxError as e:
        raise EmissionError(f"generated code for package {package_name} does not parse: {e}", raw) from e
    logger.debug("emitted %d ShallowCopy method(s) for package %s", len(specs), package_name)
    return formatted.encode("utf-8")


__all__ = [
    "GENERATED_MARKER", "DEFAULT_METHOD_NAME", "DEFAULT_RECEIVER_NAME",
    "generated_header", "GoFileBuilder", "emit_file",
]
