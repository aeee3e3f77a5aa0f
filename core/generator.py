#!/usr/bin/env python3
"""
Generation driver.

Walks the declarations of every package, keeps the ones marked with
``+shallowcopy:generate`` that the classifier accepts, and writes one
generated file per package.  Errors are collected on the package they belong
to; one package failing never stops the others.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from app.config import DEFAULT_CONFIG, GeneratorConfig
from core.classifier import has_shallow_copy_method, should_be_copied
from core.errors import (
    EmissionError, MarkerValueError, NotStructError, OutputError,
    ShallowCopyError, UnresolvedTypeError
)
from core.fields import extract_fields, struct_of
from core.model import CopySpec, Package, TypeDeclaration
from gen.shallowcopy.emitter import emit_file, generated_header
from gen.shallowcopy.writer import OutputSink
from go_types import TypeKind, terminal_underlying
from meta import MarkerRegistry, enabled_on_type, make_enable_marker, register_markers

logger = logging.getLogger(__name__)


@dataclass
class GenerationResult:
    outputs: List[str] = field(default_factory=list)
    errors: List[ShallowCopyError] = field(default_factory=list)
    packages: List[Package] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


class Generator:
    """Generates ShallowCopy method implementations."""

    def __init__(self, config: Optional[GeneratorConfig] = None,
                 registry: Optional[MarkerRegistry] = None) -> None:
        self.config = config or DEFAULT_CONFIG
        self.marker = make_enable_marker(self.config.marker_name)
        self.registry = registry if registry is not None else MarkerRegistry()
        if self.registry.lookup(self.marker.name, self.marker.target) is None:
            register_markers(self.registry, self.marker)
        self._header = generated_header(self.config.read_header(), self.config.year)

    def enabled(self, decl: TypeDeclaration) -> bool:
        return enabled_on_type(self.registry.markers_for(decl), self.marker)

    def collect(self, package: Package) -> List[CopySpec]:
        """Classify ``package``'s declarations and build their CopySpecs."""
        specs: List[CopySpec] = []
        for decl in package.declarations:
            try:
                spec = self._spec_for(decl)
            except (UnresolvedTypeError, NotStructError, MarkerValueError) as e:
                package.add_error(e)
                continue
            if spec is not None:
                specs.append(spec)
        return specs

    def _spec_for(self, decl: TypeDeclaration) -> Optional[CopySpec]:
        # copy when enabled specifically on this type
        if not self.enabled(decl):
            return None

        # avoid copying non-exported types, etc
        if not should_be_copied(decl, self.config.method_name):
            logger.debug("skipping %s: not eligible for %s", decl.name, self.config.method_name)
            return None

        # eligible, but a second method would not compile
        if has_shallow_copy_method(decl.type_info, self.config.method_name):
            logger.debug("skipping %s: %s is implemented by hand", decl.name, self.config.method_name)
            return None

        stype = struct_of(decl.type_info)
        if stype is None:
            if terminal_underlying(decl.type_info).kind is TypeKind.INVALID:
                raise UnresolvedTypeError(decl.name, decl.position)
            raise NotStructError(decl.name, decl.position)

        return CopySpec(decl.name, extract_fields(stype))

    def generate_package(self, package: Package, sink: OutputSink) -> Optional[str]:
        """Generate and write the file for one package.

        Returns where the file went, or None when nothing was written.
        """
        specs = self.collect(package)
        if not specs:
            logger.debug("nothing to generate for %s", package.display_name)
            return None

        try:
            contents = emit_file(
                package.name, specs,
                header=self._header,
                method_name=self.config.method_name,
                receiver_name=self.config.receiver_name,
            )
        except EmissionError as e:
            package.add_error(e)
            return None

        try:
            return sink.write(package, self.config.output_file_name, contents)
        except OutputError as e:
            package.add_error(e)
            return None

    def generate(self, packages: Sequence[Package], sink: OutputSink) -> GenerationResult:
        result = GenerationResult(packages=list(packages))
        if self.config.jobs > 1 and len(packages) > 1:
            with ThreadPoolExecutor(max_workers=self.config.jobs) as pool:
                outputs = list(pool.map(lambda p: self.generate_package(p, sink), packages))
        else:
            outputs = [self.generate_package(p, sink) for p in packages]

        for package, output in zip(packages, outputs):
            if output is not None:
                result.outputs.append(output)
            result.errors.extend(package.errors)
        logger.info("Generated %d file(s) for %d package(s), %d error(s)",
                    len(result.outputs), len(packages), len(result.errors))
        return result


__all__ = ["GenerationResult", "Generator"]
