#!/usr/bin/env python3
"""
CLI entrypoint for shallowcopy-gen.

Usage:
  shallowcopy-gen <types.json> [flags]
  python -m app.cli <types.json> [flags]

Flags:
  --output-dir DIR      write files below DIR instead of next to each package
  --stdout              print generated files instead of writing them
  --config PATH         YAML or JSON config file
  --header-file PATH    boilerplate prepended to every generated file
  --year YEAR           value for YEAR in the boilerplate
  --file-name NAME      generated file name
  --jobs N              packages generated in parallel
  --help-markers        list the recognised markers and exit
  -v / -q               more / less logging

Exit status: 0 on success, 1 when any error was reported, 2 on bad usage or input.
"""
from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional, TextIO

from adapters.go_json import load_dump
from app.config import DEFAULT_CONFIG, GeneratorConfig, load_config
from core.errors import ConfigError, TypeDumpError
from core.generator import GenerationResult, Generator
from gen.shallowcopy.writer import DirectorySink, OutputSink, StdoutSink
from meta import MarkerRegistry, make_enable_marker, register_markers
from utils.logging_config import configure_logging

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="shallowcopy-gen",
        description="Generate ShallowCopy methods for Go types marked +shallowcopy:generate.",
    )
    ap.add_argument("input", nargs="?", help="JSON type dump")
    out = ap.add_mutually_exclusive_group()
    out.add_argument("--output-dir", dest="output_directory")
    out.add_argument("--stdout", dest="to_stdout", action="store_true", default=None)
    ap.add_argument("--config")
    ap.add_argument("--header-file")
    ap.add_argument("--year")
    ap.add_argument("--file-name", dest="output_file_name")
    ap.add_argument("--jobs", type=int)
    ap.add_argument("--help-markers", action="store_true")
    verbosity = ap.add_mutually_exclusive_group()
    verbosity.add_argument("-v", "--verbose", action="store_true")
    verbosity.add_argument("-q", "--quiet", action="store_true")
    return ap


def parse_cli(argv: List[str], config: GeneratorConfig) -> tuple[argparse.Namespace, GeneratorConfig]:
    args = build_parser().parse_args(argv)
    if args.config:
        config = load_config(args.config, config)
    log_level = "DEBUG" if args.verbose else "WARNING" if args.quiet else None
    config = config.with_overrides(
        output_directory=args.output_directory,
        to_stdout=args.to_stdout,
        header_file=args.header_file,
        year=args.year,
        output_file_name=args.output_file_name,
        jobs=args.jobs,
        log_level=log_level,
    )
    return args, config


def print_marker_help(config: GeneratorConfig, out: TextIO) -> None:
    registry = MarkerRegistry()
    register_markers(registry, make_enable_marker(config.marker_name))
    for definition in registry.definitions():
        marker_help = registry.help_for(definition)
        category = marker_help.category if marker_help else "-"
        out.write(f"+{definition.name}  ({category}, {definition.target.value}, bool, default "
                  f"{str(definition.default).lower()})\n")
        if marker_help:
            out.write(f"    {marker_help.summary}\n")


def print_summary(result: GenerationResult, out: TextIO) -> None:
    if not result.errors:
        return
    out.write(f"{len(result.errors)} error(s):\n")
    for package in result.packages:
        for error in package.errors:
            out.write(f"  {package.display_name}: {error}\n")


def make_sink(config: GeneratorConfig) -> OutputSink:
    if config.to_stdout:
        return StdoutSink()
    return DirectorySink(config.output_directory)


def main(argv: Optional[List[str]] = None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    configure_logging()

    try:
        args, cfg = parse_cli(argv, DEFAULT_CONFIG)
    except SystemExit as e:
        return e.code if isinstance(e.code, int) else 2
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2
    configure_logging(cfg.log_level)

    if args.help_markers:
        print_marker_help(cfg, sys.stdout)
        return 0

    if not args.input:
        build_parser().print_usage(sys.stderr)
        print("Error: a type dump is required", file=sys.stderr)
        return 2

    try:
        packages = load_dump(args.input)
        generator = Generator(cfg)
    except (OSError, TypeDumpError, ConfigError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    logger.debug("loaded %d package(s) from %s", len(packages), args.input)
    result = generator.generate(packages, make_sink(cfg))
    print_summary(result, sys.stderr)
    return 0 if result.ok else 1


if __name__ == "__main__":
    raise SystemExit(main())
