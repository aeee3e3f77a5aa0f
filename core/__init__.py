#!/usr/bin/env python3
"""
Core model, errors and the ShallowCopy eligibility rules.
"""

from .errors import (
    ShallowCopyError, PositionedError,
    UnresolvedTypeError, NotStructError, MarkerValueError,
    MarkerRegistrationError, EmissionError,
    OutputError, ShortWriteError,
    TypeDumpError, ConfigError
)
from .model import Position, TypeDeclaration, CopySpec, Package

__all__ = [
    'ShallowCopyError', 'PositionedError',
    'UnresolvedTypeError', 'NotStructError', 'MarkerValueError',
    'MarkerRegistrationError', 'EmissionError',
    'OutputError', 'ShortWriteError',
    'TypeDumpError', 'ConfigError',
    'Position', 'TypeDeclaration', 'CopySpec', 'Package'
]
