"""
Go code generation for ShallowCopy methods: emitter, formatter and output sinks.
"""

from .emitter import (
    GENERATED_MARKER, DEFAULT_METHOD_NAME, DEFAULT_RECEIVER_NAME,
    generated_header, GoFileBuilder, emit_file
)
from .gofmt import GoSyntaxError, format_source
from .writer import DEFAULT_FILE_NAME, OutputSink, DirectorySink, StdoutSink

__all__ = [
    'GENERATED_MARKER', 'DEFAULT_METHOD_NAME', 'DEFAULT_RECEIVER_NAME',
    'generated_header', 'GoFileBuilder', 'emit_file',
    'GoSyntaxError', 'format_source',
    'DEFAULT_FILE_NAME', 'OutputSink', 'DirectorySink', 'StdoutSink',
]
