from __future__ import annotations

import logging
import os
import sys
import threading
from typing import BinaryIO, Optional, Protocol, TextIO

from core.errors import OutputError, ShortWriteError
from core.model import Package

logger = logging.getLogger(__name__)

DEFAULT_FILE_NAME = "zz_generated.shallowcopy.go"


class OutputSink(Protocol):
    def write(self, package: Package, file_name: str, data: bytes) -> str: ...


def write_all(fh: BinaryIO, data: bytes, target: str) -> None:
    """Write ``data`` in one call and fail on a partial write."""
    written = fh.write(data)
    if written is not None and written < len(data):
        raise ShortWriteError(target, written, len(data))


class DirectorySink:
    """Writes each package's file below ``root``.

    With no root the package's own directory is used, which is where
    generated Go files normally live.
    """

    def __init__(self, root: Optional[str] = None) -> None:
        self.root = root

    def path_for(self, package: Package, file_name: str) -> str:
        directory = package.directory or package.name
        if self.root:
            directory = os.path.join(self.root, directory)
        return os.path.join(directory, file_name)

    def open(self, path: str) -> BinaryIO:
        os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
        return open(path, "wb")

    def write(self, package: Package, file_name: str, data: bytes) -> str:
        path = self.path_for(package, file_name)
        try:
            with self.open(path) as fh:
                write_all(fh, data, path)
        except OSError as e:
            raise OutputError(f"cannot write {path}: {e}") from e
        logger.info("Written %s", path)
        return path


class StdoutSink:
    """Prints every generated file to a text stream, one banner per file."""

    def __init__(self, stream: Optional[TextIO] = None) -> None:
        self.stream = stream
        # packages may be written from several threads; one file per write
        self._lock = threading.Lock()

    def write(self, package: Package, file_name: str, data: bytes) -> str:
        stream = self.stream or sys.stdout
        target = f"{package.display_name}/{file_name}"
        text = f"// {target}\n" + data.decode("utf-8")
        with self._lock:
            written = stream.write(text)
            if written is not None and written < len(text):
                raise ShortWriteError(target, written, len(text))
            stream.flush()
        return target


__all__ = ["DEFAULT_FILE_NAME", "OutputSink", "write_all", "DirectorySink", "StdoutSink"]
