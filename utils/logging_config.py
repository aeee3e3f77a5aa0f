import logging
from typing import Optional, Union

DEFAULT_FORMAT = '%(levelname)s:%(name)s:%(message)s'


def parse_level(level: Union[int, str]) -> int:
    if isinstance(level, int):
        return level
    value = logging.getLevelName(str(level).upper())
    if not isinstance(value, int):
        raise ValueError(f"unknown log level: {level}")
    return value


def configure_logging(level: Union[int, str] = logging.INFO, fmt: Optional[str] = None) -> None:
    if fmt is None:
        fmt = DEFAULT_FORMAT
    root = logging.getLogger()
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(fmt))
        root.addHandler(handler)
    root.setLevel(parse_level(level))
