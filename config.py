import logging
import os
from typing import Optional

# latin-1 maps every byte to exactly one character, so any file is readable
DEFAULT_ENCODING = "latin-1"
DEFAULT_LOG_LEVEL = "WARNING"

ENCODING_ENV = "HUFFMAN_TEXT_ENCODING"
LOG_LEVEL_ENV = "HUFFMAN_TEXT_LOG_LEVEL"

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def resolve_encoding(explicit: Optional[str] = None) -> str:
    # explicit value > environment > default
    return explicit or os.environ.get(ENCODING_ENV) or DEFAULT_ENCODING


def resolve_log_level(explicit: Optional[str] = None) -> int:
    name = (explicit or os.environ.get(LOG_LEVEL_ENV) or DEFAULT_LOG_LEVEL).upper()
    level = logging.getLevelName(name)
    if not isinstance(level, int):
        raise ValueError(f"unknown log level: {name}")
    return level


def configure_logging(level: Optional[str] = None) -> None:
    logging.basicConfig(level=resolve_log_level(level), format=LOG_FORMAT)
