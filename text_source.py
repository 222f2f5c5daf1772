import logging
from pathlib import Path
from typing import Iterator, Optional, Tuple, Union

from config import resolve_encoding
from huffman import UnreadableSourceError

logger = logging.getLogger(__name__)


def iter_lines(text: str) -> Iterator[Tuple[str, bool]]:
    """
    Yields (line, terminated) for each logical line of text.

    Lines are split on '\\n' only and the terminator itself is dropped;
    terminated tells whether a line break followed the line. A trailing break
    does not produce an extra empty line.
    """
    start = 0
    while start < len(text):
        end = text.find("\n", start)
        if end == -1:
            yield text[start:], False
            return
        yield text[start:end], True
        start = end + 1


def read_text_file(path: Union[str, Path], encoding: Optional[str] = None) -> str:
    # newline="" keeps '\r' and friends as ordinary symbols
    encoding = resolve_encoding(encoding)
    try:
        with open(path, "r", encoding=encoding, newline="") as f:
            return f.read()
    except (OSError, LookupError, UnicodeDecodeError) as exc:
        logger.warning("cannot read text source %s: %s", path, exc)
        raise UnreadableSourceError(f"cannot read text source {path}: {exc}") from exc
