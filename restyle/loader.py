"""Reading stylesheets from disk and reloading them when they change."""
from __future__ import annotations
import codecs
from logging import getLogger
import os
from pathlib import Path
import re

from restyle.css.stylesheet import Stylesheet

__all__ = ["decode_stylesheet", "load_stylesheet", "WatchedStylesheet"]

logger = getLogger(__name__)

CHARSET = re.compile(rb'^@charset "([\x20-\x21\x23-\x7f]*)";')
CHARSET_TEXT = re.compile(r'^@charset "[^"]*";')


def decode_stylesheet(data: bytes, fallback: str = "utf-8") -> str:
    """Decode stylesheet bytes, honoring a BOM or a leading `@charset` rule.

    An unknown charset label falls back to `fallback`, and `utf-16` labels are
    read as utf-8 since a charset rule can only be spelled in ASCII.
    """
    if data.startswith(codecs.BOM_UTF8):
        return data[len(codecs.BOM_UTF8):].decode("utf-8", errors="replace")

    encoding = fallback
    if (charset := CHARSET.match(data)) is not None:
        label = charset.group(1).decode("ascii").strip().lower()
        try:
            encoding = codecs.lookup(label).name
        except LookupError:
            logger.warning("Unknown @charset `%s`, decoding as %s", label, fallback)
        if encoding.startswith("utf-16"):
            encoding = "utf-8"

    text = data.decode(encoding, errors="replace")
    return CHARSET_TEXT.sub("", text, count=1)


def load_stylesheet(path: str | os.PathLike, **options) -> Stylesheet:
    """Read and parse a stylesheet file, naming it in diagnostics."""
    path = Path(path)
    options.setdefault("file_name", str(path))
    return Stylesheet.parse(decode_stylesheet(path.read_bytes()), **options)


class WatchedStylesheet:
    """A stylesheet file that is parsed again whenever its mtime moves forward.

    `sheet` is replaced as a whole, so a reader holding the previous one keeps
    a consistent snapshot.
    """

    def __init__(self, path: str | os.PathLike, **options) -> None:
        self.path = Path(path)
        self.options = options
        self.mtime = self.path.stat().st_mtime_ns
        self.sheet = load_stylesheet(self.path, **options)

    def reload(self) -> bool:
        """Parse the file again if it changed on disk.

        Returns:
            True when a new stylesheet was loaded.
        """
        try:
            mtime = self.path.stat().st_mtime_ns
        except OSError as error:
            logger.warning("Could not stat `%s`: %s", self.path, error)
            return False

        if mtime <= self.mtime:
            return False

        self.mtime = mtime
        self.sheet = load_stylesheet(self.path, **self.options)
        logger.info("Reloaded stylesheet `%s`", self.path)
        return True
