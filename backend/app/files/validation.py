"""Extension whitelist and path traversal checks for stored files."""
import logging
import re
from typing import Iterable, Optional, Tuple

from .errors import ExtensionMissing, ExtensionNotAllowed

logger = logging.getLogger(__name__)

_TOKEN_SEPARATORS = re.compile(r"[.,\s]+")

TRAVERSAL_SEQUENCE = ".."


def get_filename_extension(filename: Optional[str]) -> Optional[str]:
    """Return the text after the last dot of the final path segment.

    Returns None when there is no dot at all and ``""`` for a trailing dot.

    Examples:
        >>> get_filename_extension("report.PDF")
        'PDF'
        >>> get_filename_extension("archive.tar.gz")
        'gz'
        >>> get_filename_extension("dir.d/noext") is None
        True
    """
    if not filename:
        return None
    name = re.split(r"[/\\]", filename)[-1]
    if "." not in name:
        return None
    return name.rsplit(".", 1)[1]


def contains_traversal(value: Optional[str]) -> bool:
    """True if *value* contains a parent-directory sequence anywhere."""
    return bool(value) and TRAVERSAL_SEQUENCE in value


class ExtensionWhitelist:
    """Ordered, case-insensitive set of permitted file extensions.

    An empty whitelist disables enforcement entirely: every filename,
    including one without an extension, is accepted.
    """

    def __init__(self, extensions: Iterable[str] = ()) -> None:
        seen = []
        for ext in extensions:
            token = ext.strip().lstrip(".").lower()
            if token and token not in seen:
                seen.append(token)
        self._extensions: Tuple[str, ...] = tuple(seen)

    @classmethod
    def parse(cls, raw: Optional[str]) -> "ExtensionWhitelist":
        """Build from a config string such as ``".pdf.png"`` or ``"pdf, png"``."""
        if not raw:
            return cls()
        return cls(_TOKEN_SEPARATORS.split(raw))

    @property
    def extensions(self) -> Tuple[str, ...]:
        return self._extensions

    @property
    def enabled(self) -> bool:
        return bool(self._extensions)

    def __contains__(self, extension: object) -> bool:
        return isinstance(extension, str) and extension.lower() in self._extensions

    def __len__(self) -> int:
        return len(self._extensions)

    def check(self, filename: Optional[str]) -> None:
        """Raise unless *filename*'s extension is permitted.

        Raises:
            ExtensionMissing: whitelist enabled and the name has no extension
            ExtensionNotAllowed: extension not in the whitelist
        """
        if not self.enabled:
            logger.debug("Extension whitelist not configured, accepting %s", filename)
            return

        extension = get_filename_extension(filename)
        if not extension:
            logger.warning("Rejected file without extension: %s", filename)
            raise ExtensionMissing(f"No file extension: {filename}")

        if extension not in self:
            logger.warning("Rejected file extension [%s]: %s", extension, filename)
            raise ExtensionNotAllowed(f"File extension not allowed: {extension}")
