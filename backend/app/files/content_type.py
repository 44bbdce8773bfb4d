"""Best-effort MIME type detection for stored files.

Detection is a chain of probes tried in order:

1. SignatureProbe: reads the file header and matches magic numbers
2. ExtensionProbe: looks the filename up in the ``mimetypes`` table

The first probe that answers wins. A detector never raises; when nothing
matches the result is None.
"""
import logging
import mimetypes
from pathlib import Path
from typing import List, Optional, Protocol, Sequence, Tuple

logger = logging.getLogger(__name__)

HEADER_SIZE = 32

# Ordered: longer signatures before their prefixes.
FILE_SIGNATURES: List[Tuple[bytes, str]] = [
    (b"\x89PNG\r\n\x1a\n", "image/png"),
    (b"\xFF\xD8\xFF", "image/jpeg"),
    (b"GIF87a", "image/gif"),
    (b"GIF89a", "image/gif"),
    (b"II*\x00", "image/tiff"),
    (b"MM\x00*", "image/tiff"),
    (b"%PDF", "application/pdf"),
    (b"\xD0\xCF\x11\xE0\xA1\xB1\x1A\xE1", "application/msword"),
    (b"PK\x03\x04", "application/zip"),
    (b"\x1f\x8b", "application/gzip"),
    (b"Rar!\x1a\x07", "application/vnd.rar"),
    (b"ID3", "audio/mpeg"),
    (b"\xFF\xFB", "audio/mpeg"),
    (b"\xFF\xF3", "audio/mpeg"),
    (b"\xFF\xF2", "audio/mpeg"),
    (b"BM", "image/bmp"),
]

RIFF_SUBTYPES = {
    b"WEBP": "image/webp",
    b"WAVE": "audio/wav",
    b"AVI ": "video/x-msvideo",
}

# Formats that are zip containers underneath; the extension is more precise.
ZIP_CONTAINER_EXTENSIONS = {".docx", ".xlsx", ".pptx", ".hwpx", ".odt", ".ods", ".odp", ".jar", ".epub"}


class ContentProbe(Protocol):
    def probe(self, path: Path) -> Optional[str]:
        ...


class SignatureProbe:
    """Identify a file from the magic number in its first bytes."""

    def probe(self, path: Path) -> Optional[str]:
        if not path.is_file():
            return None
        with path.open("rb") as fh:
            header = fh.read(HEADER_SIZE)
        return self.sniff(header, path.name)

    def sniff(self, header: bytes, filename: str = "") -> Optional[str]:
        if not header:
            return None

        if header.startswith(b"RIFF") and len(header) >= 12:
            return RIFF_SUBTYPES.get(header[8:12])

        for signature, mime_type in FILE_SIGNATURES:
            if header.startswith(signature):
                if mime_type == "application/zip" and Path(filename).suffix.lower() in ZIP_CONTAINER_EXTENSIONS:
                    return None
                return mime_type

        text_head = header.lstrip().lower()
        if text_head.startswith(b"<svg"):
            return "image/svg+xml"
        if text_head.startswith(b"<?xml"):
            if Path(filename).suffix.lower() == ".svg":
                return "image/svg+xml"
            return "application/xml"
        return None


class ExtensionProbe:
    """Guess from the filename extension only; never touches the disk."""

    def probe(self, path: Path) -> Optional[str]:
        mime_type, _ = mimetypes.guess_type(path.name)
        return mime_type


class ContentTypeDetector:
    """Run probes in order and return the first answer."""

    def __init__(self, probes: Optional[Sequence[ContentProbe]] = None) -> None:
        self.probes: Tuple[ContentProbe, ...] = tuple(
            probes if probes is not None else (SignatureProbe(), ExtensionProbe())
        )

    def detect(self, path: Path) -> Optional[str]:
        for probe in self.probes:
            try:
                mime_type = probe.probe(path)
            except OSError as exc:
                logger.debug("%s failed for %s: %s", type(probe).__name__, path, exc)
                continue
            if mime_type:
                return mime_type
        return None
