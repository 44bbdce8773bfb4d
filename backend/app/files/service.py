"""Local file store for the portal.

Stores uploaded files under a single configured root directory:
    {root}/{sub_path}/{uuid}.{ext}[.temp]

There is no metadata database; the filesystem entry is the only record.
Every caller-supplied sub-path or filename is rejected if it contains a
``..`` sequence *before* it is joined with the root, and the joined path is
additionally required to stay inside the root after normalization.

Operations are synchronous and hold no locks. Concurrent writers to the
same physical name race at the filesystem level and the last one wins.
"""
import base64
import binascii
import logging
from pathlib import Path
from typing import BinaryIO, Optional, Type

from app.config import FileStorageSettings

from .content_type import ContentTypeDetector
from .errors import (
    FileNotFound,
    FileStorageError,
    FileTooLarge,
    InvalidFilename,
    InvalidPath,
    StorageUnavailable,
)
from .naming import get_physical_filename, strip_temp_marker
from .schemas import ImageData, StoredFile
from .validation import ExtensionWhitelist, contains_traversal

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024


class LocalFileStore:
    """Service for storing, serving and deleting files on local disk."""

    _instance: Optional["LocalFileStore"] = None

    def __init__(
        self,
        settings: Optional[FileStorageSettings] = None,
        detector: Optional[ContentTypeDetector] = None,
    ) -> None:
        """Initialize the store and create the root directory if needed.

        Args:
            settings: Storage settings; defaults are used when omitted.
            detector: MIME detector; defaults to signature then extension.

        Raises:
            StorageUnavailable: If the root directory cannot be created.
        """
        self._settings = settings or FileStorageSettings()
        self._root = Path(self._settings.directory).expanduser().resolve()
        self._whitelist = ExtensionWhitelist.parse(self._settings.upload_extensions)
        self._detector = detector or ContentTypeDetector()
        self.init()

    @classmethod
    def get_instance(cls, settings: Optional[FileStorageSettings] = None) -> "LocalFileStore":
        """Get or create the singleton instance."""
        if cls._instance is None:
            cls._instance = cls(settings)
        return cls._instance

    @classmethod
    def reset_instance(cls) -> None:
        """Reset the singleton instance (for testing)."""
        cls._instance = None

    @property
    def root(self) -> Path:
        return self._root

    @property
    def whitelist(self) -> ExtensionWhitelist:
        return self._whitelist

    def init(self) -> None:
        """Create the store root unless another transport (FTP) owns storage."""
        if self._settings.ftp_enabled:
            logger.info("FTP storage enabled, skipping creation of %s", self._root)
            return
        try:
            self._root.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            logger.error("Could not create the file store root %s: %s", self._root, exc)
            raise StorageUnavailable(
                f"Could not create the directory where uploaded files will be stored: {exc}"
            ) from exc
        logger.info("File store root ready: %s", self._root)

    # ------------------------------------------------------------------
    # Path resolution
    # ------------------------------------------------------------------

    def _resolve(self, relative: str, error: Type[FileStorageError]) -> Path:
        """Join *relative* with the root, rejecting anything that escapes it."""
        if contains_traversal(relative):
            logger.error("Path contains invalid path sequence: %s", relative)
            raise error(f"Path contains invalid path sequence: {relative}")

        if "\x00" in relative:
            logger.error("Path contains a null byte: %r", relative)
            raise error(f"Path contains a null byte: {relative!r}")

        try:
            resolved = (self._root / relative).resolve()
        except (ValueError, OSError) as exc:
            logger.error("Could not resolve path %r: %s", relative, exc)
            raise error(f"Could not resolve path: {relative!r}") from exc
        if resolved != self._root and self._root not in resolved.parents:
            logger.error("Path resolves outside the store root: %s", relative)
            raise error(f"Path resolves outside the store root: {relative}")
        return resolved

    def _resolve_file(self, filename: str) -> Path:
        if not filename or not filename.strip():
            raise InvalidFilename("Filename is empty")
        path = self._resolve(filename, InvalidFilename)
        if path == self._root:
            raise InvalidFilename(f"Filename does not name a file: {filename}")
        return path

    def get_store_path(self, sub_path: str = "") -> Path:
        """Resolve *sub_path* under the root and create missing directories.

        Raises:
            InvalidPath: If sub_path contains ``..`` or escapes the root.
            StorageUnavailable: If the directories cannot be created.
        """
        path = self._resolve(sub_path or "", InvalidPath)
        try:
            path.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            logger.error("Could not create file store directory %s: %s", path, exc)
            raise StorageUnavailable(f"Could not create directory {path}: {exc}") from exc
        return path

    # ------------------------------------------------------------------
    # Store
    # ------------------------------------------------------------------

    def _check_target(self, sub_path: str, filename: str) -> None:
        if contains_traversal(sub_path):
            logger.error("basePath contains invalid path: %s", sub_path)
            raise InvalidPath(f"Sub-path contains invalid path sequence: {sub_path}")
        if contains_traversal(filename):
            logger.error("Filename contains invalid path sequence: %s", filename)
            raise InvalidFilename(f"Filename contains invalid path sequence: {filename}")

    def _check_size(self, size_bytes: int) -> None:
        limit = self._settings.max_file_size_bytes
        if limit and size_bytes > limit:
            raise FileTooLarge(
                f"File size ({size_bytes} bytes) exceeds limit ({limit} bytes)"
            )

    def _copy_stream(self, content: BinaryIO, target: Path) -> int:
        written = 0
        try:
            with target.open("wb") as out:
                while True:
                    chunk = content.read(CHUNK_SIZE)
                    if not chunk:
                        break
                    written += len(chunk)
                    self._check_size(written)
                    out.write(chunk)
        except FileTooLarge:
            target.unlink(missing_ok=True)
            logger.warning("Rejected oversized upload: %s", target.name)
            raise
        except OSError as exc:
            logger.exception("Could not store file %s", target)
            target.unlink(missing_ok=True)
            raise StorageUnavailable(f"Could not store file {target}: {exc}") from exc
        return written

    def store_file(
        self,
        content: BinaryIO,
        original_filename: str,
        sub_path: str = "",
        temporary: bool = False,
    ) -> str:
        """Save an uploaded stream and return its physical filename.

        Existing files at the same path are overwritten.

        Args:
            content: Readable binary stream with the file content.
            original_filename: Client-supplied name, used for the extension.
            sub_path: Directory under the root to store into.
            temporary: Append the temporary marker to the stored name.

        Returns:
            The generated physical filename (not the full path).

        Raises:
            ExtensionMissing, ExtensionNotAllowed: Whitelist rejected the name.
            InvalidPath, InvalidFilename: Traversal sequence detected.
            FileTooLarge: Content exceeds the configured size limit.
            StorageUnavailable: Directory creation or write failed.
        """
        self._whitelist.check(original_filename)

        filename = get_physical_filename(original_filename, temporary)
        self._check_target(sub_path, filename)

        target = self.get_store_path(sub_path) / filename
        size_bytes = self._copy_stream(content, target)

        logger.info(
            f"Stored file: {original_filename} -> {target} ({size_bytes} bytes)"
        )
        return filename

    def store_file_temp(self, content: BinaryIO, original_filename: str, sub_path: str = "") -> str:
        """Store with the temporary marker; see :meth:`store_file`."""
        return self.store_file(content, original_filename, sub_path, temporary=True)

    def store_base64_file(self, file_base64: str, original_filename: str, sub_path: str = "") -> str:
        """Decode base64 content and save it; see :meth:`store_file`.

        Malformed base64 fails with StorageUnavailable before anything is
        written.
        """
        self._whitelist.check(original_filename)

        filename = get_physical_filename(original_filename, False)
        self._check_target(sub_path, filename)

        try:
            data = base64.b64decode("".join(file_base64.split()), validate=True)
        except (binascii.Error, ValueError) as exc:
            logger.error("Could not decode base64 content for %s: %s", original_filename, exc)
            raise StorageUnavailable(f"Malformed base64 content: {exc}") from exc
        self._check_size(len(data))

        target = self.get_store_path(sub_path) / filename
        try:
            target.write_bytes(data)
        except OSError as exc:
            logger.exception("Could not store base64 file %s", target)
            raise StorageUnavailable(f"Could not store file {target}: {exc}") from exc

        logger.info(
            f"Stored base64 file: {original_filename} -> {target} ({len(data)} bytes)"
        )
        return filename

    def rename_temp(self, physical_filename: str) -> str:
        """Strip the temporary marker from a stored file's name.

        Returns:
            The final filename. Unchanged if it carried no marker.

        Raises:
            InvalidFilename: Traversal sequence detected.
            FileNotFound: The source file does not exist.
            StorageUnavailable: The rename itself failed.
        """
        source = self._resolve_file(physical_filename)
        if not source.is_file():
            logger.error("Could not find temp file to rename: %s", physical_filename)
            raise FileNotFound(f"File not found: {physical_filename}")

        renamed = strip_temp_marker(physical_filename)
        if renamed == physical_filename:
            return renamed

        target = self._resolve_file(renamed)
        try:
            source.replace(target)
        except OSError as exc:
            logger.exception("Could not rename %s to %s", source, target)
            raise StorageUnavailable(f"Could not rename {physical_filename}: {exc}") from exc

        logger.info("Renamed temp file %s -> %s", physical_filename, renamed)
        return renamed

    # ------------------------------------------------------------------
    # Retrieval
    # ------------------------------------------------------------------

    def download_file(self, filename: str) -> StoredFile:
        """Locate a stored file for streaming back to the client.

        Raises:
            InvalidFilename: Traversal sequence detected.
            FileNotFound: No file at the resolved path.
        """
        path = self._resolve_file(filename)
        if not path.is_file():
            logger.error("Could not find resource: %s", filename)
            raise FileNotFound(f"File not found: {filename}")

        return StoredFile(
            path=path,
            filename=filename,
            size_bytes=path.stat().st_size,
            mime_type=self._detector.detect(path),
        )

    def load_image(self, filename: str) -> ImageData:
        """Read a whole file into memory along with its MIME type.

        Raises:
            InvalidFilename: Traversal sequence detected.
            FileNotFound: File missing or unreadable.
        """
        path = self._resolve_file(filename)
        try:
            data = path.read_bytes()
        except (FileNotFoundError, IsADirectoryError, NotADirectoryError) as exc:
            raise FileNotFound(f"File not found: {filename}") from exc
        except OSError as exc:
            logger.error("Could not read file %s: %s", path, exc)
            raise FileNotFound(f"Could not read file: {filename}") from exc

        return ImageData(mime_type=self._detector.detect(path), data=data)

    def get_content_type(self, filename: str) -> Optional[str]:
        """Best-effort MIME type for *filename*; None when unknown or invalid."""
        try:
            path = self._resolve_file(filename)
        except FileStorageError:
            return None
        return self._detector.detect(path)

    # ------------------------------------------------------------------
    # Delete
    # ------------------------------------------------------------------

    def delete_file(self, filename: str) -> bool:
        """Delete a stored file.

        Deletion is best-effort cleanup: failures are logged, never raised.

        Returns:
            True if a file was removed, False otherwise.
        """
        try:
            path = self._resolve_file(filename)
        except FileStorageError as exc:
            logger.warning("Refused to delete %s: %s", filename, exc.detail)
            return False

        try:
            path.unlink()
        except FileNotFoundError:
            return False
        except OSError as exc:
            logger.error("Could not delete file %s: %s", path, exc)
            return False

        logger.info("Deleted file: %s", path)
        return True
