"""Error types raised by the local file store.

Each error carries a message key into the localized catalog
(:mod:`app.files.messages`) and the HTTP status the router answers with.
``detail`` is developer-facing text for logs, never shown to end users.
"""
from typing import Optional


class FileStorageError(Exception):
    """Base class for all file store failures."""

    message_key: str = "valid.file.not_saved_try_again"
    status_code: int = 500

    def __init__(self, detail: Optional[str] = None) -> None:
        self.detail = detail or self.message_key
        super().__init__(self.detail)

    @property
    def code(self) -> str:
        return type(self).__name__


class ExtensionMissing(FileStorageError):
    message_key = "valid.file.not_exist_extension"
    status_code = 400


class ExtensionNotAllowed(FileStorageError):
    message_key = "valid.file.not_allow_extension"
    status_code = 400


class InvalidPath(FileStorageError):
    message_key = "valid.file.invalid_path"
    status_code = 400


class InvalidFilename(FileStorageError):
    message_key = "valid.file.invalid_name"
    status_code = 400


class FileNotFound(FileStorageError):
    message_key = "valid.file.not_found"
    status_code = 404


class StorageUnavailable(FileStorageError):
    message_key = "valid.file.not_saved_try_again"
    status_code = 500


class FileTooLarge(FileStorageError):
    message_key = "valid.file.too_large"
    status_code = 413
