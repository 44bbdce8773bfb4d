"""FastAPI router for file store endpoints.

Endpoints:
    POST   /files/upload  Multipart upload
    POST   /files/upload/temp  Multipart upload marked temporary
    POST   /files/upload/base64  Base64 JSON upload
    PUT    /files/rename-temp/{filename}  Remove the temporary marker
    GET    /files/download/{filename}  Download as attachment
    GET    /files/image/{filename}  Inline bytes for <img> tags
    GET    /files/content-type/{filename}  Best-effort MIME type
    DELETE /files/{filename}  Delete a stored file

Store errors are turned into localized JSON responses by
:func:`file_storage_error_handler`, registered on the app in ``app.main``.
Endpoints are plain functions so FastAPI runs their blocking disk I/O in its
threadpool rather than on the event loop.
"""
import logging
from typing import Optional

from fastapi import APIRouter, File, Form, Request, UploadFile
from fastapi.responses import FileResponse, JSONResponse, Response

from app.config import get_config

from .errors import FileStorageError
from .messages import get_message, resolve_locale
from .schemas import (
    Base64UploadRequest,
    ContentTypeResponse,
    DeleteResponse,
    FileStoreResponse,
)
from .service import LocalFileStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/files", tags=["files"])

# ---------------------------------------------------------------------------
# Singleton store management
# ---------------------------------------------------------------------------

_store: Optional[LocalFileStore] = None


def get_file_store() -> Optional[LocalFileStore]:
    """Return the global LocalFileStore, or None if not configured."""
    return _store


def set_file_store(store: Optional[LocalFileStore]) -> None:
    """Set (or clear) the global LocalFileStore."""
    global _store
    _store = store


def _store_unavailable() -> JSONResponse:
    logger.warning("[files] File store not configured, returning 503")
    return JSONResponse({"error": "File store not configured"}, status_code=503)


# ---------------------------------------------------------------------------
# Error handling
# ---------------------------------------------------------------------------

async def file_storage_error_handler(request: Request, exc: FileStorageError) -> JSONResponse:
    """Translate a store error into a localized JSON response."""
    default_locale = get_config().messages.default_locale
    locale = resolve_locale(request.headers.get("accept-language"), default_locale)
    logger.info("[files] %s %s failed: %s (%s)", request.method, request.url.path, exc.code, exc.detail)
    return JSONResponse(
        {"code": exc.code, "message": get_message(exc.message_key, locale)},
        status_code=exc.status_code,
    )


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.post("/upload", response_model=FileStoreResponse)
def upload_file(file: UploadFile = File(...), sub_path: str = Form("")):
    """Store a multipart upload and return its physical filename."""
    store = get_file_store()
    if store is None:
        return _store_unavailable()

    filename = store.store_file(file.file, file.filename or "", sub_path)
    return FileStoreResponse(filename=filename)


@router.post("/upload/temp", response_model=FileStoreResponse)
def upload_temp_file(file: UploadFile = File(...), sub_path: str = Form("")):
    """Store a multipart upload under a temporary name."""
    store = get_file_store()
    if store is None:
        return _store_unavailable()

    filename = store.store_file_temp(file.file, file.filename or "", sub_path)
    return FileStoreResponse(filename=filename)


@router.post("/upload/base64", response_model=FileStoreResponse)
def upload_base64_file(request: Base64UploadRequest):
    """Store base64-encoded content."""
    store = get_file_store()
    if store is None:
        return _store_unavailable()

    filename = store.store_base64_file(request.file_base64, request.original_name, request.sub_path)
    return FileStoreResponse(filename=filename)


@router.put("/rename-temp/{filename:path}", response_model=FileStoreResponse)
def rename_temp_file(filename: str):
    """Commit a temporary upload by removing its marker."""
    store = get_file_store()
    if store is None:
        return _store_unavailable()

    return FileStoreResponse(filename=store.rename_temp(filename))


@router.get("/download/{filename:path}")
def download_file(filename: str):
    """Stream a stored file back as an attachment."""
    store = get_file_store()
    if store is None:
        return _store_unavailable()

    stored = store.download_file(filename)
    return FileResponse(
        path=stored.path,
        filename=stored.path.name,
        media_type=stored.mime_type or "application/octet-stream",
    )


@router.get("/image/{filename:path}")
def load_image(filename: str):
    """Return raw bytes with the detected media type, for inline display."""
    store = get_file_store()
    if store is None:
        return _store_unavailable()

    image = store.load_image(filename)
    return Response(content=image.data, media_type=image.mime_type or "application/octet-stream")


@router.get("/content-type/{filename:path}", response_model=ContentTypeResponse)
def get_content_type(filename: str):
    store = get_file_store()
    if store is None:
        return _store_unavailable()

    return ContentTypeResponse(filename=filename, content_type=store.get_content_type(filename))


@router.delete("/{filename:path}", response_model=DeleteResponse)
def delete_file(filename: str):
    """Delete a stored file; ``deleted`` is False when nothing was removed."""
    store = get_file_store()
    if store is None:
        return _store_unavailable()

    deleted = store.delete_file(filename)
    logger.info("[files] delete %s -> %s", filename, deleted)
    return DeleteResponse(filename=filename, deleted=deleted)
