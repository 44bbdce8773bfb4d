"""Pydantic schemas for the file store.

This module defines the data models exchanged with file store callers:
- StoredFile: handle to a file on disk, returned by downloads
- ImageData: full file bytes plus detected MIME type
- Base64UploadRequest: JSON body for base64 uploads
- FileStoreResponse / ContentTypeResponse / DeleteResponse: API responses

No database record backs a stored file; the filesystem entry is the only
source of truth, so these models are built on demand from disk.
"""
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field


class StoredFile(BaseModel):
    """Handle to a stored file, ready to be streamed back to a client."""
    path: Path = Field(..., description="Absolute path on disk")
    filename: str = Field(..., description="Stored filename relative to the store root")
    size_bytes: int = Field(..., description="File size in bytes")
    mime_type: Optional[str] = Field(None, description="Detected MIME type, if any")


class ImageData(BaseModel):
    """Entire file content loaded into memory, e.g. for <img> tags."""
    mime_type: Optional[str] = Field(None, description="Detected MIME type")
    data: bytes = Field(..., description="Raw file bytes")


class Base64UploadRequest(BaseModel):
    original_name: str = Field(..., description="Original filename, used for the extension check")
    file_base64: str = Field(..., description="Base64-encoded file content")
    sub_path: str = Field("", description="Directory under the store root")


class FileStoreResponse(BaseModel):
    filename: str = Field(..., description="Physical filename to use as the caller's handle")


class ContentTypeResponse(BaseModel):
    filename: str
    content_type: Optional[str] = None


class DeleteResponse(BaseModel):
    filename: str
    deleted: bool
