"""Shared test fixtures and configuration for backend tests."""
import pytest
from fastapi.testclient import TestClient

from app.config import FileStorageSettings
from app.files.service import LocalFileStore
from app.main import app


@pytest.fixture
def api_client():
    """Provide a TestClient for the main FastAPI app.

    The lifespan is not run, so tests install their own file store.
    """
    return TestClient(app)


@pytest.fixture
def store_root(tmp_path):
    """A per-test store root directory (not yet created)."""
    return tmp_path / "store"


@pytest.fixture
def file_store(store_root):
    """A LocalFileStore with the scenario whitelist (pdf, png, docx)."""
    settings = FileStorageSettings(directory=str(store_root), upload_extensions="pdf,png,docx")
    return LocalFileStore(settings)


@pytest.fixture
def open_store(tmp_path):
    """A LocalFileStore with the whitelist disabled."""
    return LocalFileStore(FileStorageSettings(directory=str(tmp_path / "open")))
