"""Portal File Service application.

This is the main entry point for the portal's file storage backend.
Uploaded files (multipart or base64) are validated against an extension
whitelist and stored under a single configured directory tree, then served
back for download, committed from temporary names, and deleted.

Modules:
    - config: YAML-backed settings (portal.settings.yaml)
    - files: local file store, MIME detection and HTTP endpoints
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from app.config import get_config
from app.files.errors import FileStorageError
from app.files.router import file_storage_error_handler, router as files_router, set_file_store
from app.files.service import LocalFileStore

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)

# Silence verbose third-party loggers.
for _noisy in (
    "multipart",
    "python_multipart",
    "httpx",
    "httpcore",
):
    logging.getLogger(_noisy).setLevel(logging.WARNING)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager for startup/shutdown events."""
    # Startup
    config = get_config()

    # Apply configured log level to root logger so that
    # `logging.level: "debug"` in portal.settings.yaml activates DEBUG output.
    configured_level = getattr(logging, config.logging.level.upper(), None)
    if configured_level is not None:
        logging.getLogger().setLevel(configured_level)
        logger.info("Root logger level set to %s", config.logging.level.upper())

    store = LocalFileStore(config.file_storage)
    set_file_store(store)
    logger.info(
        "File store ready: root=%s whitelist=%s",
        store.root,
        ",".join(store.whitelist.extensions) or "(disabled)",
    )

    yield  # Application runs here

    # Shutdown
    set_file_store(None)
    logger.info("Application shutdown complete")


# Create FastAPI application with metadata
app = FastAPI(
    title="Portal File Service",
    description="Local file storage for portal uploads and downloads",
    version="0.1.0",
    lifespan=lifespan,
)

app.include_router(files_router)
app.add_exception_handler(FileStorageError, file_storage_error_handler)


@app.get("/health")
async def health() -> dict:
    """Health check endpoint.

    Returns:
        dict: Status object indicating the server is running.
    """
    return {"status": "ok"}
