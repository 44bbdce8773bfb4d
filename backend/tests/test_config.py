"""Tests for AppConfig models and the YAML loader."""
import pytest
from pydantic import ValidationError

from app.config import (
    DEFAULT_MAX_FILE_SIZE_BYTES,
    AppConfig,
    FileStorageSettings,
    ServerSettings,
    get_config,
    load_config,
    set_config,
)


class TestFileStorageSettings:
    def test_defaults(self):
        cfg = FileStorageSettings()
        assert cfg.directory == "./files"
        assert cfg.ftp_enabled is False
        assert cfg.upload_extensions == ""
        assert cfg.max_file_size_bytes == DEFAULT_MAX_FILE_SIZE_BYTES

    def test_extension_list_is_joined(self):
        cfg = FileStorageSettings(upload_extensions=["pdf", "png"])
        assert cfg.upload_extensions == "pdf,png"

    def test_null_extensions_become_empty(self):
        cfg = FileStorageSettings(upload_extensions=None)
        assert cfg.upload_extensions == ""

    def test_negative_size_limit_rejected(self):
        with pytest.raises(ValidationError):
            FileStorageSettings(max_file_size_bytes=-1)

    def test_zero_size_limit_allowed(self):
        assert FileStorageSettings(max_file_size_bytes=0).max_file_size_bytes == 0


class TestLoadConfig:
    def test_missing_file_uses_defaults(self, tmp_path):
        cfg = load_config(settings_path=tmp_path / "missing.yaml")
        assert cfg.server.port == 8000
        assert cfg.logging.level == "info"
        assert cfg.messages.default_locale == "en"
        assert cfg.file_storage.directory == str(tmp_path.resolve() / "files")

    def test_empty_file_uses_defaults(self, tmp_path):
        settings_file = tmp_path / "portal.settings.yaml"
        settings_file.write_text("", encoding="utf-8")
        cfg = load_config(settings_path=settings_file)
        assert cfg.file_storage.ftp_enabled is False

    def test_values_are_read(self, tmp_path):
        settings_file = tmp_path / "portal.settings.yaml"
        settings_file.write_text(
            "logging:\n"
            "  level: debug\n"
            "file_storage:\n"
            "  ftp_enabled: true\n"
            "  upload_extensions: .pdf.png\n"
            "  max_file_size_bytes: 1024\n"
            "messages:\n"
            "  default_locale: ko\n",
            encoding="utf-8",
        )
        cfg = load_config(settings_path=settings_file)
        assert cfg.logging.level == "debug"
        assert cfg.file_storage.ftp_enabled is True
        assert cfg.file_storage.upload_extensions == ".pdf.png"
        assert cfg.file_storage.max_file_size_bytes == 1024
        assert cfg.messages.default_locale == "ko"


class TestGlobalConfig:
    def test_set_and_get_config(self):
        custom = AppConfig(file_storage=FileStorageSettings(directory="/srv/files"))
        try:
            set_config(custom)
            assert get_config() is custom
        finally:
            set_config(None)


class TestServerSettings:
    def test_only_host_and_port(self):
        assert set(ServerSettings().model_dump()) == {"host", "port"}

    def test_unused_cors_key_is_ignored(self, tmp_path):
        settings_file = tmp_path / "portal.settings.yaml"
        settings_file.write_text("server:\n  port: 9000\n  allowed_origins: ['*']\n", encoding="utf-8")
        cfg = load_config(settings_path=settings_file)
        assert cfg.server.port == 9000
        assert not hasattr(cfg.server, "allowed_origins")
