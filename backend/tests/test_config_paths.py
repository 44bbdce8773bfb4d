"""Tests for config path resolution behavior."""

from pathlib import Path

from app.config import load_config


def test_directory_relative_to_project_root_when_settings_in_config_dir(tmp_path):
    """Relative file_storage.directory resolves from project root for ./config layout."""
    project_root = tmp_path / "project"
    config_dir = project_root / "config"
    config_dir.mkdir(parents=True)

    settings_file = config_dir / "portal.settings.yaml"
    settings_file.write_text(
        "file_storage:\n"
        "  directory: data/files\n",
        encoding="utf-8",
    )

    cfg = load_config(settings_path=settings_file)
    assert Path(cfg.file_storage.directory) == project_root.resolve() / "data" / "files"


def test_directory_relative_to_settings_dir_for_nonstandard_layout(tmp_path):
    """Relative file_storage.directory resolves from settings file directory otherwise."""
    settings_file = tmp_path / "portal.settings.yaml"
    settings_file.write_text(
        "file_storage:\n"
        "  directory: local/files\n",
        encoding="utf-8",
    )

    cfg = load_config(settings_path=settings_file)
    assert Path(cfg.file_storage.directory) == tmp_path.resolve() / "local" / "files"


def test_directory_absolute_remains_unchanged(tmp_path):
    """Absolute file_storage.directory is preserved exactly as configured."""
    absolute_path = tmp_path / "absolute" / "files"
    settings_file = tmp_path / "portal.settings.yaml"
    settings_file.write_text(
        "file_storage:\n"
        f"  directory: {absolute_path}\n",
        encoding="utf-8",
    )

    cfg = load_config(settings_path=settings_file)
    assert Path(cfg.file_storage.directory) == absolute_path
