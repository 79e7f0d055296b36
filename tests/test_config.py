"""
Tests for configuration management.
"""

import json
import logging

import pytest

from mathtex import config as config_module
from mathtex.config import ConfigManager, get_config_manager
from mathtex.exceptions import ConfigError


class TestConfigManager:
    """Tests for ConfigManager."""

    def test_defaults_without_file(self, config_manager):
        config = config_manager.load()

        assert config.math_mode == "inline"
        assert config.mixed_content is True
        assert config.symbols_file is None
        assert not config_manager.config_file.exists()

    def test_changes_are_persisted(self, config_manager):
        config_manager.set_math_mode("display")

        reloaded = ConfigManager(config_manager.config_dir).load()
        assert reloaded.math_mode == "display"
        assert reloaded.inline is False

    def test_saved_file_is_json(self, config_manager):
        config_manager.update(document_wrapper=True)

        data = json.loads(config_manager.config_file.read_text(encoding="utf-8"))
        assert data["document_wrapper"] is True

    def test_invalid_mode(self, config_manager):
        with pytest.raises(ConfigError):
            config_manager.set_math_mode("sideways")

        assert config_manager.get_config().math_mode == "inline"

    def test_unknown_field(self, config_manager):
        with pytest.raises(ConfigError) as exc_info:
            config_manager.update(colour="blue")

        assert "colour" in exc_info.value.message

    def test_corrupted_file_falls_back_to_defaults(self, config_manager, caplog):
        config_manager.config_dir.mkdir(parents=True)
        config_manager.config_file.write_text("{not json", encoding="utf-8")

        with caplog.at_level(logging.WARNING, logger="mathtex.config"):
            config = config_manager.load()

        assert config.math_mode == "inline"
        assert "corrupted" in caplog.text

    def test_symbols_file(self, config_manager, tmp_path):
        path = tmp_path / "symbols.txt"
        path.write_text("x = \\xi\n", encoding="utf-8")

        config_manager.set_symbols_file(str(path))
        assert config_manager.get_config().symbols_file == str(path.resolve())

        config_manager.set_symbols_file(None)
        assert config_manager.get_config().symbols_file is None

    def test_missing_symbols_file(self, config_manager, tmp_path):
        with pytest.raises(ConfigError):
            config_manager.set_symbols_file(str(tmp_path / "missing.txt"))

    def test_template_file(self, config_manager, tmp_path):
        path = tmp_path / "template.tex"
        path.write_text("{{ generated }}", encoding="utf-8")

        config_manager.set_template_file(str(path))

        assert config_manager.get_config().template_file == str(path.resolve())

    def test_missing_template_file(self, config_manager, tmp_path):
        with pytest.raises(ConfigError):
            config_manager.set_template_file(str(tmp_path / "missing.tex"))

    def test_reset(self, config_manager):
        config_manager.update(math_mode="display", detect_math=True)
        config_manager.reset()

        reloaded = ConfigManager(config_manager.config_dir).load()
        assert reloaded.math_mode == "inline"
        assert reloaded.detect_math is False


class TestGetConfigManager:
    """Tests for the global config manager."""

    def test_is_shared(self, config_manager):
        assert get_config_manager() is config_manager
        assert get_config_manager() is get_config_manager()

    def test_explicit_directory_replaces_instance(self, tmp_path, monkeypatch):
        monkeypatch.setattr(config_module, "_config_manager", None)

        manager = get_config_manager(tmp_path / "other")

        assert manager.config_dir == tmp_path / "other"
        assert get_config_manager() is manager
