"""
Configuration management.

Settings are stored as JSON in the user's home directory.
"""

import json
import logging
from pathlib import Path
from typing import Optional, Any

from pydantic import ValidationError

from mathtex.exceptions import ConfigError
from mathtex.models import TranspilerConfig

logger = logging.getLogger(__name__)


class ConfigManager:
    """Transpiler configuration manager."""

    CONFIG_DIR_NAME = ".mathtex"
    CONFIG_FILE_NAME = "config.json"

    def __init__(self, config_dir: Optional[Path] = None):
        """
        Args:
            config_dir: Configuration directory. Defaults to ~/.mathtex/
        """
        if config_dir is None:
            self.config_dir = Path.home() / self.CONFIG_DIR_NAME
        else:
            self.config_dir = Path(config_dir)

        self.config_file = self.config_dir / self.CONFIG_FILE_NAME
        self._config: Optional[TranspilerConfig] = None

    def _ensure_config_dir(self) -> None:
        self.config_dir.mkdir(parents=True, exist_ok=True)

    def load(self) -> TranspilerConfig:
        """
        Load the configuration file.

        A missing or corrupted file yields the default configuration.

        Returns:
            Transpiler configuration
        """
        if self._config is not None:
            return self._config

        if not self.config_file.exists():
            self._config = TranspilerConfig()
            return self._config

        try:
            with open(self.config_file, "r", encoding="utf-8") as f:
                data = json.load(f)
            self._config = TranspilerConfig(**data)
        except (json.JSONDecodeError, TypeError, ValidationError) as e:
            logger.warning(f"Ignoring corrupted config {self.config_file}: {e}")
            self._config = TranspilerConfig()

        return self._config

    def save(self, config: Optional[TranspilerConfig] = None) -> None:
        """
        Save the configuration.

        Args:
            config: Configuration to save. Saves the current one if omitted.
        """
        if config is not None:
            self._config = config

        if self._config is None:
            return

        self._ensure_config_dir()

        with open(self.config_file, "w", encoding="utf-8") as f:
            json.dump(self._config.model_dump(), f, indent=2, ensure_ascii=False)

        logger.debug(f"Config saved to: {self.config_file}")

    def get_config(self) -> TranspilerConfig:
        """Get the current configuration."""
        if self._config is None:
            return self.load()
        return self._config

    def update(self, **changes: Any) -> TranspilerConfig:
        """
        Change fields and save.

        Raises:
            ConfigError: If a field name or value is invalid
        """
        unknown = set(changes) - set(TranspilerConfig.model_fields)
        if unknown:
            raise ConfigError(f"Unknown config fields: {', '.join(sorted(unknown))}")

        data = self.get_config().model_dump()
        data.update(changes)
        try:
            config = TranspilerConfig(**data)
        except ValidationError as e:
            raise ConfigError(f"Invalid configuration: {e}", {"changes": changes}) from e

        self.save(config)
        return config

    def set_math_mode(self, mode: str) -> None:
        """
        Set the math mode for whole-line expressions.

        Args:
            mode: "inline" or "display"
        """
        self.update(math_mode=mode)

    def set_symbols_file(self, path: Optional[str]) -> None:
        """
        Set custom symbol definitions.

        Args:
            path: Path to the file, or None for the bundled symbols
        """
        if path is not None and not Path(path).is_file():
            raise ConfigError(f"Symbols file not found: {path}", {"path": path})
        self.update(symbols_file=str(Path(path).resolve()) if path else None)

    def set_template_file(self, path: Optional[str]) -> None:
        """
        Set the default document template.

        Args:
            path: Path to the template, or None to disable
        """
        if path is not None and not Path(path).is_file():
            raise ConfigError(f"Template file not found: {path}", {"path": path})
        self.update(template_file=str(Path(path).resolve()) if path else None)

    def reset(self) -> None:
        """Restore the default configuration."""
        self.save(TranspilerConfig())


# Global config manager instance
_config_manager: Optional[ConfigManager] = None


def get_config_manager(config_dir: Optional[Path] = None) -> ConfigManager:
    """
    Get the global configuration manager.

    Args:
        config_dir: Configuration directory

    Returns:
        ConfigManager
    """
    global _config_manager

    if _config_manager is None or config_dir is not None:
        _config_manager = ConfigManager(config_dir)

    return _config_manager
