"""Configuration settings for the application."""

import copy
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from ..parsing.delimiter import AUTO, Delimiter
from ..parsing.pipeline import DEFAULT_BATCH_SIZE, DEFAULT_MAX_ROWS
from .project_constants import CONFIG_DIR

logger = logging.getLogger(__name__)

# Default configuration structure
DEFAULT_CONFIG = {
    'csv': {
        'delimiter': AUTO,  # 'auto', a single character, '\t' or 'tab'
        'preview_row_count': DEFAULT_MAX_ROWS,
        'load_more_batch_size': DEFAULT_BATCH_SIZE,
    },
}


class ConfigurationError(Exception):
    """Raised when configuration is invalid."""

    pass


def validate_delimiter_setting(value: Any) -> str:
    """Check a delimiter setting and return it unchanged"""
    if not isinstance(value, str):
        raise ConfigurationError(f"csv.delimiter must be a string, got {value!r}")
    if value == AUTO:
        return value
    try:
        Delimiter.from_setting(value)
    except ValueError as e:
        raise ConfigurationError(f"csv.delimiter is invalid: {e}") from e
    return value


def validate_positive_int(key: str, value: Any) -> int:
    # bool is an int subclass, reject it explicitly
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ConfigurationError(f"csv.{key} must be a positive integer, got {value!r}")
    return value


class ViewerConfig:
    """Configuration manager backed by a YAML file."""

    def __init__(self, config_dir: Optional[Path] = None):
        """Initialize configuration."""
        self.config_dir = Path(config_dir) if config_dir else CONFIG_DIR
        self.config_file = self.config_dir / 'config.yaml'
        self.config: Dict[str, Any] = {}
        self.load_config()
        self._ensure_defaults()
        self.validate()

    def _ensure_defaults(self):
        """Ensure all default keys exist in the loaded config."""
        added = False
        for key, default_value in DEFAULT_CONFIG.items():
            if key not in self.config or self.config[key] is None:
                self.config[key] = copy.deepcopy(default_value)
                added = True
            elif isinstance(default_value, dict):
                if not isinstance(self.config[key], dict):
                    raise ConfigurationError(f"Section '{key}' must be a mapping")
                for sub_key, sub_default_value in default_value.items():
                    if sub_key not in self.config[key]:
                        self.config[key][sub_key] = sub_default_value
                        added = True
        if added:
            self.save_config()

    def load_config(self):
        """Load configuration from file."""
        if not self.config_file.exists():
            logger.info("No config file at %s, using defaults", self.config_file)
            self.config = copy.deepcopy(DEFAULT_CONFIG)
            self.save_config()
            return

        try:
            with open(self.config_file, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in config file: {e}")

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigurationError("Config file must contain a mapping at the top level")
        self.config = data

    def save_config(self):
        """Save configuration to file."""
        try:
            self.config_dir.mkdir(parents=True, exist_ok=True)
            with open(self.config_file, 'w', encoding='utf-8') as f:
                yaml.safe_dump(self.config, f, default_flow_style=False, indent=2)
        except OSError as e:
            logger.warning("Could not save config to %s: %s", self.config_file, e)

    def validate(self):
        """Validate the csv section, raising ConfigurationError on bad values."""
        csv_config = self.get_csv_config()
        validate_delimiter_setting(csv_config['delimiter'])
        validate_positive_int('preview_row_count', csv_config['preview_row_count'])
        validate_positive_int('load_more_batch_size', csv_config['load_more_batch_size'])

    def get_csv_config(self) -> Dict[str, Any]:
        """Get csv viewer configuration."""
        return self.config.get('csv', DEFAULT_CONFIG['csv'])

    def set_csv_config(self, **kwargs):
        """Set csv viewer configuration parameters and persist them."""
        updated = dict(self.get_csv_config())
        updated.update(kwargs)
        previous = self.config.get('csv')
        self.config['csv'] = updated
        try:
            self.validate()
        except ConfigurationError:
            self.config['csv'] = previous
            raise
        self.save_config()

    @property
    def delimiter(self) -> str:
        return self.get_csv_config()['delimiter']

    @property
    def preview_row_count(self) -> int:
        return self.get_csv_config()['preview_row_count']

    @property
    def load_more_batch_size(self) -> int:
        return self.get_csv_config()['load_more_batch_size']


@dataclass(frozen=True)
class PreviewSettings:
    """Per-session settings handed to each preview panel unchanged"""
    delimiter: str = AUTO
    max_rows: int = DEFAULT_MAX_ROWS
    batch_size: int = DEFAULT_BATCH_SIZE

    @classmethod
    def from_config(cls, config: ViewerConfig, delimiter: Optional[str] = None,
                    max_rows: Optional[int] = None,
                    batch_size: Optional[int] = None) -> "PreviewSettings":
        """Settings from the config file, with command-line overrides applied"""
        settings = cls(
            delimiter=config.delimiter if delimiter is None else delimiter,
            max_rows=config.preview_row_count if max_rows is None else max_rows,
            batch_size=config.load_more_batch_size if batch_size is None else batch_size,
        )
        validate_delimiter_setting(settings.delimiter)
        validate_positive_int('preview_row_count', settings.max_rows)
        validate_positive_int('load_more_batch_size', settings.batch_size)
        return settings
