"""
User configuration management for imgprint.

Each setting is resolved in this order:
1. Command-line argument (handled by the CLI parser)
2. Environment variable (IMGPRINT_*)
3. User config file (~/.imgprint/config.json, or $IMGPRINT_CONFIG_DIR/config.json)
4. Default from config.py

Example config.json:
{
    "store_file": "/home/me/photos/store.json",
    "search_results": 5,
    "threshold": 10,
    "blur_sigma": 0.1,
    "window_size": 5,
    "max_corners": 50,
    "corner_threshold": 1000000.0
}
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Callable, Optional

from .config import (
    DEFAULT_BLUR_SIGMA,
    DEFAULT_CORNER_THRESHOLD,
    DEFAULT_MAX_CORNERS,
    DEFAULT_SEARCH_RESULTS,
    DEFAULT_THRESHOLD,
    DEFAULT_WINDOW_SIZE,
    STORE_FILE,
)

logger = logging.getLogger(__name__)

# key -> (environment variable, type, default)
SETTINGS: dict[str, tuple[str, Callable[[Any], Any], Any]] = {
    'store_file': ('IMGPRINT_STORE_FILE', str, STORE_FILE),
    'search_results': ('IMGPRINT_RESULTS', int, DEFAULT_SEARCH_RESULTS),
    'threshold': ('IMGPRINT_THRESHOLD', int, DEFAULT_THRESHOLD),
    'blur_sigma': ('IMGPRINT_BLUR_SIGMA', float, DEFAULT_BLUR_SIGMA),
    'window_size': ('IMGPRINT_WINDOW_SIZE', int, DEFAULT_WINDOW_SIZE),
    'max_corners': ('IMGPRINT_MAX_CORNERS', int, DEFAULT_MAX_CORNERS),
    'corner_threshold': ('IMGPRINT_CORNER_THRESHOLD', float, DEFAULT_CORNER_THRESHOLD),
}


class UserConfig:
    """
    Singleton view over environment variables and the user config file.

    The file is read on first use and cached; ``reload()`` drops the cache.
    """

    _instance: Optional['UserConfig'] = None
    _config_data: Optional[dict] = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    @property
    def config_dir(self) -> Path:
        env_dir = os.getenv('IMGPRINT_CONFIG_DIR')
        return Path(env_dir) if env_dir else Path.home() / '.imgprint'

    @property
    def config_file_path(self) -> Path:
        return self.config_dir / 'config.json'

    def _read_file(self) -> dict:
        path = self.config_file_path
        if not path.exists():
            return {}

        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning(f"Failed to load config file {path}: {e}")
            return {}

        if not isinstance(data, dict):
            logger.warning(f"Ignoring config file {path}: expected a JSON object")
            return {}
        logger.debug(f"Loaded configuration from {path}")
        return data

    @property
    def file_data(self) -> dict:
        """Contents of the config file (cached)."""
        if self._config_data is None:
            self._config_data = self._read_file()
        return self._config_data

    def reload(self):
        """Forget the cached config file contents."""
        self._config_data = None

    def get(self, key: str, default: Any = None, env_var: Optional[str] = None) -> Any:
        """
        Look up a raw value: environment variable, then config file, then default.

        Environment values are decoded as JSON when possible, so "5" becomes 5
        and "true" becomes True; anything else is returned as the plain string.
        """
        if env_var:
            raw = os.getenv(env_var)
            if raw is not None:
                try:
                    return json.loads(raw)
                except ValueError:
                    return raw

        return self.file_data.get(key, default)

    def setting(self, key: str) -> Any:
        """
        Resolve a known setting and coerce it to its type.

        Values that cannot be converted are logged and replaced by the default.
        """
        env_var, cast, default = SETTINGS[key]
        value = self.get(key, default=default, env_var=env_var)
        if isinstance(value, bool):
            logger.warning(f"Invalid value for {key}: {value!r}; using {default!r}")
            return default
        try:
            return cast(value)
        except (TypeError, ValueError):
            logger.warning(f"Invalid value for {key}: {value!r}; using {default!r}")
            return default

    @property
    def store_file(self) -> str:
        return self.setting('store_file')

    @property
    def search_results(self) -> int:
        return self.setting('search_results')

    @property
    def threshold(self) -> int:
        """Hamming distance threshold for grouping (0-64)."""
        return self.setting('threshold')

    @property
    def blur_sigma(self) -> float:
        return self.setting('blur_sigma')

    @property
    def window_size(self) -> int:
        """Corner detection window (odd)."""
        return self.setting('window_size')

    @property
    def max_corners(self) -> int:
        return self.setting('max_corners')

    @property
    def corner_threshold(self) -> float:
        return self.setting('corner_threshold')

    def create_example_config(self) -> bool:
        """Write a config file holding every setting at its default."""
        example = {"_comment": "imgprint user configuration"}
        example.update({key: default for key, (_, _, default) in SETTINGS.items()})

        try:
            self.config_dir.mkdir(parents=True, exist_ok=True)
            with open(self.config_file_path, 'w', encoding='utf-8') as f:
                json.dump(example, f, indent=2)
        except OSError as e:
            logger.error(f"Failed to create example config: {e}")
            return False

        logger.info(f"Created example config file at {self.config_file_path}")
        self.reload()
        return True


_user_config = UserConfig()


def get_user_config() -> UserConfig:
    """Get the global UserConfig instance."""
    return _user_config
