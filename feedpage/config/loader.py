"""Configuration loader."""

import os
from pathlib import Path
from typing import Optional

import yaml
from pydantic import ValidationError

from ..errors import ConfigurationError, NotInitializedError, PathDoesNotExistError
from .models import OptionsModel

CONFIG_ENV = "FEEDPAGE_CONFIG"
CONFIG_DIR = Path.home() / ".config" / "feedpage"
NEWSBOAT_DIR = Path.home() / ".newsboat"


class Config:
    """Configuration manager resolving options and build paths."""

    def __init__(
        self,
        config_path: Optional[Path] = None,
        urls_file: Optional[Path] = None,
        cache_file: Optional[Path] = None,
        build_dir: Optional[Path] = None,
        template_path: Optional[Path] = None,
    ) -> None:
        """Initialize config manager; explicit paths override option values."""
        if config_path is None:
            env_path = os.environ.get(CONFIG_ENV)
            config_path = Path(env_path) if env_path else CONFIG_DIR / "config.yaml"
        self.config_path = config_path
        self._overrides = {
            "urls_file": urls_file,
            "cache_file": cache_file,
            "build_dir": build_dir,
            "template_path": template_path,
        }
        self._options: Optional[OptionsModel] = None

    @property
    def options(self) -> OptionsModel:
        """Get loaded options."""
        if self._options is None:
            self._options = load_config(self.config_path)
        return self._options

    @property
    def config_dir(self) -> Path:
        return self.config_path.parent

    def _resolve(self, name: str, option_value: str, default: Path) -> Path:
        override = self._overrides.get(name)
        if override is not None:
            return Path(override).expanduser()
        if option_value:
            return Path(option_value).expanduser()
        return default

    @property
    def urls_file(self) -> Path:
        return self._resolve("urls_file", self.options.urls_file, NEWSBOAT_DIR / "urls")

    @property
    def cache_file(self) -> Path:
        return self._resolve("cache_file", self.options.cache_file, NEWSBOAT_DIR / "cache.db")

    @property
    def build_dir(self) -> Path:
        return self._resolve("build_dir", self.options.build_dir, self.config_dir / "build")

    @property
    def template_path(self) -> Path:
        default = self.config_dir / "templates" / self.options.template_name
        return self._resolve("template_path", "", default)

    def check_paths(self) -> None:
        """
        Verify that all inputs of a build exist.

        Raises:
            NotInitializedError: If the template is missing because init never ran
            PathDoesNotExistError: For the first missing path
        """
        for path in (self.urls_file, self.cache_file, self.template_path):
            if not path.exists():
                if path == self.template_path and not self.config_dir.exists():
                    raise NotInitializedError()
                raise PathDoesNotExistError(path)


def load_config(config_path: Path) -> OptionsModel:
    """Load options from YAML file, falling back to defaults if it is absent."""
    if not config_path.exists():
        return OptionsModel()

    try:
        with open(config_path) as f:
            config_data = yaml.safe_load(f)

        if config_data is None:
            config_data = {}
        if not isinstance(config_data, dict):
            raise ConfigurationError(f"Config file must contain a mapping: {config_path}")

        return OptionsModel(**config_data)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in config file: {e}")
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration: {e}")


def save_config(options: OptionsModel, config_path: Path) -> None:
    """Save options to YAML file."""
    config_path.parent.mkdir(parents=True, exist_ok=True)

    with open(config_path, "w") as f:
        yaml.dump(options.model_dump(), f, default_flow_style=False, sort_keys=False)

