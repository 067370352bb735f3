"""
Configuration management for the Makuwro SDK.

Handles loading and saving configuration from:
- Environment variables
- Configuration file (~/.makuwro/config.json)
"""

import json
import logging
import os
from dataclasses import dataclass, asdict, fields, replace
from pathlib import Path
from types import MappingProxyType
from typing import Optional, Mapping

from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Endpoints:
    """Base URLs for REST and realtime gateway access."""

    rest: str
    gateway: str


ENDPOINTS: Mapping[str, Endpoints] = MappingProxyType({
    "production": Endpoints(
        rest="https://api.makuwro.com/",
        gateway="ws://api.makuwro.com",
    ),
    "development": Endpoints(
        rest="http://localhost:3001/",
        gateway="ws://localhost:3001",
    ),
})

DEFAULT_ENVIRONMENT = "production"
DEFAULT_TIMEOUT = 15.0
DEFAULT_CONFIG_DIR = Path.home() / ".makuwro"
CONFIG_FILE_NAME = "config.json"


@dataclass
class MakuwroConfig:
    """Connection settings passed explicitly to a client."""

    environment: str = DEFAULT_ENVIRONMENT
    token: Optional[str] = None
    timeout: float = DEFAULT_TIMEOUT
    verify_ssl: bool = True
    rest_url: Optional[str] = None
    gateway_url: Optional[str] = None

    @property
    def endpoints(self) -> Endpoints:
        """Resolve the REST and gateway URLs for this configuration."""
        self.validate()
        base = ENDPOINTS[self.environment]

        rest = self.rest_url or base.rest
        if not rest.endswith("/"):
            rest += "/"

        return Endpoints(rest=rest, gateway=self.gateway_url or base.gateway)

    def validate(self) -> None:
        """Raise ConfigurationError if the environment name is unknown."""
        if self.environment not in ENDPOINTS:
            raise ConfigurationError(
                f"Unknown environment: {self.environment}",
                details=f"Expected one of: {', '.join(ENDPOINTS)}"
            )

    def is_configured(self) -> bool:
        """Check if a session token is available."""
        return bool(self.token)

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "MakuwroConfig":
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})


class ConfigManager:
    """Loads and persists a MakuwroConfig."""

    def __init__(self, config_dir: Optional[Path] = None):
        env_dir = os.environ.get("MAKUWRO_CONFIG_DIR")
        self.config_dir = Path(config_dir or env_dir or DEFAULT_CONFIG_DIR)
        self._config: Optional[MakuwroConfig] = None

    def get_config_path(self) -> Path:
        return self.config_dir / CONFIG_FILE_NAME

    def _read_file(self) -> MakuwroConfig:
        path = self.get_config_path()
        data = {}

        if path.exists():
            try:
                data = json.loads(path.read_text(encoding="utf-8"))
            except (OSError, ValueError) as e:
                raise ConfigurationError(f"Cannot read configuration file {path}", details=str(e))

        return MakuwroConfig.from_dict(data)

    def load(self) -> MakuwroConfig:
        """Load configuration from file, then apply environment overrides."""
        config = self._read_file()
        self._apply_env(config)
        config.validate()

        self._config = config
        return config

    @staticmethod
    def _apply_env(config: MakuwroConfig) -> None:
        token = os.environ.get("MAKUWRO_TOKEN")
        if token:
            config.token = token

        environment = os.environ.get("MAKUWRO_ENVIRONMENT")
        if environment:
            config.environment = environment

        timeout = os.environ.get("MAKUWRO_TIMEOUT")
        if timeout:
            try:
                config.timeout = float(timeout)
            except ValueError:
                raise ConfigurationError(f"Invalid MAKUWRO_TIMEOUT value: {timeout}")

    def get(self) -> MakuwroConfig:
        """Get the current configuration, loading it on first use."""
        if self._config is None:
            return self.load()
        return self._config

    def save(self, config: MakuwroConfig) -> None:
        """Write configuration to file."""
        self.config_dir.mkdir(parents=True, exist_ok=True)
        path = self.get_config_path()
        path.write_text(json.dumps(config.to_dict(), indent=2), encoding="utf-8")
        try:
            os.chmod(path, 0o600)
        except OSError as e:
            logger.debug("Could not restrict permissions on %s: %s", path, e)
        # Reload on next get() so environment overrides apply again
        self._config = None

    def update(self, **kwargs) -> MakuwroConfig:
        """
        Update and save selected configuration values.

        Only the file's own values and the given updates are written;
        environment overrides stay out of the file.
        """
        known = {f.name for f in fields(MakuwroConfig)}
        for key in kwargs:
            if key not in known:
                raise ConfigurationError(f"Unknown configuration key: {key}")

        stored = replace(self._read_file(), **kwargs)
        stored.validate()
        self.save(stored)
        return self.load()

    def clear(self) -> None:
        """Remove the configuration file."""
        path = self.get_config_path()
        if path.exists():
            path.unlink()
        self._config = None


def get_config_manager(config_dir: Optional[Path] = None) -> ConfigManager:
    """Create a configuration manager for the given directory."""
    return ConfigManager(config_dir)
