"""Typed configuration loading and access.

Configuration is optional. Built-in defaults apply unless a TOML file
overrides them:

    [polling]
    interval = 5      # seconds between mergeability checks
    timeout = 50      # total polling budget in seconds

    [github]
    api_url = "https://api.github.com"
    http_timeout = 30
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from .result import Err, Ok, Result
from .structured import StrDict, as_str_dict, get_number, get_str, get_table

__all__ = [
    "Config",
    "ConfigError",
    "GitHubConfig",
    "PollingConfig",
    "load_config",
    "load_config_or_default",
    "DEFAULT_API_URL",
    "DEFAULT_HTTP_TIMEOUT_SECONDS",
    "DEFAULT_POLLING_INTERVAL_SECONDS",
    "DEFAULT_POLLING_TIMEOUT_SECONDS",
]

DEFAULT_POLLING_INTERVAL_SECONDS = 5.0
DEFAULT_POLLING_TIMEOUT_SECONDS = 50.0
DEFAULT_API_URL = "https://api.github.com"
DEFAULT_HTTP_TIMEOUT_SECONDS = 30.0


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when config cannot be loaded or parsed."""

    message: str
    path: Path | None = None

    def __str__(self) -> str:
        if self.path is not None:
            return f"{self.message} ({self.path})"
        return self.message


@dataclass(frozen=True, slots=True)
class PollingConfig:
    """How often and for how long to ask whether a PR is mergeable."""

    interval: float = DEFAULT_POLLING_INTERVAL_SECONDS
    timeout: float = DEFAULT_POLLING_TIMEOUT_SECONDS

    @property
    def max_attempts(self) -> int:
        """floor(timeout / interval), computed on milliseconds to dodge float error."""
        interval_ms = round(self.interval * 1000)
        if interval_ms <= 0:
            return 0
        return max(0, round(self.timeout * 1000)) // interval_ms

    def with_overrides(
        self,
        *,
        interval: float | None = None,
        timeout: float | None = None,
    ) -> PollingConfig:
        return PollingConfig(
            interval=self.interval if interval is None else interval,
            timeout=self.timeout if timeout is None else timeout,
        )


@dataclass(frozen=True, slots=True)
class GitHubConfig:
    """Hosting API endpoint settings. Credentials are never stored here."""

    api_url: str = DEFAULT_API_URL
    http_timeout: float = DEFAULT_HTTP_TIMEOUT_SECONDS


@dataclass(frozen=True, slots=True)
class Config:
    """Main configuration container."""

    polling: PollingConfig = field(default_factory=PollingConfig)
    github: GitHubConfig = field(default_factory=GitHubConfig)

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> Config:
        """Create Config from a mapping (parsed TOML).

        Raises:
            ValueError: If a duration is present but not positive.
        """
        polling: StrDict = get_table(data, "polling") or {}
        github: StrDict = get_table(data, "github") or {}

        interval = get_number(polling, "interval")
        timeout = get_number(polling, "timeout")
        http_timeout = get_number(github, "http_timeout")
        for name, value in (
            ("polling.interval", interval),
            ("polling.timeout", timeout),
            ("github.http_timeout", http_timeout),
        ):
            if value is not None and value <= 0:
                raise ValueError(f"{name} must be positive, got {value}")

        return cls(
            polling=PollingConfig(
                interval=interval if interval is not None else DEFAULT_POLLING_INTERVAL_SECONDS,
                timeout=timeout if timeout is not None else DEFAULT_POLLING_TIMEOUT_SECONDS,
            ),
            github=GitHubConfig(
                api_url=(get_str(github, "api_url") or DEFAULT_API_URL).rstrip("/"),
                http_timeout=(
                    http_timeout if http_timeout is not None else DEFAULT_HTTP_TIMEOUT_SECONDS
                ),
            ),
        )


def _parse_toml(path: Path) -> Result[StrDict, ConfigError]:
    """Parse a TOML file, handling read and parse errors."""
    import tomllib

    try:
        content = path.read_bytes()
        data_obj: object = tomllib.loads(content.decode("utf-8"))
        data = as_str_dict(data_obj)
        if data is None:
            return Err(ConfigError("Config root must be a TOML table", path=path))
        return Ok(data)
    except FileNotFoundError:
        return Err(ConfigError(f"Config file not found: {path}", path=path))
    except PermissionError:
        return Err(ConfigError(f"Permission denied reading: {path}", path=path))
    except tomllib.TOMLDecodeError as e:
        return Err(ConfigError(f"Invalid TOML syntax: {e}", path=path))
    except UnicodeDecodeError as e:
        return Err(ConfigError(f"Error reading config: {e}", path=path))


def load_config(path: Path) -> Result[Config, ConfigError]:
    """Load and parse configuration from a TOML file.

    Args:
        path: Path to the config file

    Returns:
        Ok(Config) on success, Err(ConfigError) on failure
    """
    result = _parse_toml(path)
    if isinstance(result, Err):
        return result

    try:
        return Ok(Config.from_dict(result.value))
    except (KeyError, TypeError, ValueError) as e:
        return Err(ConfigError(f"Invalid config structure: {e}", path=path))


def load_config_or_default(path: Path | None) -> Result[Config, ConfigError]:
    """Load config from path, or return defaults when no path is given."""
    if path is None:
        return Ok(Config())
    return load_config(path)
