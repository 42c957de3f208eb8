"""Core domain types and logic."""

from .cancel import CancelToken
from .config import Config, ConfigError, GitHubConfig, PollingConfig, load_config
from .errors import ErrorCode
from .result import Err, Ok, Result

__all__ = [
    # cancel
    "CancelToken",
    # config
    "Config",
    "ConfigError",
    "GitHubConfig",
    "PollingConfig",
    "load_config",
    # errors
    "ErrorCode",
    # result
    "Err",
    "Ok",
    "Result",
]
