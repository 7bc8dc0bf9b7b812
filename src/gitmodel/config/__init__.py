"""gitmodel configuration.

Example:
    >>> from gitmodel.config import load_settings
    >>> settings = load_settings(overrides={"timeout_ms": 5000})
    >>> settings.git_binary
    'git'
"""

from gitmodel.exceptions import ConfigError, ConfigLoadError, ConfigValidationError

from ._loader import (
    ENV_PREFIX,
    deep_merge,
    load_settings,
    parse_env_vars,
    read_toml_file,
    set_nested_key,
)
from ._models import GitSettings, LogFormat, LoggingSettings, LogLevel

__all__ = [
    "ENV_PREFIX",
    "ConfigError",
    "ConfigLoadError",
    "ConfigValidationError",
    "GitSettings",
    "LogFormat",
    "LogLevel",
    "LoggingSettings",
    "deep_merge",
    "load_settings",
    "parse_env_vars",
    "read_toml_file",
    "set_nested_key",
]
