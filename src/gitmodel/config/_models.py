"""Configuration models.

Settings are frozen pydantic models; unknown keys are ignored so a shared
config file can carry sections for other tools.
"""

from enum import StrEnum
from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field

from gitmodel._exec import DEFAULT_TIMEOUT_MS


class LogLevel(StrEnum):
    """Log level threshold values.

    Values are ordered from most verbose (debug) to least verbose (error).
    """

    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class LogFormat(StrEnum):
    """Log output format values."""

    JSON = "json"
    TEXT = "text"


class LoggingSettings(BaseModel):
    """Logging configuration section.

    Attributes:
        level: Log level threshold. When unset, GITMODEL_LOG_LEVEL applies,
            then warning.
        format: Log output format.
        file: Path to log file (empty logs to stderr).
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="ignore")

    level: LogLevel | None = None
    format: LogFormat = LogFormat.TEXT
    file: str = ""


class GitSettings(BaseModel):
    """Settings for running git.

    Attributes:
        git_binary: Name or path of the git executable.
        timeout_ms: Timeout for a single git invocation, in milliseconds.
        env: Extra environment variables for every git invocation.
        logging: Logging configuration section.
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="ignore")

    git_binary: str = "git"
    timeout_ms: int = Field(default=DEFAULT_TIMEOUT_MS, gt=0)
    env: dict[str, str] = Field(default_factory=lambda: {"GIT_TERMINAL_PROMPT": "0"})
    logging: LoggingSettings = LoggingSettings()
