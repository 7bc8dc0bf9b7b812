"""gitmodel exceptions."""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Final

STATUS_INTERNAL: Final = 500
STATUS_UNPROCESSABLE: Final = 422
STATUS_NOT_FOUND: Final = 404
STATUS_CONFLICT: Final = 409


@dataclass(frozen=True, slots=True)
class CommandContext:
    """Diagnostic details about a git invocation.

    Attached to errors instead of being kept as process-wide state, so each
    error carries the output of the command that produced it.

    Attributes:
        args: The full argument vector, including the git binary.
        exit_code: Process exit code, or None if the process never finished.
        stdout: Captured (possibly truncated) standard output.
        stderr: Captured (possibly truncated) standard error.
    """

    args: tuple[str, ...]
    exit_code: int | None = None
    stdout: str = ""
    stderr: str = ""


class GitError(Exception):
    """Base exception for gitmodel errors.

    Attributes:
        status_code: Machine-checkable classification of the failure.
        context: Diagnostics of the git command involved, if any.
    """

    default_status_code: int = STATUS_INTERNAL

    def __init__(
        self,
        message: str = "",
        *,
        status_code: int | None = None,
        context: CommandContext | None = None,
    ) -> None:
        """Initialize with message, status code and optional command context."""
        super().__init__(message)
        self.status_code: int = (
            status_code if status_code is not None else self.default_status_code
        )
        self.context: CommandContext | None = context


# =============================================================================
# Parsing Exceptions
# =============================================================================


class MalformedRecordError(GitError, ValueError):
    """Raised when git output does not have the expected record shape.

    Attributes:
        record: The offending fragment of output.
        expected: Description of the expected shape, if applicable.
    """

    def __init__(
        self,
        message: str,
        *,
        record: str,
        expected: str | None = None,
    ) -> None:
        """Initialize with error message and the offending record."""
        super().__init__(message)
        self.record: str = record
        self.expected: str | None = expected


class GitValidationError(GitError, ValueError):
    """Raised when a field is missing or its value cannot be interpreted.

    Attributes:
        field: The field that failed validation (if applicable).
    """

    default_status_code: int = STATUS_UNPROCESSABLE

    def __init__(self, message: str, *, field: str | None = None) -> None:
        """Initialize with error message and validation context."""
        super().__init__(message)
        self.field: str | None = field


# =============================================================================
# Repository Exceptions
# =============================================================================


class NotFoundError(GitError, LookupError):
    """Raised when a branch, tag, commit, remote or repository cannot be found.

    Attributes:
        kind: The type of item that was not found (e.g. "branch").
        reference: The name or reference that was looked up.
    """

    default_status_code: int = STATUS_NOT_FOUND

    def __init__(self, kind: str, reference: str) -> None:
        """Initialize with the kind of item and the reference that missed.

        Args:
            kind: The type of item that could not be found.
            reference: A reference identifying the missing item.
        """
        super().__init__(f"{kind[:1].upper()}{kind[1:]} Not Found: '{reference}'")
        self.kind: str = kind
        self.reference: str = reference


class RepositoryNotFoundError(NotFoundError):
    """Raised when the repository directory or its .git entry is missing."""


class AlreadyExistsError(GitError):
    """Raised when creating a branch or remote whose name is already taken.

    Attributes:
        name: The name that already exists.
    """

    default_status_code: int = STATUS_CONFLICT

    def __init__(self, message: str, *, name: str) -> None:
        """Initialize with error message and the conflicting name."""
        super().__init__(message)
        self.name: str = name


class CommandError(GitError):
    """Raised when a git process fails, times out or cannot be started."""


# =============================================================================
# Configuration Exceptions
# =============================================================================


class ConfigError(GitError):
    """Settings could not be assembled."""


class ConfigLoadError(ConfigError):
    """A settings file is unreadable or not valid TOML.

    Attributes:
        path: The file involved, if known.
        line: 1-based line of the syntax error, when the parser reports one.
        column: 1-based column of the syntax error, when reported.
    """

    def __init__(
        self,
        message: str,
        *,
        path: Path | None = None,
        line: int | None = None,
        column: int | None = None,
    ) -> None:
        super().__init__(message)
        self.path: Path | None = path
        self.line: int | None = line
        self.column: int | None = column


class ConfigValidationError(ConfigError):
    """A merged settings value was rejected by the settings model.

    Attributes:
        key: Dotted path of the offending setting, e.g. "logging.level".
        value: The rejected input.
        expected: What the model wanted instead.
    """

    default_status_code: int = STATUS_UNPROCESSABLE

    def __init__(
        self,
        message: str,
        *,
        key: str,
        value: Any,  # pyright: ignore[reportAny,reportExplicitAny]
        expected: str,
    ) -> None:
        super().__init__(message)
        self.key: str = key
        self.value: Any = value  # pyright: ignore[reportExplicitAny]
        self.expected: str = expected
