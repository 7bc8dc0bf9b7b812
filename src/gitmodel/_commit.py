"""Commit and author models.

Commits are parsed from `git log` output produced with COMMIT_LOG_FORMAT.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Final, Self, cast

from gitmodel._fields import parse_field_block
from gitmodel._schema import Schema

COMMIT_LOG_FORMAT: Final = """\
commitHash: %h
commitMessage: %s
commitDate: %aI
committerName: %an
committerEmail: %ae"""

COMMIT_SCHEMA: Final = Schema.parse(
    [
        "commitHash:s",
        "commitMessage:s",
        "commitDate:dt",
        "committerName:s",
        "committerEmail:s",
    ]
)


@dataclass(frozen=True, slots=True)
class Author:
    """Name and email of a commit author or tagger.

    Attributes:
        name: Display name.
        email: Email address without enclosing angle brackets.
    """

    name: str
    email: str


@dataclass(frozen=True, slots=True)
class Commit:
    """A single git commit.

    Attributes:
        hash: Commit hash as printed by git (abbreviated or full).
        date: Author date, timezone-aware.
        author: Who authored the commit.
        message: The commit subject line.
    """

    hash: str
    date: datetime
    author: Author
    message: str

    @classmethod
    def from_output(cls, output: str) -> Self:
        """Build a commit from one record of COMMIT_LOG_FORMAT output.

        Args:
            output: The field block git printed for a single commit.

        Returns:
            The parsed Commit.

        Raises:
            MalformedRecordError: If a line is not a `label: value` pair.
            GitValidationError: If a field is missing or the date is invalid.
        """
        data = COMMIT_SCHEMA.validate(parse_field_block(output))
        return cls.from_fields(data)

    @classmethod
    def from_fields(cls, data: dict[str, object]) -> Self:
        """Build a commit from fields already validated against COMMIT_SCHEMA."""
        author = Author(
            name=str(data["committerName"]),
            email=str(data["committerEmail"]),
        )
        return cls(
            hash=str(data["commitHash"]),
            date=cast("datetime", data["commitDate"]),
            author=author,
            message=str(data["commitMessage"]),
        )

    def resolve_to_hash(self) -> str:
        return self.hash
