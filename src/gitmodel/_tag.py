"""Tag model.

Tags are listed with `git for-each-ref` rather than `git tag` or `git log`,
since porcelain commands can be reshaped by a user's gitconfig. The format
template normalizes annotated and lightweight tags onto the same commit field
labels, so one schema parses both.

Example annotated record::

    tag: v1.0
    ref: refs/tags/v1.0
    commitHash: cd9d41b677056f9bfd71014e1118b5a1de0f4345
    commitMessage: File 4
    commitDate: 2022-01-26T02:51:21-05:00
    committerName: Adam Charron
    committerEmail: adam@charrondev.com
    tagMessage: Annotated tag
    tagDate: 2022-01-26T01:20:54-05:00
    taggerName: Adam Charron
    taggerEmail: <adam@charrondev.com>

A lightweight record stops after `committerEmail`.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum
from typing import Final, Self, cast

from gitmodel._commit import COMMIT_SCHEMA, Author, Commit
from gitmodel._fields import parse_field_block
from gitmodel._schema import Schema

TAG_LABEL: Final = "tag:"

# Record separator in combined for-each-ref output.
TAG_RECORD_SEPARATOR: Final = f"\n{TAG_LABEL}"

TAG_REF_FORMAT: Final = """\
tag: %(refname:strip=2)
ref: %(refname)%(if)%(taggerdate)%(then)
commitHash: %(*objectname)
commitMessage: %(*subject)
commitDate: %(*authordate:iso-strict)
committerName: %(*authorname)
committerEmail: %(*authoremail:trim)
tagMessage: %(subject)
tagDate: %(taggerdate:iso-strict)
taggerName: %(taggername)
taggerEmail: %(taggeremail)%(else)
commitHash: %(objectname)
commitMessage: %(subject)
commitDate: %(authordate:iso-strict)
committerName: %(authorname)
committerEmail: %(authoremail)%(end)"""

TAG_SCHEMA: Final = COMMIT_SCHEMA.merge(
    Schema.parse(
        [
            "tag:s",
            "tagMessage:s?",
            "tagDate:dt?",
            "taggerName:s?",
            "taggerEmail:s?",
        ]
    )
)


class TagSort(StrEnum):
    """Sort keys accepted by `git for-each-ref --sort` for tag listings."""

    NEWEST_COMMIT = "-*committerdate"
    NEWEST_VERSION = "-version:refname"


def _normalize_record(record: str) -> str:
    record = record.lstrip()
    if not record.startswith(TAG_LABEL):
        record = f"{TAG_LABEL} {record}"
    return record


def split_tag_records(output: str) -> list[str]:
    """Split combined for-each-ref output into one field block per tag.

    Args:
        output: Everything git printed for a TAG_REF_FORMAT listing.

    Returns:
        One record per tag, each starting with its `tag:` label.
    """
    if not output.strip():
        return []
    records = output.split(TAG_RECORD_SEPARATOR)
    return [_normalize_record(record) for record in records]


@dataclass(frozen=True, slots=True)
class Tag:
    """A git tag and the commit it points at.

    Annotated tags carry their own tagger, date and message. Lightweight tags
    have none of the three; their metadata is that of `commit`.

    Attributes:
        name: Tag name without the refs/tags/ prefix.
        commit: The tagged commit.
        tagger: Who created an annotated tag, or None.
        date: When an annotated tag was created, or None.
        message: Annotated tag message, or None.
    """

    name: str
    commit: Commit
    tagger: Author | None = None
    date: datetime | None = None
    message: str | None = None

    @property
    def is_annotated(self) -> bool:
        """Whether the tag has its own tagger metadata."""
        return self.tagger is not None

    @classmethod
    def from_output(cls, output: str) -> Self:
        """Build a tag from one record of TAG_REF_FORMAT output.

        A record whose leading `tag:` label was consumed by splitting combined
        output is accepted and relabelled.

        Args:
            output: The field block git printed for a single tag.

        Returns:
            The parsed Tag.

        Raises:
            MalformedRecordError: If a line is not a `label: value` pair.
            GitValidationError: If a field is missing or a date is invalid.
        """
        data = TAG_SCHEMA.validate(parse_field_block(_normalize_record(output)))
        commit = Commit.from_fields(data)

        tagger_name = cast("str | None", data["taggerName"])
        if tagger_name is None:
            return cls(name=str(data["tag"]), commit=commit)

        return cls(
            name=str(data["tag"]),
            commit=commit,
            tagger=Author(name=tagger_name, email=data["taggerEmail"] or ""),
            date=cast("datetime | None", data["tagDate"]),
            message=data["tagMessage"] or "",
        )

    def resolve_to_hash(self) -> str:
        return self.commit.hash
