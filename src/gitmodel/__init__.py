"""Typed models over the git command line.

This package runs git, parses its field-block and line-oriented output, and
validates it into immutable models.

Classes:
    Repository: Facade that runs git and returns parsed models.
    Commit: A single commit with its author and date.
    Tag: An annotated or lightweight tag.
    Branch: A local branch and its upstream, if any.
    Remote: A configured remote and its fetch/push capabilities.
    Status: Structured `git status --porcelain` report.
    Schema: Typed field-block validator.

Commitish:
    Commitish: Protocol for anything resolvable to a commit.
    Head, PartialCommit, PartialBranch: Lightweight commit references.

Example:
    >>> from gitmodel import Repository
    >>> repo = Repository("/path/to/checkout")
    >>> for tag in repo.get_tags(limit=5):
    ...     print(tag.name, tag.commit.hash)
"""

from gitmodel._branch import BRANCH_REF_FORMAT, REMOTE_REF_PREFIX, Branch
from gitmodel._commit import COMMIT_LOG_FORMAT, COMMIT_SCHEMA, Author, Commit
from gitmodel._commitish import HEAD, Commitish, Head, PartialBranch, PartialCommit
from gitmodel._fields import parse_field_block
from gitmodel._logging import create_logger, create_logger_from_settings
from gitmodel._remote import Remote
from gitmodel._repository import Repository
from gitmodel._schema import FieldKind, FieldSpec, Schema
from gitmodel._status import (
    AddedFile,
    ChangedFile,
    DeletedFile,
    IgnoredFile,
    ModifiedFile,
    RenamedFile,
    Status,
    StatusCode,
)
from gitmodel._tag import TAG_REF_FORMAT, TAG_SCHEMA, Tag, TagSort, split_tag_records
from gitmodel.config import GitSettings, load_settings
from gitmodel.exceptions import (
    AlreadyExistsError,
    CommandError,
    GitError,
    GitValidationError,
    MalformedRecordError,
    NotFoundError,
    RepositoryNotFoundError,
)

__all__ = [
    "BRANCH_REF_FORMAT",
    "COMMIT_LOG_FORMAT",
    "COMMIT_SCHEMA",
    "HEAD",
    "REMOTE_REF_PREFIX",
    "TAG_REF_FORMAT",
    "TAG_SCHEMA",
    "AddedFile",
    "AlreadyExistsError",
    "Author",
    "Branch",
    "ChangedFile",
    "CommandError",
    "Commit",
    "Commitish",
    "DeletedFile",
    "FieldKind",
    "FieldSpec",
    "GitError",
    "GitSettings",
    "GitValidationError",
    "Head",
    "IgnoredFile",
    "MalformedRecordError",
    "ModifiedFile",
    "NotFoundError",
    "PartialBranch",
    "PartialCommit",
    "Remote",
    "RenamedFile",
    "Repository",
    "RepositoryNotFoundError",
    "Schema",
    "Status",
    "StatusCode",
    "Tag",
    "TagSort",
    "create_logger",
    "create_logger_from_settings",
    "load_settings",
    "parse_field_block",
    "split_tag_records",
]
