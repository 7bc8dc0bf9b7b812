"""Working tree status, parsed from `git status --porcelain` output.

Each porcelain line is `XY path`, where X is the staged (index) code and Y
the unstaged (worktree) code. Renames print `XY old -> new`.

Notable limitations:
    A path whose staged and unstaged codes differ (e.g. `MD`) is filed under
    the staged code only. The unstaged code survives as the `has_unstaged`
    flag and nothing more.
"""

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Final, Self

from gitmodel.exceptions import MalformedRecordError

_RENAME_SEPARATOR: Final = " -> "
_PATH_OFFSET: Final = 3


class StatusCode(StrEnum):
    """Porcelain status codes that are mapped onto file records."""

    ADDED = "A"
    UNTRACKED = "?"
    IGNORED = "!"
    MODIFIED = "M"
    DELETED = "D"
    RENAMED = "R"


@dataclass(frozen=True, slots=True)
class ChangedFile:
    """Base record for a path reported by git status.

    Attributes:
        path: Repository-relative path.
        has_staged: Whether the path has changes in the index.
        has_unstaged: Whether the path has changes in the working tree.
    """

    path: str
    has_staged: bool
    has_unstaged: bool


@dataclass(frozen=True, slots=True)
class AddedFile(ChangedFile):
    """A new file, staged or untracked."""


@dataclass(frozen=True, slots=True)
class DeletedFile(ChangedFile):
    """A deleted file."""


@dataclass(frozen=True, slots=True)
class ModifiedFile(ChangedFile):
    """A modified file."""


@dataclass(frozen=True, slots=True)
class RenamedFile(ChangedFile):
    """A renamed file.

    Git only detects a rename once it is staged; unstaged it shows up as a
    delete plus an add. Renames are therefore always staged and never
    unstaged.

    Attributes:
        old_path: The path before the rename.
    """

    old_path: str
    has_staged: bool = field(default=True, init=False)
    has_unstaged: bool = field(default=False, init=False)


@dataclass(frozen=True, slots=True)
class IgnoredFile(ChangedFile):
    """An ignored path. Ignored paths are neither staged nor unstaged."""

    has_staged: bool = field(default=False, init=False)
    has_unstaged: bool = field(default=False, init=False)


@dataclass(frozen=True, slots=True)
class Status:
    """Structured `git status --porcelain` report.

    Attributes:
        text: The raw porcelain output.
        added: Added and untracked files.
        deleted: Deleted files.
        renamed: Renamed files.
        modified: Modified files.
        ignored: Ignored paths (only reported with --ignored).
    """

    text: str = ""
    added: tuple[AddedFile, ...] = ()
    deleted: tuple[DeletedFile, ...] = ()
    renamed: tuple[RenamedFile, ...] = ()
    modified: tuple[ModifiedFile, ...] = ()
    ignored: tuple[IgnoredFile, ...] = ()

    @classmethod
    def from_porcelain(cls, text: str) -> Self:
        """Parse porcelain output into a status report.

        Lines with codes other than those in StatusCode (copies, unmerged
        paths, ...) are skipped.

        Args:
            text: Output of `git status --porcelain`.

        Returns:
            The parsed Status.

        Raises:
            MalformedRecordError: If a rename line has no `->` separator.
        """
        added: list[AddedFile] = []
        deleted: list[DeletedFile] = []
        renamed: list[RenamedFile] = []
        modified: list[ModifiedFile] = []
        ignored: list[IgnoredFile] = []

        for line in text.split("\n"):
            if not line:
                continue

            staged_char = line[:1]
            unstaged_char = line[1:2]
            path = line[_PATH_OFFSET:]

            code = staged_char.strip() or unstaged_char
            has_staged = staged_char != " "
            has_unstaged = unstaged_char != " "

            match code:
                case StatusCode.ADDED:
                    added.append(AddedFile(path.strip(), has_staged, has_unstaged))
                case StatusCode.UNTRACKED:
                    added.append(AddedFile(path.strip(), False, has_unstaged))
                case StatusCode.DELETED:
                    deleted.append(DeletedFile(path.strip(), has_staged, has_unstaged))
                case StatusCode.MODIFIED:
                    modified.append(
                        ModifiedFile(path.strip(), has_staged, has_unstaged)
                    )
                case StatusCode.IGNORED:
                    ignored.append(IgnoredFile(path.strip()))
                case StatusCode.RENAMED:
                    renamed.append(_parse_rename(line, path))
                case _:
                    pass

        return cls(
            text=text,
            added=tuple(added),
            deleted=tuple(deleted),
            renamed=tuple(renamed),
            modified=tuple(modified),
            ignored=tuple(ignored),
        )

    @property
    def files(self) -> tuple[ChangedFile, ...]:
        """All changed files except ignored ones."""
        return (*self.added, *self.deleted, *self.renamed, *self.modified)

    @property
    def staged_files(self) -> tuple[ChangedFile, ...]:
        """Changed files with staged changes."""
        return tuple(file for file in self.files if file.has_staged)

    @property
    def unstaged_files(self) -> tuple[ChangedFile, ...]:
        """Changed files with unstaged changes."""
        return tuple(file for file in self.files if file.has_unstaged)

    def has_changes(self) -> bool:
        """Check if any file (ignored files aside) has changes."""
        return len(self.files) > 0

    def has_unstaged_changes(self) -> bool:
        """Check if any file has unstaged changes."""
        return len(self.unstaged_files) > 0


def _parse_rename(line: str, path: str) -> RenamedFile:
    old_path, separator, new_path = path.rpartition(_RENAME_SEPARATOR)
    if not separator:
        msg = f"Failed to parse renamed path. Expected 'old -> new':\n{line}"
        raise MalformedRecordError(msg, record=line, expected="old -> new")
    return RenamedFile(new_path.strip(), old_path=old_path.strip())
