"""Branch model.

Branches are listed with `git for-each-ref refs/heads` using
BRANCH_REF_FORMAT, which prints one `name | hash | upstream` line per branch.
"""

from dataclasses import dataclass
from typing import Final, Self

from gitmodel.exceptions import MalformedRecordError

BRANCH_REF_FORMAT: Final = "%(refname:short) | %(objectname:short) | %(upstream)"

REMOTE_REF_PREFIX: Final = "refs/remotes/"

_PART_SEPARATOR: Final = "|"
_EXPECTED_PARTS: Final = 3


@dataclass(frozen=True, slots=True)
class Branch:
    """A local branch and, optionally, the remote branch it tracks.

    Attributes:
        name: Short branch name (may contain slashes).
        commit_hash: Hash of the branch tip when it was listed.
        remote_name: Remote of the upstream branch, or None.
        remote_branch_name: Upstream branch name on that remote, or None.
    """

    name: str
    commit_hash: str
    remote_name: str | None = None
    remote_branch_name: str | None = None

    @property
    def has_upstream(self) -> bool:
        """Whether the branch tracks a remote branch."""
        return self.remote_name is not None

    @classmethod
    def from_output_line(cls, line: str) -> Self:
        """Build a branch from one line of BRANCH_REF_FORMAT output.

        Args:
            line: A single `name | hash | upstream` line.

        Returns:
            The parsed Branch.

        Raises:
            MalformedRecordError: If the line does not have 3 parts, or the
                upstream is not a remote-tracking ref with a remote name.
        """
        parts = line.split(_PART_SEPARATOR)
        if len(parts) != _EXPECTED_PARTS:
            msg = (
                f"Failed to parse branch output. Expected {_EXPECTED_PARTS} parts:\n"
                f"{line}"
            )
            raise MalformedRecordError(msg, record=line, expected=BRANCH_REF_FORMAT)

        name, commit_hash, upstream = (part.strip() for part in parts)
        if not upstream:
            return cls(name=name, commit_hash=commit_hash)

        if not upstream.startswith(REMOTE_REF_PREFIX):
            msg = "Only parsing of remote upstreams is implemented."
            raise MalformedRecordError(
                msg, record=upstream, expected=REMOTE_REF_PREFIX
            )

        remote_path = upstream.removeprefix(REMOTE_REF_PREFIX)
        remote_name, separator, remote_branch_name = remote_path.partition("/")
        if not separator:
            msg = f"Could not find a remote name in remote upstream ref: {remote_path}"
            raise MalformedRecordError(
                msg, record=upstream, expected=f"{REMOTE_REF_PREFIX}<remote>/<branch>"
            )

        return cls(
            name=name,
            commit_hash=commit_hash,
            remote_name=remote_name,
            remote_branch_name=remote_branch_name,
        )

    def resolve_to_hash(self) -> str:
        return self.commit_hash
