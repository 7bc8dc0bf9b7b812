"""Commitish capability.

Anything git can resolve to a single commit satisfies the Commitish protocol
structurally: full entities (Commit, Tag, Branch) as well as the lightweight
references defined here.
"""

from dataclasses import dataclass
from typing import Final, Protocol, runtime_checkable

HEAD: Final = "HEAD"


@runtime_checkable
class Commitish(Protocol):
    """Protocol for values that git resolves to a commit.

    Example:
        >>> def short_log(repo: Repository, target: Commitish) -> str:
        ...     return repo.git(["log", "--oneline", "-1", target.resolve_to_hash()])
    """

    def resolve_to_hash(self) -> str:
        """Return a revision string git resolves to a commit.

        Returns:
            A commit hash, or a name (branch, "HEAD") git resolves to one.
        """
        ...


@dataclass(frozen=True, slots=True)
class Head:
    """Pointer to whatever commit HEAD currently references."""

    def resolve_to_hash(self) -> str:
        return HEAD


@dataclass(frozen=True, slots=True)
class PartialCommit:
    """A commit known only by its hash.

    Attributes:
        hash: Abbreviated or full commit hash.
    """

    hash: str

    def resolve_to_hash(self) -> str:
        return self.hash


@dataclass(frozen=True, slots=True)
class PartialBranch:
    """A branch known only by its name.

    Git resolves a branch name to the branch's current tip, so a name can be
    used wherever a hash is expected.

    Attributes:
        name: Short branch name, e.g. "main" or "feature/x".
    """

    name: str

    def resolve_to_hash(self) -> str:
        return self.name
