"""Repository facade over the git command line.

This module provides the Repository class, which assembles git invocations,
runs them, and hands the captured output to the parsers in this package.
"""

import os
import re
import shutil
from collections.abc import Sequence
from pathlib import Path
from typing import TYPE_CHECKING, Final

from gitmodel._branch import BRANCH_REF_FORMAT, Branch
from gitmodel._commit import COMMIT_LOG_FORMAT, Commit
from gitmodel._commitish import Commitish, Head, PartialBranch, PartialCommit
from gitmodel._exec import CommandConfig, CommandResult, run_command
from gitmodel._logging import create_logger_from_settings
from gitmodel._remote import Remote
from gitmodel._status import Status
from gitmodel._tag import TAG_REF_FORMAT, Tag, TagSort, split_tag_records
from gitmodel.config import GitSettings
from gitmodel.exceptions import (
    AlreadyExistsError,
    CommandError,
    GitError,
    NotFoundError,
    RepositoryNotFoundError,
)

if TYPE_CHECKING:
    from structlog.typing import FilteringBoundLogger

# [main (root-commit) 49c28cc] File 5
_COMMIT_SUMMARY: Final = re.compile(r"^\[[^\]]*\s([0-9a-fA-F]+)\]", re.MULTILINE)


class Repository:
    """A local git repository driven through the git command line.

    Every query runs git and parses its current output; nothing is cached
    between calls.

    Example:
        >>> repo = Repository("/path/to/checkout")
        >>> status = repo.get_status()
        >>> if status.has_changes():
        ...     repo.stage_files()
        ...     repo.commit("Save work")
    """

    __slots__: Final = ("_git_path", "_logger", "_root", "_settings")
    _root: Path
    _git_path: str
    _settings: GitSettings
    _logger: "FilteringBoundLogger"  # noqa: UP037

    def __init__(
        self,
        directory: str | Path,
        *,
        settings: GitSettings | None = None,
        logger: "FilteringBoundLogger | None" = None,  # noqa: UP037
    ) -> None:
        """Initialize the repository.

        Args:
            directory: Root of the working tree (the directory holding .git).
            settings: Git settings. Defaults to GitSettings().
            logger: Logger for git invocations. Defaults to one built from
                the settings' logging section.

        Raises:
            CommandError: If the git binary cannot be located.
            RepositoryNotFoundError: If the directory does not exist or is not
                the root of a git repository.
        """
        self._settings = settings if settings is not None else GitSettings()
        self._logger = (
            logger
            if logger is not None
            else create_logger_from_settings(self._settings.logging)
        )

        git_path = shutil.which(self._settings.git_binary)
        if git_path is None:
            msg = "Could not locate a git binary on the system."
            raise CommandError(msg)
        self._git_path = git_path

        self._root = Path(directory)
        if not self._root.is_dir():
            raise RepositoryNotFoundError("directory", str(directory))
        if not (self._root / ".git").exists():
            raise RepositoryNotFoundError("Git Root", str(directory))

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def root(self) -> Path:
        """The working tree root directory."""
        return self._root

    def absolute_path(self, *pieces: str) -> Path:
        """Get a normalized absolute path inside the repository.

        Args:
            *pieces: Path segments relative to the repository root.

        Returns:
            The joined, normalized absolute path.
        """
        return Path(os.path.normpath(self._root.absolute().joinpath(*pieces)))

    # =========================================================================
    # Command Execution
    # =========================================================================

    def git(self, args: Sequence[str]) -> str:
        """Run a git subcommand within the repository.

        Args:
            args: The git subcommand and its arguments.

        Returns:
            The command's standard output.

        Raises:
            CommandError: If git fails, times out or cannot be started.
        """
        result = self._run(args)
        if result.success:
            return result.stdout

        context = result.to_context((self._git_path, *args))
        self._logger.warning(
            "git_command_failed",
            args=list(args),
            exit_code=result.exit_code,
            stderr=context.stderr,
            error=result.error,
        )
        detail = result.error or context.stderr.strip() or context.stdout.strip()
        msg = f"git {' '.join(args)} failed: {detail}"
        raise CommandError(msg, context=context)

    def _run(self, args: Sequence[str]) -> CommandResult:
        config = CommandConfig(
            args=(self._git_path, *args),
            cwd=self._root,
            env=self._settings.env,
            timeout_ms=self._settings.timeout_ms,
        )
        result = run_command(config)
        self._logger.debug(
            "git_command",
            args=list(args),
            exit_code=result.exit_code,
            duration_ms=result.duration_ms,
        )
        return result

    def _has_head(self) -> bool:
        return self._run(["rev-parse", "--verify", "--quiet", "HEAD"]).success

    # =========================================================================
    # Status & Staging
    # =========================================================================

    def get_status(self) -> Status:
        """Get the structured status of the working tree.

        Returns:
            Status parsed from `git status --porcelain`.
        """
        output = self.git(["status", "--porcelain", "--untracked-files=all"])
        return Status.from_porcelain(output)

    def stage_files(self, paths: Sequence[str] | None = None) -> Status:
        """Stage files, including deletions and untracked files.

        Args:
            paths: Pathspecs to stage. Stages everything if None.

        Returns:
            The status after staging.
        """
        self.git(["add", "--all", "--", *(paths if paths is not None else ["."])])
        return self.get_status()

    def unstage_files(self, paths: Sequence[str]) -> Status:
        """Remove changes from the index, keeping the working tree.

        Args:
            paths: Pathspecs to unstage.

        Returns:
            The status after unstaging.
        """
        if self._has_head():
            self.git(["restore", "--staged", "--", *paths])
        else:
            self.git(["rm", "--cached", "-r", "--quiet", "--", *paths])
        return self.get_status()

    def reset_files(self) -> Status:
        """Discard all staged, unstaged and untracked changes.

        Returns:
            The status after the reset.
        """
        if self._has_head():
            self.git(["reset", "--hard", "--quiet"])
        else:
            self.git(["read-tree", "--empty"])
        self.git(["clean", "-d", "--force", "--quiet"])
        return self.get_status()

    def restore_files(self, paths: Sequence[str], source: Commitish) -> Status:
        """Restore paths in the index and working tree from another commit.

        Files missing from `source` within the pathspecs are deleted.

        Args:
            paths: Pathspecs to restore.
            source: The commit to restore from.

        Returns:
            The status after restoring.

        Raises:
            GitError: If the working tree has uncommitted changes.
        """
        if self.get_status().has_changes():
            msg = "Cannot restore when there are uncommitted changes."
            raise GitError(msg)

        self.git(
            [
                "restore",
                f"--source={source.resolve_to_hash()}",
                "--staged",
                "--worktree",
                "--",
                *paths,
            ]
        )
        return self.get_status()

    # =========================================================================
    # Commits
    # =========================================================================

    def commit(self, message: str) -> PartialCommit:
        """Commit the staged changes.

        Args:
            message: The commit message.

        Returns:
            The new commit's abbreviated hash.

        Raises:
            CommandError: If git refuses the commit (e.g. nothing staged).
            GitError: If the hash cannot be found in git's summary line.
        """
        output = self.git(["commit", "-m", message])
        match = _COMMIT_SUMMARY.search(output)
        if match is None:
            msg = f"Could not find commit-hash in commit result:\n{output}"
            raise GitError(msg)
        return PartialCommit(match.group(1))

    def get_commit(self, commitish: Commitish | str) -> Commit:
        """Get a single commit.

        Args:
            commitish: Anything resolvable to a commit, or a revision string.

        Returns:
            The commit.

        Raises:
            NotFoundError: If the revision does not name a commit.
        """
        revision = _revision(commitish)
        verify = ["rev-parse", "--verify", "--quiet", f"{revision}^{{commit}}"]
        if not self._run(verify).success:
            raise NotFoundError("commit", revision)

        output = self.git(
            ["log", "-1", f"--format={COMMIT_LOG_FORMAT}", revision, "--"]
        )
        return Commit.from_output(output)

    # =========================================================================
    # Tags
    # =========================================================================

    def get_tags(
        self,
        commitish: Commitish | None = None,
        *,
        sort: TagSort | str = TagSort.NEWEST_COMMIT,
        limit: int | None = None,
    ) -> list[Tag]:
        """List tags.

        Uses `git for-each-ref` rather than `git log`, which reads user
        gitconfig that could change its output.

        Args:
            commitish: Only list tags reachable from this commit.
            sort: A for-each-ref sort key.
            limit: Maximum number of tags to return.

        Returns:
            The tags, in `sort` order.
        """
        args = ["for-each-ref", f"--sort={sort}", f"--format={TAG_REF_FORMAT}"]
        if commitish is not None:
            args += ["--merged", commitish.resolve_to_hash()]
        if limit is not None:
            args += ["--count", str(limit)]
        args.append("refs/tags")

        output = self.git(args)
        return [Tag.from_output(record) for record in split_tag_records(output)]

    def get_tag(self, name: str) -> Tag:
        """Get a tag by name.

        Raises:
            NotFoundError: If no tag has that name.
        """
        for tag in self.get_tags():
            if tag.name == name:
                return tag
        raise NotFoundError("tag", name)

    def tag_commit(self, commitish: Commitish, name: str, message: str = "") -> Tag:
        """Create an annotated tag.

        Args:
            commitish: The commit to tag.
            name: The tag name.
            message: The tag message.

        Returns:
            The created tag.

        Raises:
            AlreadyExistsError: If a tag with that name exists.
        """
        if any(tag.name == name for tag in self.get_tags()):
            msg = f"Tag already exists: {name}"
            raise AlreadyExistsError(msg, name=name)

        # A message is always passed, or git would open an editor for one.
        self.git(["tag", "-a", "-m", message, name, commitish.resolve_to_hash()])
        return self.get_tag(name)

    # =========================================================================
    # Branches
    # =========================================================================

    def get_branches(self) -> list[Branch]:
        """List local branches, sorted by name."""
        output = self.git(
            ["for-each-ref", f"--format={BRANCH_REF_FORMAT}", "refs/heads"]
        )
        return [
            Branch.from_output_line(line) for line in output.split("\n") if line.strip()
        ]

    def get_branch(self, name: str) -> Branch:
        """Get a local branch by name.

        Raises:
            NotFoundError: If no local branch has that name.
        """
        for branch in self.get_branches():
            if branch.name == name:
                return branch
        raise NotFoundError("branch", name)

    def current_branch(self) -> Branch:
        """Get the checked out branch.

        Raises:
            GitError: If HEAD is detached.
            NotFoundError: If the current branch has no commits yet.
        """
        result = self._run(["symbolic-ref", "--short", "--quiet", "HEAD"])
        if not result.success:
            msg = "HEAD is detached; no branch is checked out."
            raise GitError(msg)
        return self.get_branch(result.stdout.strip())

    def create_branch(self, name: str, source: Commitish | None = None) -> Branch:
        """Create a branch without switching to it.

        Args:
            name: The new branch name.
            source: Where the branch starts. Defaults to HEAD.

        Returns:
            The created branch.

        Raises:
            AlreadyExistsError: If the branch exists.
        """
        self._ensure_branch_absent(name)
        start = source if source is not None else Head()
        self.git(["branch", name, start.resolve_to_hash()])
        return self.get_branch(name)

    def switch_branch(self, branch: Branch | PartialBranch) -> None:
        """Check out a local branch."""
        self.git(["checkout", "--quiet", branch.name])

    def delete_branch(
        self, branch: Branch | PartialBranch, *, delete_remote: bool = False
    ) -> None:
        """Delete a local branch, and optionally its upstream branch.

        Args:
            branch: The branch to delete.
            delete_remote: Also delete the tracked branch on its remote.

        Raises:
            GitError: If the branch is checked out.
            NotFoundError: If the branch does not exist.
        """
        current = self._run(["symbolic-ref", "--short", "--quiet", "HEAD"])
        if current.success and current.stdout.strip() == branch.name:
            msg = f"Cannot delete the checked out branch: {branch.name}"
            raise GitError(msg)

        existing = self.get_branch(branch.name)
        self.git(["branch", "-D", existing.name])
        if delete_remote and existing.remote_name and existing.remote_branch_name:
            self.git(
                [
                    "push",
                    "--quiet",
                    existing.remote_name,
                    "--delete",
                    existing.remote_branch_name,
                ]
            )

    def _ensure_branch_absent(self, name: str) -> None:
        if any(branch.name == name for branch in self.get_branches()):
            msg = f"Branch already exists: {name}"
            raise AlreadyExistsError(msg, name=name)

    # =========================================================================
    # Remotes
    # =========================================================================

    def get_remotes(self) -> list[Remote]:
        """List configured remotes."""
        return Remote.from_output(self.git(["remote", "-v"]))

    def get_remote(self, name: str) -> Remote:
        """Get a remote by name.

        Raises:
            NotFoundError: If no remote has that name.
        """
        for remote in self.get_remotes():
            if remote.name == name:
                return remote
        raise NotFoundError("remote", name)

    def add_remote(self, remote: Remote) -> Remote:
        """Add a remote.

        Args:
            remote: The remote to add; its name and uri are used.

        Returns:
            The remote as configured by git.

        Raises:
            AlreadyExistsError: If a remote with that name exists.
        """
        if any(existing.name == remote.name for existing in self.get_remotes()):
            msg = f"Remote already exists: {remote.name}"
            raise AlreadyExistsError(msg, name=remote.name)

        self.git(["remote", "add", remote.name, remote.uri])
        return self.get_remote(remote.name)

    def create_branch_from_remote(
        self,
        branch: PartialBranch | str,
        remote: Remote,
        remote_branch_name: str,
    ) -> Branch:
        """Fetch a remote branch and create a local branch tracking it.

        Args:
            branch: Name of the local branch to create.
            remote: The remote to fetch from.
            remote_branch_name: The branch name on the remote.

        Returns:
            The created tracking branch.

        Raises:
            AlreadyExistsError: If the local branch exists.
        """
        name = branch.name if isinstance(branch, PartialBranch) else branch
        self._ensure_branch_absent(name)

        self.git(["fetch", "--quiet", remote.name, remote_branch_name])
        self.git(["branch", "--track", name, f"{remote.name}/{remote_branch_name}"])
        return self.get_branch(name)

    def push_branch(self, branch: Branch | PartialBranch, remote: Remote) -> Branch:
        """Push a branch to a remote and track the pushed branch.

        A branch already tracking a branch on `remote` pushes to that branch;
        otherwise a remote branch with the same name is used.

        Returns:
            The branch with its updated upstream.
        """
        existing = self.get_branch(branch.name)
        target = existing.name
        if existing.remote_name == remote.name and existing.remote_branch_name:
            target = existing.remote_branch_name

        self.git(
            [
                "push",
                "--quiet",
                "--set-upstream",
                remote.name,
                f"{existing.name}:{target}",
            ]
        )
        return self.get_branch(existing.name)


def _revision(commitish: Commitish | str) -> str:
    if isinstance(commitish, str):
        return commitish
    return commitish.resolve_to_hash()
