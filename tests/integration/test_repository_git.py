"""Integration tests for Repository against real git repositories."""

import subprocess
from pathlib import Path

import pytest

from gitmodel import (
    AddedFile,
    AlreadyExistsError,
    DeletedFile,
    GitError,
    Head,
    ModifiedFile,
    NotFoundError,
    PartialBranch,
    PartialCommit,
    Remote,
    RenamedFile,
    Repository,
    TagSort,
)


def _run_git(cwd: Path, *args: str) -> str:
    """Run a git command in the given directory."""
    result = subprocess.run(  # noqa: S603 - Safe: controlled git args
        ["git", *args],
        cwd=str(cwd),
        capture_output=True,
        text=True,
        check=False,
    )
    if result.returncode != 0:
        msg = f"git {' '.join(args)} failed: {result.stderr}"
        raise RuntimeError(msg)
    return result.stdout


def _write(root: Path, relative: str, content: str = "content\n") -> None:
    path = root / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    _ = path.write_text(content)


@pytest.fixture
def repo(repo_dir: Path) -> Repository:
    return Repository(repo_dir)


@pytest.fixture
def committed(repo: Repository) -> PartialCommit:
    """Repository with one commit holding README.md and dir1/file1."""
    _write(repo.root, "README.md", "# Test\n")
    _write(repo.root, "dir1/file1")
    _ = repo.stage_files()
    return repo.commit("Initial commit")


class TestStatusAndStaging:
    def test_clean_repository(self, repo: Repository, committed: PartialCommit) -> None:
        assert not repo.get_status().has_changes()

    def test_untracked_files_listed_individually(self, repo: Repository) -> None:
        _write(repo.root, "dir1/file1")
        _write(repo.root, "dir1/file2")

        status = repo.get_status()

        assert {f.path for f in status.added} == {"dir1/file1", "dir1/file2"}
        assert status.staged_files == ()

    def test_stage_and_unstage_before_first_commit(self, repo: Repository) -> None:
        _write(repo.root, "dir1/file1")
        _write(repo.root, "dir1/file2")
        _write(repo.root, "file3")

        staged = repo.stage_files(["dir1"])
        assert len(staged.staged_files) == 2
        assert len(staged.unstaged_files) == 1

        unstaged = repo.unstage_files(["dir1/file1"])
        assert len(unstaged.staged_files) == 1
        assert len(unstaged.unstaged_files) == 2

    def test_stage_everything(self, repo: Repository, committed: PartialCommit) -> None:
        _write(repo.root, "README.md", "# Changed\n")
        (repo.root / "dir1" / "file1").unlink()
        _write(repo.root, "new.txt", "a brand new file\n")

        status = repo.stage_files()

        assert status.modified == (ModifiedFile("README.md", True, False),)
        assert status.deleted == (DeletedFile("dir1/file1", True, False),)
        assert status.added == (AddedFile("new.txt", True, False),)
        assert not status.has_unstaged_changes()

    def test_unstage_after_commit(
        self, repo: Repository, committed: PartialCommit
    ) -> None:
        _write(repo.root, "README.md", "# Changed\n")
        _ = repo.stage_files()

        status = repo.unstage_files(["README.md"])

        assert status.modified == (ModifiedFile("README.md", False, True),)

    def test_staged_rename_is_detected(
        self, repo: Repository, committed: PartialCommit
    ) -> None:
        (repo.root / "dir1" / "file1").rename(repo.root / "dir1" / "renamed")

        status = repo.stage_files()

        assert status.renamed == (RenamedFile("dir1/renamed", old_path="dir1/file1"),)

    def test_reset_discards_everything(
        self, repo: Repository, committed: PartialCommit
    ) -> None:
        _write(repo.root, "README.md", "# Changed\n")
        _write(repo.root, "untracked/file")
        _ = repo.stage_files(["README.md"])

        status = repo.reset_files()

        assert not status.has_changes()
        assert (repo.root / "README.md").read_text() == "# Test\n"
        assert not (repo.root / "untracked").exists()

    def test_reset_before_first_commit(self, repo: Repository) -> None:
        _write(repo.root, "a.txt")
        _ = repo.stage_files()

        assert not repo.reset_files().has_changes()
        assert not (repo.root / "a.txt").exists()


class TestRestore:
    def test_restores_paths_from_branch(
        self, repo: Repository, committed: PartialCommit
    ) -> None:
        _write(repo.root, "dir1/toremove/file3")
        _write(repo.root, "outside.txt", "main\n")
        _ = repo.stage_files()
        _ = repo.commit("Main files")
        other = repo.create_branch("other")
        repo.switch_branch(other)
        _write(repo.root, "dir1/file1", "changed\n")
        (repo.root / "dir1" / "toremove" / "file3").unlink()
        _write(repo.root, "outside.txt", "other\n")
        _ = repo.stage_files()
        _ = repo.commit("Other changes")
        repo.switch_branch(PartialBranch("main"))

        status = repo.restore_files(["dir1"], PartialBranch("other"))

        assert status.modified == (ModifiedFile("dir1/file1", True, False),)
        assert status.deleted == (DeletedFile("dir1/toremove/file3", True, False),)
        assert (repo.root / "outside.txt").read_text() == "main\n"

    def test_refuses_with_uncommitted_changes(
        self, repo: Repository, committed: PartialCommit
    ) -> None:
        _write(repo.root, "README.md", "# Dirty\n")

        with pytest.raises(GitError, match="uncommitted changes"):
            _ = repo.restore_files(["dir1"], Head())


class TestCommits:
    def test_commit_and_get_commit(
        self, repo: Repository, committed: PartialCommit
    ) -> None:
        commit = repo.get_commit(committed)

        assert commit.hash == committed.hash
        assert commit.message == "Initial commit"
        assert commit.author.name == "Test User"
        assert commit.author.email == "test@example.com"
        assert commit.date.tzinfo is not None

    def test_get_commit_by_head(
        self, repo: Repository, committed: PartialCommit
    ) -> None:
        assert repo.get_commit(Head()).hash == committed.hash

    def test_get_missing_commit(
        self, repo: Repository, committed: PartialCommit
    ) -> None:
        with pytest.raises(NotFoundError, match="Commit Not Found"):
            _ = repo.get_commit(PartialCommit("0000000"))

    def test_commit_with_nothing_staged_fails(
        self, repo: Repository, committed: PartialCommit
    ) -> None:
        with pytest.raises(GitError):
            _ = repo.commit("Empty")


class TestTags:
    def test_annotated_and_lightweight_tags(
        self, repo: Repository, committed: PartialCommit
    ) -> None:
        annotated = repo.tag_commit(committed, "v1.0", "Release 1.0")
        _ = _run_git(repo.root, "tag", "v0.9", committed.hash)

        tags = {tag.name: tag for tag in repo.get_tags()}

        assert set(tags) == {"v1.0", "v0.9"}
        assert tags["v1.0"] == annotated
        assert annotated.is_annotated
        assert annotated.message == "Release 1.0"
        assert annotated.tagger is not None
        assert annotated.tagger.email == "test@example.com"
        assert not tags["v0.9"].is_annotated
        assert tags["v0.9"].commit.message == "Initial commit"

    def test_tags_merged_into_commit(
        self, repo: Repository, committed: PartialCommit
    ) -> None:
        _ = repo.tag_commit(committed, "v1.0", "First")
        _write(repo.root, "file2")
        _ = repo.stage_files()
        second = repo.commit("Second")
        _ = repo.tag_commit(second, "v2.0", "Second")

        assert [tag.name for tag in repo.get_tags(committed)] == ["v1.0"]
        assert len(repo.get_tags(second, sort=TagSort.NEWEST_VERSION)) == 2
        assert [t.name for t in repo.get_tags(sort=TagSort.NEWEST_VERSION)] == [
            "v2.0",
            "v1.0",
        ]
        assert len(repo.get_tags(limit=1)) == 1

    def test_get_tag(self, repo: Repository, committed: PartialCommit) -> None:
        _ = repo.tag_commit(committed, "release/1.0", "Nested")

        assert repo.get_tag("release/1.0").resolve_to_hash().startswith(
            committed.hash
        )
        with pytest.raises(NotFoundError, match="Tag Not Found"):
            _ = repo.get_tag("release")

    def test_duplicate_tag(self, repo: Repository, committed: PartialCommit) -> None:
        _ = repo.tag_commit(committed, "v1.0")

        with pytest.raises(AlreadyExistsError):
            _ = repo.tag_commit(committed, "v1.0")


class TestBranches:
    def test_branch_lifecycle(self, repo: Repository, committed: PartialCommit) -> None:
        created = repo.create_branch("feature/x")

        assert created.name == "feature/x"
        assert created.commit_hash == committed.hash
        assert not created.has_upstream
        assert [b.name for b in repo.get_branches()] == ["feature/x", "main"]

        repo.switch_branch(created)
        assert repo.current_branch().name == "feature/x"

        with pytest.raises(GitError, match="checked out"):
            repo.delete_branch(created)

        repo.switch_branch(PartialBranch("main"))
        repo.delete_branch(created)
        with pytest.raises(NotFoundError, match="Branch Not Found"):
            _ = repo.get_branch("feature/x")

    def test_create_existing_branch(
        self, repo: Repository, committed: PartialCommit
    ) -> None:
        with pytest.raises(AlreadyExistsError, match="Branch already exists"):
            _ = repo.create_branch("main")

    def test_create_branch_from_commit(
        self, repo: Repository, committed: PartialCommit
    ) -> None:
        _write(repo.root, "file2")
        _ = repo.stage_files()
        _ = repo.commit("Second")

        branch = repo.create_branch("old", committed)

        assert branch.commit_hash == committed.hash


class TestRemotes:
    def test_add_and_get_remote(self, repo: Repository, bare_remote: Path) -> None:
        added = repo.add_remote(Remote("origin", str(bare_remote)))

        assert added == Remote(
            "origin", str(bare_remote), can_fetch=True, can_push=True
        )
        assert repo.get_remotes() == [added]
        with pytest.raises(AlreadyExistsError, match="Remote already exists"):
            _ = repo.add_remote(Remote("origin", "/elsewhere"))
        with pytest.raises(NotFoundError, match="Remote Not Found"):
            _ = repo.get_remote("upstream")

    def test_push_fetch_and_delete_remote_branch(
        self, repo: Repository, committed: PartialCommit, bare_remote: Path
    ) -> None:
        origin = repo.add_remote(Remote("origin", str(bare_remote)))

        pushed = repo.push_branch(PartialBranch("main"), origin)
        assert pushed.remote_name == "origin"
        assert pushed.remote_branch_name == "main"

        tracking = repo.create_branch_from_remote("copy", origin, "main")
        assert tracking.remote_name == "origin"
        assert tracking.remote_branch_name == "main"
        assert tracking.commit_hash == committed.hash

        feature = repo.create_branch("feature")
        _ = repo.push_branch(feature, origin)
        assert "feature" in _run_git(bare_remote, "branch", "--list", "feature")

        repo.delete_branch(feature, delete_remote=True)

        assert _run_git(bare_remote, "branch", "--list", "feature").strip() == ""
        assert [b.name for b in repo.get_branches()] == ["copy", "main"]

    def test_copied_branch_pushes_to_its_upstream(
        self, repo: Repository, committed: PartialCommit, bare_remote: Path
    ) -> None:
        origin = repo.add_remote(Remote("origin", str(bare_remote)))
        _ = repo.push_branch(PartialBranch("main"), origin)
        copy = repo.create_branch_from_remote("copy", origin, "main")
        repo.switch_branch(copy)
        _write(repo.root, "file2")
        _ = repo.stage_files()
        new_commit = repo.commit("On copy")

        _ = repo.push_branch(copy, origin)

        remote_tip = _run_git(bare_remote, "rev-parse", "--short", "main").strip()
        assert remote_tip == new_commit.hash
