import shutil
import subprocess
from pathlib import Path

import pytest


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    here = Path(__file__).parent
    for item in items:
        if Path(item.path).is_relative_to(here):
            item.add_marker(pytest.mark.integration)
            if shutil.which("git") is None:
                item.add_marker(pytest.mark.skip(reason="git is not installed"))


def init_git_repo(path: Path, *, bare: bool = False) -> None:
    """Initialize a git repository on branch main with a local identity."""
    args = ["git", "init", "--quiet", *(["--bare"] if bare else [])]
    _ = subprocess.run(  # noqa: S603
        args, cwd=str(path), capture_output=True, check=True
    )
    for setting in (
        ("symbolic-ref", "HEAD", "refs/heads/main"),
        ("config", "user.email", "test@example.com"),
        ("config", "user.name", "Test User"),
        ("config", "commit.gpgsign", "false"),
        ("config", "tag.gpgsign", "false"),
    ):
        _ = subprocess.run(  # noqa: S603
            ["git", *setting], cwd=str(path), capture_output=True, check=True
        )


@pytest.fixture(autouse=True)
def isolated_git_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the user's global and system gitconfig out of the tests."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")
    monkeypatch.delenv("GIT_DIR", raising=False)
    monkeypatch.delenv("GIT_WORK_TREE", raising=False)


@pytest.fixture
def repo_dir(tmp_path: Path, isolated_git_config: None) -> Path:
    """An empty repository on branch main."""
    path = tmp_path / "repo"
    path.mkdir()
    init_git_repo(path)
    return path


@pytest.fixture
def bare_remote(tmp_path: Path, isolated_git_config: None) -> Path:
    """A bare repository usable as a push target."""
    path = tmp_path / "remote.git"
    path.mkdir()
    init_git_repo(path, bare=True)
    return path
