"""Pytest configuration and fixtures."""

from datetime import datetime, timedelta, timezone
from pathlib import Path
from types import SimpleNamespace

import git
import pytest

from git_time_machine.errors import FetchError
from git_time_machine.session import SessionManager


def make_commit(
    repo: git.Repo,
    filename: str,
    content: str,
    message: str,
    author: str = "Alice",
    email: str = "alice@example.com",
    when: datetime | None = None,
    committed: datetime | None = None,
) -> str:
    """Write *content* to *filename*, commit it with a fixed author/date and return the hash.

    *committed* overrides the committer date, as a rebase would.
    """
    path = Path(repo.working_tree_dir) / filename
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)
    repo.git.add(filename)
    when = when or datetime.now(timezone.utc)
    stamp = f"{int(when.timestamp())} +0000"
    commit_stamp = f"{int((committed or when).timestamp())} +0000"
    env = {
        "GIT_AUTHOR_NAME": author,
        "GIT_AUTHOR_EMAIL": email,
        "GIT_AUTHOR_DATE": stamp,
        "GIT_COMMITTER_NAME": author,
        "GIT_COMMITTER_EMAIL": email,
        "GIT_COMMITTER_DATE": commit_stamp,
    }
    with repo.git.custom_environment(**env):
        repo.git.commit("--no-gpg-sign", "--no-verify", "-m", message)
    return repo.head.commit.hexsha


@pytest.fixture
def git_repo(tmp_path):
    """A small repository on branch ``main`` with four commits by two authors.

    - initial  (60 days ago, Alice): README.md
    - feature  (5 days ago, Bob):    src/app.py
    - fix      (2 days ago, Alice):  src/app.py
    - docs     (1 hour ago, Alice):  README.md
    """
    path = tmp_path / "repo"
    path.mkdir()
    repo = git.Repo.init(path)
    now = datetime.now(timezone.utc)
    shas = {
        "initial": make_commit(
            repo, "README.md", "# Demo\n", "Initial commit", when=now - timedelta(days=60)
        ),
        "feature": make_commit(
            repo,
            "src/app.py",
            "print('a')\n",
            "Add app",
            author="Bob",
            email="bob@example.com",
            when=now - timedelta(days=5),
        ),
        "fix": make_commit(
            repo,
            "src/app.py",
            "print('b')\nprint('c')\n",
            "Fix app | output",
            when=now - timedelta(days=2),
        ),
        "docs": make_commit(
            repo, "README.md", "# Demo\n\nDocs\n", "Update docs", when=now - timedelta(hours=1)
        ),
    }
    repo.git.branch("-M", "main")
    repo.close()
    return SimpleNamespace(path=path, shas=shas)


@pytest.fixture
def add_commit():
    """Commit to the repository at a path; takes the same options as :func:`make_commit`."""

    def _add(path: Path, filename: str, content: str, message: str, **kwargs) -> str:
        repo = git.Repo(path)
        try:
            return make_commit(repo, filename, content, message, **kwargs)
        finally:
            repo.close()

    return _add


def fake_clone(url: str, destination: Path) -> None:
    """Stand-in cloner that populates the destination like a checkout would."""
    (Path(destination) / ".git").mkdir()
    (Path(destination) / "README.md").write_text(url)


def failing_clone(url: str, destination: Path) -> None:
    """Stand-in cloner that leaves partial output behind and then fails."""
    (Path(destination) / "partial.pack").write_text("half a clone")
    raise FetchError(f"Could not clone {url}: repository not found")


@pytest.fixture
def temp_root(tmp_path):
    """Stand-in for the platform temp directory."""
    root = tmp_path / "tmp"
    root.mkdir()
    return root


@pytest.fixture
def manager(temp_root):
    return SessionManager(temp_root=temp_root, cloner=fake_clone)


@pytest.fixture
def failing_manager(temp_root):
    return SessionManager(temp_root=temp_root, cloner=failing_clone)
