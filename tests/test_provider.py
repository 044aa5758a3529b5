"""Tests for the git data provider."""

import pytest

from git_time_machine.errors import FetchError, QueryError
from git_time_machine.provider import (
    GitDataProvider,
    parse_log,
    parse_numstat,
    parse_shortlog,
    parse_shortstat,
)


@pytest.fixture
def provider():
    return GitDataProvider()


class TestParsers:
    def test_parse_shortlog(self):
        out = "     3\tAlice\n    12\tBob Builder\n"
        contributors = parse_shortlog(out)
        assert [c.name for c in contributors] == ["Bob Builder", "Alice"]
        assert contributors[0].commits == 12

    def test_parse_shortlog_ignores_garbage(self):
        assert parse_shortlog("\nnot a line\n") == []

    def test_parse_log(self):
        line = "\x1f".join(
            ["abc123def456", "abc123d", "Dev", "dev@test.com", "2025-01-15T10:00:00+02:00", "feat: x\x1fy"]
        )
        commits = parse_log(line)
        assert len(commits) == 1
        assert commits[0].short_sha == "abc123d"
        assert commits[0].subject == "feat: x\x1fy"
        assert commits[0].date.utcoffset().total_seconds() == 7200

    def test_parse_log_empty(self):
        assert parse_log("") == []

    def test_parse_numstat(self):
        out = "10\t2\tsrc/a.py\n-\t-\tlogo.png\n"
        changes = parse_numstat(out)
        assert changes[0].additions == 10
        assert changes[0].deletions == 2
        assert changes[1].binary is True

    @pytest.mark.parametrize(
        "text, expected",
        [
            (" 3 files changed, 10 insertions(+), 2 deletions(-)", (3, 10, 2)),
            (" 1 file changed, 1 insertion(+)", (1, 1, 0)),
            (" 1 file changed, 4 deletions(-)", (1, 0, 4)),
            ("", (0, 0, 0)),
        ],
    )
    def test_parse_shortstat(self, text, expected):
        s = parse_shortstat(text)
        assert (s.files_changed, s.insertions, s.deletions) == expected


class TestQueries:
    def test_current_branch(self, provider, git_repo):
        assert provider.current_branch(git_repo.path) == "main"

    def test_commit_count(self, provider, git_repo):
        assert provider.commit_count(git_repo.path) == 4

    def test_works_from_subdirectory(self, provider, git_repo):
        assert provider.commit_count(git_repo.path / "src") == 4

    def test_branches(self, provider, git_repo):
        assert provider.remote_branches(git_repo.path) == []
        assert provider.local_branches(git_repo.path) == ["main"]

    def test_contributors(self, provider, git_repo):
        contributors = provider.contributors(git_repo.path)
        assert [(c.name, c.commits) for c in contributors] == [("Alice", 3), ("Bob", 1)]

    def test_commits_since(self, provider, git_repo):
        commits = provider.commits_since(git_repo.path, 30)
        assert [c.subject for c in commits] == ["Update docs", "Fix app | output", "Add app"]

    def test_commits_since_author_filter(self, provider, git_repo):
        commits = provider.commits_since(git_repo.path, 30, author="Bob")
        assert [c.author_name for c in commits] == ["Bob"]

    def test_recent_commits_limit(self, provider, git_repo):
        commits = provider.recent_commits(git_repo.path, limit=2)
        assert [c.sha for c in commits] == [git_repo.shas["docs"], git_repo.shas["fix"]]

    def test_most_changed_files(self, provider, git_repo):
        files = provider.most_changed_files(git_repo.path, limit=5)
        assert [(f.path, f.changes) for f in files] == [("README.md", 2), ("src/app.py", 2)]

    def test_change_summary_since(self, provider, git_repo):
        summary = provider.change_summary_since(git_repo.path, 30)
        assert summary is not None
        assert summary.files_changed == 2
        assert summary.insertions == 4
        assert summary.deletions == 0

    def test_change_summary_without_old_history(self, provider, git_repo):
        assert provider.change_summary_since(git_repo.path, 365) is None

    def test_commit_detail(self, provider, git_repo):
        detail = provider.commit_detail(git_repo.path, git_repo.shas["fix"][:8])
        assert detail.commit.sha == git_repo.shas["fix"]
        assert detail.commit.subject == "Fix app | output"
        assert [(f.path, f.additions, f.deletions) for f in detail.files] == [("src/app.py", 2, 1)]

    def test_commit_detail_unknown(self, provider, git_repo):
        with pytest.raises(QueryError, match="Unknown commit"):
            provider.commit_detail(git_repo.path, "deadbeef")

    @pytest.mark.parametrize("bad", ["", "   ", "--all", "-n1"])
    def test_commit_detail_rejects_options(self, provider, git_repo, bad):
        with pytest.raises(QueryError):
            provider.commit_detail(git_repo.path, bad)

    def test_diff_summary(self, provider, git_repo):
        summary = provider.diff_summary(git_repo.path, git_repo.shas["initial"], "HEAD")
        assert summary.files_changed == 2
        assert summary.files == ["README.md", "src/app.py"]
        assert summary.target == "HEAD"

    def test_diff_summary_identical(self, provider, git_repo):
        summary = provider.diff_summary(git_repo.path, "HEAD", "HEAD")
        assert summary.files_changed == 0
        assert summary.files == []

    def test_resolve_revision(self, provider, git_repo):
        assert provider.resolve_revision(git_repo.path, "main") == "main"
        assert provider.resolve_revision(git_repo.path, "develop") == "HEAD"

    def test_not_a_repository(self, provider, tmp_path):
        plain = tmp_path / "plain"
        plain.mkdir()
        with pytest.raises(QueryError, match="Not a git repository"):
            provider.commit_count(plain)

    def test_missing_directory(self, provider, tmp_path):
        with pytest.raises(QueryError):
            provider.current_branch(tmp_path / "missing")


class TestClone:
    def test_clone_local_repository(self, provider, git_repo, tmp_path):
        dest = tmp_path / "clone"
        dest.mkdir()
        GitDataProvider.clone(str(git_repo.path), dest)
        assert provider.commit_count(dest) == 4
        assert "origin/main" in provider.remote_branches(dest)
        assert provider.resolve_revision(dest, "main") == "main"

    def test_clone_failure(self, tmp_path):
        dest = tmp_path / "clone"
        dest.mkdir()
        with pytest.raises(FetchError, match="Could not clone"):
            GitDataProvider.clone(str(tmp_path / "missing.git"), dest)
