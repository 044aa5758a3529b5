"""Hotspots: files touched by the most commits."""

from collections import Counter
from typing import Iterable

from git_time_machine.models import FileChurn


def rank_changed_files(paths: Iterable[str], limit: int = 5) -> list[FileChurn]:
    """Rank file paths by how often they occur.

    *paths* is the output of ``git log --pretty=format: --name-only`` split
    into lines: one path per file per commit, with blank separator lines.
    Ties are broken by path so the ranking is stable.
    """
    counts = Counter(p.strip() for p in paths if p.strip())
    ranked = sorted(counts.items(), key=lambda item: (-item[1], item[0]))
    return [FileChurn(path=path, changes=n) for path, n in ranked[:limit]]
