"""Output locations and provenance helpers for arena runs.

Environment first (``TTT_REPO_ROOT``, ``TTT_RESULTS_DIR``), then the
nearest git checkout, then the current directory, so an installed package
never writes under site-packages.
"""

from __future__ import annotations

import os
import subprocess
from pathlib import Path


def _find_git_root(start: Path) -> Path | None:
    cur = start
    for _ in range(5):
        if (cur / ".git").exists():
            return cur
        if cur.parent == cur:
            break
        cur = cur.parent
    return None


def repo_root() -> Path:
    env = os.getenv("TTT_REPO_ROOT")
    if env:
        return Path(env)
    git_root = _find_git_root(Path(__file__).resolve())
    if git_root is not None:
        return git_root
    return Path.cwd()


def results_dir() -> Path:
    p = os.getenv("TTT_RESULTS_DIR")
    return Path(p) if p else repo_root() / "results"


def _git(*args: str) -> str | None:
    try:
        out = subprocess.check_output(
            ["git", "-C", str(repo_root()), *args],
            stderr=subprocess.DEVNULL,
            text=True,
            timeout=2.0,
        )
    except (OSError, subprocess.SubprocessError):
        return None
    return out.strip()


def get_git_commit() -> str | None:
    """Current commit hash, read from ``.git/HEAD`` when git itself is unavailable."""
    commit = _git("rev-parse", "HEAD")
    if commit:
        return commit
    head = repo_root() / ".git" / "HEAD"
    try:
        txt = head.read_text().strip()
    except OSError:
        return None
    if txt.startswith("ref:"):
        ref_file = repo_root() / ".git" / txt.split()[1]
        return ref_file.read_text().strip() if ref_file.exists() else None
    return txt or None


def get_git_is_dirty() -> bool | None:
    out = _git("status", "--porcelain")
    if out is None:
        return None
    return len(out) > 0
