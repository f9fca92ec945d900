"""Small helpers around the ``git`` command-line tool."""

from __future__ import annotations

import subprocess
from collections.abc import Sequence
from os import PathLike


class GitError(RuntimeError):
    """Raised when a git command exits with a non-zero status."""

    def __init__(self, args: Sequence[str], returncode: int | None) -> None:
        self.git_args = list(args)
        self.returncode = returncode
        super().__init__(f"git {self.git_args!r} exited with {returncode!r}")


def run(args: Sequence[str]) -> None:
    """Run ``git <args>`` with all output discarded.

    Raises GitError on a non-zero exit; OSError if git cannot be started.
    """
    completed = subprocess.run(
        ["git", *args],
        stdin=subprocess.DEVNULL,
        stdout=subprocess.DEVNULL,
        stderr=subprocess.DEVNULL,
        check=False,
    )
    if completed.returncode != 0:
        raise GitError(args, completed.returncode)


def capture_stdout(cwd: str | PathLike[str] | None, args: Sequence[str]) -> str:
    """Return the trimmed stdout of ``git <args>``, or "" on any failure."""
    try:
        completed = subprocess.run(
            ["git", *args],
            cwd=cwd,
            stdout=subprocess.PIPE,
            stderr=subprocess.DEVNULL,
            check=False,
        )
    except OSError:
        return ""
    if completed.returncode != 0:
        return ""
    return completed.stdout.decode("utf-8", errors="replace").strip()


def repo_basename(url: str) -> str:
    """Derive a repository's local directory name from a clone URL.

    Behaves like ``basename "$repo" .git`` and also understands
    ``git@host:path`` style addresses.
    """
    url = url.rstrip("/")
    cut = max(url.rfind("/"), url.rfind(":"))
    last = url[cut + 1:] if cut >= 0 else url
    return last.removesuffix(".git")