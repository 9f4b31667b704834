"""Read-only access to historical file content through the git CLI."""

from __future__ import annotations

import asyncio
import os
from pathlib import Path

from .exceptions import NotAGitRepositoryError


async def _run_git(*args: str, cwd: Path) -> tuple[int, bytes]:
    process = await asyncio.create_subprocess_exec(
        "git",
        *args,
        cwd=cwd,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.DEVNULL,
    )
    stdout, _ = await process.communicate()
    return process.returncode or 0, stdout


class GitRepository:
    """A git work tree addressed by its top-level directory."""

    def __init__(self, root: Path) -> None:
        self.root = Path(root)

    @classmethod
    async def discover(cls, cwd: Path | None = None) -> GitRepository:
        """Locate the repository enclosing ``cwd`` (default: the process cwd)."""
        try:
            returncode, stdout = await _run_git(
                "rev-parse", "--show-toplevel", cwd=cwd or Path.cwd()
            )
        except OSError as exc:
            raise NotAGitRepositoryError() from exc
        if returncode != 0:
            raise NotAGitRepositoryError()
        return cls(Path(stdout.decode("utf-8").strip()).resolve())

    def relative_path(self, path: Path) -> str:
        """Repo-relative POSIX path; ``.`` for the root itself."""
        return Path(os.path.relpath(Path(path).resolve(), self.root)).as_posix()

    async def show(self, ref: str, relative_path: str) -> str | None:
        """Content of ``relative_path`` at ``ref``, or None if it did not exist."""
        returncode, stdout = await _run_git(
            "show", f"{ref}:{relative_path}", cwd=self.root
        )
        if returncode != 0:
            return None
        try:
            return stdout.decode("utf-8")
        except UnicodeDecodeError:
            return None

    async def ls_tree(self, ref: str, relative_path: str) -> list[str]:
        """Every file path recorded at ``ref`` under ``relative_path``."""
        returncode, stdout = await _run_git(
            "ls-tree", "-r", "-z", "--name-only", ref, "--", relative_path, cwd=self.root
        )
        if returncode != 0:
            return []
        return [name for name in stdout.decode("utf-8", "replace").split("\0") if name]


__all__ = ["GitRepository"]
