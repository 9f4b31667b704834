"""Uniform read/list access to the working tree or a historical ref."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from .exceptions import NotAGitRepositoryError
from .git import GitRepository


@dataclass(slots=True, frozen=True)
class SnapshotContext:
    """Either the live working tree (``ref`` is None) or a named ref."""

    ref: str | None = None

    @property
    def is_live(self) -> bool:
        return self.ref is None

    @property
    def label(self) -> str:
        return self.ref if self.ref is not None else "local"


LIVE = SnapshotContext()


class SnapshotAccessor(Protocol):
    context: SnapshotContext

    async def read_file(self, path: Path) -> str | None: ...

    async def list_files(self, directory: Path) -> list[Path]: ...


class LocalSnapshot:
    """The working tree on disk."""

    def __init__(self) -> None:
        self.context = LIVE

    async def read_file(self, path: Path) -> str | None:
        return await asyncio.to_thread(_read_text, Path(path))

    async def list_files(self, directory: Path) -> list[Path]:
        return await asyncio.to_thread(_walk_files, Path(directory))


def _read_text(path: Path) -> str | None:
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        return None


def _walk_files(directory: Path) -> list[Path]:
    if not directory.is_dir():
        return []
    return sorted(path for path in directory.rglob("*") if path.is_file())


class GitSnapshot:
    """Files as recorded at ``ref`` in a git repository."""

    def __init__(self, repository: GitRepository, ref: str) -> None:
        self.repository = repository
        self.context = SnapshotContext(ref=ref)

    @property
    def ref(self) -> str:
        assert self.context.ref is not None
        return self.context.ref

    async def read_file(self, path: Path) -> str | None:
        return await self.repository.show(self.ref, self.repository.relative_path(path))

    async def list_files(self, directory: Path) -> list[Path]:
        names = await self.repository.ls_tree(
            self.ref, self.repository.relative_path(directory)
        )
        return [self.repository.root / name for name in names]


def open_snapshot(
    context: SnapshotContext,
    repository: GitRepository | None = None,
) -> SnapshotAccessor:
    """Return the accessor backing ``context``."""
    if context.is_live:
        return LocalSnapshot()
    if repository is None:
        raise NotAGitRepositoryError()
    assert context.ref is not None
    return GitSnapshot(repository, context.ref)


__all__ = [
    "LIVE",
    "GitSnapshot",
    "LocalSnapshot",
    "SnapshotAccessor",
    "SnapshotContext",
    "open_snapshot",
]
