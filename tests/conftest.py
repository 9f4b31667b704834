"""Shared fakes and fixtures for skill-token-counter tests."""

from __future__ import annotations

import io
import shutil
import subprocess
from collections.abc import Callable, Iterator, Mapping
from pathlib import Path

import logfire
import pytest

from skill_token_counter.snapshot import LIVE, SnapshotContext
from skill_token_counter.tokens import TokenCounter


class RecordingLogger:
    """Structured logger that keeps every call for assertions."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, str, dict[str, object]]] = []

    def info(self, message: str, /, **kwargs: object) -> None:
        self.calls.append(("info", message, dict(kwargs)))

    def debug(self, message: str, /, **kwargs: object) -> None:
        self.calls.append(("debug", message, dict(kwargs)))

    def warning(self, message: str, /, **kwargs: object) -> None:
        self.calls.append(("warning", message, dict(kwargs)))

    def error(self, message: str, /, **kwargs: object) -> None:
        self.calls.append(("error", message, dict(kwargs)))

    @property
    def warnings(self) -> list[tuple[str, dict[str, object]]]:
        return [(message, data) for level, message, data in self.calls if level == "warning"]


class LengthCounter(TokenCounter):
    """One token per character; raises for text containing ``fail_marker``."""

    def __init__(self, *, fail_marker: str | None = None, logger: RecordingLogger | None = None) -> None:
        super().__init__(logger=logger)
        self.fail_marker = fail_marker
        self.calls: list[str] = []

    async def _count(self, text: str) -> int:
        self.calls.append(text)
        if self.fail_marker is not None and self.fail_marker in text:
            raise RuntimeError("quota exceeded")
        return len(text)


class MemorySnapshot:
    """In-memory accessor keyed by absolute paths."""

    def __init__(
        self,
        files: Mapping[Path, str],
        *,
        context: SnapshotContext = LIVE,
        unreadable: set[Path] | None = None,
    ) -> None:
        self.files = {Path(path): text for path, text in files.items()}
        self.context = context
        self.unreadable = unreadable or set()

    async def read_file(self, path: Path) -> str | None:
        path = Path(path)
        if path in self.unreadable:
            return None
        return self.files.get(path)

    async def list_files(self, directory: Path) -> list[Path]:
        directory = Path(directory)
        return sorted(path for path in self.files if directory in path.parents)


@pytest.fixture
def recorder() -> RecordingLogger:
    return RecordingLogger()


@pytest.fixture
def length_counter(recorder: RecordingLogger) -> LengthCounter:
    return LengthCounter(logger=recorder)


@pytest.fixture
def make_counter(recorder: RecordingLogger) -> Callable[..., LengthCounter]:
    def _make(*, fail_marker: str | None = None) -> LengthCounter:
        return LengthCounter(fail_marker=fail_marker, logger=recorder)

    return _make


@pytest.fixture
def memory_snapshot() -> type[MemorySnapshot]:
    return MemorySnapshot


@pytest.fixture
def write_skill() -> Callable[..., Path]:
    """Create ``root/name`` with a SKILL.md and optional reference files."""

    def _write(
        root: Path,
        name: str,
        skill_md: str | None = "---\nname: skill\n---\nBody text\n",
        references: Mapping[str, str] | None = None,
    ) -> Path:
        skill_dir = root / name
        skill_dir.mkdir(parents=True, exist_ok=True)
        if skill_md is not None:
            (skill_dir / "SKILL.md").write_text(skill_md, encoding="utf-8")
        for rel, text in (references or {}).items():
            path = skill_dir / "references" / rel
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(text, encoding="utf-8")
        return skill_dir

    return _write


class GitWorkTree:
    """A scratch repository plus a runner for git commands inside it."""

    def __init__(self, root: Path) -> None:
        self.root = root

    def __call__(self, *args: str) -> str:
        result = subprocess.run(
            [
                "git",
                "-c",
                "user.name=Test",
                "-c",
                "user.email=test@example.com",
                "-c",
                "commit.gpgsign=false",
                *args,
            ],
            cwd=self.root,
            check=True,
            capture_output=True,
            text=True,
        )
        return result.stdout


@pytest.fixture
def git_repo(tmp_path: Path) -> GitWorkTree:
    """Initialise a repository at ``tmp_path/repo``."""
    if shutil.which("git") is None:
        pytest.skip("git is not installed")
    repo = GitWorkTree(tmp_path.resolve() / "repo")
    repo.root.mkdir()
    repo("init", "-q")
    return repo


@pytest.fixture
def no_git_repo(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """A directory guaranteed not to sit inside any git work tree."""
    outside = tmp_path / "outside"
    outside.mkdir()
    monkeypatch.setenv("GIT_CEILING_DIRECTORIES", str(tmp_path))
    return outside


@pytest.fixture
def logfire_console() -> Iterator[io.StringIO]:
    """Route logfire console output into a buffer for the duration of a test."""
    buffer = io.StringIO()
    logfire.configure(
        send_to_logfire=False,
        console=logfire.ConsoleOptions(output=buffer, colors="never", include_timestamps=False),
    )
    yield buffer
    logfire.configure(send_to_logfire=False, console=False)
