"""End-to-end skill token accounting: discover, analyze, compare."""

from __future__ import annotations

from pathlib import Path

from rich.console import Console

from .analyzer import SkillAnalyzer
from .exceptions import NoSkillsFoundError
from .git import GitRepository
from .locator import collect_skills
from .logging_utils import StructuredLogger
from .models import TokenReport
from .reporter import DifferentialReporter
from .snapshot import LIVE, SnapshotAccessor, SnapshotContext, open_snapshot
from .tokens import TokenCounter


async def count_skill_tokens(
    target: Path,
    counter: TokenCounter,
    *,
    compare_ref: str | None = None,
    repository: GitRepository | None = None,
    recursive: bool = True,
    logger: StructuredLogger | None = None,
    console: Console | None = None,
) -> TokenReport:
    """Measure every skill under ``target``, optionally against ``compare_ref``.

    Args:
        target: A skill directory or a directory containing skills.
        counter: Token counter shared by every measurement in the run.
        compare_ref: Git ref to compare the working tree against.
        repository: Repository that ``compare_ref`` is resolved in; required
            when comparing (``NotAGitRepositoryError`` otherwise).
        recursive: Discover nested skills rather than immediate children only.
        logger: Structured logger for recoverable warnings.
        console: When given, a short progress line is printed before analysis.

    Raises:
        NoSkillsFoundError: Neither context contains a skill under ``target``.
    """
    target = Path(target).resolve()

    local = open_snapshot(LIVE)
    reference: SnapshotAccessor | None = None
    accessors: list[SnapshotAccessor] = [local]
    if compare_ref is not None:
        reference = open_snapshot(SnapshotContext(ref=compare_ref), repository)
        accessors.append(reference)

    skills = await collect_skills(target, accessors, recursive=recursive)
    if not skills:
        raise NoSkillsFoundError(target, compare_ref)

    if console is not None:
        suffix = f" and comparing with [{compare_ref}]" if compare_ref else ""
        console.print(f"Analyzing {len(skills)} skill(s){suffix}...", markup=False)

    reporter = DifferentialReporter(SkillAnalyzer(counter, logger=logger), logger=logger)
    return await reporter.report(skills, local, reference)


__all__ = ["count_skill_tokens"]
