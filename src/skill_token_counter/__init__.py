"""Measure the context-token cost of Agent Skills and compare it across git refs."""

from __future__ import annotations

from .analyzer import SkillAnalyzer
from .config import CounterSettings
from .exceptions import (
    MissingCredentialError,
    NoSkillsFoundError,
    NotAGitRepositoryError,
    SkillTokenCounterError,
)
from .git import GitRepository
from .locator import collect_skills, locate_skills
from .models import (
    AccountableUnit,
    MergedRow,
    Presence,
    SkillAnalysis,
    SkillReport,
    SummaryEntry,
    TokenReport,
    UnitKind,
    format_delta,
)
from .render import render_report, report_to_payload
from .reporter import DifferentialReporter, merge_breakdowns
from .runner import count_skill_tokens
from .skill_md import SkillDocument, split_skill_md
from .snapshot import (
    LIVE,
    GitSnapshot,
    LocalSnapshot,
    SnapshotAccessor,
    SnapshotContext,
    open_snapshot,
)
from .tokens import ApproximateTokenCounter, GeminiTokenCounter, TokenCounter

__all__ = [
    "count_skill_tokens",
    "CounterSettings",
    "SkillAnalyzer",
    "DifferentialReporter",
    "merge_breakdowns",
    "locate_skills",
    "collect_skills",
    "split_skill_md",
    "SkillDocument",
    "SnapshotContext",
    "SnapshotAccessor",
    "LocalSnapshot",
    "GitSnapshot",
    "GitRepository",
    "LIVE",
    "open_snapshot",
    "TokenCounter",
    "ApproximateTokenCounter",
    "GeminiTokenCounter",
    "AccountableUnit",
    "MergedRow",
    "Presence",
    "SkillAnalysis",
    "SkillReport",
    "SummaryEntry",
    "TokenReport",
    "UnitKind",
    "format_delta",
    "render_report",
    "report_to_payload",
    "SkillTokenCounterError",
    "MissingCredentialError",
    "NotAGitRepositoryError",
    "NoSkillsFoundError",
]

__version__ = "0.1.0"
