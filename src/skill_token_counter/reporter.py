"""Local vs. reference reconciliation of skill breakdowns."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from pathlib import Path

from .analyzer import SkillAnalyzer
from .logging_utils import StructuredLogger, get_structured_logger, log_structured
from .models import (
    AccountableUnit,
    MergedRow,
    Presence,
    SkillReport,
    SummaryEntry,
    TokenReport,
)
from .snapshot import SnapshotAccessor


def merge_breakdowns(
    local: Sequence[AccountableUnit],
    reference: Sequence[AccountableUnit],
) -> list[MergedRow]:
    """Union two breakdowns by entity, ordered by unit kind then entity."""
    local_units = {unit.entity: unit for unit in local}
    reference_units = {unit.entity: unit for unit in reference}

    rows: list[MergedRow] = []
    for entity, unit in local_units.items():
        other = reference_units.get(entity)
        rows.append(
            MergedRow(
                entity=entity,
                kind=unit.kind,
                local=unit.tokens,
                reference=other.tokens if other is not None else 0,
                presence=Presence.BOTH if other is not None else Presence.LOCAL_ONLY,
            )
        )
    for entity, unit in reference_units.items():
        if entity in local_units:
            continue
        rows.append(
            MergedRow(
                entity=entity,
                kind=unit.kind,
                local=0,
                reference=unit.tokens,
                presence=Presence.REFERENCE_ONLY,
            )
        )

    rows.sort(key=lambda row: (row.kind.rank, row.entity))
    return rows


class DifferentialReporter:
    """Runs the analyzer per skill and per context and aggregates the results."""

    def __init__(
        self,
        analyzer: SkillAnalyzer,
        *,
        logger: StructuredLogger | None = None,
    ) -> None:
        self.analyzer = analyzer
        self._logger = get_structured_logger(logger)

    async def report(
        self,
        skills: Iterable[Path],
        local: SnapshotAccessor,
        reference: SnapshotAccessor | None = None,
    ) -> TokenReport:
        ordered = sorted({Path(path) for path in skills}, key=str)
        compare_ref = reference.context.ref if reference is not None else None
        log_structured(
            self._logger,
            "info",
            "Analyzing skills",
            count=len(ordered),
            compare_ref=compare_ref,
        )

        report = TokenReport(compare_ref=compare_ref)
        used_keys: set[str] = set()
        for skill_path in ordered:
            local_stats = await self.analyzer.analyze(local, skill_path)
            key = _unique_key(skill_path, used_keys)
            used_keys.add(key)

            if reference is None:
                report.skills.append(
                    SkillReport(
                        key=key,
                        name=local_stats.name,
                        path=local_stats.path,
                        local_total=local_stats.total_tokens,
                        breakdown=list(local_stats.breakdown),
                    )
                )
                report.summary.append(SummaryEntry(skill=key, local=local_stats.total_tokens))
                continue

            reference_stats = await self.analyzer.analyze(reference, skill_path)
            report.skills.append(
                SkillReport(
                    key=key,
                    name=local_stats.name,
                    path=local_stats.path,
                    local_total=local_stats.total_tokens,
                    reference_total=reference_stats.total_tokens,
                    rows=merge_breakdowns(local_stats.breakdown, reference_stats.breakdown),
                )
            )
            report.summary.append(
                SummaryEntry(
                    skill=key,
                    local=local_stats.total_tokens,
                    reference=reference_stats.total_tokens,
                )
            )
        return report


def _unique_key(skill_path: Path, used: set[str]) -> str:
    """Base name, or the shortest trailing path not already used as a key."""
    parts = skill_path.parts[1:] if skill_path.anchor else skill_path.parts
    for size in range(1, len(parts) + 1):
        candidate = "/".join(parts[-size:])
        if candidate not in used:
            return candidate
    candidate = skill_path.as_posix()
    suffix = 2
    while candidate in used:
        candidate = f"{skill_path.as_posix()}#{suffix}"
        suffix += 1
    return candidate


__all__ = ["DifferentialReporter", "merge_breakdowns"]
