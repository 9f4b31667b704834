from __future__ import annotations

from pathlib import Path

import pytest

from skill_token_counter.analyzer import BODY_ENTITY, FRONTMATTER_ENTITY, SkillAnalyzer
from skill_token_counter.models import AccountableUnit, MergedRow, Presence, UnitKind
from skill_token_counter.render import report_to_payload
from skill_token_counter.reporter import DifferentialReporter, merge_breakdowns
from skill_token_counter.snapshot import SnapshotContext

ROOT = Path("/repo/skills")
MAIN = SnapshotContext(ref="main")


def _unit(entity: str, kind: UnitKind, tokens: int) -> AccountableUnit:
    return AccountableUnit(entity=entity, kind=kind, tokens=tokens)


def test_merge_partitions_units_and_sorts_by_kind_then_entity() -> None:
    local = [
        _unit(FRONTMATTER_ENTITY, UnitKind.FRONTMATTER, 10),
        _unit(BODY_ENTITY, UnitKind.BODY, 50),
        _unit("references/z.md", UnitKind.REFERENCE, 7),
        _unit("references/new.md", UnitKind.REFERENCE, 3),
    ]
    reference = [
        _unit("references/old.md", UnitKind.REFERENCE, 9),
        _unit(BODY_ENTITY, UnitKind.BODY, 60),
        _unit(FRONTMATTER_ENTITY, UnitKind.FRONTMATTER, 10),
    ]

    rows = merge_breakdowns(local, reference)

    assert rows == [
        MergedRow(entity=FRONTMATTER_ENTITY, kind=UnitKind.FRONTMATTER, local=10, reference=10, presence=Presence.BOTH),
        MergedRow(entity=BODY_ENTITY, kind=UnitKind.BODY, local=50, reference=60, presence=Presence.BOTH),
        MergedRow(entity="references/new.md", kind=UnitKind.REFERENCE, local=3, reference=0, presence=Presence.LOCAL_ONLY),
        MergedRow(entity="references/old.md", kind=UnitKind.REFERENCE, local=0, reference=9, presence=Presence.REFERENCE_ONLY),
        MergedRow(entity="references/z.md", kind=UnitKind.REFERENCE, local=7, reference=0, presence=Presence.LOCAL_ONLY),
    ]
    assert [row.delta for row in rows] == [0, -10, 3, -9, 7]
    for row in rows:
        assert row.delta == row.local - row.reference
    assert len({row.entity for row in rows}) == len(rows)


def test_merge_keeps_zero_count_presence() -> None:
    rows = merge_breakdowns(
        [_unit("references/empty.md", UnitKind.REFERENCE, 0)],
        [_unit("references/empty.md", UnitKind.REFERENCE, 0)],
    )

    assert rows[0].presence is Presence.BOTH
    assert rows[0].delta == 0


@pytest.mark.asyncio
async def test_report_without_reference_lists_local_breakdowns(
    memory_snapshot, length_counter, recorder
) -> None:
    local = memory_snapshot(
        {
            ROOT / "beta" / "SKILL.md": "---\nname: beta\n---\nBeta body",
            ROOT / "alpha" / "SKILL.md": "Alpha body",
            ROOT / "alpha" / "references" / "api.md": "api docs",
        }
    )
    reporter = DifferentialReporter(SkillAnalyzer(length_counter), logger=recorder)

    report = await reporter.report({ROOT / "beta", ROOT / "alpha"}, local)

    assert report.compare_ref is None
    assert [skill.key for skill in report.skills] == ["alpha", "beta"]
    assert [(entry.skill, entry.local, entry.reference, entry.delta) for entry in report.summary] == [
        ("alpha", 18, None, None),
        ("beta", 28, None, None),
    ]
    assert report.skills[0].rows == []
    assert [unit.entity for unit in report.skills[0].breakdown] == [BODY_ENTITY, "references/api.md"]
    assert report.grand_total_local == 46
    assert report.grand_total_reference is None
    assert report.grand_delta is None
    assert recorder.calls[0] == ("info", "Analyzing skills", {"count": 2, "compare_ref": None})


@pytest.mark.asyncio
async def test_reference_file_deleted_locally_has_negative_delta(memory_snapshot, length_counter) -> None:
    skill = ROOT / "pdf"
    local = memory_snapshot({skill / "SKILL.md": "Same body"})
    reference = memory_snapshot(
        {skill / "SKILL.md": "Same body", skill / "references" / "api.md": "historical api"},
        context=MAIN,
    )
    reporter = DifferentialReporter(SkillAnalyzer(length_counter))

    report = await reporter.report({skill}, local, reference)

    assert report.compare_ref == "main"
    [skill_report] = report.skills
    assert skill_report.breakdown == []
    assert skill_report.rows == [
        MergedRow(entity=BODY_ENTITY, kind=UnitKind.BODY, local=9, reference=9, presence=Presence.BOTH),
        MergedRow(
            entity="references/api.md",
            kind=UnitKind.REFERENCE,
            local=0,
            reference=14,
            presence=Presence.REFERENCE_ONLY,
        ),
    ]
    assert skill_report.rows[-1].delta == -14
    assert (skill_report.local_total, skill_report.reference_total, skill_report.delta) == (9, 23, -14)


@pytest.mark.asyncio
async def test_comparison_totals_add_up(memory_snapshot, length_counter, recorder) -> None:
    local = memory_snapshot(
        {
            ROOT / "alpha" / "SKILL.md": "---\nname: alpha\n---\ngrown body text",
            ROOT / "gamma" / "SKILL.md": "brand new",
        }
    )
    reference = memory_snapshot(
        {
            ROOT / "alpha" / "SKILL.md": "---\nname: alpha\n---\nbody",
            ROOT / "beta" / "SKILL.md": "removed skill",
        },
        context=MAIN,
    )
    reporter = DifferentialReporter(SkillAnalyzer(length_counter, logger=recorder))

    report = await reporter.report({ROOT / "alpha", ROOT / "beta", ROOT / "gamma"}, local, reference)

    assert [(entry.skill, entry.local, entry.reference, entry.delta) for entry in report.summary] == [
        ("alpha", 35, 24, 11),
        ("beta", 0, 13, -13),
        ("gamma", 9, 0, 9),
    ]
    assert report.grand_total_local == sum(entry.local for entry in report.summary) == 44
    assert report.grand_total_reference == 37
    assert report.grand_delta == 7
    # beta only exists in history, so the working tree copy is reported missing.
    assert [data["skill"] for _, data in recorder.warnings] == ["beta"]


@pytest.mark.asyncio
async def test_duplicate_skill_names_get_distinct_keys(memory_snapshot, length_counter) -> None:
    local = memory_snapshot(
        {
            ROOT / "team-a" / "review" / "SKILL.md": "a",
            ROOT / "team-b" / "review" / "SKILL.md": "bb",
        }
    )
    reporter = DifferentialReporter(SkillAnalyzer(length_counter))

    report = await reporter.report({ROOT / "team-a" / "review", ROOT / "team-b" / "review"}, local)

    assert [skill.key for skill in report.skills] == ["review", "team-b/review"]
    assert [skill.name for skill in report.skills] == ["review", "review"]


@pytest.mark.asyncio
async def test_nested_and_top_level_skills_with_same_name_keep_both_entries(
    memory_snapshot, length_counter
) -> None:
    nested = ROOT / "a" / "review"
    top_level = ROOT / "review"
    local = memory_snapshot({nested / "SKILL.md": "nested", top_level / "SKILL.md": "top level"})
    reporter = DifferentialReporter(SkillAnalyzer(length_counter))

    report = await reporter.report({nested, top_level}, local)

    assert [skill.key for skill in report.skills] == ["review", "skills/review"]
    assert [skill.path for skill in report.skills] == [str(nested), str(top_level)]
    payload = report_to_payload(report)
    assert sorted(payload["skills"]) == ["review", "skills/review"]
    assert [entry["Skill"] for entry in payload["summary"]] == ["review", "skills/review"]
