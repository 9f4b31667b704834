"""Machine (JSON-ready) and human (rich table) renderings of a TokenReport.

Only this layer names columns after the compared ref; the models keep a
fixed ``reference`` field.
"""

from __future__ import annotations

from typing import Any

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .models import AccountableUnit, MergedRow, SkillReport, SummaryEntry, TokenReport, format_delta


def _unit_payload(unit: AccountableUnit) -> dict[str, Any]:
    return {"Entity": unit.entity, "Tokens": unit.tokens, "Type": unit.kind.value}


def _row_payload(row: MergedRow, ref: str) -> dict[str, Any]:
    return {
        "Entity": row.entity,
        "Type": row.kind.value,
        "Local": row.local,
        ref: row.reference,
        "Delta": format_delta(row.delta),
    }


def _summary_payload(entry: SummaryEntry, ref: str | None) -> dict[str, Any]:
    if ref is None or entry.reference is None:
        return {"Skill": entry.skill, "Tokens": entry.local}
    return {
        "Skill": entry.skill,
        "Local": entry.local,
        ref: entry.reference,
        "Delta": format_delta(entry.local - entry.reference),
    }


def _skill_payload(skill: SkillReport, ref: str | None) -> dict[str, Any]:
    payload: dict[str, Any] = {"localTotal": skill.local_total}
    if ref is None:
        payload["breakdown"] = [_unit_payload(unit) for unit in skill.breakdown]
        return payload
    payload["refTotal"] = skill.reference_total
    payload["breakdown"] = [_row_payload(row, ref) for row in skill.rows]
    return payload


def report_to_payload(report: TokenReport) -> dict[str, Any]:
    """Structure suitable for ``json.dumps``."""
    ref = report.compare_ref
    payload: dict[str, Any] = {
        "skills": {skill.key: _skill_payload(skill, ref) for skill in report.skills},
        "summary": [_summary_payload(entry, ref) for entry in report.summary],
        "grandTotalLocal": report.grand_total_local,
    }
    if ref is not None:
        payload["grandTotalRef"] = report.grand_total_reference
        payload["grandDelta"] = format_delta(report.grand_delta or 0)
    return payload


def _table(rows: list[dict[str, Any]], *, title: str | None = None) -> Table:
    table = Table(title=title, title_justify="left")
    columns = list(rows[0].keys()) if rows else []
    for column in columns:
        numeric = column not in {"Entity", "Type", "Skill"}
        table.add_column(escape(column), justify="right" if numeric else "left")
    for row in rows:
        table.add_row(*(escape(str(row.get(column, ""))) for column in columns))
    return table


def render_report(report: TokenReport, console: Console) -> None:
    """Print per-skill breakdowns, the summary table and grand totals."""
    ref = report.compare_ref
    for skill in report.skills:
        if ref is None:
            title = f"Local Token Breakdown for {skill.key}"
            rows = [_unit_payload(unit) for unit in skill.breakdown]
        else:
            title = f"Token Breakdown for {skill.key}"
            rows = [_row_payload(row, ref) for row in skill.rows]
        console.print()
        console.print(_table(rows, title=escape(title)))

    console.print()
    console.rule("Overall Skills Token Summary")
    console.print(_table([_summary_payload(entry, ref) for entry in report.summary]))

    if ref is None:
        console.print(f"Grand Total Tokens: {report.grand_total_local}")
    else:
        console.print(f"Grand Total (Local): {report.grand_total_local}")
        console.print(f"Grand Total ([{ref}]): {report.grand_total_reference}", markup=False)
        console.print(f"Grand Delta: {format_delta(report.grand_delta or 0)}")
    console.rule()


__all__ = ["render_report", "report_to_payload"]
