"""Pydantic models for token breakdowns and comparison reports."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, computed_field


class UnitKind(str, Enum):
    FRONTMATTER = "Frontmatter"
    BODY = "Body"
    REFERENCE = "Reference"

    @property
    def rank(self) -> int:
        return _KIND_RANK[self]


_KIND_RANK = {UnitKind.FRONTMATTER: 0, UnitKind.BODY: 1, UnitKind.REFERENCE: 2}


class Presence(str, Enum):
    LOCAL_ONLY = "local-only"
    REFERENCE_ONLY = "reference-only"
    BOTH = "both"


def format_delta(delta: int) -> str:
    """``+N`` for growth, the bare signed number otherwise."""
    return f"+{delta}" if delta > 0 else str(delta)


class AccountableUnit(BaseModel):
    """One measured piece of a skill: frontmatter, body, or a reference file."""

    entity: str
    kind: UnitKind
    tokens: int = Field(ge=0)

    model_config = ConfigDict(frozen=True)


class SkillAnalysis(BaseModel):
    name: str
    path: str
    breakdown: list[AccountableUnit] = Field(default_factory=list)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def total_tokens(self) -> int:
        return sum(unit.tokens for unit in self.breakdown)


class MergedRow(BaseModel):
    """A unit identity seen in either context, with both counts and the delta."""

    entity: str
    kind: UnitKind
    local: int = 0
    reference: int = 0
    presence: Presence

    model_config = ConfigDict(frozen=True)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def delta(self) -> int:
        return self.local - self.reference


class SkillReport(BaseModel):
    """Per-skill section of a report.

    ``breakdown`` holds the plain local units when no reference was
    compared, ``rows`` the merged comparison otherwise.
    """

    key: str
    name: str
    path: str
    local_total: int
    reference_total: int | None = None
    breakdown: list[AccountableUnit] = Field(default_factory=list)
    rows: list[MergedRow] = Field(default_factory=list)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def delta(self) -> int | None:
        if self.reference_total is None:
            return None
        return self.local_total - self.reference_total


class SummaryEntry(BaseModel):
    skill: str
    local: int
    reference: int | None = None

    @computed_field  # type: ignore[prop-decorator]
    @property
    def delta(self) -> int | None:
        if self.reference is None:
            return None
        return self.local - self.reference


class TokenReport(BaseModel):
    compare_ref: str | None = None
    skills: list[SkillReport] = Field(default_factory=list)
    summary: list[SummaryEntry] = Field(default_factory=list)

    @property
    def comparing(self) -> bool:
        return self.compare_ref is not None

    @computed_field  # type: ignore[prop-decorator]
    @property
    def grand_total_local(self) -> int:
        return sum(entry.local for entry in self.summary)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def grand_total_reference(self) -> int | None:
        if not self.comparing:
            return None
        return sum(entry.reference or 0 for entry in self.summary)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def grand_delta(self) -> int | None:
        if self.grand_total_reference is None:
            return None
        return self.grand_total_local - self.grand_total_reference


__all__ = [
    "AccountableUnit",
    "MergedRow",
    "Presence",
    "SkillAnalysis",
    "SkillReport",
    "SummaryEntry",
    "TokenReport",
    "UnitKind",
    "format_delta",
]
