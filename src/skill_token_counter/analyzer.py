"""Per-skill token accounting in a single snapshot."""

from __future__ import annotations

from pathlib import Path

import logfire

from .logging_utils import StructuredLogger, get_structured_logger, log_structured
from .models import AccountableUnit, SkillAnalysis, UnitKind
from .skill_md import REFERENCES_DIR, SKILL_MD, split_skill_md
from .snapshot import SnapshotAccessor
from .tokens import TokenCounter

FRONTMATTER_ENTITY = f"{SKILL_MD} (Frontmatter)"
BODY_ENTITY = f"{SKILL_MD} (Body)"


class SkillAnalyzer:
    """Breaks a skill into accountable units and measures each of them."""

    def __init__(
        self,
        counter: TokenCounter,
        *,
        logger: StructuredLogger | None = None,
    ) -> None:
        self.counter = counter
        self._logger = get_structured_logger(logger)

    async def analyze(self, accessor: SnapshotAccessor, skill_path: Path) -> SkillAnalysis:
        skill_path = Path(skill_path)
        context = accessor.context
        with logfire.span(
            "analyze skill {skill} in {context}",
            skill=skill_path.name,
            context=context.label,
        ):
            breakdown: list[AccountableUnit] = []

            content = await accessor.read_file(skill_path / SKILL_MD)
            if content is not None:
                document = split_skill_md(content)
                if document.frontmatter.strip():
                    breakdown.append(
                        await self._measure(
                            FRONTMATTER_ENTITY, UnitKind.FRONTMATTER, document.frontmatter
                        )
                    )
                if document.body.strip():
                    breakdown.append(await self._measure(BODY_ENTITY, UnitKind.BODY, document.body))
            elif context.is_live:
                log_structured(
                    self._logger,
                    "warning",
                    f"{SKILL_MD} not found in {{path}}",
                    skill=skill_path.name,
                    path=str(skill_path),
                )

            for reference in await accessor.list_files(skill_path / REFERENCES_DIR):
                entity = _relative_entity(reference, skill_path)
                text = await accessor.read_file(reference)
                if text is None:
                    log_structured(
                        self._logger,
                        "warning",
                        "Reference file {skill}/{path} could not be read ({context})",
                        skill=skill_path.name,
                        path=entity,
                        context=context.label,
                    )
                    continue
                breakdown.append(await self._measure(entity, UnitKind.REFERENCE, text))

        return SkillAnalysis(name=skill_path.name, path=str(skill_path), breakdown=breakdown)

    async def _measure(self, entity: str, kind: UnitKind, text: str) -> AccountableUnit:
        return AccountableUnit(entity=entity, kind=kind, tokens=await self.counter.count(text))


def _relative_entity(path: Path, skill_path: Path) -> str:
    try:
        return path.relative_to(skill_path).as_posix()
    except ValueError:
        return path.as_posix()


__all__ = ["BODY_ENTITY", "FRONTMATTER_ENTITY", "SkillAnalyzer"]
