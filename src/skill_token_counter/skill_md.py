"""Structural split of SKILL.md files into frontmatter and body."""

from __future__ import annotations

import re
from dataclasses import dataclass

SKILL_MD = "SKILL.md"
REFERENCES_DIR = "references"

# The whole block, delimiters included, anchored at the very start.
_FRONTMATTER_RE = re.compile(r"---\n(.*?)\n---\n", re.DOTALL)


@dataclass(slots=True, frozen=True)
class SkillDocument:
    frontmatter: str
    body: str


def split_skill_md(content: str) -> SkillDocument:
    """Split SKILL.md text into its frontmatter block and the remaining body.

    The frontmatter keeps both ``---`` delimiter lines, so
    ``frontmatter + body == content`` whenever a block is present. Without a
    leading block the frontmatter is empty and the body is ``content`` as is.
    """
    match = _FRONTMATTER_RE.match(content)
    if match is None:
        return SkillDocument(frontmatter="", body=content)
    end = match.end()
    return SkillDocument(frontmatter=content[:end], body=content[end:])


__all__ = ["REFERENCES_DIR", "SKILL_MD", "SkillDocument", "split_skill_md"]
