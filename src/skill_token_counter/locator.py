"""Discovery of skill directories in a snapshot."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

from .skill_md import SKILL_MD
from .snapshot import SnapshotAccessor


async def locate_skills(
    accessor: SnapshotAccessor,
    target: Path,
    *,
    recursive: bool = True,
) -> set[Path]:
    """Return the skill directories ``target`` resolves to in ``accessor``.

    A target holding a SKILL.md is itself the only skill. Otherwise every
    directory below it that directly holds a SKILL.md is a skill; with
    ``recursive=False`` only immediate subdirectories are considered. The same
    rules apply to the working tree and to historical refs.
    """
    target = Path(target)
    if await accessor.read_file(target / SKILL_MD) is not None:
        return {target}

    skills: set[Path] = set()
    for path in await accessor.list_files(target):
        if path.name != SKILL_MD:
            continue
        skill_dir = path.parent
        if skill_dir == target:
            continue
        if not recursive and skill_dir.parent != target:
            continue
        skills.add(skill_dir)
    return skills


async def collect_skills(
    target: Path,
    accessors: Iterable[SnapshotAccessor],
    *,
    recursive: bool = True,
) -> set[Path]:
    """Union of the skills found under ``target`` in every accessor."""
    skills: set[Path] = set()
    for accessor in accessors:
        skills |= await locate_skills(accessor, target, recursive=recursive)
    return skills


__all__ = ["collect_skills", "locate_skills"]
