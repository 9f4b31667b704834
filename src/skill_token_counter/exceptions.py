"""Custom exceptions used across skill-token-counter."""

from __future__ import annotations

from pathlib import Path


class SkillTokenCounterError(RuntimeError):
    """Base class for errors that abort a whole run."""


class MissingCredentialError(SkillTokenCounterError):
    """Raised when the token-measurement credential is not configured."""

    def __init__(self, variable: str) -> None:
        self.variable = variable
        super().__init__(f"{variable} environment variable is missing.")


class NotAGitRepositoryError(SkillTokenCounterError):
    """Raised when a comparison ref is requested outside a git work tree."""

    def __init__(self, message: str = "--compare used but not in a git repository.") -> None:
        super().__init__(message)


class NoSkillsFoundError(SkillTokenCounterError):
    """Raised when neither the working tree nor the ref contain any skill."""

    def __init__(self, target: Path, ref: str | None = None) -> None:
        self.target = target
        self.ref = ref
        where = f"local or {ref}" if ref else "local"
        super().__init__(f"No skills found in {target} ({where})")


__all__ = [
    "MissingCredentialError",
    "NoSkillsFoundError",
    "NotAGitRepositoryError",
    "SkillTokenCounterError",
]
