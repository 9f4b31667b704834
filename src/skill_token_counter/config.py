"""Runtime settings for skill-token-counter."""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from .exceptions import MissingCredentialError

API_KEY_ENV = "GEMINI_API_KEY"
MODEL_ENV = "SKILL_TOKEN_COUNTER_MODEL"
DEFAULT_MODEL = "gemini-3-pro-preview"


class CounterSettings(BaseModel):
    """Settings resolved once at startup and passed down explicitly."""

    api_key: str | None = Field(default=None, repr=False)
    model_name: str = DEFAULT_MODEL
    default_target: Path = Path("skills")
    default_compare_ref: str = "main"

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> CounterSettings:
        env = os.environ if environ is None else environ
        return cls(
            api_key=env.get(API_KEY_ENV) or None,
            model_name=env.get(MODEL_ENV) or DEFAULT_MODEL,
        )

    def require_api_key(self) -> str:
        if not self.api_key:
            raise MissingCredentialError(API_KEY_ENV)
        return self.api_key


__all__ = ["API_KEY_ENV", "DEFAULT_MODEL", "MODEL_ENV", "CounterSettings"]
