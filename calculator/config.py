"""
Runtime settings for the calculator service.

Values come from STRCALC_* environment variables; parsing rules are not
configurable and live in rules.py.
"""

from __future__ import annotations

import os
from functools import lru_cache

from pydantic import BaseModel, Field

ENV_PREFIX = "STRCALC_"


class Settings(BaseModel):
    log_level: str = Field(default="INFO")
    host: str = Field(default="127.0.0.1")
    port: int = Field(default=8000, ge=1, le=65535)
    max_upload_bytes: int = Field(default=1024 * 1024, gt=0)


def load_settings(environ=None) -> Settings:
    env = os.environ if environ is None else environ
    values = {}
    for name in Settings.model_fields:
        raw = env.get(ENV_PREFIX + name.upper())
        if raw is not None:
            values[name] = raw
    return Settings(**values)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return load_settings()
