"""
cascade_layout.config
---------------------

Validated engine configuration.

The engine itself never touches the environment; callers that want
environment-driven settings ask for :meth:`EngineConfig.from_env`.
"""

from __future__ import annotations

import logging
import os
from typing import Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field

from .constants import (
    DEFAULT_HINT_THRESHOLD,
    DEFAULT_MAX_APPS,
    DEFAULT_MIN_VISIBLE_AREA,
    DEFAULT_TARGET_COVERAGE,
    EPSILON,
    HINT_THRESHOLD_ENV,
    MAX_APPS_ENV,
    MIN_VISIBLE_AREA_ENV,
    TARGET_COVERAGE_ENV,
)

_LOG = logging.getLogger(__name__)


class EngineConfig(BaseModel):
    """Tunables for one layout computation."""

    model_config = ConfigDict(frozen=True)

    max_apps: int = Field(default=DEFAULT_MAX_APPS, ge=1, le=10)
    target_coverage: float = Field(default=DEFAULT_TARGET_COVERAGE, gt=0.0, le=1.0)
    min_visible_area: float = Field(default=DEFAULT_MIN_VISIBLE_AREA, ge=0.0, lt=1.0)
    epsilon: float = Field(default=EPSILON, gt=0.0, lt=0.01)
    hint_confidence_threshold: float = Field(
        default=DEFAULT_HINT_THRESHOLD, ge=0.0, le=1.0
    )

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "EngineConfig":
        """Build a config, letting ``CASCADE_LAYOUT_*`` variables override defaults."""
        env = os.environ if environ is None else environ
        overrides: dict[str, str] = {}
        for key, var in (
            ("max_apps", MAX_APPS_ENV),
            ("target_coverage", TARGET_COVERAGE_ENV),
            ("min_visible_area", MIN_VISIBLE_AREA_ENV),
            ("hint_confidence_threshold", HINT_THRESHOLD_ENV),
        ):
            raw = env.get(var)
            if raw not in (None, ""):
                overrides[key] = raw
                _LOG.debug("Config %s overridden by $%s=%s", key, var, raw)
        # pydantic coerces the strings and raises ValidationError when invalid
        return cls.model_validate(overrides)
