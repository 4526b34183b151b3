"""Insight extraction settings, optionally loaded from TOML (e.g. ldgraph.toml).

Config file is looked up in order:
  1. Path passed to `load_insights_config()`
  2. Path in the LDGRAPH_CONFIG env var (if set)
  3. ldgraph.toml in the current working directory

Only the `[insights]` table is read. If no file is found (or it cannot be
parsed), built-in defaults are used. Values that are present but invalid are
rejected by `InsightsConfig` validation.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

from ldgraph.logging import get_logger
from ldgraph.resolver import DEFAULT_VOCABULARIES, schema_keys

CONFIG_ENV_VAR = "LDGRAPH_CONFIG"
CONFIG_FILENAME = "ldgraph.toml"

logger = get_logger(__name__)


class InsightsConfig(BaseModel, frozen=True):
    """Settings for `InsightsEngine`.

    Defaults follow Schema.org conventions and rarely need changing.
    """

    vocabularies: tuple[str, ...] = Field(
        default=DEFAULT_VOCABULARIES,
        min_length=1,
        description="Vocabulary prefixes tried, in order, before the bare property name.",
    )
    max_inheritance_depth: int = Field(
        default=2,
        ge=0,
        le=16,
        description="How many isVariantOf hops a variant may inherit properties through.",
    )
    organization_types: tuple[str, ...] = Field(
        default=("Organization", "Corporation", "OnlineStore", "OnlineBusiness", "LocalBusiness", "NGO"),
        min_length=1,
        description="Types accepted as the publishing organization, in priority order.",
    )
    non_inheritable_properties: tuple[str, ...] = Field(
        default=("variesBy", "productGroupID", "hasVariant"),
        description="Group-level properties a variant never inherits from its parent.",
    )

    def keys(self, name: str) -> tuple[str, ...]:
        """Ordered candidate keys for a property short name."""
        return schema_keys(name, self.vocabularies)


def _default_config_paths(path: str | Path | None) -> list[Path]:
    paths: list[Path] = []
    if path is not None:
        paths.append(Path(path))
    if os.environ.get(CONFIG_ENV_VAR):
        paths.append(Path(os.environ[CONFIG_ENV_VAR]))
    paths.append(Path.cwd() / CONFIG_FILENAME)
    return paths


def load_insights_config(path: str | Path | None = None) -> InsightsConfig:
    """Load settings from the first readable config file, else defaults."""
    for candidate in _default_config_paths(path):
        if not candidate.is_file():
            continue
        try:
            with open(candidate, "rb") as f:
                data: dict[str, Any] = tomllib.load(f)
        except (OSError, tomllib.TOMLDecodeError) as exc:
            logger.warning("Ignoring unreadable config %s: %s", candidate, exc, pprint=False)
            continue
        section = data.get("insights")
        if not isinstance(section, dict):
            return InsightsConfig()
        return InsightsConfig.model_validate(section)
    return InsightsConfig()
