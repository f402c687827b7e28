"""Versioned WCAG criteria tables.

Loads the bundled ``wcag-<version>.yaml`` documents that hold the criteria
hierarchy (A within AA within AAA), the Guideline Registry, the remediation
policy sets and the resource catalogue. Each version is parsed once per
process and validated on load; a broken hierarchy is a fatal error.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from importlib import resources
from typing import Optional

import yaml
from pydantic import BaseModel, ConfigDict

from ..errors import HierarchyError, UnknownVersionError
from ..models.compliance import LEVEL_ORDER, Guideline, Level, LevelDefinition, RemediationPolicy

logger = logging.getLogger(__name__)

DEFAULT_VERSION = "2.1"
DATA_PACKAGE = "wcagplan.data"


class CriteriaTables(BaseModel):
    """All static lookups for one WCAG version. Read-only once loaded."""

    model_config = ConfigDict(frozen=True)

    version: str
    name: str = ""
    levels: dict[Level, LevelDefinition]
    guidelines: dict[str, Guideline] = {}
    policy: RemediationPolicy = RemediationPolicy()
    base_resources: tuple[str, ...] = ()
    criterion_resources: dict[str, tuple[str, ...]] = {}


def get_available_versions() -> list[str]:
    """List WCAG versions that have bundled tables."""
    versions: list[str] = []
    for entry in resources.files(DATA_PACKAGE).iterdir():
        name = entry.name
        if name.startswith("wcag-") and name.endswith(".yaml"):
            versions.append(name[len("wcag-"):-len(".yaml")])
    return sorted(versions)


def validate_hierarchy(levels: dict[Level, LevelDefinition]) -> None:
    """Check that every level's criteria contain the level below it.

    Raises:
        HierarchyError: a level is missing or drops a lower-level criterion.
    """
    previous: Optional[LevelDefinition] = None
    for level in LEVEL_ORDER:
        definition = levels.get(level)
        if definition is None:
            raise HierarchyError(f"Missing definition for level {level.value}")
        if previous is not None:
            missing = previous.required_criteria - definition.required_criteria
            if missing:
                raise HierarchyError(
                    f"Level {level.value} does not require "
                    f"{', '.join(sorted(missing))} from level {previous.level.value}"
                )
        previous = definition


def parse_criteria_tables(document: dict) -> CriteriaTables:
    """Build validated tables from a parsed version document."""
    version = str(document.get("version", ""))

    levels: dict[Level, LevelDefinition] = {}
    for level_name, level_data in (document.get("levels") or {}).items():
        level_data = level_data or {}
        criteria = [str(c) for c in level_data.get("required_criteria") or []]
        # Keep the document order for output, de-duplicated
        ordered = tuple(dict.fromkeys(criteria))
        levels[Level(level_name)] = LevelDefinition(
            level=Level(level_name),
            version=version,
            pass_percentage=level_data.get("pass_percentage", 100),
            required_criteria=frozenset(ordered),
            ordered_criteria=ordered,
        )
    validate_hierarchy(levels)

    guidelines: dict[str, Guideline] = {}
    for criterion_id, entry in (document.get("guidelines") or {}).items():
        guidelines[str(criterion_id)] = Guideline(id=str(criterion_id), **entry)

    policy_data = document.get("policy") or {}
    policy = RemediationPolicy(
        critical_impact=frozenset(policy_data.get("critical_impact") or []),
        high_impact=frozenset(policy_data.get("high_impact") or []),
        minimal_effort=frozenset(policy_data.get("minimal_effort") or []),
        extensive_effort=frozenset(policy_data.get("extensive_effort") or []),
    )

    resource_data = document.get("resources") or {}
    criterion_resources = {
        str(criterion_id): tuple(items or [])
        for criterion_id, items in (resource_data.get("criteria") or {}).items()
    }

    return CriteriaTables(
        version=version,
        name=document.get("name", ""),
        levels=levels,
        guidelines=guidelines,
        policy=policy,
        base_resources=tuple(resource_data.get("base") or []),
        criterion_resources=criterion_resources,
    )


@lru_cache(maxsize=None)
def load_criteria_tables(version: str = DEFAULT_VERSION) -> CriteriaTables:
    """Load and validate the bundled tables for a WCAG version.

    Raises:
        UnknownVersionError: no tables are bundled for ``version``.
        HierarchyError: the bundled level definitions are inconsistent.
    """
    data_file = resources.files(DATA_PACKAGE) / f"wcag-{version}.yaml"
    if not data_file.is_file():
        raise UnknownVersionError(
            f"No criteria tables for WCAG {version} "
            f"(available: {', '.join(get_available_versions()) or 'none'})"
        )

    document = yaml.safe_load(data_file.read_text(encoding="utf-8")) or {}
    tables = parse_criteria_tables(document)
    logger.debug(
        "Loaded WCAG %s tables: %d/%d/%d criteria, %d guidelines",
        version,
        len(tables.levels[Level.A].required_criteria),
        len(tables.levels[Level.AA].required_criteria),
        len(tables.levels[Level.AAA].required_criteria),
        len(tables.guidelines),
    )
    return tables


def get_level_definition(level: Level | str, version: str = DEFAULT_VERSION) -> LevelDefinition:
    return load_criteria_tables(version).levels[Level(level)]


def get_required_criteria(level: Level | str, version: str = DEFAULT_VERSION) -> frozenset[str]:
    """Cumulative set of criteria a level requires."""
    return get_level_definition(level, version).required_criteria


def get_guideline(criterion_id: str, version: str = DEFAULT_VERSION) -> Optional[Guideline]:
    """Look up a criterion in the Guideline Registry.

    Returns None for criteria the registry does not describe.
    """
    guideline = load_criteria_tables(version).guidelines.get(criterion_id)
    if guideline is None:
        logger.debug("No registry entry for criterion %s (WCAG %s)", criterion_id, version)
    return guideline


def get_default_policy(version: str = DEFAULT_VERSION) -> RemediationPolicy:
    return load_criteria_tables(version).policy
