"""3-layer configuration system for WCAG Plan.

Loads and merges configuration from:
1. Default settings (built-in)
2. Project config (.wcag-plan/config.yaml)
3. CLI parameters (override)
"""

from __future__ import annotations

import copy
from pathlib import Path
from typing import Optional

import yaml

from ..compliance.hierarchy import DEFAULT_VERSION, get_default_policy
from ..errors import ConfigError
from ..models.compliance import Level, RemediationPolicy

CONFIG_DIR = ".wcag-plan"

DEFAULT_CONFIG: dict = {
    "project": {
        "name": "",
        "subject": "",
    },
    "wcag": {
        "version": DEFAULT_VERSION,
        "target_level": "AA",
    },
    "certification": {
        "body": "Independent Accessibility Audit",
        "auditor": "",
    },
    # Per-deployment overrides of the bundled impact/effort criterion sets.
    # Any key left out keeps the bundled set for the WCAG version.
    "policy": {},
}


def deep_merge(base: dict, override: dict) -> dict:
    """Deep merge two dicts. Arrays are replaced, not merged."""
    result = {}
    for key in base:
        result[key] = base[key]
    for key, value in override.items():
        base_value = result.get(key)
        if isinstance(base_value, dict) and isinstance(value, dict):
            result[key] = deep_merge(base_value, value)
        else:
            result[key] = value
    return result


def load_project_config(project_path: Path) -> dict:
    """Load project configuration from .wcag-plan/config.yaml."""
    config_path = project_path / CONFIG_DIR / "config.yaml"
    if not config_path.exists():
        return {}
    try:
        content = config_path.read_text(encoding="utf-8-sig")  # utf-8-sig strips BOM
        return yaml.safe_load(content) or {}
    except (OSError, yaml.YAMLError):
        return {}


def get_effective_config(
    project_path: Path,
    cli_overrides: Optional[dict] = None,
) -> dict:
    """Get the fully resolved configuration."""
    config = copy.deepcopy(DEFAULT_CONFIG)

    project_config = load_project_config(project_path)
    if project_config:
        config = deep_merge(config, project_config)

    if cli_overrides:
        config = deep_merge(config, cli_overrides)

    config["_project_path"] = str(project_path)
    return config


def get_policy(config: dict) -> RemediationPolicy:
    """Bundled remediation policy for the configured version, with overrides."""
    version = str((config.get("wcag") or {}).get("version", DEFAULT_VERSION))
    policy = get_default_policy(version)
    overrides = config.get("policy") or {}

    updates = {}
    for key in ("critical_impact", "high_impact", "minimal_effort", "extensive_effort"):
        value = overrides.get(key)
        if value is None:
            continue
        # A lone id is a one-element set, not a string of characters.
        if not isinstance(value, (list, tuple, set)):
            value = [value]
        updates[key] = frozenset(str(c) for c in value)
    if not updates:
        return policy
    return policy.model_copy(update=updates)


def initialize_project(project_path: Path) -> Path:
    """Write a starter .wcag-plan/config.yaml if none exists."""
    config_path = project_path / CONFIG_DIR / "config.yaml"
    config_path.parent.mkdir(parents=True, exist_ok=True)
    if not config_path.exists():
        config_path.write_text(
            "# WCAG Plan project configuration\n"
            "\n"
            "project:\n"
            f'  name: "{project_path.name}"\n'
            "\n"
            "wcag:\n"
            f'  version: "{DEFAULT_VERSION}"\n'
            "  target_level: AA\n"
            "\n"
            "certification:\n"
            '  body: "Independent Accessibility Audit"\n'
            "\n"
            "# policy:\n"
            "#   critical_impact: [\"1.1.1\", \"1.3.1\", \"2.1.1\", \"4.1.2\"]\n",
            encoding="utf-8",
        )
    return config_path


def get_target_level(config: dict) -> Level:
    """The configured target level; raises ConfigError for unknown values."""
    value = (config.get("wcag") or {}).get("target_level")
    try:
        return Level(str(value))
    except ValueError:
        choices = ", ".join(level.value for level in Level)
        raise ConfigError(f"wcag.target_level must be one of {choices}, got {value!r}") from None
