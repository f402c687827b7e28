"""Exception types raised by WCAG Plan.

Engine operations never raise for business reasons. These cover broken
static tables and malformed input rejected at the boundary.
"""

from __future__ import annotations


class WcagPlanError(Exception):
    """Base class for all WCAG Plan errors."""


class HierarchyError(WcagPlanError):
    """A level's required criteria do not contain the lower level's criteria."""


class UnknownVersionError(WcagPlanError):
    """No bundled criteria tables exist for the requested WCAG version."""


class EvaluationLoadError(WcagPlanError):
    """An evaluation document could not be read or validated."""


class ConfigError(WcagPlanError):
    """Project configuration holds a value the engine cannot use."""
