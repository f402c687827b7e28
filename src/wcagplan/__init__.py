"""WCAG Plan - conformance assessment and remediation roadmaps."""

__version__ = "1.0.0"
