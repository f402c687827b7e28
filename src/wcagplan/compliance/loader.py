"""Evaluation batch loading.

Reads evaluation documents written by an accessibility test runner and
validates them into models before they reach the engine.
"""

from __future__ import annotations

from pathlib import Path

import yaml
from pydantic import ValidationError

from ..errors import EvaluationLoadError
from ..models.evaluation import EvaluationBatch


def parse_batches(content: object, default_name: str = "") -> list[EvaluationBatch]:
    """Validate a parsed document into evaluation batches.

    Accepts a list of batches, a single batch mapping, or a bare list of
    evaluations (wrapped into one batch named ``default_name``).
    """
    if content is None:
        return []

    try:
        if isinstance(content, dict):
            if "evaluations" in content:
                return [EvaluationBatch.model_validate(content)]
            if "batches" in content:
                return parse_batches(content["batches"], default_name)
            raise EvaluationLoadError("Document has neither 'evaluations' nor 'batches'")

        if isinstance(content, list):
            if all(isinstance(item, dict) and "evaluations" in item for item in content):
                return [EvaluationBatch.model_validate(item) for item in content]
            return [EvaluationBatch.model_validate({"name": default_name, "evaluations": content})]
    except ValidationError as exc:
        raise EvaluationLoadError(f"Invalid evaluation data: {exc}") from exc

    raise EvaluationLoadError(f"Unsupported evaluation document type: {type(content).__name__}")


def load_batches(path: Path) -> list[EvaluationBatch]:
    """Load evaluation batches from a YAML or JSON file."""
    try:
        text = path.read_text(encoding="utf-8-sig")
        content = yaml.safe_load(text)
    except (OSError, yaml.YAMLError) as exc:
        raise EvaluationLoadError(f"Cannot read {path}: {exc}") from exc

    return parse_batches(content, default_name=path.stem)
