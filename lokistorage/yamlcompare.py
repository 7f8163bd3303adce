"""Structural comparison of values through their YAML form."""

from __future__ import annotations

import dataclasses
from typing import Any

import yaml


def _normalize(value: Any) -> Any:
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {f.name: _normalize(getattr(value, f.name)) for f in dataclasses.fields(value)}
    if isinstance(value, dict):
        return {k: _normalize(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_normalize(v) for v in value]
    return value


def compare_yaml(a: Any, b: Any) -> bool:
    """Return True when a and b serialise to identical YAML; False if either cannot."""
    try:
        a_text = yaml.safe_dump(_normalize(a), sort_keys=True)
        b_text = yaml.safe_dump(_normalize(b), sort_keys=True)
    except (yaml.YAMLError, TypeError):
        return False
    return a_text == b_text