from __future__ import annotations

from pathlib import Path
from typing import Any, Dict

import yaml

from ..errors import ValidationError


def read_yaml(path: Path) -> Dict[str, Any]:
    """Read a YAML mapping. An empty file reads as an empty mapping."""
    with Path(path).open("r", encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValidationError(f"invalid YAML in {path}: {e}") from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError(f"expected a mapping at top level of {path}")
    return data
