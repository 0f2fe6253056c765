from __future__ import annotations

from pathlib import Path
from typing import Any, Dict

import yaml
from pydantic import ValidationError

from hostnamer.models import NamingScheme


class SchemeError(ValueError):
    pass


def load_scheme(scheme_path: str | Path) -> NamingScheme:
    path = Path(scheme_path)
    try:
        raw: Dict[str, Any] = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except (OSError, yaml.YAMLError) as e:
        raise SchemeError(f"Cannot read naming scheme {path}: {e}") from e

    if not isinstance(raw, dict):
        raise SchemeError(f"Naming scheme {path} must be a mapping at the top level.")

    # YAML turns bare numbers into ints ("01" survives only when quoted)
    for key in ("vendors", "types", "sectors", "locations"):
        section = raw.get(key)
        if isinstance(section, dict):
            raw[key] = {str(name): str(code) for name, code in section.items()}

    try:
        return NamingScheme.model_validate(raw)
    except ValidationError as e:
        raise SchemeError(f"Invalid naming scheme {path}: {e}") from e
