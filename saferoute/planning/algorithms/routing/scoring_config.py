"""
Scoring parameter overrides from YAML.

Example file:
```yaml
hazard_proximity:
  critical_buffer_m: 400
safety_score:
  weather_factor: 90
detour:
  offset_m: 2500
```

A missing file means "use defaults"; a malformed one is an error.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

logger = logging.getLogger(__name__)

COMPONENTS = ("hazard_proximity", "safety_score", "route_ranker", "detour")


def load_scoring_params(path: Optional[str | Path]) -> Dict[str, Dict[str, Any]]:
    """
    Read per-component param overrides.

    Returns:
        {component: {param: value}}; every known component has an entry
    """
    params: Dict[str, Dict[str, Any]] = {name: {} for name in COMPONENTS}
    if not path:
        return params

    cfg_path = Path(path)
    if not cfg_path.exists():
        logger.warning(f"scoring config not found, using defaults: {cfg_path}")
        return params

    with cfg_path.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise RuntimeError(f"{cfg_path} must contain a mapping")

    for name, overrides in data.items():
        if name not in params:
            logger.warning(f"unknown scoring component in {cfg_path}: {name}")
            continue
        if not isinstance(overrides, dict):
            raise RuntimeError(f"{cfg_path}: section '{name}' must be a mapping")
        params[name].update(overrides)

    logger.info(f"loaded scoring overrides from {cfg_path}")
    return params
