"""
Configuration loading.

Config files are YAML mappings; any key left out takes its value from
DEFAULTS. See config/default.yaml.
"""

from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

import yaml

from .errors import InvalidArgument, check_natural

DEFAULTS: Dict[str, Any] = {
    'initial_capacity': 0,
    'max_capacity': None,
    'search_window': 4096,
}

# Keys that may be null in the YAML file
_NULLABLE = {'max_capacity'}


def validate_config(config: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Merge config over DEFAULTS and check every value.

    Raises
    ------
    InvalidArgument
        On unknown keys or values that are not natural numbers.
    """
    unknown = set(config) - set(DEFAULTS)
    if unknown:
        raise InvalidArgument(f"Unknown config keys: {sorted(unknown)}")

    merged = dict(DEFAULTS)
    merged.update(config)

    for key, value in merged.items():
        if value is None and key in _NULLABLE:
            continue
        merged[key] = check_natural(value, key)

    if merged['search_window'] == 0:
        raise InvalidArgument("search_window must be positive")
    if merged['max_capacity'] is not None and merged['initial_capacity'] > merged['max_capacity']:
        raise InvalidArgument(
            f"initial_capacity {merged['initial_capacity']} exceeds max_capacity {merged['max_capacity']}"
        )
    return merged


def load_config(path: Optional[Union[str, Path]] = None) -> Dict[str, Any]:
    """
    Load a YAML config file, or return the defaults when path is None.

    An empty file is treated as an empty mapping.
    """
    if path is None:
        return dict(DEFAULTS)

    with open(path) as f:
        config = yaml.safe_load(f)

    if config is None:
        config = {}
    if not isinstance(config, dict):
        raise InvalidArgument(f"{path}: expected a mapping, got {type(config).__name__}")
    return validate_config(config)
