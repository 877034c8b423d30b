"""
Pershom Configuration
=====================
Defaults for matrix construction, column storage, reduction and pair
extraction. Single source of truth; every keyword argument left as None
falls back to the value here.

Usage:
    from pershom.config import CONFIG, get
    representation = get('matrix.representation')

    # Site-wide overrides from YAML
    from pershom.config import load_overrides
    load_overrides('pershom.yaml')
"""

import copy
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml

logger = logging.getLogger(__name__)


CONFIG = {

    # =================================================================
    # Boundary matrix construction
    # =================================================================
    'matrix': {
        'representation': 'vector',   # vector | list | set | heap
        'validate': True,             # check faces precede cofaces
    },

    # =================================================================
    # Column storage
    # =================================================================
    'columns': {
        'index_dtype': 'uint32',      # VectorColumn only
    },

    # =================================================================
    # Reduction
    # =================================================================
    'reduction': {
        'algorithm': 'standard',      # standard | twist
    },

    # =================================================================
    # Pair extraction
    # =================================================================
    'pairs': {
        'include_all_unpaired_creators': True,
    },
}

INDEX_DTYPES = ('uint16', 'uint32', 'uint64')


def get(path: str, default=None):
    """
    Get a config value by dot-separated path.

    Usage:
        get('matrix.representation')   → 'vector'
        get('columns.index_dtype')     → 'uint32'
    """
    return _lookup(CONFIG, path, default)


def _lookup(config: Dict[str, Any], path: str, default=None):
    val = config
    for key in path.split('.'):
        if isinstance(val, dict) and key in val:
            val = val[key]
        else:
            return default
    return val


def _merge(target: Dict[str, Any], source: Dict[str, Any]) -> None:
    for key, value in source.items():
        if isinstance(value, dict) and isinstance(target.get(key), dict):
            _merge(target[key], value)
        else:
            target[key] = value


def load_overrides(path: Union[str, Path]) -> Dict[str, Any]:
    """
    Merge a YAML mapping into CONFIG.

    The file mirrors CONFIG's nesting, e.g.::

        matrix:
          representation: heap
        reduction:
          algorithm: twist

    The merge is checked on a copy first; CONFIG only changes if the
    result passes validate_config(), otherwise ValueError is raised and
    CONFIG is left as it was. Returns CONFIG.
    """
    with open(path) as f:
        overrides = yaml.safe_load(f) or {}

    if not isinstance(overrides, dict):
        raise ValueError(f"Config overrides in {path} must be a mapping, got {type(overrides).__name__}")

    candidate = copy.deepcopy(CONFIG)
    _merge(candidate, overrides)

    errors = validate_config(candidate)
    if errors:
        raise ValueError(f"Invalid pershom config in {path}: " + "; ".join(errors))

    CONFIG.clear()
    CONFIG.update(candidate)
    logger.debug("Loaded config overrides from %s", path)
    return CONFIG


def validate_config(config: Optional[Dict[str, Any]] = None) -> List[str]:
    """
    Check a config mapping (CONFIG by default) for internal consistency.
    Returns a list of problems.
    """
    # Imported here; both modules read this one at import time.
    from pershom.columns import REPRESENTATIONS
    from pershom.reduce import ALGORITHMS

    cfg = CONFIG if config is None else config
    errors = []

    representation = _lookup(cfg, 'matrix.representation')
    if representation not in REPRESENTATIONS:
        errors.append(
            f"matrix.representation must be one of {sorted(REPRESENTATIONS)}, "
            f"got {representation!r}"
        )

    index_dtype = _lookup(cfg, 'columns.index_dtype')
    if index_dtype not in INDEX_DTYPES:
        errors.append(
            f"columns.index_dtype must be one of {list(INDEX_DTYPES)}, "
            f"got {index_dtype!r}"
        )

    algorithm = _lookup(cfg, 'reduction.algorithm')
    if algorithm not in ALGORITHMS:
        errors.append(
            f"reduction.algorithm must be one of {sorted(ALGORITHMS)}, "
            f"got {algorithm!r}"
        )

    if not isinstance(_lookup(cfg, 'matrix.validate'), bool):
        errors.append("matrix.validate must be a boolean")

    if not isinstance(_lookup(cfg, 'pairs.include_all_unpaired_creators'), bool):
        errors.append("pairs.include_all_unpaired_creators must be a boolean")

    return errors
