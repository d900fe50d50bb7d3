"""
Core settings for the SNC calculator.

Defaults for the bound search are loaded from defaults.json (see constants).
"""

from snc_calculator.core.constants import (
    THETA_GRANULARITY,
    HOELDER_GRANULARITY,
    MAX_ITERATIONS,
    VIOLATION_PROBABILITY,
    NEUTRAL_HOELDER,
    load_defaults_from_json,
    save_defaults_to_json,
    get_defaults_json_path,
)

__all__ = [
    "THETA_GRANULARITY",
    "HOELDER_GRANULARITY",
    "MAX_ITERATIONS",
    "VIOLATION_PROBABILITY",
    "NEUTRAL_HOELDER",
    "load_defaults_from_json",
    "save_defaults_to_json",
    "get_defaults_json_path",
]
