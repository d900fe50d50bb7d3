"""
Default settings for the SNC calculator.

Search granularities and limits are loaded from defaults.json if available,
otherwise the built-in values below are used. Callers can always override
them per call; these are only the values used when nothing is given.
"""

import json
import warnings
from pathlib import Path
from typing import Any, Dict

# =============================================================================
# Load Defaults from JSON
# =============================================================================

# Path to defaults.json (same directory as this file)
_DEFAULTS_JSON_PATH = Path(__file__).parent / "defaults.json"

# Built-in values (used if defaults.json is missing or incomplete)
_DEFAULT_SETTINGS: Dict[str, Any] = {
    "theta_granularity": 0.01,  # step in theta
    "hoelder_granularity": 0.01,  # step in p or q of a Hoelder pair
    "max_iterations": 100000,  # safety cap on search iterations
    "violation_probability": 1e-6,  # target for reverse bounds
    "neutral_hoelder": 2.0,  # p = q = 2 after prepare()
}


def load_defaults_from_json() -> Dict[str, Any]:
    """
    Load default settings from defaults.json.

    Unknown keys are kept; missing keys fall back to the built-in values.
    If the file doesn't exist or is invalid, the built-in values are returned.
    """
    if not _DEFAULTS_JSON_PATH.exists():
        return _DEFAULT_SETTINGS.copy()
    try:
        with open(_DEFAULTS_JSON_PATH, 'r', encoding='utf-8') as f:
            loaded = json.load(f)
    except (json.JSONDecodeError, IOError) as e:
        warnings.warn(f"Failed to load defaults.json: {e}. Using built-in defaults.")
        return _DEFAULT_SETTINGS.copy()
    result = _DEFAULT_SETTINGS.copy()
    result.update(loaded)
    return result


def save_defaults_to_json(settings: Dict[str, Any]) -> None:
    """Write settings to defaults.json, used as defaults from the next import on."""
    with open(_DEFAULTS_JSON_PATH, 'w', encoding='utf-8') as f:
        json.dump(settings, f, indent=4)


def get_defaults_json_path() -> Path:
    """Return the path to the defaults.json file."""
    return _DEFAULTS_JSON_PATH


# Load settings at module import time
_LOADED_SETTINGS = load_defaults_from_json()

# =============================================================================
# Search Settings
# =============================================================================

# Smallest theta visited and the step between neighboring thetas
THETA_GRANULARITY: float = float(_LOADED_SETTINGS["theta_granularity"])

# Step applied to p or q of one Hoelder pair per move
HOELDER_GRANULARITY: float = float(_LOADED_SETTINGS["hoelder_granularity"])

# The search terminates on its own; this only stops runs with pathological
# granularities
MAX_ITERATIONS: int = int(_LOADED_SETTINGS["max_iterations"])

# Default target for reverse bounds (P(backlog > x) <= epsilon)
VIOLATION_PROBABILITY: float = float(_LOADED_SETTINGS["violation_probability"])

NEUTRAL_HOELDER: float = float(_LOADED_SETTINGS["neutral_hoelder"])
