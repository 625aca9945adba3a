from typing import Any, Dict, Optional

from yaml import safe_load

# Region category encoding (coarse semantic signal used by the sensors)
REGION_CATEGORIES = {
    "floor": 0,           # Ordinary room / open floor area
    "corridor": 1,        # Hallways connecting rooms
    "stair": 2,           # Staircases between floors
    "lobby": 3,           # Lobbies and foyers
    "entrance": 4,        # Entrance / exit areas of the building
    "escalator_up": 5,
    "escalator_down": 6,
    "dead_area": 7,       # Disused or inaccessible space
    "unknown": 8,
}

# Factor applied when an agent considers moving into a region of another category.
# Multipliers on the edge cost: smaller means cheaper, so preferred.
CATEGORY_FACTORS = {
    "corridor": 0.3,
    "stair": 0.3,
    "floor": 0.3,
    "lobby": 0.2,
    "entrance": 0.1,
    "escalator_up": 5.0,
    "escalator_down": 5.0,
    "dead_area": 5.0,
    "unknown": 5.0,
}

# Default configuration values
DEFAULT_CONFIG = {

    # SENSOR PARAMETERS

    "category_factors": CATEGORY_FACTORS,
    "smoke_factor_scale": 10.0,      # Factor = 1 + scale * density (density in 0-1)
    "blocked_factor": 1000.0,        # Blocked doors stay finite so weights never overflow
    "last_destinations_factor": 2.0, # Penalty for turning back into a region just left
    "last_destinations_memory": 3,   # How many left regions an agent remembers

    # EDGE WEIGHT BOUNDS

    "min_base_cost": 0.1,            # Floor for the geometric cost of a connection (m)
    "min_effective_weight": 1e-6,
    "max_effective_weight": 1e12,

    # KNOWLEDGE

    "full_knowledge": True,          # New agents know the whole building unless overridden

    # SMOKE SPREADING PARAMETERS

    "smoke_spread_delay": 5,         # Timesteps between smoke spread cycles
    "smoke_spread_prob": 0.5,        # Probability smoke crosses a connection per cycle
    "smoke_density_base": 0.3,       # Density when smoke first reaches a region
    "smoke_density_growth": 0.1,     # Density increase per cycle

    # GENERAL

    "verbose": False,
}


def make_config(config: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Merge overrides into a copy of DEFAULT_CONFIG."""
    merged = {**DEFAULT_CONFIG, **(config or {})}
    merged["category_factors"] = {
        **CATEGORY_FACTORS, **merged.get("category_factors", {})
    }
    for category, factor in merged["category_factors"].items():
        if category not in REGION_CATEGORIES:
            raise ValueError(f"Invalid region category: {category}. Must be one of {list(REGION_CATEGORIES.keys())}")
        if not factor > 0:
            raise ValueError(f"Category factor for {category} must be positive, got {factor}")
    for key in ("blocked_factor", "last_destinations_factor"):
        if not merged[key] > 0:
            raise ValueError(f"{key} must be positive, got {merged[key]}")
    if not merged["smoke_factor_scale"] >= 0:
        raise ValueError(f"smoke_factor_scale must be >= 0, got {merged['smoke_factor_scale']}")
    return merged


def load_config(path: str) -> Dict[str, Any]:
    """
    Read configuration overrides from a YAML file.

    Args:
        path: Path to a YAML mapping of config keys

    Returns:
        Full configuration (defaults merged with the file's overrides)
    """
    with open(path, "r") as f:
        overrides = safe_load(f) or {}
    if not isinstance(overrides, dict):
        raise ValueError(f"Config file {path} must contain a mapping")
    return make_config(overrides)
