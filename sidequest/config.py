"""
Configuration for SideQuest.

The optimiser's tuning constants default to the values the route planner
has always used. They can be overridden from any mapping, such as
Streamlit's ``st.secrets``, or from ``SIDEQUEST_*`` environment variables:

    SIDEQUEST_SA_ITERATIONS=5000 streamlit run sidequest/app.py
"""

from __future__ import annotations

import logging
import math
import os
from dataclasses import dataclass, fields, replace
from typing import Any, Mapping, Optional

from sidequest.errors import InvalidInput

ENV_PREFIX = "SIDEQUEST_"


@dataclass(frozen=True)
class OptimiserSettings:
    two_opt_epsilon: float = 1e-12
    sa_iterations: int = 2500
    sa_initial_temperature: float = 0.5
    sa_cooling: float = 0.999
    sa_min_temperature: float = 1e-9
    restart_trials: int = 40
    seed: Optional[int] = None
    nearby_radius_m: int = 1200
    nearby_limit: int = 60
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        checks = [
            ("two_opt_epsilon", math.isfinite(self.two_opt_epsilon) and self.two_opt_epsilon >= 0),
            ("sa_iterations", self.sa_iterations >= 0),
            (
                "sa_initial_temperature",
                math.isfinite(self.sa_initial_temperature) and self.sa_initial_temperature >= 0,
            ),
            ("sa_cooling", 0 < self.sa_cooling <= 1),
            ("sa_min_temperature", math.isfinite(self.sa_min_temperature) and self.sa_min_temperature > 0),
            ("restart_trials", self.restart_trials >= 0),
            ("nearby_radius_m", self.nearby_radius_m > 0),
            ("nearby_limit", self.nearby_limit > 0),
            # getLevelName maps known names to their numeric level
            ("log_level", isinstance(logging.getLevelName(self.log_level), int)),
        ]
        for name, ok in checks:
            if not ok:
                raise InvalidInput(f"Invalid value for {name}: {getattr(self, name)!r}")


DEFAULT_SETTINGS = OptimiserSettings()


def _convert(name: str, kind: Any, raw: Any) -> Any:
    if name == "seed":
        if raw is None or str(raw).strip() == "":
            return None
        kind = int
    elif name == "log_level":
        return str(raw).upper()
    try:
        return kind(raw)
    except (TypeError, ValueError) as exc:
        raise InvalidInput(f"Invalid value for {name}: {raw!r}") from exc


def settings_from_mapping(
    mapping: Mapping[str, Any], base: OptimiserSettings = DEFAULT_SETTINGS, prefix: str = ""
) -> OptimiserSettings:
    """Build settings from a mapping of upper-case keys.

    Keys are the field names in upper case, optionally prefixed, e.g.
    ``SA_ITERATIONS`` or ``SIDEQUEST_SA_ITERATIONS``. Keys that do not
    name a setting are ignored.

    Args:
        mapping: Source of overrides (``st.secrets``, ``os.environ``...).
        base: Settings to start from.
        prefix: Prefix expected in front of every key.

    Returns:
        A new ``OptimiserSettings``.

    Raises:
        InvalidInput: If a value cannot be converted to the field's type or
            is out of range (negative counts, cooling outside (0, 1],
            non-finite tolerances, unknown log level).
    """
    overrides = {}
    for f in fields(OptimiserSettings):
        key = prefix + f.name.upper()
        if key in mapping:
            kind = type(getattr(DEFAULT_SETTINGS, f.name))
            overrides[f.name] = _convert(f.name, kind, mapping[key])
    return replace(base, **overrides)


def settings_from_env(environ: Optional[Mapping[str, str]] = None) -> OptimiserSettings:
    """Build settings from ``SIDEQUEST_*`` environment variables."""
    return settings_from_mapping(os.environ if environ is None else environ, prefix=ENV_PREFIX)
