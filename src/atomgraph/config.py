"""Graph-building configuration.

The defaults mirror the usual crystal-graph settings: an 8 Angstrom cutoff, a
soft limit of 12 neighbours per atom and inverse-square edge weights.

Construction functions take a ``config`` plus optional keyword overrides; a
keyword left as ``None`` falls back to the config value.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Optional, Union

from .graph.decay import DecayFn, get_decay_function


@dataclass(frozen=True)
class GraphBuildConfig:
    """Parameters of the neighbour/weight pipeline."""

    cutoff_radius: float = 8.0
    max_num_nbr: int = 12
    decay_fn: Union[str, DecayFn] = "inverse_square"
    use_voronoi: bool = False

    def __post_init__(self) -> None:
        if not self.cutoff_radius > 0:
            raise ValueError(f"cutoff_radius must be positive, got {self.cutoff_radius}")
        if int(self.max_num_nbr) < 1:
            raise ValueError(f"max_num_nbr must be >= 1, got {self.max_num_nbr}")
        # fail early on unknown decay names
        get_decay_function(self.decay_fn)

    def with_overrides(self, **overrides: Any) -> "GraphBuildConfig":
        """Return a copy with every non-None override applied."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        if not changes:
            return self
        return replace(self, **changes)

    def resolve_decay(self) -> DecayFn:
        return get_decay_function(self.decay_fn)


DEFAULT_CONFIG = GraphBuildConfig()


def resolve_config(config: Optional[GraphBuildConfig] = None, **overrides: Any) -> GraphBuildConfig:
    base = DEFAULT_CONFIG if config is None else config
    return base.with_overrides(**overrides)
