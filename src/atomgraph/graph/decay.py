"""Distance-decay functions.

A decay function maps interatomic distances to non-negative edge weights. All
functions here are vectorized: they accept scalars or NumPy arrays.

Functions can be referred to by name (see :data:`DECAY_FUNCTIONS`), which is
how :class:`atomgraph.config.GraphBuildConfig` stores its default.
"""

from __future__ import annotations

from typing import Callable, Dict, Union

import numpy as np

DecayFn = Callable[[np.ndarray], np.ndarray]


def inverse_square(distance):
    """Return ``1 / d**2``."""
    d = np.asarray(distance, dtype=np.float64)
    with np.errstate(divide="ignore"):
        return 1.0 / (d * d)


def inverse(distance):
    """Return ``1 / d``."""
    d = np.asarray(distance, dtype=np.float64)
    with np.errstate(divide="ignore"):
        return 1.0 / d


def exponential(distance, length_scale: float = 1.0):
    """Return ``exp(-d / length_scale)``."""
    if length_scale <= 0:
        raise ValueError(f"length_scale must be positive, got {length_scale}")
    d = np.asarray(distance, dtype=np.float64)
    return np.exp(-d / float(length_scale))


DECAY_FUNCTIONS: Dict[str, DecayFn] = {
    "inverse_square": inverse_square,
    "inverse": inverse,
    "exponential": exponential,
}


def get_decay_function(decay: Union[str, DecayFn]) -> DecayFn:
    """Resolve a decay function from a registered name or pass a callable through."""
    if callable(decay):
        return decay
    try:
        return DECAY_FUNCTIONS[str(decay).strip().lower()]
    except KeyError:
        raise ValueError(
            f"Unknown decay function {decay!r}. Expected one of {sorted(DECAY_FUNCTIONS)} or a callable."
        ) from None
