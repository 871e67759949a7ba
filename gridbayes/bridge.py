# bridge.py
"""
Adapters that turn draws from an external sampler into a SampleSet.

The only thing assumed about external draws is that they are exchangeable
draws of a named real parameter. Chains, warmup and thinning are the
sampler's business: chain x draw arrays are pooled into one sequence in C
order (chain 0 first), and the result is summarized exactly like grid draws.
"""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Mapping, Optional, Sequence

import numpy as np

from .array_backend.utils import _as_array
from .custom_types import Array, ArrayLike
from .posterior.sampler import SampleSet

logger = logging.getLogger(__name__)

__all__ = [
    "SampleSource",
    "from_draws",
    "from_mapping",
    "from_posterior_group",
    "collect",
]


class SampleSource(ABC):
    """
    Abstract source of draws for named parameters.

    Wrap a long-running external sampler in a subclass; gridbayes only ever
    asks it for the finished draws of a parameter.
    """

    @abstractmethod
    def draws(self, name: str) -> ArrayLike:
        """
        Returns the draws of parameter `name`.

        Any array shape is accepted; all axes are pooled into one sequence.

        Raises:
            KeyError: If the source has no parameter `name`.
        """
        raise NotImplementedError("This method should be implemented by subclasses")


def _pool(draws: ArrayLike, name: str) -> Array:
    arr = _as_array(draws, dtype=float)
    if arr.ndim > 1:
        logger.debug("Pooling draws of %r with shape %s into one sequence", name, arr.shape)
    return arr.reshape(-1)


def from_draws(draws: ArrayLike, name: str = "theta") -> SampleSet:
    """Wraps the draws of one parameter, pooling chain x draw arrays."""
    return SampleSet(_pool(draws, name), names=(name,))


def from_mapping(draws: Mapping[str, ArrayLike]) -> SampleSet:
    """
    Wraps draws of several parameters given as name -> array.

    Raises:
        ValueError: If the mapping is empty or parameters have different
            numbers of draws.
    """
    if not draws:
        raise ValueError("from_mapping requires at least one parameter.")
    columns = {name: _pool(vals, name) for name, vals in draws.items()}
    lengths = {name: col.size for name, col in columns.items()}
    if len(set(lengths.values())) != 1:
        raise ValueError(f"All parameters need the same number of draws; got {lengths}.")
    return SampleSet(np.column_stack(list(columns.values())), names=tuple(columns))


def from_posterior_group(trace: Any, names: Optional[Sequence[str]] = None) -> SampleSet:
    """
    Reads draws from an object exposing ``trace.posterior[name].values``.

    This is the layout of an ArviZ ``InferenceData`` as returned by PyMC's
    ``pm.sample()``: each variable has shape (chain, draw). Only scalar
    parameters are supported; vector-valued variables must be indexed by the
    caller and passed through `from_mapping`.

    Args:
        trace: Object with a ``posterior`` group.
        names: Variables to read; defaults to every variable in the group.

    Raises:
        TypeError: If `trace` has no posterior group.
        ValueError: If a variable is not scalar per draw.
    """
    group = getattr(trace, "posterior", None)
    if group is None:
        raise TypeError(f"{type(trace).__name__} has no 'posterior' group.")
    if names is None:
        names = list(getattr(group, "data_vars", group))
    columns = {}
    for name in names:
        arr = _as_array(group[name].values, dtype=float)
        if arr.ndim > 2:
            raise ValueError(
                f"Variable {name!r} has per-draw shape {arr.shape[2:]}; only scalar parameters are supported."
            )
        columns[str(name)] = arr
    return from_mapping(columns)


def collect(source: SampleSource, names: Sequence[str]) -> SampleSet:
    """Gathers the draws of `names` from a SampleSource into one SampleSet."""
    return from_mapping({name: source.draws(name) for name in names})
