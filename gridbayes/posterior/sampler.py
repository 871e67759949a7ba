# posterior/sampler.py
from __future__ import annotations

import logging
from typing import Any, Dict, Iterator, List, Optional, Sequence, Union

import numpy as np

from ..array_backend.utils import _ensure_batch_vector, _is_integral, _readonly
from ..custom_types import Array, ArrayLike, PRNG, SeedLike
from ..distributions.families import Family, get_family
from ..exceptions import InvalidSampleCount
from ..grid.axis import Grid, ParameterAxis, as_grid
from .grid_posterior import PosteriorMass

logger = logging.getLogger(__name__)

__all__ = [
    "SampleSet",
    "sample",
    "spawn_streams",
    "posterior_predictive",
]


class SampleSet:
    """
    Immutable collection of draws of one or more named parameters.

    Draws are stored as an (n, d) array, one row per draw and one column per
    parameter, in draw order. The set may be empty. Whether the draws came
    from a grid posterior or an external sampler makes no difference to
    anything downstream.

    Attributes:
        n (int): Number of draws.
        dim (int): Number of parameters.
        names (tuple[str, ...]): Parameter names, one per column.
        array (NDArray): Read-only draws with shape (n, d).
    """

    def __init__(self, samples: ArrayLike, names: Optional[Sequence[str]] = None):
        """Initializes a SampleSet.

        Args:
            samples: Draws of shape (n,) for a single parameter or (n, d).
            names: Parameter names. Defaults to ``("theta",)`` for one column
                and ``("theta_0", ..., "theta_{d-1}")`` otherwise.

        Raises:
            ValueError: If draws are not finite, or `names` has the wrong
                length or repeats a name.
        """
        X = _ensure_batch_vector(samples)
        n, d = X.shape
        if not np.all(np.isfinite(X)):
            raise ValueError("SampleSet requires finite draws.")

        if names is None:
            names = ("theta",) if d == 1 else tuple(f"theta_{i}" for i in range(d))
        names = tuple(str(nm) for nm in names)
        if len(names) != d:
            raise ValueError(f"names must have length {d}; got {len(names)}.")
        if len(set(names)) != d:
            raise ValueError(f"names must be unique; got {list(names)}.")

        self._X = _readonly(X)
        self._names = names

    @property
    def n(self) -> int:
        """int: Number of draws."""
        return int(self._X.shape[0])

    @property
    def dim(self) -> int:
        """int: Number of parameters."""
        return int(self._X.shape[1])

    @property
    def names(self) -> tuple:
        return self._names

    @property
    def array(self) -> Array:
        """Array: Read-only view of the draws, shape (n, d)."""
        return self._X

    @property
    def values(self) -> Array:
        """Array: Draws as (n,) for a single parameter, (n, d) otherwise."""
        return self._X[:, 0] if self.dim == 1 else self._X

    @property
    def is_empty(self) -> bool:
        return self.n == 0

    def column(self, name: str) -> Array:
        """Read-only draws of one parameter, shape (n,)."""
        try:
            j = self._names.index(name)
        except ValueError:
            raise KeyError(f"No parameter {name!r}; parameters are {list(self._names)}.") from None
        return self._X[:, j]

    def to_dict(self) -> Dict[str, Array]:
        return {name: self.column(name) for name in self._names}

    def __getitem__(self, name: str) -> Array:
        return self.column(name)

    def __len__(self) -> int:
        return self.n

    def __iter__(self) -> Iterator[Array]:
        return iter(self.values)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SampleSet):
            return NotImplemented
        return self._names == other._names and np.array_equal(self._X, other._X)

    __hash__ = None

    def __repr__(self) -> str:
        return f"SampleSet(n={self.n}, names={list(self._names)})"


# ------------------------------ Sampling ---------------------------------


def _check_count(n: Any, what: str = "n") -> int:
    if not _is_integral(n):
        raise InvalidSampleCount(f"{what} must be an integer; got {n!r}.")
    if n < 0:
        raise InvalidSampleCount(f"{what} must be nonnegative; got {n}.")
    return int(n)


def _as_posterior(grid: Grid, posterior_mass: Union[PosteriorMass, ArrayLike]) -> PosteriorMass:
    if isinstance(posterior_mass, PosteriorMass):
        if posterior_mass.grid != grid:
            raise ValueError("posterior_mass was computed on a different grid.")
        return posterior_mass
    return PosteriorMass(grid, posterior_mass)


def spawn_streams(rng: SeedLike, k: int) -> List[PRNG]:
    """
    Derives `k` independent child generators from `rng`.

    Children depend only on the parent's seed sequence, so the same seed
    always yields the same streams. Use one child per worker when drawing in
    parallel.
    """
    if not _is_integral(k) or k < 1:
        raise ValueError(f"k must be a positive integer; got {k!r}.")
    return np.random.default_rng(rng).spawn(int(k))


def sample(
    grid: Union[Grid, ParameterAxis],
    posterior_mass: Union[PosteriorMass, ArrayLike],
    n: int,
    rng: SeedLike = None,
    *,
    streams: int = 1,
) -> SampleSet:
    """
    Draws `n` grid cells with replacement, cell `c` with probability `posterior_mass[c]`.

    Args:
        grid: Grid (or single axis) the mass lives on.
        posterior_mass: PosteriorMass over `grid`, or an array with one
            nonnegative entry per cell summing to one.
        n: Number of draws; 0 gives an empty SampleSet.
        rng: Generator, integer seed, or None for fresh entropy. Fixing the
            seed makes the result reproducible.
        streams: Split the draws over this many child streams
            (see `spawn_streams`), concatenated in stream order.

    Returns:
        SampleSet with one column per grid parameter.

    Raises:
        InvalidSampleCount: If `n` is negative or not an integer.
        ValueError: If the mass does not match the grid.
    """
    n = _check_count(n)
    grid = as_grid(grid)
    posterior = _as_posterior(grid, posterior_mass)
    gen = np.random.default_rng(rng)

    p = posterior.flat / posterior.flat.sum()
    if streams == 1:
        idx = gen.choice(grid.size, size=n, replace=True, p=p)
    else:
        children = spawn_streams(gen, streams)
        sizes = [len(chunk) for chunk in np.array_split(np.arange(n), len(children))]
        idx = np.concatenate([
            child.choice(grid.size, size=k, replace=True, p=p)
            for child, k in zip(children, sizes)
        ])

    sub = np.unravel_index(idx.astype(np.intp), grid.shape)
    X = np.column_stack([ax.values[s] for ax, s in zip(grid.axes, sub)])
    logger.debug("Drew %d samples from a %d-cell posterior over %s", n, grid.size, list(grid.names))
    return SampleSet(X.reshape(n, grid.ndim), names=grid.names)


def posterior_predictive(
    samples: SampleSet,
    family: Union[str, Family],
    rng: SeedLike = None,
    **bindings: Any,
) -> Array:
    """
    Simulates one observation per posterior draw.

    Each family parameter is bound either to a parameter name in `samples`
    (one value per draw) or to a constant.

    Example:
        Predicted water counts in 9 tosses::

            posterior_predictive(samples, "binomial", rng, n=9, p="p")

    Returns:
        Array of shape (n,).
    """
    fam = get_family(family)
    if samples.is_empty:
        return np.empty(0)
    args = {
        key: samples.column(val) if isinstance(val, str) else val
        for key, val in bindings.items()
    }
    return fam.sample(size=samples.n, rng=rng, **args)
