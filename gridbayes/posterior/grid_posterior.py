# posterior/grid_posterior.py
from __future__ import annotations

import logging
from typing import Callable, Dict, Mapping, Optional, Tuple, Union

import numpy as np
import scipy.stats as sp

from .. import config
from ..array_backend.utils import _as_array, _broadcast_to_size, _ensure_vector, _readonly
from ..custom_types import Array, ArrayLike, DensityFn, ObservedData, Params, SeedLike
from ..exceptions import DegeneratePosterior
from ..grid.axis import Grid, ParameterAxis, as_grid

logger = logging.getLogger(__name__)

__all__ = [
    "PosteriorMass",
    "compute_posterior",
    "validate_observed",
]

LossFn = Callable[[Array, Array], Array]

_LOSSES: Dict[str, LossFn] = {
    "absolute": lambda d, theta: np.abs(d - theta),
    "quadratic": lambda d, theta: (d - theta) ** 2,
}


class PosteriorMass:
    """
    Normalized posterior probability of every cell of a grid.

    Invariant: all entries are finite and non-negative and they sum to one
    (within `config.MASS_TOLERANCE`). The mass array is read-only; every
    summary is recomputed on request.

    Attributes:
        grid (Grid): The grid the mass lives on.
        mass (Array): Read-only posterior mass, shape `grid.shape`.
        flat (Array): Read-only posterior mass in flat cell order, shape (size,).
        log_normalizer (float): Log of the unnormalized total, i.e. the log
            marginal likelihood up to the grid spacing. 0.0 when the mass was
            supplied already normalized.
    """

    def __init__(
        self,
        grid: Union[Grid, ParameterAxis],
        mass: ArrayLike,
        *,
        log_normalizer: float = 0.0,
        tolerance: float = config.MASS_TOLERANCE,
    ):
        """Wraps an already normalized mass array.

        Raises:
            ValueError: If `mass` does not have one entry per cell, has
                negative or non-finite entries, or does not sum to one.
        """
        grid = as_grid(grid)
        flat = _ensure_vector(_as_array(mass, dtype=float).reshape(-1), length=grid.size)
        if not np.all(np.isfinite(flat)):
            raise ValueError("posterior mass must be finite.")
        if np.any(flat < 0):
            raise ValueError("posterior mass must be nonnegative.")
        total = flat.sum()
        if abs(total - 1.0) > tolerance:
            raise ValueError(f"posterior mass must sum to 1; got {total!r}.")

        self._grid = grid
        self._flat = _readonly(flat)
        self._log_normalizer = float(log_normalizer)

    @property
    def grid(self) -> Grid:
        return self._grid

    @property
    def flat(self) -> Array:
        return self._flat

    @property
    def mass(self) -> Array:
        return self._flat.reshape(self._grid.shape)

    @property
    def log_normalizer(self) -> float:
        return self._log_normalizer

    # ------------------------------ Queries --------------------------------

    def probability(self, predicate: Callable[[Params], ArrayLike]) -> float:
        """Total mass of the cells where `predicate(params)` is true.

        Example:
            >>> post.probability(lambda prm: prm["p"] < 0.5)
        """
        mask = np.broadcast_to(np.asarray(predicate(self._grid.columns()), dtype=bool),
                               (self._grid.size,))
        return float(self._flat[mask].sum())

    def mode(self) -> Dict[str, float]:
        """Parameters of the highest-mass cell (maximum a posteriori).

        Ties go to the first cell in flat order.
        """
        return self._grid.cell(int(np.argmax(self._flat)))

    def marginal(self, name: str) -> Tuple[Array, Array]:
        """Marginal posterior of one parameter.

        Returns:
            (values, mass): The axis points and the mass summed over all
            other axes, both of shape (count,).
        """
        i = self._grid.axis_index(name)
        others = tuple(j for j in range(self._grid.ndim) if j != i)
        marg = self.mass.sum(axis=others) if others else self.mass.copy()
        return self._grid.axes[i].values, marg

    def mean(self) -> Dict[str, float]:
        """Posterior mean of each parameter."""
        cols = self._grid.columns()
        return {name: float(np.dot(self._flat, cols[name])) for name in self._grid.names}

    def std(self) -> Dict[str, float]:
        """Posterior standard deviation of each parameter."""
        cols = self._grid.columns()
        means = self.mean()
        return {
            name: float(np.sqrt(max(np.dot(self._flat, (cols[name] - means[name]) ** 2), 0.0)))
            for name in self._grid.names
        }

    def expected_loss(
        self,
        name: str,
        decisions: Optional[ArrayLike] = None,
        loss: Union[str, LossFn] = "absolute",
    ) -> Array:
        """Posterior expected loss of each candidate decision for one parameter.

        Args:
            name: Parameter the decision estimates.
            decisions: Candidate point estimates; defaults to the axis points.
            loss: ``"absolute"``, ``"quadratic"``, or a callable
                ``loss(decision, theta)`` broadcasting over arrays.

        Returns:
            Array of expected losses, one per decision.
        """
        loss_fn = _LOSSES.get(loss) if isinstance(loss, str) else loss
        if loss_fn is None:
            raise ValueError(f"Unknown loss {loss!r}; expected one of {sorted(_LOSSES)} or a callable.")
        values, marg = self.marginal(name)
        d = values if decisions is None else _ensure_vector(decisions)
        table = np.asarray(loss_fn(d[:, np.newaxis], values[np.newaxis, :]), dtype=float)
        return table @ marg

    def loss_minimizer(
        self,
        name: str,
        loss: Union[str, LossFn] = "absolute",
        decisions: Optional[ArrayLike] = None,
    ) -> float:
        """Decision with the smallest expected loss.

        Absolute loss recovers the posterior median and quadratic loss the
        posterior mean (up to grid resolution).
        """
        d = self._grid.axis(name).values if decisions is None else _ensure_vector(decisions)
        return float(d[int(np.argmin(self.expected_loss(name, d, loss)))])

    def normal_approximation(self, name: str):
        """Moment-matched Normal for one parameter, as a frozen scipy distribution.

        Raises:
            ValueError: If all mass sits on a single value of the parameter.
        """
        mu = self.mean()[name]
        sigma = self.std()[name]
        if not sigma > 0:
            raise ValueError(f"Posterior of {name!r} has zero spread; no Normal approximation.")
        return sp.norm(loc=mu, scale=sigma)

    def sample(self, n: int, rng: SeedLike = None, *, streams: int = 1):
        """Draws `n` cells; shortcut for `gridbayes.posterior.sample(self.grid, self, ...)`."""
        from .sampler import sample
        return sample(self._grid, self, n, rng, streams=streams)

    def __repr__(self) -> str:
        return f"PosteriorMass(grid={self._grid!r})"


# ---------------------------- Construction --------------------------------


def validate_observed(observed_data: ObservedData) -> None:
    """
    Rejects missing or non-finite numeric observations.

    Mappings are checked entry by entry; anything else is checked as a single
    value. Non-numeric entries are left to the likelihood.

    Raises:
        ValueError: If an entry is None or holds NaN/inf.
    """
    if observed_data is None:
        return
    if isinstance(observed_data, Mapping):
        items = observed_data.items()
    else:
        items = [("observed_data", observed_data)]
    for key, value in items:
        if value is None:
            raise ValueError(f"Observed data entry {key!r} is missing.")
        arr = np.asarray(value)
        if arr.dtype.kind in "biuf" and not np.all(np.isfinite(arr)):
            raise ValueError(f"Observed data entry {key!r} contains non-finite values.")


def _evaluate_log(fn: DensityFn, args: tuple, size: int, what: str) -> Array:
    """Evaluates a density function over all cells and returns log weights, shape (size,)."""
    log_fn = getattr(fn, "log_density", None)
    with np.errstate(divide="ignore", invalid="ignore"):
        if callable(log_fn):
            out = _broadcast_to_size(log_fn(*args), size, what=f"{what} log-density")
            bad = np.isnan(out) | (out == np.inf)
        else:
            raw = _broadcast_to_size(fn(*args), size, what=f"{what} density")
            if np.any(raw < 0):
                raise ValueError(f"{what} returned negative weights.")
            bad = ~np.isfinite(raw)
            out = np.log(raw)

    if np.any(bad):
        logger.warning(
            "%s produced %d non-finite value(s); treating those cells as zero weight.",
            what, int(np.count_nonzero(bad)),
        )
        out = np.where(bad, -np.inf, out)
    return out


def compute_posterior(
    grid: Union[Grid, ParameterAxis],
    prior_fn: DensityFn,
    likelihood_fn: DensityFn,
    observed_data: ObservedData = None,
) -> PosteriorMass:
    """
    Combines prior and likelihood over every grid cell and normalizes.

    The unnormalized weight of a cell is ``prior(params) * likelihood(params,
    data)``. Both factors are taken to log space (using `log_density` when the
    callable provides one) and the product is normalized after subtracting
    the largest log weight, so the result is exact even when the raw product
    would underflow.

    Args:
        grid: Grid or single axis to evaluate on.
        prior_fn: ``prior_fn(params) -> weights``.
        likelihood_fn: ``likelihood_fn(params, observed_data) -> weights``.
        observed_data: Data handed to the likelihood.

    Returns:
        PosteriorMass over `grid`.

    Raises:
        DegeneratePosterior: If no cell has positive weight.
        ValueError: If observed data has missing/non-finite entries or a
            density function returns negative weights.
    """
    grid = as_grid(grid)
    validate_observed(observed_data)
    params = grid.columns()

    log_w = (
        _evaluate_log(prior_fn, (params,), grid.size, "prior")
        + _evaluate_log(likelihood_fn, (params, observed_data), grid.size, "likelihood")
    )

    peak = float(np.max(log_w))
    if not np.isfinite(peak):
        raise DegeneratePosterior(
            f"Prior x likelihood is zero on all {grid.size} grid cells; "
            "no posterior can be formed."
        )
    shifted = np.exp(log_w - peak)
    # the peak cell contributes exp(0) = 1, so total >= 1
    total = float(shifted.sum())

    log_normalizer = peak + np.log(total)
    logger.debug(
        "Normalized posterior over %d cells (log normalizer %.6g, %d cells with mass)",
        grid.size, log_normalizer, int(np.count_nonzero(shifted)),
    )
    return PosteriorMass(grid, shifted / total, log_normalizer=log_normalizer)
