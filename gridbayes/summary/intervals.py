# summary/intervals.py
"""
Point estimates and credible intervals for one-dimensional sample collections.

Everything here is a pure function of the draws: nothing is cached and the
provenance of the draws (grid sampler, external MCMC, plain array) is never
inspected.

Quantiles use linear interpolation between order statistics
(``numpy.quantile(..., method="linear")``, Hyndman & Fan type 7). The
highest-density interval is the narrowest window of ``ceil(width * N)``
consecutive order statistics; among equally narrow windows the one with the
lowest lower bound wins.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterator, List, Optional, Sequence, Union

import numpy as np
import scipy.stats as sp

from .. import config
from ..array_backend.utils import _ensure_finite_vector, _ensure_real_scalar, _is_numpy_scalar
from ..custom_types import Array, ArrayLike
from ..exceptions import InsufficientSamples
from ..posterior.sampler import SampleSet

__all__ = [
    "Interval",
    "PointEstimate",
    "point_estimate",
    "interval",
    "quantile_interval",
    "hdi",
]

QUANTILE = "quantile"
HIGHEST_DENSITY = "highest-density"

_INTERVAL_METHODS = {
    "quantile": QUANTILE,
    "qi": QUANTILE,
    "percentile": QUANTILE,
    "highest-density": HIGHEST_DENSITY,
    "hdi": HIGHEST_DENSITY,
    "hpdi": HIGHEST_DENSITY,
}

_POINT_METHODS = ("mean", "median", "mode")


@dataclass(frozen=True)
class Interval:
    """Credible interval `[lower, upper]` holding `width` of the mass, tagged with its method."""

    lower: float
    upper: float
    method: str
    width: float

    def __post_init__(self):
        if not self.lower <= self.upper:
            raise ValueError(f"Interval requires lower <= upper; got ({self.lower}, {self.upper}).")

    @property
    def span(self) -> float:
        return self.upper - self.lower

    def contains(self, value: float) -> bool:
        return self.lower <= value <= self.upper

    def __iter__(self) -> Iterator[float]:
        yield self.lower
        yield self.upper


@dataclass(frozen=True)
class PointEstimate:
    value: float
    method: str

    def __float__(self) -> float:
        return float(self.value)


# ------------------------------ Helpers ----------------------------------


def _as_draws(samples: Union[SampleSet, ArrayLike]) -> Array:
    """Canonicalizes input to a non-empty finite float vector of draws."""
    if isinstance(samples, SampleSet):
        if samples.dim != 1:
            raise ValueError(
                f"SampleSet holds {samples.dim} parameters {list(samples.names)}; "
                "summarize one column at a time, e.g. samples[name]."
            )
        samples = samples.values
    x = _ensure_finite_vector(samples, copy=False)
    if x.size == 0:
        raise InsufficientSamples("Cannot summarize an empty sample collection.")
    return x


def _check_width(width: float) -> float:
    w = _ensure_real_scalar(width, finite=True)
    if not 0.0 < w <= 1.0:
        raise ValueError(f"width must lie in (0, 1]; got {w}.")
    return w


def _interval_method(method: str) -> str:
    try:
        return _INTERVAL_METHODS[str(method).lower()]
    except KeyError:
        raise ValueError(
            f"Unknown interval method {method!r}; expected one of {sorted(_INTERVAL_METHODS)}."
        ) from None


def _quantile_bounds(x: Array, width: float) -> Interval:
    lo, hi = np.quantile(x, [(1.0 - width) / 2.0, (1.0 + width) / 2.0], method="linear")
    return Interval(float(lo), float(hi), QUANTILE, width)


def _hdi_bounds(sorted_x: Array, width: float) -> Interval:
    N = sorted_x.size
    # width * N can land a hair above an integer (0.89 * 100 = 89.00000000000001)
    k = math.ceil(width * N - config.HDI_ROUNDING)
    k = min(max(k, 1), N)
    spans = sorted_x[k - 1:] - sorted_x[:N - k + 1]
    i = int(np.argmin(spans))  # first minimum: lowest lower bound
    return Interval(float(sorted_x[i]), float(sorted_x[i + k - 1]), HIGHEST_DENSITY, width)


def _mode(x: Array, discrete: Optional[bool] = None) -> float:
    values, counts = np.unique(x, return_counts=True)
    if values.size == 1:
        return float(values[0])
    if discrete is None:
        discrete = values.size <= config.DISCRETE_MODE_FRACTION * x.size
    if discrete:
        # np.unique sorts, so argmax picks the smallest of tied values
        return float(values[int(np.argmax(counts))])
    kde = sp.gaussian_kde(x)
    support = np.linspace(values[0], values[-1], config.KDE_POINTS)
    return float(support[int(np.argmax(kde(support)))])


# ------------------------------ Public API -------------------------------


def point_estimate(
    samples: Union[SampleSet, ArrayLike],
    method: str = "mean",
    *,
    discrete: Optional[bool] = None,
) -> PointEstimate:
    """
    Reduces draws to a single value.

    Args:
        samples: One-parameter SampleSet or 1-D array-like of draws.
        method: ``"mean"``, ``"median"`` or ``"mode"``.
        discrete: For ``"mode"`` only. True takes the most frequent draw
            (smallest value on ties), False the peak of a Gaussian KDE on a
            fixed grid over the sample range. By default draws are treated as
            discrete when few distinct values remain (at most
            `config.DISCRETE_MODE_FRACTION` of the draws), as with grid draws.

    Returns:
        PointEstimate tagged with `method`.

    Raises:
        InsufficientSamples: If there are no draws.
        ValueError: On unknown method or non-finite draws.
    """
    method = str(method).lower()
    if method not in _POINT_METHODS:
        raise ValueError(f"Unknown point estimate {method!r}; expected one of {list(_POINT_METHODS)}.")
    x = _as_draws(samples)
    if method == "mean":
        value = float(np.mean(x))
    elif method == "median":
        value = float(np.median(x))
    else:
        value = _mode(x, discrete)
    return PointEstimate(value, method)


def interval(
    samples: Union[SampleSet, ArrayLike],
    width: Union[float, Sequence[float]] = config.DEFAULT_WIDTH,
    method: str = QUANTILE,
) -> Union[Interval, List[Interval]]:
    """
    Credible interval(s) of the draws.

    Args:
        samples: One-parameter SampleSet or 1-D array-like of draws.
        width: Target mass in (0, 1], or a sequence of them.
        method: ``"quantile"`` (central interval) or ``"highest-density"``
            (narrowest interval); ``"qi"``, ``"hdi"`` and ``"hpdi"`` are
            accepted as aliases.

    Returns:
        One Interval for a scalar `width`; a list of Intervals, in the order
        of `width`, for a sequence. Each width is computed independently.
        With ``width=1`` both methods return ``(min, max)``.

    Raises:
        InsufficientSamples: If there are no draws.
        ValueError: On unknown method, width outside (0, 1], or non-finite draws.
    """
    method = _interval_method(method)
    scalar = _is_numpy_scalar(width) or np.ndim(width) == 0
    widths = [_check_width(width)] if scalar else [_check_width(w) for w in width]
    x = _as_draws(samples)

    if method == QUANTILE:
        out = [_quantile_bounds(x, w) for w in widths]
    else:
        sorted_x = np.sort(x)
        out = [_hdi_bounds(sorted_x, w) for w in widths]
    return out[0] if scalar else out


def quantile_interval(samples, width=config.DEFAULT_WIDTH):
    """Central interval between the (1-w)/2 and (1+w)/2 quantiles."""
    return interval(samples, width, QUANTILE)


def hdi(samples, width=config.DEFAULT_WIDTH):
    """Highest-density (narrowest) interval holding `width` of the draws."""
    return interval(samples, width, HIGHEST_DENSITY)
