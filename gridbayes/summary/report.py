# summary/report.py
from __future__ import annotations

from typing import Any, Dict, Optional, Sequence, Union

import numpy as np

from .. import config
from ..array_backend.utils import _ensure_finite_vector
from ..custom_types import ArrayLike
from ..exceptions import InsufficientSamples
from ..posterior.sampler import SampleSet
from .intervals import _as_draws, interval, point_estimate

__all__ = [
    "probability",
    "summarize",
]


def probability(
    samples: Union[SampleSet, ArrayLike],
    lower: Optional[float] = None,
    upper: Optional[float] = None,
) -> float:
    """
    Fraction of draws falling in `[lower, upper)`.

    Omitting a bound leaves that side open, so ``probability(s, upper=0.5)``
    estimates P(theta < 0.5) and ``probability(s, 0.5, 0.75)`` estimates
    P(0.5 <= theta < 0.75).

    Raises:
        InsufficientSamples: If there are no draws.
    """
    x = _as_draws(samples)
    mask = np.ones(x.shape, dtype=bool)
    if lower is not None:
        mask &= x >= lower
    if upper is not None:
        mask &= x < upper
    return float(np.count_nonzero(mask)) / x.size


def _summarize_column(x, widths, methods) -> Dict[str, Any]:
    n = x.size
    return {
        "n": n,
        "mean": point_estimate(x, "mean").value,
        "std": float(np.std(x, ddof=1 if n > 1 else 0)),
        "median": point_estimate(x, "median").value,
        "mode": point_estimate(x, "mode").value,
        "intervals": [iv for method in methods for iv in interval(x, list(widths), method)],
    }


def summarize(
    samples: Union[SampleSet, ArrayLike],
    widths: Sequence[float] = (config.DEFAULT_WIDTH,),
    methods: Sequence[str] = ("quantile", "highest-density"),
) -> Dict[str, Dict[str, Any]]:
    """
    Table of summaries, one row per parameter.

    Each row holds the draw count, mean, standard deviation, median, mode,
    and an ``"intervals"`` list with one Interval per (method, width), methods
    outermost. A plain array is summarized under the name ``"theta"``.

    Raises:
        InsufficientSamples: If there are no draws.
    """
    if isinstance(samples, SampleSet):
        if samples.is_empty:
            raise InsufficientSamples("Cannot summarize an empty SampleSet.")
        columns = samples.to_dict()
    else:
        columns = {"theta": _ensure_finite_vector(samples)}
    return {name: _summarize_column(_as_draws(col), widths, methods) for name, col in columns.items()}
