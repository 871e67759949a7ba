# core/workflow.py
from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Sequence, Union

import numpy as np

from .. import config
from ..custom_types import DensityFn, ObservedData, SeedLike
from ..grid.axis import Grid, ParameterAxis, product
from ..posterior.grid_posterior import PosteriorMass, compute_posterior
from ..posterior.sampler import SampleSet
from ..summary.report import summarize

logger = logging.getLogger(__name__)

__all__ = [
    "GridApproximation",
]


class GridApproximation:
    """Grid-approximate posterior inference for a low-dimensional model.

    Bundles a grid, a prior and a likelihood, and runs the full pipeline:
    evaluate on the grid, normalize, draw samples, summarize. Each stage is
    also available on its own in `gridbayes.grid`, `gridbayes.posterior` and
    `gridbayes.summary`; this class only remembers the configuration, the
    last fitted posterior and a random generator.

    Example:
        >>> model = GridApproximation(
        ...     build(0, 1, 1000, name="p"),
        ...     prior=FlatPrior(),
        ...     likelihood=Likelihood("binomial", observed="w", n="n", p="p"),
        ...     rng=100,
        ... )
        >>> post = model.fit({"w": 6, "n": 9})
        >>> samples = model.sample(10_000)

    Attributes:
        grid: The evaluation grid.
        prior: ``prior(params)`` density function.
        likelihood: ``likelihood(params, data)`` density function.
        posterior: Last result of `fit`, or None.
    """

    def __init__(
        self,
        grid: Union[Grid, ParameterAxis, Sequence[ParameterAxis]],
        prior: DensityFn,
        likelihood: DensityFn,
        *,
        rng: SeedLike = None,
    ):
        """Initializes the model.

        Args:
            grid: A Grid, a single axis, or a sequence of axes (combined with
                `product`).
            prior: Prior density function.
            likelihood: Likelihood density function.
            rng: Generator or seed used by `sample` when none is passed.
        """
        if isinstance(grid, (list, tuple)):
            grid = product(*grid)
        elif isinstance(grid, ParameterAxis):
            grid = product(grid)
        if not isinstance(grid, Grid):
            raise TypeError(f"grid must be a Grid, ParameterAxis or sequence of axes; got {type(grid).__name__}.")

        self.grid = grid
        self.prior = prior
        self.likelihood = likelihood
        self._rng = np.random.default_rng(rng)
        self._posterior: Optional[PosteriorMass] = None

    @property
    def posterior(self) -> Optional[PosteriorMass]:
        return self._posterior

    def fit(self, observed_data: ObservedData = None) -> PosteriorMass:
        """Computes and stores the posterior for `observed_data`.

        Raises:
            DegeneratePosterior: If prior x likelihood vanishes on the whole grid.
        """
        self._posterior = compute_posterior(self.grid, self.prior, self.likelihood, observed_data)
        logger.info("Fitted grid posterior over %s (%d cells)", list(self.grid.names), self.grid.size)
        return self._posterior

    def _require_posterior(self) -> PosteriorMass:
        if self._posterior is None:
            raise RuntimeError("Call fit() before sampling or summarizing.")
        return self._posterior

    def sample(self, n: int, rng: SeedLike = None, *, streams: int = 1) -> SampleSet:
        """Draws `n` samples from the fitted posterior.

        Uses the model's own generator unless `rng` is given, so repeated
        calls continue one reproducible stream.
        """
        post = self._require_posterior()
        return post.sample(n, self._rng if rng is None else rng, streams=streams)

    def summarize(
        self,
        n: int = 10_000,
        widths: Sequence[float] = (config.DEFAULT_WIDTH,),
        methods: Sequence[str] = ("quantile", "highest-density"),
        rng: SeedLike = None,
    ) -> Dict[str, Dict[str, Any]]:
        """Draws `n` samples and summarizes each parameter (see `gridbayes.summary.summarize`)."""
        return summarize(self.sample(n, rng), widths=widths, methods=methods)

    def __repr__(self) -> str:
        return f"GridApproximation(grid={self.grid!r}, prior={self.prior!r}, likelihood={self.likelihood!r})"
