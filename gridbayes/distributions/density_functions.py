# distributions/density_functions.py
"""
Prior and likelihood callables built from library families.

Grid evaluation hands every density function a mapping of parameter name to
a `(size,)` array holding that parameter's value in each grid cell. A prior
is called as `prior(params)` and a likelihood as `likelihood(params, data)`.
Plain functions with those signatures work too; the classes here add a
`log_density` method with the same signature, which the posterior engine
prefers so that long products of densities never underflow.
"""
from __future__ import annotations

from typing import Any, Mapping, Union
from abc import ABC, abstractmethod

import numpy as np

from ..custom_types import Array, ObservedData, Params
from .families import Family, get_family

__all__ = [
    "PriorFunction",
    "Prior",
    "FlatPrior",
    "IndependentPrior",
    "Likelihood",
]

Binding = Union[str, float, int, np.ndarray]


class PriorFunction(ABC):
    """Base class for priors evaluated over grid cells."""

    @abstractmethod
    def log_density(self, params: Params) -> Array:
        raise NotImplementedError

    def __call__(self, params: Params) -> Array:
        return np.exp(self.log_density(params))


class FlatPrior(PriorFunction):
    """Constant prior: every cell gets weight 1."""

    def log_density(self, params: Params) -> Array:
        return np.zeros(1)

    def __repr__(self) -> str:
        return "FlatPrior()"


class Prior(PriorFunction):
    """
    Prior over a single grid parameter.

    Args:
        family: Family name (e.g. ``"uniform"``) or `Family` instance.
        parameter: Name of the grid axis the prior applies to.
        **hyper: Fixed family parameters, e.g. ``mu=178, sigma=20``.

    Example:
        >>> Prior("normal", "mu", mu=178.0, sigma=20.0)
    """

    def __init__(self, family: str | Family, parameter: str, **hyper: Any):
        self.family = get_family(family)
        self.parameter = parameter
        self.hyper = dict(hyper)

    def log_density(self, params: Params) -> Array:
        try:
            theta = params[self.parameter]
        except KeyError:
            raise KeyError(
                f"Prior on {self.parameter!r} but grid has parameters {list(params)}."
            ) from None
        return self.family.log_density(theta, **self.hyper)

    def __repr__(self) -> str:
        return f"Prior({self.family.name!r}, {self.parameter!r}, {self.hyper!r})"


class IndependentPrior(PriorFunction):
    """Product of independent priors, typically one per grid axis."""

    def __init__(self, *priors: PriorFunction):
        if not priors:
            raise ValueError("IndependentPrior requires at least one prior.")
        self.priors = tuple(priors)

    def log_density(self, params: Params) -> Array:
        total = np.zeros(1)
        for prior in self.priors:
            total = total + prior.log_density(params)
        return total


class Likelihood:
    """
    Likelihood of observed data under a library family.

    Each family parameter is bound to one of:

      - the name of a grid parameter (varies across cells),
      - the name of an entry in the observed data mapping,
      - a constant.

    Names are looked up among grid parameters first. Observations come from
    ``observed_data[observed]`` when the data is a mapping, otherwise the data
    itself is the observation. Vector observations are i.i.d.: their log
    densities are summed per cell.

    Example:
        Globe tossing, 6 water in 9 tosses::

            lik = Likelihood("binomial", observed="w", n="n", p="p")
            lik(params, {"w": 6, "n": 9})
    """

    def __init__(self, family: str | Family, observed: str = "x", **bindings: Binding):
        self.family = get_family(family)
        self.observed = observed
        self.bindings = dict(bindings)

    def _resolve(self, binding: Binding, params: Params, data: ObservedData) -> Array:
        if isinstance(binding, str):
            if binding in params:
                # one row per grid cell
                return np.asarray(params[binding], dtype=float).reshape(-1, 1)
            if isinstance(data, Mapping) and binding in data:
                # one column per observation
                return np.asarray(data[binding], dtype=float).reshape(1, -1)
            raise KeyError(
                f"Binding {binding!r} is neither a grid parameter nor an observed-data key."
            )
        return np.asarray(binding, dtype=float)

    def _observations(self, data: ObservedData) -> Array:
        if isinstance(data, Mapping):
            try:
                x = data[self.observed]
            except KeyError:
                raise KeyError(f"Observed data has no entry {self.observed!r}.") from None
        else:
            x = data
        if x is None:
            raise ValueError("Likelihood requires observed data.")
        return np.asarray(x, dtype=float).reshape(1, -1)

    def log_density(self, params: Params, observed_data: ObservedData) -> Array:
        x = self._observations(observed_data)
        args = {
            name: self._resolve(binding, params, observed_data)
            for name, binding in self.bindings.items()
        }
        logd = self.family.log_density(x, **args)
        return np.atleast_2d(logd).sum(axis=-1)

    def __call__(self, params: Params, observed_data: ObservedData) -> Array:
        return np.exp(self.log_density(params, observed_data))

    def __repr__(self) -> str:
        return f"Likelihood({self.family.name!r}, observed={self.observed!r}, {self.bindings!r})"
