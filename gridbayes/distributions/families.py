# distributions/families.py
from __future__ import annotations

from typing import Any, ClassVar, Dict, List, Tuple, Type
from abc import ABC, abstractmethod

import numpy as np
import scipy.stats as sp

from ..custom_types import Array, ArrayLike, SeedLike
from ..exceptions import UnsupportedDistribution

__all__ = [
    "Family",
    "Binomial",
    "Normal",
    "Uniform",
    "Cauchy",
    "register",
    "get_family",
    "available_families",
    "density",
    "log_density",
]


# -------------------------- Abstract Classes ----------------------------


class Family(ABC):
    """
    Abstract base class for a parametric distribution family.

    A family is stateless: parameters are passed on every call, so the same
    instance evaluates a whole grid of parameter values at once. All methods
    broadcast `x` against the parameters with numpy semantics.

    Subclasses wrap a `scipy.stats` distribution and describe

      - which keyword parameters they take (`parameters`),
      - where those parameters are valid (`_valid`),
      - how they map onto scipy's arguments (`_scipy_params`).

    Outside the valid region the density is exactly 0 (log-density `-inf`),
    never NaN. This is what makes grid points on a boundary such as `p = 0`
    safe to evaluate.

    Attributes:
        name: Canonical registry name.
        aliases: Additional registry names.
        parameters: Names of the keyword parameters, in documentation order.
    """

    name: ClassVar[str] = ""
    aliases: ClassVar[Tuple[str, ...]] = ()
    parameters: ClassVar[Tuple[str, ...]] = ()
    discrete: ClassVar[bool] = False

    # Harmless stand-ins used where parameters are invalid, so scipy never
    # sees them. The affected entries are masked out afterwards.
    _placeholders: ClassVar[Dict[str, float]] = {}
    _scipy_dist: ClassVar[Any] = None

    # ---- subclass hooks ----

    @abstractmethod
    def _valid(self, **params: Array) -> Array:
        """Boolean array marking parameter combinations inside the family's domain."""
        raise NotImplementedError

    @abstractmethod
    def _scipy_params(self, **params: Array) -> Dict[str, Array]:
        """Translate family parameters into keyword arguments for `_scipy_dist`."""
        raise NotImplementedError

    # ---- public API ----

    def log_density(self, x: ArrayLike, **params: ArrayLike) -> Array:
        """
        Computes log p(x | params), broadcasting x against the parameters.

        Args:
            x: Observation(s).
            **params: Family parameters, scalars or arrays.

        Returns:
            Array of log-density (log-mass for discrete families) values.
            Invalid parameter combinations and impossible observations give
            `-inf`.

        Raises:
            TypeError: If a parameter is missing or unexpected.
        """
        arrs = self._prepare(params)
        x = np.asarray(x, dtype=float)
        valid = np.asarray(self._valid(**arrs), dtype=bool)
        safe = {
            k: np.where(valid, v, self._placeholders.get(k, 1.0))
            for k, v in arrs.items()
        }
        method = self._scipy_dist.logpmf if self.discrete else self._scipy_dist.logpdf
        with np.errstate(divide="ignore", invalid="ignore"):
            out = np.asarray(method(x, **self._scipy_params(**safe)), dtype=float)
        return np.where(valid & ~np.isnan(out), out, -np.inf)

    def density(self, x: ArrayLike, **params: ArrayLike) -> Array:
        """Computes p(x | params); exactly 0 wherever `log_density` is `-inf`."""
        return np.exp(self.log_density(x, **params))

    def sample(self, size: int | Tuple[int, ...] | None = None, rng: SeedLike = None,
               **params: ArrayLike) -> Array:
        """
        Draws from the family with the given parameters.

        Args:
            size: Output shape, as for scipy's `rvs`.
            rng: Generator or seed used as scipy's `random_state`.
            **params: Family parameters; must be valid everywhere.

        Returns:
            Array of draws.

        Raises:
            ValueError: If any parameter value lies outside the family's domain.
        """
        arrs = self._prepare(params)
        if not np.all(self._valid(**arrs)):
            raise ValueError(f"{self.name}: cannot sample with invalid parameters {params!r}.")
        rng = np.random.default_rng(rng)
        return np.asarray(
            self._scipy_dist.rvs(size=size, random_state=rng, **self._scipy_params(**arrs))
        )

    def _prepare(self, params: Dict[str, ArrayLike]) -> Dict[str, Array]:
        missing = [p for p in self.parameters if p not in params]
        unexpected = [p for p in params if p not in self.parameters]
        if missing or unexpected:
            raise TypeError(
                f"{self.name} takes parameters {list(self.parameters)}; "
                f"missing {missing}, unexpected {unexpected}."
            )
        return {k: np.asarray(v, dtype=float) for k, v in params.items()}

    def __repr__(self) -> str:
        return f"{type(self).__name__}({', '.join(self.parameters)})"


# ---------------------------- Registry ----------------------------------

_REGISTRY: Dict[str, Family] = {}


def register(cls: Type[Family]) -> Type[Family]:
    """Class decorator adding a family (and its aliases) to the registry."""
    instance = cls()
    for key in (cls.name, *cls.aliases):
        _REGISTRY[key.lower()] = instance
    return cls


def get_family(name: str | Family) -> Family:
    """
    Looks up a family by name (case-insensitive). Family instances pass through.

    Raises:
        UnsupportedDistribution: If no family is registered under `name`.
    """
    if isinstance(name, Family):
        return name
    try:
        return _REGISTRY[str(name).lower()]
    except KeyError:
        raise UnsupportedDistribution(
            f"Unsupported distribution {name!r}; available: {available_families()}"
        ) from None


def available_families() -> List[str]:
    """Canonical names of all registered families."""
    return sorted({fam.name for fam in _REGISTRY.values()})


def density(name: str | Family, x: ArrayLike, **params: ArrayLike) -> Array:
    return get_family(name).density(x, **params)


def log_density(name: str | Family, x: ArrayLike, **params: ArrayLike) -> Array:
    return get_family(name).log_density(x, **params)


# --------------------------- Families -----------------------------------


@register
class Binomial(Family):
    """Binomial(n, p): probability of `x` successes in `n` trials."""

    name = "binomial"
    parameters = ("n", "p")
    discrete = True
    _placeholders = {"n": 1.0, "p": 0.5}
    _scipy_dist = sp.binom

    def _valid(self, *, n, p):
        return (p >= 0.0) & (p <= 1.0) & (n >= 0) & (np.floor(n) == n)

    def _scipy_params(self, *, n, p):
        return {"n": n, "p": p}


@register
class Normal(Family):
    """Normal(mu, sigma), sigma > 0."""

    name = "normal"
    aliases = ("gaussian",)
    parameters = ("mu", "sigma")
    _placeholders = {"sigma": 1.0}
    _scipy_dist = sp.norm

    def _valid(self, *, mu, sigma):
        return np.isfinite(mu) & (sigma > 0.0)

    def _scipy_params(self, *, mu, sigma):
        return {"loc": mu, "scale": sigma}


@register
class Uniform(Family):
    """Uniform on [low, high], low < high."""

    name = "uniform"
    parameters = ("low", "high")
    _placeholders = {"low": 0.0, "high": 1.0}
    _scipy_dist = sp.uniform

    def _valid(self, *, low, high):
        return np.isfinite(low) & np.isfinite(high) & (high > low)

    def _scipy_params(self, *, low, high):
        return {"loc": low, "scale": high - low}


@register
class Cauchy(Family):
    """Cauchy(loc, scale), scale > 0."""

    name = "cauchy"
    parameters = ("loc", "scale")
    _placeholders = {"scale": 1.0}
    _scipy_dist = sp.cauchy

    def _valid(self, *, loc, scale):
        return np.isfinite(loc) & (scale > 0.0)

    def _scipy_params(self, *, loc, scale):
        return {"loc": loc, "scale": scale}
