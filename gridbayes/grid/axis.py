# grid/axis.py
from __future__ import annotations

import logging
import math
from typing import Dict, Iterator, Tuple, Union

import numpy as np

from .. import config
from ..array_backend.utils import _is_integral, _ensure_real_scalar, _readonly
from ..custom_types import Array
from ..exceptions import InvalidGridSpec

logger = logging.getLogger(__name__)

__all__ = [
    "ParameterAxis",
    "Grid",
    "build",
    "product",
    "as_grid",
]


class ParameterAxis:
    """
    Evenly spaced discretization of one bounded parameter.

    The axis holds `count` points from `low` to `high` inclusive, spaced
    `step = (high - low) / (count - 1)` apart. Instances are immutable: the
    point array is read-only and there are no setters.

    Attributes:
        name (str): Parameter name, used as the key handed to density functions.
        low (float): First grid point.
        high (float): Last grid point.
        count (int): Number of points, at least 2.
    """

    __slots__ = ("_name", "_low", "_high", "_count", "_values")

    def __init__(self, low: float, high: float, count: int, name: str = "theta"):
        """Initializes the axis. Prefer `build`, which documents the failure modes."""
        self._name = str(name)
        self._low = float(low)
        self._high = float(high)
        self._count = int(count)
        self._values = _readonly(np.linspace(self._low, self._high, self._count))

    @property
    def name(self) -> str:
        return self._name

    @property
    def low(self) -> float:
        return self._low

    @property
    def high(self) -> float:
        return self._high

    @property
    def count(self) -> int:
        return self._count

    @property
    def step(self) -> float:
        """float: Spacing between neighbouring points."""
        return (self._high - self._low) / (self._count - 1)

    @property
    def values(self) -> Array:
        """Array: Read-only grid points, shape (count,)."""
        return self._values

    def nearest_index(self, value: float) -> int:
        """Index of the grid point closest to `value` (lower index on ties)."""
        return int(np.argmin(np.abs(self._values - float(value))))

    def __len__(self) -> int:
        return self._count

    def __iter__(self) -> Iterator[float]:
        return iter(self._values.tolist())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ParameterAxis):
            return NotImplemented
        return (self._name, self._low, self._high, self._count) == (
            other._name, other._low, other._high, other._count
        )

    def __hash__(self) -> int:
        return hash((self._name, self._low, self._high, self._count))

    def __repr__(self) -> str:
        return f"ParameterAxis(name={self._name!r}, low={self._low}, high={self._high}, count={self._count})"


class Grid:
    """
    Cartesian product of independent parameter axes.

    Cells are laid out in C (row-major) order: the last axis varies fastest.
    A cell is addressed either by its flat index in `[0, size)` or by a tuple
    of per-axis indices.
    """

    __slots__ = ("_axes",)

    def __init__(self, axes: Tuple[ParameterAxis, ...]):
        self._axes = tuple(axes)

    @property
    def axes(self) -> Tuple[ParameterAxis, ...]:
        return self._axes

    @property
    def names(self) -> Tuple[str, ...]:
        return tuple(ax.name for ax in self._axes)

    @property
    def ndim(self) -> int:
        return len(self._axes)

    @property
    def shape(self) -> Tuple[int, ...]:
        return tuple(ax.count for ax in self._axes)

    @property
    def size(self) -> int:
        return math.prod(self.shape)

    def axis(self, name: str) -> ParameterAxis:
        for ax in self._axes:
            if ax.name == name:
                return ax
        raise KeyError(f"Grid has no parameter {name!r}; parameters are {list(self.names)}.")

    def axis_index(self, name: str) -> int:
        return self.names.index(self.axis(name).name)

    def columns(self) -> Dict[str, Array]:
        """Parameter values of every cell, as name -> (size,) array."""
        mesh = np.meshgrid(*(ax.values for ax in self._axes), indexing="ij")
        return {ax.name: m.reshape(-1) for ax, m in zip(self._axes, mesh)}

    def points(self) -> Array:
        """Parameter tuples of every cell, shape (size, ndim)."""
        cols = self.columns()
        return np.column_stack([cols[name] for name in self.names])

    def cell(self, index: int | Tuple[int, ...]) -> Dict[str, float]:
        """Parameter values of one cell, addressed by flat index or index tuple."""
        if _is_integral(index):
            index = np.unravel_index(int(index), self.shape)
        index = tuple(int(i) for i in index)
        if len(index) != self.ndim:
            raise IndexError(f"Cell index {index} does not match grid dimension {self.ndim}.")
        return {ax.name: float(ax.values[i]) for ax, i in zip(self._axes, index)}

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Grid):
            return NotImplemented
        return self._axes == other._axes

    def __hash__(self) -> int:
        return hash(self._axes)

    def __repr__(self) -> str:
        return f"Grid({', '.join(repr(ax) for ax in self._axes)})"


def build(low: float, high: float, count: int, name: str = "theta") -> ParameterAxis:
    """
    Builds an evenly spaced axis over `[low, high]`.

    Args:
        low: Lower bound, included.
        high: Upper bound, included.
        count: Number of points, an integer >= 2.
        name: Parameter name.

    Returns:
        ParameterAxis with `count` points.

    Raises:
        InvalidGridSpec: If the bounds are not finite reals with `low < high`,
            or `count` is not an integer >= 2.
    """
    if not _is_integral(count):
        raise InvalidGridSpec(f"count must be an integer; got {count!r}.")
    if count < 2:
        raise InvalidGridSpec(f"count must be at least 2; got {count}.")
    try:
        lo = _ensure_real_scalar(low, finite=True)
        hi = _ensure_real_scalar(high, finite=True)
    except (TypeError, ValueError) as e:
        raise InvalidGridSpec(f"Axis {name!r}: bounds must be finite reals ({e}).") from e
    if not lo < hi:
        raise InvalidGridSpec(f"Axis {name!r}: low must be < high; got low={lo}, high={hi}.")
    return ParameterAxis(lo, hi, int(count), name=name)


def product(*axes: ParameterAxis) -> Grid:
    """
    Forms the full combinatorial grid over the given axes.

    The number of cells is the product of the axis counts, so it grows
    exponentially with the number of parameters; bounding it is the caller's
    job.

    Raises:
        InvalidGridSpec: If no axes are given, an argument is not an axis, or
            two axes share a name.
    """
    if not axes:
        raise InvalidGridSpec("product requires at least one axis.")
    for ax in axes:
        if not isinstance(ax, ParameterAxis):
            raise InvalidGridSpec(f"product expects ParameterAxis objects; got {type(ax).__name__}.")
    names = [ax.name for ax in axes]
    dupes = sorted({n for n in names if names.count(n) > 1})
    if dupes:
        raise InvalidGridSpec(f"Duplicate axis names: {dupes}.")

    grid = Grid(tuple(axes))
    logger.debug("Built grid %s with %d cells", grid.shape, grid.size)
    if grid.size > config.LARGE_GRID_WARNING:
        logger.warning(
            "Grid over %s has %d cells; evaluation may be slow or exhaust memory.",
            list(grid.names), grid.size,
        )
    return grid


def as_grid(grid: Union[Grid, ParameterAxis]) -> Grid:
    """Lifts a single axis to a one-dimensional Grid; grids pass through."""
    if isinstance(grid, Grid):
        return grid
    if isinstance(grid, ParameterAxis):
        return Grid((grid,))
    raise TypeError(f"Expected Grid or ParameterAxis; got {type(grid).__name__}.")
