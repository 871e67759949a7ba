# custom_types.py
"""
Type aliases shared across gridbayes.

We generally follow the conventions:
- Annotate function input with `ArrayLike`
- Annotate function output with `Array`
- Random number sources are `PRNG` (a numpy Generator)
"""
from __future__ import annotations
from typing import Any, Callable, Mapping, TypeAlias, Union
from numpy.random import Generator as NumpyRNG

from numpy.typing import (
    NDArray as NumpyArray,
    ArrayLike as NumpyArrayLike
)

from numpy import (
    floating as NumpyFloating,
    number as NumpyNumber
)

Array = NumpyArray
ArrayLike: TypeAlias = NumpyArrayLike
Float: TypeAlias = NumpyFloating
Number: TypeAlias = NumpyNumber
PRNG: TypeAlias = NumpyRNG

# Anything accepted where a random source is expected: a Generator, a seed, or None.
SeedLike: TypeAlias = Union[NumpyRNG, int, None]

# Grid parameters handed to density functions: axis name -> (size,) array.
Params: TypeAlias = Mapping[str, NumpyArray]
ObservedData: TypeAlias = Any
DensityFn: TypeAlias = Callable[..., NumpyArrayLike]
