# array_backend/utils.py
"""
Utility functions for array canonicalization used by gridbayes.

All helpers accept anything numpy can convert and return numpy arrays or
Python scalars. Functions that return arrays accept `copy: bool = True`; when
`copy=True` the returned array is guaranteed to be a different object from
the input, so callers may freeze or mutate it without touching user data.
"""

from __future__ import annotations

import numbers

import numpy as np
from typing import Any

from ..custom_types import Array, ArrayLike


def _as_array(x: Any, dtype: Any = None) -> Array:
    try:
        return np.asarray(x, dtype=dtype)
    except (TypeError, ValueError) as e:
        raise TypeError(
            f"Could not convert input to array.\n"
            f"Input type: {type(x).__name__}\n"
            f"Input value: {repr(x)}\n"
            f"Original error: {e}"
        ) from e


def _is_numpy_scalar(x: Any) -> bool:
    """Return true if object is a numpy generic or Python scalar"""
    return np.isscalar(x) or isinstance(x, np.generic)


def _is_integral(x: Any) -> bool:
    """True for Python/numpy integers, excluding bool."""
    return isinstance(x, numbers.Integral) and not isinstance(x, (bool, np.bool_))


def _ensure_real_scalar(x: Any, *, finite: bool = False) -> float:
    """
    Return a Python float for inputs that contain a single real value.

    Accepts:
      - Python scalars (int, float)
      - numpy scalar types (np.float64(...), np.int32(...))
      - arrays holding exactly one element

    Raises:
      ValueError if input contains more than one element, is complex, or
      (with finite=True) is NaN or infinite.
    """
    if _is_numpy_scalar(x):
        if np.iscomplexobj(x):
            raise ValueError(f"_ensure_real_scalar: input is complex-valued: {x!r}")
        value = float(x)
    else:
        arr = _as_array(x)
        if arr.size != 1:
            raise ValueError(f"_ensure_real_scalar: input must contain exactly one element; got size={arr.size}, shape={arr.shape}")
        if np.iscomplexobj(arr):
            raise ValueError(f"_ensure_real_scalar: input is complex-valued (shape={arr.shape}).")
        value = float(arr.reshape(()))

    if finite and not np.isfinite(value):
        raise ValueError(f"_ensure_real_scalar: input must be finite; got {value!r}")
    return value


def _ensure_vector(x: ArrayLike, *, length: int | None = None,
                   dtype: Any = float, copy: bool = True) -> Array:
    """
    Ensure input is returned as a 1-D vector of shape (n,).

    Accepts:
      - 0D scalar -> (1,)
      - 1D arrays -> (n,)
      - 2D arrays shaped (n,1) or (1,n) -> (n,)

    Raises:
      ValueError for incompatible shapes (ndim > 2 or 2D with both dims > 1)
      or a length mismatch.
    """
    arr = _as_array(x, dtype=dtype)

    if arr.ndim == 0:
        out = arr.reshape((1,))
    elif arr.ndim == 1:
        out = arr
    elif arr.ndim == 2:
        num_rows, num_cols = arr.shape
        if num_rows == 1 or num_cols == 1:
            out = np.ravel(arr)
        else:
            raise ValueError(f"_ensure_vector: 2D input has shape {arr.shape}, which is not a vector (expected (n,1) or (1,n)).")
    else:
        raise ValueError(f"_ensure_vector: input has too many dimensions (ndim={arr.ndim}).")

    if length is not None and out.size != length:
        raise ValueError(f"_ensure_vector: required length {length}. Got {out.size}.")

    return out.copy() if copy else out


def _ensure_finite_vector(x: ArrayLike, *, copy: bool = True) -> Array:
    """`_ensure_vector` that also rejects NaN and infinite entries."""
    out = _ensure_vector(x, copy=copy)
    if not np.all(np.isfinite(out)):
        bad = int(np.count_nonzero(~np.isfinite(out)))
        raise ValueError(f"_ensure_finite_vector: input contains {bad} non-finite value(s).")
    return out


def _ensure_batch_vector(x: ArrayLike, length: int | None = None,
                         *, copy: bool = True) -> Array:
    """Ensure `x` is a batch of vectors and return shape (B, d).

    Examples:
      - Input shape () -> returned shape (1, 1)
      - Input shape (B,) -> returned shape (B, 1), one scalar value per row
      - Input shape (B, d) -> returned shape (B, d)
      - other shapes -> raises error

    Note that, unlike `_ensure_vector`, a 1-D input is read as a batch of
    scalars, which is how draws of a single parameter arrive.
    """
    arr = _as_array(x, dtype=float)

    if arr.ndim == 0:
        arr = arr.reshape((1, 1))
    elif arr.ndim == 1:
        arr = arr.reshape((-1, 1))
    elif arr.ndim != 2:
        raise ValueError(
            f"_ensure_batch_vector: Array of shape {arr.shape} is not a batch vector. Require shape (n_batch, d)."
        )

    if length is not None and arr.shape[1] != length:
        raise ValueError(f"_ensure_batch_vector: Required vector length {length}. Got {arr.shape[1]}.")

    return arr.copy() if copy else arr


def _broadcast_to_size(values: ArrayLike, size: int, *, what: str = "values") -> Array:
    """Broadcast scalar or (size,)-shaped output to a float vector of shape (size,)."""
    arr = _as_array(values, dtype=float)
    if arr.ndim > 1:
        arr = np.squeeze(arr)
    try:
        return np.array(np.broadcast_to(arr, (size,)), dtype=float)
    except ValueError as e:
        raise ValueError(f"{what} of shape {arr.shape} cannot be broadcast to ({size},).") from e


def _readonly(x: Array) -> Array:
    """Return `x` with the writeable flag cleared."""
    x.flags.writeable = False
    return x
