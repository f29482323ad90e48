from __future__ import annotations

import logging
from numbers import Integral
from typing import Any, Dict, Tuple

import numpy as np

from .errors import BufferTooSmall, InvalidCoverValue, InvalidDimension, NullBuffer
from .layout import as_cover_tensor, cover_size, unravel_cover_index, unravel_output_index

logger = logging.getLogger(__name__)

INT32_MAX = 2**31 - 1


def check_dimension(name: str, value: Any) -> int:
    if isinstance(value, (bool, np.bool_)) or not isinstance(value, Integral):
        raise InvalidDimension(name, value, "must be an integer")
    v = int(value)
    if v < 0:
        raise InvalidDimension(name, value, "must be non-negative")
    if v > INT32_MAX:
        raise InvalidDimension(name, value, "exceeds the int32 range")
    return v


def validate_dimensions(n_tsteps: Any, n_groups: Any, n_locs: Any) -> Tuple[int, int, int]:
    """Check the tensor shape.

    Zero time steps or locations is a valid empty call. Zero groups is only
    valid when there are no cells to compute.
    """
    t = check_dimension("n_tsteps", n_tsteps)
    g = check_dimension("n_groups", n_groups)
    l = check_dimension("n_locs", n_locs)
    if t * l > 0 and g == 0:
        raise InvalidDimension("n_groups", n_groups, "must be positive when n_tsteps * n_locs > 0")
    return t, g, l


def read_cover(cover: Any, n: int) -> np.ndarray:
    """Return the first ``n`` cover elements as a flat float64 array."""
    if cover is None:
        raise NullBuffer("relative_taxa_cover")
    arr = np.asarray(cover).reshape(-1)
    if arr.size < n:
        raise BufferTooSmall("relative_taxa_cover", n, arr.size)
    return np.asarray(arr[:n], dtype=float)


def check_output(output: Any, n: int) -> None:
    if output is None:
        raise NullBuffer("output_taxa_cover")
    if isinstance(output, np.ndarray):
        if output.ndim != 1:
            raise TypeError(f"output_taxa_cover must be one-dimensional, got shape {output.shape}")
        if not output.flags.writeable:
            raise TypeError("output_taxa_cover is read-only")
        if not np.issubdtype(output.dtype, np.floating):
            raise TypeError(f"output_taxa_cover must hold reals, got dtype {output.dtype}")
    size = len(output)
    if size < n:
        raise BufferTooSmall("output_taxa_cover", n, size)


def _element_reason(value: float) -> str:
    if not np.isfinite(value):
        return "non-finite cover value"
    if value < 0.0:
        return "negative cover value"
    return "cover value above 1 + delta"


def validate_cover(flat: np.ndarray, n_tsteps: int, n_groups: int, n_locs: int, *, delta: float = 1e-9) -> None:
    """Raise InvalidCoverValue for the first violation in buffer order.

    Elements are checked first (negative, non-finite, above ``1 + delta``),
    then per-cell sums in output order.
    """
    hi = 1.0 + float(delta)
    with np.errstate(invalid="ignore"):
        bad = ~np.isfinite(flat) | (flat < 0.0) | (flat > hi)
    if np.any(bad):
        idx = int(np.flatnonzero(bad)[0])
        t, g, l = unravel_cover_index(idx, n_groups, n_locs)
        value = float(flat[idx])
        logger.warning("Rejecting cover at t=%d g=%d l=%d (index %d): %r", t, g, l, idx, value)
        raise InvalidCoverValue(_element_reason(value), t=t, g=g, l=l, index=idx, value=value)

    sums = np.sum(as_cover_tensor(flat, n_tsteps, n_groups, n_locs), axis=1).reshape(-1)
    over = sums > hi
    if np.any(over):
        idx = int(np.flatnonzero(over)[0])
        t, l = unravel_output_index(idx, n_locs)
        value = float(sums[idx])
        logger.warning("Rejecting cell t=%d l=%d: cover sum %r above 1 + delta", t, l, value)
        raise InvalidCoverValue("cell cover sum above 1 + delta", t=t, l=l, index=idx, value=value)


def validate_cover_ranges(
    cover: Any,
    n_tsteps: int,
    n_groups: int,
    n_locs: int,
    *,
    delta: float = 1e-9,
) -> Dict[str, float]:
    """Basic measurability checks on a cover buffer, without raising on values."""
    t, g, l = validate_dimensions(n_tsteps, n_groups, n_locs)
    n = cover_size(t, g, l)
    if n == 0:
        return {
            "n_elements": 0.0,
            "negative_rate": 0.0,
            "non_finite_rate": 0.0,
            "above_range_rate": 0.0,
            "overfull_cell_rate": 0.0,
            "min": float("nan"),
            "max": float("nan"),
            "cell_sum_max": float("nan"),
        }
    flat = read_cover(cover, n)
    hi = 1.0 + float(delta)
    finite = np.isfinite(flat)
    with np.errstate(invalid="ignore"):
        sums = np.sum(as_cover_tensor(flat, t, g, l), axis=1)
    vals = flat[finite]
    return {
        "n_elements": float(n),
        "negative_rate": float(np.mean(finite & (flat < 0.0))),
        "non_finite_rate": float(np.mean(~finite)),
        "above_range_rate": float(np.mean(finite & (flat > hi))),
        "overfull_cell_rate": float(np.mean(np.isfinite(sums) & (sums > hi))),
        "min": float(np.min(vals)) if vals.size else float("nan"),
        "max": float(np.max(vals)) if vals.size else float("nan"),
        "cell_sum_max": float(np.nanmax(sums)) if np.any(np.isfinite(sums)) else float("nan"),
    }
