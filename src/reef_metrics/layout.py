"""Buffer linearization shared by the kernel and its callers.

Input cover is time-major, then group, then location::

    index = t * n_groups * n_locs + g * n_locs + l

Output diversity is time-major, then location::

    index = t * n_locs + l

Both are plain C order for shapes ``(n_tsteps, n_groups, n_locs)`` and
``(n_tsteps, n_locs)``, so numpy reshapes are views, never copies.
"""

from __future__ import annotations

from typing import Tuple

import numpy as np


def cover_size(n_tsteps: int, n_groups: int, n_locs: int) -> int:
    return int(n_tsteps) * int(n_groups) * int(n_locs)


def output_size(n_tsteps: int, n_locs: int) -> int:
    return int(n_tsteps) * int(n_locs)


def cover_index(t: int, g: int, l: int, n_groups: int, n_locs: int) -> int:
    return int(t) * int(n_groups) * int(n_locs) + int(g) * int(n_locs) + int(l)


def output_index(t: int, l: int, n_locs: int) -> int:
    return int(t) * int(n_locs) + int(l)


def unravel_cover_index(index: int, n_groups: int, n_locs: int) -> Tuple[int, int, int]:
    """Inverse of :func:`cover_index`: raw input index -> ``(t, g, l)``."""
    plane = int(n_groups) * int(n_locs)
    t, rem = divmod(int(index), plane)
    g, l = divmod(rem, int(n_locs))
    return t, g, l


def unravel_output_index(index: int, n_locs: int) -> Tuple[int, int]:
    t, l = divmod(int(index), int(n_locs))
    return t, l


def as_cover_tensor(flat: np.ndarray, n_tsteps: int, n_groups: int, n_locs: int) -> np.ndarray:
    """View the first ``n_tsteps*n_groups*n_locs`` elements as ``(t, g, l)``."""
    arr = np.asarray(flat).reshape(-1)
    n = cover_size(n_tsteps, n_groups, n_locs)
    return arr[:n].reshape(int(n_tsteps), int(n_groups), int(n_locs))


def as_output_matrix(flat: np.ndarray, n_tsteps: int, n_locs: int) -> np.ndarray:
    arr = np.asarray(flat).reshape(-1)
    n = output_size(n_tsteps, n_locs)
    return arr[:n].reshape(int(n_tsteps), int(n_locs))


def flatten_cover(cover_3d: np.ndarray) -> np.ndarray:
    """Flatten a ``(n_tsteps, n_groups, n_locs)`` array into kernel input order."""
    arr = np.asarray(cover_3d, dtype=float)
    if arr.ndim != 3:
        raise ValueError(f"cover tensor must be 3-D (t, g, l), got shape {arr.shape}")
    return np.ascontiguousarray(arr).reshape(-1)
