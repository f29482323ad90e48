"""Diversity index family.

Every index maps a cover block of shape ``(n_t, n_groups, n_locs)`` to a
``(n_t, n_locs)`` block, reducing over the group axis. A cell whose living
cover ``S = sum_g p_g`` is ``<= eps`` maps to ``0.0`` for every index.
"""

from __future__ import annotations

from typing import Callable, Dict, Tuple

import numpy as np
from scipy.special import entr

IndexFn = Callable[[np.ndarray, float], np.ndarray]


def _proportions(cover: np.ndarray, eps: float) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Return ``(q, total, living)`` with ``q = p / S`` on living cells, 0 elsewhere."""
    cover = np.asarray(cover, dtype=float)
    total = np.sum(cover, axis=1)
    living = total > float(eps)
    denom = np.where(living, total, 1.0)
    q = cover / denom[:, None, :]
    q[np.broadcast_to(~living[:, None, :], q.shape)] = 0.0
    return q, total, living


def shannon_index(cover: np.ndarray, eps: float = 1e-12) -> np.ndarray:
    """Shannon entropy ``H = -sum q ln q`` in nats.

    ``entr(0) == 0`` so empty groups contribute nothing instead of NaN.
    """
    q, _, living = _proportions(cover, eps)
    h = np.sum(entr(q), axis=1)
    return np.where(living, h, 0.0)


def simpson_index(cover: np.ndarray, eps: float = 1e-12) -> np.ndarray:
    """Gini-Simpson ``1 - sum q^2``; ``1 - 1/k`` for k even groups."""
    q, _, living = _proportions(cover, eps)
    d = 1.0 - np.sum(q * q, axis=1)
    return np.where(living, d, 0.0)


def pielou_evenness(cover: np.ndarray, eps: float = 1e-12) -> np.ndarray:
    """Shannon evenness ``H / ln(n_groups)`` in ``[0, 1]``."""
    n_groups = int(np.shape(cover)[1])
    h = shannon_index(cover, eps)
    if n_groups <= 1:
        return np.zeros_like(h)
    return h / float(np.log(n_groups))


def living_cover(cover: np.ndarray, eps: float = 1e-12) -> np.ndarray:
    """Raw passthrough: total living cover ``S`` per cell."""
    _, total, living = _proportions(cover, eps)
    return np.where(living, total, 0.0)


DIVERSITY_INDICES: Dict[str, IndexFn] = {
    "shannon": shannon_index,
    "simpson": simpson_index,
    "pielou": pielou_evenness,
    "cover": living_cover,
}


def get_index(name: str) -> IndexFn:
    try:
        return DIVERSITY_INDICES[name]
    except KeyError:
        raise ValueError(f"Unknown diversity index: {name!r} (expected one of {sorted(DIVERSITY_INDICES)})") from None
