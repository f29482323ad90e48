from __future__ import annotations

import numpy as np

from .layout import flatten_cover


def make_cover(
    n_tsteps: int,
    n_groups: int,
    n_locs: int,
    *,
    seed: int = 42,
    bare_fraction: float = 0.2,
    concentration: float = 1.0,
) -> np.ndarray:
    """Seeded relative cover in kernel input order.

    Each cell draws group shares from a symmetric Dirichlet(concentration) and
    scales them by a living-cover fraction uniform in [1 - bare_fraction, 1],
    so every cell sum stays within [0, 1].
    """
    if not (0.0 <= bare_fraction <= 1.0):
        raise ValueError("bare_fraction must be in [0, 1]")
    if concentration <= 0.0:
        raise ValueError("concentration must be positive")
    rng = np.random.default_rng(seed)
    shares = rng.dirichlet(np.full(int(n_groups), float(concentration)), size=(int(n_tsteps), int(n_locs)))
    living = rng.uniform(1.0 - float(bare_fraction), 1.0, size=(int(n_tsteps), int(n_locs), 1))
    # (t, l, g) -> (t, g, l)
    cover = np.transpose(shares * living, (0, 2, 1))
    return np.clip(flatten_cover(cover), 0.0, 1.0)
