"""Per-cell diversity kernel.

For each ``(t, l)`` cell the kernel reads the ``n_groups`` cover fractions
``p_g = cover[t*n_groups*n_locs + g*n_locs + l]`` and writes one index value
to ``output[t*n_locs + l]``. With the default Shannon index:

- ``S = sum_g p_g <= eps``: bare substrate, the index is 0.0
- otherwise ``q_g = p_g / S`` and ``H = -sum_{q_g > 0} q_g ln q_g`` (nats)

The whole call is validated and computed into a private array before a
single commit into ``output``; a rejected call writes nothing.
"""

from __future__ import annotations

import array
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, List, Optional, Tuple

import numpy as np

from .config import DEFAULT_CONFIG, KernelConfig
from .indices import get_index
from .layout import as_cover_tensor, cover_size, flatten_cover, output_size
from .validation import check_output, read_cover, validate_cover, validate_dimensions

logger = logging.getLogger(__name__)


def partition_time_steps(n_tsteps: int, n_parts: int) -> List[Tuple[int, int]]:
    """Split ``[0, n_tsteps)`` into at most ``n_parts`` contiguous, non-empty ranges."""
    n_tsteps = int(n_tsteps)
    n_parts = max(1, min(int(n_parts), n_tsteps))
    if n_tsteps == 0:
        return []
    edges = np.linspace(0, n_tsteps, n_parts + 1).round().astype(int)
    return [(int(a), int(b)) for a, b in zip(edges[:-1], edges[1:]) if b > a]


def _evaluate(tensor: np.ndarray, cfg: KernelConfig) -> np.ndarray:
    index_fn = get_index(cfg.index)
    eps = float(cfg.eps)
    n_tsteps, _, n_locs = tensor.shape
    ranges = partition_time_steps(n_tsteps, cfg.n_workers)
    if len(ranges) <= 1:
        return index_fn(tensor, eps)

    # Each range owns disjoint rows of `result`; the per-cell group reduction
    # is the same as in the serial path.
    result = np.empty((n_tsteps, n_locs), dtype=float)

    def run(start: int, stop: int) -> None:
        result[start:stop] = index_fn(tensor[start:stop], eps)

    with ThreadPoolExecutor(max_workers=len(ranges)) as pool:
        futures = [pool.submit(run, a, b) for a, b in ranges]
        for f in futures:
            f.result()
    return result


def _commit(output: Any, values: np.ndarray) -> None:
    n = values.size
    if isinstance(output, np.ndarray):
        output[:n] = values
    elif isinstance(output, array.array):
        output[:n] = array.array(output.typecode, values.tolist())
    else:
        output[:n] = values.tolist()


def compute_diversity(
    n_tsteps: int,
    n_groups: int,
    n_locs: int,
    cover: Any,
    output: Any,
    *,
    config: Optional[KernelConfig] = None,
) -> None:
    """Write one diversity value per ``(t, l)`` cell into ``output``.

    ``cover`` holds at least ``n_tsteps*n_groups*n_locs`` values in
    time/group/location order; ``output`` is a caller-owned 1-D buffer with at
    least ``n_tsteps*n_locs`` slots. Only those leading elements are read or
    written. Raises a DiversityError subclass on invalid input, in which case
    ``output`` is left untouched.
    """
    cfg = DEFAULT_CONFIG if config is None else config
    cfg.validate()
    t, g, l = validate_dimensions(n_tsteps, n_groups, n_locs)
    n_out = output_size(t, l)
    if n_out == 0:
        logger.debug("Empty diversity call (n_tsteps=%d, n_locs=%d); nothing written", t, l)
        return

    flat = read_cover(cover, cover_size(t, g, l))
    check_output(output, n_out)
    if cfg.validate_values:
        validate_cover(flat, t, g, l, delta=cfg.delta)

    logger.debug(
        "Computing %s index for %d cells (n_tsteps=%d, n_groups=%d, n_locs=%d, workers=%d)",
        cfg.index, n_out, t, g, l, cfg.n_workers,
    )
    result = _evaluate(as_cover_tensor(flat, t, g, l), cfg)
    _commit(output, result.reshape(-1))


def coral_diversity(
    n_tsteps: int,
    n_groups: int,
    n_locs: int,
    relative_taxa_cover: Any,
    output_taxa_cover: Any,
) -> None:
    """Shannon diversity (nats) of relative taxa cover per time step and location."""
    compute_diversity(n_tsteps, n_groups, n_locs, relative_taxa_cover, output_taxa_cover)


def diversity_tensor(cover_3d: Any, *, config: Optional[KernelConfig] = None) -> np.ndarray:
    """Diversity of a ``(n_tsteps, n_groups, n_locs)`` array as ``(n_tsteps, n_locs)``."""
    flat = flatten_cover(cover_3d)
    n_tsteps, n_groups, n_locs = np.shape(cover_3d)
    out = np.zeros(output_size(n_tsteps, n_locs), dtype=float)
    compute_diversity(n_tsteps, n_groups, n_locs, flat, out, config=config)
    return out.reshape(n_tsteps, n_locs)
