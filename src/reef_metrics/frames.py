from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

import numpy as np
import pandas as pd

from .layout import as_output_matrix, output_size


def diversity_frame(
    output: Any,
    n_tsteps: int,
    n_locs: int,
    *,
    times: Optional[Sequence[Any]] = None,
    locations: Optional[Sequence[Any]] = None,
) -> pd.DataFrame:
    """Kernel output as a DataFrame: one row per time step, one column per location."""
    flat = np.asarray(output, dtype=float).reshape(-1)
    n = output_size(n_tsteps, n_locs)
    if flat.size < n:
        raise ValueError(f"output holds {flat.size} values, {n} required")
    mat = as_output_matrix(flat, n_tsteps, n_locs)
    index = pd.Index(range(int(n_tsteps)) if times is None else list(times), name="t")
    columns = pd.Index(range(int(n_locs)) if locations is None else list(locations), name="location")
    if len(index) != int(n_tsteps):
        raise ValueError(f"times has {len(index)} labels for {n_tsteps} time steps")
    if len(columns) != int(n_locs):
        raise ValueError(f"locations has {len(columns)} labels for {n_locs} locations")
    return pd.DataFrame(mat.copy(), index=index, columns=columns)


def summarize_diversity(output: Any, n_groups: int) -> Dict[str, float]:
    """Distribution statistics of a diversity buffer, with the ln(n_groups) ceiling."""
    arr = np.asarray(output, dtype=float).reshape(-1)
    ceiling = float(np.log(n_groups)) if int(n_groups) > 0 else 0.0
    if arr.size == 0:
        nan = float("nan")
        return {"n_cells": 0.0, "mean": nan, "std": nan, "p05": nan, "p95": nan,
                "min": nan, "max": nan, "frac_zero": nan, "max_attainable": ceiling}
    return {
        "n_cells": float(arr.size),
        "mean": float(np.mean(arr)),
        "std": float(np.std(arr)),
        "p05": float(np.percentile(arr, 5)),
        "p95": float(np.percentile(arr, 95)),
        "min": float(np.min(arr)),
        "max": float(np.max(arr)),
        "frac_zero": float(np.mean(arr == 0.0)),
        "max_attainable": ceiling,
    }
