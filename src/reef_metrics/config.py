from __future__ import annotations

from dataclasses import asdict, dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Mapping

import yaml

from .indices import DIVERSITY_INDICES


@dataclass(frozen=True)
class KernelConfig:
    """Numerical policy of the diversity kernel.

    eps: living cover at or below this is treated as bare substrate (index 0.0)
    delta: round-off slack above 1.0 accepted for elements and cell sums
    index: name in DIVERSITY_INDICES; "shannon" for coral_diversity
    validate_values: scan cover values before computing; when False the
        caller upholds the value preconditions (dimensions and buffers are
        always checked)
    n_workers: threads over contiguous time-step ranges; 1 runs serially
    """

    eps: float = 1e-12
    delta: float = 1e-9
    index: str = "shannon"
    validate_values: bool = True
    n_workers: int = 1

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def validate(self) -> None:
        if not (self.eps >= 0.0):
            raise ValueError("eps must be >= 0")
        if not (self.delta >= 0.0):
            raise ValueError("delta must be >= 0")
        if self.index not in DIVERSITY_INDICES:
            raise ValueError(f"index must be one of {sorted(DIVERSITY_INDICES)}")
        if int(self.n_workers) < 1:
            raise ValueError("n_workers must be >= 1")


DEFAULT_CONFIG = KernelConfig()


def config_from_mapping(raw: Mapping[str, Any], *, base: KernelConfig = DEFAULT_CONFIG) -> KernelConfig:
    known = {f.name for f in fields(KernelConfig)}
    unknown = sorted(set(raw) - known)
    if unknown:
        raise ValueError(f"Unknown kernel config keys: {unknown}")
    kwargs: Dict[str, Any] = {}
    if "eps" in raw:
        kwargs["eps"] = float(raw["eps"])
    if "delta" in raw:
        kwargs["delta"] = float(raw["delta"])
    if "index" in raw:
        kwargs["index"] = str(raw["index"])
    if "validate_values" in raw:
        kwargs["validate_values"] = bool(raw["validate_values"])
    if "n_workers" in raw:
        kwargs["n_workers"] = int(raw["n_workers"])
    cfg = replace(base, **kwargs)
    cfg.validate()
    return cfg


def load_kernel_config(yaml_path: str | Path | None = None) -> KernelConfig:
    """Load a KernelConfig from YAML, falling back to defaults.

    The file may hold the keys at top level or under a ``kernel:`` section.
    """
    if yaml_path is None:
        return DEFAULT_CONFIG
    p = Path(yaml_path)
    if not p.exists():
        return DEFAULT_CONFIG

    raw = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    if not isinstance(raw, Mapping):
        raise ValueError(f"Kernel config must be a mapping: {p}")
    section = raw.get("kernel", raw)
    if not isinstance(section, Mapping):
        raise ValueError(f"'kernel' section must be a mapping: {p}")
    return config_from_mapping(section)
