"""reef_metrics

Diversity post-processing for coral-reef population models.

The package exposes:
- coral_diversity / compute_diversity: Shannon diversity (nats) per time step and location
- layout helpers for the time/group/location buffer order
- a swappable index family (shannon, simpson, pielou, cover)
- KernelConfig and its YAML loader
- pandas views and cover range diagnostics
"""

from .config import DEFAULT_CONFIG, KernelConfig, load_kernel_config
from .diversity import compute_diversity, coral_diversity, diversity_tensor
from .errors import BufferTooSmall, DiversityError, InvalidCoverValue, InvalidDimension, NullBuffer
from .frames import diversity_frame, summarize_diversity
from .indices import DIVERSITY_INDICES, pielou_evenness, shannon_index, simpson_index
from .layout import cover_index, flatten_cover, output_index
from .synthetic import make_cover
from .validation import validate_cover_ranges

__version__ = "0.1.0"

__all__ = [
    "coral_diversity",
    "compute_diversity",
    "diversity_tensor",
    "KernelConfig",
    "DEFAULT_CONFIG",
    "load_kernel_config",
    "DIVERSITY_INDICES",
    "shannon_index",
    "simpson_index",
    "pielou_evenness",
    "cover_index",
    "output_index",
    "flatten_cover",
    "diversity_frame",
    "summarize_diversity",
    "validate_cover_ranges",
    "make_cover",
    "DiversityError",
    "InvalidDimension",
    "InvalidCoverValue",
    "NullBuffer",
    "BufferTooSmall",
]
