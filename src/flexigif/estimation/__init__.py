"""Size, time and timeout estimation."""

from flexigif.estimation.cache import EstimateCache, make_cache_key
from flexigif.estimation.engine_estimates import (
    estimate_gif_output,
    estimate_webm_output,
    webm_compression_ratio,
)
from flexigif.estimation.model import (
    EstimationModel,
    gif_size_bytes,
    webm_size_bytes,
)

__all__ = [
    "EstimateCache",
    "EstimationModel",
    "estimate_gif_output",
    "estimate_webm_output",
    "gif_size_bytes",
    "make_cache_key",
    "webm_compression_ratio",
    "webm_size_bytes",
]
