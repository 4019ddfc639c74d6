from .engine import generate, is_backend_loading, is_backend_ready, start_backend_load
from .models import ColorJourneyConfig, DynamicsConfig, GenerateResult, VariationConfig

__all__ = [
    "ColorJourneyConfig",
    "DynamicsConfig",
    "GenerateResult",
    "VariationConfig",
    "generate",
    "is_backend_loading",
    "is_backend_ready",
    "start_backend_load",
]
