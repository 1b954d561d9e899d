# Predictors Package
from .base import (
    ConfigurationError,
    DivisionUndefinedError,
    PredictionResult,
    PredictorStats,
)
from .config import MAX_INDEX_BITS, PredictorConfig, Variant
from .engine import EngineSnapshot, PredictorEngine


__all__ = [
    'ConfigurationError',
    'DivisionUndefinedError',
    'PredictionResult',
    'PredictorStats',
    'MAX_INDEX_BITS',
    'PredictorConfig',
    'Variant',
    'EngineSnapshot',
    'PredictorEngine',
]
