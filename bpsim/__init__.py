# Branch Predictor Simulator Package
"""
bpsim: trace-driven branch predictor simulator

Replays (address, outcome) branch traces through one of:
- Bimodal: per-address 2-bit saturating counters
- GShare: counters indexed by PC bits XORed with global history
- Hybrid: a chooser table arbitrating between bimodal and gshare
"""

from .predictors import (
    ConfigurationError,
    DivisionUndefinedError,
    EngineSnapshot,
    PredictorConfig,
    PredictorEngine,
    Variant,
)
from .trace import TraceFormatError

__version__ = "1.0.0"

__all__ = [
    'ConfigurationError',
    'DivisionUndefinedError',
    'EngineSnapshot',
    'PredictorConfig',
    'PredictorEngine',
    'Variant',
    'TraceFormatError',
]
