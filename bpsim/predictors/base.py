"""
Predictor Base Types

Prediction results, statistics and error types shared by the predictor
engine and its callers.
"""

from dataclasses import dataclass
from typing import Optional


class ConfigurationError(ValueError):
    """Invalid predictor name or parameters."""


class DivisionUndefinedError(ZeroDivisionError):
    """A rate was requested before any prediction was made."""


def misprediction_percentage(mispredictions: int, predictions: int) -> float:
    """Mispredictions as a percentage of predictions."""
    if predictions == 0:
        raise DivisionUndefinedError(
            "misprediction rate is undefined before any prediction"
        )
    return 100.0 * mispredictions / predictions


@dataclass
class PredictionResult:
    """Result of a single predict-and-update call."""
    prediction: bool          # True = Taken, False = Not Taken
    predictor_used: str       # Which table made the decision
    index: int                # Index into the deciding table
    counter: int              # Counter value the prediction was read from
    correct: Optional[bool] = None  # None when the outcome was unrecognized


class PredictorStats:
    """Measurement counters for a predictor run."""

    def __init__(self):
        self.predictions = 0
        self.mispredictions = 0
        self.unrecognized = 0

        # Hybrid selection tracking
        self.gshare_selections = 0
        self.bimodal_selections = 0

    def record_prediction(self, result: PredictionResult) -> None:
        """Record a prediction result."""
        self.predictions += 1

        if result.correct is None:
            self.unrecognized += 1
        elif not result.correct:
            self.mispredictions += 1

    @property
    def misprediction_rate(self) -> float:
        """Misprediction rate as a percentage."""
        return misprediction_percentage(self.mispredictions, self.predictions)
