"""
Predictor Engine

Bimodal, gshare and hybrid (chooser-arbitrated bimodal + gshare) branch
prediction over 2-bit saturating counter tables.

Each call to a predict method makes one prediction for a retired branch,
scores it against the actual outcome and trains the tables, in this order:

    predictions++ -> index -> read counter(s) -> predict
      -> mispredictions++ on mismatch -> train counter(s)
      -> (gshare, hybrid) shift global history
      -> (hybrid) chooser credit assignment

Outcomes are True (taken), False (not taken) or None for a trace token that
was not recognized. A None outcome still counts as a prediction but trains
nothing and is never scored.
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, Optional

import numpy as np

from ..components.history import GlobalHistoryRegister
from ..components.tables import IndexingScheme, SaturatingCounterTable
from .base import PredictionResult, PredictorStats, misprediction_percentage
from .config import PredictorConfig, Variant


logger = logging.getLogger(__name__)


# Counter initial values
PREDICTOR_INIT = 2   # Weakly taken
CHOOSER_INIT = 1     # Weakly prefers bimodal


@dataclass(frozen=True)
class EngineSnapshot:
    """
    Final (or intermediate) engine state for reporting.

    Tables are read-only copies in reporting order.
    """
    variant: Variant
    predictions_made: int
    mispredictions: int
    history: int
    tables: Dict[str, np.ndarray] = field(default_factory=dict)

    @property
    def misprediction_rate(self) -> float:
        """Misprediction rate as a percentage."""
        return misprediction_percentage(self.mispredictions, self.predictions_made)


class PredictorEngine:
    """
    Branch predictor state machine.

    Owns the counter tables, the global history register and the
    measurement counters for one run over one trace.
    """

    def __init__(self, config: PredictorConfig):
        """
        Initialize the engine.

        Args:
            config: Validated predictor configuration
        """
        self.config = config
        self.variant = config.variant
        self.stats = PredictorStats()

        self.bimodal_table: Optional[SaturatingCounterTable] = None
        self.gshare_table: Optional[SaturatingCounterTable] = None
        self.chooser_table: Optional[SaturatingCounterTable] = None

        if config.uses_bimodal:
            self.bimodal_table = SaturatingCounterTable(config.M2, PREDICTOR_INIT)
        if config.uses_gshare:
            self.gshare_table = SaturatingCounterTable(config.M1, PREDICTOR_INIT)
        if config.uses_chooser:
            self.chooser_table = SaturatingCounterTable(config.K, CHOOSER_INIT)

        self.history = GlobalHistoryRegister(config.N if config.uses_gshare else 0)

        self._dispatch: Dict[Variant, Callable[[int, Optional[bool]], PredictionResult]] = {
            Variant.BIMODAL: self.predict_bimodal,
            Variant.GSHARE: self.predict_gshare,
            Variant.HYBRID: self.predict_hybrid,
        }
        self._predict = self._dispatch[self.variant]

        logger.debug("Built %s engine: %s", self.variant.value, self.get_hardware_cost())

    @property
    def predictions_made(self) -> int:
        return self.stats.predictions

    @property
    def mispredictions(self) -> int:
        return self.stats.mispredictions

    def predict_and_update(self, pc: int, taken: Optional[bool]) -> PredictionResult:
        """
        Predict the branch at pc with the configured variant and train on
        the actual outcome.
        """
        return self._predict(pc, taken)

    def predict_bimodal(self, pc: int, taken: Optional[bool]) -> PredictionResult:
        idx = IndexingScheme.bimodal(pc, self.config.M2)
        result = self._lookup(self.bimodal_table, idx, "Bimodal", taken)

        if taken is not None:
            self.bimodal_table.train(idx, taken)

        self.stats.record_prediction(result)
        return result

    def predict_gshare(self, pc: int, taken: Optional[bool]) -> PredictionResult:
        idx = IndexingScheme.gshare(pc, self.history.value,
                                    self.config.M1, self.config.N)
        result = self._lookup(self.gshare_table, idx, "GShare", taken)

        if taken is not None:
            self.gshare_table.train(idx, taken)

        self._update_history(taken)

        self.stats.record_prediction(result)
        return result

    def predict_hybrid(self, pc: int, taken: Optional[bool]) -> PredictionResult:
        # Both sub-predictions are read before either table is trained
        gshare_idx = IndexingScheme.gshare(pc, self.history.value,
                                           self.config.M1, self.config.N)
        gshare_pred = self._lookup(self.gshare_table, gshare_idx, "GShare", taken)

        bimodal_idx = IndexingScheme.bimodal(pc, self.config.M2)
        bimodal_pred = self._lookup(self.bimodal_table, bimodal_idx, "Bimodal", taken)

        chooser_idx = IndexingScheme.chooser(pc, self.config.K)
        use_gshare = self.chooser_table.predict(chooser_idx)

        if use_gshare:
            self.stats.gshare_selections += 1
            result, table, idx = gshare_pred, self.gshare_table, gshare_idx
        else:
            self.stats.bimodal_selections += 1
            result, table, idx = bimodal_pred, self.bimodal_table, bimodal_idx

        if taken is not None:
            table.train(idx, taken)

        # History tracks every branch, whichever predictor was selected
        self._update_history(taken)

        if taken is not None:
            if gshare_pred.correct and not bimodal_pred.correct:
                self.chooser_table.increment(chooser_idx)
            elif bimodal_pred.correct and not gshare_pred.correct:
                self.chooser_table.decrement(chooser_idx)

        self.stats.record_prediction(result)
        return result

    def _lookup(self, table: SaturatingCounterTable, idx: int, name: str,
                taken: Optional[bool]) -> PredictionResult:
        counter = table.read(idx)
        prediction = counter >= 2
        correct = None if taken is None else (prediction == taken)

        return PredictionResult(
            prediction=prediction,
            predictor_used=name,
            index=idx,
            counter=counter,
            correct=correct
        )

    def _update_history(self, taken: Optional[bool]) -> None:
        # An unrecognized outcome shifts in a not-taken bit
        self.history.update(bool(taken))

    def snapshot(self) -> EngineSnapshot:
        """Read-only view of the counters and every populated table."""
        tables = {}
        if self.chooser_table is not None:
            tables['chooser'] = self.chooser_table.values(copy=True)
        if self.gshare_table is not None:
            tables['gshare'] = self.gshare_table.values(copy=True)
        if self.bimodal_table is not None:
            tables['bimodal'] = self.bimodal_table.values(copy=True)

        return EngineSnapshot(
            variant=self.variant,
            predictions_made=self.stats.predictions,
            mispredictions=self.stats.mispredictions,
            history=self.history.value,
            tables=tables
        )

    def reset(self) -> None:
        """Return every table, the history and the counters to their initial state."""
        for table in (self.bimodal_table, self.gshare_table, self.chooser_table):
            if table is not None:
                table.reset()
        self.history.reset()
        self.stats = PredictorStats()

    def get_hardware_cost(self) -> dict:
        """Estimate hardware implementation cost."""
        tables = [t for t in (self.bimodal_table, self.gshare_table,
                              self.chooser_table) if t is not None]
        table_bits = sum(t.get_storage_bits() for t in tables)
        total_bits = table_bits + len(self.history)

        return {
            'table_entries': sum(len(t) for t in tables),
            'bits_per_entry': 2,
            'history_bits': len(self.history),
            'total_bits': total_bits,
            'total_bytes': -(-total_bits // 8),    # rounded up
            'total_kb': total_bits / 8 / 1024
        }
