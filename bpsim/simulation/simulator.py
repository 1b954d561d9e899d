"""
Branch Prediction Simulator

Replays a branch trace through a predictor engine.
"""

import itertools
import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional, Union

from tqdm import tqdm

from ..predictors.base import ConfigurationError
from ..predictors.config import PredictorConfig
from ..predictors.engine import PredictorEngine
from ..trace.formats import BranchRecord, SimpleTextFormat
from ..trace.parser import BranchTrace, TraceParser
from .metrics import SimulationResults


logger = logging.getLogger(__name__)


@dataclass
class SimulationConfig:
    """Configuration for simulation run."""
    max_branches: Optional[int] = None
    strict_outcomes: bool = False
    verbose: bool = False
    log_interval: int = 100000

    def __post_init__(self):
        if self.max_branches is not None and not _is_count(self.max_branches, 0):
            raise ConfigurationError(
                f"max_branches must be a non-negative integer, got {self.max_branches!r}"
            )
        if not _is_count(self.log_interval, 1):
            raise ConfigurationError(
                f"log_interval must be a positive integer, got {self.log_interval!r}"
            )


def _is_count(value, minimum: int) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= minimum


class BranchSimulator:
    """
    Branch Prediction Simulator.

    Trace-driven: each record is predicted and trained in file order,
    since the history register and counters carry state forward.
    """

    def __init__(self, predictor_config: PredictorConfig,
                 config: Union[SimulationConfig, dict, None] = None):
        """
        Initialize simulator.

        Args:
            predictor_config: Validated predictor configuration
            config: Simulation configuration
        """
        if config is None:
            self.config = SimulationConfig()
        elif isinstance(config, dict):
            self.config = SimulationConfig(**config)
        else:
            self.config = config

        self.predictor_config = predictor_config
        self.engine = PredictorEngine(predictor_config)

        self.parser = TraceParser(SimpleTextFormat(strict=self.config.strict_outcomes))

    def run(self, trace_path: Union[str, Path]) -> SimulationResults:
        """
        Run simulation on a trace file.

        Args:
            trace_path: Path to trace file

        Returns:
            SimulationResults for the run

        Raises:
            FileNotFoundError: The trace file does not exist
            TraceFormatError: A malformed trace line was read
        """
        trace_path = Path(trace_path)
        if not trace_path.exists():
            raise FileNotFoundError(f"Unable to open file {trace_path}")

        trace_info = self.parser.get_trace_info(trace_path)
        logger.info("Simulating %s predictor %s on %s (%s, %d bytes)",
                    self.predictor_config.name,
                    self.predictor_config.parameter_values(),
                    trace_path.name, trace_info.compression or 'uncompressed',
                    trace_info.size_bytes)

        records = self.parser.parse_file(trace_path, max_branches=self.config.max_branches)
        return self._simulate(records, str(trace_path))

    def run_on_trace(self, trace: BranchTrace) -> SimulationResults:
        """
        Run simulation on pre-loaded trace.

        Args:
            trace: BranchTrace object

        Returns:
            SimulationResults
        """
        records: Iterable[BranchRecord] = trace
        if self.config.max_branches is not None:
            records = itertools.islice(trace, self.config.max_branches)
        return self._simulate(records, "memory", total=len(trace))

    def _simulate(self, records: Iterable[BranchRecord], trace_name: str,
                  total: Optional[int] = None) -> SimulationResults:
        self.engine.reset()
        unrecognized = 0

        start_time = time.time()

        if self.config.verbose:
            progress = tqdm(records, total=total, desc="Simulating", unit="branches")
        else:
            progress = records

        for branch in progress:
            taken = branch.taken
            if taken is None:
                if unrecognized == 0:
                    logger.warning("Unrecognized outcome %r at line %s; "
                                   "record counted but not trained",
                                   branch.outcome, branch.line_number)
                unrecognized += 1

            self.engine.predict_and_update(branch.pc, taken)

            if (self.config.verbose and
                    self.engine.predictions_made % self.config.log_interval == 0):
                self._log_progress(trace_name)

        elapsed_time = time.time() - start_time

        if unrecognized:
            logger.warning("%d records had unrecognized outcomes", unrecognized)

        results = self._compile_results(trace_name, elapsed_time, unrecognized)
        logger.info("Finished %s: %d branches in %.2fs",
                    trace_name, results.branches_simulated, elapsed_time)
        return results

    def _compile_results(self, trace_name: str, elapsed_time: float,
                         unrecognized: int) -> SimulationResults:
        """Compile simulation results."""
        selections = {}
        if self.predictor_config.uses_chooser:
            selections = {
                'gshare': self.engine.stats.gshare_selections,
                'bimodal': self.engine.stats.bimodal_selections,
            }

        return SimulationResults(
            trace_name=trace_name,
            predictor=self.predictor_config.to_dict(),
            snapshot=self.engine.snapshot(),
            elapsed_time=elapsed_time,
            unrecognized_outcomes=unrecognized,
            hardware_cost=self.engine.get_hardware_cost(),
            selections=selections
        )

    def _log_progress(self, trace_name: str) -> None:
        """Log progress during simulation."""
        stats = self.engine.stats
        tqdm.write(f"Branches: {stats.predictions:,} | "
                   f"Mispredictions: {stats.mispredictions:,} | "
                   f"Rate: {stats.misprediction_rate:.2f}% | {trace_name}")
