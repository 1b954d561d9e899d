"""
Simulation Results and Reporting

Holds the outcome of a simulation run and renders the final report.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List

from ..predictors.base import DivisionUndefinedError
from ..predictors.engine import EngineSnapshot


# Table sections in report order
TABLE_TITLES = {
    'chooser': 'FINAL CHOOSER CONTENTS',
    'gshare': 'FINAL GSHARE CONTENTS',
    'bimodal': 'FINAL BIMODAL CONTENTS',
}


@dataclass
class SimulationResults:
    """Container for simulation results."""
    trace_name: str
    predictor: Dict[str, Any]
    snapshot: EngineSnapshot
    elapsed_time: float
    unrecognized_outcomes: int = 0
    hardware_cost: Dict[str, Any] = field(default_factory=dict)
    selections: Dict[str, int] = field(default_factory=dict)

    @property
    def branches_simulated(self) -> int:
        return self.snapshot.predictions_made

    @property
    def mispredictions(self) -> int:
        return self.snapshot.mispredictions

    @property
    def misprediction_rate(self) -> float:
        return self.snapshot.misprediction_rate

    def to_dict(self, include_tables: bool = True) -> Dict:
        """Convert to dictionary for serialization."""
        try:
            rate = self.misprediction_rate
        except DivisionUndefinedError:
            rate = None

        result = {
            'trace_name': self.trace_name,
            'predictor': dict(self.predictor),
            'branches_simulated': self.branches_simulated,
            'mispredictions': self.mispredictions,
            'misprediction_rate': rate,
            'unrecognized_outcomes': self.unrecognized_outcomes,
            'elapsed_time': self.elapsed_time,
            'hardware_cost': self.hardware_cost,
        }
        if self.selections:
            result['selections'] = dict(self.selections)
        if include_tables:
            result['tables'] = {
                name: [int(v) for v in values]
                for name, values in self.snapshot.tables.items()
            }
        return result

    def get_summary(self) -> str:
        """Get text summary of results."""
        lines = [
            f"Trace: {self.trace_name}",
            f"Predictor: {self.predictor.get('predictor')}",
            f"Branches: {self.branches_simulated:,}",
            f"Mispredictions: {self.mispredictions:,}",
        ]
        if self.branches_simulated:
            lines.append(f"Misprediction rate: {self.misprediction_rate:.2f}%")
        if self.unrecognized_outcomes:
            lines.append(f"Unrecognized outcomes: {self.unrecognized_outcomes:,}")
        lines.append(f"Time: {self.elapsed_time:.2f}s")

        return "\n".join(lines)


class ReportFormatter:
    """
    Renders results in the classic simulator output layout:

        OUTPUT
        number of predictions: ...
        number of mispredictions: ...
        misprediction rate: ...%
        FINAL <TABLE> CONTENTS
         <index>\t<value>
    """

    @staticmethod
    def format_command(program: str, predictor: Dict[str, Any], trace_file: str) -> str:
        params = [str(v) for k, v in predictor.items() if k != 'predictor']
        return "\n".join([
            "COMMAND",
            " ".join([program, predictor['predictor'], *params, trace_file]),
        ])

    @staticmethod
    def format_table(title: str, values) -> List[str]:
        lines = [title]
        lines.extend(f" {i}\t{int(v)}" for i, v in enumerate(values))
        return lines

    @classmethod
    def format(cls, results: SimulationResults) -> str:
        """
        Raises:
            DivisionUndefinedError: No branch was simulated
        """
        snapshot = results.snapshot
        lines = [
            "OUTPUT",
            f"number of predictions: {snapshot.predictions_made}",
            f"number of mispredictions: {snapshot.mispredictions}",
            f"misprediction rate: {snapshot.misprediction_rate:.2f}%",
        ]

        for name, title in TABLE_TITLES.items():
            if name in snapshot.tables:
                lines.extend(cls.format_table(title, snapshot.tables[name]))

        return "\n".join(lines)
