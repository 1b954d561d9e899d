# Simulation Package
from .simulator import BranchSimulator, SimulationConfig
from .metrics import ReportFormatter, SimulationResults

__all__ = [
    'BranchSimulator',
    'SimulationConfig',
    'ReportFormatter',
    'SimulationResults'
]
