# Utils Package
from .helpers import load_config, save_results, setup_logging, parse_trace_path

__all__ = ['load_config', 'save_results', 'setup_logging', 'parse_trace_path']
