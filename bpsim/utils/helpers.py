"""
Utility Functions

Configuration loading, logging setup and result file output.
"""

import csv
import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Dict, Iterator, Optional, Sequence, Tuple, Union

import yaml


LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

# Searched for trace files given by bare name
TRACE_SEARCH_DIRS = (Path("traces"), Path("data/traces"))


def load_config(config_path: Union[str, Path]) -> Dict[str, Any]:
    """
    Load a predictor/simulation configuration from a YAML file.

    Returns:
        Configuration dictionary (empty for an empty file)
    """
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, 'r') as f:
        config = yaml.safe_load(f)

    if config is not None and not isinstance(config, dict):
        raise ValueError(f"Config file must hold a mapping: {config_path}")

    return config or {}


def _flatten(results: Dict[str, Any], prefix: str = '') -> Iterator[Tuple[str, Any]]:
    """Yield (dotted.key, scalar) pairs; list items get their position as key."""
    for key, value in results.items():
        name = f"{prefix}{key}"
        if isinstance(value, dict):
            yield from _flatten(value, f"{name}.")
        elif isinstance(value, list):
            for i, item in enumerate(value):
                yield f"{name}.{i}", item
        else:
            yield name, value


def _write_json(results: Dict[str, Any], path: Path) -> None:
    with open(path, 'w') as f:
        json.dump(results, f, indent=2, default=str)


def _write_yaml(results: Dict[str, Any], path: Path) -> None:
    with open(path, 'w') as f:
        yaml.safe_dump(results, f, default_flow_style=False, sort_keys=False)


def _write_csv(results: Dict[str, Any], path: Path) -> None:
    with open(path, 'w', newline='', encoding='utf-8') as f:
        csv.writer(f).writerows(_flatten(results))


RESULT_WRITERS: Dict[str, Callable[[Dict[str, Any], Path], None]] = {
    'json': _write_json,
    'yaml': _write_yaml,
    'csv': _write_csv,
}


def save_results(results: Dict[str, Any],
                 output_dir: Union[str, Path],
                 name: str = "results",
                 formats: Sequence[str] = ('json',)) -> Dict[str, Path]:
    """
    Write a results dictionary once per requested format.

    Files are named <name>_<timestamp>.<format> inside output_dir, which is
    created if needed.

    Returns:
        Mapping of format to the file written
    """
    unknown = [fmt for fmt in formats if fmt not in RESULT_WRITERS]
    if unknown:
        raise ValueError(f"Unsupported result formats: {', '.join(unknown)}")

    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    stem = f"{name}_{datetime.now().strftime('%Y%m%d_%H%M%S')}"

    written = {}
    for fmt in formats:
        path = output_dir / f"{stem}.{fmt}"
        RESULT_WRITERS[fmt](results, path)
        written[fmt] = path

    return written


def setup_logging(level: str = "WARNING",
                  log_file: Optional[Union[str, Path]] = None) -> logging.Logger:
    """
    Configure the package logger.

    Messages go to stderr and, when log_file is given, to that file as
    well. Calling again replaces the handlers of the previous call.

    Args:
        level: Logging level name
        log_file: Optional log file path

    Returns:
        The 'bpsim' logger
    """
    logger = logging.getLogger("bpsim")
    logger.setLevel(getattr(logging, level.upper()))

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    handlers = [logging.StreamHandler()]
    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path))

    formatter = logging.Formatter(LOG_FORMAT)
    for handler in handlers:
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    return logger


def parse_trace_path(path_str: str) -> Path:
    """
    Resolve a trace file argument.

    A path that does not exist as given is looked up by name in the
    TRACE_SEARCH_DIRS.
    """
    path = Path(path_str).expanduser()
    if path.exists():
        return path

    for search_dir in TRACE_SEARCH_DIRS:
        candidate = search_dir / path_str
        if candidate.exists():
            return candidate

    raise FileNotFoundError(f"Unable to open file {path_str}")
