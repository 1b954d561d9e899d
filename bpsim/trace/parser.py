"""
Trace Parser

Streams branch records from (optionally compressed) trace files.
"""

import bz2
import gzip
import itertools
import logging
import lzma
from collections import Counter
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, List, Optional, Union

from .formats import BranchRecord, SimpleTextFormat, TraceFormat


logger = logging.getLogger(__name__)


@dataclass
class TraceInfo:
    """Information about a trace file."""
    path: str
    format: str
    compression: Optional[str]
    size_bytes: int


class BranchTrace:
    """
    Container for branch trace data held in memory.
    """

    def __init__(self, records: Optional[List[BranchRecord]] = None):
        self._records = records or []

    def __iter__(self) -> Iterator[BranchRecord]:
        return iter(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def __getitem__(self, idx: int) -> BranchRecord:
        return self._records[idx]

    def get_statistics(self) -> dict:
        """Outcome mix and address footprint of the trace."""
        outcomes = Counter(r.taken for r in self._records)
        count = len(self._records)

        return {
            'count': count,
            'taken': outcomes[True],
            'not_taken': outcomes[False],
            'unrecognized': outcomes[None],
            'taken_ratio': outcomes[True] / count if count else 0.0,
            'unique_pcs': len({r.pc for r in self._records}),
        }


class TraceParser:
    """
    Trace parser with transparent decompression.
    """

    # Compression handlers
    COMPRESSION = {
        '.gz': gzip.open,
        '.gzip': gzip.open,
        '.xz': lzma.open,
        '.bz2': bz2.open,
        '.lzma': lzma.open,
    }

    def __init__(self, trace_format: Optional[TraceFormat] = None):
        """
        Initialize parser.

        Args:
            trace_format: Record format (default: lenient SimpleTextFormat)
        """
        self.format = trace_format or SimpleTextFormat()

    def _compression(self, filepath: Path) -> Optional[str]:
        suffix = filepath.suffix.lower()
        return suffix if suffix in self.COMPRESSION else None

    def open(self, filepath: Union[str, Path]):
        """Open a trace file for text reading, decompressing if needed."""
        filepath = Path(filepath)
        compression = self._compression(filepath)

        if compression:
            return self.COMPRESSION[compression](filepath, 'rt')
        return open(filepath, 'r')

    def parse_file(self, filepath: Union[str, Path],
                   max_branches: Optional[int] = None) -> Iterator[BranchRecord]:
        """
        Parse a trace file.

        Args:
            filepath: Path to trace file
            max_branches: Maximum branches to read (None = all)

        Yields:
            BranchRecord for each branch, in file order
        """
        filepath = Path(filepath)
        logger.debug("Reading trace %s as %s", filepath, self.format.get_format_name())

        with self.open(filepath) as file_handle:
            yield from itertools.islice(self.format.parse(file_handle), max_branches)

    def load_trace(self, filepath: Union[str, Path],
                   max_branches: Optional[int] = None) -> BranchTrace:
        """Read a whole trace (or its first max_branches records) into memory."""
        return BranchTrace(list(self.parse_file(filepath, max_branches)))

    def get_trace_info(self, filepath: Union[str, Path]) -> TraceInfo:
        """Get information about a trace file."""
        filepath = Path(filepath)
        compression = self._compression(filepath)

        return TraceInfo(
            path=str(filepath),
            format=self.format.get_format_name(),
            compression=compression[1:] if compression else None,
            size_bytes=filepath.stat().st_size
        )

    @classmethod
    def list_supported_compressions(cls) -> List[str]:
        """List supported compression formats."""
        return [ext[1:] for ext in cls.COMPRESSION.keys()]


# Outcome generators for sample traces: (branch number, rng) -> taken
SAMPLE_PATTERNS = {
    'random': lambda i, rng: rng.random() < 0.5,
    'biased': lambda i, rng: rng.random() < 0.8,
    'loop': lambda i, rng: i % 10 != 9,    # 9 iterations then exit
}


def create_sample_trace(filepath: Union[str, Path],
                        num_branches: int = 10000,
                        pattern: str = 'random',
                        seed: Optional[int] = None,
                        num_sites: int = 64) -> None:
    """
    Write a synthetic trace in the text format.

    Branches are drawn from num_sites word-aligned addresses; outcomes
    follow one of SAMPLE_PATTERNS.
    """
    import random

    if pattern not in SAMPLE_PATTERNS:
        raise ValueError(f"Unknown sample pattern: {pattern}")

    rng = random.Random(seed)
    outcome_of = SAMPLE_PATTERNS[pattern]
    sites = [0x400000 + 4 * rng.randrange(0x4000) for _ in range(num_sites)]

    with open(filepath, 'w') as f:
        for i in range(num_branches):
            pc = sites[rng.randrange(num_sites)]
            f.write(f"{pc:08x} {'t' if outcome_of(i, rng) else 'n'}\n")
