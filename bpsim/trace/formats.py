"""
Trace Format Definitions

Defines the branch trace file formats understood by the simulator.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Iterator, Optional, TextIO


TAKEN_TOKEN = 't'
NOT_TAKEN_TOKEN = 'n'


class TraceFormatError(ValueError):
    """A trace line that cannot be turned into a branch record."""

    def __init__(self, message: str, line_number: Optional[int] = None):
        self.line_number = line_number
        if line_number is not None:
            message = f"line {line_number}: {message}"
        super().__init__(message)


@dataclass
class BranchRecord:
    """Single branch record from a trace."""
    pc: int              # Program counter
    outcome: str         # Outcome token as read from the trace

    # Optional metadata
    line_number: Optional[int] = None

    @property
    def taken(self) -> Optional[bool]:
        """Branch outcome, or None for an unrecognized token."""
        if self.outcome == TAKEN_TOKEN:
            return True
        if self.outcome == NOT_TAKEN_TOKEN:
            return False
        return None

    @property
    def is_recognized(self) -> bool:
        return self.taken is not None


class TraceFormat(ABC):
    """Abstract base class for trace formats."""

    @abstractmethod
    def parse(self, file_handle) -> Iterator[BranchRecord]:
        """
        Parse trace file and yield branch records.

        Args:
            file_handle: Open file handle

        Yields:
            BranchRecord for each branch in trace
        """
        pass

    @abstractmethod
    def get_format_name(self) -> str:
        """Return format name."""
        pass


class SimpleTextFormat(TraceFormat):
    """
    Text trace format: one retired branch per line.

    Format: PC OUTCOME
    Example:
        00a3b5fc t
        0x00a3b604 n

    The PC is hexadecimal with an optional 0x prefix. OUTCOME is 't'
    (taken) or 'n' (not taken).
    """

    def __init__(self, strict: bool = False):
        """
        Args:
            strict: Raise TraceFormatError on unrecognized outcome tokens
                instead of passing them through
        """
        self.strict = strict

    def get_format_name(self) -> str:
        return "SimpleText"

    def parse(self, file_handle: TextIO) -> Iterator[BranchRecord]:
        """Parse simple text format."""
        for line_num, line in enumerate(file_handle, 1):
            line = line.strip()

            # Skip empty lines and comments
            if not line or line.startswith('#'):
                continue

            parts = line.split()
            if len(parts) < 2:
                raise TraceFormatError(
                    f"expected '<address> <outcome>', got {line!r}", line_num
                )

            try:
                pc = int(parts[0], 16)
            except ValueError:
                raise TraceFormatError(
                    f"invalid hexadecimal address {parts[0]!r}", line_num
                ) from None

            if pc < 0:
                raise TraceFormatError(f"negative address {parts[0]!r}", line_num)

            record = BranchRecord(pc=pc, outcome=parts[1], line_number=line_num)

            if self.strict and not record.is_recognized:
                raise TraceFormatError(
                    f"unrecognized outcome {parts[1]!r} "
                    f"(expected '{TAKEN_TOKEN}' or '{NOT_TAKEN_TOKEN}')",
                    line_num
                )

            yield record
