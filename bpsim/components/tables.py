"""
Counter Tables and Indexing Schemes

2-bit saturating counter tables and the index functions used to address them.
"""

import numpy as np


COUNTER_MIN = 0
COUNTER_MAX = 3
TAKEN_THRESHOLD = 2


class SaturatingCounterTable:
    """
    Table of 2-bit saturating counters.

    Counter values 0,1 predict not taken; 2,3 predict taken. Updates
    saturate at the extremes instead of wrapping.
    """

    def __init__(self, index_bits: int, initial: int = 2):
        """
        Initialize counter table.

        Args:
            index_bits: Index width; the table holds 2**index_bits counters
            initial: Initial value of every counter
        """
        self.index_bits = index_bits
        self.num_entries = 1 << index_bits
        self.index_mask = self.num_entries - 1
        self.initial = initial

        self.table = np.full(self.num_entries, initial, dtype=np.int8)

        # Access statistics
        self.reads = 0
        self.writes = 0

    def read(self, index: int) -> int:
        """Read counter at index."""
        self.reads += 1
        return int(self.table[index])

    def predict(self, index: int) -> bool:
        """Predicted direction for the counter at index."""
        return self.read(index) >= TAKEN_THRESHOLD

    def increment(self, index: int) -> None:
        self.writes += 1
        self.table[index] = min(COUNTER_MAX, int(self.table[index]) + 1)

    def decrement(self, index: int) -> None:
        self.writes += 1
        self.table[index] = max(COUNTER_MIN, int(self.table[index]) - 1)

    def train(self, index: int, taken: bool) -> None:
        """Move the counter at index toward the actual outcome."""
        if taken:
            self.increment(index)
        else:
            self.decrement(index)

    def values(self, copy: bool = False) -> np.ndarray:
        """
        Read-only array of the counters in index order.

        Args:
            copy: Detach the result from later updates to the table
        """
        view = self.table.copy() if copy else self.table.view()
        view.flags.writeable = False
        return view

    def reset(self) -> None:
        """Reset every counter to its initial value."""
        self.table.fill(self.initial)
        self.reads = 0
        self.writes = 0

    def get_storage_bits(self) -> int:
        """Get total storage in bits."""
        return self.num_entries * 2

    def get_statistics(self) -> dict:
        """Get table statistics."""
        return {
            'entries': self.num_entries,
            'total_bits': self.get_storage_bits(),
            'reads': self.reads,
            'writes': self.writes,
            'predict_taken': int(np.sum(self.table >= TAKEN_THRESHOLD)),
            'saturated_high': int(np.sum(self.table == COUNTER_MAX)),
            'saturated_low': int(np.sum(self.table == COUNTER_MIN))
        }

    def __len__(self) -> int:
        return self.num_entries


class IndexingScheme:
    """
    Index functions for predictor tables.

    The two low PC bits are always zero for word-aligned instructions and
    are discarded before masking.
    """

    @staticmethod
    def pc_bits(pc: int, bits: int) -> int:
        """Bits [bits+1:2] of the PC."""
        return (pc >> 2) & ((1 << bits) - 1)

    @staticmethod
    def bimodal(pc: int, m2: int) -> int:
        return IndexingScheme.pc_bits(pc, m2)

    @staticmethod
    def chooser(pc: int, k: int) -> int:
        return IndexingScheme.pc_bits(pc, k)

    @staticmethod
    def gshare(pc: int, history: int, m1: int, n: int) -> int:
        """
        XOR the history register into the uppermost n of the m1 PC bits.

        Args:
            pc: Program counter
            history: Current n-bit global history
            m1: Table index width
            n: History width (0 <= n <= m1)
        """
        index = IndexingScheme.pc_bits(pc, m1)
        if n == 0:
            return index

        low_bits = m1 - n
        upper = index >> low_bits
        lower = index & ((1 << low_bits) - 1)

        return ((upper ^ history) << low_bits) | lower
