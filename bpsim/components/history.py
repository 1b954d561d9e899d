"""
Global History Register

Manages the global branch history used by history-indexed predictors.
"""

import numpy as np


class GlobalHistoryRegister:
    """
    Global Branch History Register.

    Holds the outcomes of the last `length` branches as an unsigned integer.
    The newest outcome enters at the most-significant bit and older
    outcomes move toward bit 0.
    """

    def __init__(self, length: int):
        """
        Initialize the history register.

        Args:
            length: Number of branch outcomes to track. A zero-length
                register holds no history and ignores updates.
        """
        self.length = length
        self.mask = (1 << length) - 1
        self.value = 0

    def update(self, taken: bool) -> None:
        """
        Shift right by one and place the outcome at bit length-1.

        Args:
            taken: Branch outcome (True = taken)
        """
        if self.length == 0:
            return

        outcome_bit = 1 if taken else 0
        self.value = (self.value >> 1) | (outcome_bit << (self.length - 1))

    def get_history(self) -> np.ndarray:
        """
        Get current history as a 0/1 array, most recent outcome first.
        """
        return np.array(
            [(self.value >> (self.length - 1 - i)) & 1 for i in range(self.length)],
            dtype=np.int8
        )

    def reset(self) -> None:
        """Reset history to initial state."""
        self.value = 0

    def __int__(self) -> int:
        return self.value

    def __len__(self) -> int:
        return self.length

    def __repr__(self) -> str:
        hist_str = ''.join(str(b) for b in self.get_history())
        return f"GHR({self.length}): {hist_str}"
