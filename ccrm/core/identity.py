"""
Identity generation for people and registration codes.
"""

import re
import threading


class IdentityGenerator:
    """Hands out numeric person ids and student registration codes.

    Both counters are monotonically increasing and thread safe. One instance
    is owned by the student directory; nothing here is module-global.
    """

    REG_NO_PREFIX = "STU"
    REG_NO_WIDTH = 3

    def __init__(self, first_id: int = 1, first_reg_seq: int = 1):
        self._next_id = first_id
        self._next_reg_seq = first_reg_seq
        self._lock = threading.Lock()
        self._reg_pattern = re.compile(rf"^{self.REG_NO_PREFIX}(\d+)$", re.IGNORECASE)

    def next_id(self) -> int:
        """Return the next numeric person id."""
        with self._lock:
            value = self._next_id
            self._next_id += 1
            return value

    def next_reg_no(self) -> str:
        """Return the next registration code, e.g. ``STU001``."""
        with self._lock:
            seq = self._next_reg_seq
            self._next_reg_seq += 1
        return f"{self.REG_NO_PREFIX}{seq:0{self.REG_NO_WIDTH}d}"

    def reserve_reg_no(self, reg_no: str) -> None:
        """Move the registration sequence past an externally supplied code.

        Codes that do not follow the ``STU<digits>`` shape are ignored.
        """
        match = self._reg_pattern.match(reg_no or "")
        if not match:
            return
        with self._lock:
            self._next_reg_seq = max(self._next_reg_seq, int(match.group(1)) + 1)
