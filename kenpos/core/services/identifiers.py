"""
Identifier generation.

Ids are a prefix plus a millisecond timestamp. The generator guarantees
strictly increasing suffixes within the process, so two records created in
the same millisecond never collide.
"""

import threading
import time


class IdGenerator:
    """Monotonic millisecond id source."""

    def __init__(self, clock=time.time):
        self._clock = clock
        self._last = 0
        self._lock = threading.Lock()

    def next_suffix(self) -> int:
        with self._lock:
            now = int(self._clock() * 1000)
            self._last = max(now, self._last + 1)
            return self._last

    def new_id(self, prefix: str = "") -> str:
        return f"{prefix}{self.next_suffix()}"


_generator = IdGenerator()


def new_id(prefix: str = "") -> str:
    """Process-wide unique id, e.g. ``new_id("shift_")``."""
    return _generator.new_id(prefix)


def next_suffix() -> int:
    return _generator.next_suffix()


def po_number(prefix: str, suffix: int) -> str:
    """Human readable PO number: prefix plus the last six digits."""
    return f"{prefix}{str(suffix)[-6:]}"


def supplier_invoice_number(po_number: str, suffix: int) -> str:
    return f"INV-{po_number}-{str(suffix)[-5:]}"
