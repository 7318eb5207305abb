"""Quote number generation.

Format: QT/YY/QQQQCCSSSSSSSS
  QT        prefix
  YY        two-digit year
  QQQQ      quotation id, zero-padded to 4
  CC        insurer id, zero-padded to 2
  SSSSSSSS  8-digit suffix from a strictly increasing microsecond counter

The counter never repeats within a process, even for calls inside the same
microsecond. Across processes the unique index on quote_number is the guard.
"""

from __future__ import annotations

import threading
import time
from collections.abc import Callable
from datetime import date

SUFFIX_MODULUS = 100_000_000


class QuoteNumberGenerator:
    """Builds human-readable, process-unique quote numbers."""

    def __init__(self, clock_ns: Callable[[], int] = time.time_ns) -> None:
        self._clock_ns = clock_ns
        self._last_us = 0
        self._lock = threading.Lock()

    def next_suffix(self) -> int:
        """Next 8-digit suffix; strictly greater than the previous one (mod 10^8)."""
        with self._lock:
            now_us = self._clock_ns() // 1000
            self._last_us = max(self._last_us + 1, now_us)
            return self._last_us % SUFFIX_MODULUS

    def generate(self, quotation_id: int, company_id: int, today: date | None = None) -> str:
        year = (today or date.today()).strftime("%y")
        return f"QT/{year}/{quotation_id:04d}{company_id:02d}{self.next_suffix():08d}"


# Module-level singleton
quote_numbers = QuoteNumberGenerator()
