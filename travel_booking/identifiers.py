import threading
import time
from typing import Callable, Optional, Tuple

BOOKING_PREFIX = "BK"
TRANSACTION_PREFIX = "TRX"
USER_PREFIX = "USR"


def _now_ms() -> int:
    return time.time_ns() // 1_000_000


class IdGenerator:
    """
    Issues `<prefix><epoch milliseconds>` identifiers.

    Values are strictly increasing within the process: when the clock has not
    moved past the last issued value the next one is `last + 1`, so two calls
    in the same millisecond still get different ids.
    """

    def __init__(self, clock: Optional[Callable[[], int]] = None):
        self._clock = clock or _now_ms
        self._last = 0
        self._lock = threading.Lock()

    def next_timestamp(self) -> int:
        with self._lock:
            now = self._clock()
            if now <= self._last:
                now = self._last + 1
            self._last = now
            return now

    def next_booking_id(self) -> str:
        return f"{BOOKING_PREFIX}{self.next_timestamp()}"

    def next_transaction_id(self) -> str:
        return f"{TRANSACTION_PREFIX}{self.next_timestamp()}"

    def next_pair(self) -> Tuple[str, str]:
        """Booking and transaction ids derived from one shared timestamp."""
        t = self.next_timestamp()
        return f"{BOOKING_PREFIX}{t}", f"{TRANSACTION_PREFIX}{t}"

    def next_user_id(self) -> str:
        return f"{USER_PREFIX}{str(self.next_timestamp())[-5:]}"


id_generator = IdGenerator()
