from __future__ import annotations


class GravityTimer:
    """Periodic gravity schedule driven by elapsed milliseconds.

    The owner feeds wall-clock time through ``elapse`` and then drains due
    ticks with ``consume``. Restarting or cancelling drops any time already
    accumulated toward the next tick.
    """

    def __init__(self) -> None:
        self.interval_ms = 0
        self.active = False
        self.generation = 0
        self._elapsed_ms = 0

    def start(self, interval_ms: int) -> None:
        if interval_ms <= 0:
            raise ValueError(f"Gravity interval must be positive, got {interval_ms}")
        self.cancel()
        self.interval_ms = int(interval_ms)
        self.active = True
        self.generation += 1

    def cancel(self) -> None:
        self.active = False
        self._elapsed_ms = 0

    def elapse(self, elapsed_ms: int) -> None:
        if self.active and elapsed_ms > 0:
            self._elapsed_ms += int(elapsed_ms)

    def consume(self) -> bool:
        if not self.active or self._elapsed_ms < self.interval_ms:
            return False
        self._elapsed_ms -= self.interval_ms
        return True

    @property
    def pending_ms(self) -> int:
        return self._elapsed_ms
