from typing import Callable, Optional


class RenderScheduler:
    """
    Collapses any number of repaint requests between two frame ticks into one paint.

    With a `schedule` callable (e.g. a host's call-on-next-frame hook) the
    scheduler asks for a tick whenever a frame becomes pending. Without one,
    the host is expected to call `tick()` once per frame.
    """

    def __init__(self, paint: Callable[[], None], schedule: Optional[Callable[[Callable[[], bool]], None]] = None):
        self._paint = paint
        self._schedule = schedule
        self._pending = False

    @property
    def pending(self) -> bool:
        return self._pending

    def request_frame(self) -> None:
        if self._pending:
            return
        self._pending = True
        if self._schedule is not None:
            self._schedule(self.tick)

    def tick(self) -> bool:
        """Paints the current state if a frame was requested. Returns True if it painted."""
        if not self._pending:
            return False
        self._pending = False
        self._paint()
        return True
