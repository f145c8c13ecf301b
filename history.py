import logging
from typing import List, Optional

from pixel_buffer import PixelBuffer

logger = logging.getLogger(__name__)


class HistoryManager:
    """
    Linear undo/redo over full copies of a pixel buffer.

    `baseline` is the state before the edit in progress. Undo granularity is
    one commit, i.e. one finished gesture.
    """

    def __init__(self, limit: Optional[int] = None):
        if limit is not None and limit < 1:
            raise ValueError(f"history limit must be positive, got {limit}")
        self.limit = limit
        self.buffer: Optional[PixelBuffer] = None
        self.baseline: Optional[PixelBuffer] = None
        self.undo_stack: List[PixelBuffer] = []
        self.redo_stack: List[PixelBuffer] = []

    def begin_session(self, buffer: PixelBuffer) -> None:
        self.buffer = buffer
        self.baseline = buffer.clone()
        self.undo_stack.clear()
        self.redo_stack.clear()

    def _require_session(self) -> PixelBuffer:
        if self.buffer is None:
            raise RuntimeError("history used before begin_session()")
        return self.buffer

    @property
    def can_undo(self) -> bool:
        return bool(self.undo_stack)

    @property
    def can_redo(self) -> bool:
        return bool(self.redo_stack)

    def commit(self) -> None:
        """Records the current buffer as a new undoable state."""
        buffer = self._require_session()
        self.undo_stack.append(self.baseline)
        if self.limit is not None and len(self.undo_stack) > self.limit:
            del self.undo_stack[0]
        self.redo_stack.clear()
        self.baseline = buffer.clone()
        logger.debug("commit: %d undo states", len(self.undo_stack))

    def undo(self) -> bool:
        buffer = self._require_session()
        if not self.undo_stack:
            return False
        snapshot = self.undo_stack.pop()
        self.redo_stack.append(self.baseline)
        buffer.restore(snapshot)
        self.baseline = snapshot
        logger.debug("undo: %d undo / %d redo states", len(self.undo_stack), len(self.redo_stack))
        return True

    def redo(self) -> bool:
        buffer = self._require_session()
        if not self.redo_stack:
            return False
        snapshot = self.redo_stack.pop()
        self.undo_stack.append(self.baseline)
        buffer.restore(snapshot)
        self.baseline = snapshot
        logger.debug("redo: %d undo / %d redo states", len(self.undo_stack), len(self.redo_stack))
        return True

    def reset(self) -> None:
        """Forgets all history and takes the current buffer as the new baseline."""
        self.begin_session(self._require_session())
