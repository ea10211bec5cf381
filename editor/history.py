"""
Undo/redo over JSON snapshots of the canvas.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, List, Optional

import config as cfg


class History:
    """
    Linear snapshot history with a cursor.
    - save() drops any redo tail, appends, and trims the oldest entries to `limit`.
    - undo()/redo() move the cursor and return the snapshot to restore.
    - While a snapshot is being restored (`loading()`), save() is a no-op so the
      restore itself does not create a new entry.
    """

    def __init__(self, limit: int = cfg.HISTORY_LIMIT):
        if limit < 1:
            raise ValueError("History limit must be at least 1")
        self.limit = limit
        self._states: List[str] = []
        self._index = -1
        self.is_loading = False

    @property
    def index(self) -> int:
        return self._index

    @property
    def states(self) -> List[str]:
        return list(self._states)

    def __len__(self) -> int:
        return len(self._states)

    @property
    def can_undo(self) -> bool:
        return self._index > 0

    @property
    def can_redo(self) -> bool:
        return self._index < len(self._states) - 1

    @property
    def current(self) -> Optional[str]:
        if self._index < 0:
            return None
        return self._states[self._index]

    def reset(self, snapshot: str) -> None:
        """Start over with a single snapshot."""
        self._states = [snapshot]
        self._index = 0

    def save(self, snapshot: str) -> bool:
        if self.is_loading:
            return False
        states = self._states[: self._index + 1]
        states.append(snapshot)
        while len(states) > self.limit:
            states.pop(0)
        self._states = states
        self._index = len(states) - 1
        return True

    def undo(self) -> Optional[str]:
        if not self.can_undo:
            return None
        self._index -= 1
        return self._states[self._index]

    def redo(self) -> Optional[str]:
        if not self.can_redo:
            return None
        self._index += 1
        return self._states[self._index]

    @contextmanager
    def loading(self) -> Iterator[None]:
        self.is_loading = True
        try:
            yield
        finally:
            self.is_loading = False
