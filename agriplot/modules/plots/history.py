"""
Linear undo/redo over full ring snapshots.
"""

from typing import List

from agriplot.modules.plots.coordinates import Ring


class RingHistory:
    """
    Undo and redo stacks of whole rings, most recent first.

    Rings are tuples, so every stack entry is an immutable snapshot.
    """

    def __init__(self, initial: Ring = ()):
        self.current: Ring = tuple(initial)
        self.undo_stack: List[Ring] = []
        self.redo_stack: List[Ring] = []

    @property
    def can_undo(self) -> bool:
        return bool(self.undo_stack)

    @property
    def can_redo(self) -> bool:
        return bool(self.redo_stack)

    def push(self, prior: Ring, new: Ring) -> None:
        """Record ``prior`` as undoable and make ``new`` current. Clears redo."""
        self.undo_stack.insert(0, tuple(prior))
        self.redo_stack.clear()
        self.current = tuple(new)

    def commit(self, new: Ring) -> None:
        self.push(self.current, new)

    def replace_current(self, ring: Ring) -> None:
        """Change the current ring without touching either stack (live drag)."""
        self.current = tuple(ring)

    def undo(self) -> bool:
        if not self.undo_stack:
            return False
        self.redo_stack.insert(0, self.current)
        self.current = self.undo_stack.pop(0)
        return True

    def redo(self) -> bool:
        if not self.redo_stack:
            return False
        self.undo_stack.insert(0, self.current)
        self.current = self.redo_stack.pop(0)
        return True
