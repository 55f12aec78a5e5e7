"""Id Allocator: per-kind monotonically increasing id source owned by a registry.

Invariants:
    - Ids handed out are strictly increasing and never reissued
    - The cursor only advances on a committed creation (peek is side-effect free)
    - Loading existing records moves the cursor to max(id) + 1, never backwards
"""

from collections.abc import Iterable

from contact_tracer.core.domain_types import FIRST_ID


class IdAllocator:
    """Explicit replacement for a global auto-increment counter."""

    def __init__(self, next_id: int = FIRST_ID):
        self._next_id = max(next_id, FIRST_ID)

    @property
    def next_id(self) -> int:
        return self._next_id

    def peek(self) -> int:
        """Id the next successful creation will receive."""
        return self._next_id

    def commit(self, issued_id: int) -> None:
        """Mark `issued_id` as used; later ids start after it."""
        if issued_id >= self._next_id:
            self._next_id = issued_id + 1

    def advance_past(self, ids: Iterable[int]) -> None:
        """Advance past every id in `ids` (load-from-storage)."""
        for existing in ids:
            self.commit(existing)
