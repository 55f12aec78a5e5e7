"""Change Notification: synchronous callbacks fired after committed mutations.

Invariants:
    - Listeners run only after a mutation is fully applied (never on a rejected one)
    - version increments on every notification (a cascade notifies once per removed record)
    - Listeners are called in subscription order, synchronously

Design Decisions:
    - Explicit callback + version counter over reactive collections: views re-read on demand
"""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from contact_tracer.core.domain_types import ChangeKind, EntityKind


@dataclass(frozen=True)
class RegistryChange:
    """One committed structural change. `old`/`new` are None where not applicable."""
    entity_kind: EntityKind
    kind: ChangeKind
    old: Any = None
    new: Any = None


ChangeListener = Callable[[RegistryChange], None]


class ChangeNotifier:
    """Mixin holding subscribers and a version counter."""

    def __init__(self):
        self._listeners: list[ChangeListener] = []
        self._version = 0

    @property
    def version(self) -> int:
        return self._version

    def subscribe(self, listener: ChangeListener) -> None:
        self._listeners.append(listener)

    def unsubscribe(self, listener: ChangeListener) -> None:
        self._listeners.remove(listener)

    def _notify(self, change: RegistryChange) -> None:
        self._version += 1
        for listener in list(self._listeners):
            listener(change)
