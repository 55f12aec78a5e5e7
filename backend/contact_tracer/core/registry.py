"""Entity Registries: canonical, insertion-ordered Person and Location records.

Invariants:
    - No two entries are full-equal, same-identity, or share an id
    - list() is insertion order, NOT id order
    - set_entry replaces in place: the edited record keeps the target's position
    - A rejected operation leaves no partial state and fires no notification
    - Every id ever added is committed to the allocator (ids never reissued)

Design Decisions:
    - One generic registry + thin per-kind subclasses (ADR: identical contract per kind)
    - Dict id index alongside the ordered list: O(1) find_by_id, order kept by the list
"""

from collections.abc import Callable, Iterable, Iterator
from typing import Generic, Protocol, TypeVar

from contact_tracer.core.changes import ChangeNotifier, RegistryChange
from contact_tracer.core.domain_types import ChangeKind, EntityKind
from contact_tracer.core.errors import DuplicateEntityError, EntityNotFoundError
from contact_tracer.core.id_allocator import IdAllocator
from contact_tracer.core.records import Location, Person


class RegistryRecord(Protocol):
    """Structural contract shared by Person and Location."""
    id: int

    def is_same_identity(self, other) -> bool: ...
    def is_same_identity_except_id(self, other) -> bool: ...


R = TypeVar("R", bound=RegistryRecord)


class EntityRegistry(ChangeNotifier, Generic[R]):
    """Unique, ordered collection of one entity kind."""

    def __init__(
        self,
        entity_kind: EntityKind,
        records: Iterable[R] = (),
        allocator: IdAllocator | None = None,
    ):
        super().__init__()
        self.entity_kind = entity_kind
        self.allocator = allocator or IdAllocator()
        self._entries: list[R] = []
        self._by_id: dict[int, R] = {}
        for record in records:
            self._append(record)

    # --- Queries ---------------------------------------------------------------

    def list(self) -> tuple[R, ...]:
        return tuple(self._entries)

    def find_by_id(self, record_id: int) -> R:
        record = self._by_id.get(record_id)
        if record is None:
            raise EntityNotFoundError(self.entity_kind.value, record_id)
        return record

    def get(self, record_id: int) -> R | None:
        return self._by_id.get(record_id)

    def index_of(self, record: R) -> int:
        try:
            return self._entries.index(record)
        except ValueError:
            raise EntityNotFoundError(self.entity_kind.value, record.id) from None

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[R]:
        return iter(tuple(self._entries))

    def __contains__(self, record: object) -> bool:
        return record in self._entries

    # --- Mutations -------------------------------------------------------------

    def add(self, record: R) -> None:
        """Append `record`; reject full-equal, same-identity, or id collisions."""
        self._ensure_no_collision(record)
        self._append(record)
        self._notify(RegistryChange(self.entity_kind, ChangeKind.ADDED, new=record))

    def register(self, build: Callable[[int], R]) -> R:
        """Create a record under the next id and add it.

        `build` receives the candidate id. The allocator only advances if the
        add succeeds; a duplicate of an existing record under a different id is
        rejected as well.
        """
        candidate = build(self.allocator.peek())
        if any(e.is_same_identity_except_id(candidate) for e in self._entries):
            raise DuplicateEntityError(self.entity_kind.value)
        self.add(candidate)
        return candidate

    def remove(self, record: R) -> None:
        position = self.index_of(record)
        del self._entries[position]
        del self._by_id[record.id]
        self._notify(RegistryChange(self.entity_kind, ChangeKind.REMOVED, old=record))

    def set_entry(self, target: R, edited: R) -> None:
        """Replace `target` with `edited` at the same position."""
        position = self.index_of(target)
        self._ensure_no_collision(edited, ignore_position=position)
        self._entries[position] = edited
        del self._by_id[target.id]
        self._by_id[edited.id] = edited
        self.allocator.commit(edited.id)
        self._notify(RegistryChange(
            self.entity_kind, ChangeKind.REPLACED, old=target, new=edited,
        ))

    def restore(self, record: R, position: int) -> None:
        """Re-insert a previously removed record at its old position (undo)."""
        self._ensure_no_collision(record)
        self._entries.insert(min(position, len(self._entries)), record)
        self._by_id[record.id] = record
        self.allocator.commit(record.id)
        self._notify(RegistryChange(self.entity_kind, ChangeKind.ADDED, new=record))

    def load(self, records: Iterable[R]) -> None:
        """Replace all contents (load-from-storage); allocator moves past max id."""
        staged = EntityRegistry(self.entity_kind, records)
        self._entries = list(staged._entries)
        self._by_id = dict(staged._by_id)
        self.allocator.advance_past(self._by_id)
        self._notify(RegistryChange(self.entity_kind, ChangeKind.RESET))

    # --- Internals -------------------------------------------------------------

    def _append(self, record: R) -> None:
        self._ensure_no_collision(record)
        self._entries.append(record)
        self._by_id[record.id] = record
        self.allocator.commit(record.id)

    def _ensure_no_collision(self, candidate: R, ignore_position: int | None = None) -> None:
        for position, existing in enumerate(self._entries):
            if position == ignore_position:
                continue
            if (
                existing == candidate
                or existing.is_same_identity(candidate)
                or existing.id == candidate.id
            ):
                raise DuplicateEntityError(self.entity_kind.value, candidate.id)


class PersonRegistry(EntityRegistry[Person]):
    def __init__(self, records: Iterable[Person] = (), allocator: IdAllocator | None = None):
        super().__init__(EntityKind.PERSON, records, allocator)


class LocationRegistry(EntityRegistry[Location]):
    def __init__(self, records: Iterable[Location] = (), allocator: IdAllocator | None = None):
        super().__init__(EntityKind.LOCATION, records, allocator)
