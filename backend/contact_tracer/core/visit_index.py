"""Visit Index: the unique visit collection plus person/location/date lookups.

Invariants:
    - No two visits share a (person id, location id, date) key
    - by_person / by_location / by_date preserve insertion order
    - Cascades return the removed visits in original order; nothing else changes
    - A rejected operation leaves the index untouched and fires no notification

Design Decisions:
    - Hashable key set for uniqueness instead of a pairwise O(n^2) scan
      (same observable behavior, see visits_are_unique)
    - Lookups filter the ordered list: per-session volumes are small, and a
      single list keeps ordering trivially correct after edits
"""

from collections.abc import Callable, Iterable, Iterator
from datetime import date

from contact_tracer.core.changes import ChangeNotifier, RegistryChange
from contact_tracer.core.domain_types import ChangeKind, EntityKind, LocationId, PersonId
from contact_tracer.core.errors import DuplicateVisitError, VisitNotFoundError
from contact_tracer.core.records import Visit


def visits_are_unique(visits: Iterable[Visit]) -> bool:
    """True if no two visits share a (person id, location id, date) key."""
    seen: set[tuple] = set()
    for visit in visits:
        if visit.key in seen:
            return False
        seen.add(visit.key)
    return True


class VisitIndex(ChangeNotifier):
    """Ordered, unique collection of Visit records."""

    def __init__(self, visits: Iterable[Visit] = ()):
        super().__init__()
        staged = list(visits)
        if not visits_are_unique(staged):
            raise DuplicateVisitError()
        self._visits: list[Visit] = staged
        self._keys: set[tuple] = {v.key for v in staged}

    # --- Queries ---------------------------------------------------------------

    def list(self) -> tuple[Visit, ...]:
        return tuple(self._visits)

    def contains(self, visit: Visit) -> bool:
        return visit.key in self._keys

    def find(self, person_id: int, location_id: int, on: date) -> Visit:
        """Resolve the visit stored under a key."""
        for visit in self._visits:
            if visit.key == (person_id, location_id, on):
                return visit
        raise VisitNotFoundError()

    def by_person(self, person_id: int) -> tuple[Visit, ...]:
        return self._select(lambda v: v.person.id == person_id)

    def by_location(self, location_id: int) -> tuple[Visit, ...]:
        return self._select(lambda v: v.location.id == location_id)

    def by_date(self, on: date) -> tuple[Visit, ...]:
        return self._select(lambda v: v.date == on)

    def person_ids(self) -> set[PersonId]:
        return {v.person.id for v in self._visits}

    def location_ids(self) -> set[LocationId]:
        return {v.location.id for v in self._visits}

    def __len__(self) -> int:
        return len(self._visits)

    def __iter__(self) -> Iterator[Visit]:
        return iter(tuple(self._visits))

    def __contains__(self, visit: object) -> bool:
        return visit in self._visits

    # --- Mutations -------------------------------------------------------------

    def add(self, visit: Visit) -> None:
        if visit.key in self._keys:
            raise DuplicateVisitError()
        self._visits.append(visit)
        self._keys.add(visit.key)
        self._notify(RegistryChange(EntityKind.VISIT, ChangeKind.ADDED, new=visit))

    def insert(self, position: int, visit: Visit) -> None:
        """Re-insert a visit at a given position (undo of a delete)."""
        if visit.key in self._keys:
            raise DuplicateVisitError()
        self._visits.insert(min(position, len(self._visits)), visit)
        self._keys.add(visit.key)
        self._notify(RegistryChange(EntityKind.VISIT, ChangeKind.ADDED, new=visit))

    def remove(self, visit: Visit) -> int:
        """Remove the triple-equal visit; returns its former position."""
        position = self.position_of(visit)
        del self._visits[position]
        self._keys.discard(visit.key)
        self._notify(RegistryChange(EntityKind.VISIT, ChangeKind.REMOVED, old=visit))
        return position

    def set_visit(self, target: Visit, edited: Visit) -> None:
        position = self.position_of(target)
        if edited.key != target.key and edited.key in self._keys:
            raise DuplicateVisitError()
        self._visits[position] = edited
        self._keys.discard(target.key)
        self._keys.add(edited.key)
        self._notify(RegistryChange(
            EntityKind.VISIT, ChangeKind.REPLACED, old=target, new=edited,
        ))

    def set_visits(self, visits: Iterable[Visit]) -> None:
        """Replace the whole collection; rejects duplicate keys."""
        staged = list(visits)
        if not visits_are_unique(staged):
            raise DuplicateVisitError()
        self._visits = staged
        self._keys = {v.key for v in staged}
        self._notify(RegistryChange(EntityKind.VISIT, ChangeKind.RESET))

    def cascade_delete_by_person(self, person_id: int) -> tuple[Visit, ...]:
        return self._remove_where(lambda v: v.person.id == person_id)

    def cascade_delete_by_location(self, location_id: int) -> tuple[Visit, ...]:
        return self._remove_where(lambda v: v.location.id == location_id)

    def cascade_delete_by_date(self, on: date) -> tuple[Visit, ...]:
        return self._remove_where(lambda v: v.date == on)

    def position_of(self, visit: Visit) -> int:
        try:
            return self._visits.index(visit)
        except ValueError:
            raise VisitNotFoundError() from None

    # --- Internals -------------------------------------------------------------

    def _select(self, keep: Callable[[Visit], bool]) -> tuple[Visit, ...]:
        return tuple(v for v in self._visits if keep(v))

    def _remove_where(self, doomed: Callable[[Visit], bool]) -> tuple[Visit, ...]:
        removed = tuple(v for v in self._visits if doomed(v))
        if not removed:
            return removed
        self._visits = [v for v in self._visits if not doomed(v)]
        self._keys = {v.key for v in self._visits}
        for visit in removed:
            self._notify(RegistryChange(EntityKind.VISIT, ChangeKind.REMOVED, old=visit))
        return removed
