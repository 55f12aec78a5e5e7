"""Filter/Predicate Engine: composable selection predicates and live filtered views.

Invariants:
    - A predicate is a pure callable T -> bool; applying it never mutates the source
    - Composition is explicit (all_of / any_of / negate), never implied
    - FilteredView re-reads its source on every access: no stale results after mutations

Design Decisions:
    - Plain closures over predicate classes: trivially composable, no inheritance
    - Domain helpers precompute id sets once per predicate, not once per record
"""

import re
from collections.abc import Callable, Iterable, Sequence
from typing import Generic, Protocol, TypeVar

from contact_tracer.core.domain_types import DEFAULT_HIGH_RISK_THRESHOLD
from contact_tracer.core.exposure import locations_visited_by, people_exposed_at
from contact_tracer.core.records import Location, Person
from contact_tracer.core.registry import PersonRegistry
from contact_tracer.core.risk import high_risk_location_ids
from contact_tracer.core.visit_index import VisitIndex

T = TypeVar("T")
Predicate = Callable[[T], bool]

_WORD_SPLIT = re.compile(r"\s+")


# ─── Basic predicates ────────────────────────────────────────────

def show_all(_record: object) -> bool:
    return True


def show_none(_record: object) -> bool:
    return False


def with_ids(ids: Iterable[int]) -> Predicate:
    """Allow-list by record id."""
    allowed = frozenset(ids)
    return lambda record: record.id in allowed


def name_matches_keywords(keywords: Iterable[str]) -> Predicate:
    """Case-insensitive whole-word match of any keyword against any word of the name."""
    wanted = frozenset(k.lower() for k in keywords if k and k.strip())

    def matches(record) -> bool:
        words = {w.lower() for w in _WORD_SPLIT.split(record.name.strip()) if w}
        return not wanted.isdisjoint(words)
    return matches


def is_infected(person: Person) -> bool:
    return person.infection_status


def is_quarantined(person: Person) -> bool:
    return person.quarantine_status


def has_tag(tag: str) -> Predicate:
    return lambda person: tag in person.tags


# ─── Combinators ─────────────────────────────────────────────────

def all_of(*predicates: Predicate) -> Predicate:
    return lambda record: all(p(record) for p in predicates)


def any_of(*predicates: Predicate) -> Predicate:
    return lambda record: any(p(record) for p in predicates)


def negate(predicate: Predicate) -> Predicate:
    return lambda record: not predicate(record)


def apply_predicate(records: Iterable[T], predicate: Predicate) -> list[T]:
    """Filtered copy of `records`, order preserved."""
    return [r for r in records if predicate(r)]


# ─── Domain predicates (built from resolver / classifier output) ─

def high_risk_locations_predicate(
    people: PersonRegistry,
    visits: VisitIndex,
    threshold: float = DEFAULT_HIGH_RISK_THRESHOLD,
) -> Predicate[Location]:
    return with_ids(high_risk_location_ids(people, visits, threshold))


def visited_by_predicate(
    people: PersonRegistry, visits: VisitIndex, person_id: int,
) -> Predicate[Location]:
    """Locations an infected person visited (raises resolver errors eagerly)."""
    return with_ids(locations_visited_by(people, visits, person_id))


def exposed_people_predicate(
    visits: VisitIndex, location_ids: Sequence[int],
) -> Predicate[Person]:
    return with_ids(people_exposed_at(visits, location_ids))


# ─── Live views ──────────────────────────────────────────────────

class ListSource(Protocol[T]):
    def list(self) -> Sequence[T]: ...


class FilteredView(Generic[T]):
    """Read-only filtered view over a registry, recomputed on every read."""

    def __init__(self, source: ListSource[T], predicate: Predicate = show_all):
        self._source = source
        self._predicate = predicate

    @property
    def predicate(self) -> Predicate:
        return self._predicate

    def set_predicate(self, predicate: Predicate) -> None:
        self._predicate = predicate

    def items(self) -> list[T]:
        return apply_predicate(self._source.list(), self._predicate)

    def __len__(self) -> int:
        return len(self.items())
