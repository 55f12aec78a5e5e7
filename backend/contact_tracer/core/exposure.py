"""Exposure Resolver: two-hop contact tracing over the Visit Index.

Invariants:
    - All functions are PURE: they read registries/index, never mutate them
    - Results use first-seen order dedup, never sorting
    - locations_visited_by requires an infected person with >= 1 visit
    - people_exposed_at requires a non-empty location list

Design Decisions:
    - Infection flag read from the current registry record, not the visit snapshot:
      a person marked infected after visiting stays traceable
    - Raise typed errors, not result dicts
"""

from collections.abc import Hashable, Iterable, Sequence
from dataclasses import dataclass
from typing import TypeVar

from contact_tracer.core.domain_types import LocationId, PersonId
from contact_tracer.core.errors import (
    NoLocationsGivenError,
    PersonHasNoVisitsError,
    PersonNotInfectedError,
)
from contact_tracer.core.registry import PersonRegistry
from contact_tracer.core.visit_index import VisitIndex

H = TypeVar("H", bound=Hashable)


@dataclass(frozen=True)
class ExposureChain:
    """Result of the full infected-person -> locations -> visitors traversal."""
    person_id: PersonId
    location_ids: tuple[LocationId, ...]
    exposed_person_ids: tuple[PersonId, ...]


def first_seen(values: Iterable[H]) -> tuple[H, ...]:
    """Dedup keeping each value at the position of its first occurrence."""
    return tuple(dict.fromkeys(values))


def locations_visited_by(
    people: PersonRegistry, visits: VisitIndex, person_id: int,
) -> tuple[LocationId, ...]:
    """Distinct location ids an infected person visited, in first-seen order."""
    person = people.find_by_id(person_id)
    if not person.infection_status:
        raise PersonNotInfectedError(person_id)
    person_visits = visits.by_person(person_id)
    if not person_visits:
        raise PersonHasNoVisitsError(person_id)
    return first_seen(v.location.id for v in person_visits)


def people_exposed_at(
    visits: VisitIndex, location_ids: Sequence[int],
) -> tuple[PersonId, ...]:
    """Distinct person ids who visited any of `location_ids`, in first-seen order.

    Per-location results are concatenated in input order before dedup, so the
    visitors of the first location come first.
    """
    if not location_ids:
        raise NoLocationsGivenError()
    return first_seen(
        v.person.id
        for location_id in location_ids
        for v in visits.by_location(location_id)
    )


def exposure_chain(
    people: PersonRegistry, visits: VisitIndex, person_id: int,
) -> ExposureChain:
    """Compose both hops; the source person is excluded from the exposed list."""
    location_ids = locations_visited_by(people, visits, person_id)
    exposed = people_exposed_at(visits, location_ids)
    return ExposureChain(
        person_id=PersonId(person_id),
        location_ids=location_ids,
        exposed_person_ids=tuple(p for p in exposed if p != person_id),
    )
