"""Contact Tracer: facade owning the registries, the visit index and the filtered views.

Invariants:
    - Person/Location deletion and its visit cascade are one transaction:
      cascade first, then commit the registry removal; a failure at either step
      (including a raising change listener) restores both the visits and the record
    - A new visit snapshots the Person and Location currently registered under its ids
    - Views are live: they reflect the latest state on every read
    - Still pure domain: no IO, no logging

Design Decisions:
    - Facade over free functions for mutations: cascades need both structures at once
    - Queries delegate to exposure.py / risk.py so they stay testable on bare registries
"""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, replace
from datetime import date
from typing import Any

from contact_tracer.core.domain_types import (
    DEFAULT_HIGH_RISK_THRESHOLD, LocationId, PersonId,
)
from contact_tracer.core.exposure import (
    ExposureChain, exposure_chain, locations_visited_by, people_exposed_at,
)
from contact_tracer.core.predicates import (
    FilteredView, Predicate, exposed_people_predicate,
    high_risk_locations_predicate, show_all, visited_by_predicate,
)
from contact_tracer.core.records import Location, Person, Visit
from contact_tracer.core.registry import EntityRegistry, LocationRegistry, PersonRegistry
from contact_tracer.core.risk import (
    LocationRisk, compute_location_risks, high_risk_location_ids,
)
from contact_tracer.core.visit_index import VisitIndex


@dataclass(frozen=True)
class CascadeDeletion:
    """What a cascading delete removed, enough to undo it exactly."""
    record: Any
    position: int
    removed_visits: tuple[Visit, ...]
    visits_before: tuple[Visit, ...]


class ContactTracer:
    """People, locations and visits with consistent cross-structure mutations."""

    def __init__(
        self,
        people: PersonRegistry | None = None,
        locations: LocationRegistry | None = None,
        visits: VisitIndex | None = None,
        high_risk_threshold: float = DEFAULT_HIGH_RISK_THRESHOLD,
    ):
        self.people = people if people is not None else PersonRegistry()
        self.locations = locations if locations is not None else LocationRegistry()
        self.visits = visits if visits is not None else VisitIndex()
        self.high_risk_threshold = high_risk_threshold
        self.people_view: FilteredView[Person] = FilteredView(self.people)
        self.locations_view: FilteredView[Location] = FilteredView(self.locations)

    # --- People ----------------------------------------------------------------

    def register_person(
        self,
        name: str,
        phone: str,
        email: str,
        address: str,
        quarantine_status: bool = False,
        infection_status: bool = False,
        tags: Iterable[str] = (),
    ) -> Person:
        return self.people.register(lambda new_id: Person(
            id=PersonId(new_id), name=name, phone=phone, email=email,
            address=address, quarantine_status=quarantine_status,
            infection_status=infection_status, tags=frozenset(tags),
        ))

    def edit_person(self, person_id: int, **changes: Any) -> Person:
        """Replace-by-id; past visits keep their snapshot of the old record."""
        target = self.people.find_by_id(person_id)
        if "tags" in changes:
            changes["tags"] = frozenset(changes["tags"])
        edited = replace(target, **changes)
        self.people.set_entry(target, edited)
        return edited

    def delete_person(self, person_id: int) -> CascadeDeletion:
        person = self.people.find_by_id(person_id)
        return self._cascade_delete(
            self.people, person,
            lambda: self.visits.cascade_delete_by_person(person_id),
        )

    # --- Locations -------------------------------------------------------------

    def register_location(self, name: str, address: str) -> Location:
        return self.locations.register(lambda new_id: Location(
            id=LocationId(new_id), name=name, address=address,
        ))

    def edit_location(self, location_id: int, **changes: Any) -> Location:
        target = self.locations.find_by_id(location_id)
        edited = replace(target, **changes)
        self.locations.set_entry(target, edited)
        return edited

    def delete_location(self, location_id: int) -> CascadeDeletion:
        location = self.locations.find_by_id(location_id)
        return self._cascade_delete(
            self.locations, location,
            lambda: self.visits.cascade_delete_by_location(location_id),
        )

    # --- Visits ----------------------------------------------------------------

    def add_visit(self, person_id: int, location_id: int, on: date) -> Visit:
        """Record a visit; both ids must resolve in their registries."""
        visit = Visit(
            person=self.people.find_by_id(person_id),
            location=self.locations.find_by_id(location_id),
            date=on,
        )
        self.visits.add(visit)
        return visit

    def delete_visit(self, visit: Visit) -> int:
        """Remove a visit by value; returns its former position."""
        return self.visits.remove(visit)

    def delete_visits_on_date(self, on: date) -> tuple[Visit, ...]:
        return self.visits.cascade_delete_by_date(on)

    # --- Tracing queries -------------------------------------------------------

    def locations_visited_by(self, person_id: int) -> tuple[LocationId, ...]:
        return locations_visited_by(self.people, self.visits, person_id)

    def people_exposed_at(self, location_ids: Sequence[int]) -> tuple[PersonId, ...]:
        return people_exposed_at(self.visits, location_ids)

    def exposure_chain(self, person_id: int) -> ExposureChain:
        return exposure_chain(self.people, self.visits, person_id)

    def location_risks(self) -> tuple[LocationRisk, ...]:
        return compute_location_risks(self.people, self.visits)

    def high_risk_location_ids(self) -> tuple[LocationId, ...]:
        return high_risk_location_ids(self.people, self.visits, self.high_risk_threshold)

    # --- Views -----------------------------------------------------------------

    def filter_people(self, predicate: Predicate = show_all) -> list[Person]:
        self.people_view.set_predicate(predicate)
        return self.people_view.items()

    def filter_locations(self, predicate: Predicate = show_all) -> list[Location]:
        self.locations_view.set_predicate(predicate)
        return self.locations_view.items()

    def show_locations_visited_by(self, person_id: int) -> list[Location]:
        return self.filter_locations(
            visited_by_predicate(self.people, self.visits, person_id),
        )

    def show_people_exposed_at(self, location_ids: Sequence[int]) -> list[Person]:
        return self.filter_people(exposed_people_predicate(self.visits, location_ids))

    def show_high_risk_locations(self) -> list[Location]:
        return self.filter_locations(high_risk_locations_predicate(
            self.people, self.visits, self.high_risk_threshold,
        ))

    # --- Internals -------------------------------------------------------------

    def _cascade_delete(self, registry: EntityRegistry, record, cascade) -> CascadeDeletion:
        position = registry.index_of(record)
        visits_before = self.visits.list()
        try:
            removed = cascade()
            registry.remove(record)
        except Exception:
            self._roll_back(registry, record, position, visits_before)
            raise
        return CascadeDeletion(
            record=record, position=position,
            removed_visits=removed, visits_before=visits_before,
        )

    def _roll_back(self, registry: EntityRegistry, record, position: int, visits_before) -> None:
        """Undo a partial cascade delete; both structures are restored even if a listener raises."""
        try:
            self.visits.set_visits(visits_before)
        finally:
            if registry.get(record.id) is None:
                registry.restore(record, position)
