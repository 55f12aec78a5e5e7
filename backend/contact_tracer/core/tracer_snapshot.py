"""Tracer Snapshot: whole-book serialization / load for a ContactTracer.

Invariants:
    - to_snapshot produces a JSON-safe dict: {"persons": [...], "locations": [...], "visits": [...]}
    - from_snapshot advances every allocator to max(existing id) + 1
    - Loaded visits must reference ids present in the loaded registries
    - Missing top-level keys fall back to empty lists (forward-compatible);
      a present key must hold a list, or loading fails with InvalidFormatError
"""

from collections.abc import Mapping

from contact_tracer.core.contact_tracer import ContactTracer
from contact_tracer.core.domain_types import DEFAULT_HIGH_RISK_THRESHOLD
from contact_tracer.core.errors import EntityNotFoundError, InvalidFormatError
from contact_tracer.core.registry import LocationRegistry, PersonRegistry
from contact_tracer.core.visit_index import VisitIndex
from contact_tracer.core.visit_snapshot import (
    location_from_record, location_to_record,
    person_from_record, person_to_record,
    visit_from_record, visit_to_record,
)


def tracer_to_snapshot(tracer: ContactTracer) -> dict:
    """Serialize all three record sets, each in registry order. Pure, no IO."""
    return {
        "persons": [person_to_record(p) for p in tracer.people.list()],
        "locations": [location_to_record(loc) for loc in tracer.locations.list()],
        "visits": [visit_to_record(v) for v in tracer.visits.list()],
    }


def tracer_from_snapshot(
    snapshot: Mapping,
    high_risk_threshold: float = DEFAULT_HIGH_RISK_THRESHOLD,
) -> ContactTracer:
    """Rebuild a ContactTracer; raises the codec's typed errors on bad records."""
    if not isinstance(snapshot, Mapping):
        raise InvalidFormatError("snapshot", "A snapshot must be an object of record lists")
    people = PersonRegistry(person_from_record(r) for r in _section(snapshot, "persons"))
    locations = LocationRegistry(
        location_from_record(r) for r in _section(snapshot, "locations")
    )
    visits = [visit_from_record(r) for r in _section(snapshot, "visits")]
    for visit in visits:
        if people.get(visit.person.id) is None:
            raise EntityNotFoundError("person", visit.person.id)
        if locations.get(visit.location.id) is None:
            raise EntityNotFoundError("location", visit.location.id)
    return ContactTracer(
        people=people, locations=locations, visits=VisitIndex(visits),
        high_risk_threshold=high_risk_threshold,
    )


def _section(snapshot: Mapping, key: str) -> list:
    records = snapshot.get(key, [])
    if not isinstance(records, list):
        raise InvalidFormatError(key, f"{key} must be a list of records")
    return records
