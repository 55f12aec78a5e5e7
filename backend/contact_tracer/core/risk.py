"""Risk Classifier: per-location infected-visitor statistics and high-risk tiering.

Invariants:
    - Pure function of current registry + index state (recomputed every call, no cache)
    - Only locations with >= 1 visit appear; results ascend by location id
    - ratio = distinct infected visitors / distinct visitors
    - High-risk iff ratio is strictly greater than the threshold (exactly 60% is not)

Design Decisions:
    - Counts distinct persons, not raw visits: one infected person visiting daily
      counts once
    - Infection flag from the live registry, snapshot flag only for unregistered visitors
"""

from collections import defaultdict
from dataclasses import dataclass

from contact_tracer.core.domain_types import DEFAULT_HIGH_RISK_THRESHOLD, LocationId
from contact_tracer.core.registry import PersonRegistry
from contact_tracer.core.records import Visit
from contact_tracer.core.visit_index import VisitIndex


@dataclass(frozen=True)
class LocationRisk:
    """Visitor statistics for one location."""
    location_id: LocationId
    visitor_count: int
    infected_visitor_count: int

    @property
    def infected_visitor_ratio(self) -> float:
        if self.visitor_count == 0:
            return 0.0
        return self.infected_visitor_count / self.visitor_count


def _is_infected(people: PersonRegistry, visit: Visit) -> bool:
    current = people.get(visit.person.id)
    if current is None:
        return visit.person.infection_status
    return current.infection_status


def compute_location_risks(
    people: PersonRegistry, visits: VisitIndex,
) -> tuple[LocationRisk, ...]:
    """Risk statistics for every visited location, ascending by location id."""
    visitors: dict[int, set[int]] = defaultdict(set)
    infected: dict[int, set[int]] = defaultdict(set)
    for visit in visits:
        visitors[visit.location.id].add(visit.person.id)
        if _is_infected(people, visit):
            infected[visit.location.id].add(visit.person.id)
    return tuple(
        LocationRisk(
            location_id=LocationId(location_id),
            visitor_count=len(visitors[location_id]),
            infected_visitor_count=len(infected[location_id]),
        )
        for location_id in sorted(visitors)
    )


def is_high_risk(risk: LocationRisk, threshold: float = DEFAULT_HIGH_RISK_THRESHOLD) -> bool:
    return risk.infected_visitor_ratio > threshold


def high_risk_location_ids(
    people: PersonRegistry,
    visits: VisitIndex,
    threshold: float = DEFAULT_HIGH_RISK_THRESHOLD,
) -> tuple[LocationId, ...]:
    """Ids of locations whose infected visitor ratio exceeds `threshold`."""
    return tuple(
        risk.location_id
        for risk in compute_location_risks(people, visits)
        if is_high_risk(risk, threshold)
    )
