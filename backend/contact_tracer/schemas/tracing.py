"""Tracing Schemas: exposure, risk and history payloads.

Invariants:
    - ExposureRequest accepts an empty list so the core can report NO_LOCATIONS_GIVEN
    - Id sequences keep the core's ordering (first-seen or ascending id)
"""

from pydantic import BaseModel, Field

from contact_tracer.core.exposure import ExposureChain
from contact_tracer.core.risk import LocationRisk


class ExposureRequest(BaseModel):
    location_ids: list[int] = Field(default_factory=list)


class LocationIdsResponse(BaseModel):
    location_ids: list[int]


class PersonIdsResponse(BaseModel):
    person_ids: list[int]


class ExposureChainResponse(BaseModel):
    person_id: int
    location_ids: list[int]
    exposed_person_ids: list[int]

    @classmethod
    def from_chain(cls, chain: ExposureChain) -> "ExposureChainResponse":
        return cls(
            person_id=chain.person_id,
            location_ids=list(chain.location_ids),
            exposed_person_ids=list(chain.exposed_person_ids),
        )


class LocationRiskResponse(BaseModel):
    location_id: int
    visitor_count: int
    infected_visitor_count: int
    infected_visitor_ratio: float
    high_risk: bool

    @classmethod
    def from_risk(cls, risk: LocationRisk, high_risk: bool) -> "LocationRiskResponse":
        return cls(
            location_id=risk.location_id,
            visitor_count=risk.visitor_count,
            infected_visitor_count=risk.infected_visitor_count,
            infected_visitor_ratio=risk.infected_visitor_ratio,
            high_risk=high_risk,
        )


class HistoryResponse(BaseModel):
    command: str
    can_undo: bool
    can_redo: bool
