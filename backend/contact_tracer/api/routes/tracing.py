"""Tracing: exposure resolution and location risk classification.

Invariants:
    - Read-only: no route here mutates registries or visits
    - Exposure results keep first-seen order; risk results ascend by location id
    - Risk is recomputed per request (no cached classification)
"""

from fastapi import APIRouter, Depends

from contact_tracer.core.risk import is_high_risk
from contact_tracer.schemas.records import LocationResponse
from contact_tracer.schemas.tracing import (
    ExposureChainResponse, ExposureRequest, LocationIdsResponse,
    LocationRiskResponse, PersonIdsResponse,
)
from contact_tracer.services.tracer_session import TracerSession, get_tracer_session

router = APIRouter(prefix="/api/v1/tracing", tags=["tracing"])


@router.get("/people/{person_id}/locations", response_model=LocationIdsResponse)
async def locations_visited_by(
    person_id: int, session: TracerSession = Depends(get_tracer_session),
):
    """Distinct locations an infected person visited (first hop)."""
    location_ids = session.tracer.locations_visited_by(person_id)
    return LocationIdsResponse(location_ids=list(location_ids))


@router.post("/exposed-people", response_model=PersonIdsResponse)
async def people_exposed_at(
    body: ExposureRequest, session: TracerSession = Depends(get_tracer_session),
):
    """People who visited any of the given locations (second hop)."""
    person_ids = session.tracer.people_exposed_at(body.location_ids)
    return PersonIdsResponse(person_ids=list(person_ids))


@router.get("/people/{person_id}/exposure", response_model=ExposureChainResponse)
async def exposure_chain(
    person_id: int, session: TracerSession = Depends(get_tracer_session),
):
    """Both hops at once; the source person is not listed as exposed."""
    return ExposureChainResponse.from_chain(session.tracer.exposure_chain(person_id))


@router.get("/location-risks", response_model=list[LocationRiskResponse])
async def location_risks(session: TracerSession = Depends(get_tracer_session)):
    tracer = session.tracer
    return [
        LocationRiskResponse.from_risk(
            risk, is_high_risk(risk, tracer.high_risk_threshold),
        )
        for risk in tracer.location_risks()
    ]


@router.get("/high-risk-locations", response_model=list[LocationResponse])
async def high_risk_locations(session: TracerSession = Depends(get_tracer_session)):
    """High-risk locations, ascending by location id."""
    tracer = session.tracer
    return [
        LocationResponse.from_record(tracer.locations.find_by_id(location_id))
        for location_id in tracer.high_risk_location_ids()
    ]
