"""Locations: registration, edit, cascade delete and filtered listing of locations.

Invariants:
    - Every mutation runs as a reversible command through CommandHistory
    - high_risk filter is recomputed from the current visits on every request
    - Listing never changes the session's locations view
"""

import logging

from fastapi import APIRouter, Depends, Query, status

from contact_tracer.core.commands import DeleteLocation, EditLocation, RegisterLocation
from contact_tracer.core.predicates import (
    all_of, apply_predicate, high_risk_locations_predicate, name_matches_keywords, negate,
    show_all, with_ids,
)
from contact_tracer.schemas.records import (
    LocationCreate, LocationResponse, LocationUpdate, VisitResponse,
)
from contact_tracer.services.tracer_session import TracerSession, get_tracer_session

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/locations", tags=["locations"])


@router.post(
    "", response_model=LocationResponse, status_code=status.HTTP_201_CREATED,
)
async def register_location(
    body: LocationCreate, session: TracerSession = Depends(get_tracer_session),
):
    location = session.history.execute(RegisterLocation(**body.model_dump()))
    logger.info("Location registered", extra={"location_id": location.id})
    return LocationResponse.from_record(location)


@router.get("", response_model=list[LocationResponse])
async def list_locations(
    ids: list[int] | None = Query(None),
    name: str | None = Query(None, description="Space-separated keywords"),
    high_risk: bool | None = None,
    session: TracerSession = Depends(get_tracer_session),
):
    """List locations in registry order, optionally filtered."""
    tracer = session.tracer
    predicates = []
    if ids:
        predicates.append(with_ids(ids))
    if name:
        predicates.append(name_matches_keywords(name.split()))
    if high_risk is not None:
        risky = high_risk_locations_predicate(
            tracer.people, tracer.visits, tracer.high_risk_threshold,
        )
        predicates.append(risky if high_risk else negate(risky))
    predicate = all_of(*predicates) if predicates else show_all
    return [
        LocationResponse.from_record(loc)
        for loc in apply_predicate(tracer.locations.list(), predicate)
    ]


@router.get("/{location_id}", response_model=LocationResponse)
async def get_location(
    location_id: int, session: TracerSession = Depends(get_tracer_session),
):
    return LocationResponse.from_record(session.tracer.locations.find_by_id(location_id))


@router.patch("/{location_id}", response_model=LocationResponse)
async def edit_location(
    location_id: int, body: LocationUpdate,
    session: TracerSession = Depends(get_tracer_session),
):
    edited = session.history.execute(EditLocation(location_id, **body.changes()))
    return LocationResponse.from_record(edited)


@router.delete("/{location_id}")
async def delete_location(
    location_id: int, session: TracerSession = Depends(get_tracer_session),
):
    deletion = session.history.execute(DeleteLocation(location_id))
    logger.info(
        f"Location deleted with {len(deletion.removed_visits)} visit(s)",
        extra={"location_id": location_id},
    )
    return {
        "deleted": LocationResponse.from_record(deletion.record).model_dump(),
        "removed_visits": len(deletion.removed_visits),
    }


@router.get("/{location_id}/visits", response_model=list[VisitResponse])
async def list_location_visits(
    location_id: int, session: TracerSession = Depends(get_tracer_session),
):
    tracer = session.tracer
    tracer.locations.find_by_id(location_id)
    return [VisitResponse.from_record(v) for v in tracer.visits.by_location(location_id)]
