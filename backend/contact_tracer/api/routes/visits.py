"""Visits: record, list and delete visits (single or by date).

Invariants:
    - A visit is created from the person/location currently registered under its ids
    - Visits are addressed by (person id, location id, date); no separate visit id
    - Every mutation runs as a reversible command through CommandHistory
"""

import logging
from datetime import date

from fastapi import APIRouter, Depends, status

from contact_tracer.core.commands import AddVisit, DeleteVisit, DeleteVisitsOnDate
from contact_tracer.schemas.records import VisitKey, VisitResponse
from contact_tracer.services.tracer_session import TracerSession, get_tracer_session

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/visits", tags=["visits"])


@router.post(
    "", response_model=VisitResponse, status_code=status.HTTP_201_CREATED,
)
async def add_visit(
    body: VisitKey, session: TracerSession = Depends(get_tracer_session),
):
    visit = session.history.execute(
        AddVisit(body.person_id, body.location_id, body.date),
    )
    logger.info(
        "Visit recorded",
        extra={
            "person_id": body.person_id, "location_id": body.location_id,
            "visit_date": body.date.isoformat(),
        },
    )
    return VisitResponse.from_record(visit)


@router.get("", response_model=list[VisitResponse])
async def list_visits(
    person_id: int | None = None,
    location_id: int | None = None,
    on: date | None = None,
    session: TracerSession = Depends(get_tracer_session),
):
    """All visits in insertion order; every given filter must match."""
    visits = [
        v for v in session.tracer.visits
        if (person_id is None or v.person.id == person_id)
        and (location_id is None or v.location.id == location_id)
        and (on is None or v.date == on)
    ]
    return [VisitResponse.from_record(v) for v in visits]


@router.delete("/by-date/{on}")
async def delete_visits_on_date(
    on: date, session: TracerSession = Depends(get_tracer_session),
):
    removed = session.history.execute(DeleteVisitsOnDate(on))
    logger.info(
        f"Deleted {len(removed)} visit(s)", extra={"visit_date": on.isoformat()},
    )
    return {"date": on.isoformat(), "removed_visits": len(removed)}


@router.delete("/{person_id}/{location_id}/{on}", response_model=VisitResponse)
async def delete_visit(
    person_id: int, location_id: int, on: date,
    session: TracerSession = Depends(get_tracer_session),
):
    visit = session.tracer.visits.find(person_id, location_id, on)
    session.history.execute(DeleteVisit(visit))
    return VisitResponse.from_record(visit)
