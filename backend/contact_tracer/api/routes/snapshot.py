"""Snapshot: export and replace the whole in-memory book as persistence records.

Invariants:
    - PUT validates the full snapshot before touching the session (all or nothing)
    - A successful load clears undo/redo: history never spans two books
"""

import logging

from fastapi import APIRouter, Body, Depends

from contact_tracer.core.tracer_snapshot import tracer_from_snapshot, tracer_to_snapshot
from contact_tracer.services.tracer_session import TracerSession, get_tracer_session

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/snapshot", tags=["snapshot"])


@router.get("")
async def export_snapshot(session: TracerSession = Depends(get_tracer_session)):
    return tracer_to_snapshot(session.tracer)


@router.put("")
async def load_snapshot(
    snapshot: dict = Body(...),
    session: TracerSession = Depends(get_tracer_session),
):
    tracer = session.tracer
    loaded = tracer_from_snapshot(snapshot, tracer.high_risk_threshold)
    tracer.people.load(loaded.people.list())
    tracer.locations.load(loaded.locations.list())
    tracer.visits.set_visits(loaded.visits.list())
    session.history.clear()
    logger.info(
        f"Snapshot loaded: {len(tracer.people)} person(s), "
        f"{len(tracer.locations)} location(s), {len(tracer.visits)} visit(s)",
    )
    return {
        "persons": len(tracer.people),
        "locations": len(tracer.locations),
        "visits": len(tracer.visits),
    }
