"""Health Probe: liveness endpoint plus in-memory record counts.

Invariants:
    - GET /health/ always returns 200 if the process is up
"""

from fastapi import APIRouter, Depends, status

from contact_tracer.services.tracer_session import TracerSession, get_tracer_session

router = APIRouter(prefix="/api/v1/health", tags=["health"])


@router.get("/", status_code=status.HTTP_200_OK)
async def health_check(session: TracerSession = Depends(get_tracer_session)):
    """Basic liveness check. Returns 200 if the process is up."""
    tracer = session.tracer
    return {
        "status": "healthy",
        "service": "contact-tracer-api",
        "version": "1.0.0",
        "records": {
            "persons": len(tracer.people),
            "locations": len(tracer.locations),
            "visits": len(tracer.visits),
        },
    }
