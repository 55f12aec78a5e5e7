"""History: undo / redo of the last mutations made through the API.

Invariants:
    - Undo/redo only ever apply the most recent command (LIFO)
    - Empty stacks answer 409 NOTHING_TO_UNDO / NOTHING_TO_REDO
"""

from fastapi import APIRouter, Depends

from contact_tracer.schemas.tracing import HistoryResponse
from contact_tracer.services.tracer_session import TracerSession, get_tracer_session

router = APIRouter(prefix="/api/v1/history", tags=["history"])


@router.post("/undo", response_model=HistoryResponse)
async def undo(session: TracerSession = Depends(get_tracer_session)):
    command = session.history.undo()
    return HistoryResponse(
        command=command.name,
        can_undo=session.history.can_undo,
        can_redo=session.history.can_redo,
    )


@router.post("/redo", response_model=HistoryResponse)
async def redo(session: TracerSession = Depends(get_tracer_session)):
    command = session.history.redo()
    return HistoryResponse(
        command=command.name,
        can_undo=session.history.can_undo,
        can_redo=session.history.can_redo,
    )
