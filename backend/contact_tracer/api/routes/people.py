"""People: registration, edit, cascade delete and filtered listing of persons.

Invariants:
    - Every mutation runs as a reversible command through CommandHistory
    - Listing order is registry insertion order, filtered by an explicit predicate
    - Listing never changes the session's people view
    - Deleting a person removes all of their visits in the same transaction
"""

import logging

from fastapi import APIRouter, Depends, Query, status

from contact_tracer.core.commands import DeletePerson, EditPerson, RegisterPerson
from contact_tracer.core.predicates import (
    all_of, apply_predicate, is_infected, is_quarantined, name_matches_keywords, negate,
    show_all, with_ids,
)
from contact_tracer.schemas.records import (
    PersonCreate, PersonResponse, PersonUpdate, VisitResponse,
)
from contact_tracer.services.tracer_session import TracerSession, get_tracer_session

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/people", tags=["people"])


@router.post(
    "", response_model=PersonResponse, status_code=status.HTTP_201_CREATED,
)
async def register_person(
    body: PersonCreate, session: TracerSession = Depends(get_tracer_session),
):
    """Register a new person under the next person id."""
    person = session.history.execute(RegisterPerson(**body.model_dump()))
    logger.info("Person registered", extra={"person_id": person.id})
    return PersonResponse.from_record(person)


@router.get("", response_model=list[PersonResponse])
async def list_people(
    ids: list[int] | None = Query(None),
    name: str | None = Query(None, description="Space-separated keywords"),
    infected: bool | None = None,
    quarantined: bool | None = None,
    session: TracerSession = Depends(get_tracer_session),
):
    """List people, optionally filtered; all given filters must match."""
    predicates = []
    if ids:
        predicates.append(with_ids(ids))
    if name:
        predicates.append(name_matches_keywords(name.split()))
    if infected is not None:
        predicates.append(is_infected if infected else negate(is_infected))
    if quarantined is not None:
        predicates.append(is_quarantined if quarantined else negate(is_quarantined))
    predicate = all_of(*predicates) if predicates else show_all
    people = apply_predicate(session.tracer.people.list(), predicate)
    return [PersonResponse.from_record(p) for p in people]


@router.get("/{person_id}", response_model=PersonResponse)
async def get_person(
    person_id: int, session: TracerSession = Depends(get_tracer_session),
):
    return PersonResponse.from_record(session.tracer.people.find_by_id(person_id))


@router.patch("/{person_id}", response_model=PersonResponse)
async def edit_person(
    person_id: int, body: PersonUpdate,
    session: TracerSession = Depends(get_tracer_session),
):
    """Replace a person's record; existing visits keep their snapshot."""
    edited = session.history.execute(EditPerson(person_id, **body.changes()))
    return PersonResponse.from_record(edited)


@router.delete("/{person_id}")
async def delete_person(
    person_id: int, session: TracerSession = Depends(get_tracer_session),
):
    deletion = session.history.execute(DeletePerson(person_id))
    logger.info(
        f"Person deleted with {len(deletion.removed_visits)} visit(s)",
        extra={"person_id": person_id},
    )
    return {
        "deleted": PersonResponse.from_record(deletion.record).model_dump(),
        "removed_visits": len(deletion.removed_visits),
    }


@router.get("/{person_id}/visits", response_model=list[VisitResponse])
async def list_person_visits(
    person_id: int, session: TracerSession = Depends(get_tracer_session),
):
    tracer = session.tracer
    tracer.people.find_by_id(person_id)
    return [VisitResponse.from_record(v) for v in tracer.visits.by_person(person_id)]
