"""Reversible Commands: tests that undo restores the exact prior state."""

from datetime import date

import pytest

from contact_tracer.core.commands import (
    AddVisit, DeleteLocation, DeletePerson, DeleteVisit, DeleteVisitsOnDate,
    EditLocation, EditPerson, RegisterLocation, RegisterPerson,
)
from contact_tracer.core.contact_tracer import ContactTracer
from contact_tracer.core.errors import DuplicateVisitError


def _tracer() -> ContactTracer:
    tracer = ContactTracer()
    tracer.register_person("Alice Pauline", "94351253", "alice@example.com",
                           "123, Jurong West Ave 6", infection_status=True)
    tracer.register_person("Benson Meier", "98765432", "johnd@example.com",
                           "311, Clementi Ave 2")
    tracer.register_location("Jurong Point", "1 Jurong West Central 2")
    tracer.add_visit(1, 1, date(2020, 9, 1))
    tracer.add_visit(2, 1, date(2020, 9, 2))
    return tracer


def _state(tracer: ContactTracer) -> tuple:
    return tracer.people.list(), tracer.locations.list(), tracer.visits.list()


def test_register_person_undo_and_redo_keeps_id():
    tracer = _tracer()
    before = _state(tracer)
    command = RegisterPerson("Carl Kurz", "95352563", "heinz@example.com", "wall street",
                             tags=["neighbours"])
    created = command.execute(tracer)
    assert created.id == 3
    command.undo(tracer)
    assert _state(tracer) == before
    assert command.execute(tracer).id == 3
    assert tracer.people.find_by_id(3).tags == frozenset({"neighbours"})


def test_register_after_undo_does_not_reuse_id():
    tracer = _tracer()
    command = RegisterLocation("Vivo City", "1 HarbourFront Walk")
    command.execute(tracer)
    command.undo(tracer)
    assert tracer.register_location("Orchard Road", "Orchard Road 2").id == 3


def test_edit_person_undo_restores_previous_record():
    tracer = _tracer()
    before = _state(tracer)
    command = EditPerson(2, infection_status=True)
    assert command.execute(tracer).infection_status
    command.undo(tracer)
    assert _state(tracer) == before


def test_edit_location_undo_restores_previous_record():
    tracer = _tracer()
    before = _state(tracer)
    command =EditLocation(1, name="Jurong Point Mall")
    command.execute(tracer)
    assert tracer.locations.find_by_id(1).name == "Jurong Point Mall"
    command.undo(tracer)
    assert _state(tracer) == before


@pytest.mark.parametrize("command", [DeletePerson(1), DeleteLocation(1)])
def test_cascading_delete_undo_restores_record_and_visits(command):
    tracer = _tracer()
    before = _state(tracer)
    deletion = command.execute(tracer)
    assert deletion.removed_visits
    command.undo(tracer)
    assert _state(tracer) == before


def test_add_visit_undo_and_redo():
    tracer = _tracer()
    command = AddVisit(1, 1, date(2020, 9, 5))
    visit = command.execute(tracer)
    command.undo(tracer)
    assert visit not in tracer.visits
    command.execute(tracer)
    assert visit in tracer.visits


def test_add_visit_failure_leaves_command_reusable():
    tracer = _tracer()
    command = AddVisit(1, 1, date(2020, 9, 1))
    with pytest.raises(DuplicateVisitError):
        command.execute(tracer)
    assert command.created is None


def test_delete_visit_undo_reinserts_at_former_position():
    tracer = _tracer()
    before = _state(tracer)
    command = DeleteVisit(tracer.visits.list()[0])
    command.execute(tracer)
    command.undo(tracer)
    assert _state(tracer) == before


def test_delete_visits_on_date_undo():
    tracer = _tracer()
    before = _state(tracer)
    command = DeleteVisitsOnDate(date(2020, 9, 2))
    assert len(command.execute(tracer)) == 1
    command.undo(tracer)
    assert _state(tracer) == before
