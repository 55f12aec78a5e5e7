"""Reversible Commands: one object per mutation, each knowing its own inverse.

Invariants:
    - execute() performs exactly one ContactTracer mutation and returns its result
    - undo() is only valid directly after execute()/redo of the same command
      (history managers apply commands in LIFO order)
    - Re-executing a registration re-adds the same record: ids are never reissued

Design Decisions:
    - Commands hold the state they need to undo (removed records, positions)
      instead of diffing whole books
    - Core defines commands; the history stack lives in services/ so the core
      never depends on it
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable
from datetime import date
from typing import Any

from contact_tracer.core.contact_tracer import CascadeDeletion, ContactTracer
from contact_tracer.core.records import Location, Person, Visit


class Command(ABC):
    """A reversible mutation of a ContactTracer."""

    name: str = "command"

    @abstractmethod
    def execute(self, tracer: ContactTracer) -> Any: ...

    @abstractmethod
    def undo(self, tracer: ContactTracer) -> None: ...

    def __repr__(self) -> str:
        return f"<{type(self).__name__}>"


# ─── People ──────────────────────────────────────────────────────

class RegisterPerson(Command):
    name = "register_person"

    def __init__(self, name: str, phone: str, email: str, address: str,
                 quarantine_status: bool = False, infection_status: bool = False,
                 tags: Iterable[str] = ()):
        self.fields = dict(
            name=name, phone=phone, email=email, address=address,
            quarantine_status=quarantine_status, infection_status=infection_status,
            tags=frozenset(tags),
        )
        self.created: Person | None = None

    def execute(self, tracer: ContactTracer) -> Person:
        if self.created is None:
            self.created = tracer.register_person(**self.fields)
        else:
            tracer.people.add(self.created)
        return self.created

    def undo(self, tracer: ContactTracer) -> None:
        tracer.people.remove(self.created)


class EditPerson(Command):
    name = "edit_person"

    def __init__(self, person_id: int, **changes: Any):
        self.person_id = person_id
        self.changes = changes
        self.before: Person | None = None
        self.after: Person | None = None

    def execute(self, tracer: ContactTracer) -> Person:
        self.before = tracer.people.find_by_id(self.person_id)
        self.after = tracer.edit_person(self.person_id, **self.changes)
        return self.after

    def undo(self, tracer: ContactTracer) -> None:
        tracer.people.set_entry(self.after, self.before)


class DeletePerson(Command):
    name = "delete_person"

    def __init__(self, person_id: int):
        self.person_id = person_id
        self.deletion: CascadeDeletion | None = None

    def execute(self, tracer: ContactTracer) -> CascadeDeletion:
        self.deletion = tracer.delete_person(self.person_id)
        return self.deletion

    def undo(self, tracer: ContactTracer) -> None:
        tracer.people.restore(self.deletion.record, self.deletion.position)
        tracer.visits.set_visits(self.deletion.visits_before)


# ─── Locations ───────────────────────────────────────────────────

class RegisterLocation(Command):
    name = "register_location"

    def __init__(self, name: str, address: str):
        self.fields = dict(name=name, address=address)
        self.created: Location | None = None

    def execute(self, tracer: ContactTracer) -> Location:
        if self.created is None:
            self.created = tracer.register_location(**self.fields)
        else:
            tracer.locations.add(self.created)
        return self.created

    def undo(self, tracer: ContactTracer) -> None:
        tracer.locations.remove(self.created)


class EditLocation(Command):
    name = "edit_location"

    def __init__(self, location_id: int, **changes: Any):
        self.location_id = location_id
        self.changes = changes
        self.before: Location | None = None
        self.after: Location | None = None

    def execute(self, tracer: ContactTracer) -> Location:
        self.before = tracer.locations.find_by_id(self.location_id)
        self.after = tracer.edit_location(self.location_id, **self.changes)
        return self.after

    def undo(self, tracer: ContactTracer) -> None:
        tracer.locations.set_entry(self.after, self.before)


class DeleteLocation(Command):
    name = "delete_location"

    def __init__(self, location_id: int):
        self.location_id = location_id
        self.deletion: CascadeDeletion | None = None

    def execute(self, tracer: ContactTracer) -> CascadeDeletion:
        self.deletion = tracer.delete_location(self.location_id)
        return self.deletion

    def undo(self, tracer: ContactTracer) -> None:
        tracer.locations.restore(self.deletion.record, self.deletion.position)
        tracer.visits.set_visits(self.deletion.visits_before)


# ─── Visits ──────────────────────────────────────────────────────

class AddVisit(Command):
    name = "add_visit"

    def __init__(self, person_id: int, location_id: int, on: date):
        self.person_id = person_id
        self.location_id = location_id
        self.on = on
        self.created: Visit | None = None

    def execute(self, tracer: ContactTracer) -> Visit:
        if self.created is None:
            self.created = tracer.add_visit(self.person_id, self.location_id, self.on)
        else:
            tracer.visits.add(self.created)
        return self.created

    def undo(self, tracer: ContactTracer) -> None:
        tracer.visits.remove(self.created)


class DeleteVisit(Command):
    name = "delete_visit"

    def __init__(self, visit: Visit):
        self.visit = visit
        self.position: int | None = None

    def execute(self, tracer: ContactTracer) -> Visit:
        self.position = tracer.delete_visit(self.visit)
        return self.visit

    def undo(self, tracer: ContactTracer) -> None:
        tracer.visits.insert(self.position, self.visit)


class DeleteVisitsOnDate(Command):
    name = "delete_visits_on_date"

    def __init__(self, on: date):
        self.on = on
        self.visits_before: tuple[Visit, ...] = ()

    def execute(self, tracer: ContactTracer) -> tuple[Visit, ...]:
        self.visits_before = tracer.visits.list()
        return tracer.delete_visits_on_date(self.on)

    def undo(self, tracer: ContactTracer) -> None:
        tracer.visits.set_visits(self.visits_before)
