"""Record Snapshot: persistence field-set (de)serialization for Visit, Person, Location.

Invariants:
    - to_record produces a JSON-safe dict of strings (tags as a sorted list)
    - from_record checks every field for presence (absent or None -> MissingFieldError,
      in field order) BEFORE any value-format validation runs
    - Ids are one-based decimal strings; anything else -> InvalidIndexError
    - dateOfVisit is strict yyyy-MM-dd; "" is an explicit InvalidFormatError
    - visit_from_record(visit_to_record(v)) == v

Design Decisions:
    - Pure dict codec in core (ADR: on-disk encoding and file IO belong to the shell)
    - Field tables keep presence checks declarative instead of one `if` per field
"""

import re
from collections.abc import Mapping
from datetime import date, datetime

from contact_tracer.core.domain_types import DATE_FORMAT, LocationId, PersonId
from contact_tracer.core.errors import (
    InvalidFormatError, InvalidIndexError, MissingFieldError,
)
from contact_tracer.core.records import (
    Location, Person, Visit, parse_status_token, status_token,
)

VISIT_FIELDS: tuple[str, ...] = (
    "namePerson", "phone", "email", "addressPerson", "quarantineStatus",
    "infectionStatus", "idPerson", "tagged", "nameLocation", "addressLocation",
    "idLocation", "dateOfVisit",
)
PERSON_FIELDS: tuple[str, ...] = (
    "name", "phone", "email", "address", "quarantineStatus",
    "infectionStatus", "id", "tagged",
)
LOCATION_FIELDS: tuple[str, ...] = ("name", "address", "id")

DATE_CONSTRAINTS = "Please enter the correct date format"
_STRICT_DATE_RE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")
_DECIMAL_RE = re.compile(r"[0-9]+")


# ─── Field helpers ───────────────────────────────────────────────

def require_fields(record: Mapping, fields: tuple[str, ...]) -> None:
    """Raise MissingFieldError for the first absent/None field, in field order."""
    if not isinstance(record, Mapping):
        raise InvalidFormatError("record", "Each record must be an object of named fields")
    for name in fields:
        if record.get(name) is None:
            raise MissingFieldError(name)


def parse_index(raw: object, field_name: str) -> int:
    if not isinstance(raw, str) or not _DECIMAL_RE.fullmatch(raw.strip()):
        raise InvalidIndexError(field_name, raw)
    value = int(raw.strip())
    if value < 1:
        raise InvalidIndexError(field_name, raw)
    return value


def parse_visit_date(raw: str, field_name: str = "dateOfVisit") -> date:
    if not isinstance(raw, str) or not raw.strip():
        raise InvalidFormatError(field_name, DATE_CONSTRAINTS)
    if not _STRICT_DATE_RE.fullmatch(raw):
        raise InvalidFormatError(field_name, DATE_CONSTRAINTS)
    try:
        return datetime.strptime(raw, DATE_FORMAT).date()
    except ValueError:
        raise InvalidFormatError(field_name, DATE_CONSTRAINTS) from None


def format_visit_date(value: date) -> str:
    return value.strftime(DATE_FORMAT)


def _string(record: Mapping, name: str) -> str:
    value = record[name]
    if not isinstance(value, str):
        raise InvalidFormatError(name, f"{name} must be a string")
    return value


def _tags(record: Mapping, name: str = "tagged") -> frozenset[str]:
    raw = record[name]
    if (
        isinstance(raw, str) or not isinstance(raw, (list, tuple))
        or not all(isinstance(tag, str) for tag in raw)
    ):
        raise InvalidFormatError(name, "tagged must be a list of tag names")
    return frozenset(raw)


# record attribute -> persistence field, per record shape
_RECORD_TO_FIELD = {
    "person@visit": {"name": "namePerson", "address": "addressPerson", "tags": "tagged"},
    "location@visit": {"name": "nameLocation", "address": "addressLocation"},
    "person": {"tags": "tagged"},
}


def _with_field(scope: str, build):
    """Re-key a record's InvalidFormatError to the persistence field name."""
    try:
        return build()
    except InvalidFormatError as e:
        mapped = _RECORD_TO_FIELD.get(scope, {}).get(e.field_name, e.field_name)
        raise InvalidFormatError(mapped, e.message) from e


# ─── Person / Location ───────────────────────────────────────────

def person_to_record(person: Person) -> dict:
    return {
        "name": person.name,
        "phone": person.phone,
        "email": person.email,
        "address": person.address,
        "quarantineStatus": status_token(person.quarantine_status),
        "infectionStatus": status_token(person.infection_status),
        "id": str(person.id),
        "tagged": sorted(person.tags),
    }


def person_from_record(record: Mapping) -> Person:
    require_fields(record, PERSON_FIELDS)
    return _with_field("person", lambda: Person(
        id=PersonId(parse_index(record["id"], "id")),
        name=_string(record, "name"),
        phone=_string(record, "phone"),
        email=_string(record, "email"),
        address=_string(record, "address"),
        quarantine_status=parse_status_token(record["quarantineStatus"], "quarantineStatus"),
        infection_status=parse_status_token(record["infectionStatus"], "infectionStatus"),
        tags=_tags(record),
    ))


def location_to_record(location: Location) -> dict:
    return {"name": location.name, "address": location.address, "id": str(location.id)}


def location_from_record(record: Mapping) -> Location:
    require_fields(record, LOCATION_FIELDS)
    return Location(
        id=LocationId(parse_index(record["id"], "id")),
        name=_string(record, "name"),
        address=_string(record, "address"),
    )


# ─── Visit ───────────────────────────────────────────────────────

def visit_to_record(visit: Visit) -> dict:
    """Serialize a Visit (with its snapshots) to the persistence field set."""
    person, location = visit.person, visit.location
    return {
        "namePerson": person.name,
        "phone": person.phone,
        "email": person.email,
        "addressPerson": person.address,
        "quarantineStatus": status_token(person.quarantine_status),
        "infectionStatus": status_token(person.infection_status),
        "idPerson": str(person.id),
        "tagged": sorted(person.tags),
        "nameLocation": location.name,
        "addressLocation": location.address,
        "idLocation": str(location.id),
        "dateOfVisit": format_visit_date(visit.date),
    }


def visit_from_record(record: Mapping) -> Visit:
    """Parse a persistence record back into a Visit."""
    require_fields(record, VISIT_FIELDS)
    person = _with_field("person@visit", lambda: Person(
        id=PersonId(parse_index(record["idPerson"], "idPerson")),
        name=_string(record, "namePerson"),
        phone=_string(record, "phone"),
        email=_string(record, "email"),
        address=_string(record, "addressPerson"),
        quarantine_status=parse_status_token(record["quarantineStatus"], "quarantineStatus"),
        infection_status=parse_status_token(record["infectionStatus"], "infectionStatus"),
        tags=_tags(record),
    ))
    location = _with_field("location@visit", lambda: Location(
        id=LocationId(parse_index(record["idLocation"], "idLocation")),
        name=_string(record, "nameLocation"),
        address=_string(record, "addressLocation"),
    ))
    return Visit(
        person=person, location=location,
        date=parse_visit_date(record["dateOfVisit"]),
    )
