"""Records: immutable Person, Location and Visit value objects.

Invariants:
    - Records are frozen: edits produce a new record (dataclasses.replace), never in-place mutation
    - Field values are validated on construction; an invalid record cannot exist
    - A Visit embeds snapshots of its Person and Location taken at creation time
    - Visit uniqueness key is (person.id, location.id, date)

Design Decisions:
    - Three equality tiers per entity: same id, same identity (+ same id), full equality (==)
    - Snapshot over reference inside Visit: editing a Person never rewrites history
      (ADR: historical record semantics; staleness trade-off accepted)
"""

import re
from dataclasses import dataclass, field
from datetime import date

from contact_tracer.core.domain_types import (
    FIRST_ID, LocationId, PersonId, StatusToken,
)
from contact_tracer.core.errors import InvalidFormatError, InvalidIndexError

# ─── Field constraints ───────────────────────────────────────────

NAME_CONSTRAINTS = "Names should only contain alphanumeric characters and spaces, and it should not be blank"
PHONE_CONSTRAINTS = "Phone numbers should only contain numbers, and it should be at least 3 digits long"
EMAIL_CONSTRAINTS = (
    "Emails should be of the format local-part@domain: the local-part contains "
    "alphanumerics and +_.- (not at the start or end), the domain ends with a "
    "label of at least 2 characters"
)
ADDRESS_CONSTRAINTS = "Addresses can take any values, and it should not be blank"
TAG_CONSTRAINTS = "Tags names should be alphanumeric"
STATUS_CONSTRAINTS = "Status should be either 'true' or 'false'"

# Whole-value patterns: always applied with fullmatch
_NAME_RE = re.compile(r"[A-Za-z0-9][A-Za-z0-9 ]*")
_PHONE_RE = re.compile(r"[0-9]{3,}")
_EMAIL_RE = re.compile(
    r"[A-Za-z0-9]([A-Za-z0-9+_.-]*[A-Za-z0-9])?"
    r"@([A-Za-z0-9]([A-Za-z0-9-]*[A-Za-z0-9])?\.)*"
    r"[A-Za-z0-9][A-Za-z0-9-]*[A-Za-z0-9]"
)
_ADDRESS_RE = re.compile(r"\S.*")
_TAG_RE = re.compile(r"[A-Za-z0-9]+")


def _check(value: object, pattern: re.Pattern, field_name: str, constraint: str) -> None:
    if not isinstance(value, str) or not pattern.fullmatch(value):
        raise InvalidFormatError(field_name, constraint)


def _check_id(value: object, field_name: str) -> None:
    if isinstance(value, bool) or not isinstance(value, int) or value < FIRST_ID:
        raise InvalidIndexError(field_name, value)


def status_token(flag: bool) -> str:
    """Render a status boolean as its boundary token."""
    return StatusToken.TRUE.value if flag else StatusToken.FALSE.value


def parse_status_token(token: str, field_name: str) -> bool:
    """Parse a "true"/"false" token (case-insensitive)."""
    normalized = token.strip().lower() if isinstance(token, str) else None
    if normalized == StatusToken.TRUE.value:
        return True
    if normalized == StatusToken.FALSE.value:
        return False
    raise InvalidFormatError(field_name, STATUS_CONSTRAINTS)


# ─── Person ──────────────────────────────────────────────────────

@dataclass(frozen=True)
class Person:
    """A registered person. Identity fields: name, phone, email, id."""

    id: PersonId
    name: str
    phone: str
    email: str
    address: str
    quarantine_status: bool = False
    infection_status: bool = False
    tags: frozenset[str] = field(default_factory=frozenset)

    def __post_init__(self):
        _check_id(self.id, "id")
        _check(self.name, _NAME_RE, "name", NAME_CONSTRAINTS)
        _check(self.phone, _PHONE_RE, "phone", PHONE_CONSTRAINTS)
        _check(self.email, _EMAIL_RE, "email", EMAIL_CONSTRAINTS)
        _check(self.address, _ADDRESS_RE, "address", ADDRESS_CONSTRAINTS)
        tags = frozenset(self.tags)
        for tag in tags:
            _check(tag, _TAG_RE, "tags", TAG_CONSTRAINTS)
        object.__setattr__(self, "tags", tags)

    def is_same_id(self, other: "Person | None") -> bool:
        return other is not None and other.id == self.id

    def is_same_person(self, other: "Person | None") -> bool:
        """Same name, same phone or email, and same id; weaker than ==."""
        if other is self:
            return True
        return (
            other is not None
            and other.name == self.name
            and (other.phone == self.phone or other.email == self.email)
            and other.id == self.id
        )

    def is_same_identity(self, other: "Person | None") -> bool:
        return self.is_same_person(other)

    def is_same_identity_except_id(self, other: "Person | None") -> bool:
        """Same name, phone and email regardless of id (duplicate registration)."""
        return (
            other is not None
            and other.name == self.name
            and other.phone == self.phone
            and other.email == self.email
        )


# ─── Location ────────────────────────────────────────────────────

@dataclass(frozen=True)
class Location:
    """A registered location. Identity fields: name, address, id."""

    id: LocationId
    name: str
    address: str

    def __post_init__(self):
        _check_id(self.id, "id")
        _check(self.name, _NAME_RE, "name", NAME_CONSTRAINTS)
        _check(self.address, _ADDRESS_RE, "address", ADDRESS_CONSTRAINTS)

    def is_same_id(self, other: "Location | None") -> bool:
        return other is not None and other.id == self.id

    def is_same_location(self, other: "Location | None") -> bool:
        if other is self:
            return True
        return (
            other is not None
            and other.name == self.name
            and other.address == self.address
            and other.id == self.id
        )

    def is_same_identity(self, other: "Location | None") -> bool:
        return self.is_same_location(other)

    def is_same_identity_except_id(self, other: "Location | None") -> bool:
        return (
            other is not None
            and other.name == self.name
            and other.address == self.address
        )


# ─── Visit ───────────────────────────────────────────────────────

@dataclass(frozen=True)
class Visit:
    """One occurrence of a person at a location on a date.

    `person` and `location` are snapshots taken when the visit was recorded.
    """

    person: Person
    location: Location
    date: date

    @property
    def person_id(self) -> PersonId:
        return self.person.id

    @property
    def location_id(self) -> LocationId:
        return self.location.id

    @property
    def key(self) -> tuple[PersonId, LocationId, date]:
        return (self.person.id, self.location.id, self.date)
