"""Record Schemas: Pydantic models for people, locations and visits at the API boundary.

Invariants:
    - Create and Update schemas strip whitespace; value-format rules stay in core records
      (InvalidFormatError surfaces as a 400)
    - Update schemas are partial: only fields that were sent are applied
    - Response schemas are built from core records via from_record()

Design Decisions:
    - Dates travel as ISO yyyy-MM-dd (pydantic date parsing)
"""

import datetime

from pydantic import BaseModel, Field, field_validator

from contact_tracer.core.records import Location, Person, Visit


# --- People ------------------------------------------------------------------

class PersonCreate(BaseModel):
    """Person registration."""
    name: str = Field(min_length=1, max_length=200)
    phone: str = Field(min_length=1, max_length=50)
    email: str = Field(min_length=1, max_length=320)
    address: str = Field(min_length=1, max_length=500)
    quarantine_status: bool = False
    infection_status: bool = False
    tags: list[str] = Field(default_factory=list)

    @field_validator("name", "phone", "email", "address")
    @classmethod
    def strip_text(cls, v: str) -> str:
        return v.strip()


class PersonUpdate(BaseModel):
    """Partial person edit; unset fields are left unchanged."""
    name: str | None = Field(None, min_length=1, max_length=200)
    phone: str | None = Field(None, min_length=1, max_length=50)
    email: str | None = Field(None, min_length=1, max_length=320)
    address: str | None = Field(None, min_length=1, max_length=500)
    quarantine_status: bool | None = None
    infection_status: bool | None = None
    tags: list[str] | None = None

    @field_validator("name", "phone", "email", "address")
    @classmethod
    def strip_text(cls, v: str | None) -> str | None:
        return v.strip() if v is not None else v

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True, exclude_none=True)


class PersonResponse(BaseModel):
    id: int
    name: str
    phone: str
    email: str
    address: str
    quarantine_status: bool
    infection_status: bool
    tags: list[str]

    @classmethod
    def from_record(cls, person: Person) -> "PersonResponse":
        return cls(
            id=person.id, name=person.name, phone=person.phone,
            email=person.email, address=person.address,
            quarantine_status=person.quarantine_status,
            infection_status=person.infection_status,
            tags=sorted(person.tags),
        )


# --- Locations ---------------------------------------------------------------

class LocationCreate(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    address: str = Field(min_length=1, max_length=500)

    @field_validator("name", "address")
    @classmethod
    def strip_text(cls, v: str) -> str:
        return v.strip()


class LocationUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=200)
    address: str | None = Field(None, min_length=1, max_length=500)

    @field_validator("name", "address")
    @classmethod
    def strip_text(cls, v: str | None) -> str | None:
        return v.strip() if v is not None else v

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True, exclude_none=True)


class LocationResponse(BaseModel):
    id: int
    name: str
    address: str

    @classmethod
    def from_record(cls, location: Location) -> "LocationResponse":
        return cls(id=location.id, name=location.name, address=location.address)


# --- Visits ------------------------------------------------------------------

class VisitKey(BaseModel):
    """Identifies one visit: (person id, location id, date)."""
    person_id: int = Field(ge=1)
    location_id: int = Field(ge=1)
    date: datetime.date


class VisitResponse(BaseModel):
    """Visit with the person/location snapshot taken when it was recorded."""
    person: PersonResponse
    location: LocationResponse
    date: datetime.date

    @classmethod
    def from_record(cls, visit: Visit) -> "VisitResponse":
        return cls(
            person=PersonResponse.from_record(visit.person),
            location=LocationResponse.from_record(visit.location),
            date=visit.date,
        )
