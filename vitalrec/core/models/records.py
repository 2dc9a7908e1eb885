"""Flat record models for the normalized vital-records tables.

Every record is an immutable pydantic model. Identifier fields are exposed
under their relational column names (``_id_person``, ``_id_marriage``...)
through aliases, so ``to_record()`` yields a row ready for an INSERT
statement and ``model_dump()`` without aliases stays attribute-friendly.
"""

import datetime as dt
from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Enumerations
# =============================================================================


class Table(str, Enum):
    """Relational table names, in the casing used by the INSERT emitter."""

    USER = "User"
    REGISTER = "Register"
    NAME = "Name"
    OCCUPATION = "Occupation"
    DIRECTOR = "Director"
    DIRECTOR_NAME = "DirectorName"
    CELEBRANT = "Celebrant"
    CELEBRANT_NAME = "CelebrantName"
    OFFICIANT = "Officiant"
    OFFICIANT_NAME = "OfficiantName"
    PERSON = "Person"
    PERSON_NAME = "PersonName"
    PERSON_OCCUPATION = "PersonOccupation"
    MARRIAGE = "Marriage"
    WITNESS = "Witness"
    DEATH = "Death"


class Sex(str, Enum):
    MALE = "muž"
    FEMALE = "žena"


class Religion(str, Enum):
    CATHOLIC = "katolík"
    EVANGELICAL = "evangelík"
    UNBAPTIZED = "nepokřtěn"


class WitnessSide(str, Enum):
    GROOM = "ženicha"
    BRIDE = "nevěsty"


ScanLayout = Literal["C", "L", "P"]


# =============================================================================
# Base
# =============================================================================


class Record(BaseModel):
    """Base class for flat records."""

    model_config = ConfigDict(
        frozen=True, populate_by_name=True, use_enum_values=True
    )

    def to_record(self) -> dict[str, Any]:
        """Row representation: column names, ISO dates, absent optionals dropped."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


# =============================================================================
# Lookup tables
# =============================================================================


class User(Record):
    id: int = Field(alias="_id_user")
    name: str


class Register(Record):
    id: int = Field(alias="_id_register")
    archive: str
    fond: str
    signature: int


class Name(Record):
    id: int = Field(alias="_id_name")
    name: str


class Occupation(Record):
    id: int = Field(alias="_id_occup")
    name: str


class Director(Record):
    id: int = Field(alias="_id_director")
    surname: str
    title: str


class DirectorName(Record):
    director_id: int
    name_id: int


class Celebrant(Record):
    id: int = Field(alias="_id_celebrant")
    surname: str
    title_occup: str


class CelebrantName(Record):
    celebrant_id: int
    name_id: int


class Officiant(Record):
    id: int = Field(alias="_id_officiant")
    surname: str
    title: str


class OfficiantName(Record):
    officiant_id: int
    name_id: int


# =============================================================================
# Population
# =============================================================================


class Person(Record):
    """A generated person.

    First-generation persons have no parent ids, middle-generation persons
    have both, and kids carry exactly one.
    """

    id: int = Field(alias="_id_person")
    surname: str
    village: str
    street: str
    descr: int
    birth: dt.date
    sex: Sex
    religion: Religion
    mother_id: int | None = None
    father_id: int | None = None

    @property
    def has_both_parents(self) -> bool:
        return self.mother_id is not None and self.father_id is not None


class PersonName(Record):
    person_id: int
    name_id: int


class PersonOccupation(Record):
    person_id: int
    occup_id: int


# =============================================================================
# Life events
# =============================================================================


class Marriage(Record):
    id: int = Field(alias="_id_marriage")
    rec_ready: bool
    rec_order: int
    scan_order: int
    scan_layout: ScanLayout
    date: dt.date
    village: str
    groom_y: int
    groom_m: int
    groom_d: int
    bride_y: int
    bride_m: int
    bride_d: int
    groom_adult: bool
    bride_adult: bool
    relationship: str
    banns_1: dt.date | None = None
    banns_2: dt.date | None = None
    banns_3: dt.date | None = None
    groom_id: int
    bride_id: int
    user_id: int
    register_id: int
    officiant_id: int


class Witness(Record):
    marriage_id: int
    person_id: int
    side: WitnessSide
    relationship: str


class Death(Record):
    id: int = Field(alias="_id_death")
    rec_ready: bool
    rec_order: int
    scan_order: int
    scan_layout: ScanLayout
    provision_date: dt.date | None = None
    death_date: dt.date | None = None
    funeral_date: dt.date | None = None
    death_village: str
    death_street: str
    death_descr: int
    place_funeral: str
    place_death: str | None = None
    widowed: bool
    age_y: int
    age_m: int
    age_d: int
    age_h: int
    death_cause: str | None = None
    inspection: bool
    inspection_by: str | None = None
    notes: str | None = None
    person_id: int
    user_id: int
    register_id: int
    director_id: int
    celebrant_id: int
