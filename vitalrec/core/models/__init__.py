"""All Pydantic record models for vitalrec.

- records.py: flat relational records (lookup tables, persons, life events)
"""

from .records import (
    # Enumerations
    Table,
    Sex,
    Religion,
    WitnessSide,
    ScanLayout,
    # Base
    Record,
    # Lookup tables
    User,
    Register,
    Name,
    Occupation,
    Director,
    DirectorName,
    Celebrant,
    CelebrantName,
    Officiant,
    OfficiantName,
    # Population
    Person,
    PersonName,
    PersonOccupation,
    # Life events
    Marriage,
    Witness,
    Death,
)

__all__ = [
    "Table",
    "Sex",
    "Religion",
    "WitnessSide",
    "ScanLayout",
    "Record",
    "User",
    "Register",
    "Name",
    "Occupation",
    "Director",
    "DirectorName",
    "Celebrant",
    "CelebrantName",
    "Officiant",
    "OfficiantName",
    "Person",
    "PersonName",
    "PersonOccupation",
    "Marriage",
    "Witness",
    "Death",
]
