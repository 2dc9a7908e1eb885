"""Static index catalog for the document collections.

Only attributes worth querying are listed; a document store typically caps
the number of indexes per collection (64 for MongoDB).
"""

from typing import Any

MARRIAGE_INDEX_PATHS: tuple[str, ...] = (
    "date",
    "village",
    "groom_y",
    "bride_y",
    "relationship",
    "banns_1",
    "banns_2",
    "banns_3",
    "register._id_register",
    "register.signature",
    "user._id_user",
    "officiant._id_officiant",
    "witnesses._id_person",
    "witnesses.relationship",
    "witnesses.village",
    "witnesses.religion",
    "groom._id_person",
    "groom.name",
    "groom.surname",
    "groom.village",
    "groom.occupations",
    "groom.birth",
    "groom.religion",
    "groom.father._id_person",
    "groom.mother._id_person",
    "bride._id_person",
    "bride.name",
    "bride.surname",
    "bride.village",
    "bride.occupations",
    "bride.birth",
    "bride.religion",
    "bride.father._id_person",
    "bride.mother._id_person",
)

DEATH_INDEX_PATHS: tuple[str, ...] = (
    "death_village",
    "place_funeral",
    "widowed",
    # Years only; months and days are rarely queried on their own
    "age_y",
    "inspection",
    "death_cause",
    "death_date",
    "funeral_date",
    "provision_date",
    "place_death",
    "register._id_register",
    "register.signature",
    "user._id_user",
    "director._id_director",
    "celebrant._id_celebrant",
    "person._id_person",
    "person.name",
    "person.surname",
    "person.village",
    "person.birth",
    "person.sex",
    "person.religion",
    "person.occupations",
    "father._id_person",
    "father.village",
    "father.religion",
    "mother._id_person",
    "mother.village",
    "mother.religion",
    "bride_groom._id_person",
    "bride_groom.name",
    "bride_groom.surname",
    "bride_groom.village",
    "bride_groom.religion",
    "bride_groom.occupations",
    "kids._id_person",
    "kids.name",
    "kids.surname",
    "kids.birth",
    "kids.sex",
    "kids.religion",
)


def index_models(paths: tuple[str, ...] | list[str]) -> list[dict[str, Any]]:
    """Ascending single-field index definitions, named after their path."""
    return [{"name": path, "key": {path: 1}} for path in paths]


def index_catalog() -> dict[str, list[dict[str, Any]]]:
    """Index definitions per collection."""
    return {
        "marriages": index_models(MARRIAGE_INDEX_PATHS),
        "deaths": index_models(DEATH_INDEX_PATHS),
    }
