"""Denormalization of flat records into marriage and death documents.

``RecordIndex`` builds every id -> entity and id -> related-ids map once, so
projecting a document is a handful of dict lookups. Projection never fails on
a dangling foreign key: the affected sub-document or list entry is left out
and the miss is logged at DEBUG.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Any, Mapping, TypeVar

from ..core.errors import LookupMiss
from ..core.models import (
    Celebrant,
    Death,
    Director,
    Marriage,
    Name,
    Occupation,
    Officiant,
    Person,
    Register,
    Sex,
    User,
    Witness,
)
from ..generator.core import GeneratedDataset

logger = logging.getLogger(__name__)

T = TypeVar("T")

Document = dict[str, Any]

PARENT_KEYS = ("father_id", "mother_id")
MARRIAGE_FOREIGN_KEYS = (
    "groom_id",
    "bride_id",
    "user_id",
    "register_id",
    "officiant_id",
)
DEATH_FOREIGN_KEYS = (
    "person_id",
    "user_id",
    "register_id",
    "director_id",
    "celebrant_id",
)


def _lookup(mapping: Mapping[int, T], entity: str, key: int | None) -> T:
    if key is None or key not in mapping:
        raise LookupMiss(entity, key)
    return mapping[key]


@dataclass
class RecordIndex:
    """Lookup maps over one generated dataset."""

    persons: dict[int, Person] = field(default_factory=dict)
    names: dict[int, Name] = field(default_factory=dict)
    occupations: dict[int, Occupation] = field(default_factory=dict)
    users: dict[int, User] = field(default_factory=dict)
    registers: dict[int, Register] = field(default_factory=dict)
    directors: dict[int, Director] = field(default_factory=dict)
    celebrants: dict[int, Celebrant] = field(default_factory=dict)
    officiants: dict[int, Officiant] = field(default_factory=dict)
    person_names: dict[int, list[int]] = field(default_factory=dict)
    person_occupations: dict[int, list[int]] = field(default_factory=dict)
    director_names: dict[int, list[int]] = field(default_factory=dict)
    celebrant_names: dict[int, list[int]] = field(default_factory=dict)
    officiant_names: dict[int, list[int]] = field(default_factory=dict)
    witnesses: dict[int, list[Witness]] = field(default_factory=dict)
    kids: dict[int, list[int]] = field(default_factory=dict)
    # Spouse of the first marriage naming the person as groom / as bride
    spouse_as_groom: dict[int, int] = field(default_factory=dict)
    spouse_as_bride: dict[int, int] = field(default_factory=dict)

    @classmethod
    def build(cls, dataset: GeneratedDataset) -> "RecordIndex":
        pools = dataset.pools
        index = cls(
            persons={p.id: p for p in dataset.persons},
            names={n.id: n for n in pools.names},
            occupations={o.id: o for o in pools.occupations},
            users={u.id: u for u in pools.users},
            registers={r.id: r for r in pools.registers},
            directors={d.id: d for d in pools.directors},
            celebrants={c.id: c for c in pools.celebrants},
            officiants={o.id: o for o in pools.officiants},
        )

        person_names: dict[int, list[int]] = defaultdict(list)
        for link in dataset.person_names:
            person_names[link.person_id].append(link.name_id)
        person_occupations: dict[int, list[int]] = defaultdict(list)
        for link in dataset.person_occupations:
            person_occupations[link.person_id].append(link.occup_id)
        director_names: dict[int, list[int]] = defaultdict(list)
        for link in pools.director_names:
            director_names[link.director_id].append(link.name_id)
        celebrant_names: dict[int, list[int]] = defaultdict(list)
        for link in pools.celebrant_names:
            celebrant_names[link.celebrant_id].append(link.name_id)
        officiant_names: dict[int, list[int]] = defaultdict(list)
        for link in pools.officiant_names:
            officiant_names[link.officiant_id].append(link.name_id)
        witnesses: dict[int, list[Witness]] = defaultdict(list)
        for witness in dataset.witnesses:
            witnesses[witness.marriage_id].append(witness)

        kids: dict[int, list[int]] = defaultdict(list)
        for person in dataset.persons:
            for parent_id in {person.father_id, person.mother_id} - {None}:
                kids[parent_id].append(person.id)

        for marriage in dataset.marriages:
            index.spouse_as_groom.setdefault(marriage.groom_id, marriage.bride_id)
            index.spouse_as_bride.setdefault(marriage.bride_id, marriage.groom_id)

        index.person_names = dict(person_names)
        index.person_occupations = dict(person_occupations)
        index.director_names = dict(director_names)
        index.celebrant_names = dict(celebrant_names)
        index.officiant_names = dict(officiant_names)
        index.witnesses = dict(witnesses)
        index.kids = dict(kids)
        return index

    # -------------------------------------------------------------------------
    # Reference resolution
    # -------------------------------------------------------------------------

    def _resolve_names(self, name_ids: list[int], owner: str) -> list[str]:
        resolved = []
        for name_id in name_ids:
            try:
                resolved.append(_lookup(self.names, "Name", name_id).name)
            except LookupMiss as e:
                logger.debug("Skipping name of %s: %s", owner, e)
        return resolved

    def name_list(self, person_id: int) -> list[str]:
        return self._resolve_names(
            self.person_names.get(person_id, []), f"person {person_id}"
        )

    def occupation_list(self, person_id: int) -> list[str]:
        resolved = []
        for occup_id in self.person_occupations.get(person_id, []):
            try:
                occupation = _lookup(self.occupations, "Occupation", occup_id)
                resolved.append(occupation.name)
            except LookupMiss as e:
                logger.debug("Skipping occupation of person %d: %s", person_id, e)
        return resolved

    def person_document(self, person_id: int | None) -> Document:
        """Person attributes with names and occupations, parent keys removed.

        Raises:
            LookupMiss: If the person does not exist.
        """
        person = _lookup(self.persons, "Person", person_id)
        doc = person.to_record()
        for key in PARENT_KEYS:
            doc.pop(key, None)
        _attach(doc, "name", self.name_list(person.id))
        _attach(doc, "occupations", self.occupation_list(person.id))
        return doc

    def staff_document(
        self,
        entity: str,
        records: Mapping[int, Any],
        name_links: Mapping[int, list[int]],
        key: int,
    ) -> Document:
        """Director, celebrant or officiant with its name list."""
        doc = _lookup(records, entity, key).to_record()
        names = self._resolve_names(name_links.get(key, []), f"{entity} {key}")
        _attach(doc, "name", names)
        return doc


def _attach(doc: Document, key: str, values: list[str]) -> None:
    if values:
        doc[key] = values


def _embed(doc: Document, key: str, build, *args) -> None:
    """Set ``doc[key]`` to ``build(*args)``; leave it out on a lookup miss."""
    try:
        doc[key] = build(*args)
    except LookupMiss as e:
        logger.debug("Omitting %s: %s", key, e)


def _record_document(records: Mapping[int, Any], entity: str, key: int) -> Document:
    return _lookup(records, entity, key).to_record()


def _person_with_parents(index: RecordIndex, person_id: int) -> Document:
    doc = index.person_document(person_id)
    person = index.persons[person_id]
    _embed(doc, "father", index.person_document, person.father_id)
    _embed(doc, "mother", index.person_document, person.mother_id)
    return doc


def _witness_document(index: RecordIndex, witness: Witness) -> Document:
    doc: Document = {"side": witness.side, "relationship": witness.relationship}
    doc.update(index.person_document(witness.person_id))
    return doc


# =============================================================================
# Projection
# =============================================================================


def project_marriage(marriage: Marriage, index: RecordIndex) -> Document:
    """Embed register, user, officiant, witnesses, groom and bride."""
    doc = marriage.to_record()
    for key in MARRIAGE_FOREIGN_KEYS:
        doc.pop(key, None)

    _embed(
        doc,
        "register",
        _record_document,
        index.registers,
        "Register",
        marriage.register_id,
    )
    _embed(doc, "user", _record_document, index.users, "User", marriage.user_id)
    _embed(
        doc,
        "officiant",
        index.staff_document,
        "Officiant",
        index.officiants,
        index.officiant_names,
        marriage.officiant_id,
    )

    witnesses = []
    for witness in index.witnesses.get(marriage.id, []):
        try:
            witnesses.append(_witness_document(index, witness))
        except LookupMiss as e:
            logger.debug("Omitting witness of marriage %d: %s", marriage.id, e)
    if witnesses:
        doc["witnesses"] = witnesses

    _embed(doc, "groom", _person_with_parents, index, marriage.groom_id)
    _embed(doc, "bride", _person_with_parents, index, marriage.bride_id)
    return doc


def project_death(death: Death, index: RecordIndex) -> Document:
    """Embed register, user, staff, the person, parents, spouse and kids."""
    doc = death.to_record()
    for key in DEATH_FOREIGN_KEYS:
        doc.pop(key, None)

    _embed(
        doc,
        "register",
        _record_document,
        index.registers,
        "Register",
        death.register_id,
    )
    _embed(doc, "user", _record_document, index.users, "User", death.user_id)
    _embed(
        doc,
        "director",
        index.staff_document,
        "Director",
        index.directors,
        index.director_names,
        death.director_id,
    )
    _embed(
        doc,
        "celebrant",
        index.staff_document,
        "Celebrant",
        index.celebrants,
        index.celebrant_names,
        death.celebrant_id,
    )

    _embed(doc, "person", index.person_document, death.person_id)
    person = index.persons.get(death.person_id)
    if person is None:
        return doc

    _embed(doc, "father", index.person_document, person.father_id)
    _embed(doc, "mother", index.person_document, person.mother_id)

    if person.sex == Sex.MALE:
        spouses = index.spouse_as_groom
    else:
        spouses = index.spouse_as_bride
    if person.id in spouses:
        _embed(doc, "bride_groom", index.person_document, spouses[person.id])

    kids = []
    for kid_id in index.kids.get(person.id, []):
        try:
            kids.append(index.person_document(kid_id))
        except LookupMiss as e:
            logger.debug("Omitting kid of person %d: %s", person.id, e)
    if kids:
        doc["kids"] = kids
    return doc


def project_documents(
    dataset: GeneratedDataset, index: RecordIndex | None = None
) -> tuple[list[Document], list[Document]]:
    """Project every marriage and death of ``dataset``.

    Returns:
        (marriage documents, death documents), in record order
    """
    index = index or RecordIndex.build(dataset)
    marriages = [project_marriage(m, index) for m in dataset.marriages]
    deaths = [project_death(d, index) for d in dataset.deaths]
    logger.info(
        "Projected %d marriage and %d death documents", len(marriages), len(deaths)
    )
    return marriages, deaths
