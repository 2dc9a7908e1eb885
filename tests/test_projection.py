"""Tests for document projection and the index catalog."""

import logging
from dataclasses import replace

import pytest

from vitalrec.config import GenerationConfig
from vitalrec.core.models import Sex
from vitalrec.generator import generate_dataset
from vitalrec.projection import (
    DEATH_INDEX_PATHS,
    MARRIAGE_INDEX_PATHS,
    RecordIndex,
    index_catalog,
    index_models,
    project_death,
    project_documents,
    project_marriage,
)

FOREIGN_KEYS = {
    "groom_id",
    "bride_id",
    "user_id",
    "register_id",
    "officiant_id",
    "director_id",
    "celebrant_id",
    "person_id",
    "father_id",
    "mother_id",
}


@pytest.fixture(scope="module")
def dataset():
    return generate_dataset(GenerationConfig(records_count=150), seed=1234)


@pytest.fixture(scope="module")
def index(dataset):
    return RecordIndex.build(dataset)


def _walk_keys(doc):
    """Every key of a nested document."""
    if isinstance(doc, dict):
        for key, value in doc.items():
            yield key
            yield from _walk_keys(value)
    elif isinstance(doc, list):
        for item in doc:
            yield from _walk_keys(item)


class TestRecordIndex:
    def test_maps(self, dataset, index):
        assert len(index.persons) == len(dataset.persons)
        assert len(index.names) == len(dataset.pools.names)
        assert sum(len(v) for v in index.person_names.values()) == len(
            dataset.person_names
        )

    def test_kids_of_middle_generation(self, dataset, index):
        for person in dataset.persons:
            if person.has_both_parents:
                continue
            parent_id = person.father_id
            if parent_id is None:
                parent_id = person.mother_id
            if parent_id is not None:
                assert person.id in index.kids[parent_id]

    def test_first_marriage_wins(self, dataset, index):
        first: dict[int, int] = {}
        for marriage in dataset.marriages:
            first.setdefault(marriage.groom_id, marriage.bride_id)
        assert index.spouse_as_groom == first


class TestMarriageDocuments:
    def test_groom_and_bride_match_record(self, dataset, index):
        for marriage in dataset.marriages:
            doc = project_marriage(marriage, index)
            assert doc["groom"]["_id_person"] == marriage.groom_id
            assert doc["bride"]["_id_person"] == marriage.bride_id
            assert doc["_id_marriage"] == marriage.id

    def test_foreign_keys_removed(self, dataset, index):
        for marriage in dataset.marriages:
            doc = project_marriage(marriage, index)
            assert not FOREIGN_KEYS & set(_walk_keys(doc))

    def test_embedded_references(self, dataset, index):
        marriage = dataset.marriages[0]
        doc = project_marriage(marriage, index)
        assert doc["register"] == index.registers[marriage.register_id].to_record()
        assert doc["user"]["_id_user"] == marriage.user_id
        assert doc["officiant"]["_id_officiant"] == marriage.officiant_id
        assert len(doc["officiant"]["name"]) == 1
        assert doc["date"] == marriage.date.isoformat()

    def test_parents_embedded(self, dataset, index):
        for marriage in dataset.marriages:
            doc = project_marriage(marriage, index)
            groom = index.persons[marriage.groom_id]
            assert doc["groom"]["father"]["_id_person"] == groom.father_id
            assert doc["groom"]["mother"]["_id_person"] == groom.mother_id
            bride = index.persons[marriage.bride_id]
            assert doc["bride"]["mother"]["_id_person"] == bride.mother_id
            assert doc["groom"]["father"]["name"]

    def test_witnesses(self, dataset, index):
        doc = project_marriage(dataset.marriages[0], index)
        witnesses = doc["witnesses"]
        assert len(witnesses) == 4
        for witness in witnesses:
            assert witness["side"] in ("ženicha", "nevěsty")
            assert "relationship" in witness
            assert witness["_id_person"] in index.persons
            assert "marriage_id" not in witness
            person = index.persons[witness["_id_person"]]
            assert witness["surname"] == person.surname
            assert witness["name"] == index.name_list(person.id)

    def test_name_and_occupations_omitted_when_empty(self, dataset, index):
        marriage = dataset.marriages[0]
        bare = replace(
            index,
            person_names={},
            person_occupations={},
        )
        doc = project_marriage(marriage, bare)
        assert "name" not in doc["groom"]
        assert "occupations" not in doc["groom"]


class TestDeathDocuments:
    def test_person_matches_record(self, dataset, index):
        for death in dataset.deaths:
            doc = project_death(death, index)
            assert doc["person"]["_id_person"] == death.person_id
            assert doc["_id_death"] == death.id
            assert not FOREIGN_KEYS & set(_walk_keys(doc))

    def test_staff_embedded(self, dataset, index):
        death = dataset.deaths[0]
        doc = project_death(death, index)
        assert doc["director"]["_id_director"] == death.director_id
        assert doc["celebrant"]["_id_celebrant"] == death.celebrant_id
        assert doc["director"]["name"]
        assert doc["register"]["_id_register"] == death.register_id

    def test_parents_and_kids(self, dataset, index):
        for death in dataset.deaths:
            doc = project_death(death, index)
            person = index.persons[death.person_id]
            assert doc["father"]["_id_person"] == person.father_id
            assert doc["mother"]["_id_person"] == person.mother_id
            kid_ids = index.kids.get(person.id, [])
            if kid_ids:
                assert [k["_id_person"] for k in doc["kids"]] == kid_ids
            else:
                assert "kids" not in doc

    def test_spouse(self, dataset, index):
        married = 0
        for death in dataset.deaths:
            doc = project_death(death, index)
            person = index.persons[death.person_id]
            spouses = (
                index.spouse_as_groom
                if person.sex == Sex.MALE
                else index.spouse_as_bride
            )
            if person.id in spouses:
                married += 1
                assert doc["bride_groom"]["_id_person"] == spouses[person.id]
            else:
                assert "bride_groom" not in doc
        assert married > 0

    def test_optional_dates_absent(self, dataset, index):
        for death in dataset.deaths:
            doc = project_death(death, index)
            if death.provision_date is None:
                assert "provision_date" not in doc
            else:
                assert "funeral_date" not in doc


class TestLookupMisses:
    def test_dangling_register_omitted(self, dataset, index, caplog):
        marriage = dataset.marriages[0].model_copy(update={"register_id": 10**6})
        with caplog.at_level(logging.DEBUG, logger="vitalrec"):
            doc = project_marriage(marriage, index)
        assert "register" not in doc
        assert "groom" in doc
        assert "Register 1000000 not found" in caplog.text

    def test_dangling_person_omitted(self, dataset, index):
        death = dataset.deaths[0].model_copy(update={"person_id": 10**6})
        doc = project_death(death, index)
        assert "person" not in doc
        assert "father" not in doc
        assert doc["register"]["_id_register"] == death.register_id

    def test_missing_witness_dropped(self, dataset, index):
        marriage = dataset.marriages[0]
        witnesses = index.witnesses[marriage.id]
        dangling = witnesses[0].model_copy(update={"person_id": 10**6})
        broken = [dangling] + witnesses[1:]
        doc = project_marriage(
            marriage, replace(index, witnesses={marriage.id: broken})
        )
        assert len(doc["witnesses"]) == 3


class TestProjectDocuments:
    def test_counts(self, dataset):
        marriages, deaths = project_documents(dataset)
        assert len(marriages) == len(dataset.marriages)
        assert len(deaths) == len(dataset.deaths)


class TestIndexCatalog:
    def test_index_models(self):
        assert index_models(["date", "groom.name"]) == [
            {"name": "date", "key": {"date": 1}},
            {"name": "groom.name", "key": {"groom.name": 1}},
        ]

    def test_catalog_within_collection_limit(self):
        catalog = index_catalog()
        assert len(catalog["marriages"]) == len(MARRIAGE_INDEX_PATHS) <= 64
        assert len(catalog["deaths"]) == len(DEATH_INDEX_PATHS) <= 64

    def test_paths_exist_in_documents(self, dataset):
        marriages, deaths = project_documents(dataset)
        marriage_keys = _dotted_paths(marriages)
        assert "groom.father._id_person" in marriage_keys
        assert "witnesses._id_person" in marriage_keys
        assert "register.signature" in _dotted_paths(deaths)


def _dotted_paths(docs, prefix=""):
    paths = set()
    for doc in docs:
        for key, value in doc.items():
            path = f"{prefix}{key}"
            paths.add(path)
            if isinstance(value, dict):
                paths |= _dotted_paths([value], f"{path}.")
            elif isinstance(value, list) and value and isinstance(value[0], dict):
                paths |= _dotted_paths(value, f"{path}.")
    return paths
