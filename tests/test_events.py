"""Tests for marriage and death derivation."""

import datetime as dt
import logging
import random

import pytest

from vitalrec.config import GenerationConfig
from vitalrec.core.errors import PoolExhausted
from vitalrec.core.models import Person, Religion, Sex, WitnessSide
from vitalrec.corpora import load_corpora
from vitalrec.generator.events import (
    DEATH_AGE_RANGE,
    NOTE_GENERIC,
    NOTE_SWAPPED,
    _PoolDraw,
    eligible_persons,
    generate_deaths,
    generate_marriages,
)
from vitalrec.generator.fakes import make_faker
from vitalrec.generator.persons import generate_population
from vitalrec.generator.pools import build_reference_pools
from vitalrec.generator.sampling import decompose_days


def _make_world(target: int = 400, seed: int = 7):
    corpora = load_corpora()
    rng = random.Random(seed)
    fake = make_faker("cs_CZ", seed)
    pools = build_reference_pools(GenerationConfig(), corpora, rng, fake)
    population = generate_population(target, corpora, pools, rng, fake)
    return population.persons, pools, corpora, rng, fake


def _fixed_triad() -> list[Person]:
    """Mother 0, father 1 and their son 2."""
    common = dict(
        village="Brno", street="Údolní", descr=12, religion=Religion.CATHOLIC
    )
    return [
        Person(
            id=0,
            surname="Nováková",
            birth=dt.date(1805, 3, 1),
            sex=Sex.FEMALE,
            **common,
        ),
        Person(
            id=1, surname="Novák", birth=dt.date(1803, 7, 9), sex=Sex.MALE, **common
        ),
        Person(
            id=2,
            surname="Novák",
            birth=dt.date(1830, 1, 20),
            sex=Sex.MALE,
            mother_id=0,
            father_id=1,
            **common,
        ),
    ]


class TestEligibility:
    def test_only_middle_generation(self):
        persons, *_ = _make_world()
        eligible = eligible_persons(persons)
        assert eligible
        assert all(p.has_both_parents for p in eligible)
        assert len(eligible) == sum(1 for p in persons if p.has_both_parents)

    def test_by_sex(self):
        persons, *_ = _make_world()
        assert all(p.sex == Sex.MALE for p in eligible_persons(persons, Sex.MALE))

    def test_pool_draw_empty(self):
        pool = _PoolDraw("grooms", [], random.Random(0))
        with pytest.raises(PoolExhausted) as exc_info:
            pool.draw()
        assert exc_info.value.pool == "grooms"


class TestMarriages:
    def test_default_count(self):
        persons, pools, _, rng, _ = _make_world()
        brides = eligible_persons(persons, Sex.FEMALE)
        events = generate_marriages(persons, pools, rng)
        assert len(events.marriages) == int(len(brides) * 1.2)
        assert [m.id for m in events.marriages] == list(range(len(events.marriages)))
        assert not events.truncated

    def test_couples(self):
        persons, pools, _, rng, _ = _make_world()
        by_id = {p.id: p for p in persons}
        for marriage in generate_marriages(persons, pools, rng).marriages:
            groom, bride = by_id[marriage.groom_id], by_id[marriage.bride_id]
            assert groom.sex == Sex.MALE
            assert bride.sex == Sex.FEMALE
            assert groom.id != bride.id
            assert groom.has_both_parents and bride.has_both_parents

    def test_ages_and_adulthood(self):
        persons, pools, _, rng, _ = _make_world()
        by_id = {p.id: p for p in persons}
        for m in generate_marriages(persons, pools, rng).marriages:
            groom, bride = by_id[m.groom_id], by_id[m.bride_id]
            assert (m.groom_y, m.groom_m, m.groom_d) == decompose_days(
                (m.date - groom.birth).days
            )
            assert m.bride_y == (m.date - bride.birth).days // 365
            assert m.groom_adult == (m.groom_y >= 18)
            assert m.bride_adult == (m.bride_y >= 18)

    def test_date_window(self):
        persons, pools, _, rng, _ = _make_world()
        by_id = {p.id: p for p in persons}
        for m in generate_marriages(persons, pools, rng).marriages:
            births = (by_id[m.groom_id].birth, by_id[m.bride_id].birth)
            assert min(births).year + 15 <= m.date.year <= max(births).year + 34

    def test_banns_cascade(self):
        persons, pools, _, rng, _ = _make_world()
        marriages = generate_marriages(persons, pools, rng).marriages
        for m in marriages:
            if m.banns_2 is not None:
                assert m.banns_1 is not None
            if m.banns_3 is not None:
                assert m.banns_2 is not None
            if m.banns_1 is not None:
                assert m.date - m.banns_1 == dt.timedelta(days=7)
            if m.banns_3 is not None:
                assert m.date - m.banns_3 == dt.timedelta(days=21)
        assert any(m.banns_1 is None for m in marriages)
        assert any(m.banns_1 is not None for m in marriages)

    def test_references_resolve(self):
        persons, pools, _, rng, _ = _make_world()
        marriages = generate_marriages(persons, pools, rng).marriages
        user_ids = {u.id for u in pools.users}
        register_ids = {r.id for r in pools.registers}
        officiant_ids = {o.id for o in pools.officiants}
        for m in marriages:
            assert m.user_id in user_ids
            assert m.register_id in register_ids
            assert m.officiant_id in officiant_ids
            assert m.scan_layout in ("C", "L", "P")
            assert 0 <= m.rec_order <= 999

    def test_witnesses(self):
        persons, pools, _, rng, _ = _make_world()
        events = generate_marriages(persons, pools, rng)
        by_marriage = {}
        for w in events.witnesses:
            by_marriage.setdefault(w.marriage_id, []).append(w)

        for m in events.marriages:
            witnesses = by_marriage[m.id]
            assert len(witnesses) == 4
            ids = [w.person_id for w in witnesses]
            assert len(set(ids)) == 4
            assert m.groom_id not in ids and m.bride_id not in ids
            assert [w.side for w in witnesses] == [
                WitnessSide.GROOM,
                WitnessSide.GROOM,
                WitnessSide.BRIDE,
                WitnessSide.BRIDE,
            ]
            assert all(
                w.relationship in ("sourozenec", "přítel", "jiné") for w in witnesses
            )

    def test_explicit_count(self):
        persons, pools, _, rng, _ = _make_world()
        events = generate_marriages(persons, pools, rng, count=5)
        assert len(events.marriages) == 5
        assert events.requested == 5

    def test_no_brides_stops_with_warning(self, caplog):
        persons = _fixed_triad()
        corpora = load_corpora()
        rng = random.Random(1)
        fake = make_faker("cs_CZ", 1)
        pools = build_reference_pools(GenerationConfig(), corpora, rng, fake)

        with caplog.at_level(logging.WARNING, logger="vitalrec"):
            events = generate_marriages(persons, pools, rng, count=3)

        assert events.marriages == []
        assert events.truncated
        assert "Stopping marriages" in caplog.text

    def test_few_witness_candidates(self):
        persons = _fixed_triad()
        persons.append(
            persons[2].model_copy(
                update={"id": 3, "sex": Sex.FEMALE, "surname": "Nováková"}
            )
        )
        corpora = load_corpora()
        rng = random.Random(2)
        pools = build_reference_pools(
            GenerationConfig(), corpora, rng, make_faker("cs_CZ", 2)
        )
        events = generate_marriages(persons, pools, rng, count=1)
        assert len(events.marriages) == 1
        assert {w.person_id for w in events.witnesses} == {0, 1}


class TestDeaths:
    def test_fixed_triad_single_death(self):
        persons = _fixed_triad()
        corpora = load_corpora()
        rng = random.Random(9)
        fake = make_faker("cs_CZ", 9)
        config = GenerationConfig(users_count=2, archives_count=2, fonds_count=3)
        pools = build_reference_pools(config, corpora, rng, fake)
        assert len(pools.registers) == 90

        marriages = generate_marriages(persons, pools, rng, count=0)
        deaths = generate_deaths(persons, pools, corpora, rng, fake, count=1)

        assert marriages.marriages == []
        assert len(deaths.deaths) == 1
        assert deaths.deaths[0].person_id == 2
        assert deaths.deaths[0].id == 0

    def test_default_count_and_uniqueness(self):
        persons, pools, corpora, rng, fake = _make_world()
        deaths = generate_deaths(persons, pools, corpora, rng, fake).deaths
        eligible = eligible_persons(persons)
        assert len(deaths) == len(eligible)
        person_ids = [d.person_id for d in deaths]
        assert len(set(person_ids)) == len(person_ids)
        assert [d.id for d in deaths] == list(range(len(deaths)))

    def test_consumes_pool_from_end(self):
        persons, pools, corpora, rng, fake = _make_world()
        eligible = eligible_persons(persons)
        deaths = generate_deaths(persons, pools, corpora, rng, fake, count=3).deaths
        assert [d.person_id for d in deaths] == [p.id for p in eligible[::-1][:3]]

    def test_count_beyond_pool_truncates(self, caplog):
        persons, pools, corpora, rng, fake = _make_world(target=50)
        eligible = eligible_persons(persons)
        with caplog.at_level(logging.WARNING, logger="vitalrec"):
            events = generate_deaths(
                persons, pools, corpora, rng, fake, count=len(eligible) + 5
            )
        assert len(events.deaths) == len(eligible)
        assert events.truncated
        assert "Stopping deaths" in caplog.text

    def test_dates(self):
        persons, pools, corpora, rng, fake = _make_world()
        by_id = {p.id: p for p in persons}
        deaths = generate_deaths(persons, pools, corpora, rng, fake).deaths
        for d in deaths:
            has_provision = d.provision_date is not None
            has_burial = d.death_date is not None and d.funeral_date is not None
            assert has_provision != has_burial
            if has_burial:
                assert d.funeral_date - d.death_date == dt.timedelta(days=2)
            recorded = d.provision_date or d.death_date
            birth = by_id[d.person_id].birth
            age = decompose_days((recorded - birth).days)
            assert (d.age_y, d.age_m, d.age_d) == age
            low, high = DEATH_AGE_RANGE
            assert low <= recorded.year - birth.year <= high
            assert 0 <= d.age_h <= 23
        assert any(d.provision_date is not None for d in deaths)
        assert any(d.death_date is not None for d in deaths)

    def test_places(self):
        persons, pools, corpora, rng, fake = _make_world()
        by_id = {p.id: p for p in persons}
        deaths = generate_deaths(persons, pools, corpora, rng, fake).deaths
        for d in deaths:
            person = by_id[d.person_id]
            assert d.place_funeral == person.village
            if d.death_village == person.village:
                assert (d.death_street, d.death_descr) == (person.street, person.descr)
            else:
                assert d.death_village in pools.villages
            assert d.place_death in (None, "v řece Svitavě u Bilovic", "nemocnice")

    def test_optional_fields(self):
        persons, pools, corpora, rng, fake = _make_world()
        deaths = generate_deaths(persons, pools, corpora, rng, fake).deaths
        causes = set(corpora.death_causes) | {"osýpky", "souchotiny"}
        for d in deaths:
            if d.death_cause is not None:
                assert d.death_cause in causes
            assert d.notes in (None, NOTE_SWAPPED, NOTE_GENERIC)
            if d.inspection:
                assert d.inspection_by in ("Dr. Hrachovina", "Dr. Nováček")
            else:
                assert d.inspection_by is None
        assert any(d.death_cause is None for d in deaths)

    def test_references_resolve(self):
        persons, pools, corpora, rng, fake = _make_world()
        deaths = generate_deaths(persons, pools, corpora, rng, fake).deaths
        director_ids = {d.id for d in pools.directors}
        celebrant_ids = {c.id for c in pools.celebrants}
        for d in deaths:
            assert d.director_id in director_ids
            assert d.celebrant_id in celebrant_ids
            assert d.user_id in {u.id for u in pools.users}
