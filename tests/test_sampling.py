"""Tests for the sampling primitives."""

import datetime as dt
import random

import pytest

from vitalrec.core.errors import InvalidArgument
from vitalrec.core.models import Religion, Sex, WitnessSide
from vitalrec.generator.sampling import (
    KINSHIP_BUCKETS,
    NOT_RELATED,
    ShuffledIndexSequence,
    add_years,
    age_between,
    decompose_days,
    feminine_surname,
    masculine_surname,
    pick_kinship,
    pick_religion,
    pick_scan_layout,
    pick_sex,
    pick_witness_relationship,
    random_date_between,
    surname_for,
    witness_side,
)


class FixedRandom(random.Random):
    """Random whose ``random()`` replays a fixed sequence."""

    def __init__(self, values):
        super().__init__(0)
        self._values = list(values)

    def random(self):
        return self._values.pop(0)


class TestShuffledIndexSequence:
    def test_first_n_draws_are_a_permutation(self):
        seq = ShuffledIndexSequence(3, random.Random(7))
        first = [seq.draw() for _ in range(3)]
        assert sorted(first) == [0, 1, 2]
        assert seq.draw() in {0, 1, 2}

    def test_exhausted_flag(self):
        seq = ShuffledIndexSequence(2, random.Random(1))
        assert not seq.exhausted
        seq.draw()
        seq.draw()
        assert seq.exhausted

    def test_keeps_drawing_after_exhaustion(self):
        seq = ShuffledIndexSequence(5, random.Random(3))
        draws = [seq.draw() for _ in range(50)]
        assert all(0 <= d < 5 for d in draws)

    def test_large_domain_has_no_repeats(self):
        seq = ShuffledIndexSequence(1000, random.Random(11))
        draws = [seq.draw() for _ in range(1000)]
        assert len(set(draws)) == 1000

    @pytest.mark.parametrize("n", [0, -1])
    def test_empty_domain_rejected(self, n):
        with pytest.raises(InvalidArgument):
            ShuffledIndexSequence(n, random.Random())


class TestRandomDateBetween:
    def test_zero_width_range(self):
        day = dt.date(2000, 1, 1)
        assert random_date_between(day, day, rng=random.Random(0)) == day

    def test_within_bounds(self):
        rng = random.Random(5)
        start, end = dt.date(1800, 1, 1), dt.date(1810, 1, 1)
        for _ in range(200):
            assert start <= random_date_between(start, end, rng=rng) <= end

    def test_end_defaults_to_today(self):
        start = dt.date.today() - dt.timedelta(days=3)
        result = random_date_between(start, rng=random.Random(2))
        assert start <= result <= dt.date.today()

    def test_end_before_start_rejected(self):
        with pytest.raises(InvalidArgument):
            random_date_between(dt.date(2000, 1, 2), dt.date(2000, 1, 1))

    def test_non_date_rejected(self):
        with pytest.raises(InvalidArgument):
            random_date_between("2000-01-01", dt.date(2001, 1, 1))
        with pytest.raises(InvalidArgument):
            random_date_between(dt.date(2000, 1, 1), 20010101)


class TestDateArithmetic:
    def test_decompose_days(self):
        assert decompose_days(0) == (0, 0, 0)
        assert decompose_days(365) == (1, 0, 0)
        assert decompose_days(365 * 20 + 30 * 3 + 7) == (20, 3, 7)
        assert decompose_days(29) == (0, 0, 29)

    def test_age_between(self):
        birth = dt.date(1830, 1, 1)
        event = birth + dt.timedelta(days=365 * 18 + 45)
        assert age_between(birth, event) == (18, 1, 15)

    def test_add_years(self):
        assert add_years(dt.date(1830, 5, 17), 20) == dt.date(1850, 5, 17)

    def test_add_years_leap_day(self):
        assert add_years(dt.date(1836, 2, 29), 1) == dt.date(1837, 2, 28)
        assert add_years(dt.date(1836, 2, 29), 4) == dt.date(1840, 2, 29)


class TestPickers:
    def test_pick_sex(self):
        assert pick_sex(FixedRandom([0.51])) == Sex.MALE
        assert pick_sex(FixedRandom([0.5])) == Sex.FEMALE

    def test_pick_religion(self):
        assert pick_religion(FixedRandom([0.75]), 0.7) == Religion.UNBAPTIZED
        assert pick_religion(FixedRandom([0.6, 0.5]), 0.7) == Religion.CATHOLIC
        assert pick_religion(FixedRandom([0.6, 0.1]), 0.7) == Religion.EVANGELICAL

    def test_pick_scan_layout(self):
        assert pick_scan_layout(FixedRandom([0.1])) == "C"
        assert pick_scan_layout(FixedRandom([0.6, 0.8])) == "L"
        assert pick_scan_layout(FixedRandom([0.6, 0.3])) == "P"

    def test_pick_kinship(self):
        assert pick_kinship(FixedRandom([0.5])) == NOT_RELATED
        assert pick_kinship(FixedRandom([0.945])) == NOT_RELATED
        assert pick_kinship(FixedRandom([0.955])) == KINSHIP_BUCKETS[95]
        assert pick_kinship(FixedRandom([0.999])) == "polosourozenci"

    def test_pick_witness_relationship(self):
        assert pick_witness_relationship(FixedRandom([0.7])) == "sourozenec"
        assert pick_witness_relationship(FixedRandom([0.5, 0.2])) == "přítel"
        assert pick_witness_relationship(FixedRandom([0.5, 0.4])) == "jiné"

    def test_witness_side(self):
        sides = [witness_side(i) for i in range(4)]
        assert sides == [
            WitnessSide.GROOM,
            WitnessSide.GROOM,
            WitnessSide.BRIDE,
            WitnessSide.BRIDE,
        ]


class TestSurnames:
    def test_feminine(self):
        assert feminine_surname("Novák") == "Nováková"
        assert feminine_surname("Nováková") == "Nováková"

    def test_masculine_strips_suffix_only(self):
        assert masculine_surname("Dvořáková") == "Dvořák"
        assert masculine_surname("Dvořák") == "Dvořák"

    def test_surname_for(self):
        assert surname_for("Svoboda", Sex.MALE, Sex.FEMALE) == "Svobodaová"
        assert surname_for("Nováková", Sex.FEMALE, Sex.MALE) == "Novák"
        assert surname_for("Černý", Sex.MALE, Sex.MALE) == "Černý"

    def test_surname_for_same_sex_unchanged(self):
        assert surname_for("Černá", Sex.FEMALE, Sex.FEMALE) == "Černá"
        assert surname_for("Černá", Sex.FEMALE.value, Sex.FEMALE) == "Černá"
