"""Person graph generation.

The population is built from triads: a mother and a father with no recorded
parents (first generation) and their child (middle generation) who carries
both parent ids. Half of the triads add 1-4 kids (third generation), each
linked to the middle person only. Triads are generated until the population
reaches its target size; the last triad may overshoot.

Birth bands per generation:
- parents: 1800-01-01 .. 1810-01-01
- middle:  1825-01-01 .. 1840-01-01
- kids:    1855-01-01 .. 1870-01-01
"""

from __future__ import annotations

import datetime as dt
import logging
import random
from dataclasses import dataclass, field

from faker import Faker

from ..core.models import (
    Person,
    PersonName,
    PersonOccupation,
    Religion,
    Sex,
)
from ..corpora import Corpora
from ..utils.callbacks import ItemProgressCallback
from .fakes import street_address
from .pools import ReferencePools
from .sampling import (
    ShuffledIndexSequence,
    pick_religion,
    pick_sex,
    random_date_between,
    surname_for,
)

logger = logging.getLogger(__name__)

PARENTS_BIRTH_BAND = (dt.date(1800, 1, 1), dt.date(1810, 1, 1))
MIDDLE_BIRTH_BAND = (dt.date(1825, 1, 1), dt.date(1840, 1, 1))
KIDS_BIRTH_BAND = (dt.date(1855, 1, 1), dt.date(1870, 1, 1))

KIDS_PROBABILITY = 0.5
MAX_KIDS = 4
KID_SAME_ADDRESS_PROBABILITY = 0.8
KID_SAME_RELIGION_PROBABILITY = 0.8
SECOND_NAME_PROBABILITY = 0.3
OCCUPATION_PROBABILITY = 0.8
MAX_OCCUPATIONS = 3


@dataclass
class Population:
    """Persons plus their name and occupation links."""

    persons: list[Person] = field(default_factory=list)
    person_names: list[PersonName] = field(default_factory=list)
    person_occupations: list[PersonOccupation] = field(default_factory=list)


@dataclass
class _TriadSamplers:
    """Exhaustion samplers shared by all triads of one run."""

    surnames_men: list[str]
    surnames_women: list[str]
    men: ShuffledIndexSequence
    women: ShuffledIndexSequence
    villages: ShuffledIndexSequence

    @classmethod
    def create(
        cls, corpora: Corpora, pools: ReferencePools, rng: random.Random
    ) -> "_TriadSamplers":
        surnames_men = list(corpora.surnames_men)
        surnames_women = list(corpora.surnames_women)
        rng.shuffle(surnames_men)
        rng.shuffle(surnames_women)
        return cls(
            surnames_men=surnames_men,
            surnames_women=surnames_women,
            men=ShuffledIndexSequence(len(surnames_men), rng),
            women=ShuffledIndexSequence(len(surnames_women), rng),
            villages=ShuffledIndexSequence(len(pools.villages), rng),
        )

    def surname(self, sex: Sex | str) -> str:
        if sex == Sex.MALE:
            return self.surnames_men[self.men.draw()]
        return self.surnames_women[self.women.draw()]


def generate_triad(
    next_id: int,
    samplers: _TriadSamplers,
    pools: ReferencePools,
    rng: random.Random,
    fake: Faker,
) -> list[Person]:
    """Generate one mother/father/child triad plus optional kids.

    Ids are assigned sequentially from ``next_id`` in the order
    mother, father, child, kids.
    """
    sex = pick_sex(rng)
    surname = samplers.surname(sex)
    village = pools.villages[samplers.villages.draw()]
    street, descr = street_address(fake)

    # Religion cascade: mother follows father 80% of the time, the child
    # takes either parent's religion with equal odds.
    independent_religion = pick_religion(rng, unbaptized_above=0.5)
    religion_father = pick_religion(rng, unbaptized_above=0.7)
    religion_mother = (
        religion_father if rng.random() > 0.2 else independent_religion
    )
    religion_child = religion_father if rng.random() > 0.5 else religion_mother

    mother = Person(
        id=next_id,
        surname=surname_for(surname, sex, Sex.FEMALE),
        village=village,
        street=street,
        descr=descr,
        birth=random_date_between(*PARENTS_BIRTH_BAND, rng=rng),
        sex=Sex.FEMALE,
        religion=religion_mother,
    )
    father = Person(
        id=next_id + 1,
        surname=surname_for(surname, sex, Sex.MALE),
        village=village,
        street=street,
        descr=descr,
        birth=random_date_between(*PARENTS_BIRTH_BAND, rng=rng),
        sex=Sex.MALE,
        religion=religion_father,
    )
    child = Person(
        id=next_id + 2,
        surname=surname,
        village=village,
        street=street,
        descr=descr,
        birth=random_date_between(*MIDDLE_BIRTH_BAND, rng=rng),
        sex=sex,
        religion=religion_child,
        mother_id=mother.id,
        father_id=father.id,
    )
    triad = [mother, father, child]

    if rng.random() > 1 - KIDS_PROBABILITY:
        kids_count = rng.randint(1, MAX_KIDS)
        for offset in range(kids_count):
            triad.append(
                _generate_kid(next_id + 3 + offset, child, pools, rng, fake)
            )

    return triad


def _generate_kid(
    person_id: int,
    parent: Person,
    pools: ReferencePools,
    rng: random.Random,
    fake: Faker,
) -> Person:
    sex = pick_sex(rng)
    if rng.random() < KID_SAME_ADDRESS_PROBABILITY:
        village, street, descr = parent.village, parent.street, parent.descr
    else:
        village = rng.choice(pools.villages)
        street, descr = street_address(fake)

    religion = (
        parent.religion
        if rng.random() < KID_SAME_RELIGION_PROBABILITY
        else Religion.UNBAPTIZED
    )

    parent_link = (
        {"mother_id": parent.id}
        if parent.sex == Sex.FEMALE
        else {"father_id": parent.id}
    )
    return Person(
        id=person_id,
        surname=surname_for(parent.surname, parent.sex, sex),
        village=village,
        street=street,
        descr=descr,
        birth=random_date_between(*KIDS_BIRTH_BAND, rng=rng),
        sex=sex,
        religion=religion,
        **parent_link,
    )


def generate_persons(
    target_count: int,
    corpora: Corpora,
    pools: ReferencePools,
    rng: random.Random,
    fake: Faker,
    on_progress: ItemProgressCallback | None = None,
) -> list[Person]:
    """Generate triads until at least ``target_count`` persons exist."""
    samplers = _TriadSamplers.create(corpora, pools, rng)
    persons: list[Person] = []

    while len(persons) < target_count:
        persons.extend(generate_triad(len(persons), samplers, pools, rng, fake))
        if on_progress:
            on_progress(min(len(persons), target_count), target_count)

    logger.info("Generated %d persons (target %d)", len(persons), target_count)
    return persons


def assign_person_names(
    persons: list[Person], pools: ReferencePools, rng: random.Random
) -> list[PersonName]:
    """One sex-matched name each; 30% of men get a second male name."""
    men = ShuffledIndexSequence(len(pools.names_men), rng)
    women = ShuffledIndexSequence(len(pools.names_women), rng)
    offset = pools.female_name_offset

    links: list[PersonName] = []
    for person in persons:
        if person.sex == Sex.MALE:
            links.append(PersonName(person_id=person.id, name_id=men.draw()))
            if rng.random() > 1 - SECOND_NAME_PROBABILITY:
                links.append(PersonName(person_id=person.id, name_id=men.draw()))
        else:
            links.append(
                PersonName(person_id=person.id, name_id=offset + women.draw())
            )
    return links


def assign_person_occupations(
    persons: list[Person], pools: ReferencePools, rng: random.Random
) -> list[PersonOccupation]:
    """80% of persons get 1-3 occupations.

    Each person draws from a fresh exhaustion sampler, so repeats within one
    person only happen when the pool is smaller than the draw count.
    """
    if not pools.occupations:
        return []

    links: list[PersonOccupation] = []
    for person in persons:
        if rng.random() > 1 - OCCUPATION_PROBABILITY:
            indices = ShuffledIndexSequence(len(pools.occupations), rng)
            for _ in range(rng.randint(1, MAX_OCCUPATIONS)):
                occupation = pools.occupations[indices.draw()]
                links.append(
                    PersonOccupation(person_id=person.id, occup_id=occupation.id)
                )
    return links


def generate_population(
    target_count: int,
    corpora: Corpora,
    pools: ReferencePools,
    rng: random.Random,
    fake: Faker,
    on_progress: ItemProgressCallback | None = None,
) -> Population:
    """Persons with their name and occupation links."""
    persons = generate_persons(target_count, corpora, pools, rng, fake, on_progress)
    return Population(
        persons=persons,
        person_names=assign_person_names(persons, pools, rng),
        person_occupations=assign_person_occupations(persons, pools, rng),
    )
