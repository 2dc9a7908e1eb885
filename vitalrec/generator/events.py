"""Life-event derivation: marriages with witnesses, and deaths.

Only middle-generation persons (both parent ids set) marry or die on
record. Marriages pair a random eligible groom with a random eligible bride;
deaths consume the eligible pool from the end so nobody dies twice.
"""

from __future__ import annotations

import datetime as dt
import logging
import random
from dataclasses import dataclass, field
from typing import Generic, Sequence, TypeVar

from faker import Faker

from ..core.errors import PoolExhausted
from ..core.models import Death, Marriage, Person, Sex, Witness
from ..corpora import Corpora
from ..utils.callbacks import ItemProgressCallback
from .fakes import street_address
from .pools import ReferencePools
from .sampling import (
    ShuffledIndexSequence,
    add_years,
    age_between,
    pick_kinship,
    pick_scan_layout,
    pick_witness_relationship,
    random_date_between,
    witness_side,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

ADULT_AGE = 18
MARRIAGE_RATIO = 1.2
MARRIAGE_AGE_RANGE = (15, 34)
BANNS_OFFSETS_DAYS = (7, 14, 21)
WITNESSES_PER_MARRIAGE = 4
DEATH_AGE_RANGE = (0, 99)
FUNERAL_DELAY_DAYS = 2

PLACE_RIVER = "v řece Svitavě u Bilovic"
PLACE_HOSPITAL = "nemocnice"
CAUSE_MEASLES = "osýpky"
CAUSE_CONSUMPTION = "souchotiny"
NOTE_SWAPPED = "chyba zápisu, prohozené rubriky"
NOTE_GENERIC = "poznámky..."
INSPECTORS = ("Dr. Hrachovina", "Dr. Nováček")


@dataclass
class MarriageEvents:
    marriages: list[Marriage] = field(default_factory=list)
    witnesses: list[Witness] = field(default_factory=list)
    requested: int = 0
    truncated: bool = False


@dataclass
class DeathEvents:
    deaths: list[Death] = field(default_factory=list)
    requested: int = 0
    truncated: bool = False


class _PoolDraw(Generic[T]):
    """Exhaustion sampler bound to its pool.

    An empty pool is not an error until somebody asks it for an item.
    """

    def __init__(self, name: str, items: Sequence[T], rng: random.Random):
        self.name = name
        self.items = items
        self._indices = ShuffledIndexSequence(len(items), rng) if items else None

    def draw(self) -> T:
        if self._indices is None:
            raise PoolExhausted(self.name)
        return self.items[self._indices.draw()]


def eligible_persons(
    persons: Sequence[Person], sex: Sex | None = None
) -> list[Person]:
    """Persons with both parents recorded, optionally of one sex."""
    return [p for p in persons if p.has_both_parents and (sex is None or p.sex == sex)]


# =============================================================================
# Marriages
# =============================================================================


def _banns(date: dt.date, rng: random.Random) -> dict[str, dt.date]:
    """Up to three banns; each one is only announced if the previous was."""
    banns: dict[str, dt.date] = {}
    for number, offset in enumerate(BANNS_OFFSETS_DAYS, start=1):
        if rng.random() <= 0.5:
            break
        banns[f"banns_{number}"] = date - dt.timedelta(days=offset)
    return banns


def _pick_witnesses(
    marriage_id: int,
    groom: Person,
    bride: Person,
    persons: Sequence[Person],
    rng: random.Random,
) -> list[Witness]:
    # Two spare picks cover the couple being drawn
    picks = rng.sample(
        range(len(persons)), min(WITNESSES_PER_MARRIAGE + 2, len(persons))
    )
    candidates = [
        persons[i] for i in picks if persons[i].id not in (groom.id, bride.id)
    ][:WITNESSES_PER_MARRIAGE]

    return [
        Witness(
            marriage_id=marriage_id,
            person_id=person.id,
            side=witness_side(position),
            relationship=pick_witness_relationship(rng),
        )
        for position, person in enumerate(candidates)
    ]


def build_marriage(
    marriage_id: int,
    groom: Person,
    bride: Person,
    *,
    village: str,
    user_id: int,
    register_id: int,
    officiant_id: int,
    rng: random.Random,
) -> Marriage:
    """Build one marriage record for a given couple."""
    groom_bound = add_years(groom.birth, rng.randint(*MARRIAGE_AGE_RANGE))
    bride_bound = add_years(bride.birth, rng.randint(*MARRIAGE_AGE_RANGE))
    date = random_date_between(
        min(groom_bound, bride_bound), max(groom_bound, bride_bound), rng=rng
    )

    groom_y, groom_m, groom_d = age_between(groom.birth, date)
    bride_y, bride_m, bride_d = age_between(bride.birth, date)

    return Marriage(
        id=marriage_id,
        rec_ready=rng.random() > 0.2,
        rec_order=rng.randint(0, 999),
        scan_order=rng.randint(0, 999),
        scan_layout=pick_scan_layout(rng),
        date=date,
        village=village,
        groom_y=groom_y,
        groom_m=groom_m,
        groom_d=groom_d,
        bride_y=bride_y,
        bride_m=bride_m,
        bride_d=bride_d,
        groom_adult=groom_y >= ADULT_AGE,
        bride_adult=bride_y >= ADULT_AGE,
        relationship=pick_kinship(rng),
        groom_id=groom.id,
        bride_id=bride.id,
        user_id=user_id,
        register_id=register_id,
        officiant_id=officiant_id,
        **_banns(date, rng),
    )


def generate_marriages(
    persons: Sequence[Person],
    pools: ReferencePools,
    rng: random.Random,
    count: int | None = None,
    on_progress: ItemProgressCallback | None = None,
) -> MarriageEvents:
    """Generate marriages between eligible men and women.

    Args:
        persons: Full population; witnesses may be anyone but the couple
        pools: Reference pools for users, registers, officiants and villages
        rng: Random source
        count: Number of marriages; defaults to 1.2x the eligible brides

    Returns:
        MarriageEvents; ``truncated`` is set when a pool ran dry before
        ``count`` marriages were produced.
    """
    grooms = eligible_persons(persons, Sex.MALE)
    brides = eligible_persons(persons, Sex.FEMALE)
    rng.shuffle(grooms)
    rng.shuffle(brides)

    if count is None:
        count = int(len(brides) * MARRIAGE_RATIO)

    groom_pool = _PoolDraw("grooms", grooms, rng)
    bride_pool = _PoolDraw("brides", brides, rng)
    users = _PoolDraw("users", pools.users, rng)
    registers = _PoolDraw("registers", pools.registers, rng)
    officiants = _PoolDraw("officiants", pools.officiants, rng)

    result = MarriageEvents(requested=count)
    for marriage_id in range(count):
        try:
            groom = groom_pool.draw()
            bride = bride_pool.draw()
            user = users.draw()
            register = registers.draw()
            officiant = officiants.draw()
        except PoolExhausted as e:
            logger.warning(
                "Stopping marriages at %d of %d: %s", marriage_id, count, e
            )
            result.truncated = True
            break

        if rng.random() > 0.5:
            village = rng.choice(pools.villages)
        else:
            village = groom.village if rng.random() > 0.5 else bride.village

        result.marriages.append(
            build_marriage(
                marriage_id,
                groom,
                bride,
                village=village,
                user_id=user.id,
                register_id=register.id,
                officiant_id=officiant.id,
                rng=rng,
            )
        )
        result.witnesses.extend(
            _pick_witnesses(marriage_id, groom, bride, persons, rng)
        )
        if on_progress:
            on_progress(marriage_id + 1, count)

    logger.info(
        "Generated %d marriages with %d witnesses",
        len(result.marriages),
        len(result.witnesses),
    )
    return result


# =============================================================================
# Deaths
# =============================================================================


def _place_of_death(rng: random.Random) -> str | None:
    p = rng.random()
    if p <= 0.8:
        return None
    return PLACE_RIVER if p > 0.9 else PLACE_HOSPITAL


def _cause_of_death(causes: _PoolDraw, rng: random.Random) -> str | None:
    p = rng.random()
    if p <= 0.5:
        return None
    if p > 0.9:
        return CAUSE_MEASLES
    if p > 0.7:
        return CAUSE_CONSUMPTION
    return causes.draw()


def _notes(rng: random.Random) -> str | None:
    p = rng.random()
    if p > 0.95:
        return NOTE_GENERIC
    if p > 0.9:
        return NOTE_SWAPPED
    return None


def _death_dates(death_date: dt.date, rng: random.Random) -> dict[str, dt.date]:
    """Either a provision date alone, or death and funeral dates."""
    if rng.random() > 0.7:
        return {"provision_date": death_date}
    return {
        "death_date": death_date,
        "funeral_date": death_date + dt.timedelta(days=FUNERAL_DELAY_DAYS),
    }


def build_death(
    death_id: int,
    person: Person,
    *,
    pools: ReferencePools,
    causes: _PoolDraw,
    user_id: int,
    register_id: int,
    director_id: int,
    celebrant_id: int,
    rng: random.Random,
    fake: Faker,
) -> Death:
    """Build one death record for ``person``."""
    death_date = add_years(person.birth, rng.randint(*DEATH_AGE_RANGE))
    age_y, age_m, age_d = age_between(person.birth, death_date)

    village = rng.choice(pools.villages) if rng.random() > 0.5 else person.village
    if village == person.village:
        street, descr = person.street, person.descr
    else:
        street, descr = street_address(fake)

    inspection = rng.random() > 0.7
    inspection_by = None
    if inspection:
        inspection_by = INSPECTORS[0] if rng.random() > 0.6 else INSPECTORS[1]

    return Death(
        id=death_id,
        rec_ready=rng.random() > 0.2,
        rec_order=rng.randint(0, 999),
        scan_order=rng.randint(0, 999),
        scan_layout=pick_scan_layout(rng),
        death_village=village,
        death_street=street,
        death_descr=descr,
        place_funeral=person.village,
        place_death=_place_of_death(rng),
        widowed=rng.random() > 0.7,
        age_y=age_y,
        age_m=age_m,
        age_d=age_d,
        age_h=rng.randint(0, 23),
        death_cause=_cause_of_death(causes, rng),
        inspection=inspection,
        inspection_by=inspection_by,
        notes=_notes(rng),
        person_id=person.id,
        user_id=user_id,
        register_id=register_id,
        director_id=director_id,
        celebrant_id=celebrant_id,
        **_death_dates(death_date, rng),
    )


def generate_deaths(
    persons: Sequence[Person],
    pools: ReferencePools,
    corpora: Corpora,
    rng: random.Random,
    fake: Faker,
    count: int | None = None,
    on_progress: ItemProgressCallback | None = None,
) -> DeathEvents:
    """Generate deaths for eligible persons, each person dying at most once.

    The eligible pool is a stack popped from the end. ``count`` defaults to
    the whole pool; asking for more stops at the pool size with a warning.
    """
    stack = eligible_persons(persons)
    if count is None:
        count = len(stack)

    users = _PoolDraw("users", pools.users, rng)
    registers = _PoolDraw("registers", pools.registers, rng)
    directors = _PoolDraw("directors", pools.directors, rng)
    celebrants = _PoolDraw("celebrants", pools.celebrants, rng)
    causes = _PoolDraw("death causes", corpora.death_causes, rng)

    result = DeathEvents(requested=count)
    for death_id in range(count):
        try:
            if not stack:
                raise PoolExhausted("deceased")
            person = stack.pop()
            death = build_death(
                death_id,
                person,
                pools=pools,
                causes=causes,
                user_id=users.draw().id,
                register_id=registers.draw().id,
                director_id=directors.draw().id,
                celebrant_id=celebrants.draw().id,
                rng=rng,
                fake=fake,
            )
        except PoolExhausted as e:
            logger.warning("Stopping deaths at %d of %d: %s", death_id, count, e)
            result.truncated = True
            break

        result.deaths.append(death)
        if on_progress:
            on_progress(death_id + 1, count)

    logger.info("Generated %d deaths", len(result.deaths))
    return result
