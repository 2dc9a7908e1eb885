"""Sampling primitives shared by all generators.

Every function takes an explicit ``random.Random`` so a run can be seeded;
no function touches the module-level random state.
"""

from __future__ import annotations

import datetime as dt
import random

from ..core.errors import InvalidArgument
from ..core.models import Religion, Sex, WitnessSide

DAYS_PER_YEAR = 365
DAYS_PER_MONTH = 30

FEMININE_SUFFIX = "ová"

# Kinship buckets 95-99 out of 100; every other bucket means "not related"
NOT_RELATED = "ne"
KINSHIP_BUCKETS: dict[int, str] = {
    95: "strýc-neteř",
    96: "sourozenci",
    97: "bratranec-sestřenice 1. stupně",
    98: "bratranec-sestřenice 2. stupně",
    99: "polosourozenci",
}

WITNESS_SIBLING = "sourozenec"
WITNESS_FRIEND = "přítel"
WITNESS_OTHER = "jiné"


class ShuffledIndexSequence:
    """Random index source over ``0..n-1``.

    The first ``n`` draws are a permutation (no repeats). Once the
    permutation is used up, draws continue uniformly with replacement, so
    callers never have to check for exhaustion.
    """

    def __init__(self, n: int, rng: random.Random):
        if n <= 0:
            raise InvalidArgument(f"Cannot sample indices from an empty domain (n={n})")
        self.n = n
        self._rng = rng
        self._indices = list(range(n))
        rng.shuffle(self._indices)
        self._drawn = 0

    def draw(self) -> int:
        """Return the next index."""
        if self._drawn < self.n:
            index = self._indices[self._drawn]
            self._drawn += 1
            return index
        return self._indices[self._rng.randrange(self.n)]

    @property
    def exhausted(self) -> bool:
        """True once every index has been returned at least once."""
        return self._drawn >= self.n


def random_date_between(
    start: dt.date, end: dt.date | None = None, rng: random.Random | None = None
) -> dt.date:
    """Uniformly random date in ``[start, end]`` (``end`` defaults to today).

    Raises:
        InvalidArgument: If a bound is not a date or ``end < start``.
    """
    rng = rng or random.Random()
    if not isinstance(start, dt.date):
        raise InvalidArgument(f"start must be a date, got {start!r}")
    if end is None:
        end = dt.date.today()
    elif not isinstance(end, dt.date):
        raise InvalidArgument(f"end must be a date, got {end!r}")
    if isinstance(start, dt.datetime):
        start = start.date()
    if isinstance(end, dt.datetime):
        end = end.date()
    if end < start:
        raise InvalidArgument(f"end {end} precedes start {start}")

    span = (end - start).days
    return start + dt.timedelta(days=rng.randint(0, span))


def add_years(value: dt.date, years: int) -> dt.date:
    """Shift a date by whole years; Feb 29 lands on Feb 28 in common years."""
    try:
        return value.replace(year=value.year + years)
    except ValueError:
        return value.replace(year=value.year + years, day=28)


def decompose_days(days: int) -> tuple[int, int, int]:
    """Split a day count into (years, months, days) using 365/30-day units.

    This is a fixed decomposition, not calendar arithmetic.
    """
    years = days // DAYS_PER_YEAR
    months = (days - years * DAYS_PER_YEAR) // DAYS_PER_MONTH
    rest = days - years * DAYS_PER_YEAR - months * DAYS_PER_MONTH
    return years, months, rest


def age_between(birth: dt.date, event: dt.date) -> tuple[int, int, int]:
    return decompose_days((event - birth).days)


# =============================================================================
# Weighted pickers
# =============================================================================


def pick_sex(rng: random.Random) -> Sex:
    return Sex.MALE if rng.random() > 0.5 else Sex.FEMALE


def pick_religion(rng: random.Random, unbaptized_above: float) -> Religion:
    """Three-way religion draw.

    ``unbaptized_above`` sets the unbaptized share; of the rest, 80% are
    catholic and 20% evangelical.
    """
    if rng.random() > unbaptized_above:
        return Religion.UNBAPTIZED
    if rng.random() > 0.2:
        return Religion.CATHOLIC
    return Religion.EVANGELICAL


def pick_scan_layout(rng: random.Random) -> str:
    if rng.random() < 0.5:
        return "C"
    return "L" if rng.random() > 0.7 else "P"


def pick_kinship(rng: random.Random) -> str:
    bucket = int(rng.random() * 100)
    return KINSHIP_BUCKETS.get(bucket, NOT_RELATED)


def pick_witness_relationship(rng: random.Random) -> str:
    if rng.random() > 0.6:
        return WITNESS_SIBLING
    if rng.random() < 0.3:
        return WITNESS_FRIEND
    return WITNESS_OTHER


def witness_side(position: int) -> WitnessSide:
    """Positions 0-1 stand for the groom, 2-3 for the bride."""
    return WitnessSide.BRIDE if position > 1 else WitnessSide.GROOM


# =============================================================================
# Surname inflection
# =============================================================================


def feminine_surname(surname: str) -> str:
    if surname.endswith(FEMININE_SUFFIX):
        return surname
    return f"{surname}{FEMININE_SUFFIX}"


def masculine_surname(surname: str) -> str:
    if surname.endswith(FEMININE_SUFFIX):
        return surname[: -len(FEMININE_SUFFIX)]
    return surname


def surname_for(surname: str, source_sex: Sex | str, sex: Sex | str) -> str:
    """Carry a surname held by a ``source_sex`` person over to ``sex``.

    The surname is returned as-is when both sexes match.
    """
    if sex == source_sex:
        return surname
    if sex == Sex.FEMALE:
        return feminine_surname(surname)
    return masculine_surname(surname)
