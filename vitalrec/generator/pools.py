"""Reference pool construction.

Builds every lookup collection the person and life-event generators draw
from: users, registers, names, occupations, villages and the three kinds of
clergy/funeral staff with their name links. Shapes are fixed by the config,
contents are random.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field

from faker import Faker

from ..config import GenerationConfig
from ..core.models import (
    Celebrant,
    CelebrantName,
    Director,
    DirectorName,
    Name,
    Occupation,
    Officiant,
    OfficiantName,
    Register,
    User,
)
from ..corpora import Corpora
from .fakes import clerk_name
from .sampling import ShuffledIndexSequence

logger = logging.getLogger(__name__)


@dataclass
class ReferencePools:
    """Immutable-by-convention lookup collections with sequential ids."""

    users: list[User] = field(default_factory=list)
    registers: list[Register] = field(default_factory=list)
    names_men: list[Name] = field(default_factory=list)
    names_women: list[Name] = field(default_factory=list)
    occupations: list[Occupation] = field(default_factory=list)
    villages: list[str] = field(default_factory=list)
    directors: list[Director] = field(default_factory=list)
    director_names: list[DirectorName] = field(default_factory=list)
    celebrants: list[Celebrant] = field(default_factory=list)
    celebrant_names: list[CelebrantName] = field(default_factory=list)
    officiants: list[Officiant] = field(default_factory=list)
    officiant_names: list[OfficiantName] = field(default_factory=list)

    @property
    def names(self) -> list[Name]:
        """Male pool followed by the female pool (female ids are offset)."""
        return self.names_men + self.names_women

    @property
    def female_name_offset(self) -> int:
        return len(self.names_men)


def build_users(count: int, fake: Faker) -> list[User]:
    return [User(id=i, name=clerk_name(fake)) for i in range(count)]


def build_registers(archives: int, fonds: int, signatures: int) -> list[Register]:
    """Full archive x fond x signature cross product."""
    registers: list[Register] = []
    for i in range(archives):
        for j in range(fonds):
            for k in range(signatures):
                registers.append(
                    Register(
                        id=i * fonds * signatures + j * signatures + k,
                        archive=f"ARCH{i}",
                        fond=f"FOND{j}",
                        signature=k,
                    )
                )
    return registers


def build_names(corpora: Corpora) -> tuple[list[Name], list[Name]]:
    men = [Name(id=i, name=name) for i, name in enumerate(corpora.names_men)]
    offset = len(men)
    women = [
        Name(id=offset + i, name=name) for i, name in enumerate(corpora.names_women)
    ]
    return men, women


def build_occupations(
    corpora: Corpora, count: int, rng: random.Random
) -> list[Occupation]:
    """Sample occupations without replacement, capped at the corpus size."""
    count = min(count, len(corpora.occupations))
    shuffled = list(corpora.occupations)
    rng.shuffle(shuffled)
    return [Occupation(id=i, name=shuffled[i]) for i in range(count)]


def _staff_surnames(corpora: Corpora, count: int, rng: random.Random) -> list[str]:
    surnames = list(corpora.surnames_men)
    rng.shuffle(surnames)
    # Fewer surnames than staff wraps around
    return [surnames[i % len(surnames)] for i in range(count)]


def build_directors(
    corpora: Corpora, count: int, rng: random.Random
) -> tuple[list[Director], list[DirectorName]]:
    titles = ShuffledIndexSequence(len(corpora.director_titles), rng)
    surnames = _staff_surnames(corpora, count, rng)
    directors = [
        Director(
            id=i, surname=surnames[i], title=corpora.director_titles[titles.draw()]
        )
        for i in range(count)
    ]
    name_indices = ShuffledIndexSequence(len(corpora.names_men), rng)
    links = [
        DirectorName(director_id=i, name_id=name_indices.draw()) for i in range(count)
    ]
    return directors, links


def build_celebrants(
    corpora: Corpora, count: int, rng: random.Random
) -> tuple[list[Celebrant], list[CelebrantName]]:
    titles = ShuffledIndexSequence(len(corpora.celebrant_titles), rng)
    surnames = _staff_surnames(corpora, count, rng)
    celebrants = [
        Celebrant(
            id=i,
            surname=surnames[i],
            title_occup=corpora.celebrant_titles[titles.draw()],
        )
        for i in range(count)
    ]
    name_indices = ShuffledIndexSequence(len(corpora.names_men), rng)
    links = [
        CelebrantName(celebrant_id=i, name_id=name_indices.draw()) for i in range(count)
    ]
    return celebrants, links


def build_officiants(
    corpora: Corpora, count: int, rng: random.Random
) -> tuple[list[Officiant], list[OfficiantName]]:
    titles = ShuffledIndexSequence(len(corpora.officiant_titles), rng)
    surnames = _staff_surnames(corpora, count, rng)
    officiants = [
        Officiant(
            id=i, surname=surnames[i], title=corpora.officiant_titles[titles.draw()]
        )
        for i in range(count)
    ]
    name_indices = ShuffledIndexSequence(len(corpora.names_men), rng)
    links = [
        OfficiantName(officiant_id=i, name_id=name_indices.draw()) for i in range(count)
    ]
    return officiants, links


def build_reference_pools(
    config: GenerationConfig,
    corpora: Corpora,
    rng: random.Random,
    fake: Faker,
) -> ReferencePools:
    """Build all lookup pools for one run."""
    names_men, names_women = build_names(corpora)
    directors, director_names = build_directors(corpora, config.directors_count, rng)
    celebrants, celebrant_names = build_celebrants(
        corpora, config.celebrants_count, rng
    )
    officiants, officiant_names = build_officiants(
        corpora, config.officiants_count, rng
    )

    pools = ReferencePools(
        users=build_users(config.users_count, fake),
        registers=build_registers(
            config.archives_count, config.fonds_count, config.signatures_count
        ),
        names_men=names_men,
        names_women=names_women,
        occupations=build_occupations(corpora, config.occupations_count, rng),
        villages=list(corpora.villages[: config.villages_count]),
        directors=directors,
        director_names=director_names,
        celebrants=celebrants,
        celebrant_names=celebrant_names,
        officiants=officiants,
        officiant_names=officiant_names,
    )

    logger.info(
        "Built reference pools: %d users, %d registers, %d names, "
        "%d occupations, %d villages",
        len(pools.users),
        len(pools.registers),
        len(names_men) + len(names_women),
        len(pools.occupations),
        len(pools.villages),
    )
    return pools
