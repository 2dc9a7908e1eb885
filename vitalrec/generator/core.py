"""Top-level dataset generation.

Runs the pipeline in dependency order: reference pools, person graph with
name and occupation links, marriages with witnesses, deaths. Each phase
reports through the optional step callback, followed by per-item counts.
Counts, timings and truncations end up in ``GeneratedDataset.meta``.
"""

from __future__ import annotations

import logging
import random
import time
from dataclasses import dataclass, field
from typing import Any

from ..config import GenerationConfig, VitalrecConfig
from ..core.models import (
    Death,
    Marriage,
    Person,
    PersonName,
    PersonOccupation,
    Witness,
)
from ..corpora import Corpora, load_corpora
from ..utils.callbacks import ItemProgressCallback, StepProgressCallback
from .events import generate_deaths, generate_marriages
from .fakes import make_faker
from .persons import generate_population
from .pools import ReferencePools, build_reference_pools

logger = logging.getLogger(__name__)


@dataclass
class GeneratedDataset:
    """All flat tables of one run, plus run metadata."""

    pools: ReferencePools
    persons: list[Person] = field(default_factory=list)
    person_names: list[PersonName] = field(default_factory=list)
    person_occupations: list[PersonOccupation] = field(default_factory=list)
    marriages: list[Marriage] = field(default_factory=list)
    witnesses: list[Witness] = field(default_factory=list)
    deaths: list[Death] = field(default_factory=list)
    meta: dict[str, Any] = field(default_factory=dict)

    def counts(self) -> dict[str, int]:
        """Row count per table."""
        pools = self.pools
        return {
            "users": len(pools.users),
            "registers": len(pools.registers),
            "names": len(pools.names),
            "occupations": len(pools.occupations),
            "directors": len(pools.directors),
            "celebrants": len(pools.celebrants),
            "officiants": len(pools.officiants),
            "persons": len(self.persons),
            "person_names": len(self.person_names),
            "person_occupations": len(self.person_occupations),
            "marriages": len(self.marriages),
            "witnesses": len(self.witnesses),
            "deaths": len(self.deaths),
        }


def _resolve_generation(config: VitalrecConfig | GenerationConfig) -> GenerationConfig:
    if isinstance(config, VitalrecConfig):
        return config.generation
    return config


def generate_dataset(
    config: VitalrecConfig | GenerationConfig | None = None,
    corpora: Corpora | None = None,
    seed: int | None = None,
    on_progress: StepProgressCallback | None = None,
) -> GeneratedDataset:
    """Generate a complete synthetic vital-records dataset.

    Args:
        config: Generation settings; defaults to ``GenerationConfig()``
        corpora: Input corpora; defaults to the configured or bundled corpus
        seed: Random seed; a random one is drawn and recorded when omitted
        on_progress: Optional callback(step, status) per pipeline phase and
            per generated person, marriage or death

    Returns:
        GeneratedDataset with every table and a ``meta`` summary

    Raises:
        InvalidArgument: If the configuration or corpus is invalid.
    """
    gen = _resolve_generation(config) if config is not None else GenerationConfig()
    gen.validate()

    if corpora is None:
        corpora = load_corpora(gen.corpora_path or None)

    if seed is None:
        seed = random.randint(0, 2**31 - 1)
    rng = random.Random(seed)
    fake = make_faker(gen.locale, seed)

    def report(step: str, status: str) -> None:
        logger.info("[%s] %s", step, status)
        if on_progress:
            on_progress(step, status)

    def item_progress(step: str) -> ItemProgressCallback | None:
        # Per-item updates go to the callback only, not the log
        if on_progress is None:
            return None

        def callback(current: int, total: int) -> None:
            on_progress(step, f"Generating {step}... {current:,}/{total:,}")

        return callback

    timings: dict[str, float] = {}
    truncations: list[str] = []
    start = time.time()

    report("pools", "Building reference pools...")
    t = time.time()
    pools = build_reference_pools(gen, corpora, rng, fake)
    timings["pools"] = time.time() - t

    target = gen.resolve_person_count()
    report("persons", f"Generating {target} persons...")
    t = time.time()
    population = generate_population(
        target, corpora, pools, rng, fake, on_progress=item_progress("persons")
    )
    timings["persons"] = time.time() - t

    report("marriages", "Generating marriages...")
    t = time.time()
    marriage_events = generate_marriages(
        population.persons,
        pools,
        rng,
        count=gen.marriage_count,
        on_progress=item_progress("marriages"),
    )
    timings["marriages"] = time.time() - t
    if marriage_events.truncated:
        truncations.append(
            f"marriages: {len(marriage_events.marriages)}"
            f" of {marriage_events.requested}"
        )

    report("deaths", "Generating deaths...")
    t = time.time()
    death_events = generate_deaths(
        population.persons,
        pools,
        corpora,
        rng,
        fake,
        count=gen.death_count,
        on_progress=item_progress("deaths"),
    )
    timings["deaths"] = time.time() - t
    if death_events.truncated:
        truncations.append(
            f"deaths: {len(death_events.deaths)} of {death_events.requested}"
        )

    dataset = GeneratedDataset(
        pools=pools,
        persons=population.persons,
        person_names=population.person_names,
        person_occupations=population.person_occupations,
        marriages=marriage_events.marriages,
        witnesses=marriage_events.witnesses,
        deaths=death_events.deaths,
    )
    timings["total"] = time.time() - start
    dataset.meta = {
        "seed": seed,
        "locale": gen.locale,
        "target_persons": target,
        "counts": dataset.counts(),
        "timings": timings,
        "truncations": truncations,
    }

    report(
        "done",
        f"Generated {len(dataset.persons)} persons in {timings['total']:.2f}s",
    )
    return dataset
