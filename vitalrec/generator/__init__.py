"""Synthetic vital-records generation.

Pools of reference data, a three-generation person graph, and the marriage
and death events derived from it.
"""

from .core import GeneratedDataset, generate_dataset
from .events import DeathEvents, MarriageEvents, generate_deaths, generate_marriages
from .fakes import make_faker
from .persons import Population, generate_persons, generate_population
from .pools import ReferencePools, build_reference_pools
from .sampling import ShuffledIndexSequence, random_date_between

__all__ = [
    "GeneratedDataset",
    "generate_dataset",
    "MarriageEvents",
    "DeathEvents",
    "generate_marriages",
    "generate_deaths",
    "make_faker",
    "Population",
    "generate_persons",
    "generate_population",
    "ReferencePools",
    "build_reference_pools",
    "ShuffledIndexSequence",
    "random_date_between",
]
