"""Faker-backed values: clerk names and street addresses.

Faker is seeded per run from the generation seed so the Faker stream and
the ``random.Random`` stream start from the same number.
"""

from __future__ import annotations

from faker import Faker

from ..core.errors import InvalidArgument

DESCR_MAX = 999


def make_faker(locale: str, seed: int | None = None) -> Faker:
    """Create a Faker instance for ``locale``.

    Raises:
        InvalidArgument: If Faker does not know the locale.
    """
    try:
        fake = Faker(locale)
    except AttributeError as e:
        raise InvalidArgument(f"Unsupported Faker locale: {locale}") from e

    if seed is not None:
        fake.seed_instance(seed)
    return fake


def clerk_name(fake: Faker) -> str:
    return f"{fake.first_name()} {fake.last_name()}"


def street_address(fake: Faker) -> tuple[str, int]:
    """Return (street, house number)."""
    return fake.street_name(), fake.random_int(min=1, max=DESCR_MAX)
