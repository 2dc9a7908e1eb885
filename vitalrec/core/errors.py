"""Error taxonomy for dataset generation.

- InvalidArgument: malformed input (date bounds, empty sampling domain,
  negative counts). Fatal at pipeline setup.
- PoolExhausted: an eligible-entity pool is empty when a draw is required.
  Generators log it and stop producing that record type.
- LookupMiss: a foreign key resolves to nothing during projection.
  Recovered locally by omitting the embedded field.
"""


class VitalrecError(Exception):
    """Base class for all vitalrec errors."""

    pass


class InvalidArgument(VitalrecError, ValueError):
    """Raised for malformed arguments or configuration."""

    pass


class PoolExhausted(VitalrecError):
    """Raised when an eligible pool has nothing left to draw."""

    def __init__(self, pool: str, message: str | None = None):
        self.pool = pool
        super().__init__(message or f"No eligible entities left in pool: {pool}")


class LookupMiss(VitalrecError, KeyError):
    """Raised when a foreign key cannot be resolved."""

    def __init__(self, entity: str, key: int):
        self.entity = entity
        self.key = key
        super().__init__(f"{entity} {key} not found")

    def __str__(self) -> str:
        return f"{self.entity} {self.key} not found"
