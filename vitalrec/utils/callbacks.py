"""Typed callback protocols for progress reporting across the pipeline.

Plain callables with matching signatures satisfy these protocols through
duck typing.
"""

from typing import Protocol


class StepProgressCallback(Protocol):
    """Callback for step-based progress (dataset generation phases).

    Args:
        step: Step identifier (e.g. "pools", "persons", "marriages")
        status: Human-readable status message
    """

    def __call__(self, step: str, status: str) -> None: ...


class ItemProgressCallback(Protocol):
    """Callback for item-based progress (person and event generators).

    Args:
        current: Items produced so far
        total: Items requested
    """

    def __call__(self, current: int, total: int) -> None: ...
