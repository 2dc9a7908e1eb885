"""Configuration management for vitalrec.

Two config sections:
- generation: entity counts, caps, locale and corpus location
- output: where and what the emitters write

Config resolution order (highest priority first):
1. Programmatic (VitalrecConfig constructed in code)
2. Environment variables (VITALREC_RECORDS_COUNT, VITALREC_OUTPUT_DIR, etc.)
3. Config file (~/.config/vitalrec/config.json, managed by `vitalrec config`)
4. Hardcoded defaults
"""

import json
import logging
import os
from dataclasses import dataclass, field, asdict, fields
from pathlib import Path
from typing import Any

from .core.errors import InvalidArgument


logger = logging.getLogger(__name__)


# =============================================================================
# Config file location
# =============================================================================

CONFIG_DIR = Path.home() / ".config" / "vitalrec"
CONFIG_FILE = CONFIG_DIR / "config.json"


# =============================================================================
# Derived counts
# =============================================================================


def derive_person_count(records_count: int) -> int:
    """Person pool size for a requested number of marriage + death records.

    A third of the records are marriages and the population is eight times
    the marriage count; triads and kids make the ratio of persons to deaths
    roughly 4:1 and persons to marriages roughly 8:1.
    """
    return (records_count // 3) * 8


# =============================================================================
# Config dataclasses
# =============================================================================


@dataclass
class GenerationConfig:
    """Entity counts and caps for one generation run.

    - person_count: target population; None derives it from records_count
    - marriage_count / death_count: None means "as many as the pools allow"
    - occupations_count / villages_count: caps, silently limited to corpus size
    """

    records_count: int = 1000
    person_count: int | None = None
    marriage_count: int | None = None
    death_count: int | None = None
    users_count: int = 2
    archives_count: int = 3
    fonds_count: int = 5
    signatures_count: int = 15
    directors_count: int = 3
    celebrants_count: int = 3
    officiants_count: int = 3
    occupations_count: int = 50
    villages_count: int = 15
    locale: str = "cs_CZ"
    corpora_path: str = ""

    def resolve_person_count(self) -> int:
        if self.person_count is not None:
            return self.person_count
        return derive_person_count(self.records_count)

    def validate(self) -> None:
        """Check counts before generation starts.

        Raises:
            InvalidArgument: If a count is negative or a mandatory pool is empty.
        """
        for name in (
            "records_count",
            "person_count",
            "marriage_count",
            "death_count",
            "occupations_count",
            "villages_count",
        ):
            value = getattr(self, name)
            if value is not None and value < 0:
                raise InvalidArgument(f"{name} must be >= 0, got {value}")

        # Every marriage and death references one of each of these
        for name in (
            "users_count",
            "archives_count",
            "fonds_count",
            "signatures_count",
            "directors_count",
            "celebrants_count",
            "officiants_count",
        ):
            value = getattr(self, name)
            if value < 1:
                raise InvalidArgument(f"{name} must be >= 1, got {value}")

        if self.villages_count < 1:
            raise InvalidArgument("villages_count must be >= 1")


@dataclass
class OutputConfig:
    """Emitter settings."""

    output_dir: str = "./output"
    sql_file: str = "inserts.sql"
    create_indexes: bool = True

    @property
    def output_dir_resolved(self) -> Path:
        path = Path(self.output_dir)
        path.mkdir(parents=True, exist_ok=True)
        return path

    @property
    def sql_path(self) -> Path:
        return self.output_dir_resolved / self.sql_file


# =============================================================================
# Main config class
# =============================================================================


@dataclass
class VitalrecConfig:
    """Top-level vitalrec configuration.

    Construct programmatically for package use, or load from config file for CLI use.

    Examples:
        # Package use - no files needed
        config = VitalrecConfig(generation=GenerationConfig(records_count=300))

        # CLI use - loads from ~/.config/vitalrec/config.json
        config = VitalrecConfig.load()
    """

    generation: GenerationConfig = field(default_factory=GenerationConfig)
    output: OutputConfig = field(default_factory=OutputConfig)

    @classmethod
    def load(cls) -> "VitalrecConfig":
        """Load config from file + env vars.

        Priority: env var values > config.json values > defaults.
        """
        config = cls()

        # Layer 1: Load from config file if it exists
        if CONFIG_FILE.exists():
            try:
                with open(CONFIG_FILE) as f:
                    data = json.load(f)
                _apply_dict(config, data)
            except (json.JSONDecodeError, OSError) as exc:
                logger.warning("Failed to load config from %s: %s", CONFIG_FILE, exc)

        # Layer 2: Env var overrides
        for env_name, attr in (
            ("VITALREC_RECORDS_COUNT", "records_count"),
            ("VITALREC_PERSON_COUNT", "person_count"),
        ):
            if val := os.environ.get(env_name):
                try:
                    setattr(config.generation, attr, int(val))
                except ValueError:
                    logger.warning("Invalid %s=%r, ignoring", env_name, val)
        if val := os.environ.get("VITALREC_LOCALE"):
            config.generation.locale = val
        if val := os.environ.get("VITALREC_CORPORA_PATH"):
            config.generation.corpora_path = val
        if val := os.environ.get("VITALREC_OUTPUT_DIR"):
            config.output.output_dir = val
        if val := os.environ.get("VITALREC_CREATE_INDEXES"):
            config.output.create_indexes = _parse_bool(val)

        return config

    def save(self) -> None:
        """Save config to ~/.config/vitalrec/config.json."""
        CONFIG_DIR.mkdir(parents=True, exist_ok=True)
        with open(CONFIG_FILE, "w") as f:
            json.dump(self.to_dict(), f, indent=2)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for display."""
        return {
            "generation": asdict(self.generation),
            "output": asdict(self.output),
        }


# =============================================================================
# Config dict application
# =============================================================================

INT_FIELDS = {
    f.name
    for f in fields(GenerationConfig)
    if f.name.endswith("_count")
}
BOOL_FIELDS = {"create_indexes"}


def _parse_bool(value: str) -> bool:
    return str(value).strip().lower() in ("1", "true", "yes", "on")


def coerce_value(field_name: str, value: Any) -> Any:
    """Coerce a raw (string or JSON) value to the field's type."""
    if value is None:
        return None
    if field_name in INT_FIELDS:
        return int(value)
    if field_name in BOOL_FIELDS:
        return value if isinstance(value, bool) else _parse_bool(value)
    return value


def _apply_dict(config: VitalrecConfig, data: dict) -> None:
    """Apply a dict of values onto a VitalrecConfig."""
    for section_name in ("generation", "output"):
        section = data.get(section_name)
        if not isinstance(section, dict):
            continue
        target = getattr(config, section_name)
        for k, v in section.items():
            if hasattr(target, k):
                setattr(target, k, coerce_value(k, v))


# =============================================================================
# Global config singleton
# =============================================================================

_config: VitalrecConfig | None = None


def get_config() -> VitalrecConfig:
    """Get the global VitalrecConfig instance.

    First call loads from file + env vars. Subsequent calls return cached instance.
    Use configure() to replace the global config programmatically.
    """
    global _config
    if _config is None:
        _config = VitalrecConfig.load()
    return _config


def configure(config: VitalrecConfig) -> None:
    """Set the global VitalrecConfig programmatically."""
    global _config
    _config = config


def reset_config() -> None:
    """Reset the global config (forces reload on next get_config())."""
    global _config
    _config = None
