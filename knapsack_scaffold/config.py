"""Knapsack scaffolder configuration.

Centralised, typed configuration for a generator run. All settings use
Pydantic v2 models so they can be validated at construction time and
serialised to/from JSON or environment variables without boiler-plate.
"""

from __future__ import annotations

import os
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field


class ConflictPolicy(str, Enum):
    """What to do when a destination file exists with different content."""

    ASK = "ask"
    SKIP = "skip"
    FORCE = "force"
    ABORT = "abort"


class Config(BaseModel):
    """Global scaffolder configuration.

    Instances are typically created once by the CLI entry point and then
    passed to ``WorkResourceGenerator``.
    """

    destination_root: Path = Field(default=Path("."))
    initializer: str = Field(
        default="config/initializers/hyrax.rb",
        description="Registration file, relative to the destination root",
    )
    with_specs: bool | None = Field(
        default=None,
        description="Generate RSpec files; None means check the destination root",
    )
    on_conflict: ConflictPolicy = Field(default=ConflictPolicy.ASK)
    force_plural: bool = Field(default=False)
    command: str = Field(
        default="knapsack-scaffold",
        description="Command named in the provenance comment of the registration",
    )
    template_dir: Path | None = Field(default=None)

    # ------------------------------------------------------------------
    # Serialisation helpers
    # ------------------------------------------------------------------

    def save(self, path: Path) -> Path:
        """Persist the configuration to a JSON file.

        Returns:
            The path where the file was written.
        """
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.model_dump_json(indent=2), encoding="utf-8")
        return path

    @classmethod
    def load(cls, path: Path) -> "Config":
        """Load a previously-saved configuration from JSON."""
        raw = Path(path).read_text(encoding="utf-8")
        return cls.model_validate_json(raw)

    @classmethod
    def from_env(cls) -> "Config":
        """Build a ``Config`` from environment variables.

        Recognised variables (all optional):
            KNAPSACK_ROOT, KNAPSACK_INITIALIZER, KNAPSACK_WITH_SPECS,
            KNAPSACK_ON_CONFLICT, KNAPSACK_FORCE_PLURAL, KNAPSACK_TEMPLATE_DIR.
        """
        kwargs: dict[str, Any] = {}
        if os.environ.get("KNAPSACK_ROOT"):
            kwargs["destination_root"] = Path(os.environ["KNAPSACK_ROOT"])
        if os.environ.get("KNAPSACK_INITIALIZER"):
            kwargs["initializer"] = os.environ["KNAPSACK_INITIALIZER"]
        if os.environ.get("KNAPSACK_WITH_SPECS"):
            kwargs["with_specs"] = _env_flag(os.environ["KNAPSACK_WITH_SPECS"])
        if os.environ.get("KNAPSACK_ON_CONFLICT"):
            kwargs["on_conflict"] = ConflictPolicy(os.environ["KNAPSACK_ON_CONFLICT"].lower())
        if os.environ.get("KNAPSACK_FORCE_PLURAL"):
            kwargs["force_plural"] = _env_flag(os.environ["KNAPSACK_FORCE_PLURAL"])
        if os.environ.get("KNAPSACK_TEMPLATE_DIR"):
            kwargs["template_dir"] = Path(os.environ["KNAPSACK_TEMPLATE_DIR"])
        return cls(**kwargs)


def _env_flag(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")
