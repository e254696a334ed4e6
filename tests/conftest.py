"""Shared pytest fixtures for the knapsack scaffolder test suite.

Provides reusable fixtures for:
- A temporary knapsack checkout with a Hyrax initializer
- Scaffolder configurations pointing at that checkout
- Pre-derived resources
"""

from __future__ import annotations

import textwrap
from pathlib import Path

import pytest

from knapsack_scaffold.config import Config, ConflictPolicy
from knapsack_scaffold.scaffolder.naming import Attribute, Mode, ResourceSpec, derive_resource


# ---------------------------------------------------------------------------
# Initializer contents
# ---------------------------------------------------------------------------

INITIALIZER_WITH_WORKS = textwrap.dedent("""\
    # frozen_string_literal: true

    Hyrax.config do |config|
      # Injected via `rails g hyrax:work_resource GenericWorkResource`
      config.register_curation_concern :generic_work_resource
      # Injected via `rails g hyrax:work_resource ImageResource`
      config.register_curation_concern :image_resource

      config.iiif_image_server = true
    end
""")

INITIALIZER_WITHOUT_WORKS = textwrap.dedent("""\
    # frozen_string_literal: true

    Hyrax.config do |config|
      config.iiif_image_server = true
    end
""")


@pytest.fixture
def initializer_with_works() -> str:
    return INITIALIZER_WITH_WORKS


@pytest.fixture
def initializer_without_works() -> str:
    return INITIALIZER_WITHOUT_WORKS


# ---------------------------------------------------------------------------
# Paths & Directories
# ---------------------------------------------------------------------------

@pytest.fixture
def knapsack_root(tmp_path: Path) -> Path:
    """Temporary knapsack checkout with an initializer and an RSpec setup."""
    root = tmp_path / "knapsack"
    (root / "config" / "initializers").mkdir(parents=True)
    (root / "config" / "initializers" / "hyrax.rb").write_text(
        INITIALIZER_WITH_WORKS, encoding="utf-8"
    )
    (root / "spec").mkdir()
    (root / "spec" / "rails_helper.rb").write_text("require 'spec_helper'\n", encoding="utf-8")
    yield root


@pytest.fixture
def bare_root(tmp_path: Path) -> Path:
    """Knapsack checkout without any RSpec setup."""
    root = tmp_path / "bare"
    (root / "config" / "initializers").mkdir(parents=True)
    (root / "config" / "initializers" / "hyrax.rb").write_text(
        INITIALIZER_WITH_WORKS, encoding="utf-8"
    )
    yield root


# ---------------------------------------------------------------------------
# Configuration & resources
# ---------------------------------------------------------------------------

@pytest.fixture
def config(knapsack_root: Path) -> Config:
    """Config for ``knapsack_root`` that never prompts."""
    return Config(destination_root=knapsack_root, on_conflict=ConflictPolicy.SKIP)


@pytest.fixture
def scholarly_paper() -> ResourceSpec:
    return derive_resource("scholarly_paper", [Attribute(name="subtitle", type="string")])


@pytest.fixture
def namespaced_paper() -> ResourceSpec:
    return derive_resource("abc/scholarly_paper")


@pytest.fixture
def revoke_of():
    """Return the revoke-mode twin of a resource."""

    def _revoke(resource: ResourceSpec) -> ResourceSpec:
        return resource.model_copy(update={"mode": Mode.REVOKE})

    return _revoke
