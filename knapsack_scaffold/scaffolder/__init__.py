"""Knapsack work-resource scaffolder -- generates a Valkyrie work type.

This module takes a resource name and ``field:type`` attributes and renders
the model, controller, form, indexer, metadata schema, search-result view
and RSpec files of a new work type into a Hyku knapsack, then registers the
type in the Hyrax initializer.

Quick usage::

    from knapsack_scaffold.config import Config
    from knapsack_scaffold.scaffolder import (
        WorkResourceGenerator,
        derive_resource,
        parse_attributes,
    )

    resource = derive_resource("ScholarlyPaper", parse_attributes(["subtitle:string"]))
    generator = WorkResourceGenerator(Config(destination_root=Path(".")), resource)
    results = await generator.run()
"""

from knapsack_scaffold.scaffolder.errors import (
    AttributeParseError,
    FileConflictError,
    InvalidNameError,
    ScaffoldError,
)
from knapsack_scaffold.scaffolder.generator import WorkResourceGenerator
from knapsack_scaffold.scaffolder.naming import (
    Attribute,
    Mode,
    ResourceSpec,
    derive_resource,
    parse_attributes,
)
from knapsack_scaffold.scaffolder.templates import TemplateRenderer

__all__ = [
    "Attribute",
    "AttributeParseError",
    "FileConflictError",
    "InvalidNameError",
    "Mode",
    "ResourceSpec",
    "ScaffoldError",
    "TemplateRenderer",
    "WorkResourceGenerator",
    "derive_resource",
    "parse_attributes",
]
