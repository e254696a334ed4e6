"""Knapsack work-resource command line.

Runs the work-resource generator against a Hyku knapsack checkout:

    knapsack-scaffold ScholarlyPaper subtitle:string pages:integer
    knapsack-scaffold abc/scholarly_paper --root ../my_knapsack
    knapsack-scaffold ScholarlyPaper --revoke

Usage::

    python -m knapsack_scaffold.pipeline ScholarlyPaper title:string
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

from knapsack_scaffold.config import Config, ConflictPolicy
from knapsack_scaffold.scaffolder import (
    Mode,
    ScaffoldError,
    WorkResourceGenerator,
    derive_resource,
    parse_attributes,
)
from knapsack_scaffold.scaffolder.actions import ActionResult
from knapsack_scaffold.utils import console, print_error, print_success


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="knapsack-scaffold",
        description="Generate a Valkyrie work resource inside a Hyku knapsack",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  knapsack-scaffold ScholarlyPaper subtitle:string\n"
            "  knapsack-scaffold abc/scholarly_paper --root ./my_knapsack\n"
            "  knapsack-scaffold ScholarlyPaper --revoke\n"
        ),
    )
    parser.add_argument("name", help="Work type name, e.g. ScholarlyPaper or abc/scholarly_paper")
    parser.add_argument(
        "attributes",
        nargs="*",
        metavar="field:type",
        help="Attributes written to the metadata schema",
    )
    parser.add_argument(
        "--revoke", "-d",
        action="store_true",
        help="Remove the files and registration a previous run generated",
    )
    parser.add_argument("--root", default=None, help="Knapsack root directory (default: .)")
    parser.add_argument("--initializer", default=None, help="Registration file relative to the root")
    parser.add_argument("--config", default=None, help="JSON configuration file")

    specs = parser.add_mutually_exclusive_group()
    specs.add_argument("--with-specs", dest="with_specs", action="store_true", default=None,
                       help="Always generate RSpec files")
    specs.add_argument("--skip-specs", dest="with_specs", action="store_false", default=None,
                       help="Never generate RSpec files")

    conflicts = parser.add_mutually_exclusive_group()
    conflicts.add_argument("--force", "-f", dest="on_conflict", action="store_const",
                           const=ConflictPolicy.FORCE, help="Overwrite files that already exist")
    conflicts.add_argument("--skip", "-s", dest="on_conflict", action="store_const",
                           const=ConflictPolicy.SKIP, help="Skip files that already exist")

    parser.add_argument("--force-plural", action="store_true", default=None,
                        help="Keep a plural name as given")
    return parser


def build_config(args: argparse.Namespace) -> Config:
    """Environment (or ``--config`` file) first, then CLI overrides."""
    config = Config.load(Path(args.config)) if args.config else Config.from_env()
    overrides = {
        "destination_root": Path(args.root) if args.root else None,
        "initializer": args.initializer,
        "with_specs": args.with_specs,
        "on_conflict": args.on_conflict,
        "force_plural": args.force_plural,
    }
    return config.model_copy(update={k: v for k, v in overrides.items() if v is not None})


async def run(
    config: Config,
    name: str,
    attribute_tokens: list[str],
    mode: Mode = Mode.GENERATE,
) -> list[ActionResult]:
    """Derive the resource and run the generator.

    Raises:
        ScaffoldError: Before any file is written for a bad name or
            attribute, or mid-run for an aborted conflict.
    """
    resource = derive_resource(
        name,
        parse_attributes(attribute_tokens),
        mode,
        force_plural=config.force_plural,
    )
    generator = WorkResourceGenerator(config, resource)
    return await generator.run()


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for ``knapsack-scaffold``."""
    args = build_parser().parse_args(argv)
    try:
        config = build_config(args)
    except (OSError, ValueError) as exc:
        # ValueError covers pydantic's ValidationError and bad enum values
        print_error(f"Error: Invalid configuration: {exc}")
        sys.exit(1)

    if not config.destination_root.is_dir():
        console.print(
            f"[bold red]Error:[/bold red] Knapsack root not found: {config.destination_root}"
        )
        sys.exit(1)

    mode = Mode.REVOKE if args.revoke else Mode.GENERATE
    try:
        asyncio.run(run(config, args.name, args.attributes, mode))
    except ScaffoldError as exc:
        print_error(str(exc))
        sys.exit(1)
    except EOFError:
        print_error("Error: No answer to the overwrite prompt; rerun with --force or --skip.")
        sys.exit(1)

    print_success("Done." if mode is Mode.GENERATE else "Removed.")


if __name__ == "__main__":
    main()
