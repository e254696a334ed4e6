"""Registration of a new work type in the Hyrax initializer.

The new type is registered right after the last existing
``config.register_curation_concern`` line, or at the top of the
``Hyrax.config do |config|`` block when the initializer registers nothing
yet.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from pathlib import Path

from .naming import ResourceSpec
from .patcher import AFTER, AnchorPatch, first_line, first_of, last_line

SYMBOL = r""":"[^"]+"|:'[^']+'|:[A-Za-z_]\w*"""
SYMBOL_RE = re.compile(SYMBOL)
REGISTRATION_RE = re.compile(
    rf"^\s*config\.register_curation_concern[\s(]+(?P<symbols>(?:{SYMBOL})(?:\s*,\s*(?:{SYMBOL}))*)"
)
CONFIG_BLOCK_RE = re.compile(r"^\s*Hyrax\.config\s+do\s+\|config\|")


def registered_symbols(line: str) -> list[str]:
    """Return every symbol a registration line registers, in order.

    ``register_curation_concern`` takes one or more symbols; path symbols are
    normalised to the double-quoted form.
    """
    match = REGISTRATION_RE.match(line)
    if match is None:
        return []
    symbols = SYMBOL_RE.findall(match.group("symbols"))
    return [':"' + s[2:-1] + '"' if s.startswith(":'") else s for s in symbols]


def registration_block(resource: ResourceSpec, command: str) -> str:
    """The two lines inserted into the initializer."""
    return (
        f"  # Injected via `{command} {resource.class_name}`\n"
        f"  config.register_curation_concern {resource.registration_symbol}\n"
    )


def registration_patch(resource: ResourceSpec, initializer: Path, command: str) -> AnchorPatch:
    """Build the patch registering *resource* in *initializer*."""
    own_symbol = resource.registration_symbol

    def registers_other(line: str) -> bool:
        symbols = registered_symbols(line)
        return bool(symbols) and own_symbol not in symbols

    def already_registered(lines: Sequence[str]) -> bool:
        return any(own_symbol in registered_symbols(line) for line in lines)

    return AnchorPatch(
        target=initializer,
        locate=first_of(
            last_line(registers_other),
            first_line(lambda line: CONFIG_BLOCK_RE.match(line) is not None),
        ),
        text=registration_block(resource, command),
        position=AFTER,
        description=f"register {resource.class_name}",
        present=already_registered,
    )
