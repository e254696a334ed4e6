"""Anchor-pattern text patches.

A target file is handled as an ordered list of lines.  A patch locates an
index with a *locator* (a function over those lines), splices its block in
before or after that line, and can later remove exactly the block it added.
Everything here is pure: callers read and write the files.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from pathlib import Path

LinePredicate = Callable[[str], bool]
Locator = Callable[[Sequence[str]], "int | None"]

AFTER = "after"
BEFORE = "before"


# ---------------------------------------------------------------------------
# Locators
# ---------------------------------------------------------------------------


def first_line(predicate: LinePredicate) -> Locator:
    """Locate the first line satisfying *predicate*."""

    def locate(lines: Sequence[str]) -> int | None:
        for index, line in enumerate(lines):
            if predicate(line):
                return index
        return None

    return locate


def last_line(predicate: LinePredicate) -> Locator:
    """Locate the last line satisfying *predicate*."""

    def locate(lines: Sequence[str]) -> int | None:
        for index in range(len(lines) - 1, -1, -1):
            if predicate(lines[index]):
                return index
        return None

    return locate


def first_of(*locators: Locator) -> Locator:
    """Try *locators* in order and return the first index found."""

    def locate(lines: Sequence[str]) -> int | None:
        for locator in locators:
            index = locator(lines)
            if index is not None:
                return index
        return None

    return locate


def line_equals(text: str) -> LinePredicate:
    """Match a line whose content, ignoring surrounding whitespace, is *text*."""
    expected = text.strip()
    return lambda line: line.strip() == expected


# ---------------------------------------------------------------------------
# Patches
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class AnchorPatch:
    """An in-place insertion of *text* next to the line *locate* finds.

    ``present`` decides whether the patch is already applied; by default the
    block counts as present when its lines appear contiguously anywhere in
    the file.
    """

    target: Path
    locate: Locator
    text: str
    position: str = AFTER
    description: str = ""
    present: Callable[[Sequence[str]], bool] | None = field(default=None, compare=False)

    @property
    def block(self) -> list[str]:
        return split_lines(self.text)

    def is_applied(self, lines: Sequence[str]) -> bool:
        if self.present is not None:
            return self.present(lines)
        return find_block(lines, self.block) is not None


@dataclass(frozen=True)
class PatchOutcome:
    """Result of applying or reverting a patch on some content."""

    content: str
    status: str

    @property
    def changed(self) -> bool:
        return self.status in ("insert", "revert")


def split_lines(content: str) -> list[str]:
    """Split *content* into lines, keeping line endings."""
    return content.splitlines(keepends=True)


def find_block(lines: Sequence[str], block: Sequence[str]) -> int | None:
    """Return the index where *block* starts as a contiguous run, if any."""
    if not block:
        return None
    size = len(block)
    for index in range(len(lines) - size + 1):
        if list(lines[index:index + size]) == list(block):
            return index
    return None


def insert_lines(lines: Sequence[str], index: int, block: Sequence[str]) -> list[str]:
    """Return a copy of *lines* with *block* spliced in at *index*."""
    result = list(lines)
    if index > 0 and not result[index - 1].endswith("\n"):
        result[index - 1] += "\n"
    result[index:index] = block
    return result


def apply_patch(content: str, patch: AnchorPatch) -> PatchOutcome:
    """Insert the patch block next to its anchor.

    Status is ``insert`` on change, ``identical`` when the patch is already
    applied, ``missing`` when the anchor cannot be found.
    """
    lines = split_lines(content)
    if patch.is_applied(lines):
        return PatchOutcome(content, "identical")

    anchor = patch.locate(lines)
    if anchor is None:
        return PatchOutcome(content, "missing")

    index = anchor + 1 if patch.position == AFTER else anchor
    return PatchOutcome("".join(insert_lines(lines, index, patch.block)), "insert")


def revert_patch(content: str, patch: AnchorPatch) -> PatchOutcome:
    """Remove the block a previous :func:`apply_patch` inserted.

    Status is ``revert`` on change, ``unchanged`` when the block is absent.
    """
    lines = split_lines(content)
    start = find_block(lines, patch.block)
    if start is None:
        return PatchOutcome(content, "unchanged")
    del lines[start:start + len(patch.block)]
    return PatchOutcome("".join(lines), "revert")
