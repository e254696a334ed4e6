"""File actions performed by the generator, each with its revoke inverse.

``FileActions`` writes everything relative to a destination root and
records an ``ActionResult`` per action.  In revoke mode every action undoes
its own effect instead: created files are removed, substitutions are
reversed and inserted blocks are taken out again.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from rich.prompt import Confirm

from knapsack_scaffold.config import ConflictPolicy
from knapsack_scaffold.utils import (
    atomic_write_text,
    console,
    prune_empty_dirs,
    read_text,
    relative_to_root,
    say_status,
)

from .errors import FileConflictError
from .patcher import AnchorPatch, apply_patch, revert_patch


@dataclass(frozen=True)
class ActionResult:
    status: str
    path: Path


class FileActions:
    """Create, substitute and inject text files under *root*.

    Args:
        root: Destination root; relative paths are resolved against it.
        on_conflict: Policy for destinations that exist with other content.
        revoking: Undo instead of do.
        confirm: Callback asked ``"Overwrite <path>?"`` under the ``ask``
            policy.  Defaults to an interactive Rich prompt.
    """

    def __init__(
        self,
        root: Path,
        *,
        on_conflict: ConflictPolicy = ConflictPolicy.ASK,
        revoking: bool = False,
        confirm: Callable[[str], bool] | None = None,
    ) -> None:
        self.root = Path(root)
        self.on_conflict = on_conflict
        self.revoking = revoking
        self.confirm = confirm or _ask_overwrite
        self.results: list[ActionResult] = []

    # -- Bookkeeping -------------------------------------------------------

    def resolve(self, path: str | Path) -> Path:
        return self.root / path

    def _record(self, status: str, path: Path, note: str = "") -> ActionResult:
        result = ActionResult(status, path)
        self.results.append(result)
        message = relative_to_root(path, self.root)
        say_status(status, f"{message}  {note}" if note else message)
        return result

    # -- Whole files -------------------------------------------------------

    async def create_file(
        self,
        destination: str | Path,
        content: str,
        *,
        prune_to: str | Path | None = None,
    ) -> ActionResult:
        """Write *content* to a new file, or remove it when revoking.

        An existing file with identical content is left alone.  One with
        different content is a conflict settled by ``on_conflict``.

        Args:
            prune_to: When revoking, directories emptied by the removal are
                deleted up to (not including) this directory.
        """
        path = self.resolve(destination)
        if self.revoking:
            return await self._remove(path, self.resolve(prune_to) if prune_to else self.root)

        if path.exists():
            existing = await asyncio.to_thread(read_text, path)
            if existing == content:
                return self._record("identical", path)
            self._record("conflict", path)
            if not self._overwrite(path):
                return self._record("skip", path)
            await asyncio.to_thread(atomic_write_text, path, content)
            return self._record("force", path)

        await asyncio.to_thread(atomic_write_text, path, content)
        return self._record("create", path)

    def _overwrite(self, path: Path) -> bool:
        if self.on_conflict is ConflictPolicy.FORCE:
            return True
        if self.on_conflict is ConflictPolicy.SKIP:
            return False
        if self.on_conflict is ConflictPolicy.ABORT:
            raise FileConflictError(path)
        return self.confirm(f"Overwrite {relative_to_root(path, self.root)}?")

    async def _remove(self, path: Path, prune_to: Path) -> ActionResult:
        if not path.exists():
            return self._record("missing", path)
        await asyncio.to_thread(path.unlink)
        await asyncio.to_thread(prune_empty_dirs, path.parent, prune_to)
        return self._record("remove", path)

    # -- In-place edits ----------------------------------------------------

    async def gsub_file(self, destination: str | Path, placeholder: str, replacement: str) -> ActionResult:
        """Replace *placeholder* with *replacement*; the reverse when revoking."""
        path = self.resolve(destination)
        if not path.exists():
            return self._record("missing", path)

        old, new = (replacement, placeholder) if self.revoking else (placeholder, replacement)
        content = await asyncio.to_thread(read_text, path)
        if old not in content:
            return self._record("unchanged", path)
        await asyncio.to_thread(atomic_write_text, path, content.replace(old, new))
        return self._record("revert" if self.revoking else "gsub", path)

    async def inject(self, patch: AnchorPatch) -> ActionResult:
        """Apply *patch* to its target, or revert it when revoking.

        A missing anchor is reported as a warning and the target is left
        untouched; the caller carries on with the next step.
        """
        path = self.resolve(patch.target)
        if not path.exists():
            return self._record("missing", path)

        content = await asyncio.to_thread(read_text, path)
        outcome = revert_patch(content, patch) if self.revoking else apply_patch(content, patch)
        if outcome.changed:
            await asyncio.to_thread(atomic_write_text, path, outcome.content)
        if outcome.status == "missing":
            label = patch.description or "patch"
            return self._record("warning", path, f"(anchor for '{label}' not found, skipped)")
        return self._record(outcome.status, path)


def _ask_overwrite(question: str) -> bool:
    return Confirm.ask(question, console=console, default=False)
