"""Tests for anchor-pattern line patches.

Covers:
- first/last/first_of locators
- insertion before and after an anchor
- idempotent re-application
- missing anchors
- reverting an applied patch
"""

from __future__ import annotations

import textwrap
from pathlib import Path

import pytest

from knapsack_scaffold.scaffolder.patcher import (
    AFTER,
    BEFORE,
    AnchorPatch,
    apply_patch,
    find_block,
    first_line,
    first_of,
    insert_lines,
    last_line,
    line_equals,
    revert_patch,
    split_lines,
)


pytestmark = pytest.mark.unit


MODEL = textwrap.dedent("""\
    class ScholarlyPaper < Hyrax::Work
      include Hyrax::Schema(:basic_metadata)
      def title?
        true
      end
    end
""")


class TestLocators:
    def test_first_line(self):
        lines = ["a\n", "b\n", "a\n"]
        assert first_line(lambda l: l == "a\n")(lines) == 0

    def test_last_line(self):
        lines = ["a\n", "b\n", "a\n"]
        assert last_line(lambda l: l == "a\n")(lines) == 2

    def test_no_match(self):
        assert first_line(lambda l: False)(["a\n"]) is None
        assert last_line(lambda l: False)([]) is None

    def test_first_of_falls_back(self):
        locate = first_of(first_line(lambda l: l == "x\n"), first_line(lambda l: l == "b\n"))
        assert locate(["a\n", "b\n"]) == 1

    def test_first_of_prefers_first(self):
        locate = first_of(last_line(lambda l: l == "a\n"), first_line(lambda l: l == "b\n"))
        assert locate(["a\n", "b\n", "a\n"]) == 2

    def test_line_equals_ignores_indentation(self):
        predicate = line_equals("end")
        assert predicate("  end\n")
        assert not predicate("  endpoint\n")


class TestSplicing:
    def test_split_keeps_endings(self):
        assert split_lines("a\nb") == ["a\n", "b"]

    def test_insert_lines_copies(self):
        original = ["a\n", "c\n"]
        assert insert_lines(original, 1, ["b\n"]) == ["a\n", "b\n", "c\n"]
        assert original == ["a\n", "c\n"]

    def test_insert_after_unterminated_last_line(self):
        assert insert_lines(["a\n", "end"], 2, ["x\n"]) == ["a\n", "end\n", "x\n"]

    def test_find_block(self):
        assert find_block(["a\n", "b\n", "c\n"], ["b\n", "c\n"]) == 1
        assert find_block(["a\n"], ["b\n"]) is None
        assert find_block(["a\n"], []) is None


class TestApplyPatch:
    def _model_patch(self, text="  include Hyrax::ArResource\n"):
        return AnchorPatch(
            target=Path("app/models/scholarly_paper.rb"),
            locate=last_line(line_equals("end")),
            text=text,
            position=BEFORE,
        )

    def test_insert_before_final_end(self):
        outcome = apply_patch(MODEL, self._model_patch())
        assert outcome.status == "insert"
        assert outcome.changed
        assert outcome.content.endswith("  end\n  include Hyrax::ArResource\nend\n")

    def test_insert_after(self):
        patch = AnchorPatch(
            target=Path("x.rb"),
            locate=first_line(line_equals("include Hyrax::Schema(:basic_metadata)")),
            text="  include Hyrax::NestedWorks\n",
            position=AFTER,
        )
        lines = split_lines(apply_patch(MODEL, patch).content)
        assert lines[1] == "  include Hyrax::Schema(:basic_metadata)\n"
        assert lines[2] == "  include Hyrax::NestedWorks\n"

    def test_second_application_is_identical(self):
        patch = self._model_patch()
        once = apply_patch(MODEL, patch).content
        twice = apply_patch(once, patch)
        assert twice.status == "identical"
        assert twice.content == once
        assert not twice.changed

    def test_missing_anchor(self):
        patch = AnchorPatch(
            target=Path("x.rb"),
            locate=first_line(line_equals("include Hyrax::WorksControllerBehavior")),
            text="    include Hyku::WorksControllerBehavior\n",
        )
        outcome = apply_patch(MODEL, patch)
        assert outcome.status == "missing"
        assert outcome.content == MODEL

    def test_custom_present_check(self):
        patch = AnchorPatch(
            target=Path("x.rb"),
            locate=first_line(lambda l: True),
            text="# marker\n",
            present=lambda lines: any("Schema" in l for l in lines),
        )
        assert apply_patch(MODEL, patch).status == "identical"


class TestRevertPatch:
    def test_revert_restores_original(self):
        patch = AnchorPatch(
            target=Path("x.rb"),
            locate=last_line(line_equals("end")),
            text="\n  include Hyrax::ArResource\n\n",
            position=BEFORE,
        )
        applied = apply_patch(MODEL, patch).content
        reverted = revert_patch(applied, patch)
        assert reverted.status == "revert"
        assert reverted.content == MODEL

    def test_revert_absent_block_is_unchanged(self):
        patch = AnchorPatch(target=Path("x.rb"), locate=first_line(lambda l: True), text="nope\n")
        outcome = revert_patch(MODEL, patch)
        assert outcome.status == "unchanged"
        assert outcome.content == MODEL
