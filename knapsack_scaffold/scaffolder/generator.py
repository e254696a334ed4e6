"""Work-resource generator.

Scaffolds a Valkyrie work type inside a Hyku knapsack: controller, metadata
schema, model, form, indexer, search-result view, their RSpec files, and the
registration in the Hyrax initializer.  The same step list, run in reverse,
undoes a previous run when the resource is in revoke mode.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import Any

import yaml

from knapsack_scaffold.config import Config
from knapsack_scaffold.utils import print_banner, print_summary_table, say_status

from .actions import ActionResult, FileActions
from .naming import ResourceSpec
from .patcher import AFTER, BEFORE, AnchorPatch, first_line, last_line, line_equals
from .registration import registration_patch
from .templates import TemplateRenderer


METADATA_PLACEHOLDER = "attributes: {}"

WORK_SHARED_EXAMPLES = "  it_behaves_like 'a Hyrax::Work'"
SCHEMA_METADATA_CONTEXT = "  context 'includes schema defined metadata' do"

HYRAX_CONTROLLER_BEHAVIOR = "    include Hyrax::WorksControllerBehavior"
HYKU_CONTROLLER_BEHAVIOR = "    include Hyku::WorksControllerBehavior\n"

HYKU_MODEL_EXTENSIONS = """\
  include Hyrax::Schema(:with_pdf_viewer)
  include Hyrax::Schema(:with_video_embed)
  include Hyrax::ArResource
  include Hyrax::NestedWorks

  include IiifPrint.model_configuration(
    pdf_split_child_model: GenericWorkResource,
    pdf_splitter_service: IiifPrint::TenantConfig::PdfSplitter
  )

  prepend OrderAlready.for(:creator)
"""

SEARCH_RESULT_VIEW = (
    "<%# This is a search result view %>\n"
    "<%= render 'catalog/document', document: {{ file_name }}, "
    "document_counter: {{ file_name }}_counter  %>\n"
)


# ---------------------------------------------------------------------------
# Output locations
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class TemplateOutput:
    """Where one generated file comes from and goes to.

    ``base`` is the conventional directory the file lives under; revoke
    prunes emptied namespace directories up to it.
    """

    template: str | None
    base: str
    destination: PurePosixPath
    needs_specs: bool = False


def template_outputs(resource: ResourceSpec) -> dict[str, TemplateOutput]:
    """Every generated file for *resource*, keyed by step name."""
    ns = resource.path_segments
    file_name = resource.file_name
    plural = resource.plural_file_name

    def out(template: str | None, base: str, *parts: str, needs_specs: bool = False) -> TemplateOutput:
        return TemplateOutput(template, base, PurePosixPath(base, *parts), needs_specs)

    return {
        "controller": out("controller.rb.j2", "app/controllers/hyrax", *ns, f"{plural}_controller.rb"),
        "metadata": out("metadata.yaml.j2", "config/metadata", f"{file_name}.yaml"),
        "model": out("work.rb.j2", "app/models", *ns, f"{file_name}.rb"),
        "model_spec": out("work_spec.rb.j2", "spec/models", *ns, f"{file_name}_spec.rb", needs_specs=True),
        "form": out("form.rb.j2", "app/forms", *ns, f"{file_name}_form.rb"),
        "indexer": out("indexer.rb.j2", "app/indexers", *ns, f"{file_name}_indexer.rb"),
        "indexer_spec": out(
            "indexer_spec.rb.j2", "spec/indexers", *ns, f"{file_name}_indexer_spec.rb", needs_specs=True
        ),
        "view": out(None, "app/views/hyrax", *ns, plural, f"_{file_name}.html.erb"),
        "view_spec": out(
            "work.html.erb_spec.rb.j2",
            "spec/views",
            *ns,
            plural,
            f"_{file_name}.html.erb_spec.rb",
            needs_specs=True,
        ),
    }


def metadata_attributes_yaml(resource: ResourceSpec) -> str:
    """Serialise the attributes as the YAML document replacing the placeholder."""
    attributes = {attr.name: {"type": str(attr.type)} for attr in resource.attributes}
    return yaml.safe_dump(
        {"attributes": attributes},
        explicit_start=True,
        sort_keys=False,
        default_flow_style=False,
    )


def schema_metadata_block(resource: ResourceSpec) -> str:
    """RSpec block asserting the model responds to every attribute."""
    examples = "".join(
        f"    it {{ is_expected.to respond_to(:{attr.name}) }}\n" for attr in resource.attributes
    )
    return f"\n{SCHEMA_METADATA_CONTEXT}\n{examples}  end\n"


def detect_rspec(root: Path) -> bool:
    """Check *root* for an RSpec setup.

    True when ``spec/rails_helper.rb`` or ``.rspec`` exists, or the Gemfile
    depends on ``rspec-rails``.
    """
    root = Path(root)
    if (root / "spec" / "rails_helper.rb").is_file() or (root / ".rspec").is_file():
        return True
    gemfile = root / "Gemfile"
    if gemfile.is_file():
        return "rspec-rails" in gemfile.read_text(encoding="utf-8", errors="replace")
    return False


# ---------------------------------------------------------------------------
# Generator
# ---------------------------------------------------------------------------


class WorkResourceGenerator:
    """Scaffolds (or, in revoke mode, removes) one work resource.

    Steps run in the order of :attr:`STEPS`; later steps patch files the
    earlier ones created.  Revoke runs the same steps last-to-first.
    """

    STEPS: tuple[str, ...] = (
        "create_controller",
        "create_metadata_config",
        "create_model",
        "create_model_spec",
        "create_form",
        "register_work",
        "create_indexer",
        "create_indexer_spec",
        "create_views",
        "create_view_spec",
        "insert_hyku_works_controller_behavior",
        "insert_hyku_extra_includes_into_model",
    )

    def __init__(
        self,
        config: Config,
        resource: ResourceSpec,
        *,
        renderer: TemplateRenderer | None = None,
        confirm: Callable[[str], bool] | None = None,
    ) -> None:
        self.config = config
        self.resource = resource
        self.root = Path(config.destination_root)
        self.renderer = renderer or TemplateRenderer(config.template_dir)
        self.actions = FileActions(
            self.root,
            on_conflict=config.on_conflict,
            revoking=resource.revoking,
            confirm=confirm,
        )
        # Resolved once; individual steps only read the flag.
        self.with_specs = config.with_specs if config.with_specs is not None else detect_rspec(self.root)
        self.outputs = template_outputs(resource)

    # -- Public API --------------------------------------------------------

    async def run(self) -> list[ActionResult]:
        """Run every step and return the recorded action results."""
        self.banner()
        steps = reversed(self.STEPS) if self.resource.revoking else self.STEPS
        for step in steps:
            await getattr(self, step)()
        self.summary()
        return self.actions.results

    def banner(self) -> None:
        verb = "DESTROYING" if self.resource.revoking else "GENERATING"
        print_banner(f"{verb} VALKYRIE WORK MODEL: {self.resource.class_name}")

    def summary(self) -> None:
        counts = Counter(result.status for result in self.actions.results)
        print_summary_table(
            {status: str(count) for status, count in sorted(counts.items())},
            title=f"{self.resource.class_name} ({self.resource.mode.value})",
        )

    # -- Context -----------------------------------------------------------

    def _context(self) -> dict[str, Any]:
        return {**self.resource.template_context(), "command": self.config.command}

    async def _template(self, key: str) -> ActionResult | None:
        output = self.outputs[key]
        if output.needs_specs and not self.with_specs:
            say_status("skip", f"{output.destination} (rspec not configured)")
            return None
        content = "" if self.resource.revoking else self.renderer.render(output.template, self._context())
        return await self.actions.create_file(output.destination, content, prune_to=output.base)

    # -- Steps -------------------------------------------------------------

    async def create_controller(self) -> None:
        await self._template("controller")

    async def create_metadata_config(self) -> None:
        destination = self.outputs["metadata"].destination
        if not self.resource.attributes:
            await self._template("metadata")
            return
        replacement = metadata_attributes_yaml(self.resource)
        if self.resource.revoking:
            await self.actions.gsub_file(destination, METADATA_PLACEHOLDER, replacement)
            await self._template("metadata")
        else:
            await self._template("metadata")
            await self.actions.gsub_file(destination, METADATA_PLACEHOLDER, replacement)

    async def create_model(self) -> None:
        await self._template("model")

    async def create_model_spec(self) -> None:
        output = self.outputs["model_spec"]
        is_context = line_equals(SCHEMA_METADATA_CONTEXT)
        patch = AnchorPatch(
            target=Path(output.destination),
            locate=first_line(line_equals(WORK_SHARED_EXAMPLES)),
            text=schema_metadata_block(self.resource),
            position=AFTER,
            description="schema defined metadata examples",
            # One metadata context per spec, whatever attributes it lists.
            present=lambda lines: any(is_context(line) for line in lines),
        )
        inject = self.with_specs and bool(self.resource.attributes)
        if inject and self.resource.revoking:
            await self.actions.inject(patch)
        await self._template("model_spec")
        if inject and not self.resource.revoking:
            await self.actions.inject(patch)

    async def create_form(self) -> None:
        await self._template("form")

    async def register_work(self) -> None:
        """Register the type after the last registered work, or at the top
        of the config block."""
        patch = registration_patch(self.resource, Path(self.config.initializer), self.config.command)
        await self.actions.inject(patch)

    async def create_indexer(self) -> None:
        await self._template("indexer")

    async def create_indexer_spec(self) -> None:
        await self._template("indexer_spec")

    async def create_views(self) -> None:
        output = self.outputs["view"]
        content = "" if self.resource.revoking else self.renderer.render_string(SEARCH_RESULT_VIEW, self._context())
        await self.actions.create_file(output.destination, content, prune_to=output.base)

    async def create_view_spec(self) -> None:
        await self._template("view_spec")

    async def insert_hyku_works_controller_behavior(self) -> None:
        await self.actions.inject(
            AnchorPatch(
                target=Path(self.outputs["controller"].destination),
                locate=first_line(line_equals(HYRAX_CONTROLLER_BEHAVIOR)),
                text=HYKU_CONTROLLER_BEHAVIOR,
                position=AFTER,
                description="Hyku::WorksControllerBehavior",
            )
        )

    async def insert_hyku_extra_includes_into_model(self) -> None:
        await self.actions.inject(
            AnchorPatch(
                target=Path(self.outputs["model"].destination),
                locate=last_line(line_equals("end")),
                text=HYKU_MODEL_EXTENSIONS,
                position=BEFORE,
                description="Hyku model extensions",
            )
        )
