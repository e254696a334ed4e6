"""Name and path derivation for a new work resource.

Turns the raw name given on the command line (``ScholarlyPaper``,
``scholarly_paper``, ``Abc::ScholarlyPaper`` or ``abc/scholarly_paper``) into
the set of names every generator step shares, using the ActiveSupport
inflection rules so the results match what the host Rails application
expects.
"""

from __future__ import annotations

import re
from enum import Enum

import inflection
from pydantic import BaseModel, ConfigDict

from knapsack_scaffold.utils import print_warning

from .errors import AttributeParseError, InvalidNameError


RESERVED_NAME = "work"

PLURAL_MODEL_NAME_WARNING = (
    "[WARNING] The model name '{name}' was recognized as a plural, using the "
    "singular '{singular}' instead. Override with --force-plural or setup "
    "custom inflection rules for this noun before running the generator."
)

DEFAULT_ATTRIBUTE_TYPE = "string"

INDEX_TYPES = ("index", "uniq")

_ATTRIBUTE_NAME_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")
_TYPE_RE = re.compile(r"^[A-Za-z0-9_]*$")
_TYPE_OPTIONS_RE = re.compile(r"\{[^}]*\}$")


# ---------------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------------


class Mode(str, Enum):
    GENERATE = "generate"
    REVOKE = "revoke"


class Attribute(BaseModel):
    """A single ``name:type`` pair from the command line."""

    model_config = ConfigDict(frozen=True)

    name: str
    type: str = DEFAULT_ATTRIBUTE_TYPE


class ResourceSpec(BaseModel):
    """Everything the generator steps derive from the input name.

    Built once per invocation by :func:`derive_resource` and never mutated.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    class_name: str
    file_name: str
    plural_file_name: str
    path_segments: tuple[str, ...] = ()
    attributes: tuple[Attribute, ...] = ()
    mode: Mode = Mode.GENERATE

    @property
    def revoking(self) -> bool:
        return self.mode is Mode.REVOKE

    @property
    def controller_class_name(self) -> str:
        """``Abc::ScholarlyPapers`` for ``abc/scholarly_paper``."""
        parts = [*self.path_segments, self.plural_file_name]
        return "::".join(inflection.camelize(p) for p in parts)

    @property
    def namespaced_path(self) -> str:
        """``abc/scholarly_paper``, or just ``scholarly_paper`` without a namespace."""
        return "/".join([*self.path_segments, self.file_name])

    @property
    def registration_symbol(self) -> str:
        """Ruby symbol passed to ``config.register_curation_concern``.

        A bare symbol without a namespace, a quoted path symbol with one
        (``:"abc/scholarly_paper"``).
        """
        if not self.path_segments:
            return f":{self.file_name}"
        return f':"{self.namespaced_path}"'

    def template_context(self) -> dict:
        """Variables available inside every template."""
        return {
            "class_name": self.class_name,
            "file_name": self.file_name,
            "plural_file_name": self.plural_file_name,
            "controller_class_name": self.controller_class_name,
            "namespace_prefix": "".join(f"{s}/" for s in self.path_segments),
        }


# ---------------------------------------------------------------------------
# Derivation
# ---------------------------------------------------------------------------


def parse_attributes(tokens: list[str] | tuple[str, ...]) -> list[Attribute]:
    """Parse ``field:type`` tokens, preserving order.

    Accepts the Rails generator forms ``field``, ``field:type``,
    ``field:type:index``, ``field:index`` and ``field:type{options}``; only
    the bare type is kept.  A missing type defaults to ``string``.
    Duplicate names are kept as given.
    """
    attributes: list[Attribute] = []
    for token in tokens:
        name, type_, index_type, *rest = [*token.strip().split(":"), "", ""]
        if type_ in INDEX_TYPES and not index_type:
            type_, index_type = "", type_
        type_ = _TYPE_OPTIONS_RE.sub("", type_)
        if (
            not _ATTRIBUTE_NAME_RE.match(name)
            or not _TYPE_RE.match(type_)
            or (index_type and index_type not in INDEX_TYPES)
            or any(rest)
        ):
            raise AttributeParseError(token)
        attributes.append(Attribute(name=name, type=type_ or DEFAULT_ATTRIBUTE_TYPE))
    return attributes


def split_name(name: str) -> tuple[list[str], str]:
    """Split a raw name into underscored namespace segments and a file name."""
    parts = name.split("/") if "/" in name else name.split("::")
    parts = [inflection.underscore(p.strip()) for p in parts]
    return parts[:-1], parts[-1]


def derive_resource(
    name: str,
    attributes: list[Attribute] | None = None,
    mode: Mode = Mode.GENERATE,
    *,
    force_plural: bool = False,
) -> ResourceSpec:
    """Build the :class:`ResourceSpec` for *name*.

    Raises:
        InvalidNameError: If the name is blank or collides with the base
            ``Work`` type.
    """
    raw = name.strip()
    if not raw or raw.endswith(("/", "::")):
        raise InvalidNameError(name, "Error: A work resource name is required.")

    singular = raw if force_plural else _singular_name(raw)
    if inflection.singularize(singular).lower() == RESERVED_NAME:
        raise InvalidNameError(name)

    segments, file_name = split_name(singular)
    if not file_name or not all(segments):
        raise InvalidNameError(name, f"Error: '{name}' is not a valid work resource name.")

    class_name = "::".join(inflection.camelize(p) for p in [*segments, file_name])
    return ResourceSpec(
        name=name,
        class_name=class_name,
        file_name=file_name,
        plural_file_name=inflection.pluralize(file_name),
        path_segments=tuple(segments),
        attributes=tuple(attributes or ()),
        mode=mode,
    )


def _singular_name(name: str) -> str:
    plural = inflection.pluralize(name)
    singular = inflection.singularize(name)
    if name == plural and singular != plural:
        print_warning(PLURAL_MODEL_NAME_WARNING.format(name=name, singular=singular))
        return singular
    return name
