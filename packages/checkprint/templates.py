"""Template documents: page geometry, fonts, fields and decorations.

Templates are declarative JSON documents validated by the Pydantic models
below. Field names follow the document's camelCase keys through aliases
(``fontSize``, ``letterSpacing``, ``input.defaultValue``, ...) while the Python
attributes are snake_case. All models are frozen and reject unknown keys, so
a template is immutable once loaded and typos in documents fail loudly.

A field is exactly one of three kinds, decided by which parts are present
with precedence interactive > static > data-bound (see :class:`FieldKind`).
Decorations are a tagged union on ``type`` (``rect``, ``line``, ``image``).
"""

from __future__ import annotations

from collections.abc import Mapping
from enum import StrEnum
from importlib import resources
from os import PathLike
from pathlib import Path
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_TEMPLATE_RESOURCE = "default_tw_bank.json"

_MODEL_CONFIG = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)


# ---------------------------------------------------------------------------
# Page and font defaults
# ---------------------------------------------------------------------------


class PageSpec(BaseModel):
    model_config = _MODEL_CONFIG

    unit: Literal["mm", "px"] = "mm"
    width: float = Field(gt=0)
    height: float = Field(gt=0)
    margin: float | None = Field(default=None, ge=0)


class FontSpec(BaseModel):
    model_config = _MODEL_CONFIG

    family: str
    size: float = Field(gt=0)
    weight: int | None = None


# ---------------------------------------------------------------------------
# Fields
# ---------------------------------------------------------------------------


class FieldKind(StrEnum):
    INTERACTIVE = "interactive"
    STATIC = "static"
    DATA = "data"


class InputSpec(BaseModel):
    """A user-suppliable value attached to a field."""

    model_config = _MODEL_CONFIG

    key: str | None = None
    label: str | None = None
    placeholder: str | None = None
    default_value: str | None = Field(default=None, alias="defaultValue")


class TemplateField(BaseModel):
    """One positioned text field.

    ``key`` names a canonical role (``payee``, ``amount``, ``amount_cn``,
    ``date``, ``memo``) or any raw column. ``static`` is a literal; an empty
    string is a valid literal. ``w`` sets the box width the alignment anchor
    is computed from. ``type="date"`` asks for date inference on raw columns.
    """

    model_config = _MODEL_CONFIG

    key: str | None = None
    x: float
    y: float
    w: float | None = None
    h: float | None = None
    align: Literal["left", "right", "center"] | None = None
    format: str | None = None
    type: Literal["text", "date"] | None = None
    static: str | None = None
    input: InputSpec | None = None
    font_family: str | None = Field(default=None, alias="fontFamily")
    font_size: float | None = Field(default=None, alias="fontSize", gt=0)
    font_weight: int | None = Field(default=None, alias="fontWeight")
    fill: str | None = None
    letter_spacing: float | None = Field(default=None, alias="letterSpacing")

    @property
    def kind(self) -> FieldKind:
        if self.input is not None:
            return FieldKind.INTERACTIVE
        if self.static is not None:
            return FieldKind.STATIC
        return FieldKind.DATA


# ---------------------------------------------------------------------------
# Decorations
# ---------------------------------------------------------------------------


class RectDecoration(BaseModel):
    model_config = _MODEL_CONFIG

    type: Literal["rect"] = "rect"
    x: float
    y: float
    w: float
    h: float
    radius: float | None = None
    stroke: bool = False
    fill: bool = False


class LineDecoration(BaseModel):
    model_config = _MODEL_CONFIG

    type: Literal["line"] = "line"
    x1: float
    y1: float
    x2: float
    y2: float
    stroke: str | None = None
    stroke_width: float | None = Field(default=None, alias="strokeWidth")


class ImageDecoration(BaseModel):
    model_config = _MODEL_CONFIG

    type: Literal["image"] = "image"
    src: str
    x: float
    y: float
    w: float
    h: float
    preserve_aspect_ratio: str | None = Field(default=None, alias="preserveAspectRatio")


Decoration = Annotated[
    RectDecoration | LineDecoration | ImageDecoration, Field(discriminator="type")
]


# ---------------------------------------------------------------------------
# Template
# ---------------------------------------------------------------------------


class Template(BaseModel):
    """A complete page description for one kind of document."""

    model_config = _MODEL_CONFIG

    id: str
    label: str = ""
    page: PageSpec
    font: FontSpec
    fields: tuple[TemplateField, ...] = ()
    decor: tuple[Decoration, ...] = ()

    @field_validator("id")
    @classmethod
    def _id_non_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("template id must be non-empty")
        return v


def load_template(source: str | PathLike[str] | Mapping[str, Any]) -> Template:
    """Load and validate a template from a JSON file path or a parsed mapping.

    Raises :class:`pydantic.ValidationError` for malformed documents.
    """

    if isinstance(source, Mapping):
        return Template.model_validate(source)
    text = Path(source).read_text(encoding="utf-8")
    return Template.model_validate_json(text)


def load_templates_from_dir(directory: str | PathLike[str]) -> list[Template]:
    """Load every ``*.json`` template in ``directory`` (sorted by file name)."""

    return [load_template(p) for p in sorted(Path(directory).glob("*.json"))]


def load_default_template() -> Template:
    """Return the bundled Taiwanese bank check template."""

    text = (
        resources.files("checkprint")
        .joinpath("data", DEFAULT_TEMPLATE_RESOURCE)
        .read_text(encoding="utf-8")
    )
    return Template.model_validate_json(text)


__all__ = [
    "Decoration",
    "FieldKind",
    "FontSpec",
    "ImageDecoration",
    "InputSpec",
    "LineDecoration",
    "PageSpec",
    "RectDecoration",
    "Template",
    "TemplateField",
    "load_default_template",
    "load_template",
    "load_templates_from_dir",
]
