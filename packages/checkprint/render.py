"""Field resolution and page layout.

``resolve_field`` turns one template field plus one canonical record into
display text. ``layout`` applies it to every field of a template and returns
a :class:`PageLayout`: a page-sized vector description (decoration shapes,
then positioned text runs in template order) that a rendering collaborator
can paint or serialize (see ``checkprint.svg``).

Resolution never raises for bad data. Undecodable dates resolve to ``""`` so
one bad cell blanks one field, not the page.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Literal, assert_never

from .formatting import DEFAULT_DATE_FORMAT, format_value, render_date
from .logging_setup import get_logger
from .models import CanonicalRecord
from .normalizers import lookup
from .serial_dates import coerce_datetime
from .templates import (
    FieldKind,
    ImageDecoration,
    LineDecoration,
    RectDecoration,
    Template,
    TemplateField,
)

_logger = get_logger("checkprint.render")

# Keys served from the canonical record instead of the raw row.
CANONICAL_KEYS: frozenset[str] = frozenset({"payee", "amount", "amount_cn", "date", "memo"})

DEFAULT_TEXT_FILL = "#0f172a"
DEFAULT_FONT_WEIGHT = 400
DECOR_STROKE = "#94a3b8"
DECOR_FILL = "rgba(148, 163, 184, 0.08)"
RECT_STROKE_WIDTH = 0.4
LINE_STROKE_WIDTH = 0.3
IMAGE_ASPECT = "xMidYMid meet"

type TextAnchor = Literal["start", "middle", "end"]


# ---------------------------------------------------------------------------
# Page description
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class TextRun:
    text: str
    x: float
    y: float
    anchor: TextAnchor
    font_family: str
    font_size: float
    font_weight: int
    fill: str
    letter_spacing: float | None
    field_index: int
    key: str | None


@dataclass(frozen=True, slots=True)
class RectShape:
    x: float
    y: float
    w: float
    h: float
    radius: float
    fill: str | None
    stroke: str | None
    stroke_width: float
    kind: Literal["rect"] = "rect"


@dataclass(frozen=True, slots=True)
class LineShape:
    x1: float
    y1: float
    x2: float
    y2: float
    stroke: str
    stroke_width: float
    kind: Literal["line"] = "line"


@dataclass(frozen=True, slots=True)
class ImageShape:
    src: str
    x: float
    y: float
    w: float
    h: float
    preserve_aspect_ratio: str
    kind: Literal["image"] = "image"


type Shape = RectShape | LineShape | ImageShape


@dataclass(frozen=True, slots=True)
class PageLayout:
    """One printable page: geometry plus shapes and text runs in paint order."""

    template_id: str
    width: float
    height: float
    unit: str
    margin: float
    shapes: tuple[Shape, ...]
    texts: tuple[TextRun, ...]

    @property
    def items(self) -> tuple[Shape | TextRun, ...]:
        """Everything on the page in paint order: decorations first, then fields."""

        return (*self.shapes, *self.texts)


@dataclass(frozen=True, slots=True)
class InputDescriptor:
    """What a host UI needs to offer one interactive field for editing."""

    key: str
    label: str
    placeholder: str
    default_value: str
    field_index: int


# ---------------------------------------------------------------------------
# Field resolution
# ---------------------------------------------------------------------------


def _explicit_input_key(field: TemplateField) -> str | None:
    if field.input is not None and field.input.key:
        return field.input.key
    return field.key or None


def input_key_for(field: TemplateField, index: int) -> str:
    """Storage key for an interactive field.

    The input's own key wins, then the field's data key, then a positional
    ``field_<index>`` key so templates without explicit keys still get stable
    per-position storage.
    """

    return _explicit_input_key(field) or f"field_{index}"


def interactive_inputs(template: Template) -> list[InputDescriptor]:
    out: list[InputDescriptor] = []
    for index, field in enumerate(template.fields):
        if field.kind is not FieldKind.INTERACTIVE or field.input is None:
            continue
        spec = field.input
        out.append(
            InputDescriptor(
                key=input_key_for(field, index),
                label=spec.label or input_key_for(field, index),
                placeholder=spec.placeholder or "",
                default_value=spec.default_value or "",
                field_index=index,
            )
        )
    return out


def _infer_date_text(raw: object, pattern: str, *, date_1904: bool) -> str:
    parsed = coerce_datetime(raw, date_1904=date_1904)
    if parsed is None:
        if raw not in (None, ""):
            _logger.debug("resolve:undecodable_date value=%r", raw)
        return ""
    return render_date(parsed, pattern)


def _resolve_data_field(field: TemplateField, record: CanonicalRecord, *, date_1904: bool) -> str:
    key = field.key
    if not key:
        return ""

    if key in CANONICAL_KEYS:
        match key:
            case "payee":
                return record.payee
            case "amount":
                return record.amount_formatted
            case "amount_cn":
                return record.amount_cjk
            case "date":
                if not field.format:
                    return record.date
                source = record.date_value if record.date_value is not None else record.date
                return format_value(source, field.format, date_1904=date_1904)
            case _:
                return record.memo or ""

    raw = lookup(record.original, key)
    if field.type == "date":
        return _infer_date_text(raw, field.format or DEFAULT_DATE_FORMAT, date_1904=date_1904)
    return format_value(raw, field.format, date_1904=date_1904)


def resolve_field(
    field: TemplateField,
    record: CanonicalRecord,
    custom_inputs: Mapping[str, str] | None = None,
    *,
    index: int | None = None,
    date_1904: bool = False,
) -> str:
    """Return the display text for ``field`` on ``record``.

    ``index`` is the field's position in its template; it only matters for
    interactive fields without any explicit key. Such a field has no storage
    key when ``index`` is omitted, so it shows its default value.
    """

    kind = field.kind
    match kind:
        case FieldKind.INTERACTIVE:
            key = input_key_for(field, index) if index is not None else _explicit_input_key(field)
            if custom_inputs is not None and key is not None and key in custom_inputs:
                value = custom_inputs[key]
                return "" if value is None else str(value)
            default = field.input.default_value if field.input is not None else None
            return default or ""
        case FieldKind.STATIC:
            return field.static or ""
        case FieldKind.DATA:
            return _resolve_data_field(field, record, date_1904=date_1904)
        case _:
            assert_never(kind)


# ---------------------------------------------------------------------------
# Layout
# ---------------------------------------------------------------------------


def _anchor(field: TemplateField) -> tuple[TextAnchor, float]:
    width = field.w or 0
    if field.align == "right":
        return "end", field.x + width
    if field.align == "center":
        return "middle", field.x + width / 2
    return "start", field.x


def _shape(item: RectDecoration | LineDecoration | ImageDecoration) -> Shape:
    match item:
        case RectDecoration():
            return RectShape(
                x=item.x,
                y=item.y,
                w=item.w,
                h=item.h,
                radius=item.radius or 0,
                fill=DECOR_FILL if item.fill else None,
                stroke=DECOR_STROKE if item.stroke else None,
                stroke_width=RECT_STROKE_WIDTH if item.stroke else 0,
            )
        case LineDecoration():
            return LineShape(
                x1=item.x1,
                y1=item.y1,
                x2=item.x2,
                y2=item.y2,
                stroke=item.stroke or DECOR_STROKE,
                stroke_width=item.stroke_width if item.stroke_width is not None else LINE_STROKE_WIDTH,
            )
        case ImageDecoration():
            return ImageShape(
                src=item.src,
                x=item.x,
                y=item.y,
                w=item.w,
                h=item.h,
                preserve_aspect_ratio=item.preserve_aspect_ratio or IMAGE_ASPECT,
            )
        case _:
            assert_never(item)


def layout(
    template: Template,
    record: CanonicalRecord,
    custom_inputs: Mapping[str, str] | None = None,
    *,
    date_1904: bool = False,
) -> PageLayout:
    """Lay out one record on one page of ``template``."""

    font = template.font
    texts: list[TextRun] = []
    for index, field in enumerate(template.fields):
        anchor, x = _anchor(field)
        texts.append(
            TextRun(
                text=resolve_field(field, record, custom_inputs, index=index, date_1904=date_1904),
                x=x,
                y=field.y,
                anchor=anchor,
                font_family=field.font_family or font.family,
                font_size=field.font_size or font.size,
                font_weight=field.font_weight or font.weight or DEFAULT_FONT_WEIGHT,
                fill=field.fill or DEFAULT_TEXT_FILL,
                letter_spacing=field.letter_spacing,
                field_index=index,
                key=field.key,
            )
        )

    return PageLayout(
        template_id=template.id,
        width=template.page.width,
        height=template.page.height,
        unit=template.page.unit,
        margin=template.page.margin or 0,
        shapes=tuple(_shape(item) for item in template.decor),
        texts=tuple(texts),
    )


def layout_pages(
    template: Template,
    records: Iterable[CanonicalRecord],
    custom_inputs: Mapping[str, str] | None = None,
    *,
    date_1904: bool = False,
) -> list[PageLayout]:
    """Lay out one page per record, in record order."""

    return [layout(template, r, custom_inputs, date_1904=date_1904) for r in records]


__all__ = [
    "CANONICAL_KEYS",
    "ImageShape",
    "InputDescriptor",
    "LineShape",
    "PageLayout",
    "RectShape",
    "Shape",
    "TextRun",
    "input_key_for",
    "interactive_inputs",
    "layout",
    "layout_pages",
    "resolve_field",
]
