"""Public interface for the ``checkprint`` package.

This module exposes the package's core functions and models as the stable
import surface. There is no runtime logic here, only symbol re-exports.
"""

from .catalog import TemplateCatalog
from .formatting import (
    format_currency,
    format_date,
    format_value,
    to_cjk_upper,
)
from .inputs import CustomInputStore
from .models import (
    CanonicalRecord,
    FieldMapping,
    NormalizeResult,
    RawRecord,
    Sheet,
)
from .normalizers import RecordNormalizer, lookup, normalize
from .render import (
    InputDescriptor,
    PageLayout,
    TextRun,
    input_key_for,
    interactive_inputs,
    layout,
    layout_pages,
    resolve_field,
)
from .serial_dates import coerce_date, coerce_datetime, decode_serial, encode_serial
from .svg import print_page_css, render_svg
from .templates import (
    FieldKind,
    Template,
    TemplateField,
    load_default_template,
    load_template,
)

__all__ = [
    # Formatting / dates
    "format_currency",
    "format_date",
    "format_value",
    "to_cjk_upper",
    "coerce_date",
    "coerce_datetime",
    "decode_serial",
    "encode_serial",
    # Normalization
    "RecordNormalizer",
    "lookup",
    "normalize",
    # Templates / catalog
    "FieldKind",
    "Template",
    "TemplateField",
    "TemplateCatalog",
    "load_default_template",
    "load_template",
    # Rendering
    "InputDescriptor",
    "PageLayout",
    "TextRun",
    "input_key_for",
    "interactive_inputs",
    "layout",
    "layout_pages",
    "resolve_field",
    "print_page_css",
    "render_svg",
    # Persistence
    "CustomInputStore",
    # Models / types
    "CanonicalRecord",
    "FieldMapping",
    "NormalizeResult",
    "RawRecord",
    "Sheet",
]
