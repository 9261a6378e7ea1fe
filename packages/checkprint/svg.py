"""Serialize a :class:`~checkprint.render.PageLayout` to a standalone SVG document.

The SVG viewBox is in template units and the outer width/height carry the
unit suffix, so the page prints at its physical size. Text runs hang from
their ``y`` coordinate (``dominant-baseline="hanging"``) and use the anchor
computed at layout time.
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from typing import assert_never

from .render import ImageShape, LineShape, PageLayout, RectShape, Shape, TextRun
from .templates import Template

SVG_NS = "http://www.w3.org/2000/svg"


def _num(value: float) -> str:
    # 12.0 -> "12", 12.5 -> "12.5"
    return f"{value:g}"


def _shape_element(shape: Shape) -> ET.Element:
    match shape:
        case RectShape():
            return ET.Element(
                "rect",
                {
                    "x": _num(shape.x),
                    "y": _num(shape.y),
                    "width": _num(shape.w),
                    "height": _num(shape.h),
                    "rx": _num(shape.radius),
                    "ry": _num(shape.radius),
                    "fill": shape.fill or "none",
                    "stroke": shape.stroke or "none",
                    "stroke-width": _num(shape.stroke_width),
                },
            )
        case LineShape():
            return ET.Element(
                "line",
                {
                    "x1": _num(shape.x1),
                    "y1": _num(shape.y1),
                    "x2": _num(shape.x2),
                    "y2": _num(shape.y2),
                    "stroke": shape.stroke,
                    "stroke-width": _num(shape.stroke_width),
                },
            )
        case ImageShape():
            return ET.Element(
                "image",
                {
                    "href": shape.src,
                    "x": _num(shape.x),
                    "y": _num(shape.y),
                    "width": _num(shape.w),
                    "height": _num(shape.h),
                    "preserveAspectRatio": shape.preserve_aspect_ratio,
                },
            )
        case _:
            assert_never(shape)


def _text_element(run: TextRun) -> ET.Element:
    attrs = {
        "x": _num(run.x),
        "y": _num(run.y),
        "font-family": run.font_family,
        "font-size": _num(run.font_size),
        "font-weight": str(run.font_weight),
        "text-anchor": run.anchor,
        "dominant-baseline": "hanging",
        "fill": run.fill,
    }
    if run.letter_spacing is not None:
        attrs["letter-spacing"] = _num(run.letter_spacing)
    el = ET.Element("text", attrs)
    el.text = run.text
    return el


def render_svg(page: PageLayout) -> str:
    """Return the page as an SVG document string (UTF-8, no XML declaration)."""

    root = ET.Element(
        "svg",
        {
            "xmlns": SVG_NS,
            "width": f"{_num(page.width)}{page.unit}",
            "height": f"{_num(page.height)}{page.unit}",
            "viewBox": f"0 0 {_num(page.width)} {_num(page.height)}",
        },
    )
    for shape in page.shapes:
        root.append(_shape_element(shape))
    for run in page.texts:
        root.append(_text_element(run))
    return ET.tostring(root, encoding="unicode")


def print_page_css(template: Template) -> str:
    """``@page`` rule sizing printed output to the template's page."""

    page = template.page
    unit = page.unit
    margin = page.margin or 0
    return (
        "@media print {\n"
        "  @page {\n"
        f"    size: {_num(page.width)}{unit} {_num(page.height)}{unit};\n"
        f"    margin: {_num(margin)}{unit};\n"
        "  }\n"
        "}"
    )


__all__ = ["print_page_css", "render_svg"]
