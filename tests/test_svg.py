import xml.etree.ElementTree as ET

from checkprint import layout, load_default_template, normalize, print_page_css, render_svg

_NS = "{http://www.w3.org/2000/svg}"


def _page():
    (rec,) = normalize([{"payee": "Alice", "amount": "1234.5", "date": "2024-01-15"}]).records
    return layout(load_default_template(), rec)


def test_svg_document_has_physical_size_and_viewbox():
    root = ET.fromstring(render_svg(_page()))

    assert root.tag == f"{_NS}svg"
    assert root.get("width") == "190mm"
    assert root.get("height") == "80mm"
    assert root.get("viewBox") == "0 0 190 80"


def test_svg_paints_shapes_before_text_in_template_order():
    page = _page()
    root = ET.fromstring(render_svg(page))

    tags = [child.tag.removeprefix(_NS) for child in root]
    n_shapes = len(page.shapes)
    assert tags[:n_shapes] == ["rect", "line", "line", "rect", "line"]
    assert tags[n_shapes:] == ["text"] * len(page.texts)

    texts = root.findall(f"{_NS}text")
    assert [t.text or "" for t in texts] == [run.text for run in page.texts]


def test_svg_text_attributes():
    root = ET.fromstring(render_svg(_page()))
    by_text = {t.text: t for t in root.findall(f"{_NS}text")}

    amount = by_text["1,234.50"]
    assert amount.get("text-anchor") == "end"
    assert amount.get("x") == "180"
    assert amount.get("font-weight") == "700"
    assert amount.get("dominant-baseline") == "hanging"
    assert by_text["壹仟貳佰參拾肆元伍角"].get("letter-spacing") == "0.6"
    assert by_text["Alice"].get("letter-spacing") is None


def test_print_page_css_sizes_the_printed_page():
    css = print_page_css(load_default_template())
    assert "@page" in css
    assert "size: 190mm 80mm;" in css
    assert "margin: 0mm;" in css
