# ruff: noqa: I001
"""CLI for the ``checkprint`` package.

This module exposes callable command handlers (``cmd_render``,
``cmd_list_templates``, ``cmd_set_input``) and a Typer-based console
interface around them. Environment variables are loaded from a local ``.env``
using ``python-dotenv`` before delegating to command logic:

- ``CHECKPRINT_LOG_LEVEL``: logging level for the package logger.
- ``CHECKPRINT_CACHE_DIR``: root of the custom input store.
- ``CHECKPRINT_TEMPLATE_DIR``: directory of extra template JSON documents.

Business logic lives in the normalizer/render modules; the handlers only wire
ingestion, the template catalog and output files together.
"""

from __future__ import annotations

import dataclasses
import json
import os
import sys
from collections.abc import Sequence
from pathlib import Path
from typing import Annotated

import typer
from dotenv import load_dotenv
from typer.models import OptionInfo

from .catalog import TemplateCatalog
from .formatting import DEFAULT_DATE_FORMAT
from .logging_setup import configure_logging, get_logger

_logger = get_logger("checkprint.cli")

OUTPUT_FORMATS = ("svg", "json")


# ---- Small module-level helpers used by CLI commands -------------------------


def _build_catalog(template_files: Sequence[Path] = ()) -> TemplateCatalog:
    """Bundled default + ``CHECKPRINT_TEMPLATE_DIR`` + explicit files, in that order."""

    from .templates import load_template, load_templates_from_dir

    catalog = TemplateCatalog()
    template_dir = os.getenv("CHECKPRINT_TEMPLATE_DIR")
    if template_dir and template_dir.strip():
        for template in load_templates_from_dir(template_dir):
            catalog.add(template)
    for path in template_files:
        catalog.add(load_template(path))
    return catalog


def _parse_mapping(pairs: Sequence[str]) -> dict[str, str | None]:
    """Parse ``role=Header`` pairs; an empty header disables an optional role."""

    mapping: dict[str, str | None] = {}
    for pair in pairs:
        role, sep, header = pair.partition("=")
        if not sep or not role.strip():
            raise ValueError(f"Invalid --map value {pair!r}; expected role=Header")
        mapping[role.strip()] = header.strip() or None
    return mapping


# ---- Command handlers ----------------------------------------------------------


def cmd_render(
    input_path: str,
    *,
    out_dir: str,
    output_format: str = "svg",
    sheet_name: str | None = None,
    template_id: str | None = None,
    template_files: Sequence[Path] = (),
    mapping_pairs: Sequence[str] = (),
    date_format: str = DEFAULT_DATE_FORMAT,
) -> int:
    """Render one page per valid row of ``input_path`` into ``out_dir``.

    Row errors are written to stderr as ``"Row N: <reason>"`` and do not stop
    the batch. Returns ``0`` when at least one page was written, ``1``
    otherwise.
    """

    from .ingest.workbook import load_sheets, select_sheet
    from .inputs import CustomInputStore
    from .normalizers import RecordNormalizer
    from .render import layout_pages
    from .svg import render_svg

    if output_format not in OUTPUT_FORMATS:
        print(f"Error: unsupported format {output_format!r}; use one of {OUTPUT_FORMATS}", file=sys.stderr)
        return 1

    try:
        sheet = select_sheet(load_sheets(input_path), sheet_name)
    except FileNotFoundError:
        print(f"Error: File not found: {input_path}", file=sys.stderr)
        return 1
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except Exception as e:
        print(f"Error: Unexpected failure reading '{input_path}': {e}", file=sys.stderr)
        return 1

    try:
        catalog = _build_catalog(template_files)
        mapping = _parse_mapping(mapping_pairs)
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if template_id is not None:
        if template_id not in catalog:
            print(f"Error: Unknown template id: {template_id}", file=sys.stderr)
            return 1
        catalog.set_active(template_id)
    template = catalog.active
    if template is None:
        print("Error: No template available", file=sys.stderr)
        return 1

    try:
        normalizer = RecordNormalizer(
            mapping=mapping, date_format=date_format, date_1904=sheet.date1904
        )
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    result = normalizer.normalize(sheet.records)
    for err in result.errors:
        print(err, file=sys.stderr)

    custom_inputs = CustomInputStore().load(template.id)
    pages = layout_pages(template, result.records, custom_inputs, date_1904=sheet.date1904)

    out = Path(out_dir)
    try:
        out.mkdir(parents=True, exist_ok=True)
        for n, page in enumerate(pages, start=1):
            target = out / f"page_{n:04d}.{output_format}"
            if output_format == "svg":
                target.write_text(render_svg(page), encoding="utf-8")
            else:
                target.write_text(
                    json.dumps(dataclasses.asdict(page), ensure_ascii=False, indent=2),
                    encoding="utf-8",
                )
    except OSError as e:
        print(f"Error: failed to write pages to {out}: {e}", file=sys.stderr)
        return 1

    _logger.info(
        "render:done template=%s pages=%d errors=%d out=%s",
        template.id,
        len(pages),
        len(result.errors),
        os.fspath(out),
    )
    print(f"Wrote {len(pages)} page(s) to {out}")
    return 0 if pages else 1


def cmd_list_templates(template_files: Sequence[Path] = ()) -> int:
    """Print ``<id>\\t<label>`` per template; the active one is marked with ``*``."""

    try:
        catalog = _build_catalog(template_files)
    except Exception as e:
        print(f"Error: failed to load templates: {e}", file=sys.stderr)
        return 1
    for template in catalog.list_templates():
        marker = "*" if template.id == catalog.active_id else " "
        print(f"{marker} {template.id}\t{template.label}")
    return 0


def cmd_set_input(template_id: str, key: str, value: str) -> int:
    """Store one custom input value for ``template_id``."""

    from .inputs import CustomInputStore

    try:
        CustomInputStore().set_value(template_id, key, value)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except OSError as e:
        print(f"Error: failed to write input store: {e}", file=sys.stderr)
        return 1
    print(f"{template_id}\t{key}={value}")
    return 0


# ---- Typer-based console interface -------------------------------------------


app = typer.Typer(
    no_args_is_help=True,
    add_completion=False,
    help=(
        "Render spreadsheet rows onto check templates (SVG or JSON pages). "
        "Loads settings from a local .env before running."
    ),
)


# Module-level option objects to satisfy ruff B008 (no calls in parameter
# defaults). Typer will inspect these when used as default values below.
INPUT_PATH_OPTION: OptionInfo = typer.Option(
    ...,
    "--input",
    help="Path to an .xlsx or .csv file with one check per row.",
    dir_okay=False,
    file_okay=True,
    exists=False,  # the handler reports missing files itself
)
TEMPLATE_FILE_OPTION: OptionInfo = typer.Option(
    None,
    "--template-file",
    help="Extra template JSON document (repeatable). Added after the bundled default.",
)


def _exit_with(code: int) -> None:
    if code:
        raise typer.Exit(code)


@app.command("render")
def render_cmd(
    input_path: Annotated[Path, INPUT_PATH_OPTION],
    template_files: list[Path] | None = TEMPLATE_FILE_OPTION,
    *,
    out_dir: str = typer.Option("out", help="Directory for the rendered pages."),
    output_format: str = typer.Option("svg", "--format", help="Output format: svg or json."),
    sheet: str | None = typer.Option(None, help="Sheet name (defaults to the first sheet)."),
    template_id: str | None = typer.Option(None, help="Template id to activate."),
    mapping: list[str] | None = typer.Option(
        None, "--map", help="Column mapping override as role=Header (repeatable)."
    ),
    date_format: str = typer.Option(DEFAULT_DATE_FORMAT, help="Date pattern for the date role."),
) -> None:
    """Normalize rows and write one page per valid row."""

    _exit_with(
        cmd_render(
            str(input_path),
            out_dir=out_dir,
            output_format=output_format,
            sheet_name=sheet,
            template_id=template_id,
            template_files=template_files or (),
            mapping_pairs=mapping or (),
            date_format=date_format,
        )
    )


@app.command("templates")
def templates_cmd(
    template_files: list[Path] | None = TEMPLATE_FILE_OPTION,
) -> None:
    """List available templates."""

    _exit_with(cmd_list_templates(template_files or ()))


@app.command("set-input")
def set_input_cmd(
    key: str,
    value: str,
    *,
    template_id: str = typer.Option(..., help="Template whose input value to store."),
) -> None:
    """Store a custom input value used by interactive template fields."""

    _exit_with(cmd_set_input(template_id, key, value))


@app.callback()
def _root() -> None:
    """Root command.

    Loads ``.env`` from the current working directory (without overriding any
    already-set environment variables) and configures package logging.
    """

    load_dotenv(dotenv_path=Path.cwd() / ".env", override=False)
    configure_logging()


if __name__ == "__main__":  # pragma: no cover
    app()
