"""Persistence of user-entered custom input values, keyed by template id.

Values for a template's interactive fields are stored as a flat
``str -> str`` mapping in one JSON file per template:

  ``<store_root>/inputs/<template_id>.json``

The store root defaults to ``./.cache`` and can be overridden with the
``CHECKPRINT_CACHE_DIR`` environment variable. Writes go to a ``.tmp`` file
first and are then moved into place with ``os.replace``; the last write wins.
Files that cannot be read or fail validation read as empty.
"""

from __future__ import annotations

import contextlib
import json
import os
import re
from collections.abc import Mapping
from os import PathLike
from pathlib import Path

from pydantic import BaseModel, ConfigDict, ValidationError

from .logging_setup import get_logger

# Bump only when the on-disk JSON shape changes.
SCHEMA_VERSION: int = 1

_TEMPLATE_ID_RE = re.compile(r"^[A-Za-z0-9_.-]+$")

_logger = get_logger("checkprint.inputs")


class CustomInputsFile(BaseModel):
    model_config = ConfigDict(strict=True, extra="forbid")

    schema_version: int
    template_id: str
    values: dict[str, str]


def _get_store_root() -> Path:
    root = os.getenv("CHECKPRINT_CACHE_DIR")
    if root and root.strip():
        return Path(root).expanduser().resolve()
    return (Path.cwd() / ".cache").resolve()


def _validate_template_id(template_id: str) -> str:
    """Reject ids that are unsafe as file names (path separators, ``..``)."""

    if not _TEMPLATE_ID_RE.fullmatch(template_id) or template_id in {".", ".."}:
        raise ValueError(
            f"Invalid template id for input storage: {template_id!r}. "
            "Allowed characters: letters, digits, '_', '.', '-'."
        )
    return template_id


class CustomInputStore:
    """Get/set the custom input mapping for a template id."""

    def __init__(self, root: str | PathLike[str] | None = None) -> None:
        self._root = Path(root).expanduser().resolve() if root is not None else None

    @property
    def root(self) -> Path:
        return self._root if self._root is not None else _get_store_root()

    def _path(self, template_id: str) -> Path:
        return self.root / "inputs" / f"{_validate_template_id(template_id)}.json"

    def load(self, template_id: str) -> dict[str, str]:
        path = self._path(template_id)
        if not path.exists():
            return {}
        try:
            parsed = CustomInputsFile.model_validate_json(path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, ValidationError):
            _logger.debug(
                "inputs:read_failed; treating as empty template_id=%s path=%s",
                template_id,
                os.fspath(path),
                exc_info=True,
            )
            return {}
        if parsed.schema_version != SCHEMA_VERSION or parsed.template_id != template_id:
            return {}
        return dict(parsed.values)

    def save(self, template_id: str, values: Mapping[str, str]) -> None:
        """Replace the stored mapping for ``template_id`` with ``values``."""

        path = self._path(template_id)
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp = path.with_suffix(path.suffix + ".tmp")

        doc = CustomInputsFile(
            schema_version=SCHEMA_VERSION,
            template_id=template_id,
            values={str(k): str(v) for k, v in values.items()},
        )
        try:
            tmp.write_text(
                json.dumps(doc.model_dump(mode="json"), ensure_ascii=False, indent=2),
                encoding="utf-8",
            )
            os.replace(tmp, path)
        except Exception:
            with contextlib.suppress(FileNotFoundError):
                tmp.unlink()
            raise

    def set_value(self, template_id: str, key: str, value: str) -> dict[str, str]:
        """Update one key and return the stored mapping."""

        values = self.load(template_id)
        values[key] = value
        self.save(template_id, values)
        return values


__all__ = ["CustomInputStore", "CustomInputsFile", "SCHEMA_VERSION"]
