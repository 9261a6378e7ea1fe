"""Pytest configuration for test isolation.

The custom input store persists per-template JSON files under a default
project-relative directory (``./.cache``). When tests run in the same working
tree, those files can leak values between tests (a later test may render an
interactive field with a value stored by an earlier one).

To keep tests hermetic, we redirect the store root to a unique temporary
directory for each test via an autouse fixture. ``packages/`` is also put on
``sys.path`` so the package imports without an editable install.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

import pytest

_ROOT = Path(__file__).resolve().parents[1]
_PKG_DIR = _ROOT / "packages"
if str(_PKG_DIR) not in sys.path:
    sys.path.insert(0, str(_PKG_DIR))


@pytest.fixture(autouse=True)
def _isolate_cache_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Force a per-test store root so tests don't share on-disk state.

    The application reads ``CHECKPRINT_CACHE_DIR`` (when set) to override the
    default ``./.cache`` location. We point it at the test's own temporary
    directory and clear the template directory override.
    """

    cache_root = tmp_path / "cache"
    cache_root.mkdir(parents=True, exist_ok=True)
    monkeypatch.setenv("CHECKPRINT_CACHE_DIR", os.fspath(cache_root))
    monkeypatch.delenv("CHECKPRINT_TEMPLATE_DIR", raising=False)
