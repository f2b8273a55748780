"""
Test support utilities for modrun tests.

Helpers that don't fit as pytest fixtures: writing throwaway module source
trees and forgetting the modules imported from them.
"""

from __future__ import annotations

import importlib
import sys
import textwrap
from pathlib import Path


def write_source(root: Path, files: dict[str, str], dirname: str = "src") -> Path:
    """
    Write ``files`` (relative path -> source) under ``root/dirname``.

    Returns the source directory.
    """
    src = root / dirname
    for relative, source in files.items():
        path = src / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(textwrap.dedent(source).lstrip(), encoding="utf-8")
    importlib.invalidate_caches()
    return src


def purge_modules(src: Path) -> None:
    """Drop modules imported from ``src`` and its ``sys.path`` entry."""
    src = src.resolve()
    for name, module in list(sys.modules.items()):
        origin = getattr(module, "__file__", None)
        if origin and Path(origin).resolve().is_relative_to(src):
            del sys.modules[name]
    while str(src) in sys.path:
        sys.path.remove(str(src))
