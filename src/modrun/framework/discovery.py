"""Module source discovery.

Finds the module's source directory and imports everything in it so that
``@module_object`` classes register themselves.
"""

from __future__ import annotations

import importlib
import inspect
import pkgutil
import sys
from pathlib import Path

from modrun.core.errors import DiscoveryError, ModuleSourceNotFoundError
from modrun.framework.logging import get_logger
from modrun.framework.registry import list_objects
from modrun.framework.schema import ModuleObject

log = get_logger(__name__)


def find_src_directory(start: Path | None = None, dirname: str = "src") -> Path:
    """Return the first ``<dir>/<dirname>`` directory at or above ``start``."""
    origin = (start or Path.cwd()).resolve()
    for candidate in (origin, *origin.parents):
        if candidate.name == dirname and candidate.is_dir():
            return candidate
        src = candidate / dirname
        if src.is_dir():
            return src
    raise ModuleSourceNotFoundError(dirname, str(origin))


def _import_all(src: Path) -> list[str]:
    imported = []
    for info in pkgutil.walk_packages([str(src)]):
        try:
            importlib.import_module(info.name)
        except Exception as e:
            raise DiscoveryError(f"Failed to import module '{info.name}' from {src}: {e}", cause=e) from e
        imported.append(info.name)
    return imported


def _defined_under(obj: ModuleObject, src: Path) -> bool:
    try:
        source_file = inspect.getfile(obj.cls)
    except TypeError:
        return False
    return Path(source_file).resolve().is_relative_to(src)


def find_module_objects(src: Path) -> list[ModuleObject]:
    """Import every module under ``src`` and return the objects defined there."""
    src = src.resolve()
    if str(src) not in sys.path:
        sys.path.insert(0, str(src))

    imported = _import_all(src)
    objects = [obj for obj in list_objects() if _defined_under(obj, src)]

    log.debug(
        "discovery.complete",
        src=str(src),
        modules=len(imported),
        objects=[obj.name for obj in objects],
    )
    return objects
