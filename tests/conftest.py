"""
Shared pytest fixtures and configuration for modrun tests.

This module provides:
- Registry, settings and log-context cleanup for test isolation
- Throwaway module source trees (``module_src``, ``sample_src``)
- A fake engine session (``engine``)

Usage:
    def test_something(sample_src, engine):
        code = Entrypoint(engine, src_dir=sample_src).run()
"""

import sys
from collections.abc import Callable, Generator
from pathlib import Path

import pytest

# Ensure modrun package is importable
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from modrun.core.settings import clear_settings_cache
from modrun.framework.logging import clear_context, configure_logging
from modrun.framework.registry import clear_registry
from tests._support import purge_modules, write_source
from tests._support.engine import FakeEngine

# Keep structlog off stdout; the entry point and CLI tests read stdout.
configure_logging(level="WARNING", format="console", force=True)


SAMPLE_MODULE = {
    "main/__init__.py": '''
        from typing import Annotated

        from modrun import Argument, Container, Directory, function, module_object


        @module_object
        class Ci:
            """CI functions."""

            @function("Echo a message")
            def echo(self, msg: Annotated[str, Argument("Message to echo")]) -> str:
                return msg

            @function
            def repeat(self, word: str, times: int = 2) -> str:
                """Repeat a word.

                The word is concatenated with itself.
                """
                return word * times

            @function
            def is_even(self, n: int) -> bool:
                return n % 2 == 0

            @function
            def base(self) -> Container:
                return self.client.container().from_("alpine:latest")

            @function
            def directory_id(self, directory: Directory) -> str:
                return directory.id()

            @function
            def build(self) -> str:
                return self.client.container().from_("alpine").with_exec(["make"]).stdout()

            @function
            def explode(self) -> str:
                raise RuntimeError("kaboom")

            @function
            def nothing(self) -> None:
                return None

            def helper(self) -> str:
                return "not exposed"
    ''',
    "main/tools.py": """
        from modrun import function, module_object


        @module_object
        class Lint:
            @function
            def check(self, path: str = ".") -> str:
                return f"checked {path}"
    """,
}


# =============================================================================
# Isolation Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def clean_state() -> Generator[None, None, None]:
    """Clear the object registry, cached settings and log context around each test."""
    clear_registry()
    clear_settings_cache()
    clear_context()
    yield
    clear_registry()
    clear_settings_cache()
    clear_context()


# =============================================================================
# Module Source Fixtures
# =============================================================================


@pytest.fixture
def module_src(tmp_path: Path) -> Generator[Callable[..., Path], None, None]:
    """
    Factory writing a module source tree under ``tmp_path``.

    Modules imported from the tree are forgotten on teardown, so the next
    test can reuse package names like ``main``.

        src = module_src({"main/__init__.py": "..."})
    """
    written: list[Path] = []

    def _write(files: dict[str, str], dirname: str = "src") -> Path:
        src = write_source(tmp_path, files, dirname=dirname)
        written.append(src)
        return src

    yield _write

    for src in written:
        purge_modules(src)


@pytest.fixture
def sample_src(module_src: Callable[..., Path]) -> Path:
    """Source tree with objects ``Ci`` and ``tools:Lint``."""
    return module_src(SAMPLE_MODULE)


# =============================================================================
# Engine Fixtures
# =============================================================================


@pytest.fixture
def engine() -> FakeEngine:
    """Fake engine session in registration mode."""
    return FakeEngine()
