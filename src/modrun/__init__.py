"""
modrun - Python runtime entry point for engine modules.

Module code declares objects and functions; the engine runs
``modrun entrypoint`` once per function call.

    from modrun import Container, function, module_object

    @module_object
    class Ci:
        @function("Print the PHP version")
        def php_version(self) -> str:
            return self.client.container().from_("php:8.3-cli-alpine").with_exec(["php", "-v"]).stdout()
"""

__version__ = "0.1.0"

from modrun.client import (  # noqa: E402
    Client,
    Container,
    Directory,
    File,
    Service,
    Terminal,
    connect,
)
from modrun.framework import Argument, function, module_object  # noqa: E402

__all__ = [
    "__version__",
    "module_object",
    "function",
    "Argument",
    "Client",
    "connect",
    "Container",
    "Directory",
    "File",
    "Service",
    "Terminal",
]
