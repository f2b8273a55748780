"""
Entrypoint - one function call in, one result or one error out.

The engine starts a process per function call. ``Entrypoint.run`` asks the
engine which call it is serving and picks one of two modes:

- **register** (empty parent name): declare every module object and its
  functions, return the module id.
- **call** (parent name set): instantiate the named object, bind and decode
  the arguments, invoke the method, return its result.

Engine errors raised by the method that carry exec output (stdout, stderr,
exit code) are replayed onto the process streams and exit code. Anything
else is reported on stderr and the process fails with exit code 1.
"""

from __future__ import annotations

import sys
import traceback
from pathlib import Path
from typing import TextIO

from rich.console import Console
from rich.markup import escape

from modrun.client.client import Client
from modrun.client.objects import FunctionCall
from modrun.core.errors import ModrunError, QueryError, TransportError, categorize_error
from modrun.core.settings import ModrunSettings, get_settings
from modrun.framework.binding import bind_arguments
from modrun.framework.decoder import ValueDecoder
from modrun.framework.discovery import find_module_objects, find_src_directory
from modrun.framework.logging import bind_context, clear_context, get_logger, log_step, set_context
from modrun.framework.registration import ModuleRegistrar, build_registration
from modrun.framework.registry import get_object
from modrun.framework.results import to_result
from modrun.framework.schema import ModuleObject

log = get_logger(__name__)

SUCCESS = 0
FAILURE = 1


class Entrypoint:
    """Dispatch bridge between the engine's function call and module code."""

    def __init__(
        self,
        client: Client,
        *,
        src_dir: Path | None = None,
        settings: ModrunSettings | None = None,
        stdout: TextIO | None = None,
        stderr: TextIO | None = None,
    ) -> None:
        self.client = client
        self.settings = settings or get_settings()
        self._src_dir = src_dir
        self._stdout = stdout
        self._stderr = stderr

    @property
    def stdout(self) -> TextIO:
        return self._stdout or sys.stdout

    @property
    def stderr(self) -> TextIO:
        return self._stderr or sys.stderr

    def run(self) -> int:
        """Serve the current function call and return the process exit code."""
        set_context(mode="pending")
        try:
            function_call = self.client.current_function_call()
            parent_name = function_call.parent_name()

            if parent_name == "":
                bind_context(mode="register")
                log.info("entrypoint.mode_selected")
                return self.register_module(function_call)

            bind_context(mode="call", object=parent_name)
            log.info("entrypoint.mode_selected")
            return self.call_function_on_parent(function_call, parent_name)

        except Exception as e:
            log.error(
                "entrypoint.failed",
                error_type=type(e).__name__,
                category=categorize_error(e).value,
                error_message=str(e),
                **({"error": e.to_dict()} if isinstance(e, ModrunError) else {}),
            )
            self.output_error_information(e)
            return FAILURE

        finally:
            clear_context()

    # ── Modes ────────────────────────────────────────────────────

    def load_objects(self) -> list[ModuleObject]:
        src = self._src_dir or find_src_directory(dirname=self.settings.source_dirname)
        return find_module_objects(src)

    def register_module(self, function_call: FunctionCall) -> int:
        objects = self.load_objects()

        with log_step("registration.build", objects=len(objects)) as timer:
            descriptor = build_registration(objects)
            timer.add_metric("functions", descriptor.function_count)

        with log_step("registration.submit") as timer:
            module_id = ModuleRegistrar(self.client).register(descriptor)
            timer.add_metric("module_id", module_id)

        function_call.return_value(to_result(module_id).encode())
        return SUCCESS

    def call_function_on_parent(self, function_call: FunctionCall, parent_name: str) -> int:
        self.load_objects()
        module_object = get_object(parent_name)

        function_name = function_call.name()
        bind_context(function=function_name)
        function = module_object.get_function(function_name)

        instance = module_object.cls()
        instance.client = self.client

        with log_step("call.bind", level="debug"):
            args = bind_arguments(function, function_call.input_args(), ValueDecoder(self.client))

        try:
            value = getattr(instance, function.name)(*args)
        except QueryError as e:
            if not e.has_extensions:
                raise

            self._writeln(self.stderr, e.message)
            self._write(self.stdout, e.stdout)
            self._write(self.stderr, e.stderr)

            exit_code = e.exit_code if e.exit_code is not None else FAILURE
            log.warning("call.exec_failed", exit_code=exit_code)
            return exit_code

        result = to_result(value)
        function_call.return_value(result.encode())
        log.info("call.complete", result_kind=type(result).__name__)
        return SUCCESS

    # ── Output ───────────────────────────────────────────────────

    def output_error_information(self, error: BaseException) -> None:
        console = Console(file=self.stderr, soft_wrap=True)
        console.print(f"[bold red]Error[/bold red]: {escape(str(error))}")
        if isinstance(error, TransportError) and error.response_body:
            console.print(error.response_body, markup=False, highlight=False)
        trace = "".join(traceback.format_exception(type(error), error, error.__traceback__))
        console.print(trace.rstrip(), markup=False, highlight=False)

    @staticmethod
    def _write(stream: TextIO, text: str) -> None:
        if text:
            stream.write(text)
            stream.flush()

    @classmethod
    def _writeln(cls, stream: TextIO, text: str) -> None:
        cls._write(stream, text + "\n")
