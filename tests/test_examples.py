"""
The bundled example module registers and serves calls end to end.
"""

from pathlib import Path

import pytest

from modrun.client.query import Json
from modrun.core.errors import QueryError
from modrun.framework.discovery import find_module_objects
from modrun.framework.entrypoint import SUCCESS, Entrypoint
from modrun.framework.registration import build_registration
from tests._support import purge_modules
from tests._support.engine import FakeEngine

EXAMPLE_SRC = Path(__file__).parent.parent / "examples" / "laravel_ci" / "src"


@pytest.fixture
def example_src():
    yield EXAMPLE_SRC
    purge_modules(EXAMPLE_SRC)


class TestLaravelExample:
    def test_declaration(self, example_src):
        descriptor = build_registration(find_module_objects(example_src))

        (obj,) = descriptor.objects
        assert obj.name == "LaravelApp"
        assert [fn.name for fn in obj.functions] == ["build", "lint", "test", "shell"]

    def test_registers(self, example_src):
        engine = FakeEngine()

        assert Entrypoint(engine, src_dir=example_src).run() == SUCCESS
        assert engine.returned == [Json.encode(engine.last_id)]

    def test_lint_call(self, example_src):
        engine = FakeEngine(
            parent_name="LaravelApp",
            function_name="lint",
            input_args=[("source", '"dir-1"')],
            leaves={"stdout": "No syntax error found\n"},
        )

        assert Entrypoint(engine, src_dir=example_src).run() == SUCCESS
        assert engine.returned == [Json.encode("No syntax error found\n")]
        assert engine.queries_containing('from(address: "jakzal/phpqa:latest")')

    def test_failing_tests_replay_exit_code(self, example_src, capsys):
        failure = QueryError(
            "process exited with code 2",
            extensions={"stdout": "FAILURES!\n", "stderr": "", "exitCode": 2},
        )
        engine = FakeEngine(
            parent_name="LaravelApp",
            function_name="test",
            input_args=[("source", '"dir-1"'), ("only", '"UserTest"')],
            leaves={"stdout": failure},
        )

        assert Entrypoint(engine, src_dir=example_src).run() == 2
        assert capsys.readouterr().out == "FAILURES!\n"
        assert engine.queries_containing('"--filter", "UserTest"')
