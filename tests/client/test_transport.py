"""
Tests for modrun.client.transport using httpx.MockTransport.
"""

import json

import httpx
import pytest

from modrun.client.transport import Transport
from modrun.core.errors import MissingConfigError, QueryError, TransportError
from modrun.core.settings import ModrunSettings

URL = "http://127.0.0.1:4000/query"


def make_transport(handler, token: str = "") -> Transport:
    return Transport(URL, token, http_transport=httpx.MockTransport(handler))


class TestExecute:
    def test_posts_query_and_returns_data(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["method"] = request.method
            seen["url"] = str(request.url)
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"data": {"container": {"stdout": "hi"}}})

        data = make_transport(handler).execute("query { container { stdout } }")

        assert data == {"container": {"stdout": "hi"}}
        assert seen["method"] == "POST"
        assert seen["url"] == URL
        assert seen["body"] == {"query": "query { container { stdout } }"}

    def test_session_token_as_basic_auth_user(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["authorization"] = request.headers["authorization"]
            return httpx.Response(200, json={"data": {}})

        make_transport(handler, token="s3cret").execute("query { x }")

        # base64("s3cret:")
        assert seen["authorization"] == "Basic czNjcmV0Og=="

    def test_null_data_is_empty_dict(self):
        transport = make_transport(lambda request: httpx.Response(200, json={"data": None}))
        assert transport.execute("query { x }") == {}

    def test_graphql_error_with_extensions(self):
        payload = {
            "data": None,
            "errors": [
                {
                    "message": "process exited with code 3",
                    "path": ["container", "withExec", "stdout"],
                    "extensions": {"stdout": "S", "stderr": "E", "exitCode": 3},
                }
            ],
        }
        transport = make_transport(lambda request: httpx.Response(200, json=payload))

        with pytest.raises(QueryError) as exc_info:
            transport.execute("query { x }")

        e = exc_info.value
        assert e.message == "process exited with code 3"
        assert e.exit_code == 3
        assert e.stdout == "S"
        assert e.context.query == "query { x }"

    def test_graphql_error_on_4xx_is_query_error(self):
        payload = {"errors": [{"message": "unknown field"}]}
        transport = make_transport(lambda request: httpx.Response(422, json=payload))

        with pytest.raises(QueryError) as exc_info:
            transport.execute("query { x }")
        assert not exc_info.value.has_extensions

    def test_http_error_is_transport_error(self):
        transport = make_transport(lambda request: httpx.Response(500, text="internal"))

        with pytest.raises(TransportError) as exc_info:
            transport.execute("query { x }")
        assert "HTTP 500" in str(exc_info.value)
        assert exc_info.value.response_body == "internal"

    def test_non_json_success_is_transport_error(self):
        transport = make_transport(lambda request: httpx.Response(200, text="<html>"))

        with pytest.raises(TransportError, match="non-JSON"):
            transport.execute("query { x }")

    def test_connection_failure_is_transport_error(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(TransportError) as exc_info:
            make_transport(handler).execute("query { x }")
        assert isinstance(exc_info.value.cause, httpx.ConnectError)


class TestFromSettings:
    def test_missing_port(self):
        with pytest.raises(MissingConfigError) as exc_info:
            Transport.from_settings(ModrunSettings(session_port=None))
        assert exc_info.value.key == "session_port"

    def test_url_from_settings(self):
        transport = Transport.from_settings(ModrunSettings(session_port=4321, session_token="tok"))
        try:
            assert transport.url == "http://127.0.0.1:4321/query"
        finally:
            transport.close()
