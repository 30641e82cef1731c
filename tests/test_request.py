"""Tests for armadito_api.http.request — ApiRequest."""

from armadito_api.http.request import ApiRequest


class TestBuild:
    def test_method_uppercased(self) -> None:
        assert ApiRequest.build("get", "/ping").method == "GET"

    def test_str_body_encoded(self) -> None:
        assert ApiRequest.build("POST", "/scan", body='{"path": "/tmp"}').body == b'{"path": "/tmp"}'

    def test_none_body(self) -> None:
        assert ApiRequest.build("GET", "/ping", body=None).body == b""

    def test_query_argument(self) -> None:
        request = ApiRequest.build("GET", "/browse", query=b"path=%2Fhome&x=1&x=2")
        assert request.argument("path") == "/home"
        assert request.argument("x") == "1"
        assert request.argument("missing") is None

    def test_inline_query_split_from_path(self) -> None:
        request = ApiRequest.build("GET", "/browse?path=/tmp")
        assert request.path == "/browse"
        assert request.argument("path") == "/tmp"

    def test_inline_and_explicit_query_merge(self) -> None:
        request = ApiRequest.build("GET", "/browse?b=2", query="a=1")
        assert request.argument("a") == "1"
        assert request.argument("b") == "2"


class TestProperties:
    def test_user_agent_and_token(self) -> None:
        request = ApiRequest.build(
            "GET", "/ping", {"User-Agent": "ui", "X-Armadito-Token": "abc"}
        )
        assert request.user_agent == "ui"
        assert request.token == "abc"

    def test_custom_token_header(self) -> None:
        request = ApiRequest.build(
            "GET", "/ping", {"X-Other-Token": "abc"}, token_header="X-Other-Token"
        )
        assert request.token == "abc"

    def test_content_type_strips_parameters(self) -> None:
        request = ApiRequest.build(
            "POST", "/scan", {"Content-Type": "application/json; charset=utf-8"}
        )
        assert request.content_type == "application/json"

    def test_content_type_missing(self) -> None:
        assert ApiRequest.build("POST", "/scan").content_type is None
