"""Tests for the standard endpoints, served through the dispatcher."""

import json
import threading
import time
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import pytest

from armadito_api.clients import ApiClient, ClientRegistry
from armadito_api.config import ApiConfig
from armadito_api.dispatcher import Dispatcher
from armadito_api.endpoints import default_endpoints, default_table
from armadito_api.endpoints.backend import Backend, LocalBackend
from armadito_api.errors import BackendError
from armadito_api.testing import assert_canned, assert_envelope_headers

UA = {"User-Agent": "armadito-ui"}
JSON = {"Content-Type": "application/json"}


class BrokenBackend:
    def scan(self, path: str, client: ApiClient) -> Mapping[str, Any] | None:
        msg = "scan engine offline"
        raise BackendError(msg)

    def status(self) -> Mapping[str, Any]:
        msg = "status unavailable"
        raise BackendError(msg)

    def version(self) -> str:
        return "9.9.9"


def _dispatcher(backend: Any = None, config: ApiConfig | None = None) -> Dispatcher:
    return Dispatcher(
        default_table(config),
        ClientRegistry(),
        user_data=backend if backend is not None else LocalBackend(),
        config=config,
    )


def _register(dispatcher: Dispatcher) -> str:
    response = dispatcher.serve("GET", "/register", UA)
    assert response.status == 200
    return response.json()["token"]


def _auth(token: str) -> dict[str, str]:
    return {**UA, "X-Armadito-Token": token}


class TestDefaultTable:
    def test_eight_endpoints(self) -> None:
        paths = [endpoint.path for endpoint in default_endpoints()]
        assert paths == [
            "/register", "/unregister", "/ping", "/event",
            "/scan", "/status", "/browse", "/version",
        ]

    def test_only_scan_is_post(self) -> None:
        for endpoint in default_endpoints():
            expected = {"POST"} if endpoint.path == "/scan" else {"GET"}
            assert endpoint.methods == expected

    def test_only_event_is_long_poll(self) -> None:
        long_poll = {endpoint.path for endpoint in default_endpoints() if endpoint.long_poll}
        assert long_poll == {"/event"}

    def test_token_requirements(self) -> None:
        needs_token = {endpoint.path for endpoint in default_endpoints() if endpoint.need_token}
        assert needs_token == {"/unregister", "/ping", "/event", "/scan"}

    def test_local_backend_is_a_backend(self) -> None:
        assert isinstance(LocalBackend(), Backend)


class TestSession:
    def test_register_issues_token(self) -> None:
        dispatcher = _dispatcher()
        response = dispatcher.serve("GET", "/register", UA)
        assert response.status == 200
        assert_envelope_headers(response)
        token = response.json()["token"]
        assert len(token) == 32
        assert token in dispatcher.clients
        assert dispatcher.clients.get(token).user_agent == "armadito-ui"

    def test_register_twice_gives_distinct_tokens(self) -> None:
        dispatcher = _dispatcher()
        assert _register(dispatcher) != _register(dispatcher)
        assert len(dispatcher.clients) == 2

    def test_ping_registered(self) -> None:
        dispatcher = _dispatcher()
        token = _register(dispatcher)
        response = dispatcher.serve("GET", "/ping", _auth(token))
        assert response.status == 200
        assert response.json() == {"status": "ok"}

    def test_ping_unknown_token(self) -> None:
        response = _dispatcher().serve("GET", "/ping", _auth("nobody"))
        assert response.status == 500
        assert response.json()["data"] == {"error": "token not registered"}

    def test_unregister_then_again(self) -> None:
        dispatcher = _dispatcher()
        token = _register(dispatcher)

        first = dispatcher.serve("GET", "/unregister", _auth(token))
        assert first.status == 200
        assert first.json() == {}
        assert token not in dispatcher.clients

        second = dispatcher.serve("GET", "/unregister", _auth(token))
        assert second.status == 500
        assert second.json()["data"] == {"error": "token not registered"}

    def test_ping_after_unregister_fails(self) -> None:
        dispatcher = _dispatcher()
        token = _register(dispatcher)
        dispatcher.serve("GET", "/unregister", _auth(token))
        assert dispatcher.serve("GET", "/ping", _auth(token)).status == 500


class TestScanAndEvent:
    def test_scan_then_event(self) -> None:
        backend = LocalBackend()
        dispatcher = _dispatcher(backend)
        token = _register(dispatcher)

        response = dispatcher.serve(
            "POST", "/scan", {**_auth(token), **JSON}, json.dumps({"path": "/home/user"})
        )
        assert response.status == 200
        assert response.json() == {"scan_id": 1, "status": "scan started", "path": "/home/user"}
        assert backend.scans == ["/home/user"]

        event = dispatcher.serve("GET", "/event", _auth(token))
        assert event.status == 200
        document = event.json()
        assert document["event_type"] == "OnDemandCompletedEvent"
        assert document["path"] == "/home/user"
        assert document["scan_id"] == 1

    def test_event_timeout_returns_empty_document(self) -> None:
        dispatcher = _dispatcher(config=ApiConfig(event_timeout=0.01))
        token = _register(dispatcher)
        response = dispatcher.serve("GET", "/event", _auth(token))
        assert response.status == 200
        assert response.json() == {}

    def test_event_unknown_token(self) -> None:
        response = _dispatcher().serve("GET", "/event", _auth("nobody"))
        assert response.status == 500

    def test_scan_unregistered_token(self) -> None:
        response = _dispatcher().serve(
            "POST", "/scan", {**_auth("nobody"), **JSON}, b'{"path": "/tmp"}'
        )
        assert response.status == 500
        assert response.json()["data"] == {"error": "token not registered"}

    def test_scan_backend_error(self) -> None:
        dispatcher = _dispatcher(BrokenBackend())
        token = _register(dispatcher)
        response = dispatcher.serve("POST", "/scan", {**_auth(token), **JSON}, b'{"path": "/tmp"}')
        assert response.status == 500
        assert response.json()["data"] == {"error": "scan engine offline"}

    def test_scan_nul_byte_rejected_by_local_backend(self) -> None:
        dispatcher = _dispatcher()
        token = _register(dispatcher)
        body = json.dumps({"path": "/tmp\x00evil"})
        response = dispatcher.serve("POST", "/scan", {**_auth(token), **JSON}, body)
        assert response.status == 500
        assert response.json()["data"] == {"error": "scan path contains a NUL byte"}

    @pytest.mark.parametrize(
        "body",
        [b"[]", b"{}", b'{"path": ""}', b'{"path": 42}'],
    )
    def test_scan_invalid_parameters_422(self, body: bytes) -> None:
        dispatcher = _dispatcher()
        token = _register(dispatcher)
        response = dispatcher.serve("POST", "/scan", {**_auth(token), **JSON}, body)
        assert response.status == 422

    @pytest.mark.parametrize(
        "body",
        [b"42", b'"text"', b'{"path":"/tmp","n":NaN}', b'{"path":"/tmp","n":-Infinity}'],
    )
    def test_scan_non_strict_json_400(self, body: bytes) -> None:
        backend = LocalBackend()
        dispatcher = _dispatcher(backend)
        token = _register(dispatcher)
        response = dispatcher.serve("POST", "/scan", {**_auth(token), **JSON}, body)
        assert_canned(response, 400)
        assert backend.scans == []

    def test_unregister_ends_waiting_event_poll(self) -> None:
        dispatcher = _dispatcher(config=ApiConfig(event_timeout=10.0))
        token = _register(dispatcher)
        responses: list[Any] = []

        poller = threading.Thread(
            target=lambda: responses.append(dispatcher.serve("GET", "/event", _auth(token)))
        )
        started = time.monotonic()
        poller.start()
        time.sleep(0.1)
        assert dispatcher.serve("GET", "/unregister", _auth(token)).status == 200
        poller.join(timeout=5.0)

        assert not poller.is_alive()
        assert time.monotonic() - started < 5.0
        assert responses[0].status == 500
        assert responses[0].json()["data"] == {"error": "token not registered"}


class TestInfo:
    def test_version(self) -> None:
        response = _dispatcher(LocalBackend(version="1.2.3")).serve("GET", "/version", UA)
        assert response.status == 200
        assert response.json() == {"version": "1.2.3", "api-version": "armadito.v0"}

    def test_version_follows_config(self) -> None:
        config = ApiConfig(api_version="armadito.v1")
        response = _dispatcher(config=config).serve("GET", "/version", UA)
        assert response.json()["api-version"] == "armadito.v1"
        assert response.header("X-Armadito-Api-Version") == "armadito.v1"

    def test_status(self) -> None:
        response = _dispatcher().serve("GET", "/status", UA)
        assert response.status == 200
        assert response.json() == {"global_status": "ok", "scans": 0}

    def test_status_backend_error(self) -> None:
        response = _dispatcher(BrokenBackend()).serve("GET", "/status", UA)
        assert response.status == 500
        assert response.json()["data"] == {"error": "status unavailable"}

    def test_browse_directory(self, tmp_path: Path) -> None:
        (tmp_path / "b.txt").write_text("x")
        (tmp_path / "a_dir").mkdir()

        response = _dispatcher().serve("GET", "/browse", UA, query=f"path={tmp_path}")
        assert response.status == 200
        assert response.json() == {
            "path": str(tmp_path),
            "content": [
                {"name": "a_dir", "type": "dir"},
                {"name": "b.txt", "type": "file"},
            ],
        }

    def test_browse_query_in_path(self, tmp_path: Path) -> None:
        (tmp_path / "only").write_text("")
        response = _dispatcher().serve("GET", f"/browse?path={tmp_path}", UA)
        assert response.json()["content"] == [{"name": "only", "type": "file"}]

    def test_browse_missing_directory(self, tmp_path: Path) -> None:
        missing = tmp_path / "missing"
        response = _dispatcher().serve("GET", "/browse", UA, query=f"path={missing}")
        assert response.status == 500
        data = response.json()["data"]
        assert data["error"] == f"cannot browse {missing}"
        assert data["reason"]
