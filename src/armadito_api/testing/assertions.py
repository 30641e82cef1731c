"""Assertion helpers for API responses."""

from armadito_api.config import API_VERSION, API_VERSION_HEADER
from armadito_api.http.response import ApiResponse


def assert_envelope_headers(response: ApiResponse, api_version: str = API_VERSION) -> None:
    """Assert the four standard headers of an enveloped (200/500) response."""
    expected = {
        "content-type": "application/json",
        "connection": "close",
        "access-control-allow-origin": "*",
        API_VERSION_HEADER.lower(): api_version,
    }
    for name, value in expected.items():
        actual = response.header(name)
        assert actual == value, f"Expected {name}: {value!r}, got {actual!r}"


def assert_canned(response: ApiResponse, status: int) -> None:
    """Assert a canned precondition response: status, code, and bare headers."""
    assert response.status == status, f"Expected status {status}, got {response.status}"
    assert response.json()["code"] == status
    assert response.header("content-type") == "application/json"
    assert response.header("connection") == "close"
    assert response.header("access-control-allow-origin") is None, (
        "Canned responses must not carry CORS headers"
    )
    assert response.header(API_VERSION_HEADER) is None, (
        "Canned responses must not carry the API version header"
    )
