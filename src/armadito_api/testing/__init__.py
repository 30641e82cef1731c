"""Test utilities for armadito_api applications.

Provides an async ASGI test client and envelope assertions::

    from armadito_api.testing import TestClient, assert_envelope_headers
"""

from armadito_api.testing.assertions import assert_canned, assert_envelope_headers
from armadito_api.testing.client import TestClient

__all__ = [
    "TestClient",
    "assert_canned",
    "assert_envelope_headers",
]
