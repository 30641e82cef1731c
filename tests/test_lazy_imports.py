"""Tests for the lazy top-level API of armadito_api."""

import pytest

import armadito_api


class TestLazyImports:
    @pytest.mark.parametrize("name", armadito_api.__all__)
    def test_every_public_name_resolves(self, name: str) -> None:
        assert getattr(armadito_api, name) is not None

    def test_resolves_to_defining_module(self) -> None:
        from armadito_api.app import ApiApp
        from armadito_api.clients import ClientRegistry

        assert armadito_api.ApiApp is ApiApp
        assert armadito_api.ClientRegistry is ClientRegistry

    def test_unknown_name(self) -> None:
        with pytest.raises(AttributeError, match="no attribute"):
            armadito_api.DoesNotExist  # noqa: B018

    def test_version(self) -> None:
        assert armadito_api.__version__ == "0.1.0"
