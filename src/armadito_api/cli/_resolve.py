"""App import resolution — resolves ``"module:attribute"`` strings to ApiApp instances."""

import importlib

from armadito_api.app import ApiApp


def resolve_app(import_string: str | None) -> ApiApp:
    """Resolve an import string to an ApiApp instance.

    Accepts ``"module:attribute"`` format. When the attribute portion
    is omitted, defaults to ``"app"``. Without an import string, a
    default ``ApiApp()`` backed by ``LocalBackend`` is built.

    Factory functions are supported: a callable that is not an ApiApp
    is called with no arguments.

    Raises:
        ModuleNotFoundError: If the module cannot be imported.
        AttributeError: If the attribute does not exist on the module.
        TypeError: If the resolved object is not an ``ApiApp``.
    """
    if not import_string:
        return ApiApp()

    module_path, _, attr_name = import_string.partition(":")
    if not attr_name:
        attr_name = "app"

    module = importlib.import_module(module_path)
    obj = getattr(module, attr_name)

    if callable(obj) and not isinstance(obj, ApiApp):
        try:
            obj = obj()
        except Exception as exc:
            msg = f"Factory function {import_string!r} raised an error: {exc}"
            raise TypeError(msg) from exc

    if not isinstance(obj, ApiApp):
        msg = f"{import_string!r} resolved to {type(obj).__name__}, not an ApiApp instance"
        raise TypeError(msg)

    return obj
