"""Small helpers shared across the package."""

import importlib
import inspect
from typing import Any


async def maybe_await(value: Any) -> Any:
    """Await ``value`` if it is awaitable, otherwise return it unchanged."""
    if inspect.isawaitable(value):
        return await value
    return value


def import_object(reference: str) -> Any:
    """
    Import an object from a ``"module.path:attribute"`` reference.

    A reference without ``:`` imports and returns the module itself.

    Args:
        reference: Import reference

    Returns:
        The imported object

    Raises:
        ImportError: If the module cannot be imported
        AttributeError: If the attribute does not exist
    """
    if ":" not in reference:
        return importlib.import_module(reference)

    module_path, attr_path = reference.split(":", 1)
    obj: Any = importlib.import_module(module_path)
    for attr in attr_path.split("."):
        obj = getattr(obj, attr)
    return obj
