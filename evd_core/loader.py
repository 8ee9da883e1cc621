"""Resolve ``module:attribute`` and ``module.attribute`` paths to objects."""

from __future__ import annotations

import importlib
from typing import Any

__all__ = ["import_object", "split_path"]


def split_path(path: str) -> tuple[str, str]:
    """Split ``path`` into its module and attribute parts."""

    if ":" in path:
        module_path, attribute = path.split(":", 1)
    elif "." in path:
        module_path, attribute = path.rsplit(".", 1)
    else:
        raise ImportError(f"{path!r} is not a module path")

    if not module_path or not attribute:
        raise ImportError(f"{path!r} is incomplete")
    return module_path, attribute


def import_object(path: str) -> Any:
    """Import the object named by ``path``.

    Nested attributes such as ``pkg.mod:Outer.Inner`` are followed after the
    module has been imported.
    """

    module_path, attribute = split_path(path)
    try:
        module = importlib.import_module(module_path)
    except ImportError as exc:
        raise ImportError(f"unable to import module {module_path} for {path!r}") from exc

    target: Any = module
    for part in attribute.split("."):
        try:
            target = getattr(target, part)
        except AttributeError as exc:
            raise ImportError(f"{module_path} does not expose {attribute}") from exc
    return target
