"""Import-path registry for handlers, hooks and identifier enums."""

import importlib
from collections.abc import Callable, Hashable
from enum import Enum
from typing import Any

from ..core.exceptions import SerializationError


class FunctionRegistry:
    """Resolves dotted import paths to callables and enum classes.

    Serialized machines refer to their handlers, hooks and id enums by
    path. Anything not registered explicitly is imported on first use and
    cached.
    """

    _objects: dict[str, Any] = {}

    @classmethod
    def register(cls, obj: Callable[..., Any] | type[Enum], name: str | None = None) -> None:
        """Register a callable or enum under its import path or a custom name."""
        cls._objects[name or get_object_path(obj)] = obj

    @classmethod
    def get(cls, path: str) -> Any:
        """Get a callable or enum class by path, importing it if needed."""
        if path in cls._objects:
            return cls._objects[path]

        parts = path.split(".")
        # Longest importable module prefix wins
        for i in range(len(parts) - 1, 0, -1):
            module_name = ".".join(parts[:i])
            try:
                obj: Any = importlib.import_module(module_name)
            except ImportError:
                continue
            try:
                for attr in parts[i:]:
                    obj = getattr(obj, attr)
            except AttributeError:
                continue
            if callable(obj):
                cls._objects[path] = obj
                return obj

        raise SerializationError(f"Cannot resolve '{path}'")

    @classmethod
    def get_enum(cls, path: str) -> type[Enum]:
        """Get an Enum class by path."""
        obj = cls.get(path)
        if not (isinstance(obj, type) and issubclass(obj, Enum)):
            raise SerializationError(f"'{path}' is not an Enum")
        return obj

    @classmethod
    def clear(cls) -> None:
        """Clear the registry."""
        cls._objects.clear()

    @classmethod
    def list_registered(cls) -> list[str]:
        """List all registered paths."""
        return list(cls._objects.keys())


def get_object_path(obj: Any) -> str:
    """Get the import path of a module-level function or class."""
    qualname = getattr(obj, "__qualname__", None)
    module = getattr(obj, "__module__", None)
    if qualname is None or module is None:
        raise SerializationError(f"Cannot determine import path of {obj!r}")

    if "<lambda>" in qualname:
        raise SerializationError(f"Lambda functions cannot be serialized: {obj}")
    if "<locals>" in qualname:
        raise SerializationError(f"Local functions cannot be serialized: {qualname}")

    return f"{module}.{qualname}"


def encode_identifier(value: Hashable) -> tuple[str, str | None]:
    """Encode a state/event id as (key, enum path or None)."""
    if isinstance(value, Enum):
        return value.name, get_object_path(type(value))
    if isinstance(value, str):
        return value, None
    raise SerializationError(
        f"Only Enum members and strings can be serialized as identifiers, "
        f"got {type(value).__name__}"
    )


def decode_identifier(key: str, enum_path: str | None) -> Hashable:
    """Decode an id previously produced by encode_identifier."""
    if enum_path is None:
        return key
    enum_cls = FunctionRegistry.get_enum(enum_path)
    try:
        return enum_cls[key]
    except KeyError:
        raise SerializationError(f"'{key}' is not a member of {enum_path}") from None
