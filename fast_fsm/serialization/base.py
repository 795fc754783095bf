"""Serializer protocol and the registry that maps machine files to serializers."""

from typing import Any, Protocol, runtime_checkable

from ..core.exceptions import SerializationError

FORMATS_BY_SUFFIX = {
    ".json": "json",
    ".yaml": "yaml",
    ".yml": "yaml",
    ".msgpack": "msgpack",
    ".mp": "msgpack",
}

# Formats written and read in binary mode
BINARY_FORMATS = frozenset({"msgpack"})


def detect_format(filepath: str, default: str = "json") -> str:
    """Infer the serialization format from a file extension."""
    for suffix, format in FORMATS_BY_SUFFIX.items():
        if filepath.endswith(suffix):
            return format
    return default


@runtime_checkable
class Serializer(Protocol):
    """Protocol for machine definition and snapshot serializers."""

    formats: tuple[str, ...]

    def serialize(self, obj: Any, format: str = "json") -> bytes | str:
        """Serialize a machine or a snapshot to the specified format."""
        ...

    def deserialize(
        self, data: bytes | str, target_type: type, format: str = "json"
    ) -> Any:
        """Deserialize data into a machine of ``target_type`` or a snapshot."""
        ...


class SerializerRegistry:
    """Registry of serializers and the file layer on top of them.

    ``dump`` and ``load`` pick the format from the file suffix unless one is
    given, check that the chosen serializer supports it and open the file
    in binary mode for binary formats.
    """

    _serializers: dict[str, Serializer] = {}
    _default: str | None = None

    @classmethod
    def register(cls, name: str, serializer: Serializer, default: bool = False) -> None:
        """Register a serializer under a name."""
        cls._serializers[name] = serializer
        if default or cls._default is None:
            cls._default = name

    @classmethod
    def get(cls, name: str | None = None) -> Serializer:
        """Get a serializer by name, or the default one."""
        if name is None:
            name = cls._default
        if name is None:
            raise SerializationError("No default serializer configured")
        if name not in cls._serializers:
            raise SerializationError(f"Unknown serializer: {name}")
        return cls._serializers[name]

    @classmethod
    def list(cls) -> list[str]:
        """List registered serializer names."""
        return list(cls._serializers.keys())

    @classmethod
    def resolve(
        cls, filepath: str, format: str | None = None, serializer: str | None = None
    ) -> tuple[Serializer, str]:
        """Pick the serializer and format used for a file."""
        format = format or detect_format(filepath)
        ser = cls.get(serializer)
        if format not in ser.formats:
            raise SerializationError(
                f"{type(ser).__name__} does not support format '{format}' "
                f"(supported: {', '.join(ser.formats)})"
            )
        return ser, format

    @classmethod
    def dump(
        cls,
        obj: Any,
        filepath: str,
        *,
        format: str | None = None,
        serializer: str | None = None,
    ) -> None:
        """Serialize a machine or a snapshot into a file."""
        ser, format = cls.resolve(filepath, format, serializer)
        data = ser.serialize(obj, format=format)

        if format in BINARY_FORMATS:
            if isinstance(data, str):
                data = data.encode("utf-8")
            with open(filepath, "wb") as f:
                f.write(data)
        else:
            if isinstance(data, bytes):
                data = data.decode("utf-8")
            with open(filepath, "w") as f:
                f.write(data)

    @classmethod
    def load(
        cls,
        filepath: str,
        target_type: type,
        *,
        format: str | None = None,
        serializer: str | None = None,
    ) -> Any:
        """Read a file and deserialize it into ``target_type``."""
        ser, format = cls.resolve(filepath, format, serializer)
        mode = "rb" if format in BINARY_FORMATS else "r"
        with open(filepath, mode) as f:
            data = f.read()
        return ser.deserialize(data, target_type=target_type, format=format)
