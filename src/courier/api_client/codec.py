"""Codec collaborator: typed values to and from JSON bytes."""

from __future__ import annotations

from functools import lru_cache
from typing import Any, Protocol, TypeVar

from pydantic import TypeAdapter, ValidationError
from pydantic.errors import PydanticSchemaGenerationError
from pydantic_core import PydanticSerializationError

T = TypeVar("T")


class CodecError(ValueError):
    """Base class for codec failures."""


class EncodeError(CodecError):
    """Raised when a payload cannot be serialized."""


class DecodeError(CodecError):
    """Raised when bytes do not decode into the requested type."""


class Codec(Protocol):
    """Pure, stateless serializer used by the client."""

    media_type: str

    def encode(self, value: Any) -> bytes: ...

    def decode(self, data: bytes, type_: type[T]) -> T: ...


@lru_cache(maxsize=256)
def _cached_adapter(type_: Any) -> TypeAdapter[Any]:
    return TypeAdapter(type_)


def _adapter(type_: Any) -> TypeAdapter[Any]:
    try:
        return _cached_adapter(type_)
    except TypeError:
        # Unhashable annotations (e.g. Annotated with dict metadata)
        return TypeAdapter(type_)


class JsonCodec:
    """JSON codec backed by pydantic ``TypeAdapter``.

    Field aliases are honoured on both sides so wire names such as
    ``avatar_url`` or ``createdAt`` can map onto Python attribute names.
    """

    media_type = "application/json"

    def __init__(self, *, exclude_none: bool = False) -> None:
        self.exclude_none = exclude_none

    def encode(self, value: Any) -> bytes:
        if value is None:
            return b""
        try:
            adapter = _adapter(type(value))
            return adapter.dump_json(value, by_alias=True, exclude_none=self.exclude_none)
        except (PydanticSchemaGenerationError, PydanticSerializationError, ValidationError) as exc:
            raise EncodeError(f"cannot encode {type(value).__name__}: {exc}") from exc

    def decode(self, data: bytes, type_: type[T]) -> T:
        if not data.strip():
            raise DecodeError(f"empty body, expected {_type_name(type_)}")
        try:
            return _adapter(type_).validate_json(data)
        except ValidationError as exc:
            raise DecodeError(_summarize(exc, type_)) from exc


def _type_name(type_: Any) -> str:
    return getattr(type_, "__name__", None) or str(type_)


def _summarize(exc: ValidationError, type_: Any) -> str:
    errors = exc.errors(include_url=False)
    if not errors:
        return f"invalid {_type_name(type_)}"
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ())) or "<root>"
    more = f" (+{len(errors) - 1} more)" if len(errors) > 1 else ""
    return f"invalid {_type_name(type_)} at {location}: {first.get('msg', 'invalid value')}{more}"
