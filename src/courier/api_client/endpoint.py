"""Endpoint descriptors: the static shape of one remote operation."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Generic, Mapping, TypeVar
from urllib.parse import quote

T = TypeVar("T")

_PLACEHOLDER = re.compile(r"\{([A-Za-z_][A-Za-z0-9_]*)\}")


class HttpMethod(str, Enum):
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"


_BODYLESS = frozenset({HttpMethod.GET, HttpMethod.DELETE})


@dataclass(frozen=True)
class Endpoint(Generic[T]):
    """Declares one operation: method, path template and body/response shape.

    ``response`` is any type the codec can decode into (pydantic models,
    dataclasses, TypedDicts, ``list[...]``, primitives). ``None`` marks a unit
    response whose body is ignored.

    Example::

        GET_USER = Endpoint("get_user", HttpMethod.GET, "/users/{username}", response=User)
    """

    name: str
    method: HttpMethod
    path: str
    response: Any = None
    expects_body: bool = False
    params: tuple[str, ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        method = HttpMethod(self.method)
        object.__setattr__(self, "method", method)
        if not self.path.startswith("/"):
            raise ValueError(f"endpoint {self.name!r}: path must start with '/': {self.path!r}")
        if self.expects_body and method in _BODYLESS:
            raise ValueError(f"endpoint {self.name!r}: {method.value} cannot carry a body")
        names = tuple(_PLACEHOLDER.findall(self.path))
        if len(set(names)) != len(names):
            raise ValueError(f"endpoint {self.name!r}: duplicate path parameter in {self.path!r}")
        stripped = _PLACEHOLDER.sub("", self.path)
        if "{" in stripped or "}" in stripped:
            raise ValueError(f"endpoint {self.name!r}: malformed path template {self.path!r}")
        object.__setattr__(self, "params", names)

    @property
    def returns_unit(self) -> bool:
        return self.response is None or self.response is type(None)

    def render_path(self, values: Mapping[str, Any] | None = None) -> str:
        """Substitute path parameters, URL-quoting each value as one segment."""
        values = dict(values or {})
        missing = [name for name in self.params if name not in values]
        if missing:
            raise ValueError(f"endpoint {self.name!r}: missing path parameter(s) {', '.join(missing)}")
        extra = sorted(set(values) - set(self.params))
        if extra:
            raise ValueError(f"endpoint {self.name!r}: unknown path parameter(s) {', '.join(extra)}")

        def replace(match: re.Match[str]) -> str:
            value = values[match.group(1)]
            if value is None:
                raise ValueError(f"endpoint {self.name!r}: path parameter {match.group(1)!r} is None")
            text = value.value if isinstance(value, Enum) else value
            return quote(str(text), safe="")

        return _PLACEHOLDER.sub(replace, self.path)

    def __str__(self) -> str:
        return f"{self.method.value} {self.path}"
