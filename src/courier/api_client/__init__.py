"""Typed, declarative HTTP API client."""

from .call import Call
from .client import TypedApiClient
from .codec import Codec, CodecError, DecodeError, EncodeError, JsonCodec
from .endpoint import Endpoint, HttpMethod
from .result import ErrorKind, Failure, Result, ResultError, Success
from .transport import HttpLogLevel, TransportConfig, build_async_client, logging_hooks

__all__ = [
    "Call",
    "Codec",
    "CodecError",
    "DecodeError",
    "EncodeError",
    "Endpoint",
    "ErrorKind",
    "Failure",
    "HttpLogLevel",
    "HttpMethod",
    "JsonCodec",
    "Result",
    "ResultError",
    "Success",
    "TransportConfig",
    "TypedApiClient",
    "build_async_client",
    "logging_hooks",
]
