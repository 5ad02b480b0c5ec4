"""courier - typed, declarative HTTP API client.

Remote operations are declared as static endpoint descriptors and executed
asynchronously; every outcome comes back as a ``Success`` or ``Failure``.
"""

__version__ = "0.1.0"

from .api_client import (
    Call,
    Endpoint,
    ErrorKind,
    Failure,
    HttpMethod,
    JsonCodec,
    Result,
    Success,
    TransportConfig,
    TypedApiClient,
)

__all__ = [
    "__version__",
    "Call",
    "Endpoint",
    "ErrorKind",
    "Failure",
    "HttpMethod",
    "JsonCodec",
    "Result",
    "Success",
    "TransportConfig",
    "TypedApiClient",
]
