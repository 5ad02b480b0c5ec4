from courier.api_client import ErrorKind, Failure
from courier.util.error import format_failure


def test_format_failure_by_kind() -> None:
    assert format_failure(Failure(ErrorKind.NETWORK, "Connection refused")) == (
        "Could not reach the server: Connection refused"
    )
    assert format_failure(Failure(ErrorKind.DECODE, "invalid User at id")) == (
        "Unexpected response from the server: invalid User at id"
    )


def test_format_failure_extracts_json_error_messages() -> None:
    assert format_failure(Failure(ErrorKind.HTTP_STATUS, '{"error":"exists"}', status_code=409)) == (
        "Server returned HTTP 409: exists"
    )
    assert format_failure(
        Failure(ErrorKind.HTTP_STATUS, '{"error": {"message": "bad token"}}', status_code=401)
    ) == "Server returned HTTP 401: bad token"
    assert format_failure(Failure(ErrorKind.HTTP_STATUS, "Bad Gateway", status_code=502)) == (
        "Server returned HTTP 502: Bad Gateway"
    )
    assert format_failure(Failure(ErrorKind.HTTP_STATUS, "", status_code=500)) == "Server returned HTTP 500"
