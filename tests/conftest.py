import os
from collections.abc import Iterator
from pathlib import Path

import pytest

from courier.util.log import Log, LogFormat, LogLevel


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture(autouse=True)
def courier_home(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Path:
    home = tmp_path / "courier-home"
    monkeypatch.setenv("COURIER_HOME", str(home))
    for name in list(os.environ):
        if name.startswith("COURIER_") and name != "COURIER_HOME":
            monkeypatch.delenv(name)
    return home


@pytest.fixture(autouse=True)
def _log_teardown() -> Iterator[None]:
    yield
    Log.configure(level=LogLevel.INFO, format=LogFormat.KV, console=False, file=False)
