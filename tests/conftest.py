from __future__ import annotations

import os

import pytest

from core.config import AppSettings, get_user_env_file
from core.domain.errors import QueryError
from core.domain.models import RangeRecord, RangeResponse

PASSWORD_DIGEST = "5BAA61E4C9B93F3F0682250B6CF8331B7EE68FD8"
PASSWORD_COUNT = 3861493
HELLO_DIGEST = "AAF4C61DDCC5E8A2DABEDE0F3B482CD9AEA9434D"
ABC_DIGEST = "A9993E364706816ABA3E25717850C26C9CD0D89D"

# Decoys sharing no suffix with the digests above.
FILLER_SUFFIXES = [
    "0018A45C4D1DEF81644B54AB7F969B88D65",
    "00D4F6E8FA6EECAD2A3AA415EEC418D38EC",
    "011053FD0102E94D6AE2F8B83D76FAF94F6",
]


def range_body(*records: tuple[str, int], crlf: bool = True) -> str:
    sep = "\r\n" if crlf else "\n"
    return sep.join(f"{suffix}:{count}" for suffix, count in records)


class FakeRangeSource:
    """In-memory range source; prefixes in `failures` raise their error."""

    def __init__(
        self,
        responses: dict[str, list[tuple[str, int]]] | None = None,
        failures: dict[str, QueryError] | None = None,
    ) -> None:
        self.responses = responses or {}
        self.failures = failures or {}
        self.queries: list[str] = []

    def query(self, prefix: str) -> RangeResponse:
        self.queries.append(prefix)
        if prefix in self.failures:
            raise self.failures[prefix]
        records = [RangeRecord(suffix=s, count=c) for s, c in self.responses.get(prefix, [])]
        return RangeResponse(prefix=prefix, records=records)


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Keep the developer's own .env files and PWNRANGE_* variables out of the tests."""

    for key in list(os.environ):
        if key.upper().startswith("PWNRANGE_"):
            monkeypatch.delenv(key)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("APPDATA", str(tmp_path / "config"))
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    monkeypatch.chdir(tmp_path)
    # env_file is resolved when AppSettings is defined, before XDG_CONFIG_HOME changes.
    monkeypatch.setitem(AppSettings.model_config, "env_file", (".env", str(get_user_env_file())))


@pytest.fixture
def settings() -> AppSettings:
    return AppSettings(
        range_api_url="https://range.test/range/",
        user_agent="pwnrange-tests",
        add_padding=True,
        proxy=None,
        trust_env=False,
        tls_verify=True,
        ca_bundle=None,
        http_timeout_seconds=None,
    )


@pytest.fixture
def corpus() -> FakeRangeSource:
    return FakeRangeSource(
        responses={
            PASSWORD_DIGEST[:5]: [(FILLER_SUFFIXES[0], 3), (PASSWORD_DIGEST[5:], PASSWORD_COUNT)],
            HELLO_DIGEST[:5]: [(FILLER_SUFFIXES[1], 12)],
            ABC_DIGEST[:5]: [(ABC_DIGEST[5:], 42)],
        }
    )
