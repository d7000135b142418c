from pathlib import Path

from typer.testing import CliRunner

from cli import doctor
from conftest import FakeRangeSource
from core.config import AppSettings, write_user_env_vars
from core.domain.errors import TlsError


def test_settings_read_prefixed_environment(monkeypatch):
    monkeypatch.setenv("PWNRANGE_PROXY", "proxy.local:3128")
    monkeypatch.setenv("PWNRANGE_TLS_VERIFY", "false")
    monkeypatch.setenv("PWNRANGE_HTTP_TIMEOUT_SECONDS", "7.5")

    settings = AppSettings()

    assert settings.proxy == "proxy.local:3128"
    assert settings.tls_verify is False
    assert settings.http_timeout_seconds == 7.5


def test_write_user_env_vars_updates_and_removes(tmp_path: Path):
    env_path = tmp_path / "cfg" / ".env"
    env_path.parent.mkdir()
    env_path.write_text("PWNRANGE_PROXY=old:1\nPWNRANGE_USER_AGENT=custom\n", encoding="utf-8")

    write_user_env_vars({"PWNRANGE_PROXY": None, "PWNRANGE_TLS_VERIFY": "false"}, env_path=env_path)

    lines = env_path.read_text(encoding="utf-8").splitlines()
    assert lines[0].startswith("#")
    assert "PWNRANGE_PROXY=old:1" not in lines
    assert "PWNRANGE_TLS_VERIFY=false" in lines
    assert "PWNRANGE_USER_AGENT=custom" in lines


class _DoctorClient(FakeRangeSource):
    fail = False

    def __init__(self, settings=None, **kwargs):
        failures = {"00000": TlsError("certificate verify failed")} if type(self).fail else {}
        super().__init__(responses={"00000": []}, failures=failures)

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        return None


def test_doctor_reports_healthy_service(monkeypatch):
    monkeypatch.setenv("PWNRANGE_PROXY", "")
    monkeypatch.setattr(doctor, "RangeQueryClient", _DoctorClient)
    _DoctorClient.fail = False

    result = CliRunner().invoke(doctor.app, ["run"])

    assert result.exit_code == 0
    assert "0 records for prefix 00000" in result.output


def test_doctor_flags_tls_failure(monkeypatch):
    monkeypatch.setenv("PWNRANGE_PROXY", "")
    monkeypatch.setattr(doctor, "RangeQueryClient", _DoctorClient)
    _DoctorClient.fail = True

    result = CliRunner().invoke(doctor.app, ["run"])

    assert result.exit_code == 1
    assert "TlsError" in result.output


def test_doctor_reports_missing_ca_bundle_without_crashing(monkeypatch, tmp_path):
    monkeypatch.setenv("PWNRANGE_CA_BUNDLE", str(tmp_path / "missing.pem"))

    result = CliRunner().invoke(doctor.app, ["run"])

    assert result.exit_code == 1
    assert not isinstance(result.exception, FileNotFoundError)
    assert "TlsError" in result.output
