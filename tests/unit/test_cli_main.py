"""Tests for cert_presence.cli.main — CLI commands via Click test runner."""
from __future__ import annotations

import json
from pathlib import Path
from typing import Callable

import pytest
from click.testing import CliRunner

from cert_presence.cli.main import cli


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture()
def store_root(tmp_path: Path) -> Path:
    return tmp_path / "stores"


@pytest.fixture()
def invoke(runner: CliRunner, store_root: Path) -> Callable[..., object]:
    def _invoke(*args: str):  # type: ignore[no-untyped-def]
        return runner.invoke(cli, ["--store-root", str(store_root), *args])

    return _invoke


def _resource_args(thumbprint: str, path: Path, *extra: str) -> list[str]:
    return ["--thumbprint", thumbprint, "--path", str(path), *extra]


# ---------------------------------------------------------------------------
# Root CLI
# ---------------------------------------------------------------------------


class TestRootCLI:
    def test_help_exits_zero(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0

    def test_version_command(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["version"])
        assert result.exit_code == 0
        assert "cert-presence" in result.output.lower()


# ---------------------------------------------------------------------------
# get / test / set
# ---------------------------------------------------------------------------


class TestResourceCommands:
    def test_test_exits_one_when_not_in_sync(
        self, invoke, cert_file: Path, thumbprint_of: Callable[[Path], str]
    ) -> None:
        result = invoke("test", *_resource_args(thumbprint_of(cert_file), cert_file))
        assert result.exit_code == 1
        assert "Not in desired state" in result.output

    def test_set_then_test_succeeds(
        self, invoke, cert_file: Path, thumbprint_of: Callable[[Path], str]
    ) -> None:
        args = _resource_args(thumbprint_of(cert_file), cert_file, "--location", "CurrentUser")
        result = invoke("set", *args)
        assert result.exit_code == 0, result.output
        assert "Imported" in result.output
        result = invoke("test", *args)
        assert result.exit_code == 0
        assert "In desired state" in result.output

    def test_set_absent_removes(
        self, invoke, cert_file: Path, thumbprint_of: Callable[[Path], str]
    ) -> None:
        args = _resource_args(thumbprint_of(cert_file), cert_file)
        invoke("set", *args)
        result = invoke("set", *args, "--ensure", "Absent")
        assert result.exit_code == 0
        assert "Removed" in result.output
        assert invoke("test", *args, "--ensure", "absent").exit_code == 0

    def test_get_json(
        self, invoke, cert_file: Path, thumbprint_of: Callable[[Path], str]
    ) -> None:
        args = _resource_args(thumbprint_of(cert_file), cert_file)
        invoke("set", *args)
        result = invoke("get", *args, "--json")
        assert result.exit_code == 0
        state = json.loads(result.output)
        assert state["Ensure"] == "Present"
        assert state["Certificate"]["subject"] == "CN=site0.example.com"

    def test_get_table(self, invoke, cert_file: Path, thumbprint_of: Callable[[Path], str]) -> None:
        result = invoke("get", *_resource_args(thumbprint_of(cert_file), cert_file))
        assert result.exit_code == 0
        assert "Absent" in result.output

    def test_missing_source_is_an_error(self, invoke, tmp_path: Path) -> None:
        result = invoke("set", *_resource_args("A" * 40, tmp_path / "missing.cer"))
        assert result.exit_code == 1
        assert "Error" in result.output

    def test_invalid_thumbprint_is_an_error(self, invoke, cert_file: Path) -> None:
        result = invoke("get", *_resource_args("XYZ", cert_file))
        assert result.exit_code == 1
        assert "Error" in result.output

    def test_unknown_store_is_an_error(
        self, invoke, cert_file: Path, thumbprint_of: Callable[[Path], str]
    ) -> None:
        result = invoke(
            "test", *_resource_args(thumbprint_of(cert_file), cert_file, "--store", "Nope")
        )
        assert result.exit_code == 1
        assert "Error" in result.output

    def test_culture_option_localizes_errors(
        self, runner: CliRunner, store_root: Path, tmp_path: Path
    ) -> None:
        result = runner.invoke(
            cli,
            [
                "--store-root",
                str(store_root),
                "--culture",
                "de-DE",
                "set",
                *_resource_args("A" * 40, tmp_path / "missing.cer"),
            ],
        )
        assert result.exit_code == 1
        assert "Zertifikatsdatei" in result.output

    def test_culture_from_environment_via_settings(
        self, runner: CliRunner, store_root: Path, tmp_path: Path
    ) -> None:
        result = runner.invoke(
            cli,
            [
                "--store-root",
                str(store_root),
                "set",
                *_resource_args("A" * 40, tmp_path / "missing.cer"),
            ],
            env={"CERT_PRESENCE_CULTURE": "de-DE"},
        )
        assert result.exit_code == 1
        assert "Zertifikatsdatei" in result.output

    def test_audit_log_written(
        self,
        runner: CliRunner,
        store_root: Path,
        tmp_path: Path,
        cert_file: Path,
        thumbprint_of: Callable[[Path], str],
    ) -> None:
        audit = tmp_path / "audit.jsonl"
        result = runner.invoke(
            cli,
            [
                "--store-root",
                str(store_root),
                "--audit-log",
                str(audit),
                "set",
                *_resource_args(thumbprint_of(cert_file), cert_file),
            ],
        )
        assert result.exit_code == 0
        entry = json.loads(audit.read_text(encoding="utf-8").splitlines()[0])
        assert entry["event_type"] == "certificate_imported"


# ---------------------------------------------------------------------------
# apply
# ---------------------------------------------------------------------------


class TestApplyCommand:
    def _write_config(self, path: Path, resources: list[dict[str, str]]) -> Path:
        path.write_text(json.dumps({"resources": resources}), encoding="utf-8")
        return path

    def test_applies_and_converges(
        self, invoke, tmp_path: Path, cert_file: Path, thumbprint_of: Callable[[Path], str]
    ) -> None:
        config = self._write_config(
            tmp_path / "config.json",
            [
                {
                    "Thumbprint": thumbprint_of(cert_file),
                    "Path": cert_file.name,
                    "Location": "LocalMachine",
                    "Store": "Root",
                }
            ],
        )
        result = invoke("apply", str(config))
        assert result.exit_code == 0, result.output
        assert "1 changed" in result.output
        result = invoke("apply", str(config))
        assert "1 in desired state" in result.output
        assert "0 changed" in result.output

    def test_what_if_does_not_change(
        self, invoke, tmp_path: Path, cert_file: Path, thumbprint_of: Callable[[Path], str]
    ) -> None:
        resource = {
            "Thumbprint": thumbprint_of(cert_file),
            "Path": str(cert_file),
            "Location": "LocalMachine",
            "Store": "My",
        }
        config = self._write_config(tmp_path / "config.json", [resource])
        result = invoke("apply", str(config), "--what-if")
        assert "1 would change" in result.output
        args = _resource_args(thumbprint_of(cert_file), cert_file)
        assert invoke("test", *args).exit_code == 1

    def test_failure_exits_one(self, invoke, tmp_path: Path) -> None:
        config = self._write_config(
            tmp_path / "config.json",
            [
                {
                    "Thumbprint": "A" * 40,
                    "Path": "missing.cer",
                    "Location": "LocalMachine",
                    "Store": "My",
                }
            ],
        )
        result = invoke("apply", str(config))
        assert result.exit_code == 1
        assert "1 failed" in result.output

    def test_invalid_document_exits_one(self, invoke, tmp_path: Path) -> None:
        config = tmp_path / "config.json"
        config.write_text("[]", encoding="utf-8")
        result = invoke("apply", str(config))
        assert result.exit_code == 1
        assert "Error" in result.output


# ---------------------------------------------------------------------------
# store list / thumbprint
# ---------------------------------------------------------------------------


class TestStoreList:
    def test_empty_store(self, invoke) -> None:
        result = invoke("store", "list")
        assert result.exit_code == 0
        assert "No certificates" in result.output

    def test_lists_imported_certificate(
        self, invoke, cert_file: Path, thumbprint_of: Callable[[Path], str]
    ) -> None:
        invoke("set", *_resource_args(thumbprint_of(cert_file), cert_file))
        result = invoke("store", "list", "--location", "LocalMachine", "--store", "My")
        assert result.exit_code == 0
        assert "Total: 1" in result.output


class TestThumbprintCommand:
    def test_prints_sha1(
        self, runner: CliRunner, cert_file: Path, thumbprint_of: Callable[[Path], str]
    ) -> None:
        result = runner.invoke(cli, ["thumbprint", str(cert_file)])
        assert result.exit_code == 0
        assert result.output.strip() == thumbprint_of(cert_file)

    def test_prints_sha256(self, runner: CliRunner, cert_file: Path) -> None:
        result = runner.invoke(cli, ["thumbprint", str(cert_file), "--algorithm", "sha256"])
        assert result.exit_code == 0
        assert len(result.output.strip()) == 64

    def test_unparseable_file(self, runner: CliRunner, tmp_path: Path) -> None:
        bad = tmp_path / "bad.cer"
        bad.write_bytes(b"junk")
        result = runner.invoke(cli, ["thumbprint", str(bad)])
        assert result.exit_code == 1
