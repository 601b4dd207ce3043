"""Tests for cert_presence.resource.validation — precondition checks."""
from __future__ import annotations

from pathlib import Path

import pytest

from cert_presence.errors import InvalidArgumentError
from cert_presence.resource.state import DesiredState, Presence
from cert_presence.resource.validation import (
    check_parameters,
    check_source,
    file_exists,
    validate_certificate_path,
)

THUMB = "9988776655443322111000AAABBBCCCDDDEEEFFF"


def _desired(
    thumbprint: str = THUMB,
    path: str | Path = "site0.cer",
    ensure: str = "Present",
) -> DesiredState:
    return DesiredState.from_parameters(
        thumbprint=thumbprint, path=path, location="LocalMachine", store="My", ensure=ensure
    )


class TestValidateCertificatePath:
    @pytest.mark.parametrize(
        "path", ["site0.cer", "C:\\certs\\site0.CER", "/etc/ssl/a.crt", "a.pem", "a.der"]
    )
    def test_accepted_shapes(self, path: str) -> None:
        assert validate_certificate_path(path) is True

    @pytest.mark.parametrize("path", ["", "   ", "site0.pfx", "site0", "a\x00.cer"])
    def test_rejected_shapes(self, path: str) -> None:
        assert validate_certificate_path(path) is False

    def test_does_not_require_existence(self, tmp_path: Path) -> None:
        assert validate_certificate_path(tmp_path / "missing.cer") is True


class TestFileExists:
    def test_existing_file(self, cert_file: Path) -> None:
        assert file_exists(cert_file) is True

    def test_directory_is_not_a_file(self, tmp_path: Path) -> None:
        assert file_exists(tmp_path) is False


class TestCheckParameters:
    def test_valid_parameters_pass(self) -> None:
        check_parameters(_desired())

    def test_bad_thumbprint_raises(self) -> None:
        with pytest.raises(InvalidArgumentError, match="ZZZ") as exc_info:
            check_parameters(_desired(thumbprint="ZZZ"))
        assert exc_info.value.message_key == "invalid_thumbprint"

    def test_bad_path_raises(self) -> None:
        with pytest.raises(InvalidArgumentError) as exc_info:
            check_parameters(_desired(path="site0.pfx"))
        assert exc_info.value.message_key == "invalid_path"


class TestCheckSource:
    def test_present_with_existing_file_passes(self, cert_file: Path) -> None:
        check_source(_desired(path=cert_file))

    def test_present_with_missing_file_raises(self, tmp_path: Path) -> None:
        missing = tmp_path / "missing.cer"
        with pytest.raises(InvalidArgumentError, match="missing.cer") as exc_info:
            check_source(_desired(path=missing))
        assert exc_info.value.params["path"] == missing

    def test_absent_with_missing_file_passes(self, tmp_path: Path) -> None:
        check_source(_desired(path=tmp_path / "missing.cer", ensure="Absent"))

    def test_invalid_argument_is_value_error(self, tmp_path: Path) -> None:
        with pytest.raises(ValueError):
            check_source(_desired(path=tmp_path / "missing.cer", ensure=Presence.PRESENT.value))
