"""Tests for preflight platform checks and configuration helpers."""

from pathlib import Path
from unittest.mock import patch

import pytest

from hashsnap import config, platform_checks


class TestIsElevated:
    """Administrator/root detection."""

    def test_root_on_posix(self) -> None:
        with patch.object(platform_checks.sys, "platform", "linux"), patch.object(
            platform_checks.os, "geteuid", return_value=0, create=True
        ):
            assert platform_checks.is_elevated() is True

    def test_regular_user_on_posix(self) -> None:
        with patch.object(platform_checks.sys, "platform", "linux"), patch.object(
            platform_checks.os, "geteuid", return_value=1000, create=True
        ):
            assert platform_checks.is_elevated() is False


class TestOsSupported:
    """Minimum operating system version."""

    def test_non_windows_is_supported(self) -> None:
        with patch.object(platform_checks.sys, "platform", "linux"):
            assert platform_checks.os_supported() is True

    @pytest.mark.parametrize(
        "version, expected",
        [("10.0.19045", True), ("11.0.1", True), ("6.1.7601", False), ("unknown", True)],
    )
    def test_windows_versions(self, version: str, expected: bool) -> None:
        with patch.object(platform_checks.sys, "platform", "win32"), patch.object(
            platform_checks.platform, "version", return_value=version
        ):
            assert platform_checks.os_supported() is expected

    def test_describe_os_mentions_system(self) -> None:
        with patch.object(platform_checks.platform, "system", return_value="Linux"):
            assert platform_checks.describe_os().startswith("Linux ")


class TestDefaultResultsDir:
    """Where datasets and copies go by default."""

    def test_environment_override(self, monkeypatch, temp_dir: Path) -> None:
        monkeypatch.setenv(config.RESULTS_DIR_ENV, str(temp_dir / "custom"))
        assert config.default_results_dir() == temp_dir / "custom"

    def test_desktop_default(self, monkeypatch, temp_dir: Path) -> None:
        monkeypatch.delenv(config.RESULTS_DIR_ENV, raising=False)
        monkeypatch.setattr(Path, "home", classmethod(lambda cls: temp_dir))
        assert config.default_results_dir() == temp_dir / "Desktop" / "hashsnap-results"
