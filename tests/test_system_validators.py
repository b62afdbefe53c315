"""
Tests for system_validators module.
"""

from unittest.mock import MagicMock, patch

import pytest

from server_setup.exceptions import PrereqError, PrereqKind
from server_setup.system_validators import PrerequisiteChecker, StorageValidator


class TestPrerequisiteChecker:
    """Test PrerequisiteChecker class."""

    def test_check_success(self, proxmox_host, capsys):
        """Test successful validation of all prerequisites."""
        PrerequisiteChecker().check()

        captured = capsys.readouterr()
        assert "Checking prerequisites..." in captured.out
        assert "Prerequisites met" in captured.out

    def test_not_root(self):
        with patch("os.geteuid", return_value=1000):
            with pytest.raises(PrereqError) as exc_info:
                PrerequisiteChecker().check()

        assert exc_info.value.kind is PrereqKind.NOT_PRIVILEGED
        assert "must be run as root" in exc_info.value.message

    def test_missing_host_tool(self):
        with patch("os.geteuid", return_value=0), patch(
            "shutil.which", return_value=None
        ):
            with pytest.raises(PrereqError) as exc_info:
                PrerequisiteChecker().check()

        assert exc_info.value.kind is PrereqKind.MISSING_HOST_TOOL
        assert "Proxmox tools not found" in str(exc_info.value)

    def test_missing_dialog_tool(self):
        def which(name):
            return "/usr/sbin/pvesm" if name == "pvesm" else None

        with patch("os.geteuid", return_value=0), patch(
            "shutil.which", side_effect=which
        ):
            with pytest.raises(PrereqError) as exc_info:
                PrerequisiteChecker().check()

        assert exc_info.value.kind is PrereqKind.MISSING_DIALOG_TOOL
        assert "apt-get install whiptail" in exc_info.value.message

    def test_dialog_tool_not_required(self):
        """Navigator mode does not need whiptail."""

        def which(name):
            return "/usr/sbin/pvesm" if name == "pvesm" else None

        with patch("os.geteuid", return_value=0), patch(
            "shutil.which", side_effect=which
        ):
            PrerequisiteChecker(require_dialog=False).check()

    def test_privileges_checked_first(self):
        with patch("os.geteuid", return_value=1000), patch(
            "shutil.which", return_value=None
        ):
            with pytest.raises(PrereqError) as exc_info:
                PrerequisiteChecker().check()

        assert exc_info.value.kind is PrereqKind.NOT_PRIVILEGED


class TestStorageValidator:
    """Test StorageValidator class."""

    def test_storage_exists(self, mock_subprocess):
        assert StorageValidator.storage_exists("local-lvm") is True
        mock_subprocess.assert_called_once()
        assert mock_subprocess.call_args[0][0] == [
            "pvesm",
            "status",
            "--storage",
            "local-lvm",
        ]

    def test_storage_missing(self, mock_subprocess):
        mock_subprocess.return_value = MagicMock(returncode=2, stdout="", stderr="")
        assert StorageValidator.storage_exists("tank") is False
        assert "Storage 'tank' not found" in StorageValidator.storage_error("tank")

    def test_storage_without_pvesm(self, mock_subprocess):
        mock_subprocess.side_effect = FileNotFoundError()
        assert StorageValidator.storage_exists("local-lvm") is False

    def test_storage_error_none_when_ok(self, mock_subprocess):
        assert StorageValidator.storage_error("local-lvm") is None
