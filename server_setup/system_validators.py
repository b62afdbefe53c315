"""
System validation utilities for server-setup-suite.
"""

from typing import Optional

from .constants import DIALOG_TOOL, HOST_TOOL
from .exceptions import PrereqError, PrereqKind
from .utils import (Colors, command_exists, is_root, print_success,
                    run_command)


class PrerequisiteChecker:
    """Handles host prerequisite validation before any menu is shown."""

    def __init__(self, require_dialog: bool = True):
        self.require_dialog = require_dialog

    def check(self) -> None:
        """
        Verify the operating context.

        Raises:
            PrereqError: on the first unmet condition
        """
        print(f"{Colors.YELLOW}Checking prerequisites...{Colors.ENDC}")

        self._check_privileges()
        self._check_host_tool()
        if self.require_dialog:
            self._check_dialog_tool()

        print_success("Prerequisites met")

    def _check_privileges(self) -> None:
        if not is_root():
            raise PrereqError(
                PrereqKind.NOT_PRIVILEGED, "Error: This script must be run as root"
            )

    def _check_host_tool(self) -> None:
        """Check that Proxmox storage tooling is installed."""
        if not command_exists(HOST_TOOL):
            raise PrereqError(
                PrereqKind.MISSING_HOST_TOOL,
                "Error: Proxmox tools not found. Is this running on a Proxmox host?",
            )

    def _check_dialog_tool(self) -> None:
        """Check that whiptail is installed for the checklist dialog."""
        if not command_exists(DIALOG_TOOL):
            raise PrereqError(
                PrereqKind.MISSING_DIALOG_TOOL,
                f"Error: {DIALOG_TOOL} is not installed\n"
                f"Install it with: apt-get install {DIALOG_TOOL}",
            )


class StorageValidator:
    """Checks Proxmox storage pools through pvesm."""

    @staticmethod
    def storage_exists(storage: str) -> bool:
        """Check if a storage pool is known to the host."""
        try:
            result = run_command(
                [HOST_TOOL, "status", "--storage", storage], check=False
            )
        except FileNotFoundError:
            return False
        return result.returncode == 0

    @staticmethod
    def storage_error(storage: str) -> Optional[str]:
        """Return a human readable problem with the storage, if any."""
        if StorageValidator.storage_exists(storage):
            return None
        return f"Storage '{storage}' not found. Check available pools with: pvesm status"
