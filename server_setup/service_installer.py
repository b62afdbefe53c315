"""
Delegate wrapper around a single Proxmox Community Scripts installer.

The vendored ``scripts/services/*.sh`` files inside the package exec this
wrapper, which checks the host, the storage pool and the deployment type
before handing over to the community installer.
"""

import subprocess
import sys
from typing import Callable, List, Optional

from .catalog import community_script_action, community_script_url
from .constants import DEFAULT_DEPLOY_TYPE, DEFAULT_STORAGE, DEPLOY_TYPES
from .exceptions import DeploymentError, PrereqError
from .system_validators import PrerequisiteChecker, StorageValidator
from .utils import print_error, print_info, print_success


class ServiceInstaller:
    """Validates the host and runs one community installer."""

    def __init__(
        self,
        service: str,
        deploy_type: str = DEFAULT_DEPLOY_TYPE,
        storage: str = DEFAULT_STORAGE,
        runner: Optional[Callable] = None,
    ):
        self.service = service
        self.deploy_type = deploy_type
        self.storage = storage
        self.runner = runner or subprocess.run

    def install(self) -> None:
        """
        Run the installer for the configured deployment type.

        Raises:
            PrereqError: if the host is not a usable Proxmox node
            DeploymentError: on bad arguments or a failed installer
        """
        if self.deploy_type not in DEPLOY_TYPES:
            raise DeploymentError(f"Unknown deployment type: {self.deploy_type}")

        PrerequisiteChecker(require_dialog=False).check()

        problem = StorageValidator.storage_error(self.storage)
        if problem:
            raise DeploymentError(problem)

        print_info(f"Starting {self.service} installation...")

        if self.deploy_type == "lxc":
            self._install_lxc()
        else:
            raise DeploymentError(
                f"VM deployment is not available for {self.service}; use lxc"
            )

        print_success(f"{self.service} installation completed!")

    def _install_lxc(self) -> None:
        print_info(
            f"Downloading {self.service} installer from Proxmox Community Scripts..."
        )
        print_info(community_script_url(self.service))

        action = community_script_action(self.service)
        result = self.runner(action.argv(), check=False)
        if result.returncode != 0:
            raise DeploymentError(
                f"Failed to install {self.service} from community scripts"
            )


def main(argv: Optional[List[str]] = None) -> None:
    """Console entry point for ``server-setup-service``."""
    import argparse

    parser = argparse.ArgumentParser(
        prog="server-setup-service",
        description="Install one service with its Proxmox Community Scripts installer.",
    )
    parser.add_argument("service", help="Community script name, e.g. jellyfin")
    parser.add_argument(
        "deploy_type",
        nargs="?",
        default=DEFAULT_DEPLOY_TYPE,
        help=f"Deployment type: {' or '.join(DEPLOY_TYPES)} (default: {DEFAULT_DEPLOY_TYPE})",
    )
    parser.add_argument(
        "storage",
        nargs="?",
        default=DEFAULT_STORAGE,
        help=f"Proxmox storage pool (default: {DEFAULT_STORAGE})",
    )
    args = parser.parse_args(argv)

    installer = ServiceInstaller(args.service, args.deploy_type, args.storage)
    try:
        installer.install()
    except (PrereqError, DeploymentError) as e:
        print_error(str(e))
        sys.exit(1)


if __name__ == "__main__":
    main()
