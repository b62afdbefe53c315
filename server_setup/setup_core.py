"""
Core setup module for server-setup-suite.

Runs the linear installer pipeline: banner, prerequisite checks, service
selection, deployment and summary.
"""

import sys
from typing import List, Optional

from .catalog import Catalog, CatalogLoader
from .constants import DEFAULT_VARIANT
from .dispatcher import Dispatcher, OutcomeRecord
from .exceptions import (CatalogError, EmptySelection, PrereqError,
                         UserCancelled)
from .system_validators import PrerequisiteChecker
from .user_interface import Reporter, Selection, create_selector
from .utils import Colors, is_debug_enabled, print_error


class ServerSetup:
    """Main setup orchestrator."""

    def __init__(
        self,
        variant: str = DEFAULT_VARIANT,
        catalog_loader: Optional[CatalogLoader] = None,
    ):
        self.variant = variant
        self.catalog_loader = catalog_loader or CatalogLoader()

        # Run state
        self.catalog: Optional[Catalog] = None
        self.reporter: Optional[Reporter] = None
        self.selection: Selection = ()
        self.outcomes: List[OutcomeRecord] = []

    def run(self) -> int:
        """Run the complete setup process and return the exit code."""
        try:
            self._load_catalog()
            self.reporter.banner()
            self._check_prerequisites()
            self._select_services()
            self._deploy_services()
            self.reporter.summary(self.outcomes)
            return 0

        except (PrereqError, CatalogError) as e:
            print_error(str(e))
            return 1
        except (UserCancelled, EmptySelection) as e:
            print(f"{Colors.RED}{e}{Colors.ENDC}")
            return 0
        except KeyboardInterrupt:
            print_error("\nSetup cancelled by user.")
            return 1
        except Exception as e:
            print_error(f"Setup failed: {e}")
            if is_debug_enabled():
                import traceback

                traceback.print_exc()
            return 1

    def _load_catalog(self) -> None:
        self.catalog = self.catalog_loader.load(self.variant)
        self.reporter = Reporter(self.catalog)

    def _check_prerequisites(self) -> None:
        """Fail before any dialog or installer runs."""
        checker = PrerequisiteChecker(
            require_dialog=self.catalog.selector == "checklist"
        )
        checker.check()

    def _select_services(self) -> None:
        if self.catalog.show_service_info:
            self.reporter.service_info()

        selector = create_selector(self.catalog, reporter=self.reporter)
        self.selection = selector.select()

        if self.catalog.selector == "checklist":
            self.reporter.selection_confirmation(self.selection)

    def _deploy_services(self) -> None:
        dispatcher = Dispatcher(self.catalog, reporter=self.reporter)
        self.outcomes = dispatcher.deploy(self.selection)


def main(argv: Optional[List[str]] = None) -> None:
    """Console entry point for ``server-setup``."""
    import argparse

    loader = CatalogLoader()

    parser = argparse.ArgumentParser(
        prog="server-setup",
        description="Interactively deploy self-hosted services on a Proxmox VE host.",
    )
    parser.add_argument(
        "variant",
        nargs="?",
        default=DEFAULT_VARIANT,
        help=f"Service catalog to use (default: {DEFAULT_VARIANT})",
    )
    parser.add_argument(
        "--list", action="store_true", help="List the available catalogs and exit"
    )
    args = parser.parse_args(argv)

    if args.list:
        for variant in loader.available_variants():
            print(variant)
        sys.exit(0)

    setup = ServerSetup(args.variant, catalog_loader=loader)
    sys.exit(setup.run())
