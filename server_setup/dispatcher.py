"""
Deployment dispatcher for server-setup-suite.

Runs the delegate installer of every selected service, one after another,
and records an outcome for each. A failing installer never stops the batch.
"""

import os
import subprocess
import sys
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence

from .catalog import Catalog, RunScriptPath, ServiceEntry
from .user_interface import Reporter


@dataclass(frozen=True)
class OutcomeRecord:
    service_id: str
    succeeded: bool
    return_code: Optional[int] = None
    message: str = ""


class Dispatcher:
    """Executes delegate installers sequentially."""

    def __init__(
        self,
        catalog: Catalog,
        reporter: Optional[Reporter] = None,
        runner: Optional[Callable] = None,
    ):
        self.catalog = catalog
        self.reporter = reporter or Reporter(catalog)
        self.runner = runner or subprocess.run

    def deploy(self, selection: Sequence[str]) -> List[OutcomeRecord]:
        """
        Install every selected service in selection order.

        Args:
            selection: catalog ids chosen by the user

        Returns:
            One OutcomeRecord per id, in the same order
        """
        self.reporter.deployment_started()

        outcomes = []
        total = len(selection)
        for current, service_id in enumerate(selection, 1):
            entry = self.catalog.get(service_id)
            self.reporter.installing(current, total, entry)

            record = self._dispatch(entry)
            if record.succeeded:
                self.reporter.installed(entry)
            else:
                self.reporter.failed(entry, record.message)
            outcomes.append(record)

        return outcomes

    def _dispatch(self, entry: ServiceEntry) -> OutcomeRecord:
        """Run one delegate installer and record how it went."""
        action = entry.action

        options = {}
        if isinstance(action, RunScriptPath):
            if not action.path.is_file():
                return OutcomeRecord(
                    entry.id, False, message=f"Service script not found: {action.path}"
                )
            # Delegate scripts re-enter the package with this interpreter
            options["env"] = {**os.environ, "PYTHON": sys.executable}

        try:
            # Inherit the terminal so interactive installers can prompt
            result = self.runner(action.argv(), check=False, **options)
        except (FileNotFoundError, PermissionError) as e:
            return OutcomeRecord(
                entry.id, False, message=f"Could not run {action.describe()}: {e}"
            )

        if result.returncode == 0:
            return OutcomeRecord(entry.id, True, return_code=0)

        return OutcomeRecord(
            entry.id,
            False,
            return_code=result.returncode,
            message=f"Installer exited with status {result.returncode}",
        )
