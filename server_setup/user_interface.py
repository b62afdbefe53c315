"""
User interface utilities for server-setup-suite.
"""

import os
import select
import shlex
import subprocess
import sys
from typing import Callable, List, Optional, Sequence, Set, Tuple

from .catalog import Catalog, ServiceEntry
from .constants import (ALL_MARKER, CHECKLIST_PROMPT, CHECKLIST_TITLE,
                        DIALOG_TOOL, EMPTY_SELECTION_PAUSE,
                        ESCAPE_SEQUENCE_TIMEOUT,
                        SELECTION_CONFIRM_PAUSE, SERVICE_INFO_PAUSE)
from .exceptions import EmptySelection, UserCancelled
from .utils import (Colors, clear_screen, pause, print_error, print_header,
                    print_success, print_warning)

Selection = Tuple[str, ...]

BANNER_WIDTH = 64

# Key events produced by read_key()
KEY_UP = "up"
KEY_DOWN = "down"
KEY_SPACE = "space"
KEY_ENTER = "enter"
KEY_QUIT = "quit"

_KEY_MAP = {
    "\x1b[A": KEY_UP,
    "\x1b[B": KEY_DOWN,
    " ": KEY_SPACE,
    "\r": KEY_ENTER,
    "\n": KEY_ENTER,
    "q": KEY_QUIT,
    "Q": KEY_QUIT,
    "\x03": KEY_QUIT,
}


def decode_key(raw: str) -> Optional[str]:
    """Translate a raw key sequence into a key event, or None if unbound."""
    return _KEY_MAP.get(raw)


def read_key() -> Optional[str]:
    """
    Block until one key is pressed on the terminal and decode it.

    The terminal is put in raw mode for the read and always restored. A lone
    ESC with nothing following it decodes to None so the loop ignores it.
    End of input counts as quit.
    """
    import termios
    import tty

    fd = sys.stdin.fileno()
    old_settings = termios.tcgetattr(fd)
    try:
        tty.setraw(fd)
        raw = os.read(fd, 1).decode(errors="ignore")
        if not raw:
            return KEY_QUIT
        if raw == "\x1b":
            ready, _, _ = select.select([fd], [], [], ESCAPE_SEQUENCE_TIMEOUT)
            if ready:
                raw += os.read(fd, 2).decode(errors="ignore")
    finally:
        termios.tcsetattr(fd, termios.TCSADRAIN, old_settings)
    return decode_key(raw)


# ============================================================================
# CHECKLIST MODE
# ============================================================================


def build_checklist_args(catalog: Catalog) -> List[str]:
    """Build the whiptail argument list for a catalog."""
    size = catalog.checklist_size
    args = [
        "--title",
        CHECKLIST_TITLE,
        "--checklist",
        CHECKLIST_PROMPT,
        str(size.height),
        str(size.width),
        str(size.list_height),
    ]

    if catalog.allow_all:
        args += [ALL_MARKER, "Select all services", "OFF"]

    for entry in catalog.entries:
        args += [entry.id, entry.name, "OFF"]

    return args


def parse_checklist_output(output: str, catalog: Catalog) -> Selection:
    """
    Parse the widget's whitespace-delimited (and possibly quoted) output.

    The ALL marker expands to every catalog id. Unknown ids and duplicates
    are dropped so the result only holds catalog-valid ids.
    """
    try:
        tokens = shlex.split(output)
    except ValueError:
        tokens = output.replace('"', " ").split()

    selected: List[str] = []
    for token in tokens:
        if token == ALL_MARKER and catalog.allow_all:
            candidates = catalog.ids()
        elif token in catalog:
            candidates = [token]
        else:
            continue

        for service_id in candidates:
            if service_id not in selected:
                selected.append(service_id)

    return tuple(selected)


class ChecklistSelector:
    """Service selection through the whiptail checklist dialog."""

    def __init__(self, catalog: Catalog, runner: Optional[Callable] = None):
        self.catalog = catalog
        self.runner = runner or subprocess.run

    def select(self) -> Selection:
        """
        Show the checklist and collect the chosen service ids.

        Raises:
            UserCancelled: if the dialog is cancelled
            EmptySelection: if nothing was ticked
        """
        result = self.runner(
            [DIALOG_TOOL, *build_checklist_args(self.catalog)],
            stderr=subprocess.PIPE,
            text=True,
        )

        if result.returncode != 0:
            raise UserCancelled("Installation cancelled.")

        selection = parse_checklist_output(result.stderr or "", self.catalog)
        if not selection:
            raise EmptySelection("No services selected. Please run the script again.")

        return selection


# ============================================================================
# NAVIGATOR MODE
# ============================================================================


class NavigatorState:
    """Cursor and selected set of the arrow-key navigator."""

    def __init__(self, size: int):
        if size <= 0:
            raise ValueError("Navigator needs at least one item")
        self.size = size
        self.cursor = 0
        self.selected: Set[int] = set()

    def move_up(self) -> None:
        self.cursor = (self.cursor - 1) % self.size

    def move_down(self) -> None:
        self.cursor = (self.cursor + 1) % self.size

    def toggle(self) -> None:
        """Toggle the item under the cursor."""
        if self.cursor in self.selected:
            self.selected.remove(self.cursor)
        else:
            self.selected.add(self.cursor)

    def is_selected(self, index: int) -> bool:
        return index in self.selected

    def selection(self) -> List[int]:
        """Selected indices in list order."""
        return sorted(self.selected)


class NavigatorSelector:
    """Arrow-key and spacebar service selection drawn in the terminal."""

    def __init__(
        self,
        catalog: Catalog,
        key_reader: Callable[[], Optional[str]] = read_key,
        reporter: Optional["Reporter"] = None,
    ):
        self.catalog = catalog
        self.key_reader = key_reader
        self.reporter = reporter or Reporter(catalog)
        self.state = NavigatorState(len(catalog.entries))

    def select(self) -> Selection:
        """
        Run the key loop until the selection is committed.

        Raises:
            UserCancelled: if the user quits with q or Ctrl+C
        """
        while True:
            self._draw()

            key = self.key_reader()
            if key == KEY_UP:
                self.state.move_up()
            elif key == KEY_DOWN:
                self.state.move_down()
            elif key == KEY_SPACE:
                self.state.toggle()
            elif key == KEY_QUIT:
                raise UserCancelled("Installation cancelled.")
            elif key == KEY_ENTER:
                if self.state.selected:
                    return self._selected_ids()
                print_error("Please select at least one service")
                pause(EMPTY_SELECTION_PAUSE)

    def _selected_ids(self) -> Selection:
        return tuple(self.catalog.entries[index].id for index in self.state.selection())

    def _draw(self) -> None:
        """Redraw the full selection box."""
        clear_screen()
        self.reporter.banner()

        print(
            f"{Colors.YELLOW}Use arrow keys to navigate, spacebar to select, "
            f"Enter to confirm (q to quit):{Colors.ENDC}\n"
        )
        print("┌" + "─" * 60 + "┐")
        print(f"│ {'Choose Services:':<59}│")
        print("├" + "─" * 60 + "┤")

        for index, entry in enumerate(self.catalog.entries):
            print(self._format_row(index, entry))

        selected = " ".join(self._selected_ids()) or "None"
        print("├" + "─" * 60 + "┤")
        print(f"│ Selected: {selected:<49.49}│")
        print("└" + "─" * 60 + "┘")

    def _format_row(self, index: int, entry: ServiceEntry) -> str:
        pointer = "❯" if index == self.state.cursor else " "
        checked = self.state.is_selected(index)
        box = "[✓]" if checked else "[ ]"
        label = f"{pointer} {box} {entry.name[:50]:<50}"

        if checked:
            label = f"{Colors.GREEN}{label}{Colors.ENDC}"
        elif index == self.state.cursor:
            label = f"{Colors.BLUE}{label}{Colors.ENDC}"
        return f"│ {label}   │"


def create_selector(catalog: Catalog, reporter: Optional["Reporter"] = None):
    """Pick the selector implementation configured by the catalog."""
    if catalog.selector == "navigator":
        return NavigatorSelector(catalog, reporter=reporter)
    return ChecklistSelector(catalog)


# ============================================================================
# REPORTING
# ============================================================================


class Reporter:
    """Handles banners, progress lines and the final summary."""

    def __init__(self, catalog: Catalog):
        self.catalog = catalog

    def banner(self) -> None:
        """Print the boxed welcome banner."""
        title = f"{self.catalog.title} - Interactive Installer"
        print(f"{Colors.BLUE}")
        print("╔" + "═" * BANNER_WIDTH + "╗")
        print("║" + title.center(BANNER_WIDTH) + "║")
        print("║" + "Powered by Proxmox Virtual Environment".center(BANNER_WIDTH) + "║")
        print("╚" + "═" * BANNER_WIDTH + "╝")
        print(f"{Colors.ENDC}")

    def service_info(self) -> None:
        """Describe every service before the checklist opens."""
        clear_screen()
        self.banner()
        print_header("Available Services")
        print()

        for entry in self.catalog.entries:
            print(f"{Colors.BLUE}• {entry.name}{Colors.ENDC}")
            if entry.description:
                print(f"  {Colors.DIM}{entry.description}{Colors.ENDC}")
            print()

        pause(SERVICE_INFO_PAUSE)

    def selection_confirmation(self, selection: Sequence[str]) -> None:
        clear_screen()
        self.banner()
        print(f"{Colors.GREEN}Selected services:{Colors.ENDC}")
        for service_id in selection:
            print(f"  ✓ {self.catalog.get(service_id).name}")
        print()
        pause(SELECTION_CONFIRM_PAUSE)

    def deployment_started(self) -> None:
        print()
        print_header("Starting Deployment")

    def installing(self, current: int, total: int, entry: ServiceEntry) -> None:
        print(f"\n{Colors.BLUE}[{current}/{total}] Installing {entry.name}...{Colors.ENDC}")

    def installed(self, entry: ServiceEntry) -> None:
        print_success(f"{entry.name} installed successfully")

    def failed(self, entry: ServiceEntry, reason: str = "") -> None:
        if reason:
            print_error(reason)
        print_error(f"Failed to install {entry.name}")

    def summary(self, outcomes: Sequence) -> None:
        """Print the completion summary and post-install guidance."""
        succeeded = [record for record in outcomes if record.succeeded]
        failed = [record for record in outcomes if not record.succeeded]

        print()
        print_header("Installation Complete")
        if not failed:
            print(f"{Colors.GREEN}All selected services have been deployed!{Colors.ENDC}")
        else:
            print_warning(
                f"{len(succeeded)} of {len(outcomes)} services deployed, "
                f"{len(failed)} failed:"
            )
            for record in failed:
                print(f"  • {self.catalog.get(record.service_id).name}")

        if self.catalog.guidance:
            print(f"\n{Colors.YELLOW}Next steps:{Colors.ENDC}")
            for number, line in enumerate(self.catalog.guidance, 1):
                print(f"  {number}. {line}")

        print("\nFor help, see: README.md")
