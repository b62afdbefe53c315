"""
Utility functions for server-setup-suite.
"""

import os
import shutil
import subprocess
import sys
import time

# ============================================================================
# COLOR DEFINITIONS
# ============================================================================


class Colors:
    """ANSI color codes for terminal output."""

    BLUE = "\033[94m"
    CYAN = "\033[96m"
    GREEN = "\033[92m"
    YELLOW = "\033[93m"
    RED = "\033[91m"
    ENDC = "\033[0m"
    BOLD = "\033[1m"
    DIM = "\033[2m"


# ============================================================================
# USER INTERFACE FUNCTIONS
# ============================================================================


def print_header(text: str) -> None:
    """Print a formatted header."""
    print(f"\n{Colors.BOLD}{Colors.BLUE}=== {text} ==={Colors.ENDC}")


def print_success(text: str) -> None:
    print(f"{Colors.GREEN}✓ {text}{Colors.ENDC}")


def print_warning(text: str) -> None:
    print(f"{Colors.YELLOW}⚠ {text}{Colors.ENDC}")


def print_error(text: str) -> None:
    print(f"{Colors.RED}✗ {text}{Colors.ENDC}")


def print_info(text: str) -> None:
    print(f"{Colors.CYAN}ℹ {text}{Colors.ENDC}")


def clear_screen() -> None:
    """Clear the terminal when attached to one."""
    if sys.stdout.isatty():
        sys.stdout.write("\033[2J\033[H")
        sys.stdout.flush()


def pause(seconds: float) -> None:
    time.sleep(seconds)


# ============================================================================
# SYSTEM UTILITIES
# ============================================================================


def run_command(command: list, check: bool = True) -> subprocess.CompletedProcess:
    """Run a system command and capture its output."""
    return subprocess.run(command, capture_output=True, text=True, check=check)


def command_exists(name: str) -> bool:
    """Check whether an executable is available on PATH."""
    return shutil.which(name) is not None


def is_root() -> bool:
    return os.geteuid() == 0


def is_debug_enabled() -> bool:
    """Determine if debug information should be shown on errors."""
    return os.environ.get("DEBUG", "").lower() in ["1", "true", "yes"]
