"""
Constants and shared configuration for server-setup-suite.
"""

from pathlib import Path
from typing import Dict, List

# Package directories
PACKAGE_DIR = Path(__file__).parent.resolve()
CATALOGS_DIR = PACKAGE_DIR / "catalogs"
SERVICE_SCRIPTS_DIR = PACKAGE_DIR / "scripts" / "services"

# Proxmox Community Scripts
COMMUNITY_SCRIPTS_BASE_URL = (
    "https://raw.githubusercontent.com/community-scripts/ProxmoxVE/main/ct"
)

# The installer URL arrives as $1 so it is never spliced into the script text
COMMUNITY_SCRIPT_RUNNER = 'bash -c "$(curl -fsSL "$1")"'

# Host tooling
HOST_TOOL = "pvesm"
DIALOG_TOOL = "whiptail"

# Catalog variants
DEFAULT_VARIANT = "home-server"
SELECTOR_MODES = ["navigator", "checklist"]

# Checklist widget
ALL_MARKER = "ALL"
CHECKLIST_TITLE = "Select Services"
CHECKLIST_PROMPT = "Use SPACE to select, ENTER to confirm"
DEFAULT_CHECKLIST_SIZE: Dict[str, int] = {
    "height": 20,
    "width": 70,
    "list_height": 10,
}

# Delegate wrapper
DEPLOY_TYPES: List[str] = ["lxc", "vm"]
DEFAULT_DEPLOY_TYPE = "lxc"
DEFAULT_STORAGE = "local-lvm"

# Pauses between screens (seconds)
SERVICE_INFO_PAUSE = 2
SELECTION_CONFIRM_PAUSE = 1
EMPTY_SELECTION_PAUSE = 1

# Seconds to wait for the rest of an escape sequence after a lone ESC byte
ESCAPE_SEQUENCE_TIMEOUT = 0.05
