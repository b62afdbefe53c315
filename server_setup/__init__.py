"""
Server Setup Suite - interactive Proxmox service installer

This package contains the components of the interactive installer that
deploys self-hosted services through the Proxmox Community Scripts.
"""

__version__ = "1.0.0"

from .catalog import Catalog, CatalogLoader, ServiceEntry
from .dispatcher import Dispatcher, OutcomeRecord
from .setup_core import ServerSetup

__all__ = [
    "ServerSetup",
    "Catalog",
    "CatalogLoader",
    "ServiceEntry",
    "Dispatcher",
    "OutcomeRecord",
]
