"""
Pytest configuration and shared fixtures for server-setup-suite tests.
"""

import tempfile
from pathlib import Path
from typing import Generator
from unittest.mock import MagicMock, patch

import pytest

from server_setup.catalog import (Catalog, CatalogLoader, RunInlineCommand,
                                  RunScriptPath, ServiceEntry)


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as temp_dir:
        yield Path(temp_dir)


@pytest.fixture
def scripts_dir(temp_dir: Path) -> Path:
    """Create a directory of delegate scripts."""
    scripts_dir = temp_dir / "services"
    scripts_dir.mkdir()
    for service_id in ["jellyfin", "nextcloud", "pihole"]:
        (scripts_dir / f"{service_id}.sh").write_text("#!/bin/bash\nexit 0\n")
    return scripts_dir


@pytest.fixture
def sample_catalog(scripts_dir: Path) -> Catalog:
    """Return the three-service home media catalog used across tests."""
    return Catalog(
        variant="home-media-server",
        title="Home Media Server Setup",
        selector="checklist",
        guidance=("Access Jellyfin at: http://<host>:8096",),
        entries=(
            ServiceEntry(
                "jellyfin",
                "Jellyfin - Open-source media system",
                RunScriptPath(scripts_dir / "jellyfin.sh"),
                "Stream media from your own server.",
            ),
            ServiceEntry(
                "nextcloud",
                "Nextcloud - Self-hosted cloud storage",
                RunScriptPath(scripts_dir / "nextcloud.sh"),
                "Self-hosted cloud storage.",
            ),
            ServiceEntry(
                "pihole",
                "Pi-hole - DNS-based ad blocking",
                RunScriptPath(scripts_dir / "pihole.sh"),
                "Network-wide ad blocker.",
            ),
        ),
    )


@pytest.fixture
def all_catalog() -> Catalog:
    """Return a catalog that offers the ALL checklist entry."""
    return Catalog(
        variant="it-company-server",
        title="Home Server Setup Suite",
        allow_all=True,
        entries=(
            ServiceEntry(
                "myspeed",
                "MySpeed - Speed test application",
                RunInlineCommand(("true",)),
            ),
            ServiceEntry(
                "wikijs",
                "Wiki.js - Modern wiki platform",
                RunInlineCommand(("true",)),
            ),
        ),
    )


@pytest.fixture
def catalogs_dir(temp_dir: Path) -> Path:
    """Create a temporary catalogs directory with sample files."""
    catalogs_dir = temp_dir / "catalogs"
    catalogs_dir.mkdir()

    (catalogs_dir / "home-media-server.yaml").write_text(
        """
title: Home Media Server Setup
selector: checklist
show_service_info: true
checklist:
  height: 20
  width: 70
  list_height: 10

services:
  jellyfin:
    name: Jellyfin - Open-source media system
    description: Stream media from your own server.
    script: true
  nextcloud:
    name: Nextcloud - Self-hosted cloud storage
    script: nextcloud.sh
    args: [lxc, local-lvm]
  pihole:
    name: Pi-hole - DNS-based ad blocking
    command: ["echo", "pihole"]

guidance:
  - Configure Pi-hole admin interface
"""
    )

    (catalogs_dir / "it-company-server.yaml").write_text(
        """
title: Home Server Setup Suite
allow_all: true
services:
  myspeed:
    name: MySpeed - Speed test application
    community_script: myspeed
"""
    )

    return catalogs_dir


@pytest.fixture
def catalog_loader(catalogs_dir: Path, scripts_dir: Path) -> CatalogLoader:
    return CatalogLoader(catalogs_dir=catalogs_dir, scripts_dir=scripts_dir)


@pytest.fixture
def mock_subprocess():
    """Mock subprocess.run for testing system commands."""
    with patch("subprocess.run") as mock_run:
        # Default successful response
        mock_run.return_value = MagicMock(returncode=0, stdout="", stderr="")
        yield mock_run


@pytest.fixture
def proxmox_host():
    """Pretend to be root on a Proxmox host with whiptail installed."""
    with patch("os.geteuid", return_value=0), patch(
        "shutil.which", side_effect=lambda name: f"/usr/bin/{name}"
    ):
        yield


@pytest.fixture(autouse=True)
def no_pauses():
    """Skip the screen pauses between menus."""
    with patch("server_setup.utils.time.sleep"):
        yield


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests (slower)"
    )
