"""
Catalog loader module for processing YAML service catalogs.

Each variant of the installer (home server, home media server, IT company
server, custom server) is described by one YAML file in ``catalogs/``. The
loader turns it into an immutable ``Catalog`` that is handed to the selector
and the dispatcher.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Tuple, Union

import yaml

from .constants import (ALL_MARKER, CATALOGS_DIR, COMMUNITY_SCRIPT_RUNNER,
                        COMMUNITY_SCRIPTS_BASE_URL, DEFAULT_CHECKLIST_SIZE,
                        SELECTOR_MODES, SERVICE_SCRIPTS_DIR)
from .exceptions import CatalogError

ACTION_FIELDS = ("script", "command", "community_script")


@dataclass(frozen=True)
class RunInlineCommand:
    """Run an argv list directly, without a shell in between."""

    args: Tuple[str, ...]

    def argv(self) -> List[str]:
        return list(self.args)

    def describe(self) -> str:
        return " ".join(self.args)


@dataclass(frozen=True)
class RunScriptPath:
    """Run a vendored delegate script with bash."""

    path: Path
    args: Tuple[str, ...] = ()

    def argv(self) -> List[str]:
        return ["bash", str(self.path), *self.args]

    def describe(self) -> str:
        return str(self.path)


Action = Union[RunInlineCommand, RunScriptPath]


def community_script_url(slug: str) -> str:
    """URL of a Proxmox Community Scripts container installer."""
    return f"{COMMUNITY_SCRIPTS_BASE_URL}/{slug}.sh"


def community_script_action(slug: str) -> RunInlineCommand:
    """Build the action that fetches and runs a community installer."""
    return RunInlineCommand(
        ("bash", "-c", COMMUNITY_SCRIPT_RUNNER, "bash", community_script_url(slug))
    )


@dataclass(frozen=True)
class ServiceEntry:
    id: str
    name: str
    action: Action
    description: str = ""


@dataclass(frozen=True)
class ChecklistSize:
    height: int = DEFAULT_CHECKLIST_SIZE["height"]
    width: int = DEFAULT_CHECKLIST_SIZE["width"]
    list_height: int = DEFAULT_CHECKLIST_SIZE["list_height"]


@dataclass(frozen=True)
class Catalog:
    """An ordered, read-only set of installable services for one variant."""

    variant: str
    title: str
    entries: Tuple[ServiceEntry, ...]
    description: str = ""
    selector: str = "checklist"
    allow_all: bool = False
    show_service_info: bool = False
    checklist_size: ChecklistSize = field(default_factory=ChecklistSize)
    guidance: Tuple[str, ...] = ()

    def ids(self) -> List[str]:
        return [entry.id for entry in self.entries]

    def get(self, service_id: str) -> ServiceEntry:
        for entry in self.entries:
            if entry.id == service_id:
                return entry
        raise KeyError(service_id)

    def __contains__(self, service_id: object) -> bool:
        return any(entry.id == service_id for entry in self.entries)

    def __len__(self) -> int:
        return len(self.entries)


class CatalogLoader:
    """Loads and validates service catalogs from YAML files."""

    def __init__(
        self,
        catalogs_dir: Path = CATALOGS_DIR,
        scripts_dir: Path = SERVICE_SCRIPTS_DIR,
    ):
        self.catalogs_dir = catalogs_dir
        self.scripts_dir = scripts_dir
        self._cache: Dict[str, Catalog] = {}

    def available_variants(self) -> List[str]:
        """List the variant names that have a catalog file."""
        if not self.catalogs_dir.is_dir():
            return []
        return sorted(path.stem for path in self.catalogs_dir.glob("*.yaml"))

    def load(self, variant: str) -> Catalog:
        """Load, validate and build the catalog for a variant."""
        if variant in self._cache:
            return self._cache[variant]

        data = self._load_yaml_data(variant)
        issues = self.validate(data)
        if issues:
            details = "\n".join(f"  - {issue}" for issue in issues)
            raise CatalogError(f"Invalid catalog '{variant}':\n{details}")

        catalog = self._build_catalog(variant, data)
        self._cache[variant] = catalog
        return catalog

    def _load_yaml_data(self, variant: str) -> Dict[str, Any]:
        """Load a catalog definition from its YAML file."""
        yaml_path = self.catalogs_dir / f"{variant}.yaml"
        if not yaml_path.exists():
            available = ", ".join(self.available_variants()) or "none"
            raise CatalogError(
                f"Unknown variant '{variant}' (available: {available})"
            )

        try:
            with open(yaml_path, "r", encoding="utf-8") as file:
                data = yaml.safe_load(file)
        except (yaml.YAMLError, IOError) as e:
            raise CatalogError(f"Failed to load catalog YAML: {e}")

        if not isinstance(data, dict):
            raise CatalogError(f"Catalog '{variant}' must be a YAML mapping")
        return data

    def validate(self, data: Dict[str, Any]) -> List[str]:
        """Validate catalog data and return list of issues."""
        issues = []

        if not data.get("title"):
            issues.append("Catalog missing required field: title")

        selector = data.get("selector", "checklist")
        if selector not in SELECTOR_MODES:
            issues.append(
                f"Unknown selector '{selector}' "
                f"(expected one of: {', '.join(SELECTOR_MODES)})"
            )

        checklist = data.get("checklist") or {}
        for key in checklist:
            if key not in DEFAULT_CHECKLIST_SIZE:
                issues.append(f"Unknown checklist setting: {key}")

        services = data.get("services")
        if not isinstance(services, dict) or not services:
            issues.append("Catalog must define at least one service")
            return issues

        for service_id, service_data in services.items():
            if service_id == ALL_MARKER:
                issues.append(f"'{ALL_MARKER}' is reserved and cannot be a service id")
                continue
            if not isinstance(service_data, dict):
                issues.append(f"Service '{service_id}' must be a mapping")
                continue
            if "name" not in service_data:
                issues.append(f"Service '{service_id}' missing required field: name")

            actions = [key for key in ACTION_FIELDS if key in service_data]
            if len(actions) != 1:
                issues.append(
                    f"Service '{service_id}' needs exactly one of: "
                    f"{', '.join(ACTION_FIELDS)}"
                )
            elif "command" in service_data:
                command = service_data["command"]
                if not isinstance(command, list) or not command:
                    issues.append(
                        f"Service '{service_id}' command must be a non-empty list"
                    )

        return issues

    def _build_catalog(self, variant: str, data: Dict[str, Any]) -> Catalog:
        entries = tuple(
            ServiceEntry(
                id=str(service_id),
                name=service_data["name"],
                description=service_data.get("description", ""),
                action=self._build_action(str(service_id), service_data),
            )
            for service_id, service_data in data["services"].items()
        )

        size = data.get("checklist", {}) or {}

        return Catalog(
            variant=variant,
            title=data["title"],
            description=data.get("description", ""),
            selector=data.get("selector", "checklist"),
            allow_all=bool(data.get("allow_all", False)),
            show_service_info=bool(data.get("show_service_info", False)),
            checklist_size=ChecklistSize(**size),
            guidance=tuple(data.get("guidance", [])),
            entries=entries,
        )

    def _build_action(self, service_id: str, service_data: Dict[str, Any]) -> Action:
        if "community_script" in service_data:
            return community_script_action(service_data["community_script"])

        if "command" in service_data:
            return RunInlineCommand(tuple(str(arg) for arg in service_data["command"]))

        script = service_data["script"]
        script_path = self._resolve_script(service_id if script is True else script)
        args = tuple(str(arg) for arg in service_data.get("args", []))
        return RunScriptPath(script_path, args)

    def _resolve_script(self, script: str) -> Path:
        path = Path(script)
        if path.suffix != ".sh":
            path = path.with_name(f"{path.name}.sh")
        if not path.is_absolute():
            path = self.scripts_dir / path
        return path
