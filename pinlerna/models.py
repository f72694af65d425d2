"""Core data models for pin-lerna."""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

DEPENDENCY_SECTIONS = ("dependencies", "devDependencies")


@dataclass(frozen=True)
class PackageRecord:
    """A package discovered by the listing command."""

    name: str
    version: str
    location: Path
    private: bool


@dataclass
class Manifest:
    """A decoded package.json.

    ``document`` is the complete JSON object as read, so fields this tool
    does not model (license, scripts, ...) survive a rewrite in their
    original order.
    """

    document: dict[str, Any] = field(default_factory=dict)

    @property
    def name(self) -> str:
        return self.document["name"]

    @property
    def version(self) -> str:
        return self.document["version"]

    @property
    def dependencies(self) -> dict[str, str] | None:
        return self.document.get("dependencies")

    @property
    def dev_dependencies(self) -> dict[str, str] | None:
        return self.document.get("devDependencies")


class UpdateOutcome(str, Enum):
    """What happened to a single manifest."""

    UNCHANGED = "unchanged"
    WRITTEN = "written"
    PENDING = "pending"  # dry run: a change was found but not written


@dataclass
class DependencyChange:
    """A single dependency entry rewritten to a pinned version."""

    section: str  # dependencies, devDependencies
    name: str
    old: str
    new: str
