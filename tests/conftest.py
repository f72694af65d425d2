"""Pytest configuration and fixtures."""

import json
import shlex
import sys
from pathlib import Path

import pytest

from pinlerna.models import PackageRecord


class FakeFileSystem:
    """In-memory FileSystem that counts writes."""

    def __init__(self, files: dict[Path, str] | None = None):
        self.files = dict(files or {})
        self.writes: list[Path] = []
        self.fail_writes: set[Path] = set()

    async def read_text(self, path: Path) -> str:
        try:
            return self.files[path]
        except KeyError:
            raise FileNotFoundError(2, "No such file or directory", str(path))

    async def write_text(self, path: Path, content: str) -> None:
        if path in self.fail_writes:
            raise PermissionError(13, "Permission denied", str(path))
        self.writes.append(path)
        self.files[path] = content


def render_package_json(name, version="1.0.0", **fields) -> str:
    """Render a package.json the way npm lays it out."""
    return json.dumps({"name": name, "version": version, **fields}, indent=4) + "\n"


@pytest.fixture
def fake_fs():
    return FakeFileSystem()


@pytest.fixture
def sample_listing():
    """Sample `lerna list --all --json` output."""
    return json.dumps([
        {"name": "@acme/core", "version": "2.0.0", "location": "/repo/packages/core", "private": False},
        {"name": "@acme/cli", "version": "1.4.2", "location": "/repo/packages/cli", "private": False},
        {"name": "@acme/docs", "version": "0.0.1", "location": "/repo/packages/docs", "private": True},
    ])


@pytest.fixture
def sample_records():
    return [
        PackageRecord("@acme/core", "2.0.0", Path("/repo/packages/core"), False),
        PackageRecord("@acme/cli", "1.4.2", Path("/repo/packages/cli"), False),
    ]


@pytest.fixture
def monorepo(tmp_path):
    """A lerna monorepo on disk with a listing script standing in for lerna."""
    packages = {
        "core": ("@acme/core", "2.0.0", {"license": "MIT"}),
        "cli": ("@acme/cli", "1.4.2", {
            "dependencies": {"@acme/core": "^1.0.0", "typer": "0.9.0"},
        }),
        "docs": ("@acme/docs", "0.0.1", {
            "private": True,
            "devDependencies": {"@acme/cli": "1.0.0"},
        }),
    }
    listing = []
    for directory, (name, version, fields) in packages.items():
        location = tmp_path / "packages" / directory
        location.mkdir(parents=True)
        (location / "package.json").write_text(render_package_json(name, version, **fields))
        listing.append({
            "name": name,
            "version": version,
            "location": str(location),
            "private": bool(fields.get("private", False)),
        })

    listing_file = tmp_path / "listing.json"
    listing_file.write_text(json.dumps(listing))
    script = tmp_path / "list_packages.py"
    script.write_text(
        "import sys\n"
        f"sys.stdout.write(open({str(listing_file)!r}).read())\n"
    )
    command = f"{shlex.quote(sys.executable)} {shlex.quote(str(script))}"
    return tmp_path, command


@pytest.fixture
def package_json():
    """Factory rendering package.json content."""
    return render_package_json
