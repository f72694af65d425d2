"""Version dictionary construction."""

from collections.abc import Iterable, Mapping
from pathlib import Path
from types import MappingProxyType

from .models import PackageRecord

VERSION_PREFIX = "^"
MANIFEST_FILENAME = "package.json"


def pinned_version(version: str) -> str:
    return f"{VERSION_PREFIX}{version}"


def build_version_dictionary(records: Iterable[PackageRecord]) -> Mapping[str, str]:
    """Map each package name to its pinned version.

    Names are unique in lerna output; if one repeats, the last record wins.
    """
    dictionary: dict[str, str] = {}
    for record in records:
        dictionary[record.name] = pinned_version(record.version)
    return MappingProxyType(dictionary)


def manifest_paths(records: Iterable[PackageRecord], root: Path) -> list[Path]:
    """Return the package.json path of every record.

    Relative locations are taken relative to root.
    """
    return [(root / record.location / MANIFEST_FILENAME) for record in records]
