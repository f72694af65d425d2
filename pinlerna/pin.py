"""Pin every package of a monorepo to its siblings' current versions."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from pathlib import Path

from .errors import AggregateUpdateError, UpdateError
from .listing import DEFAULT_LIST_COMMAND, list_packages
from .models import PackageRecord, UpdateOutcome
from .update import FileSystem, ManifestUpdater
from .versions import build_version_dictionary, manifest_paths

logger = logging.getLogger(__name__)

Lister = Callable[[Path, str], Awaitable[list[PackageRecord]]]


async def pin_versions(
    root: Path,
    *,
    command: str = DEFAULT_LIST_COMMAND,
    filesystem: FileSystem | None = None,
    dry_run: bool = False,
    lister: Lister = list_packages,
) -> dict[Path, UpdateOutcome]:
    """Pin sibling dependencies in every package.json under root.

    The listing runs once; if it fails nothing is touched. Manifests are then
    updated concurrently. A failing manifest does not stop the others, and
    files already written are kept when another one fails.

    Args:
        root: Monorepo root directory
        command: Listing command run in root
        filesystem: File access for the updater
        dry_run: Report changes without writing them
        lister: Coroutine returning the package records

    Returns:
        Outcome per manifest path

    Raises:
        ProcessError: If the listing command fails
        DecodeError: If the listing output is invalid
        AggregateUpdateError: If one or more manifests failed
    """
    packages = await lister(root, command)
    dictionary = build_version_dictionary(packages)
    paths = manifest_paths(packages, root)

    updater = ManifestUpdater(dictionary, filesystem=filesystem, dry_run=dry_run)
    results = await asyncio.gather(
        *(updater.update(path) for path in paths), return_exceptions=True
    )

    outcomes: dict[Path, UpdateOutcome] = {}
    failures: list[UpdateError] = []
    for path, result in zip(paths, results):
        if isinstance(result, UpdateError):
            failures.append(result)
        elif isinstance(result, BaseException):
            raise result
        else:
            outcomes[path] = result

    written = sum(1 for outcome in outcomes.values() if outcome is UpdateOutcome.WRITTEN)
    logger.debug("%d of %d manifest(s) written", written, len(paths))

    if failures:
        raise AggregateUpdateError(failures, outcomes)
    return outcomes
