"""Rewriting a single package.json against the version dictionary."""

import asyncio
import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Protocol

from .errors import DecodeError, InvalidManifestError, IoFailureError
from .manifest import decode_manifest, dependency_changes, encode_manifest, pin_manifest
from .models import UpdateOutcome

logger = logging.getLogger(__name__)


class FileSystem(Protocol):
    """Text file access used by the updater."""

    async def read_text(self, path: Path) -> str: ...

    async def write_text(self, path: Path, content: str) -> None: ...


class LocalFileSystem:
    """FileSystem backed by the local disk, run in worker threads."""

    encoding = "utf-8"

    async def read_text(self, path: Path) -> str:
        return await asyncio.to_thread(path.read_text, encoding=self.encoding)

    async def write_text(self, path: Path, content: str) -> None:
        await asyncio.to_thread(path.write_text, content, encoding=self.encoding)


class ManifestUpdater:
    """Pin sibling dependencies in package.json files."""

    def __init__(
        self,
        dictionary: Mapping[str, str],
        filesystem: FileSystem | None = None,
        dry_run: bool = False,
    ):
        """Initialize the updater.

        Args:
            dictionary: Package name to pinned version
            filesystem: File access; defaults to the local disk
            dry_run: Compute changes without writing them
        """
        self.dictionary = dictionary
        self.filesystem = filesystem or LocalFileSystem()
        self.dry_run = dry_run

    async def update(self, path: Path) -> UpdateOutcome:
        """Pin the manifest at path, writing only if its content changes.

        Args:
            path: Location of a package.json

        Returns:
            UNCHANGED if nothing needed pinning, WRITTEN after a rewrite,
            PENDING when a rewrite was needed during a dry run

        Raises:
            InvalidManifestError: If the file is not a valid package.json
            IoFailureError: If the file cannot be read or written
        """
        try:
            content = await self.filesystem.read_text(path)
        except UnicodeDecodeError as e:
            raise InvalidManifestError(path) from e
        except OSError as e:
            raise IoFailureError(path, e) from e

        try:
            original = decode_manifest(content)
        except DecodeError as e:
            raise InvalidManifestError(path) from e

        updated = pin_manifest(original, self.dictionary)
        if updated.document == original.document:
            return UpdateOutcome.UNCHANGED

        if self.dry_run:
            logger.info("Would update file %s", path)
        else:
            logger.info("Updating file %s", path)
        for change in dependency_changes(original, updated):
            logger.debug("  %s %s: %s -> %s", change.section, change.name, change.old, change.new)

        if self.dry_run:
            return UpdateOutcome.PENDING

        new_content = encode_manifest(updated, trailing_newline=content.endswith("\n"))
        try:
            await self.filesystem.write_text(path, new_content)
        except OSError as e:
            raise IoFailureError(path, e) from e
        return UpdateOutcome.WRITTEN
