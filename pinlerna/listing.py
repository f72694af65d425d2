"""Package discovery through ``lerna list``."""

import asyncio
import contextlib
import json
import logging
import shlex
from pathlib import Path

from pydantic import BaseModel, ConfigDict, TypeAdapter, ValidationError

from .errors import MalformedTextError, ProcessError, SchemaMismatchError
from .manifest import describe_validation_error
from .models import PackageRecord

logger = logging.getLogger(__name__)

DEFAULT_LIST_COMMAND = "npx lerna list --all --json"


class LernaPackage(BaseModel):
    """One element of ``lerna list --json`` output."""

    model_config = ConfigDict(strict=True)

    name: str
    version: str
    location: str
    private: bool

    def to_record(self) -> PackageRecord:
        return PackageRecord(
            name=self.name,
            version=self.version,
            location=Path(self.location),
            private=self.private,
        )


_listing_adapter = TypeAdapter(list[LernaPackage])


def parse_listing(raw: str) -> list[PackageRecord]:
    """Parse listing output into package records.

    Private packages are kept. A single bad element fails the whole listing.

    Args:
        raw: Standard output of the listing command

    Returns:
        One PackageRecord per listed package, in listing order
    """
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise MalformedTextError(f"Package listing is not valid JSON: {e}") from e

    if not isinstance(data, list):
        raise SchemaMismatchError(
            f"Package listing must be a JSON array, got {type(data).__name__}"
        )

    try:
        packages = _listing_adapter.validate_python(data)
    except ValidationError as e:
        raise SchemaMismatchError(
            f"Invalid package listing: {describe_validation_error(e)}"
        ) from e

    return [package.to_record() for package in packages]


async def run_listing(root: Path, command: str = DEFAULT_LIST_COMMAND) -> str:
    """Run the listing command in root and return its standard output.

    Cancelling the awaiting task kills the child process.
    """
    args = shlex.split(command)
    if not args:
        raise ProcessError(command)

    logger.debug("Running '%s' in %s", command, root)
    try:
        process = await asyncio.create_subprocess_exec(
            *args,
            cwd=root,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except OSError as e:
        raise ProcessError(command, stderr=str(e)) from e

    try:
        stdout, stderr = await process.communicate()
    except asyncio.CancelledError:
        if process.returncode is None:
            with contextlib.suppress(ProcessLookupError):
                process.kill()
            await process.wait()
        raise

    if process.returncode != 0:
        raise ProcessError(
            command, process.returncode, stderr.decode("utf-8", errors="replace")
        )
    try:
        return stdout.decode("utf-8")
    except UnicodeDecodeError as e:
        raise MalformedTextError(f"Package listing is not valid UTF-8: {e}") from e


async def list_packages(root: Path, command: str = DEFAULT_LIST_COMMAND) -> list[PackageRecord]:
    """List every package of the monorepo at root."""
    output = await run_listing(root, command)
    packages = parse_listing(output)
    logger.debug("%d package(s) listed", len(packages))
    return packages
