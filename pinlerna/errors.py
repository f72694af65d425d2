"""Exceptions raised by pin-lerna."""

from pathlib import Path

from .models import UpdateOutcome


class PinError(Exception):
    """Base class for every error this tool reports."""


class DecodeError(PinError):
    """Text could not be decoded into the expected model."""


class MalformedTextError(DecodeError):
    """Text is not valid JSON."""


class SchemaMismatchError(DecodeError):
    """JSON is valid but does not have the expected shape."""


class ProcessError(PinError):
    """The package listing command could not be run or failed."""

    def __init__(self, command: str, returncode: int | None = None, stderr: str = ""):
        self.command = command
        self.returncode = returncode
        self.stderr = stderr
        if returncode is None:
            message = f"Could not run '{command}'"
        else:
            message = f"'{command}' exited with status {returncode}"
        if stderr.strip():
            message += f": {stderr.strip()}"
        super().__init__(message)


class UpdateError(PinError):
    """A single manifest could not be updated."""

    def __init__(self, path: Path, message: str):
        self.path = path
        super().__init__(message)


class InvalidManifestError(UpdateError):
    def __init__(self, path: Path):
        super().__init__(path, f"Could not parse JSON from '{path}'")


class IoFailureError(UpdateError):
    def __init__(self, path: Path, cause: OSError):
        self.cause = cause
        super().__init__(path, f"I/O error on '{path}': {cause}")


class AggregateUpdateError(PinError):
    """One or more manifests failed while the rest were processed."""

    def __init__(
        self,
        failures: list[UpdateError],
        outcomes: dict[Path, UpdateOutcome] | None = None,
    ):
        self.failures = failures
        self.outcomes = outcomes or {}
        lines = [f"{len(failures)} manifest(s) could not be updated"]
        lines.extend(f"  {failure}" for failure in failures)
        super().__init__("\n".join(lines))
