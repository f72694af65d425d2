"""package.json decoding, encoding and version pinning."""

import json
from collections.abc import Mapping

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .errors import MalformedTextError, SchemaMismatchError
from .models import DEPENDENCY_SECTIONS, DependencyChange, Manifest

INDENT = 4


class PackageJsonSchema(BaseModel):
    """The part of package.json this tool reads or rewrites.

    Any other top-level field is allowed and left alone.
    """

    model_config = ConfigDict(strict=True, extra="allow")

    name: str
    version: str
    dependencies: dict[str, str] = Field(default_factory=dict)
    dev_dependencies: dict[str, str] = Field(default_factory=dict, alias="devDependencies")


def describe_validation_error(error: ValidationError) -> str:
    """Flatten a pydantic error into a single readable line."""
    problems = []
    for item in error.errors():
        location = ".".join(str(part) for part in item["loc"]) or "<root>"
        problems.append(f"{location}: {item['msg']}")
    return "; ".join(problems)


def decode_manifest(raw: str) -> Manifest:
    """Decode package.json text into a Manifest.

    Args:
        raw: The package.json file content

    Returns:
        Manifest wrapping the decoded document

    Raises:
        MalformedTextError: If the content is not JSON
        SchemaMismatchError: If name/version are missing or a dependency
            section is not a map of strings
    """
    try:
        document = json.loads(raw)
    except json.JSONDecodeError as e:
        raise MalformedTextError(f"Invalid JSON: {e}") from e

    try:
        PackageJsonSchema.model_validate(document)
    except ValidationError as e:
        raise SchemaMismatchError(
            f"Invalid package.json: {describe_validation_error(e)}"
        ) from e

    # Keep the parsed dict rather than the model dump so key order and
    # unmodelled fields are written back untouched.
    return Manifest(document=document)


def encode_manifest(manifest: Manifest, trailing_newline: bool = False) -> str:
    """Serialize a Manifest with 4-space indentation."""
    content = json.dumps(manifest.document, indent=INDENT, ensure_ascii=False)
    if trailing_newline:
        content += "\n"
    return content


def pin_manifest(manifest: Manifest, dictionary: Mapping[str, str]) -> Manifest:
    """Return a copy of manifest with sibling dependencies pinned.

    Entries not present in the dictionary keep their version string exactly
    as written. Sections missing from the manifest are not created.
    """
    document = dict(manifest.document)
    for section in DEPENDENCY_SECTIONS:
        dependencies = document.get(section)
        if dependencies is None:
            continue
        document[section] = {
            name: dictionary.get(name, version)
            for name, version in dependencies.items()
        }
    return Manifest(document=document)


def dependency_changes(original: Manifest, updated: Manifest) -> list[DependencyChange]:
    """List the entries that differ between two versions of a manifest."""
    changes = []
    sections = (
        ("dependencies", original.dependencies, updated.dependencies),
        ("devDependencies", original.dev_dependencies, updated.dev_dependencies),
    )
    for section, before, after in sections:
        before = before or {}
        for name, new in (after or {}).items():
            old = before.get(name)
            if old is not None and old != new:
                changes.append(DependencyChange(section=section, name=name, old=old, new=new))
    return changes
