"""FastAPI preview service for pin-lerna."""

from fastapi import FastAPI, File, Form, HTTPException, UploadFile
from pydantic import BaseModel

from pinlerna.errors import DecodeError
from pinlerna.listing import LernaPackage, parse_listing
from pinlerna.manifest import decode_manifest, dependency_changes, encode_manifest, pin_manifest
from pinlerna.models import PackageRecord
from pinlerna.versions import build_version_dictionary

app = FastAPI(
    title="pin-lerna",
    description="Preview lerna dependency pinning for a single package.json",
    version="0.1.0",
)


class PinRequest(BaseModel):
    """Request model for pinning one manifest."""
    manifest: str
    packages: list[LernaPackage]


class Change(BaseModel):
    section: str
    name: str
    old: str
    new: str


class PinResponse(BaseModel):
    """Response model for a pinned manifest."""
    name: str
    version: str
    has_changes: bool
    updated_content: str
    changes: list[Change]


@app.get("/api/health")
async def health():
    return {"status": "ok"}


@app.post("/api/pin", response_model=PinResponse)
async def pin_manifest_content(request: PinRequest):
    """Pin a manifest given as text against the posted packages."""
    return _pin(request.manifest, [package.to_record() for package in request.packages])


@app.post("/api/upload", response_model=PinResponse)
async def upload_manifest(
    file: UploadFile = File(...),
    packages: str = Form(...),
):
    """Pin an uploaded package.json against raw `lerna list --json` output."""
    try:
        content = (await file.read()).decode("utf-8")
    except UnicodeDecodeError:
        raise HTTPException(status_code=400, detail="File must be valid UTF-8 text")

    try:
        records = parse_listing(packages)
    except DecodeError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return _pin(content, records)


def _pin(content: str, records: list[PackageRecord]) -> PinResponse:
    try:
        original = decode_manifest(content)
    except DecodeError as e:
        raise HTTPException(status_code=400, detail=str(e))

    updated = pin_manifest(original, build_version_dictionary(records))
    has_changes = updated.document != original.document
    updated_content = (
        encode_manifest(updated, trailing_newline=content.endswith("\n"))
        if has_changes
        else content
    )

    return PinResponse(
        name=original.name,
        version=original.version,
        has_changes=has_changes,
        updated_content=updated_content,
        changes=[
            Change(section=c.section, name=c.name, old=c.old, new=c.new)
            for c in dependency_changes(original, updated)
        ],
    )
