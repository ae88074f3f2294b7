"""Decoding of the publish request envelope.

The body of ``PUT /api/v1/crates/new`` is::

    u32 (little endian)  length of the JSON metadata block
    bytes                JSON metadata (see ``NewCrate``)
    u32 (little endian)  declared length of the archive
    bytes                the ``.crate`` archive
"""

from __future__ import annotations

import hashlib
import json
import struct
from dataclasses import dataclass
from typing import AsyncIterable

from pydantic import ValidationError

from registry_api.errors import ValidationFailed
from registry_api.models.new_crate import NewCrate
from registry_api.validation import (
    MAX_KEYWORDS,
    NON_STANDARD_LICENSE,
    license_problem,
    parse_version,
    url_problem,
    valid_crate_name,
    valid_feature_name,
    valid_keyword,
    valid_version_req,
)

MANIFEST_DOCS_URL = "http://doc.crates.io/manifest.html#package-metadata"

_LENGTH = struct.Struct("<I")


@dataclass
class CrateUpload:
    metadata: NewCrate
    archive: bytes
    declared_length: int
    license: str | None
    keywords: list[str]

    @property
    def name(self) -> str:
        return self.metadata.name

    @property
    def version(self) -> str:
        return str(parse_version(self.metadata.vers))

    def content_digest(self) -> str:
        return hashlib.sha256(self.archive).hexdigest()


def too_big_message(max_size: int) -> str:
    return f"max upload size is: {max_size}"


async def read_limited_body(chunks: AsyncIterable[bytes], max_size: int) -> bytes:
    """Collect a streamed request body, refusing anything beyond ``max_size``."""
    buffer = bytearray()
    async for chunk in chunks:
        buffer.extend(chunk)
        if len(buffer) > max_size:
            raise ValidationFailed(too_big_message(max_size))
    return bytes(buffer)


def _read_length(body: bytes, offset: int, what: str) -> int:
    end = offset + _LENGTH.size
    if len(body) < end:
        raise ValidationFailed(f"invalid upload request: missing {what} length")
    (length,) = _LENGTH.unpack_from(body, offset)
    return length


def missing_metadata_fields(metadata: NewCrate) -> list[str]:
    missing: list[str] = []
    if not (metadata.description or "").strip():
        missing.append("description")
    if not (metadata.license or "").strip() and not (metadata.license_file or "").strip():
        missing.append("license")
    if not any(author.strip() for author in metadata.authors):
        missing.append("authors")
    return missing


def metadata_problems(metadata: NewCrate) -> list[str]:
    problems: list[str] = []
    if not valid_crate_name(metadata.name):
        problems.append(f"invalid crate name specified: {metadata.name}")
    try:
        parse_version(metadata.vers)
    except ValueError:
        problems.append(f"invalid semver: {metadata.vers}")

    for feature, enables in metadata.features.items():
        for value in [feature, *enables]:
            if not valid_feature_name(value):
                problems.append(f"invalid feature name specified: {value}")

    if len(metadata.keywords) > MAX_KEYWORDS:
        problems.append(f"a maximum of {MAX_KEYWORDS} keywords per crate are allowed")
    for keyword in metadata.keywords:
        if not valid_keyword(keyword):
            problems.append(f"invalid keyword specified: {keyword}")

    for dep in metadata.deps:
        if not valid_crate_name(dep.name):
            problems.append(f"invalid dependency name specified: {dep.name}")
        if not valid_version_req(dep.version_req):
            problems.append(f"invalid version requirement specified: {dep.version_req}")
        for feature in dep.features:
            if not valid_feature_name(feature):
                problems.append(f"invalid feature name specified: {feature}")

    for field in ("homepage", "documentation", "repository"):
        problem = url_problem(field, getattr(metadata, field))
        if problem:
            problems.append(problem)

    if metadata.license and metadata.license.strip():
        problem = license_problem(metadata.license)
        if problem:
            problems.append(problem)
    return problems


def parse_upload(body: bytes, *, max_size: int) -> CrateUpload:
    """Split and validate a publish body; every problem found is reported at once."""
    if len(body) > max_size:
        raise ValidationFailed(too_big_message(max_size))

    json_length = _read_length(body, 0, "metadata")
    json_start = _LENGTH.size
    json_end = json_start + json_length
    if len(body) < json_end:
        raise ValidationFailed("invalid upload request: truncated metadata")
    try:
        metadata = NewCrate.from_json(body[json_start:json_end])
    except ValidationError as exc:
        details = [
            f"invalid upload request: {'.'.join(str(part) for part in error['loc']) or 'body'}: {error['msg']}"
            for error in exc.errors()
        ]
        raise ValidationFailed(details) from exc

    declared_length = _read_length(body, json_end, "archive")
    archive = body[json_end + _LENGTH.size:]
    if len(archive) != declared_length:
        raise ValidationFailed(
            f"invalid upload request: archive is {len(archive)} bytes, "
            f"but {declared_length} were declared"
        )

    problems = metadata_problems(metadata)
    missing = missing_metadata_fields(metadata)
    if missing:
        problems.insert(
            0,
            f"missing or empty metadata fields: {', '.join(missing)}. "
            f"Please see {MANIFEST_DOCS_URL} for how to upload metadata",
        )
    if problems:
        raise ValidationFailed(problems)

    license_value = metadata.license.strip() if metadata.license and metadata.license.strip() else None
    if license_value is None and metadata.license_file:
        license_value = NON_STANDARD_LICENSE
    keywords = [keyword.lower() for keyword in metadata.keywords]
    return CrateUpload(
        metadata=metadata,
        archive=archive,
        declared_length=declared_length,
        license=license_value,
        keywords=list(dict.fromkeys(keywords)),
    )


def encode_upload(metadata: dict, archive: bytes) -> bytes:
    """Build a publish body, the inverse of ``parse_upload``."""
    payload = json.dumps(metadata).encode("utf-8")
    return _LENGTH.pack(len(payload)) + payload + _LENGTH.pack(len(archive)) + archive
