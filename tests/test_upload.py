import struct

import pytest

from registry_api.errors import ValidationFailed
from registry_api.upload import encode_upload, parse_upload, read_limited_body

from conftest import crate_body


def test_parse_upload_splits_metadata_and_archive():
    upload = parse_upload(crate_body(archive=b"tarball", keywords=["CLI", "cli", "Parser"]), max_size=4096)

    assert upload.name == "foo"
    assert upload.version == "1.0.0"
    assert upload.archive == b"tarball"
    assert upload.declared_length == 7
    assert upload.keywords == ["cli", "parser"]
    assert upload.license == "MIT"


def test_body_over_limit():
    with pytest.raises(ValidationFailed) as excinfo:
        parse_upload(crate_body(archive=b"x" * 100), max_size=64)

    assert excinfo.value.details == ["max upload size is: 64"]


@pytest.mark.parametrize(
    "body",
    [
        b"",
        b"\x01\x00",
        struct.pack("<I", 100) + b"{}",
    ],
)
def test_truncated_bodies(body):
    with pytest.raises(ValidationFailed):
        parse_upload(body, max_size=4096)


def test_metadata_must_be_json_object():
    body = struct.pack("<I", 5) + b"nope!" + struct.pack("<I", 0)

    with pytest.raises(ValidationFailed) as excinfo:
        parse_upload(body, max_size=4096)

    assert excinfo.value.details[0].startswith("invalid upload request")


def test_unknown_dependency_kind_is_rejected():
    body = crate_body(deps=[{"name": "bar", "version_req": "1", "kind": "optional"}])

    with pytest.raises(ValidationFailed):
        parse_upload(body, max_size=4096)


def test_all_problems_are_collected():
    body = encode_upload(
        {
            "name": "foo bar",
            "vers": "1.0.0",
            "authors": ["a"],
            "description": "d",
            "license": "MIT",
            "features": {"bad feature": []},
            "deps": [{"name": "baz", "version_req": "not a req"}],
            "documentation": "docs.example.com",
        },
        b"",
    )

    with pytest.raises(ValidationFailed) as excinfo:
        parse_upload(body, max_size=4096)

    assert excinfo.value.details == [
        "invalid crate name specified: foo bar",
        "invalid feature name specified: bad feature",
        "invalid version requirement specified: not a req",
        "`documentation` is not a valid url: `docs.example.com`",
    ]


async def _chunks(count: int, size: int):
    for _ in range(count):
        yield b"x" * size


@pytest.mark.asyncio
async def test_read_limited_body():
    assert await read_limited_body(_chunks(5, 10), 50) == b"x" * 50

    with pytest.raises(ValidationFailed) as excinfo:
        await read_limited_body(_chunks(10, 10), 50)
    assert excinfo.value.details == ["max upload size is: 50"]
