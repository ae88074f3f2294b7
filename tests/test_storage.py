import io

import pytest

from registry_api.storage import (
    STATUS_LENGTH_MISMATCH,
    STATUS_NO_CONTENT,
    STATUS_NOT_FOUND,
    STATUS_OK,
    ArtifactRollbackGuard,
    HashingReader,
    LocalArtifactStore,
    crate_key,
)


def test_crate_key():
    assert crate_key("foo", "1.0.0") == "/crates/foo/foo-1.0.0.crate"


def test_put_get_delete(store):
    key = crate_key("foo", "1.0.0")

    assert store.put(key, io.BytesIO(b"abc"), "application/x-tar", 3) == STATUS_OK
    assert store.get(key) == b"abc"
    assert store.url_for(key) == "http://testserver/crates/foo/foo-1.0.0.crate"
    assert store.delete(key) == STATUS_NO_CONTENT
    assert store.delete(key) == STATUS_NOT_FOUND
    assert store.get(key) is None


@pytest.mark.parametrize("content", [b"ab", b"abcd"])
def test_put_rejects_wrong_length(store, content):
    key = crate_key("foo", "1.0.0")

    assert store.put(key, io.BytesIO(content), "application/x-tar", 3) == STATUS_LENGTH_MISMATCH
    assert store.get(key) is None


def test_keys_cannot_escape_the_root(store):
    with pytest.raises(ValueError):
        store.put("/crates/../../etc/passwd", io.BytesIO(b""), "application/x-tar", 0)
    assert store.get("/crates/../secret") is None


def test_hashing_reader_digests_what_was_read():
    reader = HashingReader(io.BytesIO(b"hello world"))

    assert reader.read(5) == b"hello"
    assert reader.read() == b" world"
    assert reader.bytes_read == 11
    assert reader.hexdigest() == "b94d27b9934d3e08a52e52d7da7dabfac484efe37a5380ee9088f7ace2efcde9"


def test_rollback_guard_deletes_unless_disarmed(tmp_path):
    store = LocalArtifactStore(tmp_path, "http://testserver")
    kept, dropped = crate_key("kept", "1.0.0"), crate_key("dropped", "1.0.0")
    for key in (kept, dropped):
        store.put(key, io.BytesIO(b"x"), "application/x-tar", 1)

    with ArtifactRollbackGuard(store, kept) as guard:
        guard.disarm()
    with pytest.raises(RuntimeError):
        with ArtifactRollbackGuard(store, dropped):
            raise RuntimeError("index push failed")

    assert store.get(kept) == b"x"
    assert store.get(dropped) is None
