import hashlib
import json

import pytest
from git import Actor, Repo

from registry_api.index import GitIndex

from conftest import create_user, publish, requires_git

pytestmark = requires_git

ACTOR = Actor("tests", "tests@example.com")


@pytest.fixture
def remote(tmp_path):
    bare = Repo.init(tmp_path / "index.git", bare=True)
    seed = Repo.clone_from(bare.git_dir, str(tmp_path / "seed"))
    (tmp_path / "seed" / "config.json").write_text('{"dl":"http://testserver/crates"}\n', encoding="utf-8")
    seed.index.add(["config.json"])
    seed.index.commit("Initial index", author=ACTOR, committer=ACTOR)
    seed.git.push("origin", "HEAD:refs/heads/master")
    return bare


@pytest.fixture
def index(tmp_path, remote):
    Repo.clone_from(remote.git_dir, str(tmp_path / "checkout"), branch="master")
    return GitIndex(tmp_path / "checkout", branch="master", attempts=3)


def test_publish_and_yank_through_git(client, remote):
    alice = create_user("alice")
    archive = b"git backed release"

    assert publish(client, alice, name="my-crate", archive=archive).status_code == 200
    entry = json.loads(remote.git.show("master:my/-c/my-crate"))
    assert entry["vers"] == "1.0.0"
    assert entry["cksum"] == hashlib.sha256(archive).hexdigest()

    assert client.delete("/api/v1/crates/my-crate/1.0.0/yank", headers=alice).status_code == 200
    assert json.loads(remote.git.show("master:my/-c/my-crate"))["yanked"] is True
    assert remote.git.log("-1", "--format=%s", "master") == "Yanking crate `my-crate#1.0.0`"
