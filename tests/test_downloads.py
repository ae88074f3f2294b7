from concurrent.futures import ThreadPoolExecutor
from datetime import date, datetime, timedelta, timezone

from registry_api.db.session import SessionLocal
from registry_api.repo.crates import find_crate
from registry_api.repo.downloads import record_download, total_downloads, version_downloads_for_crate
from registry_api.repo.versions import find_version

from conftest import create_user, error_details, publish


def _version_id(name="foo", num="1.0.0") -> int:
    with SessionLocal() as session:
        crate = find_crate(session, name)
        return find_version(session, crate.id, num).id


def test_download_redirects_to_artifact(client):
    publish(client, create_user("alice"), archive=b"archive contents")

    response = client.get("/api/v1/crates/foo/1.0.0/download", follow_redirects=False)

    assert response.status_code == 302
    location = response.headers["location"]
    assert location == "http://testserver/crates/foo/foo-1.0.0.crate"

    artifact = client.get("/crates/foo/foo-1.0.0.crate")
    assert artifact.status_code == 200
    assert artifact.content == b"archive contents"


def test_download_returns_json_url(client):
    publish(client, create_user("alice"))

    response = client.get("/api/v1/crates/Foo/1.0.0/download", headers={"Accept": "application/json"})

    assert response.status_code == 200
    assert response.json() == {"url": "http://testserver/crates/foo/foo-1.0.0.crate"}


def test_download_of_unknown_version(client):
    publish(client, create_user("alice"))

    for path in ("/api/v1/crates/foo/2.0.0/download", "/api/v1/crates/bar/1.0.0/download"):
        response = client.get(path, follow_redirects=False)
        assert response.status_code == 404
        assert error_details(response) == ["crate or version not found"]


def test_downloads_are_counted_per_day(client):
    publish(client, create_user("alice"))
    for _ in range(3):
        client.get("/api/v1/crates/foo/1.0.0/download", follow_redirects=False)

    response = client.get("/api/v1/crates/foo/downloads")

    assert response.status_code == 200
    rows = response.json()["version_downloads"]
    assert len(rows) == 1
    assert rows[0]["version"] == _version_id()
    assert rows[0]["downloads"] == 3
    assert rows[0]["date"] == datetime.now(timezone.utc).date().isoformat()


def test_concurrent_downloads_keep_a_positive_counter(client):
    publish(client, create_user("alice"))
    attempts = 16

    def download(_):
        return client.get("/api/v1/crates/foo/1.0.0/download", follow_redirects=False).status_code

    with ThreadPoolExecutor(max_workers=8) as pool:
        statuses = list(pool.map(download, range(attempts)))

    assert statuses == [302] * attempts
    with SessionLocal() as session:
        crate = find_crate(session, "foo")
        rows = version_downloads_for_crate(session, crate.id)
        assert rows
        assert all(row.downloads >= 1 for row in rows)
        assert 1 <= total_downloads(session, _version_id()) <= attempts


def test_record_download_inserts_then_increments(client):
    publish(client, create_user("alice"))
    version_id = _version_id()
    day = date(2026, 10, 1)

    with SessionLocal() as session, session.begin():
        assert record_download(session, version_id, day) is True
        assert record_download(session, version_id, day) is False
        assert record_download(session, version_id, day + timedelta(days=1)) is True

    with SessionLocal() as session:
        assert total_downloads(session, version_id) == 3
        crate = find_crate(session, "foo")
        recent = version_downloads_for_crate(session, crate.id, today=day + timedelta(days=1))
        assert [(row.date, row.downloads) for row in recent] == [
            (day, 2),
            (day + timedelta(days=1), 1),
        ]
        old = version_downloads_for_crate(session, crate.id, today=day + timedelta(days=200))
        assert old == []


def test_missing_artifact(client):
    response = client.get("/crates/foo/foo-1.0.0.crate")

    assert response.status_code == 404
