from conftest import create_user, error_details, publish


def _owners(client, name="foo"):
    response = client.get(f"/api/v1/crates/{name}/owners")
    assert response.status_code == 200
    return [(owner["login"], owner["kind"]) for owner in response.json()["users"]]


def _add(client, headers, logins, key="owners", name="foo"):
    return client.put(f"/api/v1/crates/{name}/owners", json={key: logins}, headers=headers)


def _remove(client, headers, logins, name="foo"):
    return client.request("DELETE", f"/api/v1/crates/{name}/owners", json={"owners": logins}, headers=headers)


def test_list_owners_of_unknown_crate(client):
    response = client.get("/api/v1/crates/missing/owners")

    assert response.status_code == 404


def test_add_and_remove_user_owner(client):
    alice = create_user("alice")
    bob = create_user("bob")
    publish(client, alice)

    response = _add(client, alice, ["bob"])
    assert response.status_code == 200
    assert response.json() == {"ok": True}
    assert _owners(client) == [("alice", "user"), ("bob", "user")]
    assert publish(client, bob, vers="1.1.0").status_code == 200

    assert _remove(client, alice, ["bob"]).status_code == 200
    assert _owners(client) == [("alice", "user")]
    assert publish(client, bob, vers="1.2.0").status_code == 403


def test_legacy_users_key_is_accepted(client):
    alice = create_user("alice")
    create_user("bob")
    publish(client, alice)

    response = _add(client, alice, ["bob"], key="users")

    assert response.status_code == 200
    assert ("bob", "user") in _owners(client)


def test_invalid_body(client):
    alice = create_user("alice")
    publish(client, alice)

    for body in (b"not json", b"[]", b'{"owners": "bob"}', b'{"other": []}'):
        response = client.put("/api/v1/crates/foo/owners", content=body, headers=alice)
        assert response.status_code == 400
        assert error_details(response) == ["invalid json request"]


def test_adding_existing_owner_conflicts(client):
    alice = create_user("alice")
    create_user("bob")
    publish(client, alice)
    _add(client, alice, ["bob"])

    response = _add(client, alice, ["BOB"])

    assert response.status_code == 409
    assert error_details(response) == ["`BOB` is already an owner"]


def test_adding_unknown_user(client):
    alice = create_user("alice")
    publish(client, alice)

    response = _add(client, alice, ["ghost"])

    assert response.status_code == 404
    assert error_details(response) == ["could not find user with login `ghost`"]


def test_non_owner_cannot_modify(client):
    alice = create_user("alice")
    mallory = create_user("mallory")
    publish(client, alice)

    response = _add(client, mallory, ["mallory"])

    assert response.status_code == 403
    assert error_details(response) == ["only owners have permission to modify owners"]


def test_non_owner_with_invalid_body_is_refused(client):
    alice = create_user("alice")
    mallory = create_user("mallory")
    publish(client, alice)

    for method in ("PUT", "DELETE"):
        response = client.request(method, "/api/v1/crates/foo/owners", content=b"not json", headers=mallory)
        assert response.status_code == 403
        assert error_details(response) == ["only owners have permission to modify owners"]


def test_modify_requires_login(client):
    publish(client, create_user("alice"))

    response = _add(client, {}, ["bob"])

    assert response.status_code == 403
    assert error_details(response) == ["must be logged in to perform that action"]


def test_cannot_remove_self(client):
    alice = create_user("alice")
    publish(client, alice)

    response = _remove(client, alice, ["alice"])

    assert response.status_code == 400
    assert error_details(response) == ["cannot remove yourself as an owner"]


def test_removing_unknown_owner(client):
    alice = create_user("alice")
    publish(client, alice)

    response = _remove(client, alice, ["nobody"])

    assert response.status_code == 404
    assert error_details(response) == ["could not find owner with login `nobody`"]


def test_team_owner_grants_publish_only(client, identity):
    alice = create_user("alice")
    carol = create_user("carol")
    identity.add_team("acme", "devs", 42, ["alice", "carol"])
    publish(client, alice)

    response = _add(client, alice, ["github:acme:devs"])
    assert response.status_code == 200
    assert _owners(client) == [("alice", "user"), ("github:acme:devs", "team")]

    assert publish(client, carol, vers="1.1.0").status_code == 200

    denied = _add(client, carol, ["carol"])
    assert denied.status_code == 403
    assert error_details(denied) == ["team members don't have permission to modify owners"]

    identity.members[42].discard("carol")
    assert publish(client, carol, vers="1.2.0").status_code == 403


def test_team_requires_membership(client, identity):
    alice = create_user("alice")
    identity.add_team("acme", "ops", 7, ["bob"])
    publish(client, alice)

    response = _add(client, alice, ["github:acme:ops"])

    assert response.status_code == 403
    assert error_details(response) == ["only members of a team can add it as an owner"]
    assert _owners(client) == [("alice", "user")]


def test_unknown_team(client):
    alice = create_user("alice")
    publish(client, alice)

    response = _add(client, alice, ["github:acme:ghosts"])

    assert response.status_code == 404


def test_malformed_team_login(client):
    alice = create_user("alice")
    publish(client, alice)

    assert _add(client, alice, ["gitlab:acme:devs"]).status_code == 400
    assert _add(client, alice, ["github:acme"]).status_code == 400
