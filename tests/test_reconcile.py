import pytest
from sqlalchemy.exc import IntegrityError

from registry_api.db.models import Crate, CrateOwner, User
from registry_api.db.session import SessionLocal
from registry_api.repo import crates as crates_repo
from registry_api.repo.crates import ReservedCrateName, find_crate, reconcile_crate
from registry_api.repo.owners import add_owner_row, list_owners, remove_owner_row
from registry_api.repo.reconcile import update_or_insert
from registry_api.repo.users import reconcile_user

from conftest import create_user, error_details, publish


def _fields(**overrides):
    fields = {"description": "desc", "license": "MIT", "keywords": []}
    fields.update(overrides)
    return fields


def _user_id(login: str) -> int:
    create_user(login)
    with SessionLocal() as session:
        return session.query(User).filter_by(gh_login=login).one().id


def test_update_or_insert_inserts_then_updates():
    with SessionLocal() as session, session.begin():
        first = reconcile_user(session, login="alice", access_token="one", name="Alice")
    with SessionLocal() as session, session.begin():
        second = reconcile_user(session, login="alice", access_token="two", name="Alice L.")

    assert first.inserted is True
    assert second.inserted is False
    assert second.row.id == first.row.id
    assert second.row.name == "Alice L."
    assert second.row.gh_access_token == "two"
    assert second.row.api_token == first.row.api_token


def test_update_or_insert_returns_the_updated_row():
    user_id = _user_id("alice")
    with SessionLocal() as session, session.begin():
        result = update_or_insert(
            session,
            User,
            User.id == user_id,
            {"email": "alice@example.com"},
            {"gh_login": "unused", "api_token": "unused"},
        )

    assert result.inserted is False
    assert result.row.email == "alice@example.com"


def test_new_crate_gets_uploader_as_owner():
    user_id = _user_id("alice")
    with SessionLocal() as session, session.begin():
        reconciled = reconcile_crate(session, name="foo", user_id=user_id, fields=_fields())
        owners = list_owners(session, reconciled.row.id)

    assert reconciled.inserted is True
    assert reconciled.row.max_version == "0.0.0"
    assert [owner.login for owner in owners] == ["alice"]


def test_existing_crate_is_matched_canonically():
    user_id = _user_id("alice")
    with SessionLocal() as session, session.begin():
        reconcile_crate(session, name="foo-bar", user_id=user_id, fields=_fields())
    with SessionLocal() as session, session.begin():
        reconciled = reconcile_crate(
            session, name="FOO_BAR", user_id=user_id, fields=_fields(description="changed")
        )

    assert reconciled.inserted is False
    assert reconciled.row.name == "foo-bar"
    assert reconciled.row.description == "changed"


def test_reserved_name_only_blocks_creation():
    user_id = _user_id("alice")
    with SessionLocal() as session, session.begin():
        with pytest.raises(ReservedCrateName):
            reconcile_crate(session, name="Std", user_id=user_id, fields=_fields(), reserved_names=["std"])


def test_canonical_name_is_unique_in_the_store():
    user_id = _user_id("alice")
    with SessionLocal() as session, session.begin():
        reconcile_crate(session, name="foo-bar", user_id=user_id, fields=_fields())

    with SessionLocal() as session:
        with pytest.raises(IntegrityError):
            with session.begin():
                session.add(Crate(name="foo_bar", user_id=user_id))


def test_racing_insert_surfaces_as_conflict(client, monkeypatch):
    headers = create_user("alice")
    assert publish(client, headers).status_code == 200

    # the update misses as if the row did not exist yet when it ran
    monkeypatch.setattr(crates_repo, "update_existing", lambda *args, **kwargs: None)
    response = publish(client, headers, vers="1.0.1")

    assert response.status_code == 409
    assert error_details(response) == ["crate `foo` was claimed by a concurrent upload, please retry"]
    with SessionLocal() as session:
        assert find_crate(session, "foo").max_version == "1.0.0"


def test_owner_rows_are_soft_deleted_and_revived():
    alice = _user_id("alice")
    bob = _user_id("bob")
    with SessionLocal() as session, session.begin():
        crate = reconcile_crate(session, name="foo", user_id=alice, fields=_fields()).row
        add_owner_row(session, crate_id=crate.id, owner_id=bob, owner_kind=0, created_by=alice)
        assert remove_owner_row(session, crate_id=crate.id, owner_id=bob, owner_kind=0) is True
        assert remove_owner_row(session, crate_id=crate.id, owner_id=bob, owner_kind=0) is False
        assert [owner.login for owner in list_owners(session, crate.id)] == ["alice"]

        revived = add_owner_row(session, crate_id=crate.id, owner_id=bob, owner_kind=0, created_by=alice)
        assert revived.inserted is False
        assert [owner.login for owner in list_owners(session, crate.id)] == ["alice", "bob"]
        assert session.query(CrateOwner).count() == 2
