"""Unit tests for the SQLAlchemy units of work."""

from __future__ import annotations

import pytest
from sqlalchemy import text

from channelhub.models import User
from channelhub.uow import SQLAlchemyReadOnlyUnitOfWork, SQLAlchemyUnitOfWork
from tests.factories.user import UserFactory


def test_rw_uow_commits_on_clean_exit(db):
    with SQLAlchemyUnitOfWork() as uow:
        uow.users.add(
            User(username="dora", email="dora@example.com", fullname="Dora", avatar="a.png", password="x")
        )

    db.session.expire_all()
    assert db.session.query(User).filter_by(username="dora").count() == 1


def test_rw_uow_rolls_back_on_error(db):
    with pytest.raises(LookupError):
        with SQLAlchemyUnitOfWork() as uow:
            uow.users.add(
                User(username="erin", email="erin@example.com", fullname="Erin", avatar="a.png", password="x")
            )
            raise LookupError("boom")

    assert db.session.query(User).filter_by(username="erin").count() == 0


def test_ro_uow_allows_reads():
    user = UserFactory()

    with SQLAlchemyReadOnlyUnitOfWork() as uow:
        assert uow.users.get_by_username(user.username).id == user.id
        assert uow.profiles.user_exists(user.id)


def test_ro_uow_blocks_orm_flush():
    user = UserFactory()

    with pytest.raises(RuntimeError, match="flush blocked"):
        with SQLAlchemyReadOnlyUnitOfWork() as uow:
            loaded = uow.users.get(user.id)
            loaded.fullname = "Changed"
            uow.session.flush()


def test_ro_uow_blocks_raw_dml():
    user = UserFactory()

    with pytest.raises(RuntimeError, match="SQL statement blocked"):
        with SQLAlchemyReadOnlyUnitOfWork() as uow:
            uow.session.execute(text("UPDATE users SET fullname = 'x' WHERE id = :id"), {"id": user.id})


def test_ro_uow_discards_pending_changes(db):
    user = UserFactory(fullname="Original")

    with SQLAlchemyReadOnlyUnitOfWork() as uow:
        uow.users.get(user.id).fullname = "Never saved"

    db.session.expire_all()
    assert db.session.get(User, user.id).fullname == "Original"


def test_ro_uow_disallows_commit():
    with pytest.raises(RuntimeError, match="does not allow commit"):
        with SQLAlchemyReadOnlyUnitOfWork() as uow:
            uow.commit()


def test_ro_uow_removes_guards_on_exit(db):
    user = UserFactory()
    with SQLAlchemyReadOnlyUnitOfWork():
        pass

    # Writes work again once the read-only scope is closed
    with SQLAlchemyUnitOfWork() as uow:
        uow.users.get(user.id).fullname = "Renamed"

    db.session.expire_all()
    assert db.session.get(User, user.id).fullname == "Renamed"


def test_ro_uow_opens_on_fresh_flask_session(db):
    user = UserFactory()
    db.session.remove()
    assert not db.session().in_transaction()

    with SQLAlchemyReadOnlyUnitOfWork() as uow:
        assert uow.session is db.session
        assert uow.users.get_by_username(user.username).id == user.id

    assert not db.session().in_transaction()


def test_ro_uow_joins_open_transaction(db):
    user = UserFactory()
    db.session.execute(text("SELECT 1"))
    assert db.session().in_transaction()

    with SQLAlchemyReadOnlyUnitOfWork() as uow:
        assert uow.users.get(user.id).username == user.username
