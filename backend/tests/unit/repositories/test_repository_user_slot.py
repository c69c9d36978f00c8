"""Unit tests for :class:`UserRepository` lookups and the refresh-token slot."""

from __future__ import annotations

import pytest

from channelhub.core.extensions import db
from channelhub.models import User
from channelhub.repositories.user import UserRepository
from tests.factories.user import UserFactory


@pytest.fixture()
def repo() -> UserRepository:
    return UserRepository(session=db.session)


def _stored_token(user_id: int) -> str | None:
    db.session.expire_all()
    return db.session.get(User, user_id).refresh_token


class TestLookups:
    def test_get_by_username_is_case_insensitive(self, repo):
        user = UserFactory(username="carol")
        assert repo.get_by_username("  CAROL ").id == user.id

    def test_get_by_username_or_email(self, repo):
        user = UserFactory(username="dave", email="dave@example.com")

        assert repo.get_by_username_or_email(email="DAVE@example.com").id == user.id
        assert repo.get_by_username_or_email(username="dave", email=None).id == user.id
        assert repo.get_by_username_or_email(username="", email="  ") is None

    def test_exists_by_username_or_email(self, repo):
        UserFactory(username="erin", email="erin@example.com")

        assert repo.exists_by_username_or_email(username="ERIN", email="x@example.com")
        assert repo.exists_by_username_or_email(username="nobody", email="erin@example.com")
        assert not repo.exists_by_username_or_email(username="nobody", email="x@example.com")

    def test_email_taken_by_other(self, repo):
        a = UserFactory(email="a@example.com")
        b = UserFactory()

        assert repo.email_taken_by_other("a@example.com", user_id=b.id)
        assert not repo.email_taken_by_other("a@example.com", user_id=a.id)

    def test_updates_are_whitelisted(self, repo):
        user = UserFactory()
        with pytest.raises(ValueError, match="non-updatable"):
            repo.assign_updates(user, {"refresh_token": "x"})
        with pytest.raises(ValueError):
            repo.assign_updates(user, {"password_hash": "x"})


class TestRefreshSlot:
    def test_get_refresh_token_reports_missing_user(self, repo):
        assert repo.get_refresh_token(9999) == (False, None)

    def test_set_and_clear(self, repo):
        user = UserFactory()

        assert repo.set_refresh_token(user.id, "rt-1")
        db.session.commit()
        assert _stored_token(user.id) == "rt-1"

        assert repo.set_refresh_token(user.id, None)
        db.session.commit()
        assert _stored_token(user.id) is None

    def test_set_on_missing_user_returns_false(self, repo):
        assert repo.set_refresh_token(4242, "rt") is False

    def test_swap_only_when_expected_matches(self, repo):
        user = UserFactory(refresh_token="rt-1")

        assert repo.swap_refresh_token(user.id, expected="rt-1", new="rt-2")
        # A second swap from the same predecessor loses
        assert not repo.swap_refresh_token(user.id, expected="rt-1", new="rt-3")
        db.session.commit()
        assert _stored_token(user.id) == "rt-2"
