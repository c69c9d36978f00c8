"""Unit tests for the :class:`User` model."""

from __future__ import annotations

import pytest
from sqlalchemy.exc import IntegrityError

from channelhub.core.extensions import db
from channelhub.models import User
from tests.factories.user import DEFAULT_PASSWORD, UserFactory


def test_password_is_hashed_and_write_only():
    user = UserFactory(password="Secret1!")

    assert user.password_hash != "Secret1!"
    assert user.verify_password("Secret1!")
    assert not user.verify_password("wrong")
    with pytest.raises(AttributeError):
        _ = user.password


def test_default_factory_password_verifies():
    assert UserFactory().verify_password(DEFAULT_PASSWORD)


def test_empty_password_rejected():
    user = User()
    with pytest.raises(ValueError):
        user.password = ""


def test_username_and_email_normalized():
    user = UserFactory(username="  MixedCase ", email=" Mixed@Example.COM ")

    assert user.username == "mixedcase"
    assert user.email == "mixed@example.com"


def test_invalid_email_rejected():
    with pytest.raises(ValueError):
        User(email="not-an-email")


def test_cover_image_defaults_to_empty_string():
    user = User(
        username="bob",
        email="bob@example.com",
        fullname="Bob",
        avatar="/media/a.png",
        password="Secret1!",
    )
    db.session.add(user)
    db.session.commit()

    assert user.cover_image == ""
    assert user.refresh_token is None
    assert user.created_at is not None


@pytest.mark.parametrize("field", ["username", "email"])
def test_unique_constraints(field):
    first = UserFactory()
    kwargs = {field: getattr(first, field)}

    with pytest.raises(IntegrityError):
        UserFactory(**kwargs)
    db.session.rollback()


def test_repr_shows_id_and_username_only():
    user = UserFactory(username="reprme")
    text = repr(user)
    assert text == f"<User id={user.id} username='reprme'>"
    assert "password" not in text
    assert "refresh" not in text
