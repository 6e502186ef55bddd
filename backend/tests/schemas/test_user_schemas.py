"""User schemas — credential validation and the password-free projection."""

from datetime import datetime, timezone
from uuid import uuid4

import pytest
from pydantic import ValidationError

from chatroom.schemas.user import SafeUser, UserCredentials, UserUpdate


def test_credentials_require_non_empty_strings():
    with pytest.raises(ValidationError):
        UserCredentials(username="", password="pw1")
    with pytest.raises(ValidationError):
        UserCredentials(username="alice", password="")


def test_credentials_do_not_coerce_numbers():
    with pytest.raises(ValidationError):
        UserCredentials.model_validate({"username": 123, "password": "pw1"})


def test_update_patch_contains_only_set_fields():
    assert UserUpdate(password="x").patch() == {"password": "x"}
    assert UserUpdate().patch() == {}
    assert UserUpdate(username="bob", password=None).patch() == {"username": "bob"}


def test_safe_user_ignores_password_and_serializes_camel_case():
    user_id = uuid4()
    joined = datetime(2024, 6, 4, tzinfo=timezone.utc)

    user = SafeUser.model_validate({
        "id": user_id, "username": "alice", "password": "pw1", "date_joined": joined,
    })

    assert user.model_dump(by_alias=True) == {
        "_id": user_id, "username": "alice", "dateJoined": joined,
    }


def test_safe_user_accepts_alias_names():
    joined = datetime(2024, 6, 4, tzinfo=timezone.utc)
    user = SafeUser.model_validate({"username": "alice", "dateJoined": joined})
    assert user.date_joined == joined
    assert user.id is None
