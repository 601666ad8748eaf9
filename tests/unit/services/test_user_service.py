from __future__ import annotations

import pytest

from otpcrm.core.exceptions import ConflictError, ValidationError
from otpcrm.services.user_service import UserService


def test_create_and_lookup_user(session):
    service = UserService(db=session)

    user = service.create_user({"username": "riley", "email": "riley@example.com", "fullName": "Riley R"})

    assert service.get_user(user.id).full_name == "Riley R"
    assert service.get_user_by_username("riley").id == user.id
    assert service.get_user_by_email("riley@example.com").id == user.id
    assert user.role == "caller"


def test_duplicate_username_raises_conflict(session):
    service = UserService(db=session)
    service.create_user({"username": "riley", "email": "riley@example.com"})

    with pytest.raises(ConflictError):
        service.create_user({"username": "riley", "email": "other@example.com"})


def test_update_to_taken_email_raises_conflict(session):
    service = UserService(db=session)
    service.create_user({"username": "a", "email": "a@example.com"})
    second = service.create_user({"username": "b", "email": "b@example.com"})

    with pytest.raises(ConflictError):
        service.update_user(second.id, {"email": "a@example.com"})


def test_update_and_delete_user(session):
    service = UserService(db=session)
    user = service.create_user({"username": "m", "email": "m@example.com"})

    assert service.update_user(user.id, {"role": "manager"}).role == "manager"
    assert service.update_user(999, {"role": "manager"}) is None
    assert [row.username for row in service.list_users()] == ["m"]
    assert service.delete_user(user.id) is True
    assert service.delete_user(user.id) is False


def test_unknown_role_is_rejected(session):
    with pytest.raises(ValidationError):
        UserService(db=session).create_user({"username": "x", "email": "x@example.com", "role": "owner"})
