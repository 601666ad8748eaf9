"""User account service."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError

from otpcrm.core.exceptions import ConflictError
from otpcrm.models.user import User
from otpcrm.schemas.common import parse_payload
from otpcrm.schemas.team import UserCreate, UserUpdate
from otpcrm.services.base_service import BaseService
from otpcrm.utils.validators import sanitize_fields

logger = logging.getLogger(__name__)

_NOT_NULL_FIELDS = ("username", "email", "role")


class UserService(BaseService):
    def get_user(self, user_id: int) -> User | None:
        return self._get(User, user_id)

    def get_user_by_username(self, username: str) -> User | None:
        return self.db.scalar(select(User).where(User.username == username))

    def get_user_by_email(self, email: str) -> User | None:
        return self.db.scalar(select(User).where(User.email == email))

    def list_users(self) -> list[User]:
        stmt = select(User).order_by(User.id)
        limit = self._default_limit()
        if limit is not None:
            stmt = stmt.limit(limit)
        return self._fetch_all(stmt)

    def create_user(self, data: UserCreate | Mapping[str, Any]) -> User:
        """Create a user; a taken username or email raises ``ConflictError``."""
        payload = sanitize_fields(parse_payload(UserCreate, data).model_dump(), ("full_name",))
        taken = self.db.scalar(
            select(User.id).where(or_(User.username == payload["username"], User.email == payload["email"]))
        )
        if taken is not None:
            raise ConflictError("Username or email is already registered.")
        try:
            user = self._insert(User(**payload))
        except IntegrityError as exc:
            raise ConflictError("Username or email is already registered.") from exc
        logger.info("user.created", extra={"event": "user.created", "user_id": user.id})
        return user

    def update_user(self, user_id: int, data: UserUpdate | Mapping[str, Any]) -> User | None:
        user = self.get_user(user_id)
        if user is None:
            return None
        changes = parse_payload(UserUpdate, data).model_dump(exclude_unset=True)
        for name in _NOT_NULL_FIELDS:
            if name in changes and changes[name] is None:
                changes.pop(name)
        try:
            return self._merge(user, sanitize_fields(changes, ("full_name",)))
        except IntegrityError as exc:
            raise ConflictError("Username or email is already registered.") from exc

    def delete_user(self, user_id: int) -> bool:
        return self._delete(User, user_id)
