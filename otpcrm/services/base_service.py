"""Shared service base with robust session lifecycle behavior."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, TypeVar

from sqlalchemy import Select
from sqlalchemy.orm import Session

from otpcrm.core.config import get_config
from otpcrm.database import db as db_module
from otpcrm.models.base import Base

ModelT = TypeVar("ModelT", bound=Base)


class BaseService:
    """Base class for services that operate on a SQLAlchemy session."""

    def __init__(self, db: Session | None = None) -> None:
        self.db = db or db_module.new_session()

    def commit(self) -> None:
        """Commit current transaction and rollback on failure."""
        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

    def rollback(self) -> None:
        self.db.rollback()

    def close(self) -> None:
        self.db.close()

    def _get(self, model: type[ModelT], pk: int) -> ModelT | None:
        return self.db.get(model, pk)

    def _insert(self, row: ModelT) -> ModelT:
        self.db.add(row)
        self.commit()
        self.db.refresh(row)
        return row

    def _merge(self, row: ModelT, changes: Mapping[str, Any]) -> ModelT:
        for field_name, value in changes.items():
            setattr(row, field_name, value)
        self.commit()
        self.db.refresh(row)
        return row

    def _delete(self, model: type[ModelT], pk: int) -> bool:
        row = self._get(model, pk)
        if row is None:
            return False
        self.db.delete(row)
        self.commit()
        return True

    def _fetch_all(self, stmt: Select[Any]) -> list[Any]:
        return list(self.db.scalars(stmt).all())

    @staticmethod
    def _default_limit() -> int | None:
        return get_config().default_list_limit

    def __enter__(self) -> "BaseService":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if exc_type:
            self.rollback()
        self.close()
