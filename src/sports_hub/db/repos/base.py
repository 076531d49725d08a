from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Generic, TypeVar

from sqlalchemy import delete, func, select
from sqlalchemy.orm import Session
from sqlalchemy.sql.elements import ColumnElement

from sports_hub.db.base import Base

ModelT = TypeVar("ModelT", bound=Base)


class BaseRepository(Generic[ModelT]):
    def __init__(self, session: Session, model: type[ModelT]) -> None:
        self.session = session
        self.model = model

    def add(self, obj: ModelT, *, flush: bool = True) -> ModelT:
        self.session.add(obj)
        if flush:
            self.session.flush()  # assigns PKs, etc.
        return obj

    def first_where(self, *predicates: ColumnElement[bool]) -> ModelT | None:
        stmt = select(self.model).where(*predicates).limit(1)
        return self.session.execute(stmt).scalars().first()

    def list_where(self, *predicates: ColumnElement[bool], order_by: Any = None) -> list[ModelT]:
        stmt = select(self.model).where(*predicates)
        if order_by is not None:
            stmt = stmt.order_by(order_by)
        return list(self.session.execute(stmt).scalars().all())

    def count_where(self, *predicates: ColumnElement[bool]) -> int:
        stmt = select(func.count()).select_from(self.model).where(*predicates)
        return int(self.session.execute(stmt).scalar_one())

    def delete_where(self, *predicates: ColumnElement[bool]) -> int:
        result = self.session.execute(delete(self.model).where(*predicates))
        return int(result.rowcount or 0)

    def patch(self, obj: ModelT, changes: Mapping[str, Any], *, flush: bool = True) -> ModelT:
        for k, v in changes.items():
            if v is None:
                continue
            setattr(obj, k, v)
        if flush:
            self.session.flush()
        return obj
