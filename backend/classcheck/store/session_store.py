"""SQLAlchemy-backed document store for courses, sessions and check-ins.

The store is an explicit handle: ``create_app`` builds it, calls ``init()``
and hands it to every service. Rows come back as model instances; change
events carry ``row.to_dict()`` and are published only after a commit
succeeds, in commit order.
"""
import logging
import threading
from contextlib import contextmanager
from typing import Any, Callable, Dict, Iterable, List, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from classcheck.models import AttendanceSession, CheckIn, Course, Enrollment, User
from classcheck.store.base import ChangeEvent, Eq, EventType, In, Tables
from classcheck.utils.exceptions import (
    NotFound, QueryNotSupported, StoreError, StoreUnavailable, UniqueViolation
)

logger = logging.getLogger(__name__)

MODELS = {
    Tables.USERS: User,
    Tables.COURSES: Course,
    Tables.ENROLLMENTS: Enrollment,
    Tables.SESSIONS: AttendanceSession,
    Tables.CHECK_INS: CheckIn,
}


class SessionStore:
    """Store handle with create/get/update/list/delete/subscribe."""

    def __init__(self, db, bus):
        self._db = db
        self._bus = bus
        self._local = threading.local()

    # --- lifecycle ---------------------------------------------------

    def init(self) -> None:
        self._bus.start()

    def close(self) -> None:
        self._bus.stop()
        self._db.session.remove()

    @property
    def bus(self):
        return self._bus

    # --- writes ------------------------------------------------------

    def create(self, table: str, fields: Dict[str, Any], row_id: Optional[int] = None):
        model = self._model(table)
        row = model(**fields)
        if row_id is not None:
            row.id = row_id

        with self.transaction():
            self._db.session.add(row)
            self._db.session.flush()
            self._record(EventType.CREATE, table, row.to_dict())
        return row

    def update(self, table: str, row_id: int, fields: Dict[str, Any]):
        with self.transaction():
            row = self.get(table, row_id)
            for key, value in fields.items():
                if key not in row.__table__.columns:
                    raise StoreError(f"{table} has no field {key}", table=table, field=key)
                setattr(row, key, value)
            self._db.session.flush()
            self._record(EventType.UPDATE, table, row.to_dict())
        return row

    def delete(self, table: str, row_id: int) -> None:
        with self.transaction():
            row = self.get(table, row_id)
            payload = row.to_dict()
            self._db.session.delete(row)
            self._db.session.flush()
            self._record(EventType.DELETE, table, payload)

    @contextmanager
    def transaction(self):
        """Group writes into one commit. Nested use joins the outer one."""
        state = self._state()
        if state.depth:
            state.depth += 1
            try:
                yield self
            finally:
                state.depth -= 1
            return

        state.depth = 1
        try:
            yield self
            self._db.session.commit()
        except IntegrityError as e:
            self._rollback(state)
            raise UniqueViolation(str(e.orig)) from e
        except SQLAlchemyError as e:
            self._rollback(state)
            logger.error("Store write failed: %s", e)
            raise StoreUnavailable() from e
        except BaseException:
            self._rollback(state)
            raise
        finally:
            state.depth = 0

        events, state.pending = state.pending, []
        for event in events:
            try:
                self._bus.publish(event)
            except Exception:
                # committed rows stand; subscribers catch up on resync
                logger.exception("Publishing %s event on %s failed", event.event_type.value, event.topic)

    # --- reads -------------------------------------------------------

    def get(self, table: str, row_id: int):
        model = self._model(table)
        try:
            row = self._db.session.get(model, row_id)
        except SQLAlchemyError as e:
            logger.error("Store read failed: %s", e)
            raise StoreUnavailable() from e

        if row is None:
            raise NotFound(f"{table} row {row_id} not found", table=table, id=row_id)
        return row

    def list(self, table: str, filters: Iterable = (), order_by: Optional[str] = None) -> List:
        model = self._model(table)
        query = self._query(table, filters)

        # '-field' sorts descending; id breaks ties in insertion order
        clauses = []
        for field in ([order_by] if order_by else []):
            column = self._column(model, field.lstrip('-'))
            clauses.append(column.desc() if field.startswith('-') else column.asc())
        clauses.append(model.id.asc())
        query = query.order_by(*clauses)

        try:
            return query.all()
        except SQLAlchemyError as e:
            logger.error("Store read failed: %s", e)
            raise StoreUnavailable() from e

    def count(self, table: str, filters: Iterable = ()) -> int:
        query = self._query(table, filters)
        try:
            return query.count()
        except SQLAlchemyError as e:
            logger.error("Store read failed: %s", e)
            raise StoreUnavailable() from e

    # --- realtime ----------------------------------------------------

    def subscribe(self, topic: str, callback: Callable[[ChangeEvent], None]) -> Callable[[], None]:
        """Listen for committed changes on a table. Returns a detach callable."""
        self._model(topic)
        return self._bus.subscribe(topic, callback)

    # --- internals ---------------------------------------------------

    def _query(self, table: str, filters: Iterable):
        model = self._model(table)
        query = model.query
        for f in filters:
            if isinstance(f, Eq):
                query = query.filter(self._column(model, f.field) == f.value)
            elif isinstance(f, In):
                query = query.filter(self._column(model, f.field).in_(list(f.values)))
            else:
                raise QueryNotSupported(f"Unsupported filter {f!r}", table=table)
        return query

    @staticmethod
    def _model(table: str):
        try:
            return MODELS[table]
        except KeyError:
            raise StoreError(f"Unknown table {table}", table=table) from None

    @staticmethod
    def _column(model, field: str):
        if field not in model.__table__.columns:
            raise QueryNotSupported(f"{model.__tablename__} has no field {field}", field=field)
        return getattr(model, field)

    def _state(self):
        if not hasattr(self._local, 'depth'):
            self._local.depth = 0
            self._local.pending = []
        return self._local

    def _record(self, event_type: EventType, table: str, payload: Dict[str, Any]) -> None:
        self._state().pending.append(ChangeEvent(event_type, table, payload))

    def _rollback(self, state) -> None:
        state.pending = []
        self._db.session.rollback()
