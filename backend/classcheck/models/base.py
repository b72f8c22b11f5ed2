"""Declarative base shared by every ClassCheck table."""
from datetime import datetime
from typing import Any, Dict, Iterable, Optional
from classcheck import db

def serialize(value: Any) -> Any:
    """JSON-safe form of a column value."""
    if isinstance(value, datetime):
        return value.isoformat()
    return value

class BaseModel(db.Model):
    """Integer id plus audit timestamps.

    ``to_dict`` is both the API representation and the payload the store
    publishes in change events, so it must stay JSON-serializable. Computed
    properties named in ``extra_fields`` are appended after the columns.
    """
    
    __abstract__ = True
    
    extra_fields: tuple = ()
    
    id = db.Column(db.Integer, primary_key=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
    
    def to_dict(self, exclude: Optional[Iterable[str]] = None) -> Dict[str, Any]:
        skip = set(exclude or ())
        data = {
            column.name: serialize(getattr(self, column.name))
            for column in self.__table__.columns
            if column.name not in skip
        }
        for name in self.extra_fields:
            if name not in skip:
                data[name] = getattr(self, name)
        return data
    
    def __repr__(self) -> str:
        return f'<{self.__class__.__name__} {self.id}>'
