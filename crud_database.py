# crud_database.py

from extensions import db
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional
from utils.datetime_utils import utc_now, format_utc_iso


class EntityMixin:
    """Validation state and serialization shared by CRUD-managed models"""
    
    # Columns that request data can never assign
    protected_fields = ('id', 'created', 'modified')
    
    @property
    def errors(self) -> Dict[str, Dict[str, str]]:
        return getattr(self, '_errors', None) or {}
    
    def set_errors(self, errors: Dict[str, Dict[str, str]]) -> None:
        self._errors = dict(errors)
    
    def has_errors(self) -> bool:
        return bool(self.errors)
    
    @classmethod
    def column_names(cls) -> List[str]:
        return [column.name for column in cls.__table__.columns]
    
    @classmethod
    def accessible_fields(cls) -> List[str]:
        """Columns that may be mass-assigned from request data"""
        return [name for name in cls.column_names() if name not in cls.protected_fields]
    
    def to_dict(self, fields: Optional[Iterable[str]] = None) -> Dict[str, Any]:
        result = {}
        for name in fields or self.column_names():
            value = getattr(self, name, None)
            if isinstance(value, datetime):
                value = format_utc_iso(value)
            result[name] = value
        return result


class Blog(EntityMixin, db.Model):
    """Blog post managed through the CRUD actions"""
    __tablename__ = 'blogs'
    
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), nullable=False, index=True)
    body = db.Column(db.Text)
    
    # Timestamps
    created = db.Column(db.DateTime, default=utc_now, nullable=False)
    modified = db.Column(db.DateTime, default=utc_now, onupdate=utc_now)
    
    def __repr__(self):
        return f'<Blog {self.id}: {self.name}>'
