"""
BlogRepository - Data access layer for Blog model
"""

from typing import List, Optional
from sqlalchemy import or_
from repositories.base_repository import BaseRepository
from repositories.validation import Validator, min_length
from crud_database import Blog


class BlogRepository(BaseRepository):
    """Repository for Blog data access"""
    
    NAME_MIN_LENGTH = 10
    
    def __init__(self, session):
        """Initialize repository with database session"""
        super().__init__(session, Blog)
    
    def validation_default(self, validator: Validator) -> Validator:
        """A blog needs a non-empty name of at least 10 characters"""
        return validator\
            .require_presence('name')\
            .not_empty('name', message='Name cannot be empty')\
            .add(
                'name', 'length', min_length(self.NAME_MIN_LENGTH),
                message=f'Name need to be at least {self.NAME_MIN_LENGTH} characters long'
            )
    
    def search(self, query: str, fields: Optional[List[str]] = None) -> List[Blog]:
        """
        Search blogs by name or body.
        
        Args:
            query: Text to look for
            fields: Fields to search in (defaults to name and body)
            
        Returns:
            List of matching Blog objects
        """
        if not query:
            return []
        
        fields = fields or ['name', 'body']
        conditions = [
            getattr(self.model_class, field).ilike(f'%{query}%')
            for field in fields if hasattr(self.model_class, field)
        ]
        if not conditions:
            return []
        
        return self.session.query(self.model_class)\
            .filter(or_(*conditions))\
            .order_by(self.model_class.id.asc())\
            .all()