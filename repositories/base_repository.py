"""
Base Repository - Abstract base class for all repositories
Implements common database operations and the validate-then-save entity workflow
"""

from abc import ABC, abstractmethod
from typing import TypeVar, Generic, List, Optional, Dict, Any, Type, Mapping
from sqlalchemy.orm import Session, Query
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy import desc, asc
from dataclasses import dataclass
from enum import Enum
import logging

from repositories.validation import Validator

logger = logging.getLogger(__name__)

# Type variable for model classes
T = TypeVar('T')


class SortOrder(Enum):
    """Sort order options"""
    ASC = "asc"
    DESC = "desc"


@dataclass
class PaginationParams:
    """Parameters for pagination"""
    page: int = 1
    per_page: int = 20

    @property
    def offset(self) -> int:
        """Calculate offset for query"""
        return (self.page - 1) * self.per_page

    @property
    def limit(self) -> int:
        """Get limit for query"""
        return self.per_page


@dataclass
class PaginatedResult(Generic[T]):
    """Result of a paginated query"""
    items: List[T]
    total: int
    page: int
    per_page: int

    @property
    def pages(self) -> int:
        """Calculate total number of pages"""
        return (self.total + self.per_page - 1) // self.per_page if self.per_page > 0 else 0

    @property
    def has_prev(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.page < self.pages

    def to_dict(self) -> Dict[str, Any]:
        return {
            'page': self.page,
            'per_page': self.per_page,
            'total': self.total,
            'pages': self.pages,
            'has_prev': self.has_prev,
            'has_next': self.has_next
        }


class BaseRepository(ABC, Generic[T]):
    """
    Abstract base repository with common CRUD operations.

    Besides plain queries it owns the entity workflow the CRUD actions rely
    on: build an entity from request data, validate it, then save it. A save
    never raises for invalid input or database errors; it returns None.
    """

    def __init__(self, session: Session, model_class: Type[T]):
        """
        Initialize repository with database session and model class.

        Args:
            session: SQLAlchemy database session
            model_class: The model class this repository manages
        """
        self.session = session
        self.model_class = model_class
        self._validator: Optional[Validator] = None

    # Validation

    def validator(self) -> Validator:
        """Validator used by new_entity/patch_entity, built on first use"""
        if self._validator is None:
            self._validator = self.validation_default(Validator())
        return self._validator

    def validation_default(self, validator: Validator) -> Validator:
        """Hook for subclasses to declare their default rules"""
        return validator

    def _accessible(self, data: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
        if not data:
            return {}
        allowed = self.model_class.accessible_fields()
        return {key: value for key, value in data.items() if key in allowed}

    # Entity workflow

    def new_entity(self, data: Optional[Mapping[str, Any]] = None, validate: bool = True) -> T:
        """
        Build an unsaved entity from request data.

        Args:
            data: Submitted values; keys that are not accessible are ignored
            validate: Attach validation errors to the entity

        Returns:
            New (transient) entity instance
        """
        values = self._accessible(data)
        entity = self.model_class(**values)
        if validate:
            entity.set_errors(self.validator().errors(values, new_record=True))
        return entity

    def patch_entity(self, entity: T, data: Optional[Mapping[str, Any]], validate: bool = True) -> T:
        """
        Assign request data to an existing entity.

        Args:
            entity: Persisted entity
            data: Submitted values; keys that are not accessible are ignored
            validate: Attach validation errors to the entity

        An entity that fails validation is detached from the session, so its
        rejected values stay on the object for re-rendering but are never
        flushed by a later commit.
        """
        values = self._accessible(data)
        for field, value in values.items():
            setattr(entity, field, value)
        if validate:
            entity.set_errors(self.validator().errors(values, new_record=False))
            if entity.has_errors():
                self.discard(entity)
        return entity

    def save(self, entity: T) -> Optional[T]:
        """
        Persist an entity.

        Returns:
            The saved entity, or None when it has validation errors or the
            database rejected the write
        """
        if entity.has_errors():
            logger.debug(f"Refusing to save {self.model_class.__name__} with validation errors")
            self.discard(entity)
            return None

        try:
            self.session.add(entity)
            self.session.commit()
            logger.debug(f"Saved {self.model_class.__name__} with id {entity.id}")
            return entity
        except SQLAlchemyError as e:
            logger.error(f"Error saving {self.model_class.__name__}: {e}")
            self.session.rollback()
            return None

    # READ Operations

    def get_by_id(self, entity_id: int) -> Optional[T]:
        """
        Get entity by ID.

        Args:
            entity_id: Entity ID

        Returns:
            Entity instance or None if not found
        """
        try:
            return self.session.get(self.model_class, entity_id)
        except SQLAlchemyError as e:
            logger.error(f"Error getting {self.model_class.__name__} by id {entity_id}: {e}")
            return None

    def find(self, entity_id: int) -> Optional[T]:
        """Lookup used by the view/edit/delete actions"""
        return self.get_by_id(entity_id)

    def get_all(self, order_by: Optional[str] = None,
                order: SortOrder = SortOrder.ASC) -> List[T]:
        """
        Get all entities with optional ordering.

        Args:
            order_by: Field name to order by
            order: Sort order (ASC or DESC)
        """
        try:
            query = self.session.query(self.model_class)

            if order_by:
                order_field = getattr(self.model_class, order_by, None)
                if order_field is not None:
                    query = query.order_by(
                        desc(order_field) if order == SortOrder.DESC else asc(order_field)
                    )

            return query.all()
        except SQLAlchemyError as e:
            logger.error(f"Error getting all {self.model_class.__name__}: {e}")
            return []

    def get_paginated(self,
                     pagination: PaginationParams,
                     filters: Optional[Dict[str, Any]] = None,
                     order_by: Optional[str] = None,
                     order: SortOrder = SortOrder.ASC) -> PaginatedResult[T]:
        """
        Get paginated results with optional filtering and ordering.

        Args:
            pagination: Pagination parameters
            filters: Dictionary of filters to apply
            order_by: Field name to order by
            order: Sort order

        Returns:
            PaginatedResult with items and metadata
        """
        try:
            query = self._build_query(filters)

            if order_by:
                order_field = getattr(self.model_class, order_by, None)
                if order_field is not None:
                    query = query.order_by(
                        desc(order_field) if order == SortOrder.DESC else asc(order_field)
                    )

            total = query.count()
            items = query.offset(pagination.offset).limit(pagination.limit).all()

            return PaginatedResult(
                items=items,
                total=total,
                page=pagination.page,
                per_page=pagination.per_page
            )
        except SQLAlchemyError as e:
            logger.error(f"Error getting paginated {self.model_class.__name__}: {e}")
            return PaginatedResult(items=[], total=0, page=1, per_page=pagination.per_page)

    def paginate(self, page: int = 1, per_page: int = 20,
                 filters: Optional[Dict[str, Any]] = None,
                 order_by: Optional[str] = None,
                 order: SortOrder = SortOrder.ASC) -> PaginatedResult[T]:
        """Keyword form of get_paginated used by the index action"""
        return self.get_paginated(
            PaginationParams(page=max(page, 1), per_page=max(per_page, 1)),
            filters=filters,
            order_by=order_by,
            order=order
        )

    def count(self, **filters) -> int:
        """Count entities matching filters"""
        try:
            return self._build_query(filters).count()
        except SQLAlchemyError as e:
            logger.error(f"Error counting {self.model_class.__name__}: {e}")
            return 0

    # DELETE Operations

    def delete(self, entity: T) -> bool:
        """
        Delete an entity.

        Returns:
            True if successful, False otherwise
        """
        try:
            self.session.delete(entity)
            self.session.commit()
            logger.debug(f"Deleted {self.model_class.__name__} with id {entity.id}")
            return True
        except SQLAlchemyError as e:
            logger.error(f"Error deleting {self.model_class.__name__}: {e}")
            self.session.rollback()
            return False

    # Helper Methods

    def discard(self, entity: T) -> None:
        """Detach an entity so pending changes on it are never flushed"""
        if entity in self.session:
            self.session.expunge(entity)
            logger.debug(f"Discarded pending changes on {self.model_class.__name__}")

    def form_fields(self) -> List[str]:
        """Fields rendered in add/edit forms, primary key first"""
        return ['id'] + self.model_class.accessible_fields()

    def _build_query(self, filters: Optional[Dict[str, Any]] = None) -> Query:
        """
        Build a query with filters.

        Args:
            filters: Dictionary of filters to apply
        """
        query = self.session.query(self.model_class)

        if filters:
            for field, value in filters.items():
                if hasattr(self.model_class, field):
                    column = getattr(self.model_class, field)
                    if isinstance(value, list):
                        query = query.filter(column.in_(value))
                    elif value is None:
                        query = query.filter(column.is_(None))
                    else:
                        query = query.filter(column == value)

        return query

    # Abstract Methods (to be implemented by subclasses)

    @abstractmethod
    def search(self, query: str, fields: Optional[List[str]] = None) -> List[T]:
        """
        Search entities by text query.

        Args:
            query: Search query string
            fields: Fields to search in (None for default fields)
        """
        pass
