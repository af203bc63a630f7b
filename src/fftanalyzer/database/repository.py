# database/repository.py
from typing import Any, Dict, Generic, List, Optional, Type, TypeVar, Union
from uuid import UUID

from sqlalchemy import func
from sqlmodel import Session, SQLModel, select

ModelType = TypeVar("ModelType", bound=SQLModel)
CreateSchemaType = TypeVar("CreateSchemaType", bound=SQLModel)
UpdateSchemaType = TypeVar("UpdateSchemaType", bound=SQLModel)

IdType = Union[int, UUID]


class BaseRepository(Generic[ModelType, CreateSchemaType, UpdateSchemaType]):
    """
    Generic repository providing CRUD operations.

    Repositories only flush; committing is left to the UnitOfWork that owns
    the session.

    Type Parameters:
        ModelType: The SQLModel table class
        CreateSchemaType: Pydantic model for creation
        UpdateSchemaType: Pydantic model for updates
    """

    def __init__(self, model: Type[ModelType], session: Session):
        self.model = model
        self.session = session

    # --- Create ---

    def create(self, obj_in: CreateSchemaType, **kwargs) -> ModelType:
        """
        Create a new row.

        Args:
            obj_in: Creation schema with input data
            **kwargs: Additional fields to set

        Returns:
            Created model instance
        """
        obj_data = obj_in.model_dump(exclude_unset=True, exclude_none=True)
        obj_data.update(kwargs)
        db_obj = self.model(**obj_data)
        self.session.add(db_obj)
        self.session.flush()
        self.session.refresh(db_obj)
        return db_obj

    # --- Read ---

    def get(self, id: IdType) -> Optional[ModelType]:
        """Get a single row by ID."""
        return self.session.get(self.model, id)

    def get_all(
        self,
        *,
        skip: int = 0,
        limit: Optional[int] = 100,
        order_by: Optional[str] = None,
        descending: bool = False,
    ) -> List[ModelType]:
        """
        Get all rows with pagination.

        Args:
            skip: Number of rows to skip
            limit: Maximum rows to return (None for no limit)
            order_by: Field name to order by
            descending: Sort descending if True
        """
        statement = select(self.model)

        if order_by and hasattr(self.model, order_by):
            order_field = getattr(self.model, order_by)
            statement = statement.order_by(order_field.desc() if descending else order_field)

        statement = statement.offset(skip)
        if limit is not None:
            statement = statement.limit(limit)

        return list(self.session.exec(statement).all())

    def count(self) -> int:
        """Count total rows."""
        statement = select(func.count()).select_from(self.model)
        return self.session.exec(statement).one()

    def exists(self, id: IdType) -> bool:
        """Check if a row exists."""
        return self.get(id) is not None

    # --- Update ---

    def update(self, db_obj: ModelType, obj_in: Union[UpdateSchemaType, Dict[str, Any]]) -> ModelType:
        """
        Update an existing row.

        Args:
            db_obj: Existing database object
            obj_in: Update schema or dict with new values
        """
        if isinstance(obj_in, dict):
            update_data = obj_in
        else:
            update_data = obj_in.model_dump(exclude_unset=True)

        for field, value in update_data.items():
            if hasattr(db_obj, field):
                setattr(db_obj, field, value)

        self.session.add(db_obj)
        self.session.flush()
        self.session.refresh(db_obj)
        return db_obj

    def update_by_id(
        self, id: IdType, obj_in: Union[UpdateSchemaType, Dict[str, Any]]
    ) -> Optional[ModelType]:
        """Update a row by ID."""
        db_obj = self.get(id)
        if db_obj is None:
            return None
        return self.update(db_obj, obj_in)

    # --- Delete ---

    def delete(self, db_obj: ModelType) -> None:
        """Delete a row."""
        self.session.delete(db_obj)
        self.session.flush()

    def delete_by_id(self, id: IdType) -> bool:
        """Delete a row by ID. Returns True if deleted."""
        db_obj = self.get(id)
        if db_obj is None:
            return False
        self.delete(db_obj)
        return True
