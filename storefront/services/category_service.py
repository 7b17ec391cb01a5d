import logging

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from storefront.models import Category

from . import exceptions

logger = logging.getLogger(__name__)


class CategoryService:
    def __init__(self, db: Session):
        self.db = db

    def list_categories(self) -> list[Category]:
        try:
            return list(self.db.scalars(select(Category).execution_options(populate_existing=True)))
        except SQLAlchemyError as exc:
            logger.error("Listing categories failed: %s", exc)
            raise exceptions.PersistenceError(str(exc)) from exc

    def create_category(self, *, data: dict) -> Category:
        category = Category(**data)
        try:
            self.db.add(category)
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.error("Creating category failed: %s", exc)
            raise exceptions.PersistenceError(str(exc)) from exc
        self.db.refresh(category)
        logger.info("Category %s created", category.id)
        return category
