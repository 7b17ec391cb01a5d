import logging

from passlib.exc import UnknownHashError
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from storefront.core import security
from storefront.models import User, is_object_id

from . import exceptions as service_exceptions

logger = logging.getLogger(__name__)


class UserService:
    def __init__(self, db: Session):
        self.db = db

    def register(self, *, username: str | None, email: str | None, password: str | None) -> User:
        if not username or not email or not password:
            raise service_exceptions.ValidationFailure("All fields are required")
        user = User(
            username=username,
            email=email,
            password_hash=security.create_password_hash(password),
        )
        try:
            self.db.add(user)
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.error("Registering user failed: %s", exc)
            raise service_exceptions.PersistenceError(str(exc)) from exc
        self.db.refresh(user)
        logger.info("User %s registered", user.id)
        return user

    def authenticate(self, *, email: str | None, password: str | None) -> User:
        if not email or not password:
            raise service_exceptions.AuthenticationError("Incorrect username or password")
        try:
            candidates = list(
                self.db.scalars(select(User).where(User.email == email).order_by(User.created_at))
            )
        except SQLAlchemyError as exc:
            logger.error("Looking up user for login failed: %s", exc)
            raise service_exceptions.PersistenceError(str(exc)) from exc
        for user in candidates:
            try:
                if security.verify_password(password, user.password_hash):
                    return user
            except (ValueError, UnknownHashError):
                logger.warning("User %s has an unreadable password hash", user.id)
        raise service_exceptions.AuthenticationError("Incorrect username or password")

    def get_user(self, user_id: str) -> User:
        if not is_object_id(user_id):
            raise service_exceptions.NotFoundError("User not found")
        try:
            user = self.db.get(User, user_id)
        except SQLAlchemyError as exc:
            logger.error("Fetching user %s failed: %s", user_id, exc)
            raise service_exceptions.PersistenceError(str(exc)) from exc
        if not user:
            raise service_exceptions.NotFoundError("User not found")
        return user
