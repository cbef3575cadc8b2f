# server/core/store.py

import logging
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from core.errors import ConflictError
from models.user import User


logger = logging.getLogger(__name__)


class UserStore:
    """
    Persistence for user records. Uniqueness of username and email is left
    to the database constraints; the store only translates violations.
    """

    def __init__(self, db: Session):
        self.db = db

    def create(self, username: str, email: str, hashed_password: str) -> User:
        user = User(username=username, email=email, hashed_password=hashed_password)
        self.db.add(user)
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise ConflictError(self._conflict_message(username, email)) from e
        self.db.refresh(user)
        return user

    def find_by_username(self, username: str) -> User | None:
        return self.db.query(User).filter(User.username == username).first()

    def _conflict_message(self, username: str, email: str) -> str:
        if self.find_by_username(username) is not None:
            return "Username already exists"
        if self.db.query(User).filter(User.email == email).first() is not None:
            return "Email already exists"
        return "User already exists"
