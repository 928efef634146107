"""Persistence for user accounts."""

from datetime import datetime
from typing import Optional

from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from models.user import User, utcnow
from services.errors import ConflictError


class UserRepository:
    """CRUD and paginated listing over the users table."""

    def __init__(self, db: Session):
        self.db = db

    def email_exists(self, email: str) -> bool:
        return (
            self.db.query(func.count(User.id)).filter(User.email == email).scalar() or 0
        ) > 0

    def get_by_email(self, email: str) -> Optional[User]:
        return self.db.query(User).filter(User.email == email).first()

    def get_by_user_id(self, user_id: str) -> Optional[User]:
        return self.db.query(User).filter(User.user_id == user_id).first()

    def create(self, user: User) -> User:
        """Insert a user. The unique index on email is the final word on duplicates."""
        self.db.add(user)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise ConflictError()
        self.db.refresh(user)
        return user

    def list_page(self, offset: int, limit: int) -> tuple[list[User], int]:
        """Return one page of users in creation order, plus the total count."""
        total = self.db.query(func.count(User.id)).scalar() or 0
        users = (
            self.db.query(User)
            .order_by(User.created_at, User.id)
            .offset(offset)
            .limit(limit)
            .all()
        )
        return users, total

    def save(self, user: User) -> User:
        user.updated_at = utcnow()
        self.db.commit()
        self.db.refresh(user)
        return user

    def change_password(
        self, email: str, hashed_password: str, token_issued_at: datetime
    ) -> int:
        """
        Replace the password unless it already changed after ``token_issued_at``.

        ``token_version`` is bumped in the same statement. Returns the number
        of rows updated, so a replayed or racing reset token gets 0.
        """
        now = utcnow()
        updated = (
            self.db.query(User)
            .filter(
                User.email == email,
                or_(
                    User.password_changed_at.is_(None),
                    User.password_changed_at <= token_issued_at,
                ),
            )
            .update(
                {
                    User.hashed_password: hashed_password,
                    User.token_version: User.token_version + 1,
                    User.password_changed_at: now,
                    User.updated_at: now,
                },
                synchronize_session=False,
            )
        )
        self.db.commit()
        return updated

    def delete_by_user_id(self, user_id: str) -> int:
        """Delete a user and return how many rows were removed."""
        deleted = (
            self.db.query(User)
            .filter(User.user_id == user_id)
            .delete(synchronize_session=False)
        )
        self.db.commit()
        return deleted
