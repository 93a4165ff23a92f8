from datetime import datetime, timezone
from typing import List, Optional, Tuple
from uuid import UUID

from sqlalchemy import desc, func
from sqlalchemy.orm import Session

from shared.helpers.json_response_helper import calculate_skip
from shared.helpers.query_helper import LIKE_ESCAPE, contains_pattern
from shared.models.users import Users


class UsersRepository:
    """Data access for users; soft-deleted rows are never returned."""

    def _base_query(self, db: Session):
        return db.query(Users).filter(Users.deleted_at.is_(None))

    def create(self, db: Session, data: dict) -> Users:
        user = Users(**data)
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    def find_all(
        self,
        db: Session,
        user_name: Optional[str],
        email: Optional[str],
        page: int,
        limit: int
    ) -> Tuple[List[Users], int]:
        query = self._base_query(db)

        if user_name:
            query = query.filter(Users.user_name.ilike(contains_pattern(user_name), escape=LIKE_ESCAPE))
        if email:
            query = query.filter(Users.email.ilike(contains_pattern(email), escape=LIKE_ESCAPE))

        total = query.with_entities(func.count(Users.id)).scalar()
        users = (
            query
            .order_by(desc(Users.created_at))
            .offset(calculate_skip(page, limit))
            .limit(limit)
            .all()
        )
        return users, total

    def find_by_id(self, db: Session, user_id: UUID) -> Optional[Users]:
        return self._base_query(db).filter(Users.id == user_id).first()

    def find_by_email(self, db: Session, email: str) -> Optional[Users]:
        return self._base_query(db).filter(
            func.lower(Users.email) == email.lower()
        ).first()

    def email_exists(self, db: Session, email: str, exclude_id: Optional[UUID] = None) -> bool:
        # soft-deleted rows still hold the unique email
        query = db.query(Users.id).filter(
            func.lower(Users.email) == email.lower())
        if exclude_id:
            query = query.filter(Users.id != exclude_id)
        return query.first() is not None

    def update_by_id(self, db: Session, user_id: UUID, data: dict) -> Optional[Users]:
        user = self.find_by_id(db, user_id)
        if not user:
            return None

        for key, value in data.items():
            setattr(user, key, value)

        db.commit()
        db.refresh(user)
        return user

    def delete_by_id(self, db: Session, user_id: UUID) -> Optional[Users]:
        """Soft delete user"""
        user = self.find_by_id(db, user_id)
        if not user:
            return None

        user.deleted_at = datetime.now(timezone.utc)
        db.commit()
        return user
