from datetime import datetime, timezone
from typing import List, Optional, Tuple
from uuid import UUID

from sqlalchemy import desc, func
from sqlalchemy.orm import Session

from shared.helpers.json_response_helper import calculate_skip
from shared.helpers.query_helper import LIKE_ESCAPE, contains_pattern
from ..models.destinations import Destination


class DestinationsRepository:

    def _base_query(self, db: Session):
        return db.query(Destination).filter(Destination.deleted_at.is_(None))

    def create(self, db: Session, data: dict) -> Destination:
        destination = Destination(**data)
        db.add(destination)
        db.commit()
        db.refresh(destination)
        return destination

    def find_all(
        self,
        db: Session,
        name: Optional[str],
        page: int,
        limit: int
    ) -> Tuple[List[Destination], int]:
        query = self._base_query(db)

        if name:
            query = query.filter(Destination.name.ilike(contains_pattern(name), escape=LIKE_ESCAPE))

        total = query.with_entities(func.count(Destination.id)).scalar()
        destinations = (
            query
            .order_by(desc(Destination.created_at))
            .offset(calculate_skip(page, limit))
            .limit(limit)
            .all()
        )
        return destinations, total

    def find_by_id(self, db: Session, destination_id: UUID) -> Optional[Destination]:
        return self._base_query(db).filter(Destination.id == destination_id).first()

    def exists(self, db: Session, destination_id: UUID) -> bool:
        return self._base_query(db).with_entities(Destination.id).filter(
            Destination.id == destination_id).first() is not None

    def update_by_id(self, db: Session, destination_id: UUID, data: dict) -> Optional[Destination]:
        destination = self.find_by_id(db, destination_id)
        if not destination:
            return None

        for key, value in data.items():
            setattr(destination, key, value)

        db.commit()
        db.refresh(destination)
        return destination

    def delete_by_id(self, db: Session, destination_id: UUID) -> Optional[Destination]:
        """Soft delete destination"""
        destination = self.find_by_id(db, destination_id)
        if not destination:
            return None

        destination.deleted_at = datetime.now(timezone.utc)
        db.commit()
        return destination
