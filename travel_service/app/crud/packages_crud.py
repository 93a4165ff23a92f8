from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional, Tuple
from uuid import UUID

from sqlalchemy import desc, func
from sqlalchemy.orm import Session

from shared.helpers.json_response_helper import calculate_skip
from ..models.packages import Package


class PackagesRepository:

    def _base_query(self, db: Session):
        return db.query(Package).filter(Package.deleted_at.is_(None))

    def create(self, db: Session, data: dict) -> Package:
        package = Package(**data)
        db.add(package)
        db.commit()
        db.refresh(package)
        return package

    def _paginate(self, query, page: int, limit: int) -> Tuple[List[Package], int]:
        total = query.with_entities(func.count(Package.id)).scalar()
        packages = (
            query
            .order_by(desc(Package.created_at))
            .offset(calculate_skip(page, limit))
            .limit(limit)
            .all()
        )
        return packages, total

    def find_by_destination(
        self,
        db: Session,
        destination_id: UUID,
        page: int,
        limit: int
    ) -> Tuple[List[Package], int]:
        query = self._base_query(db).filter(Package.destination_id == destination_id)
        return self._paginate(query, page, limit)

    def find_all(self, db: Session, page: int, limit: int) -> Tuple[List[Package], int]:
        return self._paginate(self._base_query(db), page, limit)

    def find_by_id(self, db: Session, package_id: UUID) -> Optional[Package]:
        return self._base_query(db).filter(Package.id == package_id).first()

    def exists(self, db: Session, package_id: UUID) -> bool:
        return self._base_query(db).with_entities(Package.id).filter(
            Package.id == package_id).first() is not None

    def stats_by_destination_ids(self, db: Session, destination_ids: Iterable[UUID]) -> Dict[UUID, dict]:
        """Package count and cheapest price per destination, zero/None when it has none."""
        destination_ids = list(destination_ids)
        stats = {destination_id: {"count": 0, "min_price": None}
                 for destination_id in destination_ids}
        if not destination_ids:
            return stats

        rows = (
            db.query(
                Package.destination_id,
                func.count(Package.id),
                func.min(Package.price),
            )
            .filter(
                Package.deleted_at.is_(None),
                Package.destination_id.in_(destination_ids),
            )
            .group_by(Package.destination_id)
            .all()
        )
        for destination_id, count, min_price in rows:
            stats[destination_id] = {
                "count": int(count),
                "min_price": float(min_price) if min_price is not None else None,
            }
        return stats

    def update_by_id(self, db: Session, package_id: UUID, data: dict) -> Optional[Package]:
        package = self.find_by_id(db, package_id)
        if not package:
            return None

        for key, value in data.items():
            setattr(package, key, value)

        db.commit()
        db.refresh(package)
        return package

    def delete_by_id(self, db: Session, package_id: UUID) -> Optional[Package]:
        """Soft delete package"""
        package = self.find_by_id(db, package_id)
        if not package:
            return None

        package.deleted_at = datetime.now(timezone.utc)
        db.commit()
        return package
