"""
Shelf repository backed by SQLAlchemy.
"""
from datetime import datetime
from typing import List, Optional
from sqlalchemy.orm import Session

from domain.models import Shelf
from repositories.models import ShelfORM


def _shelf_from_orm(orm: ShelfORM) -> Shelf:
    return Shelf(id=orm.id, name=orm.name, location=orm.location, created_at=orm.created_at)


class ShelvesRepository:
    """CRUD operations for shelves."""

    def list_shelves(self, session: Session) -> List[Shelf]:
        return [_shelf_from_orm(s) for s in session.query(ShelfORM).order_by(ShelfORM.name).all()]

    def get_shelf(self, session: Session, shelf_id: str) -> Optional[Shelf]:
        orm = session.get(ShelfORM, shelf_id)
        return _shelf_from_orm(orm) if orm else None

    def find_by_name(self, session: Session, name: str) -> Optional[Shelf]:
        orm = session.query(ShelfORM).filter(ShelfORM.name == name.strip()).first()
        return _shelf_from_orm(orm) if orm else None

    def create_shelf(self, session: Session, shelf: Shelf) -> Shelf:
        orm = ShelfORM(
            id=shelf.id,
            name=shelf.name.strip(),
            location=shelf.location or None,
            created_at=shelf.created_at or datetime.utcnow(),
        )
        session.add(orm)
        session.commit()
        session.refresh(orm)
        return _shelf_from_orm(orm)

    def update_shelf(self, session: Session, shelf: Shelf) -> Optional[Shelf]:
        orm = session.get(ShelfORM, shelf.id)
        if not orm:
            return None
        orm.name = shelf.name.strip()
        orm.location = shelf.location or None
        session.add(orm)
        session.commit()
        session.refresh(orm)
        return _shelf_from_orm(orm)

    def delete_shelf(self, session: Session, shelf_id: str) -> bool:
        orm = session.get(ShelfORM, shelf_id)
        if not orm:
            return False
        session.delete(orm)
        session.commit()
        return True
