"""
Author repository backed by SQLAlchemy.
"""
from datetime import datetime
from typing import List, Optional
from sqlalchemy.orm import Session

from domain.models import Author
from repositories.models import AuthorORM


def _author_from_orm(orm: AuthorORM) -> Author:
    return Author(
        id=orm.id,
        first_name=orm.first_name,
        last_name=orm.last_name,
        created_at=orm.created_at,
    )


class AuthorsRepository:
    """CRUD operations for authors."""

    def list_authors(self, session: Session, offset: int = 0, limit: Optional[int] = None) -> List[Author]:
        query = session.query(AuthorORM).order_by(AuthorORM.last_name, AuthorORM.first_name)
        query = query.offset(offset)
        if limit is not None:
            query = query.limit(limit)
        return [_author_from_orm(a) for a in query.all()]

    def get_author(self, session: Session, author_id: str) -> Optional[Author]:
        orm = session.get(AuthorORM, author_id)
        return _author_from_orm(orm) if orm else None

    def find_by_name(self, session: Session, first_name: str, last_name: str) -> Optional[Author]:
        orm = (
            session.query(AuthorORM)
            .filter(AuthorORM.first_name == first_name, AuthorORM.last_name == last_name)
            .first()
        )
        return _author_from_orm(orm) if orm else None

    def create_author(self, session: Session, author: Author) -> Author:
        orm = AuthorORM(
            id=author.id,
            first_name=author.first_name,
            last_name=author.last_name,
            created_at=author.created_at or datetime.utcnow(),
        )
        session.add(orm)
        session.commit()
        session.refresh(orm)
        return _author_from_orm(orm)

    def update_author(self, session: Session, author: Author) -> Optional[Author]:
        orm = session.get(AuthorORM, author.id)
        if not orm:
            return None
        orm.first_name = author.first_name
        orm.last_name = author.last_name
        session.add(orm)
        session.commit()
        session.refresh(orm)
        return _author_from_orm(orm)

    def delete_author(self, session: Session, author_id: str) -> bool:
        orm = session.get(AuthorORM, author_id)
        if not orm:
            return False
        session.delete(orm)
        session.commit()
        return True
