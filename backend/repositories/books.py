"""
Book repository backed by SQLAlchemy.
"""
from datetime import datetime
from typing import List, Optional
from sqlalchemy import func
from sqlalchemy.orm import Session

from domain.models import Book
from repositories.models import BookORM


def _book_from_orm(orm: BookORM) -> Book:
    return Book(
        id=orm.id,
        title=orm.title,
        author_id=orm.author_id,
        isbn=orm.isbn,
        date=orm.date,
        description=orm.description,
        jacket=orm.jacket,
        shelf_id=orm.shelf_id,
        created_at=orm.created_at,
    )


def _update_orm_from_book(orm: BookORM, book: Book) -> None:
    # jacket is deliberately not copied; it only changes through update_jacket
    orm.title = book.title
    orm.author_id = book.author_id
    orm.isbn = book.isbn
    orm.date = book.date
    orm.description = book.description
    orm.shelf_id = book.shelf_id


class BooksRepository:
    """CRUD operations for books."""

    def list_books(self, session: Session) -> List[Book]:
        books = session.query(BookORM).order_by(BookORM.created_at).all()
        return [_book_from_orm(b) for b in books]

    def list_jacket_stems(self, session: Session) -> List[str]:
        rows = session.query(BookORM.jacket).filter(BookORM.jacket.isnot(None)).all()
        return [row[0] for row in rows]

    def get_book(self, session: Session, book_id: str) -> Optional[Book]:
        orm = session.get(BookORM, book_id)
        if not orm:
            return None
        return _book_from_orm(orm)

    def find_by_isbn(self, session: Session, isbn: str) -> Optional[Book]:
        orm = session.query(BookORM).filter(BookORM.isbn == isbn).first()
        return _book_from_orm(orm) if orm else None

    def count_by_author(self, session: Session, author_id: str) -> int:
        return (
            session.query(func.count(BookORM.id))
            .filter(BookORM.author_id == author_id)
            .scalar()
            or 0
        )

    def count_on_shelf(self, session: Session, shelf_id: str) -> int:
        return (
            session.query(func.count(BookORM.id))
            .filter(BookORM.shelf_id == shelf_id)
            .scalar()
            or 0
        )

    def create_book(self, session: Session, book: Book) -> Book:
        orm = BookORM(
            id=book.id,
            title=book.title,
            author_id=book.author_id,
            isbn=book.isbn,
            date=book.date,
            description=book.description,
            jacket=None,
            shelf_id=book.shelf_id,
            created_at=book.created_at or datetime.utcnow(),
        )
        session.add(orm)
        session.commit()
        session.refresh(orm)
        return _book_from_orm(orm)

    def update_book(self, session: Session, book: Book) -> Book:
        orm = session.get(BookORM, book.id)
        if not orm:
            raise ValueError("Book not found")
        _update_orm_from_book(orm, book)
        session.add(orm)
        session.commit()
        session.refresh(orm)
        return _book_from_orm(orm)

    def update_jacket(self, session: Session, book_id: str, jacket: Optional[str]) -> bool:
        orm = session.get(BookORM, book_id)
        if not orm:
            return False
        orm.jacket = jacket
        session.add(orm)
        session.commit()
        return True

    def delete_book(self, session: Session, book_id: str) -> None:
        orm = session.get(BookORM, book_id)
        if orm:
            session.delete(orm)
            session.commit()


class BookJacketStore:
    """
    Session-bound view of the books table used by the jacket service.

    Exposes only the two calls the jacket lifecycle needs: reading a book and
    swapping its jacket reference.
    """

    def __init__(self, session: Session, repo: Optional[BooksRepository] = None):
        self.session = session
        self.repo = repo or BooksRepository()

    def get_book(self, book_id: str) -> Optional[Book]:
        return self.repo.get_book(self.session, book_id)

    def update_jacket(self, book_id: str, jacket: Optional[str]) -> None:
        if not self.repo.update_jacket(self.session, book_id, jacket):
            raise ValueError(f"Book not found: {book_id}")
