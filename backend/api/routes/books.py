"""
Books API routes.
"""
import asyncio
import logging
from datetime import date as date_type
from typing import List, Optional
from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, ConfigDict, Field

from db import SessionLocal
from domain.models import Book
from repositories import AuthorsRepository, BooksRepository, ShelvesRepository
from api.routes import jackets

router = APIRouter()
books_repo = BooksRepository()
authors_repo = AuthorsRepository()
shelves_repo = ShelvesRepository()
logger = logging.getLogger(__name__)


class BookCreate(BaseModel):
    title: str = Field(min_length=1)
    author: str
    isbn: str = Field(min_length=1, max_length=13)
    date: Optional[date_type] = None
    description: Optional[str] = None
    shelf: Optional[str] = None


class BookUpdate(BookCreate):
    # Extra keys are kept so a stray "jacket" can be rejected explicitly
    model_config = ConfigDict(extra="allow")


class BookResponse(BaseModel):
    id: str
    title: str
    author: str
    isbn: str
    date: Optional[str] = None
    description: Optional[str] = None
    jacket: Optional[str] = None
    shelf: Optional[str] = None


def book_to_response(book: Book) -> BookResponse:
    """Convert domain Book to API response."""
    return BookResponse(
        id=book.id,
        title=book.title,
        author=book.author_id,
        isbn=book.isbn,
        date=book.date.isoformat() if book.date else None,
        description=book.description,
        jacket=book.jacket,
        shelf=book.shelf_id,
    )


def _check_references(session, data: BookCreate, book_id: Optional[str] = None) -> None:
    if not authors_repo.get_author(session, data.author):
        raise HTTPException(status_code=400, detail="Author does not exist")
    if data.shelf and not shelves_repo.get_shelf(session, data.shelf):
        raise HTTPException(status_code=400, detail="Shelf does not exist")
    existing = books_repo.find_by_isbn(session, data.isbn)
    if existing and existing.id != book_id:
        raise HTTPException(status_code=409, detail="Book/ISBN already exists")


@router.get("", response_model=List[BookResponse])
async def list_books():
    """List all books."""
    with SessionLocal() as session:
        return [book_to_response(b) for b in books_repo.list_books(session)]


@router.post("", response_model=BookResponse, status_code=201)
async def create_book(data: BookCreate):
    """Create a new book. The jacket is managed through /books/{id}/jacket."""
    with SessionLocal() as session:
        _check_references(session, data)
        book = Book(
            id=Book.generate_id(),
            title=data.title,
            author_id=data.author,
            isbn=data.isbn,
            date=data.date,
            description=data.description,
            shelf_id=data.shelf,
        )
        saved = books_repo.create_book(session, book)
        return book_to_response(saved)


@router.get("/{book_id}", response_model=BookResponse)
async def get_book(book_id: str):
    """Get a book by ID."""
    with SessionLocal() as session:
        book = books_repo.get_book(session, book_id)
        if not book:
            raise HTTPException(status_code=404, detail="Book not found")
        return book_to_response(book)


@router.put("/{book_id}", response_model=BookResponse)
async def update_book(book_id: str, data: BookUpdate):
    """Replace a book's fields. The jacket field is read-only here."""
    if "jacket" in (data.model_extra or {}):
        raise HTTPException(
            status_code=400,
            detail="Jacket field is read-only. Use /books/{id}/jacket endpoint to manage jacket images",
        )
    with SessionLocal() as session:
        book = books_repo.get_book(session, book_id)
        if not book:
            raise HTTPException(status_code=404, detail="Book not found")
        _check_references(session, data, book_id=book_id)
        book.title = data.title
        book.author_id = data.author
        book.isbn = data.isbn
        book.date = data.date
        book.description = data.description
        book.shelf_id = data.shelf
        return book_to_response(books_repo.update_book(session, book))


@router.delete("/{book_id}")
async def delete_book(book_id: str):
    """Delete a book and its jacket files."""
    with SessionLocal() as session:
        book = books_repo.get_book(session, book_id)
        if not book:
            raise HTTPException(status_code=404, detail="Book not found")
        books_repo.delete_book(session, book_id)
    # Best-effort file cleanup
    if book.jacket:
        try:
            await asyncio.to_thread(jackets.storage.delete_stem, book.jacket)
        except Exception as e:
            logger.warning("Failed to delete jacket %s for book %s: %s", book.jacket, book_id, e)
    return {"message": "Book deleted successfully"}
