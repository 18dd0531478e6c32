"""
Authors API routes.
"""
from typing import List
from fastapi import APIRouter, HTTPException, Query
from pydantic import BaseModel, Field

from db import SessionLocal
from domain.models import Author
from repositories import AuthorsRepository, BooksRepository
from settings import settings

router = APIRouter()
authors_repo = AuthorsRepository()
books_repo = BooksRepository()


class AuthorCreate(BaseModel):
    first_name: str = Field(min_length=1, alias="firstName")
    last_name: str = Field(min_length=1, alias="lastName")


class AuthorResponse(BaseModel):
    id: str
    firstName: str
    lastName: str


class PageMeta(BaseModel):
    page: int


class AuthorListResponse(BaseModel):
    data: List[AuthorResponse]
    meta: PageMeta


def author_to_response(author: Author) -> AuthorResponse:
    return AuthorResponse(id=author.id, firstName=author.first_name, lastName=author.last_name)


@router.get("", response_model=AuthorListResponse)
async def list_authors(page: int = Query(1, ge=1)):
    """List authors, one page at a time."""
    per_page = settings.LIST_PER_PAGE
    with SessionLocal() as session:
        authors = authors_repo.list_authors(session, offset=(page - 1) * per_page, limit=per_page)
        return AuthorListResponse(
            data=[author_to_response(a) for a in authors],
            meta=PageMeta(page=page),
        )


@router.post("", response_model=AuthorResponse, status_code=201)
async def create_author(data: AuthorCreate):
    with SessionLocal() as session:
        if authors_repo.find_by_name(session, data.first_name, data.last_name):
            raise HTTPException(status_code=409, detail="Author already exists")
        author = Author(id=Author.generate_id(), first_name=data.first_name, last_name=data.last_name)
        return author_to_response(authors_repo.create_author(session, author))


@router.get("/{author_id}", response_model=AuthorResponse)
async def get_author(author_id: str):
    with SessionLocal() as session:
        author = authors_repo.get_author(session, author_id)
        if not author:
            raise HTTPException(status_code=404, detail="Author not found")
        return author_to_response(author)


@router.put("/{author_id}", response_model=AuthorResponse)
async def update_author(author_id: str, data: AuthorCreate):
    with SessionLocal() as session:
        if not authors_repo.get_author(session, author_id):
            raise HTTPException(status_code=404, detail="Author not found")
        existing = authors_repo.find_by_name(session, data.first_name, data.last_name)
        if existing and existing.id != author_id:
            raise HTTPException(status_code=409, detail="Another author with this name already exists")
        author = Author(id=author_id, first_name=data.first_name, last_name=data.last_name)
        return author_to_response(authors_repo.update_author(session, author))


@router.delete("/{author_id}")
async def delete_author(author_id: str):
    with SessionLocal() as session:
        if not authors_repo.get_author(session, author_id):
            raise HTTPException(status_code=404, detail="Author not found")
        if books_repo.count_by_author(session, author_id):
            raise HTTPException(status_code=409, detail="Cannot delete author: books reference it")
        authors_repo.delete_author(session, author_id)
        return {"message": "Author deleted successfully"}
