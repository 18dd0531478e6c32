"""
Shelves API routes.
"""
from typing import List, Optional
from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from db import SessionLocal
from domain.models import Shelf
from repositories import BooksRepository, ShelvesRepository

router = APIRouter()
shelves_repo = ShelvesRepository()
books_repo = BooksRepository()


class ShelfCreate(BaseModel):
    name: str
    location: Optional[str] = None


class ShelfResponse(BaseModel):
    id: str
    name: str
    location: Optional[str] = None


def shelf_to_response(shelf: Shelf) -> ShelfResponse:
    return ShelfResponse(id=shelf.id, name=shelf.name, location=shelf.location)


def _check_name(session, name: str, shelf_id: Optional[str] = None) -> str:
    name = name.strip()
    if not name:
        raise HTTPException(status_code=400, detail="Shelf name is required")
    existing = shelves_repo.find_by_name(session, name)
    if existing and existing.id != shelf_id:
        raise HTTPException(status_code=409, detail="Shelf already exists")
    return name


@router.get("", response_model=List[ShelfResponse])
async def list_shelves():
    with SessionLocal() as session:
        return [shelf_to_response(s) for s in shelves_repo.list_shelves(session)]


@router.post("", response_model=ShelfResponse, status_code=201)
async def create_shelf(data: ShelfCreate):
    with SessionLocal() as session:
        name = _check_name(session, data.name)
        shelf = Shelf(id=Shelf.generate_id(), name=name, location=data.location)
        return shelf_to_response(shelves_repo.create_shelf(session, shelf))


@router.get("/{shelf_id}", response_model=ShelfResponse)
async def get_shelf(shelf_id: str):
    with SessionLocal() as session:
        shelf = shelves_repo.get_shelf(session, shelf_id)
        if not shelf:
            raise HTTPException(status_code=404, detail="Shelf not found")
        return shelf_to_response(shelf)


@router.put("/{shelf_id}", response_model=ShelfResponse)
async def update_shelf(shelf_id: str, data: ShelfCreate):
    with SessionLocal() as session:
        if not shelves_repo.get_shelf(session, shelf_id):
            raise HTTPException(status_code=404, detail="Shelf not found")
        name = _check_name(session, data.name, shelf_id=shelf_id)
        shelf = Shelf(id=shelf_id, name=name, location=data.location)
        return shelf_to_response(shelves_repo.update_shelf(session, shelf))


@router.delete("/{shelf_id}")
async def delete_shelf(shelf_id: str):
    with SessionLocal() as session:
        if not shelves_repo.get_shelf(session, shelf_id):
            raise HTTPException(status_code=404, detail="Shelf not found")
        if books_repo.count_on_shelf(session, shelf_id):
            raise HTTPException(status_code=409, detail="Cannot delete shelf: it contains books")
        shelves_repo.delete_shelf(session, shelf_id)
        return {"message": "Shelf deleted successfully"}
