"""
Book jacket API routes.
"""
from typing import Dict, Optional
from fastapi import APIRouter, File, Response, UploadFile
from pydantic import BaseModel

from db import SessionLocal
from domain.models import DEFAULT_JACKET_SIZE, MAX_JACKET_FILE_SIZE, UploadedFile
from repositories import BookJacketStore
from services.jacket_pipeline import JacketPipeline
from services.jackets import JacketService
from settings import settings
from storage.file_storage import JacketStorage

router = APIRouter()
storage = JacketStorage(settings.JACKETS_ROOT)


class JacketData(BaseModel):
    filename: str
    urls: Dict[str, str]


class JacketUploadResponse(BaseModel):
    message: str
    data: JacketData


class MessageResponse(BaseModel):
    message: str


def _service(session) -> JacketService:
    return JacketService(
        books=BookJacketStore(session),
        storage=storage,
        pipeline=JacketPipeline(storage, max_concurrency=settings.JACKET_ENCODE_CONCURRENCY),
    )


async def _to_uploaded_file(jacket: Optional[UploadFile]) -> Optional[UploadedFile]:
    if jacket is None:
        return None
    # Read one byte past the cap so oversized files are detected without buffering them whole
    data = await jacket.read(MAX_JACKET_FILE_SIZE + 1)
    return UploadedFile(
        data=data,
        declared_mime_type=jacket.content_type,
        declared_size=jacket.size,
        filename=jacket.filename,
    )


def _image_response(image) -> Response:
    return Response(
        content=image.data,
        media_type=image.content_type,
        headers={"Cache-Control": "no-cache"},
    )


@router.post("/{book_id}/jacket", status_code=201, response_model=JacketUploadResponse)
async def upload_jacket(book_id: str, jacket: Optional[UploadFile] = File(None)):
    """Upload and process a jacket image for a book."""
    upload = await _to_uploaded_file(jacket)
    with SessionLocal() as session:
        manifest = await _service(session).upload(book_id, upload)
    return JacketUploadResponse(
        message="Jacket uploaded successfully",
        data=JacketData(**manifest.to_dict()),
    )


@router.get("/{book_id}/jacket")
async def get_jacket(book_id: str):
    """Serve the medium jacket variant."""
    with SessionLocal() as session:
        image = await _service(session).retrieve(book_id, DEFAULT_JACKET_SIZE)
    return _image_response(image)


@router.get("/{book_id}/jacket/{size}")
async def get_jacket_size(book_id: str, size: str):
    """Serve a jacket variant: small, medium, large or original."""
    with SessionLocal() as session:
        image = await _service(session).retrieve(book_id, size)
    return _image_response(image)


@router.delete("/{book_id}/jacket", response_model=MessageResponse)
async def delete_jacket(book_id: str):
    """Remove a book's jacket image and all its variants."""
    with SessionLocal() as session:
        await _service(session).delete(book_id)
    return MessageResponse(message="Jacket deleted successfully")
