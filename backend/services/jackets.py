"""
Jacket lifecycle service.

Coordinates uploads, replacements, deletions and retrieval of a book's jacket
image. The book's `jacket` field is the only pointer to the active stem and is
flipped only after a complete variant set has been written. Superseded or
half-written stems are left behind as orphans for the sweep script.
"""
import asyncio
import logging
import threading
import time
from typing import Optional, Protocol

from domain.errors import NotFoundError, ValidationError
from domain.models import (
    ALLOWED_JACKET_MIME_TYPES,
    DEFAULT_JACKET_SIZE,
    MAX_JACKET_FILE_SIZE,
    Book,
    JacketImage,
    UploadedFile,
    VariantManifest,
)
from services.jacket_pipeline import JacketPipeline
from services.jacket_retrieval import JacketRetrievalService
from storage.file_storage import JacketStorage

logger = logging.getLogger(__name__)


class JacketBookStore(Protocol):
    """The slice of the book store the jacket service depends on."""

    def get_book(self, book_id: str) -> Optional[Book]:
        ...

    def update_jacket(self, book_id: str, jacket: Optional[str]) -> None:
        ...


def validate_upload(upload: Optional[UploadedFile]) -> UploadedFile:
    """Reject missing, unsupported or oversized files. Performs no I/O."""
    if upload is None or not upload.data:
        raise ValidationError("No file uploaded")
    if (upload.declared_mime_type or "").lower() not in ALLOWED_JACKET_MIME_TYPES:
        raise ValidationError("Unsupported file format. Use JPG, PNG or WebP.")
    if upload.size > MAX_JACKET_FILE_SIZE:
        limit_mb = MAX_JACKET_FILE_SIZE // (1024 * 1024)
        raise ValidationError(f"File too large. Maximum file size: {limit_mb}MB.")
    return upload


_stem_lock = threading.Lock()
_last_stem_ns = 0


def generate_jacket_stem(book_id: str) -> str:
    """Unique stem for a new jacket of `book_id`, even for back-to-back uploads."""
    global _last_stem_ns
    with _stem_lock:
        ns = max(time.time_ns(), _last_stem_ns + 1)
        _last_stem_ns = ns
    return f"jacket_{book_id}_{ns}"


class JacketService:
    def __init__(
        self,
        books: JacketBookStore,
        storage: JacketStorage,
        pipeline: Optional[JacketPipeline] = None,
        retrieval: Optional[JacketRetrievalService] = None,
    ):
        self.books = books
        self.storage = storage
        self.pipeline = pipeline or JacketPipeline(storage)
        self.retrieval = retrieval or JacketRetrievalService(storage)

    def _require_book(self, book_id: str) -> Book:
        book = self.books.get_book(book_id)
        if not book:
            raise NotFoundError("Book not found")
        return book

    async def _delete_stem(self, stem: str) -> int:
        return await asyncio.to_thread(self.storage.delete_stem, stem)

    async def upload(self, book_id: str, upload: Optional[UploadedFile]) -> VariantManifest:
        upload = validate_upload(upload)
        book = self._require_book(book_id)

        if book.jacket:
            try:
                await self._delete_stem(book.jacket)
            except Exception as e:
                logger.warning("Could not delete old jacket %s for book %s: %s", book.jacket, book_id, e)

        stem = generate_jacket_stem(book_id)
        manifest = await self.pipeline.process(upload.data, stem, book_id)
        self.books.update_jacket(book_id, stem)
        logger.info("Stored jacket %s for book %s", stem, book_id)
        return manifest

    async def delete(self, book_id: str) -> None:
        book = self._require_book(book_id)
        if not book.jacket:
            raise NotFoundError("No jacket to delete")
        await self._delete_stem(book.jacket)
        self.books.update_jacket(book_id, None)
        logger.info("Deleted jacket %s for book %s", book.jacket, book_id)

    async def retrieve(self, book_id: str, size: str = DEFAULT_JACKET_SIZE) -> JacketImage:
        book = self.books.get_book(book_id)
        if not book or not book.jacket:
            raise NotFoundError("Book or jacket not found")
        resolved = self.retrieval.resolve(book.jacket, size)
        if resolved is None:
            raise NotFoundError("Jacket image not found")
        try:
            data = await asyncio.to_thread(resolved.file_path.read_bytes)
        except FileNotFoundError:
            # Deleted between resolve and read
            raise NotFoundError("Jacket image not found")
        return JacketImage(data=data, content_type=resolved.content_type, size=size)
