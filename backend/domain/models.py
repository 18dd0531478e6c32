"""
Core domain models for the library catalog.
These are framework-agnostic and can be used across all services.
"""
from dataclasses import dataclass, field
from datetime import date as date_type, datetime
from pathlib import Path
from typing import Dict, Optional
import uuid


FORMAT_CONTENT_TYPES: Dict[str, str] = {
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "png": "image/png",
    "webp": "image/webp",
}

# Pillow encoder names keyed by file extension
FORMAT_ENCODERS: Dict[str, str] = {
    "jpg": "JPEG",
    "jpeg": "JPEG",
    "png": "PNG",
    "webp": "WEBP",
}


@dataclass(frozen=True)
class SizeVariantSpec:
    """
    A named rendering of a jacket image.

    The same spec set drives both processing (writes) and retrieval (reads),
    so paths and content types always agree.
    """
    name: str
    width: int
    height: int
    quality: int
    format: str  # file extension, e.g. "webp"

    @property
    def content_type(self) -> str:
        return FORMAT_CONTENT_TYPES[self.format]

    @property
    def encoder(self) -> str:
        return FORMAT_ENCODERS[self.format]


ORIGINAL_VARIANT = "original"
DEFAULT_JACKET_SIZE = "medium"

# The original is stored as-is at full quality in a canonical format
ORIGINAL_SPEC = SizeVariantSpec(
    name=ORIGINAL_VARIANT, width=0, height=0, quality=100, format="jpg"
)

JACKET_SIZES: Dict[str, SizeVariantSpec] = {
    "small": SizeVariantSpec(name="small", width=200, height=300, quality=85, format="webp"),
    "medium": SizeVariantSpec(name="medium", width=300, height=450, quality=90, format="webp"),
    "large": SizeVariantSpec(name="large", width=500, height=750, quality=95, format="webp"),
}

MAX_JACKET_FILE_SIZE = 10 * 1024 * 1024  # 10MB
ALLOWED_JACKET_MIME_TYPES = ("image/jpeg", "image/jpg", "image/png", "image/webp")


@dataclass
class UploadedFile:
    """An inbound jacket file, detached from any web framework request."""
    data: bytes
    declared_mime_type: Optional[str]
    declared_size: Optional[int] = None
    filename: Optional[str] = None

    @property
    def size(self) -> int:
        """Largest of the declared and actual sizes."""
        return max(self.declared_size or 0, len(self.data))


@dataclass
class VariantManifest:
    """
    Result of a successful jacket processing run.

    `urls` maps every variant name (including "original") to the API path
    serving it; `files` maps the same names to the files written on disk.
    """
    filename: str  # the stem
    urls: Dict[str, str] = field(default_factory=dict)
    files: Dict[str, Path] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, object]:
        return {"filename": self.filename, "urls": dict(self.urls)}


@dataclass
class ResolvedJacket:
    """Location of one jacket variant on disk."""
    file_path: Path
    content_type: str
    size: str


@dataclass
class JacketImage:
    """Bytes of one jacket variant ready to be served."""
    data: bytes
    content_type: str
    size: str


@dataclass
class Author:
    id: str
    first_name: str
    last_name: str
    created_at: datetime = field(default_factory=datetime.utcnow)

    @staticmethod
    def generate_id() -> str:
        return str(uuid.uuid4())


@dataclass
class Shelf:
    id: str
    name: str
    location: Optional[str] = None
    created_at: datetime = field(default_factory=datetime.utcnow)

    @staticmethod
    def generate_id() -> str:
        return str(uuid.uuid4())


@dataclass
class Book:
    """
    A book in the catalog.

    `jacket` holds the stem of the active jacket image set, or None. It is the
    single source of truth for which stem is current; it changes only through
    the jacket service.
    """
    id: str
    title: str
    author_id: str
    isbn: str
    date: Optional[date_type] = None
    description: Optional[str] = None
    jacket: Optional[str] = None
    shelf_id: Optional[str] = None
    created_at: datetime = field(default_factory=datetime.utcnow)

    @staticmethod
    def generate_id() -> str:
        return str(uuid.uuid4())
