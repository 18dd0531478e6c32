import sys
from io import BytesIO
from pathlib import Path

import pytest
from PIL import Image
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Ensure the backend package root is on sys.path for direct pytest runs
BACKEND_ROOT = Path(__file__).resolve().parents[1]
if str(BACKEND_ROOT) not in sys.path:
    sys.path.insert(0, str(BACKEND_ROOT))

from db import Base  # noqa: E402
from repositories import models  # noqa: E402,F401  Ensures models are registered
from storage.file_storage import JacketStorage  # noqa: E402


@pytest.fixture
def make_image():
    """Factory for encoded test images."""

    def _make(size=(600, 900), fmt="JPEG", color=(200, 40, 40), mode="RGB") -> bytes:
        if mode == "RGBA" and len(color) == 3:
            color = (*color, 128)
        img = Image.new(mode, size, color=color)
        buf = BytesIO()
        img.save(buf, format=fmt)
        return buf.getvalue()

    return _make


@pytest.fixture
def jacket_storage(tmp_path) -> JacketStorage:
    return JacketStorage(tmp_path / "jackets")


@pytest.fixture
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(bind=engine, autoflush=False, autocommit=False)
    engine.dispose()


@pytest.fixture
def stored_files():
    """Lists every file under a jackets root."""

    def _list(root: Path) -> list:
        if not root.exists():
            return []
        return sorted(p for p in root.rglob("*") if p.is_file())

    return _list
