"""
Resolves a (stem, size) pair to the jacket file serving it.
"""
from typing import Optional

from domain.errors import UnsupportedSizeError
from domain.models import ResolvedJacket
from storage.file_storage import JacketStorage


class JacketRetrievalService:
    def __init__(self, storage: JacketStorage):
        self.storage = storage

    def resolve(self, stem: str, size: str) -> Optional[ResolvedJacket]:
        """
        Locate one variant of a stem.

        No caching: the filesystem is checked on every call, since a stem can
        be deleted at any time.

        Returns:
            The file path and content type, or None when the file is not on disk.

        Raises:
            UnsupportedSizeError: if `size` is neither a configured variant nor "original".
        """
        spec = self.storage.spec_for(size)
        if spec is None:
            raise UnsupportedSizeError(size)
        path = self.storage.path_for(stem, size)
        if not path.is_file():
            return None
        return ResolvedJacket(file_path=path, content_type=spec.content_type, size=size)
