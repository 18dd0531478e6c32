"""
Jacket processing pipeline.

Turns one validated upload into a complete variant set for a fresh stem: the
original plus every configured size. Encoding is CPU bound, so each encode
runs on a worker thread and the size variants are produced concurrently.
"""
import asyncio
import logging
from pathlib import Path
from typing import Dict, Optional

from domain.errors import ProcessingError
from domain.models import ORIGINAL_VARIANT, VariantManifest
from services import image_codec
from storage.file_storage import JacketStorage

logger = logging.getLogger(__name__)


def jacket_url(book_id: str, variant: str) -> str:
    return f"/books/{book_id}/jacket/{variant}"


class JacketPipeline:
    def __init__(self, storage: JacketStorage, max_concurrency: int = 3):
        self.storage = storage
        self.max_concurrency = max(1, max_concurrency)

    async def process(self, image_bytes: bytes, stem: str, book_id: str) -> VariantManifest:
        """
        Write the original and every size variant for `stem`.

        The stem must be fresh: nothing else may be writing to it. On failure
        the partial stem is removed on a best-effort basis and ProcessingError
        is raised; the caller must then treat the stem as never committed.

        Returns:
            Manifest with a URL and a file path for each variant, "original" included.
        """
        try:
            await asyncio.to_thread(self.storage.ensure_layout)
            files = await self._write_all(image_bytes, stem)
            self._check_outputs(files)
        except ProcessingError:
            await self._discard(stem)
            raise
        except Exception as e:
            logger.error("Jacket processing failed for stem %s: %s", stem, e)
            await self._discard(stem)
            raise ProcessingError(f"Failed to process jacket image: {e}") from e

        urls = {name: jacket_url(book_id, name) for name in files}
        return VariantManifest(filename=stem, urls=urls, files=files)

    async def _write_all(self, image_bytes: bytes, stem: str) -> Dict[str, Path]:
        semaphore = asyncio.Semaphore(self.max_concurrency)

        async def run(func, *args) -> Path:
            async with semaphore:
                return await asyncio.to_thread(func, *args)

        original_path = self.storage.original_path(stem)
        jobs = {ORIGINAL_VARIANT: run(image_codec.encode_original, image_bytes, original_path, self.storage.original)}
        for name, spec in self.storage.sizes.items():
            jobs[name] = run(image_codec.encode_cover, image_bytes, spec, self.storage.variant_path(stem, spec))

        results = await asyncio.gather(*jobs.values(), return_exceptions=True)
        failure: Optional[BaseException] = None
        files: Dict[str, Path] = {}
        for name, result in zip(jobs.keys(), results):
            if isinstance(result, BaseException):
                logger.warning("Jacket variant %s failed for stem %s: %s", name, stem, result)
                failure = failure or result
            else:
                files[name] = result
        if failure is not None:
            raise failure

        # Sizes first, original last
        return {name: files[name] for name in self.storage.variant_names}

    def _check_outputs(self, files: Dict[str, Path]) -> None:
        for name, path in files.items():
            if not path.is_file() or path.stat().st_size == 0:
                raise ProcessingError(f"Jacket variant {name} was not written: {path}")

    async def _discard(self, stem: str) -> None:
        try:
            removed = await asyncio.to_thread(self.storage.delete_stem, stem)
            if removed:
                logger.info("Removed %d partial jacket files for stem %s", removed, stem)
        except Exception as e:
            logger.warning("Cleanup of partial jacket stem %s failed: %s", stem, e)
