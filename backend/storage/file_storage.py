"""
Jacket file storage.

Owns the on-disk layout for jacket images. Files are organized as:
- <root>/original/{stem}.jpg     - full quality original
- <root>/{variant}/{stem}.{ext}  - one directory per configured size variant

Everything here is path arithmetic plus directory creation and deletion;
encoding lives in services.image_codec.
"""
import logging
from pathlib import Path
from typing import Dict, Mapping, Optional, Set

from domain.models import JACKET_SIZES, ORIGINAL_SPEC, ORIGINAL_VARIANT, SizeVariantSpec

logger = logging.getLogger(__name__)


class JacketStorage:
    """Local filesystem layout for jacket variant sets."""

    def __init__(
        self,
        root: str | Path,
        sizes: Optional[Mapping[str, SizeVariantSpec]] = None,
        original: SizeVariantSpec = ORIGINAL_SPEC,
    ):
        self.root = Path(root)
        self.sizes: Dict[str, SizeVariantSpec] = dict(sizes if sizes is not None else JACKET_SIZES)
        self.original = original

    @property
    def variant_names(self) -> list[str]:
        """Configured size names followed by "original"."""
        return [*self.sizes.keys(), ORIGINAL_VARIANT]

    def ensure_layout(self) -> None:
        """Create the root and every variant directory. Safe to call repeatedly."""
        for name in self.variant_names:
            (self.root / name).mkdir(parents=True, exist_ok=True)

    def spec_for(self, variant: str) -> Optional[SizeVariantSpec]:
        if variant == ORIGINAL_VARIANT:
            return self.original
        return self.sizes.get(variant)

    def original_path(self, stem: str) -> Path:
        return self.root / ORIGINAL_VARIANT / f"{stem}.{self.original.format}"

    def variant_path(self, stem: str, spec: SizeVariantSpec) -> Path:
        return self.root / spec.name / f"{stem}.{spec.format}"

    def path_for(self, stem: str, variant: str) -> Optional[Path]:
        """Path of one variant of a stem, or None for an unknown variant name."""
        spec = self.spec_for(variant)
        if spec is None:
            return None
        if variant == ORIGINAL_VARIANT:
            return self.original_path(stem)
        return self.variant_path(stem, spec)

    def stem_paths(self, stem: str) -> Dict[str, Path]:
        """Every file path belonging to a stem, keyed by variant name."""
        paths = {name: self.variant_path(stem, spec) for name, spec in self.sizes.items()}
        paths[ORIGINAL_VARIANT] = self.original_path(stem)
        return paths

    def delete_stem(self, stem: str) -> int:
        """
        Remove every variant file of a stem.

        Best-effort: missing files are skipped and other filesystem errors are
        logged, never raised.

        Returns:
            Number of files actually removed.
        """
        removed = 0
        for variant, path in self.stem_paths(stem).items():
            try:
                path.unlink()
                removed += 1
            except FileNotFoundError:
                continue
            except OSError as e:
                logger.warning("Could not delete %s jacket file %s: %s", variant, path, e)
        return removed

    def list_stems(self) -> Set[str]:
        """Stems with at least one file anywhere in the layout."""
        stems: Set[str] = set()
        for name in self.variant_names:
            spec = self.spec_for(name)
            directory = self.root / name
            if not directory.is_dir():
                continue
            for path in directory.glob(f"*.{spec.format}"):
                if path.is_file():
                    stems.add(path.stem)
        return stems
