"""
Pillow-backed image codec for jacket images.

Decodes raster input and writes re-encoded output straight to disk. Knows
nothing about stems or the storage layout.
"""
from io import BytesIO
from pathlib import Path

from PIL import Image, ImageOps, UnidentifiedImageError

from domain.errors import CodecError
from domain.models import ORIGINAL_SPEC, SizeVariantSpec

# Encoders that cannot carry an alpha channel
_OPAQUE_ENCODERS = {"JPEG"}


def _decode(image_bytes: bytes) -> Image.Image:
    try:
        img = Image.open(BytesIO(image_bytes))
        img.load()
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as e:
        raise CodecError(f"Could not decode image: {e}") from e
    # Respect camera orientation before any crop
    return ImageOps.exif_transpose(img)


def _prepare_mode(img: Image.Image, encoder: str) -> Image.Image:
    has_alpha = img.mode in ("RGBA", "LA") or (img.mode == "P" and "transparency" in img.info)
    if encoder in _OPAQUE_ENCODERS or not has_alpha:
        return img if img.mode == "RGB" else img.convert("RGB")
    return img if img.mode == "RGBA" else img.convert("RGBA")


def _save(img: Image.Image, destination: Path, spec: SizeVariantSpec) -> None:
    try:
        img = _prepare_mode(img, spec.encoder)
        img.save(destination, format=spec.encoder, quality=spec.quality)
    except (OSError, ValueError, KeyError) as e:
        raise CodecError(f"Could not encode {spec.name} image to {destination}: {e}") from e


def encode_cover(image_bytes: bytes, spec: SizeVariantSpec, destination: Path) -> Path:
    """
    Re-encode an image to exactly spec.width x spec.height.

    Uses a cover fit: the image is scaled to fill the target box and the
    overflow is cropped symmetrically around the center (no letterboxing).

    Args:
        image_bytes: Encoded source image
        spec: Target size, quality and format
        destination: File to write

    Returns:
        The destination path.

    Raises:
        CodecError: if the bytes cannot be decoded or the output cannot be written.
    """
    # Palette and bilevel images only resize with NEAREST, so convert first
    try:
        img = _prepare_mode(_decode(image_bytes), spec.encoder)
    except (OSError, ValueError) as e:
        raise CodecError(f"Could not convert image for {spec.name}: {e}") from e
    fitted = ImageOps.fit(
        img,
        (spec.width, spec.height),
        method=Image.Resampling.LANCZOS,
        centering=(0.5, 0.5),
    )
    _save(fitted, Path(destination), spec)
    return Path(destination)


def encode_original(image_bytes: bytes, destination: Path, spec: SizeVariantSpec = ORIGINAL_SPEC) -> Path:
    """Store the image at full size in the canonical original format."""
    img = _decode(image_bytes)
    _save(img, Path(destination), spec)
    return Path(destination)
