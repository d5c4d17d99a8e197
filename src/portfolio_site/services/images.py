"""Image normalization for stored profile photos."""

import io
from dataclasses import dataclass

from PIL import Image, ImageOps, UnidentifiedImageError

from portfolio_site.domain.errors import DecodeError

MAX_EDGE = 768
JPEG_QUALITY = 85
JPEG_MEDIA_TYPE = "image/jpeg"


@dataclass(frozen=True)
class NormalizedImage:
    """Re-encoded image ready for persistence."""

    data: bytes
    media_type: str
    width: int
    height: int


def target_size(width: int, height: int, max_edge: int = MAX_EDGE) -> tuple[int, int]:
    """Clamp the longer edge to max_edge while keeping the aspect ratio."""
    if width > height:
        if width > max_edge:
            height = max(1, _round_half_up(height * max_edge / width))
            width = max_edge
    elif height > max_edge:
        width = max(1, _round_half_up(width * max_edge / height))
        height = max_edge
    return width, height


def normalize_image(
    raw: bytes, max_edge: int = MAX_EDGE, quality: int = JPEG_QUALITY
) -> NormalizedImage:
    """Decode, downsample and re-encode an image as JPEG.

    Raises DecodeError when the bytes are not a readable image. Every Pillow
    image created here is closed before returning, on success or failure.
    """
    if not raw:
        raise DecodeError("Empty image payload")
    try:
        with Image.open(io.BytesIO(raw)) as source:
            source.load()
            with _upright(source) as upright:
                size = target_size(upright.width, upright.height, max_edge)
                with _flatten(upright) as flat:
                    if flat.size == size:
                        return _encode(flat, quality)
                    with flat.resize(size, Image.Resampling.LANCZOS) as resized:
                        return _encode(resized, quality)
    except (UnidentifiedImageError, Image.DecompressionBombError) as exc:
        raise DecodeError(str(exc)) from exc
    except (OSError, ValueError, SyntaxError) as exc:
        raise DecodeError(f"Unreadable image: {exc}") from exc


def _upright(image: Image.Image) -> Image.Image:
    """Return a copy rotated according to its EXIF orientation tag."""
    transposed = ImageOps.exif_transpose(image)
    if transposed is None or transposed is image:
        return image.copy()
    return transposed


def _flatten(image: Image.Image) -> Image.Image:
    """Convert to RGB, compositing transparency onto black like a canvas export."""
    if image.mode in {"RGBA", "LA", "PA"} or (
        image.mode == "P" and "transparency" in image.info
    ):
        with image.convert("RGBA") as rgba:
            background = Image.new("RGB", rgba.size, (0, 0, 0))
            background.paste(rgba, mask=rgba.getchannel("A"))
            return background
    return image.convert("RGB")


def _encode(image: Image.Image, quality: int) -> NormalizedImage:
    buffer = io.BytesIO()
    image.save(buffer, format="JPEG", quality=quality)
    return NormalizedImage(
        data=buffer.getvalue(),
        media_type=JPEG_MEDIA_TYPE,
        width=image.width,
        height=image.height,
    )


def _round_half_up(value: float) -> int:
    return int(value + 0.5)
