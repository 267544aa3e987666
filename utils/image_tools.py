from dataclasses import dataclass
from io import BytesIO

from PIL import Image, ImageOps, UnidentifiedImageError

MAX_UPLOAD_BYTES = 5 * 1024 * 1024

DEFAULT_MAX_WIDTH = 1200
DEFAULT_MAX_HEIGHT = 1200
DEFAULT_QUALITY = 0.8
DEFAULT_OUTPUT_TYPE = "image/jpeg"

# Output MIME type -> Pillow encoder
_ENCODERS = {"image/jpeg": "JPEG"}


class ImageValidationError(ValueError):
    """Upload rejected before any compression or backend call."""

    def __init__(self, message: str, too_large: bool = False):
        super().__init__(message)
        self.too_large = too_large


@dataclass
class CompressedImage:
    filename: str
    content_type: str
    data: bytes
    width: int
    height: int


def validate_image_upload(content_type: str | None, size: int, max_bytes: int = MAX_UPLOAD_BYTES) -> None:
    """MIME prefix and size cap checks, in that order."""
    if not content_type or not content_type.startswith("image/"):
        raise ImageValidationError("Please select an image file")
    if size > max_bytes:
        raise ImageValidationError(
            f"File is larger than {max_bytes // (1024 * 1024)} MB", too_large=True
        )


def compute_target_size(
    width: int,
    height: int,
    max_width: int = DEFAULT_MAX_WIDTH,
    max_height: int = DEFAULT_MAX_HEIGHT,
) -> tuple[int, int]:
    """
    Two sequential passes: the width bound first, then the height bound
    on the already-shrunk size. Fractions truncate like canvas dimensions.
    """
    w, h = float(width), float(height)
    if w > max_width:
        h = h * max_width / w
        w = max_width
    if h > max_height:
        w = w * max_height / h
        h = max_height
    return max(int(w), 1), max(int(h), 1)


def compress_image(
    data: bytes,
    filename: str,
    content_type: str | None,
    max_width: int = DEFAULT_MAX_WIDTH,
    max_height: int = DEFAULT_MAX_HEIGHT,
    quality: float = DEFAULT_QUALITY,
    output_type: str = DEFAULT_OUTPUT_TYPE,
) -> CompressedImage:
    """
    Re-encodes an uploaded image for the gallery:
    - rejects non-image MIME types before decoding anything;
    - applies the EXIF orientation and drops the metadata;
    - fits the picture into max_width x max_height (see compute_target_size);
    - flattens transparency onto white and saves as JPEG at `quality` (0..1).

    The original file name is kept. Raises ValueError when the data can't be
    decoded or the encoder returns nothing.
    """
    if not content_type or not content_type.startswith("image/"):
        raise ImageValidationError("Please select an image file")
    encoder = _ENCODERS.get(output_type)
    if encoder is None:
        raise ValueError(f"Unsupported output type: {output_type}")

    try:
        img = Image.open(BytesIO(data))
        img.load()
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError) as exc:
        raise ValueError("Could not decode image") from exc

    img = ImageOps.exif_transpose(img)

    width, height = compute_target_size(img.width, img.height, max_width, max_height)
    if (width, height) != img.size:
        img = img.resize((width, height), Image.LANCZOS)

    if img.mode in ("RGBA", "LA", "P"):
        rgba = img.convert("RGBA")
        background = Image.new("RGB", rgba.size, (255, 255, 255))
        background.paste(rgba, mask=rgba.getchannel("A"))
        img = background
    elif img.mode != "RGB":
        img = img.convert("RGB")

    buf = BytesIO()
    img.save(buf, encoder, quality=int(round(quality * 100)), optimize=True)
    encoded = buf.getvalue()
    if not encoded:
        raise ValueError("Could not encode image")

    return CompressedImage(
        filename=filename,
        content_type=output_type,
        data=encoded,
        width=width,
        height=height,
    )
