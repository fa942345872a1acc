"""
Screenshot comparison.

Compares a page screenshot with the reference layout pixel by pixel and
paints a diff image highlighting the mismatching areas.
"""

import io
import logging

import numpy as np
from PIL import Image
from pydantic import BaseModel, ConfigDict, Field

from .models import ImageDiffOptions

logger = logging.getLogger(__name__)

# Per-channel tolerance of each ignore mode
_TOLERANCES: dict[str, int] = {
    "nothing": 0,
    "less": 16,
    "antialiasing": 32,
    "colors": 16,
    "alpha": 16,
}


class ComparisonResult(BaseModel):
    """
    Outcome of an image comparison.

    Attributes:
        mismatch_percentage: Share of mismatching pixels, 0..100, two decimals.
        diff_image: Highlighted difference, None when disabled.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    mismatch_percentage: float = Field(..., ge=0, le=100)
    diff_image: Image.Image | None = None

    def get_buffer(self, format: str = "JPEG") -> bytes:
        """Encode the diff image."""
        if self.diff_image is None:
            raise ValueError("No diff image was produced")
        buffer = io.BytesIO()
        self.diff_image.save(buffer, format=format)
        return buffer.getvalue()


def _brightness(pixels: np.ndarray) -> np.ndarray:
    return 0.3 * pixels[..., 0] + 0.59 * pixels[..., 1] + 0.11 * pixels[..., 2]


def _align(
    reference: Image.Image,
    actual: Image.Image,
    scale_to_same_size: bool,
) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Bring both images to a common size.

    Returns:
        Reference pixels, actual pixels and a mask of the pixels that lie
        inside both images.
    """
    if scale_to_same_size:
        if actual.size != reference.size:
            logger.debug("Resizing screenshot %s to %s", actual.size, reference.size)
            actual = actual.resize(reference.size, Image.Resampling.LANCZOS)
        mask = np.ones((reference.height, reference.width), dtype=bool)
        return np.asarray(reference, dtype=np.int16), np.asarray(actual, dtype=np.int16), mask

    width = max(reference.width, actual.width)
    height = max(reference.height, actual.height)
    ref_pixels = np.zeros((height, width, 4), dtype=np.int16)
    act_pixels = np.zeros((height, width, 4), dtype=np.int16)
    ref_pixels[:reference.height, :reference.width] = np.asarray(reference, dtype=np.int16)
    act_pixels[:actual.height, :actual.width] = np.asarray(actual, dtype=np.int16)

    mask = np.zeros((height, width), dtype=bool)
    mask[:min(reference.height, actual.height), :min(reference.width, actual.width)] = True
    return ref_pixels, act_pixels, mask


def _mismatch_mask(ref: np.ndarray, act: np.ndarray, ignore: str) -> np.ndarray:
    tolerance = _TOLERANCES[ignore]
    if ignore == "colors":
        return np.abs(_brightness(ref) - _brightness(act)) > tolerance
    channels = 3 if ignore == "alpha" else 4
    return (np.abs(ref[..., :channels] - act[..., :channels]) > tolerance).any(axis=-1)


def _paint_diff(act: np.ndarray, errors: np.ndarray, options: ImageDiffOptions) -> Image.Image:
    gray = _brightness(act) * options.transparency + 255 * (1 - options.transparency)
    out = np.repeat(gray[..., np.newaxis], 3, axis=-1)

    color = np.array(options.error_color, dtype=np.float64)
    if options.error_type == "flat":
        out[errors] = color
    else:
        out[errors] = (act[errors][:, :3] * (color / 255) + color) / 2

    return Image.fromarray(np.clip(out, 0, 255).astype(np.uint8))


def compare_images(
    reference: bytes,
    actual: bytes,
    options: ImageDiffOptions | None = None,
) -> ComparisonResult:
    """
    Compare two encoded images.

    Args:
        reference: Encoded reference image.
        actual: Encoded image under test.
        options: Comparison options, defaults when omitted.

    Returns:
        ComparisonResult with the mismatch percentage and the diff image.
    """
    options = options or ImageDiffOptions()
    ref_image = Image.open(io.BytesIO(reference)).convert("RGBA")
    act_image = Image.open(io.BytesIO(actual)).convert("RGBA")

    ref, act, inside = _align(ref_image, act_image, options.scale_to_same_size)
    errors = _mismatch_mask(ref, act, options.ignore) | ~inside

    total = errors.size
    mismatch = round(float(errors.sum()) * 100 / total, 2) if total else 0.0
    logger.debug("Mismatch: %.2f%% of %d pixels", mismatch, total)

    diff_image = _paint_diff(act, errors, options) if options.output_diff else None
    return ComparisonResult(mismatch_percentage=mismatch, diff_image=diff_image)
