"""
Receipt image pre-processing ahead of an external OCR step.
"""

from pathlib import Path
from typing import Optional

from .utils import IMAGE_EXTS


def contrast_factor(contrast: float) -> float:
    """Standard contrast-correction factor for a 0-255 channel."""
    return (259 * (contrast + 255)) / (255 * (259 - contrast))


def preprocess_image(src: Path, dest: Optional[Path] = None,
                     contrast: float = 1.5, threshold: int = 128):
    """
    Convert a receipt image to high-contrast black and white.

    Args:
        src: Image file to read
        dest: Where to save the result (optional)
        contrast: Contrast adjustment applied around mid-gray
        threshold: Pixels brighter than this after the contrast step become white

    Returns:
        The processed PIL image (mode "L", values 0 or 255)
    """
    from PIL import Image

    if src.suffix.lower() not in IMAGE_EXTS:
        raise ValueError(f"Unsupported file type: {src}")

    factor = contrast_factor(contrast)
    lut = [255 if factor * (v - 128) + 128 > threshold else 0 for v in range(256)]

    with Image.open(src) as img:
        gray = img.convert("L")
    result = gray.point(lut)

    if dest is not None:
        dest.parent.mkdir(parents=True, exist_ok=True)
        result.save(dest)
    return result
