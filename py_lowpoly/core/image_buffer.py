"""RGBA image buffer shared by every pipeline stage."""

import base64
import binascii
import io
from dataclasses import dataclass
from pathlib import Path
from typing import Tuple, Union

import numpy as np
import structlog
from PIL import Image

from .errors import InvalidInputError

logger = structlog.get_logger()


@dataclass(frozen=True, eq=False)
class ImageBuffer:
    """Immutable RGBA pixel buffer.

    Pixels are stored row-major with the origin at the top-left corner, as a
    ``(height, width, 4)`` uint8 array. The array is flagged read-only; every
    filter returns a new buffer instead of writing into its input, so the
    original image survives for colouring.
    """

    width: int
    height: int
    data: np.ndarray

    def __post_init__(self):
        data = np.array(self.data, dtype=np.uint8, copy=True)
        if data.shape != (self.height, self.width, 4):
            raise InvalidInputError(
                f"Pixel data shape {data.shape} does not match "
                f"{self.height}x{self.width}x4"
            )
        data.setflags(write=False)
        object.__setattr__(self, "data", data)

    @classmethod
    def from_array(cls, array) -> "ImageBuffer":
        """
        Build a buffer from a grayscale, RGB or RGBA array.

        Args:
            array: Array of shape (H, W), (H, W, 3) or (H, W, 4)

        Returns:
            New ImageBuffer; missing alpha is filled with 255
        """
        arr = np.asarray(array)
        if arr.ndim == 2:
            arr = np.repeat(arr[:, :, None], 3, axis=2)
        if arr.ndim != 3 or arr.shape[2] not in (3, 4):
            raise InvalidInputError(f"Unsupported pixel array shape {arr.shape}")

        arr = np.clip(arr, 0, 255).astype(np.uint8)
        if arr.shape[2] == 3:
            alpha = np.full(arr.shape[:2] + (1,), 255, dtype=np.uint8)
            arr = np.concatenate([arr, alpha], axis=2)

        height, width = arr.shape[:2]
        return cls(width=width, height=height, data=arr)

    @classmethod
    def filled(cls, width: int, height: int, color: Tuple[int, ...]) -> "ImageBuffer":
        """Build a buffer where every pixel has the same RGB(A) value."""
        rgba = tuple(color) + (255,) * (4 - len(color))
        data = np.empty((height, width, 4), dtype=np.uint8)
        data[:, :] = rgba
        return cls(width=width, height=height, data=data)

    @classmethod
    def from_pil(cls, image: Image.Image) -> "ImageBuffer":
        return cls.from_array(np.asarray(image.convert("RGBA")))

    @classmethod
    def open(cls, path: Union[str, Path]) -> "ImageBuffer":
        """Decode an image file from disk."""
        logger.info("Loading image", path=str(path))
        try:
            with Image.open(path) as image:
                return cls.from_pil(image)
        except FileNotFoundError:
            raise
        except (OSError, Image.DecompressionBombError) as e:
            raise InvalidInputError(f"Cannot decode image {path}") from e

    @classmethod
    def from_bytes(cls, payload: bytes) -> "ImageBuffer":
        """Decode encoded image bytes (PNG, JPEG, ...)."""
        try:
            with Image.open(io.BytesIO(payload)) as image:
                return cls.from_pil(image)
        except (OSError, Image.DecompressionBombError) as e:
            # truncated data only fails once the pixels are loaded
            raise InvalidInputError("Cannot decode image bytes") from e

    @classmethod
    def from_base64(cls, encoded: str) -> "ImageBuffer":
        """
        Decode a base64 image, optionally wrapped in a data URL.

        Args:
            encoded: Plain base64 or "data:image/png;base64,..." string

        Returns:
            Decoded ImageBuffer
        """
        # Strip data URL prefix if present
        if "," in encoded:
            _, encoded = encoded.split(",", 1)
        try:
            payload = base64.b64decode(encoded, validate=True)
        except (binascii.Error, ValueError) as e:
            raise InvalidInputError("Image is not valid base64") from e
        return cls.from_bytes(payload)

    def to_pil(self) -> Image.Image:
        return Image.fromarray(np.array(self.data))

    def pixel(self, x: int, y: int) -> Tuple[int, int, int, int]:
        """Return the RGBA value at column x, row y."""
        r, g, b, a = self.data[y, x]
        return int(r), int(g), int(b), int(a)

    @property
    def red(self) -> np.ndarray:
        return self.data[:, :, 0]

    def fit_to_bounds(self, max_width: int, max_height: int) -> "ImageBuffer":
        """
        Scale the image down so it fits inside max_width x max_height.

        The aspect ratio is preserved and images that already fit are
        returned unchanged.

        Args:
            max_width: Target width bound in pixels
            max_height: Target height bound in pixels

        Returns:
            ImageBuffer no larger than the bounds
        """
        scale = 1.0
        if self.width > max_width:
            scale = max_width / self.width
        if self.height > max_height:
            scale = min(scale, max_height / self.height)
        if scale >= 1.0:
            return self

        width = max(1, int(self.width * scale))
        height = max(1, int(self.height * scale))
        logger.info("Scaling image to fit bounds",
                    original=(self.width, self.height), scaled=(width, height))
        resized = self.to_pil().resize((width, height), Image.Resampling.BILINEAR)
        return ImageBuffer.from_pil(resized)
