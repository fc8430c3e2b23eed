"""
Convolution filters for feature extraction.

Implements the three filters the mosaic pipeline chains together:
- Luminance grayscale conversion
- Uniform box blur
- Laplacian-like edge detection ("value minus k^2 times local mean")

Every filter reads an ImageBuffer and returns a freshly allocated one.
"""

import math

import numpy as np
import structlog
from scipy import ndimage

from .errors import InvalidInputError
from .image_buffer import ImageBuffer

logger = structlog.get_logger()

# ITU-R BT.709 luma coefficients
LUMA_RED = 0.2126
LUMA_GREEN = 0.7152
LUMA_BLUE = 0.0722


def _check_kernel_size(size: int) -> None:
    if size < 1 or size % 2 == 0:
        raise InvalidInputError(f"Kernel size must be a positive odd integer, got {size}")


def box_blur_kernel(size: int) -> np.ndarray:
    """Uniform size x size kernel with every weight 1/size^2."""
    _check_kernel_size(size)
    return np.full((size, size), 1.0 / (size * size))


def edge_kernel(size: int) -> np.ndarray:
    """
    High-pass kernel of ones with centre weight 1 - size^2.

    The weights sum to zero, so a flat neighbourhood filters to zero.
    """
    _check_kernel_size(size)
    kernel = np.ones((size, size))
    kernel[size // 2, size // 2] = 1 - size * size
    return kernel


def as_square_kernel(kernel) -> np.ndarray:
    """
    Normalise a kernel to a square 2-D float array.

    Args:
        kernel: 2-D square array, or flat sequence of k*k weights

    Returns:
        Kernel as a (k, k) float64 array

    Raises:
        InvalidInputError: If the kernel is not square or its side is even
    """
    weights = np.asarray(kernel, dtype=np.float64)

    if weights.ndim == 1:
        side = math.isqrt(len(weights))
        if side * side != len(weights):
            raise InvalidInputError(
                f"Flat kernel of length {len(weights)} is not a perfect square"
            )
        weights = weights.reshape(side, side)
    elif weights.ndim != 2 or weights.shape[0] != weights.shape[1]:
        raise InvalidInputError(f"Kernel must be square, got shape {weights.shape}")

    _check_kernel_size(weights.shape[0])
    return weights


def apply_convolution(kernel, image: ImageBuffer) -> ImageBuffer:
    """
    Apply a square kernel to the R, G and B channels of an image.

    Each output channel is the weighted sum of the k x k neighbourhood of
    the matching input pixel, rounded and clamped to [0, 255]. Neighbours
    outside the image take the value of the nearest edge pixel. Alpha is
    copied unchanged.

    Args:
        kernel: Square kernel (2-D array or flat list of k*k weights)
        image: Source buffer (not modified)

    Returns:
        New filtered ImageBuffer of the same size
    """
    weights = as_square_kernel(kernel)
    source = image.data.astype(np.float64)

    output = np.empty_like(image.data)
    for channel in range(3):
        # correlate == convolve for the symmetric kernels used here,
        # and matches the neighbourhood-weighting definition for any kernel
        filtered = ndimage.correlate(source[:, :, channel], weights, mode="nearest")
        output[:, :, channel] = np.clip(np.rint(filtered), 0, 255)
    output[:, :, 3] = image.data[:, :, 3]

    return ImageBuffer(width=image.width, height=image.height, data=output)


def grayscale(image: ImageBuffer) -> ImageBuffer:
    """
    Convert to luminance, broadcast to R, G and B with opaque alpha.

    Args:
        image: Source buffer

    Returns:
        New grayscale ImageBuffer
    """
    rgb = image.data[:, :, :3].astype(np.float64)
    luma = LUMA_RED * rgb[:, :, 0] + LUMA_GREEN * rgb[:, :, 1] + LUMA_BLUE * rgb[:, :, 2]
    luma = np.clip(np.rint(luma), 0, 255).astype(np.uint8)

    output = np.empty_like(image.data)
    output[:, :, 0] = luma
    output[:, :, 1] = luma
    output[:, :, 2] = luma
    output[:, :, 3] = 255

    return ImageBuffer(width=image.width, height=image.height, data=output)


def blur(image: ImageBuffer, size: int = 5) -> ImageBuffer:
    return apply_convolution(box_blur_kernel(size), image)


def detect_edges(image: ImageBuffer, size: int = 5) -> ImageBuffer:
    return apply_convolution(edge_kernel(size), image)
