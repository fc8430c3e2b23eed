"""Tests for convolution filters."""

import pytest
import numpy as np

from py_lowpoly.core.convolution import (
    apply_convolution, as_square_kernel, blur, box_blur_kernel,
    detect_edges, edge_kernel, grayscale
)
from py_lowpoly.core.errors import InvalidInputError
from py_lowpoly.core.image_buffer import ImageBuffer


class TestKernels:
    """Test kernel construction and validation."""

    def test_box_blur_weights(self):
        """Test that box blur weights are uniform and sum to one."""
        kernel = box_blur_kernel(3)

        assert kernel.shape == (3, 3)
        np.testing.assert_allclose(kernel, 1 / 9)
        assert kernel.sum() == pytest.approx(1.0)

    def test_edge_kernel_weights(self):
        """Test centre weight 1 - k^2 and zero total."""
        kernel = edge_kernel(5)

        assert kernel[2, 2] == -24
        assert np.count_nonzero(kernel == 1) == 24
        assert kernel.sum() == 0

    def test_flat_kernel_reshaped(self):
        """Test that a flat list of k*k weights is accepted."""
        kernel = as_square_kernel([0, 0, 0, 0, 1, 0, 0, 0, 0])
        assert kernel.shape == (3, 3)

    @pytest.mark.parametrize("kernel", [
        [1, 2, 3, 4, 5],
        np.ones((3, 5)),
        np.ones((2, 2)),
        np.ones((3, 3, 3)),
    ])
    def test_invalid_kernels_rejected(self, kernel):
        """Test that non-square or even kernels fail fast."""
        with pytest.raises(InvalidInputError):
            as_square_kernel(kernel)

    def test_even_size_rejected(self):
        """Test kernel factories reject even sides."""
        with pytest.raises(InvalidInputError):
            box_blur_kernel(4)
        with pytest.raises(InvalidInputError):
            edge_kernel(0)


class TestGrayscale:
    """Test luminance conversion."""

    def test_luminance_weights(self):
        """Test the BT.709 weighting and channel broadcast."""
        image = ImageBuffer.filled(2, 2, (100, 50, 200, 10))
        gray = grayscale(image)

        expected = round(0.2126 * 100 + 0.7152 * 50 + 0.0722 * 200)
        assert gray.pixel(1, 1) == (expected, expected, expected, 255)

    def test_white_stays_white(self):
        """Test that the weights sum to one."""
        gray = grayscale(ImageBuffer.filled(1, 1, (255, 255, 255)))
        assert gray.pixel(0, 0) == (255, 255, 255, 255)

    def test_input_untouched(self):
        """Test that a new buffer is returned."""
        image = ImageBuffer.filled(2, 2, (100, 50, 200))
        gray = grayscale(image)

        assert gray is not image
        assert image.pixel(0, 0) == (100, 50, 200, 255)


class TestApplyConvolution:
    """Test kernel application."""

    def test_identity_kernel(self):
        """Test that a centre-only kernel reproduces the input."""
        rng = np.random.default_rng(1)
        image = ImageBuffer.from_array(rng.integers(0, 256, size=(6, 7, 3)))
        identity = np.zeros((3, 3))
        identity[1, 1] = 1

        result = apply_convolution(identity, image)
        np.testing.assert_array_equal(result.data, image.data)

    def test_alpha_copied(self):
        """Test that alpha is copied unchanged."""
        data = np.zeros((3, 3, 4), dtype=np.uint8)
        data[:, :, 3] = 77
        image = ImageBuffer(width=3, height=3, data=data)

        result = blur(image, 3)
        assert np.all(result.data[:, :, 3] == 77)

    def test_blur_flat_image_unchanged(self):
        """Test that blurring a flat image leaves it flat, borders included."""
        image = ImageBuffer.filled(8, 6, (37, 37, 37))
        result = blur(image, 5)

        np.testing.assert_array_equal(result.data, image.data)

    def test_edge_filter_flat_image_is_zero(self):
        """Test that a size-5 edge kernel finds no edges in a flat image."""
        image = ImageBuffer.filled(9, 9, (180, 180, 180))
        result = detect_edges(image, 5)

        assert np.all(result.data[:, :, :3] == 0)

    def test_output_clamped(self):
        """Test that sums above 255 and below 0 are clamped."""
        data = np.zeros((5, 5, 4), dtype=np.uint8)
        data[2, 2, :3] = 200
        data[:, :, 3] = 255
        image = ImageBuffer(width=5, height=5, data=data)

        result = detect_edges(image, 3)
        # centre: 200 * (1 - 9) < 0, neighbours: 200 * 1
        assert result.pixel(2, 2)[0] == 0
        assert result.pixel(1, 1)[0] == 200

        doubled = apply_convolution(np.full((3, 3), 2.0), image)
        assert doubled.pixel(2, 2)[0] == 255

    def test_border_uses_nearest_pixel(self):
        """Test clamp-to-edge handling at the image border."""
        data = np.zeros((1, 3, 4), dtype=np.uint8)
        data[0, :, 0] = [0, 0, 90]
        data[:, :, 3] = 255
        image = ImageBuffer(width=3, height=1, data=data)

        result = blur(image, 3)
        # right column sees (0, 90, 90) in each row of the window
        assert result.pixel(2, 0)[0] == 60
        assert result.pixel(0, 0)[0] == 0
