"""Error types raised by the mosaic core."""


class InvalidInputError(ValueError):
    """Raised when a value is rejected at construction time.

    Covers triangles built from the wrong number of vertices, convolution
    kernels that are not square with an odd side, and pixel data that
    cannot be turned into an RGBA buffer.
    """
