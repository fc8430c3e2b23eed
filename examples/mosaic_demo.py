#!/usr/bin/env python3
"""
Simple demo script showing mosaic generation.

Usage: python examples/mosaic_demo.py [input_image] [output.png]
Without arguments a synthetic image is used and nothing is written.
"""

import sys

import numpy as np
from PIL import ImageDraw

from py_lowpoly.core import ImageBuffer, MosaicConfig, generate_mosaic


def synthetic_image(width=240, height=160):
    """Gradient background with a few bright shapes."""
    ys, xs = np.mgrid[0:height, 0:width]
    data = np.zeros((height, width, 3), dtype=np.uint8)
    data[:, :, 0] = xs * 255 // width
    data[:, :, 2] = ys * 255 // height
    disc = (xs - 70) ** 2 + (ys - 80) ** 2 < 40 ** 2
    data[disc] = (240, 220, 60)
    data[30:130, 150:200] = (30, 160, 90)
    return ImageBuffer.from_array(data)


def main():
    """Demonstrate mosaic generation."""
    print("Py-Lowpoly Mosaic Demo")
    print("=" * 40)

    image = ImageBuffer.open(sys.argv[1]) if len(sys.argv) > 1 else synthetic_image()
    image = image.fit_to_bounds(800, 800)
    print(f"\nImage: {image.width}x{image.height}")

    for rate in (0.02, 0.05, 0.1):
        for mode in ("quick", "exact"):
            config = MosaicConfig(sample_rate=rate, color_mode=mode, seed=42)
            mosaic = generate_mosaic(image, config)
            print(f"  rate={rate:<5} mode={mode:<6} "
                  f"sites={len(mosaic.sampled_points):5d} "
                  f"background={len(mosaic.remaining_points):6d} "
                  f"triangles={len(mosaic):5d}")

    if len(sys.argv) > 2:
        mosaic = generate_mosaic(image, MosaicConfig(sample_rate=0.05, color_mode="exact", seed=42))
        canvas = image.to_pil().convert("RGB")
        draw = ImageDraw.Draw(canvas)
        for triangle, color in mosaic.cells():
            draw.polygon([tuple(v) for v in triangle.vertices], fill=tuple(color))
        canvas.save(sys.argv[2])
        print(f"\nSaved mosaic to {sys.argv[2]}")


if __name__ == "__main__":
    main()
