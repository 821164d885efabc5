"""
Example: bilateral grid smoothing usage.

Demonstrates how to use bilagrid for:
- Per-channel RGB filtering with automatic range bandwidth
- Grayscale images (transparently filtered on a 3-axis grid)
- Luminance-only filtering
- The functional array interface
- Filtering image files

Usage:
    python examples/smoothing_usage.py [input.png ...]
"""

import logging
import sys
import time

import numpy as np

from bilagrid import (
    ArrayImage,
    FastBilateral,
    LuminanceBilateral,
    bilateral_filter,
    load_image,
    save_image,
)

# Configure logging to see grid sizes and timings
logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")


def generate_sample_image(width: int = 256, height: int = 192, gray: bool = False) -> np.ndarray:
    """Generate a noisy two-region test image (uint8 RGB)."""
    rng = np.random.default_rng(42)

    image = np.empty((height, width, 3), dtype=np.float64)
    image[:, : width // 2] = (60.0, 90.0, 160.0)
    image[:, width // 2 :] = (210.0, 180.0, 70.0)
    if gray:
        image[:] = image.mean(axis=2, keepdims=True)

    noise = rng.normal(0.0, 12.0, size=(height, width, 1 if gray else 3))
    return np.clip(image + noise, 0, 255).astype(np.uint8)


def region_std(pixels: np.ndarray) -> float:
    """Noise level inside the left region (away from the edge)."""
    h, w = pixels.shape[:2]
    return float(pixels[h // 4 : 3 * h // 4, w // 8 : 3 * w // 8, :3].astype(np.float64).std())


def example_1_rgb_auto():
    """Example 1: RGB filtering with automatic sigma_range."""
    print("\n" + "=" * 70)
    print("EXAMPLE 1: RGB Filtering (auto sigma_range)")
    print("=" * 70)

    pixels = generate_sample_image()
    bilateral = FastBilateral.auto(ArrayImage(pixels))

    start = time.perf_counter()
    result = bilateral.execute().result_image()
    elapsed = (time.perf_counter() - start) * 1000

    print(f"Grid sizes:  {bilateral.parameters.sizes}")
    print(f"sigma_range: {bilateral.sigma_range:.4f}")
    print(f"Noise std:   {region_std(pixels):.2f} -> {region_std(result.data):.2f}")
    print(f"Time:        {elapsed:.1f} ms")


def example_2_gray():
    """Example 2: Grayscale images collapse to a 3-axis grid."""
    print("\n" + "=" * 70)
    print("EXAMPLE 2: Grayscale Filtering")
    print("=" * 70)

    pixels = generate_sample_image(gray=True)
    bilateral = FastBilateral.auto(ArrayImage(pixels)).execute()

    print(f"Grid axes:   {bilateral.parameters.dimension} {bilateral.parameters.sizes}")
    print(f"Noise std:   {region_std(pixels):.2f} -> {region_std(bilateral.result_image().data):.2f}")


def example_3_luminance():
    """Example 3: Luminance-only filtering keeps chroma."""
    print("\n" + "=" * 70)
    print("EXAMPLE 3: Luminance Filtering")
    print("=" * 70)

    pixels = generate_sample_image()
    bilateral = LuminanceBilateral.auto(ArrayImage(pixels)).execute()

    print(f"Grid axes:   {bilateral.parameters.dimension} {bilateral.parameters.sizes}")
    print(f"Noise std:   {region_std(pixels):.2f} -> {region_std(bilateral.result_image().data):.2f}")


def example_4_functional():
    """Example 4: Functional interface with explicit bandwidths."""
    print("\n" + "=" * 70)
    print("EXAMPLE 4: Functional Interface")
    print("=" * 70)

    pixels = generate_sample_image()
    for sigma_space, sigma_range in [(4.0, 0.05), (8.0, 0.1), (16.0, 0.2)]:
        smooth = bilateral_filter(pixels, sigma_space=sigma_space, sigma_range=sigma_range)
        print(
            f"sigma_space={sigma_space:5.1f} sigma_range={sigma_range:.2f}: "
            f"noise std {region_std(smooth):.2f}"
        )


def filter_files(paths: list[str]):
    """Filter image files with both variants, writing *-filtered.png next to them."""
    for path in paths:
        image = load_image(path)
        bounds = image.bounds()
        print(f"\n{path} bounds: {bounds.width}x{bounds.height}")

        for name, cls in [("filtered", FastBilateral), ("filtered-lum", LuminanceBilateral)]:
            start = time.perf_counter()
            result = cls.auto(image).execute().result_image()
            print(f"{name} takes {(time.perf_counter() - start) * 1000:.1f} ms")

            out = path.rsplit(".", 1)[0] + f"-{name}.png"
            save_image(result, out)


def main():
    """Run all examples."""
    if len(sys.argv) > 1:
        filter_files(sys.argv[1:])
        return

    print("\n" + "=" * 70)
    print("BILAGRID SMOOTHING EXAMPLES")
    print("=" * 70)

    example_1_rgb_auto()
    example_2_gray()
    example_3_luminance()
    example_4_functional()

    print("\n" + "=" * 70)
    print("ALL EXAMPLES COMPLETED")
    print("=" * 70)


if __name__ == "__main__":
    main()
