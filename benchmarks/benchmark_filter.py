"""
Benchmark bilateral grid filtering performance.

Times every stage (estimate, downsample, convolve, reconstruct) at various
image sizes for both filter variants.
"""

import logging
import time

import numpy as np

from bilagrid import ArrayImage, FastBilateral, LuminanceBilateral
from bilagrid.filter import convolve, downsample, estimate_parameters, reconstruct

# Suppress logging for cleaner output
logging.getLogger("bilagrid").setLevel(logging.WARNING)


def generate_image(width: int, height: int, gray: bool = False) -> np.ndarray:
    """Generate a noisy gradient image (uint8 RGB)."""
    rng = np.random.default_rng(42)
    xs = np.linspace(0.0, 255.0, width)
    image = np.broadcast_to(xs[np.newaxis, :, np.newaxis], (height, width, 3)).copy()
    if not gray:
        image[..., 1] = image[..., 1][:, ::-1]
        image[..., 2] = 128.0
    image += rng.normal(0.0, 10.0, size=(height, width, 1 if gray else 3))
    return np.clip(image, 0, 255).astype(np.uint8)


def time_ms(func, iterations: int) -> tuple[float, float]:
    """Mean and std of func() wall time in milliseconds."""
    times = []
    for _ in range(iterations):
        start = time.perf_counter()
        func()
        times.append((time.perf_counter() - start) * 1000)
    return float(np.mean(times)), float(np.std(times))


def benchmark_stages(width: int = 512, height: int = 512, iterations: int = 10):
    """Benchmark each grid stage separately."""
    print("\n" + "=" * 80)
    print(f"GRID STAGES ({width}x{height}, {iterations} iterations)")
    print("=" * 80)

    rgb = generate_image(width, height).astype(np.float64) / 255.0
    params = estimate_parameters(rgb, 16.0, 0.1)
    ys, xs = np.indices((height, width)).reshape(2, -1)
    values = rgb.reshape(-1, 3)

    # Warmup (JIT compilation)
    grid = convolve(downsample(params, rgb))
    reconstruct(grid, params, xs, ys, values)

    stages = [
        ("estimate", lambda: estimate_parameters(rgb, 16.0, 0.1)),
        ("downsample", lambda: downsample(params, rgb)),
        ("convolve", lambda: convolve(downsample(params, rgb))),
        ("reconstruct", lambda: reconstruct(grid, params, xs, ys, values)),
    ]
    print(f"Grid sizes: {params.sizes} ({grid.n_cells:,} cells)")
    for name, func in stages:
        avg_time, std_time = time_ms(func, iterations)
        print(f"{name:12s} {avg_time:9.3f} ms +/- {std_time:.3f} ms")


def benchmark_variants(iterations: int = 5):
    """Benchmark end-to-end filtering for both variants and image kinds."""
    print("\n" + "=" * 80)
    print(f"END-TO-END ({iterations} iterations)")
    print("=" * 80)

    for width, height in [(256, 256), (512, 512), (1024, 768)]:
        for gray in (False, True):
            image = ArrayImage(generate_image(width, height, gray=gray))
            for cls in (FastBilateral, LuminanceBilateral):
                cls.auto(image).execute().result_image()  # Warmup

                avg_time, std_time = time_ms(
                    lambda: cls.auto(image).execute().result_image(), iterations
                )
                kind = "gray" if gray else "rgb"
                print(
                    f"{cls.__name__:20s} {kind:4s} {width:5d}x{height:<5d} "
                    f"{avg_time:9.2f} ms +/- {std_time:.2f} ms "
                    f"({width * height / (avg_time / 1000) / 1e6:.1f}M px/sec)"
                )


def main():
    benchmark_stages()
    benchmark_variants()

    print("\n" + "=" * 80)
    print("ALL BENCHMARKS COMPLETED")
    print("=" * 80)


if __name__ == "__main__":
    main()
