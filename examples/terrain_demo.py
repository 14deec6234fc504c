#!/usr/bin/env python3
"""
Simple demo script showing terrain generation capabilities.
"""

import numpy as np
from py_terrain.core import (
    BorderPolicy,
    ErosionParameters,
    NoiseParameters,
    TerrainBand,
    TerrainConfig,
    TerrainGenerator,
)
from py_terrain.core.height_classifier import classify_heights


def main():
    """Demonstrate terrain generation."""
    print("Py-Terrain Generation Demo")
    print("=" * 40)

    config = TerrainConfig(
        width=64,
        height=64,
        noise=NoiseParameters(octaves=4, persistence=0.3, lacunarity=2.0, scale=10.0),
        smoothing_radius=2,
        smoothing_border=BorderPolicy.COPY,
        erosion=ErosionParameters(radius=3, strength=0.01),
        erosion_iterations=1,
    )
    generator = TerrainGenerator(config)

    for seed in ["demo123", "island", "ridge"]:
        print(f"\nSeed {seed!r}:")
        print("-" * 30)

        result = generator.generate(seed=seed)
        heights = result.heights
        mesh = result.mesh

        print(f"  Offsets: ({result.noise_params.offset_x:.1f}, {result.noise_params.offset_y:.1f})")
        print(f"  Vertices: {mesh.vertex_count}, triangles: {mesh.triangle_count}")
        print(f"  Height range: {heights.min():.3f}-{heights.max():.3f}")
        print(f"  Generated in {result.elapsed_seconds * 1000:.1f} ms")

        # Show band distribution
        bands = classify_heights(heights)
        print("  Band distribution:")
        for band in TerrainBand:
            count = int(np.sum(bands == band))
            bar = '#' * int(count / heights.size * 40)
            print(f"    {band.value:>5}: {bar} ({count})")

    center = config.width // 2
    print(f"\nHeight at center ({center}, {center}): {generator.height_at(center, center):.2f}")


if __name__ == "__main__":
    main()
