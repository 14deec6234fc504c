"""
Tests for the terrain generation pipeline.
"""

import threading
import pytest
import numpy as np
from unittest.mock import patch

from py_terrain.config import Settings
from py_terrain.core import (
    BorderPolicy,
    ErosionParameters,
    ErosionSimulator,
    GenerationInProgressError,
    InvalidDimensionsError,
    NoiseParameters,
    TerrainConfig,
    TerrainGenerator,
    TerrainNotGeneratedError,
    build_mesh,
    generate_noise_field,
    normalize_heights,
    smooth_heights,
)


@pytest.fixture
def small_config():
    return TerrainConfig(
        width=10,
        height=10,
        noise=NoiseParameters(octaves=1, persistence=0.3, lacunarity=2.0, scale=10.0),
        smoothing_radius=2,
        erosion=ErosionParameters(radius=3, strength=0.01),
    )


class TestEndToEnd:
    """Run the whole pipeline on a small grid."""

    def test_generator_pipeline(self, small_config):
        generator = TerrainGenerator(small_config)
        result = generator.generate(offsets=(0.0, 0.0))
        mesh = result.mesh

        assert mesh.vertex_count == 100
        assert len(mesh.triangles) == 486
        assert mesh.positions[:, 1].min() >= 0.0
        assert mesh.positions[:, 1].max() <= 50.0
        assert result.heights.shape == (10, 10)

    def test_stage_functions_compose(self):
        params = NoiseParameters(octaves=1, persistence=0.3, lacunarity=2.0, scale=10.0)
        raw, low, high = generate_noise_field(10, 10, params)
        heights = normalize_heights(raw, low, high)
        heights = smooth_heights(heights, radius=2)
        heights = ErosionSimulator(ErosionParameters(radius=3, strength=0.01)).run(heights)
        mesh = build_mesh(heights, height_scale=50.0)

        assert mesh.vertex_count == 100
        assert len(mesh.triangles) == 486
        assert np.all((mesh.positions[:, 1] >= 0.0) & (mesh.positions[:, 1] <= 50.0))

    def test_matches_stage_functions(self, small_config):
        generator = TerrainGenerator(small_config)
        result = generator.generate(offsets=(12.3, 45.6))

        params = small_config.noise.with_offsets(12.3, 45.6)
        raw, low, high = generate_noise_field(10, 10, params)
        expected = smooth_heights(normalize_heights(raw, low, high), radius=2)
        ErosionSimulator(small_config.erosion).run(expected)

        assert np.array_equal(result.heights, expected)

    def test_determinism(self, small_config):
        first = TerrainGenerator(small_config).generate(offsets=(321.0, 654.0))
        second = TerrainGenerator(small_config).generate(offsets=(321.0, 654.0))

        assert np.array_equal(first.heights, second.heights)
        assert np.array_equal(first.mesh.positions, second.mesh.positions)
        assert np.array_equal(first.mesh.normals, second.mesh.normals)

    def test_seed_reproducible(self, small_config):
        first = TerrainGenerator(small_config).generate(seed="valley")
        second = TerrainGenerator(small_config).generate(seed="valley")
        other = TerrainGenerator(small_config).generate(seed="ridge")

        assert first.noise_params == second.noise_params
        assert np.array_equal(first.heights, second.heights)
        assert first.noise_params != other.noise_params

    def test_heights_normalized(self):
        config = TerrainConfig(width=40, height=30)
        result = TerrainGenerator(config).generate(seed=1)
        assert result.heights.min() >= 0.0
        assert result.heights.max() <= 1.0

    def test_grid_smaller_than_windows(self):
        """Tiny grids skip smoothing and erosion but still produce a mesh."""
        config = TerrainConfig(width=3, height=3)
        result = TerrainGenerator(config).generate(seed=4)

        assert result.mesh.vertex_count == 9
        assert result.mesh.triangle_count == 8


class TestHeightQueries:
    """Test cached height sampling."""

    def test_before_generation(self, small_config):
        generator = TerrainGenerator(small_config)
        assert generator.last_result is None
        with pytest.raises(TerrainNotGeneratedError):
            generator.height_at(5, 5)

    def test_reads_cache(self, small_config):
        generator = TerrainGenerator(small_config)
        result = generator.generate(offsets=(7.0, 8.0))

        with patch.object(generator, "generate_heightfield") as mock_stage:
            value = generator.height_at(5, 4)

        mock_stage.assert_not_called()
        assert value == pytest.approx(result.heights[5, 4] * 50.0)
        assert value == result.mesh.positions[5 * 10 + 4, 1]

    @pytest.mark.parametrize("x,y", [(-1, 0), (0, -1), (10, 0), (0, 10)])
    def test_out_of_range(self, small_config, x, y):
        generator = TerrainGenerator(small_config)
        generator.generate(offsets=(0.5, 0.5))
        with pytest.raises(IndexError):
            generator.height_at(x, y)

    def test_cached_heights_read_only(self, small_config):
        result = TerrainGenerator(small_config).generate(offsets=(1.0, 2.0))
        with pytest.raises(ValueError):
            result.heights[0, 0] = 1.0

    def test_regeneration_replaces_cache(self, small_config):
        generator = TerrainGenerator(small_config)
        first = generator.generate(offsets=(1.0, 2.0))
        second = generator.generate(offsets=(100.5, 200.5))

        assert generator.last_result is second
        assert first.noise_params.offset_x == 1.0


class TestSingleFlight:
    """Only one generation may run at a time."""

    def test_concurrent_request_rejected(self, small_config):
        generator = TerrainGenerator(small_config)
        started = threading.Event()
        release = threading.Event()
        errors = []

        def slow_heightfield(noise_params):
            started.set()
            release.wait(timeout=5)
            return np.zeros((10, 10))

        def run():
            try:
                generator.generate(offsets=(0.0, 0.0))
            except Exception as e:  # pragma: no cover
                errors.append(e)

        with patch.object(generator, "generate_heightfield", side_effect=slow_heightfield):
            worker = threading.Thread(target=run)
            worker.start()
            assert started.wait(timeout=5)

            assert generator.is_busy
            with pytest.raises(GenerationInProgressError):
                generator.generate(offsets=(1.0, 1.0))

            release.set()
            worker.join(timeout=5)

        assert not errors
        assert not generator.is_busy
        assert generator.last_result.noise_params.offset_x == 0.0

    def test_lock_released_after_failure(self, small_config):
        generator = TerrainGenerator(small_config)

        with patch.object(generator, "generate_heightfield", side_effect=RuntimeError("boom")):
            with pytest.raises(RuntimeError):
                generator.generate(offsets=(0.0, 0.0))

        assert not generator.is_busy
        assert generator.last_result is None
        generator.generate(offsets=(0.0, 0.0))
        assert generator.last_result is not None


class TestTerrainConfig:
    """Test configuration validation and settings integration."""

    def test_defaults(self):
        config = TerrainConfig()
        assert (config.width, config.height) == (256, 256)
        assert config.smoothing_radius == 2
        assert config.smoothing_border is BorderPolicy.COPY
        assert config.erosion == ErosionParameters(radius=3, strength=0.01)
        assert config.height_scale == 50.0

    @pytest.mark.parametrize("width,height", [(0, 5), (5, 0), (2.5, 4), (True, 4)])
    def test_invalid_dimensions(self, width, height):
        with pytest.raises(InvalidDimensionsError):
            TerrainConfig(width=width, height=height)

    def test_invalid_smoothing_radius(self):
        with pytest.raises(ValueError):
            TerrainConfig(smoothing_radius=0)

    def test_border_string_converted(self):
        assert TerrainConfig(smoothing_border="zero").smoothing_border is BorderPolicy.ZERO

    def test_from_settings(self):
        settings = Settings(default_width=32, default_height=24, noise_octaves=2, erosion_strength=0.2)
        config = TerrainConfig.from_settings(settings)

        assert (config.width, config.height) == (32, 24)
        assert config.noise.octaves == 2
        assert config.erosion.strength == 0.2

    def test_from_settings_overrides(self):
        settings = Settings(default_width=32, default_height=24)
        config = TerrainConfig.from_settings(settings, width=8, smoothing_radius=1)

        assert (config.width, config.height) == (8, 24)
        assert config.smoothing_radius == 1
