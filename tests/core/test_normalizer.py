"""Tests for count normalization."""

import numpy as np
import pytest

from buddhascope.core.accumulator import DensityGrid
from buddhascope.core.errors import ConfigurationError
from buddhascope.core.normalizer import normalize


class TestNormalize:
    def test_max_cell_maps_to_scale(self):
        grid = DensityGrid.from_counts(np.array([[0, 3], [7, 49]]))
        out = normalize(grid, 49, output_scale=1.0)
        assert out[1, 1] == 1.0
        assert out[0, 0] == 0.0

    def test_linear(self):
        grid = DensityGrid.from_counts(np.array([[1, 2, 4]]))
        out = normalize(grid, 4, output_scale=255.0)
        np.testing.assert_allclose(out, [[63.75, 127.5, 255.0]])

    def test_output_dtype_and_shape(self):
        grid = DensityGrid(5, 3)
        grid.increment(4, 2, 10)
        out = normalize(grid, 10)
        assert out.shape == (5, 3)
        assert out.dtype == np.float32

    def test_zero_max_gives_zeros(self):
        out = normalize(DensityGrid(4, 4), 0)
        assert out.shape == (4, 4)
        assert not out.any()

    def test_shared_max_above_grid_max(self):
        grid = DensityGrid.from_counts(np.array([[5, 10]]))
        out = normalize(grid, 20)
        np.testing.assert_allclose(out, [[0.25, 0.5]])

    def test_values_bounded_by_scale(self):
        grid = DensityGrid.from_counts(np.array([[5, 30]]))
        out = normalize(grid, 10, output_scale=2.0)
        assert out.max() <= 2.0

    def test_invalid_arguments(self):
        grid = DensityGrid(2, 2)
        with pytest.raises(ConfigurationError):
            normalize(grid, -1)
        with pytest.raises(ConfigurationError):
            normalize(grid, 10, output_scale=0.0)
