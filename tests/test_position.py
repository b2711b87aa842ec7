import numpy as np
import pandas as pd
import pytest

from tourproto.exceptions import ConfigurationError
from tourproto.position import (
    MapRegion,
    PanZoom,
    Position,
    density_estimate,
    map_relative,
    pan_zoom,
)


@pytest.fixture
def points():
    yield pd.DataFrame({"x": [1.0, 0.0, -1.0], "y": [0.0, 1.0, 0.0]})


def test_off(points):
    assert map_relative(points, "off") is None
    assert map_relative(points, Position.OFF) is None


def test_center_unit_box(points, tol):
    mapped = map_relative(points, "center")

    assert isinstance(mapped, pd.DataFrame)
    assert np.allclose(mapped["x"], [0.6, 0.0, -0.6], atol=tol)
    assert np.allclose(mapped["y"], [0.0, 0.6, 0.0], atol=tol)


def test_left_is_offset(points, tol):
    center = map_relative(points, "center")
    left = map_relative(points, "left")

    assert np.allclose(left["x"] - center["x"], -1.4, atol=tol)
    assert np.allclose(left["y"], center["y"], atol=tol)


def test_relative_to_data(points):
    region = MapRegion(0.0, 10.0, -5.0, 5.0)

    mapped = map_relative(points, "center", region)

    # Scaled by 30% of the y range and centered on the region
    assert np.allclose(mapped["x"], [8.0, 5.0, 2.0])
    assert np.allclose(mapped["y"], [0.0, 3.0, 0.0])

    from_table = map_relative(
        points, "center", pd.DataFrame({"x": [0, 10], "y": [-5, 5]})
    )
    assert np.allclose(from_table.to_numpy(), mapped.to_numpy())


def test_array_input():
    mapped = map_relative(np.array([[1.0, 0.0]]), "center")

    assert isinstance(mapped, np.ndarray)
    assert np.allclose(mapped, [[0.6, 0.0]])


def test_unknown_position(points):
    with pytest.raises(ConfigurationError):
        map_relative(points, "middle")


def test_extra_columns_warn():
    points = np.ones((2, 3))

    with pytest.warns(UserWarning):
        mapped = map_relative(points, "center")

    assert np.allclose(mapped[:, 2], 1.0)


def test_pan_zoom():
    pz = pan_zoom((1.0, 2.0), (2.0, 3.0))
    assert isinstance(pz, PanZoom)

    mapped = pan_zoom((1.0, 2.0), (2.0, 3.0), np.array([[1.0, 1.0]]))
    assert np.allclose(mapped, [[3.0, 5.0]])

    # PanZoom is a valid position
    mapped = map_relative(np.array([[1.0, 1.0]]), pz)
    assert np.allclose(mapped, [[3.0, 5.0]])

    with pytest.raises(ConfigurationError):
        PanZoom((1.0,), (1.0, 1.0))


def test_map_regions():
    assert MapRegion.unit() == MapRegion(-1.0, 1.0, -1.0, 1.0)

    region = MapRegion.from_points(np.array([[0, 1], [2, -1], [1, 3]]))
    assert region == MapRegion(0.0, 2.0, -1.0, 3.0)
    assert region.x_range == 2.0
    assert region.y_center == 1.0


def test_density_region():
    values = np.random.default_rng(0).normal(size=200)

    region = MapRegion.from_density(values)
    grid, density = density_estimate(values)

    assert region.x_min < 0 < region.x_max
    assert np.isclose(region.y_max, 1.8 * density.max())
    assert len(grid) == 512
    assert grid.min() < values.min() and grid.max() > values.max()


def test_single_column(tol):
    points = pd.DataFrame({"x": [1.0, -1.0]})

    mapped = map_relative(points, "center")

    assert list(mapped.columns) == ["x"]
    assert np.allclose(mapped["x"], [0.6, -0.6], atol=tol)

    region = MapRegion(0.0, 10.0, -5.0, 5.0)
    mapped = map_relative(np.array([[1.0], [-1.0]]), "right", region)
    assert mapped.shape == (2, 1)
    assert np.allclose(mapped[:, 0], [15.0, 9.0])


def test_center_on_region_centroid(tol):
    values = np.random.default_rng(3).normal(size=(20, 2)) * [4.0, 1.0]
    points = pd.DataFrame(values - values.mean(axis=0), columns=["x", "y"])
    region = MapRegion.from_points(points)

    mapped = map_relative(points, "center", region)

    assert np.isclose(mapped["x"].mean(), region.x_center, atol=tol)
    assert np.isclose(mapped["y"].mean(), region.y_center, atol=tol)

    # Not idempotent: mapping twice scales twice
    twice = map_relative(mapped, "center", region)
    assert not np.allclose(twice.to_numpy(), mapped.to_numpy())


@pytest.mark.parametrize("values", [[1.0], [2.0, 2.0, 2.0]])
def test_density_without_spread(values):
    with pytest.raises(ConfigurationError):
        density_estimate(values)

    with pytest.raises(ConfigurationError):
        MapRegion.from_density(values)
