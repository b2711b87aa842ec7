import numpy as np
import pytest

from tourproto.aes import AesArgs
from tourproto.exceptions import (
    ConfigurationError,
    DimensionMismatch,
    ReplicationWarning,
    StateError,
)
from tourproto.layer import GeomType
from tourproto.position import PanZoom
from tourproto.proto import (
    proto_basis,
    proto_basis1d,
    proto_default,
    proto_default1d,
    proto_density,
    proto_hex,
    proto_highlight,
    proto_highlight1d,
    proto_origin,
    proto_origin1d,
    proto_point,
    proto_text,
)

BUILDERS_2D = [
    proto_basis,
    proto_point,
    proto_origin,
    proto_text,
    proto_hex,
    proto_default,
    lambda session: proto_highlight(1, session=session),
]

BUILDERS_1D = [
    proto_basis1d,
    proto_origin1d,
    proto_density,
    proto_default1d,
    lambda session: proto_highlight1d(1, session=session),
]


@pytest.mark.parametrize("builder", BUILDERS_2D + BUILDERS_1D)
def test_no_active_tour(session, builder):
    with pytest.raises(StateError):
        builder(session=session)


@pytest.mark.parametrize("builder", BUILDERS_1D)
def test_1d_builders_on_2d_tour(tour2d, builder):
    with pytest.raises(DimensionMismatch):
        builder(session=tour2d)


@pytest.mark.parametrize("builder", BUILDERS_2D)
def test_2d_builders_on_1d_tour(tour1d, builder):
    with pytest.raises(DimensionMismatch):
        builder(session=tour1d)


@pytest.mark.parametrize("builder", BUILDERS_2D)
def test_builders_return_layers(tour2d, builder):
    layers = builder(session=tour2d)

    assert isinstance(layers, list)
    assert layers
    assert all(layer.geom in GeomType for layer in layers)


def test_state_not_mutated(tour2d):
    state = tour2d.require()
    basis = state.basis.copy()
    data = state.data.copy()

    proto_default(aes_args={"color": ["a", "b"] * 6}, session=tour2d)
    proto_text(rownum_index=[1, 2], session=tour2d)

    assert tour2d.require() is state
    assert state.basis.equals(basis)
    assert state.data.equals(data)


def test_basis(tour2d):
    state = tour2d.require()
    p, num_frames = state.variable_count, state.frame_count

    circle, axes, labels = proto_basis(session=tour2d)

    assert circle.geom is GeomType.PATH and not circle.animated
    assert len(circle.data) == 360
    assert axes.geom is GeomType.SEGMENT and axes.animated
    assert len(axes.data) == p * num_frames
    assert labels.geom is GeomType.TEXT

    # The manipulation variable is highlighted in each frame
    colors = axes.style["color"]
    assert list(colors[::p]) == ["blue"] * num_frames
    assert "blue" not in colors[1:p]
    assert axes.style["linewidth"][0] == 1.5


def test_basis_positions(tour2d):
    assert proto_basis(position="off", session=tour2d) == []

    center = proto_basis(position="center", session=tour2d)[1].data
    left = proto_basis(position="left", session=tour2d)[1].data
    assert (left["x"] < center["x"]).all()

    # The segments end at the mapped origin
    assert np.allclose(center["xend"], tour2d.require().map_to.x_center)

    panned = proto_basis(position=PanZoom((1.0, 1.0)), session=tour2d)
    assert np.allclose(panned[1].data["xend"], 1.0)

    with pytest.raises(ConfigurationError):
        proto_basis(position="middle", session=tour2d)


def test_basis1d(tour1d):
    state = tour1d.require()
    p = state.variable_count

    zero, rect, labels, bars = proto_basis1d(session=tour1d)

    assert zero.geom is GeomType.SEGMENT and zero.style["linestyle"] == "--"
    assert rect.geom is GeomType.RECT and len(rect.data) == 1
    assert labels.geom is GeomType.TEXT and not labels.animated
    assert len(labels.data) == p
    assert bars.animated and len(bars.data) == p * state.frame_count

    # The bars are horizontal, inside the outline
    assert np.allclose(bars.data["y"], bars.data["yend"])
    assert (bars.data["y"] > rect.data["ymin"][0]).all()
    assert (bars.data["y"] < rect.data["ymax"][0]).all()

    # The 2nd variable is manipulated
    assert list(labels.style["color"]).index("blue") == 1

    assert proto_basis1d(position="off", session=tour1d) == []


def test_point(tour2d):
    state = tour2d.require()
    groups = ["a", "b", "c"] * 4

    (points,) = proto_point(
        aes_args={"color": groups},
        identity_args={"size": 3, "alpha": 0.5},
        session=tour2d,
    )

    assert points.geom is GeomType.POINT and points.animated
    assert len(points.data) == state.data_row_count
    assert list(points.data["color"][:3]) == ["a", "b", "c"]
    assert points.style == {"size": 3, "alpha": 0.5}


def test_point_replication_warning(tour2d):
    with pytest.warns(ReplicationWarning):
        proto_point(aes_args=AesArgs(color=["a", "b"]), session=tour2d)


def test_data_layers_without_data(session, path2d):
    session.begin(path2d)

    assert proto_point(session=session) == []
    assert proto_origin(session=session) == []
    assert proto_text(session=session) == []
    assert proto_hex(session=session) == []
    assert proto_highlight(1, session=session) == []
    assert len(proto_basis(session=session)) == 3


def test_origin(tour2d):
    region = tour2d.require().map_to

    (origin,) = proto_origin(size_frac=0.1, session=tour2d)

    lo = min(region.x_min, region.y_min)
    hi = max(region.x_max, region.y_max)
    horizontal = origin.data.iloc[0]
    assert np.isclose(horizontal["xend"] - horizontal["x"], 0.1 * (hi - lo))
    assert not origin.animated


def test_origin1d(tour1d):
    region = tour1d.require().map_to

    (origin,) = proto_origin1d(session=tour1d)

    assert origin.data["y"][0] == region.y_min
    assert origin.data["yend"][0] == region.y_max
    assert np.isclose(origin.data["x"][0], region.x_center)


def test_density(tour1d):
    density, rug = proto_density(
        aes_args={"fill": ["a", "b"] * 6}, session=tour1d
    )

    assert density.geom is GeomType.DENSITY and rug.geom is GeomType.RUG
    assert "fill" in density.data.columns
    assert density.style["position"] == "identity"


def test_density_color_without_fill(tour1d):
    with pytest.warns(UserWarning, match="fill"):
        proto_density(aes_args={"color": ["a", "b"] * 6}, session=tour1d)


def test_density_position(tour1d):
    density, _ = proto_density(density_position="stack", session=tour1d)
    assert density.style["position"] == "stack"

    with pytest.raises(ConfigurationError):
        proto_density(density_position="dodge", session=tour1d)


def test_text(tour2d):
    state = tour2d.require()
    labels = list("abcdefghijkl")

    (text,) = proto_text(label=labels, rownum_index=[1, 2], session=tour2d)

    assert len(text.data) == 2 * state.frame_count
    assert set(text.data["label"]) == {"a", "b"}


def test_hex(tour2d):
    (hexes,) = proto_hex(bins=10, session=tour2d)

    assert hexes.geom is GeomType.HEX
    assert hexes.style["bins"] == 10


def test_highlight(tour2d):
    state = tour2d.require()

    initial, points = proto_highlight(3, session=tour2d)

    assert not initial.animated and len(initial.data) == 1
    assert initial.style["alpha"] == 0.5
    assert points.animated and len(points.data) == state.frame_count
    assert set(points.data["label"]) == {"3"}
    assert points.style["color"] == "red"

    layers = proto_highlight(3, mark_initial=False, session=tour2d)
    assert len(layers) == 1

    (points,) = proto_highlight(
        [1, 2], identity_args={"color": ["red"] * 12}, session=tour2d
    )
    assert len(points.data) == 2 * state.frame_count
    assert len(points.style["color"]) == len(points.data)


def test_highlight1d(tour1d):
    state = tour1d.require()

    initial, lines = proto_highlight1d(2, session=tour1d)

    assert lines.geom is GeomType.SEGMENT
    assert len(lines.data) == state.frame_count
    assert np.allclose(lines.data["x"], lines.data["xend"])
    assert (lines.data["y"] == state.map_to.y_min).all()
    assert (lines.data["yend"] == state.map_to.y_max).all()
    assert initial.style["linestyle"] == "--"


def test_default(tour2d):
    geoms = [layer.geom for layer in proto_default(session=tour2d)]

    assert geoms == [
        GeomType.SEGMENT,
        GeomType.POINT,
        GeomType.PATH,
        GeomType.SEGMENT,
        GeomType.TEXT,
    ]


def test_default1d(tour1d):
    geoms = [layer.geom for layer in proto_default1d(session=tour1d)]

    assert geoms == [
        GeomType.SEGMENT,
        GeomType.DENSITY,
        GeomType.RUG,
        GeomType.SEGMENT,
        GeomType.RECT,
        GeomType.TEXT,
        GeomType.SEGMENT,
    ]
