import numpy as np
import pandas as pd
import pytest

from tourproto.array import BasisArray, abbreviate, array_to_tables
from tourproto.basis import basis_random
from tourproto.exceptions import ConfigurationError


def test_basis_array_coerce():
    basis = basis_random(5, 2, seed=0)

    array = BasisArray.coerce(basis)
    assert array.array.shape == (5, 2, 1)
    assert array.num_frames == 1
    assert len(array) == 1
    assert np.array_equal(array[0], basis)

    assert BasisArray.coerce(array) is array
    assert BasisArray(np.ones(3)).array.shape == (3, 1, 1)


def test_basis_array_bad_shape():
    with pytest.raises(ConfigurationError):
        BasisArray(np.ones((2, 2, 2, 2)))

    with pytest.raises(ConfigurationError):
        BasisArray(np.ones((4, 3, 2))).dimensionality


@pytest.mark.parametrize("manip_var", [-1, 4, 10])
def test_basis_array_bad_manip_var(manip_var):
    with pytest.raises(ConfigurationError):
        BasisArray(np.ones((4, 2, 3)), manip_var=manip_var)


def test_basis_array_manip_var():
    assert BasisArray(np.ones((4, 2, 3)), manip_var=3).manip_var == 3


def test_row_counts(path2d, data):
    tables = array_to_tables(path2d, data)

    p, _, num_frames = path2d.array.shape
    assert len(tables.basis) == p * num_frames
    assert len(tables.data) == len(data) * num_frames
    assert list(tables.basis.columns) == ["x", "y", "frame", "label"]
    assert list(tables.data.columns) == ["x", "y", "frame", "label"]
    assert tables.basis["frame"].min() == 1
    assert tables.basis["frame"].max() == num_frames


def test_data_centered_per_frame(path2d, data):
    tables = array_to_tables(path2d, data)

    means = tables.data.groupby("frame")[["x", "y"]].mean()
    assert np.allclose(means.to_numpy(), 0, atol=1e-9)


def test_single_frame_round_trip(data):
    basis = basis_random(4, 2, seed=7)

    tables = array_to_tables(basis, data)

    assert np.allclose(tables.basis[["x", "y"]].to_numpy(), basis)

    expected = data.to_numpy() @ basis
    expected = expected - expected.mean(axis=0)
    assert np.allclose(tables.data[["x", "y"]].to_numpy(), expected)


def test_one_dimensional(path1d, data):
    tables = array_to_tables(path1d, data)

    assert "y" not in tables.basis.columns
    assert "y" not in tables.data.columns
    assert tables.basis.attrs["manip_var"] == 1


def test_without_data(path2d):
    tables = array_to_tables(path2d)

    assert tables.data is None
    assert tables.basis.attrs["manip_var"] == 0


def test_data_labels_are_row_numbers(path2d, data):
    tables = array_to_tables(path2d, data)

    first = tables.data[tables.data["frame"] == 1]
    assert list(first["label"]) == [str(i) for i in range(1, len(data) + 1)]


def test_variable_labels(path2d, data):
    tables = array_to_tables(path2d, data)
    labels = tables.basis.loc[tables.basis["frame"] == 1, "label"]
    assert list(labels) == abbreviate(data.columns)

    tables = array_to_tables(path2d, data.to_numpy())
    labels = tables.basis.loc[tables.basis["frame"] == 1, "label"]
    assert list(labels) == ["V1", "V2", "V3", "V4"]

    tables = array_to_tables(path2d, labels=["a", "b", "c", "d"])
    labels = tables.basis.loc[tables.basis["frame"] == 1, "label"]
    assert list(labels) == ["a", "b", "c", "d"]

    with pytest.raises(ConfigurationError):
        array_to_tables(path2d, labels=["a", "b"])


def test_data_column_mismatch(path2d):
    with pytest.raises(ConfigurationError):
        array_to_tables(path2d, pd.DataFrame(np.ones((5, 3))))


def test_abbreviate():
    assert abbreviate(["ok", "abc"]) == ["ok", "abc"]

    abbrevs = abbreviate(["Sepal.Length", "Sepal.Width"])
    assert len(set(abbrevs)) == 2

    # Collisions are resolved with longer abbreviations
    assert abbreviate(["abcdx", "abcdy"]) == ["abcdx", "abcdy"]
