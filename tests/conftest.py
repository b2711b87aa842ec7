import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
import pytest

from tourproto.array import BasisArray
from tourproto.basis import basis_random
from tourproto.tour import TourSession


def pytest_addoption(parser):
    parser.addoption(
        "--plot",
        action="store_true",
        help=(
            "Some tests can plot the tour. Set to true if you want to see them"
        ),
    )

    parser.addoption(
        "--animate",
        action="store_true",
        help=(
            "Some tests can animate the tour. Set to true if you want to "
            "see them"
        ),
    )


@pytest.fixture(scope="session", autouse=True)
def plot(request):
    if not (
        request.config.getoption("--plot")
        or request.config.getoption("--animate")
    ):
        import matplotlib

        matplotlib.use("SVG")
    yield request.config.getoption("--plot")


@pytest.fixture(scope="session", autouse=False)
def animate(request):
    if not (
        request.config.getoption("--plot")
        or request.config.getoption("--animate")
    ):
        import matplotlib

        matplotlib.use("SVG")
    yield request.config.getoption("--animate")


@pytest.fixture(autouse=True)
def close_figures():
    yield
    plt.close("all")


@pytest.fixture
def tol():
    yield 1e-12


@pytest.fixture
def data():
    """A small dataset with 4 named variables"""
    rng = np.random.default_rng(42)
    values = rng.normal(size=(12, 4)) * [1.0, 2.0, 0.5, 3.0] + 10.0

    yield pd.DataFrame(
        values, columns=["sepal_length", "sepal_width", "petal_length", "ok"]
    )


@pytest.fixture
def path2d():
    """A 3 frames path of 2D bases of 4 variables, manipulating the 1st"""
    frames = [basis_random(4, 2, seed=seed) for seed in (1, 2, 3)]

    yield BasisArray(np.stack(frames, axis=2), manip_var=0)


@pytest.fixture
def path1d():
    """A 3 frames path of 1D bases of 4 variables, manipulating the 2nd"""
    frames = [basis_random(4, 1, seed=seed) for seed in (4, 5, 6)]

    yield BasisArray(np.stack(frames, axis=2), manip_var=1)


@pytest.fixture
def session():
    """A session not shared with the rest of the test suite"""
    yield TourSession()


@pytest.fixture
def tour2d(session, path2d, data):
    session.begin(path2d, data)

    yield session


@pytest.fixture
def tour1d(session, path1d, data):
    session.begin(path1d, data)

    yield session
