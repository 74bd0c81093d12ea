"""Shared fixtures for the chemostat competition tests."""

import matplotlib

matplotlib.use("Agg")

import pytest

from Body.control.avanzado.parameters import Parameters, SolverOptions
from Body.control.avanzado.pipeline import run_singular_arc_study


@pytest.fixture
def default_params():
    return Parameters()


@pytest.fixture
def small_params():
    """Default model on a 60-interval grid (dt = 0.1 h)."""
    return Parameters(N=60)


@pytest.fixture
def solver_options():
    return SolverOptions(tol=1e-8, constr_viol_tol=1e-6, max_iter=3000, print_level=0)


@pytest.fixture
def growth_model(default_params):
    return default_params.growth_model()


@pytest.fixture(scope="session")
def solved_study():
    """One converged run of the whole workflow, shared by the slower tests."""
    return run_singular_arc_study(
        Parameters(N=60),
        SolverOptions(tol=1e-8, constr_viol_tol=1e-6, max_iter=3000, print_level=0),
    )
