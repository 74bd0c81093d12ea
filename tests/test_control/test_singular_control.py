"""Tests for Body.control.avanzado.singular_control."""

import numpy as np
import pytest

from Body.control.avanzado.errors import CompetitionControlError, DegenerateReconstructionError
from Body.control.avanzado.ocp import Trajectory
from Body.control.avanzado.singular_control import (
    reconstruct_singular_control,
    singular_control_from_states,
)
from Body.control.avanzado.singular_surface import SingularSurface


def make_surface(mu1_bar=1.2, mu2_bar=1.0):
    return SingularSurface(s_bar=0.5, mu1_bar=mu1_bar, mu2_bar=mu2_bar,
                           delta_bar=mu1_bar - mu2_bar, resolution=1000, method="grid")


def test_weighted_average_of_rates():
    D_s = singular_control_from_states([1.0, 3.0], [3.0, 1.0], 1.2, 1.0)
    np.testing.assert_allclose(D_s, [(1.2 + 3.0) / 4.0, (3.6 + 1.0) / 4.0])


def test_single_species_gives_its_rate():
    D_s = singular_control_from_states([2.0, 0.5], [0.0, 0.0], 1.2, 1.0)
    np.testing.assert_allclose(D_s, [1.2, 1.2])


def test_vanishing_biomass_raises_with_indices():
    t = np.linspace(0.0, 1.0, 5)
    x1 = np.array([1.0, 0.5, 0.0, 0.2, 0.0])
    x2 = np.array([1.0, 0.5, 0.0, 0.0, 0.0])
    traj = Trajectory(t=t, s=np.full(5, 1.0), x1=x1, x2=x2, D=np.zeros(5))

    with pytest.raises(DegenerateReconstructionError) as excinfo:
        reconstruct_singular_control(traj, make_surface())

    assert excinfo.value.indices == (2, 4)
    assert isinstance(excinfo.value, CompetitionControlError)


@pytest.mark.parametrize("x1, x2, indices", [
    ([np.nan, 1.0], [1.0, 1.0], (0,)),
    ([1.0, 1.0], [1.0, np.inf], (1,)),
    ([1.0, -2.0, 0.5], [0.5, 1.0, 0.5], (1,)),
])
def test_non_finite_or_negative_biomass_raises(x1, x2, indices):
    with pytest.raises(DegenerateReconstructionError) as excinfo:
        singular_control_from_states(x1, x2, 1.2, 1.0)
    assert excinfo.value.indices == indices


def test_reconstruction_is_finite(solved_study):
    traj = solved_study.trajectory
    D_s = reconstruct_singular_control(traj, solved_study.surface)
    assert D_s.shape == traj.t.shape
    assert np.all(np.isfinite(D_s))
