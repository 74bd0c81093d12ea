"""Tests for Body.control.avanzado.ocp (these solve small NLPs with IPOPT)."""

import numpy as np
import pytest

from Body.control.avanzado.errors import FailureReason, SolverConvergenceError
from Body.control.avanzado.ocp import CompetitionOCP, Trajectory, classify_return_status
from Body.control.avanzado.parameters import Parameters, SolverOptions
from Body.modeling.competition import discretization_error


@pytest.mark.parametrize("status, reason", [
    ("Maximum_Iterations_Exceeded", FailureReason.ITERATION_LIMIT),
    ("Maximum_CpuTime_Exceeded", FailureReason.ITERATION_LIMIT),
    ("Infeasible_Problem_Detected", FailureReason.INFEASIBLE),
    ("Restoration_Failed", FailureReason.INFEASIBLE),
    ("Invalid_Number_Detected", FailureReason.NUMERICAL_ERROR),
    ("Error_In_Step_Computation", FailureReason.NUMERICAL_ERROR),
])
def test_classify_return_status(status, reason):
    assert classify_return_status(status) is reason


class TestTrajectory:
    def test_read_only(self):
        traj = Trajectory(t=[0.0, 1.0], s=[1.0, 1.0], x1=[0.0, 0.0], x2=[0.0, 0.0], D=[0.0, 0.0])
        assert traj.N == 1
        with pytest.raises(ValueError):
            traj.s[0] = 2.0

    def test_length_mismatch(self):
        with pytest.raises(ValueError, match="'D'"):
            Trajectory(t=[0.0, 1.0], s=[1.0, 1.0], x1=[0.0, 0.0], x2=[0.0, 0.0], D=[0.0])

    def test_frame_columns(self):
        traj = Trajectory(t=[0.0, 1.0], s=[1.0, 1.0], x1=[0.0, 0.0], x2=[0.0, 0.0], D=[0.0, 0.0])
        assert list(traj.to_frame().columns) == [
            "Time [h]", "Substrate (s) [g/L]", "Species 1 (x1) [g/L]",
            "Species 2 (x2) [g/L]", "Dilution Rate (D) [1/h]",
        ]


class TestProblemStructure:
    def test_dimensions(self, small_params):
        ocp = CompetitionOCP(small_params)
        assert ocp.dim_w == 4 * 61
        assert ocp.lbg.shape == ocp.ubg.shape == (3 * 60,)

    def test_initial_condition_fixed_by_bounds(self, small_params):
        ocp = CompetitionOCP(small_params)
        for name, value in (("s", 2.0), ("x1", 2.0), ("x2", 2.0)):
            k = ocp.indices[name].start
            assert ocp.lbw[k] == ocp.ubw[k] == value

    def test_initial_guess_inside_bounds(self, small_params):
        ocp = CompetitionOCP(small_params)
        w0 = ocp.initial_guess()
        assert np.all(w0 >= ocp.lbw) and np.all(w0 <= ocp.ubw)

    def test_rejects_wrong_guess_length(self, small_params):
        ocp = CompetitionOCP(small_params)
        with pytest.raises(ValueError, match="Initial guess"):
            ocp.solve(w0=np.zeros(5))


class TestConvergedSolution:
    def test_converges(self, solved_study):
        sol = solved_study.solution
        assert sol.return_status in ("Solve_Succeeded", "Solved_To_Acceptable_Level")
        assert sol.iterations > 0

    def test_dynamics_satisfied(self, solved_study):
        assert solved_study.solution.max_residual <= solved_study.options.constr_viol_tol

    def test_bounds(self, solved_study):
        p = solved_study.parameters
        traj = solved_study.trajectory
        tol = 1e-8
        assert np.all(traj.s >= -tol) and np.all(traj.s <= p.s_in + tol)
        assert np.all(traj.x1 >= -tol) and np.all(traj.x2 >= -tol)
        assert np.all(traj.D >= -tol) and np.all(traj.D <= p.D_max + tol)

    def test_initial_condition_exact(self, solved_study):
        traj = solved_study.trajectory
        assert traj.s[0] == 2.0
        assert traj.x1[0] == 2.0
        assert traj.x2[0] == 2.0

    def test_objective_improves_initial_ratio(self, solved_study):
        traj = solved_study.trajectory
        eps = solved_study.parameters.epsilon
        assert solved_study.terminal_ratio == pytest.approx(traj.x1[-1] / (traj.x2[-1] + eps), rel=1e-6)
        assert solved_study.terminal_ratio > 1.0

    def test_total_mass_invariant(self, solved_study):
        traj = solved_study.trajectory
        np.testing.assert_allclose(traj.s + traj.x1 + traj.x2, 6.0, atol=1e-5)

    def test_solution_arrays_read_only(self, solved_study):
        with pytest.raises(ValueError):
            solved_study.trajectory.D[0] = 0.0

    def test_resolve_is_reproducible(self, solver_options):
        ocp = CompetitionOCP(Parameters(N=40), solver_options)
        first = ocp.solve()
        second = ocp.solve()
        assert second.objective == pytest.approx(first.objective, rel=1e-9)
        np.testing.assert_allclose(second.trajectory.D, first.trajectory.D, atol=1e-9)


class TestFailures:
    def test_iteration_limit(self, small_params):
        ocp = CompetitionOCP(small_params, SolverOptions(max_iter=1))
        with pytest.raises(SolverConvergenceError) as excinfo:
            ocp.solve()
        assert excinfo.value.reason is FailureReason.ITERATION_LIMIT
        assert excinfo.value.status == "Maximum_Iterations_Exceeded"

    def test_coarse_grid_without_dilution_is_infeasible(self, solver_options):
        # With D = 0 and Δt = 0.6 the trapezoidal step would drive s below zero
        ocp = CompetitionOCP(Parameters(N=10, D_max=0.0), solver_options)
        with pytest.raises(SolverConvergenceError):
            ocp.solve()


class TestGridAndDilutionLimits:
    def test_no_dilution_follows_unforced_growth(self, solver_options):
        params = Parameters(N=200, D_max=0.0)
        sol = CompetitionOCP(params, solver_options).solve()
        traj = sol.trajectory
        np.testing.assert_allclose(traj.D, 0.0, atol=1e-8)
        assert sol.max_residual <= solver_options.constr_viol_tol
        err = discretization_error(traj, params)
        assert max(err.values()) < 0.05

    def test_tenfold_coarser_grid_stays_close_to_fine_solution(self, solver_options):
        fine_params = Parameters(N=1000)
        coarse_params = Parameters(N=100)
        fine = CompetitionOCP(fine_params, solver_options).solve()
        coarse = CompetitionOCP(coarse_params, solver_options).solve()

        for sol in (fine, coarse):
            assert sol.max_residual <= solver_options.constr_viol_tol
            traj = sol.trajectory
            assert np.all(traj.D <= 1.5 + 1e-8)
            np.testing.assert_allclose(traj.s + traj.x1 + traj.x2, 6.0, atol=1e-5)

        # Fine states on the coarse nodes
        for name in ("s", "x1", "x2"):
            fine_on_coarse = np.interp(coarse.trajectory.t, fine.trajectory.t, getattr(fine.trajectory, name))
            gap = np.max(np.abs(getattr(coarse.trajectory, name) - fine_on_coarse))
            assert gap < 0.1, f"{name} differs by {gap:.3g} between grids"

        err_fine = max(discretization_error(fine.trajectory, fine_params).values())
        err_coarse = max(discretization_error(coarse.trajectory, coarse_params).values())
        assert err_coarse > err_fine
        # Second-order scheme: error bounded by C * dt^2
        assert err_fine < 20.0 * fine_params.dt ** 2
        assert err_coarse < 20.0 * coarse_params.dt ** 2

        assert abs(coarse.objective - fine.objective) / fine.objective < 0.25
