"""
Optimal dilution-rate profile for two species competing in a chemostat.

The whole trajectory is a single nonlinear program solved with IPOPT through
CasADi (Andersson et al., 2019):

- decision vector w = [s; x1; x2; D], each block with the N+1 grid values;
- simple bounds 0 <= s <= s_in, x1, x2 >= 0, 0 <= D <= D_max;
- the initial condition fixed with equal lower and upper bounds;
- 3N equality constraints from the trapezoidal discretization;
- objective: maximize x1(tf) / (x2(tf) + ε).

References:
- Biegler, L. T. (2010). Nonlinear Programming: Concepts, Algorithms, and Applications to Chemical Processes. SIAM.
- Wächter, A., & Biegler, L. T. (2006). "On the implementation of an interior-point filter line-search
  algorithm for large-scale nonlinear programming." Mathematical Programming, 106(1), 25-57.
- Andersson, J. A. E., et al. (2019). "CasADi: a software framework for nonlinear optimization and optimal control."
  Mathematical Programming Computation, 11(1), 1-36.
"""

import logging
from dataclasses import dataclass

import casadi as ca
import numpy as np
import pandas as pd

from .discretization import TrajectoryDiscretizer
from .errors import FailureReason, SolverConvergenceError
from .parameters import SolverOptions

logger = logging.getLogger(__name__)

_ITERATION_LIMIT_STATUSES = {
    "Maximum_Iterations_Exceeded",
    "Maximum_CpuTime_Exceeded",
    "Maximum_WallTime_Exceeded",
}
_INFEASIBLE_STATUSES = {
    "Infeasible_Problem_Detected",
    "Restoration_Failed",
    "Not_Enough_Degrees_Of_Freedom",
}


def classify_return_status(status):
    if status in _ITERATION_LIMIT_STATUSES:
        return FailureReason.ITERATION_LIMIT
    if status in _INFEASIBLE_STATUSES:
        return FailureReason.INFEASIBLE
    return FailureReason.NUMERICAL_ERROR


def _read_only(values):
    arr = np.array(values, dtype=float).ravel()
    arr.setflags(write=False)
    return arr


@dataclass(frozen=True, eq=False)
class Trajectory:
    """Grid values of time, substrate, both biomasses and the dilution rate."""
    t: np.ndarray
    s: np.ndarray
    x1: np.ndarray
    x2: np.ndarray
    D: np.ndarray

    def __post_init__(self):
        for name in ("t", "s", "x1", "x2", "D"):
            object.__setattr__(self, name, _read_only(getattr(self, name)))
        n = self.t.shape[0]
        if n < 2:
            raise ValueError("A trajectory needs at least two grid points")
        for name in ("s", "x1", "x2", "D"):
            if getattr(self, name).shape[0] != n:
                raise ValueError(f"'{name}' has {getattr(self, name).shape[0]} values, expected {n}")

    @property
    def N(self):
        return self.t.shape[0] - 1

    def to_frame(self):
        return pd.DataFrame({
            "Time [h]": self.t,
            "Substrate (s) [g/L]": self.s,
            "Species 1 (x1) [g/L]": self.x1,
            "Species 2 (x2) [g/L]": self.x2,
            "Dilution Rate (D) [1/h]": self.D,
        })


@dataclass(frozen=True)
class OCPSolution:
    trajectory: Trajectory
    objective: float
    return_status: str
    iterations: int
    max_residual: float


class CompetitionOCP:
    """
    Builds the NLP once and solves it with IPOPT.

    Args:
        params: Parameters of the model, horizon and initial condition.
        options: SolverOptions forwarded to IPOPT.
    """

    def __init__(self, params, options=None):
        self.params = params
        self.options = options if options is not None else SolverOptions()
        self.discretizer = TrajectoryDiscretizer(params)
        self.N = params.N

        self._prepare_indices()
        self._build_nlp()

    def _prepare_indices(self):
        """Offsets of each block inside w."""
        n = self.N + 1
        self.indices = {
            "s": slice(0, n),
            "x1": slice(n, 2 * n),
            "x2": slice(2 * n, 3 * n),
            "D": slice(3 * n, 4 * n),
        }
        self.dim_w = 4 * n

    def _build_nlp(self):
        p = self.params
        n = self.N + 1

        # --- Decision variables ---
        s = ca.MX.sym("s", n)
        x1 = ca.MX.sym("x1", n)
        x2 = ca.MX.sym("x2", n)
        D = ca.MX.sym("D", n)
        w = ca.vertcat(s, x1, x2, D)

        # --- Bounds ---
        self.lbw = np.zeros(self.dim_w)
        self.ubw = np.empty(self.dim_w)
        self.ubw[self.indices["s"]] = p.s_in
        self.ubw[self.indices["x1"]] = np.inf
        self.ubw[self.indices["x2"]] = np.inf
        self.ubw[self.indices["D"]] = p.D_max

        # Initial condition: lower bound == upper bound, IPOPT keeps it fixed
        for name, value in (("s", p.s0), ("x1", p.x10), ("x2", p.x20)):
            k = self.indices[name].start
            self.lbw[k] = value
            self.ubw[k] = value

        # --- Dynamics (Crank-Nicolson) ---
        r_s, r_x1, r_x2 = self.discretizer.residuals(s, x1, x2, D)
        g = ca.vertcat(r_s, r_x1, r_x2)
        self.lbg = np.zeros(3 * self.N)
        self.ubg = np.zeros(3 * self.N)

        # --- Objective: maximize x1(tf) / (x2(tf) + eps) ---
        J = -x1[self.N] / (x2[self.N] + p.epsilon)

        nlp_dict = {"f": J, "x": w, "g": g}
        self.solver = ca.nlpsol("solver", "ipopt", nlp_dict, self.options.to_casadi())
        logger.debug("NLP built: %d variables, %d equality constraints", self.dim_w, 3 * self.N)

    def initial_guess(self):
        """Euler prediction at half the maximum dilution rate, inside the bounds."""
        D_guess = 0.5 * self.params.D_max
        s, x1, x2 = self.discretizer.explicit_euler_guess(D_guess)
        w0 = np.empty(self.dim_w)
        w0[self.indices["s"]] = s
        w0[self.indices["x1"]] = x1
        w0[self.indices["x2"]] = x2
        w0[self.indices["D"]] = D_guess
        return np.clip(w0, self.lbw, self.ubw)

    def unpack(self, w):
        w = np.asarray(w, dtype=float).ravel()
        return Trajectory(
            t=self.discretizer.time_grid(),
            s=w[self.indices["s"]],
            x1=w[self.indices["x1"]],
            x2=w[self.indices["x2"]],
            D=w[self.indices["D"]],
        )

    def solve(self, w0=None):
        """
        Solve the NLP.

        Returns:
            OCPSolution for a converged run.

        Raises:
            SolverConvergenceError: IPOPT stopped without convergence (iteration
                limit, infeasibility or a numerical failure).
        """
        if w0 is None:
            w0 = self.initial_guess()
        elif len(w0) != self.dim_w:
            raise ValueError(f"Initial guess has {len(w0)} entries, expected {self.dim_w}")

        logger.info("Solving competition OCP with IPOPT (N=%d, dt=%.4g)", self.N, self.params.dt)
        try:
            sol = self.solver(x0=w0, lbx=self.lbw, ubx=self.ubw, lbg=self.lbg, ubg=self.ubg)
        except RuntimeError as e:
            raise SolverConvergenceError(f"IPOPT call failed: {e}",
                                         status="SolverError",
                                         reason=FailureReason.NUMERICAL_ERROR) from e

        stats = self.solver.stats()
        status = stats.get("return_status", "Unknown")
        iterations = int(stats.get("iter_count", -1))
        if not stats.get("success", False):
            reason = classify_return_status(status)
            logger.error("IPOPT did not converge: %s (%s) after %d iterations",
                         status, reason.value, iterations)
            raise SolverConvergenceError(f"IPOPT did not converge: {status}",
                                         status=status, reason=reason, iterations=iterations)

        trajectory = self.unpack(sol["x"].full())
        objective = -float(sol["f"])
        max_res = self.discretizer.max_residual(trajectory.s, trajectory.x1, trajectory.x2, trajectory.D)
        logger.info("IPOPT converged: %s in %d iterations, x1/x2 at tf = %.6g, max residual = %.3g",
                    status, iterations, objective, max_res)
        return OCPSolution(
            trajectory=trajectory,
            objective=objective,
            return_status=status,
            iterations=iterations,
            max_residual=max_res,
        )
