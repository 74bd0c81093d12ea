"""
Crank-Nicolson (trapezoidal) discretization of the competition chemostat.

Continuous model (unit yields, dilution rate D as control):

    ds/dt  = D (s_in - s) - μ1(s) x1 - μ2(s) x2
    dx1/dt = (μ1(s) - D) x1
    dx2/dt = (μ2(s) - D) x2

On a uniform grid with step Δt every interval contributes one residual per state

    z[i+1] - z[i] - Δt/2 (f_z(i) + f_z(i+1)) = 0

The scheme is implicit and second-order accurate, so the residuals are handed to
the NLP as equality constraints instead of being marched forward. The functions
below only use slicing and arithmetic: the same code builds CasADi expressions
for the solver and evaluates NumPy arrays to verify a returned trajectory.

References:
- Crank, J., & Nicolson, P. (1947). "A practical method for numerical evaluation of solutions
  of partial differential equations of the heat-conduction type." Proc. Cambridge Phil. Soc., 43(1), 50-67.
- Betts, J. T. (2010). Practical Methods for Optimal Control and Estimation Using Nonlinear Programming (2nd ed.). SIAM.
"""

import numpy as np

STATE_NAMES = ("s", "x1", "x2")


def competition_rhs(model, s_in, s, x1, x2, D):
    """Right-hand side (f_s, f_x1, f_x2) of the competition model."""
    mu1 = model.mu1(s)
    mu2 = model.mu2(s)
    f_s = D * (s_in - s) - mu1 * x1 - mu2 * x2
    f_x1 = (mu1 - D) * x1
    f_x2 = (mu2 - D) * x2
    return f_s, f_x1, f_x2


def trapezoidal_residuals(model, s_in, dt, s, x1, x2, D):
    """
    Residuals of the trapezoidal rule for every interval of the grid.

    s, x1, x2, D hold the N+1 grid values (NumPy arrays or CasADi column
    vectors). Returns the three residual vectors (r_s, r_x1, r_x2), each of
    length N; a feasible trajectory makes all of them vanish.
    """
    n = s.shape[0] - 1
    rhs = competition_rhs(model, s_in, s, x1, x2, D)
    residuals = []
    for z, f in zip((s, x1, x2), rhs):
        residuals.append(z[1:n + 1] - z[0:n] - 0.5 * dt * (f[0:n] + f[1:n + 1]))
    return tuple(residuals)


class TrajectoryDiscretizer:
    """Uniform time grid and dynamics residuals for a given parameter set."""

    def __init__(self, params):
        self.params = params
        self.model = params.growth_model()
        self.N = params.N
        self.dt = params.dt

    def time_grid(self):
        return self.params.time_grid()

    def residuals(self, s, x1, x2, D):
        return trapezoidal_residuals(self.model, self.params.s_in, self.dt, s, x1, x2, D)

    def max_residual(self, s, x1, x2, D):
        """Largest absolute residual over all 3N dynamics constraints."""
        arrays = [np.asarray(v, dtype=float).ravel() for v in (s, x1, x2, D)]
        if any(a.shape[0] != self.N + 1 for a in arrays):
            raise ValueError(f"Trajectory arrays must have length N+1={self.N + 1}")
        r = self.residuals(*arrays)
        return float(max(np.max(np.abs(ri)) for ri in r))

    def explicit_euler_guess(self, D_guess):
        """
        Forward Euler prediction of the states for a constant control, clipped
        to the bounds. Only used as an initial point for the solver.
        """
        p = self.params
        s = np.empty(self.N + 1)
        x1 = np.empty(self.N + 1)
        x2 = np.empty(self.N + 1)
        s[0], x1[0], x2[0] = p.s0, p.x10, p.x20
        for i in range(self.N):
            f_s, f_x1, f_x2 = competition_rhs(self.model, p.s_in, s[i], x1[i], x2[i], D_guess)
            s[i + 1] = min(max(s[i] + self.dt * f_s, 0.0), p.s_in)
            x1[i + 1] = max(x1[i] + self.dt * f_x1, 0.0)
            x2[i + 1] = max(x2[i] + self.dt * f_x2, 0.0)
        return s, x1, x2
