"""
Singular feedback control implied by the singular substrate s̄.

Holding s = s̄ requires ds/dt = 0. With unit yields and the total biomass
x1 + x2 = s_in - s̄ this gives the feedback law

    D_s = (μ1(s̄) x1 + μ2(s̄) x2) / (x1 + x2)

It is evaluated after the solve, on the optimized states, to compare against the
optimal control D; it is never fed back into the NLP.
"""

import numpy as np

from .errors import DegenerateReconstructionError


def singular_control_from_states(x1, x2, mu1_bar, mu2_bar):
    x1 = np.asarray(x1, dtype=float)
    x2 = np.asarray(x2, dtype=float)
    total = x1 + x2
    # NaN compares false, so it lands in the degenerate set too
    degenerate = np.flatnonzero(~((total > 0.0) & np.isfinite(total)))
    if degenerate.size:
        shown = ", ".join(str(i) for i in degenerate[:10])
        raise DegenerateReconstructionError(
            f"Total biomass x1 + x2 vanishes or is not finite at {degenerate.size} grid point(s) "
            f"(indices {shown}); "
            "the singular control is undefined there",
            indices=degenerate.tolist(),
        )
    return (mu1_bar * x1 + mu2_bar * x2) / total


def reconstruct_singular_control(trajectory, surface):
    """D_s on every grid point of a converged trajectory."""
    return singular_control_from_states(trajectory.x1, trajectory.x2,
                                        surface.mu1_bar, surface.mu2_bar)
